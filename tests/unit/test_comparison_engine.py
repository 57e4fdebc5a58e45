"""
Unit tests for ComparisonEngine in copycheck.matching.comparison_engine.

Tests cover:
- Composite key construction from enabled fields
- Missing entries and same-content hints
- Disabled key fields
- Duplicates and input immutability
- CheckReport assembly
"""

import pytest

from copycheck.matching import ComparisonEngine
from copycheck.models import ComparisonKey

HASH_AND_NAME = ComparisonKey(
    use_hash=True, use_name=True, use_creation=False, use_change=False, use_modify=False
)


# =============================================================================
# Composite key
# =============================================================================

@pytest.mark.unit
class TestCompositeKey:
    """Tests for composite key construction."""

    def test_all_fields_in_fixed_order(self, make_descriptor):
        descriptor = make_descriptor("/r/a.txt", hash="h1")

        key = ComparisonEngine().composite_key(descriptor)

        assert key == (
            ("hash", "h1"),
            ("name", "a.txt"),
            ("creation", 1000.0),
            ("change", 2000.0),
            ("modify", 3000.0),
        )

    def test_disabled_fields_are_omitted(self, make_descriptor):
        descriptor = make_descriptor("/r/a.txt", hash="h1")

        key = ComparisonEngine(HASH_AND_NAME).composite_key(descriptor)

        assert key == (("hash", "h1"), ("name", "a.txt"))

    def test_separator_characters_cannot_collide(self, make_descriptor):
        """Values with embedded separators still yield distinct keys."""
        engine = ComparisonEngine(HASH_AND_NAME)
        first = make_descriptor("/r/b", hash="a|")
        second = make_descriptor("/r/|b", hash="a")

        assert engine.composite_key(first) != engine.composite_key(second)

    def test_index_keeps_first_descriptor(self, make_descriptor):
        engine = ComparisonEngine(HASH_AND_NAME)
        first = make_descriptor("/one/a.txt", hash="h")
        second = make_descriptor("/two/a.txt", hash="h")

        index = engine.index([first, second])

        assert list(index.values()) == [first]


# =============================================================================
# Diff
# =============================================================================

@pytest.mark.unit
class TestDiff:
    """Tests for the copy-minus-source difference."""

    def test_renamed_file_is_missing_with_hint(self, make_descriptor):
        source = [
            make_descriptor("a.txt", hash="hashX"),
            make_descriptor("b.txt", hash="hashY"),
        ]
        copy = [
            make_descriptor("a.txt", hash="hashX"),
            make_descriptor("c.txt", hash="hashY"),
        ]

        missing = ComparisonEngine(HASH_AND_NAME).diff(copy, source)

        assert [entry.descriptor.path for entry in missing] == ["c.txt"]
        assert missing[0].identical_in_source == "b.txt"
        assert missing[0].hint == "identical file found in source at b.txt"

    def test_nothing_missing_when_every_key_present(self, make_descriptor):
        source = [make_descriptor(f"/s/{n}.txt", hash=n) for n in "abcd"]
        copy = [make_descriptor(f"/c/{n}.txt", hash=n) for n in "abc"]

        assert ComparisonEngine().diff(copy, source) == []

    def test_directories_do_not_matter(self, make_descriptor):
        """Only the enabled fields take part; the full path is never compared."""
        source = [make_descriptor("/s/deep/nested/a.txt", hash="h")]
        copy = [make_descriptor("/c/a.txt", hash="h")]

        assert ComparisonEngine().diff(copy, source) == []

    def test_timestamp_difference_is_missing_when_enabled(self, make_descriptor):
        source = [make_descriptor("/s/a.txt", hash="h")]
        copy = [make_descriptor("/c/a.txt", hash="h", last_modify_time_ms=9999.0)]

        missing = ComparisonEngine().diff(copy, source)

        assert len(missing) == 1
        assert missing[0].identical_in_source == "/s/a.txt"

    def test_timestamp_difference_ignored_when_disabled(self, make_descriptor):
        source = [make_descriptor("/s/a.txt", hash="h")]
        copy = [make_descriptor(
            "/c/a.txt", hash="h",
            creation_time_ms=1.0, last_change_time_ms=2.0, last_modify_time_ms=3.0,
        )]

        assert ComparisonEngine(HASH_AND_NAME).diff(copy, source) == []

    def test_no_hint_when_hash_disabled(self, make_descriptor):
        key = ComparisonKey(use_hash=False)
        source = [make_descriptor("/s/a.txt", hash="h")]
        copy = [make_descriptor("/c/renamed.txt", hash="h")]

        missing = ComparisonEngine(key).diff(copy, source)

        assert len(missing) == 1
        assert missing[0].identical_in_source is None
        assert missing[0].hint is None

    def test_no_hint_for_unknown_content(self, make_descriptor):
        missing = ComparisonEngine().diff(
            [make_descriptor("/c/new.txt", hash="fresh")],
            [make_descriptor("/s/old.txt", hash="stale")],
        )

        assert missing[0].hint is None

    def test_duplicates_reported_in_copy_order(self, make_descriptor):
        copy = [
            make_descriptor("/c/z.txt", hash="z"),
            make_descriptor("/c/dup/x.txt", hash="x"),
            make_descriptor("/c/x.txt", hash="x"),
        ]

        missing = ComparisonEngine().diff(copy, [])

        assert [entry.descriptor.path for entry in missing] == [
            "/c/z.txt", "/c/dup/x.txt", "/c/x.txt",
        ]

    def test_inputs_are_not_modified(self, make_descriptor):
        source = [make_descriptor("/s/a.txt", hash="a")]
        copy = [make_descriptor("/c/a.txt", hash="a"), make_descriptor("/c/b.txt", hash="b")]
        source_before, copy_before = list(source), list(copy)

        ComparisonEngine().diff(copy, source)

        assert source == source_before
        assert copy == copy_before

    def test_unhashed_descriptors_match_on_remaining_fields(self, make_descriptor):
        key = ComparisonKey(use_hash=False)
        source = [make_descriptor("/s/a.txt")]
        copy = [make_descriptor("/c/a.txt"), make_descriptor("/c/b.txt")]

        missing = ComparisonEngine(key).diff(copy, source)

        assert [entry.descriptor.name for entry in missing] == ["b.txt"]


@pytest.mark.unit
class TestCheck:
    """Tests for CheckReport assembly."""

    def test_report_counts_and_roots(self, make_descriptor):
        source = [make_descriptor("/s/a.txt", hash="a")]
        copy = [make_descriptor("/c/a.txt", hash="a"), make_descriptor("/c/b.txt", hash="b")]

        report = ComparisonEngine(HASH_AND_NAME).check("/c", copy, "/s", source)

        assert report.copy_root == "/c"
        assert report.source_root == "/s"
        assert report.key == HASH_AND_NAME
        assert report.copy_count == 2
        assert report.source_count == 1
        assert [entry.descriptor.path for entry in report.missing] == ["/c/b.txt"]
        assert not report.is_complete

    def test_empty_copy_is_complete(self, make_descriptor):
        report = ComparisonEngine().check("/c", [], "/s", [make_descriptor("/s/a.txt", hash="a")])

        assert report.is_complete
        assert report.missing == []
