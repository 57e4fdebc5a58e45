"""
Unit tests for data models in copycheck.models.

Tests cover:
- FileDescriptor defaults and immutability
- ScanOptions defaults
- ComparisonKey field order
- MissingEntry hint rendering
- CheckReport completeness
- Error messages and attributes
"""

import dataclasses

import pytest

from copycheck.models import (
    BuildSummary,
    CheckReport,
    ComparisonKey,
    CopyCheckError,
    EnumerationFailure,
    FileDescriptor,
    HashFailure,
    MissingEntry,
    RetryExhausted,
    ScanFailure,
    ScanOptions,
)


@pytest.mark.unit
class TestFileDescriptor:
    """Tests for FileDescriptor dataclass."""

    def test_optional_fields_default_to_none(self):
        descriptor = FileDescriptor(name="a.txt", path="/r/a.txt")

        assert descriptor.hash is None
        assert descriptor.creation_time_ms is None
        assert descriptor.last_change_time_ms is None
        assert descriptor.last_modify_time_ms is None

    def test_is_immutable_and_hashable(self, make_descriptor):
        descriptor = make_descriptor("/r/a.txt", hash="h")

        with pytest.raises(dataclasses.FrozenInstanceError):
            descriptor.hash = "other"
        assert descriptor in {make_descriptor("/r/a.txt", hash="h")}


@pytest.mark.unit
class TestScanOptions:
    """Tests for ScanOptions defaults."""

    def test_defaults(self):
        options = ScanOptions()

        assert options.with_hash is True
        assert options.is_incremental is False
        assert options.continue_on_failure is False


@pytest.mark.unit
class TestComparisonKey:
    """Tests for ComparisonKey field selection."""

    def test_all_fields_enabled_by_default(self):
        assert ComparisonKey().enabled_fields() == ("hash", "name", "creation", "change", "modify")

    def test_order_is_fixed_regardless_of_toggles(self):
        key = ComparisonKey(use_hash=False, use_name=True, use_creation=False, use_change=True)

        assert key.enabled_fields() == ("name", "change", "modify")

    def test_everything_disabled(self):
        key = ComparisonKey(False, False, False, False, False)

        assert key.enabled_fields() == ()


@pytest.mark.unit
class TestReports:
    """Tests for MissingEntry, CheckReport and BuildSummary."""

    def test_hint_rendering(self, make_descriptor):
        descriptor = make_descriptor("/c/new-name.txt", hash="h")

        assert MissingEntry(descriptor).hint is None
        assert (
            MissingEntry(descriptor, identical_in_source="/s/old-name.txt").hint
            == "identical file found in source at /s/old-name.txt"
        )

    def test_check_report_completeness(self, make_descriptor):
        report = CheckReport(copy_root="/c", source_root="/s", key=ComparisonKey())
        assert report.is_complete

        report.missing.append(MissingEntry(make_descriptor("/c/a.txt")))
        assert not report.is_complete

    def test_build_summary_defaults_are_independent(self):
        first = BuildSummary()
        second = BuildSummary()
        first.roots.append("/data")

        assert second.roots == []
        assert second.scans == 0


@pytest.mark.unit
class TestErrors:
    """Tests for the error hierarchy."""

    def test_scan_failures_carry_path(self):
        error = HashFailure("/r/a.txt")

        assert isinstance(error, ScanFailure)
        assert isinstance(error, CopyCheckError)
        assert error.path == "/r/a.txt"
        assert "/r/a.txt" in str(error)

    def test_enumeration_failure_message(self):
        assert str(EnumerationFailure("/r/sub")) == "Failed to enumerate: /r/sub"

    def test_retry_exhausted_keeps_every_error(self):
        causes = [OSError("first"), OSError("second")]

        error = RetryExhausted("/r/a.txt", causes)

        assert isinstance(error, ScanFailure)
        assert error.errors == causes
        assert error.path == "/r/a.txt"
