"""Wait-for-all join over sibling coroutines with two failure policies."""

import asyncio
from typing import Awaitable, Iterable, List


async def join_all(aws: Iterable[Awaitable[object]], fail_fast: bool) -> List[BaseException]:
    """Run `aws` concurrently and wait until every one has settled.

    Args:
        aws: Awaitables to run as sibling tasks.
        fail_fast: If True, the first failure cancels the remaining siblings
            and is raised. If False, every sibling runs to completion and the
            failures are returned.

    Returns:
        The exceptions raised by failed siblings, in submission order. Always
        empty when fail_fast is True.
    """
    tasks = [asyncio.ensure_future(aw) for aw in aws]
    if not tasks:
        return []

    if not fail_fast:
        outcomes = await asyncio.gather(*tasks, return_exceptions=True)
        return [outcome for outcome in outcomes if isinstance(outcome, BaseException)]

    try:
        done, pending = await asyncio.wait(tasks, return_when=asyncio.FIRST_EXCEPTION)
    except asyncio.CancelledError:
        await _cancel_all(tasks)
        raise

    failed = [
        task for task in tasks
        if task in done and not task.cancelled() and task.exception() is not None
    ]
    if failed:
        await _cancel_all(pending)
        # Retrieve sibling failures so they are not reported as never retrieved
        for task in failed[1:]:
            task.exception()
        raise failed[0].exception()
    return []


async def _cancel_all(tasks: Iterable[asyncio.Future]) -> None:
    tasks = list(tasks)
    for task in tasks:
        task.cancel()
    if tasks:
        await asyncio.gather(*tasks, return_exceptions=True)
