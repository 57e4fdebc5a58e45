"""Scheduling package for copycheck.

This package bounds and orders the asynchronous hashing work:

- PriorityQueue: Max-heap of waiting jobs keyed by weight.
- AdmissionPool: Caps concurrently running jobs and releases waiters by
  highest weight.
- join_all: Waits for sibling coroutines under a fail-fast or
  collect-and-continue policy.

Example:
    >>> from copycheck.scheduling import AdmissionPool
    >>> pool = AdmissionPool(capacity=4)
    >>> result = await pool.submit(job, weight=1024)
"""

from .admission_pool import DEFAULT_CAPACITY, AdmissionPool
from .join import join_all
from .priority_queue import PriorityQueue

__all__ = ["AdmissionPool", "DEFAULT_CAPACITY", "PriorityQueue", "join_all"]
