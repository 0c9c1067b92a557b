"""Wall-clock time, CPU time and peak memory of the running process."""

from __future__ import annotations

import sys
import time

try:
    import resource
except ImportError:  # not available on Windows
    resource = None


def realtime() -> float:
    """Seconds since the epoch, as a float."""
    return time.time()


def cputime() -> float:
    """User plus system CPU seconds used by this process."""
    if resource is not None:
        usage = resource.getrusage(resource.RUSAGE_SELF)
        return usage.ru_utime + usage.ru_stime
    return time.process_time()


def peakrss() -> int:
    """Peak resident set size in bytes, or 0 where it cannot be measured."""
    if resource is None:
        return 0
    maxrss = resource.getrusage(resource.RUSAGE_SELF).ru_maxrss
    return maxrss * 1024 if sys.platform.startswith("linux") else maxrss