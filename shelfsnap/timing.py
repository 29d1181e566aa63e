"""
Timing Utilities

Wall-clock timing for comparison runs. Durations end up in
``ComplianceReport.processing_time_ms`` and, when a logger is given,
in the debug log.

Example:
    >>> with Timer("compare plan-1", logger) as t:
    ...     discrepancies = compare(planogram, items, detections)
    >>> report_ms = t.elapsed_ms
"""

import logging
import time
from typing import Optional


class Timer:
    """
    Context manager measuring one block with time.perf_counter().

    Attributes:
        name: Label used in the log line
        elapsed: Elapsed time in seconds (0 until the block exits)
    """

    def __init__(
        self,
        name: Optional[str] = None,
        logger: Optional[logging.Logger] = None,
        level: int = logging.DEBUG
    ):
        self.name = name
        self.logger = logger
        self.level = level
        self._start: Optional[float] = None
        self.elapsed: float = 0.0

    def __enter__(self) -> 'Timer':
        self._start = time.perf_counter()
        return self

    def __exit__(self, *exc_info) -> None:
        self.elapsed = time.perf_counter() - self._start
        if self.logger is not None and self.name:
            self.logger.log(self.level, "%s took %.3f ms", self.name, self.elapsed_ms)

    @property
    def elapsed_ms(self) -> float:
        return self.elapsed * 1000
