"""
Business identifier sequence.

Identifiers look like DPRD-2024-03-00042: prefix, year, month and a counter
that restarts at 00001 every calendar month. One instance is shared by every
ingestion in the process.
"""

import re
import threading
from datetime import datetime
from typing import Callable, List, Optional, Tuple

from loguru import logger

from catalogmate.domain.audit import utc_now


class BusinessIdSequence:
    """Thread-safe monthly counter for business identifiers"""

    def __init__(self, prefix: str = "DPRD", clock: Callable[[], datetime] = utc_now):
        """
        Args:
            prefix: Identifier prefix
            clock: Source of the current time; the month is taken from it
        """
        self.prefix = prefix
        self._clock = clock
        self._lock = threading.Lock()
        self._period: Optional[Tuple[int, int]] = None
        self._counter = 0
        self._pattern = re.compile(rf"{re.escape(prefix)}-(\d{{4}})-(\d{{2}})-(\d+)")

    def _advance(self) -> str:
        # Caller holds the lock
        now = self._clock()
        period = (now.year, now.month)
        if period != self._period:
            if self._period is not None:
                logger.info(f"Business id sequence rolled over from {self._period} to {period}")
            self._period = period
            self._counter = 0
        self._counter += 1
        return f"{self.prefix}-{period[0]}-{period[1]:02d}-{self._counter:05d}"

    def next_id(self) -> str:
        """Return the next identifier, resetting the counter on a month change"""
        with self._lock:
            return self._advance()

    def next_ids(self, count: int) -> List[str]:
        """Return `count` consecutive identifiers allocated in one critical section"""
        with self._lock:
            return [self._advance() for _ in range(count)]

    def resume_after(self, business_id: Optional[str]) -> None:
        """
        Continue numbering after an identifier that already exists.

        Only identifiers of the current month move the counter; older ones are
        ignored because the counter restarts anyway.
        """
        if not business_id:
            return
        match = self._pattern.fullmatch(business_id)
        if not match:
            logger.warning(f"Ignoring unrecognized business id {business_id!r}")
            return

        period = (int(match.group(1)), int(match.group(2)))
        counter = int(match.group(3))
        with self._lock:
            now = self._clock()
            if period != (now.year, now.month):
                return
            if self._period != period:
                self._period = period
                self._counter = 0
            if counter > self._counter:
                self._counter = counter
                logger.info(f"Business id sequence resumed after {business_id}")
