# Copyright 2026 Justin Cook
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
Process-wide daily quota for model invocations.

A single-process approximation: the count lives in memory and resets on
restart. Construct one counter per process and hand it to AnalysisService.
"""

import datetime
import logging
import threading
from typing import Callable, Optional, Tuple

from cv_improv.errors import RateLimitError

logger = logging.getLogger(__name__)

DEFAULT_DAILY_LIMIT = 100

class RateLimitCounter:
    """
    Counts successful model invocations per calendar day.

    `clock` returns the current `datetime.date`; tests inject a fake one to
    simulate day rollover.
    """
    def __init__(self, daily_limit: int = DEFAULT_DAILY_LIMIT, clock: Optional[Callable[[], datetime.date]] = None):
        self.daily_limit = daily_limit
        self._clock = clock or datetime.date.today
        self._lock = threading.Lock()
        self.requests_today = 0
        self.last_reset_date = self._clock()

    def _rollover(self) -> None:
        # Caller holds the lock.
        today = self._clock()
        if today != self.last_reset_date:
            logger.info(f"New day ({today}); resetting request count from {self.requests_today}")
            self.requests_today = 0
            self.last_reset_date = today

    def check(self) -> None:
        """Raises RateLimitError if today's quota is exhausted."""
        with self._lock:
            self._check_locked()
            logger.debug(f"Rate limit check passed ({self.requests_today}/{self.daily_limit})")

    def _check_locked(self) -> None:
        # Caller holds the lock.
        self._rollover()
        if self.requests_today >= self.daily_limit:
            logger.warning(f"Daily request limit reached ({self.requests_today}/{self.daily_limit})")
            raise RateLimitError("Daily API request limit exceeded. Please try again tomorrow.")

    def record(self) -> int:
        """Counts one successful invocation and returns today's total."""
        with self._lock:
            self._rollover()
            self.requests_today += 1
            return self.requests_today

    def reserve(self) -> datetime.date:
        """
        Checks the quota and takes one slot in a single step, so concurrent
        callers cannot all pass the check at limit - 1. Returns the day the
        slot belongs to; hand it back to `release` if the call does not
        complete.
        """
        with self._lock:
            self._check_locked()
            self.requests_today += 1
            return self.last_reset_date

    def release(self, day: datetime.date) -> None:
        """Returns a slot taken by `reserve`. A no-op once the day has rolled over."""
        with self._lock:
            self._rollover()
            if day == self.last_reset_date and self.requests_today > 0:
                self.requests_today -= 1

    def snapshot(self) -> Tuple[int, datetime.date]:
        with self._lock:
            self._rollover()
            return self.requests_today, self.last_reset_date
