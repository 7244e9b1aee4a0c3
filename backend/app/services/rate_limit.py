"""
Rate limiting service for login protection.

Tracks failed login attempts per account and enforces lockout policy.

Per email the guard moves through:
    Clear -> (failure) -> Counting(1..max-1) -> (failure) -> Locked
    Locked -> (lockout window elapsed) -> Clear
    any state -> (success) -> Clear

Attempts whose password check is still running count against the limit,
so concurrent guesses cannot all slip past the check before the first
failure is recorded.
"""

import math
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass

from app.core.exceptions import RateLimitError

DEFAULT_MAX_ATTEMPTS = 5
DEFAULT_LOCKOUT_SECONDS = 60


@dataclass
class LoginAttemptRecord:
    count: int
    last_attempt: float
    in_flight: int = 0


@dataclass(frozen=True)
class LockStatus:
    locked: bool
    retry_after: int | None = None


class LoginGuard:
    """
    Process-wide failed-login bookkeeping keyed by lowercased email.

    The lockout window is measured from the most recent failure. ``clock``
    must be monotonic; tests pass a fake one.

    A login goes ``begin_attempt`` -> password check -> exactly one of
    ``record_failure``, ``record_success`` or ``release_attempt``.
    """

    def __init__(
        self,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        lockout_seconds: float = DEFAULT_LOCKOUT_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.max_attempts = max_attempts
        self.lockout_seconds = lockout_seconds
        self._clock = clock
        self._attempts: dict[str, LoginAttemptRecord] = {}
        self._lock = threading.Lock()

    def _current(self, key: str, now: float) -> LoginAttemptRecord | None:
        """The live record for ``key``, with failures outside the window forgotten. Caller holds the lock."""
        record = self._attempts.get(key)
        if record is None:
            return None
        if record.count and now - record.last_attempt >= self.lockout_seconds:
            record.count = 0
        if record.count == 0 and record.in_flight == 0:
            del self._attempts[key]
            return None
        return record

    def _retry_after(self, record: LoginAttemptRecord, now: float) -> int:
        if record.count == 0:
            return max(1, math.ceil(self.lockout_seconds))
        return max(1, math.ceil(self.lockout_seconds - (now - record.last_attempt)))

    def check(self, email: str) -> LockStatus:
        """Whether the account is locked by recorded failures. Reserves nothing."""
        key = email.lower()
        with self._lock:
            now = self._clock()
            record = self._current(key, now)
            if record is None or record.count < self.max_attempts:
                return LockStatus(locked=False)
            return LockStatus(locked=True, retry_after=self._retry_after(record, now))

    def begin_attempt(self, email: str) -> None:
        """
        Reserve a login attempt for ``email``.

        Raises:
            RateLimitError: If recorded failures plus attempts still being
                checked have reached the limit
        """
        key = email.lower()
        with self._lock:
            now = self._clock()
            record = self._current(key, now)
            if record is None:
                record = LoginAttemptRecord(count=0, last_attempt=now)
                self._attempts[key] = record

            if record.count + record.in_flight >= self.max_attempts:
                raise RateLimitError(self._retry_after(record, now))

            record.in_flight += 1

    def release_attempt(self, email: str) -> None:
        """Give back a reservation whose outcome is unknown (e.g. the lookup failed)."""
        key = email.lower()
        with self._lock:
            record = self._attempts.get(key)
            if record is None:
                return
            record.in_flight = max(0, record.in_flight - 1)
            self._current(key, self._clock())

    def record_failure(self, email: str) -> LoginAttemptRecord:
        key = email.lower()
        with self._lock:
            now = self._clock()
            record = self._current(key, now)
            if record is None:
                record = LoginAttemptRecord(count=0, last_attempt=now)
                self._attempts[key] = record
            record.in_flight = max(0, record.in_flight - 1)
            record.count += 1
            record.last_attempt = now
            return LoginAttemptRecord(record.count, record.last_attempt, record.in_flight)

    def record_success(self, email: str) -> None:
        key = email.lower()
        with self._lock:
            record = self._attempts.get(key)
            if record is None:
                return
            record.count = 0
            record.in_flight = max(0, record.in_flight - 1)
            self._current(key, self._clock())

    def failed_attempts(self, email: str) -> int:
        key = email.lower()
        with self._lock:
            record = self._current(key, self._clock())
            return record.count if record else 0

    def clear(self) -> None:
        with self._lock:
            self._attempts.clear()
