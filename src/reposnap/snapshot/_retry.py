"""Bounded retry for lock-contended reads, built on tenacity.

RetryPolicy.retrying() returns a tenacity Retrying controller that retries
only RepositoryLockedError, stops after max_attempts and waits a fixed
interval between attempts. state_after() maps each tenacity RetryCallState
onto the three read states:

- Attempting(n): about to run attempt n.
- Done(snapshot): an attempt returned a complete snapshot.
- Failed(error): an attempt raised a non-retryable error, or the lock error
  persisted through the final attempt.

Only RepositoryLockedError moves Attempting(n) to Attempting(n + 1); every
other outcome is terminal.
"""

import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Final, TypeAlias

from tenacity import (
    RetryCallState,
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_fixed,
)

from reposnap.exceptions import RepositoryLockedError
from reposnap.snapshot._models import RepositorySnapshot

DEFAULT_MAX_ATTEMPTS: Final = 3
DEFAULT_BACKOFF: Final = 0.5


@dataclass(frozen=True, slots=True)
class RetryPolicy:
    """Fixed-interval retry policy for locked repositories.

    Attributes:
        max_attempts: Total attempts allowed, including the first one.
        backoff: Seconds to wait between attempts.
    """

    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    backoff: float = DEFAULT_BACKOFF

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            msg = f"max_attempts must be at least 1, got {self.max_attempts}"
            raise ValueError(msg)
        if self.backoff < 0:
            msg = f"backoff must not be negative, got {self.backoff}"
            raise ValueError(msg)

    def allows_retry(self, attempt: int) -> bool:
        """Whether another attempt may follow the given (1-based) attempt."""
        return attempt < self.max_attempts

    def retrying(self, *, sleep: Callable[[float], None] = time.sleep) -> Retrying:
        """Build a tenacity controller enforcing this policy.

        Args:
            sleep: Blocking sleep function, replaceable in tests.

        Returns:
            A Retrying instance that re-raises the last error once the
            attempts are used up.
        """
        return Retrying(
            retry=retry_if_exception_type(RepositoryLockedError),
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_fixed(self.backoff),
            sleep=sleep,
            reraise=True,
        )


@dataclass(frozen=True, slots=True)
class Attempting:
    """About to run the given 1-based attempt.

    Attributes:
        attempt: The attempt number, starting at 1.
        last_error: The lock error that caused this retry, if any.
    """

    attempt: int
    last_error: RepositoryLockedError | None = None


@dataclass(frozen=True, slots=True)
class Done:
    """Terminal success state."""

    attempt: int
    snapshot: RepositorySnapshot


@dataclass(frozen=True, slots=True)
class Failed:
    """Terminal failure state; the error is raised to the caller."""

    attempt: int
    error: BaseException


ReadState: TypeAlias = Attempting | Done | Failed


def state_after(retry_state: RetryCallState, policy: RetryPolicy) -> ReadState:
    """Map a tenacity call state onto the next read state.

    Args:
        retry_state: State of the attempt tenacity just ran.
        policy: Retry limits.

    Returns:
        Attempting(n) while attempt n has not finished, Done on success,
        Attempting(n + 1) on a lock error with attempts left, and Failed
        otherwise.
    """
    attempt = retry_state.attempt_number
    outcome = retry_state.outcome
    if outcome is None:
        return Attempting(attempt=attempt)
    error = outcome.exception()
    if error is None:
        return Done(attempt=attempt, snapshot=outcome.result())
    if isinstance(error, RepositoryLockedError) and policy.allows_retry(attempt):
        return Attempting(attempt=attempt + 1, last_error=error)
    return Failed(attempt=attempt, error=error)
