"""Property-based tests for the lock retry loop.

Invariants checked:
- Attempts never exceed max_attempts
- Sleeps happen only between attempts, never after the last one
- A success within the attempt limit is returned unchanged
- A lock on every attempt surfaces as RepositoryLockedError
- Any non-lock error ends the loop on the attempt it occurred
- Every opened handle is closed
"""

from pathlib import Path

import pytest
from hypothesis import given, strategies as st

from reposnap.exceptions import RepositoryLockedError
from reposnap.snapshot import FakeBackend, RepositorySnapshot, read_with_retries

ROOT = Path("/fake/project")

# =============================================================================
# Strategies
# =============================================================================

max_attempts_st = st.integers(min_value=1, max_value=8)
backoff_st = st.sampled_from([0.0, 0.01, 0.5, 2.0])

# Outcome of one attempt: lock on open, lock during read, other error, success
outcome_st = st.sampled_from(["open_lock", "read_lock", "error", "ok"])
outcomes_st = st.lists(outcome_st, min_size=1, max_size=10)


def _backend(outcomes: list[str]) -> FakeBackend:
    """Script a backend so attempt n has outcome outcomes[n] (then succeeds)."""
    backend = FakeBackend()
    backend.add_repository(ROOT, branches=["main"], head="main", tracking=(0, 0))
    for outcome in outcomes:
        if outcome == "open_lock":
            backend.open_errors.append(RepositoryLockedError("locked on open"))
            continue
        backend.open_errors.append(None)
        if outcome == "read_lock":
            backend.read_errors.append(RepositoryLockedError("locked on read"))
        elif outcome == "error":
            backend.read_errors.append(OSError("corrupt"))
        else:
            backend.read_errors.append(None)
    return backend


def _expected_attempts(outcomes: list[str], max_attempts: int) -> int:
    for attempt, outcome in enumerate(outcomes[:max_attempts], start=1):
        if outcome in {"ok", "error"}:
            return attempt
    # Scripted outcomes exhausted: the next attempt succeeds
    return min(len(outcomes) + 1, max_attempts)


# =============================================================================
# Properties
# =============================================================================


@given(outcomes=outcomes_st, max_attempts=max_attempts_st, backoff=backoff_st)
def test_attempt_and_sleep_counts(
    outcomes: list[str], max_attempts: int, backoff: float
) -> None:
    backend = _backend(outcomes)
    sleeps: list[float] = []
    attempts = _expected_attempts(outcomes, max_attempts)
    final = outcomes[attempts - 1] if attempts <= len(outcomes) else "ok"

    try:
        snapshot = read_with_retries(
            ROOT, max_attempts, backend=backend, backoff=backoff, sleep=sleeps.append
        )
    except RepositoryLockedError:
        assert final in {"open_lock", "read_lock"}
        assert attempts == max_attempts
    except OSError:
        assert final == "error"
    else:
        assert final == "ok"
        assert snapshot == RepositorySnapshot(
            name="project",
            path="/fake/project",
            branches=("main",),
            current_branch="main",
            ahead_by=0,
            behind_by=0,
        )

    assert backend.open_count == attempts
    assert backend.open_count <= max_attempts
    assert sleeps == [backoff] * (attempts - 1)


@given(max_attempts=max_attempts_st)
def test_persistent_lock_uses_every_attempt(max_attempts: int) -> None:
    backend = _backend(["open_lock"] * max_attempts)
    sleeps: list[float] = []

    with pytest.raises(RepositoryLockedError):
        _ = read_with_retries(ROOT, max_attempts, backend=backend, sleep=sleeps.append)

    assert backend.open_count == max_attempts
    assert len(sleeps) == max_attempts - 1


@given(outcomes=outcomes_st, max_attempts=max_attempts_st)
def test_all_handles_closed(outcomes: list[str], max_attempts: int) -> None:
    backend = _backend(outcomes)

    try:
        _ = read_with_retries(
            ROOT, max_attempts, backend=backend, sleep=lambda _seconds: None
        )
    except (RepositoryLockedError, OSError):
        pass

    assert all(handle.closed for handle in backend.opened)
