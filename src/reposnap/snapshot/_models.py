"""Repository snapshot model.

This module defines the immutable value produced by a single consistent
read of a repository's branch and tracking state.
"""

from dataclasses import dataclass, field
from typing import Any, ClassVar, Final

# Sentinel for ahead/behind counts when HEAD has no upstream tracking branch.
# Git never reports negative counts, so -1 cannot collide with a real value.
NO_TRACKING: Final = -1

# Friendly name reported for HEAD when it does not point at a branch.
DETACHED_HEAD: Final = "(no branch)"


@dataclass(frozen=True, slots=True)
class RepositorySnapshot:
    """Branch and tracking state of a repository at one point in time.

    Snapshots are plain values: equal field values mean equal snapshots, and
    they hold no reference to the repository they were read from.

    Attributes:
        name: Final path segment of the working directory.
        path: Absolute working directory path.
        branches: Friendly names of all local and remote branches.
        current_branch: Friendly name of HEAD, or "(no branch)" when detached.
        ahead_by: Commits on HEAD not on its upstream, or -1 without tracking.
        behind_by: Commits on the upstream not on HEAD, or -1 without tracking.
    """

    EMPTY: ClassVar["RepositorySnapshot"]

    name: str = ""
    path: str = ""
    branches: tuple[str, ...] = field(default_factory=tuple)
    current_branch: str = ""
    ahead_by: int = NO_TRACKING
    behind_by: int = NO_TRACKING

    def __post_init__(self) -> None:
        if self.ahead_by < NO_TRACKING or self.behind_by < NO_TRACKING:
            msg = (
                "ahead_by and behind_by must be commit counts or -1, "
                f"got {self.ahead_by} and {self.behind_by}"
            )
            raise ValueError(msg)

    @property
    def is_empty(self) -> bool:
        """Whether this snapshot represents "no repository"."""
        return self == RepositorySnapshot.EMPTY

    @property
    def has_upstream(self) -> bool:
        """Whether HEAD had an upstream tracking branch when read."""
        return self.ahead_by != NO_TRACKING and self.behind_by != NO_TRACKING

    def to_dict(self) -> dict[str, Any]:  # pyright: ignore[reportExplicitAny]
        """Return a JSON-serialisable mapping of the snapshot fields."""
        return {
            "name": self.name,
            "path": self.path,
            "branches": list(self.branches),
            "current_branch": self.current_branch,
            "ahead_by": self.ahead_by,
            "behind_by": self.behind_by,
        }


RepositorySnapshot.EMPTY = RepositorySnapshot()
