"""Core data models for entire-graph."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from .metadata import SessionMetadata, TaskCheckpoint


@dataclass
class CommitRecord:
    """A single commit parsed from git log output."""

    hash: str
    abbreviated_hash: str
    parents: list[str] = field(default_factory=list)
    author: str = ""
    author_email: str = ""
    date: str = ""  # ISO 8601 author date
    subject: str = ""
    refs: list[str] = field(default_factory=list)  # e.g. ["HEAD -> main", "tag: v1.0"]
    # Entire-* trailers; session_id/agent may be backfilled from checkpoint metadata
    checkpoint_id: Optional[str] = None
    attribution: Optional[str] = None
    session_id: Optional[str] = None
    agent: Optional[str] = None

    @property
    def has_checkpoint(self) -> bool:
        return self.checkpoint_id is not None

    @property
    def is_merge(self) -> bool:
        return len(self.parents) > 1

    @property
    def timestamp(self) -> Optional[datetime]:
        """Author date as an aware UTC datetime, or None if unparseable."""
        return parse_iso(self.date)


@dataclass
class SkippedEntry:
    """A session or task object that could not be read during resolution."""

    kind: str  # "session" | "task"
    path: str
    reason: str


@dataclass
class Checkpoint:
    """Checkpoint metadata joined with its readable sessions and tasks."""

    checkpoint_id: str
    strategy: str
    branch: str
    sessions: list[SessionMetadata] = field(default_factory=list)
    tasks: list[TaskCheckpoint] = field(default_factory=list)
    skipped: list[SkippedEntry] = field(default_factory=list)

    @property
    def is_partial(self) -> bool:
        return bool(self.skipped)


@dataclass
class SessionGroup:
    """Checkpoint commits that belong to one agent session."""

    session_id: str
    agent: str
    checkpoints: list[CommitRecord] = field(default_factory=list)
    started_at: Optional[datetime] = None
    last_activity_at: Optional[datetime] = None


@dataclass(frozen=True)
class LaneInfo:
    """Horizontal track and colour assigned to a commit in the graph."""

    lane: int
    color: str


@dataclass(frozen=True)
class Edge:
    """A line from a commit down to one of its parents."""

    child: str
    parent: str
    from_lane: int
    to_lane: int
    from_row: int
    to_row: int
    color: str

    @property
    def is_straight(self) -> bool:
        return self.from_lane == self.to_lane


@dataclass
class CommitDetail:
    """A commit together with its checkpoint, when one could be resolved."""

    commit: CommitRecord
    checkpoint: Optional[Checkpoint] = None
    error: Optional[str] = None


@dataclass
class RepoInfo:
    """Repository-level settings written by the entire CLI."""

    strategy: str = "unknown"
    cli_version: str = "unknown"


class RepoStatus(str, Enum):
    NOT_ENABLED = "not-enabled"
    NO_CHECKPOINTS = "no-checkpoints"
    READY = "ready"


def parse_iso(value: str | None) -> datetime | None:
    """Parse an ISO 8601 datetime string into an aware UTC datetime."""
    if not value:
        return None
    try:
        if value.endswith("Z"):
            value = value[:-1] + "+00:00"
        dt = datetime.fromisoformat(value)
    except (ValueError, TypeError):
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)
