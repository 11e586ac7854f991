"""Per-view access to a repository's history, sessions and checkpoints.

A GraphView is built for each logical view (an HTTP request, a CLI
invocation) over one store. It holds no state between calls apart from
its configuration, so any number of views can coexist.
"""

import json
import logging
from dataclasses import dataclass
from pathlib import Path

from .active import read_active_sessions
from .backends import get_store
from .config import get_max_count, get_sessions_dir, get_settings_path
from .core import (
    Checkpoint,
    CommitDetail,
    CommitRecord,
    Edge,
    LaneInfo,
    RepoInfo,
    RepoStatus,
    SessionGroup,
)
from .errors import CommitNotFound, EntireGraphError
from .graph import assign_lanes, build_edges
from .log_parser import parse_log
from .metadata import ActiveSession
from .resolver import MetadataResolver
from .sessions import group_sessions
from .store import CheckpointStore

logger = logging.getLogger(__name__)


@dataclass
class GraphLayout:
    """Commits in display order with their lanes and edges."""

    commits: list[CommitRecord]
    lanes: dict[str, LaneInfo]
    edges: list[Edge]


class GraphView:
    """History, session and checkpoint queries for one repository."""

    def __init__(
        self,
        repo_path: Path,
        store: CheckpointStore | None = None,
        max_count: int | None = None,
    ):
        self.repo_path = Path(repo_path)
        self.store = store or get_store(self.repo_path)
        self.resolver = MetadataResolver(self.store)
        self.max_count = max_count or get_max_count()

    def commits(self, max_count: int | None = None) -> list[CommitRecord]:
        """Return recent commits across all refs, newest first."""
        raw = self.store.log(max_count or self.max_count)
        return parse_log(raw)

    def layout(self, max_count: int | None = None) -> GraphLayout:
        commits = self.commits(max_count)
        lanes = assign_lanes(commits)
        return GraphLayout(commits=commits, lanes=lanes, edges=build_edges(commits, lanes))

    def sessions(self, max_count: int | None = None) -> list[SessionGroup]:
        return group_sessions(self.commits(max_count), self.resolver)

    def checkpoint(self, checkpoint_id: str) -> Checkpoint:
        return self.resolver.resolve(checkpoint_id)

    def commit_detail(self, commit_hash: str) -> CommitDetail:
        """Return a commit by full or abbreviated hash, with its checkpoint."""
        commits = self.commits()
        commit = next((c for c in commits if c.hash == commit_hash), None)
        if commit is None and commit_hash:
            commit = next((c for c in commits if c.hash.startswith(commit_hash)), None)
        if commit is None:
            raise CommitNotFound(f"Commit {commit_hash} not found")
        return self._detail(commit)

    def detail_by_checkpoint(self, checkpoint_id: str) -> CommitDetail:
        """Return the commit carrying a checkpoint trailer, with its checkpoint."""
        commit = next((c for c in self.commits() if c.checkpoint_id == checkpoint_id), None)
        if commit is None:
            raise CommitNotFound(f"Checkpoint {checkpoint_id} not found")
        return self._detail(commit)

    def active_sessions(self) -> list[ActiveSession]:
        return read_active_sessions(get_sessions_dir(self.repo_path))

    def status(self) -> RepoStatus:
        if not get_settings_path(self.repo_path).exists():
            return RepoStatus.NOT_ENABLED
        if not self.store.is_available():
            return RepoStatus.NO_CHECKPOINTS
        return RepoStatus.READY

    def repo_info(self) -> RepoInfo | None:
        """Return strategy and CLI version from .entire/settings.json."""
        path = get_settings_path(self.repo_path)
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError) as e:
            logger.debug("No readable settings at %s: %s", path, e)
            return None
        if not isinstance(data, dict):
            return None
        return RepoInfo(
            strategy=data.get("strategy") or "unknown",
            cli_version=data.get("cli_version") or "unknown",
        )

    def checkpoint_head(self) -> str | None:
        """Return the checkpoints ref head, for change polling by callers."""
        return self.store.head()

    # ── Private helpers ──────────────────────────────────────────────

    def _detail(self, commit: CommitRecord) -> CommitDetail:
        if not commit.checkpoint_id:
            return CommitDetail(commit=commit)
        try:
            checkpoint = self.resolver.resolve(commit.checkpoint_id)
        except EntireGraphError as e:
            logger.warning("Checkpoint %s unavailable for %s: %s", commit.checkpoint_id, commit.abbreviated_hash, e)
            return CommitDetail(commit=commit, error=str(e))
        return CommitDetail(commit=commit, checkpoint=checkpoint)
