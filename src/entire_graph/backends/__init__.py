"""Construct the configured checkpoint store."""

from pathlib import Path

from ..config import get_checkpoint_ref, get_git_timeout, get_repo_path
from ..store import CheckpointStore
from .git import GitStore


def get_store(repo_path: Path | None = None) -> CheckpointStore:
    """Return a store for the given repository (or the configured one)."""
    return GitStore(
        repo_path or get_repo_path(),
        ref=get_checkpoint_ref(),
        timeout=get_git_timeout(),
    )
