"""Environment-driven settings and repository path resolution."""

import logging
import os
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_CHECKPOINT_REF = "entire/checkpoints/v1"
# Everything under this namespace is checkpoint storage, never ordinary history.
RESERVED_REF_GLOB = "refs/heads/entire/*"
DEFAULT_MAX_COUNT = 200
DEFAULT_GIT_TIMEOUT = 30.0


def get_repo_path() -> Path:
    """Return the repository to read, defaulting to the current directory."""
    env = os.environ.get("ENTIRE_GRAPH_REPO")
    if env:
        return Path(env)
    return Path.cwd()


def get_checkpoint_ref() -> str:
    """Return the orphan ref that holds checkpoint metadata."""
    return os.environ.get("ENTIRE_GRAPH_REF") or DEFAULT_CHECKPOINT_REF


def get_max_count() -> int:
    """Return how many commits to read from history per query."""
    return _int_env("ENTIRE_GRAPH_MAX_COUNT", DEFAULT_MAX_COUNT)


def get_git_timeout() -> float:
    """Return the per-command git timeout in seconds."""
    env = os.environ.get("ENTIRE_GRAPH_GIT_TIMEOUT")
    if not env:
        return DEFAULT_GIT_TIMEOUT
    try:
        return float(env)
    except ValueError:
        logger.warning("Ignoring invalid ENTIRE_GRAPH_GIT_TIMEOUT=%r", env)
        return DEFAULT_GIT_TIMEOUT


def get_sessions_dir(repo_path: Path) -> Path:
    """Return the directory where the entire CLI tracks in-flight sessions."""
    return repo_path / ".git" / "entire-sessions"


def get_settings_path(repo_path: Path) -> Path:
    """Return the repo-level entire settings file."""
    return repo_path / ".entire" / "settings.json"


def _int_env(name: str, default: int) -> int:
    env = os.environ.get(name)
    if not env:
        return default
    try:
        value = int(env)
    except ValueError:
        logger.warning("Ignoring invalid %s=%r", name, env)
        return default
    return value if value > 0 else default
