"""Git-backed checkpoint store.

History comes from `git log` across all refs except the reserved
refs/heads/entire/* namespace. Checkpoint metadata is read straight from
the tree of the orphan checkpoints ref with `git show` and `git ls-tree`,
so nothing is ever checked out into the working tree.
"""

import logging
import subprocess
from pathlib import Path

from ..config import (
    DEFAULT_CHECKPOINT_REF,
    DEFAULT_GIT_TIMEOUT,
    RESERVED_REF_GLOB,
)
from ..errors import MetadataUnreadable, StoreUnavailable
from ..log_parser import LOG_FORMAT
from ..store import CheckpointStore

logger = logging.getLogger(__name__)


class GitCommandError(Exception):
    """A git invocation exited non-zero, timed out or could not start."""

    def __init__(self, args: list[str], stderr: str):
        self.command = args
        self.stderr = stderr
        super().__init__(f"git {args[0]} failed: {stderr}")


class GitStore(CheckpointStore):
    """Store that shells out to the git binary for every read."""

    name = "git"

    def __init__(
        self,
        repo_path: Path,
        ref: str = DEFAULT_CHECKPOINT_REF,
        timeout: float = DEFAULT_GIT_TIMEOUT,
    ):
        self.repo_path = Path(repo_path)
        self.ref = ref
        self.timeout = timeout

    def is_available(self) -> bool:
        return self.head() is not None

    def read_text(self, path: str) -> str:
        try:
            return self._run_git("show", f"{self.ref}:{path}")
        except GitCommandError as e:
            raise MetadataUnreadable(path, e.stderr) from e

    def list_dir(self, path: str) -> list[str]:
        tree = path.rstrip("/") + "/"
        try:
            output = self._run_git("ls-tree", "--name-only", self.ref, tree)
        except GitCommandError as e:
            raise MetadataUnreadable(tree, e.stderr) from e
        return [line.strip() for line in output.splitlines() if line.strip()]

    def log(self, max_count: int) -> str:
        try:
            return self._run_git(
                "log",
                f"--format={LOG_FORMAT}",
                "--all",
                "--not",
                f"--glob={RESERVED_REF_GLOB}",
                f"--max-count={max_count}",
            )
        except GitCommandError as e:
            raise StoreUnavailable(str(e)) from e

    def head(self) -> str | None:
        try:
            output = self._run_git("rev-parse", "--verify", "--quiet", self.ref)
        except GitCommandError as e:
            logger.debug("Checkpoints ref %s not readable: %s", self.ref, e)
            return None
        return output.strip() or None

    # ── Private helpers ──────────────────────────────────────────────

    def _run_git(self, *args: str) -> str:
        """Run a git command in the repository and return stdout."""
        try:
            result = subprocess.run(
                ["git", *args],
                cwd=self.repo_path,
                capture_output=True,
                encoding="utf-8",
                errors="replace",
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired as e:
            raise GitCommandError(list(args), f"timed out after {self.timeout}s") from e
        except OSError as e:
            # git missing or repo_path does not exist
            raise GitCommandError(list(args), str(e)) from e

        if result.returncode != 0:
            raise GitCommandError(list(args), result.stderr.strip() or f"exit {result.returncode}")
        return result.stdout
