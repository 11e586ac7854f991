"""Resolve checkpoint ids into joined Checkpoint objects.

Checkpoint directories are sharded on the first two characters of the id
(`3a96b1501cdd` lives under `3a/96b1501cdd/`). Resolution reads three tiers:

1. `<shard>/metadata.json` -- the root. Failure here is fatal.
2. each session metadata file named by the root, in declared order.
3. every `<shard>/tasks/<entry>/checkpoint.json`.

Tiers 2 and 3 are best effort: the capture tool may still be writing
objects, or an object may have been garbage-collected, so an unreadable
session or task is recorded in Checkpoint.skipped and left out.
"""

import json
import logging
from typing import TypeVar

from pydantic import BaseModel, ValidationError

from .core import Checkpoint, SkippedEntry
from .errors import CheckpointNotFound, MetadataUnreadable, StoreUnavailable
from .metadata import RootCheckpointMetadata, SessionMetadata, TaskCheckpoint
from .store import CheckpointStore

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


def shard_path(checkpoint_id: str) -> str:
    """Return the `<prefix>/<suffix>` directory for a checkpoint id."""
    if len(checkpoint_id) < 3:
        raise ValueError(f"Checkpoint id too short: {checkpoint_id!r}")
    return f"{checkpoint_id[:2]}/{checkpoint_id[2:]}"


class MetadataResolver:
    """Reads checkpoint metadata from a CheckpointStore.

    Nothing is cached; every call re-reads the store.
    """

    def __init__(self, store: CheckpointStore):
        self.store = store

    def resolve(self, checkpoint_id: str) -> Checkpoint:
        """Return the checkpoint with every readable session and task."""
        root = self.read_root(checkpoint_id)
        checkpoint = Checkpoint(
            checkpoint_id=root.checkpoint_id,
            strategy=root.strategy,
            branch=root.branch,
        )

        for ref in root.sessions:
            path = _strip_leading_slash(ref.metadata)
            try:
                checkpoint.sessions.append(self._read_model(path, SessionMetadata))
            except MetadataUnreadable as e:
                logger.warning("Skipping session %s of checkpoint %s: %s", path, checkpoint_id, e.reason)
                checkpoint.skipped.append(SkippedEntry("session", path, e.reason))

        self._read_tasks(checkpoint_id, checkpoint)
        return checkpoint

    def read_root(self, checkpoint_id: str) -> RootCheckpointMetadata:
        """Return the root metadata or raise CheckpointNotFound/StoreUnavailable."""
        try:
            path = f"{shard_path(checkpoint_id)}/metadata.json"
        except ValueError as e:
            raise CheckpointNotFound(checkpoint_id, str(e)) from e

        try:
            return self._read_model(path, RootCheckpointMetadata)
        except MetadataUnreadable as e:
            if not self.store.is_available():
                raise StoreUnavailable(
                    f"Checkpoints ref is not readable while resolving {checkpoint_id}"
                ) from e
            raise CheckpointNotFound(checkpoint_id, e.reason) from e

    def first_session(self, checkpoint_id: str) -> SessionMetadata | None:
        """Return metadata for the first session the root lists.

        Used to backfill session ids on commits that carry only a checkpoint
        trailer. Returns None when the root lists no sessions.
        """
        root = self.read_root(checkpoint_id)
        if not root.sessions:
            return None
        return self._read_model(_strip_leading_slash(root.sessions[0].metadata), SessionMetadata)

    # ── Private helpers ──────────────────────────────────────────────

    def _read_tasks(self, checkpoint_id: str, checkpoint: Checkpoint) -> None:
        tasks_dir = f"{shard_path(checkpoint_id)}/tasks"
        try:
            entries = self.store.list_dir(tasks_dir)
        except MetadataUnreadable as e:
            logger.debug("No task listing for %s: %s", checkpoint_id, e.reason)
            return

        for entry in entries:
            path = f"{entry.rstrip('/')}/checkpoint.json"
            try:
                checkpoint.tasks.append(self._read_model(path, TaskCheckpoint))
            except MetadataUnreadable as e:
                logger.warning("Skipping task %s of checkpoint %s: %s", path, checkpoint_id, e.reason)
                checkpoint.skipped.append(SkippedEntry("task", path, e.reason))

    def _read_model(self, path: str, model: type[ModelT]) -> ModelT:
        """Read a JSON blob and validate it, raising MetadataUnreadable."""
        raw = self.store.read_text(path)
        try:
            return model.model_validate(json.loads(raw))
        except json.JSONDecodeError as e:
            raise MetadataUnreadable(path, f"invalid JSON: {e}") from e
        except ValidationError as e:
            raise MetadataUnreadable(
                path, f"{e.error_count()} schema error(s) for {model.__name__}"
            ) from e


def _strip_leading_slash(path: str) -> str:
    return path[1:] if path.startswith("/") else path
