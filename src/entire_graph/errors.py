"""Exception taxonomy for reading history and checkpoint metadata.

Fatal conditions (the store is gone, a checkpoint's root metadata is
unreadable) are raised. A single unreadable session or task object is raised
as MetadataUnreadable internally and recorded on the resolved Checkpoint as a
SkippedEntry instead of failing the whole resolution.
"""


class EntireGraphError(Exception):
    """Base class for all entire-graph errors."""


class StoreUnavailable(EntireGraphError):
    """The checkpoints ref or the repository itself cannot be read."""


class CheckpointNotFound(EntireGraphError):
    """Root metadata for a checkpoint id is missing or malformed."""

    def __init__(self, checkpoint_id: str, reason: str = ""):
        self.checkpoint_id = checkpoint_id
        self.reason = reason
        message = f"Checkpoint {checkpoint_id} not found"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class MetadataUnreadable(EntireGraphError):
    """One object on the checkpoints ref is missing or fails validation."""

    def __init__(self, path: str, reason: str = ""):
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot read {path}: {reason}" if reason else f"Cannot read {path}")


class CommitNotFound(EntireGraphError):
    """A commit (or checkpoint trailer) is not present in the loaded history."""
