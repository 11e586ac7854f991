"""Abstract base class for the store that backs history and checkpoints."""

from abc import ABC, abstractmethod


class CheckpointStore(ABC):
    """Read-only access to commit history and the checkpoints ref.

    Paths are relative to the root tree of the checkpoints ref. Backends
    raise MetadataUnreadable for a single missing/unreadable object and
    StoreUnavailable when nothing can be read at all.
    """

    name: str  # "git"

    @abstractmethod
    def is_available(self) -> bool:
        """Return True if the checkpoints ref exists and can be read."""
        ...

    @abstractmethod
    def read_text(self, path: str) -> str:
        """Return the content of a blob on the checkpoints ref."""
        ...

    @abstractmethod
    def list_dir(self, path: str) -> list[str]:
        """Return the full paths of the entries directly under a tree.

        A tree that does not exist yields an empty list.
        """
        ...

    @abstractmethod
    def log(self, max_count: int) -> str:
        """Return raw log text in the format expected by parse_log."""
        ...

    @abstractmethod
    def head(self) -> str | None:
        """Return the commit the checkpoints ref points at, or None."""
        ...
