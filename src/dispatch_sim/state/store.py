"""
Key-value storage for persisted progress documents.

Separates persistence from domain logic for testability. Stores deal in raw
text; parsing and recovery from bad documents belong to the systems that
own each document.
"""

import logging
from pathlib import Path
from typing import Protocol, runtime_checkable

logger = logging.getLogger(__name__)


# Constant identifiers for the two overlay documents
AGENT_PROGRESS_KEY = "dispatch-sim-agent-progress"
USER_PROGRESS_KEY = "dispatch-sim-user-progress"


@runtime_checkable
class ProgressStore(Protocol):
    """
    Abstract whole-document storage.

    Implementations:
    - JsonFileStore: File-based persistence (production)
    - MemoryStore: In-memory storage (testing)
    """

    def read(self, key: str) -> str | None:
        """Return the stored document, or None if absent."""
        ...

    def write(self, key: str, text: str) -> None:
        """Replace the stored document."""
        ...

    def delete(self, key: str) -> bool:
        """Remove a document. Returns True if it existed."""
        ...


class JsonFileStore:
    """
    One JSON file per key.

    Features:
    - Automatic backup of the previous version on write
    - Directory created on demand
    """

    def __init__(self, directory: Path | str = "saves"):
        self.directory = Path(directory)
        self.directory.mkdir(parents=True, exist_ok=True)

    def _path(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    def read(self, key: str) -> str | None:
        path = self._path(key)
        if not path.exists():
            return None
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f"Could not read {path}: {e}")
            return None

    def write(self, key: str, text: str) -> None:
        path = self._path(key)

        # Backup previous save
        if path.exists():
            backup = path.with_suffix(".json.bak")
            backup.write_bytes(path.read_bytes())

        path.write_text(text, encoding="utf-8")
        logger.debug(f"Saved {key} to {path}")

    def delete(self, key: str) -> bool:
        path = self._path(key)
        if path.exists():
            path.unlink()
            return True
        return False


class MemoryStore:
    """
    In-memory storage for testing.

    No file I/O - all data lives in memory.
    """

    def __init__(self, documents: dict[str, str] | None = None):
        self.documents: dict[str, str] = dict(documents or {})
        self.writes = 0

    def read(self, key: str) -> str | None:
        return self.documents.get(key)

    def write(self, key: str, text: str) -> None:
        self.documents[key] = text
        self.writes += 1

    def delete(self, key: str) -> bool:
        if key in self.documents:
            del self.documents[key]
            return True
        return False

    def clear(self) -> None:
        """Clear all documents (test utility)."""
        self.documents.clear()
