"""Navigation history records."""

from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any


def normalize_path(path: str | os.PathLike[str]) -> str:
    """Return an absolute, normalized form of ``path`` without resolving symlinks."""
    text = os.fspath(path)
    if not text:
        raise ValueError("Path must not be empty")
    return os.path.normpath(os.path.abspath(os.path.expanduser(text)))


def utc_timestamp() -> str:
    return datetime.now(UTC).isoformat(timespec="seconds")


@dataclass(frozen=True, slots=True)
class Entry:
    """One completed forward navigation.

    Attributes:
        id: Ordering key, strictly increasing in push order.
        path: Absolute, normalized destination directory.
        timestamp: ISO-8601 creation time, for display only.
    """

    id: int
    path: str
    timestamp: str

    def __post_init__(self) -> None:
        if isinstance(self.id, bool) or not isinstance(self.id, int) or self.id < 1:
            raise ValueError(f"Entry id must be a positive integer, got {self.id!r}")
        if not isinstance(self.path, str) or not self.path:
            raise ValueError("Entry path must be a non-empty string")
        if not os.path.isabs(self.path):
            raise ValueError(f"Entry path must be absolute, got {self.path!r}")
        if "\n" in self.path or "\r" in self.path:
            raise ValueError("Entry path must not contain a line break")

    @classmethod
    def create(cls, entry_id: int, path: str | os.PathLike[str]) -> Entry:
        return cls(id=entry_id, path=normalize_path(path), timestamp=utc_timestamp())

    def same_target(self, other: Entry) -> bool:
        """Compare identity and destination, ignoring the timestamp."""
        return self.id == other.id and self.path == other.path

    def to_record(self) -> dict[str, Any]:
        return {"id": self.id, "path": self.path, "ts": self.timestamp}

    @classmethod
    def from_record(cls, raw: object) -> Entry:
        """Parse a decoded JSON record. Raises ValueError on missing or mistyped fields."""
        if not isinstance(raw, dict):
            raise ValueError("Record must be a JSON object")
        entry_id = raw.get("id")
        path = raw.get("path")
        timestamp = raw.get("ts", "")
        if isinstance(entry_id, bool) or not isinstance(entry_id, int):
            raise ValueError(f"Record id must be an integer, got {entry_id!r}")
        if not isinstance(path, str):
            raise ValueError(f"Record path must be a string, got {path!r}")
        return cls(id=entry_id, path=path, timestamp=str(timestamp))


__all__ = ["Entry", "normalize_path", "utc_timestamp"]
