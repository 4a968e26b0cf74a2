"""Persistent LIFO navigation history backed by a JSON Lines file.

Every operation reloads the file, performs at most one mutation and writes
it back; nothing is cached between calls. Records are appended in a single
write terminated by a newline, so a record cut short by a crash is the
trailing line of a file that does not end in a newline, and is skipped on
load. Any other unparseable line, including a newline-terminated last one,
is reported as corrupt state and the file is left untouched.

Rewrites (pop, pop-until, clear, repair-on-push) go through a temporary
file, fsync and ``os.replace`` so the backing file is either fully old or
fully new.
"""

from __future__ import annotations

import json
import os
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from jumpdir.core.console import get_logger
from jumpdir.core.result import CorruptStateError, IOFailureError, NotFoundError
from jumpdir.navigation.models import Entry

logger = get_logger(__name__)

TEMP_SUFFIX = ".tmp"


@dataclass
class StackSnapshot:
    """Parsed state of the backing file.

    ``clean`` is False when the file ends in a skipped partial record or
    lacks a final newline; the next push then rewrites instead of appending.
    """

    entries: list[Entry]
    clean: bool = True
    skipped_tail: str | None = None


def encode_entry(entry: Entry) -> str:
    """Serialize an entry as one newline-terminated JSON Lines record."""
    return json.dumps(entry.to_record(), ensure_ascii=True) + "\n"


def _decode_line(line: str) -> Entry:
    return Entry.from_record(json.loads(line))


def parse_snapshot(text: str, source: Path | None = None) -> StackSnapshot:
    """Parse backing-file content into entries, bottom first."""
    terminated = text == "" or text.endswith("\n")
    records = [
        (lineno, line) for lineno, line in enumerate(text.split("\n"), start=1) if line.strip()
    ]

    entries: list[Entry] = []
    clean = terminated
    skipped_tail: str | None = None

    for position, (lineno, line) in enumerate(records):
        is_last = position == len(records) - 1
        try:
            entry = _decode_line(line)
        except ValueError as exc:
            if is_last and not terminated:
                clean = False
                skipped_tail = line
                logger.warning(
                    "Ignoring incomplete trailing record at line %d of %s", lineno, source
                )
                break
            raise CorruptStateError(
                "Unparseable navigation record",
                context={"file": str(source), "line": lineno, "error": str(exc)},
            ) from exc

        if entries and entry.id <= entries[-1].id:
            raise CorruptStateError(
                "Navigation record ids are out of order",
                context={"file": str(source), "line": lineno, "id": entry.id},
            )
        entries.append(entry)

    return StackSnapshot(entries=entries, clean=clean, skipped_tail=skipped_tail)


class NavigationStack:
    """LIFO history of forward jumps stored at ``path``."""

    def __init__(self, path: Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    # ------------------------------------------------------------------
    # Reading
    # ------------------------------------------------------------------

    def snapshot(self) -> StackSnapshot:
        if not self._path.exists():
            return StackSnapshot(entries=[])
        try:
            text = self._path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise IOFailureError(
                "Failed to read navigation history",
                context={"file": str(self._path), "error": str(exc)},
            ) from exc
        return parse_snapshot(text, self._path)

    def load(self) -> list[Entry]:
        """Return every entry, bottom first."""
        return self.snapshot().entries

    def entries(self) -> list[Entry]:
        """Return every entry, most recent first."""
        return list(reversed(self.load()))

    def peek(self) -> Entry | None:
        entries = self.load()
        return entries[-1] if entries else None

    def __len__(self) -> int:
        return len(self.load())

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def push(self, path: str | os.PathLike[str]) -> Entry:
        """Record a forward jump to ``path`` and return the new entry."""
        snapshot = self.snapshot()
        next_id = snapshot.entries[-1].id + 1 if snapshot.entries else 1
        entry = Entry.create(next_id, path)

        if snapshot.clean:
            self._append(entry)
        else:
            logger.debug("Rewriting %s to drop an incomplete trailing record", self._path)
            self._rewrite([*snapshot.entries, entry])

        logger.debug("Pushed entry %d -> %s", entry.id, entry.path)
        return entry

    def pop(self) -> Entry | None:
        """Remove and return the top entry, or None when the history is empty."""
        entries = self.load()
        if not entries:
            return None
        top = entries[-1]
        self._rewrite(entries[:-1])
        logger.debug("Popped entry %d -> %s", top.id, top.path)
        return top

    def pop_until(self, entry_id: int) -> list[Entry]:
        """Remove entries from the top down to and including ``entry_id``.

        Returns the removed entries most recent first. An id below the bottom
        entry unwinds the whole history. Any other unknown id raises
        NotFoundError and leaves the file unchanged.
        """
        entries = self.load()
        index = next((i for i, entry in enumerate(entries) if entry.id == entry_id), None)

        if index is None:
            if entries and entry_id < entries[0].id:
                index = 0
            else:
                raise NotFoundError(
                    "No navigation entry with that id",
                    context={"id": entry_id, "file": str(self._path)},
                )

        popped = list(reversed(entries[index:]))
        self._rewrite(entries[:index])
        logger.debug("Unwound %d entries down to id %d", len(popped), entry_id)
        return popped

    def clear(self) -> int:
        """Drop the whole history and return the number of entries removed."""
        snapshot = self.snapshot()
        if not snapshot.entries and snapshot.clean:
            return 0
        self._rewrite([])
        return len(snapshot.entries)

    # ------------------------------------------------------------------
    # File helpers
    # ------------------------------------------------------------------

    def _ensure_parent(self) -> None:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise IOFailureError(
                "Cannot create history directory",
                context={"dir": str(self._path.parent), "error": str(exc)},
            ) from exc

    def _append(self, entry: Entry) -> None:
        self._ensure_parent()
        record = encode_entry(entry)
        try:
            with self._path.open("a", encoding="utf-8") as fh:
                fh.write(record)
                fh.flush()
                os.fsync(fh.fileno())
        except OSError as exc:
            raise IOFailureError(
                "Failed to append navigation entry",
                context={"file": str(self._path), "error": str(exc)},
            ) from exc

    def _rewrite(self, entries: Sequence[Entry]) -> None:
        """Atomically replace the backing file with ``entries``."""
        self._ensure_parent()
        temp_path = self._path.with_name(self._path.name + TEMP_SUFFIX)
        try:
            with temp_path.open("w", encoding="utf-8") as fh:
                for entry in entries:
                    fh.write(encode_entry(entry))
                fh.flush()
                os.fsync(fh.fileno())
            os.replace(temp_path, self._path)
        except OSError as exc:
            temp_path.unlink(missing_ok=True)
            raise IOFailureError(
                "Failed to rewrite navigation history",
                context={"file": str(self._path), "error": str(exc)},
            ) from exc


__all__ = ["NavigationStack", "StackSnapshot", "encode_entry", "parse_snapshot"]
