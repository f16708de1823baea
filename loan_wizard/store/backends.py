"""Key-value persistence backends for the application registry."""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Protocol

from loan_wizard.exceptions import PersistenceError

logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    """Named string slots, read once at startup and overwritten on change."""

    def get(self, key: str) -> str | None:
        ...

    def set(self, key: str, value: str) -> None:
        ...


class MemoryStore:
    """Dict-backed store for tests and ephemeral sessions."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._slots: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._slots.get(key)

    def set(self, key: str, value: str) -> None:
        self._slots[key] = value

    def delete(self, key: str) -> None:
        self._slots.pop(key, None)


class JsonFileStore:
    """Store slots as string values in a single JSON object file.

    Writes go to a temporary file in the same directory which then replaces
    the target, so a crash mid-write leaves the previous contents intact.
    """

    def __init__(self, path: str | Path) -> None:
        """Initialize JSON file store.

        Parameters
        ----------
        path : str | Path
            File holding the slots.  Parent directories are created on the
            first write.
        """
        self.path = Path(path)

    def get(self, key: str) -> str | None:
        """Read a slot.

        Raises
        ------
        PersistenceError
            If the file exists but cannot be read or is not a JSON object.
        """
        slots = self._read()
        value = slots.get(key)
        if value is None:
            return None
        if not isinstance(value, str):
            raise PersistenceError(f"Slot {key!r} in {self.path} is not a string")
        return value

    def set(self, key: str, value: str) -> None:
        """Overwrite a slot, keeping the other slots in the file."""
        try:
            slots = self._read()
        except PersistenceError:
            logger.warning("Discarding unreadable store file %s", self.path)
            slots = {}
        slots[key] = value
        self._write(slots)

    def delete(self, key: str) -> None:
        """Remove a slot if present."""
        slots = self._read()
        if key in slots:
            del slots[key]
            self._write(slots)

    def _read(self) -> dict[str, object]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as exc:
            raise PersistenceError(f"Cannot read {self.path}: {exc}") from exc
        if not isinstance(data, dict):
            raise PersistenceError(f"{self.path} does not contain a JSON object")
        return data

    def _write(self, slots: dict[str, object]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(
                dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(slots, f, ensure_ascii=False)
                os.replace(tmp_path, self.path)
            except BaseException:
                Path(tmp_path).unlink(missing_ok=True)
                raise
        except OSError as exc:
            raise PersistenceError(f"Cannot write {self.path}: {exc}") from exc
