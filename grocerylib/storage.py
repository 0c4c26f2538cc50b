"""JSON list storage for the grocery catalog.

The whole collection lives in a single JSON array on disk. Reads decode the
full document and writes replace it in full, going through a temporary file
and ``os.replace`` so a crash mid-write never leaves a half-written catalog.
Optional rotating backups (``.bakN``) give a fallback when the primary file is
found corrupt or went missing after a failed write.
"""
from __future__ import annotations

import contextlib
import json
import logging
import os
import threading
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Sequence

logger = logging.getLogger(__name__)


class StoreError(RuntimeError):
    """Raised when a persistence operation fails."""


class StorageUnavailable(StoreError):
    """The backing file cannot be created, read or written."""


class CorruptData(StoreError):
    """The backing file does not hold a JSON array."""


class ListStore:
    """JSON list store with atomic writes and optional backup recovery."""

    def __init__(self, path: Path | str, backups: int = 0) -> None:
        self.path = Path(path)
        self.backups = max(0, backups)
        self._lock = threading.RLock()

    # ------------------------------------------------------------------
    # Persistence helpers
    # ------------------------------------------------------------------
    def _backup_path(self, index: int) -> Path:
        return self.path.with_suffix(self.path.suffix + f".bak{index}")

    def _candidate_paths(self) -> list[Path]:
        paths = [self.path]
        for idx in range(1, self.backups + 1):
            paths.append(self._backup_path(idx))
        return paths

    def _read_json(self, path: Path) -> List[Dict[str, Any]]:
        try:
            raw = path.read_text(encoding="utf-8")
        except OSError as exc:
            raise StorageUnavailable(str(exc)) from exc
        if not raw.strip():
            return []
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise CorruptData(f"{path.name}: {exc}") from exc
        if not isinstance(data, list):
            raise CorruptData(f"{path.name}: expected a JSON array, got {type(data).__name__}")
        return data

    def _write_json(self, path: Path, data: Sequence[Dict[str, Any]]) -> None:
        tmp_path = path.with_suffix(path.suffix + ".tmp")
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            payload = json.dumps(list(data), indent=2, allow_nan=False)
            with tmp_path.open("w", encoding="utf-8") as fh:
                fh.write(payload)
                fh.flush()
                os.fsync(fh.fileno())
            os.replace(tmp_path, path)
        except OSError as exc:
            raise StorageUnavailable(str(exc)) from exc
        finally:
            with contextlib.suppress(OSError):
                tmp_path.unlink(missing_ok=True)

    def _rotate_backups(self) -> None:
        if self.backups <= 0:
            return
        for idx in range(self.backups, 0, -1):
            src = self.path if idx == 1 else self._backup_path(idx - 1)
            dest = self._backup_path(idx)
            if src.exists():
                try:
                    os.replace(src, dest)
                except OSError:
                    # Rotation is best effort; the new write still goes ahead.
                    continue

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def ensure_initialized(self) -> None:
        """Create the backing file holding an empty array if it is missing."""

        with self._lock:
            if self.path.exists():
                return
            self._write_json(self.path, [])

    def _recover_from_backups(self) -> List[Dict[str, Any]] | None:
        for candidate in self._candidate_paths()[1:]:
            if not candidate.exists():
                continue
            try:
                data = self._read_json(candidate)
            except CorruptData:
                continue
            logger.warning("Recovered product catalog from backup %s", candidate.name)
            return list(data)
        return None

    def load(self) -> List[Dict[str, Any]]:
        with self._lock:
            if not self.path.exists():
                # A failed write after rotation leaves only the backups behind.
                recovered = self._recover_from_backups()
                return [] if recovered is None else recovered
            try:
                return list(self._read_json(self.path))
            except CorruptData:
                recovered = self._recover_from_backups()
                if recovered is None:
                    raise
                return recovered

    def save(self, items: Iterable[Dict[str, Any]]) -> List[Dict[str, Any]]:
        snapshot = [dict(item) for item in items]
        with self._lock:
            self._rotate_backups()
            self._write_json(self.path, snapshot)
        return snapshot

    def mutate(
        self,
        mutator: Callable[[List[Dict[str, Any]]], Iterable[Dict[str, Any]] | None],
    ) -> List[Dict[str, Any]]:
        """Load, edit and save the collection as one serialised step.

        ``mutator`` may edit the list in place and return ``None`` or return a
        replacement iterable. Exceptions raised by the mutator abort the cycle
        before anything is written.
        """

        with self._lock:
            snapshot = self.load()
            outcome = mutator(snapshot)
            updated = snapshot if outcome is None else list(outcome)
            return self.save(updated)
