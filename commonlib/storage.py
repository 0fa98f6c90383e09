"""Snapshot persistence for the catalog collections.

Each collection is stored as a single JSON array that is rewritten wholesale
on every save. Writes go through a temp file and ``os.replace`` so a crash
mid-write never leaves a torn snapshot behind, and the previous snapshots are
kept as ``.bakN`` files that ``load`` falls back to when the primary file is
unreadable.
"""
from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Iterable, List, Sequence

logger = logging.getLogger(__name__)


class StoreError(RuntimeError):
    """Raised when a persistence operation fails."""


class ListStore:
    """JSON list store with atomic writes and backup recovery."""

    def __init__(
        self,
        path: Path | str,
        backups: int = 2,
        *,
        recovery_label: str | None = None,
    ) -> None:
        self.path = Path(path)
        self.backups = max(0, backups)
        self._recovery_label = recovery_label or self.path.stem

    # ------------------------------------------------------------------
    # Persistence helpers
    # ------------------------------------------------------------------
    def _backup_path(self, index: int) -> Path:
        return self.path.with_suffix(self.path.suffix + f".bak{index}")

    def _candidate_paths(self) -> list[Path]:
        return [self.path] + [self._backup_path(idx) for idx in range(1, self.backups + 1)]

    def _read_json(self, path: Path) -> List[Dict[str, Any]] | None:
        if not path.exists():
            return None
        try:
            raw = path.read_text(encoding="utf-8")
        except OSError as exc:
            raise StoreError(str(exc)) from exc
        if not raw:
            return []
        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            return None
        return data if isinstance(data, list) else None

    def _write_json(self, path: Path, data: Sequence[Dict[str, Any]]) -> None:
        payload = json.dumps(list(data), indent=2, ensure_ascii=False)
        tmp_path = path.with_suffix(path.suffix + ".tmp")
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise StoreError(str(exc)) from exc
        try:
            with tmp_path.open("w", encoding="utf-8") as fh:
                fh.write(payload)
                fh.flush()
                os.fsync(fh.fileno())
            os.replace(tmp_path, path)
        except OSError as exc:
            raise StoreError(str(exc)) from exc
        finally:
            tmp_path.unlink(missing_ok=True)

    def _rotate_backups(self) -> None:
        if self.backups <= 0:
            return
        for idx in range(self.backups, 0, -1):
            src = self.path if idx == 1 else self._backup_path(idx - 1)
            if src.exists():
                try:
                    os.replace(src, self._backup_path(idx))
                except OSError:
                    # Rotation is best effort; the new snapshot still gets written.
                    logger.warning("Could not rotate %s", src.name)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def load(self) -> List[Dict[str, Any]] | None:
        """Return the newest readable snapshot, or ``None`` when there is none.

        Raises ``StoreError`` when snapshot files exist but none of them can be
        read, so a damaged collection is never mistaken for a missing one.
        """

        unreadable: list[str] = []
        for candidate in self._candidate_paths():
            data = self._read_json(candidate)
            if data is None:
                if candidate.exists():
                    unreadable.append(candidate.name)
                continue
            if candidate != self.path:
                logger.warning(
                    "Recovered %s from backup %s", self._recovery_label, candidate.name
                )
            return list(data)
        if unreadable:
            raise StoreError(
                f"No readable {self._recovery_label} snapshot among {', '.join(unreadable)}"
            )
        return None

    def save(self, items: Iterable[Dict[str, Any]]) -> List[Dict[str, Any]]:
        snapshot = [dict(item) for item in items]
        self._rotate_backups()
        self._write_json(self.path, snapshot)
        return snapshot


class SnapshotStore:
    """Named whole-collection snapshots kept side by side in one directory."""

    def __init__(self, directory: Path | str, backups: int = 2) -> None:
        self.directory = Path(directory)
        self.backups = backups
        self._lists: dict[str, ListStore] = {}

    def _list(self, name: str) -> ListStore:
        store = self._lists.get(name)
        if store is None:
            store = ListStore(
                self.directory / f"{name}.json",
                backups=self.backups,
                recovery_label=name,
            )
            self._lists[name] = store
        return store

    def path_for(self, name: str) -> Path:
        return self._list(name).path

    def load(self, name: str) -> List[Dict[str, Any]] | None:
        return self._list(name).load()

    def save(self, name: str, records: Iterable[Dict[str, Any]]) -> List[Dict[str, Any]]:
        return self._list(name).save(records)
