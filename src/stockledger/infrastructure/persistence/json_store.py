"""Shared JSON-file storage for the ledger's two record sets.

Items and transactions each live in their own ``<name>.json`` file under
the data directory.  File access is serialised with a process-local
re-entrant lock.  ``persist`` writes several files as one step: each file
is replaced atomically, and if a later file fails the earlier ones are
put back, so readers never see one half of a ledger write.
"""

from __future__ import annotations

import json
import os
import threading
from pathlib import Path

from stockledger.domain.exceptions import StorageError
from stockledger.logging_config import get_logger

logger = get_logger("infrastructure.json_store")

ITEMS = "items"
TRANSACTIONS = "transactions"


class JsonStore:

    def __init__(self, data_dir: Path) -> None:
        self._data_dir = data_dir
        self.lock = threading.RLock()
        self._ensure_files()

    # --- Reads ----------------------------------------------------------------

    def load(self, name: str) -> list[dict]:
        """Return a fresh copy of every record in the named file."""
        path = self._path(name)
        with self.lock:
            try:
                return json.loads(path.read_text(encoding="utf-8"))
            except (OSError, ValueError) as exc:
                raise StorageError(f"Could not read {path.name}: {exc}") from exc

    # --- Writes ---------------------------------------------------------------

    def persist(self, changes: dict[str, list[dict]]) -> None:
        """Replace the named files with the given records, all or nothing."""
        with self.lock:
            originals: dict[str, bytes] = {}
            written: list[str] = []
            try:
                for name, records in changes.items():
                    path = self._path(name)
                    originals[name] = path.read_bytes()
                    self._write(path, _dump(records))
                    written.append(name)
            except (OSError, TypeError, ValueError) as exc:
                self._restore(written, originals)
                raise StorageError(f"Could not write ledger files: {exc}") from exc

    # --- File helpers ---------------------------------------------------------

    def _write(self, path: Path, payload: bytes) -> None:
        tmp = path.with_name(path.name + ".tmp")
        tmp.write_bytes(payload)
        os.replace(tmp, path)

    def _restore(self, names: list[str], originals: dict[str, bytes]) -> None:
        failed: list[str] = []
        for name in reversed(names):
            try:
                self._write(self._path(name), originals[name])
            except OSError:
                logger.exception("Failed to restore %s after aborted write", name)
                failed.append(name)
        if failed:
            raise StorageError(
                f"Could not restore {', '.join(failed)} after an aborted write"
            )

    def _path(self, name: str) -> Path:
        if name not in (ITEMS, TRANSACTIONS):
            raise ValueError(f"Unknown record set '{name}'")
        return self._data_dir / f"{name}.json"

    def _ensure_files(self) -> None:
        try:
            self._data_dir.mkdir(parents=True, exist_ok=True)
            for name in (ITEMS, TRANSACTIONS):
                path = self._path(name)
                if not path.exists():
                    path.write_text("[]", encoding="utf-8")
        except OSError as exc:
            raise StorageError(f"Could not prepare data directory {self._data_dir}: {exc}") from exc


def _dump(records: list[dict]) -> bytes:
    return (json.dumps(records, indent=2) + "\n").encode("utf-8")
