"""Flat JSON-file persistence, one pretty-printed array per domain."""

from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
from pathlib import Path

from errors import PersistenceError
from models import Domain, Record

LOGGER = logging.getLogger(__name__)


class JsonStore:
    """Whole-collection reads and atomic whole-file overwrites.

    Readers never see a half-written file: writes go to a temp file in the same
    directory and are moved into place with ``os.replace``. ``lock(domain)``
    serializes read-merge-write sections within this process.
    """

    def __init__(self, data_dir: str | Path | None = None) -> None:
        self.data_dir = Path(data_dir if data_dir is not None else os.getenv("DATA_DIR", "data"))
        self._locks: dict[str, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    def path_for(self, domain: Domain) -> Path:
        return self.data_dir / domain.filename

    def lock(self, domain: Domain) -> threading.Lock:
        with self._locks_guard:
            return self._locks.setdefault(domain.name, threading.Lock())

    def ensure(self, domain: Domain) -> None:
        """Create the data directory and an empty collection file if missing."""
        path = self.path_for(domain)
        if path.exists():
            return
        LOGGER.info("Initializing empty %s collection at %s", domain.name, path)
        self.write(domain, [])

    def read(self, domain: Domain) -> list[Record]:
        """Return the persisted collection; missing or unreadable files read as ``[]``."""
        path = self.path_for(domain)
        if not path.exists():
            try:
                self.ensure(domain)
            except PersistenceError as exc:
                LOGGER.warning("Could not initialize %s: %s", path, exc)
            return []

        try:
            with path.open(encoding="utf-8") as fh:
                data = json.load(fh)
        except (OSError, ValueError) as exc:
            LOGGER.warning("Could not read %s, treating as empty: %s", path, exc)
            return []

        if not isinstance(data, list):
            LOGGER.warning("%s does not hold a JSON array, treating as empty", path)
            return []
        return [item for item in data if isinstance(item, dict)]

    def write(self, domain: Domain, records: list[Record]) -> None:
        """Replace the whole collection with ``records``."""
        path = self.path_for(domain)
        tmp_name: str | None = None
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{domain.name}.", suffix=".tmp", dir=path.parent
            )
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(records, fh, indent=2, ensure_ascii=False)
                fh.write("\n")
            os.replace(tmp_name, path)
        except (OSError, TypeError, ValueError) as exc:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise PersistenceError(f"Failed to write {path}: {exc}") from exc

        LOGGER.info("Wrote %s %s records to %s", len(records), domain.name, path)
