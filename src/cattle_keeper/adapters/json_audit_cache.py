"""JSON file implementation of the client-side audit cache."""

import json
import os
import tempfile
import threading
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path

from cattle_keeper.services.reconciliation import AuditCache, AuditEntries


@dataclass
class JsonFileAuditCache(AuditCache):
    """Stores every namespace in one JSON document on disk."""

    path: Path
    _lock: threading.Lock = field(
        default_factory=threading.Lock, init=False, repr=False
    )

    def load(self, namespace: str) -> AuditEntries:
        """Return all cached entries for a namespace."""
        with self._lock:
            document = self._read()
        entries = document.get(namespace, {})
        return {str(key): dict(value) for key, value in entries.items()}

    def save(self, namespace: str, entries: AuditEntries) -> None:
        """Replace all cached entries for a namespace."""
        with self._lock:
            document = self._read()
            document[namespace] = entries
            self._write(document)

    def update(
        self, namespace: str, mutate: Callable[[AuditEntries], bool]
    ) -> None:
        """Read, mutate and write one namespace under a single lock hold."""
        with self._lock:
            document = self._read()
            entries = {
                str(key): dict(value)
                for key, value in document.get(namespace, {}).items()
            }
            if mutate(entries):
                document[namespace] = entries
                self._write(document)

    def _read(self) -> dict[str, AuditEntries]:
        if not self.path.exists():
            return {}
        raw = self.path.read_text(encoding="utf-8")
        if not raw.strip():
            return {}
        document = json.loads(raw)
        if not isinstance(document, dict):
            raise ValueError(f"Audit cache at {self.path} is not a JSON object")
        return document

    def _write(self, document: dict[str, AuditEntries]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(document, handle, indent=2, sort_keys=True)
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
