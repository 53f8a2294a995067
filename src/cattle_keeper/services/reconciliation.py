"""Audit reconciliation between server records and a local side-cache.

The server does not always return the audit attributes a client wrote, so the
client keeps a small cache keyed by record id. On every read the cache is used
only to fill attributes that the server left empty; any value the server does
supply wins. Cache failures are logged and never surface to the caller.
"""

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Protocol

logger = logging.getLogger(__name__)

CATTLE_AUDIT_FIELDS = ("createdBy", "lastEditedBy", "lastEditedAt", "lastEditedField")
MILK_AUDIT_FIELDS = ("addedBy",)

AuditEntries = dict[str, dict[str, str]]


class AuditCache(Protocol):
    """Non-authoritative storage for audit attributes, grouped by namespace."""

    def load(self, namespace: str) -> AuditEntries:
        """Return all cached entries for a namespace."""

    def save(self, namespace: str, entries: AuditEntries) -> None:
        """Replace all cached entries for a namespace."""

    def update(
        self, namespace: str, mutate: Callable[[AuditEntries], bool]
    ) -> None:
        """Load, mutate and save a namespace as one step.

        ``mutate`` edits the entries in place and returns false when nothing
        changed, in which case nothing is written.
        """


def _is_empty(value: object) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def reconcile(
    authoritative: Mapping[str, object],
    fallback: Mapping[str, object] | None,
    fields: tuple[str, ...],
) -> dict[str, object]:
    """Merge two sources; the fallback only fills empty authoritative fields."""
    merged = dict(authoritative)
    if not fallback:
        return merged
    for name in fields:
        if _is_empty(merged.get(name)) and not _is_empty(fallback.get(name)):
            merged[name] = fallback[name]
    return merged


@dataclass
class AuditReconciler:
    """Enriches one record type from its cache namespace."""

    cache: AuditCache
    namespace: str
    fields: tuple[str, ...]

    def enrich(self, records: list[dict[str, object]]) -> list[dict[str, object]]:
        """Return records with empty audit fields filled from the cache."""
        entries = self._load() or {}
        return [
            reconcile(record, entries.get(str(record.get("id"))), self.fields)
            for record in records
        ]

    def enrich_one(self, record: dict[str, object]) -> dict[str, object]:
        """Return one record with empty audit fields filled from the cache."""
        return self.enrich([record])[0]

    def remember(self, record_id: str, audit: Mapping[str, object]) -> None:
        """Store audit attributes for a record, keeping earlier values."""
        cleaned = self._clean(audit)

        def mutate(entries: AuditEntries) -> bool:
            entry = dict(entries.get(record_id, {}))
            entry.update(cleaned)
            entries[record_id] = entry
            return True

        self._update(mutate)

    def rekey(
        self,
        old_id: str,
        new_id: str,
        audit: Mapping[str, object] | None = None,
    ) -> None:
        """Move a cache entry to a record's new id and drop the stale key."""
        cleaned = self._clean(audit) if audit else {}

        def mutate(entries: AuditEntries) -> bool:
            entry = dict(entries.pop(old_id, {}))
            entry.update(cleaned)
            if entry:
                entries[new_id] = entry
            return True

        self._update(mutate)

    def forget(self, record_id: str) -> None:
        """Drop the cache entry for a deleted record."""
        self._update(lambda entries: entries.pop(record_id, None) is not None)

    def _clean(self, audit: Mapping[str, object]) -> dict[str, str]:
        return {
            name: str(audit[name])
            for name in self.fields
            if name in audit and not _is_empty(audit[name])
        }

    def _load(self) -> AuditEntries | None:
        try:
            return self.cache.load(self.namespace)
        except Exception:
            logger.exception(
                "Failed to read audit cache", extra={"namespace": self.namespace}
            )
            return None

    def _update(self, mutate: Callable[[AuditEntries], bool]) -> None:
        try:
            self.cache.update(self.namespace, mutate)
        except Exception:
            logger.exception(
                "Failed to update audit cache", extra={"namespace": self.namespace}
            )
