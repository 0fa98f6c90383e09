"""In-memory record collections mirrored to whole-collection snapshots."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Generic, Iterable, Mapping, Type
from uuid import uuid4

from commonlib.storage import SnapshotStore

from .errors import NotFoundError
from .models import R, TimestampedRecord, merge_record, utc_timestamp

logger = logging.getLogger(__name__)


@dataclass(eq=False)
class RecordStore(Generic[R]):
    """Ordered collection of one record type.

    Records live in an insertion-ordered ``dict`` keyed by id: iteration
    yields insertion order and an update reassigns an existing key, so the
    record keeps its position. Every mutation rewrites the full snapshot
    before returning.
    """

    name: str
    model: Type[R]
    snapshots: SnapshotStore
    seed: Iterable[Mapping[str, Any]] = ()
    label: str = ""
    _records: Dict[str, R] = field(init=False, repr=False, default_factory=dict)

    def __post_init__(self) -> None:
        self.label = self.label or self.model.__name__
        documents = self.snapshots.load(self.name)
        if documents is None:
            documents = [dict(doc) for doc in self.seed]
            logger.info("Seeding %s with %d records", self.name, len(documents))
            self._records = self._index(documents)
            self._persist()
        else:
            self._records = self._index(documents)

    def _index(self, documents: Iterable[Mapping[str, Any]]) -> Dict[str, R]:
        records: Dict[str, R] = {}
        for doc in documents:
            record = self.model.model_validate(doc)
            records[record.id] = record
        return records

    def _persist(self) -> None:
        self.snapshots.save(self.name, [record.to_document() for record in self._records.values()])

    def _timestamped(self) -> bool:
        return issubclass(self.model, TimestampedRecord)

    # ------------------------------------------------------------------
    # Basic CRUD operations
    # ------------------------------------------------------------------
    def list(self) -> list[R]:
        return list(self._records.values())

    def get(self, record_id: str) -> R:
        record = self._records.get(str(record_id))
        if record is None:
            raise NotFoundError(f"{self.label} not found")
        return record

    def insert(self, fields: Mapping[str, Any]) -> R:
        data = dict(fields)
        data["id"] = str(uuid4())
        while data["id"] in self._records:
            data["id"] = str(uuid4())
        if self._timestamped():
            data["created_at"] = utc_timestamp()
            data.pop("updated_at", None)
        record = self.model.model_validate(data)
        self._records[record.id] = record
        self._persist()
        return record

    def update(self, record_id: str, patch: Mapping[str, Any]) -> R:
        existing = self.get(record_id)
        updated = merge_record(existing, patch)
        if self._timestamped():
            updated = updated.model_copy(update={"updated_at": utc_timestamp()})
        self._records[existing.id] = updated
        self._persist()
        return updated

    def delete(self, record_id: str) -> R:
        removed = self.get(record_id)
        del self._records[removed.id]
        self._persist()
        return removed
