from __future__ import annotations

import json
from datetime import date
from pathlib import Path
from typing import Any, Dict, List
from uuid import uuid4

from .errors import RecordNotFoundError

Record = Dict[str, Any]


class DataStore:
    """JSON-file entity store: named collections of records keyed by ``id``."""

    def __init__(self, path: Path) -> None:
        self.path = path
        self.collections: Dict[str, Dict[str, Record]] = {}
        if path.exists():
            self.load()

    def load(self) -> None:
        content = json.loads(self.path.read_text())
        self.collections = {
            name: {record["id"]: record for record in records} for name, records in content.items()
        }

    def save(self) -> None:
        payload = {name: list(records.values()) for name, records in self.collections.items()}
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(payload, default=self._date_serializer, indent=2))

    def list(self, collection: str) -> List[Record]:
        return [dict(record) for record in self.collections.get(collection, {}).values()]

    def filter(self, collection: str, **criteria: Any) -> List[Record]:
        return [
            record
            for record in self.list(collection)
            if all(record.get(key) == value for key, value in criteria.items())
        ]

    def get(self, collection: str, record_id: str) -> Record:
        try:
            return dict(self.collections[collection][record_id])
        except KeyError:
            raise RecordNotFoundError(collection, record_id) from None

    def create(self, collection: str, data: Record) -> Record:
        record = {**data, "id": data.get("id") or str(uuid4())}
        self.collections.setdefault(collection, {})[record["id"]] = record
        return dict(record)

    def update(self, collection: str, record_id: str, changes: Record) -> Record:
        current = self.get(collection, record_id)
        current.update({k: v for k, v in changes.items() if k != "id"})
        self.collections[collection][record_id] = current
        return dict(current)

    def delete(self, collection: str, record_id: str) -> None:
        self.get(collection, record_id)
        del self.collections[collection][record_id]

    @staticmethod
    def _date_serializer(value):
        if isinstance(value, date):
            return value.isoformat()
        raise TypeError(f"Type {type(value)} not serializable")
