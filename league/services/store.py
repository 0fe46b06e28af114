import json
import logging
import os
from typing import Any, Dict, Iterable, List, Optional
from uuid import uuid4

from league.core.exceptions import DocumentNotFound, StoreError

logger = logging.getLogger(__name__)

PLAYERS = "players"
GROUPS = "groups"
MATCHES = "matches"
TOURNAMENTS = "tournaments"


def _matches_filter(document: Dict[str, Any], equals: Dict[str, Any]) -> bool:
    return all(document.get(field) == value for field, value in equals.items())


class JsonDocumentStore:
    """
    Document collections kept as JSON lists, one file per collection.

    Each document carries an ``id``. Every write rewrites the whole collection
    file, so a batch call (``insert_many``, ``update_many``) is a single write.
    There are no cross-collection transactions.
    """

    def __init__(self, data_dir: str):
        self.data_dir = data_dir
        os.makedirs(self.data_dir, exist_ok=True)

    def _path(self, collection: str) -> str:
        return os.path.join(self.data_dir, f"{collection}.json")

    def _load(self, collection: str) -> List[Dict[str, Any]]:
        path = self._path(collection)
        if not os.path.exists(path):
            return []
        try:
            with open(path, "r", encoding="utf-8") as f:
                content = f.read()
        except OSError as e:
            raise StoreError(f"Could not read {path}: {e}") from e
        if not content.strip():
            return []
        try:
            return json.loads(content)
        except json.JSONDecodeError:
            logger.warning("Could not decode JSON from %s, treating collection as empty", path)
            return []

    def _save(self, collection: str, documents: List[Dict[str, Any]]) -> None:
        path = self._path(collection)
        try:
            with open(path, "w", encoding="utf-8") as f:
                json.dump(documents, f, indent=4, default=str)
        except OSError as e:
            raise StoreError(f"Could not write {path}: {e}") from e

    def insert(self, collection: str, fields: Dict[str, Any]) -> str:
        return self.insert_many(collection, [fields])[0]

    def insert_many(self, collection: str, documents: Iterable[Dict[str, Any]]) -> List[str]:
        stored = self._load(collection)
        ids = []
        for fields in documents:
            document = dict(fields)
            document.setdefault("id", str(uuid4()))
            stored.append(document)
            ids.append(document["id"])
        self._save(collection, stored)
        return ids

    def get_all(
        self,
        collection: str,
        order_by: Optional[str] = None,
        descending: bool = False,
        **equals: Any,
    ) -> List[Dict[str, Any]]:
        documents = [d for d in self._load(collection) if _matches_filter(d, equals)]
        if order_by:
            documents.sort(key=lambda d: (d.get(order_by) is None, d.get(order_by)), reverse=descending)
        return documents

    def get_one(self, collection: str, document_id: str) -> Dict[str, Any]:
        for document in self._load(collection):
            if document.get("id") == document_id:
                return document
        raise DocumentNotFound(collection, document_id)

    def update(self, collection: str, document_id: str, fields: Dict[str, Any]) -> Dict[str, Any]:
        return self.update_many(collection, {document_id: fields})[0]

    def update_many(self, collection: str, changes: Dict[str, Dict[str, Any]]) -> List[Dict[str, Any]]:
        stored = self._load(collection)
        by_id = {d.get("id"): d for d in stored}
        for document_id in changes:
            if document_id not in by_id:
                raise DocumentNotFound(collection, document_id)
        updated = []
        for document_id, fields in changes.items():
            by_id[document_id].update(fields)
            updated.append(by_id[document_id])
        self._save(collection, stored)
        return updated

    def delete_where(self, collection: str, **equals: Any) -> int:
        stored = self._load(collection)
        kept = [d for d in stored if not _matches_filter(d, equals)]
        removed = len(stored) - len(kept)
        if removed:
            self._save(collection, kept)
        return removed
