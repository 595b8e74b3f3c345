# blog_api/repositories/base_repository.py
"""
Thin passthrough over a single Firestore collection.

Values are run through ``DateTimeUtils.for_firestore`` on the way in and
``DateTimeUtils.from_firestore`` on the way out, so callers only ever see
timezone-aware UTC datetimes.
"""

import logging
from typing import Any, Dict, Iterable, List, Optional, Tuple

from firebase_admin import firestore

from blog_api.utils.datetime_utils import DateTimeUtils

logger = logging.getLogger(__name__)


class BaseFirestoreRepository:

    def __init__(self, db, collection_name: str):
        self.db = db
        self.collection_name = collection_name
        self.collection_ref = db.collection(collection_name)

    # --- single document ---

    def create(self, data: Dict[str, Any], doc_id: Optional[str] = None) -> Tuple[str, Dict[str, Any]]:
        """Write a new document (auto id unless *doc_id* is given) and return (id, data)."""
        doc_ref = self.collection_ref.document(doc_id) if doc_id else self.collection_ref.document()
        data = DateTimeUtils.for_firestore(data)
        doc_ref.set(data)
        logger.info(f"Document created ({self.collection_name}/{doc_ref.id})")
        return doc_ref.id, DateTimeUtils.from_firestore(data)

    def get_by_id(self, doc_id: str) -> Optional[Dict[str, Any]]:
        doc = self.collection_ref.document(doc_id).get()
        if not doc.exists:
            return None
        return DateTimeUtils.from_firestore(doc.to_dict())

    def update(self, doc_id: str, updates: Dict[str, Any]) -> Dict[str, Any]:
        """
        Apply a partial update and return the document as stored afterwards.
        Raises ``google.api_core.exceptions.NotFound`` when the document is missing.
        """
        doc_ref = self.collection_ref.document(doc_id)
        doc_ref.update(DateTimeUtils.for_firestore(updates))
        return DateTimeUtils.from_firestore(doc_ref.get().to_dict())

    def delete(self, doc_id: str) -> None:
        self.collection_ref.document(doc_id).delete()
        logger.info(f"Document deleted ({self.collection_name}/{doc_id})")

    def exists(self, doc_id: str) -> bool:
        return self.collection_ref.document(doc_id).get().exists

    def increment(self, doc_id: str, field: str, delta: int = 1) -> None:
        """Atomic server-side increment of a numeric field."""
        self.collection_ref.document(doc_id).update({field: firestore.Increment(delta)})

    # --- collection queries ---

    def get_all(self) -> List[Tuple[str, Dict[str, Any]]]:
        return [(doc.id, DateTimeUtils.from_firestore(doc.to_dict())) for doc in self.collection_ref.stream()]

    def get_where(self, field: str, operator: str, value: Any) -> List[Tuple[str, Dict[str, Any]]]:
        docs = self.collection_ref.where(field, operator, value).stream()
        return [(doc.id, DateTimeUtils.from_firestore(doc.to_dict())) for doc in docs]

    # --- batched writes (one commit each) ---

    def batch_create(self, items: Iterable[Tuple[str, Dict[str, Any]]]) -> None:
        batch = self.db.batch()
        for doc_id, data in items:
            batch.set(self.collection_ref.document(doc_id), DateTimeUtils.for_firestore(data))
        batch.commit()

    def batch_update(self, items: Iterable[Tuple[str, Dict[str, Any]]]) -> None:
        batch = self.db.batch()
        for doc_id, data in items:
            batch.update(self.collection_ref.document(doc_id), DateTimeUtils.for_firestore(data))
        batch.commit()

    def batch_delete(self, doc_ids: Iterable[str]) -> None:
        batch = self.db.batch()
        for doc_id in doc_ids:
            batch.delete(self.collection_ref.document(doc_id))
        batch.commit()
