"""Document store connection manager (Firestore, with an in-memory fallback)."""

import copy
import uuid
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Sequence, Tuple

from google.cloud.firestore_v1 import FieldFilter

from app.core.firebase import firebase
from app.core.logging import logger


Filter = Tuple[str, Any]


class DocumentStore(ABC):
    """Minimal document-store interface used by the feature services.

    Collections are slash-separated paths, so ``patients/<id>/records`` is a
    sub-collection. Documents are returned as dicts with their ``id`` merged in.
    """

    durable: bool = False
    name: str = "abstract"

    @abstractmethod
    async def create(self, collection: str, data: Dict[str, Any], doc_id: Optional[str] = None) -> str:
        raise NotImplementedError

    @abstractmethod
    async def get(self, collection: str, doc_id: str) -> Optional[Dict[str, Any]]:
        raise NotImplementedError

    @abstractmethod
    async def set(self, collection: str, doc_id: str, data: Dict[str, Any], merge: bool = False) -> None:
        raise NotImplementedError

    @abstractmethod
    async def update(self, collection: str, doc_id: str, data: Dict[str, Any]) -> bool:
        raise NotImplementedError

    @abstractmethod
    async def delete(self, collection: str, doc_id: str) -> bool:
        raise NotImplementedError

    @abstractmethod
    async def list(
        self,
        collection: str,
        filters: Sequence[Filter] = (),
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        raise NotImplementedError


class MemoryStore(DocumentStore):
    """Process-local store. Used when Firestore is unavailable, and in tests."""

    name = "memory"

    def __init__(self, durable: bool = False):
        self.durable = durable
        self._collections: Dict[str, Dict[str, Dict[str, Any]]] = {}

    def _collection(self, collection: str) -> Dict[str, Dict[str, Any]]:
        return self._collections.setdefault(collection, {})

    @staticmethod
    def _with_id(doc_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        doc = copy.deepcopy(data)
        doc["id"] = doc_id
        return doc

    async def create(self, collection, data, doc_id=None):
        doc_id = doc_id or uuid.uuid4().hex[:20]
        self._collection(collection)[doc_id] = copy.deepcopy(data)
        return doc_id

    async def get(self, collection, doc_id):
        data = self._collection(collection).get(doc_id)
        if data is None:
            return None
        return self._with_id(doc_id, data)

    async def set(self, collection, doc_id, data, merge=False):
        docs = self._collection(collection)
        if merge and doc_id in docs:
            docs[doc_id].update(copy.deepcopy(data))
        else:
            docs[doc_id] = copy.deepcopy(data)

    async def update(self, collection, doc_id, data):
        docs = self._collection(collection)
        if doc_id not in docs:
            return False
        docs[doc_id].update(copy.deepcopy(data))
        return True

    async def delete(self, collection, doc_id):
        return self._collection(collection).pop(doc_id, None) is not None

    async def list(self, collection, filters=(), order_by=None, descending=False, limit=None):
        docs = [
            self._with_id(doc_id, data)
            for doc_id, data in self._collection(collection).items()
            if all(data.get(field) == value for field, value in filters)
        ]
        if order_by:
            docs.sort(key=lambda d: (d.get(order_by) is None, d.get(order_by) or ""), reverse=descending)
        if limit is not None:
            docs = docs[:limit]
        return docs


class FirestoreStore(DocumentStore):
    """Firestore-backed store using the async client."""

    durable = True
    name = "firestore"

    def __init__(self, db):
        self.db = db

    def _ref(self, collection: str):
        return self.db.collection(collection)

    async def create(self, collection, data, doc_id=None):
        doc_ref = self._ref(collection).document(doc_id) if doc_id else self._ref(collection).document()
        await doc_ref.set(data)
        return doc_ref.id

    async def get(self, collection, doc_id):
        doc = await self._ref(collection).document(doc_id).get()
        if not doc.exists:
            return None
        data = doc.to_dict()
        data["id"] = doc.id
        return data

    async def set(self, collection, doc_id, data, merge=False):
        await self._ref(collection).document(doc_id).set(data, merge=merge)

    async def update(self, collection, doc_id, data):
        doc_ref = self._ref(collection).document(doc_id)
        snapshot = await doc_ref.get()
        if not snapshot.exists:
            return False
        await doc_ref.update(data)
        return True

    async def delete(self, collection, doc_id):
        doc_ref = self._ref(collection).document(doc_id)
        snapshot = await doc_ref.get()
        if not snapshot.exists:
            return False
        await doc_ref.delete()
        return True

    async def list(self, collection, filters=(), order_by=None, descending=False, limit=None):
        query = self._ref(collection)
        for field, value in filters:
            query = query.where(filter=FieldFilter(field, "==", value))

        # Equality filters plus ordering would need a composite index; sort locally instead.
        if order_by and not filters:
            query = query.order_by(order_by, direction="DESCENDING" if descending else "ASCENDING")
            if limit is not None:
                query = query.limit(limit)

        docs = []
        async for doc in query.stream():
            data = doc.to_dict()
            data["id"] = doc.id
            docs.append(data)

        if filters:
            if order_by:
                docs.sort(key=lambda d: (d.get(order_by) is None, d.get(order_by) or ""), reverse=descending)
            if limit is not None:
                docs = docs[:limit]
        return docs


class Database:
    """Document store connection manager."""

    store: DocumentStore = MemoryStore()

    @classmethod
    async def connect_db(cls):
        """Connect to Firestore, or fall back to the in-memory store."""
        if firebase.initialize():
            cls.store = FirestoreStore(firebase.db)
            logger.info("Using Firestore document store")
        else:
            cls.store = MemoryStore()
            logger.warning("Firestore unavailable - bookings kept in process memory, persistence features disabled")

    @classmethod
    async def close_db(cls):
        """Drop the store reference on shutdown."""
        if isinstance(cls.store, FirestoreStore):
            logger.info("Released Firestore client")
        cls.store = MemoryStore()


async def get_store() -> DocumentStore:
    """Dependency for document store access."""
    return Database.store
