# docplane/db/store.py
"""
Document store surface used by the override engine and the migration runner.

The runner's lock correctness depends entirely on `upsert_on_insert` being
atomic under concurrent callers.
"""
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from pymongo import ReturnDocument


class DocumentStore(ABC):
    """Minimal async store: atomic insert-if-absent, point lookup, bulk read, delete."""

    @abstractmethod
    async def upsert_on_insert(self, doc_id: str, values: Dict[str, Any]) -> Dict[str, Any]:
        """
        Insert {_id: doc_id, **values} if absent and return the stored document.
        An existing document is returned unchanged.
        """

    @abstractmethod
    async def find_by_id(self, doc_id: str) -> Optional[Dict[str, Any]]:
        ...

    @abstractmethod
    async def find(self, query: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        ...

    @abstractmethod
    async def save(self, doc: Dict[str, Any]) -> None:
        """Insert or replace by _id."""

    @abstractmethod
    async def delete_by_id(self, doc_id: str) -> None:
        ...


class MotorDocumentStore(DocumentStore):
    """DocumentStore over a motor collection."""

    def __init__(self, collection: Any):
        self.collection = collection

    @classmethod
    def for_model(cls, model: Any) -> "MotorDocumentStore":
        """Build a store over a beanie document's collection (requires init_beanie)."""
        return cls(model.get_motor_collection())

    async def upsert_on_insert(self, doc_id: str, values: Dict[str, Any]) -> Dict[str, Any]:
        return await self.collection.find_one_and_update(
            {"_id": doc_id},
            {"$setOnInsert": values},
            upsert=True,
            return_document=ReturnDocument.AFTER,
        )

    async def find_by_id(self, doc_id: str) -> Optional[Dict[str, Any]]:
        return await self.collection.find_one({"_id": doc_id})

    async def find(self, query: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        cursor = self.collection.find(query or {})
        return await cursor.to_list(length=None)

    async def save(self, doc: Dict[str, Any]) -> None:
        await self.collection.replace_one({"_id": doc["_id"]}, doc, upsert=True)

    async def delete_by_id(self, doc_id: str) -> None:
        await self.collection.delete_one({"_id": doc_id})
