# database/store.py
"""
Document-collection store used by every router.

The booking core only needs list/get/put/patch/delete over named collections.
MongoCollectionStore backs it with Motor; InMemoryCollectionStore is the demo
mode used when no database is configured, and by the tests.
"""

import copy
import logging
import uuid
from typing import Dict, List, Optional

from pymongo.errors import PyMongoError

from core.exceptions import StoreUnavailableError

logger = logging.getLogger(__name__)


def new_document_id() -> str:
    return uuid.uuid4().hex


def _matches(document: dict, filter: Optional[dict]) -> bool:
    return all(document.get(key) == value for key, value in (filter or {}).items())


class CollectionStore:
    async def list(self, collection: str, filter: Optional[dict] = None) -> List[dict]:
        raise NotImplementedError

    async def get(self, collection: str, id: str) -> Optional[dict]:
        raise NotImplementedError

    async def put(self, collection: str, id: str, document: dict) -> dict:
        raise NotImplementedError

    async def patch(self, collection: str, id: str, fields: dict) -> Optional[dict]:
        raise NotImplementedError

    async def delete(self, collection: str, id: str) -> bool:
        raise NotImplementedError

    def close(self) -> None:
        pass


class InMemoryCollectionStore(CollectionStore):
    """Process-local store; nothing survives a restart."""

    def __init__(self, data: Optional[Dict[str, Dict[str, dict]]] = None):
        self._collections: Dict[str, Dict[str, dict]] = copy.deepcopy(data) if data else {}

    def _collection(self, name: str) -> Dict[str, dict]:
        return self._collections.setdefault(name, {})

    async def list(self, collection, filter=None):
        return [
            {**copy.deepcopy(doc), "id": doc_id}
            for doc_id, doc in self._collection(collection).items()
            if _matches(doc, filter)
        ]

    async def get(self, collection, id):
        doc = self._collection(collection).get(id)
        return {**copy.deepcopy(doc), "id": id} if doc is not None else None

    async def put(self, collection, id, document):
        stored = copy.deepcopy(document)
        stored.pop("id", None)
        self._collection(collection)[id] = stored
        return {**copy.deepcopy(stored), "id": id}

    async def patch(self, collection, id, fields):
        doc = self._collection(collection).get(id)
        if doc is None:
            return None
        doc.update(copy.deepcopy(fields))
        return {**copy.deepcopy(doc), "id": id}

    async def delete(self, collection, id):
        return self._collection(collection).pop(id, None) is not None


class MongoCollectionStore(CollectionStore):
    """Documents keyed by a string ``_id``, exposed to callers as ``id``."""

    def __init__(self, client, db):
        self.client = client
        self.db = db

    @staticmethod
    def _out(doc: Optional[dict]) -> Optional[dict]:
        if doc is None:
            return None
        doc["id"] = str(doc.pop("_id"))
        return doc

    async def list(self, collection, filter=None):
        try:
            docs = await self.db[collection].find(filter or {}).to_list(length=None)
        except PyMongoError as e:
            logger.error(f"Failed to list {collection}: {e}")
            raise StoreUnavailableError()
        return [self._out(doc) for doc in docs]

    async def get(self, collection, id):
        try:
            doc = await self.db[collection].find_one({"_id": id})
        except PyMongoError as e:
            logger.error(f"Failed to read {collection}/{id}: {e}")
            raise StoreUnavailableError()
        return self._out(doc)

    async def put(self, collection, id, document):
        body = {key: value for key, value in document.items() if key not in ("id", "_id")}
        try:
            await self.db[collection].replace_one({"_id": id}, body, upsert=True)
        except PyMongoError as e:
            logger.error(f"Failed to write {collection}/{id}: {e}")
            raise StoreUnavailableError()
        return {**body, "id": id}

    async def patch(self, collection, id, fields):
        try:
            doc = await self.db[collection].find_one_and_update(
                {"_id": id},
                {"$set": fields},
                return_document=True,
            )
        except PyMongoError as e:
            logger.error(f"Failed to update {collection}/{id}: {e}")
            raise StoreUnavailableError()
        return self._out(doc)

    async def delete(self, collection, id):
        try:
            result = await self.db[collection].delete_one({"_id": id})
        except PyMongoError as e:
            logger.error(f"Failed to delete {collection}/{id}: {e}")
            raise StoreUnavailableError()
        return result.deleted_count > 0

    def close(self):
        self.client.close()
