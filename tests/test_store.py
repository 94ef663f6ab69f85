"""
Tests — In-memory document store
"""

import asyncio

from database.store import InMemoryCollectionStore, MongoCollectionStore


def run(coro):
    return asyncio.run(coro)


class TestInMemoryStore:
    def test_put_and_get(self):
        store = InMemoryCollectionStore()
        run(store.put("mountains", "everest", {"id": "ignored", "name": "Everest"}))
        assert run(store.get("mountains", "everest")) == {"name": "Everest", "id": "everest"}
        assert run(store.get("mountains", "k2")) is None

    def test_documents_are_copies(self):
        store = InMemoryCollectionStore({"bookings": {"b1": {"status": "pending", "tags": []}}})
        doc = run(store.get("bookings", "b1"))
        doc["tags"].append("edited")
        assert run(store.get("bookings", "b1"))["tags"] == []

    def test_list_with_filter(self):
        store = InMemoryCollectionStore({"admins": {
            "a1": {"email": "one@example.com"},
            "a2": {"email": "two@example.com"},
        }})
        assert [d["id"] for d in run(store.list("admins", {"email": "two@example.com"}))] == ["a2"]
        assert len(run(store.list("admins"))) == 2
        assert run(store.list("empty")) == []

    def test_patch_merges_fields(self):
        store = InMemoryCollectionStore({"bookings": {"b1": {"status": "pending", "amount": 10}}})
        doc = run(store.patch("bookings", "b1", {"status": "confirmed"}))
        assert doc == {"status": "confirmed", "amount": 10, "id": "b1"}
        assert run(store.patch("bookings", "missing", {"status": "confirmed"})) is None

    def test_delete(self):
        store = InMemoryCollectionStore({"bookings": {"b1": {}}})
        assert run(store.delete("bookings", "b1")) is True
        assert run(store.delete("bookings", "b1")) is False


class _Cursor:
    def __init__(self, docs):
        self.docs = docs
        self.length = "unset"

    async def to_list(self, length):
        self.length = length
        return self.docs if length is None else self.docs[:length]


class _Collection:
    def __init__(self, docs):
        self.cursor = _Cursor(docs)

    def find(self, filter):
        return self.cursor


class TestMongoStore:
    def test_list_reads_the_whole_collection(self):
        bookings = _Collection([{"_id": f"b{i}", "amount": i} for i in range(10001)])
        store = MongoCollectionStore(client=None, db={"bookings": bookings})
        docs = run(store.list("bookings"))
        assert bookings.cursor.length is None
        assert len(docs) == 10001
        assert docs[-1] == {"amount": 10000, "id": "b10000"}
