from types import SimpleNamespace
from typing import Any, Dict, List

import httpx
import pytest
import pytest_asyncio
from bson import ObjectId

from backend.api.app import app
import backend.api.services.cliente_service as cliente_service


def _matches(doc: Dict[str, Any], query: Dict[str, Any]) -> bool:
    for key, expected in query.items():
        value = doc.get(key)
        if isinstance(expected, dict) and "$ne" in expected:
            if value == expected["$ne"]:
                return False
        elif value != expected:
            return False
    return True


class FakeCursor:
    def __init__(self, docs: List[Dict[str, Any]]):
        self._docs = docs

    def sort(self, key: str, direction: int):
        self._docs = sorted(self._docs, key=lambda d: d.get(key), reverse=direction < 0)
        return self

    def skip(self, n: int):
        self._docs = self._docs[n:]
        return self

    def limit(self, n: int):
        self._docs = self._docs[:n]
        return self

    def __aiter__(self):
        self._iter = iter(self._docs)
        return self

    async def __anext__(self):
        try:
            return next(self._iter)
        except StopIteration:
            raise StopAsyncIteration


class FakeCollection:
    """Subconjunto da API do motor usado pelo ClienteService, em memória."""

    def __init__(self):
        self.docs: List[Dict[str, Any]] = []

    async def count_documents(self, query: Dict[str, Any]) -> int:
        return len([d for d in self.docs if _matches(d, query)])

    def find(self, query: Dict[str, Any]) -> FakeCursor:
        return FakeCursor([dict(d) for d in self.docs if _matches(d, query)])

    async def find_one(self, query: Dict[str, Any]):
        return next((dict(d) for d in self.docs if _matches(d, query)), None)

    async def insert_one(self, doc: Dict[str, Any]):
        stored = dict(doc)
        stored["_id"] = ObjectId()
        self.docs.append(stored)
        return SimpleNamespace(inserted_id=stored["_id"])

    async def update_one(self, query: Dict[str, Any], update: Dict[str, Any]):
        for d in self.docs:
            if _matches(d, query):
                d.update(update.get("$set", {}))
                return SimpleNamespace(matched_count=1, modified_count=1)
        return SimpleNamespace(matched_count=0, modified_count=0)

    async def delete_one(self, query: Dict[str, Any]):
        for i, d in enumerate(self.docs):
            if _matches(d, query):
                del self.docs[i]
                return SimpleNamespace(deleted_count=1)
        return SimpleNamespace(deleted_count=0)


@pytest.fixture
def clientes_collection(monkeypatch) -> FakeCollection:
    coll = FakeCollection()
    monkeypatch.setattr(cliente_service, "get_clientes_collection", lambda: coll)
    return coll


@pytest_asyncio.fixture
async def api_client(clientes_collection):
    # ASGITransport não dispara os eventos de startup: nenhuma conexão real com o MongoDB
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
