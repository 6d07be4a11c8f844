"""Document store clients used by the benchmark."""

import asyncio
import random
from abc import ABC, abstractmethod
from typing import Any, Optional
from urllib.parse import parse_qs, urlparse

from pymongo import AsyncMongoClient
from pymongo.errors import CollectionInvalid, ConnectionFailure, OperationFailure

from idbench.config import Target

MOCK_SCHEME = "mock"


class BaseCollection(ABC):
    """A collection bound to one run, reset before use."""

    name: str

    @abstractmethod
    async def insert_many(self, documents: list[dict[str, Any]]) -> None:
        """Insert all documents in a single bulk call."""
        pass

    @abstractmethod
    async def find_one(self, filter: dict[str, Any]) -> Optional[dict[str, Any]]:
        """Return the first document matching filter, or None."""
        pass


class BaseStore(ABC):
    """Abstract base class for document stores."""

    @abstractmethod
    async def connect(self) -> None:
        """Establish the connection and verify the endpoint answers."""
        pass

    @abstractmethod
    async def reset_collection(self, name: str) -> BaseCollection:
        """Drop and recreate a collection, returning a handle to it."""
        pass

    @abstractmethod
    async def close(self) -> None:
        pass


class MongoCollection(BaseCollection):
    """Thin wrapper over a pymongo async collection."""

    def __init__(self, collection: Any):
        self._collection = collection
        self.name = collection.name

    async def insert_many(self, documents: list[dict[str, Any]]) -> None:
        await self._collection.insert_many(documents, ordered=True)

    async def find_one(self, filter: dict[str, Any]) -> Optional[dict[str, Any]]:
        return await self._collection.find_one(filter)


class MongoStore(BaseStore):
    """MongoDB (or wire-compatible, e.g. Cosmos DB) store."""

    def __init__(
        self,
        address: str,
        database: str = "id-perf",
        server_selection_timeout_ms: int = 30_000,
    ):
        self.address = address
        self.database = database
        self.server_selection_timeout_ms = server_selection_timeout_ms
        self._client: Optional[AsyncMongoClient] = None

    def _get_client(self) -> AsyncMongoClient:
        if self._client is None:
            self._client = AsyncMongoClient(
                self.address,
                uuidRepresentation="standard",
                serverSelectionTimeoutMS=self.server_selection_timeout_ms,
            )
        return self._client

    async def connect(self) -> None:
        client = self._get_client()
        # The client connects lazily; ping forces server selection and auth.
        await client.admin.command("ping")

    async def reset_collection(self, name: str) -> BaseCollection:
        db = self._get_client()[self.database]
        await db.drop_collection(name)
        try:
            collection = await db.create_collection(name)
        except CollectionInvalid:
            # Already exists.
            collection = db[name]
        return MongoCollection(collection)

    async def close(self) -> None:
        if self._client is not None:
            await self._client.close()
            self._client = None


class MockCollection(BaseCollection):
    """In-memory collection with simulated per-call latency."""

    def __init__(self, name: str, store: "MockStore"):
        self.name = name
        self._store = store
        self.documents: dict[Any, dict[str, Any]] = {}

    async def insert_many(self, documents: list[dict[str, Any]]) -> None:
        await self._store._simulate("insert")
        keys = [doc["_id"] for doc in documents]
        if len(set(keys)) != len(keys) or any(k in self.documents for k in keys):
            raise OperationFailure("E11000 duplicate key error", code=11000)
        for doc in documents:
            self.documents[doc["_id"]] = dict(doc)

    async def find_one(self, filter: dict[str, Any]) -> Optional[dict[str, Any]]:
        await self._store._simulate("find")
        self._store.find_calls += 1
        doc = self.documents.get(filter.get("_id"))
        return dict(doc) if doc is not None else None


class MockStore(BaseStore):
    """Mock store for running without a database.

    latency_ms is awaited on every insert and find call; fail_on names the
    operations ("connect", "reset", "insert", "find") that raise the
    corresponding pymongo error.
    """

    def __init__(
        self,
        latency_ms: float = 0.0,
        jitter_pct: float = 0.0,
        seed: int = 42,
        fail_on: Optional[set[str]] = None,
    ):
        self.latency_ms = latency_ms
        self.jitter_pct = jitter_pct
        self.fail_on = set(fail_on or ())
        self._rng = random.Random(seed)
        self.collections: dict[str, MockCollection] = {}
        self.connected = False
        self.closed = False
        self.find_calls = 0

    async def _simulate(self, operation: str) -> None:
        if operation in self.fail_on:
            raise OperationFailure(f"mock failure on {operation}")
        if self.latency_ms > 0:
            jitter = self._rng.uniform(0, self.jitter_pct)
            await asyncio.sleep(self.latency_ms * (1 + jitter) / 1000)

    async def connect(self) -> None:
        if "connect" in self.fail_on:
            raise ConnectionFailure("mock endpoint unreachable")
        self.connected = True

    async def reset_collection(self, name: str) -> BaseCollection:
        if "reset" in self.fail_on:
            raise OperationFailure(f"mock failure resetting {name}")
        collection = MockCollection(name, self)
        self.collections[name] = collection
        return collection

    async def close(self) -> None:
        self.closed = True

    @classmethod
    def from_address(cls, address: str) -> "MockStore":
        """Build from a mock:// address, e.g. mock://local?latency_ms=0.5."""
        params = {k: v[-1] for k, v in parse_qs(urlparse(address).query).items()}
        fail_on = {s for s in params.get("fail_on", "").split(",") if s}
        return cls(
            latency_ms=float(params.get("latency_ms", 0.0)),
            jitter_pct=float(params.get("jitter_pct", 0.0)),
            seed=int(params.get("seed", 42)),
            fail_on=fail_on,
        )


def create_store(
    target: Target,
    database: str = "id-perf",
    server_selection_timeout_ms: int = 30_000,
) -> BaseStore:
    """Pick a store implementation from the target address scheme."""
    if urlparse(target.address).scheme == MOCK_SCHEME:
        return MockStore.from_address(target.address)
    return MongoStore(
        target.address,
        database=database,
        server_selection_timeout_ms=server_selection_timeout_ms,
    )


__all__ = [
    "BaseCollection",
    "BaseStore",
    "MockStore",
    "MongoStore",
    "create_store",
]
