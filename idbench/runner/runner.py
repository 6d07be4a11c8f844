"""Sequential lookup benchmark over each target and identifier scheme."""

import random
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Optional, Sequence

from pymongo.errors import PyMongoError

from idbench.config import BenchmarkConfig, Target
from idbench.errors import (
    InsertError,
    ProvisioningError,
    RetrievalError,
    TargetConnectionError,
)
from idbench.runner.store import BaseCollection, BaseStore, create_store
from idbench.schemes import Identifier, IdentifierScheme

StoreFactory = Callable[[Target], BaseStore]


class PassState(Enum):
    IDLE = "idle"
    PROVISIONED = "provisioned"
    INSERTED = "inserted"
    SAMPLED = "sampled"
    RETRIEVING = "retrieving"
    DONE = "done"
    FAILED = "failed"


@dataclass
class ResultRow:
    """Raw latency series for one (target, scheme) pass."""

    label: str
    samples_ns: list[int] = field(default_factory=list)
    misses: int = 0

    def __len__(self) -> int:
        return len(self.samples_ns)


def row_label(target: Target, scheme: IdentifierScheme) -> str:
    return f"{target.name} {scheme.label}"


class BenchmarkRunner:
    """Runs one measurement pass per (target, scheme) pair.

    Every database call is awaited before the next one is issued, so no two
    lookups are ever in flight at the same time.
    """

    def __init__(
        self,
        config: BenchmarkConfig,
        rng: Optional[random.Random] = None,
        store_factory: Optional[StoreFactory] = None,
    ):
        self.config = config
        self.rng = rng if rng is not None else random.Random(config.seed)
        self.store_factory = store_factory or self._default_store
        self.state = PassState.IDLE
        self._store: Optional[BaseStore] = None
        self._misses = 0

    def _default_store(self, target: Target) -> BaseStore:
        return create_store(
            target,
            database=self.config.database,
            server_selection_timeout_ms=self.config.server_selection_timeout_ms,
        )

    async def provision_collection(
        self, target: Target, scheme: IdentifierScheme
    ) -> BaseCollection:
        """Connect to target and drop/recreate the configured collection."""
        store = self.store_factory(target)
        self._store = store
        try:
            await store.connect()
        except PyMongoError as e:
            raise TargetConnectionError(target.name, scheme.label, str(e)) from e

        try:
            collection = await store.reset_collection(self.config.collection)
        except PyMongoError as e:
            raise ProvisioningError(target.name, scheme.label, str(e)) from e

        self.state = PassState.PROVISIONED
        return collection

    async def insert_batch(
        self,
        collection: BaseCollection,
        scheme: IdentifierScheme,
        count: int,
        target_name: str = "",
    ) -> list[Identifier]:
        """Insert count fresh records in one bulk call, returning their ids in order."""
        if count < 1:
            raise ValueError(f"count must be >= 1, got {count}")

        documents = [scheme.new_record() for _ in range(count)]
        try:
            await collection.insert_many(documents)
        except PyMongoError as e:
            raise InsertError(target_name, scheme.label, str(e)) from e

        self.state = PassState.INSERTED
        return [doc["_id"] for doc in documents]

    def sample_identifiers(
        self, ids: Sequence[Identifier], count: int
    ) -> list[Identifier]:
        """Draw count ids uniformly at random, with replacement."""
        if not ids:
            raise ValueError("Cannot sample from an empty id pool")
        if count < 0:
            raise ValueError(f"count must be >= 0, got {count}")
        sampled = self.rng.choices(ids, k=count)
        self.state = PassState.SAMPLED
        return sampled

    async def timed_retrieve(
        self,
        collection: BaseCollection,
        doc_id: Identifier,
        target_name: str = "",
        scheme: Optional[IdentifierScheme] = None,
    ) -> int:
        """Time a single find-by-id, in nanoseconds.

        A miss is counted but still timed.
        """
        try:
            start = time.perf_counter_ns()
            document = await collection.find_one({"_id": doc_id})
            elapsed = time.perf_counter_ns() - start
        except PyMongoError as e:
            raise RetrievalError(
                target_name, scheme.label if scheme else None, str(e)
            ) from e

        if document is None:
            self._misses += 1
        return elapsed

    async def run_pass(
        self,
        target: Target,
        scheme: IdentifierScheme,
        insertion_count: int,
        retrieval_count: int,
    ) -> ResultRow:
        """Provision, insert, sample, then time retrieval_count sequential lookups."""
        label = row_label(target, scheme)
        self.state = PassState.IDLE
        self._misses = 0

        print(f"Running {scheme.label} test against {target.name}")
        try:
            collection = await self.provision_collection(target, scheme)

            print("Inserting...")
            ids = await self.insert_batch(
                collection, scheme, insertion_count, target_name=target.name
            )
            print(f"Inserted {len(ids)} documents")

            to_retrieve = self.sample_identifiers(ids, retrieval_count)

            warmup = self.config.warmup_retrievals
            if warmup > 0:
                print(f"Running {warmup} warmup lookups...")
                for doc_id in self.sample_identifiers(ids, warmup):
                    await self.timed_retrieve(collection, doc_id, target.name, scheme)
                self._misses = 0

            clock = time.get_clock_info("perf_counter")
            print(f"Timing {retrieval_count} lookups "
                  f"(perf_counter resolution {clock.resolution * 1e9:.0f} ns)")

            self.state = PassState.RETRIEVING
            samples: list[int] = []
            for doc_id in to_retrieve:
                samples.append(
                    await self.timed_retrieve(collection, doc_id, target.name, scheme)
                )
        except Exception:
            self.state = PassState.FAILED
            raise
        finally:
            await self._close_store()

        if self._misses:
            print(f"WARNING: {self._misses}/{retrieval_count} lookups found no document "
                  f"for {label}")

        self.state = PassState.DONE
        return ResultRow(label=label, samples_ns=samples, misses=self._misses)

    async def _close_store(self) -> None:
        if self._store is not None:
            store, self._store = self._store, None
            await store.close()

    async def run(self) -> list[ResultRow]:
        """Run every configured scheme against every target, in order."""
        retrieval_count = self.config.retrieval_count
        assert retrieval_count is not None

        rows: list[ResultRow] = []
        for target in self.config.targets:
            for scheme in self.config.schemes:
                row = await self.run_pass(
                    target,
                    scheme,
                    self.config.insertion_count,
                    retrieval_count,
                )
                rows.append(row)
        return rows
