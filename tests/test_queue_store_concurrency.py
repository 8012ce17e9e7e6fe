"""Concurrency tests for the persistent queue store."""

import asyncio
import random
from concurrent.futures import ThreadPoolExecutor

import pytest

from src.c2_queue_store import PersistentQueueStore


class TestConcurrentTasks:
    """Many asyncio tasks sharing one store."""

    @pytest.mark.asyncio
    async def test_concurrent_enqueues_lose_nothing(self, store, storage_path):
        payloads = [f"task-{i}" for i in range(100)]

        results = await asyncio.gather(*(store.enqueue(p) for p in payloads))

        assert (await store.status()).count == 100
        assert sorted(r.position for r in results) == list(range(1, 101))
        assert len({r.item.id for r in results}) == 100

        # Disk converges on the final state
        restarted = PersistentQueueStore(storage_path)
        assert sorted(i.payload for i in restarted.snapshot()) == sorted(payloads)

    @pytest.mark.asyncio
    async def test_concurrent_dequeues_fewer_items_than_callers(self, store):
        """K items, N > K racing dequeuers: K distinct items, N-K Nones."""
        for payload in ["a", "b", "c"]:
            await store.enqueue(payload)

        results = await asyncio.gather(*(store.dequeue() for _ in range(10)))

        items = [r for r in results if r is not None]
        assert len(items) == 3
        assert sorted(i.payload for i in items) == ["a", "b", "c"]
        assert results.count(None) == 7
        assert (await store.status()).is_empty

    @pytest.mark.asyncio
    async def test_mixed_interleaving_keeps_count(self, store, storage_path):
        """count == enqueued - successfully dequeued, whatever the interleaving."""
        rng = random.Random(1234)
        ops = [rng.choice(["enqueue", "dequeue"]) for _ in range(200)]

        async def run(op, i):
            if op == "enqueue":
                await store.enqueue(f"item-{i}")
                return "enqueued"
            item = await store.dequeue()
            return "dequeued" if item is not None else "empty"

        outcomes = await asyncio.gather(*(run(op, i) for i, op in enumerate(ops)))

        expected = outcomes.count("enqueued") - outcomes.count("dequeued")
        assert (await store.status()).count == expected
        assert (await PersistentQueueStore(storage_path).status()).count == expected

    @pytest.mark.asyncio
    async def test_dequeues_during_enqueues_stay_fifo(self, store):
        """Items already present are dequeued before ones enqueued later."""
        for i in range(5):
            await store.enqueue(f"early-{i}")

        late = [store.enqueue(f"late-{i}") for i in range(5)]
        drains = [store.dequeue() for _ in range(5)]
        results = await asyncio.gather(*drains, *late)

        drained = [item.payload for item in results[:5]]
        assert drained == [f"early-{i}" for i in range(5)]


class TestConcurrentThreads:
    """Callers on separate OS threads, each with its own event loop."""

    def test_threaded_enqueue_and_dequeue(self, storage_path):
        store = PersistentQueueStore(storage_path)
        payloads = [f"thread-{i}" for i in range(80)]

        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(pool.map(lambda p: asyncio.run(store.enqueue(p)), payloads))

        assert len({r.item.id for r in results}) == 80
        assert asyncio.run(store.status()).count == 80

        with ThreadPoolExecutor(max_workers=8) as pool:
            items = list(pool.map(lambda _: asyncio.run(store.dequeue()), range(100)))

        received = [i for i in items if i is not None]
        assert len(received) == 80
        assert len({i.id for i in received}) == 80
        assert sorted(i.payload for i in received) == sorted(payloads)
        assert asyncio.run(store.status()).is_empty

        assert PersistentQueueStore(storage_path).snapshot() == []

    def test_threaded_enqueues_preserve_per_thread_order(self, storage_path):
        """Each producer's own items come out in the order it added them."""
        store = PersistentQueueStore(storage_path)

        def produce(worker):
            async def run():
                for n in range(10):
                    await store.enqueue(f"{worker}:{n}")
            asyncio.run(run())

        with ThreadPoolExecutor(max_workers=4) as pool:
            list(pool.map(produce, range(4)))

        restored = PersistentQueueStore(storage_path).snapshot()
        assert [i.payload for i in restored] == [i.payload for i in store.snapshot()]
        for worker in range(4):
            seen = [int(i.payload.split(":")[1]) for i in restored if i.payload.startswith(f"{worker}:")]
            assert seen == list(range(10))
