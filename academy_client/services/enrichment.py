"""Fan-out/fan-in second pass that fills details a list response omits."""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Generic, List, Optional, Sequence, TypeVar

from academy_client.utils.barrier import Countdown
from academy_client.utils.errors import PartialFailure


logger = logging.getLogger(__name__)

T = TypeVar("T")
V = TypeVar("V")

PENDING = "pending"
RESOLVED = "value"
FAILED = "failed"


@dataclass
class EnrichmentTask:
    target_index: int
    lookup_key: str
    result: str = PENDING
    value: Any = None
    failure: Optional[PartialFailure] = None


class EnrichmentCoordinator(Generic[V]):
    """Runs one lookup per item concurrently and completes once all have settled.

    A failed lookup leaves its item untouched; it never fails the batch.
    """

    def __init__(self, lookup: Callable[[str], Awaitable[V]]) -> None:
        self._lookup = lookup
        self._background: set = set()
        self.last_tasks: List[EnrichmentTask] = []

    async def run(
        self,
        items: Sequence[T],
        key: Callable[[T], str],
        apply: Callable[[T, V], T],
    ) -> List[T]:
        snapshot = list(items)
        tasks = [EnrichmentTask(index, key(item)) for index, item in enumerate(snapshot)]
        self.last_tasks = tasks
        done: asyncio.Future = asyncio.get_running_loop().create_future()

        def _complete() -> None:
            if not done.done():
                done.set_result(snapshot)

        barrier = Countdown(len(tasks), _complete)

        pending = [asyncio.ensure_future(self._settle(task, snapshot, apply, barrier)) for task in tasks]
        try:
            result = await done
        finally:
            for future in pending:
                if not future.done():
                    future.cancel()

        failed = sum(1 for task in tasks if task.result == FAILED)
        logger.debug("enrichment settled: %d resolved, %d failed", len(tasks) - failed, failed)
        return list(result)

    async def _settle(
        self,
        task: EnrichmentTask,
        snapshot: List[T],
        apply: Callable[[T, V], T],
        barrier: Countdown,
    ) -> None:
        try:
            value = await self._lookup(task.lookup_key)
        except asyncio.CancelledError:
            task.result = FAILED
            task.failure = PartialFailure(task.lookup_key, asyncio.CancelledError())
            raise
        except Exception as exc:
            task.result = FAILED
            task.failure = PartialFailure(task.lookup_key, exc)
            logger.warning("%s", task.failure)
        else:
            task.result = RESOLVED
            task.value = value
            snapshot[task.target_index] = apply(snapshot[task.target_index], value)
        finally:
            barrier.arrive()

    def start(
        self,
        items: Sequence[T],
        key: Callable[[T], str],
        apply: Callable[[T, V], T],
        on_complete: Callable[[List[T]], None],
    ) -> "asyncio.Task[None]":
        """Run in the background and hand the combined result to ``on_complete``."""

        async def _run() -> None:
            result = await self.run(items, key, apply)
            on_complete(result)

        task = asyncio.ensure_future(_run())
        self._background.add(task)
        task.add_done_callback(self._background.discard)
        return task
