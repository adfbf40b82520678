import asyncio
import enum
import logging
from typing import Awaitable, Callable, List, Optional, Sequence

import httpx

from app.core.config import settings
from app.core.errors import RequestError
from app.fetch.base import Deadline, FetchFailure, FetchResult
from app.fetch.worker import fetch

logger = logging.getLogger(__name__)

class BatchState(str, enum.Enum):
    PENDING = "pending"
    COLLECTING = "collecting"
    COMPLETE = "complete"

class Batch:
    """One fan-out: a pre-sized slot per URL, filled as workers finish."""

    def __init__(self, urls: Sequence[str]):
        self.urls = list(urls)
        self.slots: List[Optional[FetchResult]] = [None] * len(self.urls)
        self.completed = 0
        self.state = BatchState.PENDING

    def record(self, index: int, result: FetchResult) -> None:
        self.slots[index] = result
        self.completed += 1
        previous = self.state
        if self.completed == len(self.slots):
            self.state = BatchState.COMPLETE
        else:
            self.state = BatchState.COLLECTING
        if self.state is not previous:
            logger.debug(f"BATCH {previous.value} -> {self.state.value} ({self.completed}/{len(self.slots)})")

    @property
    def results(self) -> List[FetchResult]:
        if self.state is not BatchState.COMPLETE:
            raise RuntimeError(f"Batch is still {self.state.value} ({self.completed}/{len(self.slots)})")
        return list(self.slots)

async def dispatch(
    urls: Sequence[str],
    client: httpx.AsyncClient,
    timeout: Optional[float] = None,
    until_disconnected: Optional[Callable[[], Awaitable[None]]] = None,
) -> List[FetchResult]:
    """
    Fetch every URL concurrently and return one result per URL, in input order.

    1. Reject an empty batch before anything is started
    2. Create one Deadline shared by all workers
    3. Start one worker per URL, no pool limit
    4. Wait for all of them; failures never abort the batch

    `until_disconnected` completes when the caller goes away; the batch is then
    cancelled and every unfinished URL reports a cancellation error.
    """
    if not urls:
        raise RequestError("No URLs provided")

    if timeout is None:
        timeout = settings.FETCH_TIMEOUT_SECONDS

    batch = Batch(urls)
    deadline = Deadline(timeout)
    logger.info(f"DISPATCH {len(batch.urls)} URLs, timeout {timeout:g}s")

    watcher = None
    if until_disconnected is not None:
        watcher = asyncio.create_task(_cancel_on_disconnect(until_disconnected, deadline))

    async def run_slot(index: int, url: str) -> None:
        batch.record(index, await fetch(client, url, deadline))

    try:
        await asyncio.gather(*(run_slot(i, url) for i, url in enumerate(batch.urls)))
    finally:
        if watcher is not None:
            await _stop_watcher(watcher)
        deadline.release()

    results = batch.results
    failed = sum(1 for r in results if isinstance(r, FetchFailure))
    logger.info(f"BATCH COMPLETE: {len(results) - failed} ok, {failed} failed")
    return results

async def _cancel_on_disconnect(until_disconnected: Callable[[], Awaitable[None]], deadline: Deadline) -> None:
    await until_disconnected()
    logger.info("Caller disconnected, cancelling batch")
    deadline.cancel("client disconnected")

async def _stop_watcher(watcher: asyncio.Task) -> None:
    watcher.cancel()
    try:
        await watcher
    except asyncio.CancelledError:
        if asyncio.current_task().cancelling():
            raise
    except Exception:
        # results are already collected
        logger.exception("Disconnect watcher failed")
