import asyncio
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import AsyncIterator, Optional, Set, Union

@dataclass(frozen=True)
class FetchSuccess:
    url: str
    data: str

@dataclass(frozen=True)
class FetchFailure:
    url: str
    error: str

    def __post_init__(self):
        if not self.error:
            raise ValueError("FetchFailure requires a non-empty error")

FetchResult = Union[FetchSuccess, FetchFailure]

class Deadline:
    """
    Shared cutoff for one batch of fetches.

    Every worker enters `scope()`; when the cutoff passes, or `cancel()` is
    called, all open scopes raise TimeoutError at once.
    """

    def __init__(self, timeout: float):
        self._loop = asyncio.get_running_loop()
        self.timeout = timeout
        self.when = self._loop.time() + timeout
        self.cancel_reason: Optional[str] = None
        self._scopes: Set[asyncio.Timeout] = set()

    @property
    def cancelled(self) -> bool:
        return self.cancel_reason is not None

    def remaining(self) -> float:
        if self.cancelled:
            return 0.0
        return max(0.0, self.when - self._loop.time())

    @asynccontextmanager
    async def scope(self) -> AsyncIterator[asyncio.Timeout]:
        when = self._loop.time() if self.cancelled else self.when
        async with asyncio.timeout_at(when) as timeout:
            self._scopes.add(timeout)
            try:
                yield timeout
            finally:
                self._scopes.discard(timeout)

    def cancel(self, reason: str = "batch cancelled") -> None:
        if self.cancelled:
            return
        self.cancel_reason = reason
        now = self._loop.time()
        for timeout in list(self._scopes):
            # already firing
            if not timeout.expired():
                timeout.reschedule(now)

    def release(self) -> None:
        self._scopes.clear()

    def describe(self) -> str:
        if self.cancelled:
            return f"context canceled: {self.cancel_reason}"
        return f"context deadline exceeded (timeout {self.timeout:g}s)"
