"""
Thread pool for blocking tip calls.

TipService is synchronous and the Algorand ledger blocks on algod
(suggested params, submission, confirmation wait). Route handlers await
run_blocking so the event loop keeps serving other requests meanwhile.
"""
import asyncio
import functools
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, TypeVar

from config import settings

logger = logging.getLogger(__name__)

T = TypeVar("T")


class TipExecutor:
    """Owns one ThreadPoolExecutor; created on first submit, dropped on close."""

    def __init__(self, max_workers: int):
        self.max_workers = max_workers
        self._pool: ThreadPoolExecutor | None = None

    @property
    def started(self) -> bool:
        return self._pool is not None

    def pool(self) -> ThreadPoolExecutor:
        if self._pool is None:
            self._pool = ThreadPoolExecutor(max_workers=self.max_workers, thread_name_prefix="tip_")
            logger.info(f"Tip worker pool started (max_workers={self.max_workers})")
        return self._pool

    async def run(self, func: Callable[..., T], *args: Any, **kwargs: Any) -> T:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(self.pool(), functools.partial(func, *args, **kwargs))

    def close(self) -> None:
        if self._pool is not None:
            self._pool.shutdown(wait=True)
            self._pool = None
            logger.info("Tip worker pool stopped")


executor = TipExecutor(max_workers=settings.tip_worker_threads)


async def run_blocking(func: Callable[..., T], *args: Any, **kwargs: Any) -> T:
    """Run a synchronous call on the shared tip worker pool."""
    return await executor.run(func, *args, **kwargs)


def shutdown_executor() -> None:
    executor.close()
