"""Bridge from the synchronous pipeline into plugin coroutines"""

import asyncio
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Coroutine, TypeVar

T = TypeVar('T')


def run_async(coro: Coroutine[Any, Any, T]) -> T:
    """Run a coroutine to completion and return its result

    When called from inside a running event loop the coroutine gets a
    fresh loop on a worker thread, since asyncio.run() refuses to nest.
    """
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return asyncio.run(coro)

    with ThreadPoolExecutor(max_workers=1) as pool:
        return pool.submit(asyncio.run, coro).result()
