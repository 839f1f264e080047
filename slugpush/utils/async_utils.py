# slugpush/utils/async_utils.py
"""Asynchronous operation utilities"""

import asyncio
from typing import Any, Awaitable, Callable, Coroutine, Iterable, List, TypeVar

T = TypeVar('T')


def run_async(coro: Coroutine[Any, Any, T]) -> T:
    """
    Run async coroutine in sync context

    Args:
        coro: Coroutine to run

    Returns:
        Coroutine result
    """
    loop = None
    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:
        # No running loop
        pass

    if loop and loop.is_running():
        # Already in async context, create new thread
        import threading

        result = None
        exception = None

        def run_in_thread():
            nonlocal result, exception
            try:
                result = asyncio.run(coro)
            except BaseException as e:
                exception = e

        thread = threading.Thread(target=run_in_thread)
        thread.start()
        thread.join()

        if exception:
            raise exception
        return result
    else:
        # No running loop, use asyncio.run
        return asyncio.run(coro)


async def run_bounded(items: Iterable[Any],
                      processor: Callable[[Any], Awaitable[T]],
                      max_workers: int = 4) -> List[T]:
    """
    Process items concurrently with at most max_workers in flight

    The first failure cancels every task that has not finished yet and is
    re-raised. Results are returned in input order.

    Args:
        items: Items to process
        processor: Async processor function
        max_workers: Concurrency limit

    Returns:
        List of results
    """
    semaphore = asyncio.Semaphore(max(1, max_workers))
    failed = False

    async def wrapped(item):
        nonlocal failed
        async with semaphore:
            # Nothing new starts once an item has failed
            if failed:
                raise asyncio.CancelledError()
            try:
                return await processor(item)
            except BaseException:
                failed = True
                raise

    tasks = [asyncio.ensure_future(wrapped(item)) for item in items]
    if not tasks:
        return []

    try:
        done, pending = await asyncio.wait(tasks, return_when=asyncio.FIRST_EXCEPTION)
    except asyncio.CancelledError:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise

    if pending:
        for task in pending:
            task.cancel()
        await asyncio.gather(*pending, return_exceptions=True)

    # Surface the first failure in input order
    for task in tasks:
        if task.done() and not task.cancelled() and task.exception() is not None:
            raise task.exception()

    return [task.result() for task in tasks]

