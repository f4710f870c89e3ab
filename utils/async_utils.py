import asyncio
import functools
import random
from typing import Any, Awaitable, Callable, Coroutine, Iterator

from utils.logger_utils import get_logger

logger = get_logger("Async Utils")


def backoff_delays(max_retries: int, initial_delay: float, backoff_factor: float, jitter: float) -> Iterator[float]:
    """Waits before each retry: ``initial_delay * backoff_factor**n`` plus up to ``jitter`` seconds."""
    delay = initial_delay
    for _ in range(max_retries):
        yield delay + (random.uniform(0, jitter) if jitter else 0)
        delay *= backoff_factor


def async_retry(
    max_retries: int = 3,
    initial_delay: float = 1.0,
    backoff_factor: float = 2.0,
    jitter: float = 0.0,
    exceptions: tuple = (asyncio.TimeoutError,),
):
    """
    Retries an async function when it raises one of ``exceptions``. Anything
    else propagates on the first attempt, and the last failure is re-raised
    once ``max_retries`` is exhausted.
    """

    def decorator(func: Callable[..., Awaitable[Any]]) -> Callable[..., Awaitable[Any]]:
        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            delays = backoff_delays(max_retries, initial_delay, backoff_factor, jitter)
            attempt = 0
            while True:
                attempt += 1
                try:
                    return await func(*args, **kwargs)
                except exceptions as e:
                    wait = next(delays, None)
                    if wait is None:
                        logger.error(f"{func.__name__} failed after {max_retries} retries: {e}")
                        raise
                    logger.warning(f"{func.__name__} failed ({e}), retry {attempt}/{max_retries} in {wait:.2f}s")
                    await asyncio.sleep(wait)

        return wrapper

    return decorator


async def gather_with_concurrency(n: int, *tasks: Coroutine[Any, Any, Any]) -> list[Any]:
    """
    Runs the coroutines concurrently, at most ``n`` at a time.
    Results keep the order of ``tasks``.
    """
    semaphore = asyncio.Semaphore(n)

    async def bounded(task: Coroutine[Any, Any, Any]) -> Any:
        async with semaphore:
            return await task

    return await asyncio.gather(*(bounded(task) for task in tasks))
