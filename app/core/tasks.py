# ============================================================================
# FILE: app/core/tasks.py
# Fire-and-forget side effects: spawned, never awaited by the caller,
# failures only show up in the log
# ============================================================================
import asyncio
import inspect
import logging
from typing import Callable, Set
from fastapi.concurrency import run_in_threadpool

logger = logging.getLogger(__name__)

# Strong references so pending tasks are not garbage collected mid-flight
_pending: Set[asyncio.Task] = set()


async def _run_logged(name: str, func: Callable, args: tuple, kwargs: dict) -> None:
    try:
        if inspect.iscoroutinefunction(func):
            await func(*args, **kwargs)
        else:
            await run_in_threadpool(func, *args, **kwargs)
    except Exception as e:
        logger.error(f"Background task '{name}' failed: {e}")


def spawn_logged(func: Callable, *args, name: str = None, **kwargs) -> asyncio.Task:
    """
    Schedule func(*args, **kwargs) on the running loop and return at once.
    Sync callables run in the threadpool. Exceptions are logged and swallowed.
    """
    task_name = name or getattr(func, "__name__", "task")
    task = asyncio.get_running_loop().create_task(_run_logged(task_name, func, args, kwargs))
    _pending.add(task)
    task.add_done_callback(_pending.discard)
    return task


def pending_count() -> int:
    return len(_pending)


async def drain(timeout: float = 5.0) -> None:
    """Wait for outstanding background tasks, used on shutdown"""
    if not _pending:
        return
    logger.info(f"Waiting for {len(_pending)} background task(s)")
    done, not_done = await asyncio.wait(set(_pending), timeout=timeout)
    for task in not_done:
        task.cancel()
    if not_done:
        logger.warning(f"Cancelled {len(not_done)} background task(s) still running at shutdown")
