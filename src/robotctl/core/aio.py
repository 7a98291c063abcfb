"""
Asyncio helpers for fan-out phases.

Adaptors and drivers may implement their lifecycle calls as coroutines or
as plain functions; these helpers treat both alike.
"""

import asyncio
import inspect
from typing import Any, Awaitable, Callable, Optional

Unit = Callable[[], Awaitable[Any]]


async def settle(result: Any) -> Any:
    """Await `result` if it is awaitable, otherwise return it as is."""
    if inspect.isawaitable(result):
        return await result
    return result


async def join(units: list[Unit]) -> tuple[Optional[Exception], list[Any]]:
    """
    Run every unit concurrently and wait for all of them.

    Units are invoked in list order. A failing unit does not cancel the
    others.

    Returns:
        (first error in completion order or None, per-unit results)
    """
    errors: list[Exception] = []

    async def run(unit: Unit) -> Any:
        try:
            return await unit()
        except Exception as e:
            errors.append(e)
            return e

    results = await asyncio.gather(*(run(unit) for unit in units))
    return (errors[0] if errors else None), list(results)
