"""Wrap a single callable with diagnostics."""

from __future__ import annotations

import asyncio
import functools
import inspect
import itertools
import sys
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

from typing_extensions import ParamSpec

from debuk.aggregator import CountAggregator, get_aggregator
from debuk.console import get_default_console
from debuk.options import Options
from debuk.templates import TEMPLATE
from debuk.utilities.logging import get_logger

logger = get_logger(__name__)

P = ParamSpec("P")
R = TypeVar("R")

_anonymous_ids = itertools.count(1)


def display_name(fn: Any) -> str:
    """Name used for a unit when no explicit name is given.

    Lambdas and callables without ``__name__`` get a label that is stable for
    the lifetime of the wrap, ``<anonymous-N>``.
    """
    name = getattr(fn, "__name__", None)
    if not isinstance(name, str) or not name or name == "<lambda>":
        return f"<anonymous-{next(_anonymous_ids)}>"
    return name


def _logged_args(args: tuple[Any, ...], kwargs: dict[str, Any]) -> list[Any]:
    logged = list(args)
    if kwargs:
        logged.append(dict(kwargs))
    return logged


def _log_when_done(backend: Any, name: str, args: list[Any], future: asyncio.Future[Any]) -> None:
    if future.cancelled() or future.exception() is not None:
        return
    backend.log(*TEMPLATE.params(name, args, future.result()))


async def _log_when_settled(backend: Any, name: str, args: list[Any], awaitable: Awaitable[Any]) -> Any:
    value = await awaitable
    backend.log(*TEMPLATE.params(name, args, value))
    return value


def wrap_unit(
    original: Callable[P, R],
    options: Options,
    name: str | None = None,
    *,
    method: bool = False,
    aggregator: CountAggregator | None = None,
) -> Callable[P, R]:
    """Return a callable that runs ``original`` surrounded by diagnostics.

    ``options`` must already be validated against its backend, see
    ``debuk.capabilities.validate``; no capability is checked per call.

    Args:
        original: The callable to instrument.
        options: Effective options for this wrap.
        name: Display name, overriding ``options.name`` and the unit's own name.
        method: The first positional argument is the receiver and is left out
            of logged params.
        aggregator: Ledger for call counts, the process-wide one by default.

    Returns:
        A replacement with the same calling contract as ``original``. The
        return value is passed through untouched, except that a coroutine
        result is wrapped in an observing coroutine when params logging waits
        for it. A coroutine function stays recognisable as one.
    """
    label = name or options.name or display_name(original)
    backend = options.backend if options.backend is not None else get_default_console()
    counts = aggregator if aggregator is not None else get_aggregator()
    # Capture flags once; options are immutable for the wrap's lifetime.
    time, profile, trace, count, params = options.time, options.profile, options.trace, options.count, options.params
    wait_for_async = options.wait_for_async

    @functools.wraps(original)
    def debuked(*args: P.args, **kwargs: P.kwargs) -> R:
        if time:
            backend.time(label)
        if profile:
            backend.profile(label)
        if trace:
            backend.trace()

        # Failures propagate as-is; open timers and profiles stay open.
        result = original(*args, **kwargs)

        if count:
            counts.record(label, backend)
        if time:
            backend.time_end(label)
        if profile:
            backend.profile_end(label)

        if params:
            logged = _logged_args(args[1:] if method else args, kwargs)
            if wait_for_async and inspect.isawaitable(result):
                if asyncio.isfuture(result):
                    result.add_done_callback(functools.partial(_log_when_done, backend, label, logged))
                    return result
                return _log_when_settled(backend, label, logged, result)  # type: ignore[return-value]
            backend.log(*TEMPLATE.params(label, logged, result))

        return result

    if inspect.iscoroutinefunction(original):
        # debuked is sync but returns the original awaitable.
        if sys.version_info >= (3, 12):
            inspect.markcoroutinefunction(debuked)
        else:
            debuked._is_coroutine = asyncio.coroutines._is_coroutine  # type: ignore[attr-defined]

    logger.debug("Wrapped %s with %s", label, ", ".join(options.enabled_features()) or "no diagnostics")
    return debuked
