"""The ``debuk`` entry point and decorator."""

from __future__ import annotations

import inspect
from collections.abc import Callable, Mapping
from typing import Any, TypeVar, overload

from debuk.blueprint import wrap_blueprint
from debuk.capabilities import emit_warnings, validate
from debuk.options import Options, get_settings, resolve_options
from debuk.utilities.logging import get_logger
from debuk.wrapper import wrap_unit

logger = get_logger(__name__)

T = TypeVar("T", bound=Callable[..., Any])

OptionsArg = Options | Mapping[str, Any]


def instrument(target: T, options: Options) -> T:
    """Validate ``options`` against their console once, then wrap ``target``.

    Classes get an instrumented constructor and methods; any other callable is
    wrapped as a single unit.
    """
    validation = validate(options)
    emit_warnings(validation.effective.backend, validation.warnings)
    if inspect.isclass(target):
        return wrap_blueprint(target, validation.effective)  # type: ignore[return-value]
    if callable(target):
        return wrap_unit(target, validation.effective)
    raise TypeError(f"debuk can only wrap callables and classes, not {type(target).__name__}")


@overload
def debuk(target: T, options: OptionsArg | None = None, /, **overrides: Any) -> T: ...


@overload
def debuk(target: OptionsArg | None = None, /, **overrides: Any) -> Callable[[T], T]: ...


def debuk(target: Any = None, options: OptionsArg | None = None, /, **overrides: Any) -> Any:
    """Instrument a function or class with diagnostics.

    Can be called directly (``debuk(fn)``, ``debuk(fn, {"time": True})``,
    ``debuk(fn, time=True)``) or used as a decorator, bare (``@debuk``) or
    with options (``@debuk()``, ``@debuk({"params": True})``,
    ``@debuk(Options(params=True))``, ``@debuk(params=True)``).

    Example:
        @debuk(time=True, params=True)
        def add(a: int, b: int) -> int:
            return a + b

    Recognized options are the fields of ``debuk.options.Options``. Unset
    options take their defaults from ``DEBUK_*`` environment settings.
    """
    if target is None or isinstance(target, (Options, Mapping)):
        if options is not None:
            raise TypeError("debuk() takes a single options argument when no target is given")
        decorator_options = target

        def decorator(fn: T) -> T:
            return debuk(fn, decorator_options, **overrides)

        return decorator

    if not callable(target):
        raise TypeError(
            f"debuk() expects a callable, a class or options as its first argument, not {type(target).__name__}"
        )

    if not get_settings().enabled:
        logger.debug("debuk disabled by settings, leaving %r unwrapped", target)
        return target

    return instrument(target, resolve_options(options, **overrides))
