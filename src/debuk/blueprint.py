"""Wrap a class so its constructor and own methods are instrumented."""

from __future__ import annotations

import inspect
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import Any, TypeVar

from debuk.aggregator import CountAggregator
from debuk.options import Options
from debuk.utilities.logging import get_logger
from debuk.wrapper import wrap_unit

logger = get_logger(__name__)

C = TypeVar("C", bound=type)


def _is_dunder(name: str) -> bool:
    return name.startswith("__") and name.endswith("__")


def own_methods(cls: type) -> Iterator[tuple[str, Callable[..., Any]]]:
    """Yield the instance methods defined on ``cls`` itself, in definition order.

    Inherited members, special methods, static methods, class methods and
    properties are skipped.
    """
    for attr_name, member in vars(cls).items():
        if _is_dunder(attr_name):
            continue
        if inspect.isfunction(member):
            yield attr_name, member


def _constructor(cls: type) -> Callable[..., None]:
    init = cls.__init__
    if init is not object.__init__:
        return init

    overrides_new = cls.__new__ is not object.__new__

    def __init__(self: Any, *args: Any, **kwargs: Any) -> None:
        # A custom __new__ has already taken the arguments.
        if overrides_new:
            object.__init__(self)
        else:
            object.__init__(self, *args, **kwargs)

    __init__.__qualname__ = f"{cls.__qualname__}.__init__"
    return __init__


def _ignore_subclass(cls: type, **kwargs: Any) -> None:
    pass


@contextmanager
def _subclass_hooks_suppressed(cls: type) -> Iterator[None]:
    """Keep ``__init_subclass__`` hooks in ``cls``'s hierarchy from seeing the wrapper class."""
    if not any("__init_subclass__" in vars(base) for base in cls.__mro__[:-1]):
        yield
        return
    own_hook = vars(cls).get("__init_subclass__")
    cls.__init_subclass__ = classmethod(_ignore_subclass)  # type: ignore[assignment]
    try:
        yield
    finally:
        if own_hook is None:
            del cls.__init_subclass__
        else:
            cls.__init_subclass__ = own_hook


def wrap_blueprint(cls: C, options: Options, *, aggregator: CountAggregator | None = None) -> C:
    """Return a subclass of ``cls`` with an instrumented constructor and methods.

    The constructor is reported under ``options.name`` or the class name;
    each method under its own name. ``cls`` itself is left untouched.
    """
    namespace: dict[str, Any] = {
        "__module__": cls.__module__,
        "__qualname__": cls.__qualname__,
        "__doc__": cls.__doc__,
        "__init__": wrap_unit(
            _constructor(cls),
            options,
            options.name or cls.__name__,
            method=True,
            aggregator=aggregator,
        ),
    }
    if "__slots__" in vars(cls):
        namespace["__slots__"] = ()

    methods = 0
    for attr_name, member in own_methods(cls):
        namespace[attr_name] = wrap_unit(member, options, attr_name, method=True, aggregator=aggregator)
        methods += 1

    with _subclass_hooks_suppressed(cls):
        wrapped = type(cls)(cls.__name__, (cls,), namespace)
    logger.debug("Wrapped class %s with %d method(s)", cls.__qualname__, methods)
    return wrapped
