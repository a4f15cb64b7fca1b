"""Tests for the debuk entry point."""

from types import SimpleNamespace
from unittest.mock import Mock, call

import pytest

from debuk import DEFAULTS, debuk, instrument
from debuk.console import LoggingConsole, get_default_console, set_default_console
from debuk.deferred import checkpoint, run_deferred
from debuk.options import Options


def my_fn(a: int, b: int) -> int:
    return a + b


def test_warns_when_operations_are_missing():
    warn = Mock()

    wrapped = debuk(
        my_fn,
        profile=True,
        time=False,
        count=False,
        trace=True,
        console=SimpleNamespace(warn=warn),
    )

    assert wrapped(2, 3) == 5
    assert warn.call_args_list == [
        call(DEFAULTS.TEMPLATE.not_supported("console.profile")),
        call(DEFAULTS.TEMPLATE.not_supported("console.trace")),
    ]


def test_missing_warn_channel_is_ignored():
    wrapped = debuk(my_fn, time=True, params=True, console=SimpleNamespace())

    assert wrapped(1, 2) == 3
    run_deferred()


def test_features_disabled_at_wrap_time_stay_disabled():
    console = SimpleNamespace(warn=Mock())
    wrapped = debuk(my_fn, time=True, count=False, console=console)

    console.time = Mock()
    console.time_end = Mock()
    wrapped(1, 2)

    console.time.assert_not_called()
    console.warn.assert_called_once()


def test_uses_count_by_default(console):
    wrapped = debuk(my_fn, console=console)

    wrapped(1, 2)
    run_deferred()

    console.count.assert_called_once_with("my_fn", 1)
    console.log.assert_not_called()


def test_scenario_three_calls_one_report(console):
    def add(a: int, b: int) -> int:
        return a + b

    wrapped = debuk(add, {"count": True, "console": console})

    wrapped(1, 2)
    wrapped(3, 4)
    wrapped(5, 6)
    console.count.assert_not_called()

    run_deferred()
    console.count.assert_called_once_with("add", 3)


def test_accepts_an_options_object(console):
    wrapped = debuk(my_fn, Options(backend=console, params=True, count=False))

    wrapped(1, 2)

    console.log.assert_called_once_with(*DEFAULTS.TEMPLATE.params("my_fn", [1, 2], 3))


def test_keyword_overrides_beat_options(console):
    wrapped = debuk(my_fn, {"params": True, "console": console}, params=False)

    wrapped(1, 2)

    console.log.assert_not_called()


def test_default_console_is_used_when_none_is_given(console):
    previous = set_default_console(console)
    try:
        wrapped = debuk(my_fn)
    finally:
        set_default_console(previous)

    wrapped(1, 2)
    run_deferred()

    console.count.assert_called_once_with("my_fn", 1)
    assert isinstance(get_default_console(), LoggingConsole)


def test_instrument_falls_back_to_the_default_console(console):
    previous = set_default_console(console)
    try:
        wrapped = instrument(my_fn, Options(params=True))
    finally:
        set_default_console(previous)

    assert wrapped(1, 2) == 3
    run_deferred()

    console.log.assert_called_once_with(*DEFAULTS.TEMPLATE.params("my_fn", [1, 2], 3))
    console.count.assert_called_once_with("my_fn", 1)
    console.warn.assert_not_called()


def test_wraps_class_with_zero_arguments():
    construct = Mock()
    meth = Mock()

    @debuk()
    class MyClass:
        def __init__(self, n: int) -> None:
            construct(n)

        def method(self, x: int) -> None:
            meth(x)

    instance = MyClass(1)
    instance.method(2)

    construct.assert_called_once_with(1)
    meth.assert_called_once_with(2)


def test_wraps_class_with_options_argument(console):
    @debuk({"console": console})
    class MyClass:
        def __init__(self, x: int) -> None:
            self.x = x

    instance = MyClass(1)
    assert instance.x == 1
    console.count.assert_not_called()

    run_deferred()
    console.count.assert_called_once_with("MyClass", 1)


def test_wraps_bare_class():
    @debuk
    class MyClass:
        def value(self) -> int:
            return 7

    assert MyClass().value() == 7
    assert MyClass.__name__ == "MyClass"


def test_wraps_method():
    class MyClass:
        def __init__(self, x: int) -> None:
            self.x = x

        @debuk()
        def method(self) -> int:
            return self.x

        @debuk
        def bare(self) -> int:
            return self.x * 2

    instance = MyClass(3)
    assert instance.method() == 3
    assert instance.bare() == 6


def test_decorator_with_keyword_options(console):
    @debuk(console=console, params=True, count=False)
    def greet(name: str) -> str:
        return f"hi {name}"

    assert greet("bob") == "hi bob"
    console.log.assert_called_once_with(*DEFAULTS.TEMPLATE.params("greet", ["bob"], "hi bob"))


@pytest.mark.anyio
async def test_default_waits_for_coroutines(console):
    async def fn_with_promise(a: int, b: int) -> int:
        return a + b

    wrapped = debuk(fn_with_promise, {"params": True, "console": console})

    result = wrapped(1, 5)
    console.log.assert_not_called()

    assert await result == 6
    console.log.assert_called_once_with(*DEFAULTS.TEMPLATE.params("fn_with_promise", [1, 5], 6))

    await checkpoint()
    console.count.assert_called_once_with("fn_with_promise", 1)


@pytest.mark.anyio
async def test_promise_flag_off_logs_pending_value(console):
    async def fn_with_promise(a: int, b: int) -> int:
        return a + b

    wrapped = debuk(fn_with_promise, {"params": True, "promise": False, "console": console})

    result = wrapped(1, 5)
    console.log.assert_called_once_with(*DEFAULTS.TEMPLATE.params("fn_with_promise", [1, 5], result))

    await checkpoint()
    console.count.assert_called_once_with("fn_with_promise", 1)
    assert await result == 6


def test_rejects_non_callable_targets():
    with pytest.raises(TypeError):
        debuk(42)


def test_rejects_two_options_without_target():
    with pytest.raises(TypeError):
        debuk({"count": False}, {"time": True})


def test_disabled_by_settings(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("DEBUK_ENABLED", "false")

    assert debuk(my_fn) is my_fn
    assert debuk()(my_fn) is my_fn
