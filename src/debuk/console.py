"""Console interface for debuk diagnostics.

A console is any object exposing some subset of the operations below. debuk
checks which ones are present once, when a unit is wrapped, and only ever
calls the operations that were found. Missing operations switch the matching
feature off instead of failing.
"""

from __future__ import annotations

import cProfile
import io
import pstats
import traceback
from time import perf_counter
from typing import Any, Protocol

from debuk.templates import TEMPLATE
from debuk.utilities.logging import get_logger

logger = get_logger("debuk.console")


class Console(Protocol):
    """Protocol for the diagnostic back end used by wrapped units.

    Every operation is optional. Implementers can route diagnostics to
    logging, OpenTelemetry, a test spy, or anything else.
    """

    def log(self, *values: Any) -> None:
        """Report a finished call, see ``TEMPLATE.params``."""
        ...

    def count(self, name: str, total: int) -> None:
        """Report the coalesced number of calls made to ``name`` in one burst."""
        ...

    def time(self, label: str) -> None: ...

    def time_end(self, label: str) -> None: ...

    def trace(self, *values: Any) -> None:
        """Report the current call stack."""
        ...

    def profile(self, label: str) -> None: ...

    def profile_end(self, label: str) -> None: ...

    def warn(self, message: str) -> None:
        """Report a problem with the console itself, such as a missing operation."""
        ...


def _format(value: Any) -> str:
    return value if isinstance(value, str) else repr(value)


class LoggingConsole:
    """Default console writing every diagnostic to the ``debuk.console`` logger.

    Timers are measured with ``perf_counter``. Profiles run ``cProfile`` for
    the outermost active label only, since the interpreter allows a single
    active profiler. Nested labels are recorded as markers.
    """

    def __init__(self, profile_limit: int = 10) -> None:
        self.profile_limit = profile_limit
        self._timers: dict[str, float] = {}
        self._profile_labels: list[str] = []
        self._profiler: cProfile.Profile | None = None

    def log(self, *values: Any) -> None:
        logger.info(" ".join(_format(value) for value in values))

    def count(self, name: str, total: int) -> None:
        logger.info(TEMPLATE.count(name, total))

    def time(self, label: str) -> None:
        if label in self._timers:
            logger.warning("Timer '%s' already exists", label)
            return
        self._timers[label] = perf_counter()

    def time_end(self, label: str) -> None:
        started = self._timers.pop(label, None)
        if started is None:
            logger.warning("Timer '%s' does not exist", label)
            return
        logger.info("%s: %.3fms", label, (perf_counter() - started) * 1000)

    def trace(self, *values: Any) -> None:
        # Drop this frame so the stack ends at the caller.
        stack = "".join(traceback.format_stack()[:-1])
        message = " ".join(_format(value) for value in values)
        logger.info("Trace: %s\n%s", message, stack.rstrip())

    def profile(self, label: str) -> None:
        self._profile_labels.append(label)
        if self._profiler is not None:
            return
        profiler = cProfile.Profile()
        try:
            profiler.enable()
        except ValueError as e:
            # Another profiler owns the interpreter; keep the label as a marker.
            logger.warning("Profile '%s' could not start: %s", label, e)
            return
        self._profiler = profiler
        logger.debug("Profile '%s' started", label)

    def profile_end(self, label: str) -> None:
        if label not in self._profile_labels:
            logger.warning("Profile '%s' does not exist", label)
            return
        # Remove the innermost occurrence of the label.
        index = len(self._profile_labels) - 1 - self._profile_labels[::-1].index(label)
        del self._profile_labels[index]
        if self._profile_labels or self._profiler is None:
            return

        profiler, self._profiler = self._profiler, None
        profiler.disable()
        output = io.StringIO()
        pstats.Stats(profiler, stream=output).sort_stats(pstats.SortKey.CUMULATIVE).print_stats(self.profile_limit)
        logger.info("Profile '%s' finished\n%s", label, output.getvalue().rstrip())

    def warn(self, message: str) -> None:
        logger.warning(message)


# Process-wide default console, replaceable for the whole process or per wrap.
_default_console: Any = LoggingConsole()


def get_default_console() -> Any:
    """Get the console used when a wrap does not name one."""
    return _default_console


def set_default_console(console: Any) -> Any:
    """Replace the process-wide default console and return the previous one."""
    global _default_console
    previous, _default_console = _default_console, console
    return previous
