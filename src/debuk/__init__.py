"""debuk: non-intrusive diagnostics for functions and classes."""

from types import SimpleNamespace

from .aggregator import CountAggregator, get_aggregator
from .blueprint import wrap_blueprint
from .capabilities import Validation, emit_warnings, validate
from .console import Console, LoggingConsole, get_default_console, set_default_console
from .decorator import debuk, instrument
from .deferred import DeferredQueue, checkpoint, get_deferred_queue, run_deferred
from .options import DebukSettings, Options, get_settings, resolve_options
from .otel import OpenTelemetryConsole
from .templates import TEMPLATE, Templates
from .utilities.logging import configure_logging, get_logger
from .wrapper import wrap_unit

DEFAULTS = SimpleNamespace(TEMPLATE=TEMPLATE, OPTIONS=Options())

__all__ = [
    # Main entry points
    "debuk",
    "instrument",
    "Options",
    "DEFAULTS",
    "TEMPLATE",
    "Templates",
    # Consoles
    "Console",
    "LoggingConsole",
    "OpenTelemetryConsole",
    "get_default_console",
    "set_default_console",
    # Counting and deferred work
    "CountAggregator",
    "get_aggregator",
    "DeferredQueue",
    "get_deferred_queue",
    "run_deferred",
    "checkpoint",
    # Lower-level building blocks
    "Validation",
    "validate",
    "emit_warnings",
    "wrap_unit",
    "wrap_blueprint",
    # Settings and logging
    "DebukSettings",
    "get_settings",
    "resolve_options",
    "configure_logging",
    "get_logger",
]
