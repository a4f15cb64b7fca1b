"""Console reporting debuk diagnostics through OpenTelemetry."""

from __future__ import annotations

import traceback
from typing import Any

from opentelemetry import metrics, trace
from opentelemetry.metrics import MeterProvider
from opentelemetry.trace import StatusCode, TracerProvider

from debuk.templates import TEMPLATE
from debuk.utilities.logging import get_logger

logger = get_logger(__name__)

# Attribute keys
ATTR_DEBUK_KIND = "debuk.kind"
ATTR_DEBUK_UNIT = "debuk.unit"
ATTR_DEBUK_VALUES = "debuk.values"
ATTR_CODE_STACKTRACE = "code.stacktrace"

CALLS_METRIC = "debuk.calls"


def _format(value: Any) -> str:
    return value if isinstance(value, str) else repr(value)


class OpenTelemetryConsole:
    """Console turning timers and profiles into spans and counts into a counter.

    ``time``/``profile`` start a span named after the label, and
    ``time_end``/``profile_end`` end the most recent span opened for that label.
    ``log`` and ``trace`` become events on the current span, and are also
    written to the ``debuk.otel`` logger.
    """

    def __init__(
        self,
        tracer_provider: TracerProvider | None = None,
        meter_provider: MeterProvider | None = None,
    ) -> None:
        self._tracer = trace.get_tracer("debuk", tracer_provider=tracer_provider)
        self._calls = metrics.get_meter("debuk", meter_provider=meter_provider).create_counter(
            CALLS_METRIC,
            unit="{call}",
            description="Calls made to units instrumented by debuk",
        )
        self._spans: dict[tuple[str, str], list[trace.Span]] = {}

    def _start(self, kind: str, label: str) -> None:
        span = self._tracer.start_span(label, attributes={ATTR_DEBUK_KIND: kind, ATTR_DEBUK_UNIT: label})
        self._spans.setdefault((kind, label), []).append(span)

    def _end(self, kind: str, label: str) -> None:
        spans = self._spans.get((kind, label))
        if not spans:
            logger.warning("No open %s span for '%s'", kind, label)
            return
        span = spans.pop()
        if not spans:
            del self._spans[(kind, label)]
        span.set_status(StatusCode.OK)
        span.end()

    def time(self, label: str) -> None:
        self._start("time", label)

    def time_end(self, label: str) -> None:
        self._end("time", label)

    def profile(self, label: str) -> None:
        self._start("profile", label)

    def profile_end(self, label: str) -> None:
        self._end("profile", label)

    def count(self, name: str, total: int) -> None:
        self._calls.add(total, {ATTR_DEBUK_UNIT: name})
        logger.debug(TEMPLATE.count(name, total))

    def log(self, *values: Any) -> None:
        formatted = [_format(value) for value in values]
        span = trace.get_current_span()
        if span.is_recording():
            span.add_event("debuk.log", {ATTR_DEBUK_VALUES: formatted})
        logger.info(" ".join(formatted))

    def trace(self, *values: Any) -> None:
        stack = "".join(traceback.format_stack()[:-1])
        span = trace.get_current_span()
        if span.is_recording():
            span.add_event("debuk.trace", {ATTR_CODE_STACKTRACE: stack})
        logger.debug("Trace: %s\n%s", " ".join(_format(value) for value in values), stack.rstrip())

    def warn(self, message: str) -> None:
        logger.warning(message)
