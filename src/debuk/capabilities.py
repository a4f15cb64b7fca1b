"""Wrap-time check of which diagnostics a console can serve."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from debuk.console import get_default_console
from debuk.options import Options
from debuk.templates import TEMPLATE
from debuk.utilities.logging import get_logger

logger = get_logger(__name__)

# Console operations each feature needs, in the order features are checked.
FEATURE_OPERATIONS: dict[str, tuple[str, ...]] = {
    "profile": ("profile", "profile_end"),
    "time": ("time", "time_end"),
    "count": ("count",),
    "trace": ("trace",),
    "params": ("log",),
}


@dataclass(frozen=True)
class Validation:
    """Outcome of validating options against a console."""

    effective: Options
    disabled: tuple[str, ...] = ()
    warnings: tuple[str, ...] = ()


def supports(backend: Any, operation: str) -> bool:
    """Whether ``backend`` exposes ``operation`` as something callable."""
    return callable(getattr(backend, operation, None))


def validate(options: Options, backend: Any | None = None) -> Validation:
    """Switch off every requested feature whose console operation is missing.

    Each switched-off feature yields one warning naming the first missing
    operation.
    """
    backend = options.backend if backend is None else backend
    if backend is None:
        backend = get_default_console()
    requested = options.enabled_features()
    disabled: dict[str, bool] = {}
    warnings: list[str] = []

    for feature, operations in FEATURE_OPERATIONS.items():
        if feature not in requested:
            continue
        missing = next((op for op in operations if not supports(backend, op)), None)
        if missing is None:
            continue
        disabled[feature] = False
        warnings.append(TEMPLATE.not_supported(f"console.{missing}"))

    update: dict[str, Any] = {**disabled}
    if backend is not options.backend:
        update["backend"] = backend
    effective = options.model_copy(update=update) if update else options
    return Validation(effective=effective, disabled=tuple(disabled), warnings=tuple(warnings))


def emit_warnings(backend: Any, warnings: Sequence[str]) -> None:
    """Send ``warnings`` through ``backend.warn``, dropping them when it is missing."""
    if not warnings:
        return
    warn = getattr(backend, "warn", None)
    if not callable(warn):
        logger.debug("Console has no warn operation, dropping %d warning(s)", len(warnings))
        return
    for message in warnings:
        warn(message)
