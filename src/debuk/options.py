"""Options and settings for debuk."""

from __future__ import annotations

from collections.abc import Mapping
from functools import lru_cache
from typing import Any, Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from debuk.console import get_default_console

FEATURES: tuple[str, ...] = ("profile", "time", "count", "trace", "params")


class Options(BaseModel):
    """Options resolved once per wrap.

    ``backend`` may also be given as ``console`` or ``diagnosticBackend``, and
    ``wait_for_async`` as ``waitForAsync`` or ``promise``.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        arbitrary_types_allowed=True,
    )

    profile: bool = False
    time: bool = False
    count: bool = True
    trace: bool = False
    params: bool = False
    name: str | None = None
    """Display name; defaults to the wrapped unit's own name."""

    wait_for_async: bool = Field(
        default=True,
        validation_alias=AliasChoices("wait_for_async", "waitForAsync", "promise"),
    )
    """Log params only after an awaitable result settles."""

    backend: Any = Field(
        default=None,
        validation_alias=AliasChoices("backend", "console", "diagnosticBackend"),
    )
    """Console receiving the diagnostics; None means the process-wide default."""

    def enabled_features(self) -> tuple[str, ...]:
        return tuple(feature for feature in FEATURES if getattr(self, feature))


class DebukSettings(BaseSettings):
    """debuk settings.

    All settings can be configured via environment variables with the prefix DEBUK_.
    For example, DEBUK_TIME=true turns timing on for every wrap that does not
    set it explicitly.
    """

    model_config = SettingsConfigDict(
        env_prefix="DEBUK_",
        env_file=".env",
        extra="ignore",
    )

    enabled: bool = True
    """When false, debuk returns every target unchanged."""

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"

    # default feature flags
    profile: bool = False
    time: bool = False
    count: bool = True
    trace: bool = False
    params: bool = False
    wait_for_async: bool = True

    def option_defaults(self) -> dict[str, Any]:
        return self.model_dump(include={*FEATURES, "wait_for_async"})


_ALIASES: dict[str, str] = {
    "waitForAsync": "wait_for_async",
    "promise": "wait_for_async",
    "console": "backend",
    "diagnosticBackend": "backend",
}


def _canonical(options: Mapping[str, Any]) -> dict[str, Any]:
    """Rename aliased keys to field names so that merge order decides precedence."""
    return {_ALIASES.get(key, key): value for key, value in options.items()}


@lru_cache(maxsize=1)
def get_settings() -> DebukSettings:
    return DebukSettings()


def resolve_options(
    options: Options | Mapping[str, Any] | None = None,
    **overrides: Any,
) -> Options:
    """Merge settings defaults, ``options`` and keyword overrides into one Options.

    Later sources win. The backend falls back to the process-wide default
    console at resolution time.
    """
    if isinstance(options, Options):
        given = {field: getattr(options, field) for field in options.model_fields_set}
    else:
        given = _canonical(options or {})

    resolved = Options.model_validate({**get_settings().option_defaults(), **given, **_canonical(overrides)})
    if resolved.backend is None:
        resolved = resolved.model_copy(update={"backend": get_default_console()})
    return resolved
