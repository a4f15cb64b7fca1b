"""Message templates used when reporting diagnostics."""

from __future__ import annotations

from typing import Any


class Templates:
    """Builders for every message debuk hands to a console."""

    @staticmethod
    def not_supported(operation: str) -> str:
        return f"debuk: {operation} is not supported by this console, the feature is disabled"

    @staticmethod
    def count(name: str, total: int) -> str:
        return f"{name} called {total} time{'' if total == 1 else 's'}"

    @staticmethod
    def params(name: str, args: list[Any], result: Any) -> list[Any]:
        """Build the argument list passed to ``console.log`` for a finished call."""
        return [f"{name} called with", args, "returned", result]


TEMPLATE = Templates()
