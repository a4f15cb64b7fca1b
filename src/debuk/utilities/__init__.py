"""Internal helpers for debuk."""
