from __future__ import annotations


class MalformedInputError(ValueError):
    """Input that indicates an upstream data bug (e.g. a negative load value)."""


class WindowConfigError(ValueError):
    """Invalid acute/chronic window configuration."""
