"""Exceptions raised by the ingest pipeline.

Each subclasses the builtin that plain validation code would raise, so
callers can catch either the specific class or ValueError/LookupError.
"""

from __future__ import annotations


class SiteInfoError(ValueError):
    """Site metadata lacks columns that cannot be derived."""


class UnknownSourceError(ValueError):
    """Source identifier is outside the recognized vocabulary."""


class ExecutionConfigError(ValueError):
    """Execution strategy is incomplete or invalid."""


class SettingsError(ValueError):
    """Source settings contain unknown keys or invalid values."""


class AdapterNotFoundError(LookupError):
    """No adapter is registered for a source that needs one."""
