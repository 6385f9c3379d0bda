"""Exception hierarchy for settings page registration.

Render-time failures (missing views) surface from inside host callbacks,
registration failures surface synchronously from ``Settings.add_pages``.
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class OptionPagesError(Exception):
    """Base exception for all settings registration errors.

    Subclasses should set:
    - error_code: Machine-readable error identifier
    """

    error_code: str = "option_pages_error"

    def __init__(
        self,
        message: str,
        *,
        details: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None,
    ):
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.cause = cause

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to a dictionary for diagnostics."""
        result = {
            "error": self.error_code,
            "message": self.message,
        }
        if self.details:
            result["details"] = self.details
        return result


class ViewNotFoundError(OptionPagesError):
    """A declared view does not resolve to a readable file at render time."""

    error_code = "view_not_found"

    def __init__(self, view: str, kind: str = "page", **kwargs):
        super().__init__(
            f"Invalid settings {kind} view: {view}",
            details={"view": str(view), "kind": kind},
            **kwargs,
        )
        self.view = view
        self.kind = kind


class InvalidRegistrationError(OptionPagesError):
    """The host page registration primitive could not be invoked."""

    error_code = "invalid_registration"


class ConfigurationError(OptionPagesError):
    """The configuration tree could not be read or validated."""

    error_code = "configuration_error"
