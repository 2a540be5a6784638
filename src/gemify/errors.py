"""Exception types shared by the Gemify service layers."""

from __future__ import annotations

from typing import Dict, Optional


class GemifyError(Exception):
    """Base class; ``status_code`` is the HTTP status the API reports."""

    status_code = 500

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class InvalidRequestError(GemifyError):
    status_code = 400


class ConfigurationError(GemifyError):
    status_code = 500


class PreferenceStoreError(GemifyError):
    """Raised when a read or write against the hosted database fails."""

    status_code = 500


class UpstreamError(GemifyError):
    """A third-party API answered with an error or an unusable payload."""

    status_code = 502

    def __init__(self, message: str, status_code: Optional[int] = None,
                 extra: Optional[Dict[str, str]] = None):
        super().__init__(message, status_code)
        # Additional keys merged into the error payload, e.g. "details" or "raw".
        self.extra = extra or {}
