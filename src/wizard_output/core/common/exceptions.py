"""
Common exception classes for the wizard output gateway.

This module defines the error kinds raised while a wizard response is being
assembled. None of them are recoverable mid-response: they propagate up to
abort the request rather than let malformed output reach the client.
"""

from __future__ import annotations


class WizardOutputError(Exception):
    """Base exception class for all wizard output errors."""

    def __init__(
        self,
        message: str,
        details: dict | None = None,
        *,
        status_code: int | None = None,
        **kwargs,
    ):
        """Initialize the exception.

        Args:
            message: Human-readable error message
            details: Optional dictionary with additional error details
            status_code: Optional HTTP status code hint for transport adapters
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.status_code = status_code or 500
        for key, value in (kwargs or {}).items():
            setattr(self, key, value)

    def to_dict(self) -> dict:
        error_dict = {
            "message": self.message,
            "type": self.__class__.__name__,
            "details": self.details,
        }

        for attr_name in dir(self):
            if (
                not attr_name.startswith("_")
                and attr_name not in ["message", "details", "status_code", "args"]
                and not callable(getattr(self, attr_name))
            ):
                error_dict[attr_name] = getattr(self, attr_name)

        return {"error": error_dict}


class EnvelopeFrozenError(WizardOutputError):
    """Raised when an envelope setting is changed after headers were sent."""

    def __init__(
        self,
        message: str = "Envelope already committed",
        details: dict | None = None,
        **kwargs,
    ):
        super().__init__(message, details, status_code=500, **kwargs)


class LateRedirectError(EnvelopeFrozenError):
    """Raised when a redirect is requested after the response has started."""

    def __init__(
        self,
        message: str = "Redirect requested after sending headers",
        target: str | None = None,
        details: dict | None = None,
        **kwargs,
    ):
        det = details.copy() if details else {}
        if target:
            det.setdefault("target", target)
        super().__init__(message, det, **kwargs)


class InvalidRedirectTargetError(WizardOutputError):
    """Raised when a redirect target cannot be used as a Location header."""

    def __init__(
        self,
        message: str = "Invalid redirect target",
        details: dict | None = None,
        **kwargs,
    ):
        super().__init__(message, details, status_code=500, **kwargs)


class TransportWriteError(WizardOutputError):
    """Raised when writing to the client connection fails."""

    def __init__(
        self,
        message: str = "Failed to write response to client",
        details: dict | None = None,
        **kwargs,
    ):
        super().__init__(message, details, status_code=500, **kwargs)


class ResponseFinalizedError(WizardOutputError):
    """Raised when content is added after the closing frame was sent."""

    def __init__(
        self,
        message: str = "Response already finalized",
        details: dict | None = None,
        **kwargs,
    ):
        super().__init__(message, details, status_code=500, **kwargs)


class ConfigurationError(WizardOutputError):
    """Raised when there's a configuration issue."""

    def __init__(
        self,
        message: str = "Configuration error",
        details: dict | None = None,
        **kwargs,
    ):
        super().__init__(message, details, status_code=400, **kwargs)


class StepNotFoundError(WizardOutputError):
    """Raised when a request names a wizard step that is not registered."""

    def __init__(
        self,
        message: str = "Wizard step not found",
        step_name: str | None = None,
        details: dict | None = None,
    ):
        det = details.copy() if details else {}
        if step_name:
            det.setdefault("step_name", step_name)
        super().__init__(message, det, status_code=404)
