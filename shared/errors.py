"""
Shared error handling for the ACL engine.
"""

from typing import Dict, Any, Optional
from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Standard error response format."""

    code: str
    message: str
    details: Dict[str, Any] = {}


class AccessLayerException(Exception):
    """Base exception for ACL components."""

    def __init__(self, code: str, message: str, details: Optional[Dict[str, Any]] = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_response(self) -> ErrorResponse:
        """Convert to error response."""
        return ErrorResponse(
            code=self.code,
            message=self.message,
            details=self.details
        )


class ConfigurationError(AccessLayerException):
    """Invalid construction-time configuration (e.g. mask builder choice)."""

    def __init__(self, message: str = "Invalid configuration", details: Optional[Dict[str, Any]] = None):
        super().__init__("CONFIGURATION_ERROR", message, details)


class UnknownActionError(AccessLayerException):
    """Action name not recognised by the configured mask builder."""

    def __init__(self, action: str, builder: Optional[str] = None):
        details: Dict[str, Any] = {"action": action}
        if builder:
            details["builder"] = builder
        super().__init__("UNKNOWN_ACTION", f'Unknown action "{action}"', details)
        self.action = action
