"""Error taxonomy shared by the registry, dispatcher and handlers."""
from __future__ import annotations

from typing import Any, Optional


class McpError(Exception):
    """Base class for errors reported back to the caller."""


class ValidationError(McpError):
    """Bad or missing argument."""

    def __init__(self, field: str, reason: str, received: Any = None, message: Optional[str] = None):
        self.field = field
        self.reason = reason
        self.received = received
        if message is None:
            if reason == "missing":
                message = f"Missing required argument: '{field}'"
            elif received is not None:
                message = f"Invalid argument '{field}': {reason} (received {received!r})"
            else:
                message = f"Invalid argument '{field}': {reason}"
        super().__init__(message)


class NotFoundError(McpError):
    pass


class DuplicateNameError(McpError):
    pass


class AuthError(McpError):
    pass


class CredentialsMissingError(AuthError):
    pass


class DownloadError(McpError):
    def __init__(self, status: Optional[int], url: str, detail: str = ""):
        self.status = status
        self.url = url
        if status is None:
            message = f"Download failed for {url}"
        else:
            message = f"Download failed for {url}: HTTP {status}"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)


class ParseError(McpError):
    pass
