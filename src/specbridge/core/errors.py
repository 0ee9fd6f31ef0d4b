"""
Exceptions for SpecBridge.

Every error raised by SpecBridge derives from SpecBridgeError, which carries
a machine-readable ``code`` alongside the human-readable message.

Exception Hierarchy:
    SpecBridgeError (base)
    ├── ConfigNotFoundError   (CONFIG_NOT_FOUND)
    ├── ConfigParseError      (CONFIG_PARSE_ERROR)
    ├── AuthenticationError   (AUTH_ERROR)
    ├── RateLimitError        (RATE_LIMIT_ERROR)
    └── AdapterError          (ADAPTER_ERROR)

Example:
    >>> try:
    ...     raise RateLimitError("github", retry_after=30)
    ... except SpecBridgeError as e:
    ...     print(e.code, e.retry_after)
    RATE_LIMIT_ERROR 30
"""

from __future__ import annotations

from pathlib import Path


class SpecBridgeError(Exception):
    """
    Base exception for all SpecBridge errors.

    Attributes:
        message: Human-readable error message
        code: Machine-readable error code
    """

    def __init__(self, message: str, code: str) -> None:
        super().__init__(message)
        self.message = message
        self.code = code

    def __str__(self) -> str:
        return self.message


class ConfigNotFoundError(SpecBridgeError):
    """Raised when the configuration file does not exist."""

    def __init__(self, path: Path | str) -> None:
        super().__init__(f"Configuration file not found: {path}", "CONFIG_NOT_FOUND")
        self.path = Path(path)


class ConfigParseError(SpecBridgeError):
    """Raised when the configuration file exists but cannot be loaded or validated."""

    def __init__(self, message: str) -> None:
        super().__init__(f"Failed to parse configuration: {message}", "CONFIG_PARSE_ERROR")
        self.detail = message


class AuthenticationError(SpecBridgeError):
    """Raised when credentials are missing or rejected by the platform."""

    def __init__(self, platform: str, detail: str | None = None) -> None:
        message = f"Authentication failed for {platform}. Please check your credentials."
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message, "AUTH_ERROR")
        self.platform = platform
        self.detail = detail


class RateLimitError(SpecBridgeError):
    """
    Raised when the platform API rate limit is exceeded.

    Attributes:
        platform: Platform that rejected the request
        retry_after: Seconds to wait before retrying, when the platform says
    """

    def __init__(self, platform: str, retry_after: int | None = None) -> None:
        suffix = f" Retry after {retry_after}s" if retry_after else ""
        super().__init__(f"Rate limit exceeded for {platform}.{suffix}", "RATE_LIMIT_ERROR")
        self.platform = platform
        self.retry_after = retry_after


class AdapterError(SpecBridgeError):
    """
    Raised when a source or target adapter fails.

    The underlying exception, if any, is chained via ``raise ... from``.
    """

    def __init__(self, adapter_name: str, message: str) -> None:
        super().__init__(f"Adapter '{adapter_name}' error: {message}", "ADAPTER_ERROR")
        self.adapter_name = adapter_name
        self.detail = message
