"""
Exception classes for appstore-provider.
"""

from typing import List, Optional


class AppStoreConnectError(Exception):
    """Base exception class for App Store Connect API errors."""

    pass


class AuthenticationError(AppStoreConnectError):
    """Raised when authentication fails."""

    pass


class RateLimitError(AppStoreConnectError):
    """Raised when rate limits are exceeded."""

    pass


class NotFoundError(AppStoreConnectError):
    """Raised when requested resource is not found."""

    pass


class PermissionError(AppStoreConnectError):
    """Raised when insufficient permissions for operation."""

    pass


class ServerError(AppStoreConnectError):
    """Raised when server returns 5xx error."""

    pass


class ValidationError(AppStoreConnectError):
    """
    Raised when a required attribute is absent or unusable.

    Args:
        attribute: Name of the offending attribute
        summary: Short title, e.g. "Missing required attribute"
        detail: Human readable explanation
    """

    def __init__(
        self,
        attribute: str,
        summary: str = "Missing required attribute",
        detail: Optional[str] = None,
    ):
        self.attribute = attribute
        self.summary = summary
        self.detail = detail or f"Attribute '{attribute}' is required."
        super().__init__(f"{summary}: {self.detail}")


class ConfigurationError(AppStoreConnectError):
    """Raised when the provider cannot be configured."""

    def __init__(self, errors: List[AppStoreConnectError]):
        self.errors = list(errors)
        super().__init__("; ".join(str(e) for e in self.errors))

    @property
    def attributes(self) -> List[str]:
        return [e.attribute for e in self.errors if isinstance(e, ValidationError)]


class UpstreamError(AppStoreConnectError):
    """Raised when an API call made on behalf of a resource fails."""

    def __init__(self, summary: str, cause: Exception):
        self.summary = summary
        self.cause = cause
        super().__init__(f"{summary}: {cause}")


class DriftDetected(UserWarning):
    """Warned when a local file no longer matches its recorded checksum."""

    pass
