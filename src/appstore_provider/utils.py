"""
Utility functions for appstore-provider.

This module provides helper functions shared by resources and data
sources: content checksums and required attribute checks.
"""

import hashlib
from typing import Any, Iterable, Mapping

from .exceptions import ValidationError


class _Unknown:
    """Marker for a value that is not known until apply time."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNKNOWN"

    def __bool__(self) -> bool:
        return False

    def __copy__(self):
        return self

    def __deepcopy__(self, memo):
        return self


UNKNOWN = _Unknown()


def checksum(data: bytes) -> str:
    """
    Compute the content fingerprint of raw bytes.

    The MD5 digest is only used to notice that a file changed between
    runs, never for security.

    Args:
        data: Bytes to hash

    Returns:
        Lowercase hexadecimal digest
    """
    return hashlib.md5(data).hexdigest()


def is_blank(value: Any) -> bool:
    """Return True for null, unknown and empty string values."""
    if value is None or value is UNKNOWN:
        return True
    if isinstance(value, str):
        return value == ""
    return False


def require_attributes(
    values: Mapping[str, Any], attributes: Iterable[str], action: str
) -> None:
    """
    Check that every named attribute has a value.

    Args:
        values: Attribute values keyed by name
        attributes: Names that must be set, checked in order
        action: What the values are needed for, e.g. "create an achievement"

    Raises:
        ValidationError: Naming the first attribute without a value
    """
    for attribute in attributes:
        if is_blank(values.get(attribute)):
            raise ValidationError(
                attribute,
                "Missing required attribute",
                f"Attribute '{attribute}' is required to {action}.",
            )


def slice_upload(data: bytes, offset: int, length: int) -> bytes:
    """
    Return the part of an asset an upload operation covers.

    Args:
        data: Whole asset
        offset: Start of the part
        length: Size of the part

    Returns:
        The bytes to send
    """
    if offset < 0 or length < 0 or offset + length > len(data):
        raise ValueError(
            f"Upload operation out of range: offset={offset}, length={length}, "
            f"size={len(data)}"
        )
    return data[offset : offset + length]
