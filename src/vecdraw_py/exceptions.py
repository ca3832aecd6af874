"""Custom exceptions for vecdraw-py."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from uuid import UUID


class VecdrawError(Exception):
    """Base exception class for all vecdraw-py errors."""


class ElementNotFoundError(VecdrawError):
    """Raised when an element with the specified ID cannot be found.

    Attributes:
        element_id: The UUID of the element that was not found.
    """

    def __init__(self, element_id: UUID) -> None:
        """Initialize the exception with the element ID.

        Args:
            element_id: The UUID of the element that was not found.
        """
        self.element_id = element_id
        super().__init__(f"Element with ID {element_id} not found")


class InvalidElementError(VecdrawError):
    """Raised when an element is invalid or malformed.

    This exception is used for validation errors related to element data.
    """

    def __init__(self, message: str) -> None:
        """Initialize the exception with a custom message.

        Args:
            message: Description of why the element is invalid.
        """
        super().__init__(message)


class PathParseError(VecdrawError):
    """Raised when a path string cannot be parsed into commands.

    Attributes:
        source: The text that failed to parse (truncated).
    """

    def __init__(self, source: str, reason: str) -> None:
        """Initialize the exception.

        Args:
            source: The path text that failed to parse.
            reason: Why parsing failed.
        """
        self.source = source[:80]
        super().__init__(f"Cannot parse path data {self.source!r}: {reason}")


class ArtworkImportError(VecdrawError):
    """Raised when an external artwork file cannot be read.

    Attributes:
        name: Name of the source that failed.
    """

    def __init__(self, name: str, reason: str) -> None:
        """Initialize the exception.

        Args:
            name: Name of the source that failed.
            reason: Why reading failed.
        """
        self.name = name
        super().__init__(f"Cannot import {name}: {reason}")


class DocumentFormatError(VecdrawError):
    """Raised when a serialized scene document is malformed."""
