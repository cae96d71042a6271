"""Centralized exception classes for the Excel to PDF converter.

This module provides a hierarchy of custom exceptions with error codes,
HTTP status code mapping, and structured error details for consistent
error handling throughout the application.

Exception Hierarchy:
    ConverterError (base)
    ├── FileError
    │   ├── ConverterFileNotFoundError
    │   ├── FileTooLargeError
    │   └── UnsupportedFormatError
    ├── InvalidReferenceError
    ├── LayoutError
    │   └── ImagePlacementError
    ├── WorkbookReadError
    └── RenderBackendError

Only reference, workbook and rendering errors abort a conversion. Layout
problems with a defined fallback (unresolved formulas, overlapping merges,
unplaceable images) are absorbed by the layout engine and logged.
"""

from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Enumeration of all error codes used in the application.

    Error codes are grouped by category:
    - E1xxx: File/document errors
    - E2xxx: Cell reference errors
    - E3xxx: Layout errors
    - E4xxx: Workbook reading errors
    - E5xxx: Rendering errors
    - E9xxx: Internal/unexpected errors
    """

    # File errors (E1xxx)
    FILE_NOT_FOUND = "E1001"
    FILE_TOO_LARGE = "E1002"
    UNSUPPORTED_FORMAT = "E1003"
    FILE_READ_ERROR = "E1004"
    FILE_WRITE_ERROR = "E1005"

    # Reference errors (E2xxx)
    INVALID_REFERENCE = "E2001"
    INVALID_RANGE = "E2002"

    # Layout errors (E3xxx)
    LAYOUT_FAILED = "E3001"
    IMAGE_PLACEMENT_FAILED = "E3002"

    # Workbook errors (E4xxx)
    WORKBOOK_PARSE_FAILED = "E4001"
    SHEET_NOT_FOUND = "E4002"

    # Rendering errors (E5xxx)
    RENDER_FAILED = "E5001"

    # Internal errors (E9xxx)
    INTERNAL_ERROR = "E9001"


class HTTPStatusMixin:
    """Mixin that provides HTTP status code for exceptions.

    Subclasses set the `http_status` class attribute.
    """

    http_status: int = 500

    def get_http_status(self) -> int:
        """Get the HTTP status code for this exception.

        Returns:
            HTTP status code appropriate for this error.
        """
        return self.http_status


class ConverterError(Exception, HTTPStatusMixin):
    """Base exception for all converter errors.

    Attributes:
        message: Human-readable error message.
        error_code: Unique error code from ErrorCode enum.
        details: Optional dictionary with additional error details.
        http_status: HTTP status code for API responses (default 500).
    """

    http_status: int = 500

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Error code from ErrorCode enum.
            details: Optional additional details about the error.
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert the exception to a dictionary for API responses.

        Returns:
            Dictionary with error information.
        """
        result: dict[str, Any] = {
            "error_code": self.error_code.value,
            "message": self.message,
        }
        if self.details:
            result["details"] = self.details
        return result

    def __str__(self) -> str:
        """Return string representation with error code."""
        return f"[{self.error_code.value}] {self.message}"


# =============================================================================
# File Errors (E1xxx)
# =============================================================================


class FileError(ConverterError):
    """Base class for file-related errors."""

    http_status: int = 400

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.FILE_READ_ERROR,
        file_path: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize with file path information.

        Args:
            message: Error message.
            error_code: Error code.
            file_path: Path to the problematic file.
            details: Additional details.
        """
        details = details or {}
        if file_path:
            details["file_path"] = file_path
        super().__init__(message, error_code, details)
        self.file_path = file_path


class ConverterFileNotFoundError(FileError):
    """Raised when the input workbook does not exist.

    Note: Prefixed to avoid shadowing built-in FileNotFoundError.
    """

    http_status: int = 404

    def __init__(
        self,
        file_path: str,
        message: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        message = message or f'The file "{file_path}" was not found.'
        super().__init__(
            message=message,
            error_code=ErrorCode.FILE_NOT_FOUND,
            file_path=file_path,
            details=details,
        )


class FileTooLargeError(FileError):
    """Raised when an uploaded workbook exceeds the maximum allowed size."""

    http_status: int = 413

    def __init__(
        self,
        file_size: int,
        max_size: int,
        file_path: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        details["file_size_bytes"] = file_size
        details["max_size_bytes"] = max_size
        message = (
            f"File size ({file_size} bytes) exceeds maximum "
            f"allowed size ({max_size} bytes)"
        )
        super().__init__(
            message=message,
            error_code=ErrorCode.FILE_TOO_LARGE,
            file_path=file_path,
            details=details,
        )
        self.file_size = file_size
        self.max_size = max_size


class UnsupportedFormatError(FileError):
    """Raised when an upload is not an xlsx workbook."""

    http_status: int = 415

    def __init__(
        self,
        message: str,
        extension: str | None = None,
        file_path: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if extension is not None:
            details["extension"] = extension
        super().__init__(
            message=message,
            error_code=ErrorCode.UNSUPPORTED_FORMAT,
            file_path=file_path,
            details=details,
        )
        self.extension = extension


# =============================================================================
# Reference Errors (E2xxx)
# =============================================================================


class InvalidReferenceError(ConverterError):
    """Raised when an A1-style reference cannot be decoded."""

    http_status: int = 400

    def __init__(
        self,
        reference: str,
        error_code: ErrorCode = ErrorCode.INVALID_REFERENCE,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize with the offending reference.

        Args:
            reference: The reference string that failed to decode.
            error_code: Error code, INVALID_RANGE for range strings.
            details: Additional details.
        """
        details = details or {}
        details["reference"] = reference
        super().__init__(
            message=f"Invalid cell reference: {reference}",
            error_code=error_code,
            details=details,
        )
        self.reference = reference


# =============================================================================
# Layout Errors (E3xxx)
# =============================================================================


class LayoutError(ConverterError):
    """Base class for layout engine errors."""

    http_status: int = 500

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.LAYOUT_FAILED,
        stage: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize with layout stage.

        Args:
            message: Error message.
            error_code: Error code.
            stage: The layout stage where the error occurred.
            details: Additional details.
        """
        details = details or {}
        if stage:
            details["layout_stage"] = stage
        super().__init__(message, error_code, details)
        self.stage = stage


class ImagePlacementError(LayoutError):
    """Raised when an embedded image cannot be positioned or decoded.

    The planner and renderer catch this and skip the image.
    """

    def __init__(
        self,
        message: str,
        image_index: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if image_index is not None:
            details["image_index"] = image_index
        super().__init__(
            message=message,
            error_code=ErrorCode.IMAGE_PLACEMENT_FAILED,
            stage="image_placement",
            details=details,
        )


# =============================================================================
# Collaborator Errors (E4xxx, E5xxx)
# =============================================================================


class WorkbookReadError(ConverterError):
    """Raised when the workbook cannot be parsed into a grid."""

    http_status: int = 422

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.WORKBOOK_PARSE_FAILED,
        sheet_name: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if sheet_name:
            details["sheet_name"] = sheet_name
        super().__init__(message, error_code, details)
        self.sheet_name = sheet_name


class RenderBackendError(ConverterError):
    """Raised when the rendering backend fails to serialize a paint plan."""

    http_status: int = 500

    def __init__(
        self,
        message: str,
        page_number: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if page_number is not None:
            details["page_number"] = page_number
        super().__init__(
            message=message,
            error_code=ErrorCode.RENDER_FAILED,
            details=details,
        )
        self.page_number = page_number
