"""Utilities package for the Excel to PDF converter.

This package provides:
- Centralized exception classes (exceptions.py)
- Structured logging utilities (logging.py)
"""

from excel_pdf_converter.utils.exceptions import (
    ConverterError,
    ErrorCode,
    FileError,
    HTTPStatusMixin,
    ImagePlacementError,
    InvalidReferenceError,
    LayoutError,
    RenderBackendError,
    UnsupportedFormatError,
    WorkbookReadError,
)
from excel_pdf_converter.utils.logging import (
    LogContext,
    StructuredLogger,
    get_logger,
    get_request_id,
    set_request_id,
)

__all__ = [
    # Exceptions
    "ConverterError",
    "ErrorCode",
    "FileError",
    "HTTPStatusMixin",
    "ImagePlacementError",
    "InvalidReferenceError",
    "LayoutError",
    "RenderBackendError",
    "UnsupportedFormatError",
    "WorkbookReadError",
    # Logging
    "LogContext",
    "StructuredLogger",
    "get_logger",
    "get_request_id",
    "set_request_id",
]
