"""A1-style cell reference encoding and decoding."""

import re

from excel_pdf_converter.grid import CellRef, MergeRegion
from excel_pdf_converter.utils.exceptions import ErrorCode, InvalidReferenceError

_REFERENCE_PATTERN = re.compile(r"^([A-Z]+)([1-9]\d*)$")


def encode_column(col: int) -> str:
    """Convert a 1-based column number to letters (1 -> A, 27 -> AA)."""
    letters = ""
    while col > 0:
        remainder = (col - 1) % 26
        letters = chr(ord("A") + remainder) + letters
        col = (col - 1) // 26
    return letters


def encode_cell(row: int, col: int) -> str:
    """Convert 1-based row and column numbers to a reference such as ``AA10``.

    Examples:
        >>> encode_cell(1, 1)
        'A1'
        >>> encode_cell(2, 27)
        'AA2'
    """
    return f"{encode_column(col)}{row}"


def decode_cell(ref: str) -> CellRef:
    """Convert a reference such as ``B3`` to a CellRef.

    Raises:
        InvalidReferenceError: If ``ref`` is not uppercase letters followed
            by a row number without leading zeros (``A0`` and ``A01`` fail).
    """
    match = _REFERENCE_PATTERN.match(ref)
    if match is None:
        raise InvalidReferenceError(ref)
    letters, digits = match.groups()
    col = 0
    for letter in letters:
        col = col * 26 + (ord(letter) - ord("A") + 1)
    return CellRef(row=int(digits), col=col)


def encode_range(region: MergeRegion) -> str:
    """Render a merge region as ``A1:C3``."""
    return (
        f"{encode_cell(region.top, region.left)}:"
        f"{encode_cell(region.bottom, region.right)}"
    )


def decode_range(ref: str) -> MergeRegion:
    """Parse ``A1:C3`` (or a single reference) into a MergeRegion."""
    start, sep, end = ref.partition(":")
    try:
        first = decode_cell(start)
        last = decode_cell(end) if sep else first
    except InvalidReferenceError as e:
        raise InvalidReferenceError(ref, error_code=ErrorCode.INVALID_RANGE) from e
    return MergeRegion(
        top=min(first.row, last.row),
        left=min(first.col, last.col),
        bottom=max(first.row, last.row),
        right=max(first.col, last.col),
    )
