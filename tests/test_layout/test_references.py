"""Tests for A1-style reference encoding and decoding."""

import pytest

from excel_pdf_converter.grid import CellRef, MergeRegion
from excel_pdf_converter.layout.references import (
    decode_cell,
    decode_range,
    encode_cell,
    encode_column,
    encode_range,
)
from excel_pdf_converter.utils.exceptions import ErrorCode, InvalidReferenceError


class TestEncode:
    @pytest.mark.parametrize(
        ("col", "letters"),
        [(1, "A"), (26, "Z"), (27, "AA"), (52, "AZ"), (53, "BA"), (702, "ZZ"), (703, "AAA")],
    )
    def test_encode_column(self, col: int, letters: str) -> None:
        assert encode_column(col) == letters

    def test_encode_cell(self) -> None:
        assert encode_cell(1, 1) == "A1"
        assert encode_cell(10, 27) == "AA10"

    def test_encode_range(self) -> None:
        assert encode_range(MergeRegion(1, 1, 3, 3)) == "A1:C3"


class TestDecode:
    def test_decode_cell(self) -> None:
        assert decode_cell("B3") == CellRef(row=3, col=2)
        assert decode_cell("AA10") == CellRef(row=10, col=27)

    def test_decode_inverts_encode(self) -> None:
        for row, col in [(1, 1), (5, 26), (100, 27), (42, 703)]:
            assert decode_cell(encode_cell(row, col)) == CellRef(row, col)

    @pytest.mark.parametrize("ref", ["A1", "Z9", "AA10", "AZ100", "XFD1048576"])
    def test_encode_inverts_decode(self, ref: str) -> None:
        decoded = decode_cell(ref)
        assert encode_cell(decoded.row, decoded.col) == ref

    def test_decoded_row_is_at_least_one(self) -> None:
        assert decode_cell("B1").row == 1
        with pytest.raises(InvalidReferenceError):
            decode_cell("B0")

    @pytest.mark.parametrize("ref", ["", "1A", "A-1", "a1", "A", "12", "A1B", "A0", "A01"])
    def test_decode_rejects_malformed(self, ref: str) -> None:
        with pytest.raises(InvalidReferenceError) as exc_info:
            decode_cell(ref)
        assert exc_info.value.reference == ref
        assert exc_info.value.error_code == ErrorCode.INVALID_REFERENCE

    def test_decode_range_normalizes_corners(self) -> None:
        assert decode_range("C3:A1") == MergeRegion(1, 1, 3, 3)

    def test_decode_range_single_cell(self) -> None:
        assert decode_range("B2") == MergeRegion(2, 2, 2, 2)

    def test_decode_range_rejects_malformed(self) -> None:
        with pytest.raises(InvalidReferenceError) as exc_info:
            decode_range("A1:3C")
        assert exc_info.value.error_code == ErrorCode.INVALID_RANGE
