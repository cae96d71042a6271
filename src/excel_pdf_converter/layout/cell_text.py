"""Resolution of cell values to the exact text drawn in the PDF.

The resolver is a strict priority chain over the ``CellValue`` union: specific
variants are handled before generic fallbacks, so the ``match`` arms below must
keep their order.
"""

import re
from datetime import datetime
from typing import Any

from excel_pdf_converter.grid import (
    CellValue,
    Date,
    Empty,
    FormulaResult,
    Hyperlink,
    Number,
    RawValue,
    RichText,
    Text,
)

DEFAULT_DECIMAL_PLACES = 2

# Number formats containing any of these are treated as fixed-decimal formats.
DECIMAL_FORMAT_MARKERS = ("0.00", "#.##", "0.0")

_DECIMAL_RUN = re.compile(r"\.0+")
_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\.\d{3}Z$")
_ISO_DATE_FORMAT = "%Y-%m-%dT%H:%M:%S.%fZ"


def resolve_cell_text(
    value: CellValue,
    rendered_text: str = "",
    fixed_decimal_places: int = DEFAULT_DECIMAL_PLACES,
) -> str:
    """Return the display string for a cell value.

    Args:
        value: The tagged cell value.
        rendered_text: Display text supplied by the reading collaborator, if any.
        fixed_decimal_places: Decimal places used when a number format asks for
            fixed decimals without spelling out how many.

    Returns:
        The text to draw; never None.
    """
    match value:
        case Empty():
            return ""
        case FormulaResult(error_code=str(code)) if code:
            return f"#{code.upper()}"
        case FormulaResult(evaluated=result) if _is_number(result):
            return format_number(result, value.format_hint, fixed_decimal_places)
        case FormulaResult(evaluated=result) if result is not None:
            return _stringify(result)
        case FormulaResult():
            return _unevaluated_formula_text(value, rendered_text)
        case Number(value=number, format_hint=hint):
            return format_number(
                number,
                hint,
                fixed_decimal_places,
                rendered_text=rendered_text,
            )
        case RichText(runs=runs):
            return "".join(runs)
        case Hyperlink(display_text=display_text):
            return display_text
        case Date(iso=iso):
            return format_iso_date(iso)
        case Text(text=text):
            return text
        case RawValue(raw=raw):
            text = _text_field(raw)
            if text:
                return text
            return _stringify(raw)
    return _stringify(value)


def format_number(
    value: float,
    format_hint: str,
    fixed_decimal_places: int = DEFAULT_DECIMAL_PLACES,
    rendered_text: str = "",
) -> str:
    """Format a number using the narrow decimal-format heuristic.

    A format containing ``0.00``, ``#.##`` or ``0.0`` fixes the number of
    decimals: the length of the first ``.0+`` run minus one, or
    ``fixed_decimal_places`` when there is no such run. Any other format keeps
    the natural representation, preferring a collaborator-rendered decimal
    text when one is available.
    """
    hint = format_hint or ""
    if any(marker in hint for marker in DECIMAL_FORMAT_MARKERS):
        match = _DECIMAL_RUN.search(hint)
        places = len(match.group(0)) - 1 if match else fixed_decimal_places
        return f"{value:.{places}f}"

    if (
        rendered_text
        and "." in rendered_text
        and not rendered_text.startswith("=")
        and "(" not in rendered_text
    ):
        return rendered_text

    return natural_number_text(value)


def natural_number_text(value: float) -> str:
    """Integers without a decimal point, other values in shortest form."""
    if isinstance(value, int):
        return str(value)
    if value.is_integer():
        return str(int(value))
    return repr(value)


def format_iso_date(iso: str) -> str:
    """Render an ISO timestamp as ``M/D/YYYY``; unparseable input is returned as-is."""
    if not _ISO_DATE.match(iso):
        return iso
    try:
        parsed = datetime.strptime(iso, _ISO_DATE_FORMAT)
    except ValueError:
        return iso
    return f"{parsed.month}/{parsed.day}/{parsed.year}"


def _unevaluated_formula_text(value: FormulaResult, rendered_text: str) -> str:
    cached = value.cached_text or rendered_text
    if cached:
        return cached
    if value.shared:
        return "0"
    return f"={value.formula}"


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _stringify(value: Any) -> str:
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    return str(value)


def _text_field(raw: Any) -> str:
    if isinstance(raw, dict):
        text = raw.get("text")
    else:
        text = getattr(raw, "text", None)
    return text if isinstance(text, str) else ""
