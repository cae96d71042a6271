"""Options controlling layout and page sizing."""

from dataclasses import dataclass

# Letter size in points.
LETTER_WIDTH = 612.0
LETTER_HEIGHT = 792.0


@dataclass(frozen=True)
class LayoutOptions:
    """Options controlling layout behaviour.

    Attributes:
        enable_pagination: Split rows across pages of ``paginated_page_height``.
        fixed_decimal_places: Decimals for fixed formats that do not state them.
        max_page_width: Page width cap in points.
        max_page_height: Page height cap in points; exceeding it forces pagination.
        min_page_width: Page width floor when ``enforce_minimum_size`` is set.
        min_page_height: Page height floor when ``enforce_minimum_size`` is set.
        enforce_minimum_size: Raise small pages to the minimum dimensions.
        row_height: Fixed height of every grid row.
        margin: Page margin on every side.
        padding: Initial column width and per-cell horizontal padding.
        extra_space: Additional slack added to every measured cell.
        default_font_size: Font size for cells that declare none.
        paginated_page_height: Page height used when pagination is requested.
    """

    enable_pagination: bool = False
    fixed_decimal_places: int = 2
    max_page_width: float = 14400.0
    max_page_height: float = 14400.0
    min_page_width: float = LETTER_WIDTH
    min_page_height: float = LETTER_HEIGHT
    enforce_minimum_size: bool = False
    row_height: float = 25.0
    margin: float = 50.0
    padding: float = 10.0
    extra_space: float = 10.0
    default_font_size: float = 11.0
    paginated_page_height: float = LETTER_HEIGHT
