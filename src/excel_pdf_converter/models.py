"""Pydantic models for API requests and responses."""

from typing import Any

from pydantic import BaseModel, Field

from excel_pdf_converter.layout.engine import LayoutResult
from excel_pdf_converter.layout.paint import (
    DrawText,
    FillRect,
    PlaceImage,
    StrokeLine,
)


class HealthResponse(BaseModel):
    """Response model for health check endpoint."""

    status: str
    timestamp: str
    version: str


class PageSummary(BaseModel):
    """Size of one planned page."""

    number: int = Field(..., description="1-based page number")
    width: float = Field(..., description="Page width in points")
    height: float = Field(..., description="Page height in points")
    cells: int = Field(..., description="Number of cells drawn on the page")
    images: int = Field(..., description="Number of images drawn on the page")


class CommandCounts(BaseModel):
    """Number of paint commands of each kind."""

    fill_rect: int = 0
    stroke_line: int = 0
    draw_text: int = 0
    place_image: int = 0


class PlanSummaryResponse(BaseModel):
    """Response model for the layout preview endpoint."""

    sheet_name: str = Field(..., description="Name of the laid-out worksheet")
    total_rows: int = Field(..., description="Number of grid rows")
    total_cols: int = Field(..., description="Number of grid columns")
    paginated: bool = Field(..., description="Whether rows were split over pages")
    page_count: int = Field(..., description="Number of pages in the plan")
    column_widths: list[float] = Field(
        ..., description="Solved width of each column in points"
    )
    pages: list[PageSummary] = Field(..., description="Per-page sizes and contents")
    command_counts: CommandCounts = Field(
        ..., description="Number of paint commands by kind"
    )

    @classmethod
    def from_layout(cls, result: LayoutResult) -> "PlanSummaryResponse":
        """Summarize a layout result."""
        plan = result.plan
        return cls(
            sheet_name=result.grid.name,
            total_rows=result.grid.total_rows,
            total_cols=result.grid.total_cols,
            paginated=result.layout.geometry.paginate,
            page_count=plan.page_count,
            column_widths=[round(width, 2) for width in result.layout.widths],
            pages=[
                PageSummary(
                    number=page.number,
                    width=page.width,
                    height=page.height,
                    cells=len(page.cells),
                    images=len(page.images),
                )
                for page in result.layout.pages
            ],
            command_counts=CommandCounts(
                fill_rect=plan.count(FillRect),
                stroke_line=plan.count(StrokeLine),
                draw_text=plan.count(DrawText),
                place_image=plan.count(PlaceImage),
            ),
        )


class ErrorDetail(BaseModel):
    """Error detail model for API error responses.

    This model provides structured error responses with:
    - Human-readable error message
    - Machine-readable error code
    - Optional additional details for debugging
    - Optional request ID for correlation
    """

    detail: str = Field(..., description="Human-readable error message")
    error_code: str | None = Field(
        default=None,
        description="Machine-readable error code (e.g., 'E1001')",
    )
    details: dict[str, Any] | None = Field(
        default=None,
        description="Additional error details for debugging",
    )
    request_id: str | None = Field(
        default=None,
        description="Request ID for error correlation",
    )
