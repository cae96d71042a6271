"""Services for reading workbooks, rendering PDFs and running conversions."""

from excel_pdf_converter.services.converter import ConversionResult, ExcelPdfConverter
from excel_pdf_converter.services.pdf_renderer import PdfRenderer, RenderedDocument
from excel_pdf_converter.services.workbook_reader import (
    WorkbookReader,
    WorkbookReadOptions,
)

__all__ = [
    "ConversionResult",
    "ExcelPdfConverter",
    "PdfRenderer",
    "RenderedDocument",
    "WorkbookReadOptions",
    "WorkbookReader",
]
