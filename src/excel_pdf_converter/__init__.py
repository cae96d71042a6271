"""Excel to PDF Converter - renders Excel worksheets as paginated PDF documents."""

__version__ = "0.1.0"


def main() -> None:
    """Run the FastAPI server using uvicorn."""
    import uvicorn

    from excel_pdf_converter.config import settings

    uvicorn.run(
        "excel_pdf_converter.api:app",
        host=settings.server_host,
        port=settings.server_port,
        reload=settings.debug,
    )
