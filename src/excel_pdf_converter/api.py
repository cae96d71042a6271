"""FastAPI application for converting Excel worksheets to PDF."""

import uuid
from datetime import UTC, datetime
from pathlib import Path
from typing import Annotated, Any

from fastapi import (
    FastAPI,
    File,
    Form,
    HTTPException,
    Request,
    UploadFile,
    status,
)
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response

from excel_pdf_converter import __version__
from excel_pdf_converter.config import settings, validate_settings_on_startup
from excel_pdf_converter.models import ErrorDetail, HealthResponse, PlanSummaryResponse
from excel_pdf_converter.services.converter import ExcelPdfConverter
from excel_pdf_converter.utils.exceptions import (
    ConverterError,
    ErrorCode,
    FileTooLargeError,
    UnsupportedFormatError,
)
from excel_pdf_converter.utils.logging import (
    clear_context,
    configure_logging,
    get_logger,
    get_request_id,
    set_request_id,
)

# Configure structured logging using settings
configure_logging(
    level=settings.log_level_int,
    use_structured_formatter=True,
)
logger = get_logger(__name__)

SUPPORTED_EXTENSIONS = {".xlsx", ".xlsm"}
PDF_MEDIA_TYPE = "application/pdf"


async def _read_workbook_upload(request: Request, file: UploadFile) -> bytes:
    """Validate an uploaded workbook's name and size and return its content."""
    request_id = getattr(request.state, "request_id", None)
    filename = file.filename or ""
    extension = Path(filename).suffix.lower()
    if extension not in SUPPORTED_EXTENSIONS:
        logger.warning(
            "Unsupported upload format",
            filename=filename,
            request_id=request_id,
        )
        raise UnsupportedFormatError(
            message=(
                f"Unsupported file format '{extension or filename}'. "
                f"Expected one of: {', '.join(sorted(SUPPORTED_EXTENSIONS))}"
            ),
            extension=extension or None,
        )

    content = await file.read()
    if len(content) > settings.max_file_size_bytes:
        logger.warning(
            "File too large",
            file_size=len(content),
            max_size=settings.max_file_size_bytes,
            request_id=request_id,
        )
        raise FileTooLargeError(
            file_size=len(content),
            max_size=settings.max_file_size_bytes,
        )
    return content


def create_app(converter: ExcelPdfConverter | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="Excel to PDF Converter API",
        description=(
            "Converts Excel worksheets to PDF documents, preserving cell styles, "
            "merged regions, embedded images and column sizing."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )

    # Configure CORS using settings
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "X-Page-Count"],
    )

    # Validate settings on startup
    validate_settings_on_startup(settings)

    app.state.converter = converter or ExcelPdfConverter(
        options=settings.layout_options(),
        fonts=settings.font_registry(),
    )

    @app.middleware("http")
    async def request_id_middleware(request: Request, call_next: Any) -> Any:
        """Assign a request ID, expose it in logs and the response headers."""
        request_id = request.headers.get("X-Request-ID", str(uuid.uuid4()))
        set_request_id(request_id)
        request.state.request_id = request_id

        try:
            response = await call_next(request)
            response.headers["X-Request-ID"] = request_id
            return response
        finally:
            clear_context()

    @app.exception_handler(ConverterError)
    async def converter_exception_handler(
        request: Request, exc: ConverterError
    ) -> JSONResponse:
        """Return structured error responses for converter exceptions."""
        request_id = getattr(request.state, "request_id", get_request_id())
        logger.error(
            f"Converter Error: {exc.message}",
            error_code=exc.error_code.value,
            http_status=exc.http_status,
        )
        return JSONResponse(
            status_code=exc.http_status,
            content=ErrorDetail(
                detail=exc.message,
                error_code=exc.error_code.value,
                details=exc.details if exc.details else None,
                request_id=request_id,
            ).model_dump(exclude_none=True),
        )

    @app.exception_handler(HTTPException)
    async def http_exception_handler(
        request: Request, exc: HTTPException
    ) -> JSONResponse:
        """Custom exception handler for HTTP exceptions."""
        request_id = getattr(request.state, "request_id", get_request_id())
        logger.warning(
            f"HTTP Error: {exc.detail}",
            status_code=exc.status_code,
        )
        return JSONResponse(
            status_code=exc.status_code,
            content=ErrorDetail(
                detail=str(exc.detail),
                request_id=request_id,
            ).model_dump(exclude_none=True),
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(
        request: Request, exc: Exception
    ) -> JSONResponse:
        """Catch-all exception handler for unexpected errors.

        Logs the full exception and returns a generic error response
        to avoid leaking internal details.
        """
        request_id = getattr(request.state, "request_id", get_request_id())
        logger.exception(
            f"Unexpected error: {type(exc).__name__}",
            error_type=type(exc).__name__,
        )
        if settings.debug:
            detail = f"Internal server error: {type(exc).__name__}: {exc}"
        else:
            detail = "Internal server error. Please try again later."

        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=ErrorDetail(
                detail=detail,
                error_code=ErrorCode.INTERNAL_ERROR.value,
                request_id=request_id,
            ).model_dump(exclude_none=True),
        )

    @app.get("/health", response_model=HealthResponse, tags=["Health"])
    async def health_check(request: Request) -> dict[str, Any]:
        """Check the health status of the service."""
        request_id = getattr(request.state, "request_id", None)
        logger.debug("Health check requested", request_id=request_id)
        return {
            "status": "healthy",
            "timestamp": datetime.now(UTC).isoformat(),
            "version": __version__,
        }

    @app.post(
        "/convert",
        response_class=Response,
        tags=["Conversion"],
        responses={
            200: {"content": {PDF_MEDIA_TYPE: {}}, "description": "PDF document"},
            413: {"model": ErrorDetail, "description": "File too large"},
            415: {"model": ErrorDetail, "description": "Unsupported file format"},
            422: {"model": ErrorDetail, "description": "Unreadable workbook"},
        },
    )
    async def convert_workbook(
        request: Request,
        file: Annotated[UploadFile, File(description="Excel workbook to convert")],
        sheet_name: Annotated[
            str | None, Form(description="Worksheet to convert (default: first)")
        ] = None,
    ) -> Response:
        """Convert an uploaded worksheet to a PDF document.

        Returns:
            The PDF, with the page count in the ``X-Page-Count`` header.

        Raises:
            UnsupportedFormatError: 415 if the upload is not an xlsx workbook
            FileTooLargeError: 413 if the upload exceeds the size limit
            WorkbookReadError: 422 if the workbook cannot be decoded
        """
        content = await _read_workbook_upload(request, file)
        converter: ExcelPdfConverter = request.app.state.converter
        result = await run_in_threadpool(converter.convert_bytes, content, sheet_name)

        stem = Path(file.filename or "workbook").stem
        return Response(
            content=result.pdf,
            media_type=PDF_MEDIA_TYPE,
            headers={
                "Content-Disposition": f'attachment; filename="{stem}.pdf"',
                "X-Page-Count": str(result.page_count),
            },
        )

    @app.post(
        "/plan",
        response_model=PlanSummaryResponse,
        tags=["Conversion"],
        responses={
            413: {"model": ErrorDetail, "description": "File too large"},
            415: {"model": ErrorDetail, "description": "Unsupported file format"},
            422: {"model": ErrorDetail, "description": "Unreadable workbook"},
        },
    )
    async def plan_workbook(
        request: Request,
        file: Annotated[UploadFile, File(description="Excel workbook to lay out")],
        sheet_name: Annotated[
            str | None, Form(description="Worksheet to lay out (default: first)")
        ] = None,
    ) -> PlanSummaryResponse:
        """Lay out an uploaded worksheet and summarize the pages without rendering."""
        content = await _read_workbook_upload(request, file)
        converter: ExcelPdfConverter = request.app.state.converter
        layout = await run_in_threadpool(converter.plan_bytes, content, sheet_name)
        return PlanSummaryResponse.from_layout(layout)

    return app


# Create the default app instance
app = create_app()
