"""Tests for the FastAPI application."""

import io
from collections.abc import AsyncIterator
from unittest.mock import patch

import httpx
import pytest
from fastapi import status
from openpyxl import Workbook
from openpyxl.styles import Font

from excel_pdf_converter import __version__
from excel_pdf_converter.api import create_app

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def _workbook_bytes() -> bytes:
    wb = Workbook()
    ws = wb.active
    ws.title = "Prices"
    ws["A1"] = "Item"
    ws["B1"] = "Price"
    ws["A1"].font = Font(b=True)
    ws["B1"].font = Font(b=True)
    ws["A2"] = "Widget"
    ws["B2"] = 4.5
    ws["A3"] = "Gadget"
    ws["B3"] = 12
    wb.create_sheet("Empty")["A1"] = "nothing here"
    buffer = io.BytesIO()
    wb.save(buffer)
    return buffer.getvalue()


def _upload(
    content: bytes, filename: str = "prices.xlsx"
) -> dict[str, tuple[str, bytes, str]]:
    return {"file": (filename, content, XLSX_MEDIA_TYPE)}


@pytest.fixture
async def client() -> AsyncIterator[httpx.AsyncClient]:
    """Create an async test client for the FastAPI application."""
    app = create_app()
    async with httpx.AsyncClient(
        transport=httpx.ASGITransport(app=app), base_url="http://test"
    ) as ac:
        yield ac


class TestHealthEndpoint:
    """Tests for the health check endpoint."""

    async def test_health_check_returns_healthy(self, client: httpx.AsyncClient) -> None:
        response = await client.get("/health")

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["status"] == "healthy"
        assert data["version"] == __version__
        assert "timestamp" in data

    async def test_request_id_is_echoed(self, client: httpx.AsyncClient) -> None:
        response = await client.get("/health", headers={"X-Request-ID": "req-42"})
        assert response.headers["X-Request-ID"] == "req-42"

    async def test_request_id_is_generated(self, client: httpx.AsyncClient) -> None:
        response = await client.get("/health")
        assert response.headers["X-Request-ID"]


class TestConvertEndpoint:
    """Tests for the /convert endpoint."""

    async def test_convert_returns_pdf(self, client: httpx.AsyncClient) -> None:
        response = await client.post("/convert", files=_upload(_workbook_bytes()))

        assert response.status_code == status.HTTP_200_OK
        assert response.headers["content-type"] == "application/pdf"
        assert response.headers["X-Page-Count"] == "1"
        assert (
            response.headers["content-disposition"]
            == 'attachment; filename="prices.pdf"'
        )
        assert response.content.startswith(b"%PDF")

    async def test_convert_selected_sheet(self, client: httpx.AsyncClient) -> None:
        response = await client.post(
            "/convert",
            files=_upload(_workbook_bytes()),
            data={"sheet_name": "Empty"},
        )
        assert response.status_code == status.HTTP_200_OK

    async def test_unsupported_extension(self, client: httpx.AsyncClient) -> None:
        response = await client.post(
            "/convert", files=_upload(b"a,b\n1,2\n", filename="data.csv")
        )

        assert response.status_code == status.HTTP_415_UNSUPPORTED_MEDIA_TYPE
        data = response.json()
        assert data["error_code"] == "E1003"
        assert data["details"]["extension"] == ".csv"
        assert data["request_id"]

    async def test_file_too_large(self, client: httpx.AsyncClient) -> None:
        content = b"x" * (1024 * 1024 + 1)
        with patch("excel_pdf_converter.api.settings.max_file_size_mb", 1):
            response = await client.post("/convert", files=_upload(content))

        assert response.status_code == status.HTTP_413_REQUEST_ENTITY_TOO_LARGE
        assert response.json()["error_code"] == "E1002"

    async def test_unreadable_workbook(self, client: httpx.AsyncClient) -> None:
        response = await client.post("/convert", files=_upload(b"not a zip archive"))

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
        assert response.json()["error_code"] == "E4001"

    async def test_missing_sheet(self, client: httpx.AsyncClient) -> None:
        response = await client.post(
            "/convert",
            files=_upload(_workbook_bytes()),
            data={"sheet_name": "Missing"},
        )

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
        data = response.json()
        assert data["error_code"] == "E4002"
        assert data["details"]["sheet_names"] == ["Prices", "Empty"]

    async def test_missing_file_field(self, client: httpx.AsyncClient) -> None:
        response = await client.post("/convert")
        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


class TestPlanEndpoint:
    """Tests for the /plan endpoint."""

    async def test_plan_summary(self, client: httpx.AsyncClient) -> None:
        response = await client.post("/plan", files=_upload(_workbook_bytes()))

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["sheet_name"] == "Prices"
        assert data["total_rows"] == 3
        assert data["total_cols"] == 2
        assert data["paginated"] is False
        assert data["page_count"] == 1
        assert len(data["column_widths"]) == 2
        (page,) = data["pages"]
        assert page["number"] == 1
        assert page["images"] == 0
        assert data["command_counts"]["draw_text"] == 6

    async def test_plan_rejects_unsupported_extension(
        self, client: httpx.AsyncClient
    ) -> None:
        response = await client.post(
            "/plan", files=_upload(b"", filename="notes.txt")
        )
        assert response.status_code == status.HTTP_415_UNSUPPORTED_MEDIA_TYPE
