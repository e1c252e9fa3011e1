"""Tests for API Routes."""

import io
from collections.abc import Callable, Generator
from typing import Any
from unittest.mock import AsyncMock

import pytest
from fastapi import UploadFile
from fastapi.testclient import TestClient

from siteanalyst.adapters.geocoding import GeocodeResult
from siteanalyst.config import Settings, get_settings
from siteanalyst.config.errors import BackendUnavailableError, ErrorCode, SiteAnalystError
from siteanalyst.domains.extraction import CANONICAL_ORDER, SectionId, SectionOrchestrator

from .deps import get_geocoder, get_orchestrator
from .main import create_app
from .middleware import error_code_to_status
from .routes.analysis import extract_analysis

PDF = b"%PDF-1.7 fake document"


@pytest.fixture
def backend(scripted_backend: Callable[..., Any]) -> Any:
    """Backend answering every section with a valid payload."""
    return scripted_backend()


@pytest.fixture
def mock_geocoder() -> AsyncMock:
    """Create a mock geocoding client."""
    mock = AsyncMock()
    mock.geocode_many.return_value = [
        GeocodeResult(
            address="1200 NW Marshall St",
            lat=45.53,
            lng=-122.68,
            success=True,
            display_name="Marshall St, Portland",
        ),
        GeocodeResult.miss("Atlantis"),
    ]
    return mock


@pytest.fixture
def client(backend: Any, mock_geocoder: AsyncMock) -> Generator[TestClient, None, None]:
    """Create a test client with mocked dependencies."""
    app = create_app()

    app.dependency_overrides[get_orchestrator] = lambda: SectionOrchestrator(backend)
    app.dependency_overrides[get_geocoder] = lambda: mock_geocoder
    app.dependency_overrides[get_settings] = lambda: Settings(_env_file=None, max_upload_mb=1)

    yield TestClient(app)

    app.dependency_overrides.clear()


def _upload(client: TestClient, content: bytes = PDF, filename: str = "offering.pdf"):
    return client.post(
        "/api/analysis/extract",
        files={"file": (filename, content, "application/pdf")},
    )


def test_health_endpoint(client: TestClient) -> None:
    """Test health check endpoint."""
    response = client.get("/health")
    assert response.status_code == 200

    data = response.json()
    assert data["status"] == "healthy"
    assert data["service"] == "siteanalyst"


def test_list_sections(client: TestClient) -> None:
    """Test sections are listed in reporting order."""
    response = client.get("/api/analysis/sections")
    assert response.status_code == 200

    data = response.json()
    assert [s["id"] for s in data] == [s.value for s in CANONICAL_ORDER]
    assert data[0]["data_schema"] == "SupplyData interface structure"


def test_extract_success(client: TestClient) -> None:
    """Test a valid upload returns the full record payload."""
    response = _upload(client)
    assert response.status_code == 200

    body = response.json()
    assert body["filename"] == "offering.pdf"
    assert set(body["data"]) == {s.value for s in CANONICAL_ORDER}
    assert body["data"]["submarket"] == {"submarket": "Pearl District"}
    assert body["confidence"]["landSales"] == 0.95


def test_extract_rejects_non_pdf(client: TestClient, backend: Any) -> None:
    """Test non-PDF filenames are rejected before extraction."""
    response = _upload(client, filename="notes.txt")

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "EXTRACTION_INVALID_PDF"
    assert backend.calls == []


def test_extract_rejects_empty_upload(client: TestClient) -> None:
    response = _upload(client, content=b"")
    assert response.status_code == 400
    assert response.json()["error"]["message"] == "Uploaded file is empty"


def test_extract_rejects_oversize_upload(client: TestClient, backend: Any) -> None:
    """Test uploads over the configured limit."""
    response = _upload(client, content=b"0" * (1024 * 1024 + 1))

    assert response.status_code == 413
    assert response.json()["error"]["code"] == "EXTRACTION_TOO_LARGE"
    assert backend.calls == []


def test_extract_lists_every_failed_section(client: TestClient, backend: Any) -> None:
    """Test partial failure returns 422 with each failed section."""
    backend.script[SectionId.ZONING_OVERLAYS] = "Zoned EX, see page 4."
    backend.script[SectionId.PROPERTY_NAME] = '{"propertyName": 12}'

    response = _upload(client)

    assert response.status_code == 422
    error = response.json()["error"]
    assert error["code"] == "EXTRACTION_INCOMPLETE"
    assert error["details"]["failures"] == [
        {
            "section": "zoningOverlays",
            "errors": [{"field": "format", "message": "AI response was not valid JSON"}],
        },
        {
            "section": "propertyName",
            "errors": [
                {"field": "propertyName", "message": "Property name must be a non-empty string"}
            ],
        },
    ]


def test_extract_backend_failure_is_aggregated(client: TestClient, backend: Any) -> None:
    """Test a backend outage on one section still yields the aggregate error."""
    backend.script[SectionId.DEMOGRAPHICS] = BackendUnavailableError("quota exceeded")

    response = _upload(client)

    assert response.status_code == 422
    (failure,) = response.json()["error"]["details"]["failures"]
    assert failure["errors"] == [{"field": "backend", "message": "quota exceeded"}]


def test_geocode(client: TestClient, mock_geocoder: AsyncMock) -> None:
    """Test geocoding returns one result per address."""
    response = client.post(
        "/api/analysis/geocode",
        json={"addresses": ["1200 NW Marshall St", "Atlantis"]},
    )
    assert response.status_code == 200

    data = response.json()
    assert [r["success"] for r in data] == [True, False]
    assert data[0]["lat"] == 45.53
    mock_geocoder.geocode_many.assert_awaited_once_with(["1200 NW Marshall St", "Atlantis"])


def test_geocode_requires_addresses(client: TestClient) -> None:
    response = client.post("/api/analysis/geocode", json={"addresses": []})
    assert response.status_code == 422


def test_request_id_header(client: TestClient) -> None:
    """Test that responses include request ID."""
    response = client.get("/health", headers={"X-Request-ID": "abc-123"})
    assert response.headers["x-request-id"] == "abc-123"
    assert "x-response-time-ms" in response.headers


def test_error_response_carries_request_id(client: TestClient) -> None:
    response = client.post(
        "/api/analysis/extract",
        files={"file": ("notes.txt", b"text", "text/plain")},
        headers={"X-Request-ID": "req-42"},
    )
    assert response.json()["request_id"] == "req-42"


def test_error_code_to_status() -> None:
    """Test error taxonomy to HTTP status mapping."""
    assert error_code_to_status(ErrorCode.EXTRACTION_INVALID_PDF) == 400
    assert error_code_to_status(ErrorCode.EXTRACTION_TOO_LARGE) == 413
    assert error_code_to_status(ErrorCode.EXTRACTION_INCOMPLETE) == 422
    assert error_code_to_status(ErrorCode.LLM_UNAVAILABLE) == 503
    assert error_code_to_status(ErrorCode.SECTION_UNKNOWN) == 500
    assert error_code_to_status(ErrorCode.LLM_INVALID_RESPONSE) == 500
    assert {code.name for code in ErrorCode} == {
        "EXTRACTION_INCOMPLETE",
        "EXTRACTION_INVALID_PDF",
        "EXTRACTION_TOO_LARGE",
        "SECTION_UNKNOWN",
        "LLM_UNAVAILABLE",
        "LLM_INVALID_RESPONSE",
        "INTERNAL_ERROR",
    }


def test_404_for_unknown_routes(client: TestClient) -> None:
    """Test 404 for non-existent routes."""
    response = client.get("/api/nonexistent")
    assert response.status_code == 404


class _RecordingStream(io.BytesIO):
    """In-memory upload body that records every read size."""

    def __init__(self, content: bytes) -> None:
        super().__init__(content)
        self.reads: list[int] = []

    def read(self, size: int | None = -1) -> bytes:
        self.reads.append(-1 if size is None else size)
        return super().read(size)


async def test_oversize_upload_is_never_fully_buffered(backend: Any) -> None:
    """Test an upload of unknown size is read no further than the limit."""
    limit = 1024 * 1024
    stream = _RecordingStream(b"0" * (limit * 3))
    upload = UploadFile(stream, filename="offering.pdf")

    with pytest.raises(SiteAnalystError) as exc_info:
        await extract_analysis(
            upload,
            orchestrator=SectionOrchestrator(backend),
            settings=Settings(_env_file=None, max_upload_mb=1),
        )

    assert exc_info.value.code == ErrorCode.EXTRACTION_TOO_LARGE
    assert stream.reads == [limit + 1]
    assert backend.calls == []


async def test_declared_size_rejected_before_reading(backend: Any) -> None:
    """Test a declared oversize upload is refused without reading the body."""
    stream = _RecordingStream(b"%PDF")
    upload = UploadFile(stream, size=5 * 1024 * 1024, filename="offering.pdf")

    with pytest.raises(SiteAnalystError) as exc_info:
        await extract_analysis(
            upload,
            orchestrator=SectionOrchestrator(backend),
            settings=Settings(_env_file=None, max_upload_mb=1),
        )

    assert exc_info.value.details["size_bytes"] == 5 * 1024 * 1024
    assert stream.reads == []
