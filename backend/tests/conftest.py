"""Pytest configuration and shared fixtures.

This module provides centralized test fixtures for:
- HTTP client for API testing
- Authentication headers
- Common lab submission builders
"""

import os

# Configure settings before any lablens module reads the environment
os.environ["API_KEY"] = "test-api-key"
os.environ["OPENAI_API_KEY"] = ""

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from lablens.config import settings
from lablens.main import app
from lablens.schemas import Marker, Panel, PanelType, Submission


# =============================================================================
# HTTP Client Fixtures
# =============================================================================


@pytest_asyncio.fixture
async def api_client():
    """Async HTTP client for testing the full FastAPI app."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers() -> dict[str, str]:
    """Headers with valid API key for authenticated requests."""
    return {"X-API-Key": settings.api_key}


# =============================================================================
# Submission Fixtures
# =============================================================================


@pytest.fixture
def make_submission():
    """Factory building a Submission from (panel_type, [(name, value, unit), ...]) pairs."""

    def _make(*panels: tuple[PanelType, list[tuple[str, float, str]]]) -> Submission:
        return Submission(
            panels=[
                Panel(
                    panel_name=panel_type,
                    markers=[Marker(name=n, value=v, unit=u) for n, v, u in markers],
                )
                for panel_type, markers in panels
            ]
        )

    return _make


@pytest.fixture
def critical_hemoglobin_submission(make_submission) -> Submission:
    """Single critically low hemoglobin in a CBC panel."""
    return make_submission((PanelType.CBC, [("Hemoglobin", 6.0, "g/dL")]))


@pytest.fixture
def abnormal_cmp_submission(make_submission) -> Submission:
    """CMP with five non-critical abnormal markers."""
    return make_submission(
        (
            PanelType.CMP,
            [
                ("Sodium", 130, "mmol/L"),
                ("Potassium", 5.5, "mmol/L"),
                ("Glucose", 110, "mg/dL"),
                ("BUN", 25, "mg/dL"),
                ("Calcium", 11.0, "mg/dL"),
            ],
        )
    )


@pytest.fixture
def sample_submission_payload() -> dict:
    """Wire-format (camelCase) submission spanning several panels."""
    return {
        "patientId": "demo-123",
        "collectedAt": "2026-01-15",
        "panels": [
            {
                "panelName": "CBC",
                "markers": [
                    {"name": "Hemoglobin", "value": 13.5, "unit": "g/dL"},
                    {"name": "WBC", "value": 7.2, "unit": "×10^3/µL"},
                ],
            },
            {
                "panelName": "THYROID",
                "markers": [
                    {"name": "TSH", "value": 5.5, "unit": "µIU/mL"},
                    {"name": "FT4", "value": 0.7, "unit": "ng/dL"},
                ],
            },
        ],
    }
