"""
Tests del contrato HTTP de /api/v1/indicators y /api/v1/sync.

Los casos de uso se reemplazan via dependency_overrides; no se toca la base.
"""
from __future__ import annotations

from datetime import date, datetime, timezone
from unittest.mock import AsyncMock, patch

import pytest
from httpx import ASGITransport, AsyncClient

from app.api.v1.dependencies.use_case_deps import (
    get_fred_sync_use_cases,
    get_indicator_use_cases,
)
from app.application.dto.indicator_dto import IndicatorDTO, ObservationDTO, SeriesDataDTO
from app.application.dto.sync_dto import FredSyncJobResponseDTO, FredSyncStateDTO
from app.shared.exceptions.domain import ConflictException, EntityNotFoundException


@pytest.fixture
def indicator_use_cases() -> AsyncMock:
    uc = AsyncMock()
    uc.get_all_indicators = AsyncMock(
        return_value=[IndicatorDTO(series_id="GDP", description="Gross Domestic Product")]
    )
    points = [
        ObservationDTO(date=date(2020, 1, 1), value=21000.0),
        ObservationDTO(date=date(2020, 2, 1), value=None),
    ]
    uc.get_series_data = AsyncMock(
        return_value=SeriesDataDTO(
            series_id="GDP",
            description="Gross Domestic Product",
            observations=points,
            segments=[[points[0]]],
            non_null_points=1,
            has_enough_points=False,
        )
    )
    return uc


@pytest.fixture
def sync_use_cases() -> AsyncMock:
    uc = AsyncMock()
    uc.start_sync = AsyncMock(
        return_value=FredSyncJobResponseDTO(
            job_id="fake-job-id",
            status="running",
            message="Iniciando sincronizacion con FRED...",
            created_at=datetime.now(timezone.utc),
        )
    )
    uc.get_job_status = AsyncMock(side_effect=KeyError("job_not_found"))
    uc.get_state = AsyncMock(return_value=FredSyncStateDTO(current_offset=2, catalog_size=2))
    return uc


@pytest.fixture
def app_with_mocks(indicator_use_cases: AsyncMock, sync_use_cases: AsyncMock):
    """Crea la app FastAPI con los use cases mockeados via dependency_overrides."""
    from main import create_application
    app = create_application()
    app.dependency_overrides[get_indicator_use_cases] = lambda: indicator_use_cases
    app.dependency_overrides[get_fred_sync_use_cases] = lambda: sync_use_cases
    yield app
    app.dependency_overrides.clear()


async def _get(app, path: str, **kwargs):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        return await client.get(path, **kwargs)


async def _post(app, path: str):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        return await client.post(path)


@pytest.mark.asyncio
async def test_list_indicators(app_with_mocks) -> None:
    response = await _get(app_with_mocks, "/api/v1/indicators/")
    assert response.status_code == 200
    assert response.json() == [{"series_id": "GDP", "description": "Gross Domestic Product"}]


@pytest.mark.asyncio
async def test_observations_serialize_null_as_null(app_with_mocks, indicator_use_cases) -> None:
    response = await _get(
        app_with_mocks,
        "/api/v1/indicators/GDP/observations",
        params={"start": "2020-01-01", "end": "2020-12-31"},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["observations"][1] == {"date": "2020-02-01", "value": None}
    assert data["has_enough_points"] is False
    indicator_use_cases.get_series_data.assert_awaited_once_with(
        "GDP", start=date(2020, 1, 1), end=date(2020, 12, 31)
    )


@pytest.mark.asyncio
async def test_observations_unknown_series_is_404(app_with_mocks, indicator_use_cases) -> None:
    indicator_use_cases.get_series_data.side_effect = EntityNotFoundException("Indicator", "NOPE")

    response = await _get(app_with_mocks, "/api/v1/indicators/NOPE/observations")

    assert response.status_code == 404
    assert response.json()["error"] == "ENTITY_NOT_FOUND"


@pytest.mark.asyncio
async def test_observations_rejects_bad_date(app_with_mocks) -> None:
    response = await _get(app_with_mocks, "/api/v1/indicators/GDP/observations", params={"start": "ayer"})
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_sync_trigger_returns_202(app_with_mocks) -> None:
    response = await _post(app_with_mocks, "/api/v1/sync/fred")
    assert response.status_code == 202
    assert response.json()["job_id"] == "fake-job-id"


@pytest.mark.asyncio
async def test_sync_job_unknown_is_404(app_with_mocks) -> None:
    response = await _get(app_with_mocks, "/api/v1/sync/fred/jobs/nope")
    assert response.status_code == 404
    assert response.json()["detail"] == "Job no encontrado"


@pytest.mark.asyncio
async def test_sync_state(app_with_mocks) -> None:
    response = await _get(app_with_mocks, "/api/v1/sync/fred/state")
    assert response.status_code == 200
    assert response.json()["current_offset"] == 2


@pytest.mark.asyncio
async def test_sync_reset_while_running_is_409(app_with_mocks, sync_use_cases) -> None:
    sync_use_cases.reset_offset.side_effect = ConflictException("job corriendo", error_code="SYNC_RUNNING")

    response = await _post(app_with_mocks, "/api/v1/sync/fred/reset")

    assert response.status_code == 409
    assert response.json()["error"] == "SYNC_RUNNING"


@pytest.mark.asyncio
async def test_health_reports_api_key_presence(app_with_mocks) -> None:
    response = await _get(app_with_mocks, "/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
    assert "fred_api_key_configured" in response.json()


@pytest.mark.asyncio
async def test_lifespan_runs_startup_and_shutdown() -> None:
    from app.core.events import lifespan
    from main import create_application

    app = create_application()
    with patch("app.core.events.init_db", new_callable=AsyncMock) as mock_init, \
         patch("app.core.events.close_db", new_callable=AsyncMock) as mock_close, \
         patch("app.core.events.logger.add"):
        async with lifespan(app):
            mock_init.assert_awaited_once()
            mock_close.assert_not_awaited()
        mock_close.assert_awaited_once()
