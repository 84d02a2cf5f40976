"""
Tests del orquestador FredObservationSync con stores en memoria.

Los fakes registran cada llamada para poder verificar orden de proceso,
checkpoints intermedios y ausencia de escrituras.
"""
from __future__ import annotations

import threading
from datetime import date
from types import SimpleNamespace
from typing import Optional
from unittest.mock import MagicMock, patch

import pytest

from app.infrastructure.external.fred_sync.pg_repository import SyncStateError
from app.infrastructure.external.fred_sync.sync_config import FredSyncConfig
from app.infrastructure.external.fred_sync.sync_service import (
    PHASE_FETCH,
    PHASE_MAX_DATE,
    PHASE_UPSERT,
    FredObservationSync,
    reset_fred_sync_offset,
)
from app.infrastructure.external.fred_sync.types import (
    Observation,
    SeriesDescriptor,
    parse_observation_date,
    parse_observation_value,
)


class _MemoryCatalog:
    def __init__(self, series_ids: list[str], error: Optional[Exception] = None) -> None:
        self._series = [SeriesDescriptor(s) for s in series_ids]
        self._error = error

    def list_series(self) -> list[SeriesDescriptor]:
        if self._error:
            raise self._error
        return list(self._series)


class _MemoryObservationStore:
    def __init__(self) -> None:
        self.rows: dict[tuple[str, date], Optional[float]] = {}
        self.write_calls = 0
        self.fail_max_date_for: set[str] = set()
        self.fail_upsert_for: set[str] = set()

    def max_date(self, series_id: str) -> Optional[date]:
        if series_id in self.fail_max_date_for:
            raise RuntimeError("max_date caido")
        dates = [d for (sid, d) in self.rows if sid == series_id]
        return max(dates) if dates else None

    def upsert_observations(self, rows) -> int:
        rows = list(rows)
        if rows and rows[0].series_id in self.fail_upsert_for:
            raise RuntimeError("upsert caido")
        self.write_calls += 1
        for r in rows:
            self.rows[(r.series_id, r.date)] = r.value
        return len(rows)


class _MemoryCheckpoint:
    def __init__(self, offset: int = 0) -> None:
        self.offset = offset
        self.history: list[int] = []
        self.fail_read = False
        self.fail_write = False
        self.statuses: list[str] = []

    def get_offset(self) -> int:
        if self.fail_read:
            raise RuntimeError("function_state no disponible")
        return self.offset

    def set_offset(self, offset: int) -> None:
        if self.fail_write:
            raise RuntimeError("no se pudo escribir")
        self.offset = offset
        self.history.append(offset)

    def mark_run_started(self) -> None:
        self.statuses.append("running")

    def mark_run_finished(self, status: str, error: Optional[str]) -> None:
        self.statuses.append(status)


class _MemoryProvider:
    """Responde como FRED: solo observaciones con date >= observation_start."""

    def __init__(self, data: dict[str, list[dict]]) -> None:
        self._data = data
        self.requests: list[tuple[str, date]] = []
        self.fail_for: set[str] = set()
        self.on_fetch = None

    def fetch_observations(self, series_id: str, observation_start: date) -> list[Observation]:
        self.requests.append((series_id, observation_start))
        if self.on_fetch:
            self.on_fetch(series_id)
        if series_id in self.fail_for:
            raise RuntimeError("FRED 500")
        out = []
        for raw in self._data.get(series_id, []):
            d = parse_observation_date(raw["date"])
            if d >= observation_start:
                out.append(Observation(series_id, d, parse_observation_value(raw["value"])))
        return out


def _build(catalog, store, checkpoint, provider, sleeps=None, **config):
    sleeps = sleeps if sleeps is not None else []
    return FredObservationSync(
        catalog=catalog,
        observations=store,
        checkpoint=checkpoint,
        provider=provider,
        config=FredSyncConfig(**config),
        sleep=sleeps.append,
    )


@pytest.fixture
def example_provider() -> _MemoryProvider:
    return _MemoryProvider(
        {
            "GDP": [
                {"date": "2020-01-01", "value": "21000"},
                {"date": "2020-02-01", "value": "."},
            ],
            "UNRATE": [{"date": "2020-01-01", "value": "3.5"}],
        }
    )


def test_example_scenario_end_state(example_provider) -> None:
    store = _MemoryObservationStore()
    checkpoint = _MemoryCheckpoint(offset=0)
    sync = _build(_MemoryCatalog(["GDP", "UNRATE"]), store, checkpoint, example_provider)

    report = sync.run_once()

    assert store.rows == {
        ("GDP", date(2020, 1, 1)): 21000.0,
        ("GDP", date(2020, 2, 1)): None,
        ("UNRATE", date(2020, 1, 1)): 3.5,
    }
    assert checkpoint.offset == 2
    assert report.succeeded == [("GDP", 2), ("UNRATE", 1)]
    assert report.failed == []
    assert checkpoint.statuses == ["running", "success"]


def test_first_fetch_uses_epoch_then_day_after_max(example_provider) -> None:
    store = _MemoryObservationStore()
    store.rows[("UNRATE", date(2019, 12, 31))] = 3.6
    sync = _build(_MemoryCatalog(["GDP", "UNRATE"]), store, _MemoryCheckpoint(), example_provider)

    sync.run_once()

    assert example_provider.requests == [
        ("GDP", date(1900, 1, 1)),
        ("UNRATE", date(2020, 1, 1)),
    ]


def test_resume_processes_only_from_offset() -> None:
    ids = ["A", "B", "C", "D", "E"]
    provider = _MemoryProvider({sid: [{"date": "2021-01-01", "value": "1"}] for sid in ids})
    store = _MemoryObservationStore()
    checkpoint = _MemoryCheckpoint(offset=2)

    report = _build(_MemoryCatalog(ids), store, checkpoint, provider).run_once()

    assert [sid for sid, _ in provider.requests] == ["C", "D", "E"]
    assert {sid for sid, _ in store.rows} == {"C", "D", "E"}
    assert report.start_offset == 2
    assert report.end_offset == 5


def test_checkpoint_advances_after_each_series() -> None:
    ids = ["A", "B", "C"]
    provider = _MemoryProvider({})
    checkpoint = _MemoryCheckpoint()
    seen_at_fetch: list[int] = []
    provider.on_fetch = lambda sid: seen_at_fetch.append(checkpoint.offset)

    _build(_MemoryCatalog(ids), _MemoryObservationStore(), checkpoint, provider).run_once()

    assert checkpoint.history == [1, 2, 3]
    # Al pedir la serie i, el offset persistido ya es i
    assert seen_at_fetch == [0, 1, 2]


def test_second_run_without_new_data_writes_nothing(example_provider) -> None:
    store = _MemoryObservationStore()
    checkpoint = _MemoryCheckpoint()
    catalog = _MemoryCatalog(["GDP", "UNRATE"])

    _build(catalog, store, checkpoint, example_provider).run_once()
    writes_after_first = store.write_calls
    snapshot = dict(store.rows)

    report = _build(catalog, store, checkpoint, example_provider).run_once()

    assert report.wrapped is True
    assert store.write_calls == writes_after_first
    assert store.rows == snapshot
    assert report.up_to_date == ["GDP", "UNRATE"]
    assert report.upserted_rows == 0


def test_wrap_disabled_leaves_completed_cycle_idle(example_provider) -> None:
    checkpoint = _MemoryCheckpoint(offset=2)
    sync = _build(
        _MemoryCatalog(["GDP", "UNRATE"]),
        _MemoryObservationStore(),
        checkpoint,
        example_provider,
        wrap_offset=False,
    )

    report = sync.run_once()

    assert example_provider.requests == []
    assert report.processed == 0
    assert checkpoint.offset == 2


@pytest.mark.parametrize(
    "phase, setup",
    [
        (PHASE_MAX_DATE, lambda store, provider: store.fail_max_date_for.add("B")),
        (PHASE_FETCH, lambda store, provider: provider.fail_for.add("B")),
        (PHASE_UPSERT, lambda store, provider: store.fail_upsert_for.add("B")),
    ],
)
def test_series_failure_is_recorded_and_run_continues(phase, setup) -> None:
    ids = ["A", "B", "C"]
    provider = _MemoryProvider({sid: [{"date": "2022-01-01", "value": "2"}] for sid in ids})
    store = _MemoryObservationStore()
    checkpoint = _MemoryCheckpoint()
    setup(store, provider)

    report = _build(_MemoryCatalog(ids), store, checkpoint, provider).run_once()

    assert [(f.series_id, f.phase) for f in report.failed] == [("B", phase)]
    assert [sid for sid, _ in report.succeeded] == ["A", "C"]
    assert checkpoint.offset == 3
    assert ("B", date(2022, 1, 1)) not in store.rows


def test_unreadable_checkpoint_starts_from_zero(example_provider) -> None:
    checkpoint = _MemoryCheckpoint(offset=1)
    checkpoint.fail_read = True

    report = _build(
        _MemoryCatalog(["GDP", "UNRATE"]), _MemoryObservationStore(), checkpoint, example_provider
    ).run_once()

    assert report.start_offset == 0
    assert [sid for sid, _ in example_provider.requests] == ["GDP", "UNRATE"]


def test_negative_offset_is_treated_as_zero(example_provider) -> None:
    report = _build(
        _MemoryCatalog(["GDP", "UNRATE"]),
        _MemoryObservationStore(),
        _MemoryCheckpoint(offset=-4),
        example_provider,
    ).run_once()

    assert report.start_offset == 0
    assert report.processed == 2


def test_checkpoint_write_failure_does_not_stop_run(example_provider) -> None:
    checkpoint = _MemoryCheckpoint()
    checkpoint.fail_write = True
    store = _MemoryObservationStore()

    report = _build(_MemoryCatalog(["GDP", "UNRATE"]), store, checkpoint, example_provider).run_once()

    assert report.checkpoint_failures == 2
    assert len(store.rows) == 3


def test_catalog_failure_aborts_run() -> None:
    checkpoint = _MemoryCheckpoint()
    provider = _MemoryProvider({})
    sync = _build(
        _MemoryCatalog([], error=RuntimeError("economic_indicators no existe")),
        _MemoryObservationStore(),
        checkpoint,
        provider,
    )

    with pytest.raises(RuntimeError, match="economic_indicators"):
        sync.run_once()

    assert provider.requests == []
    assert checkpoint.history == []
    assert checkpoint.statuses == ["running", "error"]


def test_empty_catalog_is_a_noop() -> None:
    checkpoint = _MemoryCheckpoint()
    sleeps: list[float] = []
    report = _build(
        _MemoryCatalog([]), _MemoryObservationStore(), checkpoint, _MemoryProvider({}), sleeps
    ).run_once()

    assert report.catalog_size == 0
    assert checkpoint.history == []
    assert sleeps == []


def test_sleeps_between_series_but_not_after_last() -> None:
    sleeps: list[float] = []
    _build(
        _MemoryCatalog(["A", "B", "C"]),
        _MemoryObservationStore(),
        _MemoryCheckpoint(),
        _MemoryProvider({}),
        sleeps,
        inter_item_delay_ms=10_000,
    ).run_once()

    assert sleeps == [10.0, 10.0]


def test_cancel_stops_between_series_with_checkpoint_current() -> None:
    cancel = threading.Event()
    provider = _MemoryProvider({})
    provider.on_fetch = lambda sid: cancel.set() if sid == "B" else None
    checkpoint = _MemoryCheckpoint()

    report = _build(
        _MemoryCatalog(["A", "B", "C"]), _MemoryObservationStore(), checkpoint, provider
    ).run_once(cancel_event=cancel)

    assert report.cancelled is True
    assert [sid for sid, _ in provider.requests] == ["A", "B"]
    assert checkpoint.offset == 2
    assert checkpoint.statuses[-1] == "cancelled"


def test_chunked_processing_checkpoints_per_chunk() -> None:
    checkpoint = _MemoryCheckpoint()
    sleeps: list[float] = []
    provider = _MemoryProvider({})

    _build(
        _MemoryCatalog(["A", "B", "C", "D", "E"]),
        _MemoryObservationStore(),
        checkpoint,
        provider,
        sleeps,
        chunk_size=2,
    ).run_once()

    assert [sid for sid, _ in provider.requests] == ["A", "B", "C", "D", "E"]
    assert checkpoint.history == [2, 4, 5]
    assert len(sleeps) == 2


def _reset_settings() -> SimpleNamespace:
    return SimpleNamespace(FRED_SYNC_CHECKPOINT_ROW_ID=1, FRED_SYNC_LOCK_KEY=42)


@patch("app.infrastructure.external.fred_sync.sync_service.build_pg_repository")
def test_reset_offset_refused_while_sync_holds_lock(mock_build) -> None:
    repo = MagicMock()
    repo.try_advisory_lock.return_value = False
    mock_build.return_value = repo

    with pytest.raises(SyncStateError, match="advisory lock"):
        reset_fred_sync_offset(_reset_settings())

    repo.try_advisory_lock.assert_called_once_with(repo.connect.return_value.__enter__.return_value, 42)
    repo.set_offset.assert_not_called()


@patch("app.infrastructure.external.fred_sync.sync_service.build_pg_repository")
def test_reset_offset_writes_zero_when_lock_is_free(mock_build) -> None:
    repo = MagicMock()
    repo.try_advisory_lock.return_value = True
    mock_build.return_value = repo

    reset_fred_sync_offset(_reset_settings())

    conn = repo.connect.return_value.__enter__.return_value
    repo.set_offset.assert_called_once_with(conn, 1, 0)
