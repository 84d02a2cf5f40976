"""
Tipos y utilidades puras para el pipeline FRED -> Postgres.

Se mantienen libres de I/O para poder testearlos fácilmente.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, timezone
from typing import Any, Optional

from app.domain.entities.observation import Observation, SeriesDescriptor  # noqa: F401

# Fecha inicial cuando una serie aún no tiene filas guardadas.
EPOCH_START = date(1900, 1, 1)

# FRED usa "." para observaciones faltantes o retenidas.
MISSING_VALUE_SENTINEL = "."


def utc_now() -> datetime:
    """Retorna la hora actual en UTC, como datetime aware."""
    return datetime.now(timezone.utc)


def parse_observation_value(raw: Any) -> Optional[float]:
    """
    Convierte el valor crudo de FRED a float o None.

    - "." (sentinel de FRED), vacío o None -> None
    - texto no numérico -> None
    - NaN / infinito -> None (no se persisten como lectura)
    """
    if raw is None:
        return None
    if isinstance(raw, bool):
        return None
    if isinstance(raw, (int, float)):
        value = float(raw)
    else:
        text = str(raw).strip()
        if not text or text == MISSING_VALUE_SENTINEL:
            return None
        try:
            value = float(text)
        except ValueError:
            return None
    if not math.isfinite(value):
        return None
    return value


def parse_observation_date(raw: Any) -> date:
    """Parsea 'YYYY-MM-DD'. Lanza ValueError si el formato no es válido."""
    if isinstance(raw, date):
        return raw
    return date.fromisoformat(str(raw).strip())


def next_observation_start(max_date: Optional[date], epoch: date = EPOCH_START) -> date:
    """
    Calcula desde qué fecha pedir observaciones nuevas.

    max(date) guardado + 1 día, o el epoch si la serie no tiene filas.
    """
    if max_date is None:
        return epoch
    return max_date + timedelta(days=1)


@dataclass(frozen=True)
class SeriesFailure:
    """Fallo de una serie dentro de una corrida."""

    series_id: str
    phase: str
    error: str


@dataclass
class SyncReport:
    """
    Resumen de una corrida del job.

    Es solo observabilidad: el control de flujo del job no depende de este objeto.
    """

    catalog_size: int = 0
    start_offset: int = 0
    end_offset: int = 0
    succeeded: list[tuple[str, int]] = field(default_factory=list)
    up_to_date: list[str] = field(default_factory=list)
    failed: list[SeriesFailure] = field(default_factory=list)
    checkpoint_failures: int = 0
    wrapped: bool = False
    cancelled: bool = False
    locked_out: bool = False

    @property
    def upserted_rows(self) -> int:
        return sum(rows for _, rows in self.succeeded)

    @property
    def processed(self) -> int:
        return len(self.succeeded) + len(self.up_to_date) + len(self.failed)

    def summary(self) -> dict[str, Any]:
        return {
            "catalog_size": self.catalog_size,
            "start_offset": self.start_offset,
            "end_offset": self.end_offset,
            "processed": self.processed,
            "upserted_rows": self.upserted_rows,
            "updated_series": [sid for sid, _ in self.succeeded],
            "up_to_date_series": list(self.up_to_date),
            "failed_series": [
                {"series_id": f.series_id, "phase": f.phase, "error": f.error}
                for f in self.failed
            ],
            "checkpoint_failures": self.checkpoint_failures,
            "wrapped": self.wrapped,
            "cancelled": self.cancelled,
            "locked_out": self.locked_out,
        }
