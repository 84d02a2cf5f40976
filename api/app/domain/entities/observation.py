"""
Entidades de dominio: SeriesDescriptor y Observation.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any, Optional


@dataclass(frozen=True)
class SeriesDescriptor:
    """Serie rastreada en el catálogo (tabla economic_indicators)."""

    series_id: str


@dataclass(frozen=True)
class Observation:
    """
    Un punto de una serie.

    value=None significa "sin lectura" y se guarda como NULL, nunca como 0.
    """

    series_id: str
    date: date
    value: Optional[float]

    def as_row(self) -> dict[str, Any]:
        return {"series_id": self.series_id, "date": self.date, "value": self.value}
