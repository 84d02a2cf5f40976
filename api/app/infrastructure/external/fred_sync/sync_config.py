"""
Configuración del sync FRED -> Postgres.

Este módulo no realiza I/O: solo define configuración.
El job recibe un FredSyncConfig explícito; nunca lee variables de entorno por su cuenta.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from .types import EPOCH_START


class SyncConfigError(RuntimeError):
    """Error de configuración del pipeline."""


# Límites razonables para la pausa entre series (ms).
MIN_DELAY_MS = 0
MAX_DELAY_MS = 60_000


@dataclass(frozen=True)
class FredSyncConfig:
    """
    Parámetros del job.

    NOTA sobre chunk_size:
    - FRED aplica un rate limit no documentado; se procesa de a una serie
      con pausa fija. El checkpoint se guarda después de cada chunk.
    """

    checkpoint_row_id: int = 1
    chunk_size: int = 1
    inter_item_delay_ms: int = 2_000
    epoch_start: date = EPOCH_START
    wrap_offset: bool = True

    def __post_init__(self) -> None:
        if self.chunk_size < 1:
            raise SyncConfigError(f"chunk_size debe ser >= 1 (valor: {self.chunk_size})")
        if not MIN_DELAY_MS <= self.inter_item_delay_ms <= MAX_DELAY_MS:
            raise SyncConfigError(
                f"inter_item_delay_ms fuera de rango [{MIN_DELAY_MS}, {MAX_DELAY_MS}]: "
                f"{self.inter_item_delay_ms}"
            )

    @property
    def inter_item_delay_s(self) -> float:
        return self.inter_item_delay_ms / 1000


def config_from_settings(settings) -> FredSyncConfig:
    """Construye la config del job desde el objeto global de settings."""
    try:
        epoch = date.fromisoformat(settings.FRED_SYNC_EPOCH_START)
    except ValueError as e:
        raise SyncConfigError(
            f"FRED_SYNC_EPOCH_START inválida: {settings.FRED_SYNC_EPOCH_START}"
        ) from e

    return FredSyncConfig(
        checkpoint_row_id=settings.FRED_SYNC_CHECKPOINT_ROW_ID,
        chunk_size=settings.FRED_SYNC_CHUNK_SIZE,
        inter_item_delay_ms=settings.FRED_SYNC_DELAY_MS,
        epoch_start=epoch,
        wrap_offset=settings.FRED_SYNC_WRAP_OFFSET,
    )
