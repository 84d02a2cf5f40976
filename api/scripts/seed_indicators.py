"""
Script para cargar el catalogo de series FRED (economic_indicators).

Uso:
    python -m scripts.seed_indicators              # Cargar catalogo por defecto
    python -m scripts.seed_indicators --dry-run    # Ver que haria sin ejecutar
    python -m scripts.seed_indicators --force      # Actualizar descripciones existentes
    python -m scripts.seed_indicators --file path  # Usar archivo JSON personalizado

El JSON es una lista de objetos {"series_id": "...", "description": "..."}.
Este script es idempotente y puede ejecutarse multiples veces.
El job de sincronizacion solo lee este catalogo; nunca lo modifica.
"""
import asyncio
import argparse
import json
import sys
from pathlib import Path

from loguru import logger


# Configurar path para imports
API_DIR = Path(__file__).parent.parent
sys.path.insert(0, str(API_DIR))

DEFAULT_INDICATORS = [
    {"series_id": "GDP", "description": "Gross Domestic Product"},
    {"series_id": "GDPC1", "description": "Real Gross Domestic Product"},
    {"series_id": "UNRATE", "description": "Unemployment Rate"},
    {"series_id": "PAYEMS", "description": "All Employees, Total Nonfarm"},
    {"series_id": "CPIAUCSL", "description": "Consumer Price Index for All Urban Consumers"},
    {"series_id": "PCEPI", "description": "Personal Consumption Expenditures: Chain-type Price Index"},
    {"series_id": "FEDFUNDS", "description": "Federal Funds Effective Rate"},
    {"series_id": "DGS10", "description": "10-Year Treasury Constant Maturity Rate"},
    {"series_id": "T10Y2Y", "description": "10-Year Treasury Minus 2-Year Treasury"},
    {"series_id": "M2SL", "description": "M2 Money Stock"},
    {"series_id": "HOUST", "description": "Housing Starts: Total New Privately Owned"},
    {"series_id": "INDPRO", "description": "Industrial Production: Total Index"},
]


def normalize_indicator_entries(raw_entries: list) -> list:
    """
    Limpia y deduplica las entradas del catalogo.

    - series_id se normaliza a mayusculas y sin espacios
    - entradas sin series_id se descartan con warning
    - si un series_id se repite, gana la primera aparicion
    """
    seen = set()
    entries = []
    for raw in raw_entries:
        series_id = str(raw.get("series_id") or "").strip().upper()
        if not series_id:
            logger.warning(f"Entrada sin series_id descartada: {raw}")
            continue
        if series_id in seen:
            logger.debug(f"series_id duplicado ignorado: {series_id}")
            continue
        seen.add(series_id)
        entries.append({"series_id": series_id, "description": raw.get("description")})
    return entries


def load_indicators_file(file_path: Path) -> list:
    """Carga entradas del catalogo desde archivo JSON."""
    if not file_path.exists():
        logger.error(f"Archivo no encontrado: {file_path}")
        sys.exit(1)

    with open(file_path, "r", encoding="utf-8") as f:
        data = json.load(f)

    logger.info(f"Cargadas {len(data)} series desde {file_path}")
    return data


async def seed_indicators(entries: list, dry_run: bool = False, force_update: bool = False) -> dict:
    """
    Inserta o actualiza series en economic_indicators.

    Returns:
        Diccionario con estadisticas de la operacion
    """
    from app.infrastructure.database.session import AsyncSessionLocal, init_db
    from app.infrastructure.database.models import EconomicIndicatorModel

    stats = {"total": len(entries), "inserted": 0, "updated": 0, "skipped": 0}

    if dry_run:
        logger.info("[DRY-RUN] Simulando carga...")
    else:
        await init_db()

    async with AsyncSessionLocal() as session:
        for entry in entries:
            existing = await session.get(EconomicIndicatorModel, entry["series_id"])
            if existing:
                if force_update and existing.description != entry["description"]:
                    if not dry_run:
                        existing.description = entry["description"]
                    stats["updated"] += 1
                else:
                    stats["skipped"] += 1
                continue

            if dry_run:
                logger.info(f"[DRY-RUN] Insertaria: {entry['series_id']}")
            else:
                session.add(EconomicIndicatorModel(**entry))
            stats["inserted"] += 1

        if not dry_run:
            await session.commit()
            logger.success("Catalogo guardado en la base de datos")

    return stats


async def main():
    """Funcion principal del script."""
    parser = argparse.ArgumentParser(description="Cargar catalogo de series FRED")
    parser.add_argument("--dry-run", action="store_true", help="Simular sin hacer cambios")
    parser.add_argument("--force", action="store_true", help="Actualizar descripciones existentes")
    parser.add_argument("--file", type=str, default=None, help="Ruta a un JSON con el catalogo")
    args = parser.parse_args()

    raw = load_indicators_file(Path(args.file)) if args.file else DEFAULT_INDICATORS
    entries = normalize_indicator_entries(raw)

    stats = await seed_indicators(entries, dry_run=args.dry_run, force_update=args.force)
    prefix = "[DRY-RUN] " if args.dry_run else ""
    logger.info(
        f"{prefix}Series: total={stats['total']} insertadas={stats['inserted']} "
        f"actualizadas={stats['updated']} saltadas={stats['skipped']}"
    )


if __name__ == "__main__":
    asyncio.run(main())
