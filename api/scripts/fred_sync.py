"""
CLI: FRED -> Postgres (sync incremental y reanudable).

Uso recomendado:
  - Ejecutar como job (cron/systemd timer), una corrida por disparo.
  - No se integra al request/response del API para evitar timeouts.
  - Se asume a lo sumo una corrida a la vez (además hay advisory lock en Postgres).

Variables de entorno requeridas:
  - FRED_API_KEY
  - DATABASE_URL (debe ser postgresql://... o postgres://...)

Ejecución:
  python scripts/fred_sync.py
  python scripts/fred_sync.py --delay-ms 5000
  python scripts/fred_sync.py --reset-offset
  python scripts/fred_sync.py --print-schema
"""

from __future__ import annotations

import argparse
import signal
import sys
import threading
from pathlib import Path

from loguru import logger
from dotenv import load_dotenv

# Permite ejecutar este script desde cualquier cwd sin configurar PYTHONPATH.
# La carpeta "api" contiene el paquete raíz `app/`.
_API_ROOT = Path(__file__).resolve().parents[1]
if str(_API_ROOT) not in sys.path:
    sys.path.insert(0, str(_API_ROOT))

# Cargar variables desde .env si existe (api/.env o raíz del repo).
load_dotenv(_API_ROOT / ".env", override=False)
load_dotenv(_API_ROOT.parent / ".env", override=False)

from app.core.config import settings
from app.infrastructure.external.fred_sync.pg_repository import SCHEMA_SQL
from app.infrastructure.external.fred_sync.sync_config import SyncConfigError
from app.infrastructure.external.fred_sync.sync_service import (
    reset_fred_sync_offset,
    run_fred_sync,
)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Sincroniza observaciones FRED en Postgres.")
    parser.add_argument(
        "--print-schema",
        action="store_true",
        help="Solo imprime el DDL de las tablas (no ejecuta sync).",
    )
    parser.add_argument(
        "--reset-offset",
        action="store_true",
        help="Pone current_offset en 0 y sale (la próxima corrida recorre todo el catálogo).",
    )
    parser.add_argument(
        "--delay-ms",
        type=int,
        default=None,
        help="Pausa entre series en ms (override de FRED_SYNC_DELAY_MS).",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)

    if args.print_schema:
        print(SCHEMA_SQL)
        return 0

    effective_settings = settings
    if args.delay_ms is not None:
        effective_settings = settings.model_copy(update={"FRED_SYNC_DELAY_MS": args.delay_ms})

    try:
        if args.reset_offset:
            reset_fred_sync_offset(effective_settings)
            return 0

        # SIGTERM (p.ej. fin de ventana del scheduler): cortar entre series, con checkpoint al día.
        cancel_event = threading.Event()
        signal.signal(signal.SIGTERM, lambda *_: cancel_event.set())

        logger.info("Iniciando FRED -> Postgres sync...")
        report = run_fred_sync(effective_settings, cancel_event=cancel_event)
    except SyncConfigError as e:
        logger.error(f"Configuración inválida: {e}")
        return 1
    except Exception as e:
        logger.exception(f"Sync abortado: {e}")
        return 1

    logger.info(f"Sync OK: {report.summary()}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
