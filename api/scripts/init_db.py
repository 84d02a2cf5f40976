"""
Script para inicializar la base de datos.

Crea las tablas (economic_indicators, fred_data, function_state) y la fila
singleton del checkpoint si no existe.
"""
import asyncio
from loguru import logger

from app.core.config import settings
from app.infrastructure.database.session import init_db, AsyncSessionLocal
from app.infrastructure.database.models import FunctionStateModel


async def main():
    """Función principal para inicializar la base de datos."""
    logger.info("Inicializando base de datos...")

    try:
        await init_db()

        async with AsyncSessionLocal() as session:
            row_id = settings.FRED_SYNC_CHECKPOINT_ROW_ID
            if await session.get(FunctionStateModel, row_id) is None:
                session.add(FunctionStateModel(id=row_id, current_offset=0))
                await session.commit()
                logger.info(f"Checkpoint function_state(id={row_id}) creado con offset=0")

        logger.success("Base de datos inicializada correctamente")
    except Exception as e:
        logger.error(f"Error al inicializar base de datos: {e}")
        raise


if __name__ == "__main__":
    asyncio.run(main())
