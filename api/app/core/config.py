"""
Configuracion central de la aplicacion.
Gestiona variables de entorno y configuraciones globales.
Soporta configuracion dinamica para desarrollo (ENVIRONMENT=development)
y produccion (ENVIRONMENT=production).
"""
import json
from typing import List
from pydantic_settings import BaseSettings
from pydantic import Field, computed_field


class Settings(BaseSettings):
    """
    Clase de configuracion de la aplicacion.
    Lee variables de entorno y proporciona valores por defecto.

    - ENVIRONMENT: 'development' o 'production'
    - DATABASE_URL se puede especificar completa o por componentes
    - FRED_*: proveedor externo y parametros del job de sincronizacion
    """

    # Configuracion de la aplicacion
    APP_NAME: str = Field(default="FRED Data Dashboard API")
    APP_VERSION: str = Field(default="1.0.0")
    DEBUG: bool = Field(default=False)
    ENVIRONMENT: str = Field(default="production")

    # Configuracion del servidor
    HOST: str = Field(default="0.0.0.0")
    PORT: int = Field(default=8000)

    # Base de datos - Componentes separados (recomendado para flexibilidad)
    DATABASE_HOST: str = Field(default="localhost")
    DATABASE_PORT: int = Field(default=5432)
    DATABASE_USER: str = Field(default="fred_user")
    DATABASE_PASSWORD: str = Field(default="fred_pass")
    DATABASE_NAME: str = Field(default="fred_db")

    # Base de datos - URL completa (override de componentes si se proporciona)
    DATABASE_URL: str = Field(default="")
    DB_POOL_SIZE: int = Field(default=5)
    DB_MAX_OVERFLOW: int = Field(default=10)

    # CORS (acepta lista JSON o "*" para todos los origenes)
    CORS_ORIGINS: str = Field(default="*")

    # FRED (St. Louis Fed)
    FRED_API_KEY: str = Field(default="")
    FRED_BASE_URL: str = Field(default="https://api.stlouisfed.org/fred")
    FRED_TIMEOUT_S: float = Field(default=30.0)
    FRED_MAX_RETRIES: int = Field(default=4)

    # Job de sincronizacion
    # Pausa fija entre series para respetar el rate limit de FRED.
    FRED_SYNC_DELAY_MS: int = Field(default=2000, ge=0, le=60000)
    FRED_SYNC_CHECKPOINT_ROW_ID: int = Field(default=1)
    FRED_SYNC_CHUNK_SIZE: int = Field(default=1, ge=1)
    FRED_SYNC_EPOCH_START: str = Field(default="1900-01-01")
    # Si el offset llego al final del catalogo, la siguiente corrida empieza un ciclo nuevo en 0.
    FRED_SYNC_WRAP_OFFSET: bool = Field(default=True)
    FRED_SYNC_LOCK_KEY: int = Field(default=470_203)

    # Logging
    LOG_LEVEL: str = Field(default="INFO")
    LOG_FILE: str = Field(default="logs/app.log")

    @computed_field
    @property
    def effective_database_url(self) -> str:
        """
        Retorna la URL de base de datos efectiva.
        Si DATABASE_URL esta definida, la usa directamente.
        Si no, construye la URL desde los componentes individuales.
        """
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return (
            f"postgresql+asyncpg://{self.DATABASE_USER}:{self.DATABASE_PASSWORD}"
            f"@{self.DATABASE_HOST}:{self.DATABASE_PORT}/{self.DATABASE_NAME}"
        )

    @computed_field
    @property
    def is_development(self) -> bool:
        """Indica si el entorno es de desarrollo."""
        return self.ENVIRONMENT.lower() == "development"

    class Config:
        """Configuracion de Pydantic."""
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"  # Ignorar campos extra del .env


def get_cors_origins(cors_string: str) -> List[str]:
    """
    Parsea la configuracion de CORS.
    Acepta "*" para todos los origenes o una lista JSON.
    """
    if cors_string == "*":
        return ["*"]
    try:
        return json.loads(cors_string)
    except json.JSONDecodeError:
        # Si no es JSON valido, retornar como lista simple
        return [origin.strip() for origin in cors_string.split(",")]


# Instancia global de configuracion
settings = Settings()
