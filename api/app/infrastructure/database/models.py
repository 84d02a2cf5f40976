"""
Modelos de base de datos (ORM).

Las tablas las escribe el job de sincronizacion (psycopg) y las lee el API.
"""
from sqlalchemy import Column, String, Integer, DateTime, Date, Float, Text, ForeignKey
from sqlalchemy.sql import func

from app.infrastructure.database.session import Base


class EconomicIndicatorModel(Base):
    """
    Catalogo de series FRED rastreadas.
    Lo administra un proceso externo; el job solo lo lee.
    """

    __tablename__ = "economic_indicators"

    series_id = Column(String(64), primary_key=True)
    description = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    def __repr__(self):
        return f"<EconomicIndicator(series_id={self.series_id})>"


class FredDataModel(Base):
    """
    Observaciones de una serie. Identidad: (series_id, date).

    value NULL = sin lectura (FRED devuelve "."), distinto de una lectura de 0.
    """

    __tablename__ = "fred_data"

    series_id = Column(
        String(64),
        ForeignKey("economic_indicators.series_id", ondelete="CASCADE"),
        primary_key=True,
    )
    date = Column(Date, primary_key=True)
    value = Column(Float, nullable=True)

    def __repr__(self):
        return f"<FredData(series_id={self.series_id}, date={self.date}, value={self.value})>"


class FunctionStateModel(Base):
    """
    Checkpoint del job de sincronizacion (fila singleton, id=1).

    current_offset: indice del catalogo desde el que sigue la proxima corrida.
    """

    __tablename__ = "function_state"

    id = Column(Integer, primary_key=True)
    current_offset = Column(Integer, nullable=False, default=0)
    last_run_started_at = Column(DateTime(timezone=True), nullable=True)
    last_run_completed_at = Column(DateTime(timezone=True), nullable=True)
    last_run_status = Column(String(32), nullable=True)
    last_run_error = Column(Text, nullable=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    def __repr__(self):
        return f"<FunctionState(id={self.id}, current_offset={self.current_offset})>"
