"""
Entidades del dominio.
"""
from app.domain.entities.observation import Observation, SeriesDescriptor

__all__ = [
    "Observation",
    "SeriesDescriptor",
]
