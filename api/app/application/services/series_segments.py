"""
Segmentacion de series para graficar.

Una serie con huecos (value=None) no se dibuja como una linea continua:
se parte en tramos de puntos consecutivos no nulos. El hueco nunca se
rellena con 0.
"""
from __future__ import annotations

from datetime import date
from typing import List, Optional, Protocol, Sequence, TypeVar


class _Point(Protocol):
    date: date
    value: Optional[float]


P = TypeVar("P", bound=_Point)

# Un grafico de linea necesita al menos 2 puntos con valor.
MIN_CHARTABLE_POINTS = 2


def split_into_segments(points: Sequence[P]) -> List[List[P]]:
    """
    Divide los puntos (ya ordenados por fecha) en tramos contiguos no nulos.

    Cada None cierra el tramo actual; los tramos vacios se descartan.
    """
    segments: List[List[P]] = []
    current: List[P] = []

    for point in points:
        if point.value is None:
            if current:
                segments.append(current)
                current = []
            continue
        current.append(point)

    if current:
        segments.append(current)
    return segments


def count_non_null(points: Sequence[P]) -> int:
    return sum(1 for p in points if p.value is not None)


def has_enough_points(points: Sequence[P]) -> bool:
    return count_non_null(points) >= MIN_CHARTABLE_POINTS
