"""
Service zones are configuration, not database rows: they are loaded once at
start-up from the zones file and never mutated afterwards.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import NamedTuple, Tuple


class Coordinate(NamedTuple):
    lat: float
    lon: float


@dataclass(frozen=True)
class ServiceZone:
    id: str
    name: str
    city: str
    polygon: Tuple[Coordinate, ...]
    is_active: bool = True
