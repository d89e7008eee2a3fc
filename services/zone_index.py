"""
Service-area lookup over the configured zone polygons.

Containment uses even-odd ray casting. A point lying exactly on a polygon
edge or vertex may be reported either inside or outside depending on which
side of the floating-point comparisons it falls; zone files are expected to
tolerate that rather than depend on boundary points.
"""
from __future__ import annotations

import json
import logging
from typing import Iterable, List, Optional, Sequence

from models.zone import Coordinate, ServiceZone
from models.schemas.zone import ZoneConfigSchema

logger = logging.getLogger(__name__)

zone_config_schema = ZoneConfigSchema(many=True)


def point_in_polygon(lat: float, lon: float, polygon: Sequence[Coordinate]) -> bool:
    """Ray casting; the polygon is implicitly closed (last vertex joins the first)."""
    if len(polygon) < 3:
        return False

    inside = False
    j = len(polygon) - 1
    for i in range(len(polygon)):
        pi, pj = polygon[i], polygon[j]
        crosses = (pi.lon < lon <= pj.lon) or (pj.lon < lon <= pi.lon)
        if crosses and pi.lat + (lon - pi.lon) / (pj.lon - pi.lon) * (pj.lat - pi.lat) < lat:
            inside = not inside
        j = i
    return inside


def load_zones(path: str) -> List[ServiceZone]:
    """
    Read the zones file: a JSON list of zones, or an object whose "items" key
    holds that list. Raises marshmallow.ValidationError on malformed entries.
    """
    with open(path, encoding="utf-8") as fh:
        raw = json.load(fh)
    if isinstance(raw, dict):
        raw = raw.get("items", [])
    zones = zone_config_schema.load(raw)
    logger.info("Loaded %d service zones from %s", len(zones), path)
    return zones


class ZoneIndex:
    """Read-only after construction; safe to share between requests."""

    def __init__(self, zones: Iterable[ServiceZone]):
        self._zones = tuple(zones)

    def all_zones(self) -> List[ServiceZone]:
        return [z for z in self._zones if z.is_active]

    def resolve(self, lat: float, lon: float) -> Optional[ServiceZone]:
        # first match wins; overlap between zones is not checked
        for zone in self.all_zones():
            if point_in_polygon(lat, lon, zone.polygon):
                logger.info("Coordinates (%s, %s) found in zone: %s", lat, lon, zone.name)
                return zone
        logger.info("Coordinates (%s, %s) not in any zone", lat, lon)
        return None

    def zones_for_city(self, city: str) -> List[ServiceZone]:
        city = city.casefold()
        return [z for z in self.all_zones() if z.city.casefold() == city]
