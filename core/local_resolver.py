"""
local_resolver.py — Catalog Barangay Matching
----------------------------------------------

Assigns a coordinate to the nearest barangay in the catalog in two phases:

1. Containment: among barangays whose center is within their own
   containment radius of the coordinate, take the closest.
2. Nearest fallback: otherwise take the globally closest center, but only
   if it is within `fallback_km` (5 km by default).

Exact distance ties keep the entry that comes first in the catalog.
"""

from typing import Iterable, Optional

from config.settings import FALLBACK_MATCH_KM
from core.models import Coordinate, SubdivisionRecord
from tools.geo_utils import haversine_km


def rank_by_distance(coordinate: Coordinate, catalog: Iterable[SubdivisionRecord]) -> list[tuple[SubdivisionRecord, float]]:
    """(record, distance_km) pairs in catalog order."""
    return [(record, haversine_km(coordinate, record.center)) for record in catalog]


def resolve_local(coordinate: Coordinate, catalog: Iterable[SubdivisionRecord],
                  fallback_km: float = FALLBACK_MATCH_KM) -> Optional[SubdivisionRecord]:
    distances = rank_by_distance(coordinate, catalog)
    if not distances:
        return None

    contained, contained_km = None, None
    nearest, nearest_km = None, None
    for record, distance in distances:
        if distance <= record.containment_radius_km and (contained_km is None or distance < contained_km):
            contained, contained_km = record, distance
        if nearest_km is None or distance < nearest_km:
            nearest, nearest_km = record, distance

    if contained is not None:
        return contained
    if nearest_km <= fallback_km:
        return nearest
    return None
