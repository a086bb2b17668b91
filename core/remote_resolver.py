"""
remote_resolver.py — Reverse Geocoding Barangay Fallback
---------------------------------------------------------

Used when a coordinate is too far from every catalog center. Asks Nominatim
for an address breakdown and maps its barangay-like text back onto the
catalog with:

* Case-insensitive exact matching
* Case-insensitive substring matching in either direction
  (e.g. "Tankulan" vs "Tankulan (Pob.)")
* Whitespace-insensitive substring matching (e.g. "SanMiguel" vs "San Miguel")

The lookup is best-effort: network or payload problems yield None.

Dependencies:
- tools.geo_utils.reverse_geocode (requests + Nominatim)
"""

import logging
import re
from typing import Callable, Iterable, Optional

from core.models import Coordinate, SubdivisionRecord
from tools.geo_utils import extract_address_fields, reverse_geocode

logger = logging.getLogger(__name__)

_WHITESPACE = re.compile(r"\s+")


def _squash(text: str) -> str:
    return _WHITESPACE.sub("", text).lower()


def match_subdivision_name(text: str, catalog: Iterable[SubdivisionRecord]) -> Optional[SubdivisionRecord]:
    """
    Attempts to resolve free-text barangay name to a catalog entry.

    Returns:
        SubdivisionRecord if found, otherwise None
    """
    if not text or not text.strip():
        return None

    catalog = tuple(catalog)
    normalized = text.strip().lower()

    for record in catalog:
        if record.name.lower() == normalized:
            logger.debug("Exact match: '%s' → %s", text, record.name)
            return record

    for record in catalog:
        name = record.name.lower()
        if normalized in name or name in normalized:
            logger.debug("Substring match: '%s' → %s", text, record.name)
            return record

    squashed = _squash(text)
    if squashed:
        for record in catalog:
            name = _squash(record.name)
            if squashed in name or name in squashed:
                logger.debug("Whitespace-insensitive match: '%s' → %s", text, record.name)
                return record

    logger.debug("No catalog match for '%s'", text)
    return None


class RemoteResolver:
    def __init__(self, catalog: Iterable[SubdivisionRecord], geocoder: Callable[..., dict] = reverse_geocode):
        self.catalog = tuple(catalog)
        self.geocoder = geocoder

    def lookup_address(self, coordinate: Coordinate) -> tuple[str, str]:
        """(municipality, subdivision) text as reported by the geocoder."""
        data = self.geocoder(coordinate.latitude, coordinate.longitude)
        address = data.get("address") if isinstance(data, dict) else None
        return extract_address_fields(address or {})

    def resolve(self, coordinate: Coordinate) -> Optional[SubdivisionRecord]:
        try:
            municipality, subdivision = self.lookup_address(coordinate)
        except Exception as e:
            logger.warning("Remote barangay lookup failed for %s: %s", coordinate.as_tuple(), e)
            return None

        if not subdivision:
            logger.info("Reverse geocoder gave no barangay for %s (municipality=%r)",
                        coordinate.as_tuple(), municipality)
            return None

        return match_subdivision_name(subdivision, self.catalog)
