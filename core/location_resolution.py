"""
location_resolution.py — Sighting Location Resolution Pipeline
---------------------------------------------------------------

Sequences location evidence for a single report submission:

1. Photo metadata GPS (direct evidence)
2. Live device position, when the report came through a live capture flow
3. With a coordinate: catalog match, then reverse geocoding if the catalog has no match
4. Without a coordinate: the pending sentinel location plus the manually chosen barangay

A barangay typed or picked by the reporter always overrides the resolved one
and is not checked against the coordinate.

Nothing here raises for the caller; the only hard stop is the submission gate
(`require_subdivision`), which record creation applies before saving.
"""

import logging
from typing import Iterable, Mapping, Optional, Union

from config.settings import PENDING_LATITUDE, PENDING_LONGITUDE, FALLBACK_MATCH_KM
from core.catalog import find_subdivision, get_catalog
from core.exception import SubdivisionRequired
from core.gps_extraction import extract_coordinate
from core.live_position import LivePositionSource
from core.local_resolver import resolve_local
from core.models import Coordinate, EvidenceSource, ResolutionResult, SubdivisionRecord
from core.remote_resolver import RemoteResolver
from tools.geo_utils import normalize_coordinate

logger = logging.getLogger(__name__)


def default_pending_location() -> Coordinate:
    coordinate = normalize_coordinate(PENDING_LATITUDE, PENDING_LONGITUDE)
    if coordinate is None:
        raise ValueError(f"Invalid pending location: ({PENDING_LATITUDE}, {PENDING_LONGITUDE})")
    return coordinate


class LocationResolver:
    def __init__(self, catalog: Optional[Iterable[SubdivisionRecord]] = None,
                 sentinel: Optional[Coordinate] = None,
                 remote: Optional[RemoteResolver] = None,
                 fallback_km: float = FALLBACK_MATCH_KM):
        self.catalog = tuple(catalog) if catalog is not None else get_catalog()
        self.sentinel = sentinel or default_pending_location()
        self.remote = remote or RemoteResolver(self.catalog)
        self.fallback_km = fallback_km

    # --- Evidence ---

    def _photo_coordinate(self, photo) -> Optional[Coordinate]:
        try:
            return extract_coordinate(photo)
        except Exception as e:
            logger.warning("Photo GPS extraction failed: %s", e)
            return None

    def _live_coordinate(self, live_source: LivePositionSource) -> Optional[Coordinate]:
        try:
            fix = live_source.acquire()
        except Exception as e:
            logger.warning("Live positioning failed: %s", e)
            return None
        logger.debug("Live position permission=%s", fix.permission.value)
        return fix.coordinate

    # --- Barangay ---

    def match_subdivision(self, coordinate: Coordinate) -> Optional[SubdivisionRecord]:
        record = resolve_local(coordinate, self.catalog, self.fallback_km)
        if record is not None:
            return record

        logger.info("No catalog barangay near %s, trying reverse geocoding", coordinate.as_tuple())
        try:
            return self.remote.resolve(coordinate)
        except Exception as e:
            logger.warning("Remote barangay lookup failed: %s", e)
            return None

    def _parent_region(self, subdivision_name: str, manual_municipality: str,
                       resolved: Optional[SubdivisionRecord]) -> str:
        if manual_municipality:
            return manual_municipality
        known = find_subdivision(subdivision_name, self.catalog)
        if known is not None:
            return known.parent_region
        if resolved is not None and resolved.name == subdivision_name:
            return resolved.parent_region
        return ""

    def resolve(self, photo: Union[bytes, Mapping, None] = None,
                live_source: Optional[LivePositionSource] = None,
                manual_subdivision: str = "",
                manual_municipality: str = "") -> ResolutionResult:
        manual_subdivision = (manual_subdivision or "").strip()
        manual_municipality = (manual_municipality or "").strip()

        coordinate, source = None, EvidenceSource.PENDING
        if photo is not None:
            coordinate = self._photo_coordinate(photo)
            if coordinate is not None:
                source = EvidenceSource.PHOTO_METADATA
        if coordinate is None and live_source is not None:
            # Live capture: use the fix taken during the capture gesture
            coordinate = self._live_coordinate(live_source)
            if coordinate is not None:
                source = EvidenceSource.LIVE_POSITION

        if coordinate is None:
            logger.info("No coordinate evidence, using pending location")
            return ResolutionResult(
                coordinate=self.sentinel,
                subdivision_name=manual_subdivision,
                parent_region=self._parent_region(manual_subdivision, manual_municipality, None),
                has_direct_evidence=False,
                evidence_source=EvidenceSource.PENDING,
            )

        resolved = self.match_subdivision(coordinate)
        subdivision_name = manual_subdivision or (resolved.name if resolved else "")

        return ResolutionResult(
            coordinate=coordinate,
            subdivision_name=subdivision_name,
            parent_region=self._parent_region(subdivision_name, manual_municipality, resolved),
            has_direct_evidence=True,
            evidence_source=source,
        )


def check_location_step(photo_supplied: bool, live_capture: bool, manual_subdivision: str) -> None:
    """Form gate: a report needs a photo, a live capture or a barangay before it can continue."""
    if not (photo_supplied or live_capture) and not (manual_subdivision or "").strip():
        raise SubdivisionRequired("Provide a photo (to read its location) or select a barangay.")


def require_subdivision(result: ResolutionResult) -> ResolutionResult:
    """Submission gate: a report cannot be finalized without a barangay."""
    if not result.subdivision_name.strip():
        raise SubdivisionRequired()
    return result
