"""
records.py — Sighting Record Creation
--------------------------------------

Persists a report once its location is resolved. The barangay gate runs here,
so a report with no coordinate evidence and no manual barangay is rejected
before anything reaches the database.
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy.orm import Session

from core.exception import SightingValidationError
from core.location_resolution import require_subdivision
from core.models import ResolutionResult
from db.sighting_model import WildlifeSighting

logger = logging.getLogger(__name__)


def create_sighting_record(
    session: Session,
    result: ResolutionResult,
    species_name: str,
    reporter_name: Optional[str] = None,
    contact_number: Optional[str] = None,
    photo_url: Optional[str] = None,
    captured_at: Optional[datetime] = None,
) -> WildlifeSighting:
    """
    Insert a pending sighting built from a resolution result and form fields.

    Raises:
        SubdivisionRequired: the result carries no barangay
        SightingValidationError: species name is blank
    """
    if not species_name or not species_name.strip():
        raise SightingValidationError("Please provide species name.")
    require_subdivision(result)

    sighting = WildlifeSighting(
        species_name=species_name.strip(),
        latitude=result.coordinate.latitude,
        longitude=result.coordinate.longitude,
        barangay=result.subdivision_name.strip(),
        municipality=result.parent_region or None,
        has_direct_evidence=result.has_direct_evidence,
        evidence_source=result.evidence_source.value,
        reporter_name=(reporter_name or "").strip() or None,
        contact_number=(contact_number or "").strip() or None,
        photo_url=photo_url,
        timestamp_captured=captured_at or datetime.now(timezone.utc),
        status="pending",
    )
    session.add(sighting)
    session.commit()
    session.refresh(sighting)

    logger.info("Saved sighting %s: %s in %s (%s)", sighting.sighting_id, sighting.species_name,
                sighting.barangay, sighting.evidence_source)
    return sighting
