"""
models.py — Location Resolution Data Model
-------------------------------------------

Immutable value types passed between the stages of the sighting location
pipeline:

- `Coordinate`: validated, rounded latitude/longitude pair
- `SubdivisionRecord`: one barangay in the catalog with its reference center
- `LiveFix`: outcome of a device positioning attempt
- `ResolutionResult`: final location handed to record creation

Coordinates should be built through `tools.geo_utils.normalize_coordinate`,
which applies the (0, 0) rule and rounding before these models see the values.

Dependencies:
- pydantic for frozen, validated models
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class PermissionState(str, Enum):
    GRANTED = "granted"
    PROMPT = "prompt"
    DENIED = "denied"
    UNSUPPORTED = "unsupported"


class EvidenceSource(str, Enum):
    PHOTO_METADATA = "photo_metadata"
    LIVE_POSITION = "live_position"
    PENDING = "pending"  # sentinel location, no coordinate evidence


class Coordinate(BaseModel):
    model_config = ConfigDict(frozen=True)

    latitude: float = Field(ge=-90.0, le=90.0, allow_inf_nan=False)
    longitude: float = Field(ge=-180.0, le=180.0, allow_inf_nan=False)

    def as_tuple(self) -> tuple[float, float]:
        return self.latitude, self.longitude


class SubdivisionRecord(BaseModel):
    """
    A barangay in the catalog.

    Fields:
    - name: unique display name within the catalog
    - parent_region: municipality containing the barangay
    - center: reference center coordinate
    - containment_radius_km: distance under which a coordinate is a confident match
    """
    model_config = ConfigDict(frozen=True)

    name: str
    parent_region: str
    center: Coordinate
    containment_radius_km: float = Field(ge=0.0)


class LiveFix(BaseModel):
    model_config = ConfigDict(frozen=True)

    coordinate: Optional[Coordinate] = None
    permission: PermissionState = PermissionState.DENIED


class ResolutionResult(BaseModel):
    """
    Final location for a single report submission.

    `has_direct_evidence` is True only when the coordinate came from photo
    metadata or a live fix; otherwise `coordinate` is the pending sentinel.
    """
    model_config = ConfigDict(frozen=True)

    coordinate: Coordinate
    subdivision_name: str = ""
    parent_region: str = ""
    has_direct_evidence: bool = False
    evidence_source: EvidenceSource = EvidenceSource.PENDING
