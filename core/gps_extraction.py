"""
gps_extraction.py — Photo Metadata GPS Extraction
--------------------------------------------------

Turns the embedded metadata of a sighting photo into an optional, validated
coordinate. Cameras, phones and upload libraries encode GPS in different
shapes, so extraction walks an ordered list of strategies and keeps the first
candidate that survives validation:

1. Decimal `latitude` / `longitude` pair at the top level
2. `GPSLatitude` / `GPSLongitude` [deg, min, sec] arrays with hemisphere refs
3. The same arrays nested under a GPS namespace (`GPSInfo`, `gps`)
4. Decimal fields nested under the `xmp` or `exif` namespaces

Extraction never raises: unreadable or implausible metadata yields None.

Dependencies:
- tools.exif_utils for Pillow-based metadata reading
- tools.geo_utils for DMS conversion and coordinate validation
"""

import logging
from collections.abc import Mapping
from typing import Optional, Union

from core.models import Coordinate
from tools.exif_utils import read_photo_metadata
from tools.geo_utils import dms_to_decimal, normalize_coordinate

logger = logging.getLogger(__name__)


class GpsStrategy:
    """One way of reading a coordinate out of a metadata mapping."""

    name = "base"

    def candidate(self, metadata: Mapping) -> Optional[tuple]:
        raise NotImplementedError

    def extract(self, metadata: Mapping) -> Optional[Coordinate]:
        pair = self.candidate(metadata)
        if pair is None:
            return None
        return normalize_coordinate(*pair)


class DecimalPairStrategy(GpsStrategy):
    name = "decimal"

    def __init__(self, lat_key: str = "latitude", lon_key: str = "longitude"):
        self.lat_key = lat_key
        self.lon_key = lon_key

    def candidate(self, metadata):
        lat, lon = metadata.get(self.lat_key), metadata.get(self.lon_key)
        if lat is None or lon is None:
            return None
        return lat, lon


class DmsPairStrategy(GpsStrategy):
    name = "dms"

    def candidate(self, metadata):
        lat = dms_to_decimal(metadata.get("GPSLatitude"), metadata.get("GPSLatitudeRef"))
        lon = dms_to_decimal(metadata.get("GPSLongitude"), metadata.get("GPSLongitudeRef"))
        if lat is None or lon is None:
            return None
        return lat, lon


class NestedDmsStrategy(DmsPairStrategy):
    name = "nested_dms"

    def __init__(self, namespaces=("GPSInfo", "gps")):
        self.namespaces = namespaces

    def candidate(self, metadata):
        for namespace in self.namespaces:
            nested = metadata.get(namespace)
            if not isinstance(nested, Mapping):
                continue
            pair = super().candidate(nested)
            if pair is not None:
                return pair
        return None


class NamespacedDecimalStrategy(GpsStrategy):
    name = "namespaced_decimal"

    def __init__(self, namespaces=("xmp", "exif")):
        self.namespaces = namespaces
        self._decimal = DecimalPairStrategy()

    def extract(self, metadata):
        # Each namespace is validated on its own so a (0, 0) xmp block does not hide exif
        for namespace in self.namespaces:
            nested = metadata.get(namespace)
            if not isinstance(nested, Mapping):
                continue
            coordinate = self._decimal.extract(nested)
            if coordinate is not None:
                return coordinate
        return None


DEFAULT_STRATEGIES = (
    DecimalPairStrategy(),
    DmsPairStrategy(),
    NestedDmsStrategy(),
    NamespacedDecimalStrategy(),
)


def extract_from_metadata(metadata: Mapping, strategies=DEFAULT_STRATEGIES) -> Optional[Coordinate]:
    """Try each strategy in order; first valid coordinate wins."""
    if not isinstance(metadata, Mapping) or not metadata:
        return None

    for strategy in strategies:
        try:
            coordinate = strategy.extract(metadata)
        except Exception as e:
            logger.debug("GPS strategy %s failed: %s", strategy.name, e)
            continue
        if coordinate is not None:
            logger.debug("GPS found via %s strategy: %s", strategy.name, coordinate.as_tuple())
            return coordinate
    return None


def extract_coordinate(photo: Union[bytes, Mapping, None], strategies=DEFAULT_STRATEGIES) -> Optional[Coordinate]:
    """
    Extract a validated coordinate from a photo.

    Args:
        photo: raw image bytes, or an already-decoded metadata mapping
        strategies: ordered extraction strategies

    Returns:
        Coordinate | None
    """
    if photo is None:
        return None
    if isinstance(photo, (bytes, bytearray, memoryview)):
        metadata = read_photo_metadata(bytes(photo))
    else:
        metadata = photo
    return extract_from_metadata(metadata, strategies)
