"""
geo_utils.py — Sighting Location Utility
-----------------------------------------

This module provides location utilities for the wildlife sighting reports, including:

- Validating and normalizing raw latitude/longitude candidates
- Converting EXIF degree/minute/second components to decimal degrees
- Great-circle (Haversine) distance between coordinates
- Reverse geocoding coordinates with OpenStreetMap Nominatim
- Pulling municipality and barangay-like fields out of a Nominatim address

Expected secrets:
- USER_AGENT defined in `.streamlit/secrets.toml` or the environment

Dependencies:
- requests for API calls
- OpenStreetMap Nominatim for reverse geocoding

"""

import json
import logging
import math
from decimal import Decimal
from numbers import Number
from typing import Optional

import requests

from config.settings import HEADERS, NOMINATIM_REVERSE_URL, NOMINATIM_ZOOM, GEOCODE_TIMEOUT_S
from core.models import Coordinate

logger = logging.getLogger(__name__)

EARTH_RADIUS_KM = 6371.0
COORDINATE_PRECISION = 6  # ~0.11 m

# --- Nominatim address vocabulary, most specific first ---
MUNICIPALITY_FIELDS = ("town", "city", "municipality", "county", "state")
SUBDIVISION_FIELDS = (
    "village", "suburb", "neighbourhood", "hamlet", "barangay", "city_district", "district"
)


def to_float(value) -> Optional[float]:
    """
    Convert a numeric-looking value to float.

    Handles ints, floats, Decimals, numeric strings, Pillow IFDRational values
    and (numerator, denominator) pairs as written by some EXIF encoders.
    Booleans and anything unconvertible return None.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (tuple, list)) and len(value) == 2:
        num, den = to_float(value[0]), to_float(value[1])
        if num is None or not den:
            return None
        return num / den
    if isinstance(value, bytes):
        value = value.decode("ascii", errors="ignore")
    if isinstance(value, str):
        value = value.strip()
    elif not isinstance(value, (Number, Decimal)) and not hasattr(value, "__float__"):
        return None
    try:
        return float(value)
    except (TypeError, ValueError, ZeroDivisionError, OverflowError):
        return None


def normalize_coordinate(latitude, longitude) -> Optional[Coordinate]:
    """
    Validate a candidate (lat, lng) pair and round it to 6 decimal places.

    Returns None when either value is not a finite number, is out of range,
    or the pair is (0, 0), which encoders use for "no fix".
    """
    lat = to_float(latitude)
    lng = to_float(longitude)
    if lat is None or lng is None:
        return None
    if not (math.isfinite(lat) and math.isfinite(lng)):
        return None
    if not (-90.0 <= lat <= 90.0 and -180.0 <= lng <= 180.0):
        return None
    if lat == 0.0 and lng == 0.0:
        return None
    return Coordinate(
        latitude=round(lat, COORDINATE_PRECISION),
        longitude=round(lng, COORDINATE_PRECISION),
    )


def dms_to_decimal(components, ref=None) -> Optional[float]:
    """
    Convert GPS coordinates from DMS (degrees, minutes, seconds) to decimal format.

    `components` is a [degrees, minutes, seconds] sequence; `ref` is the hemisphere
    letter. S and W negate the result.
    """
    if components is None or isinstance(components, (str, bytes)):
        return None
    try:
        degrees, minutes, seconds = components
    except (TypeError, ValueError):
        return None

    parts = [to_float(degrees), to_float(minutes), to_float(seconds)]
    if any(p is None for p in parts):
        return None
    decimal = parts[0] + parts[1] / 60 + parts[2] / 3600

    if isinstance(ref, bytes):
        ref = ref.decode("ascii", errors="ignore")
    if isinstance(ref, str) and ref.strip().upper()[:1] in ("S", "W"):
        decimal *= -1
    return decimal


def haversine_km(a: Coordinate, b: Coordinate) -> float:
    """Great-circle distance between two coordinates in kilometres."""
    lat1, lon1 = math.radians(a.latitude), math.radians(a.longitude)
    lat2, lon2 = math.radians(b.latitude), math.radians(b.longitude)
    dlat = lat2 - lat1
    dlon = lon2 - lon1
    h = math.sin(dlat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlon / 2) ** 2
    return 2 * EARTH_RADIUS_KM * math.asin(min(1.0, math.sqrt(h)))


def _first_field(address: dict, fields) -> str:
    for field in fields:
        value = address.get(field)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return ""


def extract_address_fields(address: dict) -> tuple[str, str]:
    """
    Returns (municipality, subdivision) from a Nominatim address object.

    Missing fields are tolerated; blanks are returned as empty strings.
    """
    if not isinstance(address, dict):
        return "", ""
    return _first_field(address, MUNICIPALITY_FIELDS), _first_field(address, SUBDIVISION_FIELDS)


def reverse_geocode(latitude: float, longitude: float, zoom: int = NOMINATIM_ZOOM,
                    timeout: float = GEOCODE_TIMEOUT_S) -> dict:
    """
    Reverse geocodes coordinates with Nominatim, asking for an address breakdown.

    Args:
        latitude (float)
        longitude (float)
        zoom (int): Nominatim detail level (14 ≈ village/suburb)
        timeout (float): HTTP timeout in seconds

    Returns:
        dict: Parsed JSON body, or {} on any network or parse failure
    """
    params = {
        "lat": latitude, "lon": longitude, "format": "jsonv2",
        "zoom": zoom, "addressdetails": 1,
    }

    try:
        response = requests.get(NOMINATIM_REVERSE_URL, params=params, headers=HEADERS, timeout=timeout)
        response.raise_for_status()
        data = response.json()
    except (requests.RequestException, ValueError) as e:
        logger.warning("Reverse geocoding failed for (%s, %s): %s", latitude, longitude, e)
        return {}

    if not isinstance(data, dict):
        logger.warning("Unexpected reverse geocoding payload for (%s, %s)", latitude, longitude)
        return {}
    return data


if __name__ == "__main__":
    # Example Test Block
    lat = 8.368100
    lon = 124.865000

    print("\nReverse Geocode (Tankulan):")
    data = reverse_geocode(lat, lon)
    print(json.dumps(data, indent=2))
    print(extract_address_fields(data.get("address", {})))
