"""
exif_utils.py — Photo Metadata Reader
--------------------------------------

Reads the embedded metadata of an uploaded or captured sighting photo into a
single merged mapping, so GPS extraction can read it without caring how the
camera or phone wrote it.

Mapping layout:
- Decoded EXIF tag names at the top level (`Make`, `Model`, `DateTime`, ...)
- GPS IFD tags merged at the top level (`GPSLatitude`, `GPSLatitudeRef`, ...)
- `GPSInfo`: the same GPS IFD as its own sub-mapping
- `xmp`: decimal `latitude` / `longitude` parsed from an XMP packet, when present

Dependencies:
- Pillow for EXIF decoding

"""

import io
import logging
import re
from typing import Optional

from PIL import Image
from PIL.ExifTags import TAGS, GPSTAGS

logger = logging.getLogger(__name__)

GPS_IFD_TAG = 0x8825  # GPSInfo

_XMP_FIELD = r"exif:{name}\s*(?:=\s*[\"']([^\"']+)[\"']|>\s*([^<]+?)\s*<)"
_XMP_VALUE = re.compile(
    r"^\s*(?P<deg>\d+(?:\.\d+)?)\s*,\s*(?P<min>\d+(?:\.\d+)?)(?:\s*,\s*(?P<sec>\d+(?:\.\d+)?))?\s*(?P<ref>[NSEW])\s*$",
    re.IGNORECASE,
)


def parse_xmp_gps_value(value: str) -> Optional[float]:
    """
    Parse an XMP GPS coordinate ("8,22.32N" or "8,22,19.2N") to decimal degrees.
    """
    match = _XMP_VALUE.match(value or "")
    if not match:
        return None
    decimal = float(match["deg"]) + float(match["min"]) / 60
    if match["sec"]:
        decimal += float(match["sec"]) / 3600
    if match["ref"].upper() in ("S", "W"):
        decimal *= -1
    return decimal


def _xmp_field(packet: str, name: str) -> Optional[str]:
    match = re.search(_XMP_FIELD.format(name=name), packet)
    if not match:
        return None
    return match.group(1) or match.group(2)


def read_xmp_gps(xmp) -> dict:
    """Return {'latitude', 'longitude'} from a raw XMP packet, or {}."""
    if not xmp:
        return {}
    packet = xmp.decode("utf-8", errors="ignore") if isinstance(xmp, bytes) else str(xmp)

    lat_raw = _xmp_field(packet, "GPSLatitude")
    lon_raw = _xmp_field(packet, "GPSLongitude")
    if not lat_raw or not lon_raw:
        return {}

    lat = parse_xmp_gps_value(lat_raw)
    lon = parse_xmp_gps_value(lon_raw)
    if lat is None or lon is None:
        return {}
    return {"latitude": lat, "longitude": lon}


def read_photo_metadata(photo_bytes: bytes) -> dict:
    """
    Decode the metadata of an image held in memory.

    Args:
        photo_bytes (bytes): Raw image file contents

    Returns:
        dict: Merged metadata mapping (see module docstring), {} when the image
        cannot be read or carries no metadata
    """
    if not photo_bytes:
        return {}

    try:
        with Image.open(io.BytesIO(photo_bytes)) as image:
            exif = image.getexif()
            xmp = image.info.get("xmp") or image.info.get("XML:com.adobe.xmp")

            metadata = {TAGS.get(tag, tag): value for tag, value in exif.items()}
            gps_info = {GPSTAGS.get(tag, tag): value for tag, value in exif.get_ifd(GPS_IFD_TAG).items()}
    except Exception as e:
        # Pillow raises more than OSError on hostile files (DecompressionBombError, struct.error)
        logger.debug("Could not read photo metadata: %s", e)
        return {}

    if gps_info:
        metadata.update(gps_info)
        metadata["GPSInfo"] = gps_info
    else:
        # The raw tag holds the IFD offset, which is meaningless on its own
        metadata.pop("GPSInfo", None)

    xmp_gps = read_xmp_gps(xmp)
    if xmp_gps:
        metadata["xmp"] = xmp_gps

    return metadata
