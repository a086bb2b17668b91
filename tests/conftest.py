import io

import pytest
from PIL import Image
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from core.catalog import builtin_catalog
from core.models import Coordinate, SubdivisionRecord
from db.db import init_db

GPS_IFD_TAG = 0x8825


def to_dms(value: float):
    value = abs(value)
    degrees = int(value)
    minutes = int((value - degrees) * 60)
    seconds = round((value - degrees - minutes / 60) * 3600, 4)
    return float(degrees), float(minutes), seconds


def make_jpeg(gps: dict = None) -> bytes:
    """Small JPEG, optionally with a GPS IFD keyed by raw tag ids."""
    image = Image.new("RGB", (16, 16), color=(40, 120, 60))
    buffer = io.BytesIO()
    kwargs = {}
    if gps is not None:
        exif = Image.Exif()
        exif[0x010F] = "TestCam"
        exif[GPS_IFD_TAG] = gps
        kwargs["exif"] = exif
    image.save(buffer, format="JPEG", **kwargs)
    return buffer.getvalue()


def gps_ifd(latitude: float, longitude: float) -> dict:
    return {
        1: "N" if latitude >= 0 else "S",
        2: to_dms(latitude),
        3: "E" if longitude >= 0 else "W",
        4: to_dms(longitude),
    }


def record(name, lat, lon, radius_km, region="Testville"):
    return SubdivisionRecord(
        name=name,
        parent_region=region,
        center=Coordinate(latitude=lat, longitude=lon),
        containment_radius_km=radius_km,
    )


@pytest.fixture
def catalog():
    return builtin_catalog()


@pytest.fixture
def session():
    engine = create_engine("sqlite://")
    init_db(bind=engine)
    Session = sessionmaker(bind=engine)
    with Session() as s:
        yield s
    engine.dispose()
