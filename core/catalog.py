"""
catalog.py — Barangay Catalog
------------------------------

The closed set of barangays a sighting can be assigned to, each with a
reference center and a containment radius. The catalog is read-only and
loaded once per process; every report submission shares it.

Source is chosen by `CATALOG_SOURCE`:
- `builtin` (default): the table below
- `database`: the `subdivision_lookup` table (see db.subdivision_model),
  seeded by `tools.load_subdivisions`; an empty table falls back to `builtin`
"""

import logging
from functools import lru_cache
from typing import Iterable, Optional

from config.settings import CATALOG_SOURCE
from core.models import Coordinate, SubdivisionRecord

logger = logging.getLogger(__name__)

DEFAULT_MUNICIPALITY = "Manolo Fortich"

# name, latitude, longitude, containment radius (km)
_MANOLO_FORTICH_BARANGAYS = [
    ("Agusan Canyon",   8.385600, 124.810300, 2.0),
    ("Alae",            8.423600, 124.817000, 2.0),
    ("Dahilayan",       8.219000, 124.851400, 3.0),
    ("Dalirig",         8.382500, 124.907000, 2.0),
    ("Damilag",         8.354700, 124.812500, 1.5),
    ("Diclum",          8.365300, 124.849300, 1.0),
    ("Guilang-guilang", 8.366900, 124.869400, 0.5),
    ("Kalugmanan",      8.276700, 124.863600, 2.5),
    ("Lindaban",        8.294700, 124.841100, 2.0),
    ("Lingion",         8.401400, 124.885800, 1.5),
    ("Lunocan",         8.398600, 124.833000, 1.5),
    ("Maluko",          8.372200, 124.944400, 2.5),
    ("Mambatangan",     8.446900, 124.829700, 2.0),
    ("Mampayag",        8.356700, 124.800000, 1.0),
    ("Mantibugao",      8.437800, 124.854700, 2.0),
    ("Minsuro",         8.502800, 124.847200, 2.5),
    ("San Miguel",      8.350300, 124.876700, 1.5),
    ("Sankanan",        8.305000, 124.866100, 2.0),
    ("Santiago",        8.431700, 124.793900, 2.0),
    ("Santo Niño",      8.343900, 124.845800, 1.5),
    ("Tankulan (Pob.)", 8.368100, 124.865000, 0.5),
    ("Ticala",          8.333300, 124.906100, 2.0),
]


def build_catalog(records: Iterable[SubdivisionRecord]) -> tuple[SubdivisionRecord, ...]:
    """Freeze records into a catalog tuple, rejecting duplicate names."""
    catalog = tuple(records)
    seen = set()
    for record in catalog:
        key = record.name.strip().lower()
        if key in seen:
            raise ValueError(f"Duplicate barangay in catalog: {record.name}")
        seen.add(key)
    return catalog


def builtin_catalog() -> tuple[SubdivisionRecord, ...]:
    return build_catalog(
        SubdivisionRecord(
            name=name,
            parent_region=DEFAULT_MUNICIPALITY,
            center=Coordinate(latitude=lat, longitude=lon),
            containment_radius_km=radius,
        )
        for name, lat, lon, radius in _MANOLO_FORTICH_BARANGAYS
    )


@lru_cache(maxsize=1)
def get_catalog() -> tuple[SubdivisionRecord, ...]:
    """Process-wide catalog, loaded on first use."""
    if CATALOG_SOURCE == "database":
        from db.db import SessionLocal
        from db.subdivision_model import load_catalog_from_db

        with SessionLocal() as session:
            catalog = build_catalog(load_catalog_from_db(session))
        if not catalog:
            logger.warning(
                "subdivision_lookup is empty; using the built-in catalog "
                "(run `python -m tools.load_subdivisions` to seed it)"
            )
            return builtin_catalog()
        logger.info("Loaded %d barangays from database", len(catalog))
        return catalog

    return builtin_catalog()


def find_subdivision(name: str, catalog: Iterable[SubdivisionRecord]) -> Optional[SubdivisionRecord]:
    """Case-insensitive exact lookup by name."""
    if not name or not name.strip():
        return None
    wanted = name.strip().lower()
    for record in catalog:
        if record.name.lower() == wanted:
            return record
    return None


def subdivision_names(catalog: Iterable[SubdivisionRecord]) -> list[str]:
    return [record.name for record in catalog]
