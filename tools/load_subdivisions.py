"""
load_subdivisions.py — Initialize and Seed the Barangay Catalog Table
----------------------------------------------------------------------

Creates the database tables and loads the built-in Manolo Fortich barangays
into `subdivision_lookup`, so deployments running with
`CATALOG_SOURCE=database` start from a populated catalog. Rows already in the
table are left untouched; edit them in the database to adjust centers or radii.

Usage:
    python -m tools.load_subdivisions

Dependencies:
- SQLAlchemy session from db.db

"""

import logging

from core.catalog import builtin_catalog
from db.db import SessionLocal, init_db
from db.subdivision_model import seed_subdivisions

logger = logging.getLogger(__name__)


def load_subdivisions(session=None, catalog=None, bind=None) -> int:
    """
    Seed `subdivision_lookup` with any missing barangays.

    Args:
        session: Open SQLAlchemy session; a new `SessionLocal()` when omitted
        catalog: Records to load, the built-in catalog by default
        bind: Engine to create tables on, the configured engine by default

    Returns:
        int: number of rows inserted
    """
    init_db(bind)
    catalog = builtin_catalog() if catalog is None else catalog

    if session is not None:
        inserted = seed_subdivisions(session, catalog)
    else:
        with SessionLocal() as session:
            inserted = seed_subdivisions(session, catalog)

    logger.info("Seeded %d of %d barangays", inserted, len(catalog))
    return inserted


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    count = load_subdivisions()
    print(f"Inserted {count} barangays into subdivision_lookup")
