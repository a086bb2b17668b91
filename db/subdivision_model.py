"""
subdivision_model.py — Barangay Lookup Table (ORM Model)
---------------------------------------------------------

This module defines the SQLAlchemy ORM model for the barangay catalog used to
assign sightings to a local district.

Table:
- `subdivision_lookup`

Purpose:
- Stores each barangay with its municipality, reference center and containment radius
- Lets deployments keep the catalog in the database (`CATALOG_SOURCE=database`)

Dependencies:
- SQLAlchemy ORM

"""

from sqlalchemy import Column, Integer, String, Float
from sqlalchemy.orm import Session

from core.models import Coordinate, SubdivisionRecord
from db.db import Base


class SubdivisionLookup(Base):
    """
    Table: subdivision_lookup

    Fields:
    - name: Barangay display name (unique)
    - parent_region: Municipality
    - latitude, longitude: Reference center in decimal degrees
    - containment_radius_km: Confident-match radius around the center
    """
    __tablename__ = "subdivision_lookup"

    subdivision_lookup_id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String, unique=True, nullable=False)
    parent_region = Column(String, nullable=False)
    latitude = Column(Float, nullable=False)
    longitude = Column(Float, nullable=False)
    containment_radius_km = Column(Float, nullable=False)


def load_catalog_from_db(session: Session) -> list[SubdivisionRecord]:
    """Catalog records in table order."""
    rows = session.query(SubdivisionLookup).order_by(SubdivisionLookup.subdivision_lookup_id).all()
    return [
        SubdivisionRecord(
            name=row.name,
            parent_region=row.parent_region,
            center=Coordinate(latitude=row.latitude, longitude=row.longitude),
            containment_radius_km=row.containment_radius_km,
        )
        for row in rows
    ]


def seed_subdivisions(session: Session, catalog) -> int:
    """
    Insert catalog records that are not in the table yet.

    Returns:
        int: number of rows inserted
    """
    existing = {name for (name,) in session.query(SubdivisionLookup.name).all()}
    inserted = 0
    for record in catalog:
        if record.name in existing:
            continue
        session.add(SubdivisionLookup(
            name=record.name,
            parent_region=record.parent_region,
            latitude=record.center.latitude,
            longitude=record.center.longitude,
            containment_radius_km=record.containment_radius_km,
        ))
        inserted += 1
    session.commit()
    return inserted
