"""
sighting_model.py — Wildlife Sighting Report ORM Model
-------------------------------------------------------

Table:
- `wildlife_sighting`: one row per submitted report, with the resolved location

Reports start as `pending` until enforcement reviews them.

Dependencies:
- SQLAlchemy ORM

"""

from sqlalchemy import Column, Integer, Text, Float, Boolean, DateTime
from sqlalchemy.sql import func

from db.db import Base


class WildlifeSighting(Base):
    __tablename__ = "wildlife_sighting"

    sighting_id = Column(Integer, primary_key=True, autoincrement=True)

    species_name = Column(Text, nullable=False)

    # Location info
    latitude = Column(Float, nullable=False)
    longitude = Column(Float, nullable=False)
    barangay = Column(Text, nullable=False)
    municipality = Column(Text)
    has_direct_evidence = Column(Boolean, default=False)
    evidence_source = Column(Text)

    # Reporter
    reporter_name = Column(Text)
    contact_number = Column(Text)

    photo_url = Column(Text)
    timestamp_captured = Column(DateTime)
    status = Column(Text, default="pending")

    created_at = Column(DateTime, server_default=func.now())
