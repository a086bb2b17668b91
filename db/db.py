"""
db.py — Database Engine & Session Setup
----------------------------------------

This module initializes the SQLAlchemy database connection and provides
session management for the wildlife sighting reports.

Features:
- Creates database engine using DATABASE_URL from project settings
- Defines `SessionLocal` for transaction management
- Provides `init_db()` to create tables based on ORM models

Dependencies:
- SQLAlchemy for ORM and engine management
- Project settings for environment-based configuration

"""

from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from config.settings import DATABASE_URL


# --- ORM Base Class ---
Base = declarative_base()

# --- Database Engine ---

engine = create_engine(
    DATABASE_URL
)


# --- Session Factory ---
SessionLocal = sessionmaker(bind=engine)


def init_db(bind=None):
    """
    Initializes the database by creating all tables defined in ORM models.
    Safe to run multiple times; only creates tables if they don't exist.
    """
    # Register models on Base.metadata
    import db.sighting_model  # noqa: F401
    import db.subdivision_model  # noqa: F401

    Base.metadata.create_all(bind or engine)
