"""
report_sighting_ui.py — Public Wildlife Sighting Report
--------------------------------------------------------

This Streamlit page lets the public report a wildlife sighting:

- Species name and optional reporter contact details
- Photo upload (location read from its metadata) or live camera capture
- Barangay selection, required when no location can be read
- Preview of the resolved location before saving the pending report

Live capture uses the position the browser reported with the page through
the `lat`, `lon`, `ts` (epoch milliseconds) and `perm` query parameters.
This page does not request the position itself: the embedding page or
launcher must append them. Without them live capture resolves to the pending
location and the barangay selection is required.

Dependencies:
- Streamlit for UI
- core.location_resolution for the location pipeline
- SQLAlchemy session from db.db
"""

import math
import sys

import streamlit as st

from config.settings import CATALOG_SOURCE
from core.catalog import get_catalog, subdivision_names, DEFAULT_MUNICIPALITY
from core.exception import SightingValidationError, custom_exception_hook
from core.live_position import LivePositionSource, ReportedFixDevice
from core.location_resolution import LocationResolver, check_location_step
from core.models import PermissionState
from core.records import create_sighting_record
from db.db import SessionLocal, init_db
from tools.load_subdivisions import load_subdivisions


@st.cache_resource
def get_resolver() -> LocationResolver:
    init_db()
    if CATALOG_SOURCE == "database":
        load_subdivisions()
    return LocationResolver(get_catalog())


def reported_live_source():
    """LivePositionSource for the fix passed in by the browser, if any."""
    params = st.query_params
    if "lat" not in params and "perm" not in params:
        return None
    try:
        reported_at = float(params["ts"]) / 1000 if "ts" in params else None
        permission = PermissionState(params.get("perm", PermissionState.GRANTED.value))
    except ValueError:
        return None
    if reported_at is not None and not math.isfinite(reported_at):
        return None
    device = ReportedFixDevice(params.get("lat"), params.get("lon"), reported_at, permission)
    return LivePositionSource(device)


resolver = get_resolver()
catalog = resolver.catalog

# --- Wildlife Information ---
st.subheader("🐾 Wildlife Information")
species_name = st.text_input("Species Name *")

# --- Photo ---
st.subheader("📷 Photo")
mode = st.radio("Photo source", ["Upload", "Live capture"], horizontal=True)
if mode == "Upload":
    photo_file = st.file_uploader("Sighting photo", type=["jpg", "jpeg", "png", "heic", "tif", "tiff"])
    live_source = None
else:
    photo_file = st.camera_input("Take a photo")
    live_source = reported_live_source()

# --- Location Details ---
st.subheader("📍 Location Details")
barangay = st.selectbox("Barangay", [""] + subdivision_names(catalog),
                        help="Required when the photo carries no location.")
municipality = st.text_input("Municipality", value=DEFAULT_MUNICIPALITY)

# --- Contact Information ---
with st.expander("Contact Information (optional)"):
    reporter_name = st.text_input("Name")
    contact_number = st.text_input("Contact Number")

if st.button("Submit Report", type="primary"):
    try:
        check_location_step(photo_file is not None, live_source is not None, barangay)

        photo_bytes = photo_file.getvalue() if photo_file is not None else None
        result = resolver.resolve(
            photo=photo_bytes,
            live_source=live_source,
            manual_subdivision=barangay,
            manual_municipality=municipality,
        )

        col1, col2, col3 = st.columns(3)
        col1.metric("Latitude", f"{result.coordinate.latitude:.6f}")
        col2.metric("Longitude", f"{result.coordinate.longitude:.6f}")
        col3.metric("Barangay", result.subdivision_name or "—")
        if not result.has_direct_evidence:
            st.info("No location found in the photo; the report is placed at the CENRO office pending review.")

        with SessionLocal() as session:
            sighting = create_sighting_record(
                session,
                result,
                species_name=species_name,
                reporter_name=reporter_name,
                contact_number=contact_number,
            )
        st.success(f"✅ Report #{sighting.sighting_id} submitted. It will appear as pending for enforcement review.")

    except SightingValidationError as e:
        st.error(str(e))
    except Exception:
        st.error(f"❌ Failed to submit report: {custom_exception_hook(*sys.exc_info())}")
