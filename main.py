"""
main.py — Streamlit Navigation Controller
------------------------------------------

This script initializes the Wildlife Sighting Report Streamlit app.

Features:
✅ Configures logging from LOG_LEVEL
✅ Sets the page title and browser tab icon
✅ Python 3.12 compatibility patch for event loops

Dependencies:
- streamlit
"""

import asyncio
import logging

import streamlit as st
from config.settings import LOG_LEVEL


logging.basicConfig(
    level=getattr(logging, str(LOG_LEVEL).upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

# Patch for Python 3.12 compatibility with Streamlit
try:
    asyncio.get_running_loop()
except RuntimeError:
    asyncio.set_event_loop(asyncio.new_event_loop())

# --- Configure the main Streamlit app window ---
st.set_page_config(
    page_title="Wildlife Sighting Report",
    page_icon="🐾",
    layout="centered",
    initial_sidebar_state="collapsed"
)

# --- Create the navigation sidebar ---
pg = st.navigation([
    st.Page("app/report_sighting_ui.py", title="Report a Sighting", icon="📍", default=True),
])

# --- Run the selected page ---
pg.run()
