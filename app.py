"""
BeachWatch — Main Streamlit Dashboard
=====================================
Beach Water-Quality Status Map

Entry point: streamlit run app.py
"""

import logging
import os

import pandas as pd
import streamlit as st
from streamlit_folium import st_folium

# ── Internal imports ──────────────────────────────────────────────────────────
from config.constants import (
    BACTERIA_CUTOFFS,
    DATA_SHEET,
    MAX_SAMPLE_AGE_DAYS,
    MAX_SAMPLE_AGE_MS,
    SITES_SHEET,
    STATUS_LEVELS,
    STATUSES,
)

from data_fetch.data_pipeline import DataPipeline
from data_fetch.exceptions import PipelineError
from data_fetch.sheets_client import DemoSheetsClient, SheetsClient

from features.site_record import build_record
from models.health_model import compute_health_summary, current_time_ms

from visualization.popups import PopupController
from visualization.sample_chart import build_sample_chart, build_status_bar, status_counts
from visualization.site_map import FoliumMapSink, draw_map, is_new_click

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("beachwatch")

# ─────────────────────────────────────────────────────────────────────────────
# Page config
# ─────────────────────────────────────────────────────────────────────────────
st.set_page_config(
    page_title="BeachWatch — Beach Water Quality",
    page_icon="🏖",
    layout="wide",
    initial_sidebar_state="expanded",
)

st.markdown("""
<style>
  .status-banner {
      padding: 12px 18px; border-radius: 8px; margin-bottom: 8px;
      background: #f8fafc; border-left: 6px solid #3498db;
  }
  .status-chip {
      display: inline-block; border-radius: 6px; padding: 2px 10px;
      margin-right: 6px; font-size: 0.85rem; font-weight: 600; color: white;
  }
</style>
""", unsafe_allow_html=True)


# ─────────────────────────────────────────────────────────────────────────────
# Cached pipeline
# ─────────────────────────────────────────────────────────────────────────────
@st.cache_data(ttl=1800, show_spinner=False)
def run_pipeline(data_key: str, label_key: str, demo: bool):
    """Fetch both spreadsheets; the reference time is taken once per fetch."""
    client = DemoSheetsClient() if demo else SheetsClient()
    raw = DataPipeline(client).fetch_all(data_key, label_key)
    raw["now_ms"] = current_time_ms()
    return raw


def reset_map_clicks():
    """Forget the last map click; a fresh map key makes st_folium forget it too."""
    st.session_state["map_version"] = st.session_state.get("map_version", 0) + 1
    st.session_state.pop("last_click", None)


# ─────────────────────────────────────────────────────────────────────────────
# Sidebar
# ─────────────────────────────────────────────────────────────────────────────
env_data_key = os.environ.get("BEACHWATCH_DATA_KEY", "")
env_label_key = os.environ.get("BEACHWATCH_LABEL_KEY", "")

with st.sidebar:
    st.title("🏖 BeachWatch")
    st.caption("Enterococci monitoring of recreational beaches")

    demo = st.toggle("Use demo data", value=not (env_data_key and env_label_key))
    data_key = st.text_input("Data spreadsheet key", value=env_data_key, disabled=demo)
    label_key = st.text_input("Label spreadsheet key", value=env_label_key, disabled=demo)

    if st.button("🔄 Refresh"):
        run_pipeline.clear()
        st.session_state.pop("popups", None)
        reset_map_clicks()

    st.divider()
    st.markdown(
        f"**Good** ≤ {BACTERIA_CUTOFFS['good']} NMP/100 mL  \n"
        f"**Caution** ≤ {BACTERIA_CUTOFFS['caution']} NMP/100 mL  \n"
        f"**Unhealthy** above that  \n"
        f"Samples older than {MAX_SAMPLE_AGE_DAYS} days count as **unknown**."
    )

if not demo and not (data_key and label_key):
    st.info("Enter both spreadsheet keys in the sidebar, or switch on demo data.")
    st.stop()

# ─────────────────────────────────────────────────────────────────────────────
# ⓪ Fetch
# ─────────────────────────────────────────────────────────────────────────────
with st.spinner("🔄 Fetching sample and label spreadsheets…"):
    try:
        raw = run_pipeline(data_key, label_key, demo)
    except PipelineError as e:
        logger.error("%s", e)
        st.error(f"⚠️ Could not load the spreadsheets: {e}")
        st.stop()

now_ms = raw["now_ms"]
sites = raw["data"][SITES_SHEET].rows
samples = raw["data"][DATA_SHEET].rows

if "popups" not in st.session_state:
    st.session_state["popups"] = PopupController()
controller = st.session_state["popups"]

records = [build_record(site, samples) for site in sites]
summaries = [compute_health_summary(r.data, MAX_SAMPLE_AGE_MS, now_ms) for r in records]
counts = status_counts([s["status"] for s in summaries])

# ─────────────────────────────────────────────────────────────────────────────
# ① Status banner
# ─────────────────────────────────────────────────────────────────────────────
chips = "".join(
    f'<span class="status-chip" style="background:{STATUS_LEVELS[s]["color"]};">'
    f'{STATUS_LEVELS[s]["emoji"]} {STATUS_LEVELS[s]["label"]}: {counts[s]}</span>'
    for s in STATUSES
)
st.markdown(f"""
<div class="status-banner">
  <b>{len(sites)} sites</b> · {len(samples)} samples · fetched {raw['fetched_at'][:16].replace('T', ' ')}
  <div style="margin-top:6px;">{chips}</div>
</div>
""", unsafe_allow_html=True)

# ─────────────────────────────────────────────────────────────────────────────
# ② Map + site details (two-column)
# ─────────────────────────────────────────────────────────────────────────────
sink = FoliumMapSink()
placed = draw_map(raw["data"], raw["labels"], sink, controller, now_ms)

map_col, detail_col = st.columns([1.4, 1.0], gap="medium")

with map_col:
    st.subheader("🗺 Beach Status Map")
    map_result = st_folium(
        sink.map, height=520, width="100%", returned_objects=["last_object_clicked"],
        key=f"map-{st.session_state.get('map_version', 0)}",
    )

    # st_folium keeps returning the last click on every rerun
    clicked = map_result.get("last_object_clicked") if map_result else None
    if is_new_click(clicked, st.session_state.get("last_click")):
        st.session_state["last_click"] = clicked
        sink.dispatch_click(clicked["lat"], clicked["lng"])

    unplaced = len(sites) - len(placed)
    if unplaced:
        st.caption(f"{unplaced} site(s) have no recorded location and are not shown on the map.")

with detail_col:
    popup = controller.open_popup
    if popup is None:
        st.subheader("📋 Site Details")
        st.info("Click a flag on the map to see the site's description and sample history.")
    else:
        st.subheader(f"📋 {popup.site_name}")
        for tab, html in zip(st.tabs(list(popup.tabs)), popup.tabs.values()):
            with tab:
                st.markdown(html, unsafe_allow_html=True)

        record = next((r for r in records if r.site_name == popup.site_name), None)
        if record is not None and record.data:
            st.plotly_chart(build_sample_chart(record), width="stretch",
                            config={"displayModeBar": False})

        if st.button("Close", key="close_popup"):
            controller.close()
            reset_map_clicks()
            st.rerun()

st.divider()

# ─────────────────────────────────────────────────────────────────────────────
# ③ All sites
# ─────────────────────────────────────────────────────────────────────────────
chart_col, table_col = st.columns([1.0, 1.6], gap="medium")

with chart_col:
    st.subheader("📊 Sites by Status")
    st.plotly_chart(build_status_bar([s["status"] for s in summaries]), width="stretch",
                    config={"displayModeBar": False})

with table_col:
    st.subheader("🏖 All Sites")
    table = pd.DataFrame([
        {
            "Site": r.site_name,
            "Status": f'{s["emoji"]} {s["label"]}',
            "Latest sample": s["latest_date"],
            "Age (days)": s["age_days"],
            "Enterococci": s["bacterial_count"],
            "On map": r.has_location,
        }
        for r, s in zip(records, summaries)
    ])
    st.dataframe(table, width="stretch", hide_index=True)
