"""
BeachWatch — Constants and Thresholds

Fixed at deploy time. The bacterial cutoffs follow the enterococci
guidance used by the beach monitoring programme (colony-forming units
per 100 mL of seawater).
"""

# =============================================================================
# Sample freshness
# =============================================================================
MAX_SAMPLE_AGE_DAYS = 15
MAX_SAMPLE_AGE_MS = MAX_SAMPLE_AGE_DAYS * 24 * 3600 * 1000

# =============================================================================
# Enterococci cutoffs (NMP / 100 mL), inclusive upper bounds
# =============================================================================
BACTERIA_CUTOFFS = {
    "good": 99,
    "caution": 199,
}

# =============================================================================
# Status classification
# =============================================================================
STATUSES = ("unknown", "good", "caution", "unhealthy")

FLAG_ICONS = {
    "unknown":   "images/unknown.svg",
    "good":      "images/good.svg",
    "caution":   "images/caution.svg",
    "unhealthy": "images/unhealthy.svg",
}

STATUS_LEVELS = {
    "unknown":   {"label": "No recent sample", "color": "#95a5a6", "emoji": "⚪"},
    "good":      {"label": "Good",             "color": "#2ecc71", "emoji": "🟢"},
    "caution":   {"label": "Caution",          "color": "#f1c40f", "emoji": "🟡"},
    "unhealthy": {"label": "Unhealthy",        "color": "#e74c3c", "emoji": "🔴"},
}

# =============================================================================
# Map
# =============================================================================
INITIAL_ZOOM = 11

# Used when no site has a usable location (Gulf of California)
FALLBACK_CENTER = (26.0, -111.3)

# Flag images are 20 px wide by 32 px tall, anchored at the base of the pole
MARKER_ICON_SIZE = (20, 32)
MARKER_ICON_ANCHOR = (0, 32)

# Clickable polygon around each flag, x/y pairs in icon pixels
MARKER_SHAPE = {
    "coord": [1, 1, 1, 20, 18, 20, 18, 1],
    "type": "poly",
}

# =============================================================================
# Spreadsheet layout
# =============================================================================
DATA_SHEET = "datos"
SITES_SHEET = "sitios"
LABELS_SHEET = "etiquetas"

SITE_FIELD = "sitio"
LATITUDE_FIELD = "latitud"
LONGITUDE_FIELD = "longitud"
DESCRIPTION_FIELD = "descripción"
DATE_FIELD = "fecha"
BACTERIA_FIELD = "enterococos"

# =============================================================================
# API Endpoints
# =============================================================================
GOOGLE_SHEETS_CSV = "https://docs.google.com/spreadsheets/d/{key}/gviz/tq"
HTTP_TIMEOUT_S = 30
