import os
from pathlib import Path

# Defaults for locating the brand logo and generated artifacts.
ENV_LOGO_PATH = "VERIDIA_LOGO"
DEFAULT_LOGO_FILENAME = "logo.png"
DEFAULT_REPORT_DIR = Path(__file__).resolve().parent.parent / "reports"

PRODUCT_NAME = "Veridia Saber"
PRODUCT_TAGLINE = "Botanical Collection Management System"
CONFIDENTIAL_LINE = f"{PRODUCT_NAME} - Confidential Document"
DATA_SOURCE_LINE = f"Data source: {PRODUCT_NAME} database"
DEFAULT_GENERATOR = "System"

# Shared palette so every document carries the same brand colours.
COLORS = {
    "primary": (6, 78, 59),
    "secondary": (16, 185, 129),
    "text": (31, 41, 55),
    "text_light": (107, 114, 128),
    "white": (255, 255, 255),
    "zebra": (249, 250, 251),
    "rule": (200, 200, 200),
    "notice_fill": (243, 244, 246),
    "notice_border": (209, 213, 219),
    "placeholder_fill": (245, 245, 245),
    "legacy_header": (100, 100, 100),
}

BODY_FONT = "Helvetica"
LABEL_FONT = "Times"

# Page geometry, all in millimetres.
PAGE_SIZES = {
    "portrait": (210.0, 297.0),
    "landscape": (297.0, 210.0),
}
MARGIN_LEFT = 14.0
MARGIN_RIGHT = 14.0
CONTINUATION_TOP = 25.0
FOOTER_RESERVE = 25.0
FACT_SHEET_FOOTER_RESERVE = 32.0
FOOTER_RULE_OFFSET = 18.0
FOOTER_TEXT_OFFSET = 12.0

# Layout cursor defaults.
LINE_HEIGHT = 5.0
BLOCK_GAP = 3.0
LABEL_COLUMN_WIDTH = 35.0

# Horizontal bar chart.
CHART_BAR_HEIGHT = 9.0
CHART_BAR_GAP = 3.0
CHART_MAX_BAR_WIDTH = 90.0
CHART_MIN_BAR_WIDTH = 5.0
CHART_LABEL_X = 16.0
CHART_BAR_X = 65.0
CHART_VALUE_THRESHOLD = 20.0
CHART_NAME_BUDGET = 22
CHART_TITLE_GAP = 10.0
CHART_TRAILING_GAP = 10.0
CHART_DEFAULT_TOP_N = 15
OTHERS_LABEL = "Others"

# Table defaults mirror the catalog screens.
TABLE_FONT_SIZE = 9
TABLE_CELL_PADDING = 3.0

# Remote images.
IMAGE_TIMEOUT_S = 10.0
IMAGE_MAX_BYTES = 5 * 1024 * 1024
IMAGE_USER_AGENT = "Mozilla/5.0 (compatible; VeridiaReports/1.0)"

DATE_FORMAT = "%d/%m/%Y"
DATETIME_FORMAT = "%d/%m/%Y %H:%M"

MESSAGES = {
    "no_records": "No records.",
    "no_chart_data": "No records catalogued yet. The chart will appear once data is available.",
    "no_description": "No description available.",
    "no_cultivation": "No cultivation information registered.",
    "no_field_notes": "No field data recorded for this project.",
    "no_labels": "No labels to print.",
    "no_image": "No image",
}

LABEL_HEADING = "FLORA DO BRASIL"
LABEL_SUBHEADING = f"{PRODUCT_NAME} - Digital Herbarium"


def _default_candidates(default_filename: str) -> list[Path]:
    here = Path(__file__).resolve().parent
    return [
        here / "assets" / default_filename,
        here.parent / "assets" / default_filename,
        here.parent / default_filename,
    ]


def resolve_logo_source(default_filename: str = DEFAULT_LOGO_FILENAME) -> str:
    """
    Resolve the logo location from env or common locations.
    Returns an empty string if nothing is found so callers skip the logo.
    """
    env_path = os.getenv(ENV_LOGO_PATH, "").strip()
    if env_path:
        return env_path

    for candidate in _default_candidates(default_filename):
        if candidate.exists():
            return str(candidate)
    return ""
