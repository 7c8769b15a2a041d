"""
units.py — Canvas defaults and layout constants.

This is the foundation module. The density bands, font tiers and colors used
by the planner live here so the numbers are tuned in one place.

All values are canvas pixels.
"""

# =============================================================================
# CANVAS DIMENSIONS (3:4 portrait card)
# =============================================================================

DEFAULT_CANVAS_WIDTH = 1080
DEFAULT_CANVAS_HEIGHT = 1440
DEFAULT_PADDING = 100

# =============================================================================
# DENSITY PRE-PASS
# =============================================================================

# Baseline margin added before any block is estimated
ESTIMATE_BASELINE = 200

# Undensified heading tiers used only for the estimate
ESTIMATE_HEADING_SIZES = (72, 56, 44)
ESTIMATE_HEADING_EXTRA = 60
ESTIMATE_PARAGRAPH = 32 * 1.8 + 40
ESTIMATE_LIST_ITEM = 28 * 1.5
ESTIMATE_LIST_EXTRA = 40
ESTIMATE_DEFAULT = 60

# Per-element allowance when re-estimating an already sized page
ESTIMATE_ELEMENT_EXTRA = 40

# =============================================================================
# DENSITY BANDS (denser => smaller font, tighter spacing)
# =============================================================================

# (density strictly above, spacing px), checked in order
SPACING_BANDS = (
    (1.5, 15),
    (1.2, 25),
    (1.0, 35),
    (0.7, 45),
)
SPACING_SPARSE = 55

# (density strictly above, base font size)
BASE_FONT_BANDS = (
    (1.2, 28),
    (1.0, 30),
)
BASE_FONT_SPARSE = 32

# (density strictly above, (h1, h2, h3))
HEADING_FONT_BANDS = (
    (1.2, (60, 48, 36)),
    (1.0, (66, 52, 40)),
)
HEADING_FONT_SPARSE = (72, 56, 44)

# =============================================================================
# PER-KIND FONT SIZES
# =============================================================================

LIST_FONT_SIZE = 28
BLOCKQUOTE_FONT_SIZE = 26
CODE_FONT_SIZE = 24
TABLE_FONT_SIZE = 24

# Table height comes from row count, not characters
TABLE_HEADER_HEIGHT = 70
TABLE_ROW_HEIGHT = 60
TABLE_EXTRA_HEIGHT = 60

# =============================================================================
# TEXT HEIGHT ESTIMATE
# =============================================================================

LINE_HEIGHT_FACTOR = 1.8
GLYPH_WIDTH_FACTOR = 0.6
MIN_TEXT_HEIGHT = 80

# (font size strictly above, extra padding)
TEXT_PADDING_BONUS = (
    (50, 80),
    (30, 60),
)
TEXT_PADDING_BONUS_SMALL = 40

# =============================================================================
# VERTICAL CENTERING
# =============================================================================

CENTER_DENSE_THRESHOLD = 0.9
CENTER_MODERATE_THRESHOLD = 0.7
CENTER_MODERATE_SLACK_SHARE = 0.3

# =============================================================================
# COLOR DEFAULTS
# =============================================================================

DEFAULT_INK_COLOR = "#1f2937"
BOLD_ACCENT_COLOR = "#ec4899"
ADDED_ELEMENT_COLOR = "#374151"

HEADING_COLORS = {
    1: "#dc2626",
    2: "#7c3aed",
    3: "#ea580c",
}

BLOCKQUOTE_BACKGROUND = "#f3f4f6"
BLOCKQUOTE_COLOR = "#6b7280"
CODE_BACKGROUND = "#1f2937"
CODE_COLOR = "#f9fafb"

DEFAULT_BACKGROUND_COLOR = "#ffffff"

# =============================================================================
# EDITING
# =============================================================================

DEFAULT_SNAP_THRESHOLD = 8
DEFAULT_HISTORY_CAPACITY = 50
DRAG_MOVE_THRESHOLD = 2
MIN_FONT_SIZE = 8
MAX_FONT_SIZE = 72

# Click disambiguation, seconds
SINGLE_CLICK_DELAY = 0.2
DOUBLE_CLICK_WINDOW = 0.4

# =============================================================================
# HELPER FUNCTIONS
# =============================================================================

def clamp(value: float, min_val: float, max_val: float) -> float:
    """Clamp a value between min and max."""
    return max(min_val, min(max_val, value))


def pick_band(density: float, bands, fallback):
    """Return the value of the first band whose threshold density exceeds."""
    for threshold, value in bands:
        if density > threshold:
            return value
    return fallback
