# dfa_designer/utils/config.py
"""
Central configuration file for the DFA Designer.

Contains static application settings and the default geometry of diagram
items. Colours live in theme_config; user-adjustable values are served by the
SettingsManager, which falls back to the constants defined here.
"""

# ==============================================================================
# STATIC APPLICATION CONFIGURATION
# ==============================================================================

APP_VERSION = "0.3.0"
APP_NAME = "DFA Designer"
ORGANIZATION_NAME = "DFA-Designer-Devs"


# ==============================================================================
# CANVAS DEFAULTS
# ==============================================================================

DEFAULT_CANVAS_WIDTH = 750
DEFAULT_CANVAS_HEIGHT = 750
DEFAULT_GRID_SIZE = 10


# ==============================================================================
# STATE (NODE) DEFAULTS
# ==============================================================================

DEFAULT_STATE_RADIUS = 40
DEFAULT_STATE_HOVER_MARGIN = 10
DEFAULT_STATE_MOUNT_POINTS = 12
DEFAULT_STATE_MOVE_STEP = 10
DEFAULT_STATE_LABEL_FONT_FAMILY = "Segoe UI"
DEFAULT_STATE_LABEL_FONT_SIZE = 14
DEFAULT_MOUNT_POINT_RADIUS = 5.0


# ==============================================================================
# TRANSITION (EDGE) DEFAULTS
# ==============================================================================

DEFAULT_TRANSITION_LINE_WIDTH = 5.0
DEFAULT_TRANSITION_ARROW_SIZE = 12.0
DEFAULT_TRANSITION_MARKER_RADIUS = 5.0
DEFAULT_SELF_LOOP_MIN_EXTENT = 60.0
# Index pair used when two states are connected without explicit mount points:
# the right side of the first circle to the left side of the second.
DEFAULT_TRANSITION_START_INDEX = 0
DEFAULT_TRANSITION_END_INDEX = 6
