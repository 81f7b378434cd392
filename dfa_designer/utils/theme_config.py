# dfa_designer/utils/theme_config.py
"""
Provides a shared object for theme configuration.
Views read their colours from it; update_from_dict() swaps a whole palette at
runtime and recalculates the derived colours.
"""
from PyQt6.QtGui import QColor


class ThemeConfig:
    """A class to hold all dynamic theme configuration values."""
    def __init__(self):
        self.COLOR_BACKGROUND_CANVAS = "#1B1E23"
        self.COLOR_GRID_MINOR = "#262A31"
        self.COLOR_TEXT_PRIMARY = "#E8E4D9"          # bone
        self.COLOR_TEXT_HOVER = "#BDB8AA"            # bone-dark
        self.COLOR_ACCENT_PRIMARY = "#3A7CA5"        # blue
        self.COLOR_ACCENT_SECONDARY = "#FF8F00"
        self.COLOR_ITEM_STATE_DEFAULT_BG = "#36454F"  # charcoal
        self.COLOR_ITEM_STATE_HOVER_RING = "#3A7CA5"
        self.COLOR_ITEM_STATE_HOVER_RING_ACTIVE = "#BDB8AA"
        self.COLOR_ITEM_MOUNT_POINT = "#E8E4D9"
        self.COLOR_ITEM_TRANSITION_DEFAULT = "#3A7CA5"
        self.COLOR_ITEM_TRANSITION_MARKER = "#E8E4D9"
        # Derived colours, see update_from_dict()
        self.COLOR_ITEM_STATE_TARGET_RING = ""
        self.COLOR_ITEM_TRANSITION_IN_MOTION = ""
        self._derive_colors()

    def update_from_dict(self, theme_data: dict):
        """Populates attributes from a theme dictionary and recalculates derived colours."""
        for key, value in theme_data.items():
            if hasattr(self, key):
                setattr(self, key, value)
        self._derive_colors()

    def _derive_colors(self):
        accent = QColor(self.COLOR_ACCENT_SECONDARY)
        self.COLOR_ITEM_STATE_TARGET_RING = accent.name()
        transition_color = QColor(self.COLOR_ITEM_TRANSITION_DEFAULT)
        self.COLOR_ITEM_TRANSITION_IN_MOTION = transition_color.lighter(140).name()


theme_config = ThemeConfig()
