# tests/test_theme_config.py
from PyQt6.QtGui import QColor

from dfa_designer.utils.theme_config import ThemeConfig


def test_theme_update_recomputes_derived_colours():
    theme = ThemeConfig()
    theme.update_from_dict({
        "COLOR_ACCENT_SECONDARY": "#00ff00",
        "COLOR_ITEM_TRANSITION_DEFAULT": "#202020",
        "NOT_A_COLOUR": "#ffffff",
    })
    assert theme.COLOR_ITEM_STATE_TARGET_RING == "#00ff00"
    assert theme.COLOR_ITEM_TRANSITION_IN_MOTION == QColor("#202020").lighter(140).name()
    assert not hasattr(theme, "NOT_A_COLOUR")


def test_derived_colours_are_set_on_creation():
    theme = ThemeConfig()
    assert theme.COLOR_ITEM_STATE_TARGET_RING == QColor(theme.COLOR_ACCENT_SECONDARY).name()
    assert theme.COLOR_ITEM_TRANSITION_IN_MOTION == QColor(theme.COLOR_ITEM_TRANSITION_DEFAULT).lighter(140).name()
