# tests/test_settings_manager.py
from PyQt6.QtCore import Qt

from dfa_designer.managers.settings_manager import SettingCategory, SettingsManager


def test_settings_manager_defaults(settings_manager):
    assert settings_manager.get("view_show_grid") is True
    assert settings_manager.get("grid_size") == 10
    assert settings_manager.get("canvas_width") == 750
    assert settings_manager.get("state_mount_point_radius") == 5.0
    assert settings_manager.get("non_existent_key") is None
    assert settings_manager.get("non_existent_key", "fallback") == "fallback"


def test_settings_manager_set_get(settings_manager):
    assert settings_manager.set("view_show_grid", False)
    assert settings_manager.get("view_show_grid") is False

    assert settings_manager.set("transition_default_line_width", 3)
    assert settings_manager.get("transition_default_line_width") == 3
    assert not settings_manager.is_default_value("transition_default_line_width")


def test_settings_manager_rejects_invalid_values(settings_manager):
    assert not settings_manager.set("grid_size", 1)
    assert not settings_manager.set("grid_size", "big")
    assert not settings_manager.set("transition_default_line_style_str", "Wavy")
    assert not settings_manager.set("no_such_setting", 1)
    assert settings_manager.get("grid_size") == 10


def test_settings_manager_signal(settings_manager, qtbot):
    with qtbot.waitSignal(settings_manager.settingChanged, timeout=1000) as blocker:
        settings_manager.set("grid_size", 20)

    assert blocker.args == ["grid_size", 20]


def test_reset_to_defaults(settings_manager, qtbot):
    settings_manager.set("view_show_grid", False)
    assert settings_manager.get("view_show_grid") is False

    changed = []
    settings_manager.settingChanged.connect(lambda key, value: changed.append(key))
    with qtbot.waitSignal(settings_manager.settingsReset, timeout=1000):
        settings_manager.reset_to_defaults()

    assert settings_manager.get("view_show_grid") is True
    assert len(changed) == len(settings_manager.DEFAULTS)


def test_pen_style(settings_manager):
    assert settings_manager.pen_style() == Qt.PenStyle.SolidLine
    settings_manager.set("transition_default_line_style_str", "Dash")
    assert settings_manager.pen_style() == Qt.PenStyle.DashLine


def test_get_by_category(settings_manager):
    view = settings_manager.get_by_category(SettingCategory.VIEW)
    assert view == {"view_show_grid": True, "grid_size": 10}


def test_settings_persist_between_instances(settings_manager):
    settings_manager.set("grid_size", 25)
    settings_manager.set("view_show_grid", False)
    settings_manager.settings.sync()

    reloaded = SettingsManager(app_name="DFA_Designer_Test")
    assert reloaded.get("grid_size") == 25
    assert reloaded.get("view_show_grid") is False


def test_setting_info(settings_manager):
    info = settings_manager.get_setting_info("grid_size")
    assert info.category == SettingCategory.VIEW
    assert (info.min_value, info.max_value) == (5, 100)
    assert settings_manager.get_setting_info("missing") is None
