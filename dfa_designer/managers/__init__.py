# dfa_designer/managers/__init__.py
from .settings_manager import SettingCategory, SettingDefinition, SettingsManager

__all__ = [
    "SettingCategory",
    "SettingDefinition",
    "SettingsManager",
]
