# dfa_designer/managers/settings_manager.py
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Union

from PyQt6.QtCore import QObject, QSettings, QTimer, Qt, pyqtSignal

from ..utils import config
from ..utils.theme_config import theme_config

logger = logging.getLogger(__name__)


class SettingCategory(Enum):
    """Enumeration of setting categories for better organization."""
    VIEW = "view"
    CANVAS = "canvas"
    DEFAULTS = "defaults"


@dataclass
class SettingDefinition:
    """Definition of a setting with metadata."""
    key: str
    default_value: Any
    category: SettingCategory
    description: str = ""
    validator: Optional[Callable[[Any], bool]] = None
    min_value: Optional[Union[int, float]] = None
    max_value: Optional[Union[int, float]] = None
    allowed_values: Optional[List[Any]] = None

    def validate(self, value: Any) -> bool:
        """Validate a value against this setting's constraints."""
        if self.validator:
            return self.validator(value)

        expected_type = type(self.default_value)
        if expected_type is float and isinstance(value, int) and not isinstance(value, bool):
            value = float(value)
        if not isinstance(value, expected_type):
            return False

        if isinstance(value, (int, float)):
            if self.min_value is not None and value < self.min_value:
                return False
            if self.max_value is not None and value > self.max_value:
                return False

        if self.allowed_values and value not in self.allowed_values:
            return False

        return True


class SettingsManager(QObject):
    """Settings for the diagram editor, with validation, categories and a read cache."""

    settingChanged = pyqtSignal(str, object)
    settingsReset = pyqtSignal()
    settingsLoaded = pyqtSignal()

    SETTING_DEFINITIONS = {
        # View settings
        "view_show_grid": SettingDefinition(
            "view_show_grid", True, SettingCategory.VIEW,
            "Show grid lines on canvas"
        ),
        "grid_size": SettingDefinition(
            "grid_size", config.DEFAULT_GRID_SIZE, SettingCategory.VIEW,
            "Grid size in pixels", min_value=5, max_value=100
        ),

        # Canvas settings
        "canvas_width": SettingDefinition(
            "canvas_width", config.DEFAULT_CANVAS_WIDTH, SettingCategory.CANVAS,
            "Canvas width in pixels", min_value=100, max_value=10000
        ),
        "canvas_height": SettingDefinition(
            "canvas_height", config.DEFAULT_CANVAS_HEIGHT, SettingCategory.CANVAS,
            "Canvas height in pixels", min_value=100, max_value=10000
        ),
        "canvas_background_color": SettingDefinition(
            "canvas_background_color", theme_config.COLOR_BACKGROUND_CANVAS, SettingCategory.CANVAS,
            "Canvas background colour"
        ),

        # Default item visuals
        "state_default_color": SettingDefinition(
            "state_default_color", theme_config.COLOR_ITEM_STATE_DEFAULT_BG, SettingCategory.DEFAULTS,
            "Fill colour of the state circle"
        ),
        "state_default_font_size": SettingDefinition(
            "state_default_font_size", config.DEFAULT_STATE_LABEL_FONT_SIZE, SettingCategory.DEFAULTS,
            "Font size of state labels", min_value=6, max_value=72
        ),
        "state_mount_point_radius": SettingDefinition(
            "state_mount_point_radius", config.DEFAULT_MOUNT_POINT_RADIUS, SettingCategory.DEFAULTS,
            "Radius of the mount point handles", min_value=1.0, max_value=20.0
        ),
        "transition_default_line_width": SettingDefinition(
            "transition_default_line_width", config.DEFAULT_TRANSITION_LINE_WIDTH, SettingCategory.DEFAULTS,
            "Stroke width of transitions", min_value=0.5, max_value=20.0
        ),
        "transition_default_line_style_str": SettingDefinition(
            "transition_default_line_style_str", "Solid", SettingCategory.DEFAULTS,
            "Line style of transitions",
            allowed_values=["Solid", "Dash", "Dot", "DashDot", "DashDotDot"]
        ),
        "transition_default_color": SettingDefinition(
            "transition_default_color", theme_config.COLOR_ITEM_TRANSITION_DEFAULT, SettingCategory.DEFAULTS,
            "Colour of transitions"
        ),
        "transition_marker_radius": SettingDefinition(
            "transition_marker_radius", config.DEFAULT_TRANSITION_MARKER_RADIUS, SettingCategory.DEFAULTS,
            "Radius of the endpoint and curvature markers", min_value=1.0, max_value=20.0
        ),
        "transition_self_loop_extent": SettingDefinition(
            "transition_self_loop_extent", config.DEFAULT_SELF_LOOP_MIN_EXTENT, SettingCategory.DEFAULTS,
            "Minimum size of a self-loop drawn on a single mount point", min_value=10.0, max_value=400.0
        ),
    }

    DEFAULTS = {key: definition.default_value
                for key, definition in SETTING_DEFINITIONS.items()}

    QT_PEN_STYLES_MAP = {
        "Solid": Qt.PenStyle.SolidLine, "Dash": Qt.PenStyle.DashLine, "Dot": Qt.PenStyle.DotLine,
        "DashDot": Qt.PenStyle.DashDotLine, "DashDotDot": Qt.PenStyle.DashDotDotLine,
    }
    STRING_TO_QT_PEN_STYLE = dict(QT_PEN_STYLES_MAP)
    QT_PEN_STYLE_TO_STRING = {enum_val: name for name, enum_val in QT_PEN_STYLES_MAP.items()}

    def __init__(self, app_name=config.APP_NAME, parent=None):
        super().__init__(parent)
        self.app_name = app_name
        self.settings = QSettings(QSettings.Format.IniFormat, QSettings.Scope.UserScope,
                                  config.ORGANIZATION_NAME, app_name)

        self._cache: Dict[str, Any] = {}
        self._batch_mode = False
        self._batch_changes: Dict[str, Any] = {}

        # Coalesce disk writes
        self._sync_timer = QTimer()
        self._sync_timer.setSingleShot(True)
        self._sync_timer.timeout.connect(self._perform_sync)
        self._sync_timer.setInterval(1000)

        logger.info(f"Settings will be loaded/saved at: {self.settings.fileName()}")
        self._init_defaults()
        self.settingsLoaded.emit()

    def _init_defaults(self):
        """Initialize settings with defaults if they don't exist."""
        for key, definition in self.SETTING_DEFINITIONS.items():
            if not self.settings.contains(key):
                logger.debug(f"Setting '{key}' not found, initializing with default: {definition.default_value}")
                self.settings.setValue(key, definition.default_value)
        self.settings.sync()

    def get(self, key: str, default_override=None) -> Any:
        """Get a setting value with caching and proper type conversion."""
        if key in self._cache:
            return self._cache[key]

        definition = self.SETTING_DEFINITIONS.get(key)
        if not definition:
            logger.warning(f"Unknown setting key: '{key}'")
            return default_override

        value = self.settings.value(key)
        default_value = default_override if default_override is not None else definition.default_value

        if value is None:
            self._cache[key] = default_value
            return default_value

        try:
            converted_value = self._convert_value(value, definition.default_value)
            if not definition.validate(converted_value):
                logger.warning(f"Setting '{key}' value '{converted_value}' failed validation. Using default.")
                converted_value = default_value
        except (ValueError, TypeError) as e:
            logger.warning(f"Could not convert setting '{key}' with value '{value}'. Error: {e}. Using default.")
            converted_value = default_value

        self._cache[key] = converted_value
        return converted_value

    def _convert_value(self, value: Any, default_value: Any) -> Any:
        """Convert a value read from QSettings to match the type of the default value."""
        if isinstance(default_value, bool):
            if isinstance(value, str):
                return value.lower() in ('true', '1', 't', 'y', 'yes')
            return bool(value)
        elif isinstance(default_value, int):
            return int(value)
        elif isinstance(default_value, float):
            return float(value)
        return value

    def set(self, key: str, value: Any, save_immediately: bool = True) -> bool:
        """Set a setting value with validation and batching support."""
        definition = self.SETTING_DEFINITIONS.get(key)
        if not definition:
            logger.warning(f"Unknown setting key: '{key}'. Not setting.")
            return False
        if not definition.validate(value):
            logger.error(f"Setting '{key}' value '{value}' failed validation. Not setting.")
            return False

        if self.get(key) == value:
            logger.debug(f"Setting '{key}' set to same value: {value}. No change.")
            return True

        self._cache[key] = value

        if self._batch_mode:
            self._batch_changes[key] = value
        else:
            self.settings.setValue(key, value)
            if save_immediately:
                self._schedule_sync()
            self.settingChanged.emit(key, value)
            logger.info(f"Setting '{key}' changed to: {value}")

        return True

    def get_by_category(self, category: SettingCategory) -> Dict[str, Any]:
        """Get all settings in a specific category."""
        return {key: self.get(key) for key, definition in self.SETTING_DEFINITIONS.items()
                if definition.category == category}

    def begin_batch_update(self):
        """Begin a batch update to avoid multiple sync operations."""
        self._batch_mode = True
        self._batch_changes.clear()

    def end_batch_update(self, save_immediately: bool = True):
        """End batch update and apply all changes."""
        if not self._batch_mode:
            return

        self._batch_mode = False
        for key, value in self._batch_changes.items():
            self.settings.setValue(key, value)
            self.settingChanged.emit(key, value)
            logger.info(f"Batch setting '{key}' changed to: {value}")

        if save_immediately:
            self._schedule_sync()
        self._batch_changes.clear()

    def _schedule_sync(self):
        self._sync_timer.start()

    def _perform_sync(self):
        self.settings.sync()
        logger.debug("Settings synced to disk.")

    def reset_to_defaults(self):
        """Reset all settings to their defaults."""
        logger.info("Resetting all settings to defaults.")

        self.begin_batch_update()
        try:
            self._cache.clear()
            for key, definition in self.SETTING_DEFINITIONS.items():
                self.settings.setValue(key, definition.default_value)
                self._batch_changes[key] = definition.default_value
        finally:
            self.end_batch_update(save_immediately=True)

        self.settingsReset.emit()

    def pen_style(self, key: str = "transition_default_line_style_str") -> Qt.PenStyle:
        return self.STRING_TO_QT_PEN_STYLE.get(self.get(key), Qt.PenStyle.SolidLine)

    def get_setting_info(self, key: str) -> Optional[SettingDefinition]:
        return self.SETTING_DEFINITIONS.get(key)

    def is_default_value(self, key: str) -> bool:
        definition = self.SETTING_DEFINITIONS.get(key)
        if not definition:
            return False
        return self.get(key) == definition.default_value
