from .config import (
    MODE_PRESETS,
    ExtractionConfig,
    ExtractionMode,
    ModePreset,
    MonitoringConfig,
    Settings,
    find_config_file,
    load_settings,
)

__all__ = [
    "MODE_PRESETS",
    "ExtractionConfig",
    "ExtractionMode",
    "ModePreset",
    "MonitoringConfig",
    "Settings",
    "find_config_file",
    "load_settings",
]
