"""Configuration module."""

from .changelog import (
    UNCLASSIFIED,
    DEFAULTS,
    Configuration,
    Section,
    format_line_template,
    load_config_module,
    merge,
)
from .settings import (
    PLATFORM_GITHUB,
    PLATFORM_GITLAB,
    Settings,
    get_settings,
    find_config_file,
    create_sample_config,
)

__all__ = [
    "UNCLASSIFIED",
    "DEFAULTS",
    "Configuration",
    "Section",
    "format_line_template",
    "load_config_module",
    "merge",
    "PLATFORM_GITHUB",
    "PLATFORM_GITLAB",
    "Settings",
    "get_settings",
    "find_config_file",
    "create_sample_config",
]
