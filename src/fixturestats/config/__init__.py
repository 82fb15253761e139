"""Configuration helpers for statistic thresholds and validation bounds."""

from .stats import DEFAULT_WINDOW_SIZES, StatFieldConfig, get_field_config, iter_field_configs
from .validation import ValidationSettings

__all__ = [
    "DEFAULT_WINDOW_SIZES",
    "StatFieldConfig",
    "ValidationSettings",
    "get_field_config",
    "iter_field_configs",
]
