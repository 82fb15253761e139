"""Threshold aggregation and fixture-level statistics."""

from .blocks import block_name, build_statistics_blocks
from .fixture import FixtureAnalysis, analyze_fixture, panels_from_analysis, validate_fixture
from .thresholds import (
    NUMERIC_FIELDS,
    InvalidThresholdsError,
    aggregate,
    expected_statistics,
    over_rates,
    over_under_mapping,
)

__all__ = [
    "NUMERIC_FIELDS",
    "FixtureAnalysis",
    "InvalidThresholdsError",
    "aggregate",
    "analyze_fixture",
    "block_name",
    "build_statistics_blocks",
    "expected_statistics",
    "over_rates",
    "over_under_mapping",
    "panels_from_analysis",
    "validate_fixture",
]
