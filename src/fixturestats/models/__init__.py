"""Canonical models for matches, aggregates and validation reports."""

from .match import UNKNOWN_AWAY, UNKNOWN_HOME, NormalizedMatch, ReferenceFixture, VenueRole
from .report import Correction, IssueKind, Severity, ValidationIssue, ValidationReport
from .stats import ExpectedStats, StatisticsBlock, ThresholdResult

__all__ = [
    "UNKNOWN_AWAY",
    "UNKNOWN_HOME",
    "Correction",
    "ExpectedStats",
    "IssueKind",
    "NormalizedMatch",
    "ReferenceFixture",
    "Severity",
    "StatisticsBlock",
    "ThresholdResult",
    "ValidationIssue",
    "ValidationReport",
    "VenueRole",
]
