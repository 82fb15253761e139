"""Validation issue and report models."""

from __future__ import annotations

from collections import defaultdict
from enum import Enum
from typing import Any, Dict, List

from pydantic import BaseModel, Field, model_validator
from pydantic.config import ConfigDict


class Severity(str, Enum):
    CRITICAL = "Critical"
    WARNING = "Warning"


class IssueKind(str, Enum):
    MISSING_DATA = "MissingData"
    PLACEHOLDER_DATA = "PlaceholderData"
    CALCULATION_ERROR = "CalculationError"
    AGGREGATION_ERROR = "AggregationError"
    PROBABILITY_ERROR = "ProbabilityError"
    LOGICAL_ERROR = "LogicalError"
    UNREALISTIC_DATA = "UnrealisticData"
    HISTORICAL_DATA_ERROR = "HistoricalDataError"
    MISSING_HISTORICAL_DATA = "MissingHistoricalData"
    CROSS_SECTION_INCONSISTENCY = "CrossSectionInconsistency"

    @property
    def severity(self) -> Severity:
        if self in _CRITICAL_KINDS:
            return Severity.CRITICAL
        return Severity.WARNING


_CRITICAL_KINDS = frozenset(
    {
        IssueKind.PLACEHOLDER_DATA,
        IssueKind.CALCULATION_ERROR,
        IssueKind.HISTORICAL_DATA_ERROR,
        IssueKind.MISSING_HISTORICAL_DATA,
    }
)

_RECOMMENDATIONS: Dict[IssueKind, tuple[str, ...]] = {
    IssueKind.PLACEHOLDER_DATA: (
        "Replace placeholder player and team entries with real names and identifiers",
        "Map player identities from an authoritative source before publishing",
    ),
    IssueKind.CALCULATION_ERROR: (
        "Recompute reported averages from their totals and match counts",
        "Run calculation checks before statistics are displayed",
    ),
    IssueKind.MISSING_DATA: (
        "Add fallback sources for sections that failed to load",
        "Check panel completeness before display",
    ),
    IssueKind.AGGREGATION_ERROR: (
        "Rebuild period breakdowns from the same match set as the reported totals",
    ),
    IssueKind.PROBABILITY_ERROR: (
        "Clamp and renormalize probability distributions to the 0-100 range",
    ),
    IssueKind.LOGICAL_ERROR: (
        "Review threshold rates and mutually exclusive outcomes for contradictions",
    ),
    IssueKind.UNREALISTIC_DATA: (
        "Verify outlier player rates against the data source",
    ),
    IssueKind.HISTORICAL_DATA_ERROR: (
        "Correct head-to-head scores against known historical results",
    ),
    IssueKind.MISSING_HISTORICAL_DATA: (
        "Backfill head-to-head history with the missing known fixtures",
    ),
    IssueKind.CROSS_SECTION_INCONSISTENCY: (
        "Compute team totals and player totals from the same match window",
    ),
}

_CORRECTIONS: Dict[IssueKind, tuple[str, str]] = {
    IssueKind.PLACEHOLDER_DATA: ("Replace with real player data from an official database", "HIGH"),
    IssueKind.CALCULATION_ERROR: ("Recalculate using the reported total and count", "HIGH"),
    IssueKind.UNREALISTIC_DATA: ("Verify data source and apply realistic constraints", "MEDIUM"),
}
_DEFAULT_CORRECTION = ("Review and validate against authoritative sources", "LOW")


class ValidationIssue(BaseModel):
    """Single discrepancy found during a validation pass."""

    kind: IssueKind
    section: str
    message: str
    severity: Severity

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="before")
    @classmethod
    def _default_severity(cls, data: Any) -> Any:
        if isinstance(data, dict) and data.get("severity") is None and "kind" in data:
            data = dict(data)
            data["severity"] = IssueKind(data["kind"]).severity
        return data


class Correction(BaseModel):
    issue: str
    action: str
    priority: str

    model_config = ConfigDict(frozen=True)


class ValidationReport(BaseModel):
    """Outcome of one validation run."""

    issues: List[ValidationIssue] = Field(default_factory=list)
    accuracy_score: float = Field(..., ge=0.0, le=100.0)
    section_scores: Dict[str, float] = Field(default_factory=dict)

    model_config = ConfigDict(frozen=True)

    @property
    def critical_issues(self) -> List[ValidationIssue]:
        return [issue for issue in self.issues if issue.severity is Severity.CRITICAL]

    @property
    def warning_issues(self) -> List[ValidationIssue]:
        return [issue for issue in self.issues if issue.severity is Severity.WARNING]

    def issues_for(self, section: str) -> List[ValidationIssue]:
        return [issue for issue in self.issues if issue.section == section]

    def issues_by_kind(self) -> Dict[IssueKind, List[ValidationIssue]]:
        grouped: Dict[IssueKind, List[ValidationIssue]] = defaultdict(list)
        for issue in self.issues:
            grouped[issue.kind].append(issue)
        return dict(grouped)

    def recommendations(self) -> List[str]:
        """Remediation hints for the issue kinds present, in first-seen order."""

        hints: List[str] = []
        for kind in self.issues_by_kind():
            for hint in _RECOMMENDATIONS.get(kind, ()):
                if hint not in hints:
                    hints.append(hint)
        return hints

    def corrections(self) -> List[Correction]:
        corrections: List[Correction] = []
        for issue in self.issues:
            action, priority = _CORRECTIONS.get(issue.kind, _DEFAULT_CORRECTION)
            corrections.append(Correction(issue=issue.message, action=action, priority=priority))
        return corrections

    def section_status(self) -> Dict[str, str]:
        status: Dict[str, str] = {}
        for section, score in self.section_scores.items():
            if score >= 90:
                status[section] = "ok"
            elif score >= 70:
                status[section] = "review"
            else:
                status[section] = "poor"
        return status
