import pytest
from pydantic import ValidationError

from fixturestats.models import IssueKind, Severity, ValidationIssue, ValidationReport


def _issue(kind, section="Cards", message="problem"):
    return ValidationIssue(kind=kind, section=section, message=message)


def _report(*issues, **scores):
    return ValidationReport(
        issues=list(issues),
        accuracy_score=max(0, 100 - 3 * len(issues)),
        section_scores=scores or {"Cards": 100.0},
    )


@pytest.mark.parametrize(
    "kind, severity",
    [
        (IssueKind.MISSING_DATA, Severity.WARNING),
        (IssueKind.PLACEHOLDER_DATA, Severity.CRITICAL),
        (IssueKind.CALCULATION_ERROR, Severity.CRITICAL),
        (IssueKind.AGGREGATION_ERROR, Severity.WARNING),
        (IssueKind.PROBABILITY_ERROR, Severity.WARNING),
        (IssueKind.LOGICAL_ERROR, Severity.WARNING),
        (IssueKind.UNREALISTIC_DATA, Severity.WARNING),
        (IssueKind.HISTORICAL_DATA_ERROR, Severity.CRITICAL),
        (IssueKind.MISSING_HISTORICAL_DATA, Severity.CRITICAL),
        (IssueKind.CROSS_SECTION_INCONSISTENCY, Severity.WARNING),
    ],
)
def test_issue_severity_follows_kind(kind, severity):
    assert _issue(kind).severity is severity


def test_issue_accepts_kind_value_strings():
    issue = ValidationIssue(kind="LogicalError", section="BTTS", message="sum too high")

    assert issue.kind is IssueKind.LOGICAL_ERROR
    assert issue.severity is Severity.WARNING


def test_report_groups_by_severity_and_kind():
    report = _report(
        _issue(IssueKind.PLACEHOLDER_DATA),
        _issue(IssueKind.LOGICAL_ERROR, section="BTTS"),
        _issue(IssueKind.PLACEHOLDER_DATA, section="Players"),
    )

    assert len(report.critical_issues) == 2
    assert len(report.warning_issues) == 1
    assert [issue.section for issue in report.issues_by_kind()[IssueKind.PLACEHOLDER_DATA]] == ["Cards", "Players"]
    assert len(report.issues_for("BTTS")) == 1


def test_recommendations_are_deduplicated():
    report = _report(_issue(IssueKind.CALCULATION_ERROR), _issue(IssueKind.CALCULATION_ERROR))

    hints = report.recommendations()
    assert len(hints) == len(set(hints)) == 2
    assert hints[0].startswith("Recompute")
    assert _report().recommendations() == []


def test_corrections_priorities():
    report = _report(
        _issue(IssueKind.PLACEHOLDER_DATA, message="placeholder"),
        _issue(IssueKind.UNREALISTIC_DATA, message="too many cards"),
        _issue(IssueKind.MISSING_DATA, message="no h2h"),
    )

    corrections = report.corrections()
    assert [correction.priority for correction in corrections] == ["HIGH", "MEDIUM", "LOW"]
    assert corrections[1].issue == "too many cards"


def test_section_status_bands():
    report = _report(Match=100.0, Cards=80.0, Players=40.0)

    assert report.section_status() == {"Match": "ok", "Cards": "review", "Players": "poor"}


def test_report_rejects_out_of_range_accuracy():
    with pytest.raises(ValidationError):
        ValidationReport(issues=[], accuracy_score=120.0)


def test_report_dump_round_trips_enum_values():
    report = _report(_issue(IssueKind.AGGREGATION_ERROR))

    dumped = report.model_dump(mode="json")
    assert dumped["issues"][0]["kind"] == "AggregationError"
    assert dumped["issues"][0]["severity"] == "Warning"
