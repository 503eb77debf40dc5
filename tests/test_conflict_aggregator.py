# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/client_config_validator

import pytest
from pydantic import ValidationError

from client_config_validator.conflict_aggregator import ConflictAggregator
from client_config_validator.messages import RemediationMessage, ScopeMessage, UriMessage
from client_config_validator.models import (
    ConflictType,
    ScopeConflict,
    Severity,
    UriField,
    UriFinding,
    ValidationOutcome,
    ValidationReport,
)


def _auth_conflict(scope_name: str, scope_lifetime: int, client_lifetime: int = 14400) -> ScopeConflict:
    return ScopeConflict(
        type=ConflictType.AUTHORIZATION_LIFETIME_CONFLICT,
        scope_name=scope_name,
        scope_lifetime=scope_lifetime,
        client_lifetime=client_lifetime,
        severity=Severity.HIGH,
        description=ScopeMessage.AUTHORIZATION_LIFETIME_DESCRIPTION,
        solution=ScopeMessage.AUTHORIZATION_LIFETIME_SOLUTION,
    )


def _token_conflict(scope_name: str, scope_lifetime: int, client_lifetime: int = 7200) -> ScopeConflict:
    return ScopeConflict(
        type=ConflictType.ACCESS_TOKEN_LIFETIME_CONFLICT,
        scope_name=scope_name,
        scope_lifetime=scope_lifetime,
        client_lifetime=client_lifetime,
        severity=Severity.MEDIUM,
        description=ScopeMessage.ACCESS_TOKEN_LIFETIME_DESCRIPTION,
        solution=ScopeMessage.ACCESS_TOKEN_LIFETIME_SOLUTION,
    )


def _finding(outcome: ValidationOutcome, index: int = 0) -> UriFinding:
    return UriFinding(field=UriField.REDIRECT_URI, index=index, raw="ftp://x", outcome=outcome)


@pytest.fixture
def aggregator() -> ConflictAggregator:
    return ConflictAggregator()


def test_no_findings_has_no_issues(aggregator: ConflictAggregator) -> None:
    report = aggregator.aggregate([], [])

    assert report.has_issues is False
    assert report.uri_errors == ()
    assert report.scope_conflicts == ()
    assert report.remediations == ()
    assert report.conflict_counts == {}
    assert report.blocks_submission is False


def test_successful_uri_outcomes_are_dropped(aggregator: ConflictAggregator) -> None:
    report = aggregator.aggregate([_finding(ValidationOutcome.ok())], [])

    assert report.has_issues is False
    assert report.uri_errors == ()


def test_uri_errors_block_submission(aggregator: ConflictAggregator) -> None:
    failed = _finding(ValidationOutcome.fail(UriMessage.INVALID_SCHEME_FOR_WEB_OR_BROWSER), index=2)
    report = aggregator.aggregate([_finding(ValidationOutcome.ok()), failed], [])

    assert report.has_issues is True
    assert report.uri_errors == (failed,)
    assert report.blocks_submission is True
    assert report.remediations == ()


def test_scope_conflicts_are_advisory(aggregator: ConflictAggregator) -> None:
    report = aggregator.aggregate([], [_token_conflict("scope-a", 1800)])

    assert report.has_issues is True
    assert report.blocks_submission is False
    assert report.highlighted_scopes == ("scope-a",)


def test_one_remediation_per_group_highest_severity_first(aggregator: ConflictAggregator) -> None:
    conflicts = [
        _token_conflict("scope-a", 1800),
        _auth_conflict("scope-a", 3600),
        _token_conflict("scope-b", 3600),
        _auth_conflict("scope-b", 7200),
    ]

    report = aggregator.aggregate([], conflicts)

    assert report.scope_conflicts == tuple(conflicts)
    assert report.conflict_counts == {
        ConflictType.AUTHORIZATION_LIFETIME_CONFLICT: 2,
        ConflictType.ACCESS_TOKEN_LIFETIME_CONFLICT: 2,
    }
    assert [r.conflict_type for r in report.remediations] == [
        ConflictType.AUTHORIZATION_LIFETIME_CONFLICT,
        ConflictType.ACCESS_TOKEN_LIFETIME_CONFLICT,
    ]

    session, token = report.remediations
    assert session.severity == Severity.HIGH
    assert session.category == RemediationMessage.SESSION_TRUNCATION_CATEGORY
    assert session.action == RemediationMessage.LOWER_AUTHORIZATION_LIFETIME
    assert session.count == 2
    assert session.scope_names == ("scope-a", "scope-b")
    assert session.min_scope_lifetime == 3600
    assert token.category == RemediationMessage.TOKEN_EXPIRY_CATEGORY
    assert token.min_scope_lifetime == 1800


def test_remediation_text_template(aggregator: ConflictAggregator) -> None:
    report = aggregator.aggregate([], [_auth_conflict("scope-a", 3600), _auth_conflict("scope-b", 7200)])

    text = report.remediations[0].text
    assert text.startswith("2 scopes ('scope-a', 'scope-b') will log the user out earlier")
    assert "at most 3600 seconds" in text
    assert "remove the offending scopes" in text


def test_remediation_text_singular(aggregator: ConflictAggregator) -> None:
    report = aggregator.aggregate([], [_token_conflict("scope-a", 1800)])

    text = report.remediations[0].text
    assert text.startswith("1 scope ('scope-a') will expire access tokens earlier")
    assert "access token lifetime to at most 1800 seconds" in text


def test_report_rejects_inconsistent_has_issues() -> None:
    with pytest.raises(ValidationError, match="has_issues"):
        ValidationReport(has_issues=True)

    with pytest.raises(ValidationError, match="has_issues"):
        ValidationReport(scope_conflicts=(_auth_conflict("x", 1),), has_issues=False)


def test_report_rejects_successful_uri_errors() -> None:
    with pytest.raises(ValidationError, match="failed outcomes"):
        ValidationReport(uri_errors=(_finding(ValidationOutcome.ok()),), has_issues=True)


def test_report_is_immutable(aggregator: ConflictAggregator) -> None:
    report = aggregator.aggregate([], [_token_conflict("scope-a", 1800)])

    with pytest.raises(ValidationError):
        report.has_issues = True  # type: ignore[misc]

    with pytest.raises(TypeError):
        report.conflict_counts[ConflictType.ACCESS_TOKEN_LIFETIME_CONFLICT] = 99  # type: ignore[index]

    assert report.conflict_counts == {ConflictType.ACCESS_TOKEN_LIFETIME_CONFLICT: 1}
    assert report.conflict_totals == ((ConflictType.ACCESS_TOKEN_LIFETIME_CONFLICT, 1),)
