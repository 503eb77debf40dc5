# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/client_config_validator

"""
ConflictAggregator component for merging findings into a ValidationReport.
"""

from collections.abc import Iterable

from pydantic import BaseModel, ConfigDict

from client_config_validator.messages import RemediationMessage
from client_config_validator.models import (
    ConflictType,
    RemediationSuggestion,
    ScopeConflict,
    Severity,
    UriFinding,
    ValidationReport,
)


class _GroupTemplate(BaseModel):
    model_config = ConfigDict(frozen=True)

    severity: Severity
    category: RemediationMessage
    action: RemediationMessage
    message: RemediationMessage
    problem: str
    lifetime_label: str


_TEMPLATES: dict[ConflictType, _GroupTemplate] = {
    ConflictType.AUTHORIZATION_LIFETIME_CONFLICT: _GroupTemplate(
        severity=Severity.HIGH,
        category=RemediationMessage.SESSION_TRUNCATION_CATEGORY,
        action=RemediationMessage.LOWER_AUTHORIZATION_LIFETIME,
        message=RemediationMessage.AUTHORIZATION_LIFETIME_CONFLICTS,
        problem="log the user out earlier than the client's authorization lifetime",
        lifetime_label="authorization lifetime",
    ),
    ConflictType.ACCESS_TOKEN_LIFETIME_CONFLICT: _GroupTemplate(
        severity=Severity.MEDIUM,
        category=RemediationMessage.TOKEN_EXPIRY_CATEGORY,
        action=RemediationMessage.LOWER_ACCESS_TOKEN_LIFETIME,
        message=RemediationMessage.ACCESS_TOKEN_LIFETIME_CONFLICTS,
        problem="expire access tokens earlier than the client's access token lifetime",
        lifetime_label="access token lifetime",
    ),
}


def render_remediation(template: _GroupTemplate, count: int, scope_names: tuple[str, ...], min_lifetime: int) -> str:
    noun = "scope" if count == 1 else "scopes"
    names = ", ".join(f"'{name}'" for name in scope_names)
    return (
        f"{count} {noun} ({names}) will {template.problem}. "
        f"Lower the client's {template.lifetime_label} to at most {min_lifetime} seconds, "
        f"or remove the offending {noun} from the client."
    )


class ConflictAggregator:
    """
    Merges URI findings and scope conflicts into a single ValidationReport with one
    remediation suggestion per conflict group.
    """

    def aggregate(self, uri_outcomes: Iterable[UriFinding], scope_conflicts: Iterable[ScopeConflict]) -> ValidationReport:
        """
        Builds the report.

        Args:
            uri_outcomes: Every URI finding, successful or not. Only failures are kept.
            scope_conflicts: Conflicts from the ScopeLifetimeAnalyzer.

        Returns:
            ValidationReport: The immutable report.
        """
        uri_errors = tuple(finding for finding in uri_outcomes if not finding.success)
        conflicts = tuple(scope_conflicts)

        groups: dict[ConflictType, list[ScopeConflict]] = {}
        for conflict in conflicts:
            groups.setdefault(conflict.type, []).append(conflict)

        # Highest severity first; ties keep first-seen order
        ordered = sorted(groups.items(), key=lambda item: -_TEMPLATES[item[0]].severity.rank)

        remediations = []
        for conflict_type, members in ordered:
            template = _TEMPLATES[conflict_type]
            scope_names = tuple(dict.fromkeys(c.scope_name for c in members))
            min_lifetime = min(c.scope_lifetime for c in members)
            remediations.append(
                RemediationSuggestion(
                    conflict_type=conflict_type,
                    severity=template.severity,
                    category=template.category,
                    action=template.action,
                    message=template.message,
                    count=len(members),
                    scope_names=scope_names,
                    min_scope_lifetime=min_lifetime,
                    text=render_remediation(template, len(members), scope_names, min_lifetime),
                )
            )

        return ValidationReport(
            uri_errors=uri_errors,
            scope_conflicts=conflicts,
            conflict_totals=tuple((conflict_type, len(members)) for conflict_type, members in ordered),
            remediations=tuple(remediations),
            has_issues=bool(uri_errors or conflicts),
        )
