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
ClientConfigValidator component orchestrating URI, logout and scope lifetime checks.
"""

from collections.abc import Iterable, Mapping
from typing import Any

from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode
from pydantic import ValidationError

from client_config_validator.config import ValidatorSettings
from client_config_validator.conflict_aggregator import ConflictAggregator
from client_config_validator.exceptions import ClientConfigValidatorError, PreconditionError
from client_config_validator.logout_uri_matcher import LogoutUriMatcher
from client_config_validator.models import ClientDraft, ScopeMetadata, UriField, UriFinding, ValidationReport
from client_config_validator.scope_lifetime_analyzer import ScopeLifetimeAnalyzer
from client_config_validator.uri_policy import UriPolicy
from client_config_validator.utils.logger import logger

tracer = trace.get_tracer(__name__)


class ClientConfigValidator:
    """
    Runs every check against a client draft and returns a single ValidationReport.

    Stateless: instances may be shared between threads and reused across calls.

    Attributes:
        settings (ValidatorSettings): Feature switches.
        uri_policy (UriPolicy): Redirect/logout URI rules.
        logout_matcher (LogoutUriMatcher): Origin check for logout URIs.
        analyzer (ScopeLifetimeAnalyzer): Scope lifetime conflict detection.
        aggregator (ConflictAggregator): Report assembly.
    """

    def __init__(
        self,
        settings: ValidatorSettings | None = None,
        uri_policy: UriPolicy | None = None,
        logout_matcher: LogoutUriMatcher | None = None,
        analyzer: ScopeLifetimeAnalyzer | None = None,
        aggregator: ConflictAggregator | None = None,
    ) -> None:
        self.settings = settings or ValidatorSettings()
        self.uri_policy = uri_policy or UriPolicy()
        self.logout_matcher = logout_matcher or LogoutUriMatcher()
        self.analyzer = analyzer or ScopeLifetimeAnalyzer()
        self.aggregator = aggregator or ConflictAggregator()

    def validate(
        self,
        draft: ClientDraft | Mapping[str, Any],
        scopes: Iterable[ScopeMetadata | Mapping[str, Any]] = (),
    ) -> ValidationReport:
        """
        Validates a client draft against the resolved scope metadata.

        Every URI is evaluated, so one bad entry never masks another. Validation findings are
        returned in the report and never raised.

        Emits an OpenTelemetry span `validate_client_config`.

        Args:
            draft: The client draft, or a client payload accepted by `ClientDraft.from_payload`.
            scopes: Scope metadata, as models or API records. Scopes without metadata produce no conflict.

        Returns:
            ValidationReport: The complete report.

        Raises:
            PreconditionError: If the draft or scope list is missing or malformed.
            ClientConfigValidatorError: For unexpected internal errors.
        """
        client = self._coerce_draft(draft)
        scope_list = self._coerce_scopes(scopes)

        with tracer.start_as_current_span("validate_client_config") as span:
            span.set_attribute("client.application_type", client.application_type.value)
            span.set_attribute("client.integration_type", client.integration_type.value)
            try:
                findings = self._check_uris(client)
                conflicts = self.analyzer.analyze(client, scope_list)
                report = self.aggregator.aggregate(findings, conflicts)
            except ClientConfigValidatorError:
                raise
            except Exception as e:
                logger.exception("Unexpected error during client configuration validation")
                span.record_exception(e)
                span.set_status(Status(StatusCode.ERROR, str(e)))
                raise ClientConfigValidatorError(f"Client configuration validation error: {e}") from e

            span.set_attribute("validation.uri_errors", len(report.uri_errors))
            span.set_attribute("validation.scope_conflicts", len(report.scope_conflicts))
            span.set_attribute("validation.has_issues", report.has_issues)
            span.set_status(Status(StatusCode.OK))

        logger.info(
            f"Validated {client.application_type.value} client: "
            f"{len(report.uri_errors)} URI error(s), {len(report.scope_conflicts)} scope conflict(s)"
        )
        return report

    def _check_uris(self, client: ClientDraft) -> list[UriFinding]:
        findings: list[UriFinding] = []
        app_type = client.application_type
        check_logout = self.settings.check_frontchannel_logout

        for index, redirect in enumerate(client.redirect_uris):
            outcome = self.uri_policy.validate_raw(redirect.raw, app_type)
            findings.append(UriFinding(field=UriField.REDIRECT_URI, index=index, raw=redirect.raw, outcome=outcome))

        for index, post_logout in enumerate(client.post_logout_uris):
            outcome = self.uri_policy.validate_raw(post_logout.raw, app_type)
            findings.append(
                UriFinding(field=UriField.POST_LOGOUT_REDIRECT_URI, index=index, raw=post_logout.raw, outcome=outcome)
            )
            if check_logout:
                outcome = self.logout_matcher.validate_front_channel_logout(
                    post_logout.raw, app_type, client.redirect_uris
                )
                findings.append(
                    UriFinding(
                        field=UriField.POST_LOGOUT_REDIRECT_URI, index=index, raw=post_logout.raw, outcome=outcome
                    )
                )

        frontchannel = client.frontchannel_logout_uri
        if frontchannel is not None:
            outcomes = [self.uri_policy.validate_raw(frontchannel, app_type)]
            if check_logout:
                outcomes.append(
                    self.logout_matcher.validate_front_channel_logout(frontchannel, app_type, client.redirect_uris)
                )
            findings.extend(
                UriFinding(field=UriField.FRONTCHANNEL_LOGOUT_URI, index=0, raw=frontchannel, outcome=outcome)
                for outcome in outcomes
            )

        for finding in findings:
            if not finding.success:
                logger.debug(f"{finding.field.value}[{finding.index}] {finding.raw!r}: {finding.message}")

        return findings

    @staticmethod
    def _coerce_draft(draft: Any) -> ClientDraft:
        if draft is None:
            raise PreconditionError("A client draft is required")
        if isinstance(draft, ClientDraft):
            return draft
        if isinstance(draft, Mapping):
            return ClientDraft.from_payload(draft)
        raise PreconditionError(f"Expected ClientDraft or mapping, got {type(draft).__name__}")

    @staticmethod
    def _coerce_scopes(scopes: Any) -> list[ScopeMetadata]:
        if scopes is None or isinstance(scopes, (str, bytes, Mapping)) or not isinstance(scopes, Iterable):
            raise PreconditionError("Scopes must be a sequence of scope metadata")

        result: list[ScopeMetadata] = []
        for item in scopes:
            if isinstance(item, ScopeMetadata):
                result.append(item)
            elif isinstance(item, Mapping):
                try:
                    result.append(ScopeMetadata.from_api(item))
                except ValidationError as e:
                    raise PreconditionError(f"Invalid scope metadata: {e}") from e
            else:
                raise PreconditionError(f"Expected ScopeMetadata or mapping, got {type(item).__name__}")
        return result
