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
Data models for the client-config-validator package.

Every model is frozen (immutable) and recreated on each validation call.
"""

from collections.abc import Iterable, Mapping
from enum import StrEnum
from types import MappingProxyType
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from client_config_validator.exceptions import PreconditionError
from client_config_validator.messages import RemediationMessage, ScopeMessage, UriMessage


class ApplicationType(StrEnum):
    WEB = "web"
    BROWSER = "browser"
    NATIVE = "native"


class IntegrationType(StrEnum):
    ANSATTPORTEN = "ansattporten"
    IDPORTEN = "idporten"
    KRR = "krr"
    MASKINPORTEN = "maskinporten"
    API_KLIENT = "api_klient"
    IDPORTEN_SAML2 = "idporten_saml2"


class UriField(StrEnum):
    REDIRECT_URI = "redirect_uri"
    POST_LOGOUT_REDIRECT_URI = "post_logout_redirect_uri"
    FRONTCHANNEL_LOGOUT_URI = "frontchannel_logout_uri"


class ConflictType(StrEnum):
    ACCESS_TOKEN_LIFETIME_CONFLICT = "access_token_lifetime_conflict"
    AUTHORIZATION_LIFETIME_CONFLICT = "authorization_lifetime_conflict"


class Severity(StrEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def rank(self) -> int:
        return _SEVERITY_RANK[self]


_SEVERITY_RANK = {Severity.LOW: 0, Severity.MEDIUM: 1, Severity.HIGH: 2}


class ParsedUri(BaseModel):
    """
    Components of a URI as seen by the redirect and logout rules.

    Scheme and host are lower-cased. A missing component is None, except host,
    which is an empty string when an authority is present but has no host (``https:///cb``).
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    scheme: str | None = None
    host: str | None = None
    port: int | None = None
    path: str = ""
    fragment: str | None = None

    @property
    def origin(self) -> tuple[str | None, str | None, int | None]:
        return (self.scheme, self.host, self.port)


class RedirectUri(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    raw: str


class PostLogoutUri(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    raw: str


def _wrap_raw_uris(v: Any) -> Any:
    if v is None:
        return ()
    if isinstance(v, str):
        v = [v]
    if isinstance(v, Iterable):
        return [{"raw": item} if isinstance(item, str) else item for item in v]
    return v


class ClientDraft(BaseModel):
    """
    The not-yet-persisted representation of an OAuth client being created or edited.

    Attributes:
        application_type (ApplicationType): Decides which URI rules apply.
        integration_type (IntegrationType): The identity-provider integration. Defaults to idporten.
        redirect_uris (tuple[RedirectUri, ...]): Registered redirect targets, in display order.
        post_logout_uris (tuple[PostLogoutUri, ...]): Post-logout redirect targets, in display order.
        frontchannel_logout_uri (str | None): Browser-delivered logout endpoint.
        access_token_lifetime_seconds (int): Validity of issued access tokens.
        authorization_lifetime_seconds (int | None): Session duration before re-authentication is forced.
            Maskinporten clients have no end-user session and omit it.
        refresh_token_lifetime_seconds (int | None): Validity of refresh tokens, if any.
        scope_names (frozenset[str]): Granted scopes.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        json_schema_extra={
            "example": {
                "application_type": "web",
                "redirect_uris": [{"raw": "https://app.example.no/callback"}],
                "post_logout_uris": [{"raw": "https://app.example.no/logged-out"}],
                "access_token_lifetime_seconds": 120,
                "authorization_lifetime_seconds": 7200,
                "scope_names": ["openid", "profile"],
            }
        },
    )

    application_type: ApplicationType
    integration_type: IntegrationType = IntegrationType.IDPORTEN
    redirect_uris: tuple[RedirectUri, ...] = ()
    post_logout_uris: tuple[PostLogoutUri, ...] = ()
    frontchannel_logout_uri: str | None = None
    access_token_lifetime_seconds: int = Field(..., ge=1)
    authorization_lifetime_seconds: int | None = Field(default=None, ge=1)
    refresh_token_lifetime_seconds: int | None = Field(default=None, ge=1)
    scope_names: frozenset[str] = Field(default_factory=frozenset)

    @field_validator("redirect_uris", "post_logout_uris", mode="before")
    @classmethod
    def accept_plain_strings(cls, v: Any) -> Any:
        """Allows URIs to be given as plain strings as well as ``{"raw": ...}`` mappings."""
        return _wrap_raw_uris(v)

    @field_validator("frontchannel_logout_uri", mode="before")
    @classmethod
    def blank_as_missing(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("scope_names", mode="before")
    @classmethod
    def normalize_scope_names(cls, v: Any) -> Any:
        """Accepts a comma separated string or an iterable of strings; strips names and drops blanks."""
        if v is None:
            return frozenset()
        if isinstance(v, str):
            v = v.split(",")
        if isinstance(v, Iterable):
            names = list(v)
            invalid = [s for s in names if not isinstance(s, str)]
            if invalid:
                raise ValueError(f"Scope names must be strings, got {invalid!r}")
            return frozenset(s.strip() for s in names if s.strip())
        return v

    @model_validator(mode="after")
    def check_integration_type(self) -> "ClientDraft":
        # Maskinporten clients are machine-to-machine: always web, no authorization lifetime.
        if self.integration_type == IntegrationType.MASKINPORTEN and self.application_type != ApplicationType.WEB:
            raise ValueError("Maskinporten clients must use application type 'web'")
        if self.integration_type != IntegrationType.MASKINPORTEN and self.authorization_lifetime_seconds is None:
            raise ValueError(f"{self.integration_type.value} clients require an authorization lifetime")
        return self

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "ClientDraft":
        """
        Builds a draft from a client record as submitted by the portal form or returned by the API.

        Args:
            payload: Mapping using the API field names (``access_token_lifetime``, ``scopes``, ...).

        Returns:
            ClientDraft: The validated draft.

        Raises:
            PreconditionError: If the payload is not a mapping or is missing/has invalid required fields.
        """
        if not isinstance(payload, Mapping):
            raise PreconditionError(f"Client payload must be a mapping, got {type(payload).__name__}")

        data: dict[str, Any] = {
            "application_type": payload.get("application_type"),
            "redirect_uris": payload.get("redirect_uris"),
            "post_logout_uris": payload.get("post_logout_redirect_uris"),
            "frontchannel_logout_uri": payload.get("frontchannel_logout_uri"),
            "access_token_lifetime_seconds": payload.get("access_token_lifetime"),
            "authorization_lifetime_seconds": payload.get("authorization_lifetime"),
            "refresh_token_lifetime_seconds": payload.get("refresh_token_lifetime"),
            "scope_names": payload.get("scopes", payload.get("scope")),
        }
        integration_type = payload.get("integration_type")
        if integration_type:
            data["integration_type"] = str(integration_type).lower()

        try:
            return cls(**data)
        except ValidationError as e:
            raise PreconditionError(f"Invalid client payload: {e}") from e


class ScopeMetadata(BaseModel):
    """
    Provider-declared lifetime limits of a scope. Read-only input from the scope catalog.

    A declared maximum of zero or less means "no limit" and is stored as None.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = Field(..., min_length=1)
    max_access_token_lifetime_seconds: int | None = None
    max_authorization_lifetime_seconds: int | None = None

    @field_validator("max_access_token_lifetime_seconds", "max_authorization_lifetime_seconds", mode="after")
    @classmethod
    def unset_non_positive(cls, v: int | None) -> int | None:
        if v is not None and v <= 0:
            return None
        return v

    @classmethod
    def from_api(cls, data: Mapping[str, Any]) -> "ScopeMetadata":
        """Maps a scope record from the administration API (``at_max_age``, ``authorization_max_lifetime``)."""
        return cls(
            name=data.get("name"),
            max_access_token_lifetime_seconds=data.get("at_max_age"),
            max_authorization_lifetime_seconds=data.get("authorization_max_lifetime"),
        )


class ValidationOutcome(BaseModel):
    """Result of a single-rule check. ``message`` is a translation key, set only on failure."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    success: bool
    message: UriMessage | None = None

    @model_validator(mode="after")
    def check_message_matches_success(self) -> "ValidationOutcome":
        if self.success and self.message is not None:
            raise ValueError("A successful outcome carries no message")
        if not self.success and self.message is None:
            raise ValueError("A failed outcome requires a message")
        return self

    @classmethod
    def ok(cls) -> "ValidationOutcome":
        return cls(success=True)

    @classmethod
    def fail(cls, message: UriMessage) -> "ValidationOutcome":
        return cls(success=False, message=message)


class UriFinding(BaseModel):
    """A URI outcome together with the field and position it belongs to."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    field: UriField
    index: int = Field(..., ge=0)
    raw: str
    outcome: ValidationOutcome

    @property
    def success(self) -> bool:
        return self.outcome.success

    @property
    def message(self) -> UriMessage | None:
        return self.outcome.message


class ScopeConflict(BaseModel):
    """One scope lifetime limit that undercuts the client's own setting."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    type: ConflictType
    scope_name: str
    scope_lifetime: int
    client_lifetime: int
    severity: Severity
    description: ScopeMessage
    solution: ScopeMessage


class RemediationSuggestion(BaseModel):
    """
    One suggestion per conflict group.

    Attributes:
        conflict_type (ConflictType): The group this suggestion covers.
        severity (Severity): Severity shared by the group.
        category (RemediationMessage): Translation key for session-truncation or token-expiry.
        action (RemediationMessage): Translation key for the corrective action.
        message (RemediationMessage): Translation key for the full suggestion.
        count (int): Number of conflicts in the group.
        scope_names (tuple[str, ...]): Offending scopes, in report order.
        min_scope_lifetime (int): Lowest offending scope lifetime; the client lifetime to lower to.
        text (str): Default English rendering of the suggestion.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    conflict_type: ConflictType
    severity: Severity
    category: RemediationMessage
    action: RemediationMessage
    message: RemediationMessage
    count: int = Field(..., ge=1)
    scope_names: tuple[str, ...]
    min_scope_lifetime: int
    text: str


class ValidationReport(BaseModel):
    """
    Terminal artifact of a validation call.

    ``has_issues`` is False if and only if there are no URI errors and no scope conflicts.
    Conflict counts are stored as ``(type, count)`` pairs and read through ``conflict_counts``.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    uri_errors: tuple[UriFinding, ...] = ()
    scope_conflicts: tuple[ScopeConflict, ...] = ()
    conflict_totals: tuple[tuple[ConflictType, int], ...] = ()
    remediations: tuple[RemediationSuggestion, ...] = ()
    has_issues: bool = False

    @model_validator(mode="after")
    def check_has_issues(self) -> "ValidationReport":
        if any(finding.success for finding in self.uri_errors):
            raise ValueError("uri_errors may only contain failed outcomes")
        if self.has_issues != bool(self.uri_errors or self.scope_conflicts):
            raise ValueError("has_issues must be set exactly when there are URI errors or scope conflicts")
        return self

    @property
    def conflict_counts(self) -> Mapping[ConflictType, int]:
        """Read-only view of the number of scope conflicts per type."""
        return MappingProxyType(dict(self.conflict_totals))

    @property
    def blocks_submission(self) -> bool:
        """URI errors block submission; scope conflicts are advisory."""
        return bool(self.uri_errors)

    @property
    def highlighted_scopes(self) -> tuple[str, ...]:
        """Scope names involved in conflicts, without duplicates, in report order."""
        return tuple(dict.fromkeys(conflict.scope_name for conflict in self.scope_conflicts))


def coerce_application_type(value: Any) -> ApplicationType:
    """
    Returns ``value`` as an ApplicationType.

    Raises:
        PreconditionError: If the value is not a known application type.
    """
    if isinstance(value, ApplicationType):
        return value
    try:
        return ApplicationType(str(value).lower())
    except ValueError as e:
        raise PreconditionError(f"Unknown application type: {value!r}") from e
