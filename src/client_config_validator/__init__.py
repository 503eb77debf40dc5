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
Pre-flight consistency checks for OAuth2/OIDC client registrations (ID-porten, Maskinporten).
"""

__version__ = "0.1.0"
__author__ = "Gowtham A Rao"
__email__ = "gowtham.rao@coreason.ai"

from .config import ValidatorSettings
from .conflict_aggregator import ConflictAggregator
from .exceptions import (
    ClientConfigValidatorError,
    InvalidUriError,
    PreconditionError,
    ScopeCatalogError,
    UnauthorizedError,
)
from .logout_uri_matcher import LogoutUriMatcher
from .messages import RemediationMessage, ScopeMessage, UriMessage
from .models import (
    ApplicationType,
    ClientDraft,
    ConflictType,
    IntegrationType,
    ParsedUri,
    PostLogoutUri,
    RedirectUri,
    RemediationSuggestion,
    ScopeConflict,
    ScopeMetadata,
    Severity,
    UriField,
    UriFinding,
    ValidationOutcome,
    ValidationReport,
)
from .scope_catalog import ScopeCatalog
from .scope_lifetime_analyzer import ScopeLifetimeAnalyzer
from .uri_policy import UriPolicy
from .uri_syntax import parse as parse_uri
from .validator import ClientConfigValidator

__all__ = [
    "ApplicationType",
    "ClientConfigValidator",
    "ClientConfigValidatorError",
    "ClientDraft",
    "ConflictAggregator",
    "ConflictType",
    "IntegrationType",
    "InvalidUriError",
    "LogoutUriMatcher",
    "ParsedUri",
    "PostLogoutUri",
    "PreconditionError",
    "RedirectUri",
    "RemediationMessage",
    "RemediationSuggestion",
    "ScopeCatalog",
    "ScopeCatalogError",
    "ScopeConflict",
    "ScopeLifetimeAnalyzer",
    "ScopeMessage",
    "ScopeMetadata",
    "Severity",
    "UnauthorizedError",
    "UriField",
    "UriFinding",
    "UriMessage",
    "UriPolicy",
    "ValidationOutcome",
    "ValidationReport",
    "ValidatorSettings",
    "parse_uri",
]
