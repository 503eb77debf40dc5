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
Translation keys returned to the UI layer. Never rendered inside the engine.
"""

from enum import StrEnum


class UriMessage(StrEnum):
    NO_FRAGMENT_ALLOWED = "validation.uri.noFragmentAllowed"
    MISSING_SCHEME = "validation.uri.missingScheme"
    INVALID_SCHEME_FOR_WEB_OR_BROWSER = "validation.uri.invalidSchemeForWebOrBrowser"
    MISSING_HOST = "validation.uri.missingHost"
    INVALID_URI = "validation.uri.invalid_uri"
    LOGOUT_URI_MISMATCH = "validation.uri.logoutUriMismatch"
    LOGOUT_URI_INVALID_OR_SHORT = "validation.uri.logoutUriInvalidOrShort"


class ScopeMessage(StrEnum):
    AUTHORIZATION_LIFETIME_DESCRIPTION = "validation.scope.authorizationLifetimeConflict.description"
    AUTHORIZATION_LIFETIME_SOLUTION = "validation.scope.authorizationLifetimeConflict.solution"
    ACCESS_TOKEN_LIFETIME_DESCRIPTION = "validation.scope.accessTokenLifetimeConflict.description"
    ACCESS_TOKEN_LIFETIME_SOLUTION = "validation.scope.accessTokenLifetimeConflict.solution"


class RemediationMessage(StrEnum):
    SESSION_TRUNCATION_CATEGORY = "remediation.category.sessionTruncation"
    TOKEN_EXPIRY_CATEGORY = "remediation.category.tokenExpiry"
    LOWER_AUTHORIZATION_LIFETIME = "remediation.action.lowerAuthorizationLifetime"
    LOWER_ACCESS_TOKEN_LIFETIME = "remediation.action.lowerAccessTokenLifetime"
    AUTHORIZATION_LIFETIME_CONFLICTS = "remediation.authorizationLifetimeConflicts"
    ACCESS_TOKEN_LIFETIME_CONFLICTS = "remediation.accessTokenLifetimeConflicts"
