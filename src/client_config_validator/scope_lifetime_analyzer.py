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
ScopeLifetimeAnalyzer component for detecting scopes whose lifetime limits undercut the client.
"""

from collections.abc import Iterable

from client_config_validator.messages import ScopeMessage
from client_config_validator.models import ClientDraft, ConflictType, ScopeConflict, ScopeMetadata, Severity
from client_config_validator.utils.logger import logger


class ScopeLifetimeAnalyzer:
    """
    Compares a client's access-token and authorization lifetimes with the maximum lifetimes
    declared by its granted scopes.
    """

    def analyze(self, client: ClientDraft, scopes: Iterable[ScopeMetadata]) -> list[ScopeConflict]:
        """
        Produces one conflict per (scope, lifetime dimension) whose limit is strictly lower
        than the client's own setting.

        Scopes the client has not been granted, and granted scopes missing from ``scopes``,
        are ignored. Only the first entry per scope name is considered. Results follow the
        order of ``scopes``; within a scope the authorization conflict comes first. Clients
        without an authorization lifetime (Maskinporten) are only checked for access tokens.

        Args:
            client: The client draft.
            scopes: Scope metadata from the scope catalog.

        Returns:
            list[ScopeConflict]: The conflicts found, possibly empty.
        """
        conflicts: list[ScopeConflict] = []
        seen: set[str] = set()

        for scope in scopes:
            if scope.name not in client.scope_names or scope.name in seen:
                continue
            seen.add(scope.name)

            # The scope forces re-authentication before the client's session would end.
            max_authorization = scope.max_authorization_lifetime_seconds
            client_authorization = client.authorization_lifetime_seconds
            if (
                max_authorization is not None
                and client_authorization is not None
                and max_authorization < client_authorization
            ):
                conflicts.append(
                    ScopeConflict(
                        type=ConflictType.AUTHORIZATION_LIFETIME_CONFLICT,
                        scope_name=scope.name,
                        scope_lifetime=max_authorization,
                        client_lifetime=client_authorization,
                        severity=Severity.HIGH,
                        description=ScopeMessage.AUTHORIZATION_LIFETIME_DESCRIPTION,
                        solution=ScopeMessage.AUTHORIZATION_LIFETIME_SOLUTION,
                    )
                )

            max_access_token = scope.max_access_token_lifetime_seconds
            if max_access_token is not None and max_access_token < client.access_token_lifetime_seconds:
                conflicts.append(
                    ScopeConflict(
                        type=ConflictType.ACCESS_TOKEN_LIFETIME_CONFLICT,
                        scope_name=scope.name,
                        scope_lifetime=max_access_token,
                        client_lifetime=client.access_token_lifetime_seconds,
                        severity=Severity.MEDIUM,
                        description=ScopeMessage.ACCESS_TOKEN_LIFETIME_DESCRIPTION,
                        solution=ScopeMessage.ACCESS_TOKEN_LIFETIME_SOLUTION,
                    )
                )

        missing = client.scope_names - seen
        if missing:
            logger.debug(f"No metadata for {len(missing)} granted scope(s); skipped lifetime analysis")

        return conflicts
