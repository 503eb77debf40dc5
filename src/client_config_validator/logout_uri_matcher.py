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
LogoutUriMatcher component for checking that a logout URI shares an origin with a redirect URI.
"""

from collections.abc import Iterable

from client_config_validator.exceptions import InvalidUriError
from client_config_validator.messages import UriMessage
from client_config_validator.models import ApplicationType, RedirectUri, ValidationOutcome, coerce_application_type
from client_config_validator.uri_syntax import parse
from client_config_validator.utils.logger import logger


class LogoutUriMatcher:
    """
    Checks front-channel logout URIs against the client's registered redirect URIs.

    Only scheme, host and port are compared; the path is ignored.
    """

    def validate_front_channel_logout(
        self,
        uri: str,
        app_type: ApplicationType | str,
        redirect_uris: Iterable[RedirectUri | str],
    ) -> ValidationOutcome:
        """
        Validates that the logout URI's origin matches at least one redirect URI.

        Native clients do not use browser-delivered logout, so the check always succeeds for them.

        Args:
            uri: The logout URI.
            app_type: The client's application type.
            redirect_uris: The registered redirect URIs.

        Returns:
            ValidationOutcome: Success, ``logoutUriInvalidOrShort`` if the logout URI cannot be
            parsed, or ``logoutUriMismatch`` if no redirect URI shares its origin.

        Raises:
            PreconditionError: If the application type is unknown.
        """
        app_type = coerce_application_type(app_type)
        if app_type == ApplicationType.NATIVE:
            return ValidationOutcome.ok()

        try:
            logout_origin = parse(uri).origin
        except InvalidUriError as e:
            logger.debug(f"Rejected unparseable logout URI {uri!r}: {e}")
            return ValidationOutcome.fail(UriMessage.LOGOUT_URI_INVALID_OR_SHORT)

        for redirect in redirect_uris:
            raw = redirect.raw if isinstance(redirect, RedirectUri) else redirect
            try:
                redirect_origin = parse(raw).origin
            except InvalidUriError:
                # An unparseable redirect URI cannot vouch for any origin; UriPolicy reports it.
                continue
            if redirect_origin == logout_origin:
                return ValidationOutcome.ok()

        return ValidationOutcome.fail(UriMessage.LOGOUT_URI_MISMATCH)
