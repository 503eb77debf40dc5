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
UriPolicy component for redirect and post-logout URI rules.
"""

from collections.abc import Callable, Sequence

from client_config_validator.exceptions import InvalidUriError
from client_config_validator.messages import UriMessage
from client_config_validator.models import (
    ApplicationType,
    ParsedUri,
    ValidationOutcome,
    coerce_application_type,
)
from client_config_validator.uri_syntax import parse
from client_config_validator.utils.logger import logger

# A rule returns the failure message, or None to continue with the next rule.
UriRule = Callable[[ParsedUri, ApplicationType], UriMessage | None]

WEB_SCHEMES = frozenset({"http", "https"})


def no_fragment(uri: ParsedUri, app_type: ApplicationType) -> UriMessage | None:
    if uri.fragment:
        return UriMessage.NO_FRAGMENT_ALLOWED
    return None


def scheme_required(uri: ParsedUri, app_type: ApplicationType) -> UriMessage | None:
    if not uri.scheme:
        return UriMessage.MISSING_SCHEME
    return None


def web_scheme_for_web_or_browser(uri: ParsedUri, app_type: ApplicationType) -> UriMessage | None:
    # Native apps may register custom schemes (e.g. com.example.app:/callback)
    if app_type in (ApplicationType.WEB, ApplicationType.BROWSER) and (uri.scheme or "").lower() not in WEB_SCHEMES:
        return UriMessage.INVALID_SCHEME_FOR_WEB_OR_BROWSER
    return None


def host_required_for_http(uri: ParsedUri, app_type: ApplicationType) -> UriMessage | None:
    if (uri.scheme or "").lower() in WEB_SCHEMES and not uri.host:
        return UriMessage.MISSING_HOST
    return None


DEFAULT_RULES: tuple[UriRule, ...] = (
    no_fragment,
    scheme_required,
    web_scheme_for_web_or_browser,
    host_required_for_http,
)


class UriPolicy:
    """
    Applies the redirect/logout URI rules for an application type.

    Rules run in a fixed order and the first failure short-circuits, so the reported
    error is always the most fundamental one.

    Attributes:
        rules (tuple[UriRule, ...]): The ordered rule list.
    """

    def __init__(self, rules: Sequence[UriRule] = DEFAULT_RULES) -> None:
        self.rules = tuple(rules)

    def validate(self, uri: ParsedUri, app_type: ApplicationType | str) -> ValidationOutcome:
        """
        Runs the rules against an already parsed URI.

        Args:
            uri: The parsed URI.
            app_type: The client's application type.

        Returns:
            ValidationOutcome: Success, or the message of the first failing rule.

        Raises:
            PreconditionError: If the application type is unknown.
        """
        app_type = coerce_application_type(app_type)
        for rule in self.rules:
            message = rule(uri, app_type)
            if message is not None:
                return ValidationOutcome.fail(message)
        return ValidationOutcome.ok()

    def validate_raw(self, raw: str, app_type: ApplicationType | str) -> ValidationOutcome:
        """
        Parses and validates a URI string. Unparseable input fails with ``invalid_uri``.
        """
        app_type = coerce_application_type(app_type)
        try:
            parsed = parse(raw)
        except InvalidUriError as e:
            logger.debug(f"Rejected unparseable URI {raw!r}: {e}")
            return ValidationOutcome.fail(UriMessage.INVALID_URI)
        return self.validate(parsed, app_type)
