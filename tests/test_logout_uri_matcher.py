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

from client_config_validator.exceptions import PreconditionError
from client_config_validator.logout_uri_matcher import LogoutUriMatcher
from client_config_validator.messages import UriMessage
from client_config_validator.models import ApplicationType, RedirectUri


@pytest.fixture
def matcher() -> LogoutUriMatcher:
    return LogoutUriMatcher()


def test_same_origin_matches(matcher: LogoutUriMatcher) -> None:
    outcome = matcher.validate_front_channel_logout(
        "https://a.example:8443/logout", ApplicationType.WEB, [RedirectUri(raw="https://a.example:8443/cb")]
    )

    assert outcome.success is True
    assert outcome.message is None


def test_different_port_is_mismatch(matcher: LogoutUriMatcher) -> None:
    outcome = matcher.validate_front_channel_logout(
        "https://a.example:8444/logout", ApplicationType.WEB, [RedirectUri(raw="https://a.example:8443/cb")]
    )

    assert outcome.success is False
    assert outcome.message == UriMessage.LOGOUT_URI_MISMATCH


def test_absent_ports_are_equal(matcher: LogoutUriMatcher) -> None:
    assert matcher.validate_front_channel_logout(
        "https://a.example/logout", ApplicationType.BROWSER, ["https://a.example/cb"]
    ).success


def test_default_port_is_not_normalised(matcher: LogoutUriMatcher) -> None:
    """An explicit :443 differs from an absent port."""
    outcome = matcher.validate_front_channel_logout(
        "https://a.example/logout", ApplicationType.WEB, ["https://a.example:443/cb"]
    )

    assert outcome.message == UriMessage.LOGOUT_URI_MISMATCH


def test_path_is_ignored(matcher: LogoutUriMatcher) -> None:
    assert matcher.validate_front_channel_logout(
        "https://a.example/totally/elsewhere", ApplicationType.WEB, ["https://a.example/cb"]
    ).success


def test_scheme_and_host_must_match(matcher: LogoutUriMatcher) -> None:
    redirects = ["https://a.example/cb"]

    assert not matcher.validate_front_channel_logout("http://a.example/logout", ApplicationType.WEB, redirects).success
    assert not matcher.validate_front_channel_logout("https://b.example/logout", ApplicationType.WEB, redirects).success


def test_host_case_is_ignored(matcher: LogoutUriMatcher) -> None:
    assert matcher.validate_front_channel_logout(
        "https://A.Example/logout", ApplicationType.WEB, ["https://a.example/cb"]
    ).success


def test_any_redirect_may_match(matcher: LogoutUriMatcher) -> None:
    redirects = ["https://one.example/cb", "not a uri", "https://two.example:9000/cb"]

    assert matcher.validate_front_channel_logout(
        "https://two.example:9000/logout", ApplicationType.WEB, redirects
    ).success


def test_no_redirect_uris_is_mismatch(matcher: LogoutUriMatcher) -> None:
    outcome = matcher.validate_front_channel_logout("https://a.example/logout", ApplicationType.WEB, [])

    assert outcome.message == UriMessage.LOGOUT_URI_MISMATCH


def test_unparseable_logout_uri(matcher: LogoutUriMatcher) -> None:
    outcome = matcher.validate_front_channel_logout(
        "https://a.example:port/logout", ApplicationType.WEB, ["https://a.example/cb"]
    )

    assert outcome.message == UriMessage.LOGOUT_URI_INVALID_OR_SHORT


def test_native_clients_are_skipped(matcher: LogoutUriMatcher) -> None:
    """Native apps do not receive browser-delivered logout, so anything passes."""
    assert matcher.validate_front_channel_logout("https://a.example:bad", ApplicationType.NATIVE, []).success
    assert matcher.validate_front_channel_logout("https://evil.example/", "native", ["https://a.example/cb"]).success


def test_unknown_application_type(matcher: LogoutUriMatcher) -> None:
    with pytest.raises(PreconditionError):
        matcher.validate_front_channel_logout("https://a.example/", "tv", [])
