# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/client_config_validator

import os
from collections.abc import Callable
from typing import Any, Generator

import pytest

from client_config_validator.models import ApplicationType, ClientDraft, ScopeMetadata


@pytest.fixture(autouse=True)
def isolated_settings_env(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """
    Removes CLIENT_VALIDATOR_* settings from the environment so ValidatorSettings
    only sees what a test sets explicitly. Logging variables are kept.
    """
    for key in list(os.environ):
        if key.upper().startswith("CLIENT_VALIDATOR_") and "_LOG_" not in key.upper():
            monkeypatch.delenv(key)
    yield


@pytest.fixture
def make_draft() -> Callable[..., ClientDraft]:
    """Factory for a valid web client draft; keyword arguments override fields."""

    def _make(**overrides: Any) -> ClientDraft:
        data: dict[str, Any] = {
            "application_type": ApplicationType.WEB,
            "redirect_uris": ["https://app.example.no/callback"],
            "post_logout_uris": [],
            "access_token_lifetime_seconds": 120,
            "authorization_lifetime_seconds": 7200,
            "scope_names": [],
        }
        data.update(overrides)
        return ClientDraft(**data)

    return _make


@pytest.fixture
def short_lived_scope() -> ScopeMetadata:
    return ScopeMetadata(
        name="short-lived-scope",
        max_access_token_lifetime_seconds=1800,
        max_authorization_lifetime_seconds=3600,
    )
