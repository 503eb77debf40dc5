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
Configuration for the client-config-validator package.
"""

from pydantic import Field, ValidationInfo, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ValidatorSettings(BaseSettings):
    """
    Configuration settings for client-config-validator.

    Attributes:
        api_base_url (str | None): Base URL of the client administration API, used by the scope catalog.
        http_timeout (float): Timeout in seconds for scope catalog requests.
        retry_attempts (int): Attempts per scope catalog request before giving up.
        check_frontchannel_logout (bool): Whether logout URIs must share an origin with a redirect URI.
        unsafe_local_dev (bool): Allows a plain http API URL for local testing.
    """

    model_config = SettingsConfigDict(
        env_prefix="CLIENT_VALIDATOR_",
        case_sensitive=False,
    )

    unsafe_local_dev: bool = False
    api_base_url: str | None = None
    http_timeout: float = Field(default=10.0, gt=0, description="Timeout in seconds for API requests.")
    retry_attempts: int = Field(default=3, ge=1)
    check_frontchannel_logout: bool = True

    @field_validator("api_base_url", mode="after")
    @classmethod
    def validate_https(cls, v: str | None, info: ValidationInfo) -> str | None:
        """
        Requires HTTPS for the API, unless strictly opted out for local dev.
        Strips trailing slashes so paths can be appended.
        """
        if v is None:
            return v
        v = v.strip().rstrip("/")
        if not v:
            return None
        if v.startswith("http://") and not info.data.get("unsafe_local_dev", False):
            raise ValueError("HTTPS is required for production. Set 'unsafe_local_dev=True' only for local testing.")
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"api_base_url must be an absolute http(s) URL, got {v!r}")
        return v
