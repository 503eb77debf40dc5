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
Syntactic URI decomposition. No network resolution is attempted.
"""

import re
from urllib.parse import urlsplit

from client_config_validator.exceptions import InvalidUriError
from client_config_validator.models import ParsedUri

# Whitespace and C0/DEL control characters are never valid inside a URI reference.
_FORBIDDEN_CHARS = re.compile(r"[\s\x00-\x1f\x7f]")


def _has_authority(raw: str, scheme: str) -> bool:
    rest = raw[len(scheme) + 1 :] if scheme else raw
    return rest.startswith("//")


def parse(raw: str) -> ParsedUri:
    """
    Decomposes a URI string into scheme, host, port, path and fragment.

    Args:
        raw: The URI as typed by the user.

    Returns:
        ParsedUri: The components. Scheme and host are lower-cased.

    Raises:
        InvalidUriError: If the value is not a string, is blank, contains whitespace or
            control characters, or has a malformed authority (bad port, broken IPv6 literal).
    """
    if not isinstance(raw, str):
        raise InvalidUriError(f"URI must be a string, got {type(raw).__name__}")
    if not raw:
        raise InvalidUriError("URI is empty")
    if _FORBIDDEN_CHARS.search(raw):
        raise InvalidUriError("URI contains whitespace or control characters")

    try:
        parts = urlsplit(raw)
        # .port and .hostname validate the authority lazily
        port = parts.port
        hostname = parts.hostname
    except ValueError as e:
        raise InvalidUriError(f"Malformed URI: {e}") from e

    host: str | None = hostname
    if host is None and _has_authority(raw, parts.scheme):
        host = ""

    return ParsedUri(
        scheme=parts.scheme or None,
        host=host,
        port=port,
        path=parts.path,
        fragment=parts.fragment or None,
    )
