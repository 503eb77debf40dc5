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
Custom exceptions for the client-config-validator package.

Validation findings (bad URIs, lifetime conflicts) are never raised; they are
returned as values. The exceptions below signal caller bugs or collaborator failures.
"""


class ClientConfigValidatorError(Exception):
    """Base exception for all client-config-validator errors."""


class InvalidUriError(ClientConfigValidatorError):
    """Raised when a string cannot be decomposed into URI components."""


class PreconditionError(ClientConfigValidatorError, ValueError):
    """
    Raised when an input violates the basic call contract (e.g. a missing draft,
    an unknown application type, a missing required field).
    Matches the example usage: `except PreconditionError:`.
    """


class ScopeCatalogError(ClientConfigValidatorError):
    """Raised when scope metadata cannot be fetched from the administration API."""


class UnauthorizedError(ScopeCatalogError):
    """Raised when the administration API rejects the access token (HTTP 401)."""
