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
ScopeCatalog component for fetching scope metadata from the client administration API.
"""

from collections.abc import Awaitable, Callable, Iterable, Mapping
from typing import Any

import anyio
import httpx
from opentelemetry import trace
from opentelemetry.instrumentation.httpx import HTTPXClientInstrumentor
from pydantic import SecretStr, ValidationError

from client_config_validator.config import ValidatorSettings
from client_config_validator.exceptions import PreconditionError, ScopeCatalogError, UnauthorizedError
from client_config_validator.models import IntegrationType, ScopeMetadata
from client_config_validator.utils.logger import logger

tracer = trace.get_tracer(__name__)

# Returned by the API when an organization has no scopes of the requested kind.
NO_SCOPES_MARKER = "does not have any"


def merge_scopes(*sources: Iterable[ScopeMetadata]) -> list[ScopeMetadata]:
    """
    Merges scope lists into one candidate set. The first occurrence of a scope name wins.
    """
    merged: dict[str, ScopeMetadata] = {}
    for source in sources:
        for scope in source:
            merged.setdefault(scope.name, scope)
    return list(merged.values())


class ScopeCatalog:
    """
    Async client for the three scope-visibility queries of the administration API.

    Results are never cached; every call hits the API.

    Attributes:
        base_url (str): The API base URL.
        settings (ValidatorSettings): Timeout and retry settings.
    """

    def __init__(
        self,
        settings: ValidatorSettings,
        access_token: SecretStr | str,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """
        Initialize the ScopeCatalog.

        Args:
            settings: Settings with `api_base_url` set.
            access_token: Bearer token of the portal user.
            client: External async client (optional). If not provided, one is created and instrumented.

        Raises:
            PreconditionError: If `api_base_url` is not configured.
        """
        if not settings.api_base_url:
            raise PreconditionError("ScopeCatalog requires 'api_base_url' to be configured")

        self.settings = settings
        self.base_url = settings.api_base_url
        self._access_token = access_token if isinstance(access_token, SecretStr) else SecretStr(access_token)
        self._internal_client = client is None

        if client:
            self._client = client
        else:
            self._client = httpx.AsyncClient(timeout=settings.http_timeout)
            HTTPXClientInstrumentor().instrument_client(self._client)

    async def __aenter__(self) -> "ScopeCatalog":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        if self._internal_client:
            await self._client.aclose()

    async def get_accessible_for_all(self, integration_type: IntegrationType | str) -> list[ScopeMetadata]:
        """Scopes every organization may use for the given integration type."""
        return await self._fetch_scopes(
            "/api/v1/scopes/all",
            {"accessible_for_all": "true", "integration_type": str(integration_type).upper()},
        )

    async def get_with_delegation_source(self, integration_type: IntegrationType | str) -> list[ScopeMetadata]:
        """Scopes that have a delegation source, for the given integration type."""
        return await self._fetch_scopes(
            "/api/v1/scopes/all",
            {"delegated_sources": "true", "integration_type": str(integration_type).upper()},
        )

    async def get_accessible_to_organization(self) -> list[ScopeMetadata]:
        """Scopes the user's organization has been granted access to."""
        return await self._fetch_scopes("/api/v1/scopes/access/all")

    async def get_candidate_scopes(self, integration_type: IntegrationType | str) -> list[ScopeMetadata]:
        """
        Runs the three visibility queries concurrently and merges them into one candidate set.

        Order of precedence: accessible for all, delegation source, organization access.

        Args:
            integration_type: The client's integration type.

        Returns:
            list[ScopeMetadata]: Merged scope metadata, one entry per scope name.

        Raises:
            ScopeCatalogError: If any of the queries fails.
        """
        fetchers: list[Callable[[], Awaitable[list[ScopeMetadata]]]] = [
            lambda: self.get_accessible_for_all(integration_type),
            lambda: self.get_with_delegation_source(integration_type),
            self.get_accessible_to_organization,
        ]
        results: list[list[ScopeMetadata]] = [[] for _ in fetchers]
        errors: list[ScopeCatalogError] = []

        async def _collect(slot: int) -> None:
            try:
                results[slot] = await fetchers[slot]()
            except ScopeCatalogError as e:
                errors.append(e)

        with tracer.start_as_current_span("get_candidate_scopes") as span:
            async with anyio.create_task_group() as tg:
                for slot in range(len(fetchers)):
                    tg.start_soon(_collect, slot)

            if errors:
                span.record_exception(errors[0])
                raise errors[0]

            merged = merge_scopes(*results)
            span.set_attribute("scopes.count", len(merged))

        logger.debug(f"Resolved {len(merged)} candidate scope(s) for {integration_type}")
        return merged

    async def _fetch_scopes(self, path: str, params: Mapping[str, str] | None = None) -> list[ScopeMetadata]:
        """
        Fetches one scope list.

        Retries on `httpx.HTTPError` (network errors and 5xx) with exponential backoff
        (initial=0.1s, max=1.0s). Client errors are not retried.

        Raises:
            UnauthorizedError: On HTTP 401.
            ScopeCatalogError: On other client errors, malformed payloads, or when retries are exhausted.
        """
        url = f"{self.base_url}{path}"
        headers = {
            "Authorization": f"Bearer {self._access_token.get_secret_value()}",
            "Accept": "application/json",
        }
        attempts = self.settings.retry_attempts
        wait_initial = 0.1
        wait_max = 1.0

        for attempt in range(attempts):
            try:
                response = await self._client.get(url, params=dict(params or {}), headers=headers)
                return self._parse_response(response, url)
            except httpx.HTTPError as e:
                if attempt == attempts - 1:
                    raise ScopeCatalogError(f"Failed to fetch scopes from {url}: {e}") from e

                sleep_time = min(wait_initial * (2**attempt), wait_max)
                logger.warning(f"Scope request to {url} failed ({e}), retrying in {sleep_time:.1f}s")
                await anyio.sleep(sleep_time)

        raise ScopeCatalogError(f"Failed to fetch scopes from {url}")  # pragma: no cover

    def _parse_response(self, response: httpx.Response, url: str) -> list[ScopeMetadata]:
        if response.status_code == 401:
            raise UnauthorizedError(f"Received 401 unauthorized from {url}")

        if response.status_code >= 500:
            response.raise_for_status()

        if response.status_code >= 400:
            description = self._error_description(response)
            if NO_SCOPES_MARKER in description:
                return []
            raise ScopeCatalogError(f"Failed to fetch scopes from {url}: HTTP {response.status_code} {description}")

        try:
            data = response.json()
        except ValueError as e:
            raise ScopeCatalogError(f"Invalid JSON from {url}: {e}") from e

        if not isinstance(data, list):
            raise ScopeCatalogError(f"Expected a list of scopes from {url}, got {type(data).__name__}")

        scopes: list[ScopeMetadata] = []
        for item in data:
            if not isinstance(item, Mapping) or not item.get("name"):
                logger.warning(f"Skipping scope entry without a name from {url}")
                continue
            try:
                scopes.append(ScopeMetadata.from_api(item))
            except ValidationError as e:
                logger.warning(f"Skipping invalid scope '{item.get('name')}' from {url}: {e}")
        return scopes

    @staticmethod
    def _error_description(response: httpx.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            return response.text
        if isinstance(body, Mapping):
            return str(body.get("error_description") or body.get("error") or "")
        return ""
