import asyncio
import os
import sys

# Add src to path for running directly
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "../src")))

from client_config_validator import (
    ClientConfigValidator,
    ClientDraft,
    ScopeCatalog,
    ScopeCatalogError,
    ScopeMetadata,
    ValidatorSettings,
)


def build_draft() -> ClientDraft:
    return ClientDraft.from_payload(
        {
            "integration_type": "idporten",
            "application_type": "web",
            "redirect_uris": ["https://app.example.no/callback", "ftp://app.example.no/callback"],
            "post_logout_redirect_uris": ["https://other.example.no/logged-out"],
            "access_token_lifetime": 3600,
            "authorization_lifetime": 7200,
            "scopes": "openid,profile,digdir:short-lived",
        }
    )


async def load_scopes(settings: ValidatorSettings) -> list[ScopeMetadata]:
    """
    Fetches scope metadata when an API is configured, otherwise returns a local sample.
    """
    token = os.environ.get("CLIENT_VALIDATOR_ACCESS_TOKEN")
    if settings.api_base_url and token:
        async with ScopeCatalog(settings, token) as catalog:
            return await catalog.get_candidate_scopes("idporten")

    return [
        ScopeMetadata(name="openid"),
        ScopeMetadata(name="profile"),
        ScopeMetadata(
            name="digdir:short-lived",
            max_access_token_lifetime_seconds=1800,
            max_authorization_lifetime_seconds=3600,
        ),
    ]


async def main() -> None:
    """
    Validates a deliberately broken draft and prints the report.
    Set CLIENT_VALIDATOR_API_BASE_URL and CLIENT_VALIDATOR_ACCESS_TOKEN to use live scope metadata.
    """
    print(">>> Validating client draft")
    settings = ValidatorSettings()

    try:
        scopes = await load_scopes(settings)
    except ScopeCatalogError as e:
        print(f"!!! Could not load scopes, continuing without lifetime analysis: {e}")
        scopes = []

    report = ClientConfigValidator(settings).validate(build_draft(), scopes)

    print(f">>> has_issues={report.has_issues} blocks_submission={report.blocks_submission}")
    for error in report.uri_errors:
        print(f"    URI   {error.field.value}[{error.index}] {error.raw}: {error.message}")
    for conflict in report.scope_conflicts:
        print(
            f"    SCOPE {conflict.severity.value:<6} {conflict.scope_name}: "
            f"{conflict.scope_lifetime}s < client {conflict.client_lifetime}s"
        )
    for suggestion in report.remediations:
        print(f"    FIX   {suggestion.text}")


if __name__ == "__main__":
    asyncio.run(main())
