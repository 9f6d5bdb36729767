import httpx
from loguru import logger
from pydantic import ValidationError

from gqlclient.domain.errors import ConfigurationError
from gqlclient.entrypoints.settings import ClientSettings
from gqlclient.infrastructure.graphql_client import GraphQLClient
from gqlclient.shared.decorators import log_errors


@log_errors
def create_client(
    settings: ClientSettings | None = None,
    *,
    transport: httpx.BaseTransport | None = None,
) -> GraphQLClient:
    """Build a :class:`GraphQLClient` from settings (the environment by default).

    ``transport`` replaces the network layer, e.g. ``httpx.MockTransport`` in
    tests.

    Raises:
        ConfigurationError: if the settings are missing or invalid.
    """
    if settings is None:
        try:
            settings = ClientSettings()  # type: ignore[call-arg]
        except ValidationError as exc:
            raise ConfigurationError(f"Invalid GraphQL client settings: {exc}") from exc

    logger.info(
        f"[GraphQL] client for {settings.ENDPOINT} "
        f"(cookies={'on' if settings.USE_COOKIES else 'off'}, timeout={settings.TIMEOUT}s)"
    )
    return GraphQLClient(
        settings.ENDPOINT,
        transport=transport,
        headers=settings.HEADERS,
        use_cookies=settings.USE_COOKIES,
        timeout=settings.TIMEOUT,
    )
