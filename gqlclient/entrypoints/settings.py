from pydantic_settings import BaseSettings, SettingsConfigDict


class ClientSettings(BaseSettings):
    """Client configuration read from ``GRAPHQL_*`` environment variables or ``.env``."""

    model_config = SettingsConfigDict(
        env_prefix="GRAPHQL_", env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    ENDPOINT: str
    TIMEOUT: float = 30.0
    USE_COOKIES: bool = False
    HEADERS: dict[str, str] = {}
