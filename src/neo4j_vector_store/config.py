from dataclasses import dataclass

from pydantic_settings import BaseSettings

_REQUIRED_ENV_VARS = ("NEO4J_URI", "NEO4J_USERNAME", "NEO4J_PASSWORD")


class ConfigurationError(ValueError):
    """Raised when Neo4j connection details cannot be resolved."""


class Neo4jSettings(BaseSettings):
    """Neo4j connection settings loaded from environment variables or .env file."""

    model_config = {
        "env_prefix": "NEO4J_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    uri: str | None = None
    username: str | None = None
    password: str | None = None
    database: str | None = None


@dataclass(frozen=True)
class Neo4jGraphConfig:
    """Connection parameters for a single Neo4j database."""

    url: str
    username: str
    password: str
    database: str | None = None


def resolve_graph_config(
    client_params: Neo4jGraphConfig | None = None,
    *,
    settings: Neo4jSettings | None = None,
) -> Neo4jGraphConfig:
    """Resolve connection parameters for one indexer or retriever.

    Explicit ``client_params`` win. Otherwise the values come from
    ``settings``, which is read from the ``NEO4J_*`` environment variables
    when not given.

    Raises:
        ConfigurationError: If URI, username or password is missing.
    """
    if client_params is not None:
        return client_params

    if settings is None:
        settings = Neo4jSettings()

    if not (settings.uri and settings.username and settings.password):
        raise ConfigurationError(
            "Please provide Neo4j connection details through environment "
            f"variables: {', '.join(_REQUIRED_ENV_VARS)} are required."
        )

    return Neo4jGraphConfig(
        url=settings.uri,
        username=settings.username,
        password=settings.password,
        database=settings.database or None,
    )
