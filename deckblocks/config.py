from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    model_config = SettingsConfigDict(env_file=".env", env_prefix="DECKBLOCKS_")

    app_name: str = "DeckBlocks"
    debug: bool = False
    log_level: str = "INFO"

    database_url: str = "sqlite+aiosqlite:///./deckblocks.db"

    scryfall_api_url: str = "https://api.scryfall.com"
    scryfall_timeout: float = 10.0
    user_agent: str = "DeckBlocks/0.1"

    # Scryfall asks clients to stay around 10 requests/second
    lookup_concurrency: int = 4

    cors_origins: list[str] = ["*"]


settings = Settings()


# =============================================================================
# DECK LIST LIMITS
# =============================================================================

# Quantity bounds accepted on a deck list line
MIN_QUANTITY = 1
MAX_QUANTITY = 99

# Search and autocomplete queries shorter than this never hit the network
MIN_QUERY_LENGTH = 2
