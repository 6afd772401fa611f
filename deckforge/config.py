from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    model_config = SettingsConfigDict(env_file=".env", env_prefix="DECKFORGE_")

    app_name: str = "DeckForge"
    debug: bool = False

    database_url: str = "postgresql+asyncpg://localhost:5432/deckforge"

    # Where the card catalog job keeps the Scryfall bulk file
    card_data_path: str = "data/oracle-cards.json"
    card_load_batch_size: int = 500

    # Cache lifetimes in seconds, per query type
    suggestions_ttl_seconds: float = 300.0
    buildable_decks_ttl_seconds: float = 1800.0
    format_coverage_ttl_seconds: float = 3600.0

    # Suggestion paging
    default_suggestion_limit: int = 20
    max_suggestion_limit: int = 50
    default_buildable_limit: int = 10
    max_buildable_limit: int = 20


settings = Settings()


# =============================================================================
# BUILDABLE DECK THRESHOLDS
# =============================================================================

# Minimum template completeness (percent) for an archetype to be viable
VIABLE_THRESHOLD = 60

# Completeness (percent) at which a template counts as ready to build
BUILDABLE_THRESHOLD = 90


# =============================================================================
# EVALUATION
# =============================================================================

# Candidates scored between yields to the event loop; cancellation is seen at each yield
CANCELLATION_CHECK_INTERVAL = 16
