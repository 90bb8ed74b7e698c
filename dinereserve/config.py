"""Configuration management for DineReserve using Pydantic."""

import logging

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class Config(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Mode
    simulation_mode: bool = Field(
        default=True,
        description="Use random availability, auto-confirm and in-memory upstreams",
    )
    seed_demo_data: bool = Field(
        default=True, description="Load the demo restaurants, reviews and bookings"
    )

    # Server Configuration
    server_host: str = Field(default="0.0.0.0", description="Server host")
    server_port: int = Field(default=4001, description="Server port")
    server_url: str = Field(
        default="http://localhost:4001",
        description="Server URL for the CLI to connect to the API",
    )

    # Logging Configuration
    log_level: str = Field(default="INFO", description="Logging level")

    # Booking Configuration
    slot_granularity_minutes: int = Field(
        default=30, gt=0, description="Step between bookable time slots"
    )
    mock_availability_probability: float = Field(
        default=0.7,
        ge=0.0,
        le=1.0,
        description="Chance that a slot is free in simulation mode",
    )
    tables_per_slot: int = Field(
        default=4, gt=0, description="Bookings accepted per slot in production mode"
    )
    enforce_status_transitions: bool = Field(
        default=True, description="Reject illegal booking status changes"
    )
    simulated_latency_seconds: float = Field(
        default=0.0, ge=0.0, description="Artificial delay before a booking commits"
    )
    analytics_window_days: int = Field(
        default=30, gt=0, description="Trailing window for admin analytics"
    )

    # Simulation-only admin bypass
    admin_email: str | None = Field(None, description="Demo admin login email")
    admin_password: str | None = Field(None, description="Demo admin login password")

    # Supabase Configuration (auth + storage)
    supabase_url: str | None = Field(None, description="Supabase project URL")
    supabase_key: str | None = Field(None, description="Supabase anon/service key")
    storage_bucket: str = Field(
        default="restaurant-images", description="Bucket for restaurant images"
    )
    public_storage_url: str = Field(
        default="http://localhost:4001/static",
        description="Base URL for images stored in simulation mode",
    )
    max_upload_bytes: int = Field(
        default=5 * 1024 * 1024, description="Largest accepted image upload"
    )

    # LLM Configuration
    llm_api_key: str | None = Field(None, description="API key for the chat model")
    llm_base_url: str = Field(
        default="https://generativelanguage.googleapis.com/v1beta/openai/",
        description="OpenAI-compatible endpoint for the chat model",
    )
    llm_model: str = Field(default="gemini-1.5-flash", description="Chat model name")
    llm_temperature: float = Field(
        default=0.7, description="Temperature for chat responses"
    )

    def has_supabase_config(self) -> bool:
        """Check if Supabase is properly configured."""
        return bool(self.supabase_url and self.supabase_key)

    def has_llm_config(self) -> bool:
        """Check if the chat model is configured."""
        return bool(self.llm_api_key)

    def model_post_init(self, __context) -> None:
        """Validate configuration after initialization."""
        if not self.llm_api_key:
            logger.warning("LLM_API_KEY not set - chat fallback to the model disabled")

        if not self.simulation_mode and not self.has_supabase_config():
            logger.warning(
                "SUPABASE_URL/SUPABASE_KEY not set - auth and storage will fail "
                "outside simulation mode"
            )

        if not self.simulation_mode and self.admin_email:
            logger.warning("ADMIN_EMAIL is ignored outside simulation mode")


# Global config instance
config: Config | None = None


def get_config() -> Config:
    """Get or create the global configuration instance."""
    global config
    if config is None:
        config = Config()
    return config


def setup_logging(cfg: Config | None = None) -> None:
    """Configure logging for the application."""
    if cfg is None:
        cfg = get_config()

    log_level = getattr(logging, cfg.log_level.upper(), logging.INFO)

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    # Reduce noise from external libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("openai").setLevel(logging.WARNING)
    logging.getLogger("openai.agents").setLevel(logging.WARNING)
