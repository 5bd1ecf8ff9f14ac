"""Configuration management for Maginhawa using Pydantic."""

import logging
from pathlib import Path

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

    # Data Configuration
    places_dir: Path = Field(
        default=Path("data/places"), description="Directory of place record files"
    )
    index_path: Path = Field(
        default=Path("data/places.json"), description="Published index artifact"
    )
    stats_path: Path = Field(
        default=Path("data/stats.json"), description="Published stats artifact"
    )

    # GitHub Configuration
    github_pat: str | None = Field(None, description="GitHub personal access token")
    github_owner: str = Field(default="OSSPhilippines", description="Repository owner")
    github_repo: str = Field(default="whereinmaginhawa", description="Repository name")
    github_base_branch: str = Field(default="main", description="Branch PRs target")
    github_api_url: str = Field(
        default="https://api.github.com", description="GitHub REST API base URL"
    )
    github_places_path: str = Field(
        default="apps/web/src/data/places",
        description="Path of the places directory inside the repository",
    )

    # Submission Guardrails
    rate_limit_max_requests: int = Field(
        default=5, description="Submissions allowed per identity per window"
    )
    rate_limit_window_seconds: float = Field(
        default=3600.0, description="Rolling rate limit window in seconds"
    )
    environment: str = Field(
        default="development", description="development or production"
    )

    # Server Configuration
    server_host: str = Field(default="0.0.0.0", description="Server host")
    server_port: int = Field(default=8080, description="Server port")

    # Logging Configuration
    log_level: str = Field(default="INFO", description="Logging level")

    @property
    def is_production(self) -> bool:
        """Whether the app runs behind HTTPS in production."""
        return self.environment.lower() == "production"

    def has_github_config(self) -> bool:
        """Check if GitHub change proposals can be opened."""
        return bool(self.github_pat and self.github_owner and self.github_repo)

    def model_post_init(self, __context) -> None:
        """Validate configuration after initialization."""
        if not self.github_pat:
            logger.warning("GITHUB_PAT not set - change proposals disabled")


# Global config instance
config: Config | None = None


def get_config() -> Config:
    """Get or create the global configuration instance."""
    global config
    if config is None:
        config = Config()
    return config


def reset_config() -> None:
    """Drop the global configuration so the next call re-reads the environment."""
    global config
    config = None


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
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
