"""Configuration management."""

import os
from dataclasses import dataclass
from pathlib import Path

import yaml
from dotenv import load_dotenv

# Load .env file from current working directory
load_dotenv()


@dataclass
class Config:
    """Application configuration."""

    database_path: Path
    pool_size: int = 5
    timeout_seconds: float = 5.0
    log_level: str = "INFO"

    @classmethod
    def from_yaml(cls, path: str | Path) -> "Config":
        """Load configuration from YAML file.

        The file is optional. Environment variables take precedence over
        YAML values:
        - LINKS_DATABASE_PATH: Path to SQLite database file
        - LINKS_POOL_SIZE: Maximum number of pooled connections
        - LINKS_TIMEOUT_SECONDS: Seconds to wait for a connection or a lock
        - LINKS_LOG_LEVEL: Logging level name
        """
        path = Path(path)
        data = {}
        if path.exists():
            with open(path) as f:
                data = yaml.safe_load(f) or {}

        database_path = os.environ.get("LINKS_DATABASE_PATH") or data.get("database_path")
        if not database_path:
            raise ValueError(
                "database_path must be set via LINKS_DATABASE_PATH environment variable "
                "or in config.yaml"
            )

        pool_size = int(os.environ.get("LINKS_POOL_SIZE") or data.get("pool_size", 5))
        if pool_size < 1:
            raise ValueError("pool_size must be at least 1")

        return cls(
            database_path=Path(database_path).expanduser(),
            pool_size=pool_size,
            timeout_seconds=float(
                os.environ.get("LINKS_TIMEOUT_SECONDS") or data.get("timeout_seconds", 5.0)
            ),
            log_level=(
                os.environ.get("LINKS_LOG_LEVEL") or data.get("log_level", "INFO")
            ).upper(),
        )
