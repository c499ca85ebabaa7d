"""Server configuration from environment variables."""

import os
from dataclasses import dataclass
from pathlib import Path

REGISTRY_FILENAME = "feeds.json"


@dataclass(frozen=True)
class ServerConfig:
    """Server configuration loaded from environment variables."""

    data_dir: Path
    registry_path: Path
    host: str = "0.0.0.0"
    port: int = 8000
    fetch_timeout: float = 10.0
    log_level: str = "INFO"
    log_format: str = "text"
    environment: str = "development"

    @property
    def http_timeout(self) -> float | None:
        """Fetch timeout for httpx; None (no timeout) when not positive."""
        return self.fetch_timeout if self.fetch_timeout > 0 else None

    @staticmethod
    def from_env() -> "ServerConfig":
        """Load configuration from environment variables."""
        data_dir = Path(os.getenv("RSS2TWTXT_DATA_DIR", "./data"))
        registry_path = os.getenv("RSS2TWTXT_REGISTRY_PATH")
        return ServerConfig(
            data_dir=data_dir,
            registry_path=Path(registry_path) if registry_path else data_dir / REGISTRY_FILENAME,
            host=os.getenv("RSS2TWTXT_HOST", "0.0.0.0"),
            port=int(os.getenv("RSS2TWTXT_PORT", "8000")),
            fetch_timeout=float(os.getenv("RSS2TWTXT_FETCH_TIMEOUT", "10")),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            log_format=os.getenv("LOG_FORMAT", "text").lower(),
            environment=os.getenv("ENVIRONMENT", "development"),
        )


def validate_environment(config: ServerConfig) -> list[str]:
    """Validate configuration.

    Returns:
        List of warning messages for questionable settings
    """
    warnings = []

    if not config.data_dir.is_dir():
        warnings.append(f"Data directory {config.data_dir} does not exist; it will be created")

    if config.log_format not in ("text", "json"):
        warnings.append(f"Unknown LOG_FORMAT={config.log_format!r}, falling back to text")

    if config.http_timeout is None:
        warnings.append(f"RSS2TWTXT_FETCH_TIMEOUT={config.fetch_timeout} disables the fetch timeout")

    return warnings
