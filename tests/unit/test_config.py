"""Tests for server configuration."""

from pathlib import Path

import pytest

from apps.rss2twtxt.config import ServerConfig, validate_environment
from apps.rss2twtxt.core.context import AppContext


class TestServerConfig:
    """Tests for ServerConfig.from_env."""

    def test_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        for var in (
            "RSS2TWTXT_DATA_DIR",
            "RSS2TWTXT_REGISTRY_PATH",
            "RSS2TWTXT_HOST",
            "RSS2TWTXT_PORT",
            "RSS2TWTXT_FETCH_TIMEOUT",
            "LOG_LEVEL",
            "LOG_FORMAT",
            "ENVIRONMENT",
        ):
            monkeypatch.delenv(var, raising=False)

        config = ServerConfig.from_env()

        assert config.data_dir == Path("./data")
        assert config.registry_path == Path("./data") / "feeds.json"
        assert config.port == 8000
        assert config.log_format == "text"
        assert config.environment == "development"

    def test_overrides(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        monkeypatch.setenv("RSS2TWTXT_DATA_DIR", str(tmp_path))
        monkeypatch.setenv("RSS2TWTXT_REGISTRY_PATH", str(tmp_path / "conf" / "registry.json"))
        monkeypatch.setenv("RSS2TWTXT_PORT", "9001")
        monkeypatch.setenv("RSS2TWTXT_FETCH_TIMEOUT", "2.5")
        monkeypatch.setenv("LOG_LEVEL", "debug")
        monkeypatch.setenv("LOG_FORMAT", "JSON")
        monkeypatch.setenv("ENVIRONMENT", "production")

        config = ServerConfig.from_env()

        assert config.data_dir == tmp_path
        assert config.registry_path == tmp_path / "conf" / "registry.json"
        assert config.port == 9001
        assert config.fetch_timeout == 2.5
        assert config.log_level == "DEBUG"
        assert config.log_format == "json"
        assert config.environment == "production"


class TestValidateEnvironment:
    """Tests for configuration warnings."""

    def test_clean_config(self, tmp_path: Path) -> None:
        config = ServerConfig(data_dir=tmp_path, registry_path=tmp_path / "feeds.json")
        assert validate_environment(config) == []

    def test_warnings(self, tmp_path: Path) -> None:
        config = ServerConfig(
            data_dir=tmp_path / "missing",
            registry_path=tmp_path / "feeds.json",
            log_format="xml",
            fetch_timeout=0,
        )
        warnings = validate_environment(config)
        assert len(warnings) == 3


class TestHttpTimeout:
    """Tests for the fetch timeout handed to httpx."""

    def test_positive_timeout_is_kept(self, tmp_path: Path) -> None:
        config = ServerConfig(data_dir=tmp_path, registry_path=tmp_path / "feeds.json", fetch_timeout=2.5)
        assert config.http_timeout == 2.5

    @pytest.mark.parametrize("value", [0, -1])
    def test_non_positive_timeout_disables_it(self, tmp_path: Path, value: float) -> None:
        config = ServerConfig(data_dir=tmp_path, registry_path=tmp_path / "feeds.json", fetch_timeout=value)

        assert config.http_timeout is None
        assert AppContext.from_config(config).validator.timeout is None
