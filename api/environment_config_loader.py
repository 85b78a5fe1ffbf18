"""
Environment configuration loader.

Fixes Feature Envy: Logic for reading environment variables
lives with the data source (environment) rather than in Config dataclass.
"""
import os
from pathlib import Path

from config import (
    Config, PathConfig, ServerConfig, SearchConfig, WatcherConfig, LoggingConfig
)


class EnvironmentConfigLoader:
    """Loads configuration from environment variables.

    Single Responsibility: Environment access logic.
    """

    def load(self) -> Config:
        """Create Config from environment variables"""
        return Config(
            paths=self._load_path_config(),
            server=self._load_server_config(),
            search=self._load_search_config(),
            watcher=self._load_watcher_config(),
            logging=self._load_logging_config(),
        )

    def _load_path_config(self) -> PathConfig:
        """Load storage root from environment"""
        standards_dir = os.getenv("STANDARDS_DIR")
        if standards_dir:
            return PathConfig(standards_dir=Path(standards_dir))
        return PathConfig()

    def _load_server_config(self) -> ServerConfig:
        """Load HTTP server configuration from environment"""
        return ServerConfig(
            host=self._get_optional("HOST", ServerConfig.host),
            port=self._get_int("PORT", ServerConfig.port)
        )

    def _load_search_config(self) -> SearchConfig:
        """Load search snippet settings from environment"""
        return SearchConfig(
            context_length=self._get_int("SEARCH_CONTEXT_LENGTH", 200),
            max_contexts=self._get_int("SEARCH_MAX_CONTEXTS", 5)
        )

    def _load_watcher_config(self) -> WatcherConfig:
        """Load file watcher configuration from environment"""
        return WatcherConfig(
            enabled=self._get_bool("WATCH_ENABLED", False),
            debounce_seconds=self._get_float("WATCH_DEBOUNCE_SECONDS", 1.0)
        )

    def _load_logging_config(self) -> LoggingConfig:
        """Load logging configuration from environment"""
        return LoggingConfig(
            level=self._get_optional("LOG_LEVEL", LoggingConfig.level).upper()
        )

    def _get_optional(self, key: str, default: str) -> str:
        """Get optional string environment variable"""
        return os.getenv(key, default)

    def _get_bool(self, key: str, default: bool) -> bool:
        """Get boolean environment variable"""
        value = os.getenv(key, str(default).lower())
        return value.lower() == "true"

    def _get_int(self, key: str, default: int) -> int:
        """Get integer environment variable"""
        value = os.getenv(key, str(default))
        return int(value)

    def _get_float(self, key: str, default: float) -> float:
        """Get float environment variable"""
        value = os.getenv(key, str(default))
        return float(value)
