"""
Configuration constants for the standards knowledge base
"""
import os
from pathlib import Path
from dataclasses import dataclass, field

SERVER_NAME = "engineering-standards-mcp-server"
SERVER_VERSION = "1.0.0"


def _default_standards_dir() -> Path:
    return Path(os.getcwd()) / "standards"


@dataclass
class PathConfig:
    """File path configuration"""
    standards_dir: Path = field(default_factory=_default_standards_dir)


@dataclass
class ServerConfig:
    """HTTP server configuration"""
    host: str = "0.0.0.0"
    port: int = 3000


@dataclass
class SearchConfig:
    """Context snippet settings"""
    context_length: int = 200  # Characters of context around matches
    max_contexts: int = 5  # Snippets kept per result


@dataclass
class WatcherConfig:
    """File watcher configuration"""
    enabled: bool = False
    debounce_seconds: float = 1.0


@dataclass
class LoggingConfig:
    """Logging configuration"""
    level: str = "INFO"


@dataclass
class Config:
    """Main configuration container"""
    paths: PathConfig
    server: ServerConfig
    search: SearchConfig
    watcher: WatcherConfig
    logging: LoggingConfig

    @classmethod
    def from_env(cls) -> 'Config':
        """Create config from environment - delegates to EnvironmentConfigLoader"""
        from environment_config_loader import EnvironmentConfigLoader
        return EnvironmentConfigLoader().load()

# Default instance
default_config = Config.from_env()
