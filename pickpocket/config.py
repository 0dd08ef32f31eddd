"""
Configuration management using YAML files and dataclasses.

This module defines all configuration dataclasses and provides loading
from YAML files with defaults. Configuration sections:
- PocketConfig: Pocket API endpoints, credentials and pagination limits
- StorageConfig: Home folder, library file and token file names
- LoggingConfig: Logging behavior
- AppConfig: Root configuration container
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
import os
from pathlib import Path
from typing import Any

import yaml

from .core.errors import AuthorizationError


@dataclass
class PocketConfig:
    """Configuration for the Pocket API.

    Attributes:
        consumer_key: Pocket application consumer key (optional, env var used if not set)
        consumer_key_env: Environment variable holding the consumer key
        retrieve_url: Endpoint listing saved items
        send_url: Endpoint applying batch actions (archive, delete)
        oauth_request_url: First OAuth step, returns a request token
        oauth_authorize_url: Second OAuth step, exchanges the request token
        user_authorize_url: Page the user opens to grant access
        redirect_uri: Where Pocket sends the user after granting access
        page_size: Items requested per page
        max_concurrent_requests: Pages requested concurrently per batch
        max_pages: Safety ceiling on pages after the first one
        action_chunk_size: Maximum actions per send request
        timeout_seconds: HTTP request timeout
        trust_env: Whether to respect system proxy settings
        user_agent: HTTP User-Agent header string
    """

    consumer_key: str | None = None
    consumer_key_env: str = "POCKET_CONSUMER_KEY"
    retrieve_url: str = "https://getpocket.com/v3/get"
    send_url: str = "https://getpocket.com/v3/send"
    oauth_request_url: str = "https://getpocket.com/v3/oauth/request"
    oauth_authorize_url: str = "https://getpocket.com/v3/oauth/authorize"
    user_authorize_url: str = "https://getpocket.com/auth/authorize"
    redirect_uri: str = "https://getpocket.com"
    page_size: int = 30
    max_concurrent_requests: int = 5
    max_pages: int = 50
    action_chunk_size: int = 100
    timeout_seconds: float = 20.0
    trust_env: bool = True
    user_agent: str = "pickpocket/0.1"


@dataclass
class StorageConfig:
    """Configuration for local files.

    Attributes:
        home_folder: Folder holding the library, tokens and logs
        library_file: Library file name inside the home folder
        oauth_token_file: Request token file name inside the home folder
        access_token_file: Access token file name inside the home folder
    """

    home_folder: str = "~/.pickpocket"
    library_file: str = "library.yml"
    oauth_token_file: str = "oauth_token"
    access_token_file: str = "access_token"


@dataclass
class LoggingConfig:
    """Configuration for logging behavior.

    Attributes:
        level: Logging level ("DEBUG", "INFO", "WARNING", "ERROR")
        console: Whether to log to console
        file: Whether to log to a file in the home folder
        format: Log file format ("jsonl" or "plain")
        filename: Name of the log file
    """

    level: str = "INFO"
    console: bool = True
    file: bool = False
    format: str = "plain"
    filename: str = "pickpocket.log"


@dataclass
class AppConfig:
    """Root configuration container aggregating all config sections."""

    pocket: PocketConfig = field(default_factory=PocketConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def load_config(path: str | None) -> AppConfig:
    """Load configuration from a YAML file with defaults."""
    if not path:
        return AppConfig()

    with open(path, "r", encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}

    return _merge_config(AppConfig(), raw)


def _merge_config(base: AppConfig, raw: dict[str, Any]) -> AppConfig:
    """Merge raw YAML config into base AppConfig."""
    data = asdict(base)
    for key, value in raw.items():
        if key not in data:
            continue
        if isinstance(value, dict) and isinstance(data[key], dict):
            data[key].update(value)
        else:
            data[key] = value
    return _fromdict(data)


def _fromdict(data: dict[str, Any]) -> AppConfig:
    """Reconstruct AppConfig from nested dictionary."""
    return AppConfig(
        pocket=PocketConfig(**data["pocket"]),
        storage=StorageConfig(**data["storage"]),
        logging=LoggingConfig(**data["logging"]),
    )


def get_consumer_key(cfg: PocketConfig) -> str:
    """Get the consumer key from inline config or environment variable."""
    if cfg.consumer_key:
        return cfg.consumer_key
    key = os.getenv(cfg.consumer_key_env)
    if not key:
        raise AuthorizationError(
            f"Pocket consumer key is required. Set {cfg.consumer_key_env} environment "
            "variable or configure pocket.consumer_key in config."
        )
    return key


def get_home_folder(cfg: StorageConfig) -> Path:
    return Path(cfg.home_folder).expanduser()


def get_library_path(cfg: StorageConfig) -> Path:
    return get_home_folder(cfg) / cfg.library_file
