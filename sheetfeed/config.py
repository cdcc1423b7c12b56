"""
Configuration management for the feed service.
"""

import json
from pathlib import Path
from typing import Dict, Optional
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field

from sheetfeed.core.utils import sanitize_slug


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    feeds_config_path: str = Field(
        default="./feeds_config.json",
        validation_alias="FEEDS_CONFIG_PATH"
    )
    output_dir: str = Field(
        default="./output",
        validation_alias="FEED_OUTPUT_DIR"
    )
    gcp_service_account_key: Optional[str] = Field(
        default=None,
        validation_alias="GCP_SERVICE_ACCOUNT_KEY"
    )
    log_level: str = Field(
        default="INFO",
        validation_alias="LOG_LEVEL"
    )


_settings = Settings()


def load_feeds_config(config_path: Optional[str] = None) -> Dict:
    """
    Load feed profiles from JSON file.

    Args:
        config_path: Optional path to config file. If None, uses FEEDS_CONFIG_PATH.

    Returns:
        Dict with 'active' and 'feeds' keys.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        ValueError: If config is invalid.
    """
    path = Path(config_path or _settings.feeds_config_path)

    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)

    if not isinstance(data, dict):
        raise ValueError("Config must be a JSON object")

    if "feeds" not in data:
        raise ValueError("Config must have 'feeds' key")

    return data


def save_feeds_config(config_data: Dict, config_path: Optional[str] = None) -> None:
    """
    Save feed profiles to JSON file.

    Raises:
        ValueError: If config is invalid.
    """
    if not isinstance(config_data, dict):
        raise ValueError("Config must be a JSON object")

    if "feeds" not in config_data:
        raise ValueError("Config must have 'feeds' key")

    path = Path(config_path or _settings.feeds_config_path)
    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, "w", encoding="utf-8") as f:
        json.dump(config_data, f, indent=2, ensure_ascii=False)


def get_all_feeds(config_path: Optional[str] = None) -> Dict[str, Dict]:
    """Get all feed profiles, keyed by profile name."""
    config = load_feeds_config(config_path)
    return config.get("feeds", {})


def get_feed_config(feed_name: str, config_path: Optional[str] = None) -> Optional[Dict]:
    """
    Get a feed profile by name.

    Returns:
        Profile dict or None if not found.
    """
    return get_all_feeds(config_path).get(feed_name)


def get_active_feed(config_path: Optional[str] = None) -> Optional[str]:
    """Get the name of the active feed profile."""
    config = load_feeds_config(config_path)
    return config.get("active")


def generate_feed_id(feed_name: str) -> str:
    """Generate a stable feed_id (slug) from profile name."""
    return sanitize_slug(feed_name)


def validate_feed_config(config: Dict) -> tuple[bool, str]:
    """
    Validate a feed profile.

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not config:
        return False, "Feed config is empty"

    for field in ("spreadsheet_id", "category_sheet"):
        if not config.get(field) or not isinstance(config[field], str):
            return False, f"Missing or invalid field: {field}"

    sheet_names = config.get("sheet_names")
    if not sheet_names or not isinstance(sheet_names, list):
        return False, "sheet_names must be a non-empty list"

    if not all(isinstance(name, str) and name.strip() for name in sheet_names):
        return False, "sheet_names must contain only non-empty strings"

    if "only_available" in config and not isinstance(config["only_available"], bool):
        return False, "only_available must be true or false"

    columns = config.get("columns")
    if columns is not None:
        if not isinstance(columns, dict):
            return False, "columns must be an object"
        for key, value in columns.items():
            if not isinstance(value, int) or isinstance(value, bool) or value < 0:
                return False, f"Column '{key}' must be a non-negative integer"

    return True, ""


def get_settings() -> Settings:
    """Get application settings."""
    return _settings
