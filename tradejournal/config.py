"""Configuration loading for TradeJournal.

Settings live in ``~/.config/tradejournal/config.toml``. The directory can
be moved with the ``TRADEJOURNAL_HOME`` environment variable.
"""

import logging
import os
from pathlib import Path
from typing import Optional

import toml

logger = logging.getLogger(__name__)


def get_config_dir() -> Path:
    """Directory holding the config file and the journal database."""
    override = os.environ.get("TRADEJOURNAL_HOME")
    if override:
        return Path(override).expanduser()
    return Path.home() / ".config" / "tradejournal"


def get_config_path() -> Path:
    return get_config_dir() / "config.toml"


def load_config() -> Optional[dict]:
    """Load the config file.

    Returns:
        Config dict, or None if the file is missing or unreadable.
    """
    config_path = get_config_path()

    if not config_path.exists():
        return None

    try:
        return toml.load(config_path)
    except (OSError, toml.TomlDecodeError) as e:
        logger.warning("Could not read config %s: %s", config_path, e)
        return None


def create_template_config() -> Path:
    """Write a template configuration file and return its path."""
    config_dir = get_config_dir()
    config_path = config_dir / "config.toml"

    config_dir.mkdir(parents=True, exist_ok=True)

    template = {
        "openai": {
            "api_key": "",  # Leave empty to use OPENAI_API_KEY env var
            "model": "",  # Leave empty to use OPENAI_MODEL env var or the default
        },
        "journal": {
            "db_path": str(config_dir / "journal.db"),
        },
    }

    with open(config_path, "w") as f:
        toml.dump(template, f)

    return config_path


def get_db_path(config: Optional[dict] = None) -> Path:
    """Path of the journal database."""
    configured = (config or {}).get("journal", {}).get("db_path")
    if configured:
        return Path(configured).expanduser()
    return get_config_dir() / "journal.db"
