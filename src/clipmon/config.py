import logging
import os
from dataclasses import dataclass
from pathlib import Path

import yaml

logger = logging.getLogger(__name__)

CONFIG_DIR = Path(os.environ.get("CLIPMON_HOME", Path.home() / ".clipmon"))
CONFIG_PATH = CONFIG_DIR / "config.yaml"
DEFAULT_DB_PATH = CONFIG_DIR / "database.sqlite"
LOG_PATH = CONFIG_DIR / "clipmon.log"

POLL_INTERVAL = 0.5  # seconds between clipboard checks
LANGUAGE_MIN_LENGTH = 10  # language detection needs more characters than this
LONG_TEXT_THRESHOLD = 100  # single-line text longer than this is long_text
LOG_PREVIEW_LENGTH = 50  # characters of content shown in log lines

SAMPLE_CONFIG = """\
# ClipMon Configuration File
#
# Database path - where clipboard history will be stored
# Use ~ for home directory expansion or absolute paths
database_path: "{database_path}"

# You can also use absolute paths:
# database_path: "/Users/username/Documents/clipboard.sqlite"
"""


@dataclass(frozen=True)
class Configuration:
    database_path: str = str(DEFAULT_DB_PATH)


def expand_path(path: str) -> str:
    return os.path.expanduser(path)


def load_configuration(path: str | Path | None = None) -> Configuration:
    """Load configuration from a YAML file, falling back to defaults.

    A missing, unreadable or malformed file is not an error: the default
    configuration is returned and the reason is logged.
    """
    config_path = Path(path) if path else CONFIG_PATH
    if not config_path.exists():
        logger.info("Config file not found, using default settings")
        logger.debug("Expected config path: %s", config_path)
        return Configuration()

    try:
        with open(config_path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, UnicodeDecodeError, yaml.YAMLError) as e:
        logger.error("Error reading config file, using defaults: %s", e)
        return Configuration()

    if data is None:
        return Configuration()
    if not isinstance(data, dict):
        logger.error("Config file %s is not a mapping, using defaults", config_path)
        return Configuration()

    logger.info("Config file loaded successfully")
    config = Configuration()
    for key, value in data.items():
        if key == "database_path":
            if not isinstance(value, str) or not value.strip():
                logger.warning("Ignoring invalid database_path: %r", value)
                continue
            config = Configuration(database_path=expand_path(value.strip()))
            logger.debug("Config: database_path set to %s", config.database_path)
        else:
            logger.warning("Unknown config key: %s", key)
    return config


def create_sample_config(path: str | Path | None = None) -> bool:
    """Write the sample config file if none exists. Returns True if written."""
    config_path = Path(path) if path else CONFIG_PATH
    if config_path.exists():
        return False
    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)
        config_path.write_text(SAMPLE_CONFIG.format(database_path=DEFAULT_DB_PATH), encoding="utf-8")
    except OSError as e:
        logger.error("Failed to create sample config file: %s", e)
        return False
    logger.info("Created sample config file")
    logger.debug("Config file path: %s", config_path)
    return True
