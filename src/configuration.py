"""
src/configuration.py
User configuration: table overrides and logging preferences, persisted as JSON.
"""

import json
import os
import sys
from typing import Tuple
from pydantic import BaseModel, ValidationError
from src import constants
from src.logger import create_logger

logger = create_logger()


class Features(BaseModel):
    custom_tables_enabled: bool = False


class Settings(BaseModel):
    synergy_rules_path: str = ""
    strategy_catalog_path: str = ""
    debug_logging: bool = False


class Configuration(BaseModel):
    features: Features = Features()
    settings: Settings = Settings()


def get_config_path() -> str:
    """Return the OS-specific location of the configuration file, creating its folder if needed"""
    if sys.platform == constants.PLATFORM_ID_WINDOWS:
        base_dir = os.environ.get("APPDATA", os.path.expanduser("~"))
    elif sys.platform == constants.PLATFORM_ID_OSX:
        base_dir = os.path.expanduser("~/Library/Application Support")
    else:
        base_dir = os.path.expanduser("~/.config")

    config_dir = os.path.join(base_dir, constants.APPLICATION_NAME)
    if not os.path.exists(config_dir):
        os.makedirs(config_dir)

    return os.path.join(config_dir, constants.CONFIG_FILE_NAME)


def read_configuration(file_location: str = "") -> Tuple[Configuration, bool]:
    """Read the configuration file; falls back to the defaults if it's missing or malformed"""
    file_location = file_location or get_config_path()
    try:
        with open(file_location, "r", encoding="utf-8") as data:
            config_data = json.load(data)
        return Configuration.model_validate(config_data), True
    except FileNotFoundError:
        logger.info(f"No configuration file at {file_location}, using defaults")
    except (OSError, json.JSONDecodeError, ValidationError) as error:
        logger.error(f"Failed to read configuration from {file_location}: {error}")

    return Configuration(), False


def write_configuration(config: Configuration, file_location: str = "") -> bool:
    """Write the configuration to disk"""
    file_location = file_location or get_config_path()
    try:
        with open(file_location, "w", encoding="utf-8") as file:
            json.dump(config.model_dump(), file, indent=4)
    except (OSError, TypeError) as error:
        logger.error(f"Failed to write configuration to {file_location}: {error}")
        return False

    return True


def reset_configuration(file_location: str = "") -> bool:
    """Overwrite the configuration file with the defaults"""
    return write_configuration(Configuration(), file_location)
