"""
Configuration management for Weathervane.
"""

import logging
import os
import re
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

import tomli

import lib.utils as utils

logger = logging.getLogger(__name__)

ENV_PLACEHOLDER_RE = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_-]*)\}")


def replaceMatchToEnv(match: re.Match[str]) -> str:
    """Value of ${VAR} placeholder, unset variables keep the placeholder as is"""
    return os.getenv(match.group(1), match.group(0))


def substituteEnvVars(value: Any) -> Any:
    """Recursively substitute ${VAR_NAME} placeholders in strings, dicts and lists.

    Args:
        value: Configuration value of any type

    Returns:
        New value with placeholders replaced, non-container values
        other than strings are returned unchanged
    """
    if isinstance(value, str):
        return ENV_PLACEHOLDER_RE.sub(replaceMatchToEnv, value)
    elif isinstance(value, dict):
        return {k: substituteEnvVars(v) for k, v in value.items()}
    elif isinstance(value, list):
        return [substituteEnvVars(item) for item in value]
    return value


class ConfigManager:
    """Loads Weathervane configuration

    Sources, later ones override earlier ones:
        1. Main TOML file (optional, every setting has a default)
        2. *.toml files found recursively in config directories, in sorted order

    ${VAR} placeholders are substituted from the environment after the
    optional .env file has been loaded.
    """

    def __init__(
        self, configPath: str = "config.toml", configDirs: Optional[List[str]] = None, dotEnvFile: str = ".env"
    ):
        self.configPath = configPath
        self.configDirs = configDirs or []
        utils.load_dotenv(path=dotEnvFile)
        self.config: Dict[str, Any] = substituteEnvVars(self._loadConfig())

    def _findTomlFilesRecursive(self, directory: str) -> List[Path]:
        """Find all .toml files under directory, sorted for stable merge order"""
        dirPath = Path(directory)

        if not dirPath.is_dir():
            logger.warning(f"Config directory {directory} does not exist or is not a directory, skipping")
            return []

        tomlFiles = sorted(path for path in dirPath.rglob("*.toml") if path.is_file())
        for tomlFile in tomlFiles:
            logger.debug(f"Found config file: {tomlFile}")
        return tomlFiles

    def _mergeConfigs(self, baseConfig: Dict[str, Any], newConfig: Dict[str, Any]) -> Dict[str, Any]:
        """Recursively merge newConfig over baseConfig"""
        merged = baseConfig.copy()

        for key, value in newConfig.items():
            if isinstance(merged.get(key), dict) and isinstance(value, dict):
                merged[key] = self._mergeConfigs(merged[key], value)
            else:
                merged[key] = value

        return merged

    def _loadConfig(self) -> Dict[str, Any]:
        """
        Load main config file and merge config directories over it.

        Broken files in config directories are logged and skipped, a broken
        main file is fatal.

        Raises:
            SystemExit: If the main configuration file can not be parsed
        """
        config: Dict[str, Any] = {}

        configFile = Path(self.configPath)
        if configFile.is_file():
            try:
                with open(configFile, "rb") as f:
                    config = tomli.load(f)
            except (OSError, tomli.TOMLDecodeError) as e:
                logger.error(f"Failed to load configuration {self.configPath}: {e}")
                sys.exit(1)
            logger.info(f"Loaded main config from {self.configPath}")
        else:
            logger.warning(f"Configuration file {self.configPath} not found, using defaults")

        for configDir in self.configDirs:
            tomlFiles = self._findTomlFilesRecursive(configDir)
            logger.info(f"Found {len(tomlFiles)} .toml files in {configDir}")

            for tomlFile in tomlFiles:
                try:
                    with open(tomlFile, "rb") as f:
                        dirConfig = tomli.load(f)
                except (OSError, tomli.TOMLDecodeError) as e:
                    logger.error(f"Failed to load config file {tomlFile}: {e}")
                    continue

                config = self._mergeConfigs(config, dirConfig)
                logger.info(f"Merged config from {tomlFile}")

        return config

    def get(self, key: str, default=None) -> Any:
        """Get top level configuration value by key."""
        return self.config.get(key, default)

    def getLoggingConfig(self) -> Dict[str, Any]:
        """Get [logging] section, see lib.logging_utils for the keys."""
        return self.get("logging", {})

    def getWeatherConfig(self) -> Dict[str, Any]:
        """
        Get [weather] section

        Keys:
            caiyun-token: Caiyun API token (empty - offline demo data)
            api-base: Caiyun API base URL
            daily-steps: Forecast days to request (1-7)
            timeout: Weather provider timeout in seconds
        """
        return self.get("weather", {})

    def getGeolocationConfig(self) -> Dict[str, Any]:
        """
        Get [geolocation] section

        Keys:
            amap-key: AMap API key (empty - AMap search disabled)
            ip-timeout, reverse-timeout, search-timeout: Chain default timeouts in seconds
            nominatim-country-codes: Comma separated ISO codes limiting Nominatim search
            accept-language: Language of Nominatim and ip-api answers
            user-agent: User-Agent sent to public services
        """
        return self.get("geolocation", {})

    def getCacheConfig(self) -> Dict[str, Any]:
        """
        Get [cache] section

        Keys:
            ttl: Weather cache TTL, seconds or delay string ("5m")
            max-size: Maximum number of cached coordinates
        """
        return self.get("cache", {})
