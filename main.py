"""
Weathervane - location and weather resolution from the command line.

Resolves a location hint (coordinates, IP address or free text) to
coordinates and prints normalized weather as JSON.
"""

import argparse
import asyncio
import logging
import os
import sys
from typing import Any, Dict, List, Optional

from internal.config.manager import ConfigManager
from internal.weather import WeatherResolutionService, buildWeatherService
from lib import utils
from lib.geolocation import Coordinate
from lib.logging_utils import initLogging
from lib.provider_chain import Failure, ProviderOutcome, Success

# Configure basic logging first
logging.basicConfig(format="%(asctime)s - %(name)s - %(levelname)s - %(message)s", level=logging.INFO)
# set higher logging level for httpx to avoid all GET requests being logged
logging.getLogger("httpx").setLevel(logging.WARNING)
logger = logging.getLogger(__name__)


class Weathervane:
    """Wires configuration, logging and the resolution service together."""

    def __init__(self, configPath: str = "config.toml", configDirs: Optional[List[str]] = None):
        self.configManager = ConfigManager(configPath, configDirs)
        initLogging(self.configManager.getLoggingConfig())
        self.service: WeatherResolutionService = buildWeatherService(self.configManager)

    async def _runOperation(self, args: argparse.Namespace) -> ProviderOutcome[Any]:
        if args.lat is not None:
            coordinate = Coordinate(longitude=args.lng, latitude=args.lat)
            if args.reverse:
                return Success(await self.service.reverseGeocode(coordinate))

            address, weatherOutcome = await asyncio.gather(
                self.service.reverseGeocode(coordinate),
                self.service.resolveByCoordinates(coordinate),
            )
            if isinstance(weatherOutcome, Failure):
                return weatherOutcome
            return Success({"address": address, "weather": weatherOutcome.value})

        if args.query is not None:
            if args.search_only:
                return Success(await self.service.resolveByQuery(args.query))
            return await self.service.resolveWeatherByQuery(args.query)

        if args.search_only:
            return await self.service.resolveByIP(args.ip)
        return await self.service.resolveWeatherByIP(args.ip)

    async def run(self, args: argparse.Namespace) -> int:
        """Run single operation and print its result, returns exit code"""
        self.service.initialize()
        try:
            outcome = await self._runOperation(args)
        finally:
            await self.service.shutdown()

        if isinstance(outcome, Failure):
            logger.error(f"Resolution failed: {outcome.reason}")
            print(utils.jsonDumps({"error": outcome.reason}, indent=2))
            return 1

        print(utils.jsonDumps(outcome.value, indent=2))
        return 0


def parse_arguments():
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Weathervane - resolve a location hint and print normalized weather as JSON"
    )
    parser.add_argument(
        "-c",
        "--config",
        default="config.toml",
        help="Path to configuration file (default: config.toml)",
    )
    parser.add_argument(
        "--config-dir",
        action="append",
        help="Directory to search for .toml config files recursively (can be specified multiple times)",
    )
    parser.add_argument("--lat", type=float, help="Latitude, requires --lng")
    parser.add_argument("--lng", type=float, help="Longitude, requires --lat")
    parser.add_argument("--ip", help='IP address to locate (default: "auto", the address this host is seen from)')
    parser.add_argument("-q", "--query", help="Free text place name, e.g. 杭州 or London")
    parser.add_argument(
        "--reverse",
        action="store_true",
        help="With --lat/--lng: print address line only",
    )
    parser.add_argument(
        "--search-only",
        action="store_true",
        help="With --query or --ip: print location candidates without weather",
    )
    parser.add_argument(
        "--print-config",
        action="store_true",
        help="Pretty-print loaded configuration and exit",
    )
    args = parser.parse_args()

    if (args.lat is None) != (args.lng is None):
        parser.error("--lat and --lng must be given together")
    if args.lat is not None and (args.query is not None or args.ip is not None):
        parser.error("--lat/--lng can not be combined with --query or --ip")
    if args.query is not None and args.ip is not None:
        parser.error("--query and --ip are mutually exclusive")
    if args.reverse and args.lat is None:
        parser.error("--reverse requires --lat and --lng")
    if args.lat is not None:
        try:
            Coordinate(longitude=args.lng, latitude=args.lat)
        except ValueError as e:
            parser.error(str(e))

    args.config = os.path.abspath(args.config)
    if args.config_dir:
        args.config_dir = [os.path.abspath(dirPath) for dirPath in args.config_dir]

    return args


def prettyPrintConfig(configManager: ConfigManager):
    """Pretty-print the loaded configuration."""
    print("=== Weathervane Configuration ===")
    print()

    config: Dict[str, Any] = configManager.config
    try:
        print(utils.jsonDumps(config, indent=2))
    except (TypeError, ValueError) as e:
        logger.warning(f"Could not serialize config as JSON: {e}")
        print("Raw configuration:")
        for key, value in sorted(config.items()):
            print(f"{key}: {value}")

    print()
    print("=== Configuration loaded successfully ===")


def main():
    """Main entry point."""
    args = parse_arguments()

    try:
        if args.print_config:
            prettyPrintConfig(ConfigManager(args.config, args.config_dir))
            sys.exit(0)

        app = Weathervane(configPath=args.config, configDirs=args.config_dir)
        sys.exit(asyncio.run(app.run(args)))
    except KeyboardInterrupt:
        logger.info("Stopped by user")
    except Exception as e:
        logger.error(f"Weathervane crashed: {e}")
        logger.exception(e)
        sys.exit(1)


if __name__ == "__main__":
    main()
