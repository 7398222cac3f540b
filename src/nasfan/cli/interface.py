"""
Command Line Interface Module

This module provides the command-line entry point. Without arguments
it runs a single control cycle and prints every intermediate value;
with --service it keeps the fans under control until terminated.
"""

import argparse
import logging
import signal
import sys
from typing import List, Optional
import yaml

from ..control import ControlManager, DEFAULT_CONFIG
from ..hwmon import NoFanChannelsError

logger = logging.getLogger(__name__)

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
MANUAL_LOG_FORMAT = '%(message)s'

class CLI:
    """Command-line interface handler"""

    def __init__(self):
        """Initialize CLI handler"""
        self.parser = self._create_parser()
        self.manager: Optional[ControlManager] = None

    def _create_parser(self) -> argparse.ArgumentParser:
        """Create command-line argument parser

        Returns:
            Configured argument parser
        """
        parser = argparse.ArgumentParser(
            description="nasfan - NAS fan control from CPU and drive temperatures"
        )

        parser.add_argument(
            "--service",
            action="store_true",
            help="Run every 60 seconds until terminated, logging only errors"
        )

        parser.add_argument(
            "--debug",
            action="store_true",
            help="Enable debug logging"
        )

        parser.add_argument(
            "--show-config",
            action="store_true",
            help="Print the fan curve thresholds and exit"
        )

        return parser

    def _setup_logging(self, service: bool, debug: bool) -> None:
        """Configure logging for the selected mode

        Manual mode prints plain messages to stdout. Service mode keeps
        timestamps and stays silent below WARNING.
        """
        if debug:
            level = logging.DEBUG
        elif service:
            level = logging.WARNING
        else:
            level = logging.INFO

        logging.basicConfig(
            level=level,
            format=LOG_FORMAT if service else MANUAL_LOG_FORMAT,
            stream=sys.stdout
        )
        logging.getLogger('nasfan').setLevel(level)

    def _install_signal_handlers(self) -> None:
        def signal_handler(signum, frame):
            logger.info(f"Received signal {signum}, stopping")
            if self.manager:
                self.manager.stop()
        signal.signal(signal.SIGTERM, signal_handler)
        signal.signal(signal.SIGINT, signal_handler)

    def run(self, argv: Optional[List[str]] = None) -> int:
        """Run the CLI interface

        Args:
            argv: Command-line arguments (defaults to sys.argv)

        Returns:
            Process exit status
        """
        args = self.parser.parse_args(argv)

        if args.show_config:
            print(yaml.safe_dump(DEFAULT_CONFIG.as_dict(), sort_keys=False), end="")
            return 0

        self._setup_logging(service=args.service, debug=args.debug)
        self.manager = ControlManager(DEFAULT_CONFIG, verbose=not args.service)

        try:
            if args.service:
                self._install_signal_handlers()
                self.manager.run_forever()
            else:
                self.manager.run_cycle()
        except NoFanChannelsError as e:
            logger.error(str(e))
            return 1
        except KeyboardInterrupt:
            print("\nExiting...")

        return 0

def main() -> None:
    """Main entry point"""
    cli = CLI()
    sys.exit(cli.run())

if __name__ == "__main__":
    main()
