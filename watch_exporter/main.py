"""Main application entry point for the filesystem watch exporter."""

import argparse
import asyncio
import signal
import sys
from concurrent.futures import ThreadPoolExecutor

from werkzeug.serving import make_server

from .collectors.file_watch_collector import FileWatchCollector
from .config.loader import ConfigLoader, ConfigurationError
from .config.models import ExporterConfig
from .config.settings import Settings
from .exposition.renderer import render
from .exposition.server import create_app
from .utils.logger import LOG_LEVELS, setup_logger


WALKER_THREADS = 4


class ExporterApp:
    """
    Main exporter application.

    Loads the configuration, wires the collector into the scrape endpoint
    and serves it until interrupted.
    """

    def __init__(self, config_path: str = "config/config.yaml", log_level: str = "INFO"):
        """
        Initialize exporter application.

        Args:
            config_path: Path to configuration file
            log_level: Logging level name

        Raises:
            SystemExit: If configuration is invalid
        """
        self.config_path = config_path
        self.logger = setup_logger("watch_exporter", log_level)
        self.server = None

        self.config = self._load_config()

        self.executor = ThreadPoolExecutor(
            max_workers=WALKER_THREADS,
            thread_name_prefix="walker"
        )
        self.collector = FileWatchCollector(
            self.config.file_watchers,
            self.logger,
            executor=self.executor
        )
        self.logger.info(f"Watching {len(self.config.file_watchers)} location(s)")

    def _load_config(self) -> ExporterConfig:
        """
        Load and validate configuration.

        Returns:
            ExporterConfig: Loaded configuration

        Raises:
            SystemExit: If configuration is invalid
        """
        try:
            self.logger.info(f"Loading configuration from {self.config_path}")
            config = ConfigLoader.load_from_file(self.config_path)
            self.logger.info("Configuration loaded successfully")
            return config

        except ConfigurationError as e:
            self.logger.error(f"Failed to load settings: {e}")
            sys.exit(1)

    def _signal_handler(self, signum, frame):
        """
        Handle shutdown signals.

        Args:
            signum: Signal number
            frame: Current stack frame
        """
        signal_name = signal.Signals(signum).name
        self.logger.info(f"Received {signal_name}, shutting down")
        sys.exit(0)

    def run_once(self) -> str:
        """
        Run one collect pass and return the rendered text.

        Returns:
            str: Metrics in the Prometheus text format
        """
        observations = asyncio.run(self.collector.collect())
        body, _ = render(observations, label_names=self.config.label_names())
        return body.decode("utf-8")

    def serve(self):
        """
        Serve the scrape endpoint until interrupted.

        Raises:
            SystemExit: If the listener cannot be bound
        """
        app = create_app(
            self.collector,
            label_names=self.config.label_names(),
            scrape_timeout=self.config.scrape_timeout_seconds,
            logger=self.logger
        )

        try:
            self.server = make_server(
                self.config.listen_address,
                self.config.listen_port,
                app,
                threaded=True
            )
        except OSError as e:
            self.logger.error(f"Failed to bind listener: {e}")
            sys.exit(1)

        signal.signal(signal.SIGTERM, self._signal_handler)
        signal.signal(signal.SIGINT, self._signal_handler)

        self.logger.info(
            f"Listening on {self.config.listen_address}:{self.server.server_port}"
        )
        try:
            self.server.serve_forever()
        finally:
            self.server.server_close()
            self.executor.shutdown(wait=False)
            self.logger.info("Shutting down")


def main():
    """
    CLI entry point.

    Parses command-line arguments and starts the exporter.
    """
    settings = Settings()

    parser = argparse.ArgumentParser(
        description='Prometheus exporter for filesystem watch status',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Serve /metrics using config/config.yaml
  watch-exporter

  # Print one scrape to stdout and exit
  watch-exporter --once

  # Use custom config file
  watch-exporter --config /etc/watch-exporter/config.yaml
        """
    )

    parser.add_argument(
        '--config',
        default=settings.CONFIG_PATH,
        help='Path to configuration file (default: config/config.yaml or WATCH_EXPORTER_CONFIG env var)'
    )

    parser.add_argument(
        '--once',
        action='store_true',
        help='Walk every watch once, print the metrics and exit'
    )

    parser.add_argument(
        '--log-level',
        default=settings.LOG_LEVEL.strip().upper() or 'INFO',
        choices=LOG_LEVELS,
        help='Logging level (default: INFO or LOG_LEVEL env var)'
    )

    args = parser.parse_args()

    # argparse does not check defaults against choices
    if args.log_level not in LOG_LEVELS:
        parser.error(
            f"invalid LOG_LEVEL {args.log_level!r} (choose from {', '.join(LOG_LEVELS)})"
        )

    app = ExporterApp(config_path=args.config, log_level=args.log_level)

    if args.once:
        sys.stdout.write(app.run_once())
        app.executor.shutdown(wait=True)
        sys.exit(0)

    app.serve()


if __name__ == '__main__':
    main()
