"""
Centralized Logging Configuration

This module provides the logging setup for the relay service with separate
handlers for the different log streams.

Log Categories:
- Relay: File-based, one line per forwarded/filtered message
- Signals: File-based, signal extraction and validation steps
- Endpoints: File-based, inbound event intake
- Errors: File-based, errors only
- General: File-based, application-wide logs plus a console stream
"""

import logging
import sys
from datetime import datetime
from pathlib import Path


class ProductionLoggingConfig:
    """Production-ready logging configuration with separated log streams."""

    def __init__(self, log_dir: str = "logs"):
        self.log_dir = Path(log_dir)
        self.log_dir.mkdir(exist_ok=True)

        timestamp = datetime.now().strftime("%Y%m%d")
        self.log_files = {
            'relay': self.log_dir / f"relay_{timestamp}.log",
            'signals': self.log_dir / f"signals_{timestamp}.log",
            'endpoints': self.log_dir / f"endpoints_{timestamp}.log",
            'errors': self.log_dir / f"errors_{timestamp}.log",
            'general': self.log_dir / f"discord_relay_{timestamp}.log"
        }

        self._setup_loggers()

    def _setup_loggers(self):
        """Set up all logger configurations."""
        logging.getLogger().handlers.clear()

        root_logger = logging.getLogger()
        root_logger.setLevel(logging.INFO)

        self._create_formatters()
        self._setup_handlers()
        self._configure_specific_loggers()

    def _create_formatters(self):
        """Create formatters for different log types."""
        self.file_formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )

        self.console_formatter = logging.Formatter(
            '%(asctime)s - %(levelname)s - %(message)s',
            datefmt='%H:%M:%S'
        )

    def _file_handler(self, key: str, level: int, formatter: logging.Formatter) -> logging.FileHandler:
        handler = logging.FileHandler(self.log_files[key], encoding='utf-8')
        handler.setLevel(level)
        handler.setFormatter(formatter)
        return handler

    def _setup_handlers(self):
        """Set up file and console handlers."""
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(logging.INFO)
        console_handler.setFormatter(self.console_formatter)

        self.handlers = {
            'general': self._file_handler('general', logging.INFO, self.file_formatter),
            'relay': self._file_handler('relay', logging.INFO, self.console_formatter),
            'signals': self._file_handler('signals', logging.INFO, self.console_formatter),
            'endpoints': self._file_handler('endpoints', logging.INFO, self.file_formatter),
            'errors': self._file_handler('errors', logging.ERROR, self.file_formatter),
            'console': console_handler
        }

        # Root keeps a console stream and the error file for anything unrouted
        root_logger = logging.getLogger()
        root_logger.addHandler(self.handlers['console'])
        root_logger.addHandler(self.handlers['errors'])

    def _configure_specific_loggers(self):
        """Configure specific loggers with appropriate handlers."""
        # Reduce noise from third-party libraries
        for logger_name in ['httpx', 'httpcore', 'telegram', 'openai', 'uvicorn', 'uvicorn.access']:
            logging.getLogger(logger_name).setLevel(logging.WARNING)

        streams = {
            'relay': [
                'discord_relay.core',
                'discord_relay.rendering',
                'discord_relay.filtering',
                'discord_relay.delivery',
            ],
            'signals': [
                'discord_relay.signal_processing',
                'discord_relay.services.command_listener',
            ],
            'endpoints': [
                'discord_relay.endpoints',
            ],
            'general': [
                'discord_relay',
                'config',
            ],
        }

        # Stream loggers still propagate so the console and error file see them
        for stream, logger_names in streams.items():
            for logger_name in logger_names:
                logger = logging.getLogger(logger_name)
                logger.setLevel(logging.INFO)
                logger.addHandler(self.handlers[stream])


def setup_production_logging(log_dir: str = "logs") -> ProductionLoggingConfig:
    """Set up production logging configuration."""
    return ProductionLoggingConfig(log_dir)


def get_endpoint_logger() -> logging.Logger:
    """Get logger specifically for endpoints."""
    return logging.getLogger('discord_relay.endpoints')
