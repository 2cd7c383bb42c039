# utils.py
"""
Utility functions for the application framework.

This module provides logging setup and configuration loading. They are
used across the application but do not belong to the simulation core or
to rendering.
"""
import logging
import logging.handlers
import json
import os
from typing import Dict, Any, Optional

# --- Data Contracts ---
#
# setup_logging(config: Dict[str, Any]) -> None:
#   - Inputs:
#     - config: A dictionary with an optional "logging" section holding
#       "level", "format" and "log_file". A null log_file disables the
#       file handler.
#   - Side Effects: Configures the root logger with a console handler and,
#     unless disabled, a rotating file handler. Creates the log directory.
#
# load_config(path: str) -> Dict[str, Any]:
#   - Outputs: the parsed JSON object.
#   - Raises: FileNotFoundError, json.JSONDecodeError, or ValueError when the
#     top-level value is not an object.

LOG_MAX_BYTES = 1024 * 1024
LOG_BACKUP_COUNT = 5
DEFAULT_LOG_FORMAT = '%(asctime)s - %(levelname)s - %(message)s'
DEFAULT_LOG_FILE = 'logs/simulation.log'


def _rotating_file_handler(log_file_path: str, formatter: logging.Formatter) -> logging.Handler:
    log_dir = os.path.dirname(log_file_path)
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
    handler = logging.handlers.RotatingFileHandler(
        log_file_path, maxBytes=LOG_MAX_BYTES, backupCount=LOG_BACKUP_COUNT
    )
    handler.setFormatter(formatter)
    return handler


def setup_logging(config: Dict[str, Any]) -> None:
    """
    Points the root logger at the console and, optionally, a log file.

    Any handlers left over from an earlier call are dropped first, so
    calling this twice does not duplicate output.

    Args:
        config (Dict[str, Any]): The full application config. Only its
            "logging" section is read.
    """
    log_config = config.get('logging', {})
    log_level = log_config.get('level', 'INFO').upper()
    formatter = logging.Formatter(log_config.get('format', DEFAULT_LOG_FORMAT))
    log_file_path: Optional[str] = log_config.get('log_file', DEFAULT_LOG_FILE)

    root = logging.getLogger()
    root.setLevel(log_level)
    root.handlers.clear()

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    root.addHandler(console_handler)

    if log_file_path:
        root.addHandler(_rotating_file_handler(log_file_path, formatter))

    logging.info(f"Logging initialized at {log_level} -> {log_file_path or 'console only'}.")


def load_config(path: str) -> Dict[str, Any]:
    """
    Reads the application config from a JSON file.

    Runs before logging is configured, so errors are also re-raised for
    main() to report.
    """
    logging.info(f"Loading configuration from {path}...")
    try:
        with open(path, 'r') as f:
            config = json.load(f)
    except FileNotFoundError:
        logging.error(f"Configuration file not found at {path}.")
        raise
    except json.JSONDecodeError as e:
        logging.error(f"Malformed JSON in {path} (line {e.lineno}, column {e.colno}).")
        raise

    if not isinstance(config, dict):
        msg = f"Configuration in {path} must be a JSON object, got {type(config).__name__}."
        logging.error(msg)
        raise ValueError(msg)

    sections = ', '.join(sorted(config)) or 'none'
    logging.info(f"Configuration loaded (sections: {sections}).")
    return config
