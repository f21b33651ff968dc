import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import ClassVar, Optional, TextIO

from pythonjsonlogger import jsonlogger


class ColorFormatter(logging.Formatter):
    """A logging formatter that adds color to the output."""

    grey = "\x1b[38;20m"
    blue = "\x1b[34;20m"
    yellow = "\x1b[33;20m"
    red = "\x1b[31;20m"
    bold_red = "\x1b[31;1m"
    reset = "\x1b[0m"

    format_str = "%(asctime)s - [%(levelname)s] - %(name)s:%(lineno)d - %(message)s"

    FORMATS: ClassVar[dict[int, str]] = {
        logging.DEBUG: grey + format_str + reset,
        logging.INFO: blue + format_str + reset,
        logging.WARNING: yellow + format_str + reset,
        logging.ERROR: red + format_str + reset,
        logging.CRITICAL: bold_red + format_str + reset,
    }

    def format(self, record):
        log_fmt = self.FORMATS.get(record.levelno, self.format_str)
        formatter = logging.Formatter(log_fmt, datefmt="%Y-%m-%d %H:%M:%S")
        return formatter.format(record)


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    def add_fields(self, log_record, record, message_dict):
        super().add_fields(log_record, record, message_dict)
        log_record["@timestamp"] = log_record.pop("asctime", None)
        log_record["level"] = log_record.pop("levelname", record.levelname)
        log_record["logger"] = log_record.pop("name", record.name)


def _resolve_level(default: int = logging.INFO) -> int:
    name = os.getenv("SORTABLE_IDS_LOG_LEVEL", "").upper()
    level = logging.getLevelName(name) if name else default
    return level if isinstance(level, int) else default


def setup_logging(stream: Optional[TextIO] = None) -> logging.Logger:
    """
    Sets up logging for the ``sortable_ids`` package.
    - Level comes from SORTABLE_IDS_LOG_LEVEL (default INFO).
    - Console records go to ``stream`` (stdout when omitted).
    - Console output is JSON when USE_JSON_LOGS is true and the stream is not a TTY,
      colored on a TTY, plain otherwise.
    - SORTABLE_IDS_LOG_FILE adds a rotating file handler.
    - Calling it again replaces the previously installed handlers.
    """
    stream = stream or sys.stdout
    is_tty = stream.isatty()
    use_json_logs = os.getenv("USE_JSON_LOGS", "true").lower() == "true" and not is_tty

    package_logger = logging.getLogger("sortable_ids")
    if package_logger.hasHandlers():
        package_logger.handlers.clear()

    package_logger.setLevel(_resolve_level())
    package_logger.propagate = False

    plain_formatter = logging.Formatter(
        "%(asctime)s - [%(levelname)s] - %(name)s:%(lineno)d - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    json_formatter = CustomJsonFormatter("%(asctime)s %(name)s %(levelname)s %(message)s")

    console_handler = logging.StreamHandler(stream)
    if use_json_logs:
        console_handler.setFormatter(json_formatter)
    elif is_tty:
        console_handler.setFormatter(ColorFormatter())
    else:
        console_handler.setFormatter(plain_formatter)
    package_logger.addHandler(console_handler)

    log_file = os.getenv("SORTABLE_IDS_LOG_FILE")
    if log_file:
        log_file_path = Path(log_file)
        log_file_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_file_path, maxBytes=5 * 1024 * 1024, backupCount=3
        )
        file_handler.setFormatter(json_formatter if use_json_logs else plain_formatter)
        package_logger.addHandler(file_handler)
        package_logger.debug(f"Logging initialized. Logs will be written to {log_file_path}.")

    return package_logger
