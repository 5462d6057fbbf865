import logging
import os
import sys
from typing import List

from ..configuration.config import Config

PACKAGE_LOGGER = "reqforge"

CONSOLE_FORMAT = "%(message)s"
FILE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class Logger:
    @staticmethod
    def configure_logger(config: Config) -> logging.Logger:
        """
        Attach console and file handlers to the ``reqforge`` logger.

        The root logger is left alone so an embedding application keeps its own
        logging setup. Calling this again replaces the handlers from the previous call.

        Returns:
            The configured package logger.
        """
        log_level = logging.DEBUG if config.debug else logging.INFO

        stdout_handler = logging.StreamHandler(sys.stdout)
        stdout_handler.setLevel(log_level)
        stdout_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))

        # One log file per environment, e.g. "logs/dev.log"
        full_log_path = os.path.join(config.log_folder, f"{config.env.value}.log")
        os.makedirs(os.path.dirname(full_log_path), exist_ok=True)

        file_handler = MultilineFileHandler(full_log_path)
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT))

        package_logger = logging.getLogger(PACKAGE_LOGGER)
        for handler in package_logger.handlers[:]:
            package_logger.removeHandler(handler)
            handler.close()
        package_logger.setLevel(logging.DEBUG)
        package_logger.addHandler(stdout_handler)
        package_logger.addHandler(file_handler)
        package_logger.propagate = False

        # requests logs every connection through urllib3
        logging.getLogger("urllib3").setLevel(logging.WARNING)
        return package_logger

    @staticmethod
    def get_logger(name: str):
        return logging.getLogger(name)


class MultilineFileHandler(logging.FileHandler):
    """Writes each non-blank line of a message as its own record, so every line carries the prefix."""

    def __init__(self, filename, mode="a", encoding="utf-8", delay=False):
        super().__init__(filename, mode, encoding, delay)

    def emit(self, record):
        try:
            messages: List[str] = [line for line in record.getMessage().split("\n") if line.strip()]
            for message in messages:
                line_record = logging.makeLogRecord(record.__dict__)
                line_record.msg = message
                line_record.args = None
                super().emit(line_record)
        except Exception:
            self.handleError(record)
