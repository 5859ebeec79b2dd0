import sys
import logging
from pythonjsonlogger import jsonlogger

PACKAGE_LOGGER = "ancstream"


def setup_logging(level="INFO", log_format="text"):
    """Sends the log records of the package to stdout

    Calling it again replaces the previous handler.
    """
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.setLevel(level)
    package_logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    if log_format == "json":
        formatter = jsonlogger.JsonFormatter(
            "%(asctime)s %(name)s %(levelname)s %(message)s"
        )
    elif log_format == "text":
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )
    else:
        raise ValueError(f"Invalid log format {log_format}")

    handler.setFormatter(formatter)
    package_logger.addHandler(handler)
    return package_logger
