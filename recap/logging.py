import logging
import sys
from typing import TextIO

from pythonjsonlogger.json import JsonFormatter


def setup_logging(level: str = "INFO", *, stream: TextIO | None = None) -> logging.Logger:
    """
    Configures structured JSON logging for the application.

    Installs a single stream handler (stdout unless ``stream`` is given) with a
    JSON formatter on the root logger and on the uvicorn loggers, replacing
    their existing handlers so every line has the same shape.

    Returns:
        logging.Logger: The configured root logger instance.
    """
    formatter = JsonFormatter("%(asctime)s %(levelname)s %(name)s %(message)s")
    stream_handler = logging.StreamHandler(stream if stream is not None else sys.stdout)
    stream_handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers = []
    root_logger.addHandler(stream_handler)

    for logger_name in ["uvicorn", "uvicorn.access", "uvicorn.error"]:
        u_logger = logging.getLogger(logger_name)
        u_logger.setLevel(level)
        u_logger.handlers = []
        u_logger.addHandler(stream_handler)
        u_logger.propagate = False

    return root_logger
