import logging
import sys


def setup_logging(level: int | str = logging.INFO) -> None:
    """Log to stderr; stdout carries the MCP stdio stream."""
    logger = logging.getLogger()
    if logger.handlers:
        return
    logger.setLevel(level)
    h = logging.StreamHandler(sys.stderr)
    h.setFormatter(logging.Formatter(
        "%(asctime)s %(levelname)s %(name)s - %(message)s"
    ))
    logger.addHandler(h)
