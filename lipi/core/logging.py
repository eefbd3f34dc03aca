import logging
import sys

from lipi.core.config import settings


def configure_logging(level: str = None):
    root = logging.getLogger()
    if root.handlers:
        return
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s"))
    root.setLevel((level or settings.LOG_LEVEL).upper())
    root.addHandler(handler)
    logging.getLogger("aksharamukha").setLevel(logging.WARNING)
