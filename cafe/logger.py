# logger.py
# file logging; the console belongs to the menus

import logging
import os
import sys
from datetime import datetime

from cafe import __version__
from cafe.config import LOG_DIR, LOG_LEVEL

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(log_dir: str = LOG_DIR, level: str = LOG_LEVEL) -> str:
    """configure the root logger to write a dated file; returns its path"""
    os.makedirs(log_dir, exist_ok=True)
    log_path = os.path.join(log_dir, f"cafe_{datetime.now():%Y%m%d}.log")
    logging.basicConfig(
        filename=log_path,
        level=getattr(logging, level, logging.INFO),
        format=LOG_FORMAT,
        datefmt=DATE_FORMAT,
        encoding="utf-8",
    )
    return log_path


def log_startup(target: str):
    """record interpreter and connection target at startup"""
    log = logging.getLogger("cafe")
    log.info("=" * 60)
    log.info("cafe-cli %s starting", __version__)
    log.info("python %s on %s", sys.version.split()[0], sys.platform)
    log.info("database: %s", target)
    log.info("=" * 60)
