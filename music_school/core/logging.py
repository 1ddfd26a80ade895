# music_school/core/logging.py
"""Logging configuration."""
import logging
import sys
from typing import Optional

from .config import settings

def setup_logging(level: Optional[str] = None):
    logging.basicConfig(
        level=(level or settings.log_level).upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )
