from __future__ import annotations

import logging
import sys
from typing import Optional

from src.core.config import get_settings


def configure_logging(level: Optional[str] = None) -> None:
    log_level = level or get_settings().log_level or "INFO"
    logging.basicConfig(
        level=log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )
