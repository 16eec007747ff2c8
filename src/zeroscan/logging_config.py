# Licensed under the Apache License, Version 2.0
import logging
import os
from typing import Optional

# Diagnostics come from the walker (MainThread), zeroscan-worker-N,
# zeroscan-results and zeroscan-rate, so the thread name leads each line.
LOG_FORMAT = "%(asctime)s %(levelname)s [%(threadName)s] %(name)s: %(message)s"


def setup_logging(level_name: Optional[str] = None) -> None:
    level_name = (level_name or os.getenv("ZEROSCAN_LOG_LEVEL", "INFO")).upper()
    level = getattr(logging, level_name, logging.INFO)
    logging.basicConfig(level=level, format=LOG_FORMAT)
