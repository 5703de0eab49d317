import logging
import os
from pathlib import Path

__all__ = ["build_logger", "logger"]

LOG_DIR = Path(os.getenv("ISLAND_LOG_DIR", "./log"))
LOG_FILE = "island.log"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def build_logger(
    name: str,
    log_dir: Path,
    level: str = "INFO",
) -> logging.Logger:
    """Return ``name``'s logger writing to ``log_dir/island.log``.

    Calling it again for a configured logger returns it unchanged.
    """
    log = logging.getLogger(name)
    if log.handlers:
        return log
    log.setLevel(level.upper())
    log_dir.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(log_dir / LOG_FILE, encoding="utf-8")
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    log.addHandler(handler)
    return log


logger = build_logger(
    "dynamic_island",
    LOG_DIR,
    os.getenv("ISLAND_LOG_LEVEL", "INFO"),
)
