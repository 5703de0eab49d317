from typing import cast

import mss  # pyright: ignore[reportMissingImports]

from dynamic_island.watchers.logger import logger


def get_primary_work_area() -> tuple[int, int]:
    """Return the primary monitor's (width, height)."""
    with mss.mss() as sct:
        monitors = sct.monitors
        chosen = cast(
            "dict[str, int]",
            monitors[1] if len(monitors) > 1 else monitors[0],
        )
        logger.info("Monitors detected: %s | chosen=%s", len(monitors) - 1, chosen)
        return chosen["width"], chosen["height"]
