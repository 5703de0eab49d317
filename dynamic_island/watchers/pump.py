import asyncio
from collections.abc import Callable

import uvicorn
from fastapi.concurrency import run_in_threadpool

from dynamic_island.config import load_config
from dynamic_island.watchers.logger import logger


async def poll_forever(tick: Callable[[], object], interval: float, name: str) -> None:
    """Call ``tick`` every ``interval`` seconds until cancelled.

    Ticks run in the threadpool so clipboard and xdotool calls never block
    the event loop. A failing tick is logged and the loop keeps going.
    """
    logger.info("Poller %s started | interval=%.2fs", name, interval)
    while True:
        try:
            await run_in_threadpool(tick)
        except Exception:
            logger.exception("Poller %s tick failed", name)
        await asyncio.sleep(interval)


def main() -> None:
    """Serve the trigger API; the pollers start with the app."""
    config = load_config()
    uvicorn.run("dynamic_island.api.main:app", host=config.host, port=config.port)


if __name__ == "__main__":
    main()
