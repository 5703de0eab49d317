"""Runtime configuration read from the environment (and ``.env.local``)."""

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

REPO_ROOT = Path(__file__).resolve().parent.parent

OPENROUTER_API_URL = "https://openrouter.ai/api/v1"
DEFAULT_MODEL = "x-ai/grok-4-fast:free"

LANGUAGE_INSTRUCTIONS = {
    "en": "Respond in English.",
    "sv": "Respond in Swedish.",
}


@dataclass(frozen=True)
class AppConfig:
    """Settings shared by the pipeline, the watchers and the API server."""

    api_key: str = ""
    model: str = DEFAULT_MODEL
    language: str = "en"
    api_url: str = OPENROUTER_API_URL
    timeout: float = 15.0
    clipboard_interval: float = 0.5
    presence_interval: float = 0.5
    work_area: tuple[int, int] | None = None
    host: str = "127.0.0.1"
    port: int = 5577

    @property
    def language_instruction(self) -> str:
        return LANGUAGE_INSTRUCTIONS.get(self.language, LANGUAGE_INSTRUCTIONS["en"])


def parse_work_area(value: str | None) -> tuple[int, int] | None:
    """Parse ``"1920x1080"`` into ``(1920, 1080)``.

    Returns None for an unset value. A malformed value raises ValueError so a
    typo in ``.env.local`` is noticed at startup.
    """
    if not value or not value.strip():
        return None
    width, sep, height = value.strip().lower().partition("x")
    if not sep:
        msg = f"ISLAND_WORK_AREA must look like 1920x1080, got {value!r}"
        raise ValueError(msg)
    return int(width), int(height)


def load_local_env() -> None:
    load_dotenv(dotenv_path=REPO_ROOT / ".env.local", override=False)


def load_config() -> AppConfig:
    """Build an :class:`AppConfig` from environment variables.

    ``.env.local`` in the repository root is loaded first; variables already
    set in the process environment win.
    """
    load_local_env()
    return AppConfig(
        api_key=os.getenv("OPENROUTER_API_KEY", "").strip(),
        model=os.getenv("ISLAND_MODEL") or DEFAULT_MODEL,
        language=(os.getenv("ISLAND_LANGUAGE") or "en").strip().lower(),
        api_url=(os.getenv("ISLAND_API_URL") or OPENROUTER_API_URL).rstrip("/"),
        timeout=float(os.getenv("ISLAND_TIMEOUT", "15")),
        clipboard_interval=float(os.getenv("ISLAND_CLIPBOARD_INTERVAL", "0.5")),
        presence_interval=float(os.getenv("ISLAND_PRESENCE_INTERVAL", "0.5")),
        work_area=parse_work_area(os.getenv("ISLAND_WORK_AREA")),
        host=os.getenv("ISLAND_HOST", "127.0.0.1"),
        port=int(os.getenv("ISLAND_PORT", "5577")),
    )
