"""Clipboard-backed content source with change de-duplication."""

from collections.abc import Callable
from dataclasses import dataclass

import pyperclip

from dynamic_island.errors import IslandError
from dynamic_island.model.models import CapturedContent, ContentSourceKind
from dynamic_island.watchers.logger import logger


class EmptyClipboardError(IslandError):
    """Raised by the manual analyze trigger when the clipboard is blank."""


@dataclass
class ClipboardState:
    """Last clipboard value accepted by the poller.

    Doubles as the "currently highlighted text" context for action requests.
    """

    last_observed: str = ""


def read_clipboard() -> str:
    """Return the clipboard text, or "" when no clipboard backend works."""
    try:
        text = pyperclip.paste()
    except pyperclip.PyperclipException as exc:
        logger.warning("Clipboard unavailable: %s", exc)
        return ""
    return text or ""


class ContentSource:
    """Produces candidate text for the completion pipeline."""

    def __init__(
        self,
        state: ClipboardState | None = None,
        reader: Callable[[], str] = read_clipboard,
    ) -> None:
        self.state = state or ClipboardState()
        self.reader = reader

    @property
    def current_clipboard(self) -> str:
        return self.state.last_observed

    def poll_clipboard(self) -> CapturedContent | None:
        """Return new content if the clipboard changed to non-blank text."""
        text = self.reader()
        if text == self.state.last_observed or not text.strip():
            return None
        self.state.last_observed = text
        return CapturedContent(text=text, source=ContentSourceKind.CLIPBOARD)

    def trigger_manual_analyze(self) -> CapturedContent:
        text = self.reader()
        if not text.strip():
            msg = "Clipboard is empty. Copy some text and try again."
            raise EmptyClipboardError(msg)
        return CapturedContent(text=text, source=ContentSourceKind.MANUAL)

    def submit_voice_query(self, text: str) -> CapturedContent:
        return CapturedContent(text=text, source=ContentSourceKind.VOICE)
