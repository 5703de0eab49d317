from typing import Protocol

from dynamic_island.model.models import MessageKind
from dynamic_island.ui.notifications import NotificationChannel


class OverlayWindow(Protocol):
    def is_visible(self) -> bool: ...

    def hide(self) -> None: ...

    def show(self) -> None: ...

    def focus(self) -> None: ...


class OverlayProxy:
    """Stand-in for the overlay window, which lives in the UI process.

    Visibility changes requested by the core are published as
    ``overlay-visibility`` messages; changes the user makes in the UI are
    reported back through :meth:`set_visible` and publish nothing.
    """

    def __init__(self, channel: NotificationChannel, *, visible: bool = True) -> None:
        self.channel = channel
        self._visible = visible

    def is_visible(self) -> bool:
        return self._visible

    def hide(self) -> None:
        self._visible = False
        self.channel.publish(MessageKind.OVERLAY_VISIBILITY, {"visible": False})

    def show(self) -> None:
        self._visible = True
        self.channel.publish(MessageKind.OVERLAY_VISIBILITY, {"visible": True})

    def focus(self) -> None:
        self.channel.publish(
            MessageKind.OVERLAY_VISIBILITY,
            {"visible": self._visible, "focus": True},
        )

    def set_visible(self, *, visible: bool) -> None:
        self._visible = visible
