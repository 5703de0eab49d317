"""Hide the overlay while a fullscreen window has focus.

The monitor only reverses its own hides: when the overlay was hidden for any
other reason, leaving fullscreen does not bring it back.
"""

from collections.abc import Callable

from dynamic_island.model.models import PresenceState
from dynamic_island.ui.overlay import OverlayWindow
from dynamic_island.watchers.active_window import (
    WindowGeometry,
    get_active_window_geometry,
)
from dynamic_island.watchers.logger import logger

FAILURE_WARNING_TICKS = 20


class PresenceMonitor:
    def __init__(
        self,
        overlay: OverlayWindow,
        work_area: tuple[int, int],
        geometry_query: Callable[[], WindowGeometry | None] = (
            get_active_window_geometry
        ),
        failure_warning_ticks: int = FAILURE_WARNING_TICKS,
    ) -> None:
        self.overlay = overlay
        self.work_area = work_area
        self.geometry_query = geometry_query
        self.failure_warning_ticks = failure_warning_ticks
        self.state = PresenceState(visible=overlay.is_visible())
        self.consecutive_failures = 0

    def is_fullscreen(self, geometry: WindowGeometry) -> bool:
        width, height = self.work_area
        return geometry.width == width and geometry.height == height

    def tick(self) -> None:
        """Run one poll: query the active window and apply the transition."""
        try:
            geometry = self.geometry_query()
        except Exception:  # noqa: BLE001
            geometry = None
        if geometry is None:
            self._record_failure()
            return
        self.consecutive_failures = 0

        self.state.visible = self.overlay.is_visible()
        if self.state.visible:
            # shown again since any hide of ours
            self.state.hidden_for_fullscreen = False
        if self.is_fullscreen(geometry):
            if self.state.visible:
                logger.info(
                    "Fullscreen window detected (%s %dx%d), hiding overlay",
                    geometry.app or "unknown app",
                    geometry.width,
                    geometry.height,
                )
                self.overlay.hide()
                self.state.visible = False
                self.state.hidden_for_fullscreen = True
        elif not self.state.visible and self.state.hidden_for_fullscreen:
            logger.info("Fullscreen window left, showing overlay")
            self.overlay.show()
            self.overlay.focus()
            self.state.visible = True
            self.state.hidden_for_fullscreen = False

    def _record_failure(self) -> None:
        self.consecutive_failures += 1
        if self.consecutive_failures == self.failure_warning_ticks:
            logger.warning(
                "Active window geometry unavailable for %d consecutive polls",
                self.consecutive_failures,
            )
