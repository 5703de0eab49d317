import logging

import pytest

from dynamic_island.model.models import MessageKind
from dynamic_island.ui.notifications import NotificationChannel
from dynamic_island.ui.overlay import OverlayProxy
from dynamic_island.watchers.active_window import WindowGeometry
from dynamic_island.watchers.presence import PresenceMonitor

WORK_AREA = (1920, 1080)
FULLSCREEN = WindowGeometry(x=0, y=0, width=1920, height=1080, app="mpv")
WINDOWED = WindowGeometry(x=100, y=100, width=800, height=600)


class FakeOverlay:
    def __init__(self, *, visible=True):
        self.visible = visible
        self.calls = []

    def is_visible(self):
        return self.visible

    def hide(self):
        self.visible = False
        self.calls.append("hide")

    def show(self):
        self.visible = True
        self.calls.append("show")

    def focus(self):
        self.calls.append("focus")


class ScriptedGeometry:
    def __init__(self, *results):
        self.results = list(results)

    def __call__(self):
        result = self.results.pop(0)
        if isinstance(result, Exception):
            raise result
        return result


def make_monitor(overlay, *results, **kwargs):
    return PresenceMonitor(
        overlay,
        WORK_AREA,
        geometry_query=ScriptedGeometry(*results),
        **kwargs,
    )


class TestPresenceMonitor:
    """Fullscreen hysteresis tests"""

    def test_initial_state(self):
        monitor = make_monitor(FakeOverlay())
        assert monitor.state.visible is True
        assert monitor.state.hidden_for_fullscreen is False

    def test_hide_on_fullscreen(self):
        overlay = FakeOverlay()
        monitor = make_monitor(overlay, FULLSCREEN)

        monitor.tick()

        assert overlay.calls == ["hide"]
        assert monitor.state.visible is False
        assert monitor.state.hidden_for_fullscreen is True

    def test_repeated_fullscreen_hides_once(self):
        overlay = FakeOverlay()
        monitor = make_monitor(overlay, FULLSCREEN, FULLSCREEN, FULLSCREEN)

        for _ in range(3):
            monitor.tick()

        assert overlay.calls == ["hide"]

    def test_show_after_fullscreen_ends(self):
        overlay = FakeOverlay()
        monitor = make_monitor(overlay, FULLSCREEN, WINDOWED)

        monitor.tick()
        monitor.tick()

        assert overlay.calls == ["hide", "show", "focus"]
        assert monitor.state.visible is True
        assert monitor.state.hidden_for_fullscreen is False

    def test_repeated_windowed_ticks_show_nothing(self):
        overlay = FakeOverlay()
        monitor = make_monitor(overlay, WINDOWED, WINDOWED, WINDOWED)

        for _ in range(3):
            monitor.tick()

        assert overlay.calls == []

    def test_intentional_hide_is_not_overridden(self):
        overlay = FakeOverlay(visible=False)
        monitor = make_monitor(overlay, WINDOWED, WINDOWED)

        monitor.tick()
        monitor.tick()

        assert overlay.calls == []
        assert monitor.state.visible is False
        assert monitor.state.hidden_for_fullscreen is False

    def test_user_hide_during_windowed_then_fullscreen(self):
        overlay = FakeOverlay()
        monitor = make_monitor(overlay, WINDOWED, FULLSCREEN, WINDOWED)

        monitor.tick()
        overlay.visible = False  # user hides it from the UI
        monitor.tick()
        monitor.tick()

        assert overlay.calls == []

    def test_user_show_during_fullscreen_is_hidden_again(self):
        overlay = FakeOverlay()
        monitor = make_monitor(overlay, FULLSCREEN, FULLSCREEN)

        monitor.tick()
        overlay.visible = True  # user shows it while still fullscreen
        monitor.tick()

        assert overlay.calls == ["hide", "hide"]
        assert monitor.state.hidden_for_fullscreen is True

    def test_user_hide_after_user_show_is_not_undone(self):
        overlay = FakeOverlay()
        monitor = make_monitor(
            overlay,
            FULLSCREEN,
            WINDOWED,
            FULLSCREEN,
            WINDOWED,
        )

        monitor.tick()
        overlay.visible = True  # user shows it
        monitor.tick()
        overlay.visible = False  # then hides it again
        monitor.tick()
        monitor.tick()

        assert overlay.calls == ["hide"]
        assert monitor.state.visible is False
        assert monitor.state.hidden_for_fullscreen is False

    @pytest.mark.parametrize(
        "geometry",
        [
            WindowGeometry(x=0, y=0, width=1920, height=1079),
            WindowGeometry(x=0, y=0, width=1919, height=1080),
        ],
    )
    def test_fullscreen_requires_exact_match(self, geometry):
        overlay = FakeOverlay()
        monitor = make_monitor(overlay, geometry)

        monitor.tick()

        assert overlay.calls == []

    def test_unavailable_geometry_skips_tick(self):
        overlay = FakeOverlay()
        monitor = make_monitor(overlay, FULLSCREEN, None, RuntimeError("xdotool"))

        monitor.tick()
        monitor.tick()
        monitor.tick()

        assert overlay.calls == ["hide"]
        assert monitor.state.hidden_for_fullscreen is True

    def test_persistent_failure_warns_once(self, caplog):
        monitor = make_monitor(FakeOverlay(), *([None] * 5), failure_warning_ticks=3)

        with caplog.at_level(logging.WARNING, logger="dynamic_island"):
            for _ in range(5):
                monitor.tick()

        warnings = [r for r in caplog.records if "unavailable" in r.getMessage()]
        assert len(warnings) == 1
        assert monitor.consecutive_failures == 5

    def test_success_resets_failure_count(self):
        monitor = make_monitor(FakeOverlay(), None, None, WINDOWED)

        for _ in range(3):
            monitor.tick()

        assert monitor.consecutive_failures == 0

    def test_with_overlay_proxy(self):
        channel = NotificationChannel()
        overlay = OverlayProxy(channel)
        monitor = make_monitor(overlay, FULLSCREEN, WINDOWED)

        monitor.tick()
        monitor.tick()

        payloads = [m.payload for m in channel.get_history()]
        assert all(
            m.kind is MessageKind.OVERLAY_VISIBILITY for m in channel.get_history()
        )
        assert payloads == [
            {"visible": False},
            {"visible": True},
            {"visible": True, "focus": True},
        ]
