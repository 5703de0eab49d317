"""Geometry of the foreground window (xdotool on Linux, win32 on Windows)."""

import shutil
import subprocess
import sys
from dataclasses import dataclass
from typing import Any, cast

import psutil

if sys.platform == "win32":
    import pywintypes  # pyright: ignore[reportMissingImports]
    import win32gui  # pyright: ignore[reportMissingImports]
    import win32process  # pyright: ignore[reportMissingImports]
else:  # pragma: no cover
    pywintypes = cast("Any", None)
    win32gui = cast("Any", None)
    win32process = cast("Any", None)

XDOTOOL_TIMEOUT = 2.0
XDOTOOL_GEOMETRY = ["xdotool", "getactivewindow", "getwindowgeometry", "--shell"]


@dataclass(frozen=True)
class WindowGeometry:
    x: int
    y: int
    width: int
    height: int
    app: str | None = None


def supports_window_geometry(platform: str | None = None) -> bool:
    """Return True when this OS can report the active window's geometry."""
    platform = platform or sys.platform
    if platform == "win32":
        return True
    if platform.startswith("linux"):
        return shutil.which("xdotool") is not None
    return False


def parse_xdotool_geometry(output: str) -> WindowGeometry | None:
    """Parse ``xdotool getwindowgeometry --shell`` output.

    The output is ``KEY=value`` lines (WINDOW, X, Y, WIDTH, HEIGHT, SCREEN).
    """
    values: dict[str, str] = {}
    for line in output.splitlines():
        key, sep, value = line.partition("=")
        if sep:
            values[key.strip()] = value.strip()
    try:
        return WindowGeometry(
            x=int(values["X"]),
            y=int(values["Y"]),
            width=int(values["WIDTH"]),
            height=int(values["HEIGHT"]),
        )
    except (KeyError, ValueError):
        return None


def _get_geometry_linux() -> WindowGeometry | None:
    try:
        result = subprocess.run(  # noqa: S603
            XDOTOOL_GEOMETRY,
            capture_output=True,
            text=True,
            timeout=XDOTOOL_TIMEOUT,
            check=False,
        )
    except (subprocess.TimeoutExpired, OSError):
        return None
    if result.returncode != 0:
        return None
    return parse_xdotool_geometry(result.stdout)


def _get_geometry_windows() -> WindowGeometry | None:
    hwnd = win32gui.GetForegroundWindow()
    if not hwnd:
        return None

    try:
        left, top, right, bottom = win32gui.GetWindowRect(hwnd)
        _, pid = win32process.GetWindowThreadProcessId(hwnd)
    except pywintypes.error:
        return None

    try:
        app: str | None = psutil.Process(pid).name()
    except (psutil.NoSuchProcess, psutil.AccessDenied):
        app = None
    return WindowGeometry(
        x=left,
        y=top,
        width=right - left,
        height=bottom - top,
        app=app,
    )


def get_active_window_geometry() -> WindowGeometry | None:
    """Return the foreground window's geometry, or None if it can't be read."""
    if sys.platform == "win32":
        return _get_geometry_windows()
    if sys.platform.startswith("linux"):
        return _get_geometry_linux()
    return None
