import shutil
import subprocess
import sys
import webbrowser
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from urllib.parse import quote

import pyperclip

from dynamic_island.errors import HandlerError
from dynamic_island.model.models import ActionKind, ActionOutcome
from dynamic_island.watchers.logger import logger

MUSIC_SEARCH_URL = "https://music.youtube.com/search?q={query}"
WEB_SEARCH_URL = "https://www.google.com/search?q={query}"
COPY_PREVIEW_CHARS = 50


@dataclass(frozen=True)
class ShellResult:
    stdout: str
    stderr: str


class AppLauncher:
    """Platform capability for running shell commands and launching apps."""

    shell: str | None = None

    def launch_command(self, app_name: str) -> str:
        raise NotImplementedError

    def run(self, command: str) -> ShellResult:
        """Run ``command`` through the platform shell.

        Raises:
            HandlerError: the command could not be started or exited non-zero

        """
        try:
            completed = subprocess.run(  # noqa: S602
                command,
                shell=True,
                executable=self.shell,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
                check=False,
            )
        except OSError as exc:
            raise HandlerError(str(exc)) from exc
        if completed.returncode != 0:
            detail = completed.stderr.strip() or completed.stdout.strip()
            msg = f"Command failed with exit status {completed.returncode}"
            if detail:
                msg = f"{msg}: {detail}"
            raise HandlerError(msg)
        return ShellResult(stdout=completed.stdout, stderr=completed.stderr)


class WindowsLauncher(AppLauncher):
    def launch_command(self, app_name: str) -> str:
        return f"start {app_name}"


class MacLauncher(AppLauncher):
    shell = "/bin/bash"

    def launch_command(self, app_name: str) -> str:
        return f'open -a "{app_name}"'


class LinuxLauncher(AppLauncher):
    def __init__(self) -> None:
        self.shell = shutil.which("bash")

    def launch_command(self, app_name: str) -> str:
        return f'xdg-open "{app_name}" || {app_name}'


def select_launcher(platform: str | None = None) -> AppLauncher:
    """Pick the :class:`AppLauncher` for ``platform`` (default: this OS)."""
    platform = platform or sys.platform
    if platform == "win32":
        return WindowsLauncher()
    if platform == "darwin":
        return MacLauncher()
    return LinuxLauncher()


def _with_output(result_text: str, result: ShellResult) -> str:
    if result.stdout.strip():
        result_text += f"\n\nOutput:\n{result.stdout}"
    if result.stderr.strip():
        result_text += f"\n\nErrors:\n{result.stderr}"
    return result_text


Handler = Callable[[Mapping[str, str]], str]


class ActionHandlers:
    """One handler per silent action kind.

    Each handler performs a single side effect and returns the text shown to
    the user. ``run_command`` and ``open_app`` report their own failures; the
    others only fail if the OS call itself raises.
    """

    def __init__(
        self,
        launcher: AppLauncher | None = None,
        open_external: Callable[[str], object] = webbrowser.open,
        write_clipboard: Callable[[str], None] = pyperclip.copy,
    ) -> None:
        self.launcher = launcher or select_launcher()
        self.open_external = open_external
        self.write_clipboard = write_clipboard
        self._handlers: dict[ActionKind, Handler] = {
            ActionKind.RUN_COMMAND: self.run_command,
            ActionKind.OPEN_APP: self.open_app,
            ActionKind.PLAY_MUSIC: self.play_music,
            ActionKind.COPY_TEXT: self.copy_text,
            ActionKind.OPEN_URL: self.open_url,
            ActionKind.SEARCH_WEB: self.search_web,
            ActionKind.ANALYSIS: self.analysis,
        }

    def execute(self, action: ActionKind, params: Mapping[str, str]) -> ActionOutcome:
        handler = self._handlers.get(action)
        if handler is None:
            msg = f"No handler for {action.value}"
            raise HandlerError(msg)
        return ActionOutcome(action=action, result_text=handler(params))

    def run_command(self, params: Mapping[str, str]) -> str:
        command = params["command"]
        logger.info("Executing command: %s", command)
        try:
            result = self.launcher.run(command)
        except HandlerError as exc:
            logger.warning("Command %r failed: %s", command, exc)
            return f'Error executing "{command}": {exc}'
        logger.info(
            "Command finished | stdout=%d chars | stderr=%d chars",
            len(result.stdout),
            len(result.stderr),
        )
        return _with_output(f"Executed: {command}", result)

    def open_app(self, params: Mapping[str, str]) -> str:
        app_name = params["appName"]
        command = self.launcher.launch_command(app_name)
        logger.info("Opening app with command: %s", command)
        try:
            result = self.launcher.run(command)
        except HandlerError as exc:
            logger.warning("Opening %r failed: %s", app_name, exc)
            return f'Error opening "{app_name}": {exc}'
        return _with_output(f"Opened: {app_name}", result)

    def play_music(self, params: Mapping[str, str]) -> str:
        query = params["query"]
        self.open_external(MUSIC_SEARCH_URL.format(query=quote(query, safe="")))
        return f"Playing: {query}"

    def copy_text(self, params: Mapping[str, str]) -> str:
        text = params["text"]
        self.write_clipboard(text)
        return f"Copied: {text[:COPY_PREVIEW_CHARS]}..."

    def open_url(self, params: Mapping[str, str]) -> str:
        url = params.get("url", "")
        if not url.startswith("http"):
            logger.info("Rejected URL: %r", url)
            return "Invalid URL provided."
        self.open_external(url)
        return f"Opened: {url}"

    def search_web(self, params: Mapping[str, str]) -> str:
        query = params["query"]
        self.open_external(WEB_SEARCH_URL.format(query=quote(query, safe="")))
        return f"Searching: {query}"

    def analysis(self, params: Mapping[str, str]) -> str:
        return params.get("analysis") or "No analysis provided."


def press_hotkey(*keys: str) -> None:
    # pyautogui connects to the display on import
    import pyautogui  # noqa: PLC0415

    pyautogui.hotkey(*keys)


def apply_replacement(
    new_text: str,
    write_clipboard: Callable[[str], None] = pyperclip.copy,
    hotkey: Callable[..., None] = press_hotkey,
) -> str:
    """Replace the highlighted text in the focused application.

    The new text goes to the clipboard, then the selection is cut and the
    clipboard pasted over it.
    """
    try:
        write_clipboard(new_text)
        hotkey("ctrl", "x")
        hotkey("ctrl", "v")
    except Exception as exc:  # noqa: BLE001
        logger.warning("Replacement failed: %s", exc)
        return f"Error replacing text: {exc}"
    return "Replaced selection."
