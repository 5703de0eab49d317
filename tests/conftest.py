from unittest.mock import Mock

import pytest

from dynamic_island.api.services.actions import ActionHandlers, AppLauncher
from dynamic_island.api.services.dispatcher import Dispatcher, Pipeline
from dynamic_island.api.services.llm import CompletionService
from dynamic_island.config import AppConfig
from dynamic_island.ui.notifications import NotificationChannel
from dynamic_island.watchers.clipboard import ClipboardState, ContentSource


class FakeClipboard:
    """Clipboard stand-in returning scripted reads."""

    def __init__(self, *reads: str) -> None:
        self.reads = list(reads)
        self.current = reads[-1] if reads else ""

    def __call__(self) -> str:
        if self.reads:
            self.current = self.reads.pop(0)
        return self.current


@pytest.fixture
def config():
    """Config with a fake API key"""
    return AppConfig(api_key="sk-test", model="test/model", language="en")


@pytest.fixture
def channel():
    return NotificationChannel()


@pytest.fixture
def fake_clipboard():
    return FakeClipboard()


@pytest.fixture
def source(fake_clipboard):
    return ContentSource(state=ClipboardState(), reader=fake_clipboard)


@pytest.fixture
def open_external():
    return Mock()


@pytest.fixture
def write_clipboard():
    return Mock()


@pytest.fixture
def launcher():
    mock = Mock(spec=AppLauncher)
    mock.launch_command.side_effect = lambda name: f"launch {name}"
    return mock


@pytest.fixture
def handlers(launcher, open_external, write_clipboard):
    return ActionHandlers(
        launcher=launcher,
        open_external=open_external,
        write_clipboard=write_clipboard,
    )


@pytest.fixture
def completion(config):
    return CompletionService(config)


@pytest.fixture
def replace():
    return Mock(return_value="Replaced selection.")


@pytest.fixture
def pipeline(source, completion, handlers, channel, replace):
    dispatcher = Dispatcher(
        handlers,
        current_clipboard=lambda: source.current_clipboard,
    )
    return Pipeline(source, completion, dispatcher, channel, replace=replace)


@pytest.fixture
def completion_response():
    """Factory for mocked ``requests`` responses carrying a model reply."""

    def build(content, status_code=200):
        response = Mock()
        response.status_code = status_code
        response.json.return_value = {
            "choices": [{"message": {"content": content}}],
        }
        return response

    return build
