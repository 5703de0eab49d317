__all__ = [
    "ActionEnvelope",
    "ActionKind",
    "ActionOutcome",
    "CapturedContent",
    "CompletionMode",
    "CompletionRequest",
    "CompletionResult",
    "ContentSourceKind",
    "DispatchKind",
    "DispatchResult",
    "FailureKind",
    "MessageKind",
    "PresenceState",
]


from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum


class ContentSourceKind(Enum):
    """Where a piece of captured text came from."""

    CLIPBOARD = "clipboard"
    VOICE = "voice"
    MANUAL = "manual"


@dataclass(frozen=True)
class CapturedContent:
    """Text captured from the clipboard, a spoken query or the analyze hotkey."""

    text: str
    source: ContentSourceKind


class CompletionMode(Enum):
    SUMMARIZE = "summarize"
    ACTION = "action"


@dataclass(frozen=True)
class CompletionRequest:
    system_prompt: str
    user_prompt: str
    model: str
    mode: CompletionMode


class FailureKind(Enum):
    NO_API_KEY = "no_api_key"
    UNAUTHORIZED = "unauthorized"
    MODEL_UNAVAILABLE = "model_unavailable"
    NETWORK_OR_TIMEOUT = "network_or_timeout"
    MALFORMED_RESPONSE = "malformed_response"


@dataclass(frozen=True)
class CompletionResult:
    """Either the raw model reply or the reason no reply was obtained.

    ``message`` is what the user gets to see in both cases.
    """

    text: str | None = None
    failure: FailureKind | None = None
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.failure is None

    @classmethod
    def success(cls, text: str) -> "CompletionResult":
        return cls(text=text, failure=None, message=text)

    @classmethod
    def failed(cls, kind: FailureKind, message: str) -> "CompletionResult":
        return cls(text=None, failure=kind, message=message)


class ActionKind(Enum):
    """Closed vocabulary of structured commands the model may return."""

    RUN_COMMAND = "run_command"
    OPEN_APP = "open_app"
    PLAY_MUSIC = "play_music"
    COPY_TEXT = "copy_text"
    SEARCH_WEB = "search_web"
    OPEN_URL = "open_url"
    ANALYSIS = "analysis"
    REPLACE_TEXT = "replace_text"


@dataclass(frozen=True)
class ActionEnvelope:
    action: ActionKind
    params: Mapping[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class ActionOutcome:
    action: ActionKind
    result_text: str


class DispatchKind(Enum):
    PLAIN_TEXT = "plain_text"
    REPLACEMENT = "replacement"
    OUTCOME = "outcome"
    ANALYSIS = "analysis"
    RESPONSE = "response"


@dataclass(frozen=True)
class DispatchResult:
    """What the dispatcher made of a model reply.

    ``text`` is the display text for every kind except ``REPLACEMENT``, which
    carries ``old_text``/``new_text`` for the confirmation step instead.
    """

    kind: DispatchKind
    text: str = ""
    outcome: ActionOutcome | None = None
    old_text: str = ""
    new_text: str = ""


class MessageKind(Enum):
    """Messages published to the presentation layer."""

    ANALYZING = "analyzing"
    ANALYSIS_COMPLETE = "analysis-complete"
    ACTION_COMPLETED = "action-completed"
    ASK_COMPLETE = "ask-complete"
    TEXT_REPLACEMENT = "text-replacement"
    CONTENT_COPIED = "content-copied"
    OVERLAY_VISIBILITY = "overlay-visibility"


@dataclass
class PresenceState:
    visible: bool = True
    hidden_for_fullscreen: bool = False
