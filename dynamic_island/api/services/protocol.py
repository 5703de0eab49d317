"""Decode model replies into typed action envelopes.

Replies come from a language model and are treated as untrusted: the
``action`` string is the discriminator of a tagged union and each variant
declares the ``params`` keys it needs. Anything that does not decode cleanly
is reported as :class:`ProtocolError` and shown to the user as plain text.
"""

import json
from typing import Any

from dynamic_island.errors import ProtocolError
from dynamic_island.model.models import ActionEnvelope, ActionKind

REQUIRED_PARAMS: dict[ActionKind, tuple[str, ...]] = {
    ActionKind.RUN_COMMAND: ("command",),
    ActionKind.OPEN_APP: ("appName",),
    ActionKind.PLAY_MUSIC: ("query",),
    ActionKind.COPY_TEXT: ("text",),
    ActionKind.SEARCH_WEB: ("query",),
    ActionKind.OPEN_URL: (),
    ActionKind.ANALYSIS: (),
    ActionKind.REPLACE_TEXT: ("newText",),
}

SILENT_ACTIONS = frozenset(
    {
        ActionKind.RUN_COMMAND,
        ActionKind.OPEN_APP,
        ActionKind.PLAY_MUSIC,
        ActionKind.COPY_TEXT,
        ActionKind.SEARCH_WEB,
        ActionKind.OPEN_URL,
    },
)

DEFAULT_RESPONSE = "Action completed."


def parse_reply(reply: str) -> dict[str, Any]:
    """Parse ``reply`` as a single JSON object."""
    try:
        data = json.loads(reply)
    except (TypeError, ValueError, RecursionError) as exc:
        msg = "reply is not JSON"
        raise ProtocolError(msg) from exc
    if not isinstance(data, dict):
        msg = f"reply is JSON {type(data).__name__}, not an object"
        raise ProtocolError(msg)
    return data


def decode_envelope(data: dict[str, Any]) -> ActionEnvelope:
    """Validate a parsed reply against the action vocabulary.

    Non-string params are dropped; a required key that is missing or not a
    string invalidates the envelope.
    """
    raw_action = data.get("action")
    try:
        action = ActionKind(raw_action)
    except ValueError as exc:
        msg = f"unknown action {raw_action!r}"
        raise ProtocolError(msg) from exc

    raw_params = data.get("params", {})
    if not isinstance(raw_params, dict):
        msg = f"params of {action.value} is not an object"
        raise ProtocolError(msg)
    params = {
        str(key): value for key, value in raw_params.items() if isinstance(value, str)
    }

    missing = [key for key in REQUIRED_PARAMS[action] if key not in params]
    if missing:
        msg = f"{action.value} is missing params: {', '.join(missing)}"
        raise ProtocolError(msg)
    return ActionEnvelope(action=action, params=params)


def free_response(data: dict[str, Any]) -> str | None:
    """Return the text to show for an object that names no action.

    That is its ``response`` (inside ``params`` or at the top level), or
    :data:`DEFAULT_RESPONSE` when it has none.
    """
    if "action" in data:
        return None
    params = data.get("params")
    for source in (params if isinstance(params, dict) else {}, data):
        response = source.get("response")
        if isinstance(response, str) and response.strip():
            return response
    return DEFAULT_RESPONSE
