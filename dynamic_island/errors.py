"""Error types raised inside the dispatch pipeline.

None of these escape the component that raises them: the completion service
turns them into a failed ``CompletionResult``, the action protocol degrades
to plain text and the handlers report a result string.
"""

from dynamic_island.model.models import FailureKind


class IslandError(Exception):
    """Base error for the assistant."""


class CompletionError(IslandError):
    """Raised when a completion call cannot produce a reply."""

    kind: FailureKind = FailureKind.NETWORK_OR_TIMEOUT


class ConfigurationError(CompletionError):
    """Raised when a required credential is missing."""

    kind = FailureKind.NO_API_KEY


class AuthError(CompletionError):
    """Raised when the endpoint rejects the API key."""

    kind = FailureKind.UNAUTHORIZED


class ModelError(CompletionError):
    """Raised when the configured model is rejected or unavailable."""

    kind = FailureKind.MODEL_UNAVAILABLE


class TransportError(CompletionError):
    """Raised on timeouts, connection errors and unexpected HTTP statuses."""

    kind = FailureKind.NETWORK_OR_TIMEOUT


class ProtocolError(IslandError):
    """Raised when a reply does not have the expected shape."""


class MalformedResponseError(ProtocolError, CompletionError):
    """Raised when the completion body carries no usable choice."""

    kind = FailureKind.MALFORMED_RESPONSE


class HandlerError(IslandError):
    """Raised when an action's side effect fails."""
