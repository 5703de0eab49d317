import threading
import time
from collections import deque
from dataclasses import asdict, dataclass, field
from typing import Any

from dynamic_island.model.models import MessageKind

TERMINAL_KINDS = frozenset(
    {
        MessageKind.ANALYSIS_COMPLETE,
        MessageKind.ACTION_COMPLETED,
        MessageKind.ASK_COMPLETE,
        MessageKind.TEXT_REPLACEMENT,
    },
)


@dataclass(frozen=True)
class Message:
    """A single notification for the presentation layer."""

    seq: int
    kind: MessageKind
    payload: Any = None
    timestamp: float = field(default_factory=time.time)

    @property
    def terminal(self) -> bool:
        return self.kind in TERMINAL_KINDS

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["kind"] = self.kind.value
        return data


class NotificationChannel:
    """Outbound message channel with a bounded, sequenced history.

    The overlay UI polls :meth:`messages_since` with the last sequence number
    it has rendered. Publishing may happen from worker threads.
    """

    def __init__(self, maxlen: int = 100) -> None:
        self._history: deque[Message] = deque(maxlen=maxlen)
        self._lock = threading.Lock()
        self._seq = 0

    def publish(self, kind: MessageKind, payload: Any = None) -> Message:
        with self._lock:
            self._seq += 1
            message = Message(seq=self._seq, kind=kind, payload=payload)
            self._history.append(message)
        return message

    def messages_since(self, seq: int = 0) -> list[Message]:
        with self._lock:
            return [m for m in self._history if m.seq > seq]

    def get_history(self) -> list[Message]:
        """Return a copy of the retained messages."""
        with self._lock:
            return list(self._history)

    @property
    def last_seq(self) -> int:
        return self._seq
