from collections.abc import Callable

from dynamic_island.api.services.actions import ActionHandlers, apply_replacement
from dynamic_island.api.services.llm import CompletionService
from dynamic_island.api.services.protocol import (
    SILENT_ACTIONS,
    decode_envelope,
    free_response,
    parse_reply,
)
from dynamic_island.errors import ProtocolError
from dynamic_island.model.models import (
    ActionKind,
    ActionOutcome,
    CapturedContent,
    CompletionMode,
    DispatchKind,
    DispatchResult,
    MessageKind,
)
from dynamic_island.ui.notifications import Message, NotificationChannel
from dynamic_island.watchers.clipboard import ContentSource, EmptyClipboardError
from dynamic_island.watchers.logger import logger


class Dispatcher:
    """Turn a model reply into something to show or do."""

    def __init__(
        self,
        handlers: ActionHandlers,
        current_clipboard: Callable[[], str] = lambda: "",
    ) -> None:
        self.handlers = handlers
        self.current_clipboard = current_clipboard

    def dispatch(self, reply: str) -> DispatchResult:
        try:
            data = parse_reply(reply)
        except ProtocolError:
            return DispatchResult(kind=DispatchKind.PLAIN_TEXT, text=reply)

        response = free_response(data)
        if response is not None:
            return DispatchResult(kind=DispatchKind.RESPONSE, text=response)

        try:
            envelope = decode_envelope(data)
        except ProtocolError as exc:
            logger.info("Reply treated as plain text: %s", exc)
            return DispatchResult(kind=DispatchKind.PLAIN_TEXT, text=reply)

        action = envelope.action
        if action is ActionKind.REPLACE_TEXT:
            return DispatchResult(
                kind=DispatchKind.REPLACEMENT,
                old_text=self.current_clipboard(),
                new_text=envelope.params["newText"],
            )
        if action in SILENT_ACTIONS:
            try:
                outcome = self.handlers.execute(action, envelope.params)
            except Exception as exc:  # noqa: BLE001
                logger.exception("Action %s failed", action.value)
                outcome = ActionOutcome(action, f"Error executing action: {exc}.")
            return DispatchResult(
                kind=DispatchKind.OUTCOME,
                text=outcome.result_text,
                outcome=outcome,
            )
        # analysis: the model's answer is the result, nothing to execute
        return DispatchResult(
            kind=DispatchKind.ANALYSIS,
            text=self.handlers.analysis(envelope.params),
        )


class Pipeline:
    """Runs the trigger flows and publishes their messages.

    Every run publishes ``analyzing`` (unless it fails before any work) and
    then exactly one terminal message, which is also returned.
    """

    def __init__(
        self,
        source: ContentSource,
        completion: CompletionService,
        dispatcher: Dispatcher,
        channel: NotificationChannel,
        replace: Callable[[str], str] = apply_replacement,
    ) -> None:
        self.source = source
        self.completion = completion
        self.dispatcher = dispatcher
        self.channel = channel
        self.replace = replace

    def poll_clipboard(self) -> CapturedContent | None:
        captured = self.source.poll_clipboard()
        if captured is not None:
            self.channel.publish(MessageKind.CONTENT_COPIED, captured.text)
        return captured

    def trigger_manual_analyze(self) -> Message:
        try:
            captured = self.source.trigger_manual_analyze()
        except EmptyClipboardError as exc:
            return self.channel.publish(MessageKind.ANALYSIS_COMPLETE, str(exc))
        self.channel.publish(MessageKind.ANALYZING)
        result = self.completion.complete(captured.text, CompletionMode.SUMMARIZE)
        return self.channel.publish(MessageKind.ANALYSIS_COMPLETE, result.message)

    def submit_voice_query(self, text: str) -> Message:
        captured = self.source.submit_voice_query(text)
        self.channel.publish(MessageKind.ANALYZING)
        result = self.completion.complete(
            f"Analyze this spoken query: {captured.text}",
            CompletionMode.SUMMARIZE,
        )
        return self.channel.publish(MessageKind.ANALYSIS_COMPLETE, result.message)

    def submit_action_query(self, query: str) -> Message:
        self.channel.publish(MessageKind.ANALYZING)
        clipboard = self.source.current_clipboard
        if clipboard.strip():
            query = (
                f'The current clipboard/highlighted text is: "{clipboard}". '
                f"User request: {query}"
            )
        result = self.completion.complete(query, CompletionMode.ACTION)
        if not result.ok:
            return self.channel.publish(MessageKind.ASK_COMPLETE, result.message)

        dispatched = self.dispatcher.dispatch(result.message)
        return self._publish_dispatch(dispatched)

    def confirm_replacement(self, new_text: str) -> Message:
        result_text = self.replace(new_text)
        return self.channel.publish(MessageKind.ACTION_COMPLETED, result_text)

    def _publish_dispatch(self, dispatched: DispatchResult) -> Message:
        if dispatched.kind is DispatchKind.REPLACEMENT:
            return self.channel.publish(
                MessageKind.TEXT_REPLACEMENT,
                {"oldText": dispatched.old_text, "newText": dispatched.new_text},
            )
        if dispatched.kind is DispatchKind.ANALYSIS:
            return self.channel.publish(MessageKind.ANALYSIS_COMPLETE, dispatched.text)
        if dispatched.kind is DispatchKind.OUTCOME:
            outcome = dispatched.outcome
            if outcome is not None and outcome.action is ActionKind.RUN_COMMAND:
                return self.channel.publish(
                    MessageKind.ANALYSIS_COMPLETE, dispatched.text
                )
            return self.channel.publish(MessageKind.ACTION_COMPLETED, dispatched.text)
        return self.channel.publish(MessageKind.ASK_COMPLETE, dispatched.text)
