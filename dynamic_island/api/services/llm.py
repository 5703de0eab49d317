from typing import Any

import requests

from dynamic_island.config import AppConfig, load_config
from dynamic_island.errors import (
    AuthError,
    CompletionError,
    ConfigurationError,
    MalformedResponseError,
    ModelError,
    TransportError,
)
from dynamic_island.model.models import (
    CompletionMode,
    CompletionRequest,
    CompletionResult,
    FailureKind,
)
from dynamic_island.watchers.logger import logger

HTTP_UNAUTHORIZED = 401
HTTP_BAD_REQUEST = 400
HTTP_NOT_FOUND = 404
HTTP_OK_MIN = 200
HTTP_OK_MAX = 300

APP_TITLE = "Dynamic Island Study Assistant"

SUMMARIZE_PROMPT = (
    "You are a helpful study assistant. {language} Analyze the provided content "
    "and provide a clear, concise summary using Markdown for formatting "
    "(headings, lists, bold text). If it's a quiz or study material, explain key "
    "concepts and provide helpful insights. Keep responses focused and educational."
)

ACTION_PROMPT = """
You are a helpful AI assistant running on the user's desktop. {language}
For any actionable request (commands, opening apps/URLs, searching, copying,
replacing text, playing music, or analysis), ALWAYS respond with valid JSON ONLY:
{{"action": "exact_name", "params": {{}}}}
The object must have exactly the two keys "action" and "params".
NO plain text, explanations, or Markdown outside the JSON.
If the request is to replace or edit the clipboard text, use "replace_text".
Actions:
- "run_command" {{"command": "full shell command, e.g. 'ls -la'"}}
- "open_app" {{"appName": "e.g. firefox"}}
- "play_music" {{"query": "song or artist"}}
- "copy_text" {{"text": "text to copy"}}
- "search_web" {{"query": "search term"}}
- "open_url" {{"url": "https://..."}}
- "analysis" {{"analysis": "detailed Markdown response"}}
- "replace_text" {{"newText": "replacement for the clipboard text"}}
For non-actions, respond with plain text.
""".strip()

FAILURE_MESSAGES = {
    FailureKind.NO_API_KEY: (
        "No OpenRouter API key set. Set OPENROUTER_API_KEY to configure."
    ),
    FailureKind.UNAUTHORIZED: "Invalid API key (401). Update OPENROUTER_API_KEY.",
    FailureKind.MODEL_UNAVAILABLE: (
        "Model '{model}' not available. Change ISLAND_MODEL."
    ),
    FailureKind.NETWORK_OR_TIMEOUT: (
        "Network error or API unavailable. Please check your connection."
    ),
    FailureKind.MALFORMED_RESPONSE: "Invalid API response: no choices provided.",
}


class CompletionService:
    """OpenAI-compatible chat-completions client (OpenRouter by default)."""

    def __init__(self, config: AppConfig) -> None:
        self.config = config
        self.chat_url = f"{config.api_url.rstrip('/')}/chat/completions"

    def build_request(self, content: str, mode: CompletionMode) -> CompletionRequest:
        """Build the system/user prompt pair for ``mode``."""
        language = self.config.language_instruction
        if mode is CompletionMode.ACTION:
            system_prompt = ACTION_PROMPT.format(language=language)
            user_prompt = f"Process this user request: {content}"
        else:
            system_prompt = SUMMARIZE_PROMPT.format(language=language)
            user_prompt = f"Please analyze and summarize this content:\n\n{content}"
        return CompletionRequest(
            system_prompt=system_prompt,
            user_prompt=user_prompt,
            model=self.config.model,
            mode=mode,
        )

    def failure_message(self, kind: FailureKind) -> str:
        return FAILURE_MESSAGES[kind].format(model=self.config.model)

    def complete(
        self,
        content: str,
        mode: CompletionMode = CompletionMode.SUMMARIZE,
    ) -> CompletionResult:
        """Run one completion call and classify any failure.

        Args:
            content: text to send as the user request
            mode: summarize or action-request prompting

        Returns:
            CompletionResult: the raw reply text, or the failure kind with a
            user-facing message. The reply is not validated here.

        """
        try:
            if not self.config.api_key:
                msg = "OpenRouter API key is not configured"
                raise ConfigurationError(msg)
            request = self.build_request(content, mode)
            text = self._post(request)
        except CompletionError as exc:
            logger.warning("Completion failed (%s): %s", exc.kind.value, exc)
            return CompletionResult.failed(exc.kind, self.failure_message(exc.kind))
        return CompletionResult.success(text)

    def _post(self, request: CompletionRequest) -> str:
        payload = {
            "model": request.model,
            "messages": [
                {"role": "system", "content": request.system_prompt},
                {"role": "user", "content": request.user_prompt},
            ],
        }
        headers = {
            "Authorization": f"Bearer {self.config.api_key}",
            "Content-Type": "application/json",
            "X-Title": APP_TITLE,
        }

        try:
            response = requests.post(
                self.chat_url,
                json=payload,
                headers=headers,
                timeout=self.config.timeout,
            )
        except requests.exceptions.Timeout as exc:
            msg = f"Request timed out after {self.config.timeout}s"
            raise TransportError(msg) from exc
        except requests.RequestException as exc:
            raise TransportError(str(exc)) from exc

        status_code: int = response.status_code
        if status_code == HTTP_UNAUTHORIZED:
            msg = "Endpoint rejected the API key"
            raise AuthError(msg)
        if status_code in (HTTP_BAD_REQUEST, HTTP_NOT_FOUND):
            msg = f"Model {request.model!r} rejected with HTTP {status_code}"
            raise ModelError(msg)
        if not HTTP_OK_MIN <= status_code < HTTP_OK_MAX:
            msg = f"Unexpected HTTP status {status_code}"
            raise TransportError(msg)

        return _extract_content(response)


def _extract_content(response: requests.Response) -> str:
    try:
        data: dict[str, Any] = response.json()
    except ValueError as exc:
        msg = "Response body is not JSON"
        raise MalformedResponseError(msg) from exc

    choices = data.get("choices") if isinstance(data, dict) else None
    if not choices:
        msg = "Invalid API response: no choices provided"
        raise MalformedResponseError(msg)
    try:
        content = choices[0]["message"]["content"]
    except (KeyError, IndexError, TypeError) as exc:
        msg = "First choice carries no message content"
        raise MalformedResponseError(msg) from exc
    return content if isinstance(content, str) else ""


def create_completion_service(config: AppConfig | None = None) -> CompletionService:
    """Build a :class:`CompletionService` from ``config`` or the environment."""
    return CompletionService(config or load_config())
