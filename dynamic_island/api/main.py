"""FastAPI app exposing the overlay's trigger surface and message channel."""

import asyncio
import contextlib
from typing import Any

from fastapi import FastAPI, HTTPException
from fastapi.concurrency import run_in_threadpool
from mss.exception import ScreenShotError
from pydantic import BaseModel, field_validator

from dynamic_island.api.services.actions import ActionHandlers
from dynamic_island.api.services.dispatcher import Dispatcher, Pipeline
from dynamic_island.api.services.llm import CompletionService
from dynamic_island.config import AppConfig, load_config
from dynamic_island.ui.notifications import NotificationChannel
from dynamic_island.ui.overlay import OverlayProxy
from dynamic_island.watchers.active_window import supports_window_geometry
from dynamic_island.watchers.clipboard import ContentSource
from dynamic_island.watchers.logger import logger
from dynamic_island.watchers.presence import PresenceMonitor
from dynamic_island.watchers.pump import poll_forever
from dynamic_island.watchers.screen import get_primary_work_area

CLIPBOARD_PREVIEW_CHARS = 80

app = FastAPI(
    title="Dynamic Island Assistant",
    description="Clipboard, voice and action triggers for the overlay",
)

STATE: dict[str, Any] = {
    "config": None,
    "pipeline": None,
    "channel": None,
    "overlay": None,
    "monitor": None,
    "tasks": [],
}


# --- Request models ---


def _not_blank(value: str, field: str) -> str:
    if not value or not value.strip():
        msg = f"{field} must not be empty"
        raise ValueError(msg)
    return value


class VoiceQuery(BaseModel):
    text: str

    @field_validator("text")
    @classmethod
    def text_must_not_be_empty(cls, v: str) -> str:
        return _not_blank(v, "text")


class ActionQuery(BaseModel):
    query: str

    @field_validator("query")
    @classmethod
    def query_must_not_be_empty(cls, v: str) -> str:
        return _not_blank(v, "query")


class ReplacementConfirmation(BaseModel):
    new_text: str


class OverlayVisibility(BaseModel):
    visible: bool


# --- Wiring ---


def build_state(config: AppConfig) -> dict[str, Any]:
    """Create the pipeline components for ``config``."""
    channel = NotificationChannel()
    source = ContentSource()
    dispatcher = Dispatcher(
        ActionHandlers(),
        current_clipboard=lambda: source.current_clipboard,
    )
    pipeline = Pipeline(source, CompletionService(config), dispatcher, channel)
    overlay = OverlayProxy(channel)

    monitor = None
    if supports_window_geometry():
        try:
            work_area = config.work_area or get_primary_work_area()
        except ScreenShotError as exc:
            logger.warning("Screen size unavailable, presence monitor off: %s", exc)
        else:
            monitor = PresenceMonitor(overlay, work_area)
    else:
        logger.info("No active window geometry on this platform, presence monitor off")

    return {
        "config": config,
        "pipeline": pipeline,
        "channel": channel,
        "overlay": overlay,
        "monitor": monitor,
    }


# Deprecated on_event usage is temporarily retained for simplicity.
@app.on_event("startup")  # pyright: ignore[reportDeprecated]
async def startup_event() -> None:
    """Build the pipeline and start the clipboard and presence pollers."""
    config = load_config()
    STATE.update(build_state(config))
    tasks = [
        asyncio.create_task(
            poll_forever(
                STATE["pipeline"].poll_clipboard,
                config.clipboard_interval,
                "clipboard",
            ),
        ),
    ]
    if STATE["monitor"] is not None:
        tasks.append(
            asyncio.create_task(
                poll_forever(
                    STATE["monitor"].tick,
                    config.presence_interval,
                    "presence",
                ),
            ),
        )
    STATE["tasks"] = tasks
    logger.info(
        "Assistant ready | model=%s | language=%s | api_key=%s",
        config.model,
        config.language,
        "set" if config.api_key else "missing",
    )


@app.on_event("shutdown")  # pyright: ignore[reportDeprecated]
async def shutdown_event() -> None:
    for task in STATE["tasks"]:
        task.cancel()
    for task in STATE["tasks"]:
        with contextlib.suppress(asyncio.CancelledError):
            await task
    STATE["tasks"] = []


def _get_pipeline() -> Pipeline:
    pipeline: Pipeline | None = STATE["pipeline"]
    if pipeline is None:
        raise HTTPException(status_code=503, detail="Pipeline not ready")
    return pipeline


def _get_overlay() -> OverlayProxy:
    overlay: OverlayProxy | None = STATE["overlay"]
    if overlay is None:
        raise HTTPException(status_code=503, detail="Overlay not ready")
    return overlay


# --- Trigger endpoints ---


@app.post("/analyze")
async def analyze_clipboard() -> dict[str, Any]:
    """Summarize the current clipboard (the analyze hotkey)."""
    pipeline = _get_pipeline()
    message = await run_in_threadpool(pipeline.trigger_manual_analyze)
    return {"ok": True, "message": message.to_dict()}


@app.post("/voice")
async def analyze_voice(req: VoiceQuery) -> dict[str, Any]:
    """Summarize a spoken query."""
    pipeline = _get_pipeline()
    message = await run_in_threadpool(pipeline.submit_voice_query, req.text)
    return {"ok": True, "message": message.to_dict()}


@app.post("/ask")
async def ask(req: ActionQuery) -> dict[str, Any]:
    """Send an action request and execute or display the reply."""
    pipeline = _get_pipeline()
    message = await run_in_threadpool(pipeline.submit_action_query, req.query)
    return {"ok": True, "message": message.to_dict()}


@app.post("/replace/confirm")
async def confirm_replacement(req: ReplacementConfirmation) -> dict[str, Any]:
    """Apply a replacement the user accepted in the overlay."""
    pipeline = _get_pipeline()
    message = await run_in_threadpool(pipeline.confirm_replacement, req.new_text)
    return {"ok": True, "message": message.to_dict()}


@app.post("/overlay/visibility")
async def set_overlay_visibility(req: OverlayVisibility) -> dict[str, Any]:
    """Record a show/hide the user made in the overlay itself."""
    overlay = _get_overlay()
    overlay.set_visible(visible=req.visible)
    return {"ok": True, "visible": req.visible}


# --- Presentation channel ---


@app.get("/messages")
async def get_messages(since: int = 0) -> dict[str, Any]:
    """Return channel messages published after sequence number ``since``."""
    channel: NotificationChannel | None = STATE["channel"]
    if channel is None:
        raise HTTPException(status_code=503, detail="Channel not ready")
    messages = channel.messages_since(since)
    return {
        "messages": [m.to_dict() for m in messages],
        "last_seq": channel.last_seq,
    }


@app.get("/status")
async def get_current_status() -> dict[str, Any]:
    """Return presence state and configuration summary."""
    pipeline = _get_pipeline()
    config: AppConfig = STATE["config"]
    monitor: PresenceMonitor | None = STATE["monitor"]
    return {
        "model": config.model,
        "language": config.language,
        "api_key_set": bool(config.api_key),
        "clipboard": pipeline.source.current_clipboard[:CLIPBOARD_PREVIEW_CHARS],
        "presence": (
            {
                "monitoring": True,
                "visible": monitor.state.visible,
                "hidden_for_fullscreen": monitor.state.hidden_for_fullscreen,
            }
            if monitor is not None
            else {"monitoring": False}
        ),
    }
