"""
Slack Events API and interactivity endpoints.

Slack expects an answer within three seconds, so both endpoints
acknowledge immediately and do the actual work in a background task.
Replies are posted to the thread through the Web API.
"""

import json
import logging
from typing import Any, Callable
from urllib.parse import parse_qs

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Request, Response
from pydantic import ValidationError

from reminderbot.api.auth import verify_slack_signature
from reminderbot.models.slack import BlockActionsPayload, InboundMessage
from reminderbot.worker.handlers import handle_block_actions, handle_message_event

router = APIRouter(dependencies=[Depends(verify_slack_signature)])
logger = logging.getLogger(__name__)


def _run_safely(name: str, handler: Callable[..., Any], *args: Any) -> None:
    """Run a handler, logging instead of raising so one failure stays isolated."""
    try:
        handler(*args)
    except Exception:
        logger.exception(f"{name} handler error")


@router.post("/slack/events", operation_id="handleSlackEvent")
async def slack_events(request: Request, background_tasks: BackgroundTasks) -> dict:
    """
    Receive Slack Events API callbacks.

    Answers url_verification challenges, and schedules handling of
    `message` events. Other event types are acknowledged and ignored.
    """
    try:
        body = json.loads(await request.body())
    except ValueError as e:
        raise HTTPException(status_code=400, detail=f"Invalid event body: {e}")

    if body.get("type") == "url_verification":
        return {"challenge": body.get("challenge")}

    if body.get("type") != "event_callback":
        return {"ok": True}

    event = body.get("event") or {}
    if event.get("type") != "message":
        return {"ok": True}

    try:
        message = InboundMessage.model_validate(event)
    except ValidationError as e:
        logger.warning(f"Ignoring unparseable message event: {e}")
        return {"ok": True}

    background_tasks.add_task(_run_safely, "message", handle_message_event, message)
    return {"ok": True}


@router.post("/slack/interactive", operation_id="handleSlackInteraction")
async def slack_interactive(
    request: Request, background_tasks: BackgroundTasks
) -> Response:
    """
    Receive button clicks.

    Slack posts a form-encoded body with a single `payload` JSON field.
    The click is acknowledged with an empty 200 before any work is done.
    """
    try:
        form = parse_qs((await request.body()).decode("utf-8"))
    except UnicodeDecodeError as e:
        raise HTTPException(status_code=400, detail=f"Invalid interaction body: {e}")
    raw_payload = (form.get("payload") or [""])[0]

    try:
        data = json.loads(raw_payload)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=f"Invalid interaction payload: {e}")

    if not isinstance(data, dict) or data.get("type") != "block_actions":
        return Response(status_code=200)

    try:
        payload = BlockActionsPayload.model_validate(data)
    except ValidationError as e:
        logger.warning(f"Ignoring unparseable block_actions payload: {e}")
        return Response(status_code=200)

    background_tasks.add_task(_run_safely, "block_actions", handle_block_actions, payload)
    return Response(status_code=200)
