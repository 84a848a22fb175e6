"""
Per-order action prompts.

Each detected order gets its own message with two buttons, so orders from
the same reminder can be cleared or escalated independently.
"""

from typing import Any

from reminderbot.config import PREVIEW_LENGTH
from reminderbot.models.slack import ActionPrompt, ActionValue, InboundMessage

ACTION_GOOD_CLEAR = "good_clear"
ACTION_MAKE_TRELLO = "make_trello"


def build_preview(message: InboundMessage) -> str:
    """Short excerpt shown under each prompt: message text, else first file title."""
    if message.text:
        return message.text[:PREVIEW_LENGTH]
    if message.files and message.files[0].title:
        return message.files[0].title[:PREVIEW_LENGTH]
    return ""


def build_prompts(message: InboundMessage, order_names: list[str]) -> list[ActionPrompt]:
    preview = build_preview(message)
    return [ActionPrompt(order_name=name, preview=preview) for name in order_names]


def prompt_text(prompt: ActionPrompt) -> str:
    return f"Actions for {prompt.order_name}"


def build_action_blocks(prompt: ActionPrompt) -> list[dict[str, Any]]:
    """Block Kit layout for one order: heading, optional preview, two buttons."""
    value = ActionValue(order_name=prompt.order_name).dumps()

    blocks: list[dict[str, Any]] = [
        {
            "type": "section",
            "text": {
                "type": "mrkdwn",
                "text": f"Daily reminder for *{prompt.order_name}*.",
            },
        }
    ]
    if prompt.preview:
        blocks.append(
            {
                "type": "context",
                "elements": [{"type": "mrkdwn", "text": f"_{prompt.preview}_"}],
            }
        )
    blocks.append(
        {
            "type": "actions",
            "elements": [
                {
                    "type": "button",
                    "text": {"type": "plain_text", "text": "Good, clear tags"},
                    "action_id": ACTION_GOOD_CLEAR,
                    "style": "primary",
                    "value": value,
                },
                {
                    "type": "button",
                    "text": {"type": "plain_text", "text": "Make Trello Card"},
                    "action_id": ACTION_MAKE_TRELLO,
                    "value": value,
                },
            ],
        }
    )
    return blocks
