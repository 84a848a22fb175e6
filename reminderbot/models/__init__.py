"""
Reminder bot data models.

Pydantic models for Slack payloads, Shopify orders and Trello objects.
"""

from reminderbot.models.order import MetafieldRef, Metafield, OrderRecord, UserError
from reminderbot.models.slack import (
    ActionPrompt,
    ActionValue,
    Attachment,
    Block,
    BlockAction,
    BlockActionsPayload,
    FileRef,
    InboundMessage,
    InitialComment,
)
from reminderbot.models.trello import BoardListIdentity, TaskCard, TrelloBoard, TrelloList

__all__ = [
    "ActionPrompt",
    "ActionValue",
    "Attachment",
    "Block",
    "BlockAction",
    "BlockActionsPayload",
    "BoardListIdentity",
    "FileRef",
    "InboundMessage",
    "InitialComment",
    "Metafield",
    "MetafieldRef",
    "OrderRecord",
    "TaskCard",
    "TrelloBoard",
    "TrelloList",
    "UserError",
]
