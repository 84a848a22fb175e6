"""
Clear workflow for the "Good, clear tags" button.

Steps run strictly in order and the first failure stops the rest. Steps
already applied are not rolled back:

1. lookup        find the order by display name (any status)
2. snapshot      remember the current follow-up flag and notes for the audit
3. flag_clear    set custom._nc_needs_follow_up_ to "No"
4. notes_delete  delete custom.follow_up_notes
5. tags_remove   remove the NeedPhotoNoShip / NeedsFollowUp_Yes tags
6. note_audit    prepend an audit line to the order note
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable

from reminderbot.clients.shopify import ShopifyClient
from reminderbot.config import (
    CLEAR_TO_NO,
    MF_FOLLOW_UP_NOTES,
    MF_NEEDS_FOLLOW_UP,
    TAGS_TO_REMOVE,
)
from reminderbot.errors import OrderNotFound, WorkflowStepError
from reminderbot.models.order import OrderRecord

logger = logging.getLogger(__name__)

MAX_NOTES_SHOWN = 4000


@dataclass
class ClearResult:
    """Everything the summary message needs, collected while the steps run."""

    order_name: str
    username: str
    order: OrderRecord | None = None
    old_needs_follow_up: str | None = None
    old_follow_up_notes: str | None = None
    tags_removed: list[str] = field(default_factory=list)
    audit_line: str = ""
    note: str = ""
    admin_url: str = ""
    completed_steps: list[str] = field(default_factory=list)


class ClearWorkflow:
    """Clears an order's follow-up state in Shopify."""

    def __init__(self, shopify: ShopifyClient):
        self.shopify = shopify

    @property
    def steps(self) -> list[tuple[str, Callable[[ClearResult], None]]]:
        return [
            ("lookup", self._lookup),
            ("snapshot", self._snapshot),
            ("flag_clear", self._flag_clear),
            ("notes_delete", self._notes_delete),
            ("tags_remove", self._tags_remove),
            ("note_audit", self._note_audit),
        ]

    def run(self, order_name: str, username: str) -> ClearResult:
        """
        Run all steps for one order.

        Args:
            order_name: Order display name, e.g. C#12345
            username: Slack handle of the person who clicked, for the audit line

        Returns:
            ClearResult with before/after values

        Raises:
            OrderNotFound: The lookup step found no order; nothing was changed
            WorkflowStepError: A later step failed; its name is in `.step`
        """
        result = ClearResult(order_name=order_name, username=username)

        for name, step in self.steps:
            try:
                step(result)
            except OrderNotFound:
                raise
            except Exception as e:
                raise WorkflowStepError(name, e) from e
            result.completed_steps.append(name)

        logger.info(
            f"Cleared follow-up state for {order_name}",
            extra={
                "json_fields": {
                    "order_id": result.order.id,
                    "old_needs_follow_up": result.old_needs_follow_up,
                    "had_follow_up_notes": bool(result.old_follow_up_notes),
                }
            },
        )
        return result

    def _lookup(self, result: ClearResult) -> None:
        if not result.order_name:
            raise OrderNotFound(result.order_name)
        order = self.shopify.get_order_by_name(result.order_name)
        if order is None:
            raise OrderNotFound(result.order_name)
        result.order = order
        result.admin_url = self.shopify.order_admin_url(order.legacy_resource_id)

    def _snapshot(self, result: ClearResult) -> None:
        result.old_needs_follow_up = result.order.needs_follow_up_value
        result.old_follow_up_notes = result.order.follow_up_notes_value

    def _flag_clear(self, result: ClearResult) -> None:
        self.shopify.set_metafield(result.order.id, MF_NEEDS_FOLLOW_UP, CLEAR_TO_NO)

    def _notes_delete(self, result: ClearResult) -> None:
        self.shopify.delete_metafield(result.order.id, MF_FOLLOW_UP_NOTES)

    def _tags_remove(self, result: ClearResult) -> None:
        self.shopify.remove_tags(result.order.id, TAGS_TO_REMOVE)
        result.tags_removed = list(TAGS_TO_REMOVE)

    def _note_audit(self, result: ClearResult) -> None:
        result.audit_line = audit_line(result.username)
        result.note = self.shopify.prepend_order_note(result.order.id, result.audit_line)


def audit_line(username: str, now: datetime | None = None) -> str:
    date = (now or datetime.now(timezone.utc)).date().isoformat()
    return f"Cleared from daily reminder on {date} by @{username}"


def for_code_block(text: str | None) -> str:
    """Break up triple backticks so text can sit inside a Slack code block."""
    return (text or "").replace("```", "`\u200b`\u200b`").strip()


def format_clear_summary(result: ClearResult) -> str:
    """Slack mrkdwn summary posted after a successful clear."""
    old_notes_shown = (
        result.old_follow_up_notes
        and for_code_block(result.old_follow_up_notes[:MAX_NOTES_SHOWN])
    ) or "(blank)"

    lines = [
        f":white_check_mark: *Updated {result.order_name}*",
        "",
        f"• Metafield `{MF_NEEDS_FOLLOW_UP}`:",
        f"> {result.old_needs_follow_up or '(blank)'} → *{CLEAR_TO_NO}*",
        "",
        f"• Metafield `{MF_FOLLOW_UP_NOTES}` (old → new):",
        "```",
        old_notes_shown,
        "```",
        "→ `deleted`",
        "",
        "• Tags removed:",
        ", ".join(result.tags_removed),
        "",
        "• Note prepended with audit entry",
        "",
        f"<{result.admin_url}|Open Order in Shopify Admin>",
    ]
    return "\n".join(lines)
