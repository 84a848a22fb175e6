"""Escalate workflow for the "Make Trello Card" button."""

import logging

from reminderbot.clients.trello import TrelloClient, TrelloListResolver
from reminderbot.config import TRELLO_CARD_SUFFIX
from reminderbot.errors import ReminderBotError
from reminderbot.models.trello import TaskCard

logger = logging.getLogger(__name__)


def card_title(order_name: str) -> str:
    return f"{order_name} {TRELLO_CARD_SUFFIX}"


class EscalateWorkflow:
    """
    Creates one Trello card for an order.

    Every click creates a new card; existing cards for the same order are
    not looked up.
    """

    def __init__(self, trello: TrelloClient, resolver: TrelloListResolver):
        self.trello = trello
        self.resolver = resolver

    def run(self, order_name: str) -> TaskCard:
        """
        Resolve the destination list and create the card.

        Raises:
            ReminderBotError: Missing order name
            BoardNotFound, ListNotFound, TrelloError: Resolution or creation failed
        """
        if not order_name:
            raise ReminderBotError("missing order name in button payload")

        identity = self.resolver.get()
        card = self.trello.create_card(identity.list_id, card_title(order_name))
        logger.info(
            f"Created Trello card for {order_name}",
            extra={"json_fields": {"card_id": card.id, "list_id": identity.list_id}},
        )
        return card
