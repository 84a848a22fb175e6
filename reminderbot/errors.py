"""
Error taxonomy for the reminder bot.

Extraction-phase errors (FileFetchError) are recovered where they occur.
Workflow-phase errors abort the workflow and are reported in the Slack thread.
"""


class ReminderBotError(Exception):
    """Base class for all reminder bot errors."""


class OrderNotFound(ReminderBotError):
    """No Shopify order matches the given display name."""

    def __init__(self, order_name: str):
        self.order_name = order_name
        super().__init__(f"Order not found: {order_name}")


class BackendMutationError(ReminderBotError):
    """A Shopify Admin API call failed at transport level or returned errors."""


class TrelloError(ReminderBotError):
    """A Trello REST call returned a non-success status."""


class BoardNotFound(ReminderBotError):
    """No open Trello board matches the configured board name."""

    def __init__(self, board_name: str):
        self.board_name = board_name
        super().__init__(f"Trello board not found: {board_name}")


class ListNotFound(ReminderBotError):
    """No open list on the resolved board matches the configured list name."""

    def __init__(self, list_name: str):
        self.list_name = list_name
        super().__init__(f"Trello list not found on board: {list_name}")


class SlackApiError(ReminderBotError):
    """Slack Web API call failed or answered ok=false."""


class FileFetchError(ReminderBotError):
    """Downloading an attached Slack file failed. Non-fatal."""


class WorkflowStepError(ReminderBotError):
    """A workflow step failed; later steps were not attempted."""

    def __init__(self, step: str, cause: Exception):
        self.step = step
        self.cause = cause
        super().__init__(str(cause))
