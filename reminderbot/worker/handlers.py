"""
Handlers for Slack message events and button clicks.

These run after the HTTP request has been acknowledged. Each message and
each click is handled on its own; errors are reported in the Slack thread
and never propagate out of the handler.
"""

import logging
from functools import lru_cache

from reminderbot.clients.shopify import ShopifyClient
from reminderbot.clients.slack import SlackClient
from reminderbot.clients.trello import TrelloClient, TrelloListResolver
from reminderbot.config import Settings, get_settings
from reminderbot.errors import OrderNotFound, SlackApiError, WorkflowStepError
from reminderbot.models.slack import ActionValue, BlockActionsPayload, InboundMessage
from reminderbot.utils.corpus import collect_haystacks, widen_corpus
from reminderbot.utils.email_filter import (
    classify_reminder,
    extract_subject,
    is_daily_subject,
)
from reminderbot.utils.order_names import dedupe_order_names, find_order_names
from reminderbot.worker.clear import ClearWorkflow, format_clear_summary
from reminderbot.worker.escalate import EscalateWorkflow
from reminderbot.worker.prompts import (
    ACTION_GOOD_CLEAR,
    ACTION_MAKE_TRELLO,
    build_action_blocks,
    build_prompts,
    prompt_text,
)

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def get_slack_client() -> SlackClient:
    settings = get_settings()
    return SlackClient(settings.slack_bot_token, timeout=settings.http_timeout_seconds)


@lru_cache(maxsize=1)
def get_shopify_client() -> ShopifyClient:
    settings = get_settings()
    return ShopifyClient(
        domain=settings.shopify_domain,
        access_token=settings.shopify_admin_token,
        api_version=settings.shopify_api_version,
        timeout=settings.http_timeout_seconds,
    )


@lru_cache(maxsize=1)
def get_trello_client() -> TrelloClient:
    settings = get_settings()
    return TrelloClient(
        settings.trello_key,
        settings.trello_token,
        timeout=settings.http_timeout_seconds,
    )


@lru_cache(maxsize=1)
def get_trello_resolver() -> TrelloListResolver:
    """Process-wide resolver; its cached board/list is shared by all clicks."""
    settings = get_settings()
    return TrelloListResolver(
        get_trello_client(),
        board_id=settings.trello_board_id,
        list_id=settings.trello_list_id,
        board_name=settings.trello_board_name,
        list_name=settings.trello_list_name,
    )


def extract_daily_reminder_orders(
    message: InboundMessage, slack: SlackClient
) -> list[str]:
    """
    Find the order names in a daily reminder message.

    The visible message content is scanned first. If the subject did not
    match or no orders were visible, the bodies of attached files are
    downloaded and appended, and the widened text is rescanned.

    Args:
        message: Slack message event
        slack: Client used to download attached files

    Returns:
        Uppercased, deduplicated order names in first-seen order; empty if
        the message is not the daily reminder or mentions no orders
    """
    subject = extract_subject(message).strip()
    subject_is_daily = is_daily_subject(subject)

    corpus = collect_haystacks(message)
    orders = find_order_names(corpus)

    if not subject_is_daily or not orders:
        file_texts = slack.fetch_file_texts(message.files)
        if file_texts:
            corpus = widen_corpus(corpus, file_texts)
            if not orders:
                orders = find_order_names(corpus)

    classification = classify_reminder(subject, corpus)

    logger.info(
        "Daily reminder check",
        extra={
            "json_fields": {
                "dailyCheck": {
                    "subject": subject,
                    "isDaily": classification.should_process,
                    "reason": classification.reason,
                    "foundOrders": len(orders),
                    "sample": corpus[:160],
                }
            }
        },
    )

    if not classification.should_process or not orders:
        return []

    return dedupe_order_names(orders)


def handle_message_event(
    message: InboundMessage,
    settings: Settings | None = None,
    slack: SlackClient | None = None,
) -> list[str]:
    """
    Post one action prompt per order found in a daily reminder.

    Messages outside the watched channel are ignored, as is everything when
    no watch channel is configured.

    Returns:
        Order names a prompt was posted for
    """
    settings = settings or get_settings()
    if not settings.watch_channel or message.channel != settings.watch_channel:
        return []

    slack = slack or get_slack_client()
    order_names = extract_daily_reminder_orders(message, slack)
    if not order_names:
        return []

    posted: list[str] = []
    for prompt in build_prompts(message, order_names):
        try:
            slack.post_message(
                channel=message.channel,
                text=prompt_text(prompt),
                thread_ts=message.ts,
                blocks=build_action_blocks(prompt),
            )
        except SlackApiError as e:
            logger.error(f"Failed to post prompt for {prompt.order_name}: {e}")
            continue
        posted.append(prompt.order_name)

    logger.info(f"Posted {len(posted)} action prompts for message {message.ts}")
    return posted


def _reply(slack: SlackClient, payload: BlockActionsPayload, text: str) -> None:
    channel = payload.channel_id
    if not channel:
        logger.error(f"No channel to reply to: {text}")
        return
    slack.post_message(channel=channel, text=text, thread_ts=payload.reply_thread_ts)


def _order_name(payload: BlockActionsPayload) -> str:
    action = payload.first_action
    return ActionValue.parse(action.value if action else None).order_name


def handle_clear_action(
    payload: BlockActionsPayload,
    slack: SlackClient | None = None,
    shopify: ShopifyClient | None = None,
) -> None:
    """Run the clear workflow for the clicked order and report the outcome."""
    slack = slack or get_slack_client()
    shopify = shopify or get_shopify_client()
    order_name = _order_name(payload)

    try:
        result = ClearWorkflow(shopify).run(order_name, payload.user.handle)
    except OrderNotFound:
        _reply(slack, payload, f"❌ Order not found: {order_name}")
        return
    except WorkflowStepError as e:
        logger.error(f"good_clear failed for {order_name} at step {e.step}: {e}")
        _reply(slack, payload, f"❌ Failed to clear tags/metafields: {e}")
        return

    _reply(slack, payload, format_clear_summary(result))


def handle_escalate_action(
    payload: BlockActionsPayload,
    slack: SlackClient | None = None,
    trello: TrelloClient | None = None,
    resolver: TrelloListResolver | None = None,
) -> None:
    """Create a Trello card for the clicked order and report the outcome."""
    slack = slack or get_slack_client()
    trello = trello or get_trello_client()
    resolver = resolver or get_trello_resolver()
    order_name = _order_name(payload)

    try:
        card = EscalateWorkflow(trello, resolver).run(order_name)
    except Exception as e:
        logger.error(f"make_trello failed for {order_name}: {e}")
        _reply(slack, payload, f"❌ Failed to create Trello card: {e}")
        return

    _reply(slack, payload, f"📝 Trello card created: {card.url}")


ACTION_HANDLERS = {
    ACTION_GOOD_CLEAR: handle_clear_action,
    ACTION_MAKE_TRELLO: handle_escalate_action,
}


def handle_block_actions(payload: BlockActionsPayload) -> None:
    """Dispatch a button click to its action handler."""
    action = payload.first_action
    if action is None:
        logger.warning("block_actions payload without actions")
        return

    handler = ACTION_HANDLERS.get(action.action_id)
    if handler is None:
        logger.info(f"Ignoring unknown action: {action.action_id}")
        return

    handler(payload)


def resolve_trello_at_startup() -> bool:
    """Eagerly resolve the Trello list; failures are logged and retried on first use."""
    try:
        get_trello_resolver().resolve()
        logger.info("Trello board/list resolved")
        return True
    except Exception as e:
        logger.warning(
            f"Trello board/list resolution failed. Will retry on first use. {e}"
        )
        return False
