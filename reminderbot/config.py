"""
Configuration for the reminder bot.

Settings are read from the environment (optionally populated from a .env
file by the app entrypoint). Fixed detection and Shopify constants live here too.
"""

import os
from functools import lru_cache

from pydantic import BaseModel, Field

from reminderbot.models.order import MetafieldRef

DEFAULT_SHOPIFY_API_VERSION = "2025-10"

# Detection
DAILY_SUBJECT = (
    "Daily Reminder to Remove NeedPhotoNoShip Tag and Follow-Up Metafields as Needed"
)
PREVIEW_LENGTH = 140

# Shopify targets
CLEAR_TO_NO = "No"
TAGS_TO_REMOVE = ["NeedPhotoNoShip", "NeedsFollowUp_Yes"]
MF_NEEDS_FOLLOW_UP = MetafieldRef(namespace="custom", key="_nc_needs_follow_up_")
MF_FOLLOW_UP_NOTES = MetafieldRef(namespace="custom", key="follow_up_notes")

# Trello
TRELLO_CARD_SUFFIX = "needs more info, needs email follow up"


class Settings(BaseModel):
    """Runtime settings sourced from environment variables."""

    slack_bot_token: str = Field(default="", description="Slack bot OAuth token")
    slack_signing_secret: str = Field(
        default="", description="Secret used to verify Slack request signatures"
    )
    slack_skip_signature_check: bool = Field(
        default=False,
        description="Accept unsigned requests when no signing secret is set (local dev only)",
    )
    watch_channel: str = Field(
        default="", description="Channel ID where reminder emails are posted"
    )

    shopify_domain: str = Field(default="", description="e.g. shop.myshopify.com")
    shopify_admin_token: str = Field(default="", description="Admin API access token")
    shopify_api_version: str = Field(default=DEFAULT_SHOPIFY_API_VERSION)

    trello_key: str = Field(default="")
    trello_token: str = Field(default="")
    trello_board_id: str = Field(default="", description="Skips name lookup if set")
    trello_list_id: str = Field(default="", description="Skips name lookup if set")
    trello_board_name: str = Field(default="Carismo Design")
    trello_list_name: str = Field(default="Nick To-Do")

    http_timeout_seconds: float = Field(
        default=30, description="Timeout applied to every outbound HTTP call"
    )

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from the current process environment."""
        return cls(
            slack_bot_token=os.getenv("SLACK_BOT_TOKEN", ""),
            slack_signing_secret=os.getenv("SLACK_SIGNING_SECRET", ""),
            slack_skip_signature_check=(
                os.getenv("SLACK_SKIP_SIGNATURE_CHECK", "").lower() in ("1", "true", "yes")
            ),
            watch_channel=(
                os.getenv("FORWARD_CHANNEL_ID")
                or os.getenv("ORDER_EMAIL_CHANNEL_ID")
                or ""
            ),
            shopify_domain=os.getenv("SHOPIFY_DOMAIN", ""),
            shopify_admin_token=os.getenv("SHOPIFY_ADMIN_TOKEN", ""),
            shopify_api_version=(
                os.getenv("SHOPIFY_API_VERSION") or DEFAULT_SHOPIFY_API_VERSION
            ),
            trello_key=os.getenv("TRELLO_KEY", ""),
            trello_token=os.getenv("TRELLO_TOKEN", ""),
            trello_board_id=os.getenv("TRELLO_BOARD_ID", ""),
            trello_list_id=os.getenv("TRELLO_LIST_ID", ""),
            trello_board_name=os.getenv("TRELLO_BOARD_NAME") or "Carismo Design",
            trello_list_name=os.getenv("TRELLO_LIST_NAME") or "Nick To-Do",
            http_timeout_seconds=float(os.getenv("HTTP_TIMEOUT_SECONDS") or 30),
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return process-wide settings, read once from the environment."""
    return Settings.from_env()
