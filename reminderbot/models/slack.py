"""
Slack payload models.

These models define the subset of Slack Events API and interactivity
payloads the bot reads. Unknown fields are ignored, except on blocks where
they are kept so rich_text structures can be dumped verbatim.
"""

import json
import logging
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

logger = logging.getLogger(__name__)


class Attachment(BaseModel):
    """Legacy message attachment (Slack Email posts the subject as title)"""

    title: Optional[str] = Field(default=None, description="Attachment title")
    text: Optional[str] = Field(default=None, description="Attachment body")
    fallback: Optional[str] = Field(default=None, description="Plain-text fallback")


class BlockText(BaseModel):
    """Text object nested in section/header blocks"""

    type: Optional[str] = None
    text: Optional[str] = None


class Block(BaseModel):
    """Block Kit layout block"""

    model_config = ConfigDict(extra="allow")

    type: str = Field(description="Block type, e.g. section, header, rich_text")
    text: Optional[BlockText] = Field(default=None, description="Section/header text")

    @field_validator("text", mode="before")
    @classmethod
    def _text_object_only(cls, value):
        # markdown blocks carry text as a bare string
        return value if isinstance(value, (dict, BlockText)) else None


class FileRef(BaseModel):
    """File shared with the message"""

    id: Optional[str] = None
    name: Optional[str] = None
    title: Optional[str] = None
    mimetype: Optional[str] = None
    url_private: Optional[str] = None
    url_private_download: Optional[str] = None

    @property
    def download_url(self) -> Optional[str]:
        return self.url_private_download or self.url_private


class InitialComment(BaseModel):
    comment: Optional[str] = None


class InboundMessage(BaseModel):
    """
    A Slack `message` event.

    Every content-bearing field is optional; the corpus collector is the
    only place that knows how to turn these shapes into searchable text.
    """

    type: str = Field(default="message")
    subtype: Optional[str] = Field(default=None, description="e.g. file_share")
    channel: Optional[str] = Field(default=None, description="Channel ID")
    user: Optional[str] = Field(default=None, description="Posting user ID")
    ts: Optional[str] = Field(default=None, description="Message timestamp")
    thread_ts: Optional[str] = Field(default=None, description="Parent thread ts")
    text: Optional[str] = Field(default=None, description="Primary message text")
    attachments: list[Attachment] = Field(default_factory=list)
    blocks: list[Block] = Field(default_factory=list)
    files: list[FileRef] = Field(default_factory=list)
    initial_comment: Optional[InitialComment] = None


class ActionPrompt(BaseModel):
    """One interactive prompt, posted per detected order"""

    order_name: str = Field(description="Normalized order identifier")
    preview: str = Field(default="", description="Short excerpt of the source email")


class ActionValue(BaseModel):
    """
    Data embedded in a button's `value`.

    The order identifier round-trips through Slack; there is no
    server-side session to correlate the click with the reminder message.
    """

    model_config = ConfigDict(populate_by_name=True)

    order_name: str = Field(default="", alias="orderName")

    def dumps(self) -> str:
        return json.dumps({"orderName": self.order_name})

    @classmethod
    def parse(cls, raw: Optional[str]) -> "ActionValue":
        """Parse a button value, degrading to an empty order name if malformed."""
        try:
            return cls.model_validate(json.loads(raw or "{}"))
        except (ValueError, TypeError, ValidationError) as e:
            logger.warning(f"Ignoring malformed action value {raw!r}: {e}")
            return cls()


class SlackUser(BaseModel):
    id: Optional[str] = None
    username: Optional[str] = None
    name: Optional[str] = None

    @property
    def handle(self) -> str:
        return self.username or self.name or "user"


class SlackChannel(BaseModel):
    id: Optional[str] = None


class InteractionMessage(BaseModel):
    ts: Optional[str] = None
    thread_ts: Optional[str] = None


class BlockAction(BaseModel):
    action_id: str
    value: Optional[str] = None


class BlockActionsPayload(BaseModel):
    """Interactivity payload sent when a user clicks a button"""

    type: str = Field(description="Payload type, block_actions for buttons")
    user: SlackUser = Field(default_factory=SlackUser)
    channel: Optional[SlackChannel] = None
    message: Optional[InteractionMessage] = None
    actions: list[BlockAction] = Field(default_factory=list)

    @property
    def channel_id(self) -> Optional[str]:
        return self.channel.id if self.channel else None

    @property
    def reply_thread_ts(self) -> Optional[str]:
        """Thread to answer in: the prompt's parent thread, else the prompt itself."""
        if self.message is None:
            return None
        return self.message.thread_ts or self.message.ts

    @property
    def first_action(self) -> Optional[BlockAction]:
        return self.actions[0] if self.actions else None
