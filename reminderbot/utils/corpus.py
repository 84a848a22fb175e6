"""
Corpus collection for Slack-delivered emails.

Slack renders forwarded emails in several shapes (plain text, legacy
attachments, Block Kit blocks, shared files). This module flattens all of
them into one newline-joined text blob that classification and order
extraction can scan.
"""

import logging

from reminderbot.models.slack import InboundMessage

logger = logging.getLogger(__name__)

TEXT_BLOCK_TYPES = {"section", "header"}
RICH_TEXT_BLOCK_TYPE = "rich_text"


def collect_haystacks(message: InboundMessage) -> str:
    """
    Build the searchable text for a message.

    Contributions are appended in a fixed order and never deduplicated:
    text, attachment title/text/fallback, block text (or a raw JSON dump
    for rich_text blocks), file title/name, and the initial comment.

    Args:
        message: Parsed Slack message event

    Returns:
        All contributions joined with newlines
    """
    haystacks: list[str] = []

    if message.text:
        haystacks.append(message.text)

    for attachment in message.attachments:
        if attachment.title:
            haystacks.append(attachment.title)
        if attachment.text:
            haystacks.append(attachment.text)
        if attachment.fallback:
            haystacks.append(attachment.fallback)

    for block in message.blocks:
        if block.type in TEXT_BLOCK_TYPES and block.text and block.text.text:
            haystacks.append(block.text.text)
        if block.type == RICH_TEXT_BLOCK_TYPE:
            # Dumped raw so order names nested in elements are still scannable
            try:
                haystacks.append(block.model_dump_json(exclude_none=True))
            except (ValueError, TypeError):
                pass

    for file in message.files:
        if file.title:
            haystacks.append(file.title)
        if file.name:
            haystacks.append(file.name)

    if message.initial_comment and message.initial_comment.comment:
        haystacks.append(message.initial_comment.comment)

    return "\n".join(haystacks)


def widen_corpus(corpus: str, file_texts: list[str]) -> str:
    """Append downloaded file bodies to an existing corpus."""
    if not file_texts:
        return corpus
    return corpus + "\n" + "\n".join(file_texts)
