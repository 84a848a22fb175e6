"""
Daily reminder email detection.

A message is the daily NeedPhotoNoShip reminder if its subject matches
exactly (case-insensitive), or if its content mentions both "daily
reminder" and "need photo"/"needphoto".
"""

import logging
import re
from typing import NamedTuple

from reminderbot.config import DAILY_SUBJECT
from reminderbot.models.slack import InboundMessage

logger = logging.getLogger(__name__)

# Unicode hyphen, non-breaking hyphen, figure dash, en dash, em dash, minus
HYPHEN_VARIANTS = re.compile("[\u2010\u2011\u2012\u2013\u2014\u2212]")

DAILY_REMINDER_PATTERN = re.compile(r"daily\s+reminder", re.IGNORECASE)
NEED_PHOTO_PATTERN = re.compile(r"need\s*photo|needphoto", re.IGNORECASE)

SUBJECT_PREFIX = re.compile(r"^subject:\s*", re.IGNORECASE)


class FilterResult(NamedTuple):
    """Result of reminder classification."""
    should_process: bool
    reason: str


def extract_subject(message: InboundMessage) -> str:
    """
    Derive the email subject from a Slack-posted email.

    Prefers the first attachment title. Otherwise uses the first line of the
    message text, with a leading "Subject:" stripped when present.
    """
    titles = [a.title for a in message.attachments if a.title]
    if titles:
        return titles[0].strip()

    if message.text:
        first = message.text.split("\n")[0].strip()
        if first.lower().startswith("subject:"):
            return SUBJECT_PREFIX.sub("", first).strip()
        return first

    return ""


def is_daily_subject(subject: str | None) -> bool:
    return (subject or "").strip().lower() == DAILY_SUBJECT.lower()


def normalize_hyphens(text: str) -> str:
    return HYPHEN_VARIANTS.sub("-", text)


def is_daily_reminder_text(text: str | None) -> bool:
    """Content heuristic used when no subject metadata is available."""
    normalized = normalize_hyphens(text or "")
    return bool(
        DAILY_REMINDER_PATTERN.search(normalized)
        and NEED_PHOTO_PATTERN.search(normalized)
    )


def classify_reminder(subject: str | None, corpus: str | None) -> FilterResult:
    """
    Decide whether a message is the daily reminder.

    Args:
        subject: Subject derived by extract_subject
        corpus: Collected message text (possibly widened with file bodies)

    Returns:
        FilterResult: (should_process, reason)
    """
    if is_daily_subject(subject):
        return FilterResult(True, "Subject matches daily reminder")

    if is_daily_reminder_text(corpus):
        return FilterResult(True, "Content matches daily reminder wording")

    return FilterResult(False, "Not a daily reminder")
