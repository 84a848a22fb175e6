"""
Slack request verification.

Slack signs every request with the app's signing secret. Requests whose
signature does not match, or whose timestamp is more than five minutes
old, are rejected.
"""

import hashlib
import hmac
import logging
import time

from fastapi import Header, HTTPException, Request, status

from reminderbot.config import get_settings

MAX_REQUEST_AGE_SECONDS = 60 * 5

logger = logging.getLogger(__name__)


def compute_slack_signature(signing_secret: str, timestamp: str, body: bytes) -> str:
    """
    Compute the v0 signature Slack sends in X-Slack-Signature.

    Args:
        signing_secret: App signing secret
        timestamp: Value of X-Slack-Request-Timestamp
        body: Raw request body

    Returns:
        Signature string of the form "v0=<hex digest>"
    """
    base = b"v0:" + timestamp.encode() + b":" + body
    digest = hmac.new(signing_secret.encode(), base, hashlib.sha256).hexdigest()
    return f"v0={digest}"


async def verify_slack_signature(
    request: Request,
    x_slack_request_timestamp: str | None = Header(
        default=None, alias="X-Slack-Request-Timestamp"
    ),
    x_slack_signature: str | None = Header(default=None, alias="X-Slack-Signature"),
) -> None:
    """
    Reject requests that were not signed by Slack.

    Without a signing secret every request is rejected, unless
    SLACK_SKIP_SIGNATURE_CHECK is set for local development.

    Raises:
        HTTPException: 401 if no secret is configured, or if headers are
            missing, stale, or do not match
    """
    settings = get_settings()
    signing_secret = settings.slack_signing_secret
    if not signing_secret:
        if settings.slack_skip_signature_check:
            logger.warning("SLACK_SIGNING_SECRET not set, skipping signature check")
            return
        logger.error("SLACK_SIGNING_SECRET not set, rejecting Slack request")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Slack signing secret not configured",
        )

    if not x_slack_request_timestamp or not x_slack_signature:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing Slack signature headers",
        )

    try:
        timestamp = int(x_slack_request_timestamp)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid Slack request timestamp",
        )

    if abs(time.time() - timestamp) > MAX_REQUEST_AGE_SECONDS:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Stale Slack request",
        )

    body = await request.body()
    expected = compute_slack_signature(signing_secret, x_slack_request_timestamp, body)
    if not hmac.compare_digest(expected, x_slack_signature):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid Slack signature",
        )
