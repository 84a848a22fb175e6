"""
Slack Web API client.

Covers the two calls the bot makes: posting messages (optionally in a
thread, with Block Kit blocks) and downloading the bodies of files shared
with a message, which is how Slack Email delivers the email text.
"""

import logging
from typing import Any

import requests

from reminderbot.errors import FileFetchError, SlackApiError
from reminderbot.models.slack import FileRef

SLACK_API_URL = "https://slack.com/api"

logger = logging.getLogger(__name__)


class SlackClient:
    """Thin wrapper around the Slack Web API using a bot token."""

    def __init__(self, token: str, timeout: float = 30):
        self.token = token
        self.timeout = timeout

    @property
    def _auth_headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.token}"}

    def post_message(
        self,
        channel: str,
        text: str,
        thread_ts: str | None = None,
        blocks: list[dict[str, Any]] | None = None,
    ) -> dict:
        """
        Post a message via chat.postMessage.

        Args:
            channel: Channel ID
            text: Message text (used as notification fallback when blocks are set)
            thread_ts: Parent message timestamp to reply in a thread
            blocks: Optional Block Kit blocks

        Returns:
            Slack API response body

        Raises:
            SlackApiError: On transport failure or an ok=false response
        """
        payload: dict[str, Any] = {"channel": channel, "text": text}
        if thread_ts:
            payload["thread_ts"] = thread_ts
        if blocks:
            payload["blocks"] = blocks

        try:
            resp = requests.post(
                f"{SLACK_API_URL}/chat.postMessage",
                json=payload,
                headers=self._auth_headers,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise SlackApiError(f"chat.postMessage failed: {e}") from e

        if not resp.ok:
            raise SlackApiError(f"chat.postMessage HTTP {resp.status_code}")

        try:
            data = resp.json()
        except ValueError as e:
            raise SlackApiError(f"chat.postMessage returned a non-JSON body: {e}") from e
        if not isinstance(data, dict):
            raise SlackApiError("chat.postMessage returned an unexpected body")
        if not data.get("ok"):
            raise SlackApiError(f"chat.postMessage error: {data.get('error')}")
        return data

    def fetch_file_text(self, file: FileRef) -> str:
        """
        Download one shared file's body as text.

        Raises:
            FileFetchError: If the file has no download URL, the request
                fails, or Slack answers with a non-success status
        """
        url = file.download_url
        if not url:
            raise FileFetchError(f"File {file.name!r} has no download URL")

        try:
            resp = requests.get(url, headers=self._auth_headers, timeout=self.timeout)
        except requests.RequestException as e:
            raise FileFetchError(f"File fetch error for {file.name!r}: {e}") from e

        if not resp.ok:
            raise FileFetchError(
                f"File fetch failed for {file.name!r}: HTTP {resp.status_code}"
            )
        return resp.text

    def fetch_file_texts(self, files: list[FileRef]) -> list[str]:
        """
        Download the bodies of all files that have a download URL.

        A failure on one file is logged and skipped; the rest are still fetched.
        """
        texts: list[str] = []
        for file in files:
            if not file.download_url:
                continue
            try:
                text = self.fetch_file_text(file)
            except FileFetchError as e:
                logger.warning(
                    str(e),
                    extra={"json_fields": {"name": file.name, "mimetype": file.mimetype}},
                )
                continue

            texts.append(text)
            logger.info(
                "File fetched",
                extra={
                    "json_fields": {
                        "fileFetched": {
                            "name": file.name,
                            "size": len(text or ""),
                            "mimetype": file.mimetype,
                        }
                    }
                },
            )
        return texts
