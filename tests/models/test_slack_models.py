"""
Tests for Slack payload models.
"""

from reminderbot.models.slack import (
    ActionValue,
    BlockActionsPayload,
    FileRef,
    InboundMessage,
)


class TestInboundMessage:
    def test_file_share_event(self):
        event = {
            "type": "message",
            "subtype": "file_share",
            "channel": "C123",
            "ts": "1700000000.000100",
            "text": "",
            "files": [
                {
                    "id": "F1",
                    "name": "email.txt",
                    "title": "Daily Reminder",
                    "mimetype": "text/plain",
                    "url_private": "https://files.slack.com/private",
                    "url_private_download": "https://files.slack.com/download",
                    "size": 100,
                }
            ],
            "unknown_field": True,
        }
        message = InboundMessage.model_validate(event)
        assert message.subtype == "file_share"
        assert message.files[0].download_url == "https://files.slack.com/download"
        assert message.attachments == []
        assert message.blocks == []

    def test_markdown_block_with_string_text(self):
        event = {
            "type": "message",
            "text": "Subject: Daily Reminder",
            "blocks": [
                {"type": "markdown", "text": "**C#12345**"},
                {"type": "section", "text": {"type": "mrkdwn", "text": "C#12346"}},
            ],
        }
        message = InboundMessage.model_validate(event)

        assert message.blocks[0].type == "markdown"
        assert message.blocks[0].text is None
        assert message.blocks[1].text.text == "C#12346"

    def test_download_url_falls_back_to_private_url(self):
        file = FileRef(url_private="https://files.slack.com/private")
        assert file.download_url == "https://files.slack.com/private"
        assert FileRef().download_url is None


class TestActionValue:
    def test_round_trip_through_button_value(self):
        raw = ActionValue(order_name="C#12345").dumps()
        assert raw == '{"orderName": "C#12345"}'
        assert ActionValue.parse(raw).order_name == "C#12345"

    def test_malformed_json_degrades_to_empty(self):
        assert ActionValue.parse("{not json").order_name == ""

    def test_wrong_shape_degrades_to_empty(self):
        assert ActionValue.parse("[1, 2]").order_name == ""
        assert ActionValue.parse('{"orderName": 12}').order_name == ""

    def test_missing_value(self):
        assert ActionValue.parse(None).order_name == ""
        assert ActionValue.parse("").order_name == ""


class TestBlockActionsPayload:
    def test_reply_thread_prefers_parent_thread(self):
        payload = BlockActionsPayload.model_validate(
            {
                "type": "block_actions",
                "user": {"id": "U1", "username": "nick"},
                "channel": {"id": "C123"},
                "message": {"ts": "2.0", "thread_ts": "1.0"},
                "actions": [{"action_id": "good_clear", "value": "{}"}],
            }
        )
        assert payload.channel_id == "C123"
        assert payload.reply_thread_ts == "1.0"
        assert payload.first_action.action_id == "good_clear"
        assert payload.user.handle == "nick"

    def test_reply_thread_falls_back_to_message_ts(self):
        payload = BlockActionsPayload.model_validate(
            {"type": "block_actions", "message": {"ts": "2.0"}}
        )
        assert payload.reply_thread_ts == "2.0"
        assert payload.first_action is None
        assert payload.channel_id is None

    def test_user_handle_fallbacks(self):
        payload = BlockActionsPayload.model_validate(
            {"type": "block_actions", "user": {"name": "Nick"}}
        )
        assert payload.user.handle == "Nick"
        assert BlockActionsPayload(type="block_actions").user.handle == "user"
