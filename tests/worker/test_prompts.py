"""
Tests for per-order action prompts.
"""

import json

from reminderbot.models.slack import ActionPrompt, ActionValue, InboundMessage
from reminderbot.worker.prompts import (
    build_action_blocks,
    build_preview,
    build_prompts,
    prompt_text,
)


class TestBuildPreview:
    def test_uses_text_first(self):
        message = InboundMessage(text="x" * 200, files=[{"title": "file title"}])
        assert build_preview(message) == "x" * 140

    def test_falls_back_to_first_file_title(self):
        message = InboundMessage(files=[{"title": "t" * 150}, {"title": "second"}])
        assert build_preview(message) == "t" * 140

    def test_empty(self):
        assert build_preview(InboundMessage(files=[{"name": "no-title"}])) == ""


class TestBuildActionBlocks:
    def test_layout_with_preview(self):
        blocks = build_action_blocks(ActionPrompt(order_name="C#12345", preview="hello"))

        assert [b["type"] for b in blocks] == ["section", "context", "actions"]
        assert blocks[0]["text"]["text"] == "Daily reminder for *C#12345*."
        assert blocks[1]["elements"][0]["text"] == "_hello_"

        buttons = blocks[2]["elements"]
        assert [b["action_id"] for b in buttons] == ["good_clear", "make_trello"]
        assert buttons[0]["style"] == "primary"
        for button in buttons:
            assert json.loads(button["value"]) == {"orderName": "C#12345"}
            assert ActionValue.parse(button["value"]).order_name == "C#12345"

    def test_no_preview_omits_context(self):
        blocks = build_action_blocks(ActionPrompt(order_name="C#1234"))
        assert [b["type"] for b in blocks] == ["section", "actions"]


def test_one_prompt_per_order():
    message = InboundMessage(text="reminder")
    prompts = build_prompts(message, ["C#1111", "C#2222"])

    assert [p.order_name for p in prompts] == ["C#1111", "C#2222"]
    assert all(p.preview == "reminder" for p in prompts)
    assert prompt_text(prompts[0]) == "Actions for C#1111"
