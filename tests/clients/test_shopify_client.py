"""
Tests for the Shopify Admin GraphQL client.

requests is patched; no network calls are made.
"""

from unittest.mock import MagicMock, patch

import pytest
import requests

from reminderbot.clients.shopify import ShopifyClient, compose_prepended_note
from reminderbot.config import MF_FOLLOW_UP_NOTES, MF_NEEDS_FOLLOW_UP
from reminderbot.errors import BackendMutationError


def _response(body: dict | None = None, status_code: int = 200, text: str = "") -> MagicMock:
    resp = MagicMock()
    resp.ok = 200 <= status_code < 300
    resp.status_code = status_code
    resp.text = text
    resp.json.return_value = body or {}
    return resp


@pytest.fixture
def client() -> ShopifyClient:
    return ShopifyClient("shop.myshopify.com", "shpat_test", "2025-10", timeout=5)


ORDER_NODE = {
    "id": "gid://shopify/Order/1",
    "legacyResourceId": "1",
    "name": "C#12345",
    "tags": ["NeedPhotoNoShip", "VIP"],
    "needsFollowUpMf": {"id": "gid://shopify/Metafield/9", "value": "Yes"},
    "followUpNotesMf": None,
}


class TestGraphql:
    def test_posts_to_versioned_endpoint(self, client: ShopifyClient):
        with patch("reminderbot.clients.shopify.requests.post") as mock_post:
            mock_post.return_value = _response({"data": {"ok": 1}})

            assert client.graphql("query { x }", {"a": 1}) == {"ok": 1}

            args, kwargs = mock_post.call_args
            assert args[0] == "https://shop.myshopify.com/admin/api/2025-10/graphql.json"
            assert kwargs["json"] == {"query": "query { x }", "variables": {"a": 1}}
            assert kwargs["headers"]["X-Shopify-Access-Token"] == "shpat_test"
            assert kwargs["timeout"] == 5

    def test_http_error(self, client: ShopifyClient):
        with patch("reminderbot.clients.shopify.requests.post") as mock_post:
            mock_post.return_value = _response(status_code=401, text="Unauthorized")
            with pytest.raises(BackendMutationError, match="Shopify HTTP 401"):
                client.graphql("q", {})

    def test_transport_error(self, client: ShopifyClient):
        with patch("reminderbot.clients.shopify.requests.post") as mock_post:
            mock_post.side_effect = requests.ConnectionError("boom")
            with pytest.raises(BackendMutationError, match="boom"):
                client.graphql("q", {})

    def test_top_level_errors(self, client: ShopifyClient):
        with patch("reminderbot.clients.shopify.requests.post") as mock_post:
            mock_post.return_value = _response({"errors": [{"message": "Throttled"}]})
            with pytest.raises(BackendMutationError, match="Throttled"):
                client.graphql("q", {})


class TestOrderOperations:
    def test_get_order_by_name(self, client: ShopifyClient):
        with patch("reminderbot.clients.shopify.requests.post") as mock_post:
            mock_post.return_value = _response(
                {"data": {"orders": {"edges": [{"node": ORDER_NODE}]}}}
            )

            order = client.get_order_by_name("C#12345")

            assert order.id == "gid://shopify/Order/1"
            assert order.legacy_resource_id == "1"
            assert order.needs_follow_up_value == "Yes"
            assert order.follow_up_notes_value is None
            variables = mock_post.call_args.kwargs["json"]["variables"]
            assert variables == {"q": "name:'C#12345' status:any"}

    def test_get_order_by_name_miss(self, client: ShopifyClient):
        with patch("reminderbot.clients.shopify.requests.post") as mock_post:
            mock_post.return_value = _response({"data": {"orders": {"edges": []}}})
            assert client.get_order_by_name("C#99999") is None

    def test_set_metafield(self, client: ShopifyClient):
        with patch("reminderbot.clients.shopify.requests.post") as mock_post:
            mock_post.return_value = _response(
                {"data": {"metafieldsSet": {"metafields": [], "userErrors": []}}}
            )

            client.set_metafield("gid://shopify/Order/1", MF_NEEDS_FOLLOW_UP, "No")

            metafield = mock_post.call_args.kwargs["json"]["variables"]["metafields"][0]
            assert metafield == {
                "ownerId": "gid://shopify/Order/1",
                "namespace": "custom",
                "key": "_nc_needs_follow_up_",
                "type": "single_line_text_field",
                "value": "No",
            }

    def test_user_errors_raise(self, client: ShopifyClient):
        with patch("reminderbot.clients.shopify.requests.post") as mock_post:
            mock_post.return_value = _response(
                {
                    "data": {
                        "metafieldsDelete": {
                            "deletedMetafields": None,
                            "userErrors": [{"field": ["metafields"], "message": "nope"}],
                        }
                    }
                }
            )
            with pytest.raises(BackendMutationError, match="metafieldsDelete errors"):
                client.delete_metafield("gid://shopify/Order/1", MF_FOLLOW_UP_NOTES)

    def test_remove_tags_returns_remaining(self, client: ShopifyClient):
        with patch("reminderbot.clients.shopify.requests.post") as mock_post:
            mock_post.return_value = _response(
                {
                    "data": {
                        "tagsRemove": {
                            "node": {"id": "gid://shopify/Order/1", "tags": ["VIP"]},
                            "userErrors": [],
                        }
                    }
                }
            )
            assert client.remove_tags("gid://shopify/Order/1", ["NeedPhotoNoShip"]) == ["VIP"]

    def test_remove_no_tags_skips_call(self, client: ShopifyClient):
        with patch("reminderbot.clients.shopify.requests.post") as mock_post:
            assert client.remove_tags("gid://shopify/Order/1", []) == []
            mock_post.assert_not_called()

    def test_prepend_order_note_reads_then_writes(self, client: ShopifyClient):
        existing = "Customer called.\n\nSecond line ```code```"
        expected_note = compose_prepended_note("Cleared today", existing)

        with patch("reminderbot.clients.shopify.requests.post") as mock_post:
            mock_post.side_effect = [
                _response({"data": {"order": {"id": "gid", "note": existing}}}),
                _response(
                    {
                        "data": {
                            "orderUpdate": {
                                "order": {"id": "gid", "note": expected_note},
                                "userErrors": [],
                            }
                        }
                    }
                ),
            ]

            note = client.prepend_order_note("gid", "Cleared today")

            assert note.startswith("Cleared today")
            assert note.endswith(existing)
            written = mock_post.call_args_list[1].kwargs["json"]["variables"]["input"]
            assert written == {"id": "gid", "note": expected_note}


class TestComposePrependedNote:
    def test_layout(self):
        assert compose_prepended_note("new", "old") == "new\n\n\n--------\n\n\nold"

    def test_blank_existing_note(self):
        assert compose_prepended_note("new", None) == "new\n\n\n--------\n\n\n"

    def test_admin_url(self, client: ShopifyClient):
        assert client.order_admin_url("42") == "https://shop.myshopify.com/admin/orders/42"
