"""
Shopify Admin GraphQL client.

Provides the order lookup, metafield, tag and note operations used by the
clear workflow. Every failure (HTTP status, top-level GraphQL errors or
mutation userErrors) raises BackendMutationError.
"""

import json
import logging
from typing import Any

import requests

from reminderbot.errors import BackendMutationError
from reminderbot.models.order import MetafieldRef, OrderRecord, UserError

logger = logging.getLogger(__name__)

NOTE_SEPARATOR = "--------"

ORDER_LOOKUP_GQL = """
  query ($q: String!) {
    orders(first: 1, query: $q) {
      edges {
        node {
          id
          legacyResourceId
          name
          tags
          needsFollowUpMf: metafield(namespace: "custom", key: "_nc_needs_follow_up_") { id value }
          followUpNotesMf: metafield(namespace: "custom", key: "follow_up_notes") { id value }
        }
      }
    }
  }
"""

METAFIELDS_SET_GQL = """
  mutation metafieldsSet($metafields: [MetafieldsSetInput!]!) {
    metafieldsSet(metafields: $metafields) {
      metafields { key namespace value }
      userErrors { field message }
    }
  }
"""

METAFIELDS_DELETE_GQL = """
  mutation metafieldsDelete($metafields: [MetafieldIdentifierInput!]!) {
    metafieldsDelete(metafields: $metafields) {
      deletedMetafields { namespace key }
      userErrors { field message }
    }
  }
"""

TAGS_REMOVE_GQL = """
  mutation tagsRemove($id: ID!, $tags: [String!]!) {
    tagsRemove(id: $id, tags: $tags) {
      node { ... on Order { id tags } }
      userErrors { field message }
    }
  }
"""

ORDER_NOTE_QUERY_GQL = """
  query ($id: ID!) {
    order(id: $id) {
      id
      note
    }
  }
"""

ORDER_UPDATE_GQL = """
  mutation orderUpdate($input: OrderInput!) {
    orderUpdate(input: $input) {
      order { id note }
      userErrors { field message }
    }
  }
"""


def compose_prepended_note(new_line: str, existing_note: str | None) -> str:
    """Put new_line above the existing note, separated by a divider."""
    return "\n".join(
        [new_line, "", "", NOTE_SEPARATOR, "", "", existing_note or ""]
    )


class ShopifyClient:
    """Client for the Shopify Admin GraphQL API."""

    def __init__(
        self,
        domain: str,
        access_token: str,
        api_version: str,
        timeout: float = 30,
    ):
        self.domain = domain
        self.access_token = access_token
        self.api_version = api_version
        self.timeout = timeout

    @property
    def graphql_url(self) -> str:
        return f"https://{self.domain}/admin/api/{self.api_version}/graphql.json"

    def order_admin_url(self, legacy_id: str) -> str:
        return f"https://{self.domain}/admin/orders/{legacy_id}"

    def graphql(self, query: str, variables: dict[str, Any]) -> dict:
        """
        Execute a GraphQL operation and return its `data`.

        Raises:
            BackendMutationError: On transport errors, non-2xx responses,
                or a non-empty `errors` list
        """
        try:
            resp = requests.post(
                self.graphql_url,
                json={"query": query, "variables": variables},
                headers={
                    "X-Shopify-Access-Token": self.access_token,
                    "Content-Type": "application/json",
                    "Shopify-API-Version": self.api_version,
                },
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise BackendMutationError(f"Shopify request failed: {e}") from e

        if not resp.ok:
            raise BackendMutationError(f"Shopify HTTP {resp.status_code}: {resp.text}")

        body = resp.json()
        if body.get("errors"):
            raise BackendMutationError(
                f"Shopify GQL errors: {json.dumps(body['errors'])}"
            )
        data = body.get("data") or {}
        if data.get("errors"):
            raise BackendMutationError(
                f"Shopify data.errors: {json.dumps(data['errors'])}"
            )
        return data

    @staticmethod
    def _check_user_errors(operation: str, result: dict | None) -> None:
        errors = [UserError.model_validate(e) for e in (result or {}).get("userErrors") or []]
        if errors:
            raise BackendMutationError(
                f"{operation} errors: "
                + json.dumps([e.model_dump() for e in errors])
            )

    def get_order_by_name(self, order_name: str) -> OrderRecord | None:
        """Find an order by display name across all statuses."""
        q = f"name:'{order_name}' status:any"
        data = self.graphql(ORDER_LOOKUP_GQL, {"q": q})
        edges = (data.get("orders") or {}).get("edges") or []
        if not edges or not edges[0].get("node"):
            return None
        return OrderRecord.model_validate(edges[0]["node"])

    def set_metafield(self, order_id: str, ref: MetafieldRef, value: str) -> None:
        """Set a single_line_text_field metafield on an order."""
        data = self.graphql(
            METAFIELDS_SET_GQL,
            {
                "metafields": [
                    {
                        "ownerId": order_id,
                        "namespace": ref.namespace,
                        "key": ref.key,
                        "type": "single_line_text_field",
                        "value": str(value),
                    }
                ]
            },
        )
        self._check_user_errors("metafieldsSet", data.get("metafieldsSet"))

    def delete_metafield(self, order_id: str, ref: MetafieldRef) -> list[dict]:
        """Delete a metafield from an order. Returns the deleted identifiers."""
        data = self.graphql(
            METAFIELDS_DELETE_GQL,
            {
                "metafields": [
                    {"ownerId": order_id, "namespace": ref.namespace, "key": ref.key}
                ]
            },
        )
        result = data.get("metafieldsDelete")
        self._check_user_errors("metafieldsDelete", result)
        return (result or {}).get("deletedMetafields") or []

    def remove_tags(self, order_id: str, tags: list[str]) -> list[str]:
        """Remove tags from an order. Returns the order's remaining tags."""
        if not tags:
            return []
        data = self.graphql(TAGS_REMOVE_GQL, {"id": order_id, "tags": tags})
        result = data.get("tagsRemove")
        self._check_user_errors("tagsRemove", result)
        return ((result or {}).get("node") or {}).get("tags") or []

    def get_order_note(self, order_id: str) -> str:
        data = self.graphql(ORDER_NOTE_QUERY_GQL, {"id": order_id})
        return (data.get("order") or {}).get("note") or ""

    def update_order_note(self, order_id: str, note: str) -> str:
        data = self.graphql(ORDER_UPDATE_GQL, {"input": {"id": order_id, "note": note}})
        result = data.get("orderUpdate")
        self._check_user_errors("orderUpdate", result)
        return ((result or {}).get("order") or {}).get("note") or ""

    def prepend_order_note(self, order_id: str, new_line: str) -> str:
        """
        Prepend a line to the order's note, keeping the previous note verbatim.

        Reads the current note first so nothing already written is lost.

        Returns:
            The note as stored after the update
        """
        existing_note = self.get_order_note(order_id)
        updated_note = compose_prepended_note(new_line, existing_note)
        return self.update_order_note(order_id, updated_note)
