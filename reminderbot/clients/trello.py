"""
Trello REST client and destination list resolution.

The escalation list can be configured by ID, or found by board and list
name. Name lookups are cached for the life of the process.
"""

import logging
from typing import Any

import requests

from reminderbot.errors import BoardNotFound, ListNotFound, TrelloError
from reminderbot.models.trello import BoardListIdentity, TaskCard, TrelloBoard, TrelloList

TRELLO_API_URL = "https://api.trello.com/1"

logger = logging.getLogger(__name__)


def _same_name(a: str | None, b: str | None) -> bool:
    return (a or "").strip().lower() == (b or "").strip().lower()


class TrelloClient:
    """Trello REST API client authenticated with a key/token pair."""

    def __init__(self, key: str, token: str, timeout: float = 30):
        self.key = key
        self.token = token
        self.timeout = timeout

    @property
    def _auth_params(self) -> dict[str, str]:
        return {"key": self.key, "token": self.token}

    def get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        try:
            resp = requests.get(
                f"{TRELLO_API_URL}{path}",
                params={**(params or {}), **self._auth_params},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise TrelloError(f"Trello GET {path} failed: {e}") from e
        if not resp.ok:
            raise TrelloError(f"Trello GET {path} -> {resp.status_code}")
        return resp.json()

    def post(self, path: str, payload: dict[str, Any]) -> Any:
        try:
            resp = requests.post(
                f"{TRELLO_API_URL}{path}",
                params=self._auth_params,
                json=payload,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise TrelloError(f"Trello POST {path} failed: {e}") from e
        if not resp.ok:
            raise TrelloError(f"Trello POST {path} -> {resp.status_code}")
        return resp.json()

    def list_boards(self) -> list[TrelloBoard]:
        """Open boards of the token's member."""
        data = self.get("/members/me/boards", {"fields": "name,id", "filter": "open"})
        return [TrelloBoard.model_validate(b) for b in data]

    def list_lists(self, board_id: str) -> list[TrelloList]:
        """Open lists on a board."""
        data = self.get(f"/boards/{board_id}/lists", {"cards": "none", "filter": "open"})
        return [TrelloList.model_validate(item) for item in data]

    def create_card(self, list_id: str, name: str) -> TaskCard:
        data = self.post("/cards", {"idList": list_id, "name": name})
        return TaskCard.model_validate(data)


class TrelloListResolver:
    """
    Resolves and caches the board/list that escalation cards go to.

    If both IDs are configured they are used as-is, without checking that
    they exist. Otherwise the board and list are looked up by name. The
    result is cached; it is not refreshed if the board or list is renamed.
    Two callers racing on an empty cache may both resolve, which is harmless.
    """

    def __init__(
        self,
        client: TrelloClient,
        board_id: str = "",
        list_id: str = "",
        board_name: str = "",
        list_name: str = "",
    ):
        self.client = client
        self.board_id = board_id
        self.list_id = list_id
        self.board_name = board_name
        self.list_name = list_name
        self._identity: BoardListIdentity | None = None

    @property
    def identity(self) -> BoardListIdentity | None:
        """The cached identity, or None if not resolved yet."""
        return self._identity

    def resolve(self) -> BoardListIdentity:
        """
        Resolve the destination now and cache it.

        Raises:
            BoardNotFound: No open board matches board_name
            ListNotFound: No open list on that board matches list_name
            TrelloError: A Trello request failed
        """
        if self.board_id and self.list_id:
            self._identity = BoardListIdentity(board_id=self.board_id, list_id=self.list_id)
            return self._identity

        board = next(
            (b for b in self.client.list_boards() if _same_name(b.name, self.board_name)),
            None,
        )
        if board is None:
            raise BoardNotFound(self.board_name)

        trello_list = next(
            (lst for lst in self.client.list_lists(board.id) if _same_name(lst.name, self.list_name)),
            None,
        )
        if trello_list is None:
            raise ListNotFound(self.list_name)

        self._identity = BoardListIdentity(board_id=board.id, list_id=trello_list.id)
        logger.info(
            f"Resolved Trello list '{self.list_name}' on board '{self.board_name}'",
            extra={"json_fields": self._identity.model_dump()},
        )
        return self._identity

    def get(self) -> BoardListIdentity:
        """Return the cached identity, resolving it first if needed."""
        if self._identity is not None:
            return self._identity
        return self.resolve()
