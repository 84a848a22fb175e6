"""Trello models."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class TrelloBoard(BaseModel):
    id: str
    name: Optional[str] = None


class TrelloList(BaseModel):
    id: str
    name: Optional[str] = None


class BoardListIdentity(BaseModel):
    """Resolved destination for escalation cards"""

    model_config = ConfigDict(frozen=True)

    board_id: str = Field(description="Trello board ID")
    list_id: str = Field(description="Trello list ID on that board")


class TaskCard(BaseModel):
    """Card created on the task board for an escalated order"""

    id: str = Field(description="Trello card ID")
    name: str = Field(default="", description="Card title")
    url: str = Field(default="", description="Browser URL of the card")
