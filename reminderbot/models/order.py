"""Shopify order models used by the clear workflow."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class MetafieldRef(BaseModel):
    """Namespace/key pair identifying a metafield definition"""

    model_config = ConfigDict(frozen=True)

    namespace: str = Field(description="Metafield namespace, e.g. 'custom'")
    key: str = Field(description="Metafield key within the namespace")

    def __str__(self) -> str:
        return f"{self.namespace}.{self.key}"


class Metafield(BaseModel):
    """Metafield value as returned by the order lookup query"""

    id: Optional[str] = Field(default=None, description="Metafield GID")
    value: Optional[str] = Field(default=None, description="Raw metafield value")


class UserError(BaseModel):
    """Field-scoped error returned by a Shopify mutation"""

    field: Optional[list[str]] = Field(default=None, description="Path to the field")
    message: str = Field(description="Error message")


class OrderRecord(BaseModel):
    """Subset of a Shopify order needed to clear its follow-up state"""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(description="Order GID, e.g. gid://shopify/Order/123")
    legacy_resource_id: str = Field(
        alias="legacyResourceId", description="Numeric ID used in admin URLs"
    )
    name: str = Field(description="Display name, e.g. C#12345")
    tags: list[str] = Field(default_factory=list)
    needs_follow_up: Optional[Metafield] = Field(
        default=None, alias="needsFollowUpMf"
    )
    follow_up_notes: Optional[Metafield] = Field(
        default=None, alias="followUpNotesMf"
    )

    @property
    def needs_follow_up_value(self) -> Optional[str]:
        return self.needs_follow_up.value if self.needs_follow_up else None

    @property
    def follow_up_notes_value(self) -> Optional[str]:
        return self.follow_up_notes.value if self.follow_up_notes else None
