"""
Request and response models shared by the API routers.
"""

from pydantic import BaseModel, Field

from stampbook.models.card import Card, ThemeColor
from stampbook.models.snapshot import CardSnapshot, ReadOnlyView
from stampbook.services.snapshot_resolver import SessionMode


class CardResponse(BaseModel):
    """A card or a snapshot. Snapshots always carry id 0."""

    id: int
    name: str
    stamps: list[bool]
    stamp_count: int
    created_at: str
    theme: ThemeColor

    @classmethod
    def from_card(cls, card: Card | CardSnapshot) -> "CardResponse":
        return cls(
            id=card.id,
            name=card.name,
            stamps=list(card.stamps),
            stamp_count=card.stamp_count,
            created_at=card.created_at,
            theme=card.theme,
        )


class CardListResponse(BaseModel):
    cards: list[CardResponse] = Field(default_factory=list)
    total: int = 0


class CreateCardRequest(BaseModel):
    """Request model for creating a card."""

    name: str = Field(
        ...,
        description="Display name of the card's subject",
        examples=["Ben"],
    )


class ShareResponse(BaseModel):
    token: str
    url: str


class ReadOnlyViewResponse(BaseModel):
    """What the read-only renderer shows."""

    card: CardResponse
    can_exit: bool = Field(
        default=False,
        description="True only for a simulated preview of a local card",
    )

    @classmethod
    def from_view(cls, view: ReadOnlyView) -> "ReadOnlyViewResponse":
        card = view.card
        return cls(
            card=CardResponse(
                id=getattr(card, "id", 0),
                name=card.name,
                stamps=list(card.stamps),
                stamp_count=card.stamp_count,
                created_at=card.created_at,
                theme=card.theme,
            ),
            can_exit=view.can_exit,
        )


class OpenResponse(BaseModel):
    """
    Result of opening the app at a URL.

    Exactly one of `view` (read-only modes) or `cards` (editable mode) is set.
    """

    mode: SessionMode
    view: ReadOnlyViewResponse | None = None
    cards: list[CardResponse] | None = None
