"""
Read-only card snapshots.

A snapshot is a transient projection of a card's shareable fields. It is
never merged back into the persisted collection.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Protocol, runtime_checkable

from stampbook.models.card import STAMP_CAPACITY, Card, ThemeColor

# Identifier carried by every snapshot; never matches a persisted card
SNAPSHOT_PLACEHOLDER_ID = 0


@runtime_checkable
class CardLike(Protocol):
    """Anything the read-only view can render."""

    @property
    def name(self) -> str: ...

    @property
    def stamps(self) -> tuple[bool, ...]: ...

    @property
    def stamp_count(self) -> int: ...

    @property
    def created_at(self) -> str: ...

    @property
    def theme(self) -> ThemeColor: ...


class SnapshotSource(str, Enum):
    """Where a snapshot came from."""

    SHARED = "shared"  # decoded from an external token
    SIMULATED = "simulated"  # built locally for a preview


@dataclass(frozen=True, slots=True)
class CardSnapshot:
    """Read-only projection of a card."""

    name: str
    stamps: tuple[bool, ...]
    created_at: str
    theme: ThemeColor
    source: SnapshotSource = SnapshotSource.SHARED
    id: int = SNAPSHOT_PLACEHOLDER_ID

    def __post_init__(self) -> None:
        if len(self.stamps) != STAMP_CAPACITY:
            raise ValueError(
                f"Snapshot must have exactly {STAMP_CAPACITY} stamps, got {len(self.stamps)}"
            )

    @property
    def stamp_count(self) -> int:
        return sum(self.stamps)

    @classmethod
    def from_card(
        cls, card: Card, source: SnapshotSource = SnapshotSource.SIMULATED
    ) -> "CardSnapshot":
        """Project a local card without going through the share codec."""
        return cls(
            name=card.name,
            stamps=card.stamps,
            created_at=card.created_at,
            theme=card.theme,
            source=source,
        )


@dataclass(frozen=True, slots=True)
class ReadOnlyView:
    """
    What the read-only renderer needs.

    The exit affordance is only offered for simulated previews: a decoded
    external snapshot has no local session to return to.
    """

    card: CardLike
    can_exit: bool = False

    @classmethod
    def for_snapshot(cls, snapshot: CardSnapshot) -> "ReadOnlyView":
        return cls(card=snapshot, can_exit=snapshot.source is SnapshotSource.SIMULATED)
