"""
Stamp card domain model.

A card tracks one subject with a fixed-capacity row of stamps. The theme
order and the stamp capacity are part of the share-token wire format.
"""

from dataclasses import dataclass, field, replace
from enum import Enum

# Number of stamps on every card, decoded snapshot, and editable grid
STAMP_CAPACITY = 30

# Usable non-negative bits of a signed 32-bit integer
BITMASK_BITS = 31

if STAMP_CAPACITY > BITMASK_BITS:
    raise RuntimeError(
        f"STAMP_CAPACITY ({STAMP_CAPACITY}) exceeds bitmask width ({BITMASK_BITS})"
    )


class ThemeColor(str, Enum):
    """Visual theme of a card.

    Definition order is the wire order. Never reorder these members.
    """

    ROSE = "bg-rose-500"
    INDIGO = "bg-indigo-500"
    EMERALD = "bg-emerald-500"
    ORANGE = "bg-orange-500"


THEME_ORDER: tuple[ThemeColor, ...] = tuple(ThemeColor)

DEFAULT_THEME = THEME_ORDER[0]


def theme_to_index(theme: ThemeColor | str) -> int:
    """Wire index of a theme, 0 if the theme is unknown."""
    try:
        return THEME_ORDER.index(ThemeColor(theme))
    except ValueError:
        return 0


def theme_from_index(index: object) -> ThemeColor:
    """Resolve a wire index, falling back to the first theme."""
    if isinstance(index, bool) or not isinstance(index, int):
        return DEFAULT_THEME
    if 0 <= index < len(THEME_ORDER):
        return THEME_ORDER[index]
    return DEFAULT_THEME


def theme_from_value(value: object) -> ThemeColor:
    """Resolve a theme identifier such as "bg-indigo-500", falling back to the first theme."""
    if not isinstance(value, str):
        return DEFAULT_THEME
    try:
        return ThemeColor(value)
    except ValueError:
        return DEFAULT_THEME


def empty_stamps() -> tuple[bool, ...]:
    return (False,) * STAMP_CAPACITY


def normalize_stamps(stamps: list[bool] | tuple[bool, ...]) -> tuple[bool, ...]:
    """
    Pad a stamp sequence to STAMP_CAPACITY with False.

    Raises:
        ValueError: If the sequence is longer than STAMP_CAPACITY
    """
    if len(stamps) > STAMP_CAPACITY:
        raise ValueError(f"At most {STAMP_CAPACITY} stamps allowed, got {len(stamps)}")
    return tuple(bool(s) for s in stamps) + (False,) * (STAMP_CAPACITY - len(stamps))


@dataclass(frozen=True, slots=True)
class Card:
    """
    A stamp card in the local collection.

    Attributes:
        id: Unique identifier within the collection (creation time in ms)
        name: Display name, fixed at creation
        stamps: Exactly STAMP_CAPACITY booleans, index order is meaningful
        created_at: Display-formatted creation date, carried verbatim
        theme: Visual theme
    """

    id: int
    name: str
    stamps: tuple[bool, ...] = field(default_factory=empty_stamps)
    created_at: str = ""
    theme: ThemeColor = DEFAULT_THEME

    def __post_init__(self) -> None:
        if len(self.stamps) != STAMP_CAPACITY:
            raise ValueError(
                f"Card must have exactly {STAMP_CAPACITY} stamps, got {len(self.stamps)}"
            )

    @property
    def stamp_count(self) -> int:
        """Number of set stamps. Always derived from stamps."""
        return sum(self.stamps)

    def with_stamp_toggled(self, index: int) -> "Card":
        """Return a copy with the stamp at index flipped."""
        if not 0 <= index < STAMP_CAPACITY:
            raise IndexError(f"Stamp index {index} outside 0..{STAMP_CAPACITY - 1}")
        stamps = list(self.stamps)
        stamps[index] = not stamps[index]
        return replace(self, stamps=tuple(stamps))
