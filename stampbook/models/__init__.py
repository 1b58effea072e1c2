from stampbook.models.card import (
    BITMASK_BITS,
    DEFAULT_THEME,
    STAMP_CAPACITY,
    THEME_ORDER,
    Card,
    ThemeColor,
)
from stampbook.models.failure import (
    CardNotFoundError,
    FailureDetail,
    FailureKind,
    InvalidCardNameError,
    KnownError,
    MalformedTokenError,
    PersistenceReadError,
    ReadOnlySessionError,
    StampIndexError,
    TokenDecodeError,
    UnexpectedShapeError,
)
from stampbook.models.snapshot import CardLike, CardSnapshot, ReadOnlyView, SnapshotSource

__all__ = [
    "BITMASK_BITS",
    "Card",
    "CardLike",
    "CardNotFoundError",
    "CardSnapshot",
    "DEFAULT_THEME",
    "FailureDetail",
    "FailureKind",
    "InvalidCardNameError",
    "KnownError",
    "MalformedTokenError",
    "PersistenceReadError",
    "ReadOnlySessionError",
    "ReadOnlyView",
    "STAMP_CAPACITY",
    "SnapshotSource",
    "StampIndexError",
    "THEME_ORDER",
    "ThemeColor",
    "TokenDecodeError",
    "UnexpectedShapeError",
]
