"""
Session-start snapshot resolution.

Decides, once per session, whether the app runs against the locally
persisted collection or against a single snapshot decoded from the link
that opened it.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from urllib.parse import parse_qs, urlsplit

from stampbook.models.card import Card
from stampbook.models.snapshot import CardSnapshot, ReadOnlyView, SnapshotSource
from stampbook.services.share_codec import try_decode_token

logger = logging.getLogger(__name__)

DEFAULT_SHARE_PARAM = "s"


class SessionMode(str, Enum):
    """How the session operates."""

    EDITABLE = "editable"  # full CRUD over persisted cards
    SHARED = "shared"  # read-only view of a decoded external snapshot
    PREVIEW = "preview"  # read-only view of a local card, exit allowed


@dataclass(frozen=True, slots=True)
class SnapshotResolution:
    """Outcome of the startup check."""

    mode: SessionMode
    snapshot: CardSnapshot | None = None

    @property
    def load_persisted(self) -> bool:
        """Persisted cards are only loaded when no shared snapshot is active."""
        return self.mode is SessionMode.EDITABLE

    @property
    def view(self) -> ReadOnlyView | None:
        if self.snapshot is None:
            return None
        return ReadOnlyView.for_snapshot(self.snapshot)


EDITABLE = SnapshotResolution(mode=SessionMode.EDITABLE)


def extract_share_token(url: str, param: str = DEFAULT_SHARE_PARAM) -> str | None:
    """
    Read the share token from a URL's query string.

    Returns None when the parameter is absent or empty.
    """
    try:
        query = urlsplit(url).query
    except ValueError as e:
        logger.warning("Could not parse startup URL: %s", e)
        return None

    values = parse_qs(query).get(param)
    if not values or not values[0]:
        return None
    return values[0]


def resolve_token(token: str | None) -> SnapshotResolution:
    """Resolve an already extracted token (None means no token was given)."""
    if token is None:
        return EDITABLE

    snapshot = try_decode_token(token)
    if snapshot is None:
        logger.info("Share token rejected; continuing in editable mode")
        return EDITABLE

    logger.info("Opening shared card %r in read-only mode", snapshot.name)
    return SnapshotResolution(mode=SessionMode.SHARED, snapshot=snapshot)


def resolve_startup(url: str, param: str = DEFAULT_SHARE_PARAM) -> SnapshotResolution:
    """
    Inspect the URL that started the session.

    A decodable token switches the session to read-only SHARED mode and
    suppresses loading persisted data. A missing or undecodable token falls
    back to EDITABLE; the reason is logged, never raised.
    """
    return resolve_token(extract_share_token(url, param))


def simulate_preview(card: Card) -> SnapshotResolution:
    """
    Preview how a card looks when shared, without generating a link.

    The snapshot is built straight from the card (no codec round-trip) and,
    unlike a decoded snapshot, can be exited.
    """
    snapshot = CardSnapshot.from_card(card, source=SnapshotSource.SIMULATED)
    return SnapshotResolution(mode=SessionMode.PREVIEW, snapshot=snapshot)
