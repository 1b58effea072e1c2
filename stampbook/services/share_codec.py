"""
Share Token Codec.

Turns a card into a short, URL-safe token and back into a read-only
snapshot, with no server round-trip.

Token layout (current format):

    c2.<base64url, unpadded>( percent-encode( JSON [name, bitmask, theme, created] ) )

- bitmask: bit i is set iff stamp i is set
- theme: index into THEME_ORDER

Decoding also accepts tokens issued before the version marker existed:
standard-alphabet base64 of either the same array, or of a keyed object
{"n", "p", "s", "t", "d"}. Those unmarked tokens are told apart by shape.

Tokens are unauthenticated. Anyone holding a link can read (and forge) it.
"""

import base64
import binascii
import json
import logging
import re
from typing import Any
from urllib.parse import quote, unquote_to_bytes, urlencode, urlsplit, urlunsplit

from stampbook.models.card import (
    BITMASK_BITS,
    STAMP_CAPACITY,
    Card,
    normalize_stamps,
    theme_from_index,
    theme_from_value,
    theme_to_index,
)
from stampbook.models.failure import MalformedTokenError, TokenDecodeError, UnexpectedShapeError
from stampbook.models.snapshot import CardSnapshot, SnapshotSource

logger = logging.getLogger(__name__)

FORMAT_VERSION_PREFIX = "c2."

COMPACT_ARITY = 4

# Characters encodeURIComponent leaves alone, beyond letters and digits
_URI_COMPONENT_SAFE = "-_.!~*'()"

_BAD_PERCENT_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")

_URLSAFE_TO_STANDARD = str.maketrans("-_", "+/")

LEGACY_REQUIRED_KEYS = ("n", "s", "d")


# =============================================================================
# BITMASK
# =============================================================================


def stamps_to_bitmask(stamps: tuple[bool, ...] | list[bool]) -> int:
    """
    Collapse a stamp sequence into an integer bitmask.

    Raises:
        ValueError: If the sequence does not fit in BITMASK_BITS
    """
    if len(stamps) > BITMASK_BITS:
        raise ValueError(f"{len(stamps)} stamps do not fit in a {BITMASK_BITS}-bit mask")

    mask = 0
    for i, stamped in enumerate(stamps):
        if stamped:
            mask |= 1 << i
    return mask


def bitmask_to_stamps(mask: int) -> tuple[bool, ...]:
    """Expand a bitmask into exactly STAMP_CAPACITY booleans."""
    return tuple(bool((mask >> i) & 1) for i in range(STAMP_CAPACITY))


# =============================================================================
# ENCODE
# =============================================================================


def encode_card(card: Card) -> str:
    """
    Encode a card into a share token.

    The card's identifier is not part of the token.
    """
    payload = [
        card.name,
        stamps_to_bitmask(card.stamps),
        theme_to_index(card.theme),
        card.created_at,
    ]
    text = json.dumps(payload, separators=(",", ":"), ensure_ascii=False)
    escaped = quote(text, safe=_URI_COMPONENT_SAFE)
    body = base64.urlsafe_b64encode(escaped.encode("ascii")).decode("ascii").rstrip("=")
    return FORMAT_VERSION_PREFIX + body


def build_share_url(base_url: str, token: str, param: str = "s") -> str:
    """
    Build a share link.

    Any existing query string on base_url is replaced; the fragment is kept.
    """
    parts = urlsplit(base_url)
    return urlunsplit(parts._replace(query=urlencode({param: token})))


# =============================================================================
# DECODE
# =============================================================================


def _b64_decode(body: str) -> bytes:
    # A query-string parser may have turned "+" into a space in old tokens
    normalized = body.replace(" ", "+").translate(_URLSAFE_TO_STANDARD).rstrip("=")
    padded = normalized + "=" * (-len(normalized) % 4)
    try:
        return base64.b64decode(padded, validate=True)
    except (binascii.Error, ValueError) as e:
        raise MalformedTokenError(f"invalid base64: {e}") from e


def _percent_decode(text: str) -> str:
    if _BAD_PERCENT_ESCAPE.search(text):
        raise MalformedTokenError("invalid percent escape")
    try:
        return unquote_to_bytes(text).decode("utf-8")
    except UnicodeDecodeError as e:
        raise MalformedTokenError("percent-decoded bytes are not UTF-8") from e


def _reject_constant(name: str) -> Any:
    raise ValueError(f"non-standard JSON constant {name}")


def _parse_payload(body: str) -> Any:
    raw = _b64_decode(body)
    try:
        escaped = raw.decode("ascii")
    except UnicodeDecodeError as e:
        raise MalformedTokenError("decoded payload is not ASCII") from e

    text = _percent_decode(escaped)
    try:
        return json.loads(text, parse_constant=_reject_constant)
    except ValueError as e:
        raise MalformedTokenError(f"invalid JSON: {e}") from e
    except RecursionError as e:
        raise MalformedTokenError("payload nested too deeply") from e


def _is_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _snapshot_from_compact(data: list[Any]) -> CardSnapshot:
    if len(data) != COMPACT_ARITY:
        raise UnexpectedShapeError(f"expected {COMPACT_ARITY} fields, got {len(data)}")

    name, bitmask, theme_index, created_at = data

    if not isinstance(name, str):
        raise UnexpectedShapeError("name is not a string")
    if not _is_int(bitmask):
        raise UnexpectedShapeError("stamp bitmask is not an integer")
    if not 0 <= bitmask < (1 << STAMP_CAPACITY):
        raise UnexpectedShapeError(f"stamp bitmask {bitmask} outside {STAMP_CAPACITY} bits")
    if not isinstance(created_at, str):
        raise UnexpectedShapeError("created date is not a string")

    return CardSnapshot(
        name=name,
        stamps=bitmask_to_stamps(bitmask),
        created_at=created_at,
        theme=theme_from_index(theme_index),
        source=SnapshotSource.SHARED,
    )


def _snapshot_from_legacy(data: dict[str, Any]) -> CardSnapshot:
    missing = [key for key in LEGACY_REQUIRED_KEYS if key not in data]
    if missing:
        raise UnexpectedShapeError(f"missing keys: {', '.join(missing)}")

    name, stamps, created_at = data["n"], data["s"], data["d"]

    if not isinstance(name, str):
        raise UnexpectedShapeError("name is not a string")
    if not isinstance(stamps, list) or not all(isinstance(s, bool) for s in stamps):
        raise UnexpectedShapeError("stamps are not a list of booleans")
    if len(stamps) > STAMP_CAPACITY:
        raise UnexpectedShapeError(f"{len(stamps)} stamps exceed capacity {STAMP_CAPACITY}")
    if not isinstance(created_at, str):
        raise UnexpectedShapeError("created date is not a string")

    snapshot = CardSnapshot(
        name=name,
        stamps=normalize_stamps(stamps),
        created_at=created_at,
        theme=theme_from_value(data.get("t")),
        source=SnapshotSource.SHARED,
    )

    points = data.get("p")
    if points is not None and points != snapshot.stamp_count:
        logger.warning(
            "Legacy token points (%r) disagree with stamps (%d); using stamps",
            points,
            snapshot.stamp_count,
        )

    return snapshot


def decode_token(token: str) -> CardSnapshot:
    """
    Decode a share token into a read-only snapshot.

    The token is untrusted input. Any failure at any layer raises; a partial
    snapshot is never returned. An unknown theme index is not a failure and
    resolves to the first theme.

    Raises:
        MalformedTokenError: base64, percent-encoding or JSON is broken
        UnexpectedShapeError: payload parsed but does not describe a card
    """
    versioned = token.startswith(FORMAT_VERSION_PREFIX)
    body = token[len(FORMAT_VERSION_PREFIX) :] if versioned else token

    data = _parse_payload(body)

    if isinstance(data, list):
        return _snapshot_from_compact(data)
    if isinstance(data, dict):
        if versioned:
            raise UnexpectedShapeError("keyed payload under a versioned token")
        return _snapshot_from_legacy(data)
    raise UnexpectedShapeError(f"payload is a {type(data).__name__}, not a card")


def try_decode_token(token: str) -> CardSnapshot | None:
    """Decode a token, logging and returning None on failure."""
    try:
        return decode_token(token)
    except TokenDecodeError as e:
        logger.warning("Failed to decode share token (%s): %s", e.kind.value, e.detail)
        return None
