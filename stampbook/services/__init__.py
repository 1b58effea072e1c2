"""
Stampbook services.

Share token codec, startup snapshot resolution, and card book state.
"""

from stampbook.services.card_book import (
    CardBook,
    View,
    create_card,
    delete_card,
    navigate,
    select_card,
    toggle_stamp,
)
from stampbook.services.controller import CardBookController, CardStore, ShareLink
from stampbook.services.share_codec import (
    FORMAT_VERSION_PREFIX,
    build_share_url,
    decode_token,
    encode_card,
    try_decode_token,
)
from stampbook.services.snapshot_resolver import (
    SessionMode,
    SnapshotResolution,
    extract_share_token,
    resolve_startup,
    simulate_preview,
)

__all__ = [
    "CardBook",
    "CardBookController",
    "CardStore",
    "FORMAT_VERSION_PREFIX",
    "SessionMode",
    "ShareLink",
    "SnapshotResolution",
    "View",
    "build_share_url",
    "create_card",
    "decode_token",
    "delete_card",
    "encode_card",
    "extract_share_token",
    "navigate",
    "resolve_startup",
    "select_card",
    "simulate_preview",
    "toggle_stamp",
    "try_decode_token",
]
