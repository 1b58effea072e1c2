"""
Inspect or build share tokens from the command line.

    python -m stampbook.jobs.inspect_token decode "http://host/open?s=c2.WyJCZW4i..."
    python -m stampbook.jobs.inspect_token encode Ben --stamps 0,5,29 --theme 1
"""

import argparse
import logging
import sys

from stampbook.config import settings
from stampbook.models.card import STAMP_CAPACITY, THEME_ORDER, Card, theme_from_index
from stampbook.models.failure import TokenDecodeError
from stampbook.models.snapshot import CardSnapshot
from stampbook.services.share_codec import build_share_url, decode_token, encode_card
from stampbook.services.snapshot_resolver import extract_share_token

logger = logging.getLogger(__name__)


def parse_stamp_indices(text: str) -> tuple[bool, ...]:
    """Turn "0,5,29" into a stamp tuple."""
    stamps = [False] * STAMP_CAPACITY
    for part in text.split(","):
        part = part.strip()
        if not part:
            continue
        index = int(part)
        if not 0 <= index < STAMP_CAPACITY:
            raise ValueError(f"Stamp index {index} outside 0..{STAMP_CAPACITY - 1}")
        stamps[index] = True
    return tuple(stamps)


def format_snapshot(snapshot: CardSnapshot) -> str:
    grid = "".join("X" if s else "." for s in snapshot.stamps)
    return "\n".join(
        [
            f"name:    {snapshot.name}",
            f"theme:   {snapshot.theme.value}",
            f"created: {snapshot.created_at}",
            f"stamps:  {snapshot.stamp_count}/{STAMP_CAPACITY}",
            f"         {grid}",
        ]
    )


def run_decode(value: str) -> int:
    """Decode a token or a full share link. Returns a process exit code."""
    token = value
    if "://" in value or value.startswith("?"):
        token = extract_share_token(value, settings.share_query_param) or ""

    if not token:
        logger.error("No share token found in %r", value)
        return 1

    try:
        snapshot = decode_token(token)
    except TokenDecodeError as e:
        logger.error("Token rejected (%s): %s", e.kind.value, e.detail)
        return 1

    print(format_snapshot(snapshot))
    return 0


def run_encode(name: str, stamps: str, theme: int, created_at: str) -> int:
    try:
        stamp_states = parse_stamp_indices(stamps)
    except ValueError as e:
        logger.error("Invalid --stamps: %s", e)
        return 1

    card = Card(
        id=0,
        name=name,
        stamps=stamp_states,
        created_at=created_at,
        theme=theme_from_index(theme),
    )
    token = encode_card(card)
    print(token)
    print(build_share_url(settings.public_base_url, token, settings.share_query_param))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Inspect or build Stampbook share tokens")
    sub = parser.add_subparsers(dest="command", required=True)

    decode = sub.add_parser("decode", help="Decode a token or share link")
    decode.add_argument("value", help="Token, or a URL carrying one")

    encode = sub.add_parser("encode", help="Build a token for a card")
    encode.add_argument("name")
    encode.add_argument("--stamps", default="", help="Comma-separated stamp indices")
    encode.add_argument(
        "--theme",
        type=int,
        default=0,
        help=f"Theme index 0-{len(THEME_ORDER) - 1}",
    )
    encode.add_argument("--created", default="", help="Display date text")
    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entry point."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    args = build_parser().parse_args(argv)

    if args.command == "decode":
        return run_decode(args.value)
    return run_encode(args.name, args.stamps, args.theme, args.created)


if __name__ == "__main__":
    sys.exit(main())
