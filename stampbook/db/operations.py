"""
Database CRUD operations.

Provides async functions for the key-value store and for reading and
writing the serialized card collection kept in it.
"""

import logging

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from stampbook.models.card import DEFAULT_THEME, Card, normalize_stamps, theme_from_value
from stampbook.models.db import KeyValueDB
from stampbook.models.failure import PersistenceReadError

logger = logging.getLogger(__name__)

# --- Key-Value Operations ---


async def get_value(session: AsyncSession, key: str) -> str | None:
    """
    Get a stored value by key.

    Returns None if nothing is stored under this key.
    """
    result = await session.execute(select(KeyValueDB).where(KeyValueDB.key == key))
    row = result.scalar_one_or_none()
    return row.value if row else None


async def put_value(session: AsyncSession, key: str, value: str) -> None:
    """Store a value, replacing any previous value under the same key."""
    row = await session.get(KeyValueDB, key)
    if row is None:
        session.add(KeyValueDB(key=key, value=value))
    else:
        row.value = value
    await session.flush()


async def delete_value(session: AsyncSession, key: str) -> bool:
    """
    Delete a stored value.

    Returns True if deleted, False if not found.
    """
    result = await session.execute(delete(KeyValueDB).where(KeyValueDB.key == key))
    return bool(result.rowcount)


# --- Card Collection Operations ---


class StoredCardRecord(BaseModel):
    """
    One card as persisted.

    Field names match the records the browser version of the app kept in
    local storage, so an exported collection can be loaded unchanged.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: int
    name: str
    points: int = 0
    stamps: list[bool]
    created_at: str = Field(default="", alias="createdAt")
    theme_color: str = Field(default=DEFAULT_THEME.value, alias="themeColor")


_records_adapter = TypeAdapter(list[StoredCardRecord])


def card_to_record(card: Card) -> StoredCardRecord:
    """Convert a domain card to its stored form."""
    return StoredCardRecord(
        id=card.id,
        name=card.name,
        points=card.stamp_count,
        stamps=list(card.stamps),
        created_at=card.created_at,
        theme_color=card.theme.value,
    )


def record_to_card(record: StoredCardRecord) -> Card:
    """
    Convert a stored record to a domain card.

    The stored points value is ignored; the count is always derived from stamps.
    """
    return Card(
        id=record.id,
        name=record.name,
        stamps=normalize_stamps(record.stamps),
        created_at=record.created_at,
        theme=theme_from_value(record.theme_color),
    )


def serialize_cards(cards: list[Card]) -> str:
    """Serialize a card collection to JSON text."""
    records = [card_to_record(card) for card in cards]
    return _records_adapter.dump_json(records, by_alias=True).decode("utf-8")


def deserialize_cards(raw: str) -> list[Card]:
    """
    Parse a serialized card collection.

    Raises:
        PersistenceReadError: If the text is not a valid collection
    """
    try:
        records = _records_adapter.validate_json(raw)
        return [record_to_card(record) for record in records]
    except ValidationError as e:
        raise PersistenceReadError(f"{e.error_count()} validation error(s)") from e
    except ValueError as e:
        raise PersistenceReadError(str(e)) from e


async def load_cards(session: AsyncSession, key: str) -> list[Card]:
    """
    Load the card collection stored under key.

    Returns an empty list if nothing is stored yet.

    Raises:
        PersistenceReadError: If the stored value is corrupt
    """
    raw = await get_value(session, key)
    if raw is None:
        return []
    return deserialize_cards(raw)


async def save_cards(session: AsyncSession, key: str, cards: list[Card]) -> None:
    """Write the full card collection under key."""
    await put_value(session, key, serialize_cards(cards))
    logger.debug("Saved %d cards under %s", len(cards), key)
