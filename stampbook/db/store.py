"""
Card collection store backed by the key-value table.
"""

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from stampbook.config import settings
from stampbook.db.operations import load_cards, save_cards
from stampbook.models.card import Card
from stampbook.models.failure import PersistenceReadError


class SqlCardStore:
    """Reads and writes the whole collection under one storage key."""

    def __init__(self, session: AsyncSession, key: str | None = None):
        self._session = session
        self.key = key or settings.storage_key

    async def load(self) -> list[Card]:
        """
        Raises:
            PersistenceReadError: If the stored value is corrupt or the
                database cannot be read
        """
        try:
            return await load_cards(self._session, self.key)
        except SQLAlchemyError as e:
            raise PersistenceReadError(f"database read failed: {e}") from e

    async def save(self, cards: list[Card]) -> None:
        await save_cards(self._session, self.key, cards)
