"""
Card book controller.

Single owner of a session's state. It runs the startup snapshot check once,
applies card book transitions, and writes the full collection to the store
after every mutation before returning to the caller.
"""

import logging
import random
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from typing import Protocol

from stampbook.config import settings
from stampbook.models.card import Card
from stampbook.models.failure import PersistenceReadError, ReadOnlySessionError
from stampbook.models.snapshot import ReadOnlyView
from stampbook.services import card_book
from stampbook.services.card_book import CardBook, View
from stampbook.services.share_codec import build_share_url, encode_card
from stampbook.services.snapshot_resolver import (
    EDITABLE,
    SessionMode,
    SnapshotResolution,
    resolve_startup,
    simulate_preview,
)

logger = logging.getLogger(__name__)


class CardStore(Protocol):
    """Persistence for the card collection."""

    async def load(self) -> list[Card]: ...

    async def save(self, cards: list[Card]) -> None: ...


@dataclass(frozen=True, slots=True)
class ShareLink:
    token: str
    url: str


class SessionNotStartedError(RuntimeError):
    """A controller operation was used before start()."""


class CardBookController:
    """
    Owns one session's CardBook.

    Usage:
        controller = CardBookController(store)
        await controller.start(url)
        if controller.read_only_view is None:
            await controller.create_card("Ben")
    """

    def __init__(
        self,
        store: CardStore,
        *,
        share_base_url: str | None = None,
        share_param: str | None = None,
        rng: random.Random | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self._store = store
        self._share_base_url = share_base_url or settings.public_base_url
        self._share_param = share_param or settings.share_query_param
        self._rng = rng or random.Random()
        self._clock = clock
        self._resolution: SnapshotResolution | None = None
        self.state = CardBook()

    # --- Session lifecycle ---

    async def start(self, url: str | None = None) -> SnapshotResolution:
        """
        Resolve the startup URL and load persisted cards if appropriate.

        Runs once per controller. A decoded share token puts the session in
        read-only SHARED mode and the persisted collection is not read.
        """
        if self._resolution is not None:
            raise RuntimeError("Session already started")

        resolution = resolve_startup(url, self._share_param) if url else EDITABLE
        self._resolution = resolution

        if resolution.load_persisted:
            self.state = CardBook(cards=tuple(await self._load_cards()))
        return resolution

    async def _load_cards(self) -> list[Card]:
        try:
            return await self._store.load()
        except PersistenceReadError as e:
            logger.warning("Saved cards unreadable, starting empty: %s", e.detail)
            return []

    @property
    def started(self) -> bool:
        return self._resolution is not None

    @property
    def mode(self) -> SessionMode:
        return self._require_started().mode

    @property
    def read_only_view(self) -> ReadOnlyView | None:
        """View to render instead of the editable app, if any."""
        return self._require_started().view

    def _require_started(self) -> SnapshotResolution:
        if self._resolution is None:
            raise SessionNotStartedError("Call start() before using the controller")
        return self._resolution

    def _require_editable(self) -> None:
        if self._require_started().mode is not SessionMode.EDITABLE:
            raise ReadOnlySessionError()

    # --- Mutations (persisted) ---

    async def _commit(self, book: CardBook) -> None:
        await self._store.save(list(book.cards))
        self.state = book

    async def create_card(self, name: str) -> Card:
        self._require_editable()
        book = card_book.create_card(self.state, name, now=self._clock(), rng=self._rng)
        await self._commit(book)
        created = book.cards[0]
        logger.info("Created card %d (%s)", created.id, created.theme.value)
        return created

    async def delete_card(self, card_id: int) -> None:
        self._require_editable()
        await self._commit(card_book.delete_card(self.state, card_id))
        logger.info("Deleted card %d", card_id)

    async def toggle_stamp(self, card_id: int, index: int) -> Card:
        self._require_editable()
        book = card_book.toggle_stamp(self.state, card_id, index)
        await self._commit(book)
        return book.get(card_id)

    # --- Navigation (not persisted) ---

    def select_card(self, card_id: int) -> None:
        self._require_editable()
        self.state = card_book.select_card(self.state, card_id)

    def navigate(self, view: View) -> None:
        self._require_editable()
        self.state = card_book.navigate(self.state, view)

    # --- Sharing ---

    def share_card(self, card_id: int) -> ShareLink:
        self._require_editable()
        token = encode_card(self.state.get(card_id))
        return ShareLink(
            token=token,
            url=build_share_url(self._share_base_url, token, self._share_param),
        )

    def simulate_preview(self, card_id: int) -> ReadOnlyView:
        """Switch to a read-only preview of a local card."""
        self._require_editable()
        resolution = simulate_preview(self.state.get(card_id))
        view = resolution.view
        if view is None:
            raise RuntimeError("Preview resolution has no snapshot")
        self._resolution = resolution
        return view

    def exit_preview(self) -> None:
        """Leave a simulated preview. Shared snapshots cannot be exited."""
        mode = self._require_started().mode
        if mode is SessionMode.SHARED:
            raise ReadOnlySessionError()
        if mode is not SessionMode.PREVIEW:
            raise RuntimeError("No preview to exit")
        self._resolution = EDITABLE
