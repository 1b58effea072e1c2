"""
Card book state and its transitions.

The whole editable state of a session is one immutable CardBook value.
Every operation takes the current book and returns a new one; nothing here
touches storage. Callers persist the result.
"""

import random
from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum

from stampbook.models.card import STAMP_CAPACITY, THEME_ORDER, Card, empty_stamps
from stampbook.models.failure import CardNotFoundError, InvalidCardNameError, StampIndexError


class View(str, Enum):
    """Screens of the editable app."""

    HOME = "home"
    CREATE = "create"
    RECORDS = "records"
    CARD = "card"


@dataclass(frozen=True, slots=True)
class CardBook:
    """
    Editable session state.

    Attributes:
        cards: The collection, newest first
        active_card_id: Card shown on the CARD view, if any
        view: Current screen
    """

    cards: tuple[Card, ...] = ()
    active_card_id: int | None = None
    view: View = View.HOME

    @property
    def active_card(self) -> Card | None:
        if self.active_card_id is None:
            return None
        return self.find(self.active_card_id)

    def find(self, card_id: int) -> Card | None:
        for card in self.cards:
            if card.id == card_id:
                return card
        return None

    def get(self, card_id: int) -> Card:
        """Like find(), but raises CardNotFoundError."""
        card = self.find(card_id)
        if card is None:
            raise CardNotFoundError(card_id)
        return card


def format_created_date(moment: datetime) -> str:
    """Display date used on new cards, e.g. "2024/1/5"."""
    return f"{moment.year}/{moment.month}/{moment.day}"


def _next_card_id(book: CardBook, moment: datetime) -> int:
    card_id = int(moment.timestamp() * 1000)
    taken = {card.id for card in book.cards}
    while card_id in taken:
        card_id += 1
    return card_id


def create_card(
    book: CardBook,
    name: str,
    *,
    now: datetime | None = None,
    rng: random.Random | None = None,
) -> CardBook:
    """
    Add a new card with no stamps and a random theme.

    The card is prepended, becomes active, and the CARD view is shown.

    Raises:
        InvalidCardNameError: If name is blank
    """
    name = name.strip()
    if not name:
        raise InvalidCardNameError()

    moment = now or datetime.now()
    chooser = rng or random.Random()

    card = Card(
        id=_next_card_id(book, moment),
        name=name,
        stamps=empty_stamps(),
        created_at=format_created_date(moment),
        theme=chooser.choice(THEME_ORDER),
    )
    return replace(book, cards=(card, *book.cards), active_card_id=card.id, view=View.CARD)


def delete_card(book: CardBook, card_id: int) -> CardBook:
    """
    Remove a card.

    Deleting the active card clears the selection and returns to RECORDS.

    Raises:
        CardNotFoundError: If no card has this id
    """
    book.get(card_id)
    cards = tuple(card for card in book.cards if card.id != card_id)

    if book.active_card_id == card_id:
        return replace(book, cards=cards, active_card_id=None, view=View.RECORDS)
    return replace(book, cards=cards)


def toggle_stamp(book: CardBook, card_id: int, index: int) -> CardBook:
    """
    Flip one stamp on a card.

    Raises:
        CardNotFoundError: If no card has this id
        StampIndexError: If index is outside the stamp grid
    """
    if not 0 <= index < STAMP_CAPACITY:
        raise StampIndexError(index, STAMP_CAPACITY)

    target = book.get(card_id)
    updated = target.with_stamp_toggled(index)
    cards = tuple(updated if card.id == card_id else card for card in book.cards)
    return replace(book, cards=cards)


def select_card(book: CardBook, card_id: int) -> CardBook:
    """Show a card on the CARD view."""
    book.get(card_id)
    return replace(book, active_card_id=card_id, view=View.CARD)


def navigate(book: CardBook, view: View) -> CardBook:
    return replace(book, view=view)
