"""Tests for the card book controller."""

import logging
import random
from datetime import datetime

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from stampbook.db.store import SqlCardStore
from stampbook.models.card import Card, ThemeColor
from stampbook.models.failure import (
    CardNotFoundError,
    PersistenceReadError,
    ReadOnlySessionError,
)
from stampbook.services.card_book import View
from stampbook.services.controller import (
    CardBookController,
    CardStore,
    SessionNotStartedError,
)
from stampbook.services.share_codec import decode_token, encode_card
from stampbook.services.snapshot_resolver import SessionMode

BASE_URL = "http://app.test/open"


class FakeStore:
    """In-memory card store that records every save."""

    def __init__(self, cards: list[Card] | None = None, *, corrupt: bool = False):
        self.cards = list(cards or [])
        self.corrupt = corrupt
        self.loads = 0
        self.saves: list[list[Card]] = []
        self.fail_saves = False

    async def load(self) -> list[Card]:
        self.loads += 1
        if self.corrupt:
            raise PersistenceReadError("bad json")
        return list(self.cards)

    async def save(self, cards: list[Card]) -> None:
        if self.fail_saves:
            raise OSError("disk full")
        self.cards = list(cards)
        self.saves.append(list(cards))


def _controller(store: CardStore) -> CardBookController:
    return CardBookController(
        store,
        share_base_url=BASE_URL,
        share_param="s",
        rng=random.Random(0),
        clock=lambda: datetime(2024, 1, 5, 12, 0),
    )


class TestStart:
    async def test_editable_loads_persisted(self, ben: Card) -> None:
        store = FakeStore([ben])
        controller = _controller(store)

        resolution = await controller.start()

        assert resolution.mode is SessionMode.EDITABLE
        assert controller.state.cards == (ben,)
        assert controller.read_only_view is None
        assert store.loads == 1

    async def test_shared_link_skips_persisted(self, ben: Card) -> None:
        store = FakeStore([ben])
        controller = _controller(store)

        await controller.start(f"{BASE_URL}?s={encode_card(ben)}")

        assert controller.mode is SessionMode.SHARED
        assert store.loads == 0
        assert controller.state.cards == ()
        view = controller.read_only_view
        assert view is not None
        assert view.card.name == "Ben"
        assert view.can_exit is False

    async def test_broken_link_loads_persisted(self, ben: Card) -> None:
        store = FakeStore([ben])
        controller = _controller(store)

        await controller.start(f"{BASE_URL}?s=broken")

        assert controller.mode is SessionMode.EDITABLE
        assert controller.state.cards == (ben,)

    async def test_corrupt_storage_starts_empty(self, caplog) -> None:
        controller = _controller(FakeStore(corrupt=True))

        with caplog.at_level(logging.WARNING):
            await controller.start()

        assert controller.state.cards == ()
        assert "starting empty" in caplog.text

    async def test_unreadable_database_starts_empty(self, caplog) -> None:
        engine = create_async_engine("sqlite+aiosqlite:///:memory:")
        async_session = async_sessionmaker(engine, class_=AsyncSession)

        async with async_session() as session:
            controller = _controller(SqlCardStore(session))
            with caplog.at_level(logging.WARNING):
                await controller.start()

        await engine.dispose()

        assert controller.mode is SessionMode.EDITABLE
        assert controller.state.cards == ()
        assert "starting empty" in caplog.text

    async def test_start_runs_once(self) -> None:
        controller = _controller(FakeStore())
        await controller.start()
        with pytest.raises(RuntimeError):
            await controller.start()

    async def test_use_before_start(self) -> None:
        controller = _controller(FakeStore())
        with pytest.raises(SessionNotStartedError):
            await controller.create_card("Ben")


class TestMutations:
    async def test_every_mutation_is_persisted(self) -> None:
        store = FakeStore()
        controller = _controller(store)
        await controller.start()

        card = await controller.create_card("Ben")
        await controller.toggle_stamp(card.id, 0)
        await controller.delete_card(card.id)

        assert len(store.saves) == 3
        assert store.saves[0][0].name == "Ben"
        assert store.saves[1][0].stamp_count == 1
        assert store.saves[2] == []

    async def test_toggle_returns_updated_card(self) -> None:
        controller = _controller(FakeStore())
        await controller.start()
        card = await controller.create_card("Ben")

        updated = await controller.toggle_stamp(card.id, 29)

        assert updated.stamps[29] is True
        assert updated.stamp_count == 1

    async def test_failed_save_leaves_state(self) -> None:
        store = FakeStore()
        controller = _controller(store)
        await controller.start()
        store.fail_saves = True

        with pytest.raises(OSError):
            await controller.create_card("Ben")

        assert controller.state.cards == ()

    async def test_navigation_is_not_persisted(self) -> None:
        store = FakeStore()
        controller = _controller(store)
        await controller.start()
        card = await controller.create_card("Ben")

        controller.navigate(View.HOME)
        controller.select_card(card.id)

        assert len(store.saves) == 1
        assert controller.state.view is View.CARD

    async def test_shared_session_refuses_mutations(self, ben: Card) -> None:
        store = FakeStore()
        controller = _controller(store)
        await controller.start(f"{BASE_URL}?s={encode_card(ben)}")

        with pytest.raises(ReadOnlySessionError):
            await controller.create_card("Amy")
        assert store.saves == []


class TestSharing:
    async def test_share_card(self) -> None:
        controller = _controller(FakeStore())
        await controller.start()
        card = await controller.create_card("Ben")

        link = controller.share_card(card.id)

        assert link.url == f"{BASE_URL}?s={link.token}"
        assert decode_token(link.token).name == "Ben"

    async def test_shared_link_opens_read_only(self) -> None:
        author = _controller(FakeStore())
        await author.start()
        card = await author.create_card("Ben")
        await author.toggle_stamp(card.id, 5)
        link = author.share_card(card.id)

        viewer = _controller(FakeStore())
        await viewer.start(link.url)

        view = viewer.read_only_view
        assert view is not None
        assert view.card.stamp_count == 1
        assert view.card.theme is card.theme


class TestPreview:
    async def test_preview_then_exit(self, ben: Card) -> None:
        store = FakeStore([ben])
        controller = _controller(store)
        await controller.start()

        view = controller.simulate_preview(ben.id)

        assert view.can_exit is True
        assert view.card.theme is ThemeColor.INDIGO
        assert controller.mode is SessionMode.PREVIEW
        with pytest.raises(ReadOnlySessionError):
            await controller.toggle_stamp(ben.id, 0)

        controller.exit_preview()

        assert controller.mode is SessionMode.EDITABLE
        assert controller.state.cards == (ben,)
        assert store.saves == []

    async def test_shared_snapshot_cannot_exit(self, ben: Card) -> None:
        controller = _controller(FakeStore())
        await controller.start(f"{BASE_URL}?s={encode_card(ben)}")

        with pytest.raises(ReadOnlySessionError):
            controller.exit_preview()

    async def test_exit_without_preview(self) -> None:
        controller = _controller(FakeStore())
        await controller.start()

        with pytest.raises(RuntimeError):
            controller.exit_preview()

    async def test_preview_view_is_the_session_view(self, ben: Card) -> None:
        controller = _controller(FakeStore([ben]))
        await controller.start()

        view = controller.simulate_preview(ben.id)

        assert controller.read_only_view == view
        assert view.card.stamps == ben.stamps

    async def test_preview_of_missing_card_keeps_session(self) -> None:
        controller = _controller(FakeStore())
        await controller.start()

        with pytest.raises(CardNotFoundError):
            controller.simulate_preview(404)

        assert controller.mode is SessionMode.EDITABLE
