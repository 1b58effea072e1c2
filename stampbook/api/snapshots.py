"""
Shared-link endpoints.

`/open` is where share links land: it performs the session-start check and
answers with either a read-only view or the editable collection.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from stampbook.api.schemas import CardResponse, OpenResponse, ReadOnlyViewResponse
from stampbook.db.database import get_session
from stampbook.db.store import SqlCardStore
from stampbook.services.controller import CardBookController
from stampbook.services.share_codec import decode_token

router = APIRouter(tags=["snapshots"])


@router.get("/open", response_model=OpenResponse)
async def open_app(
    request: Request,
    session: Annotated[AsyncSession, Depends(get_session)],
) -> OpenResponse:
    """
    Open the app at the requested URL.

    A valid share token yields the read-only view and persisted cards are
    not read. A missing or broken token silently falls back to the
    editable collection.
    """
    controller = CardBookController(SqlCardStore(session))
    resolution = await controller.start(str(request.url))

    view = resolution.view
    if view is not None:
        return OpenResponse(mode=resolution.mode, view=ReadOnlyViewResponse.from_view(view))

    return OpenResponse(
        mode=resolution.mode,
        cards=[CardResponse.from_card(card) for card in controller.state.cards],
    )


@router.get("/snapshots", response_model=CardResponse)
async def inspect_snapshot(
    s: Annotated[str, Query(min_length=1, description="Share token")],
) -> CardResponse:
    """
    Strictly decode a share token.

    The token travels in the query, as in a share link, so standard-alphabet
    tokens containing "/" reach the decoder. Unlike `/open`, a bad token is
    reported as a classified failure.
    """
    return CardResponse.from_card(decode_token(s))
