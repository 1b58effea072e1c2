"""
Card API endpoints.

CRUD over the persisted collection plus share-link and preview generation.
Every mutation is written to storage before the response is returned.
"""

from fastapi import APIRouter, status

from stampbook.api.dependencies import ControllerDep
from stampbook.api.schemas import (
    CardListResponse,
    CardResponse,
    CreateCardRequest,
    ReadOnlyViewResponse,
    ShareResponse,
)

router = APIRouter(prefix="/cards", tags=["cards"])


@router.get("", response_model=CardListResponse)
async def list_cards(controller: ControllerDep) -> CardListResponse:
    """List all cards, newest first."""
    cards = [CardResponse.from_card(card) for card in controller.state.cards]
    return CardListResponse(cards=cards, total=len(cards))


@router.post("", response_model=CardResponse, status_code=status.HTTP_201_CREATED)
async def create_card(request: CreateCardRequest, controller: ControllerDep) -> CardResponse:
    """
    Create a card with no stamps and a random theme.

    Blank names are rejected.
    """
    card = await controller.create_card(request.name)
    return CardResponse.from_card(card)


@router.get("/{card_id}", response_model=CardResponse)
async def get_card(card_id: int, controller: ControllerDep) -> CardResponse:
    return CardResponse.from_card(controller.state.get(card_id))


@router.delete("/{card_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_card(card_id: int, controller: ControllerDep) -> None:
    await controller.delete_card(card_id)


@router.post("/{card_id}/stamps/{index}", response_model=CardResponse)
async def toggle_stamp(card_id: int, index: int, controller: ControllerDep) -> CardResponse:
    """Flip one stamp and return the updated card."""
    card = await controller.toggle_stamp(card_id, index)
    return CardResponse.from_card(card)


@router.get("/{card_id}/share", response_model=ShareResponse)
async def share_card(card_id: int, controller: ControllerDep) -> ShareResponse:
    """Build a share token and link for a card."""
    link = controller.share_card(card_id)
    return ShareResponse(token=link.token, url=link.url)


@router.post("/{card_id}/preview", response_model=ReadOnlyViewResponse)
async def preview_card(card_id: int, controller: ControllerDep) -> ReadOnlyViewResponse:
    """
    Show a card the way a share link would, without making a link.

    The preview is built from the stored card directly and can be exited.
    """
    view = controller.simulate_preview(card_id)
    return ReadOnlyViewResponse.from_view(view)
