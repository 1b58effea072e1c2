"""
FastAPI dependencies.
"""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from stampbook.db.database import get_session
from stampbook.db.store import SqlCardStore
from stampbook.services.controller import CardBookController


async def get_controller(
    session: Annotated[AsyncSession, Depends(get_session)],
) -> CardBookController:
    """Controller for an editable session over the persisted collection."""
    controller = CardBookController(SqlCardStore(session))
    await controller.start()
    return controller


ControllerDep = Annotated[CardBookController, Depends(get_controller)]
