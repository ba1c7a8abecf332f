"""
Sport catalog endpoint used to populate sport pickers.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from fastbreak.actions.events import get_sports
from fastbreak.api.responses import respond
from fastbreak.db.session import get_db
from fastbreak.schemas.event import SportRead
from fastbreak.schemas.result import ActionResult

router = APIRouter(prefix="/sports", tags=["Sports"])


@router.get("/", response_model=ActionResult[list[SportRead]])
async def list_sports_endpoint(db: AsyncSession = Depends(get_db)):
    return respond(await get_sports(db))
