"""pm_market REST endpoints.

POST /markets                     — create (administrator)
GET  /markets/count               — market counter
GET  /markets/{market_id}         — detail with derived phase
POST /markets/{market_id}/resolve — resolve with end price (oracle)
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.pm_common.database import get_db_session
from src.pm_common.errors import MarketNotFoundError
from src.pm_common.response import ApiResponse, success_response
from src.pm_gateway.auth.dependencies import get_caller
from src.pm_gateway.middleware.request_log import get_request_id
from src.pm_market.application.schemas import (
    CreateMarketRequest,
    CreateMarketResponse,
    MarketCountResponse,
    MarketDetail,
    ResolveMarketRequest,
)
from src.pm_settlement.engine.engine import SettlementEngine
from src.pm_settlement.engine.factory import get_engine

router = APIRouter(prefix="/markets", tags=["markets"])


@router.post("")
async def create_market(
    body: CreateMarketRequest,
    request: Request,
    caller: Annotated[str, Depends(get_caller)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    engine: Annotated[SettlementEngine, Depends(get_engine)],
) -> ApiResponse:
    market_id = await engine.create_market(
        db, caller, body.start_price, body.start_block, body.end_block
    )
    data = CreateMarketResponse(market_id=market_id)
    return success_response(data.model_dump(), get_request_id(request))


@router.get("/count")
async def get_market_count(
    request: Request,
    caller: Annotated[str, Depends(get_caller)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    engine: Annotated[SettlementEngine, Depends(get_engine)],
) -> ApiResponse:
    data = MarketCountResponse(market_count=await engine.get_market_count(db))
    return success_response(data.model_dump(), get_request_id(request))


@router.get("/{market_id}")
async def get_market(
    market_id: int,
    request: Request,
    caller: Annotated[str, Depends(get_caller)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    engine: Annotated[SettlementEngine, Depends(get_engine)],
) -> ApiResponse:
    market = await engine.get_market(db, market_id)
    if market is None:
        raise MarketNotFoundError(market_id)
    data = MarketDetail.from_domain(market, await engine.current_block())
    return success_response(data.model_dump(mode="json"), get_request_id(request))


@router.post("/{market_id}/resolve")
async def resolve_market(
    market_id: int,
    body: ResolveMarketRequest,
    request: Request,
    caller: Annotated[str, Depends(get_caller)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    engine: Annotated[SettlementEngine, Depends(get_engine)],
) -> ApiResponse:
    resolved = await engine.resolve_market(db, caller, market_id, body.end_price)
    return success_response(
        {"market_id": market_id, "resolved": resolved}, get_request_id(request)
    )
