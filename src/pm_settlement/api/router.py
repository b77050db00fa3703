"""Prediction and claim endpoints.

POST /markets/{market_id}/predictions                — stake on UP or DOWN
POST /markets/{market_id}/claim                      — claim winnings
GET  /markets/{market_id}/positions/{participant_id} — position detail
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.pm_common.database import get_db_session
from src.pm_common.errors import PositionNotFoundError
from src.pm_common.response import ApiResponse, success_response
from src.pm_gateway.auth.dependencies import get_caller
from src.pm_gateway.middleware.request_log import get_request_id
from src.pm_settlement.application.schemas import (
    ClaimResponse,
    PositionDetail,
    PredictionRequest,
    PredictionResponse,
)
from src.pm_settlement.engine.engine import SettlementEngine
from src.pm_settlement.engine.factory import get_engine

router = APIRouter(prefix="/markets", tags=["settlement"])


@router.post("/{market_id}/predictions")
async def make_prediction(
    market_id: int,
    body: PredictionRequest,
    request: Request,
    caller: Annotated[str, Depends(get_caller)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    engine: Annotated[SettlementEngine, Depends(get_engine)],
) -> ApiResponse:
    accepted = await engine.make_prediction(db, caller, market_id, body.side, body.stake)
    data = PredictionResponse(market_id=market_id, accepted=accepted)
    return success_response(data.model_dump(), get_request_id(request))


@router.post("/{market_id}/claim")
async def claim_winnings(
    market_id: int,
    request: Request,
    caller: Annotated[str, Depends(get_caller)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    engine: Annotated[SettlementEngine, Depends(get_engine)],
) -> ApiResponse:
    payout = await engine.claim_winnings(db, caller, market_id)
    data = ClaimResponse.from_payout(market_id, payout)
    return success_response(data.model_dump(), get_request_id(request))


@router.get("/{market_id}/positions/{participant_id}")
async def get_position(
    market_id: int,
    participant_id: str,
    request: Request,
    caller: Annotated[str, Depends(get_caller)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    engine: Annotated[SettlementEngine, Depends(get_engine)],
) -> ApiResponse:
    position = await engine.get_position(db, market_id, participant_id)
    if position is None:
        raise PositionNotFoundError(market_id, participant_id)
    data = PositionDetail.from_domain(position)
    return success_response(data.model_dump(), get_request_id(request))
