# src/pm_admin/api/router.py
"""Admin REST API — protocol configuration, fee withdrawal, escrow reports.

Reads are open to any authenticated caller; setters and withdrawals are
checked against the administrator identity by the Settlement Engine.
"""
from typing import Annotated

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.pm_admin.application.schemas import (
    BalanceResponse,
    ConfigResponse,
    FeePercentageRequest,
    InvariantReport,
    MinimumStakeRequest,
    OracleRequest,
    WithdrawFeesRequest,
)
from src.pm_admin.application.service import AdminService
from src.pm_common.database import get_db_session
from src.pm_common.response import ApiResponse, success_response
from src.pm_gateway.auth.dependencies import get_caller
from src.pm_gateway.middleware.request_log import get_request_id
from src.pm_settlement.engine.engine import SettlementEngine
from src.pm_settlement.engine.factory import get_engine

router = APIRouter(prefix="/admin", tags=["admin"])


def get_admin_service() -> AdminService:
    return AdminService()


async def _config_response(engine: SettlementEngine, db: AsyncSession) -> ConfigResponse:
    return ConfigResponse(
        admin_id=engine.admin_id,
        oracle_id=await engine.get_oracle_id(db),
        minimum_stake=await engine.get_minimum_stake(db),
        fee_percentage=await engine.get_fee_percentage(db),
        market_count=await engine.get_market_count(db),
    )


@router.get("/config")
async def get_config(
    request: Request,
    caller: Annotated[str, Depends(get_caller)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    engine: Annotated[SettlementEngine, Depends(get_engine)],
) -> ApiResponse:
    data = await _config_response(engine, db)
    return success_response(data.model_dump(), get_request_id(request))


@router.put("/config/oracle")
async def set_oracle(
    body: OracleRequest,
    request: Request,
    caller: Annotated[str, Depends(get_caller)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    engine: Annotated[SettlementEngine, Depends(get_engine)],
) -> ApiResponse:
    await engine.set_oracle_id(db, caller, body.oracle_id)
    data = await _config_response(engine, db)
    return success_response(data.model_dump(), get_request_id(request))


@router.put("/config/minimum-stake")
async def set_minimum_stake(
    body: MinimumStakeRequest,
    request: Request,
    caller: Annotated[str, Depends(get_caller)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    engine: Annotated[SettlementEngine, Depends(get_engine)],
) -> ApiResponse:
    await engine.set_minimum_stake(db, caller, body.minimum_stake)
    data = await _config_response(engine, db)
    return success_response(data.model_dump(), get_request_id(request))


@router.put("/config/fee-percentage")
async def set_fee_percentage(
    body: FeePercentageRequest,
    request: Request,
    caller: Annotated[str, Depends(get_caller)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    engine: Annotated[SettlementEngine, Depends(get_engine)],
) -> ApiResponse:
    await engine.set_fee_percentage(db, caller, body.fee_percentage)
    data = await _config_response(engine, db)
    return success_response(data.model_dump(), get_request_id(request))


@router.post("/withdraw-fees")
async def withdraw_fees(
    body: WithdrawFeesRequest,
    request: Request,
    caller: Annotated[str, Depends(get_caller)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    engine: Annotated[SettlementEngine, Depends(get_engine)],
) -> ApiResponse:
    amount = await engine.withdraw_fees(db, caller, body.amount)
    return success_response({"withdrawn": amount}, get_request_id(request))


@router.get("/balance")
async def get_contract_balance(
    request: Request,
    caller: Annotated[str, Depends(get_caller)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    engine: Annotated[SettlementEngine, Depends(get_engine)],
) -> ApiResponse:
    data = BalanceResponse.from_amount(await engine.get_contract_balance(db))
    return success_response(data.model_dump(), get_request_id(request))


@router.get("/invariants")
async def verify_invariants(
    request: Request,
    caller: Annotated[str, Depends(get_caller)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    service: Annotated[AdminService, Depends(get_admin_service)],
) -> ApiResponse:
    data = InvariantReport(**await service.verify_all_invariants(db))
    return success_response(data.model_dump(), get_request_id(request))
