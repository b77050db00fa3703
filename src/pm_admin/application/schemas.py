"""Pydantic schemas for admin configuration and fee withdrawal."""

from pydantic import BaseModel

from src.pm_common.amounts import amount_to_display


class OracleRequest(BaseModel):
    oracle_id: str


class MinimumStakeRequest(BaseModel):
    minimum_stake: int


class FeePercentageRequest(BaseModel):
    fee_percentage: int


class WithdrawFeesRequest(BaseModel):
    amount: int


class ConfigResponse(BaseModel):
    admin_id: str
    oracle_id: str
    minimum_stake: int
    fee_percentage: int
    market_count: int


class BalanceResponse(BaseModel):
    escrow_balance: int
    escrow_balance_display: str

    @classmethod
    def from_amount(cls, amount: int) -> "BalanceResponse":
        return cls(escrow_balance=amount, escrow_balance_display=amount_to_display(amount))


class InvariantReport(BaseModel):
    ok: bool
    markets_checked: int
    violations: list[str]
