"""Protocol-wide configuration scalars."""

from dataclasses import dataclass


@dataclass
class ProtocolConfig:
    oracle_id: str
    minimum_stake: int
    fee_percentage: int   # 0..100
