"""Global enums — must match DB CHECK constraints exactly."""

from enum import Enum


class Side(str, Enum):
    UP = "UP"
    DOWN = "DOWN"


class MarketStatus(str, Enum):
    """Stored lifecycle flag: flips UNRESOLVED -> RESOLVED exactly once."""
    UNRESOLVED = "UNRESOLVED"
    RESOLVED = "RESOLVED"


class MarketPhase(str, Enum):
    """Derived from block height + status, never stored."""
    PENDING = "PENDING"
    OPEN = "OPEN"
    CLOSED = "CLOSED"
    RESOLVED = "RESOLVED"


class PositionStatus(str, Enum):
    OPEN = "OPEN"
    CLAIMED = "CLAIMED"


class LedgerEntryType(str, Enum):
    # Participant -> escrow
    STAKE = "STAKE"
    # Escrow -> winner
    PAYOUT = "PAYOUT"
    # Escrow -> administrator
    FEE = "FEE"
    FEE_WITHDRAWAL = "FEE_WITHDRAWAL"
