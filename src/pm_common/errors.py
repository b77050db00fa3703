"""Unified error codes and custom exceptions.

Error code ranges:
  1xxx: Auth/Caller
  2xxx: Custody
  3xxx: Market
  4xxx: Prediction
  5xxx: Position
  9xxx: System
"""


class AppError(Exception):
    """Base application error."""

    def __init__(
        self,
        code: int,
        message: str,
        http_status: int = 500,
    ) -> None:
        self.code = code
        self.message = message
        self.http_status = http_status
        super().__init__(message)


# --- 1xxx: Auth/Caller ---

class InvalidCredentialsError(AppError):
    def __init__(self) -> None:
        super().__init__(1003, "Invalid or expired token", 401)


class UnauthorizedError(AppError):
    def __init__(self, caller: str, role: str) -> None:
        super().__init__(1006, f"Caller {caller} is not the {role}", 403)


# --- 2xxx: Custody ---

class InsufficientBalanceError(AppError):
    def __init__(self, required: int, available: int) -> None:
        super().__init__(
            2001,
            f"Insufficient balance: required {required}, available {available}",
            422,
        )


# --- 3xxx: Market ---

class MarketNotFoundError(AppError):
    def __init__(self, market_id: int) -> None:
        super().__init__(3001, f"Market not found: {market_id}", 404)


class MarketEndedError(AppError):
    def __init__(self, market_id: int, code: int = 3004, reason: str = "has ended") -> None:
        super().__init__(code, f"Market {market_id} {reason}", 422)


class MarketNotStartedError(MarketEndedError):
    """Stake attempted before start_block.

    Subclasses MarketEndedError: a market outside its stake window rejects
    predictions the same way whichever side of the window the block is on.
    """

    def __init__(self, market_id: int) -> None:
        super().__init__(market_id, code=3003, reason="has not started")


class MarketNotEndedError(AppError):
    def __init__(self, market_id: int, end_block: int, current_block: int) -> None:
        super().__init__(
            3005,
            f"Market {market_id} ends at block {end_block}, current block {current_block}",
            422,
        )


class AlreadyResolvedError(AppError):
    def __init__(self, market_id: int) -> None:
        super().__init__(3006, f"Market already resolved: {market_id}", 409)


class MarketClosedError(AppError):
    def __init__(self, market_id: int) -> None:
        super().__init__(3007, f"Market is not resolved yet: {market_id}", 422)


# --- 4xxx: Prediction ---

class InvalidPredictionError(AppError):
    def __init__(self, detail: str) -> None:
        super().__init__(4001, f"Invalid prediction: {detail}", 422)


class DuplicatePositionError(AppError):
    def __init__(self, market_id: int, participant_id: str) -> None:
        super().__init__(
            4002,
            f"Participant {participant_id} already holds a position on market {market_id}",
            409,
        )


# --- 5xxx: Position ---

class PositionNotFoundError(AppError):
    def __init__(self, market_id: int, participant_id: str) -> None:
        super().__init__(
            5002, f"No position for {participant_id} on market {market_id}", 404
        )


class AlreadyClaimedError(AppError):
    def __init__(self, market_id: int, participant_id: str) -> None:
        super().__init__(
            5003, f"Winnings already claimed by {participant_id} on market {market_id}", 409
        )


# --- 9xxx: System ---

class InternalError(AppError):
    def __init__(self, detail: str = "Internal server error") -> None:
        super().__init__(9002, detail, 500)


class InvalidParameterError(AppError):
    def __init__(self, detail: str) -> None:
        super().__init__(9003, f"Invalid parameter: {detail}", 422)
