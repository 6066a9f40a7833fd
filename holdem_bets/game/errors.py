"""Errors raised by the betting engine and the game service."""
from typing import Optional


class BettingError(Exception):
    """Base class for every rejected request.

    Attributes:
        code: Stable machine-readable error code.
        status_code: HTTP status the transport layer answers with.
    """

    code = "BETTING_ERROR"
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {"error": self.message, "code": self.code}


class NotFoundError(BettingError):
    """A referenced record does not exist."""
    code = "NOT_FOUND"
    status_code = 404


class GameNotFound(NotFoundError):
    """Game id is unknown to the store."""

    def __init__(self, game_id: int):
        super().__init__(f"Game {game_id} not found")
        self.game_id = game_id


class PlayerNotFound(NotFoundError):
    """Player id is unknown, or belongs to another game."""

    def __init__(self, player_id: int, game_id: Optional[int] = None):
        if game_id is None:
            message = f"Player {player_id} not found"
        else:
            message = f"Player {player_id} not found in game {game_id}"
        super().__init__(message)
        self.player_id = player_id


class TurnViolation(BettingError):
    """Acting out of turn, or acting while not active."""
    code = "TURN_VIOLATION"
    status_code = 409


class InvalidBetState(BettingError):
    """Bet while a bet is open, raise at or below the watermark, and similar."""
    code = "INVALID_BET_STATE"
    status_code = 409


class InvalidRoundTransition(BettingError):
    """Advancing past the river."""
    code = "INVALID_ROUND_TRANSITION"
    status_code = 409


class InsufficientBalance(BettingError):
    """Amount exceeds the acting player's balance."""
    code = "INSUFFICIENT_BALANCE"
    status_code = 400


class GameInactive(BettingError):
    """The game has ended."""
    code = "GAME_INACTIVE"
    status_code = 409


class ValidationError(BettingError):
    """Malformed request."""
    code = "VALIDATION_ERROR"
    status_code = 400
