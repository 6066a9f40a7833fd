"""Pydantic request and response schemas for the HTTP API."""
from typing import Any, Optional
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from holdem_bets.game.actions import ActionType


class CamelModel(BaseModel):
    """Accepts and emits camelCase keys, like the web client."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ============= Requests =============

class CreateGameRequest(CamelModel):
    """Set up a table."""
    player_count: int = Field(gt=0)  # Range enforced by the engine
    starting_balance: int = Field(gt=0)


class ActionRequest(CamelModel):
    """Bet, call, raise or fold for the player whose turn it is."""
    action: ActionType
    amount: Optional[int] = None  # Required for bet and raise
    player_id: Optional[int] = None  # Checked against the turn when given


class DeclareWinnerRequest(CamelModel):
    """Award the pot of the current hand."""
    player_id: int


class EndGameRequest(CamelModel):
    """Finish the game."""
    winner_id: int


# ============= Responses =============

class CreateGameResponse(CamelModel):
    game: dict[str, Any]
    players: list[dict[str, Any]]


class GameStateResponse(CamelModel):
    game: dict[str, Any]
    players: list[dict[str, Any]]
    actions: list[dict[str, Any]]


class SuccessResponse(CamelModel):
    success: bool = True


class ActionResponse(SuccessResponse):
    action: dict[str, Any]


class GameResponse(SuccessResponse):
    game: dict[str, Any]


class DeclareWinnerResponse(SuccessResponse):
    amount_won: int


class EndGameResponse(SuccessResponse):
    total_won: int


class ErrorResponse(CamelModel):
    error: str
    code: str


class GameStatsResponse(CamelModel):
    hands_played: int
    round_number: int
    active_players: int
    pot: int
    biggest_pot: int
