"""Betting engine module."""
from .errors import (
    BettingError,
    NotFoundError,
    GameNotFound,
    PlayerNotFound,
    TurnViolation,
    InvalidBetState,
    InvalidRoundTransition,
    InsufficientBalance,
    GameInactive,
    ValidationError,
)
from .game import Game, Round
from .player import Player, PlayerStatus
from .actions import ActionType, LogActionType, ActionRecord
from .betting import BettingEngine, HouseRules, ActionResult, Settlement

__all__ = [
    "BettingError",
    "NotFoundError",
    "GameNotFound",
    "PlayerNotFound",
    "TurnViolation",
    "InvalidBetState",
    "InvalidRoundTransition",
    "InsufficientBalance",
    "GameInactive",
    "ValidationError",
    "Game",
    "Round",
    "Player",
    "PlayerStatus",
    "ActionType",
    "LogActionType",
    "ActionRecord",
    "BettingEngine",
    "HouseRules",
    "ActionResult",
    "Settlement",
]
