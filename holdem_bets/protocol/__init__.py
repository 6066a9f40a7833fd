"""Protocol module for HTTP request and response schemas."""
from .messages import (
    CreateGameRequest,
    ActionRequest,
    DeclareWinnerRequest,
    EndGameRequest,
    GameStateResponse,
    ErrorResponse,
)

__all__ = [
    "CreateGameRequest",
    "ActionRequest",
    "DeclareWinnerRequest",
    "EndGameRequest",
    "GameStateResponse",
    "ErrorResponse",
]
