"""Main FastAPI server."""
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from holdem_bets.config import config
from holdem_bets.game.errors import BettingError, ValidationError
from holdem_bets.protocol.messages import (
    ActionRequest,
    ActionResponse,
    CreateGameRequest,
    CreateGameResponse,
    DeclareWinnerRequest,
    DeclareWinnerResponse,
    EndGameRequest,
    EndGameResponse,
    ErrorResponse,
    GameResponse,
    GameStateResponse,
    GameStatsResponse,
)
from holdem_bets.service import GameService, create_service
from holdem_bets.utils.logger import get_logger

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    service = create_service()
    await service.store.connect()
    app.state.service = service
    logger.info(f"Bet manager started with {config.store_backend} store")
    yield
    await service.store.disconnect()
    logger.info("Bet manager shutdown complete")


# Create FastAPI app
app = FastAPI(
    title="Domino Hold'em Bet Manager",
    description="Tracks bets, pots and turns for tables played with physical cards",
    version="1.0.0",
    lifespan=lifespan,
)

# CORS middleware - allow local development
app.add_middleware(
    CORSMiddleware,
    allow_origin_regex=r"http://(localhost|127\.0\.0\.1)(:\d+)?",  # Allow any localhost port
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def get_service(request: Request) -> GameService:
    """Service created by the lifespan handler."""
    return request.app.state.service


@app.exception_handler(BettingError)
async def betting_error_handler(request: Request, exc: BettingError):
    """Map engine errors to their HTTP status."""
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Malformed requests share the engine's validation error shape."""
    details = "; ".join(
        f"{'.'.join(str(part) for part in err['loc'] if part != 'body')}: {err['msg']}"
        for err in exc.errors()
    )
    error = ValidationError(details or "Invalid request")
    return JSONResponse(status_code=error.status_code, content=error.to_dict())


# Health check
@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}


@app.get("/api/games")
async def list_games(service: GameService = Depends(get_service)):
    """List games."""
    games = await service.list_games()
    return {"games": [game.to_dict() for game in games]}


@app.post("/api/games", response_model=CreateGameResponse)
async def create_game(
    request: CreateGameRequest,
    service: GameService = Depends(get_service),
):
    """Create a game and seat its players."""
    game, players = await service.create_game(request.player_count, request.starting_balance)
    return CreateGameResponse(
        game=game.to_dict(),
        players=[p.to_dict() for p in players],
    )


@app.get(
    "/api/games/{game_id}",
    response_model=GameStateResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_game(game_id: int, service: GameService = Depends(get_service)):
    """Game with players and action history."""
    snapshot = await service.get_game_state(game_id)
    return GameStateResponse(**snapshot.to_dict())


@app.post(
    "/api/games/{game_id}/actions",
    response_model=ActionResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def submit_action(
    game_id: int,
    request: ActionRequest,
    service: GameService = Depends(get_service),
):
    """Bet, call, raise or fold for the current player."""
    record = await service.submit_action(
        game_id,
        request.action,
        amount=request.amount,
        player_id=request.player_id,
    )
    return ActionResponse(action=record.to_dict())


@app.post("/api/games/{game_id}/next-round", response_model=GameResponse)
async def next_round(game_id: int, service: GameService = Depends(get_service)):
    """Advance to the next betting round."""
    game = await service.advance_round(game_id)
    return GameResponse(game=game.to_dict())


@app.post("/api/games/{game_id}/new-hand", response_model=GameResponse)
async def new_hand(game_id: int, service: GameService = Depends(get_service)):
    """Start a new hand."""
    game = await service.start_new_hand(game_id)
    return GameResponse(game=game.to_dict())


@app.post("/api/games/{game_id}/declare-winner", response_model=DeclareWinnerResponse)
async def declare_winner(
    game_id: int,
    request: DeclareWinnerRequest,
    service: GameService = Depends(get_service),
):
    """Give the pot to the hand's winner."""
    amount = await service.declare_hand_winner(game_id, request.player_id)
    return DeclareWinnerResponse(amount_won=amount)


@app.post("/api/games/{game_id}/end-game", response_model=EndGameResponse)
async def end_game(
    game_id: int,
    request: EndGameRequest,
    service: GameService = Depends(get_service),
):
    """End the game with a final winner."""
    total = await service.end_game(game_id, request.winner_id)
    return EndGameResponse(total_won=total)


@app.get("/api/games/{game_id}/stats", response_model=GameStatsResponse)
async def game_stats(game_id: int, service: GameService = Depends(get_service)):
    """Hand count, round and pot figures."""
    stats = await service.get_game_stats(game_id)
    return GameStatsResponse(**stats.to_dict())


@app.get("/api/games/{game_id}/hands/{hand_number}/actions")
async def hand_actions(
    game_id: int,
    hand_number: int,
    service: GameService = Depends(get_service),
):
    """Action history of one hand."""
    actions = await service.get_hand_actions(game_id, hand_number)
    return {"actions": [a.to_dict() for a in actions]}


# Entry point
if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "holdem_bets.main:app",
        host=config.host,
        port=config.port,
        reload=True,
    )
