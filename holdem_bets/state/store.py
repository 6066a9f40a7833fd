"""State store interface shared by every backend."""
from abc import ABC, abstractmethod
from typing import Optional

from holdem_bets.game.actions import ActionRecord
from holdem_bets.game.game import Game
from holdem_bets.game.player import Player


class StateStore(ABC):
    """Persists games, players and the action log.

    Ids are assigned by the store: ``create_game`` fills in game and player
    ids, ``commit`` fills in action ids and timestamps. Timestamps are
    strictly increasing within a game.
    """

    @abstractmethod
    async def next_id(self, kind: str) -> int:
        """Allocate the next id for ``kind`` (games, players or actions)."""

    @abstractmethod
    async def create_game(self, game: Game, players: list[Player]) -> tuple[Game, list[Player]]:
        """Store a new game with its seats.

        Returns:
            The game and players carrying their assigned ids.
        """

    @abstractmethod
    async def get_game(self, game_id: int) -> Optional[Game]:
        """Get a game, or None if unknown."""

    @abstractmethod
    async def list_games(self) -> list[Game]:
        """All games, ordered by id."""

    @abstractmethod
    async def get_players(self, game_id: int) -> list[Player]:
        """Players of a game in ascending position order."""

    @abstractmethod
    async def get_player(self, player_id: int) -> Optional[Player]:
        """Get a player, or None if unknown."""

    @abstractmethod
    async def get_actions(
        self, game_id: int, hand_number: Optional[int] = None
    ) -> list[ActionRecord]:
        """Action log of a game, optionally one hand, oldest first."""

    @abstractmethod
    async def commit(
        self,
        game: Game,
        players: list[Player],
        actions: Optional[list[ActionRecord]] = None,
    ) -> list[ActionRecord]:
        """Write staged state in one step.

        Args:
            game: Next game state.
            players: Players whose state changed.
            actions: New log entries to append.

        Returns:
            The appended records with their ids and timestamps.
        """

    async def connect(self) -> None:
        """Open backend resources."""

    async def disconnect(self) -> None:
        """Release backend resources."""
