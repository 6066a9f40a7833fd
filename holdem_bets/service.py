"""Game service: loads state, runs the engine, commits the result."""
from dataclasses import dataclass
from typing import Optional, Union

from holdem_bets.config import config
from holdem_bets.game.actions import ActionRecord, ActionType, LogActionType
from holdem_bets.game.betting import BettingEngine
from holdem_bets.game.errors import BettingError, GameNotFound, PlayerNotFound, TurnViolation
from holdem_bets.game.game import Game
from holdem_bets.game.player import Player
from holdem_bets.state.locks import LocalLockManager, RedisLockManager
from holdem_bets.state.memory_store import MemoryStore
from holdem_bets.state.redis_store import RedisStore
from holdem_bets.state.store import StateStore
from holdem_bets.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class GameSnapshot:
    """Read-only view of a game."""
    game: Game
    players: list[Player]
    actions: list[ActionRecord]

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "game": self.game.to_dict(),
            "players": [p.to_dict() for p in self.players],
            "actions": [a.to_dict() for a in self.actions],
        }


@dataclass
class GameStats:
    """Summary figures for a game."""
    hands_played: int
    round_number: int
    active_players: int
    pot: int
    biggest_pot: int

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "handsPlayed": self.hands_played,
            "roundNumber": self.round_number,
            "activePlayers": self.active_players,
            "pot": self.pot,
            "biggestPot": self.biggest_pot,
        }


class GameService:
    """Runs each request as one read-modify-write under the game's lock."""

    def __init__(
        self,
        store: StateStore,
        locks: Optional[Union[LocalLockManager, RedisLockManager]] = None,
        engine: Optional[BettingEngine] = None,
    ):
        self.store = store
        self.locks = locks or LocalLockManager()
        self.engine = engine or BettingEngine()

    async def _load(self, game_id: int) -> tuple[Game, list[Player]]:
        """Get a game and its players or raise GameNotFound."""
        game = await self.store.get_game(game_id)
        if game is None:
            raise GameNotFound(game_id)
        players = await self.store.get_players(game_id)
        return game, players

    async def create_game(self, player_count: int, starting_balance: int) -> tuple[Game, list[Player]]:
        """Create a game with ``player_count`` seats named "Player i"."""
        game, players = self.engine.new_game(player_count, starting_balance)
        game, players = await self.store.create_game(game, players)
        logger.info(
            f"Created game {game.id}: {player_count} players, "
            f"starting balance {starting_balance}"
        )
        return game, players

    async def submit_action(
        self,
        game_id: int,
        action: Union[ActionType, str],
        amount: Optional[int] = None,
        player_id: Optional[int] = None,
    ) -> ActionRecord:
        """Apply an action for the player whose turn it is.

        Args:
            game_id: Game identifier.
            action: bet, call, raise or fold.
            amount: Total bet for bet/raise.
            player_id: Acting player; when given it must hold the turn.

        Returns:
            The appended action record.
        """
        async with self.locks.hold(game_id):
            game, players = await self._load(game_id)
            self.engine.require_active_game(game)

            if player_id is not None:
                acting = next((p for p in players if p.id == player_id), None)
                if acting is None:
                    raise PlayerNotFound(player_id, game_id)
            else:
                acting = next(
                    (
                        p for p in players
                        if p.position == game.current_player_turn and p.is_active
                    ),
                    None,
                )
                if acting is None:
                    raise TurnViolation("No active player for current turn")

            try:
                result = self.engine.apply_action(game, players, acting, action, amount)
            except BettingError as e:
                logger.warning(f"Rejected {action} from {acting.name} in game {game_id}: {e}")
                raise

            appended = await self.store.commit(result.game, [result.player], [result.record])
            return appended[0]

    async def advance_round(self, game_id: int) -> Game:
        """Move the game to its next betting round."""
        async with self.locks.hold(game_id):
            game, players = await self._load(game_id)
            game, players = self.engine.advance_round(game, players)
            await self.store.commit(game, players)
            return game

    async def start_new_hand(self, game_id: int) -> Game:
        """Start the next hand without awarding the pot."""
        async with self.locks.hold(game_id):
            game, players = await self._load(game_id)
            game, players = self.engine.start_new_hand(game, players)
            await self.store.commit(game, players)
            return game

    async def declare_hand_winner(self, game_id: int, player_id: int) -> int:
        """Award the pot to ``player_id`` and start the next hand.

        Returns:
            Chips awarded.
        """
        async with self.locks.hold(game_id):
            game, players = await self._load(game_id)
            settlement = self.engine.declare_hand_winner(game, players, player_id)
            await self.store.commit(settlement.game, settlement.players, [settlement.record])
            return settlement.amount

    async def end_game(self, game_id: int, winner_id: int) -> int:
        """Finish the game in favour of ``winner_id``.

        Returns:
            Chips won, the pot plus every other player's balance.
        """
        async with self.locks.hold(game_id):
            game, players = await self._load(game_id)
            settlement = self.engine.end_game(game, players, winner_id)
            await self.store.commit(settlement.game, settlement.players, [settlement.record])
            return settlement.amount

    async def get_game_state(self, game_id: int) -> GameSnapshot:
        """Game, players in position order and the action log, oldest first."""
        game, players = await self._load(game_id)
        actions = await self.store.get_actions(game_id)
        return GameSnapshot(game=game, players=players, actions=actions)

    async def get_hand_actions(self, game_id: int, hand_number: int) -> list[ActionRecord]:
        """Action log of one hand."""
        await self._load(game_id)
        return await self.store.get_actions(game_id, hand_number)

    async def get_game_stats(self, game_id: int) -> GameStats:
        """Summary figures shown next to the table."""
        snapshot = await self.get_game_state(game_id)
        won = [a.amount or 0 for a in snapshot.actions if a.action == LogActionType.WON]
        return GameStats(
            hands_played=snapshot.game.current_hand_number,
            round_number=snapshot.game.current_round.number,
            active_players=sum(1 for p in snapshot.players if p.is_active),
            pot=snapshot.game.pot,
            biggest_pot=max([snapshot.game.pot, *won]),
        )

    async def list_games(self) -> list[Game]:
        """All games known to the store."""
        return await self.store.list_games()


def create_service() -> GameService:
    """Build the service for the configured store backend."""
    backend = config.store_backend.lower()
    if backend == "redis":
        return GameService(RedisStore(), RedisLockManager())
    if backend == "memory":
        return GameService(MemoryStore(), LocalLockManager())
    raise ValueError(f"Unknown store backend: {config.store_backend}")
