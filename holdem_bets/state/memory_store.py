"""In-process state store."""
import itertools
from dataclasses import replace
from typing import Optional

from holdem_bets.game.actions import ActionRecord, next_timestamp
from holdem_bets.game.game import Game
from holdem_bets.game.player import Player
from holdem_bets.state.store import StateStore
from holdem_bets.utils.logger import get_logger

logger = get_logger(__name__)


class MemoryStore(StateStore):
    """Keeps every record in dictionaries.

    Records handed out are copies, so callers cannot mutate stored state
    without going through ``commit``.
    """

    def __init__(self):
        self._games: dict[int, Game] = {}
        self._players: dict[int, Player] = {}
        self._actions: dict[int, list[ActionRecord]] = {}  # game_id -> log
        self._counters: dict[str, itertools.count] = {}

    async def next_id(self, kind: str) -> int:
        if kind not in self._counters:
            self._counters[kind] = itertools.count(1)
        return next(self._counters[kind])

    async def create_game(self, game: Game, players: list[Player]) -> tuple[Game, list[Player]]:
        stored_game = replace(game, id=await self.next_id("games"))
        stored_players = []
        for player in players:
            stored = replace(player, id=await self.next_id("players"), game_id=stored_game.id)
            self._players[stored.id] = stored
            stored_players.append(stored.copy())

        self._games[stored_game.id] = stored_game
        self._actions[stored_game.id] = []
        logger.debug(f"Created game {stored_game.id} with {len(stored_players)} players")
        return stored_game.copy(), stored_players

    async def get_game(self, game_id: int) -> Optional[Game]:
        game = self._games.get(game_id)
        return game.copy() if game else None

    async def list_games(self) -> list[Game]:
        return [self._games[game_id].copy() for game_id in sorted(self._games)]

    async def get_players(self, game_id: int) -> list[Player]:
        players = [p.copy() for p in self._players.values() if p.game_id == game_id]
        return sorted(players, key=lambda p: p.position)

    async def get_player(self, player_id: int) -> Optional[Player]:
        player = self._players.get(player_id)
        return player.copy() if player else None

    async def get_actions(
        self, game_id: int, hand_number: Optional[int] = None
    ) -> list[ActionRecord]:
        log = self._actions.get(game_id, [])
        if hand_number is not None:
            log = [a for a in log if a.hand_number == hand_number]
        return sorted(log, key=lambda a: (a.timestamp, a.id))

    async def commit(
        self,
        game: Game,
        players: list[Player],
        actions: Optional[list[ActionRecord]] = None,
    ) -> list[ActionRecord]:
        log = self._actions.setdefault(game.id, [])
        previous = log[-1].timestamp if log else None

        appended = []
        for action in actions or []:
            previous = next_timestamp(previous)
            appended.append(action.stamped(await self.next_id("actions"), previous))

        self._games[game.id] = game.copy()
        for player in players:
            self._players[player.id] = player.copy()
        log.extend(appended)

        logger.debug(f"Committed game {game.id}: {len(players)} players, {len(appended)} actions")
        return appended
