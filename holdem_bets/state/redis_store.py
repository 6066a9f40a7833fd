"""Game state persistence in Redis."""
import json
from typing import Optional

from holdem_bets.game.actions import ActionRecord, next_timestamp
from holdem_bets.game.game import Game
from holdem_bets.game.player import Player
from holdem_bets.state.redis_client import RedisClient, redis_client
from holdem_bets.state.store import StateStore
from holdem_bets.utils.logger import get_logger

logger = get_logger(__name__)


class RedisStore(StateStore):
    """Persists games, players and actions to Redis.

    Layout:
        ids:<kind>            counter per record kind
        games                 set of game ids
        game:<id>             game JSON
        game:<id>:players     set of player ids
        game:<id>:actions     list of action JSON, append order
        player:<id>           player JSON
    """

    def __init__(self, client: Optional[RedisClient] = None):
        self.client = client or redis_client

    def _game_key(self, game_id: int) -> str:
        """Get Redis key for game state."""
        return f"game:{game_id}"

    def _players_key(self, game_id: int) -> str:
        """Get Redis key for a game's player set."""
        return f"game:{game_id}:players"

    def _actions_key(self, game_id: int) -> str:
        """Get Redis key for a game's action log."""
        return f"game:{game_id}:actions"

    def _player_key(self, player_id: int) -> str:
        """Get Redis key for player state."""
        return f"player:{player_id}"

    async def connect(self) -> None:
        await self.client.connect()

    async def disconnect(self) -> None:
        await self.client.disconnect()

    async def next_id(self, kind: str) -> int:
        return await self.client.incr(f"ids:{kind}")

    async def create_game(self, game: Game, players: list[Player]) -> tuple[Game, list[Player]]:
        game = game.copy()
        game.id = await self.next_id("games")

        stored_players = []
        for player in players:
            player = player.copy()
            player.id = await self.next_id("players")
            player.game_id = game.id
            stored_players.append(player)

        async with self.client.pipeline() as pipe:
            pipe.set(self._game_key(game.id), json.dumps(game.to_dict()))
            pipe.sadd("games", game.id)
            for player in stored_players:
                pipe.set(self._player_key(player.id), json.dumps(player.to_dict()))
                pipe.sadd(self._players_key(game.id), player.id)
            await pipe.execute()

        logger.debug(f"Created game {game.id} with {len(stored_players)} players")
        return game, stored_players

    async def get_game(self, game_id: int) -> Optional[Game]:
        data = await self.client.get_json(self._game_key(game_id))
        if data is None:
            return None
        return Game.from_dict(data)

    async def list_games(self) -> list[Game]:
        game_ids = sorted(int(gid) for gid in await self.client.smembers("games"))
        rows = await self.client.mget_json([self._game_key(gid) for gid in game_ids])
        return [Game.from_dict(row) for row in rows if row is not None]

    async def get_players(self, game_id: int) -> list[Player]:
        player_ids = await self.client.smembers(self._players_key(game_id))
        rows = await self.client.mget_json([self._player_key(int(pid)) for pid in player_ids])
        players = [Player.from_dict(row) for row in rows if row is not None]
        return sorted(players, key=lambda p: p.position)

    async def get_player(self, player_id: int) -> Optional[Player]:
        data = await self.client.get_json(self._player_key(player_id))
        if data is None:
            return None
        return Player.from_dict(data)

    async def get_actions(
        self, game_id: int, hand_number: Optional[int] = None
    ) -> list[ActionRecord]:
        rows = await self.client.lrange(self._actions_key(game_id), 0, -1)
        actions = [ActionRecord.from_dict(json.loads(row)) for row in rows]
        if hand_number is not None:
            actions = [a for a in actions if a.hand_number == hand_number]
        return sorted(actions, key=lambda a: (a.timestamp, a.id))

    async def commit(
        self,
        game: Game,
        players: list[Player],
        actions: Optional[list[ActionRecord]] = None,
    ) -> list[ActionRecord]:
        appended = []
        if actions:
            last = await self.client.lindex(self._actions_key(game.id), -1)
            previous = ActionRecord.from_dict(json.loads(last)).timestamp if last else None
            for action in actions:
                previous = next_timestamp(previous)
                appended.append(action.stamped(await self.next_id("actions"), previous))

        async with self.client.pipeline() as pipe:
            pipe.set(self._game_key(game.id), json.dumps(game.to_dict()))
            for player in players:
                pipe.set(self._player_key(player.id), json.dumps(player.to_dict()))
            for action in appended:
                pipe.rpush(self._actions_key(game.id), json.dumps(action.to_dict()))
            await pipe.execute()

        logger.debug(f"Committed game {game.id}: {len(players)} players, {len(appended)} actions")
        return appended
