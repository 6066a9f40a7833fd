"""Tests for the game service."""
import asyncio
import pytest
from unittest.mock import AsyncMock, MagicMock, patch

from holdem_bets.game.actions import LogActionType
from holdem_bets.game.betting import BettingEngine, HouseRules
from holdem_bets.game.errors import (
    GameInactive,
    GameNotFound,
    InsufficientBalance,
    InvalidRoundTransition,
    PlayerNotFound,
    TurnViolation,
)
from holdem_bets.game.game import Round
from holdem_bets.game.player import PlayerStatus
from holdem_bets.service import GameService, create_service
from holdem_bets.state.locks import LocalLockManager, RedisLockManager
from holdem_bets.state.memory_store import MemoryStore
from holdem_bets.state.redis_store import RedisStore


@pytest.fixture
def service():
    """Service over an in-memory store."""
    return GameService(
        MemoryStore(),
        LocalLockManager(),
        BettingEngine(HouseRules(), min_players=3, max_players=6),
    )


class TestCreateGame:
    """Test game creation."""

    @pytest.mark.asyncio
    async def test_create_game(self, service):
        """Test players are seeded and stored."""
        game, players = await service.create_game(3, 100)

        snapshot = await service.get_game_state(game.id)

        assert snapshot.game.player_count == 3
        assert [p.name for p in snapshot.players] == ["Player 1", "Player 2", "Player 3"]
        assert snapshot.actions == []


class TestSubmitAction:
    """Test action submission."""

    @pytest.mark.asyncio
    async def test_current_player_acts(self, service):
        """Test the action goes to the player holding the turn."""
        game, players = await service.create_game(3, 100)

        record = await service.submit_action(game.id, "bet", 10)

        assert record.player_id == players[0].id
        assert record.id == 1
        assert record.timestamp is not None
        snapshot = await service.get_game_state(game.id)
        assert snapshot.game.pot == 10
        assert snapshot.game.current_player_turn == 2
        assert snapshot.players[0].balance == 90

    @pytest.mark.asyncio
    async def test_named_player_out_of_turn(self, service):
        """Test naming a player who does not hold the turn is rejected."""
        game, players = await service.create_game(3, 100)

        with pytest.raises(TurnViolation):
            await service.submit_action(game.id, "bet", 10, player_id=players[2].id)

    @pytest.mark.asyncio
    async def test_named_player_unknown(self, service):
        """Test naming a player from nowhere is rejected."""
        game, _ = await service.create_game(3, 100)

        with pytest.raises(PlayerNotFound):
            await service.submit_action(game.id, "fold", player_id=999)

    @pytest.mark.asyncio
    async def test_unknown_game(self, service):
        """Test acting in a missing game."""
        with pytest.raises(GameNotFound):
            await service.submit_action(5, "fold")

    @pytest.mark.asyncio
    async def test_rejected_action_changes_nothing(self, service):
        """Test a rejected action leaves the store untouched."""
        game, _ = await service.create_game(3, 100)
        before = (await service.get_game_state(game.id)).to_dict()

        with pytest.raises(InsufficientBalance):
            await service.submit_action(game.id, "bet", 500)

        assert (await service.get_game_state(game.id)).to_dict() == before

    @pytest.mark.asyncio
    async def test_concurrent_actions_are_serialized(self, service):
        """Test simultaneous requests apply one after another."""
        game, _ = await service.create_game(3, 100)

        results = await asyncio.gather(
            service.submit_action(game.id, "bet", 10),
            service.submit_action(game.id, "call"),
            service.submit_action(game.id, "call"),
        )

        snapshot = await service.get_game_state(game.id)
        assert [r.action for r in results] == [
            LogActionType.BET, LogActionType.CALL, LogActionType.CALL,
        ]
        assert snapshot.game.pot == 30
        assert all(p.balance == 90 for p in snapshot.players)


class TestHandLifecycle:
    """Test rounds, hands and settlement through the service."""

    @pytest.mark.asyncio
    async def test_full_hand(self, service):
        """Test a hand played to a declared winner."""
        game, players = await service.create_game(3, 100)

        await service.submit_action(game.id, "bet", 10)
        await service.submit_action(game.id, "call")
        await service.submit_action(game.id, "fold")
        await service.advance_round(game.id)
        await service.submit_action(game.id, "bet", 20)
        await service.submit_action(game.id, "call")

        won = await service.declare_hand_winner(game.id, players[1].id)

        assert won == 60
        snapshot = await service.get_game_state(game.id)
        assert snapshot.game.current_hand_number == 2
        assert snapshot.game.pot == 0
        assert [p.balance for p in snapshot.players] == [70, 130, 100]
        assert all(p.status == PlayerStatus.ACTIVE for p in snapshot.players)
        assert snapshot.actions[-1].action == LogActionType.WON

        hand_one = await service.get_hand_actions(game.id, 1)
        assert len(hand_one) == 6
        assert [a.round for a in hand_one[:3]] == [Round.PRE_FLOP] * 3
        assert hand_one[3].round == Round.TURN

    @pytest.mark.asyncio
    async def test_advance_past_river(self, service):
        """Test the fourth advance is rejected."""
        game, _ = await service.create_game(3, 100)

        await service.advance_round(game.id)
        await service.advance_round(game.id)
        with pytest.raises(InvalidRoundTransition):
            await service.advance_round(game.id)

        assert (await service.get_game_state(game.id)).game.current_round == Round.RIVER

    @pytest.mark.asyncio
    async def test_start_new_hand(self, service):
        """Test starting a hand without a winner."""
        game, _ = await service.create_game(3, 100)
        await service.submit_action(game.id, "fold")

        updated = await service.start_new_hand(game.id)

        assert updated.current_hand_number == 2
        snapshot = await service.get_game_state(game.id)
        assert all(p.status == PlayerStatus.ACTIVE for p in snapshot.players)

    @pytest.mark.asyncio
    async def test_end_game(self, service):
        """Test ending the game pays the winner everything."""
        game, players = await service.create_game(3, 100)
        await service.submit_action(game.id, "bet", 20)

        total = await service.end_game(game.id, players[2].id)

        assert total == 200
        snapshot = await service.get_game_state(game.id)
        assert not snapshot.game.is_active
        assert [p.balance for p in snapshot.players] == [0, 0, 300]
        assert snapshot.actions[-1].action == LogActionType.GAME_WINNER

        with pytest.raises(GameInactive):
            await service.submit_action(game.id, "fold")


class TestStats:
    """Test game statistics."""

    @pytest.mark.asyncio
    async def test_stats(self, service):
        """Test stats track hands, rounds and the biggest pot."""
        game, players = await service.create_game(4, 100)
        await service.submit_action(game.id, "bet", 30)
        await service.submit_action(game.id, "call")
        await service.declare_hand_winner(game.id, players[0].id)
        await service.submit_action(game.id, "bet", 5)
        await service.submit_action(game.id, "fold")
        await service.advance_round(game.id)

        stats = await service.get_game_stats(game.id)

        assert stats.hands_played == 2
        assert stats.round_number == 2
        assert stats.active_players == 3
        assert stats.pot == 5
        assert stats.biggest_pot == 60


class TestCreateService:
    """Test backend selection."""

    def test_memory_backend(self):
        """Test the memory backend uses local locks."""
        with patch("holdem_bets.service.config") as mock_config:
            mock_config.store_backend = "memory"
            service = create_service()

        assert isinstance(service.store, MemoryStore)
        assert isinstance(service.locks, LocalLockManager)

    def test_redis_backend(self):
        """Test the redis backend uses distributed locks."""
        with patch("holdem_bets.service.config") as mock_config:
            mock_config.store_backend = "redis"
            service = create_service()

        assert isinstance(service.store, RedisStore)
        assert isinstance(service.locks, RedisLockManager)

    def test_unknown_backend(self):
        """Test an unknown backend is a configuration error."""
        with patch("holdem_bets.service.config") as mock_config:
            mock_config.store_backend = "sqlite"
            with pytest.raises(ValueError):
                create_service()


class TestRedisLockManager:
    """Test distributed locking."""

    @pytest.mark.asyncio
    async def test_hold_uses_game_lock(self):
        """Test the lock key is scoped to the game."""
        client = MagicMock()
        lock = MagicMock()
        lock.__aenter__ = AsyncMock(return_value=lock)
        lock.__aexit__ = AsyncMock(return_value=False)
        client.lock.return_value = lock

        manager = RedisLockManager(client, timeout=5)
        async with manager.hold(12):
            pass

        client.lock.assert_called_once_with("lock:game:12", timeout=5)
        lock.__aenter__.assert_awaited_once()
        lock.__aexit__.assert_awaited_once()
