"""Tests for rounds, hands and settlement."""
import pytest
from holdem_bets.game.actions import ActionType, LogActionType
from holdem_bets.game.betting import BettingEngine, HouseRules
from holdem_bets.game.errors import (
    GameInactive,
    InvalidRoundTransition,
    PlayerNotFound,
    ValidationError,
)
from holdem_bets.game.game import Game, Round
from holdem_bets.game.player import Player, PlayerStatus


def make_table(*balances: int) -> tuple[Game, list[Player]]:
    """Create a game with one player per balance, ids matching positions."""
    game = Game(id=1, player_count=len(balances), starting_balance=max(balances))
    players = [
        Player(id=i, game_id=1, name=f"Player {i}", position=i, balance=balance)
        for i, balance in enumerate(balances, start=1)
    ]
    return game, players


def act(engine, game, players, action, amount=None):
    """Apply an action for whoever holds the turn."""
    acting = next(p for p in players if p.position == game.current_player_turn)
    result = engine.apply_action(game, players, acting, action, amount)
    return result.game, result.players


def by_id(players, player_id):
    """Find a player by id."""
    return next(p for p in players if p.id == player_id)


@pytest.fixture
def engine():
    """Engine with default house rules."""
    return BettingEngine(HouseRules(), min_players=3, max_players=6)


class TestNewGame:
    """Test table setup."""

    def test_seats_players(self, engine):
        """Test players are seated in order with the starting balance."""
        game, players = engine.new_game(4, 250)

        assert game.current_hand_number == 1
        assert game.current_round == Round.PRE_FLOP
        assert game.pot == 0
        assert game.current_player_turn == 1
        assert game.is_active
        assert [p.name for p in players] == ["Player 1", "Player 2", "Player 3", "Player 4"]
        assert [p.position for p in players] == [1, 2, 3, 4]
        assert all(p.balance == 250 for p in players)
        assert all(p.status == PlayerStatus.ACTIVE for p in players)

    @pytest.mark.parametrize("count", [2, 7])
    def test_player_count_range(self, engine, count):
        """Test tables must seat three to six players."""
        with pytest.raises(ValidationError):
            engine.new_game(count, 100)

    def test_starting_balance_positive(self, engine):
        """Test starting balance must be positive."""
        with pytest.raises(ValidationError):
            engine.new_game(3, 0)


class TestAdvanceRound:
    """Test round transitions."""

    def test_round_sequence(self, engine):
        """Test pre-flop -> turn -> river, then rejection."""
        game, players = make_table(100, 100, 100)

        game, players = engine.advance_round(game, players)
        assert game.current_round == Round.TURN

        game, players = engine.advance_round(game, players)
        assert game.current_round == Round.RIVER

        with pytest.raises(InvalidRoundTransition):
            engine.advance_round(game, players)
        assert game.current_round == Round.RIVER

    def test_turn_resets_to_first_active(self, engine):
        """Test the lowest active position acts first in a new round."""
        game, players = make_table(100, 100, 100)
        game, players = act(engine, game, players, ActionType.FOLD)
        game, players = act(engine, game, players, ActionType.BET, 10)

        game, players = engine.advance_round(game, players)

        assert game.current_player_turn == 2

    def test_bets_reset_each_round(self, engine):
        """Test the watermark and commitments reset while the pot carries over."""
        game, players = make_table(100, 100, 100)
        game, players = act(engine, game, players, ActionType.BET, 10)
        game, players = act(engine, game, players, ActionType.CALL)

        game, players = engine.advance_round(game, players)

        assert game.current_bet_amount == 0
        assert all(p.current_bet == 0 for p in players)
        assert game.pot == 20

        # A fresh bet is allowed in the new round
        game, players = act(engine, game, players, ActionType.BET, 5)
        assert game.current_bet_amount == 5

    def test_bets_carry_over_when_configured(self):
        """Test the watermark survives the transition when resets are off."""
        engine = BettingEngine(HouseRules(reset_bets_each_round=False), 3, 6)
        game, players = make_table(100, 100, 100)
        game, players = act(engine, game, players, ActionType.BET, 10)

        game, players = engine.advance_round(game, players)

        assert game.current_bet_amount == 10
        assert by_id(players, 1).current_bet == 10

    def test_inactive_game(self, engine):
        """Test rounds cannot advance after the game ends."""
        game, players = make_table(100, 100, 100)
        game.is_active = False

        with pytest.raises(GameInactive):
            engine.advance_round(game, players)


class TestStartNewHand:
    """Test hand transitions."""

    def test_resets_hand_state(self, engine):
        """Test a new hand clears the pot, bets and folds."""
        game, players = make_table(100, 100, 100)
        game, players = act(engine, game, players, ActionType.BET, 10)
        game, players = act(engine, game, players, ActionType.FOLD)
        game, players = engine.advance_round(game, players)

        game, players = engine.start_new_hand(game, players)

        assert game.current_hand_number == 2
        assert game.current_round == Round.PRE_FLOP
        assert game.pot == 0
        assert game.current_bet_amount == 0
        assert game.current_player_turn == 1
        assert all(p.current_bet == 0 for p in players)
        assert all(p.status == PlayerStatus.ACTIVE for p in players)

    def test_broke_players_are_out(self, engine):
        """Test players without chips sit out the next hand."""
        game, players = make_table(100, 100, 100)
        players[0].balance = 0
        players[0].status = PlayerStatus.FOLDED

        game, players = engine.start_new_hand(game, players)

        assert by_id(players, 1).status == PlayerStatus.OUT
        assert game.current_player_turn == 2

    def test_shape_is_stable(self, engine):
        """Test starting hands twice yields the same shape."""
        game, players = make_table(100, 0, 100)

        game, players = engine.start_new_hand(game, players)
        game, players = engine.start_new_hand(game, players)

        assert game.current_hand_number == 3
        for p in players:
            assert p.current_bet == 0
            assert p.status == (PlayerStatus.ACTIVE if p.balance > 0 else PlayerStatus.OUT)


class TestDeclareHandWinner:
    """Test awarding a hand's pot."""

    def test_scenario_three_players(self, engine):
        """Test bet, call, fold, then P1 wins the pot."""
        game, players = make_table(100, 100, 100)

        game, players = act(engine, game, players, ActionType.BET, 10)
        assert by_id(players, 1).balance == 90
        assert game.pot == 10
        assert game.current_bet_amount == 10
        assert game.current_player_turn == 2

        game, players = act(engine, game, players, ActionType.CALL)
        assert by_id(players, 2).balance == 90
        assert game.pot == 20
        assert game.current_player_turn == 3

        game, players = act(engine, game, players, ActionType.FOLD)
        assert by_id(players, 3).status == PlayerStatus.FOLDED
        assert game.pot == 20

        settlement = engine.declare_hand_winner(game, players, 1)

        assert by_id(settlement.players, 1).balance == 110
        assert settlement.game.pot == 0
        assert settlement.game.current_hand_number == 2
        assert settlement.amount == 20
        assert settlement.record.action == LogActionType.WON
        assert settlement.record.amount == 20
        assert settlement.record.hand_number == 1

    def test_folded_player_may_win(self, engine):
        """Test the referee may award the pot to a folded player."""
        game, players = make_table(100, 100, 100)
        game, players = act(engine, game, players, ActionType.BET, 10)
        game, players = act(engine, game, players, ActionType.FOLD)

        settlement = engine.declare_hand_winner(game, players, 2)

        assert by_id(settlement.players, 2).balance == 110

    def test_out_player_cannot_win(self, engine):
        """Test a player who is out cannot be declared winner."""
        game, players = make_table(100, 0, 100)
        players[1].status = PlayerStatus.OUT

        with pytest.raises(ValidationError):
            engine.declare_hand_winner(game, players, 2)

    def test_unknown_winner(self, engine):
        """Test declaring a missing player is rejected."""
        game, players = make_table(100, 100, 100)

        with pytest.raises(PlayerNotFound):
            engine.declare_hand_winner(game, players, 42)


class TestEndGame:
    """Test final settlement."""

    def test_winner_takes_all(self, engine):
        """Test the winner collects the pot and every other stack."""
        game, players = make_table(80, 50, 30)
        game.pot = 40

        settlement = engine.end_game(game, players, 1)

        assert by_id(settlement.players, 1).balance == 200
        assert by_id(settlement.players, 2).balance == 0
        assert by_id(settlement.players, 3).balance == 0
        assert by_id(settlement.players, 2).status == PlayerStatus.OUT
        assert by_id(settlement.players, 3).status == PlayerStatus.OUT
        assert settlement.amount == 120
        assert settlement.game.pot == 0
        assert not settlement.game.is_active
        assert settlement.record.action == LogActionType.GAME_WINNER
        assert settlement.record.amount == 120

    def test_no_actions_after_end(self, engine):
        """Test every operation is rejected once the game is over."""
        game, players = make_table(100, 100, 100)
        settlement = engine.end_game(game, players, 2)
        game, players = settlement.game, settlement.players

        with pytest.raises(GameInactive):
            act(engine, game, players, ActionType.FOLD)
        with pytest.raises(GameInactive):
            engine.start_new_hand(game, players)
        with pytest.raises(GameInactive):
            engine.declare_hand_winner(game, players, 2)
        with pytest.raises(GameInactive):
            engine.end_game(game, players, 2)
