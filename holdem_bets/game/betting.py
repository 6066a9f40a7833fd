"""Betting engine: how actions move chips, rounds and turns."""
from dataclasses import dataclass
from typing import Callable, Optional, Union

from holdem_bets.config import config
from holdem_bets.game.actions import ActionRecord, ActionType, LogActionType
from holdem_bets.game.errors import (
    GameInactive,
    InsufficientBalance,
    InvalidBetState,
    InvalidRoundTransition,
    PlayerNotFound,
    TurnViolation,
    ValidationError,
)
from holdem_bets.game.game import Game, Round
from holdem_bets.game.player import Player, PlayerStatus
from holdem_bets.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class HouseRules:
    """Table rules that vary between home games."""
    small_blind_fold_penalty: bool = False
    reset_bets_each_round: bool = True
    small_blind_position: int = 2

    @classmethod
    def from_config(cls) -> "HouseRules":
        """Rules from the application configuration."""
        return cls(
            small_blind_fold_penalty=config.small_blind_fold_penalty,
            reset_bets_each_round=config.reset_bets_each_round,
        )


@dataclass
class ActionResult:
    """Staged outcome of an accepted player action."""
    game: Game
    player: Player
    players: list[Player]
    pot_delta: int
    record: ActionRecord


@dataclass
class Settlement:
    """Staged outcome of awarding chips to a winner."""
    game: Game
    players: list[Player]
    amount: int
    record: ActionRecord


def first_active_position(players: list[Player]) -> Optional[int]:
    """Lowest position still active in the hand, if any."""
    active = sorted(p.position for p in players if p.is_active)
    return active[0] if active else None


def next_active_position(players: list[Player], after: int) -> Optional[int]:
    """Next active position after ``after``, wrapping past the last seat."""
    active = sorted(p.position for p in players if p.is_active)
    if not active:
        return None
    for position in active:
        if position > after:
            return position
    return active[0]


class BettingEngine:
    """Pure betting logic.

    Every operation works on copies of the records it is given and returns
    the staged next state. A rejected operation raises a ``BettingError``
    and leaves the inputs untouched.
    """

    def __init__(
        self,
        rules: Optional[HouseRules] = None,
        min_players: Optional[int] = None,
        max_players: Optional[int] = None,
    ):
        """Initialize the engine.

        Args:
            rules: House rules, defaults to the configured ones.
            min_players: Smallest table allowed at setup.
            max_players: Largest table allowed at setup.
        """
        self.rules = rules or HouseRules.from_config()
        self.min_players = min_players if min_players is not None else config.min_players
        self.max_players = max_players if max_players is not None else config.max_players
        self._handlers: dict[ActionType, Callable[[Game, Player, Optional[int]], Optional[int]]] = {
            ActionType.BET: self._bet,
            ActionType.CALL: self._call,
            ActionType.RAISE: self._raise,
            ActionType.FOLD: self._fold,
        }
        missing = set(ActionType) - set(self._handlers)
        if missing:
            raise RuntimeError(f"No handler for actions: {sorted(a.value for a in missing)}")

    # Setup

    def new_game(self, player_count: int, starting_balance: int) -> tuple[Game, list[Player]]:
        """Build a fresh game and its seats, without ids.

        Args:
            player_count: Number of seats.
            starting_balance: Chips each seat starts with.

        Returns:
            The game and its players, in position order.
        """
        if not self.min_players <= player_count <= self.max_players:
            raise ValidationError(
                f"Player count must be between {self.min_players} and {self.max_players}"
            )
        if starting_balance <= 0:
            raise ValidationError("Starting balance must be positive")

        game = Game.new(player_count, starting_balance)
        players = [
            Player(
                id=None,
                game_id=None,
                name=f"Player {position}",
                position=position,
                balance=starting_balance,
            )
            for position in range(1, player_count + 1)
        ]
        return game, players

    # Player actions

    def apply_action(
        self,
        game: Game,
        players: list[Player],
        acting_player: Player,
        action: Union[ActionType, str],
        amount: Optional[int] = None,
    ) -> ActionResult:
        """Apply a player's action.

        Args:
            game: Current game state.
            players: Every player of the game.
            acting_player: The player submitting the action.
            action: bet, call, raise or fold.
            amount: Total bet for bet/raise; ignored for call/fold.

        Returns:
            Staged game, player and action record.

        Raises:
            GameInactive: The game has ended.
            PlayerNotFound: The player does not belong to this game.
            TurnViolation: Not this player's turn, or the player is not active.
            ValidationError: Unknown action, or a missing/negative amount.
            InvalidBetState: The action does not fit the open bet.
            InsufficientBalance: The player cannot cover the chips.
        """
        action = self._parse_action(action)
        self.require_active_game(game)

        if acting_player.game_id != game.id:
            raise PlayerNotFound(acting_player.id, game.id)
        if not acting_player.is_active:
            raise TurnViolation(
                f"{acting_player.name} cannot act while {acting_player.status.value}"
            )
        if acting_player.position != game.current_player_turn:
            raise TurnViolation(
                f"It is not {acting_player.name}'s turn "
                f"(position {game.current_player_turn} to act)"
            )
        if action.requires_amount:
            if amount is None:
                raise ValidationError(f"Amount is required to {action.value}")
            if amount <= 0:
                raise ValidationError("Amount must be positive")

        staged_game = game.copy()
        staged_player = acting_player.copy()
        pot_before = staged_game.pot

        moved = self._handlers[action](staged_game, staged_player, amount)

        staged_players = [
            staged_player if p.id == staged_player.id else p.copy() for p in players
        ]
        next_turn = next_active_position(staged_players, staged_player.position)
        if next_turn is not None:
            staged_game.current_player_turn = next_turn

        record = ActionRecord(
            game_id=game.id,
            hand_number=game.current_hand_number,
            round=game.current_round,
            player_id=staged_player.id,
            player_name=staged_player.name,
            action=LogActionType.for_action(action),
            amount=moved,
        )
        return ActionResult(
            game=staged_game,
            player=staged_player,
            players=staged_players,
            pot_delta=staged_game.pot - pot_before,
            record=record,
        )

    def _bet(self, game: Game, player: Player, amount: Optional[int]) -> int:
        if game.current_bet_amount > 0:
            raise InvalidBetState(
                f"Cannot bet when there's already a bet of {game.current_bet_amount}. "
                "Use raise instead."
            )
        if amount > player.balance:
            raise InsufficientBalance(
                f"{player.name} cannot bet {amount} with a balance of {player.balance}"
            )

        player.bet(amount)
        game.pot += amount
        game.current_bet_amount = amount
        logger.info(f"{player.name} bets {amount}")
        return amount

    def _call(self, game: Game, player: Player, amount: Optional[int]) -> int:
        if game.current_bet_amount == 0:
            raise InvalidBetState("There is no bet to call")

        # Never negative: a player's commitment cannot pass the watermark.
        call_amount = max(game.current_bet_amount - player.current_bet, 0)
        if call_amount > player.balance:
            raise InsufficientBalance(
                f"{player.name} cannot call {call_amount} with a balance of {player.balance}"
            )

        player.bet(call_amount)
        game.pot += call_amount
        logger.info(f"{player.name} calls {call_amount}")
        return call_amount

    def _raise(self, game: Game, player: Player, amount: Optional[int]) -> int:
        if game.current_bet_amount == 0:
            raise InvalidBetState("There is no bet to raise. Use bet instead.")
        if amount <= game.current_bet_amount:
            raise InvalidBetState(
                f"Raise must be higher than current bet of {game.current_bet_amount}"
            )

        additional = amount - player.current_bet
        if additional > player.balance:
            raise InsufficientBalance(
                f"{player.name} cannot raise to {amount} with a balance of {player.balance}"
            )

        player.bet(additional)
        game.pot += additional
        game.current_bet_amount = amount
        logger.info(f"{player.name} raises to {amount}")
        return additional

    def _fold(self, game: Game, player: Player, amount: Optional[int]) -> Optional[int]:
        player.fold()

        forfeit = 0
        if (
            self.rules.small_blind_fold_penalty
            and player.position == self.rules.small_blind_position
            and game.current_round == Round.PRE_FLOP
            and game.current_bet_amount > 0
        ):
            forfeit = min(game.current_bet_amount // 2, player.balance)

        if forfeit > 0:
            player.forfeit(forfeit)
            game.pot += forfeit
            logger.info(f"{player.name} folds from the small blind and forfeits {forfeit}")
            return forfeit

        logger.info(f"{player.name} folds")
        return None

    # Rounds and hands

    def advance_round(self, game: Game, players: list[Player]) -> tuple[Game, list[Player]]:
        """Move to the next betting round.

        The first active player acts next. With ``reset_bets_each_round``
        the watermark and every player's commitment go back to zero; the
        pot carries over.

        Raises:
            GameInactive: The game has ended.
            InvalidRoundTransition: Already at the river.
        """
        self.require_active_game(game)

        next_round = game.current_round.next()
        if next_round is None:
            raise InvalidRoundTransition(
                f"Cannot advance past the {game.current_round.value}"
            )

        staged_game = game.copy()
        staged_players = [p.copy() for p in players]

        staged_game.current_round = next_round
        if self.rules.reset_bets_each_round:
            staged_game.current_bet_amount = 0
            for player in staged_players:
                player.current_bet = 0

        first = first_active_position(staged_players)
        if first is not None:
            staged_game.current_player_turn = first

        logger.info(
            f"Game {game.id} hand #{game.current_hand_number} "
            f"advances to {next_round.value}"
        )
        return staged_game, staged_players

    def start_new_hand(self, game: Game, players: list[Player]) -> tuple[Game, list[Player]]:
        """Begin the next hand.

        Players with chips are dealt back in, including those who folded;
        players without chips are out.

        Raises:
            GameInactive: The game has ended.
        """
        self.require_active_game(game)

        if game.pot > 0:
            logger.warning(
                f"Game {game.id} hand #{game.current_hand_number} "
                f"ended without a winner; pot of {game.pot} cleared"
            )

        staged_game = game.copy()
        staged_players = [p.copy() for p in players]
        self._reset_hand(staged_game, staged_players)
        return staged_game, staged_players

    def _reset_hand(self, game: Game, players: list[Player]) -> None:
        game.current_hand_number += 1
        game.current_round = Round.PRE_FLOP
        game.pot = 0
        game.current_bet_amount = 0
        for player in players:
            player.reset_for_new_hand()

        first = first_active_position(players)
        if first is not None:
            game.current_player_turn = first

        logger.info(f"Game {game.id} started hand #{game.current_hand_number}")

    # Settlement

    def declare_hand_winner(
        self, game: Game, players: list[Player], winner_id: int
    ) -> Settlement:
        """Award the pot to the declared winner and start the next hand.

        The referee decides the real-world outcome, so a folded player may
        be awarded the pot. A player who is out cannot.

        Raises:
            GameInactive: The game has ended.
            PlayerNotFound: The winner is not seated in this game.
            ValidationError: The winner is out of the game.
        """
        self.require_active_game(game)

        staged_game = game.copy()
        staged_players = [p.copy() for p in players]
        winner = self._find_player(staged_game, staged_players, winner_id)
        if winner.status == PlayerStatus.OUT:
            raise ValidationError(f"{winner.name} is out of the game")

        amount = staged_game.pot
        winner.win_pot(amount)
        record = ActionRecord(
            game_id=game.id,
            hand_number=game.current_hand_number,
            round=game.current_round,
            player_id=winner.id,
            player_name=winner.name,
            action=LogActionType.WON,
            amount=amount,
        )
        logger.info(
            f"{winner.name} wins hand #{game.current_hand_number} "
            f"of game {game.id} for {amount}"
        )

        staged_game.pot = 0
        self._reset_hand(staged_game, staged_players)
        return Settlement(game=staged_game, players=staged_players, amount=amount, record=record)

    def end_game(self, game: Game, players: list[Player], winner_id: int) -> Settlement:
        """Settle the whole game: the winner takes the pot and every other stack.

        Raises:
            GameInactive: The game has already ended.
            PlayerNotFound: The winner is not seated in this game.
            ValidationError: The winner is out of the game.
        """
        self.require_active_game(game)

        staged_game = game.copy()
        staged_players = [p.copy() for p in players]
        winner = self._find_player(staged_game, staged_players, winner_id)
        if winner.status == PlayerStatus.OUT:
            raise ValidationError(f"{winner.name} is out of the game")

        total = staged_game.pot
        for player in staged_players:
            if player is not winner:
                total += player.knock_out()

        winner.win_pot(total)
        winner.current_bet = 0
        staged_game.pot = 0
        staged_game.current_bet_amount = 0
        staged_game.is_active = False

        record = ActionRecord(
            game_id=game.id,
            hand_number=game.current_hand_number,
            round=game.current_round,
            player_id=winner.id,
            player_name=winner.name,
            action=LogActionType.GAME_WINNER,
            amount=total,
        )
        logger.info(f"{winner.name} wins game {game.id} with {winner.balance} chips")
        return Settlement(game=staged_game, players=staged_players, amount=total, record=record)

    # Helpers

    @staticmethod
    def _parse_action(action: Union[ActionType, str]) -> ActionType:
        if isinstance(action, ActionType):
            return action
        try:
            return ActionType(action)
        except ValueError:
            valid = ", ".join(a.value for a in ActionType)
            raise ValidationError(f"Invalid action {action!r}. Valid: {valid}") from None

    @staticmethod
    def require_active_game(game: Game) -> None:
        if not game.is_active:
            raise GameInactive(f"Game {game.id} has ended")

    @staticmethod
    def _find_player(game: Game, players: list[Player], player_id: int) -> Player:
        for player in players:
            if player.id == player_id:
                return player
        raise PlayerNotFound(player_id, game.id)
