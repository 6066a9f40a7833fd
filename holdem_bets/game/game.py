"""Game model: one betting context at a physical table."""
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Optional


class Round(str, Enum):
    """Betting rounds of a hand, in play order."""
    PRE_FLOP = "pre-flop"
    TURN = "turn"
    RIVER = "river"

    @classmethod
    def order(cls) -> list["Round"]:
        """All rounds in play order."""
        return [cls.PRE_FLOP, cls.TURN, cls.RIVER]

    @property
    def number(self) -> int:
        """1-based index of this round within the hand."""
        return Round.order().index(self) + 1

    def next(self) -> Optional["Round"]:
        """The round that follows this one, or None after the river."""
        rounds = Round.order()
        index = rounds.index(self)
        if index + 1 < len(rounds):
            return rounds[index + 1]
        return None


@dataclass
class Game:
    """Table-wide betting state."""

    id: Optional[int]
    player_count: int
    starting_balance: int
    current_hand_number: int = 1
    current_round: Round = Round.PRE_FLOP
    pot: int = 0
    current_player_turn: Optional[int] = 1
    current_bet_amount: int = 0
    is_active: bool = True
    created_at: Optional[datetime] = None

    def copy(self) -> "Game":
        """Return a detached copy for staging changes."""
        return replace(self)

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "id": self.id,
            "playerCount": self.player_count,
            "startingBalance": self.starting_balance,
            "currentHandNumber": self.current_hand_number,
            "currentRound": self.current_round.value,
            "pot": self.pot,
            "currentPlayerTurn": self.current_player_turn,
            "currentBetAmount": self.current_bet_amount,
            "isActive": self.is_active,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Game":
        """Restore from dictionary."""
        created_at = data.get("createdAt")
        return cls(
            id=data["id"],
            player_count=data["playerCount"],
            starting_balance=data["startingBalance"],
            current_hand_number=data.get("currentHandNumber", 1),
            current_round=Round(data.get("currentRound", Round.PRE_FLOP.value)),
            pot=data.get("pot", 0),
            current_player_turn=data.get("currentPlayerTurn"),
            current_bet_amount=data.get("currentBetAmount", 0),
            is_active=data.get("isActive", True),
            created_at=datetime.fromisoformat(created_at) if created_at else None,
        )

    @classmethod
    def new(cls, player_count: int, starting_balance: int) -> "Game":
        """Fresh game at hand 1, pre-flop, position 1 to act."""
        return cls(
            id=None,
            player_count=player_count,
            starting_balance=starting_balance,
            created_at=datetime.now(timezone.utc),
        )
