"""Player model."""
from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional


class PlayerStatus(str, Enum):
    """Seat status within the current hand."""
    ACTIVE = "active"
    FOLDED = "folded"
    OUT = "out"


@dataclass
class Player:
    """A seat at the table."""

    id: Optional[int]
    game_id: Optional[int]
    name: str
    position: int
    balance: int = 0
    current_bet: int = 0
    status: PlayerStatus = PlayerStatus.ACTIVE

    def bet(self, amount: int) -> int:
        """Move chips from the balance into this hand's commitment.

        Args:
            amount: Chips to commit. Callers validate it against the balance.

        Returns:
            The amount committed.
        """
        self.balance -= amount
        self.current_bet += amount
        return amount

    def forfeit(self, amount: int) -> int:
        """Lose chips to the pot without raising this hand's commitment."""
        self.balance -= amount
        return amount

    def fold(self) -> None:
        """Fold the hand."""
        self.status = PlayerStatus.FOLDED

    def win_pot(self, amount: int) -> None:
        """Win chips from the pot.

        Args:
            amount: Amount won.
        """
        self.balance += amount

    def knock_out(self) -> int:
        """Surrender the whole balance and leave the game.

        Returns:
            The chips surrendered.
        """
        surrendered = self.balance
        self.balance = 0
        self.current_bet = 0
        self.status = PlayerStatus.OUT
        return surrendered

    def reset_for_new_hand(self) -> None:
        """Clear the hand commitment; players with chips are dealt back in."""
        self.current_bet = 0
        self.status = PlayerStatus.ACTIVE if self.balance > 0 else PlayerStatus.OUT

    def copy(self) -> "Player":
        """Return a detached copy for staging changes."""
        return replace(self)

    @property
    def is_active(self) -> bool:
        """Check if player can still act in the current hand."""
        return self.status == PlayerStatus.ACTIVE

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "id": self.id,
            "gameId": self.game_id,
            "name": self.name,
            "position": self.position,
            "balance": self.balance,
            "currentBet": self.current_bet,
            "status": self.status.value,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Player":
        """Create from dictionary."""
        return cls(
            id=data["id"],
            game_id=data["gameId"],
            name=data["name"],
            position=data["position"],
            balance=data["balance"],
            current_bet=data.get("currentBet", 0),
            status=PlayerStatus(data.get("status", PlayerStatus.ACTIVE.value)),
        )
