"""Player actions and the append-only action log."""
from dataclasses import dataclass, replace
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Optional

from holdem_bets.game.game import Round


class ActionType(str, Enum):
    """Actions a player may submit on their turn."""
    BET = "bet"
    CALL = "call"
    RAISE = "raise"
    FOLD = "fold"

    @property
    def requires_amount(self) -> bool:
        """Whether the request must carry an amount."""
        return self in (ActionType.BET, ActionType.RAISE)


class LogActionType(str, Enum):
    """Entries that can appear in the action log."""
    BET = "bet"
    CALL = "call"
    RAISE = "raise"
    FOLD = "fold"
    WON = "won"
    GAME_WINNER = "game_winner"

    @classmethod
    def for_action(cls, action: ActionType) -> "LogActionType":
        """Log entry type for a submitted player action."""
        return cls(action.value)


@dataclass(frozen=True)
class ActionRecord:
    """Immutable audit entry.

    ``amount`` is the number of chips that actually moved: the increment
    for a raise, the difference paid for a call, and None for a fold that
    forfeits nothing. ``id`` and ``timestamp`` are assigned by the store
    when the record is appended.
    """

    game_id: int
    hand_number: int
    round: Round
    player_id: int
    player_name: str
    action: LogActionType
    amount: Optional[int] = None
    id: Optional[int] = None
    timestamp: Optional[datetime] = None

    def stamped(self, action_id: int, timestamp: datetime) -> "ActionRecord":
        """Copy of this record carrying its store-assigned id and time."""
        return replace(self, id=action_id, timestamp=timestamp)

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "gameId": self.game_id,
            "handNumber": self.hand_number,
            "round": self.round.value,
            "playerId": self.player_id,
            "playerName": self.player_name,
            "action": self.action.value,
            "amount": self.amount,
            "timestamp": self.timestamp.isoformat() if self.timestamp else None,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ActionRecord":
        """Restore from dictionary."""
        timestamp = data.get("timestamp")
        return cls(
            id=data.get("id"),
            game_id=data["gameId"],
            hand_number=data["handNumber"],
            round=Round(data["round"]),
            player_id=data["playerId"],
            player_name=data["playerName"],
            action=LogActionType(data["action"]),
            amount=data.get("amount"),
            timestamp=datetime.fromisoformat(timestamp) if timestamp else None,
        )


def next_timestamp(previous: Optional[datetime]) -> datetime:
    """Current UTC time, bumped past ``previous`` so log order is strict."""
    now = datetime.now(timezone.utc)
    if previous is not None and now <= previous:
        return previous + timedelta(microseconds=1)
    return now
