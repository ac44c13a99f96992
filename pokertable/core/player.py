"""
Participant state for Texas Hold'em.

Manages per-seat state including:
- Stack (chip count)
- Hole cards (cleared when the participant folds)
- Bet committed in the current round and across the whole hand
- Whether the participant has acted since the last raise
"""

from __future__ import annotations
from typing import List, Optional, Dict, Any
from dataclasses import dataclass, field
from enum import Enum


class Personality(Enum):
    """
    Behavioural label for advisory-controlled seats.

    Only the advisory capability reads this; the engine treats every
    participant the same.
    """
    AGGRESSIVE = "aggressive"
    CONSERVATIVE = "conservative"
    BALANCED = "balanced"
    UNPREDICTABLE = "unpredictable"
    MATHEMATICAL = "mathematical"


@dataclass
class Participant:
    """
    A seat at the table.

    Attributes:
        player_id: Unique identifier for the participant
        stack: Current chip count (never negative)
        seat: Seat position at the table (0-indexed)
        hole_cards: Private cards, 0 or exactly 2
        current_bet: Amount committed in the current betting round
        total_bet: Amount committed across the current hand
        folded: Has folded this hand
        has_acted: Has acted since the last raise in this round
        is_advisory: Decisions come from the advisory capability
        personality: Label handed to the advisory capability
    """
    player_id: str
    stack: int
    seat: int = 0
    hole_cards: List = field(default_factory=list)
    current_bet: int = 0
    total_bet: int = 0
    folded: bool = False
    has_acted: bool = False
    is_advisory: bool = False
    personality: Optional[Personality] = None
    last_action: Optional[str] = None

    def reset_for_new_hand(self) -> None:
        """Reset per-hand state."""
        self.hole_cards = []
        self.current_bet = 0
        self.total_bet = 0
        self.folded = False
        self.has_acted = False
        self.last_action = None

    def reset_for_new_round(self) -> None:
        """Reset per-round state (flop, turn, river)."""
        self.current_bet = 0
        self.has_acted = False

    def deal_cards(self, cards: List) -> None:
        """Deal hole cards to the participant."""
        self.hole_cards = list(cards)

    def bet(self, amount: int) -> int:
        """
        Move chips from the stack into the current bet.

        Args:
            amount: Amount to commit

        Returns:
            Actual amount committed (less than asked when going all-in)
        """
        if amount <= 0:
            return 0

        actual_amount = min(amount, self.stack)

        self.stack -= actual_amount
        self.current_bet += actual_amount
        self.total_bet += actual_amount

        return actual_amount

    def fold(self) -> None:
        """Fold the hand, giving up the hole cards."""
        self.folded = True
        self.hole_cards = []
        self.has_acted = True
        self.last_action = "FOLD"

    @property
    def in_hand(self) -> bool:
        """Still contesting the pot (dealt in and not folded)."""
        return not self.folded and len(self.hole_cards) > 0

    @property
    def is_all_in(self) -> bool:
        return self.in_hand and self.stack == 0

    @property
    def can_act(self) -> bool:
        """Contesting and has chips left to wager."""
        return self.in_hand and self.stack > 0

    def to_dict(self, hide_cards: bool = True) -> Dict[str, Any]:
        """
        Convert to dictionary for JSON serialization.

        Args:
            hide_cards: If True, don't include hole cards
        """
        result = {
            "id": self.player_id,
            "seat": self.seat,
            "stack": self.stack,
            "bet": self.current_bet,
            "total_bet": self.total_bet,
            "folded": self.folded,
            "all_in": self.is_all_in,
            "in_hand": self.in_hand,
            "is_advisory": self.is_advisory,
            "last_action": self.last_action,
        }

        if not hide_cards and self.hole_cards:
            result["cards"] = [card.to_dict() for card in self.hole_cards]

        return result

    def __repr__(self) -> str:
        return (
            f"Participant({self.player_id}, stack={self.stack}, "
            f"bet={self.current_bet}, folded={self.folded})"
        )

    def __str__(self) -> str:
        cards_str = " ".join(str(c) for c in self.hole_cards) if self.hole_cards else "??"
        return f"Participant {self.player_id} [{cards_str}] ${self.stack}"
