"""
Game state values.

``GameState`` is the single owned value describing a table: seats, phase,
pot, board, deck and the current betting round. The engine never mutates a
committed state in place; each operation works on a deep copy and swaps it
in once the operation has fully succeeded.
"""

from __future__ import annotations
import copy
from typing import List, Optional, Dict, Any
from dataclasses import dataclass, field

from pokertable.core.card import Card, Deck
from pokertable.core.player import Participant
from pokertable.core.rules import ActionType, GamePhase, DEFAULT_SMALL_BLIND, DEFAULT_BIG_BLIND


@dataclass
class RoundState:
    """
    Betting state of the current street.

    ``complete`` is true once one contester is left, every contester able to
    act has acted and matched ``current_bet``, or the closing participant has
    just checked or called.
    """
    current_bet: int = 0
    min_raise: int = DEFAULT_BIG_BLIND  # Minimum raise increment
    last_raiser_id: Optional[str] = None
    contesting: List[str] = field(default_factory=list)
    closing_id: Optional[str] = None
    complete: bool = False


@dataclass
class ActionRecord:
    """One entry of the chronological action log."""
    player_id: str
    action_type: ActionType
    amount: int       # Player's round commitment after the action
    chips_moved: int  # Chips moved from stack to pot by this action
    is_all_in: bool
    phase: GamePhase

    def to_dict(self) -> Dict[str, Any]:
        return {
            "player_id": self.player_id,
            "action": self.action_type.value,
            "amount": self.amount,
            "chips_moved": self.chips_moved,
            "all_in": self.is_all_in,
            "phase": self.phase.name,
        }


@dataclass
class Payout:
    """Chips awarded to one participant at the end of a hand."""
    player_id: str
    amount: int
    hand: Optional[str] = None         # Category label, None when won by fold
    description: Optional[str] = None
    cards: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "player_id": self.player_id,
            "amount": self.amount,
            "hand": self.hand,
            "description": self.description,
            "cards": list(self.cards),
        }


@dataclass
class GameState:
    """Complete state of one table."""
    players: List[Participant] = field(default_factory=list)
    phase: GamePhase = GamePhase.SETUP
    active_player_id: Optional[str] = None
    pot: int = 0
    community_cards: List[Card] = field(default_factory=list)
    deck: Deck = field(default_factory=lambda: Deck(shuffle=False))
    small_blind: int = DEFAULT_SMALL_BLIND
    big_blind: int = DEFAULT_BIG_BLIND
    dealer_position: int = -1
    small_blind_position: int = -1
    big_blind_position: int = -1
    hand_number: int = 0
    round: RoundState = field(default_factory=RoundState)
    action_log: List[ActionRecord] = field(default_factory=list)
    hand_history: List[Dict[str, Any]] = field(default_factory=list)
    decision_in_flight: Optional[str] = None
    winners: List[Payout] = field(default_factory=list)
    rounding_loss: int = 0
    starting_chips: int = 0

    @property
    def num_players(self) -> int:
        return len(self.players)

    @property
    def contesting_players(self) -> List[Participant]:
        """Participants still eligible to win the pot, in seat order."""
        return [p for p in self.players if p.in_hand]

    @property
    def active_player(self) -> Optional[Participant]:
        if self.active_player_id is None:
            return None
        return self.get_player(self.active_player_id)

    @property
    def is_hand_running(self) -> bool:
        return self.phase not in (GamePhase.SETUP, GamePhase.SHOWDOWN)

    @property
    def total_chips(self) -> int:
        """Chips on the table: stacks plus the pot."""
        return sum(p.stack for p in self.players) + self.pot

    def get_player(self, player_id: str) -> Optional[Participant]:
        for player in self.players:
            if player.player_id == player_id:
                return player
        return None

    def copy(self) -> GameState:
        """Deep copy, used both for atomic updates and read-only snapshots."""
        return copy.deepcopy(self)

    def to_dict(self, for_player_id: Optional[str] = None, reveal_all: bool = False) -> Dict[str, Any]:
        """
        Serializable view of the state.

        Args:
            for_player_id: Include this participant's hole cards
            reveal_all: Include everyone's hole cards (showdown display)
        """
        return {
            "phase": self.phase.name,
            "hand_number": self.hand_number,
            "pot": self.pot,
            "board": [c.to_dict() for c in self.community_cards],
            "current_bet": self.round.current_bet,
            "min_raise": self.round.min_raise,
            "last_raiser": self.round.last_raiser_id,
            "round_complete": self.round.complete,
            "contesting": list(self.round.contesting),
            "dealer_position": self.dealer_position,
            "small_blind_position": self.small_blind_position,
            "big_blind_position": self.big_blind_position,
            "small_blind": self.small_blind,
            "big_blind": self.big_blind,
            "current_player": self.active_player_id,
            "decision_in_flight": self.decision_in_flight,
            "players": [
                p.to_dict(hide_cards=not (reveal_all or p.player_id == for_player_id))
                for p in self.players
            ],
            "action_log": [a.to_dict() for a in self.action_log],
            "winners": [w.to_dict() for w in self.winners],
            "rounding_loss": self.rounding_loss,
            "deck_remaining": self.deck.remaining,
        }
