"""
PokerTable Core - Pure Python Texas Hold'em Rules Engine

This module contains all game logic without any network dependencies.
"""

from pokertable.core.card import Card, Deck, Rank, Suit, new_deck, parse_cards
from pokertable.core.player import Participant, Personality
from pokertable.core.hand import HandRank, HandCategory, Comparison, evaluate, evaluate_hand, compare
from pokertable.core.rules import GamePhase, ActionType, GameConfig, OddChipPolicy
from pokertable.core.state import GameState, RoundState, ActionRecord, Payout
from pokertable.core.validator import Validation, validate, get_legal_actions
from pokertable.core.game import TexasHoldemGame, ActionResult, DecisionRequest
from pokertable.core.errors import (
    PokerError, InvalidAction, DeckExhausted, AdvisoryFailure, StateInvariantViolation,
)

__all__ = [
    "Card",
    "Deck",
    "Rank",
    "Suit",
    "new_deck",
    "parse_cards",
    "Participant",
    "Personality",
    "HandRank",
    "HandCategory",
    "Comparison",
    "evaluate",
    "evaluate_hand",
    "compare",
    "GamePhase",
    "ActionType",
    "GameConfig",
    "OddChipPolicy",
    "GameState",
    "RoundState",
    "ActionRecord",
    "Payout",
    "Validation",
    "validate",
    "get_legal_actions",
    "TexasHoldemGame",
    "ActionResult",
    "DecisionRequest",
    "PokerError",
    "InvalidAction",
    "DeckExhausted",
    "AdvisoryFailure",
    "StateInvariantViolation",
]
