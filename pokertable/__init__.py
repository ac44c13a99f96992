"""
PokerTable - Texas Hold'em Rules Engine

A single-table Texas Hold'em engine with:
- Pure Python game core (cards, hand evaluation, betting, phases)
- An advisory boundary for non-human seats, with built-in agents
- A FastAPI HTTP surface for rendering clients

Usage:
    from pokertable.core import TexasHoldemGame, ActionType, GameConfig
    from pokertable.agents import consult_advisor, agent_for_personality
"""

__version__ = "0.2.0"

from pokertable.core.card import Card, Deck
from pokertable.core.player import Participant
from pokertable.core.game import TexasHoldemGame
from pokertable.core.hand import HandRank, evaluate, compare
from pokertable.core.rules import ActionType, GameConfig, GamePhase

__all__ = [
    "Card",
    "Deck",
    "Participant",
    "TexasHoldemGame",
    "HandRank",
    "evaluate",
    "compare",
    "ActionType",
    "GameConfig",
    "GamePhase",
    "__version__",
]
