"""
PokerTable Agents - Advisory decision makers for non-human seats
"""

from pokertable.agents.base import BaseAgent, Decide, Decision, always_fold
from pokertable.agents.random_agent import RandomAgent, CallAgent, AggressiveAgent
from pokertable.agents.personality import (
    PersonalityAgent, agent_for_personality, hand_strength, random_personality,
)
from pokertable.agents.advisor import consult_advisor, parse_decision

__all__ = [
    "BaseAgent",
    "Decide",
    "Decision",
    "always_fold",
    "RandomAgent",
    "CallAgent",
    "AggressiveAgent",
    "PersonalityAgent",
    "agent_for_personality",
    "hand_strength",
    "random_personality",
    "consult_advisor",
    "parse_decision",
]
