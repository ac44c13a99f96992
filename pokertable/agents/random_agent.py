"""
Simple Agent Implementations.

Baseline agents that pick among the legal actions: random, passive
(check/call) and aggressive (raise whenever possible). Useful for testing
the engine and as opponents for advisory seats.
"""

import random
from typing import Dict, List, Any, Optional

from pokertable.agents.base import BaseAgent


class RandomAgent(BaseAgent):
    """
    Picks a random legal action for whoever is to act.

    A single roll decides: below ``fold_probability`` it folds (never when a
    check is free), below ``fold_probability + raise_probability`` it raises
    to a uniform target in the legal range, otherwise it checks or calls.
    """

    def __init__(
        self,
        player_id: Optional[str] = None,
        name: Optional[str] = None,
        fold_probability: float = 0.1,
        raise_probability: float = 0.3,
        rng: Optional[random.Random] = None,
    ):
        """
        Args:
            player_id: Seat identifier
            name: Optional name
            fold_probability: Probability of folding (0-1)
            raise_probability: Probability of raising vs calling (0-1)
            rng: Random source, for reproducible play
        """
        super().__init__(player_id, name or f"Random-{player_id}")
        self.fold_probability = fold_probability
        self.raise_probability = raise_probability
        self.rng = rng or random.Random()

    def act(
        self,
        state,
        legal_actions: List[Dict[str, Any]]
    ) -> Dict[str, Any]:
        """Select a random legal action, biased by the configured probabilities."""
        action_types = [a["type"] for a in legal_actions]
        roll = self.rng.random()

        # Never fold for free
        if "FOLD" in action_types and "CHECK" not in action_types and roll < self.fold_probability:
            return {"action": "FOLD", "amount": 0}

        raise_action = next((a for a in legal_actions if a["type"] == "RAISE"), None)
        if raise_action and roll < self.fold_probability + self.raise_probability:
            min_amount = raise_action["min"]
            max_amount = raise_action["max"]
            amount = self.rng.randint(min_amount, max_amount) if max_amount > min_amount else min_amount
            return {"action": "RAISE", "amount": amount}

        if "CHECK" in action_types:
            return {"action": "CHECK", "amount": 0}

        call_action = next((a for a in legal_actions if a["type"] == "CALL"), None)
        if call_action:
            return {"action": "CALL", "amount": call_action["amount"]}

        return {"action": "FOLD", "amount": 0}


class CallAgent(BaseAgent):
    """An agent that always checks or calls."""

    def __init__(self, player_id: Optional[str] = None, name: Optional[str] = None):
        super().__init__(player_id, name or f"Caller-{player_id}")

    def act(
        self,
        state,
        legal_actions: List[Dict[str, Any]]
    ) -> Dict[str, Any]:
        action_types = [a["type"] for a in legal_actions]

        if "CHECK" in action_types:
            return {"action": "CHECK", "amount": 0}

        call_action = next((a for a in legal_actions if a["type"] == "CALL"), None)
        if call_action:
            return {"action": "CALL", "amount": call_action["amount"]}

        return {"action": "FOLD", "amount": 0}


class AggressiveAgent(BaseAgent):
    """An agent that raises whenever possible, otherwise checks or calls."""

    def __init__(
        self,
        player_id: Optional[str] = None,
        name: Optional[str] = None,
        raise_multiplier: float = 2.0
    ):
        """
        Args:
            player_id: Seat identifier
            name: Optional name
            raise_multiplier: Raise target as a multiple of the minimum raise
        """
        super().__init__(player_id, name or f"Aggro-{player_id}")
        self.raise_multiplier = raise_multiplier

    def act(
        self,
        state,
        legal_actions: List[Dict[str, Any]]
    ) -> Dict[str, Any]:
        for action in legal_actions:
            if action["type"] == "RAISE":
                amount = int(min(action["min"] * self.raise_multiplier, action["max"]))
                return {"action": "RAISE", "amount": max(amount, action["min"])}

        if any(a["type"] == "CHECK" for a in legal_actions):
            return {"action": "CHECK", "amount": 0}

        call_action = next((a for a in legal_actions if a["type"] == "CALL"), None)
        if call_action:
            return {"action": "CALL", "amount": call_action["amount"]}

        return {"action": "FOLD", "amount": 0}
