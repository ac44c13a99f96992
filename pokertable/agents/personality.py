"""
Personality-driven agents.

A baseline decision is made from a rough hand-strength estimate, then bent
by the seat's Personality:

- aggressive: often turns calls into raises
- conservative: often turns raises into calls
- balanced: plays the baseline
- unpredictable: sometimes picks any legal action at random
- mathematical: calls only when hand strength beats the pot odds
"""

import random
from typing import Any, Dict, List, Optional

from pokertable.agents.base import BaseAgent
from pokertable.core.hand import HandCategory, evaluate
from pokertable.core.player import Participant, Personality
from pokertable.core.rules import GamePhase
from pokertable.core.state import GameState


CATEGORY_STRENGTH = {
    HandCategory.HIGH_CARD: 0.15,
    HandCategory.ONE_PAIR: 0.4,
    HandCategory.TWO_PAIR: 0.6,
    HandCategory.THREE_OF_A_KIND: 0.7,
    HandCategory.STRAIGHT: 0.8,
    HandCategory.FLUSH: 0.85,
    HandCategory.FULL_HOUSE: 0.9,
    HandCategory.FOUR_OF_A_KIND: 0.95,
    HandCategory.STRAIGHT_FLUSH: 0.98,
    HandCategory.ROYAL_FLUSH: 1.0,
}

RAISE_THRESHOLD = 0.7
CALL_THRESHOLD = 0.35


def hand_strength(participant: Participant, state: GameState) -> float:
    """
    Rough 0..1 strength of a participant's holding.

    Preflop looks at pairs, high cards, suitedness and connectedness;
    later streets use the made-hand category.
    """
    if len(participant.hole_cards) != 2:
        return 0.0

    if state.phase == GamePhase.PREFLOP or not state.community_cards:
        high, low = sorted((c.value for c in participant.hole_cards), reverse=True)
        if high == low:
            return min(1.0, 0.5 + high / 28)
        strength = (high + low) / 28
        if participant.hole_cards[0].suit == participant.hole_cards[1].suit:
            strength += 0.1
        if high - low == 1:
            strength += 0.05
        return min(1.0, strength)

    hand = evaluate(participant.hole_cards, state.community_cards)
    return CATEGORY_STRENGTH[hand.category]


def random_personality(rng: Optional[random.Random] = None) -> Personality:
    rng = rng or random.Random()
    return rng.choice(list(Personality))


class PersonalityAgent(BaseAgent):
    """
    Agent whose play is shaped by a Personality.

    Decisions are made for whoever is to act in the state it is shown.
    """

    def __init__(
        self,
        player_id: Optional[str] = None,
        personality: Personality = Personality.BALANCED,
        name: Optional[str] = None,
        rng: Optional[random.Random] = None,
    ):
        super().__init__(player_id, name or f"{personality.value.title()}-{player_id}")
        self.personality = Personality(personality)
        self.rng = rng or random.Random()

    def act(
        self,
        state: GameState,
        legal_actions: List[Dict[str, Any]],
    ) -> Dict[str, Any]:
        participant = state.active_player
        strength = hand_strength(participant, state) if participant else 0.0
        options = {a["type"]: a for a in legal_actions}

        if self.personality == Personality.MATHEMATICAL:
            return self._pot_odds_decision(state, options, strength)

        decision = self._baseline(options, strength)
        roll = self.rng.random()

        if self.personality == Personality.AGGRESSIVE:
            if decision["action"] == "CALL" and "RAISE" in options and roll > 0.6:
                return self._raise_to(options["RAISE"], state.round.current_bet * 3)
        elif self.personality == Personality.CONSERVATIVE:
            if decision["action"] == "RAISE" and roll > 0.7:
                return self._passive(options)
        elif self.personality == Personality.UNPREDICTABLE:
            if roll > 0.8:
                choice = self.rng.choice(legal_actions)
                if choice["type"] == "RAISE":
                    return {"action": "RAISE", "amount": self.rng.randint(choice["min"], choice["max"])}
                return {"action": choice["type"], "amount": choice.get("amount", 0)}

        return decision

    def _baseline(self, options: Dict[str, Dict[str, Any]], strength: float) -> Dict[str, Any]:
        if strength >= RAISE_THRESHOLD and "RAISE" in options:
            return self._raise_to(options["RAISE"], options["RAISE"]["min"])
        if strength >= CALL_THRESHOLD or "CHECK" in options:
            return self._passive(options)
        return {"action": "FOLD", "amount": 0}

    def _pot_odds_decision(
        self,
        state: GameState,
        options: Dict[str, Dict[str, Any]],
        strength: float,
    ) -> Dict[str, Any]:
        if "CHECK" in options:
            if strength >= RAISE_THRESHOLD and "RAISE" in options:
                return self._raise_to(options["RAISE"], options["RAISE"]["min"])
            return {"action": "CHECK", "amount": 0}

        call = options.get("CALL")
        if call is None:
            return {"action": "FOLD", "amount": 0}

        to_call = call["amount"]
        pot_odds = to_call / (state.pot + to_call)
        if strength >= pot_odds:
            return {"action": "CALL", "amount": to_call}
        return {"action": "FOLD", "amount": 0}

    @staticmethod
    def _passive(options: Dict[str, Dict[str, Any]]) -> Dict[str, Any]:
        if "CHECK" in options:
            return {"action": "CHECK", "amount": 0}
        if "CALL" in options:
            return {"action": "CALL", "amount": options["CALL"]["amount"]}
        return {"action": "FOLD", "amount": 0}

    @staticmethod
    def _raise_to(raise_option: Dict[str, Any], target: int) -> Dict[str, Any]:
        amount = max(raise_option["min"], min(target, raise_option["max"]))
        return {"action": "RAISE", "amount": amount}


def agent_for_personality(
    personality: Optional[Personality],
    player_id: Optional[str] = None,
    rng: Optional[random.Random] = None,
) -> PersonalityAgent:
    """Build the agent for a seat; seats without a personality play balanced."""
    return PersonalityAgent(
        player_id=player_id,
        personality=personality or Personality.BALANCED,
        rng=rng,
    )
