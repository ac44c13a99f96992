"""
Base Agent Interface for PokerTable.

An agent is an advisory capability: given a participant, a snapshot of the
game state and the action log, it proposes an action. Agents are callables
matching the engine's ``Decide`` signature:

    decide(participant, state, action_log) -> (ActionType, amount)

The engine never trusts the answer; it goes through the same validator as
any other proposal.

Usage:
    class MyAgent(BaseAgent):
        def act(self, state, legal_actions):
            return {"action": "CALL", "amount": 0}
"""

from abc import ABC, abstractmethod
from typing import Any, Awaitable, Callable, Dict, List, Optional, Tuple, Union

from pokertable.core.player import Participant
from pokertable.core.rules import ActionType
from pokertable.core.state import ActionRecord, GameState
from pokertable.core.validator import get_legal_actions


Decision = Tuple[ActionType, Optional[int]]

# Any total function of this shape can drive an advisory seat
Decide = Callable[
    [Participant, GameState, List[ActionRecord]],
    Union[Decision, Awaitable[Decision]],
]


class BaseAgent(ABC):
    """
    Abstract base class for poker agents.

    Subclasses implement ``act``, which picks from the legal actions; the
    base class turns that into the ``Decide`` call shape.

    Attributes:
        player_id: Identifier of the seat this agent plays (informational)
        name: Human-readable name
    """

    def __init__(self, player_id: Optional[str] = None, name: Optional[str] = None):
        self.player_id = player_id
        self.name = name or f"{self.__class__.__name__}-{player_id}"

    @abstractmethod
    def act(
        self,
        state: GameState,
        legal_actions: List[Dict[str, Any]],
    ) -> Dict[str, Any]:
        """
        Choose an action.

        Args:
            state: Snapshot of the game state
            legal_actions: Legal action dicts, each containing:
                - type: FOLD, CHECK, CALL, RAISE or ALL_IN
                - amount: Required amount (for CALL / ALL_IN)
                - min/max: Valid target range (for RAISE)

        Returns:
            {"action": "RAISE", "amount": 100} style dict
        """

    def decide(
        self,
        participant: Participant,
        state: GameState,
        action_log: List[ActionRecord],
    ) -> Decision:
        """Pick an action for ``participant`` (the ``Decide`` signature)."""
        legal_actions = get_legal_actions(state, state.get_player(participant.player_id))
        if not legal_actions:
            return ActionType.FOLD, None

        choice = self.act(state, legal_actions)
        action = ActionType(choice["action"])
        amount = choice.get("amount") if action == ActionType.RAISE else None
        return action, amount

    def __call__(
        self,
        participant: Participant,
        state: GameState,
        action_log: List[ActionRecord],
    ) -> Decision:
        return self.decide(participant, state, action_log)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.player_id}, {self.name})"


def always_fold(participant: Participant, state: GameState, action_log: List[ActionRecord]) -> Decision:
    """The simplest total advisory function."""
    return ActionType.FOLD, None
