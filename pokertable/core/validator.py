"""
Action validation.

``validate`` decides whether a proposed action is legal for a participant in
the given state and, if not, why. It never mutates anything. Rules are
checked in a fixed order:

1. A participant with no chips may only fold (a folded participant cannot act).
2. Nothing is accepted while the betting round is complete (except at showdown).
3. Only the participant whose turn it is may act.
4. FOLD is always legal.
5. CHECK needs the participant's bet to already match the current bet.
6. CALL needs something to call. A call larger than the stack is an
   all-in call for less, which is legal.
7. RAISE needs a target of at least max(current_bet * 2, current_bet + min_raise),
   unless the target is the participant's whole stack (all-in), and the
   extra chips must be covered by the stack.
"""

from __future__ import annotations
from typing import List, Dict, Any, Optional, Tuple
from dataclasses import dataclass

from pokertable.core.player import Participant
from pokertable.core.rules import ActionType, GamePhase, BETTING_PHASES, calculate_min_raise
from pokertable.core.state import GameState
from pokertable.core.errors import InvalidAction


@dataclass(frozen=True)
class Validation:
    """Outcome of validating an action."""
    ok: bool
    reason: Optional[str] = None

    @classmethod
    def accept(cls) -> Validation:
        return cls(True)

    @classmethod
    def reject(cls, reason: str) -> Validation:
        return cls(False, reason)

    def raise_for_rejection(self) -> None:
        if not self.ok:
            raise InvalidAction(self.reason)

    def __bool__(self) -> bool:
        return self.ok


def normalize_action(
    action: ActionType,
    amount: Optional[int],
    participant: Participant,
    state: GameState,
) -> Tuple[ActionType, Optional[int]]:
    """
    Turn ALL_IN shorthand into the equivalent RAISE or CALL.

    Other actions are returned unchanged.
    """
    if action != ActionType.ALL_IN:
        return action, amount

    all_in_total = participant.stack + participant.current_bet
    if all_in_total > state.round.current_bet:
        return ActionType.RAISE, all_in_total
    return ActionType.CALL, None


def validate(
    action: ActionType,
    amount: Optional[int],
    participant: Participant,
    state: GameState,
) -> Validation:
    """
    Check a proposed action against the current state.

    Args:
        action: The action kind (ALL_IN must already be normalized)
        amount: Raise target (total round commitment), ignored otherwise
        participant: The acting participant
        state: Current game state

    Returns:
        Validation with ok=True, or ok=False and a human-readable reason
    """
    round_state = state.round

    # Rule 1
    if participant.folded or not participant.hole_cards:
        return Validation.reject(f"Player {participant.player_id} is not in the hand")
    if participant.stack <= 0 and action != ActionType.FOLD:
        return Validation.reject("Player has no chips remaining")

    # Rule 2
    if round_state.complete and state.phase != GamePhase.SHOWDOWN:
        return Validation.reject("Betting round is complete")
    if state.phase not in BETTING_PHASES:
        return Validation.reject("No betting round in progress")

    # Rule 3
    if state.active_player_id != participant.player_id:
        return Validation.reject(
            f"Not {participant.player_id}'s turn (waiting on {state.active_player_id})"
        )

    chips_to_call = round_state.current_bet - participant.current_bet

    if action == ActionType.FOLD:
        return Validation.accept()

    if action == ActionType.CHECK:
        if chips_to_call > 0:
            return Validation.reject(f"Cannot check, must call ${chips_to_call}")
        return Validation.accept()

    if action == ActionType.CALL:
        if chips_to_call <= 0:
            return Validation.reject("Nothing to call, use CHECK")
        return Validation.accept()

    if action == ActionType.RAISE:
        if amount is None or amount <= 0:
            return Validation.reject("Must specify raise amount")
        if amount <= round_state.current_bet:
            return Validation.reject(
                f"Raise must exceed the current bet of ${round_state.current_bet}, use CALL"
            )

        all_in_total = participant.stack + participant.current_bet
        min_raise_total = calculate_min_raise(round_state.current_bet, round_state.min_raise)
        if amount != all_in_total and amount < min_raise_total:
            return Validation.reject(
                f"Raise must be at least ${min_raise_total} "
                f"(current: ${round_state.current_bet}, min raise: ${round_state.min_raise})"
            )
        if amount - participant.current_bet > participant.stack:
            return Validation.reject(
                f"Not enough chips to raise to ${amount} (maximum ${all_in_total})"
            )
        return Validation.accept()

    return Validation.reject(f"Unknown action: {action}")


def get_legal_actions(state: GameState, participant: Optional[Participant] = None) -> List[Dict[str, Any]]:
    """
    List the legal actions for a participant (default: the one to act).

    Returns:
        Action dicts: {"type": "FOLD"}, {"type": "CALL", "amount": n},
        {"type": "RAISE", "min": a, "max": b}, ...
    """
    if participant is None:
        participant = state.active_player

    if participant is None or state.active_player_id != participant.player_id:
        return []
    if not validate(ActionType.FOLD, None, participant, state):
        return []

    actions: List[Dict[str, Any]] = [{"type": ActionType.FOLD.value}]
    if participant.stack <= 0:
        return actions

    round_state = state.round
    chips_to_call = max(0, round_state.current_bet - participant.current_bet)

    if chips_to_call == 0:
        actions.append({"type": ActionType.CHECK.value})
    else:
        actions.append({
            "type": ActionType.CALL.value,
            "amount": min(chips_to_call, participant.stack),
        })

    max_raise = participant.stack + participant.current_bet
    if max_raise > round_state.current_bet:
        min_raise_total = calculate_min_raise(round_state.current_bet, round_state.min_raise)
        actions.append({
            "type": ActionType.RAISE.value,
            "min": min(min_raise_total, max_raise),
            "max": max_raise,
        })
        actions.append({
            "type": ActionType.ALL_IN.value,
            "amount": max_raise,
        })

    return actions
