"""
Betting round state machine.

A round is either awaiting an action or complete. These functions work on a
``GameState`` the caller owns (the engine passes a working copy) and assume
the action has already passed ``validate``.

Turn order goes clockwise (seat + 1 modulo the table size), skipping seats
that are no longer contesting the pot and seats that are all-in. Preflop
the seat after the big blind acts first; on later streets the seat after
the dealer does.
"""

from __future__ import annotations
from typing import Callable, List, Optional
import logging

from pokertable.core.player import Participant
from pokertable.core.rules import ActionType, GamePhase
from pokertable.core.state import ActionRecord, GameState, RoundState


logger = logging.getLogger(__name__)


def seat_after(state: GameState, index: int, predicate: Callable[[Participant], bool]) -> Optional[int]:
    """First seat clockwise after ``index`` (wrapping back to it last) matching predicate."""
    n = state.num_players
    for step in range(1, n + 1):
        seat = (index + step) % n
        if predicate(state.players[seat]):
            return seat
    return None


def seat_before(state: GameState, index: int, predicate: Callable[[Participant], bool]) -> Optional[int]:
    """First seat counter-clockwise before ``index`` (wrapping back to it last) matching predicate."""
    n = state.num_players
    for step in range(1, n + 1):
        seat = (index - step) % n
        if predicate(state.players[seat]):
            return seat
    return None


def _can_act(player: Participant) -> bool:
    return player.can_act


def start_betting_round(state: GameState) -> None:
    """
    Reset the round for the current street and pick the first to act.

    Preflop keeps the posted blinds as round commitments; later streets
    start from zero.
    """
    if state.phase == GamePhase.PREFLOP:
        for player in state.players:
            player.has_acted = False
        current_bet = max((p.current_bet for p in state.players), default=0)
        anchor = state.big_blind_position
    else:
        for player in state.players:
            player.reset_for_new_round()
        current_bet = 0
        anchor = state.dealer_position

    state.round = RoundState(
        current_bet=current_bet,
        min_raise=state.big_blind,
        contesting=[p.player_id for p in state.contesting_players],
    )

    first = seat_after(state, anchor, _can_act)
    if first is not None:
        # The last seat to act closes the round: the one just before the opener
        closer = seat_before(state, first, _can_act)
        state.round.closing_id = state.players[closer].player_id
        state.active_player_id = state.players[first].player_id
    else:
        state.active_player_id = None

    if is_round_complete(state):
        _complete_round(state)


def pending_players(state: GameState) -> List[Participant]:
    """Participants who still owe an action this round."""
    round_state = state.round
    actionable = [p for p in state.contesting_players if p.can_act]
    return [
        p for p in actionable
        if p.current_bet < round_state.current_bet
        or (not p.has_acted and len(actionable) > 1)
    ]


def is_round_complete(state: GameState) -> bool:
    """One contester left, or nobody able to act still owes an action."""
    if len(state.round.contesting) <= 1:
        return True
    return not pending_players(state)


def _complete_round(state: GameState) -> None:
    state.round.complete = True
    state.active_player_id = None


def apply_action(
    state: GameState,
    player: Participant,
    action: ActionType,
    amount: Optional[int] = None,
) -> ActionRecord:
    """
    Apply a validated action and move the turn on.

    Args:
        state: Working state, mutated in place
        player: The acting participant (must belong to ``state``)
        action: FOLD, CHECK, CALL or RAISE
        amount: Raise target (total round commitment) for RAISE

    Returns:
        The ActionRecord appended to the action log
    """
    round_state = state.round
    was_closer = round_state.closing_id == player.player_id
    chips_moved = 0

    if action == ActionType.FOLD:
        player.fold()
        round_state.contesting.remove(player.player_id)
        if was_closer:
            closer = seat_before(state, player.seat, _can_act)
            round_state.closing_id = state.players[closer].player_id if closer is not None else None

    elif action == ActionType.CHECK:
        player.has_acted = True
        player.last_action = "CHECK"

    elif action == ActionType.CALL:
        chips_moved = player.bet(round_state.current_bet - player.current_bet)
        player.has_acted = True
        player.last_action = f"CALL ${chips_moved}"

    elif action == ActionType.RAISE:
        previous_bet = round_state.current_bet
        chips_moved = player.bet(amount - player.current_bet)
        round_state.current_bet = player.current_bet
        round_state.min_raise = max(round_state.current_bet - previous_bet, round_state.min_raise)
        round_state.last_raiser_id = player.player_id

        # Everyone else has to respond to the raise
        for other in state.contesting_players:
            if other is not player:
                other.has_acted = False
        player.has_acted = True

        closer = seat_before(state, player.seat, lambda p: p.can_act and p is not player)
        round_state.closing_id = state.players[closer].player_id if closer is not None else None

        if player.stack == 0:
            player.last_action = f"ALL-IN ${player.current_bet}"
        else:
            player.last_action = f"RAISE ${player.current_bet}"

    else:
        raise ValueError(f"Cannot apply action {action}")

    state.pot += chips_moved

    record = ActionRecord(
        player_id=player.player_id,
        action_type=action,
        amount=player.current_bet,
        chips_moved=chips_moved,
        is_all_in=player.is_all_in,
        phase=state.phase,
    )
    state.action_log.append(record)
    logger.debug(f"{player.player_id} {action.value} (moved {chips_moved}, pot {state.pot})")

    closed_by_closer = was_closer and action in (ActionType.CHECK, ActionType.CALL)
    if closed_by_closer or is_round_complete(state):
        _complete_round(state)
    else:
        nxt = seat_after(state, player.seat, _can_act)
        state.active_player_id = state.players[nxt].player_id if nxt is not None else None

    return record
