"""
Texas Hold'em Game Engine - Phase Controller.

This module sequences a hand through its phases:

    setup -> preflop -> flop -> turn -> river -> showdown

It handles:
- Seating, dealer button rotation and blind posting (heads-up rules included)
- Routing every proposed action through the validator and the betting
  round state machine
- Dealing community cards as betting rounds complete
- Showdown evaluation, side pots and split-pot odd chips
- The advisory decision boundary for non-human seats

Every operation works on a deep copy of the committed ``GameState`` and only
swaps it in once the whole operation succeeded, so a rejected or failed
action never leaves a half-applied state behind.
"""

from __future__ import annotations
from typing import List, Dict, Optional, Any, Iterable, Mapping, Sequence, Union
from dataclasses import dataclass, field
import logging
import random

from pokertable.core.card import Deck
from pokertable.core.player import Participant, Personality
from pokertable.core.hand import HandRank, evaluate, compare, Comparison, get_hand_description
from pokertable.core.state import GameState, ActionRecord, Payout
from pokertable.core.betting import start_betting_round, apply_action, seat_after
from pokertable.core.validator import validate, normalize_action, get_legal_actions
from pokertable.core.errors import (
    InvalidAction, AdvisoryFailure, PokerError, DeckExhausted, StateInvariantViolation,
)
from pokertable.core.rules import (
    GamePhase, ActionType, GameConfig, OddChipPolicy,
    BETTING_PHASES, NEXT_PHASE, STREET_CARDS, HOLE_CARDS, TOTAL_COMMUNITY_CARDS,
    MIN_PLAYERS, MAX_PLAYERS, get_blind_positions, validate_blinds,
)


logger = logging.getLogger(__name__)


@dataclass
class Pot:
    """A main pot or side pot."""
    amount: int = 0
    eligible_players: List[str] = field(default_factory=list)


@dataclass
class ActionResult:
    """Result of a proposed action."""
    success: bool
    message: str
    action_type: Optional[ActionType] = None
    amount: int = 0
    state: Optional[GameState] = None

    def unwrap(self) -> GameState:
        """Return the resulting state, or raise InvalidAction with the rejection reason."""
        if not self.success:
            raise InvalidAction(self.message)
        return self.state


@dataclass
class DecisionRequest:
    """
    An outstanding request for an advisory decision.

    Carries read-only copies of what the advisory capability may look at.
    """
    player_id: str
    hand_number: int
    participant: Participant
    state: GameState
    action_log: List[ActionRecord]


class TexasHoldemGame:
    """
    Texas Hold'em game engine implementing a state machine.

    Usage:
        game = TexasHoldemGame(GameConfig(small_blind=1, big_blind=2))
        game.start_hand(["alice", "bob", "carol"], [200, 200, 200])

        while game.is_hand_running():
            state = game.snapshot()
            result = game.propose_action(state.active_player_id, ActionType.CALL)

        winners = game.get_winners()
    """

    def __init__(self, config: Optional[GameConfig] = None, rng: Optional[random.Random] = None):
        """
        Initialize a table with no one seated.

        Args:
            config: Table configuration (blinds, odd-chip policy, ...)
            rng: Random source for shuffling (defaults to one seeded from config.seed)
        """
        self.config = config or GameConfig()
        self._rng = rng if rng is not None else random.Random(self.config.seed)
        self._state = GameState(
            small_blind=self.config.small_blind,
            big_blind=self.config.big_blind,
        )

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    @property
    def state(self) -> GameState:
        """The committed state. Treat as read-only; use snapshot() to keep a copy."""
        return self._state

    @property
    def phase(self) -> GamePhase:
        return self._state.phase

    @property
    def players(self) -> List[Participant]:
        return self._state.players

    @property
    def pot_total(self) -> int:
        return self._state.pot

    def snapshot(self) -> GameState:
        """Independent copy of the current state for rendering or telemetry."""
        return self._state.copy()

    def get_state(self, for_player_id: Optional[str] = None, reveal_all: bool = False) -> Dict[str, Any]:
        """Serializable state, with private cards for ``for_player_id`` only."""
        state = self._state.to_dict(for_player_id=for_player_id, reveal_all=reveal_all)
        if for_player_id is not None:
            player = self._state.get_player(for_player_id)
            state["legal_actions"] = get_legal_actions(self._state, player) if player else []
        return state

    def get_legal_actions(self, player_id: Optional[str] = None) -> List[Dict[str, Any]]:
        player = self._state.get_player(player_id) if player_id else None
        return get_legal_actions(self._state, player)

    def is_hand_running(self) -> bool:
        return self._state.is_hand_running

    def get_winners(self) -> List[Payout]:
        """Payouts of the last finished hand."""
        if self._state.phase != GamePhase.SHOWDOWN:
            return []
        return list(self._state.winners)

    # ------------------------------------------------------------------
    # Hand setup
    # ------------------------------------------------------------------

    def start_hand(
        self,
        roster: Optional[Sequence[str]] = None,
        stacks: Optional[Union[Sequence[int], Mapping[str, int]]] = None,
        small_blind: Optional[int] = None,
        big_blind: Optional[int] = None,
        advisory: Optional[Union[Iterable[str], Mapping[str, Optional[Personality]]]] = None,
        deck: Optional[Deck] = None,
    ) -> GameState:
        """
        Start a new hand.

        Passing a roster (re)seats the table; without one the current seats
        and stacks carry over and the button moves on.

        Args:
            roster: Participant ids in seat order
            stacks: Starting stacks, by seat or by id (defaults to the buy-in)
            small_blind: Small blind for this and later hands
            big_blind: Big blind for this and later hands
            advisory: Ids of advisory-controlled seats, optionally mapped to a Personality
            deck: A prepared deck (testing); a fresh shuffled deck otherwise

        Returns:
            Snapshot of the state after blinds and hole cards

        Raises:
            ValueError: On an invalid roster, stacks or blinds
            InvalidAction: If a hand is already running or a decision is in flight
        """
        if self._state.is_hand_running:
            raise InvalidAction("A hand is already in progress")
        if self._state.decision_in_flight is not None:
            raise InvalidAction("An advisory decision is in flight")

        working = self._state.copy()

        if roster is not None:
            working.players = self._seat_players(roster, stacks, advisory)
            working.dealer_position = -1
        elif not working.players:
            raise ValueError("No participants seated; pass a roster")
        elif stacks is not None:
            raise ValueError("Stacks can only be set together with a roster")

        sb = small_blind if small_blind is not None else working.small_blind
        bb = big_blind if big_blind is not None else working.big_blind
        validate_blinds(sb, bb)
        working.small_blind, working.big_blind = sb, bb

        funded = [p for p in working.players if p.stack > 0]
        if len(funded) < MIN_PLAYERS:
            logger.warning("Cannot start hand: not enough players with chips")
            raise ValueError("Need at least 2 players with chips")

        working.hand_number += 1
        working.phase = GamePhase.SETUP
        working.deck = deck if deck is not None else Deck(rng=self._rng)
        working.community_cards = []
        working.pot = 0
        working.winners = []
        working.rounding_loss = 0
        working.action_log = []
        working.hand_history = []
        working.active_player_id = None
        for player in working.players:
            player.reset_for_new_hand()
        working.starting_chips = sum(p.stack for p in working.players)

        logger.info(f"Starting hand #{working.hand_number}")

        self._move_dealer_button(working)
        self._post_blinds(working)
        self._deal_hole_cards(working)

        working.phase = GamePhase.PREFLOP
        start_betting_round(working)

        self._log_event(working, "HAND_START", {
            "hand_number": working.hand_number,
            "dealer": working.dealer_position,
            "small_blind": working.small_blind_position,
            "big_blind": working.big_blind_position,
        })

        if self.config.auto_advance:
            self._run_streets(working)

        self._commit(working)
        return self.snapshot()

    def _seat_players(
        self,
        roster: Sequence[str],
        stacks: Optional[Union[Sequence[int], Mapping[str, int]]],
        advisory: Optional[Union[Iterable[str], Mapping[str, Optional[Personality]]]],
    ) -> List[Participant]:
        roster = list(roster)
        if not MIN_PLAYERS <= len(roster) <= MAX_PLAYERS:
            raise ValueError(f"Number of players must be {MIN_PLAYERS}-{MAX_PLAYERS}")
        if len(set(roster)) != len(roster):
            raise ValueError("Participant ids must be unique")

        if stacks is None:
            stack_list = [self.config.buy_in] * len(roster)
        elif isinstance(stacks, Mapping):
            stack_list = [stacks.get(pid, self.config.buy_in) for pid in roster]
        else:
            stack_list = list(stacks)
            if len(stack_list) != len(roster):
                raise ValueError("Need one stack per participant")
        if any(not isinstance(s, int) or s < 0 for s in stack_list):
            raise ValueError("Stacks must be non-negative integers")

        if advisory is None:
            advisory_map: Dict[str, Optional[Personality]] = {}
        elif isinstance(advisory, Mapping):
            advisory_map = {
                pid: Personality(p) if p is not None else None
                for pid, p in advisory.items()
            }
        else:
            advisory_map = {pid: None for pid in advisory}
        unknown = set(advisory_map) - set(roster)
        if unknown:
            raise ValueError(f"Advisory ids not in roster: {sorted(unknown)}")

        return [
            Participant(
                player_id=pid,
                stack=stack,
                seat=seat,
                is_advisory=pid in advisory_map,
                personality=advisory_map.get(pid),
            )
            for seat, (pid, stack) in enumerate(zip(roster, stack_list))
        ]

    def _move_dealer_button(self, state: GameState) -> None:
        """Move the dealer button to the next player with chips and place the blinds."""
        # dealer_position is -1 right after seating, so the button starts on the first funded seat
        seat = seat_after(state, state.dealer_position % state.num_players, lambda p: p.stack > 0)
        state.dealer_position = seat

        active_indices = [i for i, p in enumerate(state.players) if p.stack > 0]
        sb, bb = get_blind_positions(len(active_indices), active_indices.index(seat))
        state.small_blind_position = active_indices[sb]
        state.big_blind_position = active_indices[bb]

    def _post_blinds(self, state: GameState) -> None:
        """Post small and big blinds; short stacks post what they have."""
        sb_player = state.players[state.small_blind_position]
        bb_player = state.players[state.big_blind_position]

        sb_amount = sb_player.bet(state.small_blind)
        sb_player.last_action = f"SB ${sb_amount}"

        bb_amount = bb_player.bet(state.big_blind)
        bb_player.last_action = f"BB ${bb_amount}"

        state.pot += sb_amount + bb_amount
        self._log_event(state, "BLINDS", {
            "small_blind": {"player": sb_player.player_id, "amount": sb_amount},
            "big_blind": {"player": bb_player.player_id, "amount": bb_amount},
        })
        logger.debug(f"Blinds posted: SB={sb_amount} BB={bb_amount}")

    def _deal_hole_cards(self, state: GameState) -> None:
        """Deal 2 hole cards to each participant with chips (or a posted blind)."""
        for player in state.players:
            if player.stack > 0 or player.total_bet > 0:
                player.deal_cards(state.deck.deal(HOLE_CARDS))

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    def propose_action(
        self,
        player_id: str,
        action: Union[ActionType, str],
        amount: Optional[int] = None,
    ) -> ActionResult:
        """
        Propose an action for a participant.

        Args:
            player_id: Acting participant
            action: FOLD, CHECK, CALL, RAISE or ALL_IN
            amount: Raise target (total round commitment) for RAISE

        Returns:
            ActionResult; on rejection the state is unchanged and
            ``message`` holds the reason
        """
        if self._state.decision_in_flight is not None:
            return ActionResult(
                False, f"Waiting on advisory decision for {self._state.decision_in_flight}"
            )
        return self._apply(player_id, action, amount)

    def _apply(
        self,
        player_id: str,
        action: Union[ActionType, str],
        amount: Optional[int],
        working: Optional[GameState] = None,
    ) -> ActionResult:
        if not isinstance(action, ActionType):
            try:
                action = ActionType(str(action).upper())
            except ValueError:
                return ActionResult(False, f"Unknown action: {action}")

        working = working if working is not None else self._state.copy()
        player = working.get_player(player_id)
        if player is None:
            return ActionResult(False, f"Unknown player: {player_id}")

        action, amount = normalize_action(action, amount, player, working)
        validation = validate(action, amount, player, working)
        if not validation:
            logger.debug(f"Rejected {action.value} from {player_id}: {validation.reason}")
            return ActionResult(False, validation.reason, action)

        try:
            record = apply_action(working, player, action, amount)

            if len(working.round.contesting) == 1:
                self._award_uncontested(working)
            elif self.config.auto_advance:
                self._run_streets(working)

            self._commit(working)
        except DeckExhausted as e:
            self._abort_hand(e)
            raise
        except PokerError:
            logger.error(f"Aborting {action.value} from {player_id}: state left at last commit", exc_info=True)
            raise

        return ActionResult(
            True,
            self._describe(record),
            action,
            record.chips_moved,
            self.snapshot(),
        )

    @staticmethod
    def _describe(record: ActionRecord) -> str:
        if record.action_type == ActionType.FOLD:
            return "Folded"
        if record.action_type == ActionType.CHECK:
            return "Checked"
        if record.action_type == ActionType.CALL:
            suffix = " (all-in)" if record.is_all_in else ""
            return f"Called ${record.chips_moved}{suffix}"
        if record.is_all_in:
            return f"All-in for ${record.amount}"
        return f"Raised to ${record.amount}"

    def advance_if_round_complete(self) -> GameState:
        """
        Deal the next street (or go to showdown) if the betting round is complete.

        A no-op otherwise, so it is safe to call repeatedly.
        """
        state = self._state
        if not state.round.complete or state.phase not in BETTING_PHASES:
            return self.snapshot()

        working = state.copy()
        try:
            self._advance_street(working)
            self._commit(working)
        except DeckExhausted as e:
            self._abort_hand(e)
            raise
        return self.snapshot()

    # ------------------------------------------------------------------
    # Streets and showdown
    # ------------------------------------------------------------------

    def _run_streets(self, state: GameState) -> None:
        """Keep dealing while rounds complete without needing any action."""
        while state.round.complete and state.phase in BETTING_PHASES:
            self._advance_street(state)

    def _advance_street(self, state: GameState) -> None:
        if len(state.round.contesting) == 1:
            self._award_uncontested(state)
            return

        next_phase = NEXT_PHASE[state.phase]
        if next_phase == GamePhase.SHOWDOWN:
            self._go_to_showdown(state)
            return

        cards = state.deck.deal(STREET_CARDS[next_phase])
        state.community_cards.extend(cards)
        state.phase = next_phase
        self._log_event(state, next_phase.name, {"cards": [str(c) for c in cards]})
        logger.debug(f"Dealt {next_phase.name}: {' '.join(str(c) for c in cards)}")

        start_betting_round(state)

    def _finish_hand(self, state: GameState) -> None:
        state.phase = GamePhase.SHOWDOWN
        state.round.complete = True
        state.active_player_id = None
        state.pot = 0

    def _abort_hand(self, error: PokerError) -> None:
        """
        End the running hand from the last committed state with no winner.

        Every chip committed this hand goes back to its owner and the table
        returns to SETUP, so the next start_hand() deals normally.
        """
        working = self._state.copy()
        street = working.phase
        for player in working.players:
            player.stack += player.total_bet
            player.reset_for_new_hand()
        working.pot = 0
        working.community_cards = []
        working.winners = []
        working.phase = GamePhase.SETUP
        working.active_player_id = None
        working.decision_in_flight = None
        working.round.complete = True
        self._log_event(working, "HAND_ABORTED", {"street": street.name, "reason": str(error)})
        self._commit(working)
        logger.error(f"Hand #{working.hand_number} aborted on {street.name}, bets returned: {error}")

    def _award_uncontested(self, state: GameState) -> None:
        """The last contester takes the whole pot, no cards shown."""
        winner = state.contesting_players[0]
        amount = state.pot
        winner.stack += amount
        state.winners = [Payout(player_id=winner.player_id, amount=amount)]
        self._finish_hand(state)
        self._log_event(state, "WIN_BY_FOLD", {"winner": winner.player_id, "amount": amount})
        logger.info(f"Hand #{state.hand_number}: {winner.player_id} wins {amount} uncontested")

    def _go_to_showdown(self, state: GameState) -> None:
        """Evaluate every contesting hand and distribute the pots."""
        contesters = state.contesting_players
        if len(state.community_cards) != TOTAL_COMMUNITY_CARDS:
            raise StateInvariantViolation(
                f"Showdown with {len(state.community_cards)} community cards"
            )

        hands = {p.player_id: evaluate(p.hole_cards, state.community_cards) for p in contesters}
        payouts: Dict[str, Payout] = {}
        discarded = 0

        for pot in self._calculate_side_pots(state):
            pot_winners = self._best_hands(pot.eligible_players, hands)
            split_amount, remainder = divmod(pot.amount, len(pot_winners))

            shares = {pid: split_amount for pid in pot_winners}
            if remainder and self.config.odd_chip_policy == OddChipPolicy.BUTTON:
                for pid in self._clockwise_from_button(state, pot_winners)[:remainder]:
                    shares[pid] += 1
                remainder = 0
            discarded += remainder

            for pid, share in shares.items():
                hand = hands[pid]
                payout = payouts.get(pid)
                if payout is None:
                    payout = payouts[pid] = Payout(
                        player_id=pid,
                        amount=0,
                        hand=hand.label,
                        description=get_hand_description(hand),
                        cards=[str(c) for c in hand.cards],
                    )
                payout.amount += share

        for payout in payouts.values():
            state.get_player(payout.player_id).stack += payout.amount

        state.winners = sorted(payouts.values(), key=lambda p: state.get_player(p.player_id).seat)
        state.rounding_loss += discarded
        self._finish_hand(state)

        self._log_event(state, "SHOWDOWN", {
            "hands": {pid: hand.to_dict() for pid, hand in hands.items()},
            "winners": [w.to_dict() for w in state.winners],
            "rounding_loss": discarded,
        })
        logger.info(
            f"Hand #{state.hand_number} showdown: "
            + ", ".join(f"{w.player_id} +{w.amount} ({w.description})" for w in state.winners)
        )

    @staticmethod
    def _best_hands(eligible: List[str], hands: Dict[str, HandRank]) -> List[str]:
        best = max((hands[pid] for pid in eligible), key=lambda h: h.key)
        return [pid for pid in eligible if compare(hands[pid], best) == Comparison.EQUAL]

    @staticmethod
    def _clockwise_from_button(state: GameState, player_ids: List[str]) -> List[str]:
        """Order ids by seat starting left of the dealer button."""
        n = state.num_players
        return sorted(
            player_ids,
            key=lambda pid: (state.get_player(pid).seat - state.dealer_position - 1) % n,
        )

    @staticmethod
    def _calculate_side_pots(state: GameState) -> List[Pot]:
        """
        Layer the pot by contribution level.

        Each layer is eligible to the contesters who put in at least that
        much; chips from folded players feed the layers they reached.
        """
        contesters = state.contesting_players
        levels = sorted({p.total_bet for p in contesters})

        pots: List[Pot] = []
        prev_level = 0
        for level in levels:
            amount = sum(
                min(p.total_bet, level) - min(p.total_bet, prev_level)
                for p in state.players
            )
            eligible = [p.player_id for p in contesters if p.total_bet >= level]
            if amount > 0:
                pots.append(Pot(amount=amount, eligible_players=eligible))
            prev_level = level

        # Folded money above the highest contester level
        leftover = sum(max(0, p.total_bet - prev_level) for p in state.players)
        if leftover:
            if pots:
                pots[-1].amount += leftover
            else:
                pots.append(Pot(amount=leftover, eligible_players=[p.player_id for p in contesters]))

        if sum(pot.amount for pot in pots) != state.pot:
            raise StateInvariantViolation(
                f"Side pots total {sum(pot.amount for pot in pots)} but pot is {state.pot}"
            )
        return pots

    # ------------------------------------------------------------------
    # Advisory decisions
    # ------------------------------------------------------------------

    @property
    def decision_in_flight(self) -> bool:
        return self._state.decision_in_flight is not None

    def request_decision(self, player_id: str) -> DecisionRequest:
        """
        Mark an advisory decision as in flight for the participant to act.

        Only one decision may be outstanding at a time, table-wide.

        Raises:
            InvalidAction: If a decision is already in flight, or the
                participant is unknown, not advisory-controlled, or not to act
        """
        state = self._state
        if state.decision_in_flight is not None:
            raise InvalidAction(f"Decision already in flight for {state.decision_in_flight}")

        player = state.get_player(player_id)
        if player is None:
            raise InvalidAction(f"Unknown player: {player_id}")
        if not player.is_advisory:
            raise InvalidAction(f"{player_id} is not advisory-controlled")
        if state.active_player_id != player_id:
            raise InvalidAction(f"Not {player_id}'s turn")

        working = state.copy()
        working.decision_in_flight = player_id
        self._commit(working)

        snapshot = self.snapshot()
        return DecisionRequest(
            player_id=player_id,
            hand_number=snapshot.hand_number,
            participant=snapshot.get_player(player_id),
            state=snapshot,
            action_log=list(snapshot.action_log),
        )

    def resolve_decision(
        self,
        request: DecisionRequest,
        action: Union[ActionType, str],
        amount: Optional[int] = None,
    ) -> ActionResult:
        """
        Feed an advisory answer back in as an ordinary action proposal.

        An answer the validator rejects counts as an advisory failure and the
        participant folds instead.
        """
        working = self._release(request)
        result = self._apply(request.player_id, action, amount, working=working)
        if result.success:
            return result
        return self.fail_decision(
            request, AdvisoryFailure(request.player_id, f"rejected decision: {result.message}"),
            working=working,
        )

    def fail_decision(
        self,
        request: DecisionRequest,
        error: BaseException,
        working: Optional[GameState] = None,
    ) -> ActionResult:
        """Fold the participant after an advisory failure."""
        if working is None:
            working = self._release(request)
        logger.warning(f"Advisory failure for {request.player_id}, folding: {error}")
        result = self._apply(request.player_id, ActionType.FOLD, None, working=working)
        if not result.success:
            # Nothing left to fold; still clear the in-flight marker
            self._commit(working)
        return result

    def cancel_decision(self, request: DecisionRequest) -> GameState:
        """Drop an outstanding request without acting (e.g. the caller was cancelled)."""
        self._commit(self._release(request))
        return self.snapshot()

    def _release(self, request: DecisionRequest) -> GameState:
        """Working copy with the in-flight marker cleared for ``request``."""
        state = self._state
        if state.decision_in_flight != request.player_id or state.hand_number != request.hand_number:
            raise InvalidAction(f"No decision in flight for {request.player_id}")
        working = state.copy()
        working.decision_in_flight = None
        return working

    # ------------------------------------------------------------------
    # Bookkeeping
    # ------------------------------------------------------------------

    def _commit(self, working: GameState) -> None:
        self._check_invariants(working)
        self._state = working

    @staticmethod
    def _check_invariants(state: GameState) -> None:
        """Halt on chip or contester bookkeeping errors."""
        if any(p.stack < 0 for p in state.players):
            raise StateInvariantViolation("Negative stack")

        on_table = sum(p.stack for p in state.players) + state.pot + state.rounding_loss
        if state.starting_chips and on_table != state.starting_chips:
            raise StateInvariantViolation(
                f"Chip count {on_table} differs from {state.starting_chips} at hand start"
            )

        if state.phase in BETTING_PHASES:
            committed = sum(p.total_bet for p in state.players)
            if committed != state.pot:
                raise StateInvariantViolation(f"Pot {state.pot} but {committed} committed")
            contesting = [p.player_id for p in state.contesting_players]
            if contesting != state.round.contesting:
                raise StateInvariantViolation(
                    f"Contesting set {state.round.contesting} but {contesting} in hand"
                )

        if len(state.community_cards) not in (0, 3, 4, 5):
            raise StateInvariantViolation(f"{len(state.community_cards)} community cards")

    @staticmethod
    def _log_event(state: GameState, event: str, details: Dict[str, Any]) -> None:
        """Append an entry to the hand history."""
        state.hand_history.append({
            "event": event,
            "phase": state.phase.name,
            **details,
        })
