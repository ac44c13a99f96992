"""
Texas Hold'em Rules, Constants and Table Configuration.

Key rules:

1. Heads-up (2 players): Dealer posts small blind, non-dealer posts big blind.
   Preflop the first to act is the seat after the big blind (the dealer),
   postflop the seat after the dealer (the big blind).

2. Minimum raise: a raise must reach at least
   max(current_bet * 2, current_bet + last raise increment).
   Preflop and on a fresh street the increment starts at the big blind.

3. All-in: a player may always commit their whole stack, even when that is
   less than a full raise or less than the amount to call.

4. Split pots: tied winners share floor(pot / winners). What happens to the
   odd chips is a table setting (``OddChipPolicy``).
"""

import os
from enum import Enum, auto
from dataclasses import dataclass
from typing import Optional, Tuple


class GamePhase(Enum):
    """Phases of a Texas Hold'em hand."""
    SETUP = auto()        # Between hands, or blinds/cards being set up
    PREFLOP = auto()      # After hole cards dealt, before flop
    FLOP = auto()         # After 3 community cards
    TURN = auto()         # After 4th community card
    RIVER = auto()        # After 5th community card
    SHOWDOWN = auto()     # Pot awarded, hand over


class ActionType(Enum):
    """Possible player actions."""
    FOLD = "FOLD"
    CHECK = "CHECK"
    CALL = "CALL"
    RAISE = "RAISE"
    ALL_IN = "ALL_IN"  # Shorthand, normalized to RAISE or CALL


class OddChipPolicy(Enum):
    """What to do with chips left over when a split pot does not divide evenly."""
    DISCARD = "discard"  # Rounding loss, not distributed
    BUTTON = "button"    # One chip each to winners clockwise from the button


# Default game settings
DEFAULT_SMALL_BLIND = 10
DEFAULT_BIG_BLIND = 20
DEFAULT_BUY_IN = 1000
MIN_PLAYERS = 2
MAX_PLAYERS = 10

# Cards per phase
HOLE_CARDS = 2
FLOP_CARDS = 3
TURN_CARDS = 1
RIVER_CARDS = 1
TOTAL_COMMUNITY_CARDS = 5

# Hand evaluation
HAND_SIZE = 5  # Best 5-card hand

# Streets that have a betting round, in order
BETTING_PHASES = (GamePhase.PREFLOP, GamePhase.FLOP, GamePhase.TURN, GamePhase.RIVER)

# Community cards dealt on entry to each street
STREET_CARDS = {
    GamePhase.FLOP: FLOP_CARDS,
    GamePhase.TURN: TURN_CARDS,
    GamePhase.RIVER: RIVER_CARDS,
}

NEXT_PHASE = {
    GamePhase.PREFLOP: GamePhase.FLOP,
    GamePhase.FLOP: GamePhase.TURN,
    GamePhase.TURN: GamePhase.RIVER,
    GamePhase.RIVER: GamePhase.SHOWDOWN,
}


@dataclass
class GameConfig:
    """
    Table configuration.

    Attributes:
        small_blind: Small blind amount
        big_blind: Big blind amount
        buy_in: Starting stack used when no explicit stacks are given
        odd_chip_policy: Split-pot remainder handling
        auto_advance: Deal the next street as soon as a betting round completes.
            When False the caller drives streets with advance_if_round_complete().
        advisory_timeout: Seconds allowed for an advisory decision (None = no limit)
        seed: Shuffle seed for reproducible hands (None = random)
    """
    small_blind: int = DEFAULT_SMALL_BLIND
    big_blind: int = DEFAULT_BIG_BLIND
    buy_in: int = DEFAULT_BUY_IN
    odd_chip_policy: OddChipPolicy = OddChipPolicy.DISCARD
    auto_advance: bool = True
    advisory_timeout: Optional[float] = None
    seed: Optional[int] = None

    def __post_init__(self):
        self.odd_chip_policy = OddChipPolicy(self.odd_chip_policy)
        validate_blinds(self.small_blind, self.big_blind)
        if self.buy_in <= 0:
            raise ValueError("Buy-in must be positive")

    @classmethod
    def from_env(cls, prefix: str = "POKERTABLE_") -> "GameConfig":
        """Build a config from environment variables, e.g. POKERTABLE_BIG_BLIND=50."""
        env = os.environ
        timeout = env.get(f"{prefix}ADVISORY_TIMEOUT")
        seed = env.get(f"{prefix}SEED")
        return cls(
            small_blind=int(env.get(f"{prefix}SMALL_BLIND", DEFAULT_SMALL_BLIND)),
            big_blind=int(env.get(f"{prefix}BIG_BLIND", DEFAULT_BIG_BLIND)),
            buy_in=int(env.get(f"{prefix}BUY_IN", DEFAULT_BUY_IN)),
            odd_chip_policy=OddChipPolicy(env.get(f"{prefix}ODD_CHIP_POLICY", OddChipPolicy.DISCARD.value)),
            auto_advance=env.get(f"{prefix}AUTO_ADVANCE", "1").lower() not in ("0", "false", "no"),
            advisory_timeout=float(timeout) if timeout else None,
            seed=int(seed) if seed else None,
        )


def validate_blinds(small_blind: int, big_blind: int) -> None:
    """Raise ValueError unless 0 < small_blind <= big_blind."""
    if small_blind <= 0 or big_blind <= 0:
        raise ValueError("Blinds must be positive")
    if small_blind > big_blind:
        raise ValueError("Small blind cannot exceed big blind")


def get_blind_positions(num_players: int, dealer_position: int) -> Tuple[int, int]:
    """
    Calculate small blind and big blind positions.

    In heads-up play, the dealer posts the small blind.

    Args:
        num_players: Number of players dealt into the hand
        dealer_position: Position of the dealer (0-indexed among those players)

    Returns:
        Tuple of (small_blind_position, big_blind_position)
    """
    if num_players < MIN_PLAYERS:
        raise ValueError("Need at least 2 players")

    if num_players == 2:
        sb_pos = dealer_position
        bb_pos = (dealer_position + 1) % num_players
    else:
        sb_pos = (dealer_position + 1) % num_players
        bb_pos = (dealer_position + 2) % num_players

    return sb_pos, bb_pos


def calculate_min_raise(current_bet: int, min_raise_increment: int) -> int:
    """
    Calculate the minimum legal raise target.

    Args:
        current_bet: Current highest bet in the round
        min_raise_increment: Size of the last raise (the increase, not the total)

    Returns:
        Minimum total bet a raise must reach
    """
    return max(current_bet * 2, current_bet + min_raise_increment)
