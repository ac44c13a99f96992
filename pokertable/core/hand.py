"""
Hand Evaluation for Texas Hold'em.

This module evaluates 2 hole cards plus 0-5 community cards and returns the
best hand as a ``HandRank``. With more than five cards every 5-card
combination is scored (21 of them for seven cards) and the strongest kept.
With fewer than five cards, as on early streets, the cards are ranked as
they are: pairs, trips and quads still count, straights and flushes cannot
exist.

Hand Categories (best to worst, with strength value):
10. Royal Flush: A♠ K♠ Q♠ J♠ 10♠
 9. Straight Flush: 5 consecutive cards of same suit
 8. Four of a Kind: 4 cards of same rank
 7. Full House: 3 of a kind + pair
 6. Flush: 5 cards of same suit
 5. Straight: 5 consecutive cards
 4. Three of a Kind: 3 cards of same rank
 3. Two Pair: 2 different pairs
 2. One Pair: 2 cards of same rank
 1. High Card: No made hand

Note: Ace can be low in A-2-3-4-5 straight (wheel), which is then five high.

Within a category, hands compare by their defining ranks (quad rank, trip
rank then pair rank, ...) and then by kickers, position by position. The
comparison is exact: equal tuples mean a split pot.
"""

from __future__ import annotations
from typing import List, Tuple, Optional, Sequence
from itertools import combinations
from dataclasses import dataclass, field
from enum import IntEnum
from collections import Counter

from pokertable.core.card import Card, Rank
from pokertable.core.rules import HAND_SIZE, HOLE_CARDS, TOTAL_COMMUNITY_CARDS


class HandCategory(IntEnum):
    """Hand categories, higher value = stronger hand."""
    ROYAL_FLUSH = 10
    STRAIGHT_FLUSH = 9
    FOUR_OF_A_KIND = 8
    FULL_HOUSE = 7
    FLUSH = 6
    STRAIGHT = 5
    THREE_OF_A_KIND = 4
    TWO_PAIR = 3
    ONE_PAIR = 2
    HIGH_CARD = 1


HAND_CATEGORY_NAMES = {
    HandCategory.ROYAL_FLUSH: "Royal Flush",
    HandCategory.STRAIGHT_FLUSH: "Straight Flush",
    HandCategory.FOUR_OF_A_KIND: "Four of a Kind",
    HandCategory.FULL_HOUSE: "Full House",
    HandCategory.FLUSH: "Flush",
    HandCategory.STRAIGHT: "Straight",
    HandCategory.THREE_OF_A_KIND: "Three of a Kind",
    HandCategory.TWO_PAIR: "Two Pair",
    HandCategory.ONE_PAIR: "One Pair",
    HandCategory.HIGH_CARD: "High Card",
}


class Comparison(IntEnum):
    """Outcome of comparing hand A against hand B."""
    LESS = -1
    EQUAL = 0
    GREATER = 1


@dataclass(frozen=True)
class HandRank:
    """
    An evaluated hand.

    Equality and ordering both go by ``key``; suits never make two hands
    differ.

    Attributes:
        category: Hand category (its int value is the strength, 1-10)
        cards: The cards composing the hand, defining cards first, kickers last
        values: Ranks that define the category, most significant first
        kickers: Rank values of the kicker cards, high to low
    """
    category: HandCategory
    cards: Tuple[Card, ...] = field(compare=False)
    values: Tuple[int, ...]
    kickers: Tuple[int, ...] = ()

    @property
    def strength(self) -> int:
        return int(self.category)

    @property
    def label(self) -> str:
        return HAND_CATEGORY_NAMES[self.category]

    @property
    def kicker_cards(self) -> Tuple[Card, ...]:
        """The kicker cards themselves, ordered like ``kickers``."""
        if not self.kickers:
            return ()
        return self.cards[-len(self.kickers):]

    @property
    def key(self) -> Tuple[int, Tuple[int, ...], Tuple[int, ...]]:
        """Total-order sort key: category, then defining values, then kickers."""
        return (int(self.category), self.values, self.kickers)

    def __lt__(self, other: HandRank) -> bool:
        return self.key < other.key

    def __gt__(self, other: HandRank) -> bool:
        return self.key > other.key

    def __le__(self, other: HandRank) -> bool:
        return self.key <= other.key

    def __ge__(self, other: HandRank) -> bool:
        return self.key >= other.key

    def to_dict(self) -> dict:
        return {
            "category": self.category.name,
            "label": self.label,
            "strength": self.strength,
            "cards": [str(c) for c in self.cards],
            "values": list(self.values),
            "kickers": list(self.kickers),
            "kicker_cards": [str(c) for c in self.kicker_cards],
            "description": get_hand_description(self),
        }


def evaluate(hole: Sequence[Card], community: Sequence[Card] = ()) -> HandRank:
    """
    Evaluate a player's best hand.

    Args:
        hole: Exactly 2 hole cards
        community: 0-5 community cards

    Returns:
        The strongest HandRank available from the combined cards

    Raises:
        ValueError: On a wrong card count or duplicate cards
    """
    if len(hole) != HOLE_CARDS:
        raise ValueError(f"Need {HOLE_CARDS} hole cards, got {len(hole)}")
    if len(community) > TOTAL_COMMUNITY_CARDS:
        raise ValueError(f"At most {TOTAL_COMMUNITY_CARDS} community cards, got {len(community)}")
    return best_hand(list(hole) + list(community))


def evaluate_hand(cards: Sequence[Card]) -> HandRank:
    """
    Evaluate a flat list of 5-7 cards.

    Raises:
        ValueError: If not 5-7 cards provided
    """
    if len(cards) < HAND_SIZE or len(cards) > HAND_SIZE + 2:
        raise ValueError(f"Need 5-7 cards, got {len(cards)}")
    return best_hand(cards)


def best_hand(cards: Sequence[Card]) -> HandRank:
    """Best HandRank over all 5-card combinations (or the cards as-is if fewer)."""
    if not cards:
        raise ValueError("Cannot evaluate an empty hand")
    if len(set(cards)) != len(cards):
        raise ValueError(f"Duplicate cards in hand: {list(cards)}")

    # Canonical order so the chosen cards never depend on input order
    ordered = sorted(cards, key=lambda c: (c.rank, c.suit), reverse=True)

    if len(ordered) <= HAND_SIZE:
        return _evaluate_cards(ordered)

    best: Optional[HandRank] = None
    for combo in combinations(ordered, HAND_SIZE):
        hand = _evaluate_cards(list(combo))
        if best is None or hand.key > best.key:
            best = hand
    return best


def compare(a: HandRank, b: HandRank) -> Comparison:
    """Compare two evaluated hands: GREATER if a beats b."""
    if a.key > b.key:
        return Comparison.GREATER
    if a.key < b.key:
        return Comparison.LESS
    return Comparison.EQUAL


def compare_hands(
    hole_a: Sequence[Card],
    hole_b: Sequence[Card],
    community: Sequence[Card] = (),
) -> Comparison:
    """Evaluate two sets of hole cards against the same board and compare them."""
    return compare(evaluate(hole_a, community), evaluate(hole_b, community))


def _evaluate_cards(cards: List[Card]) -> HandRank:
    """Rank up to 5 cards, already sorted by rank descending."""
    rank_counts = Counter(c.rank for c in cards)
    # Ranks grouped by multiplicity, then by rank: [(rank, count), ...]
    groups = sorted(rank_counts.items(), key=lambda rc: (rc[1], rc[0]), reverse=True)
    counts = [count for _, count in groups]

    is_flush = len(cards) == HAND_SIZE and len({c.suit for c in cards}) == 1
    straight_high = _straight_high(cards)

    if is_flush and straight_high is not None:
        category = HandCategory.ROYAL_FLUSH if straight_high == Rank.ACE else HandCategory.STRAIGHT_FLUSH
        return HandRank(category, _straight_order(cards, straight_high), (int(straight_high),))

    if counts[0] == 4:
        return _grouped(HandCategory.FOUR_OF_A_KIND, cards, groups, 1)

    if counts[:2] == [3, 2]:
        return _grouped(HandCategory.FULL_HOUSE, cards, groups, 2)

    if is_flush:
        return HandRank(HandCategory.FLUSH, tuple(cards), tuple(c.value for c in cards))

    if straight_high is not None:
        return HandRank(HandCategory.STRAIGHT, _straight_order(cards, straight_high), (int(straight_high),))

    if counts[0] == 3:
        return _grouped(HandCategory.THREE_OF_A_KIND, cards, groups, 1)

    if counts[:2] == [2, 2]:
        return _grouped(HandCategory.TWO_PAIR, cards, groups, 2)

    if counts[0] == 2:
        return _grouped(HandCategory.ONE_PAIR, cards, groups, 1)

    return _grouped(HandCategory.HIGH_CARD, cards, groups, 1)


def _grouped(category: HandCategory, cards: List[Card], groups, defining: int) -> HandRank:
    """Build a HandRank whose first ``defining`` rank groups define the category."""
    values = tuple(int(rank) for rank, _ in groups[:defining])
    kickers = tuple(int(rank) for rank, _ in groups[defining:])
    order = {rank: i for i, (rank, _) in enumerate(groups)}
    ordered = sorted(cards, key=lambda c: (order[c.rank], -int(c.suit)))
    return HandRank(category, tuple(ordered), values, kickers)


def _straight_high(cards: List[Card]) -> Optional[Rank]:
    """
    High card of a straight, or None.

    Returns Rank.FIVE for the wheel (A-2-3-4-5).
    """
    unique_ranks = sorted({c.rank for c in cards}, reverse=True)
    if len(unique_ranks) != HAND_SIZE:
        return None

    if unique_ranks[0] - unique_ranks[4] == 4:
        return unique_ranks[0]

    if unique_ranks == [Rank.ACE, Rank.FIVE, Rank.FOUR, Rank.THREE, Rank.TWO]:
        return Rank.FIVE

    return None


def _straight_order(cards: List[Card], high: Rank) -> Tuple[Card, ...]:
    """Order straight cards high to low, with the Ace last in a wheel."""
    if high == Rank.FIVE:
        ace = [c for c in cards if c.rank == Rank.ACE]
        others = [c for c in cards if c.rank != Rank.ACE]
        return tuple(others + ace)
    return tuple(cards)


def get_hand_description(hand: HandRank) -> str:
    """Get a human-readable description of an evaluated hand."""
    category = hand.category
    values = hand.values

    if category == HandCategory.ROYAL_FLUSH:
        return "Royal Flush"
    elif category == HandCategory.STRAIGHT_FLUSH:
        return f"Straight Flush, {_rank_name(values[0])} high"
    elif category == HandCategory.FOUR_OF_A_KIND:
        return f"Four of a Kind, {_plural(values[0])}"
    elif category == HandCategory.FULL_HOUSE:
        return f"Full House, {_plural(values[0])} full of {_plural(values[1])}"
    elif category == HandCategory.FLUSH:
        return f"Flush, {_rank_name(values[0])} high"
    elif category == HandCategory.STRAIGHT:
        if values[0] == Rank.FIVE:
            return "Straight, Five high (Wheel)"
        return f"Straight, {_rank_name(values[0])} high"
    elif category == HandCategory.THREE_OF_A_KIND:
        return f"Three of a Kind, {_plural(values[0])}"
    elif category == HandCategory.TWO_PAIR:
        return f"Two Pair, {_plural(values[0])} and {_plural(values[1])}"
    elif category == HandCategory.ONE_PAIR:
        return f"Pair of {_plural(values[0])}"
    else:
        return f"High Card, {_rank_name(values[0])}"


def _rank_name(value: int) -> str:
    """Get the name of a rank value."""
    names = {
        Rank.TWO: "Two", Rank.THREE: "Three", Rank.FOUR: "Four",
        Rank.FIVE: "Five", Rank.SIX: "Six", Rank.SEVEN: "Seven",
        Rank.EIGHT: "Eight", Rank.NINE: "Nine", Rank.TEN: "Ten",
        Rank.JACK: "Jack", Rank.QUEEN: "Queen", Rank.KING: "King",
        Rank.ACE: "Ace"
    }
    return names[Rank(value)]


def _plural(value: int) -> str:
    name = _rank_name(value)
    return name + "es" if name == "Six" else name + "s"
