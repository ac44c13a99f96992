"""
Card and Deck classes for Texas Hold'em.

Cards are immutable values with a numeric rank value from 2 to 14 (Ace high).
A compact integer encoding (0-51) is kept for serialization and hashing.

The deck shuffles with a seedable ``random.Random`` so that hands can be
replayed deterministically in tests while staying uniformly random otherwise.
"""

from __future__ import annotations
import random
import re
from dataclasses import dataclass
from typing import Iterable, List, Optional
from enum import IntEnum

from pokertable.core.errors import DeckExhausted


class Suit(IntEnum):
    """Suits; the integer value is the low part of the card encoding."""
    CLUBS = 0
    DIAMONDS = 1
    HEARTS = 2
    SPADES = 3


class Rank(IntEnum):
    """Card ranks; the integer value is the card's numeric value (2-14)."""
    TWO = 2
    THREE = 3
    FOUR = 4
    FIVE = 5
    SIX = 6
    SEVEN = 7
    EIGHT = 8
    NINE = 9
    TEN = 10
    JACK = 11
    QUEEN = 12
    KING = 13
    ACE = 14


SUIT_SYMBOLS = {
    Suit.CLUBS: "♣",
    Suit.DIAMONDS: "♦",
    Suit.HEARTS: "♥",
    Suit.SPADES: "♠",
}

SUIT_CHARS = {
    Suit.CLUBS: "c",
    Suit.DIAMONDS: "d",
    Suit.HEARTS: "h",
    Suit.SPADES: "s",
}

RANK_CHARS = {rank: str(int(rank)) for rank in Rank if rank <= Rank.TEN}
RANK_CHARS.update({Rank.JACK: "J", Rank.QUEEN: "Q", Rank.KING: "K", Rank.ACE: "A"})

CHAR_TO_RANK = {char: rank for rank, char in RANK_CHARS.items()}
CHAR_TO_RANK["T"] = Rank.TEN
CHAR_TO_SUIT = {char: suit for suit, char in SUIT_CHARS.items()}
CHAR_TO_SUIT.update({symbol: suit for suit, symbol in SUIT_SYMBOLS.items()})

DECK_SIZE = 52

_CARD_RE = re.compile(r"(10|[2-9TJQKA])([cdhs♣♦♥♠])", re.IGNORECASE)
_CARDS_RE = re.compile(rf"(?:{_CARD_RE.pattern})*", re.IGNORECASE)


@dataclass(frozen=True)
class Card:
    """
    One playing card. Equality and hashing are by (rank, suit).

    Build from enums (``Card(Rank.ACE, Suit.SPADES)``), from notation
    (``Card.from_string("10♥")``) or from the 0-51 encoding
    ``(value - 2) * 4 + suit``.
    """

    rank: Rank
    suit: Suit

    def __post_init__(self):
        object.__setattr__(self, "rank", Rank(self.rank))
        object.__setattr__(self, "suit", Suit(self.suit))

    @classmethod
    def from_string(cls, s: str) -> Card:
        """Parse "As", "Th", "10h", "A♠" or "10♦"."""
        s = s.strip()
        rank_part, suit_part = s[:-1].upper(), s[-1:].lower()

        if rank_part not in CHAR_TO_RANK:
            raise ValueError(f"Invalid card string: {s!r}")
        if suit_part not in CHAR_TO_SUIT:
            raise ValueError(f"Invalid suit in card string: {s!r}")

        return cls(CHAR_TO_RANK[rank_part], CHAR_TO_SUIT[suit_part])

    @classmethod
    def from_int(cls, card_int: int) -> Card:
        if not 0 <= card_int < DECK_SIZE:
            raise ValueError(f"Card int must be 0-51, got {card_int}")
        return cls(Rank(card_int // 4 + 2), Suit(card_int % 4))

    @property
    def value(self) -> int:
        """Numeric value, 2 through 14."""
        return int(self.rank)

    def to_int(self) -> int:
        return (self.value - 2) * 4 + int(self.suit)

    @property
    def code(self) -> str:
        """ASCII notation, e.g. 'As' or '10h'."""
        return RANK_CHARS[self.rank] + SUIT_CHARS[self.suit]

    @property
    def color(self) -> str:
        return "red" if self.suit in (Suit.HEARTS, Suit.DIAMONDS) else "black"

    def __lt__(self, other: Card) -> bool:
        # Rank only; suits never order cards
        return self.rank < other.rank

    def __repr__(self) -> str:
        return f"Card({self.code})"

    def __str__(self) -> str:
        return RANK_CHARS[self.rank] + SUIT_SYMBOLS[self.suit]

    def to_dict(self) -> dict:
        """Rendering view: rank, suit symbol, value, text and color."""
        return {
            "rank": RANK_CHARS[self.rank],
            "suit": SUIT_SYMBOLS[self.suit],
            "value": self.value,
            "text": str(self),
            "color": self.color,
        }


def full_deck() -> List[Card]:
    """All 52 cards in a fixed order (suit-major, 2 to Ace)."""
    return [Card(rank, suit) for suit in Suit for rank in Rank]


class Deck:
    """
    A standard 52-card deck, consumed front to back.

    Usage:
        deck = Deck(seed=42)
        hole = deck.deal(2)
        board = deck.deal(5)
    """

    def __init__(
        self,
        shuffle: bool = True,
        seed: Optional[int] = None,
        rng: Optional[random.Random] = None,
    ):
        self._rng = rng if rng is not None else random.Random(seed)
        self._cards: List[Card] = full_deck()
        if shuffle:
            self.shuffle()

    @classmethod
    def from_cards(cls, cards: Iterable[Card]) -> Deck:
        """Build a deck that deals the given cards in the given order."""
        deck = cls(shuffle=False)
        deck._cards = list(cards)
        if len(set(deck._cards)) != len(deck._cards):
            raise ValueError("Deck contains duplicate cards")
        return deck

    def shuffle(self) -> None:
        """Shuffle the remaining cards (Fisher-Yates via Random.shuffle)."""
        self._rng.shuffle(self._cards)

    def deal(self, n: int = 1) -> List[Card]:
        """
        Take ``n`` cards off the top.

        Raises:
            DeckExhausted: If fewer than ``n`` cards remain; the deck is left untouched.
        """
        if n < 0:
            raise ValueError(f"Cannot deal a negative number of cards: {n}")
        if n > len(self._cards):
            raise DeckExhausted(n, len(self._cards))

        dealt, self._cards = self._cards[:n], self._cards[n:]
        return dealt

    @property
    def remaining(self) -> int:
        return len(self._cards)

    @property
    def cards(self) -> List[Card]:
        """Remaining cards, top first."""
        return list(self._cards)

    def __len__(self) -> int:
        return len(self._cards)

    def __repr__(self) -> str:
        return f"Deck(remaining={self.remaining})"


def new_deck(seed: Optional[int] = None, rng: Optional[random.Random] = None) -> Deck:
    """Return a freshly shuffled 52-card deck."""
    return Deck(shuffle=True, seed=seed, rng=rng)


def parse_cards(text: str) -> List[Card]:
    """
    Parse several cards at once.

    Whitespace is ignored, so "As Kh 10d", "AsKhTd" and "A♠ K♥ T♦" all work.
    """
    compact = "".join(text.split())
    if not _CARDS_RE.fullmatch(compact):
        raise ValueError(f"Cannot parse cards: {text!r}")
    return [Card.from_string(rank + suit) for rank, suit in _CARD_RE.findall(compact)]
