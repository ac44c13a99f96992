"""
Pytest configuration and shared fixtures for PokerTable tests.
"""

import pytest
from pokertable.core.card import Card, Deck, Rank, Suit, full_deck, parse_cards
from pokertable.core.player import Participant
from pokertable.core.game import TexasHoldemGame
from pokertable.core.rules import ActionType, GameConfig


@pytest.fixture
def deck():
    """Create a fresh shuffled deck (seeded)."""
    return Deck(shuffle=True, seed=7)


@pytest.fixture
def unshuffled_deck():
    """Create a fresh unshuffled deck."""
    return Deck(shuffle=False)


@pytest.fixture
def sample_participant():
    """Create a sample participant with 1000 chips."""
    return Participant(player_id="test_player", stack=1000, seat=0)


@pytest.fixture
def config():
    """Blinds 1/2, 200 buy-in, fixed seed."""
    return GameConfig(small_blind=1, big_blind=2, buy_in=200, seed=42)


@pytest.fixture
def game(config):
    """A table with nobody seated yet."""
    return TexasHoldemGame(config)


@pytest.fixture
def manual_game():
    """A table where the caller deals streets with advance_if_round_complete()."""
    return TexasHoldemGame(GameConfig(small_blind=1, big_blind=2, buy_in=200, seed=42, auto_advance=False))


@pytest.fixture
def heads_up_game(game):
    """
    alice (button, small blind) vs bob (big blind), 200 chips each.
    alice acts first preflop.
    """
    game.start_hand(["alice", "bob"], [200, 200])
    return game


@pytest.fixture
def three_player_game(game):
    """
    alice (button), bob (small blind), carol (big blind), 200 chips each.
    alice acts first preflop.
    """
    game.start_hand(["alice", "bob", "carol"], [200, 200, 200])
    return game


@pytest.fixture
def stacked_deck():
    """
    Build a deck that deals known cards.

    Hole cards are dealt two at a time in seat order, then flop, turn and
    river straight off the top (no burns).

        deck = stacked_deck(["As Ks", "2c 7d"], "Qs Js 10s 3h 4h")
    """
    def build(holes, board=""):
        top = [card for hole in holes for card in parse_cards(hole)] + parse_cards(board)
        rest = [card for card in full_deck() if card not in top]
        return Deck.from_cards(top + rest)
    return build


@pytest.fixture
def play_out():
    """Check or call for everyone until the hand is over."""
    def play(game):
        while game.is_hand_running():
            player_id = game.state.active_player_id
            legal = {a["type"] for a in game.get_legal_actions(player_id)}
            action = ActionType.CHECK if "CHECK" in legal else ActionType.CALL
            game.propose_action(player_id, action).unwrap()
        return game
    return play


@pytest.fixture
def sample_hand():
    """Create a sample 5-card hand (pair of aces)."""
    return [
        Card(Rank.ACE, Suit.SPADES),
        Card(Rank.ACE, Suit.HEARTS),
        Card(Rank.KING, Suit.DIAMONDS),
        Card(Rank.QUEEN, Suit.CLUBS),
        Card(Rank.JACK, Suit.SPADES),
    ]


@pytest.fixture
def royal_flush():
    """Create a royal flush hand."""
    return [
        Card(Rank.ACE, Suit.SPADES),
        Card(Rank.KING, Suit.SPADES),
        Card(Rank.QUEEN, Suit.SPADES),
        Card(Rank.JACK, Suit.SPADES),
        Card(Rank.TEN, Suit.SPADES),
    ]


@pytest.fixture
def straight_flush():
    """Create a straight flush (9-high)."""
    return [
        Card(Rank.NINE, Suit.HEARTS),
        Card(Rank.EIGHT, Suit.HEARTS),
        Card(Rank.SEVEN, Suit.HEARTS),
        Card(Rank.SIX, Suit.HEARTS),
        Card(Rank.FIVE, Suit.HEARTS),
    ]


@pytest.fixture
def wheel_straight():
    """Create a wheel straight (A-2-3-4-5)."""
    return [
        Card(Rank.ACE, Suit.SPADES),
        Card(Rank.TWO, Suit.HEARTS),
        Card(Rank.THREE, Suit.DIAMONDS),
        Card(Rank.FOUR, Suit.CLUBS),
        Card(Rank.FIVE, Suit.SPADES),
    ]
