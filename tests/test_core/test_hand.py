"""
Tests for hand evaluation and comparison.
"""

import itertools
import random

import pytest
from pokertable.core.card import Card, Rank, Suit, full_deck, parse_cards
from pokertable.core.hand import (
    HandCategory, Comparison, evaluate, evaluate_hand, compare, compare_hands, get_hand_description,
)


def hand(text):
    return evaluate_hand(parse_cards(text))


class TestHandRanking:
    """Each category is recognized."""

    def test_royal_flush(self, royal_flush):
        result = evaluate_hand(royal_flush)
        assert result.category == HandCategory.ROYAL_FLUSH
        assert result.strength == 10

    def test_straight_flush(self, straight_flush):
        result = evaluate_hand(straight_flush)
        assert result.category == HandCategory.STRAIGHT_FLUSH
        assert result.values == (9,)

    def test_four_of_a_kind(self):
        result = hand("Kh Ks Kd Kc 3s")
        assert result.category == HandCategory.FOUR_OF_A_KIND
        assert result.values == (13,)
        assert result.kickers == (3,)

    def test_full_house(self):
        result = hand("Qh Qs Qd 4c 4s")
        assert result.category == HandCategory.FULL_HOUSE
        assert result.values == (12, 4)

    def test_flush(self):
        result = hand("Ah 9h 7h 4h 2h")
        assert result.category == HandCategory.FLUSH
        assert result.values == (14, 9, 7, 4, 2)

    def test_straight(self):
        result = hand("9c 8d 7h 6s 5c")
        assert result.category == HandCategory.STRAIGHT
        assert result.values == (9,)

    def test_wheel_straight(self, wheel_straight):
        result = evaluate_hand(wheel_straight)
        assert result.category == HandCategory.STRAIGHT
        assert result.values == (5,)
        # Ace plays low, so it is listed last
        assert result.cards[-1].rank == Rank.ACE

    def test_three_of_a_kind(self):
        result = hand("7h 7s 7d Kc 2s")
        assert result.category == HandCategory.THREE_OF_A_KIND
        assert result.kickers == (13, 2)

    def test_two_pair(self):
        result = hand("Jh Js 4d 4c As")
        assert result.category == HandCategory.TWO_PAIR
        assert result.values == (11, 4)
        assert result.kickers == (14,)

    def test_one_pair(self, sample_hand):
        result = evaluate_hand(sample_hand)
        assert result.category == HandCategory.ONE_PAIR
        assert result.values == (14,)
        assert result.kickers == (13, 12, 11)

    def test_high_card(self):
        result = hand("Ah Js 8d 5c 3s")
        assert result.category == HandCategory.HIGH_CARD
        assert result.values == (14,)

    def test_wraparound_is_not_a_straight(self):
        assert hand("Qh Ks Ad 2c 3s").category == HandCategory.HIGH_CARD


class TestEvaluateInputs:
    """Card count and duplicate checks."""

    def test_scenario_royal_flush_on_flop(self):
        result = evaluate(parse_cards("As Ks"), parse_cards("Qs Js 10s"))
        assert result.category == HandCategory.ROYAL_FLUSH
        assert result.strength == 10

    def test_preflop_pair(self):
        result = evaluate(parse_cards("9h 9d"))
        assert result.category == HandCategory.ONE_PAIR

    def test_needs_two_hole_cards(self):
        with pytest.raises(ValueError):
            evaluate(parse_cards("As"), parse_cards("Ks Qs Js"))

    def test_at_most_five_community_cards(self):
        with pytest.raises(ValueError):
            evaluate(parse_cards("As Ks"), parse_cards("2c 3c 4c 5c 6c 7c"))

    def test_duplicate_cards_rejected(self):
        with pytest.raises(ValueError):
            evaluate(parse_cards("As Ks"), parse_cards("As Qs Js"))

    def test_evaluate_hand_card_count(self):
        with pytest.raises(ValueError):
            evaluate_hand(parse_cards("As Ks Qs Js"))


class TestHandComparison:
    """Ordering between evaluated hands."""

    def test_royal_flush_beats_straight_flush(self, royal_flush, straight_flush):
        assert compare(evaluate_hand(royal_flush), evaluate_hand(straight_flush)) == Comparison.GREATER

    def test_flush_beats_straight(self):
        assert hand("2h 5h 7h 9h Jh") > hand("10c Jd Qh Ks Ac")

    def test_higher_pair_wins(self):
        assert compare(hand("Kh Ks 2d 3c 4s"), hand("Qh Qs Ad Kc Js")) == Comparison.GREATER

    def test_kicker_decides(self):
        assert compare(hand("Ah As Kd 9c 4s"), hand("Ad Ac Kh 8c 4d")) == Comparison.GREATER

    def test_wheel_loses_to_six_high_straight(self, wheel_straight):
        assert compare(evaluate_hand(wheel_straight), hand("2c 3d 4h 5s 6c")) == Comparison.LESS

    def test_full_house_of_twos_beats_flush(self):
        """Scenario: 2s full of 5s beats any flush in another hand."""
        board = parse_cards("2c 5s 5d 9h Kc")
        boat = evaluate(parse_cards("2h 2d"), board)
        assert boat.category == HandCategory.FULL_HOUSE
        assert boat.values == (2, 5)

        best_flush = evaluate(parse_cards("Ah Kh"), parse_cards("Qh Jh 9h 5c 5d"))
        assert best_flush.category == HandCategory.FLUSH
        assert compare(boat, best_flush) == Comparison.GREATER
        assert compare_hands(parse_cards("2h 2d"), parse_cards("Ah Qd"), board) == Comparison.GREATER

    def test_suits_never_break_ties(self):
        a = hand("Ah Kh 9d 7c 3s")
        b = hand("As Ks 9c 7d 3h")
        assert compare(a, b) == Comparison.EQUAL
        assert compare(b, a) == Comparison.EQUAL

    def test_tied_hands_are_equal_and_hash_alike(self):
        a = hand("Ah Kh 9d 7c 3s")
        b = hand("As Ks 9c 7d 3h")
        assert a == b
        assert a <= b and a >= b
        assert not a < b and not a > b
        assert hash(a) == hash(b)
        assert len({a, b}) == 1

    def test_board_plays_for_both(self):
        board = parse_cards("Ac Kd Qh Js 9c")
        assert compare_hands(parse_cards("2h 3d"), parse_cards("4s 5c"), board) == Comparison.EQUAL


class TestSevenCardEvaluation:
    """Best five of seven."""

    def test_best_five_from_seven(self):
        result = evaluate(parse_cards("Ah Kh"), parse_cards("Qh Jh 10h 2c 3d"))
        assert result.category == HandCategory.ROYAL_FLUSH
        assert len(result.cards) == 5

    def test_flush_from_six_suited(self):
        result = evaluate(parse_cards("Ah 2h"), parse_cards("Kh 9h 7h 5h 3c"))
        assert result.category == HandCategory.FLUSH
        assert result.values == (14, 13, 9, 7, 5)

    def test_straight_from_seven(self):
        result = evaluate(parse_cards("6c 7d"), parse_cards("8h 9s 10c Kd 2h"))
        assert result.category == HandCategory.STRAIGHT
        assert result.values == (10,)

    def test_order_invariance(self):
        rng = random.Random(11)
        cards = parse_cards("Ah Kd Kc 9s 9h 4c 2d")
        expected = evaluate_hand(cards)
        for _ in range(20):
            shuffled = cards[:]
            rng.shuffle(shuffled)
            result = evaluate_hand(shuffled)
            assert result == expected
            assert compare(result, expected) == Comparison.EQUAL


class TestCompareProperties:
    """compare is a total preorder."""

    @pytest.fixture
    def random_hands(self):
        rng = random.Random(3)
        deck = full_deck()
        return [evaluate_hand(rng.sample(deck, 7)) for _ in range(30)]

    def test_antisymmetric(self, random_hands):
        for a, b in itertools.combinations(random_hands, 2):
            assert compare(a, b) == Comparison(-compare(b, a))

    def test_transitive(self, random_hands):
        for a, b, c in itertools.combinations(random_hands, 3):
            if compare(a, b) >= 0 and compare(b, c) >= 0:
                assert compare(a, c) >= 0

    def test_reflexive(self, random_hands):
        for a in random_hands:
            assert compare(a, a) == Comparison.EQUAL


class TestHandDescription:
    """Human-readable descriptions."""

    def test_royal_flush_description(self, royal_flush):
        assert get_hand_description(evaluate_hand(royal_flush)) == "Royal Flush"

    def test_pair_description(self, sample_hand):
        assert get_hand_description(evaluate_hand(sample_hand)) == "Pair of Aces"

    def test_full_house_description(self):
        assert get_hand_description(hand("2h 2d 2c 5s 5d")) == "Full House, Twos full of Fives"

    def test_sixes_plural(self):
        assert get_hand_description(hand("6h 6d 6c 6s 2d")) == "Four of a Kind, Sixes"
        assert get_hand_description(hand("6h 6d 6c 2s 2d")) == "Full House, Sixes full of Twos"
        assert get_hand_description(hand("Ah Ad 6c 6s 2d")) == "Two Pair, Aces and Sixes"
        assert get_hand_description(hand("6h 6d Ac 9s 2d")) == "Pair of Sixes"

    def test_wheel_description(self, wheel_straight):
        assert get_hand_description(evaluate_hand(wheel_straight)) == "Straight, Five high (Wheel)"

    def test_label(self):
        assert hand("Jh Js 4d 4c As").label == "Two Pair"


class TestKickerCards:
    """Kicker values and the cards behind them."""

    def test_pair_kicker_cards(self):
        result = hand("As Ad Kc 9h 4s")
        assert result.kickers == (13, 9, 4)
        assert [c.value for c in result.kicker_cards] == [13, 9, 4]
        assert result.kicker_cards == tuple(parse_cards("Kc 9h 4s"))

    def test_high_card_kickers_exclude_top_card(self):
        result = hand("2c Jd 7h As 9s")
        assert result.values == (14,)
        assert [c.value for c in result.kicker_cards] == [11, 9, 7, 2]

    def test_no_kicker_cards_for_five_card_categories(self):
        assert hand("2h 5h 7h 9h Jh").kicker_cards == ()
        assert hand("2h 2d 2c 5s 5d").kicker_cards == ()

    def test_to_dict_lists_kicker_cards(self):
        assert hand("Jh Js 4d 4c As").to_dict()["kicker_cards"] == ["A♠"]
