"""
Tests for the betting round state machine: turn order, round closing,
raise bookkeeping and running out the board.
"""

import pytest
from pokertable.core.betting import seat_after, seat_before, pending_players, is_round_complete
from pokertable.core.rules import ActionType, GamePhase


class TestSeatOrder:
    """Clockwise seat helpers."""

    def test_seat_after_wraps(self, three_player_game):
        state = three_player_game.state
        assert seat_after(state, 2, lambda p: True) == 0
        assert seat_after(state, 0, lambda p: p.player_id == "carol") == 2

    def test_seat_before_wraps(self, three_player_game):
        state = three_player_game.state
        assert seat_before(state, 0, lambda p: True) == 2

    def test_index_itself_is_checked_last(self, three_player_game):
        state = three_player_game.state
        assert seat_after(state, 1, lambda p: p.player_id == "bob") == 1
        assert seat_after(state, 1, lambda p: False) is None


class TestPreflopActionOrder:
    """First to act preflop is the seat after the big blind."""

    def test_three_player_order(self, three_player_game):
        game = three_player_game
        assert game.state.active_player_id == "alice"
        game.propose_action("alice", ActionType.CALL).unwrap()
        assert game.state.active_player_id == "bob"
        game.propose_action("bob", ActionType.CALL).unwrap()
        assert game.state.active_player_id == "carol"

    @pytest.mark.parametrize("num_players", [4, 6, 10])
    def test_under_the_gun(self, game, num_players):
        roster = [f"p{i}" for i in range(num_players)]
        game.start_hand(roster)
        # Button on seat 0, blinds on 1 and 2
        assert game.state.big_blind_position == 2
        assert game.state.active_player_id == "p3"
        assert game.state.round.closing_id == "p2"

    def test_heads_up_button_acts_first(self, heads_up_game):
        assert heads_up_game.state.dealer_position == 0
        assert heads_up_game.state.small_blind_position == 0
        assert heads_up_game.state.active_player_id == "alice"


class TestPostflopActionOrder:
    """First to act after the flop is the seat after the dealer."""

    def test_three_player_flop_order(self, three_player_game):
        game = three_player_game
        game.propose_action("alice", ActionType.CALL).unwrap()
        game.propose_action("bob", ActionType.CALL).unwrap()
        game.propose_action("carol", ActionType.CHECK).unwrap()

        assert game.phase == GamePhase.FLOP
        assert len(game.state.community_cards) == 3
        assert game.state.active_player_id == "bob"
        assert game.state.round.closing_id == "alice"

    def test_heads_up_big_blind_acts_first_postflop(self, heads_up_game):
        game = heads_up_game
        game.propose_action("alice", ActionType.CALL).unwrap()
        game.propose_action("bob", ActionType.CHECK).unwrap()
        assert game.phase == GamePhase.FLOP
        assert game.state.active_player_id == "bob"

    def test_postflop_skips_folded_players(self, three_player_game):
        game = three_player_game
        game.propose_action("alice", ActionType.CALL).unwrap()
        game.propose_action("bob", ActionType.FOLD).unwrap()
        game.propose_action("carol", ActionType.CHECK).unwrap()

        assert game.phase == GamePhase.FLOP
        assert game.state.active_player_id == "carol"

    def test_new_street_resets_round(self, three_player_game):
        game = three_player_game
        game.propose_action("alice", ActionType.RAISE, 6).unwrap()
        game.propose_action("bob", ActionType.CALL).unwrap()
        game.propose_action("carol", ActionType.CALL).unwrap()

        state = game.state
        assert state.phase == GamePhase.FLOP
        assert state.round.current_bet == 0
        assert state.round.last_raiser_id is None
        assert state.round.min_raise == state.big_blind
        assert all(p.current_bet == 0 and not p.has_acted for p in state.players)
        assert state.pot == 18


class TestRoundCompletion:
    """When a betting round closes."""

    def test_big_blind_gets_option(self, three_player_game):
        game = three_player_game
        game.propose_action("alice", ActionType.CALL).unwrap()
        game.propose_action("bob", ActionType.CALL).unwrap()

        assert game.phase == GamePhase.PREFLOP
        assert [p.player_id for p in pending_players(game.state)] == ["carol"]
        assert not is_round_complete(game.state)

    def test_checked_around_closes_round(self, three_player_game):
        game = three_player_game
        game.propose_action("alice", ActionType.CALL).unwrap()
        game.propose_action("bob", ActionType.CALL).unwrap()
        game.propose_action("carol", ActionType.CHECK).unwrap()

        for player_id in ("bob", "carol"):
            game.propose_action(player_id, ActionType.CHECK).unwrap()
            assert game.phase == GamePhase.FLOP
        game.propose_action("alice", ActionType.CHECK).unwrap()
        assert game.phase == GamePhase.TURN
        assert len(game.state.community_cards) == 4

    def test_raise_reopens_action(self, three_player_game):
        game = three_player_game
        game.propose_action("alice", ActionType.CALL).unwrap()
        game.propose_action("bob", ActionType.CALL).unwrap()
        game.propose_action("carol", ActionType.RAISE, 6).unwrap()

        round_state = game.state.round
        assert round_state.current_bet == 6
        assert round_state.min_raise == 4
        assert round_state.last_raiser_id == "carol"
        assert round_state.closing_id == "bob"
        assert game.state.active_player_id == "alice"

        game.propose_action("alice", ActionType.CALL).unwrap()
        assert game.phase == GamePhase.PREFLOP
        game.propose_action("bob", ActionType.CALL).unwrap()
        assert game.phase == GamePhase.FLOP

    def test_min_raise_follows_raise_size(self, three_player_game):
        game = three_player_game
        game.propose_action("alice", ActionType.RAISE, 10).unwrap()
        assert game.state.round.min_raise == 8
        game.propose_action("bob", ActionType.RAISE, 20).unwrap()
        assert game.state.round.min_raise == 10
        assert game.get_legal_actions("carol")[2] == {"type": "RAISE", "min": 40, "max": 200}

    def test_short_all_in_keeps_min_raise(self, game):
        game.start_hand(["alice", "bob", "carol"], [200, 200, 30])
        game.propose_action("alice", ActionType.RAISE, 20).unwrap()
        game.propose_action("bob", ActionType.FOLD).unwrap()
        game.propose_action("carol", ActionType.ALL_IN).unwrap()

        assert game.state.round.current_bet == 30
        assert game.state.round.min_raise == 18

    def test_folding_closer_hands_closing_seat_back(self, three_player_game):
        game = three_player_game
        game.propose_action("alice", ActionType.CALL).unwrap()
        game.propose_action("bob", ActionType.RAISE, 6).unwrap()
        assert game.state.round.closing_id == "alice"

        game.propose_action("carol", ActionType.CALL).unwrap()
        game.propose_action("alice", ActionType.FOLD).unwrap()

        assert game.phase == GamePhase.FLOP
        assert game.state.round.contesting == ["bob", "carol"]


class TestAllInPlayers:
    """All-in seats are skipped and count as done."""

    def test_all_in_seat_is_skipped(self, game):
        game.start_hand(["alice", "bob", "carol"], [200, 200, 50])
        game.propose_action("alice", ActionType.RAISE, 10).unwrap()
        game.propose_action("bob", ActionType.CALL).unwrap()
        game.propose_action("carol", ActionType.ALL_IN).unwrap()

        assert game.state.get_player("carol").is_all_in
        assert game.state.round.current_bet == 50
        assert game.state.active_player_id == "alice"

        game.propose_action("alice", ActionType.CALL).unwrap()
        game.propose_action("bob", ActionType.CALL).unwrap()
        assert game.phase == GamePhase.FLOP
        assert game.state.active_player_id == "bob"

        game.propose_action("bob", ActionType.CHECK).unwrap()
        game.propose_action("alice", ActionType.CHECK).unwrap()
        assert game.phase == GamePhase.TURN
        assert "carol" in game.state.round.contesting

    def test_board_runs_out_when_nobody_can_bet(self, game):
        game.start_hand(["alice", "bob"], [100, 100])
        game.propose_action("alice", ActionType.ALL_IN).unwrap()
        game.propose_action("bob", ActionType.CALL).unwrap()

        state = game.state
        assert state.phase == GamePhase.SHOWDOWN
        assert len(state.community_cards) == 5
        assert state.deck.remaining == 52 - 4 - 5
        assert sum(p.stack for p in state.players) == 200

    def test_one_player_left_with_chips_does_not_act_alone(self, game):
        game.start_hand(["alice", "bob"], [300, 100])
        game.propose_action("alice", ActionType.RAISE, 20).unwrap()
        game.propose_action("bob", ActionType.ALL_IN).unwrap()
        game.propose_action("alice", ActionType.CALL).unwrap()

        assert game.phase == GamePhase.SHOWDOWN
        assert len(game.state.community_cards) == 5


class TestActionLog:
    """Every applied action is logged."""

    def test_records(self, three_player_game):
        game = three_player_game
        game.propose_action("alice", ActionType.RAISE, 6).unwrap()
        game.propose_action("bob", ActionType.FOLD).unwrap()

        log = game.state.action_log
        assert [(r.player_id, r.action_type) for r in log] == [
            ("alice", ActionType.RAISE),
            ("bob", ActionType.FOLD),
        ]
        assert log[0].amount == 6
        assert log[0].chips_moved == 6
        assert log[0].phase == GamePhase.PREFLOP
        assert not log[0].is_all_in
        assert log[1].chips_moved == 0

    def test_rejected_actions_not_logged(self, three_player_game):
        three_player_game.propose_action("bob", ActionType.CALL)
        assert three_player_game.state.action_log == []
