"""
Unit tests for the MatchEngine.

Tests cover the setup flow, undo for every operation, rejection handling,
the end of a match and signal emissions.
"""

from unittest.mock import MagicMock

import pytest

from models.match import MatchPhase
from models.stat import Stat
from engine.errors import ErrorKind
from engine.match import MatchEngine
from engine.roster import Player


ROSTER = [Player.create(n, f"Player {n}", player_id=f"p{n}") for n in range(1, 9)]


def fill_lineup(engine: MatchEngine) -> None:
    for slot in range(1, 7):
        engine.set_lineup_slot(slot, f"p{slot}")


def playing_engine(serving: str = "home") -> MatchEngine:
    engine = MatchEngine()
    engine.start_match(ROSTER, "Test Match")
    fill_lineup(engine)
    engine.select_setter("p4")
    engine.start_set(serving)
    return engine


def play_set(engine: MatchEngine, home_wins: bool) -> None:
    """Set up a lineup, score one rally and end the set."""
    fill_lineup(engine)
    engine.start_set("home")
    engine.record_stat(None, Stat.ACE if home_wins else Stat.OPPONENT_POINT)
    engine.end_set()


class TestMatchSetup:
    """Tests for starting a match and configuring the lineup."""

    def setup_method(self):
        self.engine = MatchEngine()

    def test_initial_state_is_pre_match(self):
        assert self.engine.state.phase == MatchPhase.PRE_MATCH
        assert not self.engine.can_undo

    def test_start_match_enters_lineup_setup(self):
        result = self.engine.start_match(ROSTER, "Test Match")

        assert result.ok
        assert result.state.phase == MatchPhase.LINEUP_SETUP
        assert result.state.match_name == "Test Match"
        assert result.state.version == 1

    def test_default_match_name(self):
        result = self.engine.start_match(ROSTER)

        assert result.state.match_name.startswith("Match started on ")

    def test_insufficient_roster_rejected(self):
        result = self.engine.start_match(ROSTER[:5])

        assert not result.ok
        assert result.error == ErrorKind.INSUFFICIENT_ROSTER
        assert self.engine.state.phase == MatchPhase.PRE_MATCH

    def test_start_set_requires_full_lineup(self):
        self.engine.start_match(ROSTER)
        self.engine.set_lineup_slot(1, "p1")

        result = self.engine.start_set("home")

        assert result.error == ErrorKind.EMPTY_SLOT
        assert self.engine.state.phase == MatchPhase.LINEUP_SETUP

    def test_player_in_two_slots_rejected(self):
        self.engine.start_match(ROSTER)
        self.engine.set_lineup_slot(1, "p1")

        result = self.engine.set_lineup_slot(2, "p1")

        assert result.error == ErrorKind.PLAYER_ALREADY_ON_COURT

    def test_libero_cannot_hold_slot(self):
        self.engine.start_match(ROSTER)
        self.engine.select_libero("p7")

        result = self.engine.set_lineup_slot(3, "p7")

        assert result.error == ErrorKind.PLAYER_ALREADY_ON_COURT

    def test_invalid_serving_team_rejected(self):
        self.engine.start_match(ROSTER)
        fill_lineup(self.engine)

        result = self.engine.start_set("visitors")

        assert result.error == ErrorKind.INVALID_SIDE

    def test_start_set_fills_bench(self):
        self.engine.start_match(ROSTER)
        fill_lineup(self.engine)
        self.engine.select_libero("p7")

        result = self.engine.start_set("opponent")

        assert result.state.phase == MatchPhase.PLAYING
        assert result.state.bench == ("p8",)
        assert result.state.game.serving_team.value == "opponent"

    def test_record_stat_before_set_rejected(self):
        self.engine.start_match(ROSTER)

        result = self.engine.record_stat("p1", "Dig")

        assert result.error == ErrorKind.INVALID_PHASE


class TestUndo:
    """Every accepted operation can be undone back to the exact prior state."""

    def test_undo_lineup_slot(self):
        engine = MatchEngine()
        engine.start_match(ROSTER)
        before = engine.state

        engine.set_lineup_slot(1, "p1")
        engine.undo()

        assert engine.state == before
        assert engine.state.version == before.version

    def test_undo_libero_and_setter(self):
        engine = MatchEngine()
        engine.start_match(ROSTER)
        before = engine.state

        engine.select_libero("p7")
        engine.select_setter("p2")
        engine.undo()
        engine.undo()

        assert engine.state == before

    def test_undo_record_stat(self):
        engine = playing_engine()
        before = engine.state

        engine.record_stat("p3", "Kill")
        engine.undo()

        assert engine.state is before

    def test_undo_sideout_restores_rotation(self):
        engine = playing_engine(serving="opponent")
        before = engine.state

        engine.record_stat("p3", Stat.KILL)
        assert engine.state.game.rotation == 2
        engine.undo()

        assert engine.state == before
        assert engine.state.lineup.server == "p1"

    def test_undo_each_kwda_step(self):
        engine = playing_engine()
        before_kill = engine.state

        engine.record_stat("p3", Stat.KWDA)
        before_assist = engine.state
        engine.record_kwda_assist("p5")

        engine.undo()
        assert engine.state == before_assist
        assert engine.awaiting_assist

        engine.undo()
        assert engine.state == before_kill
        assert not engine.awaiting_assist

    def test_undo_substitution(self):
        engine = playing_engine()
        before = engine.state

        engine.substitute(3, "p3", "p7")
        engine.undo()

        assert engine.state == before
        assert engine.state.ledger.group_of("p7") is None

    def test_undo_stops_at_set_start(self):
        """Undo never crosses a set boundary."""
        engine = playing_engine()
        started = engine.state

        result = engine.undo()

        assert result.ok
        assert result.message == "Nothing to undo"
        assert engine.state is started

    def test_end_set_clears_history(self):
        engine = playing_engine()
        engine.record_stat(None, Stat.ACE)

        engine.end_set()

        assert not engine.can_undo
        assert engine.state.phase == MatchPhase.LINEUP_SETUP

    def test_state_views_are_read_only(self):
        """Returned tables cannot be edited, so snapshots stay intact."""
        engine = playing_engine()
        engine.record_stat("p3", Stat.KILL)
        before = engine.state
        engine.record_stat("p5", Stat.DIG)

        with pytest.raises(TypeError):
            engine.state.rotation_scores[1] = "corrupted"
        with pytest.raises(TypeError):
            engine.state.match_stats.row("p3")[Stat.KILL] = 99
        with pytest.raises(TypeError):
            engine.state.match_stats.counts["p3"] = {}
        with pytest.raises(TypeError):
            engine.state.ledger.groups["p7"] = "p1"

        engine.undo()

        assert engine.state == before
        assert engine.state.match_stats.get("p3", Stat.KILL) == 1
        assert engine.state.rotation_scores[1].home == 1

    def test_rejected_operation_not_recorded(self):
        engine = playing_engine()
        depth = engine.history_depth
        before = engine.state

        result = engine.record_stat("p6", Stat.BLOCK)

        assert not result.ok
        assert result.error == ErrorKind.ILLEGAL_BLOCK_POSITION
        assert result.state is before
        assert engine.history_depth == depth

    def test_version_increases(self):
        engine = playing_engine()
        version = engine.state.version

        engine.record_stat("p5", Stat.DIG)

        assert engine.state.version == version + 1


class TestLivePlay:
    """Tests for live-play operations through the engine."""

    def setup_method(self):
        self.engine = playing_engine()

    def test_kwda_blocks_substitution(self):
        self.engine.record_stat("p3", Stat.KWDA)

        result = self.engine.substitute(3, "p3", "p7")

        assert result.error == ErrorKind.ASSIST_PENDING

    def test_end_set_blocked_while_assist_pending(self):
        self.engine.record_stat("p3", Stat.KWDA)

        result = self.engine.end_set()

        assert result.error == ErrorKind.ASSIST_PENDING

    def test_set_stats_reset_between_sets(self):
        self.engine.record_stat("p5", Stat.DIG)
        self.engine.end_set()
        fill_lineup(self.engine)
        self.engine.start_set("home")

        assert self.engine.state.set_stats.get("p5", Stat.DIG) == 0
        assert self.engine.state.match_stats.get("p5", Stat.DIG) == 1
        assert self.engine.state.game.current_set == 2

    def test_box_score_scopes(self):
        self.engine.record_stat("p3", Stat.KILL)

        match_rows = self.engine.box_score("match")
        set_rows = self.engine.box_score("set")

        assert match_rows[-1].label == "TEAM TOTAL"
        assert match_rows[2].hitting == "1.000"
        assert set_rows[2].values == match_rows[2].values


class TestMatchCompletion:
    """Tests for reaching three sets."""

    def setup_method(self):
        self.engine = MatchEngine()
        self.engine.start_match(ROSTER)
        self.completed_mock = MagicMock()
        self.engine.match_completed.connect(self.completed_mock)

    def test_three_set_wins_finish_match(self):
        play_set(self.engine, home_wins=True)
        play_set(self.engine, home_wins=False)
        play_set(self.engine, home_wins=True)
        play_set(self.engine, home_wins=True)

        state = self.engine.state
        assert state.phase == MatchPhase.POST_MATCH
        assert self.engine.is_match_complete
        assert state.game.home_sets_won == 3
        assert state.game.opponent_sets_won == 1
        assert len(state.set_results) == 4

        self.completed_mock.assert_called_once()
        payload = self.completed_mock.call_args[0][0]
        assert payload["winner"] == "home"

    def test_operations_after_match_rejected(self):
        for _ in range(3):
            play_set(self.engine, home_wins=False)

        assert self.engine.state.phase == MatchPhase.POST_MATCH
        assert self.engine.record_stat("p1", Stat.DIG).error == ErrorKind.MATCH_FINISHED
        assert self.engine.substitute(1, "p1", "p7").error == ErrorKind.MATCH_FINISHED
        assert self.engine.start_set("home").error == ErrorKind.MATCH_FINISHED
        assert self.engine.end_set().error == ErrorKind.MATCH_FINISHED

    def test_final_set_score_kept(self):
        for _ in range(3):
            play_set(self.engine, home_wins=True)

        assert self.engine.state.game.home_score == 1


class TestMatchEngineSignals:
    """Tests for signal emissions."""

    def setup_method(self):
        self.engine = MatchEngine()

        self.state_changed_mock = MagicMock()
        self.point_awarded_mock = MagicMock()
        self.stat_recorded_mock = MagicMock()
        self.set_started_mock = MagicMock()
        self.set_ended_mock = MagicMock()
        self.substitution_mock = MagicMock()
        self.undone_mock = MagicMock()
        self.rejected_mock = MagicMock()

        self.engine.state_changed.connect(self.state_changed_mock)
        self.engine.point_awarded.connect(self.point_awarded_mock)
        self.engine.stat_recorded.connect(self.stat_recorded_mock)
        self.engine.set_started.connect(self.set_started_mock)
        self.engine.set_ended.connect(self.set_ended_mock)
        self.engine.substitution_made.connect(self.substitution_mock)
        self.engine.action_undone.connect(self.undone_mock)
        self.engine.operation_rejected.connect(self.rejected_mock)

        self.engine.start_match(ROSTER)
        fill_lineup(self.engine)
        self.engine.start_set("home")

    def test_set_started_emitted(self):
        self.set_started_mock.assert_called_once_with(1, "home")

    def test_state_changed_emitted_on_every_accepted_call(self):
        # start_match + 6 slots + start_set
        assert self.state_changed_mock.call_count == 8

    def test_point_awarded_on_ace(self):
        self.engine.record_stat(None, "Ace")

        self.point_awarded_mock.assert_called_once()
        payload = self.point_awarded_mock.call_args[0][0]
        assert payload["team"] == "home"
        assert payload["reason"] == "Ace"
        assert payload["home_score"] == 1
        assert payload["sideout"] is False

        stat = self.stat_recorded_mock.call_args[0][0]
        assert stat == {"player_id": "p1", "stat": "Ace"}

    def test_no_point_for_dig(self):
        self.engine.record_stat("p5", "Dig")

        self.stat_recorded_mock.assert_called_once()
        self.point_awarded_mock.assert_not_called()

    def test_substitution_made_emitted(self):
        self.engine.substitute(2, "p2", "p8")

        payload = self.substitution_mock.call_args[0][0]
        assert payload["slot"] == 2
        assert payload["player_in_id"] == "p8"
        assert payload["home_subs"] == 1

    def test_rejection_emitted(self):
        self.engine.record_stat("p1", Stat.BLOCK)

        self.rejected_mock.assert_called_once()
        kind, _message = self.rejected_mock.call_args[0]
        assert kind == "IllegalBlockPosition"

    def test_undo_emits_remaining_depth(self):
        self.engine.record_stat("p5", "Dig")
        self.engine.undo()

        self.undone_mock.assert_called_once_with(0)

    def test_set_ended_emitted(self):
        self.engine.record_stat(None, "Opponent Point")
        self.engine.end_set()

        self.set_ended_mock.assert_called_once_with(1, "opponent")
