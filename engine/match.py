"""
Match Engine - the single entry point for a live volleyball match.

Every public operation runs to completion synchronously and returns an
OperationResult; rejected operations leave the state exactly as it was.
The engine runs independently of any GUI and emits Qt Signals so display
layers can react without polling.
"""

import logging
from dataclasses import replace
from typing import Callable, Iterable, Optional, Union

from PySide6.QtCore import QObject, Signal
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError

from models.match import Side, MatchPhase
from models.stat import Stat
from engine.documents import to_document, from_document
from engine.errors import ErrorKind, EngineError, PersistenceError, OperationResult
from engine.history import HistoryStack
from engine.roster import RosterEntry
from engine.rules import VolleyballRules
from engine.sets import (
    coerce_side,
    start_match,
    set_lineup_slot,
    select_libero,
    select_setter,
    start_set,
    end_set,
)
from engine.state import MatchState
from engine.statbook import StatBook, box_score, BoxScoreRow
from engine.stats import coerce_stat, record_stat, record_kwda_assist
from engine.substitutions import apply_substitution

logger = logging.getLogger(__name__)

Transition = Callable[[MatchState], MatchState]


class MatchEngine(QObject):
    """
    Scoring engine for one team's volleyball match.

    Owns the MatchState aggregate and the undo history. It does NOT render
    anything, and it only touches storage through the repository it is
    given.
    """

    # Signals
    state_changed = Signal(object)          # MatchState
    point_awarded = Signal(dict)            # {team, reason, home_score, opponent_score, rotation}
    stat_recorded = Signal(dict)            # {player_id, stat}
    substitution_made = Signal(dict)        # {slot, player_out_id, player_in_id, home_subs}
    set_started = Signal(int, str)          # set number, serving team
    set_ended = Signal(int, str)            # set number, winner
    match_completed = Signal(dict)          # final results
    action_undone = Signal(int)             # snapshots left
    operation_rejected = Signal(str, str)   # error kind, message

    def __init__(self, repository=None):
        """
        Args:
            repository: Optional persistence port with save(document) and
                load(match_id)
        """
        super().__init__()
        self._repository = repository
        self._history = HistoryStack()
        self._state = MatchState()

    # ============ Read-only Views ============

    @property
    def state(self) -> MatchState:
        return self._state

    @property
    def can_undo(self) -> bool:
        return self._history.can_undo

    @property
    def history_depth(self) -> int:
        return len(self._history)

    @property
    def is_match_complete(self) -> bool:
        return self._state.is_match_complete

    @property
    def awaiting_assist(self) -> bool:
        return self._state.pending_assist is not None

    def box_score(self, scope: str = "match") -> list[BoxScoreRow]:
        """Box score rows for 'match' or 'set' scope."""
        book: StatBook = self._state.set_stats if scope == "set" else self._state.match_stats
        return box_score(book, self._state.roster)

    # ============ Setup ============

    def start_match(self, roster: Iterable[RosterEntry], name: Optional[str] = None) -> OperationResult:
        """Start a new match; any previous match and its history are dropped."""
        entries = list(roster)
        return self._run("start_match", lambda _: start_match(entries, name), clears_history=True)

    def set_lineup_slot(self, slot: int, player_id: Optional[str]) -> OperationResult:
        return self._run("set_lineup_slot", lambda s: set_lineup_slot(s, slot, player_id))

    def select_libero(self, player_id: Optional[str]) -> OperationResult:
        return self._run("select_libero", lambda s: select_libero(s, player_id))

    def select_setter(self, player_id: Optional[str]) -> OperationResult:
        return self._run("select_setter", lambda s: select_setter(s, player_id))

    def start_set(self, serving_team: Union[Side, str]) -> OperationResult:
        result = self._run(
            "start_set",
            lambda s: start_set(s, coerce_side(serving_team)),
            clears_history=True,
        )
        if result.ok:
            game = result.state.game
            self.set_started.emit(game.current_set, game.serving_team.value)
        return result

    # ============ Live Play ============

    def record_stat(self, player_id: Optional[str], stat: Union[Stat, str]) -> OperationResult:
        """
        Record a stat (or team action) and settle the rally if it ends one.

        Args:
            player_id: Acting player; None for Opponent Error / Opponent
                Point, optional for Ace / Serve Error
            stat: Stat or its display name
        """
        before = self._state
        result = self._run("record_stat", lambda s: record_stat(s, player_id, coerce_stat(stat)))
        if result.ok:
            self._emit_stat_signals(before, result.state, player_id, coerce_stat(stat))
        return result

    def record_kwda_assist(self, player_id: str) -> OperationResult:
        """Credit the assist owed by the last KWDA kill."""
        result = self._run("record_kwda_assist", lambda s: record_kwda_assist(s, player_id))
        if result.ok:
            self.stat_recorded.emit({"player_id": player_id, "stat": Stat.ASSIST.value})
        return result

    def substitute(self, slot: int, player_out_id: str, player_in_id: str) -> OperationResult:
        def transition(state: MatchState) -> MatchState:
            VolleyballRules.require_phase(state, MatchPhase.PLAYING)
            VolleyballRules.require_no_pending_assist(state)
            return apply_substitution(state, slot, player_out_id, player_in_id)

        result = self._run("substitute", transition)
        if result.ok:
            self.substitution_made.emit({
                "slot": slot,
                "player_out_id": player_out_id,
                "player_in_id": player_in_id,
                "home_subs": result.state.game.home_subs,
            })
        return result

    def end_set(self) -> OperationResult:
        """End the current set. Undo never reaches back across this call."""
        result = self._run("end_set", end_set, clears_history=True)
        if result.ok:
            state = result.state
            last = state.set_results[-1]
            self.set_ended.emit(last.set_number, last.winner.value)
            if state.is_match_complete:
                self.match_completed.emit({
                    "winner": state.match_winner.value,
                    "home_sets_won": state.game.home_sets_won,
                    "opponent_sets_won": state.game.opponent_sets_won,
                    "sets": [
                        {"set": r.set_number, "home": r.home_score, "opponent": r.opponent_score}
                        for r in state.set_results
                    ],
                })
        return result

    def undo(self) -> OperationResult:
        """
        Restore the state from before the last mutating call.

        A no-op (still a success) when there is nothing to undo.
        """
        previous = self._history.pop()
        if previous is None:
            logger.debug("Undo requested with empty history")
            return OperationResult.success(self._state, "Nothing to undo")

        self._state = previous
        logger.info("Undo: restored version %d", previous.version)
        self.action_undone.emit(len(self._history))
        self.state_changed.emit(self._state)
        return OperationResult.success(self._state)

    # ============ Persistence ============

    def save(self) -> OperationResult:
        """Write the current match through the persistence port."""
        if self._repository is None:
            return self._reject(PersistenceError(ErrorKind.PERSISTENCE_FAILURE, "No repository configured"))
        if self._state.phase == MatchPhase.PRE_MATCH:
            return self._reject(EngineError(ErrorKind.INVALID_PHASE, "No match to save"))
        try:
            self._repository.save(to_document(self._state))
        except SQLAlchemyError as exc:
            logger.exception("Saving match %s failed", self._state.match_id)
            return self._reject(PersistenceError(ErrorKind.PERSISTENCE_FAILURE, str(exc)))
        except EngineError as exc:
            return self._reject(exc)
        return OperationResult.success(self._state, "Match saved")

    def load(self, match_id: str) -> OperationResult:
        """Replace the live match with a saved one. History starts empty."""
        if self._repository is None:
            return self._reject(PersistenceError(ErrorKind.PERSISTENCE_FAILURE, "No repository configured"))
        try:
            document = self._repository.load(match_id)
            state = from_document(document)
        except (SQLAlchemyError, ValidationError) as exc:
            logger.exception("Loading match %s failed", match_id)
            return self._reject(PersistenceError(ErrorKind.PERSISTENCE_FAILURE, str(exc)))
        except EngineError as exc:
            return self._reject(exc)

        self._history.clear()
        self._state = state
        logger.info("Loaded match %s (%s)", state.match_id, state.phase.value)
        self.state_changed.emit(self._state)
        return OperationResult.success(self._state, "Match loaded")

    # ============ Internals ============

    def _run(self, action: str, transition: Transition, clears_history: bool = False) -> OperationResult:
        """Apply a transition, keeping history and version in step."""
        before = self._state
        try:
            after = transition(before)
        except EngineError as exc:
            return self._reject(exc, action)

        if clears_history:
            self._history.clear()
        else:
            self._history.push(before)

        self._state = replace(after, version=before.version + 1)
        self.state_changed.emit(self._state)
        return OperationResult.success(self._state)

    def _reject(self, error: EngineError, action: str = "") -> OperationResult:
        logger.warning("Rejected %s: %s (%s)", action or "operation", error.kind.value, error.message)
        self.operation_rejected.emit(error.kind.value, error.message)
        return OperationResult.failure(self._state, error)

    def _emit_stat_signals(self, before: MatchState, after: MatchState,
                           player_id: Optional[str], stat: Stat) -> None:
        if player_id is not None or stat in (Stat.ACE, Stat.SERVE_ERROR):
            self.stat_recorded.emit({
                "player_id": player_id or before.lineup.server,
                "stat": stat.value,
            })
        if after.game.home_score != before.game.home_score:
            team = Side.HOME
        elif after.game.opponent_score != before.game.opponent_score:
            team = Side.OPPONENT
        else:
            return
        self.point_awarded.emit({
            "team": team.value,
            "reason": stat.value,
            "home_score": after.game.home_score,
            "opponent_score": after.game.opponent_score,
            "rotation": after.game.rotation,
            "sideout": after.game.rotation != before.game.rotation,
        })
