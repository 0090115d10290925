"""
Match and set transitions: match start, lineup setup, set start and set end.
"""

import logging
from dataclasses import replace
from datetime import date
from typing import Iterable, Optional, Union

from models.match import Side, MatchPhase
from engine.errors import ErrorKind, EngineError, LineupError
from engine.lineup import Lineup
from engine.roster import RosterEntry, build_roster, find_player
from engine.rules import VolleyballRules
from engine.state import GameState, MatchState, SetResult, empty_rotation_scores
from engine.statbook import StatBook
from engine.substitutions import SubstitutionLedger

logger = logging.getLogger(__name__)


def coerce_side(side: Union[Side, str]) -> Side:
    """Accept a Side or its value ('home' / 'opponent')."""
    if isinstance(side, Side):
        return side
    try:
        return Side(side)
    except ValueError:
        raise EngineError(ErrorKind.INVALID_SIDE, f"Unknown team {side!r}") from None


def start_match(entries: Iterable[RosterEntry], name: Optional[str] = None) -> MatchState:
    """
    Fresh match for a roster, waiting for the first lineup.

    Raises:
        LineupError: InsufficientRoster / InvalidRoster
    """
    roster = build_roster(entries)
    player_ids = [p.id for p in roster]
    state = MatchState(
        phase=MatchPhase.LINEUP_SETUP,
        match_name=name or f"Match started on {date.today():%Y-%m-%d}",
        roster=roster,
        match_stats=StatBook.empty(player_ids),
        set_stats=StatBook.empty(player_ids),
    )
    logger.info("Match %s started with %d players", state.match_id, len(roster))
    return state


def set_lineup_slot(state: MatchState, slot: int, player_id: Optional[str]) -> MatchState:
    """Place a player in a rotation slot during setup (None clears it)."""
    VolleyballRules.require_phase(state, MatchPhase.LINEUP_SETUP)
    if player_id is not None:
        player = find_player(state.roster, player_id)
        current = state.lineup.slot_of(player_id)
        if (current is not None and current != slot) or state.lineup.libero == player_id:
            raise LineupError(
                ErrorKind.PLAYER_ALREADY_ON_COURT,
                f"{player.label} is already on the court",
            )
    return replace(state, lineup=state.lineup.with_slot(slot, player_id))


def select_libero(state: MatchState, player_id: Optional[str]) -> MatchState:
    VolleyballRules.require_phase(state, MatchPhase.LINEUP_SETUP)
    if player_id is not None:
        player = find_player(state.roster, player_id)
        if state.lineup.slot_of(player_id) is not None:
            raise LineupError(
                ErrorKind.PLAYER_ALREADY_ON_COURT,
                f"{player.label} already holds a rotation slot",
            )
    return replace(state, lineup=state.lineup.with_libero(player_id))


def select_setter(state: MatchState, player_id: Optional[str]) -> MatchState:
    VolleyballRules.require_phase(state, MatchPhase.LINEUP_SETUP)
    if player_id is not None:
        find_player(state.roster, player_id)
    return replace(state, lineup=state.lineup.with_setter(player_id))


def start_set(state: MatchState, serving_team: Side) -> MatchState:
    """
    Begin play with the configured lineup.

    Seeds the substitution families, fills the bench, and resets the
    set-scope stats, rotation score table, scores and substitution count.
    """
    VolleyballRules.require_phase(state, MatchPhase.LINEUP_SETUP)
    lineup = state.lineup
    for slot, occupant in enumerate(lineup.slots, start=1):
        if occupant is None:
            raise LineupError(ErrorKind.EMPTY_SLOT, f"Slot {slot} is empty")

    on_court = lineup.on_court_ids
    game = replace(
        state.game,
        serving_team=serving_team,
        home_score=0,
        opponent_score=0,
        home_subs=0,
    )
    logger.info("Set %d started, %s serving", game.current_set, serving_team.value)
    return replace(
        state,
        phase=MatchPhase.PLAYING,
        game=game,
        bench=tuple(p.id for p in state.roster if p.id not in on_court),
        ledger=SubstitutionLedger.seeded(lineup.player_ids),
        set_stats=StatBook.empty(p.id for p in state.roster),
        rotation_scores=empty_rotation_scores(),
        point_log=(),
        pending_assist=None,
    )


def end_set(state: MatchState) -> MatchState:
    """
    Close the current set and either finish the match or return to setup.
    """
    VolleyballRules.require_phase(state, MatchPhase.PLAYING)
    VolleyballRules.require_no_pending_assist(state)

    game = state.game
    winner = VolleyballRules.determine_set_winner(game.home_score, game.opponent_score)
    home_sets = game.home_sets_won + (1 if winner is Side.HOME else 0)
    opponent_sets = game.opponent_sets_won + (1 if winner is Side.OPPONENT else 0)
    result = SetResult(
        set_number=game.current_set,
        home_score=game.home_score,
        opponent_score=game.opponent_score,
        winner=winner,
    )
    set_results = state.set_results + (result,)
    logger.info(
        "Set %d to %s (%d-%d), sets %d-%d",
        game.current_set, winner.value, game.home_score, game.opponent_score,
        home_sets, opponent_sets,
    )

    if VolleyballRules.is_match_won(home_sets, opponent_sets):
        game = replace(game, home_sets_won=home_sets, opponent_sets_won=opponent_sets)
        logger.info("Match %s complete", state.match_id)
        return replace(
            state,
            phase=MatchPhase.POST_MATCH,
            game=game,
            set_results=set_results,
        )

    game = GameState(
        home_sets_won=home_sets,
        opponent_sets_won=opponent_sets,
        current_set=game.current_set + 1,
    )
    return replace(
        state,
        phase=MatchPhase.LINEUP_SETUP,
        game=game,
        lineup=Lineup(),
        bench=(),
        ledger=SubstitutionLedger(),
        point_log=(),
        set_results=set_results,
    )
