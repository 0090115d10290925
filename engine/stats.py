"""
Stat Engine - validates and records a stat, applying derived increments to
both the match and current-set scopes and handing rally-ending stats to the
point engine.
"""

import logging
from dataclasses import replace
from typing import Optional, Union

from models.match import Side, MatchPhase
from models.stat import Stat, POINT_OUTCOMES, SERVING_STATS, TEAM_ACTIONS
from engine.errors import ErrorKind, EngineError, LineupError, ContextError
from engine.points import award_point
from engine.roster import find_player
from engine.rules import VolleyballRules
from engine.state import PendingAssist
from engine.statbook import increments_for

logger = logging.getLogger(__name__)


def coerce_stat(stat: Union[Stat, str]) -> Stat:
    """Accept a Stat or its display name."""
    if isinstance(stat, Stat):
        return stat
    try:
        return Stat(stat)
    except ValueError:
        raise EngineError(ErrorKind.UNKNOWN_STAT, f"Unknown stat {stat!r}") from None


def _tally(state, increments):
    return replace(
        state,
        match_stats=state.match_stats.increment(increments),
        set_stats=state.set_stats.increment(increments),
    )


def _log(state, line: str):
    return replace(state, point_log=(line,) + state.point_log)


def record_stat(state, player_id: Optional[str], stat: Stat):
    """
    Record one stat.

    Args:
        state: MatchState in the PLAYING phase
        player_id: Acting player; optional for team actions and serving
            stats (which go to the slot-1 server)
        stat: What happened

    Returns:
        The new MatchState

    Raises:
        EngineError: for every rejected context; ``state`` is never touched
    """
    VolleyballRules.require_phase(state, MatchPhase.PLAYING)
    VolleyballRules.require_no_pending_assist(state)

    if stat in TEAM_ACTIONS:
        return _record_team_action(state, stat)

    if stat in SERVING_STATS:
        VolleyballRules.check_serve_context(state.game.serving_team)
        server_id = state.lineup.server
        if server_id is None:
            raise LineupError(ErrorKind.EMPTY_SLOT, "No server in slot 1")
        if player_id is not None and player_id != server_id:
            raise ContextError(
                ErrorKind.INVALID_SERVE_CONTEXT,
                "Serving stats belong to the player in slot 1",
            )
        player_id = server_id

    player = find_player(state.roster, player_id)

    if stat is Stat.RECEPTION_ERROR:
        VolleyballRules.check_reception_context(state.game.serving_team)
    if stat is Stat.BLOCK:
        VolleyballRules.check_block_position(state.lineup.slot_of(player.id))

    if stat is Stat.KWDA:
        return _record_kwda_kill(state, player)

    new_state = _tally(state, increments_for(stat, player.id, state.lineup.setter))

    winner = POINT_OUTCOMES.get(stat)
    if winner is not None:
        new_state = award_point(new_state, winner, stat)
    prefix = "O" if winner is Side.OPPONENT else "H"

    logger.info("Recorded %s for %s", stat.value, player.label)
    return _log(new_state, f"{prefix}: {stat.value} by {player.label}")


def _record_team_action(state, stat: Stat):
    if stat is Stat.OPPONENT_ERROR:
        new_state = award_point(state, Side.HOME, stat)
        return _log(new_state, "H: Opponent Error!")
    new_state = award_point(state, Side.OPPONENT, stat)
    return _log(new_state, "O: Point Opponent")


def _record_kwda_kill(state, attacker):
    """First half of a KWDA: the kill and the point, assist still owed."""
    new_state = _tally(state, increments_for(Stat.KILL, attacker.id))
    new_state = award_point(new_state, Side.HOME, Stat.KWDA)
    new_state = _log(new_state, f"H: KWDA Kill by {attacker.label}")
    logger.info("KWDA kill by %s, waiting for assist", attacker.label)
    return replace(new_state, pending_assist=PendingAssist(attacker_id=attacker.id))


def record_kwda_assist(state, player_id: str):
    """Second half of a KWDA: credit the assisting player."""
    if state.pending_assist is None:
        raise EngineError(ErrorKind.NO_PENDING_ASSIST, "No KWDA kill is waiting for an assist")

    player = find_player(state.roster, player_id)
    new_state = _tally(state, increments_for(Stat.ASSIST, player.id))
    new_state = _log(new_state, f"H: Assist by {player.label}")

    logger.info("KWDA assist by %s", player.label)
    return replace(new_state, pending_assist=None)
