"""
Point Engine - settles one rally.

Decides who gets the serve attempt, updates the score and the rotation
score table, hands the serve to the winner and rotates on a sideout.
"""

import logging
from dataclasses import replace

from models.match import Side
from models.stat import Stat, SIDEOUT_REASONS
from engine.lineup import next_rotation
from engine.state import RotationTally

logger = logging.getLogger(__name__)


def rotate(state):
    """Rotate the lineup one slot and advance the rotation counter."""
    game = replace(state.game, rotation=next_rotation(state.game.rotation))
    return replace(state, lineup=state.lineup.rotate(), game=game)


def award_point(state, scoring_team: Side, reason: Stat):
    """
    Award a rally to ``scoring_team``.

    Args:
        state: MatchState before the point
        scoring_team: Side that won the rally
        reason: Stat or action that ended the rally

    Returns:
        The new MatchState
    """
    game = state.game
    serving_before = game.serving_team

    # Serve attempt goes to the server who started the rally. When home
    # breaks serve, the player about to rotate into slot 1 gets it.
    server_id = None
    if serving_before is Side.HOME:
        server_id = state.lineup.player_at(1)
    elif scoring_team is Side.HOME and reason in SIDEOUT_REASONS:
        server_id = state.lineup.player_at(2)

    match_stats, set_stats = state.match_stats, state.set_stats
    if server_id:
        serve = [(server_id, Stat.SERVE_ATTEMPT)]
        match_stats = match_stats.increment(serve)
        set_stats = set_stats.increment(serve)

    rotation_scores = dict(state.rotation_scores)
    tally = rotation_scores.get(game.rotation, RotationTally())
    rotation_scores[game.rotation] = tally.credit(scoring_team)

    game = replace(
        game,
        home_score=game.home_score + (1 if scoring_team is Side.HOME else 0),
        opponent_score=game.opponent_score + (1 if scoring_team is Side.OPPONENT else 0),
        serving_team=scoring_team,
    )
    new_state = replace(
        state,
        game=game,
        match_stats=match_stats,
        set_stats=set_stats,
        rotation_scores=rotation_scores,
    )

    logger.info(
        "Point %s (%s): home %d - %d opponent",
        scoring_team.value, reason.value, game.home_score, game.opponent_score,
    )

    if scoring_team is Side.HOME and serving_before is Side.OPPONENT:
        new_state = rotate(new_state)
        logger.debug("Sideout, rotation now %d", new_state.game.rotation)

    return new_state
