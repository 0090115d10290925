"""
Rules - volleyball legality checks shared by the engine operations.

Every check either returns quietly or raises the matching EngineError, and
none of them touch state.
"""

from typing import Optional

from config import MATCH_SETTINGS
from models.match import Side, MatchPhase
from engine.errors import ErrorKind, ContextError, PhaseError


class VolleyballRules:
    """
    The subset of volleyball rules the scorer enforces.

    Substitution counts are tallied but not limited, and libero serving
    restrictions are not enforced.
    """

    SETS_TO_WIN = MATCH_SETTINGS.sets_to_win
    BACK_ROW_SLOTS = MATCH_SETTINGS.back_row_slots

    # ============ Phase Checks ============

    @staticmethod
    def require_phase(state, *phases: MatchPhase) -> None:
        """Reject the call unless the match is in one of ``phases``."""
        if state.phase in phases:
            return
        if state.phase == MatchPhase.POST_MATCH:
            raise PhaseError(ErrorKind.MATCH_FINISHED, "The match is over")
        allowed = ", ".join(p.value for p in phases)
        raise PhaseError(
            ErrorKind.INVALID_PHASE,
            f"Not allowed during {state.phase.value} (needs {allowed})",
        )

    @staticmethod
    def require_no_pending_assist(state) -> None:
        if state.pending_assist is not None:
            raise PhaseError(
                ErrorKind.ASSIST_PENDING,
                "Assign the assist for the KWDA kill first",
            )

    # ============ Rally Context Checks ============

    @staticmethod
    def check_serve_context(serving_team: Optional[Side]) -> None:
        """Ace and Serve Error need the home team serving."""
        if serving_team is not Side.HOME:
            raise ContextError(
                ErrorKind.INVALID_SERVE_CONTEXT,
                "Serving stats can only be recorded while home is serving",
            )

    @staticmethod
    def check_reception_context(serving_team: Optional[Side]) -> None:
        """A reception error means the home team was receiving."""
        if serving_team is Side.HOME:
            raise ContextError(
                ErrorKind.INVALID_RECEPTION_CONTEXT,
                "Reception errors cannot happen while home is serving",
            )

    @classmethod
    def check_block_position(cls, slot: Optional[int]) -> None:
        """Back-row players cannot be credited with a block."""
        if slot in cls.BACK_ROW_SLOTS:
            raise ContextError(
                ErrorKind.ILLEGAL_BLOCK_POSITION,
                f"Slot {slot} is back row and cannot block",
            )

    # ============ Set / Match Outcome ============

    @staticmethod
    def determine_set_winner(home_score: int, opponent_score: int) -> Side:
        """
        Side that won the set.

        The scorer ends the set manually; a tied score goes to the opponent.
        """
        if home_score > opponent_score:
            return Side.HOME
        return Side.OPPONENT

    @classmethod
    def is_match_won(cls, home_sets_won: int, opponent_sets_won: int) -> bool:
        return home_sets_won >= cls.SETS_TO_WIN or opponent_sets_won >= cls.SETS_TO_WIN
