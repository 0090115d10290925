"""
Engine error taxonomy and the result type returned by every public operation.

Components raise ``EngineError`` subclasses; ``MatchEngine`` catches them at
its boundary and hands the caller an ``OperationResult`` instead.
"""

import enum
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from engine.state import MatchState


class ErrorKind(enum.Enum):
    """Caller-visible rejection reasons."""
    INVALID_SERVE_CONTEXT = "InvalidServeContext"
    INVALID_RECEPTION_CONTEXT = "InvalidReceptionContext"
    ILLEGAL_BLOCK_POSITION = "IllegalBlockPosition"
    ILLEGAL_CROSS_GROUP = "IllegalCrossGroup"
    INSUFFICIENT_ROSTER = "InsufficientRoster"
    EMPTY_SLOT = "EmptySlot"
    INVALID_ROSTER = "InvalidRoster"
    INVALID_SLOT = "InvalidSlot"
    INVALID_SIDE = "InvalidSide"
    UNKNOWN_PLAYER = "UnknownPlayer"
    UNKNOWN_STAT = "UnknownStat"
    PLAYER_ALREADY_ON_COURT = "PlayerAlreadyOnCourt"
    INVALID_SUBSTITUTION = "InvalidSubstitution"
    INVALID_PHASE = "InvalidPhase"
    MATCH_FINISHED = "MatchFinished"
    ASSIST_PENDING = "AssistPending"
    NO_PENDING_ASSIST = "NoPendingAssist"
    MATCH_NOT_FOUND = "MatchNotFound"
    PERSISTENCE_FAILURE = "PersistenceFailure"


class EngineError(Exception):
    """Base class for every rejection raised inside the engine."""

    def __init__(self, kind: ErrorKind, message: str = ""):
        super().__init__(message or kind.value)
        self.kind = kind
        self.message = message or kind.value


class ContextError(EngineError):
    """A stat was recorded in a rally context that cannot produce it."""


class LineupError(EngineError):
    """Roster, slot or player reference problems."""


class SubstitutionError(EngineError):
    """A substitution broke the interchange rules."""


class PhaseError(EngineError):
    """The operation is not allowed in the current match phase."""


class PersistenceError(EngineError):
    """The persistence port could not save or load a match."""


class MatchNotFoundError(PersistenceError):
    """No saved match has the requested id."""

    def __init__(self, match_id: str):
        super().__init__(ErrorKind.MATCH_NOT_FOUND, f"No saved match with id {match_id}")
        self.match_id = match_id


@dataclass(frozen=True)
class OperationResult:
    """
    Outcome of a public engine operation.

    ``state`` is always the live state after the call: the new state on
    success, the untouched previous state on rejection.
    """
    ok: bool
    state: "MatchState"
    error: Optional[ErrorKind] = None
    message: str = ""

    def __bool__(self) -> bool:
        return self.ok

    @classmethod
    def success(cls, state: "MatchState", message: str = "") -> "OperationResult":
        return cls(ok=True, state=state, message=message)

    @classmethod
    def failure(cls, state: "MatchState", error: EngineError) -> "OperationResult":
        return cls(ok=False, state=state, error=error.kind, message=error.message)
