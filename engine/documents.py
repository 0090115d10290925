"""
Conversion between MatchState and the serializable MatchDocument.
"""

from models.schemas import (
    MatchDocument,
    PlayerSchema,
    GameStateSchema,
    RotationTallySchema,
    SetResultSchema,
)
from models.stat import Stat
from engine.lineup import Lineup, SLOTS
from engine.roster import Player
from engine.state import GameState, MatchState, PendingAssist, RotationTally, SetResult
from engine.statbook import StatBook
from engine.substitutions import SubstitutionLedger


def _rows_out(book: StatBook) -> dict[str, dict[str, int]]:
    return {
        pid: {stat.value: count for stat, count in row.items()}
        for pid, row in book.counts.items()
    }


def _rows_in(rows: dict[str, dict[str, int]]) -> StatBook:
    return StatBook(counts={
        pid: {Stat(name): count for name, count in row.items()}
        for pid, row in rows.items()
    })


def to_document(state: MatchState) -> MatchDocument:
    """Serialize every persisted field of a match."""
    return MatchDocument(
        match_id=state.match_id,
        match_name=state.match_name,
        phase=state.phase,
        game=GameStateSchema(**vars(state.game)),
        roster=[PlayerSchema(id=p.id, number=p.number, name=p.name) for p in state.roster],
        lineup={slot: state.lineup.player_at(slot) for slot in SLOTS},
        libero=state.lineup.libero,
        setter_id=state.lineup.setter,
        bench=list(state.bench),
        point_log=list(state.point_log),
        player_stats=_rows_out(state.match_stats),
        set_stats=_rows_out(state.set_stats),
        rotation_scores={
            slot: RotationTallySchema(home=t.home, opponent=t.opponent)
            for slot, t in state.rotation_scores.items()
        },
        sub_groups=state.ledger.to_groups(),
        set_results=[SetResultSchema(**vars(r)) for r in state.set_results],
        pending_assist_for=state.pending_assist.attacker_id if state.pending_assist else None,
    )


def from_document(document: MatchDocument) -> MatchState:
    """Rebuild a MatchState from a saved document."""
    rotation_scores = {slot: RotationTally() for slot in SLOTS}
    rotation_scores.update({
        slot: RotationTally(home=t.home, opponent=t.opponent)
        for slot, t in document.rotation_scores.items()
    })
    return MatchState(
        phase=document.phase,
        match_id=document.match_id,
        match_name=document.match_name,
        game=GameState(**document.game.model_dump()),
        roster=tuple(Player(id=p.id, number=p.number, name=p.name) for p in document.roster),
        lineup=Lineup(
            slots=tuple(document.lineup.get(slot) for slot in SLOTS),
            libero=document.libero,
            setter=document.setter_id,
        ),
        ledger=SubstitutionLedger.from_groups(document.sub_groups),
        bench=tuple(document.bench),
        match_stats=_rows_in(document.player_stats),
        set_stats=_rows_in(document.set_stats),
        rotation_scores=rotation_scores,
        point_log=tuple(document.point_log),
        set_results=tuple(SetResult(**r.model_dump()) for r in document.set_results),
        pending_assist=(
            PendingAssist(attacker_id=document.pending_assist_for)
            if document.pending_assist_for else None
        ),
    )
