"""
Event Bus - Central signal hub for inter-module communication.

All modules connect to this single object rather than directly to each other,
enabling loose coupling between the match engine, persistence and any
display layer.
"""

from PySide6.QtCore import QObject, Signal


class EventBus(QObject):
    """
    Central signal hub for Sideout.

    The EventBus acts as a mediator between application components:
    - MatchEngine emits scoring events (relayed by MatchController)
    - Display layers listen and update
    - MatchController reports autosave outcomes

    Usage:
        # In MatchController
        engine.point_awarded.connect(self.event_bus.point_awarded)

        # In a scoreboard view
        self.event_bus.state_changed.connect(self._on_state_changed)
    """

    # ============ Match Lifecycle ============
    match_started = Signal(str)         # match_id
    match_loaded = Signal(str)          # match_id
    match_saved = Signal(str)           # match_id
    match_completed = Signal(dict)      # Final results dict

    # ============ Set Lifecycle ============
    set_started = Signal(int, str)      # set number, serving team
    set_ended = Signal(int, str)        # set number, winner ("home"/"opponent")

    # ============ Scoring Events ============
    state_changed = Signal(object)      # MatchState
    point_awarded = Signal(dict)        # {team, reason, home_score, opponent_score, rotation, sideout}
    stat_recorded = Signal(dict)        # {player_id, stat}
    action_undone = Signal(int)         # snapshots remaining

    # ============ Lineup Events ============
    substitution_made = Signal(dict)    # {slot, player_out_id, player_in_id, home_subs}

    # ============ Rejections ============
    operation_rejected = Signal(str, str)   # (error kind, message)

    # ============ System Events ============
    system_message = Signal(str, str)   # (level, message) - e.g., ("info", "Match saved")

    def __init__(self):
        super().__init__()

    def emit_message(self, level: str, message: str) -> None:
        """Emit a system message (info, warning, error)."""
        self.system_message.emit(level, message)
