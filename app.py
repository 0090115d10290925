"""
Sideout Application Controller

Top-level controller that wires together all application components.
"""

import logging
from typing import Optional

from PySide6.QtCore import QObject, Qt, Slot

from services.event_bus import EventBus
from services.export import BoxScoreExporter
from services.persistence import MatchRepository, SqlMatchRepository
from engine.match import MatchEngine
from engine.errors import OperationResult
from models.match import MatchPhase
from models.base import init_db

logger = logging.getLogger(__name__)


class MatchController(QObject):
    """
    Top-level application controller.

    Owns the MatchEngine, relays its signals onto the EventBus and saves
    the match through the repository after accepted actions. Autosave is
    queued on the event loop so engine calls never wait on storage;
    failures are logged and reported on the bus.
    """

    def __init__(self, repository: Optional[MatchRepository] = None,
                 event_bus: Optional[EventBus] = None, autosave: bool = True):
        super().__init__()

        if repository is None:
            init_db()
            repository = SqlMatchRepository()

        self.repository = repository
        self.event_bus = event_bus or EventBus()
        self.autosave = autosave
        self.engine = MatchEngine(repository=self.repository)
        self._saved_version: Optional[tuple[str, int]] = None

        # Wire up engine signals to event bus
        self.engine.state_changed.connect(self.event_bus.state_changed.emit)
        self.engine.point_awarded.connect(self.event_bus.point_awarded.emit)
        self.engine.stat_recorded.connect(self.event_bus.stat_recorded.emit)
        self.engine.substitution_made.connect(self.event_bus.substitution_made.emit)
        self.engine.set_started.connect(self.event_bus.set_started.emit)
        self.engine.set_ended.connect(self.event_bus.set_ended.emit)
        self.engine.match_completed.connect(self.event_bus.match_completed.emit)
        self.engine.action_undone.connect(self.event_bus.action_undone.emit)
        self.engine.operation_rejected.connect(self.event_bus.operation_rejected.emit)

        self.engine.state_changed.connect(
            self._on_state_changed, Qt.ConnectionType.QueuedConnection
        )

    @Slot(object)
    def _on_state_changed(self, _state) -> None:
        """
        Autosave the live state once the event loop gets to it.

        Several actions queued in one burst collapse into a single write.
        """
        state = self.engine.state
        if not self.autosave or state.phase == MatchPhase.PRE_MATCH:
            return
        if self._saved_version == (state.match_id, state.version):
            return
        self.save()

    def save(self) -> OperationResult:
        result = self.engine.save()
        if result.ok:
            self._saved_version = (result.state.match_id, result.state.version)
            self.event_bus.match_saved.emit(result.state.match_id)
        else:
            logger.error("Autosave failed: %s", result.message)
            self.event_bus.emit_message("error", f"Could not save match: {result.message}")
        return result

    def new_match(self, roster, name: Optional[str] = None) -> OperationResult:
        result = self.engine.start_match(roster, name)
        if result.ok:
            self.event_bus.match_started.emit(result.state.match_id)
        return result

    def load_match(self, match_id: str) -> OperationResult:
        result = self.engine.load(match_id)
        if result.ok:
            self.event_bus.match_loaded.emit(match_id)
        else:
            self.event_bus.emit_message("error", f"Could not load match: {result.message}")
        return result

    def saved_matches(self):
        """Summaries of saved matches for a load dialog."""
        return self.repository.list_matches()

    def export_box_score(self, filepath: str, format: str = "pdf") -> bool:
        """
        Export the current match box score.

        Args:
            filepath: Output file path
            format: "pdf" or "csv"

        Returns:
            True if export successful
        """
        if self.engine.state.phase == MatchPhase.PRE_MATCH:
            return False

        exporter = BoxScoreExporter()

        if format == "pdf":
            return exporter.export_pdf(self.engine.state, filepath)
        elif format == "csv":
            return exporter.export_csv(self.engine.state, filepath)

        return False
