"""
Tests for the MatchController wiring.
"""

import sys
from unittest.mock import MagicMock

import pytest
from PySide6.QtCore import QCoreApplication
from sqlalchemy.exc import OperationalError

from models.base import make_engine, make_session_factory, init_db
from models.stat import Stat
from engine.errors import MatchNotFoundError
from engine.roster import Player
from services.persistence import MatchRepository, SqlMatchRepository
from app import MatchController


ROSTER = [Player.create(n, f"Player {n}", player_id=f"p{n}") for n in range(1, 8)]


# Autosave is queued, so the tests need an application to process events
@pytest.fixture(scope="session")
def qapp():
    """Create a QCoreApplication instance for the test session."""
    app = QCoreApplication.instance()
    if app is None:
        app = QCoreApplication(sys.argv)
    yield app


@pytest.fixture
def repository(tmp_path):
    db = make_engine(f"sqlite:///{tmp_path / 'app.db'}")
    init_db(bind=db)
    return SqlMatchRepository(make_session_factory(db))


class FailingRepository(MatchRepository):
    """Repository whose storage is unavailable."""

    def save(self, document):
        raise OperationalError("INSERT", {}, Exception("disk I/O error"))

    def load(self, match_id):
        raise MatchNotFoundError(match_id)


class TestMatchController:
    """Tests for autosave and event relaying."""

    def test_autosave_waits_for_event_loop(self, qapp, repository):
        """Engine calls return before anything is written."""
        controller = MatchController(repository=repository)
        saved_mock = MagicMock()
        controller.event_bus.match_saved.connect(saved_mock)

        controller.new_match(ROSTER, "Autosaved")
        controller.engine.set_lineup_slot(1, "p1")

        saved_mock.assert_not_called()
        assert repository.list_matches() == []

        qapp.processEvents()

        saved_mock.assert_called_once()
        document = repository.load(controller.engine.state.match_id)
        assert document.lineup[1] == "p1"

    def test_autosave_after_each_burst(self, qapp, repository):
        controller = MatchController(repository=repository)
        saved_mock = MagicMock()
        controller.event_bus.match_saved.connect(saved_mock)

        controller.new_match(ROSTER, "Autosaved")
        qapp.processEvents()
        controller.engine.set_lineup_slot(2, "p2")
        qapp.processEvents()

        assert saved_mock.call_count == 2
        document = repository.load(controller.engine.state.match_id)
        assert document.lineup[2] == "p2"

    def test_engine_signals_relayed(self, qapp, repository):
        controller = MatchController(repository=repository)
        point_mock = MagicMock()
        started_mock = MagicMock()
        controller.event_bus.point_awarded.connect(point_mock)
        controller.event_bus.match_started.connect(started_mock)

        controller.new_match(ROSTER)
        for slot in range(1, 7):
            controller.engine.set_lineup_slot(slot, f"p{slot}")
        controller.engine.start_set("home")
        controller.engine.record_stat(None, Stat.ACE)

        started_mock.assert_called_once()
        point_mock.assert_called_once()

    def test_save_failure_reported_not_raised(self, qapp):
        controller = MatchController(repository=FailingRepository())
        message_mock = MagicMock()
        controller.event_bus.system_message.connect(message_mock)

        result = controller.new_match(ROSTER)
        qapp.processEvents()

        assert result.ok
        level, text = message_mock.call_args[0]
        assert level == "error"
        assert text.startswith("Could not save match")

    def test_load_match(self, qapp, repository):
        first = MatchController(repository=repository)
        first.new_match(ROSTER, "Reload Me")
        qapp.processEvents()
        match_id = first.engine.state.match_id

        second = MatchController(repository=repository, autosave=False)
        loaded_mock = MagicMock()
        second.event_bus.match_loaded.connect(loaded_mock)

        assert second.load_match(match_id).ok
        assert second.engine.state.match_name == "Reload Me"
        loaded_mock.assert_called_once_with(match_id)
        assert [s.match_id for s in second.saved_matches()] == [match_id]

    def test_export_box_score(self, qapp, repository, tmp_path):
        controller = MatchController(repository=repository, autosave=False)

        assert not controller.export_box_score(str(tmp_path / "none.csv"), "csv")

        controller.new_match(ROSTER)

        assert controller.export_box_score(str(tmp_path / "box.csv"), "csv")
        assert controller.export_box_score(str(tmp_path / "box.pdf"), "pdf")
        assert not controller.export_box_score(str(tmp_path / "box.xls"), "xls")
