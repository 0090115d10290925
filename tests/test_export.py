"""
Tests for box score export.
"""

import csv
from unittest.mock import patch

from reportlab.platypus.doctemplate import LayoutError

from models.stat import Stat
from engine.match import MatchEngine
from engine.roster import Player
from services.export import BoxScoreExporter, STAT_HEADER


ROSTER = [Player.create(n, f"Player {n}", player_id=f"p{n}") for n in range(1, 8)]


def finished_set_engine() -> MatchEngine:
    engine = MatchEngine()
    engine.start_match(ROSTER, "Export Match")
    for slot in range(1, 7):
        engine.set_lineup_slot(slot, f"p{slot}")
    engine.start_set("home")
    engine.record_stat(None, Stat.ACE)
    engine.record_stat("p3", Stat.KILL)
    engine.record_stat("p3", Stat.HIT_ERROR)
    engine.end_set()
    return engine


class TestBoxScoreExporter:
    """Tests for CSV and PDF output."""

    def setup_method(self):
        self.engine = finished_set_engine()
        self.exporter = BoxScoreExporter()

    def test_stat_rows_header_and_total(self):
        rows = self.exporter.stat_rows(self.engine.state)

        assert rows[0] == STAT_HEADER
        assert rows[0][0] == "Player"
        assert rows[0][-1] == "Hit %"
        assert rows[-1][0] == "TEAM TOTAL"
        assert len(rows) == len(ROSTER) + 2

    def test_hitting_column(self):
        rows = self.exporter.stat_rows(self.engine.state)

        # p3: 1 kill, 1 error, 2 attempts
        assert rows[3][0] == "#3 Player 3"
        assert rows[3][-1] == "0.000"

    def test_set_rows(self):
        rows = self.exporter.set_rows(self.engine.state)

        assert rows[1] == ["1", "2", "1", "home"]

    def test_export_csv(self, tmp_path):
        path = tmp_path / "box.csv"

        assert self.exporter.export_csv(self.engine.state, str(path))

        with open(path, newline="", encoding="utf-8") as f:
            lines = list(csv.reader(f))
        assert lines[0] == ["Match", "Export Match"]
        assert ["Match Statistics"] in lines
        assert ["Set Results"] in lines
        assert any(line and line[0] == "TEAM TOTAL" for line in lines)

    def test_export_pdf(self, tmp_path):
        path = tmp_path / "box.pdf"

        assert self.exporter.export_pdf(self.engine.state, str(path))
        assert path.read_bytes().startswith(b"%PDF")

    def test_export_to_missing_directory_fails(self, tmp_path):
        path = tmp_path / "missing" / "box.csv"

        assert not self.exporter.export_csv(self.engine.state, str(path))

    def test_pdf_layout_failure_returns_false(self, tmp_path):
        """A reportlab build error is reported as a failed export."""
        path = tmp_path / "box.pdf"

        with patch("services.export.SimpleDocTemplate.build",
                   side_effect=LayoutError("table too large")):
            assert not self.exporter.export_pdf(self.engine.state, str(path))

    def test_csv_unexpected_failure_returns_false(self, tmp_path):
        path = tmp_path / "box.csv"

        with patch.object(BoxScoreExporter, "rotation_rows", side_effect=ValueError("bad table")):
            assert not self.exporter.export_csv(self.engine.state, str(path))
