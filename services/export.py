"""
Box Score Export

Generate PDF box scores for a match.
Also supports CSV export for data analysis.
"""

import csv
import logging
from datetime import datetime

from reportlab.lib.pagesizes import A4, landscape
from reportlab.lib import colors
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
from reportlab.lib.units import cm
from reportlab.platypus import (
    SimpleDocTemplate, Table, TableStyle, Paragraph, Spacer
)
from reportlab.lib.enums import TA_CENTER

from models.stat import STAT_ORDER
from engine.state import MatchState
from engine.statbook import box_score

logger = logging.getLogger(__name__)


def _short_heading(name: str) -> str:
    return name.replace("Attempt", "Att").replace("Error", "Err")


STAT_HEADER = ["Player"] + [_short_heading(s.value) for s in STAT_ORDER] + ["Hit %"]


class BoxScoreExporter:
    """
    Export a match's statistics.

    Supports:
    - PDF box score (match and current set scopes)
    - CSV data export
    """

    def __init__(self):
        self.styles = getSampleStyleSheet()
        self._setup_custom_styles()

    def _setup_custom_styles(self) -> None:
        """Set up custom paragraph styles."""
        self.styles.add(ParagraphStyle(
            name='BoxTitle',
            parent=self.styles['Heading1'],
            fontSize=20,
            alignment=TA_CENTER,
            spaceAfter=12,
        ))

        self.styles.add(ParagraphStyle(
            name='SectionHeader',
            parent=self.styles['Heading2'],
            fontSize=13,
            spaceBefore=12,
            spaceAfter=8,
        ))

    @staticmethod
    def stat_rows(state: MatchState, scope: str = "match") -> list[list[str]]:
        """Header plus one row per player and a TEAM TOTAL row."""
        book = state.set_stats if scope == "set" else state.match_stats
        rows = [list(STAT_HEADER)]
        for row in box_score(book, state.roster):
            rows.append([row.label] + [str(v) for v in row.values] + [row.hitting])
        return rows

    @staticmethod
    def rotation_rows(state: MatchState) -> list[list[str]]:
        rows = [["Rotation", "Home", "Opponent"]]
        for slot in sorted(state.rotation_scores):
            tally = state.rotation_scores[slot]
            rows.append([str(slot), str(tally.home), str(tally.opponent)])
        return rows

    @staticmethod
    def set_rows(state: MatchState) -> list[list[str]]:
        rows = [["Set", "Home", "Opponent", "Winner"]]
        for result in state.set_results:
            rows.append([
                str(result.set_number),
                str(result.home_score),
                str(result.opponent_score),
                result.winner.value,
            ])
        return rows

    def export_pdf(self, state: MatchState, filepath: str) -> bool:
        """
        Export the match box score as PDF.

        Args:
            state: Match to export
            filepath: Output file path

        Returns:
            True if export successful, False otherwise
        """
        try:
            doc = SimpleDocTemplate(
                filepath,
                pagesize=landscape(A4),
                rightMargin=1*cm,
                leftMargin=1*cm,
                topMargin=1*cm,
                bottomMargin=1*cm,
            )

            grid_style = TableStyle([
                ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
                ('FONTNAME', (0, -1), (-1, -1), 'Helvetica-Bold'),
                ('ALIGN', (1, 0), (-1, -1), 'CENTER'),
                ('GRID', (0, 0), (-1, -1), 0.5, colors.black),
                ('BACKGROUND', (0, 0), (-1, 0), colors.lightgrey),
                ('FONTSIZE', (0, 0), (-1, -1), 8),
                ('BOTTOMPADDING', (0, 0), (-1, -1), 4),
                ('TOPPADDING', (0, 0), (-1, -1), 4),
            ])

            game = state.game
            elements = [
                Paragraph(state.match_name or "Match", self.styles['BoxTitle']),
                Paragraph(
                    f"Sets: Home {game.home_sets_won} - {game.opponent_sets_won} Opponent",
                    self.styles['Normal'],
                ),
                Spacer(1, 0.4*cm),
                Paragraph("Match Statistics", self.styles['SectionHeader']),
                Table(self.stat_rows(state, "match"), style=grid_style, repeatRows=1),
                Paragraph(f"Set {game.current_set} Statistics", self.styles['SectionHeader']),
                Table(self.stat_rows(state, "set"), style=grid_style, repeatRows=1),
            ]

            if state.set_results:
                elements.append(Paragraph("Set Results", self.styles['SectionHeader']))
                elements.append(Table(self.set_rows(state), style=grid_style))

            elements.append(Paragraph("Points by Rotation", self.styles['SectionHeader']))
            elements.append(Table(self.rotation_rows(state), style=grid_style))

            elements.append(Spacer(1, 0.6*cm))
            elements.append(Paragraph(
                f"Generated {datetime.now():%Y-%m-%d %H:%M} by Sideout",
                ParagraphStyle(
                    name='Footer',
                    fontSize=8,
                    alignment=TA_CENTER,
                    textColor=colors.grey,
                )
            ))

            doc.build(elements)
            logger.info("Exported PDF box score to %s", filepath)
            return True

        except Exception:
            logger.exception("PDF export to %s failed", filepath)
            return False

    def export_csv(self, state: MatchState, filepath: str) -> bool:
        """
        Export match data as CSV for analysis.

        Args:
            state: Match to export
            filepath: Output file path

        Returns:
            True if export successful, False otherwise
        """
        try:
            with open(filepath, 'w', newline='', encoding='utf-8') as f:
                writer = csv.writer(f)

                writer.writerow(["Match", state.match_name])
                writer.writerow(["Match ID", state.match_id])
                writer.writerow(["Sets Won", state.game.home_sets_won, state.game.opponent_sets_won])
                writer.writerow([])

                writer.writerow(["Match Statistics"])
                writer.writerows(self.stat_rows(state, "match"))
                writer.writerow([])

                writer.writerow([f"Set {state.game.current_set} Statistics"])
                writer.writerows(self.stat_rows(state, "set"))
                writer.writerow([])

                if state.set_results:
                    writer.writerow(["Set Results"])
                    writer.writerows(self.set_rows(state))
                    writer.writerow([])

                writer.writerow(["Points by Rotation"])
                writer.writerows(self.rotation_rows(state))

            logger.info("Exported CSV box score to %s", filepath)
            return True

        except Exception:
            logger.exception("CSV export to %s failed", filepath)
            return False
