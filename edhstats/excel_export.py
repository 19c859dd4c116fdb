"""Excel export of finalized stats tables."""

import logging
from pathlib import Path
from typing import Any, Optional

import openpyxl
from openpyxl.styles import Font

from .constants import WINDOW_TOTAL
from .models import StatRecord
from .ranking import Medals, medal_for

logger = logging.getLogger('edhstats.excel_export')

COLUMNS = [
    'Name',
    'Games',
    'Wins',
    'Win %',
    'Avg Win Turn',
    'Avg First Elim Turn',
    'Avg Elim Turn',
    'Made C/D/N/O %',
    'Taken C/D/N/O %',
    'Medal',
]


def _pct_cell(pct: dict[str, float]) -> str:
    return ' / '.join(str(pct.get(k, 0)) for k in ('C', 'D', 'N', 'O'))


def record_row(record: StatRecord, window: str = WINDOW_TOTAL, medals: Optional[Medals] = None) -> list[Any]:
    """Cells for one record in the given window."""
    medal = medal_for(medals, record.identity, f'winrate_{window}') if medals else None
    return [
        record.label,
        record.games_in(window),
        record.wins_in(window),
        float(record.winrate.get(window, 0)),
        record.avg_win_turn,
        record.avg_first_elim_turn,
        record.avg_elim_turn,
        _pct_cell(record.elims_made_pct),
        _pct_cell(record.elims_taken_pct),
        medal or '',
    ]


def _write_sheet(ws, records: list[StatRecord], window: str, medals: Optional[Medals]) -> None:
    ws.append(COLUMNS)
    for cell in ws[1]:
        cell.font = Font(bold=True)
    for record in records:
        ws.append(record_row(record, window, medals))


def export_to_excel(
    excel_path: str | Path,
    players: list[StatRecord],
    decks: list[StatRecord],
    colors: Optional[list[StatRecord]] = None,
    window: str = WINDOW_TOTAL,
    medals: Optional[dict[str, Medals]] = None,
) -> Path:
    """
    Write Players, Decks and Colors sheets to a new workbook.

    Args:
        excel_path: Destination .xlsx path
        players: Finalized player records
        decks: Finalized deck records
        colors: Optional colour-group records
        window: Window whose counts are written
        medals: Optional {'players': Medals, 'decks': Medals}; the Medal
            column shows the win-rate rank for the window

    Returns:
        Path of the saved workbook
    """
    excel_path = Path(excel_path)
    medals = medals or {}

    wb = openpyxl.Workbook()
    ws = wb.active
    ws.title = 'Players'
    _write_sheet(ws, players, window, medals.get('players'))

    _write_sheet(wb.create_sheet('Decks'), decks, window, medals.get('decks'))

    if colors is not None:
        _write_sheet(wb.create_sheet('Colors'), colors, window, None)

    excel_path.parent.mkdir(parents=True, exist_ok=True)
    wb.save(excel_path)
    logger.info(f'Stats saved to {excel_path}')
    return excel_path
