"""
Table Writer

Persists parsed test cases as an Excel workbook or a normalised pipe table,
and raw model responses as timestamped text files.
"""

from __future__ import annotations
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Union
import logging

from openpyxl import Workbook
from openpyxl.cell.cell import ILLEGAL_CHARACTERS_RE
from openpyxl.styles import Alignment, Font
from openpyxl.utils import get_column_letter

from .exceptions import OutputWriteError
from .models import ParsedTable

logger = logging.getLogger(__name__)

# Column widths in characters, keyed by header
COLUMN_WIDTHS: Dict[str, int] = {
    "Test ID": 15,
    "Category": 12,
    "Description": 40,
    "Test Steps": 80,
    "Expected Result": 50,
    "Test Data": 30,
}
DEFAULT_COLUMN_WIDTH = 20


def _cell_text(value: str, test_id: str) -> str:
    """Drop control characters the xlsx format cannot store."""
    cleaned = ILLEGAL_CHARACTERS_RE.sub("", value)
    if cleaned != value:
        logger.warning(f"Removed control characters from a cell of {test_id}")
    return cleaned


def save_test_cases_to_excel(
    table: ParsedTable,
    output_path: Union[str, Path],
    sheet_title: str = "Test Cases",
) -> Path:
    """
    Write the table to an .xlsx workbook.

    - Bold header row, frozen.
    - One row per record, values written verbatim as text in header order.
      Control characters xlsx cannot store are dropped with a warning.
    - Fixed column widths, wrapped text in data cells.
    """
    output_path = Path(output_path)

    wb = Workbook()
    ws = wb.active
    ws.title = sheet_title

    ws.append(list(table.headers))
    bold_font = Font(bold=True)
    for col_idx in range(1, len(table.headers) + 1):
        ws.cell(row=1, column=col_idx).font = bold_font

    wrap = Alignment(wrap_text=True, vertical="top")
    for record in table.records:
        values = record.as_dict()
        ws.append([_cell_text(values[header], record.test_id) for header in table.headers])
        for cell in ws[ws.max_row]:
            # Keep "=..." and similar values as text, not formulas
            cell.data_type = "s"
            cell.alignment = wrap

    for col_idx, header in enumerate(table.headers, start=1):
        width = COLUMN_WIDTHS.get(header, DEFAULT_COLUMN_WIDTH)
        ws.column_dimensions[get_column_letter(col_idx)].width = width

    ws.freeze_panes = "A2"

    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        wb.save(str(output_path))
    except OSError as e:
        raise OutputWriteError(str(output_path), str(e)) from e

    logger.info(f"Test cases saved to {output_path}")
    return output_path


def save_test_cases_to_text(table: ParsedTable, output_path: Union[str, Path]) -> Path:
    """Write the table back out as a clean pipe table (pipes in cells escaped)."""
    output_path = Path(output_path)

    def render(values) -> str:
        cells = [str(v).replace('|', '\\|') for v in values]
        return "| " + " | ".join(cells) + " |"

    lines = [
        render(table.headers),
        "|" + "|".join("---" for _ in table.headers) + "|",
    ]
    lines.extend(render(record.as_row()) for record in table.records)

    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    except OSError as e:
        raise OutputWriteError(str(output_path), str(e)) from e

    logger.info(f"Test cases saved to {output_path}")
    return output_path


def timestamped_filename(prefix: str = "test_cases_", suffix: str = ".txt") -> str:
    """``test_cases_2024-01-31T120000123Z.txt`` style name (UTC, no ':' or '.')."""
    now = datetime.now(timezone.utc)
    stamp = now.strftime("%Y-%m-%dT%H:%M:%S.") + f"{now.microsecond // 1000:03d}Z"
    stamp = stamp.replace(":", "").replace(".", "")
    return f"{prefix}{stamp}{suffix}"


def save_raw_text(text: str, output_dir: Union[str, Path] = "output") -> Path:
    """Save the raw model response to a timestamped .txt file in ``output_dir``."""
    output_dir = Path(output_dir)
    output_path = output_dir / timestamped_filename()

    try:
        output_dir.mkdir(parents=True, exist_ok=True)
        output_path.write_text(text, encoding="utf-8")
    except OSError as e:
        raise OutputWriteError(str(output_path), str(e)) from e

    logger.info(f"Raw test cases saved to {output_path}")
    return output_path
