"""openpyxl implementation of :class:`~party_ledgers.writer.sink.TabularSink`.

The ledger workbook is loaded (or created) once per run, mutated in memory by
the renderers and written back with :meth:`WorkbookSink.save`.
"""

from __future__ import annotations

import logging
import zipfile
from pathlib import Path
from typing import Any

from openpyxl import Workbook, load_workbook
from openpyxl.styles import Alignment, Border, Font, Side
from openpyxl.utils import get_column_letter

from party_ledgers.errors import SourceAccessError
from party_ledgers.types import RawTable
from party_ledgers.writer.sink import CellRange

logger = logging.getLogger(__name__)

THIN = Side(border_style="thin", color="000000")
LINK_COLOR = "0563C1"


class WorkbookSink:
    """Tabular sink over an in-memory :class:`openpyxl.Workbook`.

    Parameters
    ----------
    workbook
        Workbook to write into.
    path
        Default destination for :meth:`save`.
    """

    def __init__(self, workbook: Workbook | None = None, path: Path | None = None) -> None:
        self.path = path
        if workbook is None:
            workbook = Workbook()
            # Fresh workbooks carry an empty default sheet until the first real one exists
            self._placeholder: str | None = workbook.active.title
        else:
            self._placeholder = None
        self.workbook = workbook

    @classmethod
    def open(cls, path: Path) -> WorkbookSink:
        """Load ``path`` when it exists, otherwise start a new workbook saved there."""
        if path.exists():
            try:
                workbook = load_workbook(path)
            except (OSError, ValueError, KeyError, zipfile.BadZipFile) as e:
                msg = f"Could not open ledger workbook {path}: {e}"
                raise SourceAccessError(msg) from e
            logger.debug("Loaded ledger workbook %s", path)
            return cls(workbook, path)

        logger.info("Creating new ledger workbook %s", path)
        return cls(path=path)

    def save(self, path: Path | None = None) -> Path:
        """Write the workbook to ``path`` (default: the path it was opened from)."""
        target = path or self.path
        if target is None:
            msg = "No output path given for the ledger workbook"
            raise ValueError(msg)
        target.parent.mkdir(parents=True, exist_ok=True)
        self.workbook.save(target)
        logger.info("Saved ledger workbook to %s", target)
        return target

    @property
    def sheet_names(self) -> list[str]:
        return [name for name in self.workbook.sheetnames if name != self._placeholder]

    def read_rows(self, sheet: str) -> RawTable:
        """Return the values of a sheet, empty cells as ``""``."""
        ws = self.workbook[sheet]
        return [["" if value is None else value for value in row] for row in ws.iter_rows(values_only=True)]

    # -------------------------------------------------------------------------
    # TabularSink
    # -------------------------------------------------------------------------

    def replace_sheet(self, name: str, index: int | None = None) -> None:
        if name in self.workbook.sheetnames:
            position = self.workbook.sheetnames.index(name)
            del self.workbook[name]
            self.workbook.create_sheet(name, position if index is None else index)
        else:
            self.workbook.create_sheet(name, index)

        if self._placeholder is not None and self._placeholder != name:
            del self.workbook[self._placeholder]
        self._placeholder = None

    def has_sheet(self, name: str) -> bool:
        return name in self.sheet_names

    def write_values(self, sheet: str, row: int, col: int, values: list[list[Any]]) -> None:
        ws = self.workbook[sheet]
        for r_offset, row_values in enumerate(values):
            for c_offset, value in enumerate(row_values):
                ws.cell(row=row + r_offset, column=col + c_offset, value=value)

    def _cells(self, sheet: str, cells: CellRange):
        ws = self.workbook[sheet]
        return ws.iter_rows(
            min_row=cells.row,
            max_row=cells.last_row,
            min_col=cells.col,
            max_col=cells.last_col,
        )

    def style_range(
        self,
        sheet: str,
        cells: CellRange,
        *,
        bold: bool | None = None,
        italic: bool | None = None,
        size: float | None = None,
        color: str | None = None,
        horizontal: str | None = None,
    ) -> None:
        for row in self._cells(sheet, cells):
            for cell in row:
                font = cell.font
                cell.font = Font(
                    name=font.name,
                    bold=font.bold if bold is None else bold,
                    italic=font.italic if italic is None else italic,
                    size=font.size if size is None else size,
                    color=font.color if color is None else color,
                    underline=font.underline,
                )
                if horizontal is not None:
                    cell.alignment = Alignment(horizontal=horizontal, vertical=cell.alignment.vertical)

    def merge(self, sheet: str, cells: CellRange) -> None:
        self.workbook[sheet].merge_cells(
            start_row=cells.row,
            start_column=cells.col,
            end_row=cells.last_row,
            end_column=cells.last_col,
        )

    def set_border(self, sheet: str, cells: CellRange, *, top: bool = False, bottom: bool = False) -> None:
        for row in self._cells(sheet, cells):
            for cell in row:
                current = cell.border
                cell.border = Border(
                    left=current.left,
                    right=current.right,
                    top=THIN if top and cell.row == cells.row else current.top,
                    bottom=THIN if bottom and cell.row == cells.last_row else current.bottom,
                )

    def set_number_format(self, sheet: str, cells: CellRange, number_format: str) -> None:
        for row in self._cells(sheet, cells):
            for cell in row:
                cell.number_format = number_format

    def set_column_widths(self, sheet: str, widths: dict[int, float]) -> None:
        ws = self.workbook[sheet]
        for col, width in widths.items():
            ws.column_dimensions[get_column_letter(col)].width = width

    def hide_column(self, sheet: str, col: int) -> None:
        self.workbook[sheet].column_dimensions[get_column_letter(col)].hidden = True

    def truncate(self, sheet: str, max_row: int, max_col: int) -> None:
        ws = self.workbook[sheet]
        if ws.max_row > max_row:
            ws.delete_rows(max_row + 1, ws.max_row - max_row)
        if ws.max_column > max_col:
            ws.delete_cols(max_col + 1, ws.max_column - max_col)

    def sheet_link(self, name: str) -> str:
        return f"#'{name}'!A1"

    def set_link(self, sheet: str, row: int, col: int, label: str, target_sheet: str) -> None:
        cell = self.workbook[sheet].cell(row=row, column=col, value=label)
        cell.hyperlink = self.sheet_link(target_sheet)
        cell.font = Font(color=LINK_COLOR, underline="single")

    def append_row(self, sheet: str, values: list[Any]) -> None:
        self.workbook[sheet].append(values)
