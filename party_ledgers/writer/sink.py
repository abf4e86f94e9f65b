"""Write-side port used by the ledger renderers.

Renderers address cells with 1-based row/column coordinates and never read
back what they wrote, so any tabular backend implementing
:class:`TabularSink` can host the ledgers.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol


@dataclass(frozen=True)
class CellRange:
    """Rectangular block of cells, 1-based and inclusive of its origin."""

    row: int
    col: int
    rows: int = 1
    cols: int = 1

    @property
    def last_row(self) -> int:
        return self.row + self.rows - 1

    @property
    def last_col(self) -> int:
        return self.col + self.cols - 1


class TabularSink(Protocol):
    """Presentation target for rendered sheets."""

    def replace_sheet(self, name: str, index: int | None = None) -> None:
        """Create ``name``, or clear it when it exists, keeping its position."""
        ...

    def has_sheet(self, name: str) -> bool: ...

    def write_values(self, sheet: str, row: int, col: int, values: list[list[Any]]) -> None:
        """Write a rectangular block of values with its top-left at ``(row, col)``."""
        ...

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
        """Apply text styling; ``None`` leaves an attribute unchanged."""
        ...

    def merge(self, sheet: str, cells: CellRange) -> None: ...

    def set_border(self, sheet: str, cells: CellRange, *, top: bool = False, bottom: bool = False) -> None:
        """Draw thin borders along the top and/or bottom edge of a range."""
        ...

    def set_number_format(self, sheet: str, cells: CellRange, number_format: str) -> None: ...

    def set_column_widths(self, sheet: str, widths: dict[int, float]) -> None: ...

    def hide_column(self, sheet: str, col: int) -> None: ...

    def truncate(self, sheet: str, max_row: int, max_col: int) -> None:
        """Delete every row after ``max_row`` and every column after ``max_col``."""
        ...

    def sheet_link(self, name: str) -> str:
        """Return an address that navigates to the top of sheet ``name``."""
        ...

    def set_link(self, sheet: str, row: int, col: int, label: str, target_sheet: str) -> None:
        """Write ``label`` as a link to ``target_sheet``."""
        ...

    def append_row(self, sheet: str, values: list[Any]) -> None:
        """Write ``values`` below the last used row."""
        ...
