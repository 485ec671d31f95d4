"""Display-independent building blocks: tables, info panels and tree nodes."""

from __future__ import annotations

import enum
from collections.abc import Callable, Iterable, Iterator, Sequence
from dataclasses import dataclass, field
from typing import Any

_KNOWN_COLORS = frozenset({"green", "red", "yellow", "blue", "aqua", "darkcyan", "gray"})


class Align(enum.IntEnum):
    """Horizontal alignment of a table cell."""

    LEFT = 0
    CENTER = 1
    RIGHT = 2


@dataclass(frozen=True)
class Column:
    """A table column; a width of 0 lets the column expand."""

    title: str
    width: int = 0
    align: Align = Align.LEFT
    hidden: bool = False


@dataclass
class Cell:
    """One table cell."""

    text: str
    align: Align = Align.LEFT
    max_width: int = 0
    expansion: int = 0
    color: str | None = None
    bold: bool = False
    selectable: bool = True


class Table:
    """Rows of cells under a fixed header row; data rows are counted from 0.

    on_select, when set, is called with the data row index when a data row
    is selected.
    """

    def __init__(self, columns: Sequence[Column]) -> None:
        self._columns = list(columns)
        self._rows: list[dict[int, Cell]] = []
        self.selected_row = 1
        self.on_select: Callable[[int], None] | None = None
        self._render_header()

    @property
    def columns(self) -> tuple[Column, ...]:
        """The current column definitions."""
        return tuple(self._columns)

    @property
    def data_rows(self) -> list[list[Cell]]:
        """The cells of every data row, in column order."""
        return [self._cells(row) for row in range(1, len(self._rows))]

    def set_columns(self, columns: Sequence[Column]) -> None:
        """Replace the column definitions and redraw the header."""
        self._columns = list(columns)
        self._render_header()

    def header(self) -> list[Cell]:
        """The header cells, in column order."""
        return self._cells(0)

    def add_row(self, *args: str) -> None:
        """Append a data row; values beyond the columns and hidden columns are dropped."""
        row = len(self._rows)
        for index, (column, value) in enumerate(zip(self._columns, args)):
            if column.hidden:
                continue
            self._set_cell(row, index, self._cell(column, value))

    def clear_data(self) -> int:
        """Remove all data rows, keeping the header; return how many were removed."""
        removed = self.data_row_count()
        self._rows = self._rows[:1]
        return removed

    def set_row_color(self, data_row: int, color: str) -> None:
        """Set the text color of every cell in a data row."""
        row = data_row + 1
        if 0 <= row < len(self._rows):
            for cell in self._rows[row].values():
                cell.color = color

    def data_row_count(self) -> int:
        """The number of data rows."""
        return max(len(self._rows) - 1, 0)

    def select(self, row: int) -> None:
        """Select a table row; selecting a data row reports its data index to on_select."""
        self.selected_row = row
        if row > 0 and self.on_select is not None:
            self.on_select(row - 1)

    def _render_header(self) -> None:
        for index, column in enumerate(self._columns):
            if column.hidden:
                continue
            cell = self._cell(column, column.title)
            cell.color = "yellow"
            cell.bold = True
            cell.selectable = False
            self._set_cell(0, index, cell)

    @staticmethod
    def _cell(column: Column, text: str) -> Cell:
        if column.width > 0:
            return Cell(text=text, align=column.align, max_width=column.width)
        return Cell(text=text, align=column.align, expansion=1)

    def _set_cell(self, row: int, column: int, cell: Cell) -> None:
        while len(self._rows) <= row:
            self._rows.append({})
        self._rows[row][column] = cell

    def _cells(self, row: int) -> list[Cell]:
        if row >= len(self._rows):
            return []
        cells = self._rows[row]
        return [cells[column] for column in sorted(cells)]


@dataclass
class InfoItem:
    """A label and value shown in an info panel; color None means the default."""

    label: str
    value: str
    color: str | None = None


@dataclass
class InfoSection:
    """Info items under an optional title."""

    title: str = ""
    items: list[InfoItem] = field(default_factory=list)


def color_tag(color: str | None) -> str:
    """Return the markup tag for a color, falling back to white."""
    return color if color in _KNOWN_COLORS else "white"


def render_sections(sections: Iterable[InfoSection]) -> str:
    """Render sections of label/value pairs as markup text."""
    parts = []
    for position, section in enumerate(sections):
        if position > 0:
            parts.append("\n")
        if section.title:
            parts.append(f"[yellow::b]{section.title}[-:-:-]\n")
        for item in section.items:
            value_color = "white" if item.color is None else color_tag(item.color)
            parts.append(f"  [gray]{item.label:<20}[{value_color}]{item.value}[-]\n")
    return "".join(parts)


def render_items(items: Iterable[InfoItem]) -> str:
    """Render label/value pairs without a section title."""
    return render_sections([InfoSection(items=list(items))])


@dataclass(eq=False)
class TreeNode:
    """A node of a display tree, carrying text and an optional reference."""

    text: str
    reference: Any = None
    color: str | None = None
    selectable: bool = True
    expanded: bool = True
    children: list[TreeNode] = field(default_factory=list)

    def add_child(self, child: TreeNode) -> TreeNode:
        """Append a child and return this node."""
        self.children.append(child)
        return self

    def clear_children(self) -> TreeNode:
        """Remove all children and return this node."""
        self.children.clear()
        return self

    def toggle(self) -> None:
        """Flip between expanded and collapsed."""
        self.expanded = not self.expanded

    def walk(self) -> Iterator[TreeNode]:
        """Yield this node and all its descendants, depth first."""
        yield self
        for child in self.children:
            yield from child.walk()