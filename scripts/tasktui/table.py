"""
Table view model: columns, rows, sort order, highlight and header visibility.

Rendering goes through rich Text so the same frame can be shown by the
Textual host or printed once to a plain console.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from rich.style import Style
from rich.text import Text

from tasktui.formatter import (
    COLUMN_CREATED,
    COLUMN_DUE_DATE,
    COLUMN_ID,
    COLUMN_NOTES,
    COLUMN_PRIORITY,
    COLUMN_STATUS,
    COLUMN_TITLE,
    NOTE_SEPARATOR,
    Cell,
    DisplayRow,
)
from tasktui.keys import Action, resolve

ELLIPSIS = "…"
LINE_BREAK_GLYPH = "↵"
DANGER_STYLE = Style(color="#cc241d")


class ColumnKind(Enum):
    NUMERIC = "numeric"
    TEXT = "text"
    TIMESTAMP = "timestamp"


class Direction(Enum):
    UP = -1
    DOWN = 1


@dataclass(frozen=True)
class Column:
    """Static column definition. width is a hard limit in terminal cells."""

    key: str
    title: str
    width: int
    kind: ColumnKind = ColumnKind.TEXT
    align: str = "left"
    style: Style = field(default_factory=Style)


@dataclass(frozen=True)
class Border:
    top: str
    left: str
    right: str
    bottom: str
    top_right: str
    top_left: str
    bottom_right: str
    bottom_left: str
    top_junction: str
    left_junction: str
    right_junction: str
    bottom_junction: str
    inner_junction: str
    inner_divider: str


ROUNDED_BORDER = Border(
    top="─",
    left="│",
    right="│",
    bottom="─",
    top_right="╮",
    top_left="╭",
    bottom_right="╯",
    bottom_left="╰",
    top_junction="╥",
    left_junction="├",
    right_junction="┤",
    bottom_junction="╨",
    inner_junction="╫",
    inner_divider="║",
)


@dataclass(frozen=True)
class TableStyle:
    border: Border = ROUNDED_BORDER
    border_style: Style = field(default_factory=lambda: Style(color="#689d6a"))
    header_style: Style = field(default_factory=lambda: Style(color="#83a598", bold=True))
    base_style: Style = field(default_factory=lambda: Style(color="#b8bb26"))
    highlight_style: Style = field(
        default_factory=lambda: Style(color="#fabd2f", bgcolor="#3c3836")
    )


DEFAULT_STYLE = TableStyle()

TASK_COLUMNS: tuple[Column, ...] = (
    Column(
        COLUMN_ID,
        "ID",
        5,
        kind=ColumnKind.NUMERIC,
        align="center",
        style=Style(color="#fabd2f", dim=True),
    ),
    Column(COLUMN_TITLE, "Title", 20),
    Column(COLUMN_STATUS, "Status", 6),
    Column(COLUMN_PRIORITY, "Priority", 8),
    Column(COLUMN_CREATED, "Created", 19, kind=ColumnKind.TIMESTAMP),
    Column(COLUMN_DUE_DATE, "Due Date", 19, kind=ColumnKind.TIMESTAMP),
    Column(COLUMN_NOTES, "Notes", 16),
)

_EMPTY_CELL = Cell("")


def _cell(row: DisplayRow, key: str) -> Cell:
    return row.get(key) or _EMPTY_CELL


def _typed_value(cell: Cell, kind: ColumnKind) -> Any:
    """Value used to order a cell in a numeric or timestamp column."""
    if cell.sort_value is not None:
        return cell.sort_value
    if kind is ColumnKind.NUMERIC:
        try:
            return int(cell.text)
        except ValueError:
            return None
    return None


# Control characters that would not occupy exactly one terminal cell.
_CELL_TRANSLATION = {
    ord(NOTE_SEPARATOR): LINE_BREAK_GLYPH,
    ord("\t"): " ",
    ord("\r"): None,
}


def fit(text: str, width: int, align: str = "left", style: Style | None = None) -> Text:
    """Fit text into exactly ``width`` cells: one line, ellipsis on overflow."""
    cell = Text(text.translate(_CELL_TRANSLATION), style=style or "")
    cell.truncate(width, overflow="ellipsis")
    cell.align(align, width)
    return cell


class TableView:
    """In-memory table state.

    Rows are kept twice: in insertion order (used as the tie-break for
    stable sorting) and in display order.
    """

    def __init__(
        self,
        columns: Sequence[Column],
        rows: Iterable[DisplayRow] = (),
        *,
        style: TableStyle = DEFAULT_STYLE,
    ) -> None:
        self._columns = tuple(columns)
        self._columns_by_key = {column.key: column for column in self._columns}
        if COLUMN_ID not in self._columns_by_key:
            raise ValueError(f"Columns must include {COLUMN_ID!r}")
        self._style = style
        self._sort_column = COLUMN_ID
        self._ascending = True
        self._header_visible = True
        self._highlighted = 0
        self._source: tuple[DisplayRow, ...] = ()
        self._rows: tuple[DisplayRow, ...] = ()
        self.replace_rows(rows)

    @property
    def rows(self) -> tuple[DisplayRow, ...]:
        """Rows in display order."""
        return self._rows

    @property
    def highlighted(self) -> int:
        return self._highlighted

    @property
    def highlighted_row(self) -> DisplayRow | None:
        if not self._rows:
            return None
        return self._rows[self._highlighted]

    @property
    def header_visible(self) -> bool:
        return self._header_visible

    @property
    def sort_column(self) -> str:
        return self._sort_column

    @property
    def sort_ascending(self) -> bool:
        return self._ascending

    # ---- state changes ----

    def replace_rows(self, rows: Iterable[DisplayRow]) -> None:
        """Swap in a new row set, keeping the active sort and a valid highlight."""
        source = tuple(rows)
        self._source = source
        self._rows = self._sorted(source)
        self._clamp_highlight()

    def move_highlight(self, direction: Direction) -> None:
        """Move the cursor one row. Saturates at both ends."""
        if not self._rows:
            return
        target = self._highlighted + direction.value
        self._highlighted = max(0, min(target, len(self._rows) - 1))

    def toggle_header_visibility(self) -> None:
        self._header_visible = not self._header_visible

    def set_sort(self, column: str, ascending: bool = True) -> None:
        if column not in self._columns_by_key:
            raise ValueError(f"Unknown sort column: {column}")
        self._sort_column = column
        self._ascending = ascending
        self._rows = self._sorted(self._source)

    def handle_key(self, key: str) -> bool:
        """Apply a navigation key. Returns True when the key was consumed."""
        action = resolve(key)
        if action is Action.MOVE_DOWN:
            self.move_highlight(Direction.DOWN)
            return True
        if action is Action.MOVE_UP:
            self.move_highlight(Direction.UP)
            return True
        return False

    def _clamp_highlight(self) -> None:
        if not self._rows:
            self._highlighted = 0
        else:
            self._highlighted = min(self._highlighted, len(self._rows) - 1)

    def _sorted(self, rows: tuple[DisplayRow, ...]) -> tuple[DisplayRow, ...]:
        column = self._columns_by_key[self._sort_column]
        reverse = not self._ascending

        if column.kind is ColumnKind.TEXT:
            return tuple(
                sorted(rows, key=lambda row: _cell(row, column.key).text, reverse=reverse)
            )

        # Rows without a value (unset due date) go last in either direction.
        present = [row for row in rows if _typed_value(_cell(row, column.key), column.kind) is not None]
        missing = [row for row in rows if _typed_value(_cell(row, column.key), column.kind) is None]
        present.sort(key=lambda row: _typed_value(_cell(row, column.key), column.kind), reverse=reverse)
        return tuple(present + missing)

    # ---- rendering ----

    def render(self) -> Text:
        """Render the whole table as styled text, one line per table row."""
        border = self._style.border
        widths = [column.width for column in self._columns]
        lines: list[Text] = []

        lines.append(self._rule(border.top_left, border.top, border.top_junction, border.top_right, widths))
        if self._header_visible:
            lines.append(self._header_line())
            lines.append(
                self._rule(border.left_junction, border.top, border.inner_junction, border.right_junction, widths)
            )
        for index, row in enumerate(self._rows):
            lines.append(self._row_line(row, highlighted=index == self._highlighted))
        lines.append(
            self._rule(border.bottom_left, border.bottom, border.bottom_junction, border.bottom_right, widths)
        )

        return Text("\n").join(lines)

    def _rule(self, left: str, fill: str, junction: str, right: str, widths: list[int]) -> Text:
        body = left + junction.join(fill * width for width in widths) + right
        return Text(body, style=self._style.border_style)

    def _framed(self, cells: list[Text], line_style: Style) -> Text:
        border = self._style.border
        line = Text(style=line_style)
        line.append(border.left, style=self._style.border_style)
        for index, cell in enumerate(cells):
            if index:
                line.append(border.inner_divider, style=self._style.border_style)
            line.append(cell)
        line.append(border.right, style=self._style.border_style)
        return line

    def _header_line(self) -> Text:
        cells = [
            fit(column.title, column.width, column.align, self._style.header_style)
            for column in self._columns
        ]
        return self._framed(cells, self._style.base_style)

    def _row_line(self, row: DisplayRow, *, highlighted: bool) -> Text:
        line_style = self._style.base_style
        if highlighted:
            line_style = line_style + self._style.highlight_style

        cells = []
        for column in self._columns:
            value = _cell(row, column.key)
            style = column.style + DANGER_STYLE if value.danger else column.style
            cells.append(fit(value.text, column.width, column.align, style))
        return self._framed(cells, line_style)
