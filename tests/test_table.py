"""Tests for table.py - table view model."""

import io
import sys
from datetime import datetime, timedelta
from pathlib import Path

import pytest
from rich.cells import cell_len
from rich.console import Console

# Add scripts to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "scripts"))

from tasktui.formatter import Cell, format_task
from tasktui.providers import Task, TaskPriority, TaskStatus
from tasktui.table import (
    DANGER_STYLE,
    TASK_COLUMNS,
    Column,
    ColumnKind,
    Direction,
    TableView,
    fit,
)

NOW = datetime(2024, 1, 10, 12, 0, 0)


def make_row(task_id: int, title: str = "", due: datetime | None = None, **kwargs):
    task = Task(
        id=task_id,
        title=title or f"task {task_id}",
        status=kwargs.get("status", TaskStatus.TODO),
        priority=kwargs.get("priority", TaskPriority.LOW),
        created_at=kwargs.get("created_at", datetime(2024, 1, 1, 8, 0) + timedelta(hours=task_id)),
        due=due,
        notes=kwargs.get("notes", ()),
    )
    return format_task(task, NOW)


def row_ids(table: TableView) -> list[str]:
    return [row["id"].text for row in table.rows]


def background_colors(line) -> list:
    return [span.style.bgcolor for span in line.spans if not isinstance(span.style, str)]


def body_lines(table: TableView) -> list[str]:
    """Plain text of the data rows (skips borders and header)."""
    lines = table.render().plain.split("\n")
    skip = 3 if table.header_visible else 1
    return lines[skip:-1]


class TestInitialize:
    """Tests for TableView construction."""

    def test_sorted_ascending_by_id(self) -> None:
        table = TableView(TASK_COLUMNS, [make_row(3), make_row(1), make_row(2)])

        assert row_ids(table) == ["1", "2", "3"]
        assert table.sort_column == "id"
        assert table.sort_ascending is True

    def test_ids_sort_numerically(self) -> None:
        table = TableView(TASK_COLUMNS, [make_row(10), make_row(9), make_row(100)])

        assert row_ids(table) == ["9", "10", "100"]

    def test_defaults(self) -> None:
        table = TableView(TASK_COLUMNS, [make_row(1)])

        assert table.highlighted == 0
        assert table.header_visible is True

    def test_empty(self) -> None:
        table = TableView(TASK_COLUMNS)

        assert table.rows == ()
        assert table.highlighted == 0
        assert table.highlighted_row is None

    def test_columns_without_id_rejected(self) -> None:
        with pytest.raises(ValueError):
            TableView([Column("title", "Title", 10)])


class TestMoveHighlight:
    """Tests for move_highlight."""

    def test_moves_down_and_up(self) -> None:
        table = TableView(TASK_COLUMNS, [make_row(1), make_row(2), make_row(3)])

        table.move_highlight(Direction.DOWN)
        table.move_highlight(Direction.DOWN)
        assert table.highlighted == 2

        table.move_highlight(Direction.UP)
        assert table.highlighted == 1
        assert table.highlighted_row["id"].text == "2"

    def test_saturates_at_last_row(self) -> None:
        table = TableView(TASK_COLUMNS, [make_row(1), make_row(2), make_row(3)])

        for _ in range(10):
            table.move_highlight(Direction.DOWN)

        assert table.highlighted == 2

    def test_saturates_at_first_row(self) -> None:
        table = TableView(TASK_COLUMNS, [make_row(1), make_row(2)])

        table.move_highlight(Direction.UP)
        table.move_highlight(Direction.UP)

        assert table.highlighted == 0

    def test_noop_on_empty_table(self) -> None:
        table = TableView(TASK_COLUMNS)

        table.move_highlight(Direction.DOWN)
        table.move_highlight(Direction.UP)

        assert table.highlighted == 0


class TestReplaceRows:
    """Tests for replace_rows."""

    def test_clamps_highlight_when_shrinking(self) -> None:
        table = TableView(TASK_COLUMNS, [make_row(i) for i in range(1, 6)])
        for _ in range(4):
            table.move_highlight(Direction.DOWN)
        assert table.highlighted == 4

        table.replace_rows([make_row(1), make_row(2)])

        assert table.highlighted == 1

    def test_keeps_highlight_when_in_bounds(self) -> None:
        table = TableView(TASK_COLUMNS, [make_row(1), make_row(2), make_row(3)])
        table.move_highlight(Direction.DOWN)

        table.replace_rows([make_row(4), make_row(5), make_row(6)])

        assert table.highlighted == 1

    def test_empty_rows_reset_highlight(self) -> None:
        table = TableView(TASK_COLUMNS, [make_row(1), make_row(2)])
        table.move_highlight(Direction.DOWN)

        table.replace_rows([])

        assert table.highlighted == 0
        assert table.highlighted_row is None

    def test_reapplies_active_sort(self) -> None:
        table = TableView(TASK_COLUMNS, [make_row(1)])
        table.set_sort("id", ascending=False)

        table.replace_rows([make_row(2), make_row(5), make_row(3)])

        assert row_ids(table) == ["5", "3", "2"]


class TestToggleHeader:
    """Tests for toggle_header_visibility."""

    def test_toggle_twice_restores(self) -> None:
        table = TableView(TASK_COLUMNS, [make_row(1)])

        table.toggle_header_visibility()
        assert table.header_visible is False

        table.toggle_header_visibility()
        assert table.header_visible is True

    def test_does_not_touch_rows(self) -> None:
        table = TableView(TASK_COLUMNS, [make_row(2), make_row(1)])
        before = table.rows

        table.toggle_header_visibility()

        assert table.rows == before
        assert table.sort_column == "id"


class TestSetSort:
    """Tests for set_sort."""

    def test_text_column_lexicographic(self) -> None:
        table = TableView(
            TASK_COLUMNS,
            [make_row(1, "pear"), make_row(2, "apple"), make_row(3, "fig")],
        )

        table.set_sort("title")

        assert [row["title"].text for row in table.rows] == ["apple", "fig", "pear"]

    def test_descending(self) -> None:
        table = TableView(TASK_COLUMNS, [make_row(1), make_row(3), make_row(2)])

        table.set_sort("id", ascending=False)

        assert row_ids(table) == ["3", "2", "1"]
        assert table.sort_ascending is False

    def test_timestamp_column_chronological(self) -> None:
        # Display strings mix relative and absolute forms; order must follow time.
        rows = [
            make_row(1, due=datetime(2024, 2, 1)),
            make_row(2, due=datetime(2024, 1, 10, 18, 0)),
            make_row(3, due=datetime(2024, 1, 9)),
        ]
        table = TableView(TASK_COLUMNS, rows)

        table.set_sort("due_date")

        assert row_ids(table) == ["3", "2", "1"]

    def test_unset_timestamps_sort_last(self) -> None:
        rows = [
            make_row(1),
            make_row(2, due=datetime(2024, 2, 1)),
            make_row(3, due=datetime(2024, 1, 20)),
        ]
        table = TableView(TASK_COLUMNS, rows)

        table.set_sort("due_date")
        assert row_ids(table) == ["3", "2", "1"]

        table.set_sort("due_date", ascending=False)
        assert row_ids(table) == ["2", "3", "1"]

    def test_ties_keep_insertion_order(self) -> None:
        rows = [
            make_row(3, status=TaskStatus.DONE),
            make_row(1, status=TaskStatus.TODO),
            make_row(2, status=TaskStatus.DONE),
        ]
        table = TableView(TASK_COLUMNS, rows)

        table.set_sort("status")
        assert row_ids(table) == ["3", "2", "1"]

        table.set_sort("status", ascending=False)
        assert row_ids(table) == ["1", "3", "2"]

    def test_unknown_column_rejected(self) -> None:
        table = TableView(TASK_COLUMNS, [make_row(1)])

        with pytest.raises(ValueError):
            table.set_sort("bogus")

        assert table.sort_column == "id"

    def test_numeric_column_without_sort_values(self) -> None:
        columns = [Column("id", "ID", 4, kind=ColumnKind.NUMERIC)]
        rows = [{"id": Cell("10")}, {"id": Cell("x")}, {"id": Cell("2")}]

        table = TableView(columns, rows)

        assert [row["id"].text for row in table.rows] == ["2", "10", "x"]


class TestHandleKey:
    """Tests for handle_key."""

    @pytest.mark.parametrize("key", ["j", "down", "s"])
    def test_row_down_keys(self, key: str) -> None:
        table = TableView(TASK_COLUMNS, [make_row(1), make_row(2)])

        assert table.handle_key(key) is True
        assert table.highlighted == 1

    @pytest.mark.parametrize("key", ["k", "up", "w"])
    def test_row_up_keys(self, key: str) -> None:
        table = TableView(TASK_COLUMNS, [make_row(1), make_row(2)])
        table.move_highlight(Direction.DOWN)

        assert table.handle_key(key) is True
        assert table.highlighted == 0

    @pytest.mark.parametrize("key", ["q", "h", "x", "enter"])
    def test_other_keys_not_consumed(self, key: str) -> None:
        table = TableView(TASK_COLUMNS, [make_row(1), make_row(2)])

        assert table.handle_key(key) is False
        assert table.highlighted == 0
        assert table.header_visible is True


class TestFit:
    """Tests for fit."""

    def test_pads_to_width(self) -> None:
        assert fit("ab", 5).plain == "ab   "

    def test_truncates_with_ellipsis(self) -> None:
        assert fit("abcdefghij", 5).plain == "abcd…"

    def test_exact_width_untouched(self) -> None:
        assert fit("abcde", 5).plain == "abcde"

    def test_center_and_right(self) -> None:
        assert fit("7", 5, "center").plain == "  7  "
        assert fit("7", 5, "right").plain == "    7"

    def test_line_breaks_are_visible(self) -> None:
        assert fit("a\nb", 5).plain == "a↵b  "

    def test_tabs_and_carriage_returns_take_one_cell(self) -> None:
        assert fit("a\tb\r", 5).plain == "a b  "


class TestRender:
    """Tests for render."""

    def test_every_line_has_table_width(self) -> None:
        long_title = "x" * 80
        rows = [
            make_row(1, long_title),
            make_row(2),
            make_row(3, "a\tb"),
            make_row(4, notes=("x\ty", "z\r")),
        ]
        table = TableView(TASK_COLUMNS, rows)
        width = sum(column.width for column in TASK_COLUMNS) + len(TASK_COLUMNS) + 1

        lines = table.render().plain.split("\n")

        assert all(len(line) == width for line in lines)

    def test_tab_in_title_keeps_printed_width(self) -> None:
        table = TableView(TASK_COLUMNS, [make_row(1), make_row(2, "a\tb"), make_row(3)])
        width = sum(column.width for column in TASK_COLUMNS) + len(TASK_COLUMNS) + 1
        console = Console(file=io.StringIO(), width=200, record=True)

        console.print(table.render(), soft_wrap=True)
        printed = console.export_text().rstrip("\n").split("\n")

        assert [cell_len(line) for line in printed] == [width] * len(printed)

    def test_header_and_borders(self) -> None:
        table = TableView(TASK_COLUMNS, [make_row(1)])

        lines = table.render().plain.split("\n")

        assert lines[0].startswith("╭") and lines[0].endswith("╮")
        assert "Title" in lines[1] and "Due Date" in lines[1]
        assert lines[2].startswith("├")
        assert lines[-1].startswith("╰") and lines[-1].endswith("╯")
        assert len(lines) == 5

    def test_hidden_header(self) -> None:
        table = TableView(TASK_COLUMNS, [make_row(1)])
        table.toggle_header_visibility()

        lines = table.render().plain.split("\n")

        assert len(lines) == 3
        assert "Title" not in table.render().plain

    def test_rows_in_display_order(self) -> None:
        table = TableView(TASK_COLUMNS, [make_row(3), make_row(1), make_row(2)])

        ids = [line[1:6].strip() for line in body_lines(table)]

        assert ids == ["1", "2", "3"]

    def test_empty_table(self) -> None:
        table = TableView(TASK_COLUMNS)

        lines = table.render().plain.split("\n")

        assert len(lines) == 4

    def test_highlighted_row_has_background(self) -> None:
        table = TableView(TASK_COLUMNS, [make_row(1), make_row(2)])
        table.move_highlight(Direction.DOWN)

        text = table.render()
        lines = text.split("\n")

        assert any(bg is not None for bg in background_colors(lines[4]))
        assert all(bg is None for bg in background_colors(lines[3]))

    def test_overdue_cell_uses_danger_style(self) -> None:
        table = TableView(TASK_COLUMNS, [make_row(1, due=datetime(2024, 1, 9))])

        text = table.render()

        assert any(
            span.style.color == DANGER_STYLE.color
            for span in text.spans
            if not isinstance(span.style, str)
        )
