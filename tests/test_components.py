from cray.components import (
    Align,
    Column,
    InfoItem,
    InfoSection,
    Table,
    TreeNode,
    color_tag,
    render_items,
    render_sections,
)

COLUMNS = [Column("ID", 14), Column("NAME"), Column("PID", 8, Align.RIGHT)]


def texts(cells):
    return [cell.text for cell in cells]


def test_header_holds_column_titles():
    table = Table(COLUMNS)
    header = table.header()
    assert texts(header) == ["ID", "NAME", "PID"]
    assert all(not cell.selectable and cell.bold for cell in header)
    assert table.data_row_count() == 0


def test_hidden_columns_are_skipped():
    table = Table([Column("ID"), Column("SECRET", hidden=True), Column("NAME")])
    assert texts(table.header()) == ["ID", "NAME"]
    table.add_row("1", "x", "web")
    assert texts(table.data_rows[0]) == ["1", "web"]


def test_widths_set_max_width_or_expansion():
    table = Table(COLUMNS)
    table.add_row("a", "b", "c")
    first, second, third = table.data_rows[0]
    assert first.max_width == 14 and first.expansion == 0
    assert second.max_width == 0 and second.expansion == 1
    assert third.align is Align.RIGHT


def test_add_row_drops_extra_values():
    table = Table(COLUMNS)
    table.add_row("1", "web", "42", "extra")
    assert texts(table.data_rows[0]) == ["1", "web", "42"]
    assert table.data_row_count() == 1


def test_clear_data_keeps_header():
    table = Table(COLUMNS)
    table.add_row("1", "a", "2")
    table.add_row("3", "b", "4")
    assert table.data_row_count() == 2
    table.clear_data()
    assert table.data_row_count() == 0
    assert texts(table.header()) == ["ID", "NAME", "PID"]


def test_set_row_color():
    table = Table(COLUMNS)
    table.add_row("1", "a", "2")
    table.add_row("3", "b", "4")
    table.set_row_color(1, "red")
    assert {cell.color for cell in table.data_rows[1]} == {"red"}
    assert {cell.color for cell in table.data_rows[0]} == {None}


def test_select_reports_data_index():
    table = Table(COLUMNS)
    chosen = []
    table.on_select = chosen.append
    table.select(0)
    table.select(3)
    assert chosen == [2]
    assert table.selected_row == 3


def test_set_columns_redraws_header():
    table = Table(COLUMNS)
    table.set_columns([Column("IMAGE"), Column("SIZE")])
    assert texts(table.header())[:2] == ["IMAGE", "SIZE"]
    assert [column.title for column in table.columns] == ["IMAGE", "SIZE"]


def test_color_tag():
    assert color_tag("green") == "green"
    assert color_tag("darkcyan") == "darkcyan"
    assert color_tag("magenta") == "white"
    assert color_tag(None) == "white"


def test_render_sections_layout():
    text = render_sections(
        [InfoSection(title="Status", items=[InfoItem("Name", "web", "green")])]
    )
    assert text == "[yellow::b]Status[-:-:-]\n" + "  [gray]Name" + " " * 16 + "[green]web[-]\n"


def test_render_sections_separates_with_blank_line():
    text = render_sections(
        [
            InfoSection(title="A", items=[InfoItem("x", "1")]),
            InfoSection(title="B", items=[InfoItem("y", "2")]),
        ]
    )
    assert "[-]\n\n[yellow::b]B" in text
    assert "[white]1[-]" in text


def test_render_items_matches_untitled_section():
    items = [InfoItem("key", "value"), InfoItem("other", "thing", "red")]
    assert render_items(items) == render_sections([InfoSection(items=items)])
    assert "[yellow::b]" not in render_items(items)


def test_tree_node_operations():
    root = TreeNode("root")
    child = TreeNode("child")
    grandchild = TreeNode("grandchild")
    assert root.add_child(child) is root
    child.add_child(grandchild)
    assert [node.text for node in root.walk()] == ["root", "child", "grandchild"]

    assert root.expanded
    root.toggle()
    assert not root.expanded

    root.clear_children()
    assert list(root.walk()) == [root]