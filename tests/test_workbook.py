import pytest

from gridbook.media import PictureInfo
from gridbook.style import HorizontalAlignment, XF
from gridbook.workbook import (
    Cell,
    CellType,
    Column,
    MergeCell,
    Workbook,
    cell_coord_as_string,
    column_number_as_letters,
    parse_cell_ref,
    parse_merge_cell_ref,
    validate_sheet_name,
)


@pytest.fixture
def sheet():
    return Workbook().add_sheet("Data")


@pytest.mark.parametrize(
    "n, letters", [(1, "A"), (26, "Z"), (27, "AA"), (702, "ZZ")]
)
def test_column_letters_documented_examples(n, letters):
    assert column_number_as_letters(n) == letters


@pytest.mark.parametrize("n", [0, -1])
def test_column_letters_rejects_non_positive(n):
    with pytest.raises(ValueError, match="invalid column number"):
        column_number_as_letters(n)


@pytest.mark.parametrize(
    "col, row, ref", [(1, 1, "A1"), (3, 5, "C5"), (27, 10, "AA10")]
)
def test_cell_coord_documented_examples(col, row, ref):
    assert cell_coord_as_string(col, row) == ref


def test_cell_coord_rejects_negative_row():
    with pytest.raises(ValueError, match="invalid row number"):
        cell_coord_as_string(1, -1)


@pytest.mark.parametrize("col, row", [(1, 1), (26, 3), (27, 100), (702, 9), (16384, 1048576)])
def test_parse_cell_ref_round_trip(col, row):
    assert parse_cell_ref(cell_coord_as_string(col, row)) == (col, row)


def test_parse_cell_ref_is_case_insensitive():
    assert parse_cell_ref("aa10") == parse_cell_ref("AA10")


@pytest.mark.parametrize(
    "ref, message",
    [
        ("", "empty cell reference"),
        ("12", "invalid cell reference format"),
        ("AB", "invalid cell reference format"),
        ("Ä1", "invalid column letter"),
        ("A0", "invalid row number"),
        ("A-3", "invalid cell reference format"),
        ("A1B", "invalid cell reference format"),
    ],
)
def test_parse_cell_ref_errors(ref, message):
    with pytest.raises(ValueError):
        parse_cell_ref(ref)


def test_parse_cell_ref_bad_row_message():
    with pytest.raises(ValueError, match="invalid row number"):
        parse_cell_ref("A0")


def test_parse_merge_cell_ref():
    assert parse_merge_cell_ref("A1:B2") == (1, 1, 2, 2)


@pytest.mark.parametrize("ref", ["A1", "A1:B2:C3", "A1:", ":B2"])
def test_parse_merge_cell_ref_errors(ref):
    with pytest.raises(ValueError):
        parse_merge_cell_ref(ref)


@pytest.mark.parametrize("name", ["Sheet1", "x", "a" * 31, "it's"])
def test_validate_sheet_name_accepts(name):
    assert validate_sheet_name(name) is None


@pytest.mark.parametrize(
    "name, message",
    [
        ("", "empty sheet name"),
        ("a" * 32, "too long"),
        ("'quoted", "single quote"),
        ("quoted'", "single quote"),
        ("a:b", "can not contain"),
        ("a/b", "can not contain"),
        ("a\\b", "can not contain"),
        ("a?b", "can not contain"),
        ("a*b", "can not contain"),
        ("a[b]", "can not contain"),
    ],
)
def test_validate_sheet_name_rejects(name, message):
    with pytest.raises(ValueError, match=message):
        validate_sheet_name(name)


def test_sheet_name_length_counts_characters():
    wb = Workbook()
    sheet = wb.add_sheet("é" * 31)
    assert sheet.name == "é" * 31


def test_add_sheet_registers_in_order():
    wb = Workbook()
    first = wb.add_sheet("One")
    second = wb.add_sheet("Two")
    assert wb.sheets == [first, second]
    assert first.workbook is wb


def test_add_sheet_duplicate():
    wb = Workbook()
    wb.add_sheet("Data")
    with pytest.raises(ValueError, match="duplicate sheet name 'Data'"):
        wb.add_sheet("Data")
    assert len(wb.sheets) == 1


def test_add_sheet_invalid_name_not_added():
    wb = Workbook()
    with pytest.raises(ValueError):
        wb.add_sheet("")
    assert wb.sheets == []


def test_rows_and_cells_are_numbered_sequentially(sheet):
    rows = [sheet.add_row() for _ in range(3)]
    assert [r.row_number for r in rows] == [1, 2, 3]
    cells = [rows[1].add_cell() for _ in range(3)]
    assert [c.coord for c in cells] == [cell_coord_as_string(i, 2) for i in (1, 2, 3)]
    assert [c.column_number for c in cells] == [1, 2, 3]
    assert rows[1].cells == cells
    assert cells[0].row is rows[1]
    assert rows[0].sheet is sheet


def test_new_cell_is_unset(sheet):
    cell = sheet.add_row().add_cell()
    assert cell.cell_type == CellType.UNSET
    assert cell.xf.is_empty()


def test_set_bool():
    cell = Cell()
    cell.set_bool(True)
    assert (cell.cell_type, cell.value) == (CellType.BOOL, "1")
    cell.set_bool(False)
    assert cell.value == "0"


def test_set_int():
    cell = Cell()
    cell.set_int(-42)
    assert cell.cell_type == CellType.NUMBER
    assert int(cell.value) == -42


@pytest.mark.parametrize("value", [1.5, -0.25, 3.0, 123.456, 0.001])
def test_set_float_plain_round_trip(value):
    cell = Cell()
    cell.set_float(value)
    assert cell.cell_type == CellType.NUMBER
    assert "e" not in cell.value
    assert float(cell.value) == value


@pytest.mark.parametrize("value", [1e6, 1.23456789e8, 1e-5, 2.5e-300, 1e300])
def test_set_float_exponent_round_trip(value):
    cell = Cell()
    cell.set_float(value)
    assert "e" in cell.value
    assert float(cell.value) == value


def test_set_float_compact_forms():
    cell = Cell()
    cell.set_float(1e6)
    assert cell.value == "1e+06"
    cell.set_float(3.0)
    assert cell.value == "3"


def test_set_str():
    cell = Cell()
    cell.set_str("hello")
    assert (cell.cell_type, cell.value) == (CellType.SHARED_STRING, "hello")


def test_set_picture():
    cell = Cell()
    pic = PictureInfo(extension=".png", blob=b"\x89PNG")
    cell.set_picture(pic)
    assert cell.cell_type == CellType.PICTURE
    assert cell.picture is pic


def test_cell_format_shortcuts_edit_xf():
    cell = Cell()
    cell.font.bold = True
    cell.alignment.horizontal = HorizontalAlignment.CENTER
    assert cell.xf.font.bold
    assert cell.xf.alignment.horizontal == HorizontalAlignment.CENTER
    assert not cell.xf.is_empty()
    assert cell.xf != XF()


def test_set_column_width(sheet):
    sheet.set_column_width(2, 15.5)
    assert sheet.columns == {2: Column(width=15.5)}
    column = sheet.columns[2]
    sheet.set_column_width(2, 20)
    assert sheet.columns[2] is column
    assert column.width == 20
    sheet.set_column_width(2, 0)
    assert sheet.columns == {}


def test_set_column_width_ignores_bad_column(sheet):
    sheet.set_column_width(0, 10)
    sheet.set_column_width(-3, 10)
    sheet.set_column_width(5, -1)
    assert sheet.columns == {}


def test_merge_keeps_reference(sheet):
    sheet.merge("A1:B2")
    assert sheet.merge_cells == [MergeCell(ref="A1:B2")]


def test_merge_single_cell_rejected(sheet):
    with pytest.raises(ValueError, match="at least 2 cells"):
        sheet.merge("C3:C3")
    assert sheet.merge_cells == []


def test_merge_invalid_reference(sheet):
    with pytest.raises(ValueError):
        sheet.merge("A1")


def test_merge_overlap_rejected(sheet):
    sheet.merge("A1:B2")
    with pytest.raises(ValueError, match="overlaps"):
        sheet.merge("B2:C3")
    with pytest.raises(ValueError, match="overlaps"):
        sheet.merge_range(1, 1, 1, 2)
    assert len(sheet.merge_cells) == 1


def test_merge_adjacent_allowed(sheet):
    sheet.merge("A1:B2")
    sheet.merge("C1:D2")
    sheet.merge_range(1, 3, 2, 3)
    assert len(sheet.merge_cells) == 3


def test_merge_range_normalises(sheet):
    sheet.merge_range(2, 2, 1, 1)
    assert sheet.merge_cells == [MergeCell(ref="A1:B2")]


def test_merge_range_reversed_existing_range_counts(sheet):
    sheet.merge("B2:A1")
    with pytest.raises(ValueError, match="overlaps"):
        sheet.merge_range(1, 1, 3, 3)


def test_merge_range_round_trips_through_parse(sheet):
    sheet.merge_range(3, 4, 27, 10)
    assert parse_merge_cell_ref(sheet.merge_cells[0].ref) == (3, 4, 27, 10)


def test_merge_range_single_cell_rejected(sheet):
    with pytest.raises(ValueError, match="at least 2 cells"):
        sheet.merge_range(4, 4, 4, 4)