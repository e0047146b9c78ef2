"""The in-memory workbook model: workbooks, sheets, rows and cells."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from decimal import Decimal
from enum import IntEnum
from typing import Dict, List, Optional, Tuple

from .media import PictureInfo
from .style import XF, Alignment, Font

_ROW_NUMBER = re.compile(r"[+-]?[0-9]+")
_FORBIDDEN_SHEET_CHARS = ":\\/?*[]"


class CellType(IntEnum):
    """The kind of value held by a cell."""

    UNSET = 0
    BOOL = 1
    DATE = 2
    ERROR = 3
    FORMULA = 4
    INLINE_STRING = 5
    NUMBER = 6
    SHARED_STRING = 7
    PICTURE = 8


def _format_float(value: float) -> str:
    """Format value in the most compact of plain and exponent notation."""
    if value != value:
        return "NaN"
    if value in (float("inf"), float("-inf")):
        return "+Inf" if value > 0 else "-Inf"
    sign, digit_tuple, exponent = Decimal(repr(value)).as_tuple()
    prefix = "-" if sign else ""
    digits = "".join(map(str, digit_tuple)).lstrip("0")
    if not digits:
        return prefix + "0"
    trimmed = digits.rstrip("0")
    exponent += len(digits) - len(trimmed)
    digits = trimmed
    count = len(digits)
    point = count + exponent
    exp10 = point - 1
    if exp10 < -4 or exp10 >= 6:
        mantissa = digits[0] + ("." + digits[1:] if count > 1 else "")
        exp_sign = "-" if exp10 < 0 else "+"
        return f"{prefix}{mantissa}e{exp_sign}{abs(exp10):02d}"
    if point <= 0:
        return f"{prefix}0.{'0' * -point}{digits}"
    if point >= count:
        return prefix + digits + "0" * (point - count)
    return f"{prefix}{digits[:point]}.{digits[point:]}"


def column_number_as_letters(n: int) -> str:
    """Convert a 1-based column number to its letters: 1 -> "A", 27 -> "AA"."""
    if n < 1:
        raise ValueError("invalid column number")
    letters = []
    while n > 0:
        n, remainder = divmod(n - 1, 26)
        letters.append(chr(remainder + ord("A")))
    return "".join(reversed(letters))


def cell_coord_as_string(col: int, row: int) -> str:
    """Convert 1-based column and row numbers to a reference such as "C5"."""
    if row < 0:
        raise ValueError("invalid row number")
    return column_number_as_letters(col) + str(row)


def parse_cell_ref(ref: str) -> Tuple[int, int]:
    """Parse a reference such as "A1" into 1-based (column, row)."""
    if not ref:
        raise ValueError("empty cell reference")
    split = len(ref) - len(ref.lstrip("".join(c for c in ref if c.isalpha())))
    split = 0
    for ch in ref:
        if not ch.isalpha():
            break
        split += 1
    if split == 0 or split == len(ref):
        raise ValueError("invalid cell reference format")
    col = 0
    for ch in ref[:split].upper():
        if not "A" <= ch <= "Z":
            raise ValueError("invalid column letter")
        col = col * 26 + ord(ch) - ord("A") + 1
    row_text = ref[split:]
    if not _ROW_NUMBER.fullmatch(row_text) or int(row_text) < 1:
        raise ValueError("invalid row number")
    return col, int(row_text)


def parse_merge_cell_ref(ref: str) -> Tuple[int, int, int, int]:
    """Parse a range such as "A1:B2" into (start_col, start_row, end_col, end_row)."""
    parts = ref.split(":")
    if len(parts) != 2:
        raise ValueError("invalid merge cell reference format, expected 'A1:B2'")
    start_col, start_row = parse_cell_ref(parts[0])
    end_col, end_row = parse_cell_ref(parts[1])
    return start_col, start_row, end_col, end_row


def validate_sheet_name(name: str) -> None:
    """Raise ValueError unless name follows the spreadsheet sheet naming rules."""
    if not name:
        raise ValueError("empty sheet name is not allowed")
    if len(name) > 31:
        raise ValueError("the sheet name is too long")
    if name.startswith("'") or name.endswith("'"):
        raise ValueError(
            "the first or last character of the sheet name can not be a single quote"
        )
    if any(ch in _FORBIDDEN_SHEET_CHARS for ch in name):
        raise ValueError("the sheet can not contain any of the characters :\\/?*[]")


@dataclass
class Cell:
    """A single cell: its value, kind, formatting and position."""

    row: Optional["Row"] = field(default=None, repr=False, compare=False)
    column_number: int = 1
    coord: str = ""
    cell_type: CellType = CellType.UNSET
    value: str = ""
    picture: Optional[PictureInfo] = None
    xf: XF = field(default_factory=XF)

    @property
    def alignment(self) -> Alignment:
        """The alignment part of the cell's format."""
        return self.xf.alignment

    @property
    def font(self) -> Font:
        """The font part of the cell's format."""
        return self.xf.font

    def set_bool(self, value: bool) -> None:
        """Store a boolean, kept as "1" or "0"."""
        self.cell_type = CellType.BOOL
        self.value = "1" if value else "0"

    def set_int(self, value: int) -> None:
        """Store an integer number."""
        self.cell_type = CellType.NUMBER
        self.value = str(int(value))

    def set_float(self, value: float) -> None:
        """Store a floating-point number in its most compact form."""
        self.cell_type = CellType.NUMBER
        self.value = _format_float(float(value))

    def set_str(self, value: str) -> None:
        """Store a string, to be kept in the shared string table."""
        self.cell_type = CellType.SHARED_STRING
        self.value = value

    def set_picture(self, picture: Optional[PictureInfo]) -> None:
        """Make the cell display an embedded image."""
        self.cell_type = CellType.PICTURE
        self.picture = picture


@dataclass
class Row:
    """A row of cells with an optional custom height in points (0 = default)."""

    sheet: Optional["Sheet"] = field(default=None, repr=False, compare=False)
    row_number: int = 1
    height: float = 0.0
    cells: List[Cell] = field(default_factory=list)
    _next_column_number: int = field(default=1, repr=False, compare=False)

    def add_cell(self) -> Cell:
        """Append a cell in the next column (A, B, C, ...) and return it."""
        cell = Cell(
            row=self,
            column_number=self._next_column_number,
            coord=cell_coord_as_string(self._next_column_number, self.row_number),
        )
        self._next_column_number += 1
        self.cells.append(cell)
        return cell


@dataclass
class Column:
    """Column-level properties."""

    width: float = 0.0


@dataclass
class MergeCell:
    """A merged range such as "A1:B2"."""

    ref: str


def _ordered(a: int, b: int) -> Tuple[int, int]:
    return (a, b) if a <= b else (b, a)


@dataclass
class Sheet:
    """A worksheet: rows, column widths and merged ranges."""

    name: str
    workbook: Optional["Workbook"] = field(default=None, repr=False, compare=False)
    rows: List[Row] = field(default_factory=list)
    columns: Dict[int, Column] = field(default_factory=dict)
    merge_cells: List[MergeCell] = field(default_factory=list)
    _next_row_number: int = field(default=1, repr=False, compare=False)

    def add_row(self) -> Row:
        """Append the next row, numbered from 1, and return it."""
        row = Row(sheet=self, row_number=self._next_row_number)
        self._next_row_number += 1
        self.rows.append(row)
        return row

    def set_column_width(self, col_number: int, width: float) -> None:
        """Set a 1-based column's width; a width <= 0 restores the default."""
        if col_number <= 0:
            return
        if width <= 0:
            self.columns.pop(col_number, None)
        elif col_number in self.columns:
            self.columns[col_number].width = width
        else:
            self.columns[col_number] = Column(width=width)

    def merge(self, ref: str) -> None:
        """Merge the range given as "A1:B2"; raise ValueError if invalid or overlapping."""
        start_col, start_row, end_col, end_row = parse_merge_cell_ref(ref)
        self._validate_merge_range(start_col, start_row, end_col, end_row)
        self.merge_cells.append(MergeCell(ref=ref))

    def merge_range(
        self, start_col: int, start_row: int, end_col: int, end_row: int
    ) -> None:
        """Merge the range given by 1-based corners; raise ValueError if invalid or overlapping."""
        self._validate_merge_range(start_col, start_row, end_col, end_row)
        start_col, end_col = _ordered(start_col, end_col)
        start_row, end_row = _ordered(start_row, end_row)
        ref = (
            cell_coord_as_string(start_col, start_row)
            + ":"
            + cell_coord_as_string(end_col, end_row)
        )
        self.merge_cells.append(MergeCell(ref=ref))

    def _validate_merge_range(
        self, start_col: int, start_row: int, end_col: int, end_row: int
    ) -> None:
        start_col, end_col = _ordered(start_col, end_col)
        start_row, end_row = _ordered(start_row, end_row)
        if start_col == end_col and start_row == end_row:
            raise ValueError("merge range must span at least 2 cells")
        for existing in self.merge_cells:
            try:
                e_start_col, e_start_row, e_end_col, e_end_row = parse_merge_cell_ref(
                    existing.ref
                )
            except ValueError:
                continue
            e_start_col, e_end_col = _ordered(e_start_col, e_end_col)
            e_start_row, e_end_row = _ordered(e_start_row, e_end_row)
            disjoint = (
                end_col < e_start_col
                or start_col > e_end_col
                or end_row < e_start_row
                or start_row > e_end_row
            )
            if not disjoint:
                raise ValueError("merge range overlaps with existing merged cells")


@dataclass
class Workbook:
    """A workbook of one or more worksheets."""

    app_name: str = ""
    sheets: List[Sheet] = field(default_factory=list)
    _sheet_map: Dict[str, Sheet] = field(default_factory=dict, repr=False, compare=False)

    def add_sheet(self, name: str) -> Sheet:
        """Add a worksheet; raise ValueError if the name is taken or invalid."""
        if name in self._sheet_map:
            raise ValueError(f"duplicate sheet name '{name}'")
        validate_sheet_name(name)
        sheet = Sheet(name=name, workbook=self)
        self.sheets.append(sheet)
        self._sheet_map[name] = sheet
        return sheet