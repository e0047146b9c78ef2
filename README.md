# gridbook

gridbook writes Excel workbooks (`.xlsx`) from Python. It uses only the
standard library.

It supports:

- several worksheets per workbook. Sheet names must follow Excel's rules.
- boolean, integer, float and string cells. Strings are stored in a shared
  string table.
- a font for each cell (size, bold, italic, underline, strikethrough) and
  horizontal and vertical alignment
- custom row heights and column widths
- merged cell ranges. Overlapping ranges are rejected.
- PNG and JPEG pictures placed inside cells

## Installation

```
pip install gridbook
```

## Quick start

```python
from gridbook.workbook import Workbook
from gridbook.media import PictureInfo
from gridbook.style import HorizontalAlignment
from gridbook.writer import save_workbook

workbook = Workbook(app_name="Inventory")
sheet = workbook.add_sheet("Report")

header = sheet.add_row()
header.height = 24
for title in ("Item", "Quantity", "In stock"):
    cell = header.add_cell()
    cell.set_str(title)
    cell.font.bold = True
    cell.alignment.horizontal = HorizontalAlignment.CENTER

row = sheet.add_row()
row.add_cell().set_str("Widget")
row.add_cell().set_int(42)
row.add_cell().set_bool(True)

total = sheet.add_row()
total.add_cell().set_str("Average price")
total.add_cell().set_float(3.75)

sheet.set_column_width(1, 20)   # column A; a width <= 0 removes the custom width
sheet.merge("A5:C5")            # or sheet.merge_range(1, 5, 3, 5)

with open("logo.png", "rb") as fh:
    sheet.add_row().add_cell().set_picture(PictureInfo(".png", fh.read()))

save_workbook(workbook, "report.xlsx")
```

Rows and cells are added in order. The first row is row 1, and the first cell
of a row is column A. `save_workbook` accepts a path or a writable binary file
object.

## Coordinates

`gridbook.workbook` has helpers for cell references:

```python
from gridbook.workbook import (
    cell_coord_as_string, column_number_as_letters, parse_cell_ref, parse_merge_cell_ref,
)

column_number_as_letters(27)     # "AA"
cell_coord_as_string(3, 5)       # "C5"
parse_cell_ref("AA10")           # (27, 10)
parse_merge_cell_ref("A1:B2")    # (1, 1, 2, 2)
```

## Styles

`gridbook.style` defines `Font`, `Alignment` and `XF`. `XF` combines the two
and is what each cell carries as `cell.xf`. For convenience, `cell.font` and
`cell.alignment` return the parts of that `XF`. Alignment takes the
`HorizontalAlignment` and `VerticalAlignment` enums, and underline takes
`UnderlineType`. A font size of 0 means the default of 11 points.

When the workbook is written, every distinct cell format and every distinct
custom font goes into `xl/styles.xml` only once. Cells with no custom
formatting get no style.

## Output targets

`save_workbook` writes a zip archive. To control where the parts go, give a
storage to `gridbook.writer.Writer` and call `write(workbook)`:

```python
from gridbook.storage import DirStorage, ZipStorage
from gridbook.writer import Writer

with ZipStorage("report.xlsx") as storage:
    Writer(storage).write(workbook)

Writer(DirStorage("report-parts")).write(workbook)   # one plain file per part
```

- `ZipStorage` writes the `.xlsx` archive. The archive is complete only after
  `close()`, which the `with` block calls for you.
- `DirStorage` writes each part as a file under a directory. This is useful
  for reading the generated XML.
- To write anywhere else, subclass `gridbook.storage.Storage` and implement
  `write_blob(path, blob)`.

`Writer` also takes an optional `created` datetime, which is recorded as the
document's creation time in `docProps/core.xml`. It defaults to the current
UTC time.

`gridbook.parts` has the functions that build each XML part. They are
`styles_xml`, `shared_strings_xml`, `rels_xml` and `content_types_xml`, plus
the functions for the document properties and the picture metadata.
`gridbook.xmlbuild.XmlBuilder` is the small XML builder those functions use.

## Errors

These raise `ValueError`:

- an invalid or duplicate sheet name
- a malformed merge range, a range of a single cell, or a range that overlaps
  an existing one
- a picture with an extension other than `.png`, `.jpg` or `.jpeg`, or with
  no data. This is raised when the workbook is written.

## Limitations

- gridbook only writes workbooks. It cannot read or change existing `.xlsx`
  files.
- Only booleans, numbers, shared strings and pictures have setters and are
  written with values. `CellType` also lists date, error, formula and inline
  string, but cells of those kinds that have no setter are written as empty
  cells.
- There is no support for number formats, fills, borders or font colours.
- Each worksheet is stored as `xl/worksheets/<sheet name>.xml`, so the part
  names follow the sheet names.