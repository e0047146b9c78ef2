"""Assembles a workbook into the parts of a spreadsheet package and writes them out."""

from __future__ import annotations

import copy
import os
from datetime import datetime, timezone
from typing import BinaryIO, Dict, List, Optional, Union

from .media import PictureInfo, blob_hash
from .parts import (
    NS_MAIN,
    NS_RELATIONSHIPS,
    MediaInfo,
    RelInfo,
    app_properties_xml,
    content_types_xml,
    core_properties_xml,
    metadata_xml,
    rels_xml,
    rich_value_data_xml,
    rich_value_rel_xml,
    rich_value_structure_xml,
    shared_strings_xml,
    styles_xml,
)
from .storage import Storage, ZipStorage
from .style import XF, Font
from .workbook import Cell, CellType, Sheet, Workbook
from .xmlbuild import XmlBuilder

_REL_BASE = "http://schemas.openxmlformats.org/officeDocument/2006/relationships/"
_CT_BASE = "application/vnd.openxmlformats-officedocument."


class Writer:
    """Generates the package parts of a workbook and writes them to a storage."""

    def __init__(self, storage: Storage, created: Optional[datetime] = None) -> None:
        self._out = storage
        self._created = created
        self._last_global_id = 0
        self._last_workbook_id = 0
        self._last_rich_data_id = 0

        self.global_rels: Dict[str, RelInfo] = {}
        self.workbook_rels: Dict[str, RelInfo] = {}
        self.default_content_types: Dict[str, str] = {
            "xml": "application/xml",
            "rels": "application/vnd.openxmlformats-package.relationships+xml",
        }
        self.part_content_types: Dict[str, str] = {}
        self.rich_data_rels: Dict[str, RelInfo] = {}

        self._shared_strings: List[str] = []
        self._shared_string_map: Dict[str, int] = {}
        self._media: List[MediaInfo] = []
        self._media_map: Dict[str, MediaInfo] = {}
        self._xfs: List[XF] = []
        self._fonts: List[Font] = []

    def shared_string(self, s: str) -> int:
        """Return the index of s in the shared string table, adding it if new."""
        index = self._shared_string_map.get(s)
        if index is None:
            index = len(self._shared_strings)
            self._shared_strings.append(s)
            self._shared_string_map[s] = index
        return index

    def find_xf(self, xf: XF) -> int:
        """Return the index of an equal cell format, or -1."""
        return next((i for i, v in enumerate(self._xfs) if v == xf), -1)

    def find_font(self, font: Font) -> int:
        """Return the index of an equal custom font, or -1."""
        return next((i for i, f in enumerate(self._fonts) if f == font), -1)

    def _next_global_id(self) -> str:
        self._last_global_id += 1
        return f"rId{self._last_global_id}"

    def _next_workbook_id(self) -> tuple:
        self._last_workbook_id += 1
        return self._last_workbook_id, f"rId{self._last_workbook_id}"

    def _next_rich_data_id(self) -> str:
        self._last_rich_data_id += 1
        return f"rId{self._last_rich_data_id}"

    def _add_global_part(self, relpath: str, content_type: str, rel_type: str, blob: bytes) -> None:
        rid = self._next_global_id()
        abspath = "/" + relpath
        self.part_content_types[abspath] = content_type
        self.global_rels[rid] = RelInfo(type=rel_type, target=relpath)
        self._out.write_blob(abspath, blob)

    def _add_workbook_part(self, relpath: str, content_type: str, rel_type: str, blob: bytes) -> None:
        _, rid = self._next_workbook_id()
        abspath = "/xl/" + relpath
        self.part_content_types[abspath] = content_type
        self.workbook_rels[rid] = RelInfo(type=rel_type, target=relpath)
        self._out.write_blob(abspath, blob)

    def write(self, workbook: Workbook) -> None:
        """Write every part of workbook to the storage; raise ValueError on bad cell data."""
        self._write_workbook(workbook)

        if self._media:
            self._write_media()
            self._add_workbook_part(
                "richData/richValueRel.xml",
                "application/vnd.ms-excel.richvaluerel+xml",
                "http://schemas.microsoft.com/office/2022/10/relationships/richValueRel",
                rich_value_rel_xml(self._media),
            )
            self._out.write_blob(
                "/xl/richData/_rels/richValueRel.xml.rels", rels_xml(self.rich_data_rels)
            )
            self._add_workbook_part(
                "richData/rdrichvaluestructure.xml",
                "application/vnd.ms-excel.rdrichvaluestructure+xml",
                "http://schemas.microsoft.com/office/2017/06/relationships/rdRichValueStructure",
                rich_value_structure_xml(),
            )
            self._add_workbook_part(
                "richData/rdrichvalue.xml",
                "application/vnd.ms-excel.rdrichvalue+xml",
                "http://schemas.microsoft.com/office/2017/06/relationships/rdRichValue",
                rich_value_data_xml(self._media),
            )
            self._add_workbook_part(
                "metadata.xml",
                _CT_BASE + "spreadsheetml.sheetMetadata+xml",
                _REL_BASE + "sheetMetadata",
                metadata_xml(self._media),
            )

        created = self._created or datetime.now(timezone.utc)
        self._add_global_part(
            "docProps/core.xml",
            "application/vnd.openxmlformats-package.core-properties+xml",
            "http://schemas.openxmlformats.org/package/2006/relationships/metadata/core-properties",
            core_properties_xml(created),
        )
        self._add_global_part(
            "docProps/app.xml",
            _CT_BASE + "extended-properties+xml",
            _REL_BASE + "extended-properties",
            app_properties_xml(workbook.app_name),
        )

        if self._shared_strings:
            self._add_workbook_part(
                "sharedStrings.xml",
                _CT_BASE + "spreadsheetml.sharedStrings+xml",
                _REL_BASE + "sharedStrings",
                shared_strings_xml(self._shared_strings),
            )

        if self._xfs:
            for xf in self._xfs:
                if not xf.font.is_default() and self.find_font(xf.font) < 0:
                    self._fonts.append(xf.font)
            self._add_workbook_part(
                "styles.xml",
                _CT_BASE + "spreadsheetml.styles+xml",
                _REL_BASE + "styles",
                styles_xml(self._xfs, self._fonts),
            )

        self._out.write_blob("/xl/_rels/workbook.xml.rels", rels_xml(self.workbook_rels))
        self._out.write_blob("/_rels/.rels", rels_xml(self.global_rels))
        self._out.write_blob(
            "[Content_Types].xml",
            content_types_xml(self.default_content_types, self.part_content_types),
        )

    def _write_workbook(self, workbook: Workbook) -> None:
        rid = self._next_global_id()
        relpath = "xl/workbook.xml"
        abspath = "/" + relpath
        self.part_content_types[abspath] = _CT_BASE + "spreadsheetml.sheet.main+xml"
        self.global_rels[rid] = RelInfo(type=_REL_BASE + "officeDocument", target=relpath)

        x = XmlBuilder()
        x.start("workbook").attr("xmlns", NS_MAIN).attr("xmlns:r", NS_RELATIONSHIPS)
        x.start("sheets", True)
        for sheet in workbook.sheets:
            sheet_id, sheet_rid = self._next_workbook_id()
            x.start("sheet", True).attr("name", sheet.name)
            x.attr("sheetId", sheet_id).attr("r:id", sheet_rid).end()
            self._write_sheet(sheet, sheet_rid)
        x.end()
        x.end()
        self._out.write_blob(abspath, x.to_bytes())

    def _write_sheet(self, sheet: Sheet, rid: str) -> None:
        relpath = f"worksheets/{sheet.name}.xml"
        abspath = "/xl/" + relpath
        self.part_content_types[abspath] = _CT_BASE + "spreadsheetml.worksheet+xml"
        self.workbook_rels[rid] = RelInfo(type=_REL_BASE + "worksheet", target=relpath)

        x = XmlBuilder()
        x.start("worksheet").attr("xmlns", NS_MAIN).attr("xmlns:r", NS_RELATIONSHIPS)

        if sheet.columns:
            x.start("cols", True)
            for n in sorted(sheet.columns):
                column = sheet.columns[n]
                x.start("col", True).attr("min", n).attr("max", n)
                if column.width > 0:
                    x.attr("width", column.width).attr("customWidth", 1)
                x.end()
            x.end()

        x.start("sheetData", True)
        for row in sheet.rows:
            x.start("row", True).attr("r", row.row_number)
            if row.height > 0:
                x.attr("ht", row.height).attr("customHeight", 1)
            for cell in row.cells:
                self._write_cell(x, cell)
            x.end()
        x.end()

        if sheet.merge_cells:
            x.start("mergeCells", True).attr("count", len(sheet.merge_cells))
            for mc in sheet.merge_cells:
                x.start("mergeCell", True).attr("ref", mc.ref).end()
            x.end()

        x.end()
        self._out.write_blob(abspath, x.to_bytes())

    def _write_cell(self, x: XmlBuilder, cell: Cell) -> None:
        x.start("c", True).attr("r", cell.coord)
        if not cell.xf.is_empty():
            index = self.find_xf(cell.xf)
            if index < 0:
                self._xfs.append(copy.deepcopy(cell.xf))
                index = len(self._xfs) - 1
            x.attr("s", index + 1)

        kind = cell.cell_type
        if kind == CellType.BOOL:
            x.attr("t", "b").start("v").text(cell.value).end()
        elif kind == CellType.NUMBER:
            x.attr("t", "n").start("v").text(cell.value).end()
        elif kind == CellType.ERROR:
            x.attr("t", "e").start("v").text(cell.value).end()
        elif kind == CellType.SHARED_STRING:
            x.attr("t", "s").start("v").text(self.shared_string(cell.value)).end()
        elif kind == CellType.PICTURE:
            info = self._register_picture(cell.picture)
            x.attr("t", "e").attr("vm", info.iid + 1)
            x.start("v").text("#VALUE!").end()
        x.end()

    def _register_picture(self, picture: Optional[PictureInfo]) -> MediaInfo:
        if picture is None:
            raise ValueError("missing picture data")
        ext = picture.extension.lower()
        if ext == ".jpg":
            ext = ".jpeg"
        if ext == ".jpeg":
            self.default_content_types["jpeg"] = "image/jpeg"
        elif ext == ".png":
            self.default_content_types["png"] = "image/png"
        else:
            raise ValueError(f"unsupported image extension {ext}")
        name = f"{blob_hash(picture.blob):016x}{ext}"
        info = self._media_map.get(name)
        if info is None:
            info = MediaInfo(
                name=name,
                blob=bytes(picture.blob),
                iid=len(self._media),
                rid=self._next_rich_data_id(),
            )
            self._media_map[name] = info
            self._media.append(info)
        if not info.blob:
            raise ValueError("empty picture data")
        return info

    def _write_media(self) -> None:
        for m in self._media:
            self._out.write_blob("/xl/media/" + m.name, m.blob)
            self.rich_data_rels[m.rid] = RelInfo(
                type=_REL_BASE + "image", target="../media/" + m.name
            )


def save_workbook(
    workbook: Workbook, path: Union[str, os.PathLike, BinaryIO]
) -> None:
    """Write workbook as an .xlsx archive to path or a binary file object."""
    with ZipStorage(path) as storage:
        Writer(storage).write(workbook)