"""Builders for the individual XML parts of a spreadsheet package."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import List, Mapping, Sequence

from .style import XF, Font, UnderlineType
from .xmlbuild import XmlBuilder

NS_MAIN = "http://schemas.openxmlformats.org/spreadsheetml/2006/main"
NS_RELATIONSHIPS = "http://schemas.openxmlformats.org/officeDocument/2006/relationships"
NS_PACKAGE_RELATIONSHIPS = "http://schemas.openxmlformats.org/package/2006/relationships"
NS_CONTENT_TYPES = "http://schemas.openxmlformats.org/package/2006/content-types"
NS_RICH_DATA = "http://schemas.microsoft.com/office/spreadsheetml/2017/richdata"

_RICH_VALUE_BLOCK_URI = "{3e2802c4-a4d2-4d8b-9148-e3be6c30e623}"
_METADATA_FLAGS = (
    "copy",
    "pasteAll",
    "pasteValues",
    "merge",
    "splitFirst",
    "rowColShift",
    "clearFormats",
    "clearComments",
    "assign",
    "coerce",
)
_RICH_VALUE_KEYS = (
    "_DisplayString",
    "_Flags",
    "_Format",
    "_SubLabel",
    "_Attribution",
    "_Icon",
    "_Display",
    "_CanonicalPropertyNames",
    "_ClassificationId",
)


@dataclass(frozen=True)
class RelInfo:
    """A relationship: its schema type and the relative target path."""

    type: str
    target: str


@dataclass
class MediaInfo:
    """An embedded media file: hashed name, data, internal id and relationship id."""

    name: str
    blob: bytes
    iid: int
    rid: str


def core_properties_xml(created: datetime) -> bytes:
    """Build docProps/core.xml with the given creation time (naive times count as UTC)."""
    if created.tzinfo is None:
        created = created.replace(tzinfo=timezone.utc)
    stamp = created.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")
    x = XmlBuilder()
    x.start("cp:coreProperties")
    x.attr("xmlns:cp", "http://schemas.openxmlformats.org/package/2006/metadata/core-properties")
    x.attr("xmlns:dc", "http://purl.org/dc/elements/1.1/")
    x.attr("xmlns:dcterms", "http://purl.org/dc/terms/")
    x.attr("xmlns:dcmitype", "http://purl.org/dc/dcmitype/")
    x.attr("xmlns:xsi", "http://www.w3.org/2001/XMLSchema-instance")
    x.start("dcterms:created", True).attr("xsi:type", "dcterms:W3CDTF").text(stamp).end()
    x.end()
    return x.to_bytes()


def app_properties_xml(app_name: str) -> bytes:
    """Build docProps/app.xml, naming the application if app_name is not empty."""
    x = XmlBuilder()
    x.start("Properties")
    x.attr("xmlns", "http://schemas.openxmlformats.org/officeDocument/2006/extended-properties")
    x.attr("xmlns:vt", "http://schemas.openxmlformats.org/officeDocument/2006/docPropsVTypes")
    if app_name:
        x.start("Application", True).text(app_name).end()
    x.end()
    return x.to_bytes()


def content_types_xml(defaults: Mapping[str, str], overrides: Mapping[str, str]) -> bytes:
    """Build [Content_Types].xml from extension and part-name maps, each in key order."""
    x = XmlBuilder()
    x.start("Types").attr("xmlns", NS_CONTENT_TYPES)
    for ext in sorted(defaults):
        x.start("Default", True).attr("Extension", ext).attr("ContentType", defaults[ext]).end()
    for part in sorted(overrides):
        x.start("Override", True).attr("PartName", part).attr("ContentType", overrides[part]).end()
    x.end()
    return x.to_bytes()


def rels_xml(rels: Mapping[str, RelInfo]) -> bytes:
    """Build a relationships part from a map of id to relationship, in id order."""
    x = XmlBuilder()
    x.start("Relationships").attr("xmlns", NS_PACKAGE_RELATIONSHIPS)
    for rid in sorted(rels):
        info = rels[rid]
        x.start("Relationship", True).attr("Id", rid).attr("Type", info.type)
        x.attr("Target", info.target).end()
    x.end()
    return x.to_bytes()


def _write_font(x: XmlBuilder, font: Font) -> None:
    x.start("font", True)
    if font.bold:
        x.start("b").end()
    if font.italic:
        x.start("i").end()
    if font.strikethrough:
        x.start("strike").end()
    if font.underline != UnderlineType.NONE:
        x.start("u")
        if font.underline != UnderlineType.SINGLE:
            x.attr("val", font.underline)
        x.end()
    x.start("sz").attr("val", font.size or 11).end()
    x.start("name").attr("val", "Calibri").end()
    x.start("family").attr("val", 2).end()
    x.end()


def styles_xml(xfs: Sequence[XF], fonts: Sequence[Font] = ()) -> bytes:
    """Build xl/styles.xml for the given cell formats.

    Fonts already known are listed first; custom fonts of xfs not among them
    follow. Index 0 of both fonts and cell formats is the default.
    """
    all_fonts: List[Font] = list(fonts)
    for xf in xfs:
        if not xf.font.is_default() and xf.font not in all_fonts:
            all_fonts.append(xf.font)

    x = XmlBuilder()
    x.start("styleSheet").attr("xmlns", NS_MAIN)

    x.start("fonts", True).attr("count", len(all_fonts) + 1)
    _write_font(x, Font())
    for font in all_fonts:
        _write_font(x, font)
    x.end()

    x.start("fills", True).attr("count", 1)
    x.start("fill", True)
    x.start("patternFill").attr("patternType", "none").end()
    x.end()
    x.end()

    x.start("borders", True).attr("count", 1)
    x.start("border", True)
    for side in ("left", "right", "top", "bottom", "diagonal"):
        x.start(side, True).end()
    x.end()
    x.end()

    x.start("cellStyleXfs", True).attr("count", 1)
    x.start("xf", True).attr("numFmtId", "0").attr("fontId", "0")
    x.attr("fillId", "0").attr("borderId", "0").end()
    x.end()

    x.start("cellXfs", True).attr("count", len(xfs) + 1)
    x.start("xf", True).attr("numFmtId", "0").attr("fontId", "0")
    x.attr("fillId", "0").attr("borderId", "0").attr("xfId", "0").end()
    for xf in xfs:
        custom_font = not xf.font.is_default()
        font_id = all_fonts.index(xf.font) + 1 if custom_font else 0
        x.start("xf", True).attr("numFmtId", "0").attr("fontId", font_id)
        x.attr("fillId", "0").attr("borderId", "0").attr("xfId", "0")
        if custom_font:
            x.attr("applyFont", "1")
        if not xf.alignment.is_empty():
            x.attr("applyAlignment", "1")
            x.start("alignment")
            if xf.alignment.horizontal:
                x.attr("horizontal", xf.alignment.horizontal)
            if xf.alignment.vertical:
                x.attr("vertical", xf.alignment.vertical)
            x.end()
        x.end()
    x.end()

    x.end()
    return x.to_bytes()


def shared_strings_xml(strings: Sequence[str]) -> bytes:
    """Build xl/sharedStrings.xml listing strings in order."""
    x = XmlBuilder()
    x.start("sst").attr("xmlns", NS_MAIN)
    x.attr("count", len(strings)).attr("uniqueCount", len(strings))
    for s in strings:
        x.start("si", True).start("t").text(s).end().end()
    x.end()
    return x.to_bytes()


def metadata_xml(media: Sequence[MediaInfo]) -> bytes:
    """Build xl/metadata.xml tying value metadata to rich image values."""
    x = XmlBuilder()
    x.start("metadata").attr("xmlns", NS_MAIN).attr("xmlns:xlrd", NS_RICH_DATA)

    x.start("metadataTypes", True).attr("count", 1)
    x.start("metadataType", True).attr("name", "XLRICHVALUE")
    x.attr("minSupportedVersion", "120000")
    for flag in _METADATA_FLAGS:
        x.attr(flag, 1)
    x.end()
    x.end()

    x.start("futureMetadata").attr("name", "XLRICHVALUE").attr("count", len(media))
    for m in media:
        x.start("bk", True).start("extLst")
        x.start("ext").attr("uri", _RICH_VALUE_BLOCK_URI)
        x.start("xlrd:rvb").attr("i", m.iid).end()
        x.end().end().end()
    x.end()

    x.start("valueMetadata").attr("count", len(media))
    for m in media:
        x.start("bk", True).start("rc").attr("t", 1).attr("v", m.iid).end().end()
    x.end()

    x.end()
    return x.to_bytes()


def rich_value_rel_xml(media: Sequence[MediaInfo]) -> bytes:
    """Build xl/richData/richValueRel.xml referencing each media relationship."""
    x = XmlBuilder()
    x.start("richValueRels")
    x.attr("xmlns", "http://schemas.microsoft.com/office/spreadsheetml/2022/richvaluerel")
    x.attr("xmlns:r", NS_RELATIONSHIPS)
    for m in media:
        x.start("rel", True).attr("r:id", m.rid).end()
    x.end()
    return x.to_bytes()


def rich_value_structure_xml() -> bytes:
    """Build xl/richData/rdrichvaluestructure.xml defining the local image structure."""
    x = XmlBuilder()
    x.start("rvStructures").attr("xmlns", NS_RICH_DATA).attr("count", 1)
    x.start("s", True).attr("t", "_localImage")
    x.start("k", True).attr("n", "_rvRel:LocalImageIdentifier").attr("t", "i").end()
    x.start("k", True).attr("n", "CalcOrigin").attr("t", "i").end()
    x.end()
    x.end()
    return x.to_bytes()


def rich_value_data_xml(media: Sequence[MediaInfo]) -> bytes:
    """Build xl/richData/rdrichvalue.xml with one rich value per media file."""
    x = XmlBuilder()
    x.start("rvData").attr("xmlns", NS_RICH_DATA).attr("count", len(media))
    for m in media:
        x.start("rv", True).attr("s", 0)
        x.start("v").text(m.iid).end()
        x.start("v").text(5).end()
        x.end()
    x.end()
    return x.to_bytes()


def rich_value_types_xml() -> bytes:
    """Build xl/richData/rdRichValueTypes.xml with the global key flags."""
    x = XmlBuilder()
    x.start("rvTypesInfo")
    x.attr("xmlns", "http://schemas.microsoft.com/office/spreadsheetml/2017/richdata2")
    x.attr("xmlns:mc", "http://schemas.openxmlformats.org/markup-compatibility/2006")
    x.attr("xmlns:x", NS_MAIN)
    x.attr("mc:Ignorable", "x")
    x.start("global")
    x.start("key", True).attr("name", "_Self")
    x.start("flag", True).attr("name", "ExcludeFromFile").attr("value", 1).end()
    x.start("flag", True).attr("name", "ExcludeFromCalcComparison").attr("value", 1).end()
    x.end()
    for key in _RICH_VALUE_KEYS:
        x.start("key", True).attr("name", key)
        x.start("flag", True).attr("name", "ExcludeFromCalcComparison").attr("value", 1).end()
        x.end()
    x.end()
    x.end()
    return x.to_bytes()