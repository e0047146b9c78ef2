"""A small streaming builder for indented XML documents."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import List

_DECLARATION = '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>\n'

_TEXT_ESCAPES = str.maketrans({"&": "&amp;", "<": "&lt;", ">": "&gt;"})
_ATTR_ESCAPES = str.maketrans(
    {
        "&": "&amp;",
        "<": "&lt;",
        ">": "&gt;",
        '"': "&quot;",
        "\n": "&#10;",
        "\r": "&#13;",
        "\t": "&#9;",
    }
)


def format_value(value: object) -> str:
    """Render a value as XML text: enums by value, booleans as 1/0, whole floats without a fraction."""
    if isinstance(value, Enum):
        value = value.value
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if math.isfinite(value) and value.is_integer() and abs(value) < 1e21:
            return str(int(value))
        return repr(value)
    return str(value)


@dataclass
class _Frame:
    name: str
    start_open: bool = True
    block: bool = False


class XmlBuilder:
    """Builds an XML document element by element.

    Elements started with ``newline=True`` go on a line of their own, indented
    by depth; other elements follow their predecessor directly. An element with
    no content is written as an empty-element tag.
    """

    def __init__(self, indent: str = "  ", declaration: bool = True) -> None:
        self._indent = indent
        self._out: List[str] = [_DECLARATION] if declaration else []
        self._stack: List[_Frame] = []

    def _close_start_tag(self) -> None:
        if self._stack and self._stack[-1].start_open:
            self._out.append(">")
            self._stack[-1].start_open = False

    def start(self, name: str, newline: bool = False) -> "XmlBuilder":
        """Open an element, on a new indented line if newline is true."""
        self._close_start_tag()
        if newline:
            if self._stack:
                self._stack[-1].block = True
                self._out.append("\n" + self._indent * len(self._stack))
            elif self._out and not self._out[-1].endswith("\n"):
                self._out.append("\n")
        self._out.append("<" + name)
        self._stack.append(_Frame(name))
        return self

    def attr(self, name: str, value: object) -> "XmlBuilder":
        """Add an attribute to the element just opened."""
        if not self._stack or not self._stack[-1].start_open:
            raise ValueError(f"attribute '{name}' must follow the start of an element")
        escaped = format_value(value).translate(_ATTR_ESCAPES)
        self._out.append(f' {name}="{escaped}"')
        return self

    def text(self, value: object) -> "XmlBuilder":
        """Write character data inside the current element."""
        if not self._stack:
            raise ValueError("text must be written inside an element")
        self._close_start_tag()
        self._out.append(format_value(value).translate(_TEXT_ESCAPES))
        return self

    def end(self) -> "XmlBuilder":
        """Close the current element."""
        if not self._stack:
            raise ValueError("no element is open")
        frame = self._stack.pop()
        if frame.start_open:
            self._out.append("/>")
            return self
        if frame.block:
            self._out.append("\n" + self._indent * len(self._stack))
        self._out.append(f"</{frame.name}>")
        return self

    def to_bytes(self) -> bytes:
        """Return the finished document encoded as UTF-8."""
        if self._stack:
            open_names = ", ".join(frame.name for frame in self._stack)
            raise ValueError(f"unclosed elements: {open_names}")
        return "".join(self._out).encode("utf-8")