"""Cell formatting: alignment, font and the combined extended format (XF)."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class HorizontalAlignment(str, Enum):
    """Horizontal alignment of cell content (ST_HorizontalAlignment)."""

    GENERAL = "general"
    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"
    FILL = "fill"
    JUSTIFY = "justify"
    CENTER_CONTINUOUS = "centerContinuous"
    DISTRIBUTED = "distributed"

    def __str__(self) -> str:
        return self.value


class VerticalAlignment(str, Enum):
    """Vertical alignment of cell content (ST_VerticalAlignment)."""

    TOP = "top"
    CENTER = "center"
    BOTTOM = "bottom"
    JUSTIFY = "justify"
    DISTRIBUTED = "distributed"

    def __str__(self) -> str:
        return self.value


class UnderlineType(str, Enum):
    """Underline style of a font (ST_UnderlineValues); NONE means no underline."""

    NONE = ""
    SINGLE = "single"
    DOUBLE = "double"
    SINGLE_ACCOUNTING = "singleAccounting"
    DOUBLE_ACCOUNTING = "doubleAccounting"

    def __str__(self) -> str:
        return self.value


@dataclass
class Font:
    """Font properties of cell content. A size of 0 means the default of 11 points."""

    size: float = 0.0
    bold: bool = False
    italic: bool = False
    underline: UnderlineType = UnderlineType.NONE
    strikethrough: bool = False

    def is_default(self) -> bool:
        """Return True if every property has its default value."""
        return (
            self.size == 0
            and not self.bold
            and not self.italic
            and self.underline == UnderlineType.NONE
            and not self.strikethrough
        )

    def is_empty(self) -> bool:
        """Return True if no custom property is set."""
        return self.is_default()


@dataclass
class Alignment:
    """Horizontal and vertical alignment; None means the default."""

    horizontal: Optional[HorizontalAlignment] = None
    vertical: Optional[VerticalAlignment] = None

    def is_empty(self) -> bool:
        """Return True if neither direction is set."""
        return not self.horizontal and not self.vertical


@dataclass
class XF:
    """The complete formatting of a cell: alignment and font."""

    alignment: Alignment = field(default_factory=Alignment)
    font: Font = field(default_factory=Font)

    def is_empty(self) -> bool:
        """Return True if neither alignment nor font carry custom properties."""
        return self.alignment.is_empty() and self.font.is_empty()