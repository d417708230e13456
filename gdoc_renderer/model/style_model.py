"""Style bundles attached to paragraphs, text runs and table cells."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True, slots=True)
class Dimension:
    """A magnitude in a given unit (the API only uses ``PT``)."""

    magnitude: Optional[float] = None
    unit: Optional[str] = None


@dataclass(frozen=True, slots=True)
class RgbColor:
    """Channels in the 0.0-1.0 range. A missing channel is ``None``."""

    red: Optional[float] = None
    green: Optional[float] = None
    blue: Optional[float] = None

    @property
    def is_complete(self) -> bool:
        return self.red is not None and self.green is not None and self.blue is not None


@dataclass(frozen=True, slots=True)
class OptionalColor:
    """Opaque color when ``rgb`` is set; transparent (unknown) otherwise."""

    rgb: Optional[RgbColor] = None


@dataclass(frozen=True, slots=True)
class Link:
    url: Optional[str] = None
    heading_id: Optional[str] = None
    bookmark_id: Optional[str] = None

    def target(self) -> Optional[str]:
        """Resolve the href, URL first, then heading and bookmark anchors."""
        if self.url:
            return self.url
        if self.heading_id:
            return "#" + self.heading_id
        if self.bookmark_id:
            return "#" + self.bookmark_id
        return None


@dataclass(frozen=True, slots=True)
class TextStyle:
    """Inline styling of a text run. ``None`` means inherited/not set."""

    bold: Optional[bool] = None
    italic: Optional[bool] = None
    strikethrough: Optional[bool] = None
    underline: Optional[bool] = None
    small_caps: Optional[bool] = None
    baseline_offset: Optional[str] = None
    foreground_color: Optional[OptionalColor] = None
    background_color: Optional[OptionalColor] = None
    link: Optional[Link] = None


@dataclass(frozen=True, slots=True)
class ParagraphStyle:
    named_style_type: Optional[str] = None
    alignment: Optional[str] = None
    indent_start: Optional[Dimension] = None
    heading_id: Optional[str] = None


@dataclass(frozen=True, slots=True)
class Bullet:
    """List membership of a paragraph. Level 0 is encoded as ``None`` by the API."""

    list_id: Optional[str] = None
    nesting_level: Optional[int] = None


@dataclass(frozen=True, slots=True)
class TableCellStyle:
    column_span: Optional[int] = None
    row_span: Optional[int] = None
