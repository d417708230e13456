"""Structural and paragraph elements of a Docs API document body.

Both levels are tagged unions: each JSON element populates exactly one
variant, and the parser maps it to one of the dataclasses below.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Tuple, Union

from gdoc_renderer.model.style_model import Bullet, ParagraphStyle, TableCellStyle, TextStyle


# ----------------------------------------------------------------------
# Paragraph elements

@dataclass(frozen=True, slots=True)
class TextRun:
    content: str = ""
    style: Optional[TextStyle] = None


@dataclass(frozen=True, slots=True)
class AutoText:
    type: Optional[str] = None


@dataclass(frozen=True, slots=True)
class PageBreak:
    pass


@dataclass(frozen=True, slots=True)
class ColumnBreak:
    pass


@dataclass(frozen=True, slots=True)
class FootnoteReference:
    footnote_id: Optional[str] = None
    footnote_number: Optional[str] = None


@dataclass(frozen=True, slots=True)
class HorizontalRule:
    pass


@dataclass(frozen=True, slots=True)
class Equation:
    pass


@dataclass(frozen=True, slots=True)
class InlineObjectElement:
    inline_object_id: str


@dataclass(frozen=True, slots=True)
class Person:
    name: str = ""
    email: Optional[str] = None


@dataclass(frozen=True, slots=True)
class RichLink:
    uri: Optional[str] = None
    title: Optional[str] = None


ParagraphElement = Union[
    TextRun,
    AutoText,
    PageBreak,
    ColumnBreak,
    FootnoteReference,
    HorizontalRule,
    Equation,
    InlineObjectElement,
    Person,
    RichLink,
]


# ----------------------------------------------------------------------
# Structural elements

@dataclass(frozen=True, slots=True)
class Paragraph:
    """A range of content terminated by a newline."""

    elements: Tuple[ParagraphElement, ...] = ()
    style: Optional[ParagraphStyle] = None
    bullet: Optional[Bullet] = None

    def text(self) -> str:
        """Concatenated content of the paragraph's text runs."""
        return "".join(elt.content for elt in self.elements if isinstance(elt, TextRun))


@dataclass(frozen=True, slots=True)
class TableCell:
    content: Tuple["StructuralElement", ...] = ()
    style: Optional[TableCellStyle] = None


@dataclass(frozen=True, slots=True)
class TableRow:
    cells: Tuple[TableCell, ...] = ()


@dataclass(frozen=True, slots=True)
class Table:
    rows: Tuple[TableRow, ...] = ()


@dataclass(frozen=True, slots=True)
class SectionBreak:
    section_type: Optional[str] = None


@dataclass(frozen=True, slots=True)
class TableOfContents:
    content: Tuple["StructuralElement", ...] = field(default_factory=tuple)


StructuralElement = Union[Paragraph, Table, SectionBreak, TableOfContents]
