"""Render the document model into an HTML page."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence

from gdoc_renderer.model.document_model import Document, EmbeddedObject
from gdoc_renderer.model.elements import (
    AutoText,
    ColumnBreak,
    Equation,
    FootnoteReference,
    HorizontalRule,
    InlineObjectElement,
    PageBreak,
    Paragraph,
    ParagraphElement,
    Person,
    RichLink,
    SectionBreak,
    StructuralElement,
    Table,
    TableOfContents,
    TextRun,
)
from gdoc_renderer.model.style_model import TextStyle
from gdoc_renderer.renderer.html_writer import HtmlConsumer, HtmlWriter, ImageResolver, ImageRewriter
from gdoc_renderer.renderer.shortcodes import is_attribute_list, is_directive, write_attribute_list, write_shortcode
from gdoc_renderer.renderer.utils import ALIGNMENTS, compute_image_geometry, px, rotation, text_run_css
from gdoc_renderer.utils.errors import DanglingReferenceError, RenderError, UnsupportedElementError
from gdoc_renderer.utils.logger import get_logger
from gdoc_renderer.utils.units import dimension_to_px

LOGGER = get_logger(__name__)

UrlConverter = Callable[[str], str]

HEADING_TAGS = {
    "HEADING_1": "h1",
    "HEADING_2": "h2",
    "HEADING_3": "h3",
    "HEADING_4": "h4",
}
NORMAL_TEXT = "NORMAL_TEXT"
SOFT_LINE_BREAK = "\u000b"
TOC_CLASS = "table-of-contents"


@dataclass
class Indent:
    """List nesting state carried across the paragraphs of one element sequence."""

    depth: int = 0
    magnitude: float = 0.0


def render(
    document: Document,
    image_resolver: Optional[ImageResolver] = None,
    url_converter: Optional[UrlConverter] = None,
) -> str:
    """Render ``document`` to a full HTML page."""
    return HtmlRenderer(image_resolver=image_resolver, url_converter=url_converter).render(document)


def _identity(url: str) -> str:
    return url


class HtmlRenderer:
    """Recursive-descent walker producing HTML events for a document.

    All mutable state lives on the instance and is reset by ``render``, so a
    renderer must not be shared between threads; create one per document.
    """

    def __init__(
        self,
        image_resolver: Optional[ImageResolver] = None,
        url_converter: Optional[UrlConverter] = None,
    ) -> None:
        self._image_resolver = image_resolver
        self._convert_url = url_converter or _identity
        self._doc: Optional[Document] = None
        self._writer = HtmlWriter()
        self._out: HtmlConsumer = self._writer
        self._footnote_ids: List[str] = []

    def render(self, document: Document) -> str:
        self._doc = document
        self._writer = HtmlWriter()
        self._out = self._writer
        if self._image_resolver is not None:
            self._out = ImageRewriter(self._image_resolver, self._writer, document.document_id)
        self._footnote_ids = []

        self._format_doc(document)
        return self._writer.getvalue()

    # ------------------------------------------------------------------
    # Document structure

    def _format_doc(self, document: Document) -> None:
        out = self._out
        out.start_element("html")
        out.newline()

        out.start_element("head")
        out.newline()
        if document.title is not None:
            out.start_element("title")
            out.text(document.title)
            out.end_element("title")
            out.newline()
        out.end_element("head")
        out.newline()

        out.start_element("body")
        out.newline()
        if document.body is not None:
            self._format_structural_elements(document.body)
        if self._footnote_ids:
            # Footnote bodies are not rendered
            LOGGER.debug("Dropping %d footnote reference(s)", len(self._footnote_ids))
        out.end_element("body")
        out.newline()

        out.end_element("html")
        out.newline()
        out.end_document()

    def _format_structural_elements(self, elements: Sequence[StructuralElement]) -> None:
        indent = Indent()
        for element in elements:
            self._format_structural_element(element, indent)
        self._set_list_depth(indent, 0)

    def _format_structural_element(self, element: StructuralElement, indent: Indent) -> None:
        if isinstance(element, Paragraph):
            self._format_paragraph(element, indent)
        elif isinstance(element, Table):
            self._format_table(element)
        elif isinstance(element, SectionBreak):
            # Column layout of sections is not rendered
            LOGGER.debug("Skipping section break (%s)", element.section_type)
        elif isinstance(element, TableOfContents):
            self._out.start_element("div", [TOC_CLASS])
            self._out.newline()
            self._format_structural_elements(element.content)
            self._out.end_element("div")
            self._out.newline()
        else:
            raise UnsupportedElementError(type(element).__name__)

    def _set_list_depth(self, indent: Indent, new_depth: int) -> None:
        for _ in range(indent.depth, new_depth):
            # FIXME: distinguish ordered lists once list definitions are decoded
            self._out.newline()
            self._out.start_element("ul")
            self._out.newline()
        for _ in range(new_depth, indent.depth):
            self._out.end_element("ul")
            self._out.newline()
        indent.depth = new_depth

    # ------------------------------------------------------------------
    # Paragraphs

    def _format_paragraph(self, para: Paragraph, indent: Indent) -> None:
        text = para.text().strip()
        if is_directive(text):
            self._set_list_depth(indent, 0)
            indent.magnitude = 0.0
            if is_attribute_list(text):
                write_attribute_list(self._out, text)
            else:
                write_shortcode(self._out, text)
            return

        self._update_indent(para, indent)

        tag = "p"
        classes: List[str] = []
        style: Dict[str, str] = {}
        attrs: Dict[str, Optional[str]] = {}

        if para.style is not None:
            named = para.style.named_style_type
            if named in HEADING_TAGS:
                tag = HEADING_TAGS[named]
            elif named and named != NORMAL_TEXT:
                # TITLE, SUBTITLE, ...
                classes.append(named)
            if para.style.alignment in ALIGNMENTS:
                style["text-align"] = ALIGNMENTS[para.style.alignment]
            if para.style.heading_id:
                attrs["id"] = para.style.heading_id

        if para.bullet is not None:
            tag = "li"

        self._out.newline()
        self._out.start_element(tag, classes, style, attrs)
        for element in para.elements:
            self._format_paragraph_element(element)
        self._out.end_element(tag)
        self._out.newline()

    def _update_indent(self, para: Paragraph, indent: Indent) -> None:
        if para.bullet is not None:
            # Nesting level 0 is encoded as a missing value
            new_depth = (para.bullet.nesting_level or 0) + 1
        else:
            new_depth = 0

        new_magnitude = 0.0
        indent_start = para.style.indent_start if para.style is not None else None
        if indent_start is not None and indent_start.magnitude is not None:
            new_magnitude = indent_start.magnitude
            # A plain paragraph aligned with the previous list item stays in the list.
            # Only that case is handled, not general indentation.
            if new_depth == 0 and new_magnitude == indent.magnitude:
                new_depth = indent.depth

        self._set_list_depth(indent, new_depth)
        indent.magnitude = new_magnitude

    def _format_paragraph_element(self, element: ParagraphElement) -> None:
        if isinstance(element, TextRun):
            self._format_text_run(element)
        elif isinstance(element, PageBreak):
            LOGGER.debug("Skipping page break")
        elif isinstance(element, HorizontalRule):
            self._out.start_element("hr")
            self._out.newline()
        elif isinstance(element, InlineObjectElement):
            obj = self._document.inline_objects.get(element.inline_object_id)
            if obj is None:
                raise DanglingReferenceError(element.inline_object_id)
            self._format_embedded_object(element.inline_object_id, obj)
        elif isinstance(element, Person):
            self._out.text(element.name)
        elif isinstance(element, FootnoteReference):
            self._footnote_ids.append(element.footnote_id or "")
        elif isinstance(element, AutoText):
            raise UnsupportedElementError("AutoText", element.type or "")
        elif isinstance(element, ColumnBreak):
            raise UnsupportedElementError("ColumnBreak")
        elif isinstance(element, Equation):
            raise UnsupportedElementError("Equation")
        elif isinstance(element, RichLink):
            raise UnsupportedElementError("RichLink", element.uri or "")
        else:
            raise UnsupportedElementError(type(element).__name__)

    @property
    def _document(self) -> Document:
        if self._doc is None:
            raise RenderError("No document is being rendered")
        return self._doc

    # ------------------------------------------------------------------
    # Text runs

    def _format_text_run(self, run: TextRun) -> None:
        content = run.content
        if content.endswith("\n"):
            content = content[:-1]
        if not content:
            return

        style = run.style or TextStyle()
        link = style.link.target() if style.link is not None else None

        wrappers: List[str] = []
        if style.bold:
            wrappers.append("strong")
        if style.italic:
            wrappers.append("em")
        if style.strikethrough:
            wrappers.append("del")
        if style.baseline_offset == "SUPERSCRIPT":
            wrappers.append("sup")
        elif style.baseline_offset == "SUBSCRIPT":
            wrappers.append("sub")

        # Span styles are not put on the wrappers above: a <del> line-through
        # would be replaced by an underline declared on the same element.
        css = text_run_css(style, has_link=link is not None)

        if link is not None:
            href = link if link.startswith("#") else self._convert_url(link)
            self._out.start_element("a", attrs={"href": href})
        for tag in wrappers:
            self._out.start_element(tag)
        if css:
            self._out.start_element("span", style=css)

        self._content(content)

        if css:
            self._out.end_element("span")
        for tag in reversed(wrappers):
            self._out.end_element(tag)
        if link is not None:
            self._out.end_element("a")

    def _content(self, text: str) -> None:
        first, *rest = text.split(SOFT_LINE_BREAK)
        self._out.text(first)
        for chunk in rest:
            self._out.start_element("br")
            self._out.newline()
            self._out.text(chunk)

    # ------------------------------------------------------------------
    # Embedded objects

    def _format_embedded_object(self, object_id: str, obj: EmbeddedObject) -> None:
        if obj.image is None:
            raise UnsupportedElementError("EmbeddedDrawing", object_id)
        if obj.width is None or obj.height is None:
            raise RenderError(f"Inline object {object_id!r} has no size")
        if obj.image.content_uri is None:
            raise RenderError(f"Inline object {object_id!r} has no content URI")

        width = dimension_to_px(obj.width)
        height = dimension_to_px(obj.height)
        geometry = compute_image_geometry(width, height, obj.image.crop)

        span_style = {
            "display": "inline-block",
            "overflow": "hidden",
            "width": px(geometry.width),
            "height": px(geometry.height),
        }
        if obj.image.angle is not None:
            span_style["transform"] = rotation(obj.image.angle)

        img_style: Dict[str, str] = {}
        if obj.image.crop is not None and obj.image.crop.angle is not None:
            img_style["transform"] = rotation(obj.image.crop.angle)
        img_style["width"] = px(geometry.image_width)
        img_style["height"] = px(geometry.image_height)
        img_style["margin-left"] = px(geometry.margin_left)
        img_style["margin-top"] = px(geometry.margin_top)

        attrs: Dict[str, Optional[str]] = {"id": object_id, "src": obj.image.content_uri}
        alt = obj.description or obj.title
        if alt:
            attrs["alt"] = alt

        self._out.start_element("span", style=span_style)
        self._out.start_element("img", style=img_style, attrs=attrs)
        self._out.end_element("span")

    # ------------------------------------------------------------------
    # Tables

    def _format_table(self, table: Table) -> None:
        out = self._out
        out.newline()
        out.start_element("table", attrs={"border": None})
        out.newline()

        # Merged cells are still present in the rows as empty cells. For each
        # column, count how many upcoming cells must be skipped because of a
        # colspan on the same row or a rowspan above.
        skips: List[int] = []

        for row_index, row in enumerate(table.rows):
            out.start_element("tr")
            out.newline()
            if not skips:
                skips = [0] * len(row.cells)

            for col, cell in enumerate(row.cells):
                if col >= len(skips):
                    raise RenderError(f"Table row {row_index} has more cells than the first row ({len(skips)})")
                if skips[col] > 0:
                    skips[col] -= 1
                    continue

                colspan = (cell.style.column_span if cell.style else None) or 1
                rowspan = (cell.style.row_span if cell.style else None) or 1
                attrs: Dict[str, Optional[str]] = {}
                if colspan > 1:
                    if col + colspan > len(skips):
                        raise RenderError(f"Table row {row_index}: colspan {colspan} overflows column {col}")
                    for following in range(col + 1, col + colspan):
                        skips[following] += 1
                    attrs["colspan"] = str(colspan)
                if rowspan > 1:
                    # Skip the covered cells of the rows below
                    for covered in range(col, col + colspan):
                        skips[covered] += rowspan - 1
                    attrs["rowspan"] = str(rowspan)

                out.start_element("td", attrs=attrs)
                out.newline()
                self._format_structural_elements(cell.content)
                out.end_element("td")
                out.newline()

            out.end_element("tr")
            out.newline()

        out.end_element("table")
        out.newline()
