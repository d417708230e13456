"""Decode Docs API JSON into the read-only document model."""
from __future__ import annotations

from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple

from gdoc_renderer.model.document_model import (
    CropProperties,
    Document,
    EmbeddedObject,
    Footnote,
    ImageProperties,
)
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
    TableCell,
    TableOfContents,
    TableRow,
    TextRun,
)
from gdoc_renderer.model.style_model import (
    Bullet,
    Dimension,
    Link,
    OptionalColor,
    ParagraphStyle,
    RgbColor,
    TableCellStyle,
    TextStyle,
)
from gdoc_renderer.utils.errors import DocumentDecodeError
from gdoc_renderer.utils.logger import get_logger

LOGGER = get_logger(__name__)

JsonObject = Mapping[str, Any]

STRUCTURAL_VARIANTS = ("paragraph", "table", "sectionBreak", "tableOfContents")
PARAGRAPH_VARIANTS = (
    "textRun",
    "autoText",
    "pageBreak",
    "columnBreak",
    "footnoteReference",
    "horizontalRule",
    "equation",
    "inlineObjectElement",
    "person",
    "richLink",
)


class DocumentParser:
    """Transforms a decoded JSON payload into model elements."""

    def __init__(self, payload: JsonObject) -> None:
        if not isinstance(payload, Mapping):
            raise DocumentDecodeError("Document payload must be a JSON object")
        self._payload = payload

    def parse(self) -> Document:
        """Parse the whole document. Raises ``DocumentDecodeError`` on schema violations."""
        payload = self._payload
        body = payload.get("body")
        content: Optional[Tuple[StructuralElement, ...]] = None
        if body is not None:
            content = self._parse_structural_elements(_object(body, "body").get("content"), "body")
        else:
            LOGGER.debug("Document has no body")

        inline_objects = {
            object_id: self._parse_inline_object(object_id, value)
            for object_id, value in _object(payload.get("inlineObjects") or {}, "inlineObjects").items()
        }
        footnotes = {
            footnote_id: Footnote(
                footnote_id=footnote_id,
                content=self._parse_structural_elements(
                    _object(value, f"footnote {footnote_id}").get("content"), f"footnote {footnote_id}"
                )
                or (),
            )
            for footnote_id, value in _object(payload.get("footnotes") or {}, "footnotes").items()
        }

        return Document(
            title=_opt(payload, "title", str),
            document_id=_opt(payload, "documentId", str),
            body=content,
            inline_objects=inline_objects,
            footnotes=footnotes,
        )

    # ------------------------------------------------------------------
    # Structural elements

    def _parse_structural_elements(self, items: Any, context: str) -> Optional[Tuple[StructuralElement, ...]]:
        if items is None:
            return None
        return tuple(
            self._parse_structural_element(item, f"{context}[{index}]")
            for index, item in enumerate(_array(items, context))
        )

    def _parse_structural_element(self, item: Any, context: str) -> StructuralElement:
        kind, value = _single_variant(_object(item, context), STRUCTURAL_VARIANTS, context)
        if kind == "paragraph":
            return self._parse_paragraph(_object(value, context), context)
        if kind == "table":
            return self._parse_table(_object(value, context), context)
        if kind == "sectionBreak":
            style = _object(value, context).get("sectionStyle") or {}
            return SectionBreak(section_type=_opt(style, "sectionType", str))
        toc = _object(value, context)
        return TableOfContents(content=self._parse_structural_elements(toc.get("content"), context) or ())

    def _parse_paragraph(self, para: JsonObject, context: str) -> Paragraph:
        elements = tuple(
            self._parse_paragraph_element(item, f"{context}.elements[{index}]")
            for index, item in enumerate(_array(para.get("elements") or [], context))
        )
        style = None
        if para.get("paragraphStyle") is not None:
            style = self._parse_paragraph_style(_object(para["paragraphStyle"], context))
        bullet = None
        if para.get("bullet") is not None:
            raw = _object(para["bullet"], context)
            bullet = Bullet(list_id=_opt(raw, "listId", str), nesting_level=_opt(raw, "nestingLevel", int))
        return Paragraph(elements=elements, style=style, bullet=bullet)

    def _parse_paragraph_style(self, style: JsonObject) -> ParagraphStyle:
        return ParagraphStyle(
            named_style_type=_opt(style, "namedStyleType", str),
            alignment=_opt(style, "alignment", str),
            indent_start=_dimension(style.get("indentStart")),
            heading_id=_opt(style, "headingId", str),
        )

    def _parse_table(self, table: JsonObject, context: str) -> Table:
        rows: List[TableRow] = []
        for row_index, row in enumerate(_array(table.get("tableRows") or [], context)):
            row_context = f"{context}.tableRows[{row_index}]"
            cells: List[TableCell] = []
            for cell_index, cell in enumerate(_array(_object(row, row_context).get("tableCells") or [], row_context)):
                cell_context = f"{row_context}.tableCells[{cell_index}]"
                cell = _object(cell, cell_context)
                style = None
                if cell.get("tableCellStyle") is not None:
                    raw = _object(cell["tableCellStyle"], cell_context)
                    style = TableCellStyle(
                        column_span=_opt(raw, "columnSpan", int),
                        row_span=_opt(raw, "rowSpan", int),
                    )
                content = self._parse_structural_elements(cell.get("content"), cell_context) or ()
                cells.append(TableCell(content=content, style=style))
            rows.append(TableRow(cells=tuple(cells)))
        return Table(rows=tuple(rows))

    # ------------------------------------------------------------------
    # Paragraph elements

    def _parse_paragraph_element(self, item: Any, context: str) -> ParagraphElement:
        kind, value = _single_variant(_object(item, context), PARAGRAPH_VARIANTS, context)
        value = _object(value, context)
        if kind == "textRun":
            style = None
            if value.get("textStyle") is not None:
                style = self._parse_text_style(_object(value["textStyle"], context))
            return TextRun(content=_opt(value, "content", str) or "", style=style)
        if kind == "inlineObjectElement":
            object_id = _opt(value, "inlineObjectId", str)
            if object_id is None:
                raise DocumentDecodeError(f"{context}: inlineObjectElement without inlineObjectId")
            return InlineObjectElement(inline_object_id=object_id)
        if kind == "person":
            props = _object(value.get("personProperties") or {}, context)
            return Person(name=_opt(props, "name", str) or "", email=_opt(props, "email", str))
        if kind == "footnoteReference":
            return FootnoteReference(
                footnote_id=_opt(value, "footnoteId", str),
                footnote_number=_opt(value, "footnoteNumber", str),
            )
        if kind == "richLink":
            props = _object(value.get("richLinkProperties") or {}, context)
            return RichLink(uri=_opt(props, "uri", str), title=_opt(props, "title", str))
        if kind == "autoText":
            return AutoText(type=_opt(value, "type", str))
        simple: Dict[str, Callable[[], ParagraphElement]] = {
            "pageBreak": PageBreak,
            "columnBreak": ColumnBreak,
            "horizontalRule": HorizontalRule,
            "equation": Equation,
        }
        return simple[kind]()

    def _parse_text_style(self, style: JsonObject) -> TextStyle:
        link = None
        if style.get("link") is not None:
            raw = _object(style["link"], "link")
            link = Link(
                url=_opt(raw, "url", str),
                heading_id=_opt(raw, "headingId", str),
                bookmark_id=_opt(raw, "bookmarkId", str),
            )
        return TextStyle(
            bold=_opt(style, "bold", bool),
            italic=_opt(style, "italic", bool),
            strikethrough=_opt(style, "strikethrough", bool),
            underline=_opt(style, "underline", bool),
            small_caps=_opt(style, "smallCaps", bool),
            baseline_offset=_opt(style, "baselineOffset", str),
            foreground_color=_optional_color(style.get("foregroundColor")),
            background_color=_optional_color(style.get("backgroundColor")),
            link=link,
        )

    # ------------------------------------------------------------------
    # Embedded objects

    def _parse_inline_object(self, object_id: str, value: Any) -> EmbeddedObject:
        context = f"inlineObjects[{object_id}]"
        props = _object(_object(value, context).get("inlineObjectProperties") or {}, context)
        embedded = props.get("embeddedObject")
        if embedded is None:
            raise DocumentDecodeError(f"{context}: missing embeddedObject")
        embedded = _object(embedded, context)
        size = _object(embedded.get("size") or {}, context)

        image = None
        if embedded.get("imageProperties") is not None:
            raw = _object(embedded["imageProperties"], context)
            crop = None
            if raw.get("cropProperties") is not None:
                raw_crop = _object(raw["cropProperties"], context)
                crop = CropProperties(
                    offset_top=_opt(raw_crop, "offsetTop", float) or 0.0,
                    offset_bottom=_opt(raw_crop, "offsetBottom", float) or 0.0,
                    offset_left=_opt(raw_crop, "offsetLeft", float) or 0.0,
                    offset_right=_opt(raw_crop, "offsetRight", float) or 0.0,
                    angle=_opt(raw_crop, "angle", float),
                )
            image = ImageProperties(
                content_uri=_opt(raw, "contentUri", str),
                angle=_opt(raw, "angle", float),
                crop=crop,
            )

        return EmbeddedObject(
            width=_dimension(size.get("width")),
            height=_dimension(size.get("height")),
            image=image,
            title=_opt(embedded, "title", str),
            description=_opt(embedded, "description", str),
        )


# ----------------------------------------------------------------------
# JSON helpers

def _single_variant(item: JsonObject, variants: Sequence[str], context: str) -> Tuple[str, Any]:
    present = [name for name in variants if item.get(name) is not None]
    if len(present) != 1:
        if not present:
            raise DocumentDecodeError(f"{context}: no known element variant in {sorted(item)}")
        raise DocumentDecodeError(f"{context}: several element variants populated: {', '.join(present)}")
    return present[0], item[present[0]]


def _object(value: Any, context: str) -> JsonObject:
    if not isinstance(value, Mapping):
        raise DocumentDecodeError(f"{context}: expected an object, got {type(value).__name__}")
    return value


def _array(value: Any, context: str) -> List[Any]:
    if not isinstance(value, list):
        raise DocumentDecodeError(f"{context}: expected an array, got {type(value).__name__}")
    return value


def _opt(data: JsonObject, key: str, kind: type) -> Optional[Any]:
    """Return ``data[key]`` checked against ``kind``, or ``None`` when absent."""
    value = data.get(key)
    if value is None:
        return None
    if kind is float and isinstance(value, int) and not isinstance(value, bool):
        return float(value)
    if kind is int and isinstance(value, bool):
        raise DocumentDecodeError(f"{key}: expected int, got bool")
    if not isinstance(value, kind):
        raise DocumentDecodeError(f"{key}: expected {kind.__name__}, got {type(value).__name__}")
    return value


def _dimension(value: Any) -> Optional[Dimension]:
    if value is None:
        return None
    raw = _object(value, "dimension")
    return Dimension(magnitude=_opt(raw, "magnitude", float), unit=_opt(raw, "unit", str))


def _optional_color(value: Any) -> Optional[OptionalColor]:
    if value is None:
        return None
    color = _object(value, "color").get("color")
    if color is None:
        return OptionalColor()
    rgb = _object(color, "color").get("rgbColor")
    if rgb is None:
        return OptionalColor()
    rgb = _object(rgb, "rgbColor")
    return OptionalColor(
        rgb=RgbColor(
            red=_opt(rgb, "red", float),
            green=_opt(rgb, "green", float),
            blue=_opt(rgb, "blue", float),
        )
    )
