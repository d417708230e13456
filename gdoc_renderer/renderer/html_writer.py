"""Event-based HTML output: a well-formedness checking writer and filters.

The renderer never concatenates markup itself. It sends start/end/text events
to an ``HtmlConsumer``; consumers can be chained (e.g. ``ImageRewriter`` in
front of ``HtmlWriter``) to alter events before they reach the buffer.
"""
from __future__ import annotations

import html
from dataclasses import dataclass
from typing import Callable, Dict, List, Mapping, Optional, Sequence

from gdoc_renderer.utils.errors import GdocRendererError, MarkupError, RenderError

VOID_ELEMENTS = frozenset(
    ["area", "base", "br", "col", "embed", "hr", "img", "input", "link", "meta", "source", "track", "wbr"]
)

Attributes = Mapping[str, Optional[str]]
Style = Mapping[str, str]


@dataclass(frozen=True)
class ImageReference:
    """Identifies an image for the resolver hook."""

    image_id: str
    url: str
    doc_id: Optional[str] = None


ImageResolver = Callable[[ImageReference], str]


class HtmlConsumer:
    """Receives HTML events. The base class forwards everything to ``next``."""

    def __init__(self, next_consumer: Optional["HtmlConsumer"] = None) -> None:
        self._next = next_consumer

    def start_element(
        self,
        name: str,
        classes: Sequence[str] = (),
        style: Optional[Style] = None,
        attrs: Optional[Attributes] = None,
    ) -> None:
        self._require_next().start_element(name, classes, style, attrs)

    def end_element(self, name: str) -> None:
        self._require_next().end_element(name)

    def text(self, text: str) -> None:
        self._require_next().text(text)

    def raw(self, markup: str) -> None:
        self._require_next().raw(markup)

    def comment(self, text: str) -> None:
        self._require_next().comment(text)

    def newline(self) -> None:
        self._require_next().newline()

    def end_document(self) -> None:
        self._require_next().end_document()

    def _require_next(self) -> "HtmlConsumer":
        if self._next is None:
            raise NotImplementedError(f"{type(self).__name__} has no downstream consumer")
        return self._next


class HtmlWriter(HtmlConsumer):
    """Terminal consumer that serializes events into a string buffer.

    Open elements are tracked on a stack: ending an element that is not the
    innermost open one, or finishing the document with open elements, raises
    ``MarkupError``. Void elements (``img``, ``br``, ``hr``...) are never pushed.
    """

    def __init__(self) -> None:
        super().__init__()
        self._parts: List[str] = []
        self._stack: List[str] = []

    def getvalue(self) -> str:
        return "".join(self._parts)

    def start_element(
        self,
        name: str,
        classes: Sequence[str] = (),
        style: Optional[Style] = None,
        attrs: Optional[Attributes] = None,
    ) -> None:
        self._parts.append(format_start_tag(name, classes, style, attrs))
        if name not in VOID_ELEMENTS:
            self._stack.append(name)

    def end_element(self, name: str) -> None:
        if name in VOID_ELEMENTS:
            raise MarkupError(f"<{name}> is a void element and has no end tag")
        if not self._stack:
            raise MarkupError(f"</{name}> without matching start tag")
        if self._stack[-1] != name:
            raise MarkupError(f"</{name}> closes <{self._stack[-1]}>")
        self._stack.pop()
        self._parts.append(f"</{name}>")

    def text(self, text: str) -> None:
        self._parts.append(html.escape(text, quote=False))

    def raw(self, markup: str) -> None:
        self._parts.append(markup)

    def comment(self, text: str) -> None:
        if "-->" in text:
            raise MarkupError(f"Comment text cannot contain '-->': {text!r}")
        self._parts.append(f"<!--{text}-->")

    def newline(self) -> None:
        if self._parts and not self._parts[-1].endswith("\n"):
            self._parts.append("\n")

    def end_document(self) -> None:
        if self._stack:
            raise MarkupError(f"Unclosed elements at end of document: {', '.join(self._stack)}")


class ImageRewriter(HtmlConsumer):
    """Replaces the ``src`` of every ``<img>`` with the resolver's result.

    Resolver failures are raised as ``RenderError`` so that batch callers can
    report them per document.
    """

    def __init__(self, resolver: ImageResolver, next_consumer: HtmlConsumer, doc_id: Optional[str] = None) -> None:
        super().__init__(next_consumer)
        self._resolver = resolver
        self._doc_id = doc_id

    def start_element(
        self,
        name: str,
        classes: Sequence[str] = (),
        style: Optional[Style] = None,
        attrs: Optional[Attributes] = None,
    ) -> None:
        if name == "img":
            attrs = dict(attrs or {})
            src = attrs.get("src")
            image_id = attrs.get("id")
            if src is None:
                raise MarkupError("<img> tag with no 'src' attribute")
            if image_id is None:
                raise MarkupError("<img> tag with no 'id' attribute")
            try:
                attrs["src"] = self._resolver(ImageReference(image_id=image_id, url=src, doc_id=self._doc_id))
            except GdocRendererError:
                raise
            except Exception as exc:
                raise RenderError(f"Cannot resolve image {image_id} ({src}): {exc}") from exc
        super().start_element(name, classes, style, attrs)


def format_style(style: Optional[Style]) -> str:
    """Render CSS declarations as ``prop:value;`` pairs, in insertion order."""
    if not style:
        return ""
    return "".join(f"{prop}:{value};" for prop, value in style.items())


def format_start_tag(
    name: str,
    classes: Sequence[str] = (),
    style: Optional[Style] = None,
    attrs: Optional[Attributes] = None,
) -> str:
    """Build a start tag with attributes sorted by name and values escaped.

    An attribute whose value is ``None`` is written in its bare boolean form.
    """
    merged: Dict[str, Optional[str]] = dict(attrs or {})
    if classes:
        merged["class"] = " ".join(classes)
    css = format_style(style)
    if css:
        merged["style"] = css

    parts = [f"<{name}"]
    for key in sorted(merged):
        value = merged[key]
        if value is None:
            parts.append(f" {key}")
        else:
            parts.append(f' {key}="{html.escape(value, quote=True)}"')
    parts.append(">")
    return "".join(parts)
