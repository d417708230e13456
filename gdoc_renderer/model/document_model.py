"""Root document entity and embedded object metadata."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping, Optional, Tuple

from gdoc_renderer.model.elements import StructuralElement
from gdoc_renderer.model.style_model import Dimension


@dataclass(frozen=True, slots=True)
class CropProperties:
    """Fractions of the original image hidden on each side."""

    offset_top: float = 0.0
    offset_bottom: float = 0.0
    offset_left: float = 0.0
    offset_right: float = 0.0
    angle: Optional[float] = None


@dataclass(frozen=True, slots=True)
class ImageProperties:
    content_uri: Optional[str] = None
    angle: Optional[float] = None
    crop: Optional[CropProperties] = None


@dataclass(frozen=True, slots=True)
class EmbeddedObject:
    """An inline image (or drawing, in which case ``image`` is ``None``)."""

    width: Optional[Dimension] = None
    height: Optional[Dimension] = None
    image: Optional[ImageProperties] = None
    title: Optional[str] = None
    description: Optional[str] = None


@dataclass(frozen=True, slots=True)
class Footnote:
    footnote_id: str
    content: Tuple[StructuralElement, ...] = ()


@dataclass(frozen=True, slots=True)
class Document:
    """Read-only view of a Docs API document, borrowed by the renderer."""

    title: Optional[str] = None
    document_id: Optional[str] = None
    body: Optional[Tuple[StructuralElement, ...]] = None
    inline_objects: Mapping[str, EmbeddedObject] = field(default_factory=dict)
    footnotes: Mapping[str, Footnote] = field(default_factory=dict)


@dataclass(slots=True)
class FrontMatter:
    """Page metadata written ahead of the rendered content."""

    title: str = ""
    slug: Optional[str] = None
    author: Optional[str] = None
    summary: Optional[str] = None
    banner: Optional[str] = None
    markup: str = "html"

    def to_dict(self) -> dict:
        data = {"markup": self.markup, "title": self.title}
        for key in ("slug", "author", "summary", "banner"):
            value = getattr(self, key)
            if value is not None:
                data[key] = value
        return data
