"""Exception hierarchy shared by the decoder, renderer and publish passes."""
from __future__ import annotations


class GdocRendererError(Exception):
    """Base class for every error raised by this package."""


class DocumentDecodeError(GdocRendererError):
    """The input document could not be read or does not follow the API schema."""


class RenderError(GdocRendererError):
    """Rendering of a document was aborted."""


class UnsupportedElementError(RenderError):
    """The document uses a construct the renderer deliberately does not handle."""

    def __init__(self, kind: str, detail: str = "") -> None:
        self.kind = kind
        message = f"Unsupported element: {kind}"
        if detail:
            message += f" ({detail})"
        super().__init__(message)


class UnsupportedUnitError(RenderError):
    """A dimension uses a unit other than points."""

    def __init__(self, unit: object) -> None:
        self.unit = unit
        super().__init__(f"Unknown unit {unit!r}")


class DanglingReferenceError(RenderError):
    """An inline object reference points to an id missing from the document."""

    def __init__(self, object_id: str) -> None:
        self.object_id = object_id
        super().__init__(f"Inline object {object_id!r} not found in document")


class MarkupError(RenderError):
    """Start and end tags do not nest properly."""


class AttributeListSyntaxError(RenderError):
    """An inline attribute list ``{: ... }`` is malformed."""


class TweakError(GdocRendererError):
    """A post-processing pass over the rendered DOM failed."""
