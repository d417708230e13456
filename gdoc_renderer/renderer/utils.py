"""Common helpers shared by renderer implementations."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional

from gdoc_renderer.model.document_model import CropProperties
from gdoc_renderer.model.style_model import OptionalColor, TextStyle
from gdoc_renderer.utils.errors import RenderError

ALIGNMENTS = {
    "START": "start",
    "END": "end",
    "CENTER": "center",
}


def format_color(color: Optional[OptionalColor]) -> Optional[str]:
    """Return a CSS ``rgb()`` value, or ``None`` unless all three channels are set."""
    if color is None or color.rgb is None or not color.rgb.is_complete:
        return None
    rgb = color.rgb
    return "rgb({},{},{})".format(*(_percent(channel) for channel in (rgb.red, rgb.green, rgb.blue)))


def _percent(value: float) -> str:
    return f"{value * 100:g}%"


def text_run_css(style: TextStyle, has_link: bool = False) -> Dict[str, str]:
    """Convert the span-level part of a text style into CSS properties.

    Links carry their own underline and color, so those are dropped when the
    run is a link.
    """
    css: Dict[str, str] = {}
    if style.underline and not has_link:
        css["text-decoration"] = "underline"
    if style.small_caps:
        css["font-variant"] = "small-caps"
    if not has_link:
        foreground = format_color(style.foreground_color)
        if foreground:
            css["color"] = foreground
    background = format_color(style.background_color)
    if background:
        css["background-color"] = background
    return css


@dataclass(frozen=True)
class ImageGeometry:
    """Pixel sizes of a cropped image.

    ``width``/``height`` is the visible box; the full image is scaled up to
    ``image_width``/``image_height`` and shifted by the (negative) margins so
    the crop window lines up with the box.
    """

    width: float
    height: float
    image_width: float
    image_height: float
    margin_left: float
    margin_top: float


def compute_image_geometry(width: float, height: float, crop: Optional[CropProperties] = None) -> ImageGeometry:
    crop = crop or CropProperties()
    visible_x = 1.0 - crop.offset_left - crop.offset_right
    visible_y = 1.0 - crop.offset_top - crop.offset_bottom
    if visible_x <= 0 or visible_y <= 0:
        raise RenderError(f"Crop offsets hide the whole image: {crop}")
    image_width = width / visible_x
    image_height = height / visible_y
    return ImageGeometry(
        width=width,
        height=height,
        image_width=image_width,
        image_height=image_height,
        margin_left=0.0 - image_width * crop.offset_left,
        margin_top=0.0 - image_height * crop.offset_top,
    )


def px(value: float) -> str:
    return f"{value:.2f}px"


def rotation(angle: float) -> str:
    return f"rotate({angle:.3f}rad) translateZ(0px)"
