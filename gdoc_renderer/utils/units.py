"""Unit conversion helpers for Docs API measurements."""
from __future__ import annotations

from gdoc_renderer.model.style_model import Dimension
from gdoc_renderer.utils.errors import RenderError, UnsupportedUnitError

POINTS_PER_PIXEL = 0.75
POINT_UNIT = "PT"


def points_to_px(value: float) -> float:
    """Convert typographic points to CSS pixels."""
    return value / POINTS_PER_PIXEL


def dimension_to_px(dimension: Dimension) -> float:
    """Convert a dimension to pixels. Only points are supported."""
    if dimension.unit != POINT_UNIT:
        raise UnsupportedUnitError(dimension.unit)
    if dimension.magnitude is None:
        raise RenderError(f"Dimension in {dimension.unit} has no magnitude")
    return points_to_px(dimension.magnitude)
