#!/usr/bin/env python3
"""
Shape Primitive Conversion

Converts declarative SVG primitives (rect, circle, ellipse, polygon, polyline, line)
into path IR. Curved corners and ellipse quadrants use the standard four-segment
cubic Bezier approximation (KAPPA). Degenerate shapes (zero width, height or radius)
produce no path.
"""

from typing import List, Optional, Sequence, Tuple, Union

from keypath.core import get_logger

from .sdk import KAPPA, PathCommand, PathData

log = get_logger("shapes")

PaintValue = Optional[str]


def normalize_paint(value: PaintValue) -> PaintValue:
    """Empty strings and the literal 'none' mean no paint."""
    if value is None:
        return None
    value = value.strip()
    if not value or value == "none":
        return None
    return value


def normalize_stroke_width(value: Union[str, float, None]) -> Optional[float]:
    """Stroke width of zero (or unparseable) is treated as unset."""
    if value is None:
        return None
    try:
        width = float(value)
    except (TypeError, ValueError):
        return None
    return width or None


def make_path(
    commands: List[PathCommand],
    fill: PaintValue = None,
    stroke: PaintValue = None,
    stroke_width: Union[str, float, None] = None,
) -> PathData:
    return PathData(
        commands=commands,
        fill=normalize_paint(fill),
        stroke=normalize_paint(stroke),
        stroke_width=normalize_stroke_width(stroke_width),
    )


def rect_commands(
    x: float, y: float, width: float, height: float, rx: float = 0.0, ry: float = 0.0
) -> List[PathCommand]:
    """
    Commands for a rectangle, with rounded corners when either radius is nonzero.

    Radii are clamped to half the matching side. Corners are emitted clockwise
    starting from the top-left edge.
    """
    if rx == 0 and ry == 0:
        return [
            PathCommand.move_to(x, y),
            PathCommand.line_to(x + width, y),
            PathCommand.line_to(x + width, y + height),
            PathCommand.line_to(x, y + height),
            PathCommand.close(),
        ]

    rx = min(rx, width / 2)
    ry = min(ry, height / 2)
    kx = rx * KAPPA
    ky = ry * KAPPA
    right = x + width
    bottom = y + height

    return [
        PathCommand.move_to(x + rx, y),
        PathCommand.line_to(right - rx, y),
        PathCommand.cubic_to(right - rx + kx, y, right, y + ry - ky, right, y + ry),
        PathCommand.line_to(right, bottom - ry),
        PathCommand.cubic_to(right, bottom - ry + ky, right - rx + kx, bottom, right - rx, bottom),
        PathCommand.line_to(x + rx, bottom),
        PathCommand.cubic_to(x + rx - kx, bottom, x, bottom - ry + ky, x, bottom - ry),
        PathCommand.line_to(x, y + ry),
        PathCommand.cubic_to(x, y + ry - ky, x + rx - kx, y, x + rx, y),
        PathCommand.close(),
    ]


def ellipse_commands(cx: float, cy: float, rx: float, ry: float) -> List[PathCommand]:
    """Six commands: move to the rightmost point, four quadrant curves, close."""
    kx = KAPPA * rx
    ky = KAPPA * ry
    return [
        PathCommand.move_to(cx + rx, cy),
        PathCommand.cubic_to(cx + rx, cy + ky, cx + kx, cy + ry, cx, cy + ry),
        PathCommand.cubic_to(cx - kx, cy + ry, cx - rx, cy + ky, cx - rx, cy),
        PathCommand.cubic_to(cx - rx, cy - ky, cx - kx, cy - ry, cx, cy - ry),
        PathCommand.cubic_to(cx + kx, cy - ry, cx + rx, cy - ky, cx + rx, cy),
        PathCommand.close(),
    ]


def poly_commands(points: Sequence[Tuple[float, float]], closed: bool) -> List[PathCommand]:
    commands = [PathCommand.move_to(*points[0])]
    commands.extend(PathCommand.line_to(px, py) for px, py in points[1:])
    if closed:
        commands.append(PathCommand.close())
    return commands


def rect_to_path(
    x: float, y: float, width: float, height: float, rx: float = 0.0, ry: float = 0.0, **style
) -> Optional[PathData]:
    if width == 0 or height == 0:
        log.debug(f"Skipping degenerate rect {width}x{height}")
        return None
    return make_path(rect_commands(x, y, width, height, rx, ry), **style)


def circle_to_path(cx: float, cy: float, r: float, **style) -> Optional[PathData]:
    if r == 0:
        log.debug("Skipping circle with zero radius")
        return None
    return make_path(ellipse_commands(cx, cy, r, r), **style)


def ellipse_to_path(cx: float, cy: float, rx: float, ry: float, **style) -> Optional[PathData]:
    if rx == 0 or ry == 0:
        log.debug(f"Skipping degenerate ellipse rx={rx} ry={ry}")
        return None
    return make_path(ellipse_commands(cx, cy, rx, ry), **style)


def polygon_to_path(points: Sequence[Tuple[float, float]], **style) -> Optional[PathData]:
    if len(points) < 2:
        return None
    return make_path(poly_commands(points, closed=True), **style)


def polyline_to_path(points: Sequence[Tuple[float, float]], **style) -> Optional[PathData]:
    if len(points) < 2:
        return None
    return make_path(poly_commands(points, closed=False), **style)


def line_to_path(x1: float, y1: float, x2: float, y2: float, **style) -> PathData:
    return make_path([PathCommand.move_to(x1, y1), PathCommand.line_to(x2, y2)], **style)


__all__ = [
    "normalize_paint",
    "normalize_stroke_width",
    "make_path",
    "rect_commands",
    "ellipse_commands",
    "poly_commands",
    "rect_to_path",
    "circle_to_path",
    "ellipse_to_path",
    "polygon_to_path",
    "polyline_to_path",
    "line_to_path",
]
