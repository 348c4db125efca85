#!/usr/bin/env python3
"""
SVG Document Ingestion

Extracts drawable elements from an SVG document and converts them into a single
layer of path IR. Paths are parsed with the path-data parser; primitive shapes go
through the shape converter.

Elements are imported in document order, descending into groups, so the resulting
z-order matches the source document. Drawables are not regrouped by element type
(all paths first, then rects, and so on).
"""

import math
import re
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Callable, Dict, Iterator, List, Optional, Tuple, Union

from pydantic import BaseModel, Field

from keypath.core import ImportCfg, get_logger

from .path_data import parse_path_data
from .sdk import AnimationState, Layer, ParseError, PathData
from .shapes import (
    circle_to_path,
    ellipse_to_path,
    line_to_path,
    make_path,
    polygon_to_path,
    polyline_to_path,
    rect_to_path,
)

log = get_logger("svg_import")

_LENGTH_RE = re.compile(r"^\s*([-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?)")
_LIST_SPLIT_RE = re.compile(r"[\s,]+")
STYLE_KEYS = ("fill", "stroke", "stroke-width")


class ViewBox(BaseModel):
    x: float
    y: float
    width: float
    height: float


class ParsedSVG(BaseModel):
    """Result of importing one SVG document."""

    layers: List[Layer] = Field(default_factory=list)
    width: float
    height: float
    view_box: Optional[ViewBox] = None


def _strip_ns(tag: str) -> str:
    return tag.split("}")[-1] if "}" in tag else tag


def _parse_number(value: Optional[str], default: float = 0.0, name: str = "attribute") -> float:
    """Leading numeric part of an attribute ('12px' -> 12.0); missing -> default."""
    if value is None or not value.strip():
        return default
    match = _LENGTH_RE.match(value)
    if not match:
        raise ParseError(f"Malformed numeric value for {name}: {value!r}")
    number = float(match.group(1))
    if not math.isfinite(number):
        raise ParseError(f"Numeric value out of range for {name}: {value!r}")
    return number


def _number_list(value: str, name: str) -> List[float]:
    parts = [p for p in _LIST_SPLIT_RE.split(value.strip()) if p]
    try:
        numbers = [float(p) for p in parts]
    except ValueError as e:
        raise ParseError(f"Malformed number list for {name}: {value!r}") from e
    if not all(math.isfinite(n) for n in numbers):
        raise ParseError(f"Non-finite number in {name}: {value!r}")
    return numbers


def parse_points(value: str) -> List[Tuple[float, float]]:
    """Pair up a whitespace/comma separated number list; a trailing odd value is dropped."""
    numbers = _number_list(value, "points")
    return [(numbers[i], numbers[i + 1]) for i in range(0, len(numbers) - 1, 2)]


def parse_style(element: ET.Element) -> Dict[str, Optional[str]]:
    """Paint attributes, with inline style declarations taking precedence."""
    style = {key: element.get(key) for key in STYLE_KEYS}
    inline = element.get("style")
    if inline:
        for declaration in inline.split(";"):
            if ":" not in declaration:
                continue
            key, value = declaration.split(":", 1)
            key = key.strip()
            if key in STYLE_KEYS:
                style[key] = value.strip()
    return {
        "fill": style["fill"],
        "stroke": style["stroke"],
        "stroke_width": style["stroke-width"],
    }


def _num(element: ET.Element, name: str, default: float = 0.0) -> float:
    return _parse_number(element.get(name), default, f"<{_strip_ns(element.tag)} {name}>")


# ----------------------------------------------------------------------------
# Element converters
# ----------------------------------------------------------------------------

def _convert_path(element: ET.Element) -> Optional[PathData]:
    d = element.get("d")
    if not d:
        return None
    commands = parse_path_data(d)
    if not commands:
        return None
    return make_path(commands, **parse_style(element))


def _convert_rect(element: ET.Element) -> Optional[PathData]:
    rx_attr = element.get("rx")
    ry_attr = element.get("ry")
    rx = _num(element, "rx")
    ry = _num(element, "ry")
    # A single given radius applies to both axes
    if rx_attr is None and ry_attr is not None:
        rx = ry
    if ry_attr is None and rx_attr is not None:
        ry = rx
    return rect_to_path(
        _num(element, "x"),
        _num(element, "y"),
        _num(element, "width"),
        _num(element, "height"),
        rx,
        ry,
        **parse_style(element),
    )


def _convert_circle(element: ET.Element) -> Optional[PathData]:
    return circle_to_path(_num(element, "cx"), _num(element, "cy"), _num(element, "r"), **parse_style(element))


def _convert_ellipse(element: ET.Element) -> Optional[PathData]:
    return ellipse_to_path(
        _num(element, "cx"), _num(element, "cy"), _num(element, "rx"), _num(element, "ry"), **parse_style(element)
    )


def _convert_polygon(element: ET.Element) -> Optional[PathData]:
    points = element.get("points")
    if not points:
        return None
    return polygon_to_path(parse_points(points), **parse_style(element))


def _convert_polyline(element: ET.Element) -> Optional[PathData]:
    points = element.get("points")
    if not points:
        return None
    return polyline_to_path(parse_points(points), **parse_style(element))


def _convert_line(element: ET.Element) -> Optional[PathData]:
    return line_to_path(
        _num(element, "x1"), _num(element, "y1"), _num(element, "x2"), _num(element, "y2"), **parse_style(element)
    )


CONVERTERS: Dict[str, Callable[[ET.Element], Optional[PathData]]] = {
    "path": _convert_path,
    "rect": _convert_rect,
    "circle": _convert_circle,
    "ellipse": _convert_ellipse,
    "polygon": _convert_polygon,
    "polyline": _convert_polyline,
    "line": _convert_line,
}


# ----------------------------------------------------------------------------
# Document level
# ----------------------------------------------------------------------------

def _find_svg_root(root: ET.Element) -> Optional[ET.Element]:
    for element in root.iter():
        if _strip_ns(element.tag) == "svg":
            return element
    return None


def _iter_drawables(svg: ET.Element) -> Iterator[ET.Element]:
    for element in svg.iter():
        if element is svg:
            continue
        if _strip_ns(element.tag) in CONVERTERS:
            yield element


def _parse_view_box(value: Optional[str]) -> Optional[ViewBox]:
    if not value:
        return None
    parts = _number_list(value, "viewBox")
    if len(parts) != 4:
        return None
    return ViewBox(x=parts[0], y=parts[1], width=parts[2], height=parts[3])


def parse_svg(svg_text: str, cfg: Optional[ImportCfg] = None) -> ParsedSVG:
    """
    Parse an SVG document into one layer of paths.

    Args:
        svg_text: SVG markup
        cfg: Import settings (layer name, fallback canvas size)

    Returns:
        ParsedSVG with zero or one layer and the canvas dimensions

    Raises:
        ParseError: If the document is not XML, has no <svg> element, or contains
            malformed path data or numeric attributes
    """
    cfg = cfg or ImportCfg()
    try:
        root = ET.fromstring(svg_text)
    except ET.ParseError as e:
        log.error(f"Invalid SVG markup: {e}")
        raise ParseError(f"Invalid SVG: {e}") from e

    svg = _find_svg_root(root)
    if svg is None:
        log.error("Invalid SVG: no svg element found")
        raise ParseError("Invalid SVG: No svg element found")

    width = _parse_number(svg.get("width"), cfg.fallback_width, "width")
    height = _parse_number(svg.get("height"), cfg.fallback_height, "height")

    view_box = _parse_view_box(svg.get("viewBox"))
    if view_box is not None:
        if svg.get("width") is None:
            width = view_box.width
        if svg.get("height") is None:
            height = view_box.height

    paths: List[PathData] = []
    for element in _iter_drawables(svg):
        path = CONVERTERS[_strip_ns(element.tag)](element)
        if path is not None:
            paths.append(path)

    layers = []
    if paths:
        layers.append(Layer(name=cfg.layer_name, paths=paths))

    log.info(f"Imported {len(paths)} paths ({width}x{height})")
    return ParsedSVG(layers=layers, width=width, height=height, view_box=view_box)


def load_svg(path: Union[str, Path], cfg: Optional[ImportCfg] = None) -> ParsedSVG:
    """Read and parse an SVG file."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"SVG file not found: {path}")
    return parse_svg(path.read_text(encoding="utf-8"), cfg)


def parsed_to_state(parsed: ParsedSVG, **settings) -> AnimationState:
    """Start a fresh AnimationState from an imported document."""
    return AnimationState(layers=parsed.layers, width=parsed.width, height=parsed.height, **settings)


__all__ = [
    "ViewBox",
    "ParsedSVG",
    "parse_points",
    "parse_style",
    "parse_svg",
    "load_svg",
    "parsed_to_state",
]
