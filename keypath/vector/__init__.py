"""
Vector Path Animation Package

This package provides the path IR, SVG ingestion, keyframe interpolation and
Lottie export for keyframed vector path animation.
"""

from .colors import hex_to_rgba
from .history import HistoryManager
from .lottie_export import commands_to_bezier, export_to_dict, export_to_json, export_to_lottie, save_lottie
from .path_data import commands_to_path_string, parse_path_data
from .sdk import (  # Constants; Errors; Enums; Models; Helper functions
    DEFAULT_FPS,
    DEFAULT_HEIGHT,
    DEFAULT_TOTAL_FRAMES,
    DEFAULT_WIDTH,
    AnimationState,
    CommandType,
    Easing,
    Keyframe,
    Layer,
    ParseError,
    PathCommand,
    PathData,
    Point,
    load_state,
    save_state,
    validate_state,
)
from .shapes import circle_to_path, ellipse_to_path, line_to_path, polygon_to_path, polyline_to_path, rect_to_path
from .store import AnimationStore
from .svg_export import render_frame_svg, save_frame_svg
from .svg_import import ParsedSVG, load_svg, parse_svg
from .timeline import apply_easing, capture_keyframe, frame_paths, interpolate_commands, path_at_frame

__version__ = "0.1.0"
__all__ = [
    "DEFAULT_WIDTH",
    "DEFAULT_HEIGHT",
    "DEFAULT_FPS",
    "DEFAULT_TOTAL_FRAMES",
    "ParseError",
    "CommandType",
    "Easing",
    "Point",
    "PathCommand",
    "PathData",
    "Layer",
    "Keyframe",
    "AnimationState",
    "validate_state",
    "save_state",
    "load_state",
    "parse_path_data",
    "commands_to_path_string",
    "rect_to_path",
    "circle_to_path",
    "ellipse_to_path",
    "polygon_to_path",
    "polyline_to_path",
    "line_to_path",
    "ParsedSVG",
    "parse_svg",
    "load_svg",
    "apply_easing",
    "interpolate_commands",
    "path_at_frame",
    "frame_paths",
    "capture_keyframe",
    "HistoryManager",
    "AnimationStore",
    "hex_to_rgba",
    "commands_to_bezier",
    "export_to_lottie",
    "export_to_dict",
    "export_to_json",
    "save_lottie",
    "render_frame_svg",
    "save_frame_svg",
]
