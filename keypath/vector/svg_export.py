#!/usr/bin/env python3
"""
Frame SVG export: renders the effective paths at one frame back to SVG markup.
"""

from pathlib import Path
from typing import Optional, Union

import svgwrite

from keypath.core import get_logger

from .path_data import commands_to_path_string
from .sdk import AnimationState, PathData
from .timeline import path_at_frame

log = get_logger("svg_export")


def _path_element(dwg: svgwrite.Drawing, path: PathData):
    attrs = {
        "d": commands_to_path_string(path.commands),
        "fill": path.fill or "none",
        "id": f"path-{path.id}",
    }
    if path.stroke:
        attrs["stroke"] = path.stroke
        if path.stroke_width:
            attrs["stroke_width"] = path.stroke_width
    return dwg.path(**attrs)


def render_frame_svg(state: AnimationState, frame: Optional[int] = None) -> str:
    """
    Render one frame as SVG markup.

    Args:
        state: Animation state
        frame: Frame to render; defaults to the state's current frame

    Returns:
        SVG document string with a background rect and one group per visible layer
    """
    if frame is None:
        frame = state.current_frame

    dwg = svgwrite.Drawing(size=(state.width, state.height), debug=False)
    dwg.viewbox(0, 0, state.width, state.height)
    dwg.add(dwg.rect(insert=(0, 0), size=(state.width, state.height), fill=state.background_color))

    rendered = 0
    for layer in state.layers:
        if not layer.visible:
            continue
        group = dwg.g(id=f"layer-{layer.id}")
        for path in layer.paths:
            effective = path_at_frame(path, state.keyframes, frame)
            if not effective.commands:
                continue
            group.add(_path_element(dwg, effective))
            rendered += 1
        dwg.add(group)

    log.debug(f"Rendered frame {frame} with {rendered} paths")
    return dwg.tostring()


def save_frame_svg(state: AnimationState, path: Union[str, Path], frame: Optional[int] = None) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(render_frame_svg(state, frame), encoding="utf-8")
    log.info(f"Saved frame SVG: {path}")
    return path


__all__ = ["render_frame_svg", "save_frame_svg"]
