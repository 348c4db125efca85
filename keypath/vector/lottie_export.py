#!/usr/bin/env python3
"""
Lottie Export

Serializes an AnimationState into the Lottie JSON object model. The object model is a
set of pydantic models whose field aliases are the Lottie keys; dump with
``by_alias=True, exclude_none=True`` to get the wire format.

Supported subset:
- One shape layer per visible layer (ty=4) with an identity layer transform
- One group per path: optional stroke, optional fill, path geometry, identity transform
- Static geometry, or keyframed geometry for paths captured in two or more keyframes
- Flat colors with alpha fixed at 1
"""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field

from keypath.core import ExportCfg, get_logger

from .colors import hex_to_rgba
from .sdk import AnimationState, CommandType, Easing, Keyframe, Layer, PathCommand, PathData
from .timeline import keyframes_for_path

log = get_logger("lottie_export")

SHAPE_LAYER = 4
FALLBACK_COLOR = [0, 0, 0, 1]


# ============================================================================
# LOTTIE OBJECT MODEL
# ============================================================================

class LottieModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class StaticValue(LottieModel):
    """Non-animated property value."""

    animated: int = Field(0, alias="a")
    value: Any = Field(..., alias="k")


class BezierShape(LottieModel):
    """Vertices with in/out tangents stored as offsets from their own vertex."""

    in_tangents: List[List[float]] = Field(default_factory=list, alias="i")
    out_tangents: List[List[float]] = Field(default_factory=list, alias="o")
    vertices: List[List[float]] = Field(default_factory=list, alias="v")
    closed: bool = Field(False, alias="c")


class EasingHandle(LottieModel):
    x: float
    y: float


class ShapeKeyframe(LottieModel):
    time: int = Field(..., alias="t")
    start: List[BezierShape] = Field(..., alias="s")
    in_handle: Optional[EasingHandle] = Field(None, alias="i")
    out_handle: Optional[EasingHandle] = Field(None, alias="o")


class ShapeProperty(LottieModel):
    """Path geometry: a single shape when static, a keyframe list when animated."""

    animated: int = Field(0, alias="a")
    value: Union[BezierShape, List[ShapeKeyframe]] = Field(..., alias="k")


class PathItem(LottieModel):
    item_type: str = Field("sh", alias="ty")
    name: str = Field("Path", alias="nm")
    shape: ShapeProperty = Field(..., alias="ks")


class StrokeItem(LottieModel):
    item_type: str = Field("st", alias="ty")
    name: str = Field("Stroke", alias="nm")
    color: StaticValue = Field(..., alias="c")
    opacity: StaticValue = Field(default_factory=lambda: StaticValue(value=100), alias="o")
    width: StaticValue = Field(..., alias="w")


class FillItem(LottieModel):
    item_type: str = Field("fl", alias="ty")
    name: str = Field("Fill", alias="nm")
    color: StaticValue = Field(..., alias="c")
    opacity: StaticValue = Field(default_factory=lambda: StaticValue(value=100), alias="o")


class TransformItem(LottieModel):
    """Identity transform closing every group."""

    item_type: str = Field("tr", alias="ty")
    name: str = Field("Transform", alias="nm")
    position: StaticValue = Field(default_factory=lambda: StaticValue(value=[0, 0]), alias="p")
    anchor: StaticValue = Field(default_factory=lambda: StaticValue(value=[0, 0]), alias="a")
    scale: StaticValue = Field(default_factory=lambda: StaticValue(value=[100, 100]), alias="s")
    rotation: StaticValue = Field(default_factory=lambda: StaticValue(value=0), alias="r")
    opacity: StaticValue = Field(default_factory=lambda: StaticValue(value=100), alias="o")


GroupMember = Union[StrokeItem, FillItem, PathItem, TransformItem]


class GroupItem(LottieModel):
    item_type: str = Field("gr", alias="ty")
    name: str = Field(..., alias="nm")
    items: List[GroupMember] = Field(default_factory=list, alias="it")


class LayerTransform(LottieModel):
    opacity: StaticValue = Field(default_factory=lambda: StaticValue(value=[100]), alias="o")
    rotation: StaticValue = Field(default_factory=lambda: StaticValue(value=0), alias="r")
    position: StaticValue = Field(default_factory=lambda: StaticValue(value=[0, 0, 0]), alias="p")
    anchor: StaticValue = Field(default_factory=lambda: StaticValue(value=[0, 0, 0]), alias="a")
    scale: StaticValue = Field(default_factory=lambda: StaticValue(value=[100, 100, 100]), alias="s")


class ShapeLayer(LottieModel):
    three_d: int = Field(0, alias="ddd")
    index: int = Field(..., alias="ind")
    layer_type: int = Field(SHAPE_LAYER, alias="ty")
    name: str = Field(..., alias="nm")
    stretch: int = Field(1, alias="sr")
    transform: LayerTransform = Field(default_factory=LayerTransform, alias="ks")
    auto_orient: int = Field(0, alias="ao")
    shapes: List[GroupItem] = Field(default_factory=list)
    in_point: int = Field(0, alias="ip")
    out_point: int = Field(..., alias="op")
    start_time: int = Field(0, alias="st")
    blend_mode: int = Field(0, alias="bm")


class LottieAnimation(LottieModel):
    version: str = Field(..., alias="v")
    frame_rate: int = Field(..., alias="fr")
    in_point: int = Field(0, alias="ip")
    out_point: int = Field(..., alias="op")
    width: float = Field(..., alias="w")
    height: float = Field(..., alias="h")
    name: str = Field(..., alias="nm")
    three_d: int = Field(0, alias="ddd")
    assets: List[Any] = Field(default_factory=list)
    layers: List[ShapeLayer] = Field(default_factory=list)


# ============================================================================
# GEOMETRY
# ============================================================================

EASING_HANDLES: Dict[Easing, Tuple[Tuple[float, float], Tuple[float, float]]] = {
    Easing.LINEAR: ((0.167, 0.167), (0.167, 0.167)),
    Easing.EASE_IN: ((0.42, 0), (1, 1)),
    Easing.EASE_OUT: ((0, 0), (0.58, 1)),
    Easing.EASE_IN_OUT: ((0.42, 0), (0.58, 1)),
}


def easing_handles(easing: Easing) -> Tuple[EasingHandle, EasingHandle]:
    """Fixed (in, out) handle pair for an easing."""
    (in_x, in_y), (out_x, out_y) = EASING_HANDLES[Easing(easing)]
    return EasingHandle(x=in_x, y=in_y), EasingHandle(x=out_x, y=out_y)


def commands_to_bezier(commands: List[PathCommand]) -> BezierShape:
    """
    Convert path commands to Lottie vertex/tangent arrays.

    Quadratic segments are elevated to cubics. A curve sets the out-tangent of the
    vertex before it and the in-tangent of its own end vertex. Close only sets the
    closed flag.
    """
    vertices: List[List[float]] = []
    in_tangents: List[List[float]] = []
    out_tangents: List[List[float]] = []
    closed = False
    current = (0.0, 0.0)

    def add_curve(c1: Tuple[float, float], c2: Tuple[float, float], end: Tuple[float, float]):
        if vertices:
            prev = vertices[-1]
            out_tangents[-1] = [c1[0] - prev[0], c1[1] - prev[1]]
        vertices.append([end[0], end[1]])
        in_tangents.append([c2[0] - end[0], c2[1] - end[1]])
        out_tangents.append([0, 0])

    for cmd in commands:
        if cmd.type in (CommandType.MOVE_TO, CommandType.LINE_TO):
            current = cmd.points[0].as_tuple()
            vertices.append(list(current))
            in_tangents.append([0, 0])
            out_tangents.append([0, 0])
        elif cmd.type == CommandType.CUBIC_TO:
            c1, c2, end = (p.as_tuple() for p in cmd.points)
            add_curve(c1, c2, end)
            current = end
        elif cmd.type == CommandType.QUAD_TO:
            ctrl, end = (p.as_tuple() for p in cmd.points)
            c1 = (current[0] + 2 / 3 * (ctrl[0] - current[0]), current[1] + 2 / 3 * (ctrl[1] - current[1]))
            c2 = (end[0] + 2 / 3 * (ctrl[0] - end[0]), end[1] + 2 / 3 * (ctrl[1] - end[1]))
            add_curve(c1, c2, end)
            current = end
        elif cmd.type == CommandType.CLOSE:
            closed = True

    return BezierShape(in_tangents=in_tangents, out_tangents=out_tangents, vertices=vertices, closed=closed)


def export_path_shape(path: PathData, keyframes: List[Keyframe]) -> PathItem:
    """Geometry item for one path; keyframed when the path appears in two or more keyframes."""
    qualifying = keyframes_for_path(keyframes, path.id)
    if len(qualifying) < 2:
        return PathItem(shape=ShapeProperty(animated=0, value=commands_to_bezier(path.commands)))

    entries = []
    for kf in qualifying:
        in_handle, out_handle = easing_handles(kf.easing)
        entries.append(
            ShapeKeyframe(
                time=kf.frame,
                start=[commands_to_bezier(kf.path_snapshots[path.id])],
                in_handle=in_handle,
                out_handle=out_handle,
            )
        )
    # Hold entry so playback stops at the last authored shape
    last = qualifying[-1]
    entries.append(ShapeKeyframe(time=last.frame, start=[commands_to_bezier(last.path_snapshots[path.id])]))
    return PathItem(shape=ShapeProperty(animated=1, value=entries))


# ============================================================================
# DOCUMENT
# ============================================================================

def _color(value: str) -> StaticValue:
    try:
        return StaticValue(value=hex_to_rgba(value))
    except ValueError:
        log.warning(f"Unsupported color {value!r}, exporting as black")
        return StaticValue(value=list(FALLBACK_COLOR))


def export_path_group(path: PathData, index: int, keyframes: List[Keyframe], cfg: ExportCfg) -> GroupItem:
    """Group for one path; item order is stroke, fill, geometry, transform."""
    items: List[GroupMember] = []
    if path.stroke:
        width = path.stroke_width if path.stroke_width else cfg.default_stroke_width
        items.append(StrokeItem(color=_color(path.stroke), width=StaticValue(value=width)))
    if path.fill:
        items.append(FillItem(color=_color(path.fill)))
    items.append(export_path_shape(path, keyframes))
    items.append(TransformItem())
    return GroupItem(name=f"Path {index + 1}", items=items)


def export_layer(layer: Layer, index: int, state: AnimationState, cfg: ExportCfg) -> ShapeLayer:
    return ShapeLayer(
        index=index + 1,
        name=layer.name,
        shapes=[export_path_group(path, i, state.keyframes, cfg) for i, path in enumerate(layer.paths)],
        out_point=state.total_frames,
    )


def export_to_lottie(
    state: AnimationState, cfg: Optional[ExportCfg] = None, path_id: Optional[str] = None
) -> LottieAnimation:
    """
    Build the Lottie object model for a state.

    Args:
        state: Animation state to export
        cfg: Export settings (version, document name, default stroke width)
        path_id: If given, export only this path (inside its own layer)

    Returns:
        LottieAnimation; hidden layers are omitted
    """
    cfg = cfg or ExportCfg()
    layers = []
    for index, layer in enumerate(state.layers):
        if not layer.visible:
            continue
        if path_id is not None:
            paths = [p for p in layer.paths if p.id == path_id]
            if not paths:
                continue
            layer = layer.model_copy(update={"paths": paths})
        layers.append(export_layer(layer, index, state, cfg))

    animation = LottieAnimation(
        version=cfg.lottie_version,
        frame_rate=state.fps,
        out_point=state.total_frames,
        width=state.width,
        height=state.height,
        name=cfg.name,
        layers=layers,
    )
    log.info(
        f"Exported {len(layers)} layers, {sum(len(lyr.shapes) for lyr in layers)} paths, "
        f"{len(state.keyframes)} keyframes"
    )
    return animation


def export_to_dict(
    state: AnimationState, cfg: Optional[ExportCfg] = None, path_id: Optional[str] = None
) -> Dict[str, Any]:
    return export_to_lottie(state, cfg, path_id).model_dump(by_alias=True, exclude_none=True)


def export_to_json(
    state: AnimationState,
    cfg: Optional[ExportCfg] = None,
    indent: Optional[int] = None,
    path_id: Optional[str] = None,
) -> str:
    return json.dumps(export_to_dict(state, cfg, path_id), indent=indent)


def save_lottie(
    state: AnimationState,
    path: Union[str, Path],
    cfg: Optional[ExportCfg] = None,
    indent: Optional[int] = 2,
    path_id: Optional[str] = None,
) -> Path:
    """Write the Lottie JSON for a state and return the output path."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(export_to_json(state, cfg, indent=indent, path_id=path_id), encoding="utf-8")
    log.info(f"Saved Lottie animation: {path}")
    return path


__all__ = [
    "StaticValue",
    "BezierShape",
    "EasingHandle",
    "ShapeKeyframe",
    "ShapeProperty",
    "PathItem",
    "StrokeItem",
    "FillItem",
    "TransformItem",
    "GroupItem",
    "LayerTransform",
    "ShapeLayer",
    "LottieAnimation",
    "EASING_HANDLES",
    "easing_handles",
    "commands_to_bezier",
    "export_path_shape",
    "export_path_group",
    "export_layer",
    "export_to_lottie",
    "export_to_dict",
    "export_to_json",
    "save_lottie",
]
