#!/usr/bin/env python3
"""
Core SDK for the Vector Path Animation Toolchain

This module provides the single source of truth for the path IR: command types,
easing selectors, and the pydantic models for points, commands, paths, layers,
keyframes and the aggregate animation state. All vector modules import from this
file to avoid drift.
"""

import json
import uuid
from enum import Enum
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


# ============================================================================
# CONSTANTS
# ============================================================================

DEFAULT_WIDTH = 800
DEFAULT_HEIGHT = 600
DEFAULT_FPS = 30
DEFAULT_TOTAL_FRAMES = 60
MIN_FPS = 1
MAX_FPS = 120

# Cubic Bezier constant for approximating a quarter circle
KAPPA = 0.5522847498


class ParseError(ValueError):
    """Raised when markup or path data cannot be turned into path IR."""


# ============================================================================
# ENUMS
# ============================================================================

class CommandType(str, Enum):
    MOVE_TO = "M"
    LINE_TO = "L"
    CUBIC_TO = "C"
    QUAD_TO = "Q"
    CLOSE = "Z"


COMMAND_ARITY = {
    CommandType.MOVE_TO: 1,
    CommandType.LINE_TO: 1,
    CommandType.CUBIC_TO: 3,
    CommandType.QUAD_TO: 2,
    CommandType.CLOSE: 0,
}


class Easing(str, Enum):
    LINEAR = "linear"
    EASE_IN = "ease-in"
    EASE_OUT = "ease-out"
    EASE_IN_OUT = "ease-in-out"


# ============================================================================
# PYDANTIC MODELS
# ============================================================================

class Point(BaseModel):
    """Absolute 2D coordinate."""

    model_config = ConfigDict(frozen=True)

    x: float
    y: float

    def as_tuple(self) -> Tuple[float, float]:
        return (self.x, self.y)


class PathCommand(BaseModel):
    """One drawing command with its fixed-arity point list.

    Points are always absolute; C carries (control1, control2, end) and Q carries
    (control, end).
    """

    type: CommandType
    points: List[Point] = Field(default_factory=list)

    @model_validator(mode="after")
    def validate_arity(self):
        expected = COMMAND_ARITY[self.type]
        if len(self.points) != expected:
            raise ValueError(
                f"{self.type.value} command takes {expected} point(s), got {len(self.points)}"
            )
        return self

    @classmethod
    def move_to(cls, x: float, y: float) -> "PathCommand":
        return cls(type=CommandType.MOVE_TO, points=[Point(x=x, y=y)])

    @classmethod
    def line_to(cls, x: float, y: float) -> "PathCommand":
        return cls(type=CommandType.LINE_TO, points=[Point(x=x, y=y)])

    @classmethod
    def cubic_to(cls, x1: float, y1: float, x2: float, y2: float, x: float, y: float) -> "PathCommand":
        return cls(
            type=CommandType.CUBIC_TO,
            points=[Point(x=x1, y=y1), Point(x=x2, y=y2), Point(x=x, y=y)],
        )

    @classmethod
    def quad_to(cls, x1: float, y1: float, x: float, y: float) -> "PathCommand":
        return cls(type=CommandType.QUAD_TO, points=[Point(x=x1, y=y1), Point(x=x, y=y)])

    @classmethod
    def close(cls) -> "PathCommand":
        return cls(type=CommandType.CLOSE, points=[])


class PathData(BaseModel):
    """A single drawable path with optional paint attributes."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), description="Unique path identifier")
    commands: List[PathCommand] = Field(default_factory=list, description="Ordered drawing commands")
    fill: Optional[str] = Field(None, description="Fill color")
    stroke: Optional[str] = Field(None, description="Stroke color")
    stroke_width: Optional[float] = Field(None, description="Stroke width")


class Layer(BaseModel):
    """Ordered group of paths; list order is z-order."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), description="Unique layer identifier")
    name: str = Field(..., description="Display name")
    paths: List[PathData] = Field(default_factory=list, description="Layer paths")
    visible: bool = Field(default=True, description="Exported and rendered when true")
    locked: bool = Field(default=False, description="Editing lock")


class Keyframe(BaseModel):
    """Snapshot of path commands anchored to a frame."""

    frame: int = Field(..., ge=0, description="Frame number")
    path_snapshots: Dict[str, List[PathCommand]] = Field(
        default_factory=dict, description="Independent copy of each path's commands, by path id"
    )
    easing: Easing = Field(default=Easing.LINEAR, description="Easing toward the next keyframe")


class AnimationState(BaseModel):
    """Complete document: layers, keyframes and playback settings."""

    layers: List[Layer] = Field(default_factory=list, description="Layers in z-order")
    keyframes: List[Keyframe] = Field(default_factory=list, description="Keyframes sorted by frame")
    current_frame: int = Field(default=0, ge=0, description="Query frame")
    total_frames: int = Field(default=DEFAULT_TOTAL_FRAMES, ge=1, description="Frame count")
    fps: int = Field(default=DEFAULT_FPS, ge=MIN_FPS, le=MAX_FPS, description="Frames per second")
    width: float = Field(default=DEFAULT_WIDTH, description="Canvas width")
    height: float = Field(default=DEFAULT_HEIGHT, description="Canvas height")
    background_color: str = Field(default="#ffffff", description="Canvas background")

    @field_validator("keyframes")
    @classmethod
    def validate_keyframes(cls, v):
        frames = [kf.frame for kf in v]
        if len(frames) != len(set(frames)):
            raise ValueError("Keyframe frame numbers must be unique")
        return sorted(v, key=lambda kf: kf.frame)


# ============================================================================
# HELPER FUNCTIONS
# ============================================================================

def copy_commands(commands: List[PathCommand]) -> List[PathCommand]:
    """Deep copy a command list so the result shares nothing with the source."""
    return [cmd.model_copy(deep=True) for cmd in commands]


def iter_paths(state: AnimationState) -> Iterator[Tuple[Layer, PathData]]:
    for layer in state.layers:
        for path in layer.paths:
            yield layer, path


def find_path(state: AnimationState, path_id: str) -> Optional[PathData]:
    for _, path in iter_paths(state):
        if path.id == path_id:
            return path
    return None


def find_layer(state: AnimationState, layer_id: str) -> Optional[Layer]:
    for layer in state.layers:
        if layer.id == layer_id:
            return layer
    return None


def validate_state(data: Union[Dict, AnimationState]) -> AnimationState:
    """Validate and return an AnimationState instance."""
    if isinstance(data, dict):
        return AnimationState(**data)
    elif isinstance(data, AnimationState):
        return data
    else:
        raise TypeError("Data must be a dict or AnimationState instance")


def save_state(state: AnimationState, path: Union[str, Path]) -> None:
    """Save AnimationState to a JSON file."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        json.dump(state.model_dump(mode="json"), f, indent=2)


def load_state(path: Union[str, Path]) -> AnimationState:
    """Load AnimationState from a JSON file."""
    with open(path, "r") as f:
        data = json.load(f)
    return AnimationState(**data)


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    # Constants
    'DEFAULT_WIDTH', 'DEFAULT_HEIGHT', 'DEFAULT_FPS', 'DEFAULT_TOTAL_FRAMES',
    'MIN_FPS', 'MAX_FPS', 'KAPPA', 'COMMAND_ARITY',

    # Errors
    'ParseError',

    # Enums
    'CommandType', 'Easing',

    # Models
    'Point', 'PathCommand', 'PathData', 'Layer', 'Keyframe', 'AnimationState',

    # Helper functions
    'copy_commands', 'iter_paths', 'find_path', 'find_layer',
    'validate_state', 'save_state', 'load_state',
]
