#!/usr/bin/env python3
"""
Keyframe Timeline and Interpolation

Pure functions over path IR and keyframes:
- Easing curves mapping normalized time [0, 1] to eased progress [0, 1]
- Structural-compatibility-gated interpolation between two command lists
- Per-path frame evaluation with hold-before-first / hold-after-last semantics
- Keyframe capture, insertion and removal on sorted keyframe lists

Every function here returns new objects and leaves its inputs untouched.
"""

from typing import Callable, Dict, List, Optional

from keypath.core import get_logger

from .sdk import (
    AnimationState,
    Easing,
    Keyframe,
    Layer,
    PathCommand,
    PathData,
    Point,
    copy_commands,
)

log = get_logger("timeline")

# Interpolation switches from prev to next at this eased progress when structures differ
SWITCH_THRESHOLD = 0.5


# ============================================================================
# EASING
# ============================================================================

def ease_linear(t: float) -> float:
    return t


def ease_in(t: float) -> float:
    return t * t


def ease_out(t: float) -> float:
    return t * (2 - t)


def ease_in_out(t: float) -> float:
    return 2 * t * t if t < 0.5 else -1 + (4 - 2 * t) * t


EASING_FUNCTIONS: Dict[Easing, Callable[[float], float]] = {
    Easing.LINEAR: ease_linear,
    Easing.EASE_IN: ease_in,
    Easing.EASE_OUT: ease_out,
    Easing.EASE_IN_OUT: ease_in_out,
}


def apply_easing(t: float, easing: Easing) -> float:
    return EASING_FUNCTIONS[Easing(easing)](t)


# ============================================================================
# INTERPOLATION
# ============================================================================

def _lerp_point(a: Point, b: Point, t: float) -> Point:
    return Point(x=a.x + (b.x - a.x) * t, y=a.y + (b.y - a.y) * t)


def interpolate_command(prev: PathCommand, next_: PathCommand, t: float) -> PathCommand:
    """Blend two commands; a type or arity mismatch switches at the threshold instead."""
    if prev.type != next_.type or len(prev.points) != len(next_.points):
        chosen = prev if t < SWITCH_THRESHOLD else next_
        return chosen.model_copy(deep=True)
    return PathCommand(
        type=prev.type,
        points=[_lerp_point(a, b, t) for a, b in zip(prev.points, next_.points)],
    )


def interpolate_commands(prev: List[PathCommand], next_: List[PathCommand], t: float) -> List[PathCommand]:
    """
    Interpolate two command lists at eased progress t.

    Lists of different length cannot be matched positionally, so the whole path
    switches from prev to next at the threshold. Otherwise commands are blended
    pairwise and only mismatched pairs switch.
    """
    if len(prev) != len(next_):
        return copy_commands(prev if t < SWITCH_THRESHOLD else next_)
    return [interpolate_command(a, b, t) for a, b in zip(prev, next_)]


def keyframes_for_path(keyframes: List[Keyframe], path_id: str) -> List[Keyframe]:
    """Keyframes holding a snapshot of this path, ascending by frame."""
    return sorted((kf for kf in keyframes if path_id in kf.path_snapshots), key=lambda kf: kf.frame)


def commands_at_frame(path: PathData, keyframes: List[Keyframe], frame: float) -> List[PathCommand]:
    """Effective commands of one path at a frame."""
    qualifying = keyframes_for_path(keyframes, path.id)
    if not qualifying or frame < qualifying[0].frame:
        return copy_commands(path.commands)

    last = qualifying[-1]
    if frame >= last.frame:
        return copy_commands(last.path_snapshots[path.id])

    for prev, nxt in zip(qualifying, qualifying[1:]):
        if frame == prev.frame:
            return copy_commands(prev.path_snapshots[path.id])
        if prev.frame < frame < nxt.frame:
            t = (frame - prev.frame) / (nxt.frame - prev.frame)
            eased = apply_easing(t, prev.easing)
            return interpolate_commands(prev.path_snapshots[path.id], nxt.path_snapshots[path.id], eased)

    # Unreachable for sorted unique keyframes
    return copy_commands(path.commands)


def path_at_frame(path: PathData, keyframes: List[Keyframe], frame: float) -> PathData:
    """Copy of the path carrying its effective commands at the frame."""
    return path.model_copy(update={"commands": commands_at_frame(path, keyframes, frame)})


def frame_paths(state: AnimationState, frame: Optional[float] = None) -> List[PathData]:
    """Effective paths of every visible layer, in z-order."""
    if frame is None:
        frame = state.current_frame
    return [
        path_at_frame(path, state.keyframes, frame)
        for layer in state.layers
        if layer.visible
        for path in layer.paths
    ]


# ============================================================================
# KEYFRAME CAPTURE
# ============================================================================

def capture_keyframe(layers: List[Layer], frame: int, easing: Easing = Easing.LINEAR) -> Keyframe:
    """Snapshot every path's current commands across all layers."""
    snapshots = {path.id: copy_commands(path.commands) for layer in layers for path in layer.paths}
    log.debug(f"Captured keyframe at frame {frame} with {len(snapshots)} path snapshots")
    return Keyframe(frame=frame, path_snapshots=snapshots, easing=easing)


def insert_keyframe(keyframes: List[Keyframe], keyframe: Keyframe) -> List[Keyframe]:
    """New sorted list with the keyframe added, replacing any at the same frame."""
    kept = [kf for kf in keyframes if kf.frame != keyframe.frame]
    return sorted(kept + [keyframe], key=lambda kf: kf.frame)


def drop_keyframe(keyframes: List[Keyframe], frame: int) -> List[Keyframe]:
    return [kf for kf in keyframes if kf.frame != frame]


__all__ = [
    "SWITCH_THRESHOLD",
    "ease_linear",
    "ease_in",
    "ease_out",
    "ease_in_out",
    "EASING_FUNCTIONS",
    "apply_easing",
    "interpolate_command",
    "interpolate_commands",
    "keyframes_for_path",
    "commands_at_frame",
    "path_at_frame",
    "frame_paths",
    "capture_keyframe",
    "insert_keyframe",
    "drop_keyframe",
]
