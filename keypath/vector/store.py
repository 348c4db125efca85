#!/usr/bin/env python3
"""
Animation Store

Single-owner handle around an AnimationState. All mutations go through this class,
run one at a time under a lock, and are recorded for undo/redo. Queries are
evaluated with the pure timeline functions.

Operations that name a layer, path or keyframe that does not exist are no-ops.
"""

import threading
from contextlib import contextmanager
from typing import List, Optional

from keypath.core import GlobalCfg, get_logger

from .history import DEFAULT_MAX_DEPTH, HistoryManager
from .sdk import (
    MAX_FPS,
    MIN_FPS,
    AnimationState,
    Easing,
    Layer,
    PathCommand,
    PathData,
    Point,
    copy_commands,
    find_layer,
    find_path,
)
from .timeline import capture_keyframe, drop_keyframe, frame_paths, insert_keyframe, path_at_frame

log = get_logger("store")

PATH_FIELDS = {"commands", "fill", "stroke", "stroke_width"}


class AnimationStore:
    """Mutation handle owning one AnimationState and its history."""

    def __init__(self, state: Optional[AnimationState] = None, max_history: int = DEFAULT_MAX_DEPTH):
        self._state = state if state is not None else AnimationState()
        self._lock = threading.RLock()
        self.history = HistoryManager(max_depth=max_history)

    @classmethod
    def from_config(cls, cfg: GlobalCfg, state: Optional[AnimationState] = None) -> "AnimationStore":
        """Build a store whose empty state uses the configured playback defaults."""
        if state is None:
            anim = cfg.animation
            state = AnimationState(
                fps=anim.fps,
                total_frames=anim.total_frames,
                width=anim.width,
                height=anim.height,
                background_color=anim.background_color,
            )
        return cls(state, max_history=cfg.history.max_depth)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def state(self) -> AnimationState:
        """The owned state. Treat as read-only; mutate through store methods."""
        return self._state

    def snapshot(self) -> AnimationState:
        with self._lock:
            return self._state.model_copy(deep=True)

    def interpolated_paths(self, frame: Optional[int] = None) -> List[PathData]:
        """Effective paths of all visible layers at the frame (default: current frame)."""
        with self._lock:
            return frame_paths(self._state, frame)

    def path_at_frame(self, path_id: str, frame: Optional[int] = None) -> Optional[PathData]:
        with self._lock:
            path = find_path(self._state, path_id)
            if path is None:
                return None
            if frame is None:
                frame = self._state.current_frame
            return path_at_frame(path, self._state.keyframes, frame)

    # ------------------------------------------------------------------
    # Mutation plumbing
    # ------------------------------------------------------------------

    @contextmanager
    def _mutation(self, description: str):
        with self._lock:
            before = self._state.model_copy(deep=True)
            yield self._state
            if self._state != before:
                self.history.record(before, self._state, description)

    def can_undo(self) -> bool:
        with self._lock:
            return self.history.can_undo()

    def can_redo(self) -> bool:
        with self._lock:
            return self.history.can_redo()

    def undo(self) -> bool:
        with self._lock:
            state = self.history.undo()
            if state is None:
                return False
            self._state = state
            return True

    def redo(self) -> bool:
        with self._lock:
            state = self.history.redo()
            if state is None:
                return False
            self._state = state
            return True

    # ------------------------------------------------------------------
    # Layers and paths
    # ------------------------------------------------------------------

    def add_layer(self, name: str) -> Layer:
        layer = Layer(name=name)
        with self._mutation(f"Add layer {name}") as state:
            state.layers.append(layer)
        return layer.model_copy(deep=True)

    def remove_layer(self, layer_id: str) -> None:
        with self._mutation("Remove layer") as state:
            state.layers = [layer for layer in state.layers if layer.id != layer_id]

    def toggle_layer_visibility(self, layer_id: str) -> None:
        with self._mutation("Toggle layer visibility") as state:
            layer = find_layer(state, layer_id)
            if layer is not None:
                layer.visible = not layer.visible

    def toggle_layer_lock(self, layer_id: str) -> None:
        with self._mutation("Toggle layer lock") as state:
            layer = find_layer(state, layer_id)
            if layer is not None:
                layer.locked = not layer.locked

    def add_path_to_layer(self, layer_id: str, path: PathData) -> None:
        with self._mutation("Add path") as state:
            layer = find_layer(state, layer_id)
            if layer is not None:
                layer.paths.append(path.model_copy(deep=True))

    def remove_path(self, path_id: str) -> None:
        """Remove a path from its layer. Keyframe snapshots of it are left in place."""
        with self._mutation("Remove path") as state:
            for layer in state.layers:
                layer.paths = [path for path in layer.paths if path.id != path_id]

    def update_path(self, path_id: str, **updates) -> None:
        """Replace any of commands, fill, stroke or stroke_width on a path."""
        unknown = set(updates) - PATH_FIELDS
        if unknown:
            raise ValueError(f"Unsupported path fields: {sorted(unknown)}")
        if "commands" in updates:
            updates["commands"] = copy_commands(updates["commands"])
        with self._mutation("Update path") as state:
            for layer in state.layers:
                for i, path in enumerate(layer.paths):
                    if path.id == path_id:
                        merged = {**path.model_dump(), **updates}
                        layer.paths[i] = PathData(**merged)

    def update_path_point(self, path_id: str, command_index: int, point_index: int, point: Point) -> None:
        """Move one point of one command; out-of-range indices are ignored."""
        with self._mutation("Move point") as state:
            path = find_path(state, path_id)
            if path is None or not 0 <= command_index < len(path.commands):
                return
            command = path.commands[command_index]
            if not 0 <= point_index < len(command.points):
                return
            points = list(command.points)
            points[point_index] = point
            path.commands[command_index] = PathCommand(type=command.type, points=points)

    def import_layers(self, layers: List[Layer]) -> None:
        """Replace all layers; keyframes are cleared and the current frame reset."""
        with self._mutation("Import layers") as state:
            state.layers = [layer.model_copy(deep=True) for layer in layers]
            state.keyframes = []
            state.current_frame = 0
        log.info(f"Imported {len(layers)} layers")

    def clear_all(self) -> None:
        with self._mutation("Clear all") as state:
            state.layers = []
            state.keyframes = []
            state.current_frame = 0

    # ------------------------------------------------------------------
    # Keyframes
    # ------------------------------------------------------------------

    def add_keyframe(self, frame: int, easing: Easing = Easing.LINEAR) -> None:
        """Capture every path's current commands at the frame, replacing any keyframe there."""
        with self._mutation(f"Add keyframe {frame}") as state:
            keyframe = capture_keyframe(state.layers, frame, Easing(easing))
            state.keyframes = insert_keyframe(state.keyframes, keyframe)
        log.info(f"Keyframe at frame {frame} ({Easing(easing).value}), {len(self._state.keyframes)} total")

    def remove_keyframe(self, frame: int) -> None:
        with self._mutation(f"Remove keyframe {frame}") as state:
            state.keyframes = drop_keyframe(state.keyframes, frame)

    # ------------------------------------------------------------------
    # Playback settings
    # ------------------------------------------------------------------

    def set_current_frame(self, frame: int) -> None:
        """Move the query frame, clamped to [0, total_frames - 1]. Not recorded in history."""
        with self._lock:
            self._state.current_frame = max(0, min(frame, self._state.total_frames - 1))

    def set_total_frames(self, frames: int) -> None:
        with self._mutation("Set total frames") as state:
            state.total_frames = max(1, frames)
            if state.current_frame >= state.total_frames:
                state.current_frame = state.total_frames - 1

    def set_fps(self, fps: int) -> None:
        with self._mutation("Set fps") as state:
            state.fps = max(MIN_FPS, min(fps, MAX_FPS))

    def set_canvas_size(self, width: float, height: float) -> None:
        with self._mutation("Set canvas size") as state:
            state.width = width
            state.height = height


__all__ = ["AnimationStore"]
