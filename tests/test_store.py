"""
Unit tests for the AnimationStore mutation handle and its undo/redo history.
"""

import pytest
from pydantic import ValidationError

from keypath.core import GlobalCfg
from keypath.vector.history import HistoryManager
from keypath.vector.sdk import AnimationState, Easing, Layer, PathCommand, PathData, Point
from keypath.vector.store import AnimationStore


class TestLayersAndPaths:
    def test_add_layer(self):
        store = AnimationStore()
        layer = store.add_layer("Background")
        assert store.state.layers[0].id == layer.id
        assert store.state.layers[0].name == "Background"

    def test_add_path_copies_input(self, store, line_path):
        layer_id = store.state.layers[0].id
        store.add_path_to_layer(layer_id, line_path)
        assert store.state.layers[0].paths[-1] is not line_path

    def test_dangling_ids_are_noops(self, store, line_path):
        before = store.snapshot()
        store.add_path_to_layer("nope", line_path)
        store.toggle_layer_visibility("nope")
        store.toggle_layer_lock("nope")
        store.update_path("nope", fill="red")
        store.update_path_point("nope", 0, 0, Point(x=1, y=1))
        store.remove_path("nope")
        store.remove_layer("nope")
        store.remove_keyframe(42)
        assert store.state == before
        assert not store.can_undo()

    def test_toggles(self, store):
        layer_id = store.state.layers[0].id
        store.toggle_layer_visibility(layer_id)
        store.toggle_layer_lock(layer_id)
        assert store.state.layers[0].visible is False
        assert store.state.layers[0].locked is True

    def test_update_path(self, store):
        store.update_path("line", fill="#00ff00", commands=[PathCommand.move_to(5, 5)])
        path = store.state.layers[0].paths[0]
        assert path.fill == "#00ff00"
        assert path.commands == [PathCommand.move_to(5, 5)]
        assert path.id == "line"

    def test_update_path_copies_commands(self, store):
        cmds = [PathCommand.move_to(1, 1), PathCommand.line_to(2, 2)]
        store.update_path("line", commands=cmds)
        stored = store.state.layers[0].paths[0].commands
        assert stored == cmds
        assert stored[0] is not cmds[0]

        cmds[0].points[0] = Point(x=99, y=99)
        assert stored[0].points[0].as_tuple() == (1, 1)

    def test_add_layer_returns_detached_copy(self):
        store = AnimationStore()
        layer = store.add_layer("Background")
        layer.name = "Renamed"
        assert store.state.layers[0].name == "Background"

    def test_update_path_rejects_unknown_fields(self, store):
        with pytest.raises(ValueError):
            store.update_path("line", id="other")

    def test_update_path_point(self, store):
        store.update_path_point("line", 1, 0, Point(x=7, y=8))
        assert store.state.layers[0].paths[0].commands[1].points[0].as_tuple() == (7, 8)

    def test_update_path_point_out_of_range(self, store):
        before = store.snapshot()
        store.update_path_point("line", 9, 0, Point(x=7, y=8))
        store.update_path_point("line", 0, 3, Point(x=7, y=8))
        assert store.state == before

    def test_remove_path_and_layer(self, store):
        layer_id = store.state.layers[0].id
        store.remove_path("line")
        assert store.state.layers[0].paths == []
        store.remove_layer(layer_id)
        assert store.state.layers == []

    def test_import_layers_resets_timeline(self, store):
        store.add_keyframe(0)
        store.set_current_frame(10)
        store.import_layers([Layer(name="Imported")])
        assert [l.name for l in store.state.layers] == ["Imported"]
        assert store.state.keyframes == []
        assert store.state.current_frame == 0

    def test_clear_all(self, store):
        store.add_keyframe(0)
        store.clear_all()
        assert store.state.layers == []
        assert store.state.keyframes == []


class TestKeyframes:
    def test_add_keyframe_snapshots_current_commands(self, store):
        store.add_keyframe(0)
        store.update_path_point("line", 1, 0, Point(x=20, y=0))
        store.add_keyframe(10, Easing.EASE_IN)

        kfs = store.state.keyframes
        assert [kf.frame for kf in kfs] == [0, 10]
        assert kfs[0].path_snapshots["line"][1].points[0].x == 10
        assert kfs[1].path_snapshots["line"][1].points[0].x == 20
        assert kfs[1].easing == Easing.EASE_IN

    def test_add_keyframe_replaces_same_frame(self, store):
        store.add_keyframe(5)
        store.add_keyframe(5, Easing.EASE_OUT)
        assert len(store.state.keyframes) == 1
        assert store.state.keyframes[0].easing == Easing.EASE_OUT

    def test_keyframes_stay_sorted(self, store):
        for frame in (30, 0, 15):
            store.add_keyframe(frame)
        assert [kf.frame for kf in store.state.keyframes] == [0, 15, 30]

    def test_remove_keyframe(self, store):
        store.add_keyframe(0)
        store.add_keyframe(10)
        store.remove_keyframe(0)
        assert [kf.frame for kf in store.state.keyframes] == [10]

    def test_snapshot_independent_of_later_edits(self, store):
        store.add_keyframe(0)
        store.update_path_point("line", 0, 0, Point(x=-1, y=-1))
        assert store.state.keyframes[0].path_snapshots["line"][0].points[0].as_tuple() == (0, 0)

    def test_interpolated_paths(self, store):
        store.add_keyframe(0)
        store.update_path_point("line", 1, 0, Point(x=20, y=0))
        store.add_keyframe(10)
        store.set_current_frame(5)
        paths = store.interpolated_paths()
        assert paths[0].commands[1].points[0].x == pytest.approx(15)
        assert store.path_at_frame("line", 10).commands[1].points[0].x == 20
        assert store.path_at_frame("missing") is None

    def test_negative_frame_rejected(self, store):
        with pytest.raises(ValidationError):
            store.add_keyframe(-1)


class TestPlaybackSettings:
    def test_current_frame_clamped(self, store):
        store.set_current_frame(1000)
        assert store.state.current_frame == store.state.total_frames - 1
        store.set_current_frame(-5)
        assert store.state.current_frame == 0

    def test_total_frames_pulls_current_frame_back(self, store):
        store.set_current_frame(50)
        store.set_total_frames(20)
        assert store.state.total_frames == 20
        assert store.state.current_frame == 19
        store.set_total_frames(0)
        assert store.state.total_frames == 1

    def test_fps_clamped(self, store):
        store.set_fps(500)
        assert store.state.fps == 120
        store.set_fps(0)
        assert store.state.fps == 1

    def test_canvas_size(self, store):
        store.set_canvas_size(1920, 1080)
        assert (store.state.width, store.state.height) == (1920, 1080)

    def test_from_config(self):
        cfg = GlobalCfg(animation={"fps": 24, "total_frames": 48}, history={"max_depth": 3})
        store = AnimationStore.from_config(cfg)
        assert store.state.fps == 24
        assert store.state.total_frames == 48
        assert store.history.max_depth == 3


class TestUndoRedo:
    def test_undo_and_redo(self, store):
        store.add_keyframe(0)
        assert store.undo()
        assert store.state.keyframes == []
        assert store.redo()
        assert len(store.state.keyframes) == 1

    def test_can_undo_and_can_redo(self):
        store = AnimationStore()
        assert not store.can_undo()
        store.set_fps(24)
        assert store.can_undo()
        assert not store.can_redo()
        store.undo()
        assert not store.can_undo()
        assert store.can_redo()

    def test_empty_stacks(self):
        store = AnimationStore()
        assert store.undo() is False
        assert store.redo() is False

    def test_new_mutation_clears_redo(self, store):
        store.set_fps(24)
        store.undo()
        assert store.can_redo()
        store.set_fps(60)
        assert not store.can_redo()

    def test_current_frame_not_recorded(self, store):
        store.set_current_frame(5)
        assert not store.can_undo()

    def test_undo_restores_copy(self, store):
        store.set_fps(24)
        store.undo()
        store.set_fps(12)
        store.undo()
        assert store.state.fps == 30

    def test_history_is_bounded(self):
        store = AnimationStore(AnimationState(), max_history=3)
        for fps in (10, 11, 12, 13, 14):
            store.set_fps(fps)
        assert store.history.undo_depth == 3
        while store.undo():
            pass
        assert store.state.fps == 11


class TestHistoryManager:
    def test_record_copies_states(self):
        history = HistoryManager(max_depth=5)
        before = AnimationState()
        after = AnimationState(fps=24)
        history.record(before, after, "fps")
        after.fps = 60
        assert history.redo() is None
        assert history.undo().fps == 30
        assert history.redo().fps == 24

    def test_consecutive_entries_share_snapshot(self):
        history = HistoryManager()
        s0 = AnimationState()
        s1 = AnimationState(fps=24)
        s2 = AnimationState(fps=12)
        history.record(s0, s1, "a")
        history.record(s1.model_copy(deep=True), s2, "b")
        assert history._undo[1].before is history._undo[0].after
        assert history.undo().fps == 24
        assert history.undo().fps == 30

    def test_before_not_shared_when_different(self):
        history = HistoryManager()
        history.record(AnimationState(), AnimationState(fps=24), "a")
        other = AnimationState(fps=5)
        history.record(other, AnimationState(fps=6), "b")
        assert history._undo[1].before is other

    def test_clear(self):
        history = HistoryManager()
        history.record(AnimationState(), AnimationState(fps=1), "x")
        history.clear()
        assert not history.can_undo()
        assert history.undo_depth == 0
