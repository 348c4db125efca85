#!/usr/bin/env python3
"""
keypath command line

    keypath import drawing.svg -o state.json
    keypath keyframe state.json --frame 0
    keypath keyframe state.json --frame 30 --svg pose.svg --easing ease-in-out
    keypath export state.json -o anim.json
    keypath export state.json -o one.json --path-id <id>
    keypath frame state.json --frame 15 -o frame15.svg
    keypath validate state.json
"""

import argparse
import sys
from typing import List, Optional

from keypath.core import GlobalCfg, get_logger, load_config
from keypath.vector.lottie_export import save_lottie
from keypath.vector.sdk import Easing, iter_paths, load_state, save_state
from keypath.vector.store import AnimationStore
from keypath.vector.svg_export import save_frame_svg
from keypath.vector.svg_import import load_svg

log = get_logger("cli")


def cmd_import(args, cfg: GlobalCfg) -> int:
    parsed = load_svg(args.svg, cfg.importing)
    store = AnimationStore.from_config(cfg)
    store.set_canvas_size(parsed.width, parsed.height)
    if args.fps is not None:
        store.set_fps(args.fps)
    if args.frames is not None:
        store.set_total_frames(args.frames)
    store.import_layers(parsed.layers)
    save_state(store.state, args.output)
    log.info(f"Wrote state: {args.output}")
    return 0


def cmd_keyframe(args, cfg: GlobalCfg) -> int:
    store = AnimationStore(load_state(args.state), max_history=cfg.history.max_depth)
    if args.svg:
        # Pose paths replace the state's paths positionally
        pose = load_svg(args.svg, cfg.importing)
        pose_paths = [path for layer in pose.layers for path in layer.paths]
        targets = [path.id for _, path in iter_paths(store.state)]
        if len(pose_paths) != len(targets):
            log.warning(f"Pose has {len(pose_paths)} paths, state has {len(targets)}; extra paths ignored")
        for path_id, pose_path in zip(targets, pose_paths):
            store.update_path(path_id, commands=pose_path.commands)
    store.add_keyframe(args.frame, Easing(args.easing))
    output = args.output or args.state
    save_state(store.state, output)
    log.info(f"Wrote state: {output}")
    return 0


def cmd_export(args, cfg: GlobalCfg) -> int:
    state = load_state(args.state)
    save_lottie(state, args.output, cfg.export, indent=args.indent, path_id=args.path_id)
    return 0


def cmd_frame(args, cfg: GlobalCfg) -> int:
    state = load_state(args.state)
    save_frame_svg(state, args.output, args.frame)
    return 0


def cmd_validate(args, cfg: GlobalCfg) -> int:
    state = load_state(args.state)
    paths = sum(1 for _ in iter_paths(state))
    print(
        f"OK: {len(state.layers)} layers, {paths} paths, {len(state.keyframes)} keyframes, "
        f"{state.total_frames} frames @ {state.fps} fps"
    )
    return 0


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="keypath", description="Keyframe vector paths and export Lottie JSON")
    ap.add_argument("--config", default=None, help="Path to config YAML (default conf/keypath.yaml)")
    sub = ap.add_subparsers(dest="command", required=True)

    p = sub.add_parser("import", help="Import an SVG document into a new state file")
    p.add_argument("svg", help="SVG file to import")
    p.add_argument("-o", "--output", required=True, help="State JSON to write")
    p.add_argument("--fps", type=int, default=None, help="Frames per second override")
    p.add_argument("--frames", type=int, default=None, help="Total frame count override")
    p.set_defaults(func=cmd_import)

    p = sub.add_parser("keyframe", help="Capture a keyframe of all paths")
    p.add_argument("state", help="State JSON")
    p.add_argument("--frame", type=int, required=True, help="Frame number")
    p.add_argument("--easing", choices=[e.value for e in Easing], default=Easing.LINEAR.value)
    p.add_argument("--svg", default=None, help="SVG whose paths replace the current paths before capture")
    p.add_argument("-o", "--output", default=None, help="State JSON to write (default: in place)")
    p.set_defaults(func=cmd_keyframe)

    p = sub.add_parser("export", help="Export a state to Lottie JSON")
    p.add_argument("state", help="State JSON")
    p.add_argument("-o", "--output", required=True, help="Lottie JSON to write")
    p.add_argument("--indent", type=int, default=None, help="JSON indent (default compact)")
    p.add_argument("--path-id", default=None, help="Export only this path")
    p.set_defaults(func=cmd_export)

    p = sub.add_parser("frame", help="Render one frame to SVG")
    p.add_argument("state", help="State JSON")
    p.add_argument("--frame", type=int, default=None, help="Frame number (default: state's current frame)")
    p.add_argument("-o", "--output", required=True, help="SVG file to write")
    p.set_defaults(func=cmd_frame)

    p = sub.add_parser("validate", help="Validate a state file")
    p.add_argument("state", help="State JSON")
    p.set_defaults(func=cmd_validate)
    return ap


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        cfg = load_config(args.config)
        return args.func(args, cfg)
    except (ValueError, OSError) as e:
        log.error(f"{args.command} failed: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
