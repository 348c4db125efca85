"""
Test configuration and shared fixtures.

Provides sample SVG documents, simple paths and a store populated with one layer,
so each test module can focus on its own behavior.
"""

import os
import sys

import pytest

# Ensure repo root is on sys.path
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from keypath.vector.sdk import PathCommand, PathData
from keypath.vector.store import AnimationStore

SAMPLE_SVG = """<?xml version="1.0" encoding="UTF-8"?>
<svg xmlns="http://www.w3.org/2000/svg" width="200" height="100" viewBox="0 0 400 300">
  <rect x="0" y="0" width="10" height="10" fill="#ff0000"/>
  <g>
    <circle cx="50" cy="50" r="5" stroke="blue" stroke-width="2" fill="none"/>
  </g>
  <path d="M 10 10 L 20 20 Z" style="fill: #00ff00; stroke: black"/>
</svg>
"""

POSE_SVG = """<svg xmlns="http://www.w3.org/2000/svg" width="200" height="100">
  <rect x="20" y="20" width="10" height="10" fill="#ff0000"/>
  <circle cx="80" cy="50" r="5" stroke="blue" stroke-width="2" fill="none"/>
  <path d="M 30 30 L 40 40 Z" style="fill: #00ff00; stroke: black"/>
</svg>
"""


@pytest.fixture
def sample_svg():
    return SAMPLE_SVG


@pytest.fixture
def pose_svg():
    return POSE_SVG


@pytest.fixture
def sample_svg_file(tmp_path):
    path = tmp_path / "drawing.svg"
    path.write_text(SAMPLE_SVG)
    return path


@pytest.fixture
def line_path():
    """Open two-point path from (0, 0) to (10, 0)."""
    return PathData(
        id="line",
        commands=[PathCommand.move_to(0, 0), PathCommand.line_to(10, 0)],
        stroke="#000000",
        stroke_width=2,
    )


@pytest.fixture
def store(line_path):
    """Store with one layer holding the line path."""
    s = AnimationStore()
    layer = s.add_layer("Layer 1")
    s.add_path_to_layer(layer.id, line_path)
    s.history.clear()
    return s
