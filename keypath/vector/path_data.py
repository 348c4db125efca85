#!/usr/bin/env python3
"""
Path Data Parsing for the Vector Toolchain

Turns the SVG `d` mini-language into absolute path IR and back:
- Tokenizing command letters and numeric literals
- Implicit command repetition (bare numbers repeat the previous command)
- Relative/absolute coordinate resolution against the current point
- Smooth curve (S/T) control point reflection
- Arc segments degraded to straight lines (endpoint kept, curvature dropped)

Malformed numbers, unknown letters and incomplete parameter groups raise ParseError.
"""

import math
import re
from typing import Callable, Dict, List, Tuple, Union

from keypath.core import get_logger

from .sdk import CommandType, ParseError, PathCommand, Point

log = get_logger("path_data")

Token = Union[str, float]

_TOKEN_RE = re.compile(
    r"(?P<cmd>[MmLlHhVvCcSsQqTtAaZz])"
    r"|(?P<num>[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?)"
    r"|(?P<sep>[\s,]+)"
    r"|(?P<bad>.)"
)

# Number of numeric parameters consumed per repetition of each command
PARAM_COUNTS = {
    "M": 2,
    "L": 2,
    "H": 1,
    "V": 1,
    "C": 6,
    "S": 4,
    "Q": 4,
    "T": 2,
    "A": 7,
    "Z": 0,
}


def tokenize_path_data(d: str) -> List[Token]:
    """Split path data into command letters (str) and numbers (float)."""
    tokens: List[Token] = []
    for match in _TOKEN_RE.finditer(d):
        kind = match.lastgroup
        if kind == "cmd":
            tokens.append(match.group())
        elif kind == "num":
            value = float(match.group())
            if not math.isfinite(value):
                raise ParseError(f"Number out of range {match.group()!r} at offset {match.start()} in path data")
            tokens.append(value)
        elif kind == "bad":
            raise ParseError(f"Unexpected character {match.group()!r} at offset {match.start()} in path data")
    return tokens


class PathDataParser:
    """Stateful parser tracking the current point and the subpath start point."""

    def __init__(self, d: str):
        self.d = d
        self.tokens = tokenize_path_data(d)
        self.pos = 0
        self.current = (0.0, 0.0)
        self.start = (0.0, 0.0)
        self.commands: List[PathCommand] = []
        self._handlers: Dict[str, Callable[[bool], None]] = {
            "M": self._parse_move,
            "L": self._parse_line,
            "H": self._parse_horizontal,
            "V": self._parse_vertical,
            "C": self._parse_cubic,
            "S": self._parse_smooth_cubic,
            "Q": self._parse_quad,
            "T": self._parse_smooth_quad,
            "A": self._parse_arc,
            "Z": self._parse_close,
        }

    def parse(self) -> List[PathCommand]:
        while self.pos < len(self.tokens):
            token = self.tokens[self.pos]
            if not isinstance(token, str):
                raise ParseError(f"Expected a command letter in path data, found number {token}")
            self.pos += 1
            relative = token.islower()
            self._handlers[token.upper()](relative)

        log.debug(f"Parsed {len(self.tokens)} tokens into {len(self.commands)} commands")
        return self.commands

    # ------------------------------------------------------------------
    # Token helpers
    # ------------------------------------------------------------------

    def _has_number(self) -> bool:
        return self.pos < len(self.tokens) and not isinstance(self.tokens[self.pos], str)

    def _number(self, letter: str) -> float:
        if not self._has_number():
            raise ParseError(
                f"Command {letter} expects {PARAM_COUNTS[letter.upper()]} parameters per segment in {self.d!r}"
            )
        value = self.tokens[self.pos]
        self.pos += 1
        return value

    def _coord(self, letter: str, relative: bool) -> Tuple[float, float]:
        """Read an x,y pair, offset from the current point when relative."""
        x = self._number(letter)
        y = self._number(letter)
        if relative:
            return (self.current[0] + x, self.current[1] + y)
        return (x, y)

    def _repeat(self, step: Callable[[], None]) -> None:
        # First group is mandatory, the rest repeat while bare numbers follow
        step()
        while self._has_number():
            step()

    def _last_command(self):
        return self.commands[-1] if self.commands else None

    def _emit(self, command: PathCommand) -> None:
        self.commands.append(command)

    # ------------------------------------------------------------------
    # Command handlers
    # ------------------------------------------------------------------

    def _parse_move(self, relative: bool) -> None:
        letter = "m" if relative else "M"
        x, y = self._coord(letter, relative)
        self.current = (x, y)
        self.start = (x, y)
        self._emit(PathCommand.move_to(x, y))

        while self._has_number():
            lx, ly = self._coord(letter, relative)
            self.current = (lx, ly)
            self._emit(PathCommand.line_to(lx, ly))

    def _parse_line(self, relative: bool) -> None:
        letter = "l" if relative else "L"

        def step():
            x, y = self._coord(letter, relative)
            self.current = (x, y)
            self._emit(PathCommand.line_to(x, y))

        self._repeat(step)

    def _parse_horizontal(self, relative: bool) -> None:
        letter = "h" if relative else "H"

        def step():
            x = self._number(letter)
            if relative:
                x += self.current[0]
            self.current = (x, self.current[1])
            self._emit(PathCommand.line_to(*self.current))

        self._repeat(step)

    def _parse_vertical(self, relative: bool) -> None:
        letter = "v" if relative else "V"

        def step():
            y = self._number(letter)
            if relative:
                y += self.current[1]
            self.current = (self.current[0], y)
            self._emit(PathCommand.line_to(*self.current))

        self._repeat(step)

    def _parse_cubic(self, relative: bool) -> None:
        letter = "c" if relative else "C"

        def step():
            x1, y1 = self._coord(letter, relative)
            x2, y2 = self._coord(letter, relative)
            x, y = self._coord(letter, relative)
            self._emit(PathCommand.cubic_to(x1, y1, x2, y2, x, y))
            self.current = (x, y)

        self._repeat(step)

    def _parse_smooth_cubic(self, relative: bool) -> None:
        letter = "s" if relative else "S"

        def step():
            cx, cy = self.current
            x1, y1 = cx, cy
            last = self._last_command()
            if last is not None and last.type == CommandType.CUBIC_TO:
                x1 = 2 * cx - last.points[1].x
                y1 = 2 * cy - last.points[1].y

            x2, y2 = self._coord(letter, relative)
            x, y = self._coord(letter, relative)
            self._emit(PathCommand.cubic_to(x1, y1, x2, y2, x, y))
            self.current = (x, y)

        self._repeat(step)

    def _parse_quad(self, relative: bool) -> None:
        letter = "q" if relative else "Q"

        def step():
            x1, y1 = self._coord(letter, relative)
            x, y = self._coord(letter, relative)
            self._emit(PathCommand.quad_to(x1, y1, x, y))
            self.current = (x, y)

        self._repeat(step)

    def _parse_smooth_quad(self, relative: bool) -> None:
        letter = "t" if relative else "T"

        def step():
            cx, cy = self.current
            x1, y1 = cx, cy
            last = self._last_command()
            if last is not None and last.type == CommandType.QUAD_TO:
                x1 = 2 * cx - last.points[0].x
                y1 = 2 * cy - last.points[0].y

            x, y = self._coord(letter, relative)
            self._emit(PathCommand.quad_to(x1, y1, x, y))
            self.current = (x, y)

        self._repeat(step)

    def _parse_arc(self, relative: bool) -> None:
        letter = "a" if relative else "A"

        def step():
            rx = self._number(letter)
            ry = self._number(letter)
            rotation = self._number(letter)
            large_arc = self._number(letter)
            sweep = self._number(letter)
            x, y = self._coord(letter, relative)
            # Arc curvature is not modelled; keep the endpoint only
            log.debug(
                f"Arc rx={rx} ry={ry} rot={rotation} large={large_arc} sweep={sweep} "
                f"degraded to line ending at ({x}, {y})"
            )
            self._emit(PathCommand.line_to(x, y))
            self.current = (x, y)

        self._repeat(step)

    def _parse_close(self, relative: bool) -> None:
        self._emit(PathCommand.close())
        self.current = self.start


def parse_path_data(d: str) -> List[PathCommand]:
    """Parse an SVG path `d` string into absolute PathCommands."""
    try:
        return PathDataParser(d).parse()
    except ParseError as e:
        log.error(f"Path data rejected: {e}")
        raise


def _fmt(value: float) -> str:
    text = repr(float(value))
    if text.endswith(".0"):
        text = text[:-2]
    return text


def _point_str(point: Point) -> str:
    return f"{_fmt(point.x)} {_fmt(point.y)}"


def commands_to_path_string(commands: List[PathCommand]) -> str:
    """Serialize absolute PathCommands back into `d` syntax."""
    parts = []
    for cmd in commands:
        if cmd.type == CommandType.CLOSE:
            parts.append("Z")
        else:
            parts.append(" ".join([cmd.type.value] + [_point_str(p) for p in cmd.points]))
    return " ".join(parts)


__all__ = [
    "PathDataParser",
    "tokenize_path_data",
    "parse_path_data",
    "commands_to_path_string",
]
