"""
Unit tests for path data parsing and serialization.

Covers absolute/relative commands, implicit repetition, smooth curve reflection,
arc degradation, malformed input and the serialize/parse round trip.
"""

import pytest

from keypath.vector.path_data import commands_to_path_string, parse_path_data, tokenize_path_data
from keypath.vector.sdk import CommandType, ParseError, PathCommand


def pts(command):
    return [p.as_tuple() for p in command.points]


class TestTokenizer:
    def test_numbers_and_commands(self):
        assert tokenize_path_data("M10,20L-5.5e1 .5") == ["M", 10.0, 20.0, "L", -55.0, 0.5]

    def test_packed_negative_numbers(self):
        assert tokenize_path_data("M1-2") == ["M", 1.0, -2.0]

    def test_unknown_character_rejected(self):
        with pytest.raises(ParseError):
            tokenize_path_data("M 0 0 X 1 1")


class TestAbsoluteCommands:
    def test_move_line_close(self):
        cmds = parse_path_data("M 10 20 L 30 40 Z")
        assert [c.type for c in cmds] == [CommandType.MOVE_TO, CommandType.LINE_TO, CommandType.CLOSE]
        assert pts(cmds[0]) == [(10, 20)]
        assert pts(cmds[1]) == [(30, 40)]
        assert cmds[2].points == []

    def test_horizontal_and_vertical(self):
        cmds = parse_path_data("M 5 5 H 15 V 25")
        assert pts(cmds[1]) == [(15, 5)]
        assert pts(cmds[2]) == [(15, 25)]

    def test_cubic_and_quadratic(self):
        cmds = parse_path_data("M0 0 C 1 2 3 4 5 6 Q 7 8 9 10")
        assert cmds[1].type == CommandType.CUBIC_TO
        assert pts(cmds[1]) == [(1, 2), (3, 4), (5, 6)]
        assert cmds[2].type == CommandType.QUAD_TO
        assert pts(cmds[2]) == [(7, 8), (9, 10)]

    def test_empty_string(self):
        assert parse_path_data("") == []


class TestRelativeCommands:
    def test_relative_line_offsets_current_point(self):
        cmds = parse_path_data("M 10 10 l 5 5 l 5 0")
        assert pts(cmds[1]) == [(15, 15)]
        assert pts(cmds[2]) == [(20, 15)]

    def test_relative_cubic_uses_segment_start(self):
        cmds = parse_path_data("M 10 10 c 1 1 2 2 3 3")
        assert pts(cmds[1]) == [(11, 11), (12, 12), (13, 13)]

    def test_relative_h_v(self):
        cmds = parse_path_data("M 10 10 h 5 v -5")
        assert pts(cmds[1]) == [(15, 10)]
        assert pts(cmds[2]) == [(15, 5)]

    def test_close_resets_current_point_to_subpath_start(self):
        cmds = parse_path_data("M 10 10 L 20 20 z l 1 1")
        assert pts(cmds[-1]) == [(11, 11)]

    def test_leading_relative_move_is_from_origin(self):
        cmds = parse_path_data("m 3 4")
        assert pts(cmds[0]) == [(3, 4)]


class TestImplicitRepetition:
    def test_extra_move_pairs_become_lines(self):
        cmds = parse_path_data("M 0 0 10 0 10 10")
        assert [c.type for c in cmds] == [CommandType.MOVE_TO, CommandType.LINE_TO, CommandType.LINE_TO]
        assert pts(cmds[2]) == [(10, 10)]

    def test_relative_move_repeats_as_relative_lines(self):
        cmds = parse_path_data("m 1 1 2 2")
        assert pts(cmds[1]) == [(3, 3)]

    def test_repeated_line_groups(self):
        cmds = parse_path_data("M0 0 L 1 1 2 2 3 3")
        assert len(cmds) == 4


class TestSmoothCurves:
    def test_s_reflects_previous_cubic_control(self):
        cmds = parse_path_data("M 0 0 C 0 10 10 10 10 0 S 20 -10 20 0")
        assert pts(cmds[2])[0] == (10, -10)
        assert pts(cmds[2])[1:] == [(20, -10), (20, 0)]

    def test_s_without_previous_cubic_uses_current_point(self):
        cmds = parse_path_data("M 5 5 S 10 10 15 5")
        assert pts(cmds[1])[0] == (5, 5)

    def test_t_reflects_previous_quad_control(self):
        cmds = parse_path_data("M 0 0 Q 5 10 10 0 T 20 0")
        assert pts(cmds[2]) == [(15, -10), (20, 0)]

    def test_t_without_previous_quad_uses_current_point(self):
        cmds = parse_path_data("M 0 0 L 10 0 T 20 0")
        assert pts(cmds[2])[0] == (10, 0)


class TestArcDegradation:
    def test_arc_becomes_line_to_endpoint(self):
        cmds = parse_path_data("M 0 0 A 5 5 0 0 1 10 0")
        assert cmds[1].type == CommandType.LINE_TO
        assert pts(cmds[1]) == [(10, 0)]

    def test_relative_arc(self):
        cmds = parse_path_data("M 10 10 a 5 5 0 1 0 10 10")
        assert pts(cmds[1]) == [(20, 20)]


class TestMalformedInput:
    def test_number_before_any_command(self):
        with pytest.raises(ParseError):
            parse_path_data("10 10 L 20 20")

    def test_incomplete_parameter_group(self):
        with pytest.raises(ParseError):
            parse_path_data("M 0 0 C 1 2 3 4")

    def test_missing_parameters(self):
        with pytest.raises(ParseError):
            parse_path_data("M 0 0 L")

    @pytest.mark.parametrize("d", ["M 1e999 0", "M 0 0 L 5 -1e400"])
    def test_overflowing_number_rejected(self, d):
        with pytest.raises(ParseError):
            parse_path_data(d)

    def test_parse_error_is_value_error(self):
        with pytest.raises(ValueError):
            parse_path_data("M 0 0 L 1 #")


class TestRoundTrip:
    @pytest.mark.parametrize(
        "d",
        [
            "M 0 0 L 10 0 L 10 10 Z",
            "M 1.5 -2.25 C 3 4 5 6 7 8 Q 9 10 11 12 Z",
            "M 0 0 L 0.1 0.2 M 100 200 Q 1e-3 5 6 7",
        ],
    )
    def test_reparse_is_identical(self, d):
        cmds = parse_path_data(d)
        assert parse_path_data(commands_to_path_string(cmds)) == cmds

    def test_serializer_format(self):
        cmds = [PathCommand.move_to(0, 0), PathCommand.line_to(10, 2.5), PathCommand.close()]
        assert commands_to_path_string(cmds) == "M 0 0 L 10 2.5 Z"
