#!/usr/bin/env python3
"""
Color conversion helpers for export.

Colors are authored as hex strings (#rgb / #rrggbb, '#' optional) or a small set of
named colors, and exported as normalized [r, g, b, a] with alpha fixed at 1.
"""

from typing import Dict, List, Tuple

NAMED_COLORS: Dict[str, str] = {
    "black": "#000000",
    "white": "#ffffff",
    "red": "#ff0000",
    "green": "#00ff00",
    "blue": "#0000ff",
    "yellow": "#ffff00",
    "cyan": "#00ffff",
    "magenta": "#ff00ff",
}


def normalize_hex(color: str) -> str:
    """Resolve named colors and shorthand into a bare 6-digit hex string."""
    value = NAMED_COLORS.get(color.strip().lower(), color.strip())
    value = value.lstrip("#")
    if len(value) == 3:
        value = "".join(c + c for c in value)
    if len(value) != 6:
        raise ValueError(f"Unsupported color value: {color!r}")
    try:
        int(value, 16)
    except ValueError:
        raise ValueError(f"Unsupported color value: {color!r}") from None
    return value.lower()


def hex_to_rgb(color: str) -> Tuple[int, int, int]:
    """Convert hex or named color to an 8-bit RGB tuple."""
    value = normalize_hex(color)
    return tuple(int(value[i:i + 2], 16) for i in (0, 2, 4))


def hex_to_rgba(color: str) -> List[float]:
    """Convert hex or named color to [r, g, b, 1] with channels in [0, 1]."""
    r, g, b = hex_to_rgb(color)
    return [r / 255, g / 255, b / 255, 1]


__all__ = ["NAMED_COLORS", "normalize_hex", "hex_to_rgb", "hex_to_rgba"]
