"""Colour names as they appear in ``strokecolor`` and ``fillcolor`` attributes.

Files written by GEF based editors use AWT colour names (``lightGray``), but
``#rrggbb``, ``0xrrggbb``, plain decimal RGB integers and ``r g b`` triples are
seen too, as are signed ARGB integers written by AWT.
"""

import logging
import re
from typing import Dict, Mapping, NamedTuple, Optional

log = logging.getLogger(__name__)


class Color(NamedTuple):
    red: int
    green: int
    blue: int

    @property
    def hex(self) -> str:
        return f"#{self.red:02x}{self.green:02x}{self.blue:02x}"

    @classmethod
    def from_rgb(cls, rgb: int) -> "Color":
        return cls((rgb >> 16) & 0xFF, (rgb >> 8) & 0xFF, rgb & 0xFF)


BLACK = Color(0, 0, 0)
WHITE = Color(255, 255, 255)
BLUE = Color(0, 0, 255)

#: AWT colour constants, keys are lower case.
NAMED_COLORS: Dict[str, Color] = {
    "black": BLACK,
    "blue": BLUE,
    "cyan": Color(0, 255, 255),
    "darkgray": Color(64, 64, 64),
    "darkgrey": Color(64, 64, 64),
    "gray": Color(128, 128, 128),
    "grey": Color(128, 128, 128),
    "green": Color(0, 255, 0),
    "lightgray": Color(192, 192, 192),
    "lightgrey": Color(192, 192, 192),
    "magenta": Color(255, 0, 255),
    "orange": Color(255, 200, 0),
    "pink": Color(255, 175, 175),
    "red": Color(255, 0, 0),
    "white": WHITE,
    "yellow": Color(255, 255, 0),
}

TRIPLE_RE = re.compile(r"^\s*(\d{1,3})[\s,;]+(\d{1,3})[\s,;]+(\d{1,3})\s*$")


def parse_color(value: str) -> Optional[Color]:
    """Parse a colour that is not a name.

    :param value: attribute value
    :return: colour, or ``None`` if value is not understood
    """
    value = value.strip()
    match = TRIPLE_RE.match(value)
    if match is not None:
        parts = [int(part) for part in match.groups()]
        if all(part <= 255 for part in parts):
            return Color(*parts)
        return None
    try:
        if value.startswith("#"):
            rgb = int(value[1:], 16)
        elif value.lower().startswith("0x"):
            rgb = int(value[2:], 16)
        else:
            rgb = int(value)
    except ValueError:
        return None
    if -0x80000000 <= rgb < 0:
        # Signed ARGB value as written by AWT, alpha is dropped.
        rgb &= 0xFFFFFF
    if rgb < 0 or rgb > 0xFFFFFF:
        return None
    return Color.from_rgb(rgb)


class ColorResolver:
    """Resolves colour descriptions, remembering what was already resolved.

    One resolver belongs to one parser; extra names come from configuration.
    """

    def __init__(self, extra: Optional[Mapping[str, str]] = None) -> None:
        self.names: Dict[str, Color] = dict(NAMED_COLORS)
        for name, value in (extra or {}).items():
            color = parse_color(value)
            if color is None:
                raise ValueError(f"Cannot parse colour {name}={value}")
            self.names[name.lower()] = color
        self.used_colors: Dict[str, Color] = {}

    def resolve(self, value: str, default: Color) -> Color:
        if value in self.used_colors:
            return self.used_colors[value]
        color = self.names.get(value.lower())
        if color is None:
            color = parse_color(value)
        if color is None:
            log.debug("Unknown colour %s, using %s", value, default.hex)
            return default
        self.used_colors[value] = color
        return color

    def reset(self) -> None:
        self.used_colors.clear()
