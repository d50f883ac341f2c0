"""
Mapping of element attributes onto shapes.

Empty attribute values are treated as missing. Numeric values that are present
but not integers make the document malformed; they are never defaulted.
"""

import re
from typing import List, Mapping, Optional
from pgmlgraph.colors import ColorResolver, Color, BLUE, WHITE
from pgmlgraph.errors import MalformedDocumentError
from pgmlgraph.model import Shape

Attributes = Mapping[str, str]

TYPE_HINT_SEPARATORS = re.compile(r"[,;\[\] ]+")
INTEGER_RE = re.compile(r"[+-]?[0-9]+")


def get_value(attributes: Attributes, key: str) -> Optional[str]:
    value = attributes.get(key)
    if value is None or value == "":
        return None
    return value


def to_int(value: str, key: str) -> int:
    if INTEGER_RE.fullmatch(value) is None:
        raise MalformedDocumentError(f"Attribute {key}={value!r} is not an integer")
    return int(value)


def parse_int(attributes: Attributes, key: str, default: Optional[int] = None) -> Optional[int]:
    value = get_value(attributes, key)
    if value is None:
        return default
    return to_int(value, key)


def split_type_hint(value: str) -> List[str]:
    """Split type hint into tokens.

    Any run of ``,``, ``;``, ``[``, ``]`` and space separates tokens::

        >>> split_type_hint("org.tigris.gef.presentation.FigGroup[10, 20, 100, 50]")
        ['org.tigris.gef.presentation.FigGroup', '10', '20', '100', '50']
    """
    return [token for token in TYPE_HINT_SEPARATORS.split(value) if token]


def set_common_attrs(
    shape: Shape,
    attributes: Attributes,
    colors: ColorResolver,
    stroke_default: Color = BLUE,
    fill_default: Color = WHITE,
) -> None:
    """Set geometry and style of a shape from element attributes.

    Geometry is only applied when ``x`` is given; missing ``y``, ``width`` and
    ``height`` then default to 0, 20 and 20.
    """
    x = parse_int(attributes, "x")
    if x is not None:
        shape.set_bounds(
            x,
            parse_int(attributes, "y", 0),
            parse_int(attributes, "width", 20),
            parse_int(attributes, "height", 20),
        )

    line_width = parse_int(attributes, "stroke")
    if line_width is not None:
        shape.line_width = line_width

    stroke_color = get_value(attributes, "strokecolor")
    if stroke_color is not None:
        shape.line_color = colors.resolve(stroke_color, stroke_default)

    fill = get_value(attributes, "fill")
    if fill is not None:
        shape.filled = fill == "1" or fill.startswith("t")

    fill_color = get_value(attributes, "fillcolor")
    if fill_color is not None:
        shape.fill_color = colors.resolve(fill_color, fill_default)

    dash_array = get_value(attributes, "dasharray")
    if dash_array is not None and dash_array != "solid":
        shape.dashed = True

    context = get_value(attributes, "context")
    if context is not None:
        shape.context = context

    shown = parse_int(attributes, "shown")
    if shown is not None:
        shape.visible = shown != 0

    single = get_value(attributes, "single")
    if single is not None:
        shape.single = single
