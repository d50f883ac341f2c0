"""Traversal of the shape tree of a parsed diagram.

Groups are walked into; an edge's path shape is reported below its edge.
"""

from typing import Callable, Iterator, List, Optional, Tuple
from pgmlgraph.model import Diagram, Edge, Group, Line, Polygon, RoundedRectangle, Shape, Text


def iter_shapes(shapes: List[Shape], depth: int = 0) -> Iterator[Tuple[int, Shape]]:
    """Depth-first iteration yielding ``(depth, shape)`` pairs."""
    for shape in shapes:
        yield depth, shape
        if isinstance(shape, Group):
            yield from iter_shapes(shape.children, depth + 1)
        elif isinstance(shape, Edge) and shape.path is not None:
            yield from iter_shapes([shape.path], depth + 1)


def find_shape(diagram: Diagram, predicate: Callable[[Shape], bool]) -> Optional[Shape]:
    """Find first shape matching predicate.

    Example:
        >>> find_shape(diagram, lambda shape: shape.name == "Fig3")
    """
    for _, shape in iter_shapes(diagram.shapes):
        if predicate(shape):
            return shape
    return None


def count_shapes(diagram: Diagram) -> int:
    return sum(1 for _ in iter_shapes(diagram.shapes))


def describe_shape(shape: Shape) -> str:
    x, y, width, height = shape.bounds
    parts = [shape.kind]
    if shape.name:
        parts.append(shape.name)
    parts.append(f"({x}, {y}, {width}, {height})")
    if isinstance(shape, RoundedRectangle):
        parts.append(f"radius={shape.corner_radius}")
    if isinstance(shape, Text) and shape.text:
        parts.append(repr(shape.text))
    if isinstance(shape, Line):
        parts.append(f"({shape.x1}, {shape.y1}) -> ({shape.x2}, {shape.y2})")
    if isinstance(shape, Polygon):
        parts.append(f"points={len(shape.points)}")
    if isinstance(shape, Edge):
        source = shape.source_node.name if shape.source_node is not None else "?"
        dest = shape.dest_node.name if shape.dest_node is not None else "?"
        parts.append(f"{source} -> {dest}")
    if not shape.visible:
        parts.append("hidden")
    if shape.owner is not None:
        parts.append(f"owner={shape.owner}")
    return " ".join(parts)


def format_tree(diagram: Diagram, indent: str = "  ") -> str:
    lines = [f"Diagram {diagram.name} ({diagram.diagram_type or 'untyped'})"]
    for depth, shape in iter_shapes(diagram.shapes):
        lines.append(indent * (depth + 1) + describe_shape(shape))
    return "\n".join(lines)
