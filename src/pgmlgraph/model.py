"""
Scene graph built from PGML documents.

Shapes only carry what the parser assigns: geometry, style, the registered name
and the owner in the external model. Drawing and editing are left to whoever
consumes the diagram.
"""

from typing import Any, Dict, List, Optional, Protocol, Tuple, runtime_checkable
from pydantic import BaseModel, Field
from pgmlgraph.colors import Color, BLACK, WHITE

Bounds = Tuple[int, int, int, int]


@runtime_checkable
class Container(Protocol):
    """Anything that accepts child shapes."""

    def add_object(self, obj: Any) -> None: ...


class Shape(BaseModel):
    x: int = 0
    y: int = 0
    width: int = 0
    height: int = 0
    line_width: int = 1
    line_color: Color = BLACK
    filled: bool = True
    fill_color: Color = WHITE
    dashed: bool = False
    visible: bool = True
    context: str = ""
    single: str = ""
    #: Name the shape was registered under, if any.
    name: Optional[str] = None
    #: Object from the external model this shape presents.
    owner: Optional[Any] = Field(default=None, repr=False)
    #: Key/value pairs from ``private`` elements.
    private: Dict[str, str] = {}

    @property
    def kind(self) -> str:
        return type(self).__name__

    @property
    def bounds(self) -> Bounds:
        return (self.x, self.y, self.width, self.height)

    def set_bounds(self, x: int, y: int, width: int, height: int) -> None:
        self.x = x
        self.y = y
        self.width = width
        self.height = height


def union_bounds(shapes: List[Shape]) -> Optional[Bounds]:
    """Smallest rectangle enclosing all given shapes."""
    if not shapes:
        return None
    left = min(shape.x for shape in shapes)
    top = min(shape.y for shape in shapes)
    right = max(shape.x + shape.width for shape in shapes)
    bottom = max(shape.y + shape.height for shape in shapes)
    return (left, top, right - left, bottom - top)


class Group(Shape):
    children: List[Shape] = Field(default=[], repr=False)

    def add_object(self, obj: Shape) -> None:
        self.children.append(obj)

    def calc_bounds(self) -> None:
        bounds = union_bounds(self.children)
        if bounds is not None:
            self.set_bounds(*bounds)


class Text(Shape):
    text: str = ""
    font_family: str = "dialog"
    font_size: int = 10


class Rectangle(Shape):
    pass


class RoundedRectangle(Rectangle):
    corner_radius: int = 16


class Ellipse(Shape):
    pass


class Polygon(Shape):
    points: List[Tuple[int, int]] = []

    def add_point(self, x: int, y: int) -> None:
        self.points.append((x, y))
        self.calc_bounds()

    def calc_bounds(self) -> None:
        xs = [point[0] for point in self.points]
        ys = [point[1] for point in self.points]
        self.set_bounds(min(xs), min(ys), max(xs) - min(xs), max(ys) - min(ys))


class Line(Shape):
    x1: int = 0
    y1: int = 0
    x2: int = 0
    y2: int = 0

    def set_start(self, x: int, y: int) -> None:
        self.x1 = x
        self.y1 = y
        self.calc_bounds()

    def set_end(self, x: int, y: int) -> None:
        self.x2 = x
        self.y2 = y
        self.calc_bounds()

    def calc_bounds(self) -> None:
        self.set_bounds(
            min(self.x1, self.x2),
            min(self.y1, self.y2),
            abs(self.x2 - self.x1),
            abs(self.y2 - self.y1),
        )


class Edge(Shape):
    #: Line or polygon drawn for this edge.
    path: Optional[Shape] = Field(default=None, repr=False)
    source_port: Optional[Shape] = Field(default=None, repr=False)
    dest_port: Optional[Shape] = Field(default=None, repr=False)
    source_node: Optional[Shape] = Field(default=None, repr=False)
    dest_node: Optional[Shape] = Field(default=None, repr=False)


class Diagram(BaseModel):
    """Root of a parsed document."""

    name: str = ""
    #: Type hint of the root element (first ``|`` separated part).
    diagram_type: Optional[str] = None
    scale: float = 1.0
    #: Root element attributes not mapped to other fields.
    attributes: Dict[str, str] = {}
    private: Dict[str, str] = {}
    shapes: List[Shape] = Field(default=[], repr=False)

    def add_object(self, obj: Shape) -> None:
        self.shapes.append(obj)
