"""
Element handlers.

A handler owns exactly one element: the parser pushes it when the element
opens, forwards it every event nested inside that element, and calls
``end_element`` and pops it when the element closes. When a nested element
opens, ``start_element`` returns the handler for it, or ``None`` when the
element needs no further processing.
"""

import logging
import re
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Mapping, Optional, Protocol, Tuple, runtime_checkable, TYPE_CHECKING
from pgmlgraph.attributes import Attributes, get_value, to_int
from pgmlgraph.errors import MalformedDocumentError
from pgmlgraph.model import Diagram, Edge, Group, Line, Polygon, Text

if TYPE_CHECKING:
    from pgmlgraph.parser import StackParser

log = logging.getLogger(__name__)


class BaseHandler:
    def __init__(self, parser: "StackParser") -> None:
        self.parser = parser

    def start_element(self, name: str, attributes: Attributes) -> Optional["BaseHandler"]:
        return None

    def characters(self, text: str) -> None:
        pass

    def end_element(self, name: str) -> None:
        pass


@runtime_checkable
class HandlerFactory(Protocol):
    """Decides how an opened element is handled.

    The parser implements it for the built-in elements. A shape type
    implementing it takes over the dispatch of every element that names it in
    its type hint, including all of the element's nested content.
    """

    def get_handler(
        self, stack: "StackParser", container: Any, name: str, attributes: Attributes
    ) -> Optional[BaseHandler]: ...


@runtime_checkable
class PrivateDataConsumer(Protocol):
    def set_private_data(self, data: Mapping[str, str]) -> None: ...


class IgnoreHandler(BaseHandler):
    """Consumes an element without interpreting any of its content."""


class ContainerHandler(BaseHandler, ABC):
    """Routes nested elements to the dispatch factory, with itself as container."""

    def start_element(self, name: str, attributes: Attributes) -> Optional[BaseHandler]:
        return self.parser.get_handler(self.parser, self, name, attributes)

    @abstractmethod
    def add_object(self, obj: Any) -> None:
        """Add shape created for a nested element."""

    def set_private_data(self, data: Mapping[str, str]) -> None:
        pass


class InitialHandler(BaseHandler):
    """Handles the document root and hands the diagram to the parser."""

    def start_element(self, name: str, attributes: Attributes) -> Optional[BaseHandler]:
        config = self.parser.config
        if name != config.root_element:
            raise MalformedDocumentError(f"Expected {config.root_element} root element, got {name}")
        diagram = Diagram()
        extra = dict(attributes)
        diagram.name = extra.pop("name", "")
        description = extra.pop(config.type_hint_attribute, None)
        if description:
            diagram.diagram_type = description.split("|")[0]
        scale = extra.pop("scale", None)
        if scale:
            try:
                diagram.scale = float(scale)
            except ValueError:
                raise MalformedDocumentError(f"Attribute scale={scale!r} is not a number") from None
        diagram.attributes = extra
        log.debug("Reading diagram %s (%s)", diagram.name, diagram.diagram_type)
        self.parser.set_diagram(diagram)
        return DiagramHandler(self.parser, diagram)


class DiagramHandler(ContainerHandler):
    def __init__(self, parser: "StackParser", diagram: Diagram) -> None:
        super().__init__(parser)
        self.diagram = diagram

    def add_object(self, obj: Any) -> None:
        self.diagram.add_object(obj)

    def set_private_data(self, data: Mapping[str, str]) -> None:
        self.diagram.private.update(data)


class GroupHandler(ContainerHandler):
    def __init__(self, parser: "StackParser", group: Group, derive_bounds: bool = False) -> None:
        """
        :param group: group receiving nested shapes
        :param derive_bounds: compute bounds from children when the group closes,
            used when the element carries no geometry of its own
        """
        super().__init__(parser)
        self.group = group
        self.derive_bounds = derive_bounds

    def add_object(self, obj: Any) -> None:
        self.group.add_object(obj)

    def set_private_data(self, data: Mapping[str, str]) -> None:
        self.group.private.update(data)

    def end_element(self, name: str) -> None:
        if self.derive_bounds:
            self.group.calc_bounds()


class EdgeHandler(ContainerHandler):
    #: Private keys naming shapes an edge connects, mapped to edge fields.
    connections = {
        "sourcePortFig": "source_port",
        "destPortFig": "dest_port",
        "sourceFigNode": "source_node",
        "destFigNode": "dest_node",
    }

    def __init__(self, parser: "StackParser", edge: Edge) -> None:
        super().__init__(parser)
        self.edge = edge

    def add_object(self, obj: Any) -> None:
        if isinstance(obj, (Line, Polygon)) and self.edge.path is None:
            self.edge.path = obj
        else:
            log.warning("Edge %s cannot take %s", self.edge.name, type(obj).__name__)

    def set_private_data(self, data: Mapping[str, str]) -> None:
        for key, value in data.items():
            field = self.connections.get(key)
            if field is None:
                self.edge.private[key] = value
                continue
            shape = self.parser.find_shape(value)
            if shape is None:
                log.warning("Edge %s refers to unknown %s %s", self.edge.name, key, value)
            setattr(self.edge, field, shape)


class TextHandler(BaseHandler):
    def __init__(self, parser: "StackParser", text: Text) -> None:
        super().__init__(parser)
        self.text = text
        self.buffer: List[str] = []

    def characters(self, text: str) -> None:
        self.buffer.append(text)

    def end_element(self, name: str) -> None:
        self.text.text = "".join(self.buffer).strip("\r\n")


def read_point(name: str, attributes: Attributes) -> Tuple[int, int]:
    x = get_value(attributes, "x")
    y = get_value(attributes, "y")
    if x is None or y is None:
        raise MalformedDocumentError(f"Element {name} needs both x and y")
    return to_int(x, "x"), to_int(y, "y")


class LineHandler(BaseHandler):
    def __init__(self, parser: "StackParser", line: Line) -> None:
        super().__init__(parser)
        self.line = line

    def start_element(self, name: str, attributes: Attributes) -> Optional[BaseHandler]:
        if name == "moveto":
            self.line.set_start(*read_point(name, attributes))
        elif name == "lineto":
            self.line.set_end(*read_point(name, attributes))
        else:
            log.info("Unrecognized element %s in line", name)
        return None


class PolygonHandler(BaseHandler):
    def __init__(self, parser: "StackParser", polygon: Polygon) -> None:
        super().__init__(parser)
        self.polygon = polygon

    def start_element(self, name: str, attributes: Attributes) -> Optional[BaseHandler]:
        if name in ("moveto", "lineto"):
            self.polygon.add_point(*read_point(name, attributes))
        else:
            log.info("Unrecognized element %s in path", name)
        return None


PRIVATE_PAIR_RE = re.compile(r'(\w+)\s*=\s*"([^"]*)"')


def parse_private(text: str) -> Dict[str, str]:
    """Parse ``key="value"`` pairs of a ``private`` element."""
    return dict(PRIVATE_PAIR_RE.findall(text))


class PrivateHandler(BaseHandler):
    """Pass-through wrapper.

    Nested elements go to the enclosing container as if the wrapper was not
    there. Character data is read as ``key="value"`` pairs and given to the
    container when the wrapper closes.
    """

    def __init__(self, parser: "StackParser", container: Any) -> None:
        super().__init__(parser)
        self.container = container
        self.buffer: List[str] = []

    def start_element(self, name: str, attributes: Attributes) -> Optional[BaseHandler]:
        return self.parser.get_handler(self.parser, self.container, name, attributes)

    def characters(self, text: str) -> None:
        self.buffer.append(text)

    def end_element(self, name: str) -> None:
        data = parse_private("".join(self.buffer))
        if not data:
            return
        if isinstance(self.container, PrivateDataConsumer):
            self.container.set_private_data(data)
        else:
            log.debug("Dropping private data %s", data)
