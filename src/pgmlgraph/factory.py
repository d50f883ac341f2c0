"""
Dispatch factory for the built-in PGML vocabulary.

For each opened element the factory first looks at the type hint. A hinted
type that implements ``HandlerFactory`` handles the element itself. Otherwise
the element name selects one of the built-in rules. A rule either returns the
handler for the element's content, returns ``None`` when the element is fully
processed, or declines (``UNHANDLED``) when the hinted instance does not fit,
in which case the element is treated as unrecognized.
"""

import logging
from typing import Any, Callable, Dict, List, Optional, TYPE_CHECKING
from pgmlgraph.attributes import Attributes, get_value, parse_int, split_type_hint, to_int
from pgmlgraph.errors import MalformedDocumentError, UnknownTypeError
from pgmlgraph.handlers import (
    BaseHandler,
    EdgeHandler,
    GroupHandler,
    HandlerFactory,
    LineHandler,
    PolygonHandler,
    PrivateHandler,
    TextHandler,
)
from pgmlgraph.model import Container, Edge, Ellipse, Group, Line, Polygon, Rectangle, RoundedRectangle, Shape, Text

if TYPE_CHECKING:
    from pgmlgraph.parser import StackParser

log = logging.getLogger(__name__)

#: Returned by a rule that cannot use the hinted instance.
UNHANDLED: Any = object()

Rule = Callable[[Any, Attributes, Any, List[str]], Any]


class BuiltinHandlerFactory:
    def __init__(self, parser: "StackParser") -> None:
        self.parser = parser
        self.rules: Dict[str, Rule] = {
            "group": self.group,
            "text": self.text,
            "path": self.path,
            "line": self.path,
            "private": self.private,
            "rectangle": self.rectangle,
            "ellipse": self.ellipse,
        }

    def get_handler(
        self, stack: "StackParser", container: Any, name: str, attributes: Attributes
    ) -> Optional[BaseHandler]:
        """Decide how element is handled.

        :param stack: parser receiving the returned handler
        :param container: object the element's shape is added to, normally the
            handler of the enclosing element
        :param name: element name
        :param attributes: element attributes
        :return: handler for element content, or ``None`` if element needs no
            further processing
        """
        tokens: List[str] = []
        instance = None
        hint = get_value(attributes, self.parser.config.type_hint_attribute)
        if hint is not None:
            tokens = split_type_hint(hint)
            if tokens:
                instance = self.create_instance(tokens[0], hint)
            else:
                log.warning("Empty type hint %r on %s", hint, name)
            if isinstance(instance, HandlerFactory):
                return instance.get_handler(stack, container, name, attributes)

        rule = self.rules.get(name)
        if rule is not None:
            result = rule(container, attributes, instance, tokens)
            if result is not UNHANDLED:
                return result

        log.info("Unrecognized element %s", name)
        if instance is not None:
            if isinstance(instance, Shape):
                self.parser.set_attrs(instance, attributes)
            self.attach(container, instance)
        return None

    def create_instance(self, type_name: str, hint: str) -> Any:
        type_id = self.parser.translate_type(type_name)
        try:
            return self.parser.types.create(type_id)
        except UnknownTypeError:
            log.error("Type hint %s does not specify an available type", hint)
            return None

    def attach(self, container: Any, shape: Any) -> None:
        if isinstance(container, Container):
            container.add_object(shape)
        else:
            log.warning("Cannot add %s to %s", type(shape).__name__, type(container).__name__)

    def group(self, container: Any, attributes: Attributes, instance: Any, tokens: List[str]) -> Any:
        if isinstance(instance, Group):
            self.attach(container, instance)
            self.parser.set_attrs(instance, attributes)
            geometry = tokens[1:]
            if geometry:
                if len(geometry) < 4:
                    raise MalformedDocumentError(f"Group geometry {' '.join(geometry)} needs four values")
                instance.set_bounds(*[to_int(value, "group geometry") for value in geometry[:4]])
            derive_bounds = not geometry and get_value(attributes, "x") is None
            return GroupHandler(self.parser, instance, derive_bounds)
        if isinstance(instance, Edge):
            self.parser.set_attrs(instance, attributes)
            self.attach(container, instance)
            return EdgeHandler(self.parser, instance)
        if instance is not None:
            log.warning("Group element with inappropriate instance %s", type(instance).__name__)
        return UNHANDLED

    def text(self, container: Any, attributes: Attributes, instance: Any, tokens: List[str]) -> Any:
        if instance is None:
            instance = Text(width=100, height=100)
        if not isinstance(instance, Text):
            log.warning("Text element with inappropriate instance %s", type(instance).__name__)
            return UNHANDLED
        self.parser.set_attrs(instance, attributes)
        self.attach(container, instance)
        font = get_value(attributes, "font")
        if font is not None:
            instance.font_family = font
        font_size = parse_int(attributes, "textsize")
        if font_size is not None:
            instance.font_size = font_size
        return TextHandler(self.parser, instance)

    def path(self, container: Any, attributes: Attributes, instance: Any, tokens: List[str]) -> Any:
        if instance is None:
            instance = Polygon()
        if isinstance(instance, Line):
            self.parser.set_attrs(instance, attributes)
            self.attach(container, instance)
            return LineHandler(self.parser, instance)
        if isinstance(instance, Polygon):
            self.parser.set_attrs(instance, attributes)
            self.attach(container, instance)
            return PolygonHandler(self.parser, instance)
        log.warning("Path element with inappropriate instance %s", type(instance).__name__)
        return UNHANDLED

    def private(self, container: Any, attributes: Attributes, instance: Any, tokens: List[str]) -> Any:
        if instance is not None:
            log.warning("Private element unexpectedly generated instance %s", type(instance).__name__)
        if isinstance(container, Container):
            return PrivateHandler(self.parser, container)
        log.warning("Private element with inappropriate container %s", type(container).__name__)
        return UNHANDLED

    def rectangle(self, container: Any, attributes: Attributes, instance: Any, tokens: List[str]) -> Any:
        rounding = parse_int(attributes, "rounding", -1)
        if instance is None:
            if rounding >= 0:
                instance = RoundedRectangle(width=80, height=80)
            else:
                instance = Rectangle(width=80, height=80)
        if isinstance(instance, RoundedRectangle) and rounding >= 0:
            instance.corner_radius = rounding
        if not isinstance(instance, Shape):
            return UNHANDLED
        self.parser.set_attrs(instance, attributes)
        self.attach(container, instance)
        return None

    def ellipse(self, container: Any, attributes: Attributes, instance: Any, tokens: List[str]) -> Any:
        if instance is None:
            instance = Ellipse(width=50, height=50)
        if not isinstance(instance, Ellipse):
            log.warning("Ellipse element with inappropriate instance %s", type(instance).__name__)
            return UNHANDLED
        self.parser.set_attrs(instance, attributes)
        radius = self.parser.config.ellipse_radius
        rx = parse_int(attributes, "rx", radius)
        ry = parse_int(attributes, "ry", radius)
        instance.set_bounds(instance.x - rx, instance.y - ry, rx * 2, ry * 2)
        self.attach(container, instance)
        return None
