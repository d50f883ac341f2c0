"""
Stack based PGML parser.

``StackParser`` reads a PGML document and rebuilds the diagram it describes.
Every open element has a handler on the parser's stack and only the top handler
receives events, so nested markup always reaches the object being built for
its enclosing element.

Shapes in a PGML file may be owned by objects of an external model; the file
refers to them by id (``href``). The caller supplies the id to object mapping
when creating the parser and it is shared by every parse::

    parser = StackParser(owners={"model-7": element})
    diagram = parser.parse("class_diagram.pgml")
"""

import logging
import threading
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union
from pgmlgraph.attributes import Attributes, get_value, set_common_attrs
from pgmlgraph.colors import BLUE, WHITE, ColorResolver
from pgmlgraph.config import Configuration
from pgmlgraph.errors import MalformedDocumentError, OwnerResolutionError, ParserStateError
from pgmlgraph.events import Characters, EndElement, Event, Source, StartElement, read_events
from pgmlgraph.factory import BuiltinHandlerFactory
from pgmlgraph.handlers import BaseHandler, IgnoreHandler, InitialHandler
from pgmlgraph.model import Diagram, Shape
from pgmlgraph.registry import ShapeConstructor, TypeRegistry

log = logging.getLogger(__name__)


class StackParser:
    def __init__(
        self,
        owners: Optional[Mapping[str, Any]] = None,
        config: Optional[Configuration] = None,
        types: Optional[TypeRegistry] = None,
    ) -> None:
        """
        :param owners: external model objects by id, read only for the parser
        :param config: parser configuration, default if not given
        :param types: type registry, built-in types if not given
        """
        self.config = config if config is not None else Configuration()
        self.owners: Mapping[str, Any] = MappingProxyType(owners if owners is not None else {})
        self.types = types if types is not None else TypeRegistry()
        self.translations = dict(self.config.translations)
        self.colors = ColorResolver(self.config.colors)
        self.stroke_default = self.colors.resolve(self.config.default_stroke_color, BLUE)
        self.fill_default = self.colors.resolve(self.config.default_fill_color, WHITE)
        self.factory = BuiltinHandlerFactory(self)
        self._lock = threading.Lock()
        self._parsing_thread: Optional[int] = None
        self._stack: List[Tuple[Optional[str], BaseHandler]] = []
        self._shapes: Dict[str, Any] = {}
        self._diagram: Optional[Diagram] = None

    def parse(self, source: Union[Source, Iterable[Event]], initial_handler: Optional[BaseHandler] = None) -> Diagram:
        """Read one document.

        :param source: path, document bytes, binary stream, or iterable of events
        :param initial_handler: handler receiving the root element, it has to call
            :meth:`set_diagram`; :class:`InitialHandler` if not given
        :return: diagram described by the document
        :raises MalformedDocumentError: document is not well formed
        :raises OwnerResolutionError: ``href`` without matching owner
        """
        if self._parsing_thread == threading.get_ident():
            raise ParserStateError("Parser is already reading a document")
        with self._lock:
            self._parsing_thread = threading.get_ident()
            try:
                return self._parse(source, initial_handler)
            finally:
                self._parsing_thread = None

    def _parse(self, source: Union[Source, Iterable[Event]], initial_handler: Optional[BaseHandler]) -> Diagram:
        try:
            self._reset()
            if isinstance(source, (str, Path, bytes)) or hasattr(source, "read"):
                events = read_events(source, self.config.chunk_size)
            else:
                events = source
            self.push_handler(initial_handler if initial_handler is not None else InitialHandler(self))
            for event in events:
                self._dispatch(event)
            if self.depth != 1:
                raise MalformedDocumentError(f"Document ended with {self.depth - 1} open elements")
            self.pop_handler()
            if self._diagram is None:
                raise ParserStateError("Initial handler did not set a diagram")
            log.debug("Read diagram %s with %d shapes", self._diagram.name, len(self._diagram.shapes))
            return self._diagram
        except Exception:
            self._diagram = None
            self._stack.clear()
            raise

    def read_diagram(self, stream: Source, close_stream: bool = False) -> Diagram:
        """Read diagram from path or stream, closing the stream afterwards if asked."""
        try:
            return self.parse(stream)
        finally:
            if close_stream and hasattr(stream, "close"):
                stream.close()

    def _reset(self) -> None:
        self._stack = []
        self._shapes = {}
        self._diagram = None
        self.colors.reset()

    def _dispatch(self, event: Event) -> None:
        if isinstance(event, StartElement):
            if not self._stack:
                raise MalformedDocumentError(f"Element {event.name} after end of document")
            handler = self.current_handler.start_element(event.name, event.attributes)
            if handler is None:
                handler = IgnoreHandler(self)
            self.push_handler(handler, event.name)
        elif isinstance(event, Characters):
            if self._stack:
                self.current_handler.characters(event.text)
        elif isinstance(event, EndElement):
            if self.depth <= 1:
                raise MalformedDocumentError(f"Unexpected end of element {event.name}")
            name, handler = self._stack[-1]
            if name != event.name:
                raise MalformedDocumentError(f"Element {name} closed by {event.name}")
            handler.end_element(event.name)
            self.pop_handler()
        else:
            raise TypeError(f"Unknown event {event!r}")

    # Handler stack

    @property
    def depth(self) -> int:
        return len(self._stack)

    @property
    def current_handler(self) -> BaseHandler:
        return self._stack[-1][1]

    def push_handler(self, handler: BaseHandler, element: Optional[str] = None) -> None:
        self._stack.append((element, handler))

    def pop_handler(self) -> BaseHandler:
        if not self._stack:
            raise ParserStateError("Handler stack is empty")
        return self._stack.pop()[1]

    # Results and registries

    @property
    def diagram(self) -> Optional[Diagram]:
        return self._diagram

    def set_diagram(self, diagram: Diagram) -> None:
        if self._diagram is not None:
            raise ParserStateError("Diagram was already set for this document")
        self._diagram = diagram

    def find_owner(self, owner_id: str) -> Any:
        return self.owners.get(owner_id)

    def add_translation(self, alias: str, type_id: str) -> None:
        self.translations[alias] = type_id

    def translate_type(self, name: str) -> str:
        return self.translations.get(name, name)

    def register_type(self, type_id: str, constructor: ShapeConstructor) -> None:
        self.types.register(type_id, constructor)

    def register_shape(self, name: str, shape: Any) -> None:
        self._shapes[name] = shape

    def find_shape(self, name: str) -> Any:
        return self._shapes.get(name)

    @property
    def shapes(self) -> Mapping[str, Any]:
        """Shapes registered by name in the current or last parse."""
        return MappingProxyType(self._shapes)

    # Element dispatch

    def get_handler(self, stack: "StackParser", container: Any, name: str, attributes: Attributes) -> Optional[BaseHandler]:
        return self.factory.get_handler(stack, container, name, attributes)

    def set_common_attrs(self, shape: Shape, attributes: Attributes) -> None:
        set_common_attrs(shape, attributes, self.colors, self.stroke_default, self.fill_default)

    def set_attrs(self, shape: Shape, attributes: Attributes) -> None:
        """Common attributes plus registration under ``name`` and owner from ``href``.

        :raises OwnerResolutionError: ``href`` has no matching owner
        """
        name = get_value(attributes, "name")
        if name is not None:
            shape.name = name
            self.register_shape(name, shape)

        self.set_common_attrs(shape, attributes)

        owner_id = get_value(attributes, "href")
        if owner_id is not None:
            owner = self.find_owner(owner_id)
            if owner is None:
                raise OwnerResolutionError(owner_id)
            shape.owner = owner
