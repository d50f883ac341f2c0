"""
Type registry: maps type identifiers to shape constructors.

Type hints in documents name the variant to construct. Names are translated by
the parser first (so class names written by older editors still work), then
looked up here. Collaborators register their own variants, which may also take
over the dispatch of their element (see ``pgmlgraph.handlers.HandlerFactory``).
"""

import logging
from typing import Any, Callable, Dict, Iterator, Optional
from pgmlgraph.errors import ShapeConstructionError, UnknownTypeError
from pgmlgraph.model import Edge, Ellipse, Group, Line, Polygon, Rectangle, RoundedRectangle, Text

log = logging.getLogger(__name__)

ShapeConstructor = Callable[[], Any]

BUILTIN_TYPES: Dict[str, ShapeConstructor] = {
    "group": Group,
    "text": Text,
    # There is no sensible empty line, start with a short diagonal one.
    "line": lambda: Line(x1=0, y1=0, x2=10, y2=10, width=10, height=10),
    "polygon": Polygon,
    "rectangle": Rectangle,
    "rounded_rectangle": RoundedRectangle,
    "ellipse": Ellipse,
    "edge": Edge,
}


class TypeRegistry:
    def __init__(self, constructors: Optional[Dict[str, ShapeConstructor]] = None) -> None:
        self._constructors: Dict[str, ShapeConstructor] = dict(BUILTIN_TYPES)
        if constructors:
            self._constructors.update(constructors)

    def register(self, type_id: str, constructor: ShapeConstructor) -> None:
        if type_id in self._constructors:
            log.debug("Replacing constructor for type %s", type_id)
        self._constructors[type_id] = constructor

    def create(self, type_id: str) -> Any:
        """Construct new instance of given type.

        :param type_id: canonical type identifier
        :return: new instance
        :raises UnknownTypeError: if type is not registered
        :raises ShapeConstructionError: if constructor fails
        """
        try:
            constructor = self._constructors[type_id]
        except KeyError:
            raise UnknownTypeError(type_id) from None
        try:
            return constructor()
        except Exception as error:
            raise ShapeConstructionError(f"Cannot construct {type_id}: {error}") from error

    def __contains__(self, type_id: object) -> bool:
        return type_id in self._constructors

    def __iter__(self) -> Iterator[str]:
        return iter(self._constructors)
