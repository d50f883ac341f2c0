"""Stuff related to parser configuration."""

from pydantic import BaseModel, ConfigDict, Field
from typing import TypeAlias, Dict

#: General JSON type
JSON: TypeAlias = dict[str, "JSON"] | list["JSON"] | str | int | float | bool | None

#: Class names written by GEF based editors, mapped to our type identifiers.
GEF_TRANSLATIONS: Dict[str, str] = {
    "org.tigris.gef.presentation.FigGroup": "group",
    "org.tigris.gef.presentation.FigText": "text",
    "org.tigris.gef.presentation.FigLine": "line",
    "org.tigris.gef.presentation.FigPoly": "polygon",
    "org.tigris.gef.presentation.FigRect": "rectangle",
    "org.tigris.gef.presentation.FigRRect": "rounded_rectangle",
    "org.tigris.gef.presentation.FigCircle": "ellipse",
    "org.tigris.gef.presentation.FigEdgeLine": "edge",
    "org.tigris.gef.presentation.FigEdgePoly": "edge",
    "org.tigris.gef.presentation.FigEdgeRectiline": "edge",
}


class Configuration(BaseModel):
    model_config = ConfigDict(extra="forbid", validate_assignment=True)
    #: Name of the document root element.
    root_element: str = "pgml"
    #: Attribute carrying the type hint (type identifier and legacy group geometry).
    type_hint_attribute: str = "description"
    #: Type name translations applied to every type hint before lookup.
    translations: Dict[str, str] = Field(default_factory=lambda: dict(GEF_TRANSLATIONS))
    #: Additional colour names, value is anything the colour resolver accepts (``#rrggbb``).
    colors: Dict[str, str] = {}
    #: Colour used when ``strokecolor`` cannot be resolved.
    default_stroke_color: str = "blue"
    #: Colour used when ``fillcolor`` cannot be resolved.
    default_fill_color: str = "white"
    #: Ellipse radius used when ``rx`` or ``ry`` is missing.
    ellipse_radius: int = 10
    #: Size of the blocks fed to the XML reader.
    chunk_size: int = Field(default=16384, gt=0)
