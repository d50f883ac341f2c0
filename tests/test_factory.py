"""Tests for the dispatch factory - built-in element rules and type hints."""

import logging
import pytest
from pgmlgraph.errors import MalformedDocumentError, ShapeConstructionError
from pgmlgraph.handlers import (
    BaseHandler,
    EdgeHandler,
    GroupHandler,
    LineHandler,
    PolygonHandler,
    PrivateHandler,
    TextHandler,
)
from pgmlgraph.model import Edge, Ellipse, Group, Line, Polygon, Rectangle, RoundedRectangle, Shape, Text


class Collector:
    """Minimal container."""

    def __init__(self):
        self.objects = []

    def add_object(self, obj):
        self.objects.append(obj)


@pytest.fixture
def container():
    return Collector()


@pytest.fixture
def dispatch(parser, container):
    def _dispatch(element, /, **attributes):
        return parser.get_handler(parser, container, element, attributes)

    return _dispatch


class TestRectangle:
    def test_rounding(self, dispatch, container):
        assert dispatch("rectangle", rounding="5") is None
        shape = container.objects[0]
        assert isinstance(shape, RoundedRectangle)
        assert shape.corner_radius == 5

    def test_rounding_zero(self, dispatch, container):
        dispatch("rectangle", rounding="0")
        assert isinstance(container.objects[0], RoundedRectangle)
        assert container.objects[0].corner_radius == 0

    def test_no_rounding(self, dispatch, container):
        dispatch("rectangle")
        assert type(container.objects[0]) is Rectangle

    def test_empty_rounding(self, dispatch, container):
        dispatch("rectangle", rounding="")
        assert type(container.objects[0]) is Rectangle

    def test_negative_rounding(self, dispatch, container):
        dispatch("rectangle", rounding="-3")
        assert type(container.objects[0]) is Rectangle

    def test_bad_rounding(self, dispatch):
        with pytest.raises(MalformedDocumentError):
            dispatch("rectangle", rounding="round")

    def test_default_size(self, dispatch, container):
        dispatch("rectangle")
        assert container.objects[0].bounds == (0, 0, 80, 80)

    def test_hinted_rounded_rectangle(self, dispatch, container):
        dispatch("rectangle", description="rounded_rectangle", rounding="7")
        assert container.objects[0].corner_radius == 7


class TestEllipse:
    def test_radii(self, dispatch, container):
        assert dispatch("ellipse", x="100", y="50", rx="20", ry="10") is None
        ellipse = container.objects[0]
        assert isinstance(ellipse, Ellipse)
        assert ellipse.bounds == (80, 40, 40, 20)

    def test_default_radius(self, dispatch, container):
        dispatch("ellipse", x="100", y="50")
        assert container.objects[0].bounds == (90, 40, 20, 20)

    def test_configured_radius(self, parser, dispatch, container):
        parser.config.ellipse_radius = 5
        dispatch("ellipse", x="100", y="50", ry="")
        assert container.objects[0].bounds == (95, 45, 10, 10)

    def test_without_anchor(self, dispatch, container):
        dispatch("ellipse", rx="20", ry="10")
        assert container.objects[0].bounds == (-20, -10, 40, 20)


class TestGroup:
    def test_legacy_geometry_overrides_attributes(self, parser, dispatch, container):
        parser.add_translation("MyGroup", "group")
        handler = dispatch("group", description="MyGroup, 10, 20, 100, 50", x="1", y="2", width="3", height="4")
        assert isinstance(handler, GroupHandler)
        group = container.objects[0]
        assert isinstance(group, Group)
        assert group.bounds == (10, 20, 100, 50)

    def test_bracketed_geometry(self, dispatch, container):
        dispatch("group", description="org.tigris.gef.presentation.FigGroup[1;2;3;4]")
        assert container.objects[0].bounds == (1, 2, 3, 4)

    def test_short_geometry(self, dispatch):
        with pytest.raises(MalformedDocumentError, match="four values"):
            dispatch("group", description="group 1 2")

    def test_bad_geometry(self, dispatch):
        with pytest.raises(MalformedDocumentError):
            dispatch("group", description="group 1 2 3 x")

    def test_group_needs_hint(self, dispatch, container, caplog):
        with caplog.at_level(logging.INFO):
            assert dispatch("group", x="1") is None
        assert container.objects == []
        assert "Unrecognized element group" in caplog.text

    def test_edge(self, dispatch, container):
        handler = dispatch("group", description="edge", dasharray="solid")
        assert isinstance(handler, EdgeHandler)
        assert isinstance(container.objects[0], Edge)
        assert container.objects[0].dashed is False

    def test_inappropriate_instance(self, dispatch, container, caplog):
        with caplog.at_level(logging.INFO):
            assert dispatch("group", description="text") is None
        assert "inappropriate instance" in caplog.text
        # Falls back to the default behaviour for unrecognized elements.
        assert isinstance(container.objects[0], Text)


class TestText:
    def test_default_text(self, dispatch, container):
        handler = dispatch("text", font="Serif", textsize="14")
        assert isinstance(handler, TextHandler)
        text = container.objects[0]
        assert text.font_family == "Serif"
        assert text.font_size == 14

    def test_empty_font(self, dispatch, container):
        dispatch("text", font="", textsize="")
        assert container.objects[0].font_family == "dialog"
        assert container.objects[0].font_size == 10

    def test_bad_size(self, dispatch):
        with pytest.raises(MalformedDocumentError):
            dispatch("text", textsize="big")


class TestPath:
    @pytest.mark.parametrize("name", ["path", "line"])
    def test_default_polygon(self, name, dispatch, container):
        assert isinstance(dispatch(name), PolygonHandler)
        assert isinstance(container.objects[0], Polygon)

    def test_hinted_line(self, dispatch, container):
        assert isinstance(dispatch("line", description="line"), LineHandler)
        assert isinstance(container.objects[0], Line)


class TestPrivate:
    def test_private_relays(self, dispatch, container):
        handler = dispatch("private")
        assert isinstance(handler, PrivateHandler)
        assert handler.container is container

    def test_hinted_instance_warns(self, dispatch, caplog):
        with caplog.at_level(logging.WARNING):
            assert isinstance(dispatch("private", description="rectangle"), PrivateHandler)
        assert "unexpectedly generated instance" in caplog.text

    def test_inappropriate_container(self, parser, caplog):
        with caplog.at_level(logging.WARNING):
            assert parser.get_handler(parser, object(), "private", {}) is None
        assert "inappropriate container" in caplog.text


class TestTypeHints:
    def test_unknown_type_is_not_fatal(self, dispatch, container, caplog):
        with caplog.at_level(logging.ERROR):
            dispatch("rectangle", description="com.example.Missing[1, 2, 3, 4]")
        assert "does not specify an available type" in caplog.text
        assert type(container.objects[0]) is Rectangle

    def test_constructor_failure_is_fatal(self, parser, dispatch):
        def broken():
            raise RuntimeError("no")

        parser.register_type("broken", broken)
        with pytest.raises(ShapeConstructionError):
            dispatch("rectangle", description="broken")

    def test_unrecognized_element_skipped(self, dispatch, container, caplog):
        with caplog.at_level(logging.INFO):
            assert dispatch("foo", x="1") is None
        assert container.objects == []
        assert "Unrecognized element foo" in caplog.text

    def test_unrecognized_element_with_hint(self, parser, dispatch, container):
        assert dispatch("node", description="ellipse", name="n", x="3") is None
        shape = container.objects[0]
        assert isinstance(shape, Ellipse)
        assert shape.x == 3
        assert parser.find_shape("n") is shape

    def test_unrecognized_non_shape_instance(self, parser, dispatch, container):
        parser.register_type("marker", dict)
        dispatch("node", description="marker")
        assert container.objects == [{}]

    def test_empty_hint(self, dispatch, container):
        dispatch("rectangle", description=" , ")
        assert type(container.objects[0]) is Rectangle

    def test_self_dispatching_type(self, parser, container):
        calls = []

        class Special(BaseHandler):
            pass

        class Widget(Shape):
            def get_handler(self, stack, container, name, attributes):
                calls.append((stack, container, name, dict(attributes)))
                container.add_object(self)
                return Special(stack)

        parser.register_type("widget", Widget)
        handler = parser.get_handler(parser, container, "rectangle", {"description": "widget"})
        assert isinstance(handler, Special)
        assert calls == [(parser, container, "rectangle", {"description": "widget"})]
        assert isinstance(container.objects[0], Widget)

    def test_self_dispatching_type_returning_none(self, parser, container):
        class Quiet(Shape):
            def get_handler(self, stack, container, name, attributes):
                return None

        parser.register_type("quiet", Quiet)
        assert parser.get_handler(parser, container, "group", {"description": "quiet"}) is None
        assert container.objects == []

    def test_custom_hint_attribute(self, parser, dispatch, container):
        parser.config.type_hint_attribute = "kind"
        dispatch("rectangle", kind="rounded_rectangle", description="ellipse")
        assert isinstance(container.objects[0], RoundedRectangle)
