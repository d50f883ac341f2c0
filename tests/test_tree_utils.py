"""Tests for shape tree traversal."""

import pytest
from pgmlgraph.parser import StackParser
from pgmlgraph.tree_utils import count_shapes, describe_shape, find_shape, format_tree, iter_shapes
from pgmlgraph.model import Rectangle, RoundedRectangle


@pytest.fixture
def diagram(sample_path, sample_owners):
    return StackParser(owners=sample_owners).parse(sample_path)


def test_iter_shapes_depth(diagram):
    pairs = [(depth, shape.name) for depth, shape in iter_shapes(diagram.shapes)]
    assert pairs[:3] == [(0, "Fig0"), (1, "Fig0.0"), (1, "Fig0.1")]
    assert (1, "Fig3.0") in pairs


def test_count_shapes(diagram):
    assert count_shapes(diagram) == 10


def test_find_shape(diagram):
    assert find_shape(diagram, lambda shape: shape.name == "Fig1.1").text == "Customer"
    assert find_shape(diagram, lambda shape: shape.name == "nothing") is None


def test_describe_shape():
    shape = RoundedRectangle(name="r", x=1, y=2, width=3, height=4, corner_radius=5, visible=False)
    assert describe_shape(shape) == "RoundedRectangle r (1, 2, 3, 4) radius=5 hidden"
    assert describe_shape(Rectangle()) == "Rectangle (0, 0, 0, 0)"


def test_format_tree(diagram):
    text = format_tree(diagram)
    lines = text.splitlines()
    assert lines[0] == "Diagram Orders (org.argouml.uml.diagram.static_structure.ui.UMLClassDiagram)"
    assert lines[1].startswith("  Group Fig0 (56, 40, 120, 80)")
    assert "owner=Order" in lines[1]
    assert "    Text Fig0.1" in text
    assert "Edge Fig3 (0, 0, 0, 0) Fig0 -> Fig1" in text
