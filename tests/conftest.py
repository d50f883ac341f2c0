"""Shared pytest fixtures for pgmlgraph tests."""

import pytest
from pathlib import Path
from pgmlgraph.config import Configuration
from pgmlgraph.events import EndElement, StartElement
from pgmlgraph.parser import StackParser


@pytest.fixture
def data_dir():
    """Directory with test documents and configuration files."""
    return Path(__file__).parent / "data"


@pytest.fixture
def owners():
    """Owner registry used by most tests."""
    return {"model-7": {"id": "model-7", "kind": "Class"}, "class-order": "Order"}


@pytest.fixture
def test_config():
    return Configuration()


@pytest.fixture
def parser(owners, test_config):
    return StackParser(owners=owners, config=test_config)


@pytest.fixture
def document():
    """Factory wrapping markup into a PGML document.

    Usage:
        parser.parse(document('<rectangle x="1" />'))
    """

    def _create(body: str, name: str = "Test") -> bytes:
        return f'<?xml version="1.0"?>\n<pgml name="{name}">{body}</pgml>'.encode("utf-8")

    return _create


@pytest.fixture
def element():
    """Factory for fake events of a single element with nested events.

    Usage:
        element("group", {"description": "group"}, element("rectangle"))
    """

    def _create(name, attributes=None, *children):
        events = [StartElement(name, dict(attributes or {}))]
        for child in children:
            events.extend(child)
        events.append(EndElement(name))
        return events

    return _create


@pytest.fixture
def sample_path(data_dir):
    return data_dir / "class_diagram.pgml"


@pytest.fixture
def sample_owners():
    return {"class-order": "Order", "class-customer": "Customer", "assoc-1": "places"}
