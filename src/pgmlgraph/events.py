"""
Document events and the streaming reader producing them.

The parser consumes any iterable of events, so tests (and collaborators with
their own reader) can hand it a plain list. ``read_events`` streams a document
through lxml's feed parser; events are yielded as soon as each block has been
parsed.
"""

from collections import deque
import io
from dataclasses import dataclass, field
from pathlib import Path
from typing import IO, Deque, Dict, Iterator, Union
import logging
from lxml import etree
from pgmlgraph.errors import MalformedDocumentError

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class StartElement:
    name: str
    attributes: Dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class Characters:
    text: str


@dataclass(frozen=True)
class EndElement:
    name: str


Event = Union[StartElement, Characters, EndElement]
Source = Union[str, Path, bytes, IO]


class _EventCollector:
    """Parser target turning lxml callbacks into events."""

    def __init__(self) -> None:
        self.events: Deque[Event] = deque()

    def start(self, tag, attrib) -> None:
        self.events.append(StartElement(tag, dict(attrib)))

    def end(self, tag) -> None:
        self.events.append(EndElement(tag))

    def data(self, data) -> None:
        self.events.append(Characters(data))

    def comment(self, text) -> None:
        pass

    def close(self) -> None:
        return None


def _drain(collector: _EventCollector) -> Iterator[Event]:
    while collector.events:
        yield collector.events.popleft()


def _read_stream(stream: IO, chunk_size: int) -> Iterator[Event]:
    collector = _EventCollector()
    # DTD is neither loaded nor validated, PGML files reference pgml.dtd by system id.
    parser = etree.XMLParser(target=collector, resolve_entities=False, no_network=True, load_dtd=False)
    empty = True
    try:
        while True:
            chunk = stream.read(chunk_size)
            if not chunk:
                break
            empty = False
            parser.feed(chunk)
            yield from _drain(collector)
        if empty:
            raise MalformedDocumentError("Document is empty")
        parser.close()
    except etree.XMLSyntaxError as error:
        raise MalformedDocumentError(f"Cannot read document: {error}") from error
    yield from _drain(collector)


def read_events(source: Source, chunk_size: int = 16384) -> Iterator[Event]:
    """Stream events of a single document.

    :param source: path, whole document as bytes, or a file like object
    :param chunk_size: size of blocks fed to the XML parser
    :return: iterator over document events
    :raises MalformedDocumentError: when document is not well formed
    """
    if isinstance(source, bytes):
        yield from _read_stream(io.BytesIO(source), chunk_size)
    elif isinstance(source, (str, Path)):
        log.debug("Reading %s", source)
        with open(source, "rb") as stream:
            yield from _read_stream(stream, chunk_size)
    else:
        yield from _read_stream(source, chunk_size)
