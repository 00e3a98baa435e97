"""Readers for the whitespace-delimited topology, message and change files."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator, List, Tuple

from dvsim.core.errors import InputFileError, ParseError
from dvsim.core.types import ChangeRecord, Link, Message
from dvsim.io.wire import DEFAULT_WIRE, WireFormat

_log = logging.getLogger("dvsim.io")


def _read_lines(kind: str, path: str | Path) -> Iterator[Tuple[int, str]]:
    p = Path(path)
    try:
        data = p.read_bytes()
    except OSError as exc:
        raise InputFileError(kind, str(p)) from exc
    try:
        text = data.decode("utf-8")
    except UnicodeDecodeError as exc:
        lineno = data.count(b"\n", 0, exc.start) + 1
        raise ParseError(str(p), lineno, "not valid UTF-8 text") from exc
    for lineno, line in enumerate(text.splitlines(), start=1):
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue
        yield lineno, line


def _parse_triple(path: str | Path, lineno: int, line: str, wire: WireFormat) -> Tuple:
    parts = line.split()
    if len(parts) != 3:
        raise ParseError(str(path), lineno, f"expected '<node1> <node2> <cost>', got {line.strip()!r}")
    try:
        u, v, cost = wire.parse_id(parts[0]), wire.parse_id(parts[1]), int(parts[2])
    except ValueError as exc:
        raise ParseError(str(path), lineno, str(exc)) from exc
    if u == v:
        raise ParseError(str(path), lineno, f"link endpoints must differ, got {u} twice")
    return u, v, cost


def read_topology(path: str | Path, wire: WireFormat = DEFAULT_WIRE) -> List[Link]:
    links: List[Link] = []
    for lineno, line in _read_lines("topology", path):
        u, v, cost = _parse_triple(path, lineno, line, wire)
        if cost < 0:
            raise ParseError(str(path), lineno, f"link cost must be non-negative, got {cost}")
        links.append(Link(node1=u, node2=v, cost=cost))
    _log.debug("read %d links from %s", len(links), path)
    return links


def read_changes(path: str | Path, wire: WireFormat = DEFAULT_WIRE) -> List[ChangeRecord]:
    changes: List[ChangeRecord] = []
    for lineno, line in _read_lines("changes", path):
        u, v, cost = _parse_triple(path, lineno, line, wire)
        if cost == wire.remove_cost:
            changes.append(ChangeRecord(node1=u, node2=v, cost=None))
            continue
        if cost < 0:
            raise ParseError(str(path), lineno, f"link cost must be non-negative, got {cost}")
        changes.append(ChangeRecord(node1=u, node2=v, cost=cost))
    _log.debug("read %d changes from %s", len(changes), path)
    return changes


def read_messages(path: str | Path, wire: WireFormat = DEFAULT_WIRE) -> List[Message]:
    messages: List[Message] = []
    for lineno, line in _read_lines("messages", path):
        # message text keeps its inner and trailing whitespace
        parts = line.lstrip().split(None, 2)
        if len(parts) < 2:
            raise ParseError(str(path), lineno, f"expected '<source> <destination> <text>', got {line.strip()!r}")
        try:
            src, dst = wire.parse_id(parts[0]), wire.parse_id(parts[1])
        except ValueError as exc:
            raise ParseError(str(path), lineno, str(exc)) from exc
        content = parts[2] if len(parts) == 3 else ""
        messages.append(Message(source=src, destination=dst, content=content))
    _log.debug("read %d messages from %s", len(messages), path)
    return messages
