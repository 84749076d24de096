"""Port list parsing and service names for the port scanner."""

from __future__ import annotations

import socket
from collections.abc import Iterable

MAX_PORT = 65535
MAX_TOKENS = 32
SERVICES_FILE = "/etc/services"


def _system_known_ports(path: str = SERVICES_FILE) -> set[int]:
    ports: set[int] = set()
    try:
        with open(path, encoding="utf-8", errors="replace") as handle:
            for line in handle:
                fields = line.split("#", 1)[0].split()
                if len(fields) < 2:
                    continue
                port, _, _ = fields[1].partition("/")
                if port.isascii() and port.isdigit():
                    ports.add(int(port))
    except OSError:
        pass
    return ports


def _parse_number(text: str, spec: str) -> int:
    if not text or not all(c in "0123456789" for c in text):
        raise ValueError(f"ports syntax error in {spec!r}")
    if len(text) > 1 and text[0] == "0":
        end = 1
        while end < len(text) and text[end] in "01234567":
            end += 1
        return int(text[:end], 8)
    return int(text)


def _check_port(port: int, spec: str) -> int:
    if not 0 <= port <= MAX_PORT:
        raise ValueError(f"port {port} out of range in {spec!r}")
    return port


def parse_ports(spec: str, known_ports: Iterable[int] | None = None) -> frozenset[int]:
    """Return the set of ports selected by a scan specification.

    The specification is a comma separated list of single ports, ranges
    ("low-high"), "all" or "known"; a leading '!' removes instead of adds.
    Items apply left to right. `known_ports` defaults to the system's
    services database. Raises ValueError on a syntax error.
    """
    active: set[int] = set()
    for token in spec.split(",")[:MAX_TOKENS]:
        negate = token.startswith("!")
        item = token[1:] if negate else token
        if "-" in item:
            bounds = item.split("-")
            if len(bounds) != 2:
                raise ValueError(f"ports syntax error in {spec!r}")
            low, high = sorted(_parse_number(b, spec) for b in bounds)
            selected: Iterable[int] = range(_check_port(low, spec), _check_port(high, spec) + 1)
        elif item == "all":
            selected = range(MAX_PORT + 1)
        elif item == "known":
            source = _system_known_ports() if known_ports is None else known_ports
            selected = [p for p in source if 0 <= p <= MAX_PORT]
        else:
            selected = [_check_port(_parse_number(item, spec), spec)]
        if negate:
            active.difference_update(selected)
        else:
            active.update(selected)
    return frozenset(active)


def port_to_name(port: int) -> str:
    """Return the service name of a port, or "" if none is known."""
    try:
        return socket.getservbyport(port)
    except (OSError, OverflowError, TypeError):
        return ""