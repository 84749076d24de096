"""Listen mode: extract signed payloads from captured IP packets."""

from __future__ import annotations

import logging
import struct
from dataclasses import dataclass

IPHDR_SIZE = 20

_log = logging.getLogger(__name__)


def memstr(haystack: bytes, needle: bytes) -> int | None:
    """Return the offset of the first `needle` in `haystack`, or None."""
    index = haystack.find(needle)
    return None if index < 0 else index


@dataclass(frozen=True)
class ListenEvent:
    """Outcome of a signed packet.

    Either a payload to deliver, or (in safe mode) a request that the sender
    restart from `restart_from` because a packet arrived out of sequence.
    """

    ip_id: int
    payload: bytes = b""
    restart_from: int | None = None

    @property
    def is_restart(self) -> bool:
        return self.restart_from is not None


class SignatureListener:
    """Finds the signature in captured packets and yields what follows it."""

    def __init__(self, sign: bytes | str, safe: bool = False) -> None:
        self.sign = sign.encode() if isinstance(sign, str) else bytes(sign)
        self.safe = safe
        self.expected_id = 1

    def feed(self, packet: bytes, linkhdr_size: int) -> ListenEvent | None:
        """Process one captured frame; return an event if it was signed."""
        if len(packet) < linkhdr_size + IPHDR_SIZE:
            return None
        ip_packet = packet[linkhdr_size:]
        tot_len, ip_id = struct.unpack_from("!HH", ip_packet, 2)
        size = min(len(ip_packet), tot_len)
        ip_packet = ip_packet[:size]

        position = memstr(ip_packet, self.sign)
        if position is None:
            return None
        _log.debug("packet %d received", ip_id)

        if self.safe:
            if ip_id == self.expected_id:
                self.expected_id = (self.expected_id + 1) & 0xFFFF
            else:
                _log.debug("packet not in sequence (id %d) received", ip_id)
                return ListenEvent(ip_id=ip_id, restart_from=self.expected_id)

        return ListenEvent(ip_id=ip_id, payload=ip_packet[position + len(self.sign):])