"""Reverse packet description: render packet layers as APD text."""

from __future__ import annotations

import enum
import struct
from collections.abc import Iterable, Mapping
from dataclasses import dataclass

IP_MF = 0x2000
IP_DF = 0x4000
IP_RF = 0x8000

IPOPT_EOL = 0
IPOPT_NOP = 1
IPOPT_RR = 7
IPOPT_TIMESTAMP = 68
IPOPT_LSRR = 131
IPOPT_SSRR = 137

IPOPT_TS_TSONLY = 0
IPOPT_TS_TSANDADDR = 1
IPOPT_TS_PRESPEC = 3

ICMP_ECHOREPLY = 0
ICMP_DEST_UNREACH = 3
ICMP_SOURCE_QUENCH = 4
ICMP_REDIRECT = 5
ICMP_ECHO = 8
ICMP_TIME_EXCEEDED = 11
ICMP_PARAMETERPROB = 12
ICMP_TIMESTAMP = 13
ICMP_TIMESTAMPREPLY = 14
ICMP_INFO_REQUEST = 15
ICMP_INFO_REPLY = 16

TCPOPT_EOL = 0
TCPOPT_NOP = 1
TCPOPT_MAXSEG = 2
TCPOPT_WINDOW = 3
TCPOPT_SACK_PERM = 4
TCPOPT_SACK = 5
TCPOPT_ECHOREQUEST = 6
TCPOPT_ECHOREPLY = 7
TCPOPT_TIMESTAMP = 8

IGRP_OPCODE_UPDATE = 1
IGRP_OPCODE_REQUEST = 2

_IP_HEADER = struct.Struct("!BBHHHBBH4s4s")
_TCP_HEADER = struct.Struct("!HHIIBBHHH")
_UDP_HEADER = struct.Struct("!HHHH")
_IGRP_HEADER = struct.Struct("!BBHHHHH")

_ROUTE_OPTIONS = {IPOPT_RR: "rr", IPOPT_LSRR: "lsrr", IPOPT_SSRR: "ssrr"}
_TS_FLAGS = {
    IPOPT_TS_TSONLY: "tsonly",
    IPOPT_TS_TSANDADDR: "tsandaddr",
    IPOPT_TS_PRESPEC: "prespec",
}
_ICMP_QUOTING = {ICMP_DEST_UNREACH, ICMP_TIME_EXCEEDED, ICMP_PARAMETERPROB, ICMP_SOURCE_QUENCH}
_ICMP_ID_SEQ = {
    ICMP_ECHOREPLY, ICMP_ECHO, ICMP_TIMESTAMP, ICMP_TIMESTAMPREPLY,
    ICMP_INFO_REQUEST, ICMP_INFO_REPLY,
}
_TCP_FLAG_LETTERS = ((0x01, "f"), (0x02, "s"), (0x04, "r"), (0x08, "p"),
                     (0x10, "a"), (0x20, "u"), (0x40, "x"), (0x80, "y"))
_DATA_SPECIAL = b"()+,="


class LayerType(enum.Enum):
    """Kinds of packet layer that can be described."""

    IP = "ip"
    IPOPT = "ipopt"
    ICMP = "icmp"
    UDP = "udp"
    TCP = "tcp"
    TCPOPT = "tcpopt"
    IGRP = "igrp"
    IGRPENTRY = "igrpentry"
    DATA = "data"


@dataclass(frozen=True)
class Layer:
    """One layer of a packet: its kind and its raw bytes."""

    type: LayerType
    data: bytes


def _need(data: bytes, size: int, what: str) -> None:
    if len(data) < size:
        raise ValueError(f"{what} needs at least {size} bytes, got {len(data)}")


def _dotted(raw: bytes) -> str:
    return ".".join(str(b) for b in raw)


def _u32(raw: bytes) -> int:
    return int.from_bytes(raw[:4], "big")


def ip_to_apd(data: bytes, default: bytes | None = None) -> str:
    """Describe an IP header; fields equal to `default` are left out."""
    _need(data, _IP_HEADER.size, "IP header")
    vihl, tos, tot_len, ip_id, frag, ttl, proto, check, saddr, daddr = \
        _IP_HEADER.unpack_from(data)
    d = None
    if default is not None:
        _need(default, _IP_HEADER.size, "default IP header")
        d = _IP_HEADER.unpack_from(default)

    def differs(index: int, mask: int | None = None) -> bool:
        if d is None:
            return True
        mine = _IP_HEADER.unpack_from(data)[index]
        theirs = d[index]
        if mask is not None:
            return (mine & mask) != (theirs & mask)
        return mine != theirs

    parts = []
    if differs(0, 0x0F):
        parts.append(f"ihl=0x{vihl & 0x0F:x}")
    if differs(0, 0xF0):
        parts.append(f"ver=0x{vihl >> 4:x}")
    if differs(1):
        parts.append(f"tos=0x{tos:02x}")
    parts.append(f"totlen={tot_len}")
    if differs(3):
        parts.append(f"id={ip_id}")
    parts.append(f"fragoff={(frag & 0x1FFF) << 3}")
    for name, flag in (("mf", IP_MF), ("df", IP_DF), ("rf", IP_RF)):
        if differs(4, flag):
            parts.append(f"{name}={int(bool(frag & flag))}")
    if differs(5):
        parts.append(f"ttl={ttl}")
    parts.append(f"proto={proto}")
    parts.append(f"cksum=0x{check:04x}")
    parts.append(f"saddr={_dotted(saddr)}")
    parts.append(f"daddr={_dotted(daddr)}")
    return "ip(" + ",".join(parts) + ")+"


def ipopt_to_apd(data: bytes) -> str:
    """Describe one IP option."""
    _need(data, 1, "IP option")
    kind = data[0]
    if kind == IPOPT_EOL:
        return "ip.eol()+"
    if kind == IPOPT_NOP:
        return "ip.nop()+"
    optlen = data[1] if len(data) > 1 else len(data)

    if kind in _ROUTE_OPTIONS:
        _need(data, 3, "route option")
        addresses = []
        ptr = 4
        while ptr <= 37 and ptr <= optlen - 3 and len(data) >= ptr + 3:
            addresses.append(_dotted(data[ptr - 1:ptr + 3]))
            ptr += 4
        return f"ip.{_ROUTE_OPTIONS[kind]}(ptr={data[2]},data={'/'.join(addresses)})+"

    if kind == IPOPT_TIMESTAMP:
        _need(data, 4, "timestamp option")
        overflow = data[3] >> 4
        flags = data[3] & 0x0F
        flag_text = _TS_FLAGS.get(flags, str(flags))
        entries = []
        ptr = 5
        while ptr <= 37 and ptr <= optlen - 4:
            if flags in (IPOPT_TS_TSANDADDR, IPOPT_TS_PRESPEC):
                if len(data) < ptr + 7:
                    break
                address = _dotted(data[ptr - 1:ptr + 3])
                stamp = _u32(data[ptr + 3:ptr + 7])
                entries.append(f"{stamp}@{address}")
                ptr += 8
            else:
                if len(data) < ptr + 3:
                    break
                entries.append(str(_u32(data[ptr - 1:ptr + 3])))
                ptr += 4
        return (f"ip.ts(ptr={data[2]},flags={flag_text},overflow={overflow},"
                f"data={'/'.join(entries)})+")

    hex_text = "".join(f"0x{b:02x}" for b in data[:optlen])
    return f"ip.unknown(hex={hex_text})+"


def icmp_to_apd(data: bytes) -> str:
    """Describe an ICMP header; the fields shown depend on its type."""
    _need(data, 8, "ICMP header")
    icmp_type, code = data[0], data[1]
    parts = [f"type={icmp_type}", f"code={code}"]
    if icmp_type in _ICMP_QUOTING:
        parts.append(f"unused={_u32(data[4:8])}")
    if icmp_type in _ICMP_ID_SEQ:
        ident, seq = struct.unpack_from("!HH", data, 4)
        parts.append(f"id={ident}")
        parts.append(f"seq={seq}")
    if icmp_type == ICMP_REDIRECT:
        parts.append(f"gw={_dotted(data[4:8])}")
    return "icmp(" + ",".join(parts) + ")+"


def udp_to_apd(data: bytes) -> str:
    """Describe a UDP header."""
    _need(data, _UDP_HEADER.size, "UDP header")
    sport, dport, length, check = _UDP_HEADER.unpack_from(data)
    return f"udp(sport={sport},dport={dport},len={length},cksum=0x{check:04x})+"


def tcp_to_apd(data: bytes, default: bytes | None = None) -> str:
    """Describe a TCP header; x2, off and urp are left out when equal to `default`."""
    _need(data, _TCP_HEADER.size, "TCP header")
    sport, dport, seq, ack, offx2, flags, win, check, urp = _TCP_HEADER.unpack_from(data)
    d = None
    if default is not None:
        _need(default, _TCP_HEADER.size, "default TCP header")
        d = _TCP_HEADER.unpack_from(default)
    parts = [f"sport={sport}", f"dport={dport}", f"seq={seq}", f"ack={ack}"]
    if d is None or (offx2 & 0x0F) != (d[4] & 0x0F):
        parts.append(f"x2=0x{offx2 & 0x0F:x}")
    if d is None or (offx2 >> 4) != (d[4] >> 4):
        parts.append(f"off={offx2 >> 4}")
    letters = "".join(letter for bit, letter in _TCP_FLAG_LETTERS if flags & bit)
    parts.append(f"flags={letters}")
    parts.append(f"win={win}")
    parts.append(f"cksum=0x{check:04x}")
    if d is None or urp != d[8]:
        parts.append(f"urp={urp}")
    return "tcp(" + ",".join(parts) + ")+"


def tcpopt_to_apd(data: bytes) -> str:
    """Describe one TCP option."""
    _need(data, 1, "TCP option")
    kind = data[0]
    if kind == TCPOPT_EOL:
        return "tcp.eol()+"
    if kind == TCPOPT_NOP:
        return "tcp.nop()+"
    optlen = data[1] if len(data) > 1 else len(data)
    if kind == TCPOPT_MAXSEG:
        _need(data, 4, "mss option")
        return f"tcp.mss(size={int.from_bytes(data[2:4], 'big')})+"
    if kind == TCPOPT_WINDOW:
        _need(data, 3, "window scale option")
        return f"tcp.wscale(shift={data[2]})+"
    if kind == TCPOPT_SACK_PERM:
        return "tcp.sackperm()+"
    if kind == TCPOPT_SACK:
        blocks = max((optlen - 2) // 8, 0)
        _need(data, 2 + 8 * blocks, "sack option")
        ranges = []
        for block in range(blocks):
            start = 2 + 8 * block
            ranges.append(f"{_u32(data[start:start + 4])}-{_u32(data[start + 4:start + 8])}")
        return f"tcp.sack(blocks={'/'.join(ranges)})+"
    if kind in (TCPOPT_ECHOREQUEST, TCPOPT_ECHOREPLY):
        _need(data, 6, "echo option")
        name = "echoreq" if kind == TCPOPT_ECHOREQUEST else "echoreply"
        return f"tcp.{name}(info={_u32(data[2:6])})+"
    if kind == TCPOPT_TIMESTAMP:
        _need(data, 10, "timestamp option")
        return f"tcp.timestamp(val={_u32(data[2:6])},ecr={_u32(data[6:10])})+"
    return f"tcp.unknown(hex={data[:optlen].hex()})+"


def igrp_to_apd(data: bytes) -> str:
    """Describe an IGRP header."""
    _need(data, _IGRP_HEADER.size, "IGRP header")
    vop, edition, autosys, interior, system, exterior, check = _IGRP_HEADER.unpack_from(data)
    version, opcode = vop >> 4, vop & 0x0F
    if opcode == IGRP_OPCODE_UPDATE:
        opcode_text = "update"
    elif opcode == IGRP_OPCODE_REQUEST:
        opcode_text = "request"
    else:
        opcode_text = str(opcode)
    return (f"igrp(version={version},opcode={opcode_text},edition={edition},"
            f"autosys={autosys},interior={interior},system={system},"
            f"exterior={exterior},cksum=0x{check:04x})+")


def igrpentry_to_apd(data: bytes) -> str:
    """Describe one IGRP routing entry."""
    _need(data, 14, "IGRP entry")
    return (f"igrp.entry(dest={_dotted(data[0:3])},"
            f"delay={int.from_bytes(data[3:6], 'big')},"
            f"bandwidth={int.from_bytes(data[6:9], 'big')},"
            f"mtu={int.from_bytes(data[9:11], 'big')},"
            f"reliability={data[11]},load={data[12]},hopcount={data[13]})+")


def data_to_apd(data: bytes, hexdata: bool = False) -> str:
    """Describe a payload, as hex or as an escaped string."""
    if hexdata:
        return f"data(hex={bytes(data).hex()})+"
    text = "".join(
        chr(b) if 0x21 <= b <= 0x7E and b not in _DATA_SPECIAL else f"\\{b:02x}"
        for b in data
    )
    return f"data(str={text})+"


def _layer_to_apd(layer: Layer, defaults: Mapping[LayerType, bytes], hexdata: bool) -> str:
    default = defaults.get(layer.type)
    match layer.type:
        case LayerType.IP:
            return ip_to_apd(layer.data, default)
        case LayerType.IPOPT:
            return ipopt_to_apd(layer.data)
        case LayerType.ICMP:
            return icmp_to_apd(layer.data)
        case LayerType.UDP:
            return udp_to_apd(layer.data)
        case LayerType.TCP:
            return tcp_to_apd(layer.data, default)
        case LayerType.TCPOPT:
            return tcpopt_to_apd(layer.data)
        case LayerType.IGRP:
            return igrp_to_apd(layer.data)
        case LayerType.IGRPENTRY:
            return igrpentry_to_apd(layer.data)
        case LayerType.DATA:
            return data_to_apd(layer.data, hexdata)
    raise ValueError(f"unknown layer type {layer.type!r}")


def packet_to_apd(
    layers: Iterable[Layer],
    defaults: Mapping[LayerType, bytes] | None = None,
    hexdata: bool = False,
) -> str:
    """Describe a whole packet as '+'-joined layer descriptions."""
    defaults = defaults or {}
    text = "".join(_layer_to_apd(layer, defaults, hexdata) for layer in layers)
    return text[:-1]