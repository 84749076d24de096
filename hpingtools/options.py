"""Command line option parsing for the packet generator."""

from __future__ import annotations

import os
import socket
from dataclasses import dataclass, field

IPHDR_SIZE = 20
TCPHDR_SIZE = 20

TH_FIN = 0x01
TH_SYN = 0x02
TH_RST = 0x04
TH_PUSH = 0x08
TH_ACK = 0x10
TH_URG = 0x20
TH_X = 0x40
TH_Y = 0x80

BIND_NONE = 0
BIND_DPORT = 1
BIND_TTL = 2

IPOPT_LSRR = 131
IPOPT_SSRR = 137

DEFAULT_TRACEROUTE_TTL = 1
MAX_ROUTE_ADDRESSES = 62
_STR_LIMIT = 1023


class OptionError(ValueError):
    """Raised when the command line is invalid."""


@dataclass
class Options:
    """Everything the command line can set, with the program's defaults."""

    targetname: str = ""
    ifname: str = ""
    spoofaddr: str = ""
    count: int = -1
    sending_wait: int = 1
    wait_in_usec: bool = False
    usec_delay: int = 0
    numeric: bool = False
    gethost: bool = True
    quiet: bool = False
    base_dst_port: int = 0
    dst_port: int = 0
    incdport: bool = False
    force_incdport: bool = False
    initsport: int = -1
    src_ttl: int = 64
    src_id: int = -1
    src_winsize: int = 512
    src_thoff: int = TCPHDR_SIZE >> 2
    tcp_flags: int = 0
    fragment: bool = False
    mf: bool = False
    df: bool = False
    ip_frag_offset: int = 0
    relid: bool = False
    data_size: int = 0
    rawip_mode: bool = False
    icmp_mode: bool = False
    udp_mode: bool = False
    scan_mode: bool = False
    scan_ports: str = ""
    listen_mode: bool = False
    sign: str = ""
    sign_length: int = 0
    sign_packets: bool = False
    raw_ip_protocol: int = 6
    icmp_type: int = 8
    icmp_code: int = 0
    ctrlzbind: int = BIND_DPORT
    debug: bool = False
    verbose: bool = False
    winid_order: bool = False
    keep_still: bool = False
    data_from_file: bool = False
    datafilename: str = ""
    hexdump: bool = False
    contdump: bool = False
    safe: bool = False
    end: bool = False
    traceroute: bool = False
    ip_tos: int = 0
    virtual_mtu: int = 16
    seqnum: bool = False
    badcksum: bool = False
    set_seqnum: bool = False
    tcp_seqnum: int = 0
    set_ack: bool = False
    tcp_ack: int = 0
    rroute: bool = False
    icmp_ip_version: int = 4
    icmp_ip_ihl: int = 5
    icmp_ip_tos: int = 0
    icmp_ip_tot_len: int = 0
    icmp_ip_id: int = 0
    icmp_ip_protocol: int = 6
    icmp_ip_srcip: str = ""
    icmp_ip_dstip: str = ""
    icmp_gwip: str = ""
    icmp_ip_srcport: int = 0
    icmp_ip_dstport: int = 0
    force_icmp: bool = False
    icmp_cksum: int = -1
    tcp_exitcode: bool = False
    tr_keep_ttl: bool = False
    tcp_timestamp: bool = False
    tr_stop: bool = False
    tr_no_rtt: bool = False
    rand_dest: bool = False
    rand_source: bool = False
    list_dest: bool = False
    ip_dst_filename: str = ""
    list_source: bool = False
    ip_src_filename: str = ""
    lsrr: bool = False
    lsr: bytes = b""
    lsr_length: int = 0
    ssrr: bool = False
    ssr: bytes = b""
    ssr_length: int = 0
    beep: bool = False
    flood: bool = False
    clock_skew: bool = False
    cs_window: int = 300
    cs_window_shift: int = 5
    cs_vector_len: int = 10
    help_topic: str | None = None
    apd_send: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


# (short, long, needs argument, disabled when running setuid)
_OPTION_TABLE: tuple[tuple[str, str, bool, bool], ...] = (
    ("c", "count", True, False),
    ("i", "interval", True, True),
    ("n", "numeric", False, False),
    ("q", "quiet", False, False),
    ("I", "interface", True, False),
    ("h", "help", False, False),
    ("v", "version", False, False),
    ("p", "destport", True, True),
    ("s", "baseport", True, True),
    ("t", "ttl", True, False),
    ("N", "id", True, True),
    ("w", "win", True, True),
    ("a", "spoof", True, True),
    ("F", "fin", False, True),
    ("S", "syn", False, True),
    ("R", "rst", False, True),
    ("P", "push", False, True),
    ("A", "ack", False, True),
    ("U", "urg", False, True),
    ("X", "xmas", False, True),
    ("Y", "ymas", False, True),
    ("f", "frag", False, True),
    ("x", "morefrag", False, True),
    ("y", "dontfrag", False, False),
    ("g", "fragoff", True, True),
    ("O", "tcpoff", True, True),
    ("r", "rel", False, False),
    ("d", "data", True, True),
    ("0", "rawip", False, True),
    ("1", "icmp", False, False),
    ("2", "udp", False, False),
    ("8", "scan", True, False),
    ("z", "bind", False, False),
    ("Z", "unbind", False, False),
    ("D", "debug", False, False),
    ("V", "verbose", False, False),
    ("W", "winid", False, False),
    ("k", "keep", False, False),
    ("E", "file", True, True),
    ("j", "dump", False, True),
    ("J", "print", False, True),
    ("e", "sign", True, True),
    ("9", "listen", True, True),
    ("B", "safe", False, True),
    ("T", "traceroute", False, False),
    ("o", "tos", True, False),
    ("m", "mtu", True, True),
    ("Q", "seqnum", False, True),
    ("b", "badcksum", False, True),
    ("M", "setseq", True, True),
    ("L", "setack", True, True),
    ("C", "icmptype", True, True),
    ("K", "icmpcode", True, True),
    ("u", "end", False, True),
    ("G", "rroute", False, False),
    ("H", "ipproto", True, True),
    ("", "icmp-help", False, False),
    ("", "icmp-ipver", True, True),
    ("", "icmp-iphlen", True, True),
    ("", "icmp-iplen", True, True),
    ("", "icmp-ipid", True, True),
    ("", "icmp-ipproto", True, True),
    ("", "icmp-cksum", True, True),
    ("", "icmp-ts", False, False),
    ("", "icmp-addr", False, False),
    ("", "tcpexitcode", False, False),
    ("", "fast", False, True),
    ("", "faster", False, True),
    ("", "tr-keep-ttl", False, False),
    ("", "tcp-timestamp", False, False),
    ("", "tr-stop", False, False),
    ("", "tr-no-rtt", False, False),
    ("", "rand-dest", False, False),
    ("", "rand-source", False, False),
    ("", "list-dest", True, True),
    ("", "list-source", True, True),
    ("", "lsrr", True, True),
    ("", "ssrr", True, True),
    ("", "route-help", False, False),
    ("", "apd-send", True, False),
    ("", "icmp-ipsrc", True, True),
    ("", "icmp-ipdst", True, True),
    ("", "icmp-gw", True, True),
    ("", "icmp-srcport", True, True),
    ("", "icmp-dstport", True, True),
    ("", "force-icmp", False, False),
    ("", "beep", False, False),
    ("", "flood", False, False),
    ("", "clock-skew", False, False),
    ("", "clock-skew-win", True, False),
    ("", "clock-skew-win-shift", True, False),
    ("", "clock-skew-packets-per-sample", True, False),
)

_BY_SHORT = {short: entry for entry in _OPTION_TABLE if (short := entry[0])}
_BY_LONG = {entry[1]: entry for entry in _OPTION_TABLE}


def _strtol(text: str, base: int = 0) -> int:
    """Parse the leading integer of `text` the way C's strtol does."""
    s = text.lstrip(" \t\n\r\f\v")
    negative = False
    if s[:1] in ("+", "-"):
        negative = s[0] == "-"
        s = s[1:]
    if base == 0:
        if s[:2].lower() == "0x" and s[2:3] and s[2] in "0123456789abcdefABCDEF":
            base, s = 16, s[2:]
        elif s.startswith("0"):
            base = 8
        else:
            base = 10
    valid = "0123456789abcdefghijklmnopqrstuvwxyz"[:base]
    end = 0
    while end < len(s) and s[end].lower() in valid:
        end += 1
    value = int(s[:end], base) if end else 0
    return -value if negative else value


def _strtoul32(text: str) -> int:
    return _strtol(text) & 0xFFFFFFFF


def _cstr(text: str) -> str:
    return text[:_STR_LIMIT]


def _running_setuid() -> bool:
    if not hasattr(os, "geteuid"):
        return False
    return os.getuid() != os.geteuid()


def parse_route(text: str) -> bytes:
    """Build a source route IP option from "[ptr:]addr/addr/...".

    The first byte (the option kind) is left as 0 for the caller to set,
    followed by the option length, the pointer and the addresses.
    """
    addresses = bytearray()
    pointer: int | None = None
    count = 0
    i = 0
    while i < len(text):
        j = i
        while j < len(text) and ((text[j].isascii() and text[j].isalnum()) or text[j] == "."):
            j += 1
        stop = text[j] if j < len(text) else ""
        if stop in ("", "/"):
            if count >= MAX_ROUTE_ADDRESSES:
                raise OptionError("too long route")
            try:
                addresses += socket.inet_aton(text[i:j])
            except (OSError, ValueError):
                raise OptionError(f"invalid IP address in route: {text[i:j]!r}") from None
            count += 1
            if stop == "/":
                j += 1
        elif (
            stop == ":"
            and i == 0
            and 0 < j < 4
            and text[:j].isdigit()
            and int(text[:j]) < 256
        ):
            pointer = int(text[:j])
            j += 1
        else:
            raise OptionError(f"bad route: {text!r}")
        i = j
    if pointer is None:
        pointer = 8 if count else 4
    return bytes([0, 4 * count + 3, pointer]) + bytes(addresses)


def _tokens(args: list[str]):
    """Yield (long option name or None, value) pairs from the arguments."""
    rest = iter(args)
    for arg in rest:
        if arg == "--":
            for positional in rest:
                yield None, positional
            return
        if arg.startswith("--"):
            name, has_value, value = arg[2:].partition("=")
            entry = _BY_LONG.get(name)
            if entry is None:
                matches = [e for long, e in _BY_LONG.items() if long.startswith(name)]
                if not matches:
                    raise OptionError(f"unrecognized option '--{name}'")
                if len(matches) > 1:
                    raise OptionError(f"option '--{name}' is ambiguous")
                entry = matches[0]
            _, long, needs_arg, _ = entry
            if needs_arg:
                if not has_value:
                    value = next(rest, None)
                    if value is None:
                        raise OptionError(f"option '--{long}' requires an argument")
            elif has_value:
                raise OptionError(f"option '--{long}' doesn't allow an argument")
            else:
                value = None
            yield long, value
        elif arg.startswith("-") and len(arg) > 1:
            for pos, char in enumerate(arg[1:], start=1):
                entry = _BY_SHORT.get(char)
                if entry is None:
                    raise OptionError(f"invalid option -- {char}")
                _, long, needs_arg, _ = entry
                if not needs_arg:
                    yield long, None
                    continue
                value = arg[pos + 1:] or next(rest, None)
                if value is None:
                    raise OptionError(f"option requires an argument -- {char}")
                yield long, value
                break
        else:
            yield None, arg


def _parse_tos(text: str, previous: int) -> int:
    digits = text.lstrip(" \t\n\r\f\v")[:2]
    end = 0
    while end < len(digits) and digits[end] in "0123456789abcdefABCDEF":
        end += 1
    return int(digits[:end], 16) if end else previous


def parse_options(argv: list[str]) -> Options:
    """Parse command line arguments (without the program name).

    Raises OptionError on any invalid combination. A help or version
    request stops parsing and is reported in `help_topic`.
    """
    args = list(argv)
    if not args:
        raise OptionError("missing host argument")

    opts = Options()
    setuid = _running_setuid()
    ttl_set = False
    target_set = False
    delay_changed = False
    tos_value = 0

    for name, value in _tokens(args):
        if name is None:
            if target_set:
                raise OptionError("you must specify only one target host at a time")
            opts.targetname = _cstr(value)
            target_set = True
            continue
        if setuid and _BY_LONG[name][3]:
            raise OptionError(f"option '--{name}' disabled when setuid")
        match name:
            case "count":
                opts.count = _strtol(value)
            case "interval":
                delay_changed = True
                if value.startswith("u"):
                    opts.wait_in_usec = True
                    opts.usec_delay = _strtol(value[1:], 10)
                else:
                    opts.sending_wait = _strtol(value)
            case "numeric":
                opts.numeric = True
            case "quiet":
                opts.quiet = True
            case "interface":
                opts.ifname = _cstr(value)
            case "help":
                opts.help_topic = "usage"
                return opts
            case "version":
                opts.help_topic = "version"
                return opts
            case "destport":
                if value.startswith("+"):
                    opts.incdport = True
                    value = value[1:]
                if value.startswith("+"):
                    opts.force_incdport = True
                    value = value[1:]
                opts.base_dst_port = opts.dst_port = _strtol(value)
            case "baseport":
                opts.initsport = _strtol(value)
            case "ttl":
                opts.src_ttl = _strtol(value)
                ttl_set = True
            case "id":
                opts.src_id = _strtol(value)
            case "win":
                opts.src_winsize = _strtol(value)
            case "spoof":
                opts.spoofaddr = _cstr(value)
            case "fin":
                opts.tcp_flags |= TH_FIN
            case "syn":
                opts.tcp_flags |= TH_SYN
            case "rst":
                opts.tcp_flags |= TH_RST
            case "push":
                opts.tcp_flags |= TH_PUSH
            case "ack":
                opts.tcp_flags |= TH_ACK
            case "urg":
                opts.tcp_flags |= TH_URG
            case "xmas":
                opts.tcp_flags |= TH_X
            case "ymas":
                opts.tcp_flags |= TH_Y
            case "frag":
                opts.fragment = True
            case "morefrag":
                opts.mf = True
            case "dontfrag":
                opts.df = True
            case "fragoff":
                opts.ip_frag_offset = _strtol(value)
            case "tcpoff":
                opts.src_thoff = _strtol(value)
            case "rel":
                opts.relid = True
            case "data":
                opts.data_size = _strtol(value) & 0xFFFF
            case "rawip":
                opts.rawip_mode = True
            case "icmp":
                opts.icmp_mode = True
            case "icmp-ts":
                opts.icmp_mode = True
                opts.icmp_type = 13
            case "icmp-addr":
                opts.icmp_mode = True
                opts.icmp_type = 17
            case "udp":
                opts.udp_mode = True
            case "scan":
                opts.scan_mode = True
                opts.scan_ports = value
            case "listen":
                opts.listen_mode = True
                opts.sign = _cstr(value)
                opts.sign_length = len(value.encode())
            case "ipproto":
                opts.raw_ip_protocol = _strtol(value)
            case "icmptype":
                opts.icmp_mode = True
                opts.icmp_type = _strtol(value)
            case "icmpcode":
                opts.icmp_mode = True
                opts.icmp_code = _strtol(value)
            case "bind":
                opts.ctrlzbind = BIND_TTL
            case "unbind":
                opts.ctrlzbind = BIND_NONE
            case "debug":
                opts.debug = True
            case "verbose":
                opts.verbose = True
            case "winid":
                opts.winid_order = True
            case "keep":
                opts.keep_still = True
            case "file":
                opts.data_from_file = True
                opts.datafilename = _cstr(value)
            case "dump":
                opts.hexdump = True
            case "print":
                opts.contdump = True
            case "sign":
                opts.sign_packets = True
                opts.sign = _cstr(value)
                opts.sign_length = len(value.encode())
            case "safe":
                opts.safe = True
            case "end":
                opts.end = True
            case "traceroute":
                opts.traceroute = True
            case "tos":
                if value == "help":
                    opts.help_topic = "tos"
                    return opts
                tos_value = _parse_tos(value, tos_value)
                opts.ip_tos |= tos_value
            case "mtu":
                opts.virtual_mtu = _strtol(value) & 0xFFFFFFFF
                opts.fragment = True
                if opts.virtual_mtu > 65535:
                    opts.virtual_mtu = 65535
                    opts.warnings.append("Specified MTU too high, fixed to 65535.")
            case "seqnum":
                opts.seqnum = True
            case "badcksum":
                opts.badcksum = True
            case "setseq":
                opts.set_seqnum = True
                opts.tcp_seqnum = _strtoul32(value)
            case "setack":
                opts.set_ack = True
                opts.tcp_ack = _strtoul32(value)
            case "rroute":
                opts.rroute = True
            case "icmp-help":
                opts.help_topic = "icmp"
                return opts
            case "icmp-ipver":
                opts.icmp_ip_version = _strtol(value)
            case "icmp-iphlen":
                opts.icmp_ip_ihl = _strtol(value)
            case "icmp-iplen":
                opts.icmp_ip_tot_len = _strtol(value)
            case "icmp-ipid":
                opts.icmp_ip_id = _strtol(value)
            case "icmp-ipproto":
                opts.icmp_ip_protocol = _strtol(value)
            case "icmp-ipsrc":
                opts.icmp_ip_srcip = _cstr(value)
            case "icmp-ipdst":
                opts.icmp_ip_dstip = _cstr(value)
            case "icmp-gw":
                opts.icmp_gwip = _cstr(value)
            case "icmp-srcport":
                opts.icmp_ip_srcport = _strtol(value)
            case "icmp-dstport":
                opts.icmp_ip_dstport = _strtol(value)
            case "force-icmp":
                opts.force_icmp = True
            case "icmp-cksum":
                opts.icmp_cksum = _strtol(value)
            case "tcpexitcode":
                opts.tcp_exitcode = True
            case "fast":
                delay_changed = True
                opts.wait_in_usec = True
                opts.usec_delay = 100000
            case "faster":
                delay_changed = True
                opts.wait_in_usec = True
                opts.usec_delay = 1
                # --faster has always implied --tr-keep-ttl as well.
                opts.tr_keep_ttl = True
            case "tr-keep-ttl":
                opts.tr_keep_ttl = True
            case "tcp-timestamp":
                opts.tcp_timestamp = True
            case "tr-stop":
                opts.tr_stop = True
            case "tr-no-rtt":
                opts.tr_no_rtt = True
            case "rand-dest":
                opts.rand_dest = True
            case "rand-source":
                opts.rand_source = True
            case "list-dest":
                opts.list_dest = True
                opts.ip_dst_filename = _cstr(value)
            case "list-source":
                opts.list_source = True
                opts.ip_src_filename = _cstr(value)
            case "lsrr":
                opts.lsrr = True
                route = parse_route(value)
                if opts.lsr:
                    opts.warnings.append("Warning: erasing previously given loose source route")
                opts.lsr = bytes([IPOPT_LSRR]) + route[1:]
                opts.lsr_length = len(route)
            case "ssrr":
                opts.ssrr = True
                route = parse_route(value)
                if opts.ssr:
                    opts.warnings.append("Warning: erasing previously given strong source route")
                opts.ssr = bytes([IPOPT_SSRR]) + route[1:]
                opts.ssr_length = len(route)
            case "route-help":
                opts.help_topic = "route"
                return opts
            case "apd-send":
                opts.apd_send.append(value)
            case "beep":
                opts.beep = True
            case "flood":
                opts.flood = True
            case "clock-skew":
                opts.tcp_timestamp = True
                opts.clock_skew = True
            case "clock-skew-win":
                opts.cs_window = _strtol(value)
                if opts.cs_window < 30:
                    raise OptionError("clock skew window can't be < 30 sec.")
            case "clock-skew-win-shift":
                opts.cs_window_shift = _strtol(value)
                if opts.cs_window_shift < 1:
                    raise OptionError("clock skew window shift can't be < 1")
            case "clock-skew-packets-per-sample":
                opts.cs_vector_len = _strtol(value)
                if opts.cs_vector_len < 1:
                    raise OptionError("clock skew packets per sample can't be < 1")

    if not target_set and opts.listen_mode and opts.safe:
        raise OptionError(
            "you must specify a target host if you require safe protocol "
            "because hping needs a target for HCMP packets"
        )
    if not target_set and not opts.listen_mode:
        raise OptionError("missing host argument")

    if opts.numeric:
        opts.gethost = False

    _validate(opts)

    if opts.safe:
        opts.src_id = 1
    if opts.traceroute and opts.ctrlzbind == BIND_DPORT:
        opts.ctrlzbind = BIND_TTL
    if opts.traceroute and not ttl_set:
        opts.src_ttl = DEFAULT_TRACEROUTE_TTL
    if opts.sign_packets and not opts.data_size:
        opts.data_size = opts.sign_length
    if opts.scan_mode and not delay_changed:
        opts.wait_in_usec = True
        opts.usec_delay = 0
    return opts


def _validate(opts: Options) -> None:
    if opts.data_size + IPHDR_SIZE + TCPHDR_SIZE > 65535:
        limit = 65535 - IPHDR_SIZE - TCPHDR_SIZE
        raise OptionError(f"sorry, data size must be <= {limit}")
    if opts.count <= 0 and opts.count != -1:
        raise OptionError("count must > 0")
    if opts.sending_wait < 0:
        raise OptionError("bad timing interval")
    if opts.wait_in_usec and opts.usec_delay < 0:
        raise OptionError("bad timing interval")
    if opts.data_from_file and opts.data_size == 0:
        raise OptionError("-E option useless without -d")
    if opts.sign_packets and opts.data_size and opts.sign_length > opts.data_size:
        raise OptionError(
            f"signature ({opts.sign_length} bytes) is larger than data size; "
            "check -d option, don't specify -d to let hping compute it"
        )
    if (opts.sign_packets or opts.listen_mode) and opts.sign_length > 1024:
        raise OptionError("signature too big")
    if opts.safe and opts.src_id != -1:
        raise OptionError("sorry, you can't set id and use safe protocol at some time")
    if opts.safe and not opts.data_from_file and not opts.listen_mode:
        raise OptionError("sorry, safe protocol is useless without 'data from file' option")
    if opts.safe and not opts.sign_packets and not opts.listen_mode:
        raise OptionError(
            "sorry, safe protocol require you sign your packets, see --sign | -e option"
        )
    if opts.rand_dest and not opts.ifname:
        raise OptionError(
            "you need to specify an interface when the --rand-dest option is enabled"
        )
    if opts.rand_dest and opts.list_dest:
        raise OptionError("you can't use --rand-dest and --list-dest at the same time")
    if opts.rand_source and opts.list_source:
        raise OptionError("you can't use --rand-source and --list-source at the same time")