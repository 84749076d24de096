"""Text lines for received ICMP error messages."""

from __future__ import annotations

ICMP_EXC_TTL = 0
ICMP_EXC_FRAGTIME = 1

_UNREACH_MESSAGES = {
    0: "Network Unreachable from",
    1: "Host Unreachable from",
    2: "Protocol Unreachable from",
    3: "Port Unreachable from",
    4: "Fragmentation Needed/DF set from",
    5: "Source Route failed from",
    13: "Packet filtered from",
    14: "Precedence violation from",
    15: "precedence cut off from",
}


def _name_part(hostname: str | None) -> str:
    # None: no reverse lookup requested; "": the lookup found nothing.
    if hostname is None:
        return ""
    return f"name={hostname or 'UNKNOWN'}"


def format_time_exceeded(src_addr: str, code: int, hostname: str | None = None) -> str:
    """Line for an ICMP time exceeded message (no trailing newline).

    `hostname` is None when names are not looked up, "" when the lookup failed.
    """
    if code == ICMP_EXC_TTL:
        text = f"TTL 0 during transit from ip={src_addr}"
    elif code == ICMP_EXC_FRAGTIME:
        text = f"TTL 0 during reassembly from ip={src_addr}"
    else:
        text = ""
    return text + _name_part(hostname)


def format_unreachable(src_addr: str, code: int, hostname: str | None = None) -> str:
    """Line for an ICMP destination unreachable message (no trailing newline).

    `hostname` is None when names are not looked up, "" when the lookup failed.
    """
    message = _UNREACH_MESSAGES.get(code)
    if message is not None:
        text = f"ICMP {message} ip={src_addr}"
    else:
        text = f"ICMP Unreachable type={code} from ip={src_addr}"
    return text + _name_part(hostname)