"""Report lines printed by the port scanner."""

from __future__ import annotations

_FLAG_LETTERS = "FSRPAYXY"


def tcp_flags_string(flags: int) -> str:
    """Return an 8-character flag view: a letter for each set bit, '.' otherwise."""
    return "".join(
        letter if flags & (1 << bit) else "." for bit, letter in enumerate(_FLAG_LETTERS)
    )


def format_tcp_reply(
    port: int, name: str, flags: int, ttl: int, ip_id: int, win: int, length: int
) -> str:
    """Line for a TCP reply; the service name is cut or padded to 11 characters."""
    return (
        f"{port:5d} {name[:11]:<11}: {tcp_flags_string(flags)} "
        f"{ttl:3d} {ip_id:5d} {win:5d} {length:5d}"
    )


def format_icmp_reply(
    port: int, ttl: int, length: int, ip_id: int, icmp_type: int, icmp_code: int, gateway: str
) -> str:
    """Line for an ICMP error quoting a probe, aligned with the TCP lines."""
    return (
        f"{port:5d}:{' ' * 22}{ttl:3d} {length:5d} {ip_id:5d}   "
        f"(ICMP {icmp_type:3d} {icmp_code:3d} from {gateway})"
    )