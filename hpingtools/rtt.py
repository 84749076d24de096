"""Round trip time bookkeeping for sent probes."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

S_SENT = 0
S_RECV = 1

_log = logging.getLogger(__name__)


@dataclass
class RttStats:
    """Running minimum, maximum and average of round trip times (ms)."""

    min: float = 0.0
    max: float = 0.0
    avg: float = 0.0
    count: int = 0

    def update(self, ms_delay: float) -> None:
        """Account for one more round trip time."""
        if self.min == 0 or ms_delay < self.min:
            self.min = ms_delay
        if self.max == 0 or ms_delay > self.max:
            self.max = ms_delay
        self.count += 1
        n = self.count
        self.avg = self.avg * (n - 1) / n + ms_delay / n


@dataclass
class DelayEntry:
    """One sent probe: sequence number, source port, send time and status."""

    seq: int = -1
    src: int = 0
    sec: int = 0
    usec: int = 0
    status: int = S_SENT


@dataclass
class DelayTable:
    """Fixed size ring of sent probes, used to time their replies."""

    size: int
    entries: list[DelayEntry] = field(init=False)
    index: int = field(default=0, init=False)
    stats: RttStats = field(default_factory=RttStats, init=False)

    def __post_init__(self) -> None:
        if self.size <= 0:
            raise ValueError(f"table size must be positive, got {self.size}")
        self.entries = [DelayEntry() for _ in range(self.size)]

    def add(self, seq: int, src: int, sec: int, usec: int, status: int) -> None:
        """Record a sent probe, overwriting the oldest slot."""
        self.entries[self.index % self.size] = DelayEntry(seq, src, sec, usec, status)
        self.index += 1

    def _find(self, seq: int, recvport: int) -> DelayEntry | None:
        if seq != 0:
            return next((e for e in self.entries if e.seq == seq), None)
        return next((e for e in self.entries if e.src == recvport), None)

    def lookup(self, seq: int, recvport: int, now_sec: int, now_usec: int) -> tuple[int, int, float]:
        """Match a reply and return (previous status, sequence, delay in ms).

        A non-zero `seq` is matched by sequence number, otherwise the entry is
        found by source port and its sequence number is returned. The matched
        entry is marked received and the delay feeds `stats`. An unmatched
        reply gives status 0 and a delay of 0.
        """
        entry = self._find(seq, recvport)
        if entry is None:
            return 0, seq, 0.0
        if seq == 0:
            seq = entry.seq
        status = entry.status
        entry.status = S_RECV
        sec_delay = now_sec - entry.sec
        usec_delay = now_usec - entry.usec
        if sec_delay == 0 and usec_delay < 0:
            usec_delay += 1_000_000
        ms_delay = sec_delay * 1000 + usec_delay / 1000
        self.stats.update(ms_delay)
        if ms_delay < 0:
            _log.warning(
                "negative round trip time: seq=%d status=%d sec_delay=%d usec_delay=%d ms=%f",
                seq, status, sec_delay, usec_delay, ms_delay,
            )
        return status, seq, ms_delay