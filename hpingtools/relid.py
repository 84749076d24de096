"""Relative IP id computation between successive replies."""

from __future__ import annotations


class IdRelativizer:
    """Turns absolute IP ids into increments per sequence step."""

    def __init__(self) -> None:
        self.last_seq = 0
        self.last_id: int | None = None
        self.out_of_sequence = 0

    def relativize(self, seqnum: int, ip_id: int) -> int | None:
        """Return the id increment per sequence step since the last reply.

        Returns None for the first reply and for replies that are not newer
        than the last one; the latter are counted in `out_of_sequence`.
        """
        if self.last_id is None:
            self.last_id = ip_id
            self.last_seq = seqnum
            return None
        seq_diff = seqnum - self.last_seq
        if seq_diff <= 0:
            self.out_of_sequence += 1
            return None
        if self.last_id > ip_id:
            relative = ((65535 - self.last_id) + ip_id) // seq_diff
        else:
            relative = (ip_id - self.last_id) // seq_diff
        self.last_id = ip_id
        self.last_seq = seqnum
        return relative