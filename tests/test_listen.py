import struct

import pytest

from hpingtools.listen import ListenEvent, SignatureListener, memstr

LINK = b"\x00" * 14


def make_packet(payload: bytes, ip_id: int, tot_len: int | None = None, link: bytes = LINK) -> bytes:
    if tot_len is None:
        tot_len = 20 + len(payload)
    header = struct.pack("!BBHHHBBH4s4s", 0x45, 0, tot_len, ip_id, 0, 64, 6, 0,
                         b"\x0a\x00\x00\x01", b"\x0a\x00\x00\x02")
    return link + header + payload


def test_memstr_found():
    assert memstr(b"xxabcyy", b"abc") == 2


def test_memstr_missing():
    assert memstr(b"xxabyy", b"abc") is None


def test_memstr_empty_needle():
    assert memstr(b"anything", b"") == 0


def test_payload_after_signature():
    listener = SignatureListener("hping")
    event = listener.feed(make_packet(b"junkhpingDATA", 7), len(LINK))
    assert event == ListenEvent(ip_id=7, payload=b"DATA")
    assert not event.is_restart


def test_unsigned_packet_ignored():
    listener = SignatureListener(b"hping")
    assert listener.feed(make_packet(b"nothing here", 1), len(LINK)) is None


def test_truncated_packet_ignored():
    listener = SignatureListener(b"hping")
    assert listener.feed(LINK + b"\x45" * 10, len(LINK)) is None


def test_total_length_trims_trailing_bytes():
    listener = SignatureListener(b"sig")
    packet = make_packet(b"sigABCpadding", 3, tot_len=20 + len(b"sigABC"))
    event = listener.feed(packet, len(LINK))
    assert event.payload == b"ABC"


def test_signature_beyond_total_length_not_found():
    listener = SignatureListener(b"sig")
    packet = make_packet(b"abcdefsig", 3, tot_len=20 + 4)
    assert listener.feed(packet, len(LINK)) is None


def test_safe_mode_in_sequence():
    listener = SignatureListener(b"s", safe=True)
    for ip_id in (1, 2, 3):
        event = listener.feed(make_packet(b"s" + bytes([ip_id]), ip_id), len(LINK))
        assert event.payload == bytes([ip_id])
    assert listener.expected_id == 4


def test_safe_mode_out_of_sequence_requests_restart():
    listener = SignatureListener(b"s", safe=True)
    listener.feed(make_packet(b"sA", 1), len(LINK))
    event = listener.feed(make_packet(b"sC", 3), len(LINK))
    assert event.is_restart
    assert event.restart_from == listener.expected_id
    assert event.payload == b""


def test_non_safe_accepts_any_id():
    listener = SignatureListener(b"s")
    event = listener.feed(make_packet(b"sZ", 999), len(LINK))
    assert event.payload == b"Z"
    assert listener.expected_id == 1


@pytest.mark.parametrize("link_size", [0, 4, 14])
def test_link_header_size_respected(link_size):
    listener = SignatureListener(b"key")
    packet = make_packet(b"keyvalue", 5, link=b"\xff" * link_size)
    assert listener.feed(packet, link_size).payload == b"value"