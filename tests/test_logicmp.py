import pytest

from hpingtools.logicmp import format_time_exceeded, format_unreachable


def test_time_exceeded_transit():
    assert format_time_exceeded("10.0.0.1", 0) == "TTL 0 during transit from ip=10.0.0.1"


def test_time_exceeded_reassembly_with_name():
    line = format_time_exceeded("10.0.0.1", 1, "gw.example.com")
    assert line == "TTL 0 during reassembly from ip=10.0.0.1name=gw.example.com"


def test_time_exceeded_unknown_code_only_name():
    assert format_time_exceeded("10.0.0.1", 7) == ""
    assert format_time_exceeded("10.0.0.1", 7, "") == "name=UNKNOWN"


def test_unreachable_port():
    assert format_unreachable("192.0.2.5", 3) == "ICMP Port Unreachable from ip=192.0.2.5"


def test_unreachable_filtered_unknown_name():
    line = format_unreachable("192.0.2.5", 13, "")
    assert line == "ICMP Packet filtered from ip=192.0.2.5name=UNKNOWN"


@pytest.mark.parametrize("code", [6, 7, 8, 9, 10, 11, 12, 20])
def test_unreachable_generic(code):
    line = format_unreachable("192.0.2.5", code)
    assert line == f"ICMP Unreachable type={code} from ip=192.0.2.5"


@pytest.mark.parametrize("code", [0, 1, 2, 3, 4, 5, 13, 14, 15])
def test_unreachable_known_codes_have_message(code):
    line = format_unreachable("192.0.2.5", code)
    assert line.startswith("ICMP ")
    assert line.endswith(" ip=192.0.2.5")
    assert "type=" not in line