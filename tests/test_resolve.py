import socket
from unittest import mock

import pytest

from hpingtools.resolve import ResolveError, resolve_addr


def test_literal_address():
    assert resolve_addr("1.2.3.4") == "1.2.3.4"
    assert resolve_addr("5.6.7.8") == "5.6.7.8"


def test_short_literal_form_is_normalised():
    assert resolve_addr("127.1") == "127.0.0.1"


def test_literal_does_not_use_name_lookup():
    with mock.patch("socket.gethostbyname", side_effect=AssertionError) as lookup:
        assert resolve_addr("0.0.0.0") == "0.0.0.0"
    assert lookup.call_count == 0


def test_name_lookup():
    with mock.patch("socket.gethostbyname", return_value="192.0.2.7") as lookup:
        assert resolve_addr("host.example.com") == "192.0.2.7"
    lookup.assert_called_once_with("host.example.com")


def test_unresolvable_name():
    with mock.patch("socket.gethostbyname", side_effect=socket.gaierror("no")):
        with pytest.raises(ResolveError) as info:
            resolve_addr("nowhere.example.com")
    assert info.value.hostname == "nowhere.example.com"
    assert "Unable to resolve 'nowhere.example.com'" in str(info.value)