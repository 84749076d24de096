import struct

import pytest

from hpingtools.rapd import (
    Layer,
    LayerType,
    data_to_apd,
    icmp_to_apd,
    igrp_to_apd,
    igrpentry_to_apd,
    ip_to_apd,
    ipopt_to_apd,
    packet_to_apd,
    tcp_to_apd,
    tcpopt_to_apd,
    udp_to_apd,
)


def ip_header(ihl=5, version=4, tos=0, tot_len=40, ip_id=1, frag=0, ttl=64,
              proto=6, check=0x1234, src=bytes([10, 0, 0, 1]), dst=bytes([10, 0, 0, 2])):
    return struct.pack("!BBHHHBBH4s4s", (version << 4) | ihl, tos, tot_len, ip_id,
                       frag, ttl, proto, check, src, dst)


def tcp_header(sport=1000, dport=80, seq=5, ack=6, off=5, x2=0, flags=0x12,
               win=512, check=0xabcd, urp=0):
    return struct.pack("!HHIIBBHHH", sport, dport, seq, ack, (off << 4) | x2,
                       flags, win, check, urp)


def test_ip_with_equal_default_shows_only_mandatory_fields():
    header = ip_header()
    assert ip_to_apd(header, header) == (
        "ip(totlen=40,fragoff=0,proto=6,cksum=0x1234,saddr=10.0.0.1,daddr=10.0.0.2)+"
    )


def test_ip_without_default_shows_everything():
    text = ip_to_apd(ip_header(tos=0x10, ip_id=77, ttl=33))
    assert text.startswith(f"ip(ihl=0x{5:x},ver=0x{4:x},tos=0x{0x10:02x},")
    assert f"id={77}," in text
    assert f"ttl={33}," in text
    assert "mf=0," in text and "df=0," in text and "rf=0," in text


def test_ip_fragment_fields():
    header = ip_header(frag=0x2000 | 3)
    text = ip_to_apd(header, ip_header())
    assert f"fragoff={3 << 3}," in text
    assert "mf=1," in text
    assert "df=" not in text


def test_ip_short_header_rejected():
    with pytest.raises(ValueError):
        ip_to_apd(b"\x45\x00")


def test_ipopt_eol_and_nop():
    assert ipopt_to_apd(bytes([0])) == "ip.eol()+"
    assert ipopt_to_apd(bytes([1])) == "ip.nop()+"


def test_ipopt_record_route():
    option = bytes([7, 11, 4, 1, 2, 3, 4, 5, 6, 7, 8])
    assert ipopt_to_apd(option) == "ip.rr(ptr=4,data=1.2.3.4/5.6.7.8)+"


def test_ipopt_loose_source_route_name():
    option = bytes([131, 7, 4, 9, 9, 9, 9])
    assert ipopt_to_apd(option).startswith("ip.lsrr(ptr=4,data=9.9.9.9")


def test_ipopt_timestamp_only():
    option = bytes([68, 12, 5, 0x10]) + struct.pack("!II", 42, 43)
    text = ipopt_to_apd(option)
    assert "flags=tsonly," in text
    assert "overflow=1," in text
    assert "data=42" in text


def test_ipopt_unknown_as_hex():
    text = ipopt_to_apd(bytes([0x94, 4, 0, 0]))
    assert text.startswith("ip.unknown(hex=0x94")
    assert text.count("0x") == 4


def test_icmp_echo():
    assert icmp_to_apd(struct.pack("!BBHHH", 8, 0, 0, 7, 9)) == "icmp(type=8,code=0,id=7,seq=9)+"


def test_icmp_redirect_and_unreach():
    redirect = bytes([5, 1, 0, 0, 192, 168, 1, 1])
    assert "gw=192.168.1.1" in icmp_to_apd(redirect)
    unreach = bytes([3, 3, 0, 0, 0, 0, 0, 0])
    assert "unused=0" in icmp_to_apd(unreach)
    assert "id=" not in icmp_to_apd(unreach)


def test_udp():
    text = udp_to_apd(struct.pack("!HHHH", 53, 1024, 12, 0xbeef))
    assert text == f"udp(sport=53,dport=1024,len=12,cksum=0x{0xbeef:04x})+"


def test_tcp_with_default_hides_equal_fields():
    header = tcp_header()
    text = tcp_to_apd(header, header)
    assert "x2=" not in text and "off=" not in text and "urp=" not in text
    assert ",flags=sa," in text
    assert text.endswith(f"win=512,cksum=0x{0xabcd:04x})+")


def test_tcp_without_default_shows_all():
    text = tcp_to_apd(tcp_header(flags=0xFF, urp=9))
    assert "flags=fsrpauxy," in text
    assert f"off={5}," in text
    assert f"urp={9})+" in text


def test_tcpopt_variants():
    assert tcpopt_to_apd(struct.pack("!BBH", 2, 4, 1460)) == "tcp.mss(size=1460)+"
    assert tcpopt_to_apd(bytes([3, 3, 7])) == "tcp.wscale(shift=7)+"
    assert tcpopt_to_apd(bytes([4, 2])) == "tcp.sackperm()+"
    sack = bytes([5, 18]) + struct.pack("!IIII", 1, 2, 3, 4)
    assert tcpopt_to_apd(sack) == "tcp.sack(blocks=1-2/3-4)+"
    stamp = bytes([8, 10]) + struct.pack("!II", 100, 200)
    assert tcpopt_to_apd(stamp) == "tcp.timestamp(val=100,ecr=200)+"
    assert tcpopt_to_apd(bytes([0x99, 3, 0xab])) == "tcp.unknown(hex=9903ab)+"


def test_tcpopt_truncated_rejected():
    with pytest.raises(ValueError):
        tcpopt_to_apd(bytes([8, 10, 0]))


def test_igrp_and_entry():
    header = struct.pack("!BBHHHHH", (1 << 4) | 1, 3, 100, 1, 2, 3, 0x0102)
    text = igrp_to_apd(header)
    assert "version=1,opcode=update," in text
    assert "autosys=100," in text
    entry = bytes([1, 2, 3, 0, 1, 2, 0, 0, 9, 5, 220, 255, 1, 4])
    text = igrpentry_to_apd(entry)
    assert "dest=1.2.3," in text
    assert f"delay={0x000102}," in text
    assert f"mtu={(5 << 8) | 220}," in text
    assert text.endswith("hopcount=4)+")


def test_data_escaping_and_hex():
    text = data_to_apd(b"ab(c d")
    assert text.startswith("data(str=ab\\28c")
    assert "\\20" in text
    assert data_to_apd(b"\x01\xff", hexdata=True) == "data(hex=01ff)+"


def test_packet_joins_layers_and_trims():
    ip = ip_header()
    tcp = tcp_header()
    layers = [Layer(LayerType.IP, ip), Layer(LayerType.TCP, tcp), Layer(LayerType.DATA, b"hi")]
    text = packet_to_apd(layers, {LayerType.IP: ip, LayerType.TCP: tcp})
    assert text == ip_to_apd(ip, ip) + tcp_to_apd(tcp, tcp) + "data(str=hi)"
    assert not text.endswith("+")


def test_packet_empty_and_hexdata():
    assert packet_to_apd([]) == ""
    assert packet_to_apd([Layer(LayerType.DATA, b"\x00")], hexdata=True) == "data(hex=00)"