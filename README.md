# hpingtools

Building blocks for packet crafting and network probing tools. It is pure
Python and has no runtime dependencies.

## What is inside

- `hpingtools.options`: command-line option parsing. `parse_options(argv)`
  takes the arguments without the program name and returns an `Options`
  dataclass. `parse_route(text)` turns `"[ptr:]addr/addr/..."` into the bytes
  of a source route IP option. Invalid input raises `OptionError`. A help,
  version, `--tos help`, `--icmp-help` or `--route-help` request stops parsing
  and is recorded in `Options.help_topic`. Warnings, such as an MTU that was
  clamped to 65535, are collected in `Options.warnings`.
- `hpingtools.rapd`: turns raw IP, IP option, TCP, TCP option, UDP, ICMP, IGRP
  and IGRP entry headers, and payload data, into APD text. The functions are
  `ip_to_apd`, `ipopt_to_apd`, `tcp_to_apd`, `tcpopt_to_apd`, `udp_to_apd`,
  `icmp_to_apd`, `igrp_to_apd`, `igrpentry_to_apd` and `data_to_apd`.
  `packet_to_apd` joins a sequence of `Layer(LayerType, bytes)` values into one
  description. For the IP and TCP layers you can pass default headers, and
  fields equal to the defaults are left out.
- `hpingtools.scanports`: `parse_ports(spec, known_ports)` returns the set of
  ports selected by a specification such as `"1-1024,!80,known"`.
  `port_to_name(port)` returns the system service name for a port, or `""`
  when there is none.
- `hpingtools.scanreport`: scan result lines from `format_tcp_reply` and
  `format_icmp_reply`. `tcp_flags_string` gives an 8-character flag view.
- `hpingtools.listen`: `SignatureListener(sign, safe)` looks for a signature
  in captured frames. `feed(packet, linkhdr_size)` returns a `ListenEvent`
  that holds the payload after the signature. In safe mode, a packet whose IP
  id is out of order gives a restart request (`restart_from`) in its place.
  `memstr` finds a byte string.
- `hpingtools.rtt`: `DelayTable` is a fixed-size ring of sent probes.
  `lookup` matches a reply by sequence number or by source port, and returns
  the round-trip time. `RttStats` keeps the running minimum, maximum and
  average.
- `hpingtools.relid`: `IdRelativizer.relativize(seqnum, ip_id)` gives the IP
  id increment per sequence step.
- `hpingtools.logicmp`: text lines for ICMP time-exceeded replies
  (`format_time_exceeded`) and ICMP unreachable replies
  (`format_unreachable`).
- `hpingtools.resolve`: `resolve_addr(hostname)` returns a dotted IPv4
  address, or raises `ResolveError`.
- `hpingtools.rc4`: `Rc4Random`, an RC4-style generator of 32-bit numbers.
  `Rc4Random.identity()` is reproducible. `Rc4Random.from_entropy()` is seeded
  from the OS random source. It also has `rand()` and `seed(data)`.
- Arbitrary precision integer helpers that work on plain Python integers:
  - `hpingtools.bignum`: truncating division (`tdiv_qr`, `tdiv_q`, `tdiv_r`),
    non-negative `mod`, `powm`, `power`, `isqrt`, binary `gcd`, `factorial`
    (which by convention returns 0 for 0), `cmp` and `cmpabs`.
  - `hpingtools.bigbits`: sign-magnitude bit operations (`bits`, `set_bit`,
    `clear_bit`, `test_bit`, `lshift`, `rshift`, `bitand`), `to_float` and
    `from_float`, and `random_bignum`.
  - `hpingtools.bigstr`: `to_str` and `from_str` for bases 2 to 36. Base 0
    guesses the base from a `0x`, `0b` or `0` prefix.
  - `hpingtools.bigconv`: digit tables and size estimates.

## Example

```python
from hpingtools.bigstr import to_str, from_str
from hpingtools.bignum import powm
from hpingtools.scanreport import tcp_flags_string

assert to_str(from_str("0xff", 0), 10) == "255"
assert powm(4, 13, 497) == 445
print(tcp_flags_string(0x12))  # ".S..A..."
```

## What it does not do

This package provides parsing, formatting and bookkeeping pieces only:

- It does not open raw sockets, and it does not send or capture packets.
- It has no command-line program.
- It has no scanning loop. The scan, listen and RTT modules work on data you
  give them.

## Running the tests

```
pip install -e .[test]
pytest
```