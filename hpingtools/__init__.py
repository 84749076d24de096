"""Packet description, option parsing, probe bookkeeping and bignum utilities."""

__version__ = "0.1.0"