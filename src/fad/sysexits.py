"""Subset of the BSD sysexits(3) codes used by fad."""

EX_OK = 0
EX_USAGE = 64
EX_OSFILE = 72
