"""
Parse the per-interface traffic counters the kernel exposes in /proc/net/dev.

The file has two header lines followed by one line per interface:

    Inter-|   Receive                            ...|  Transmit
     face |bytes    packets errs drop fifo frame ...|bytes    packets ...
        lo: 6459630   58071    0    0    0     0 ...  6459630   58071 ...

Header lines carry no ':' and are skipped.
"""

import logging
from collections.abc import Iterable

from dacite import Config, from_dict

from netrate.data.net_dev import Sample
from netrate.util import conversion

logger = logging.getLogger(__name__)

DEFAULT_PATH = "/proc/net/dev"

RECEIVE_FIELDS = [
    "bytes",
    "packets",
    "errs",
    "drop",
    "fifo",
    "frame",
    "compressed",
    "multicast",
]

TRANSMIT_FIELDS = [
    "bytes",
    "packets",
    "errs",
    "drop",
    "fifo",
    "colls",
    "carrier",
    "compressed",
]


def _map_fields(names: list[str], values: list[str]) -> dict[str, int]:
    # Short lines leave the trailing counters at zero
    return {
        name: conversion.to_int(values[i] if i < len(values) else None)
        for i, name in enumerate(names)
    }


def parse_line(line: str) -> Sample | None:
    if ":" not in line:
        return None

    name, _, rest = line.partition(":")
    interface = name.strip()
    if not interface:
        return None

    values = rest.split()
    n_receive = len(RECEIVE_FIELDS)
    data = {
        "interface": interface,
        "receive": _map_fields(RECEIVE_FIELDS, values[:n_receive]),
        "transmit": _map_fields(TRANSMIT_FIELDS, values[n_receive:]),
    }
    return from_dict(data_class=Sample, data=data, config=Config(cast=[int]))


def parse_net_dev(
    lines: Iterable[str], interfaces: list[str] | None = None
) -> dict[str, Sample]:
    """
    Build a snapshot keyed by interface name.

    When `interfaces` is not None only the named interfaces are kept. A
    repeated interface replaces the earlier entry.
    """
    snapshot: dict[str, Sample] = {}
    for line in lines:
        sample = parse_line(line)
        if sample is None:
            continue
        if interfaces is not None and sample.interface not in interfaces:
            continue
        snapshot[sample.interface] = sample
    return snapshot


def read_net_dev(
    path: str = DEFAULT_PATH, interfaces: list[str] | None = None
) -> dict[str, Sample]:
    """
    Read and parse the counter file at `path`.

    Raises OSError if the file cannot be opened or read. The file is closed
    before returning on every path.
    """
    with open(path, "r", encoding="utf-8", errors="replace") as fh:
        snapshot = parse_net_dev(fh, interfaces=interfaces)
    logger.debug(f"[read_net_dev] - read {len(snapshot)} interface(s) from {path}")
    return snapshot
