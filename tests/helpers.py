"""Builders shared by the test modules."""

from __future__ import annotations

import struct
from typing import Iterable, Sequence

from vecdiff import ElementType, ResultsSet


def push_values(
    results: ResultsSet,
    etype: ElementType,
    values: Sequence,
    line: int = 1,
    file: str = "test_case.cc",
):
    """Push one record and fill it with *values*."""
    r = results.push(etype, len(values), file, line)
    for i, v in enumerate(values):
        r.set_value(i, v)
    return r


def f32_step(value: float, steps: int) -> float:
    """The float32 *steps* representable values above *value* (value > 0)."""
    (bits,) = struct.unpack("=I", struct.pack("=f", value))
    (stepped,) = struct.unpack("=f", struct.pack("=I", bits + steps))
    return stepped


def f64_step(value: float, steps: int) -> float:
    """The float64 *steps* representable values above *value* (value > 0)."""
    (bits,) = struct.unpack("=Q", struct.pack("=d", value))
    (stepped,) = struct.unpack("=d", struct.pack("=Q", bits + steps))
    return stepped


def build(name: str, sections: Iterable[Iterable[tuple]]) -> ResultsSet:
    """Build a results set from ``[[(etype, values), ...], ...]``.

    A ``sync_archs()`` call separates consecutive sections.
    """
    results = ResultsSet(name)
    for s, section in enumerate(sections):
        if s:
            results.sync_archs()
        for line, (etype, values) in enumerate(section, start=1):
            push_values(results, etype, values, line=line)
    return results
