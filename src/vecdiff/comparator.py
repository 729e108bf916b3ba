"""Comparison of two results sets produced by different back-ends.

:func:`results_equal` walks two :class:`~vecdiff.results.ResultsSet` objects
in lockstep, section by section and record by record, and reports every
difference it finds to a :class:`DiagnosticSink`.  It never stops at the
first difference: a single pass should surface as many real divergences as
possible.

Three kinds of diagnostics are produced:

- ``structure``: the two sets are not aligned (different test case, section
  count or record count).  This points at the harness, not at the code
  under test.
- ``record``: an aligned pair of records disagrees on element type or
  length.
- ``value``: one element differs beyond the pair's tolerance.

Integers must match exactly.  Floating-point elements may differ by up to
``max(a.precision_ulp, b.precision_ulp)`` ULPs; ``+0.0`` and ``-0.0`` are
equal if either record set ``fp_zero_equal``; two NaNs are equal.
"""

from __future__ import annotations

import enum
import math
import struct
from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Optional, TextIO, Tuple

from vecdiff._exceptions import ContractError
from vecdiff._logging import get_logger
from vecdiff.config import OracleConfig, load_config
from vecdiff.results import Result, ResultsSet
from vecdiff.elements import ElementType

logger = get_logger(__name__)


# ---------------------------------------------------------------------------
# Diagnostics
# ---------------------------------------------------------------------------


class DiagnosticKind(enum.Enum):
    """Category of a reported mismatch."""

    STRUCTURE = "structure"
    RECORD = "record"
    VALUE = "value"


@dataclass(frozen=True)
class Diagnostic:
    """One reported mismatch."""

    kind: DiagnosticKind
    message: str
    section: Optional[int] = None
    seq: Optional[int] = None
    index: Optional[int] = None
    values: Optional[Tuple[Any, Any]] = None

    def line(self) -> str:
        return f"[{self.kind.value}] {self.message}"


class DiagnosticSink:
    """Append-only, ordered collection of diagnostics.

    Use one sink per comparison when comparisons run concurrently and merge
    them afterwards with :meth:`extend`.
    """

    def __init__(self) -> None:
        self._entries: List[Diagnostic] = []

    def add(self, diagnostic: Diagnostic) -> None:
        self._entries.append(diagnostic)

    def extend(self, other: "DiagnosticSink") -> None:
        self._entries.extend(other)

    def of_kind(self, kind: DiagnosticKind) -> List[Diagnostic]:
        return [d for d in self._entries if d.kind is kind]

    def lines(self) -> List[str]:
        return [d.line() for d in self._entries]

    def write_to(self, stream: TextIO) -> None:
        for line in self.lines():
            stream.write(line + "\n")

    def __iter__(self) -> Iterator[Diagnostic]:
        return iter(list(self._entries))

    def __len__(self) -> int:
        return len(self._entries)

    def __str__(self) -> str:
        return "\n".join(self.lines())


# ---------------------------------------------------------------------------
# Floating-point distance
# ---------------------------------------------------------------------------

# Signed integer view of each float type and the mask clearing its sign bit
_FLOAT_BITS: Dict[ElementType, Tuple[str, int]] = {
    ElementType.FLOAT32: ("=i", 0x7FFFFFFF),
    ElementType.FLOAT64: ("=q", 0x7FFFFFFFFFFFFFFF),
}


def _ordinal(raw: bytes, etype: ElementType) -> int:
    """Map float bits onto integers that preserve the ordering of values.

    Adjacent representable values map to adjacent integers; both zeros map
    to 0.
    """
    fmt, mask = _FLOAT_BITS[etype]
    (bits,) = struct.unpack(fmt, raw)
    return bits if bits >= 0 else -(bits & mask)


def ulp_distance(a_raw: bytes, b_raw: bytes, etype: ElementType) -> int:
    """Number of representable steps between two finite or infinite floats."""
    return abs(_ordinal(a_raw, etype) - _ordinal(b_raw, etype))


def floats_match(
    a_raw: bytes,
    b_raw: bytes,
    etype: ElementType,
    precision_ulp: int,
    zero_equal: bool,
) -> bool:
    """Whether two float elements are equal under the given tolerance."""
    (a,) = struct.unpack(etype.format, a_raw)
    (b,) = struct.unpack(etype.format, b_raw)
    if math.isnan(a) or math.isnan(b):
        return math.isnan(a) and math.isnan(b)
    if a == 0 and b == 0:
        # zeros of opposite sign are one step apart
        return a_raw == b_raw or zero_equal or precision_ulp >= 1
    return ulp_distance(a_raw, b_raw, etype) <= precision_ulp


# ---------------------------------------------------------------------------
# Comparison
# ---------------------------------------------------------------------------


class _Walk:
    """State of one comparison: labels, sink and whether anything failed."""

    def __init__(
        self,
        name: str,
        a_arch: str,
        b_arch: str,
        sink: DiagnosticSink,
        config: OracleConfig,
    ) -> None:
        self.prefix = f"{name}: {a_arch} vs {b_arch}"
        self.sink = sink
        self.config = config
        self.failed = False

    def report(self, kind: DiagnosticKind, message: str, **fields: Any) -> None:
        diagnostic = Diagnostic(kind, f"{self.prefix}: {message}", **fields)
        self.sink.add(diagnostic)
        self.failed = True
        logger.debug("%s", diagnostic.line())


def _location(ra: Result, rb: Result) -> str:
    if ra.source_location == rb.source_location:
        return ra.source_location
    return f"{ra.source_location} / {rb.source_location}"


def _compare_records(walk: _Walk, section: int, ra: Result, rb: Result) -> None:
    where = f"{_location(ra, rb)}: section {section}, seq {ra.seq}"
    if ra.type is not rb.type:
        walk.report(
            DiagnosticKind.RECORD,
            f"{where}: type differs ({ra.type.value} vs {rb.type.value})",
            section=section, seq=ra.seq,
        )
        return
    if ra.length != rb.length:
        walk.report(
            DiagnosticKind.RECORD,
            f"{where}: length differs ({ra.length} vs {rb.length})",
            section=section, seq=ra.seq,
        )
        return

    etype = ra.type
    precision = max(ra.effective_precision, rb.effective_precision)
    zero_equal = ra.fp_zero_equal or rb.fp_zero_equal
    a_values = ra.values()
    b_values = rb.values()

    for i in range(ra.length):
        a_raw = ra.element_bytes(i)
        b_raw = rb.element_bytes(i)
        if etype.is_float:
            if floats_match(a_raw, b_raw, etype, precision, zero_equal):
                continue
        elif a_raw == b_raw:
            continue

        va, vb = a_values[i], b_values[i]
        message = f"{where}, element {i}: values differ ({va!r}, {vb!r})"
        if etype.is_float:
            message += f" [{etype.value}, precision {precision} ULP]"
        if walk.config.show_hex:
            message += f" [hex {a_raw.hex()} vs {b_raw.hex()}]"
        walk.report(
            DiagnosticKind.VALUE, message,
            section=section, seq=ra.seq, index=i, values=(va, vb),
        )


def results_equal(
    a: ResultsSet,
    a_arch: str,
    b: ResultsSet,
    b_arch: str,
    sink: DiagnosticSink,
    config: Optional[OracleConfig] = None,
) -> bool:
    """Compare two results sets of the same test case.

    Args:
        a: Results of the first back-end (usually the reference).
        a_arch: Label of the first back-end, used in diagnostics.
        b: Results of the second back-end.
        b_arch: Label of the second back-end.
        sink: Receives one diagnostic per mismatch.
        config: Reporting options; read from the environment if omitted.

    Returns:
        ``True`` if no mismatch of any kind was found.

    Raises:
        ContractError: If *a*, *b* or *sink* is ``None``.
    """
    if a is None or b is None:
        raise ContractError("results_equal() requires two results sets, got None")
    if sink is None:
        raise ContractError("results_equal() requires a diagnostic sink, got None")
    if config is None:
        config = load_config()

    walk = _Walk(a.name, a_arch, b_arch, sink, config)

    if a.name != b.name:
        walk.report(
            DiagnosticKind.STRUCTURE,
            f"test case differs ({a.name!r} vs {b.name!r})",
        )
        return False

    a_sections = a.sections
    b_sections = b.sections
    if len(a_sections) != len(b_sections):
        walk.report(
            DiagnosticKind.STRUCTURE,
            f"section count differs ({len(a_sections)} vs {len(b_sections)})",
        )
        return False

    for s, (sa, sb) in enumerate(zip(a_sections, b_sections)):
        if len(sa) != len(sb):
            walk.report(
                DiagnosticKind.STRUCTURE,
                f"section {s}: result count differs ({len(sa)} vs {len(sb)})",
                section=s,
            )
            continue
        for ra, rb in zip(sa, sb):
            _compare_records(walk, s, ra, rb)

    logger.info(
        "%s: %s", walk.prefix, "FAIL" if walk.failed else "PASS",
    )
    return not walk.failed
