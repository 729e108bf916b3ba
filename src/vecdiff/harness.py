"""Multi-back-end runs and their comparison against a reference.

A :class:`BackendRun` collects the results sets one back-end produced for
every test case of a suite.  :func:`compare_runs` compares a reference run
with each other run, test case by test case, tallies the verdicts in a
:class:`~vecdiff.suite.ResultAggregator` and returns a
:class:`RunComparison` that :func:`format_report` renders.

Usage::

    ref = BackendRun("sse2")
    neon = BackendRun("neon")
    for run in (ref, neon):
        results = run.new_results_set("permute_bytes16")
        ...  # push the values this back-end computed

    comparison = compare_runs(ref, [neon])
    print(format_report(comparison))
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, Iterator, List, Optional

from vecdiff._exceptions import ContractError
from vecdiff._logging import get_logger
from vecdiff.comparator import (
    Diagnostic,
    DiagnosticKind,
    DiagnosticSink,
    results_equal,
)
from vecdiff.config import OracleConfig, load_config
from vecdiff.results import ResultsSet
from vecdiff.suite import ResultAggregator

logger = get_logger(__name__)


class BackendRun:
    """Every results set one back-end produced, keyed by test case name.

    Args:
        arch: Back-end label.  Defaults to ``VECDIFF_REFERENCE_ARCH``.
    """

    def __init__(self, arch: Optional[str] = None) -> None:
        if arch is None:
            arch = load_config().reference_arch
        self.arch = arch
        self._sets: Dict[str, ResultsSet] = {}

    def new_results_set(self, name: str, precision_ulp: Optional[int] = None) -> ResultsSet:
        """Create and register the results set of test case *name*."""
        if name in self._sets:
            raise ContractError(
                f"Test case '{name}' already recorded for back-end '{self.arch}'"
            )
        results = ResultsSet(name, precision_ulp=precision_ulp)
        self._sets[name] = results
        return results

    def get(self, name: str) -> Optional[ResultsSet]:
        return self._sets.get(name)

    def names(self) -> List[str]:
        return list(self._sets)

    def __contains__(self, name: object) -> bool:
        return name in self._sets

    def __iter__(self) -> Iterator[ResultsSet]:
        return iter(list(self._sets.values()))

    def __len__(self) -> int:
        return len(self._sets)


@dataclass
class CaseOutcome:
    """Verdict for one test case on one pair of back-ends."""

    name: str
    reference_arch: str
    arch: str
    passed: bool
    num_diagnostics: int = 0
    num_results: int = 0


@dataclass
class RunComparison:
    """Everything :func:`compare_runs` found."""

    outcomes: List[CaseOutcome] = field(default_factory=list)
    aggregator: ResultAggregator = field(default_factory=ResultAggregator)
    sink: DiagnosticSink = field(default_factory=DiagnosticSink)

    @property
    def success(self) -> bool:
        return self.aggregator.success()

    def failed(self) -> List[CaseOutcome]:
        return [o for o in self.outcomes if not o.passed]


def _missing(name: str, ref_arch: str, arch: str, absent_from: str) -> Diagnostic:
    return Diagnostic(
        DiagnosticKind.STRUCTURE,
        f"{name}: {ref_arch} vs {arch}: test case missing from {absent_from}",
    )


def compare_runs(
    reference: BackendRun,
    others: Iterable[BackendRun],
    sink: Optional[DiagnosticSink] = None,
    aggregator: Optional[ResultAggregator] = None,
    config: Optional[OracleConfig] = None,
) -> RunComparison:
    """Compare *reference* against each run in *others*.

    Every test case is compared with its own sink; the sinks are merged into
    *sink* in order.  A test case recorded by only one side of a pair is a
    structural failure.

    Args:
        reference: The run every other run is checked against.
        others: Runs of the other back-ends.
        sink: Receives all diagnostics.  A new one is created if omitted.
        aggregator: Receives one verdict per compared test case.
        config: Reporting options; read from the environment if omitted.
    """
    if config is None:
        config = load_config()
    comparison = RunComparison(
        sink=sink if sink is not None else DiagnosticSink(),
        aggregator=aggregator if aggregator is not None else ResultAggregator(),
    )

    for other in others:
        logger.info("Comparing %s against %s...", other.arch, reference.arch)
        for ref_set in reference:
            case_sink = DiagnosticSink()
            other_set = other.get(ref_set.name)
            if other_set is None:
                case_sink.add(_missing(ref_set.name, reference.arch, other.arch, other.arch))
                passed = False
            else:
                passed = results_equal(
                    ref_set, reference.arch, other_set, other.arch, case_sink, config,
                )
            comparison.outcomes.append(CaseOutcome(
                name=ref_set.name,
                reference_arch=reference.arch,
                arch=other.arch,
                passed=passed,
                num_diagnostics=len(case_sink),
                num_results=ref_set.num_results(),
            ))
            comparison.aggregator.add_result(passed)
            comparison.sink.extend(case_sink)

        for name in other.names():
            if name in reference:
                continue
            case_sink = DiagnosticSink()
            case_sink.add(_missing(name, reference.arch, other.arch, reference.arch))
            comparison.outcomes.append(CaseOutcome(
                name=name,
                reference_arch=reference.arch,
                arch=other.arch,
                passed=False,
                num_diagnostics=1,
            ))
            comparison.aggregator.add_result(False)
            comparison.sink.extend(case_sink)

    logger.info(
        "  %d passed, %d failed",
        comparison.aggregator.num_success, comparison.aggregator.num_failure,
    )
    return comparison


def format_report(comparison: RunComparison) -> str:
    """Format a run comparison as a human-readable report."""
    lines = [
        "Differential Test Report",
        "=" * 70,
        f"{'Test case':<30} {'Back-ends':<24} {'Status':<8} {'Diffs':>6}",
        "-" * 70,
    ]

    for o in comparison.outcomes:
        status = "PASS" if o.passed else "FAIL"
        pair = f"{o.reference_arch} vs {o.arch}"
        lines.append(f"{o.name:<30} {pair:<24} {status:<8} {o.num_diagnostics:>6}")

    lines.append("-" * 70)
    agg = comparison.aggregator
    lines.append(
        f"Total: {agg.total} | Passed: {agg.num_success} | Failed: {agg.num_failure}"
    )

    if len(comparison.sink):
        lines.append("")
        lines.append("Mismatches:")
        for line in comparison.sink.lines():
            lines.append(f"  {line}")

    lines.append("=" * 70)
    return "\n".join(lines)
