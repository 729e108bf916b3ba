"""vecdiff: differential-testing oracle for multi-back-end vector libraries.

A vector library that implements the same operation for many instruction
sets (and emulates missing instructions on the weaker ones) has to produce
the same answers on every back-end.  vecdiff records what each back-end
computed and compares the records:

- :class:`ResultsSet` captures every vector value one back-end computed for
  one test case, with a per-value tolerance and source location.
- :func:`results_equal` compares two results sets and reports every
  structural or numeric mismatch to a :class:`DiagnosticSink`.
- :class:`ResultAggregator` tallies the verdicts of a suite run.
- :class:`BackendRun` and :func:`compare_runs` drive the reference-vs-each
  comparison of whole suites.

Example::

    import vecdiff

    ref = vecdiff.ResultsSet("add")
    r = ref.push("float32", 4, __file__, 10)
    for i, v in enumerate([1.0, 2.0, 3.0, 4.0]):
        r.set_value(i, v)

    sink = vecdiff.DiagnosticSink()
    ok = vecdiff.results_equal(ref, "sse2", other, "neon", sink)
    print(sink)

Environment Variables
---------------------
``VECDIFF_LOG_LEVEL``
    Set to ``DEBUG`` to log every mismatch.  Default: ``WARNING``.
``VECDIFF_SHOW_HEX``
    Set to ``1`` to include raw element bytes in value diagnostics.
``VECDIFF_DEFAULT_PRECISION``
    Initial allowed error in ULPs for new results sets.
``VECDIFF_REFERENCE_ARCH``
    Default label of the reference back-end.
"""

from __future__ import annotations

__version__ = "0.1.0"

from vecdiff._logging import set_log_level
from vecdiff.comparator import (
    Diagnostic,
    DiagnosticKind,
    DiagnosticSink,
    results_equal,
    ulp_distance,
)
from vecdiff.config import OracleConfig, load_config
from vecdiff.harness import (
    BackendRun,
    CaseOutcome,
    RunComparison,
    compare_runs,
    format_report,
)
from vecdiff.results import Result, ResultsSet
from vecdiff.suite import ResultAggregator
from vecdiff.elements import ElementType

__all__ = [
    "__version__",
    # Recording
    "ElementType",
    "Result",
    "ResultsSet",
    # Comparison
    "Diagnostic",
    "DiagnosticKind",
    "DiagnosticSink",
    "results_equal",
    "ulp_distance",
    "ResultAggregator",
    # Suite runs
    "BackendRun",
    "CaseOutcome",
    "RunComparison",
    "compare_runs",
    "format_report",
    # Configuration
    "OracleConfig",
    "load_config",
    "set_log_level",
]
