"""Pass/fail tally over many comparisons."""

from __future__ import annotations


class ResultAggregator:
    """Counts comparison verdicts for one test-suite run.

    Example::

        tally = ResultAggregator()
        for name in test_cases:
            tally.add_result(results_equal(ref[name], "sse2", other[name], "neon", sink))
        sys.exit(0 if tally.success() else 1)
    """

    def __init__(self) -> None:
        self._num_success = 0
        self._num_failure = 0

    @property
    def num_success(self) -> int:
        return self._num_success

    @property
    def num_failure(self) -> int:
        return self._num_failure

    @property
    def total(self) -> int:
        return self._num_success + self._num_failure

    def add_result(self, success: bool) -> None:
        if success:
            self._num_success += 1
        else:
            self._num_failure += 1

    def merge(self, other: "ResultAggregator") -> None:
        """Add another tally's counts to this one."""
        self._num_success += other.num_success
        self._num_failure += other.num_failure

    def success(self) -> bool:
        """True iff no failure was recorded."""
        return self._num_failure == 0

    def __repr__(self) -> str:
        return (
            f"ResultAggregator(success={self._num_success}, "
            f"failure={self._num_failure})"
        )
