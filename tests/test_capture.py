"""Tests for vecdiff.capture: pushing torch tensors into results sets."""

from __future__ import annotations

import pytest

torch = pytest.importorskip("torch")


class TestPushTensor:
    """Tensor to result record conversion."""

    def test_flattens_and_fills(self):
        from vecdiff import ElementType, ResultsSet
        from vecdiff.capture import push_tensor

        r = push_tensor(ResultsSet("t"), torch.tensor([[1, 2], [3, 4]], dtype=torch.int16))
        assert r.type is ElementType.INT16
        assert r.length == 4
        assert r.values() == (1, 2, 3, 4)

    def test_float_values_round_trip(self):
        from vecdiff import ResultsSet
        from vecdiff.capture import push_tensor

        t = torch.tensor([0.1, -2.5, 3.0], dtype=torch.float32)
        r = push_tensor(ResultsSet("t"), t)
        assert r.values() == tuple(t.tolist())

    def test_records_caller_location(self):
        from vecdiff import ResultsSet
        from vecdiff.capture import push_tensor

        r = push_tensor(ResultsSet("t"), torch.zeros(2))
        assert r.file == __file__
        assert r.line > 0

    def test_explicit_location(self):
        from vecdiff import ResultsSet
        from vecdiff.capture import push_tensor

        r = push_tensor(ResultsSet("t"), torch.zeros(2), file="perm.cc", line=88)
        assert r.source_location == "perm.cc:88"

    def test_uses_current_policy(self):
        from vecdiff import ResultsSet
        from vecdiff.capture import push_tensor

        results = ResultsSet("t")
        results.set_precision(2)
        results.set_fp_zero_equal()
        r = push_tensor(results, torch.ones(3, dtype=torch.float64))
        assert r.precision_ulp == 2
        assert r.fp_zero_equal

    def test_rejects_bad_input(self):
        from vecdiff import ResultsSet
        from vecdiff.capture import push_tensor
        from vecdiff.exceptions import ContractError

        with pytest.raises(ContractError, match="Unsupported tensor dtype"):
            push_tensor(ResultsSet("t"), torch.zeros(2, dtype=torch.float16))
        with pytest.raises(ContractError, match="empty tensor"):
            push_tensor(ResultsSet("t"), torch.zeros(0))
        with pytest.raises(ContractError, match="expects a torch.Tensor"):
            push_tensor(ResultsSet("t"), [1.0, 2.0])

    def test_tensors_from_two_runs_compare(self):
        from vecdiff import DiagnosticSink, OracleConfig, ResultsSet, results_equal
        from vecdiff.capture import push_tensor

        x = torch.arange(8, dtype=torch.float32)
        a, b = ResultsSet("scale"), ResultsSet("scale")
        push_tensor(a, x * 2, file="scale.cc", line=1)
        push_tensor(b, x + x, file="scale.cc", line=1)
        sink = DiagnosticSink()
        assert results_equal(a, "cpu", b, "cpu-alt", sink, OracleConfig())
        assert len(sink) == 0
