"""
Tests for the engine tracer decorator.

Covers:
- Deterministic input fingerprints
- VENDING_ENGINE_TRACE emitted on success and failure
"""

import pytest

from vending_engines.change import ChangeEngine
from vending_engines.tracer import compute_input_fingerprint, traced_engine
from vending_kernel.domain.coin import Coin
from vending_kernel.domain.coin_pool import CoinPool


def _traces(logs):
    return [r for r in logs if r["message"] == "VENDING_ENGINE_TRACE"]


class TestInputFingerprint:

    def test_same_inputs_same_fingerprint(self):
        kwargs = {"amount_cents": 25, "supply": CoinPool.uniform(3)}
        a = compute_input_fingerprint(("amount_cents", "supply"), kwargs)
        b = compute_input_fingerprint(("amount_cents", "supply"), dict(kwargs))
        assert a == b
        assert len(a) == 16

    def test_different_inputs_differ(self):
        a = compute_input_fingerprint(("amount_cents",), {"amount_cents": 25})
        b = compute_input_fingerprint(("amount_cents",), {"amount_cents": 30})
        assert a != b

    def test_dict_key_order_irrelevant(self):
        a = compute_input_fingerprint(("m",), {"m": {Coin.DIME: 1, Coin.QUARTER: 2}})
        b = compute_input_fingerprint(("m",), {"m": {Coin.QUARTER: 2, Coin.DIME: 1}})
        assert a == b

    def test_missing_field_recorded_as_null(self):
        a = compute_input_fingerprint(("amount_cents",), {})
        b = compute_input_fingerprint(("amount_cents",), {"amount_cents": None})
        assert a == b


class TestTracedEngine:

    def test_trace_emitted_for_change_search(self, captured_logs):
        ChangeEngine().find_change(amount_cents=25, supply=CoinPool.uniform(1))

        traces = _traces(captured_logs())
        assert len(traces) == 1
        trace = traces[0]
        assert trace["engine_name"] == "change"
        assert trace["engine_version"] == "1.0"
        assert trace["outcome"] == "ok"
        assert len(trace["input_fingerprint"]) == 16
        assert trace["function"] == "ChangeEngine.find_change"

    def test_trace_records_exception_outcome(self, captured_logs):
        with pytest.raises(ValueError):
            ChangeEngine().find_change(amount_cents=-1, supply=CoinPool.empty())

        traces = _traces(captured_logs())
        assert traces[-1]["outcome"] == "ValueError"

    def test_return_value_passes_through(self, captured_logs):
        @traced_engine("double", "0.1", fingerprint_fields=("n",))
        def double(*, n):
            return n * 2

        assert double(n=4) == 8
        assert _traces(captured_logs())[0]["engine_name"] == "double"
