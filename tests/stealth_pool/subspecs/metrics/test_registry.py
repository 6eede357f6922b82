"""Tests for the Prometheus metrics registry."""

from __future__ import annotations

from stealth_pool.subspecs.metrics import (
    REGISTRY,
    deposits_total,
    generate_metrics,
    proof_verification_seconds,
    rpc_retries_total,
    tree_leaves,
    withdrawal_rejections_total,
    withdrawals_total,
)


class TestMetricTypes:
    """Tests for metric type behavior."""

    def test_counter_increments_correctly(self) -> None:
        """Counter metrics increment by one on each call."""
        initial = deposits_total._value.get()
        deposits_total.inc()
        assert deposits_total._value.get() == initial + 1.0

    def test_labelled_counter(self) -> None:
        """Labelled counters track each label value separately."""
        gmp = withdrawals_total.labels(mode="gmp")
        its = withdrawals_total.labels(mode="its")
        gmp_before, its_before = gmp._value.get(), its._value.get()

        gmp.inc()

        assert gmp._value.get() == gmp_before + 1
        assert its._value.get() == its_before

    def test_gauge_sets_value_correctly(self) -> None:
        """Gauge metrics can be set to arbitrary values."""
        tree_leaves.set(12.0)
        assert tree_leaves._value.get() == 12.0

    def test_histogram_observes_values(self) -> None:
        """Histogram metrics record observations."""
        initial_samples = list(proof_verification_seconds.collect())[0].samples
        initial_count = next(s.value for s in initial_samples if s.name.endswith("_count"))

        proof_verification_seconds.observe(0.3)

        new_samples = list(proof_verification_seconds.collect())[0].samples
        new_count = next(s.value for s in new_samples if s.name.endswith("_count"))
        assert new_count == initial_count + 1


class TestMetricsOutput:
    """Tests for the Prometheus exposition output."""

    def test_output_is_prometheus_text(self) -> None:
        """Output is bytes in the text exposition format."""
        output = generate_metrics()
        assert isinstance(output, bytes)
        assert b"# HELP stealth_pool_deposits_total" in output
        assert b"# TYPE stealth_pool_tree_leaves gauge" in output

    def test_all_metric_families_exported(self) -> None:
        """Every pool, scanner and RPC metric is in the output."""
        withdrawal_rejections_total.labels(reason="UnknownRoot").inc()
        rpc_retries_total.inc(0)
        output = generate_metrics().decode()

        for name in (
            "stealth_pool_deposits_total",
            "stealth_pool_withdrawals_total",
            "stealth_pool_withdrawal_rejections_total",
            "stealth_pool_tree_leaves",
            "stealth_pool_proof_verification_seconds",
            "stealth_pool_scan_candidates_total",
            "stealth_pool_scan_matches_total",
            "stealth_pool_rpc_retries_total",
        ):
            assert name in output

    def test_dedicated_registry_has_no_process_metrics(self) -> None:
        """Default process and platform collectors are not registered."""
        output = generate_metrics().decode()
        assert "process_cpu_seconds_total" not in output
        assert "python_info" not in output
        assert REGISTRY is not None
