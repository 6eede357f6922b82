"""
Metrics module for observability.

Provides counters, gauges, and histograms for tracking pool, scanner and RPC behavior.
Exposes metrics in Prometheus text format.
"""

from .registry import (
    REGISTRY,
    deposits_total,
    generate_metrics,
    proof_verification_seconds,
    rpc_retries_total,
    scan_candidates_total,
    scan_matches_total,
    tree_leaves,
    withdrawal_rejections_total,
    withdrawals_total,
)

__all__ = [
    "REGISTRY",
    "deposits_total",
    "generate_metrics",
    "proof_verification_seconds",
    "rpc_retries_total",
    "scan_candidates_total",
    "scan_matches_total",
    "tree_leaves",
    "withdrawal_rejections_total",
    "withdrawals_total",
]
