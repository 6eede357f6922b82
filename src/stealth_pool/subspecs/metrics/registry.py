"""
Metric registry using prometheus_client.

Provides pre-defined metrics for the commitment pool, the stealth scanner
and the RPC client. Exposes metrics in Prometheus text format.
"""

from __future__ import annotations

from prometheus_client import (
    CollectorRegistry,
    Counter,
    Gauge,
    Histogram,
    generate_latest,
)

# Create a dedicated registry for stealth-pool metrics.
#
# Using a dedicated registry avoids pollution from default Python process metrics.
REGISTRY = CollectorRegistry()

# -----------------------------------------------------------------------------
# Commitment Pool
# -----------------------------------------------------------------------------

deposits_total = Counter(
    "stealth_pool_deposits_total",
    "Deposits accepted into the commitment tree",
    registry=REGISTRY,
)

withdrawals_total = Counter(
    "stealth_pool_withdrawals_total",
    "Withdrawals paid out through the bridge dispatcher",
    ["mode"],
    registry=REGISTRY,
)

withdrawal_rejections_total = Counter(
    "stealth_pool_withdrawal_rejections_total",
    "Withdrawals rejected, by error type",
    ["reason"],
    registry=REGISTRY,
)

tree_leaves = Gauge(
    "stealth_pool_tree_leaves",
    "Number of leaves inserted into the commitment tree",
    registry=REGISTRY,
)

proof_verification_seconds = Histogram(
    "stealth_pool_proof_verification_seconds",
    "Groth16 proof verification duration",
    buckets=(0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0),
    registry=REGISTRY,
)

# -----------------------------------------------------------------------------
# Stealth Scanning
# -----------------------------------------------------------------------------

scan_candidates_total = Counter(
    "stealth_pool_scan_candidates_total",
    "Announcements examined by the stealth scanner",
    registry=REGISTRY,
)

scan_matches_total = Counter(
    "stealth_pool_scan_matches_total",
    "Announcements confirmed to belong to the scanning recipient",
    registry=REGISTRY,
)

# -----------------------------------------------------------------------------
# RPC
# -----------------------------------------------------------------------------

rpc_retries_total = Counter(
    "stealth_pool_rpc_retries_total",
    "Transient RPC failures that were retried",
    registry=REGISTRY,
)


def generate_metrics() -> bytes:
    """
    Generate Prometheus metrics output.

    Returns:
        Prometheus text format output as bytes.
    """
    return generate_latest(REGISTRY)
