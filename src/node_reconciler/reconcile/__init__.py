"""
Reconcile package.

This makes the reconcile folder an explicit package so both Python and mypy
resolve modules consistently.
"""

from node_reconciler.reconcile.driver import ReconcileConfig, ReconcileDriver, hosts_delta

__all__ = ["ReconcileConfig", "ReconcileDriver", "hosts_delta"]
