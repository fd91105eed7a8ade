"""Background workers"""
from .stats_reconciler import StatsReconcilerWorker

__all__ = ["StatsReconcilerWorker"]
