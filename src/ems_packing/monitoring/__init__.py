"""Monitoring module for ems-packing.

Provides run metrics, benchmark aggregation and Telegram notifications.
"""

from .metrics import (
    AggregatedStats,
    SimulationResult,
    aggregate_results,
    export_to_csv,
    export_to_json,
    format_summary,
    summarize_state,
)
from .telegram_notifier import (
    format_benchmark_start,
    format_benchmark_summary,
    format_error,
    format_optimization_summary,
    send_telegram,
)

__all__ = [
    # Metrics
    "AggregatedStats",
    "SimulationResult",
    "aggregate_results",
    "export_to_csv",
    "export_to_json",
    "format_summary",
    "summarize_state",
    # Telegram
    "send_telegram",
    "format_benchmark_start",
    "format_benchmark_summary",
    "format_optimization_summary",
    "format_error",
]
