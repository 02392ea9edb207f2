"""Lightweight Telegram notification for benchmark and optimization progress.

Sends plain-text messages to a Telegram chat via the Bot API for:
- Benchmark start notifications
- Benchmark results summary
- Optimization results
- Errors

No retry logic: progress updates are non-critical, so every failure is
reported as ``False`` instead of raised.
"""

from __future__ import annotations

import logging
import os
from typing import Any

import httpx

from ems_packing.monitoring.metrics import AggregatedStats

logger = logging.getLogger(__name__)

TELEGRAM_API = "https://api.telegram.org/bot{token}/sendMessage"


async def send_telegram(
    message: str,
    chat_id: str | None = None,
    token: str | None = None,
    client: httpx.AsyncClient | None = None,
) -> bool:
    """Send a plain-text message to a Telegram chat.

    Args:
        message: Text to send.
        chat_id: Telegram chat ID. Defaults to TELEGRAM_CHAT_ID env var.
        token: Bot token. Defaults to TELEGRAM_BOT_TOKEN env var.
        client: Optional client to reuse (a new one is opened otherwise).

    Returns:
        True if message was sent successfully, False otherwise.
    """
    token = token or os.environ.get("TELEGRAM_BOT_TOKEN", "")
    chat_id = chat_id or os.environ.get("TELEGRAM_CHAT_ID", "")
    if not token or not chat_id:
        logger.debug("telegram credentials missing, message not sent")
        return False

    url = TELEGRAM_API.format(token=token)
    payload = {"chat_id": chat_id, "text": message}

    try:
        if client is not None:
            resp = await client.post(url, json=payload)
        else:
            async with httpx.AsyncClient(timeout=10.0) as own_client:
                resp = await own_client.post(url, json=payload)
        data = resp.json()
    except (httpx.HTTPError, ValueError) as exc:
        logger.warning("telegram notification failed: %s", exc)
        return False
    return bool(data.get("ok", False))


def format_benchmark_start(
    runs: int,
    max_items: int,
    strategies: list[str],
    container_dims: tuple[float, float, float],
) -> str:
    """Format benchmark start notification message.

    Example:
        >>> print(format_benchmark_start(10, 30, ["ff", "ffd"], (5870, 2330, 2200)))
        Benchmark Started
        Strategies: ff, ffd
        Runs: 10 (up to 30 items each)
        Container: 5870 x 2330 x 2200
    """
    return (
        f"Benchmark Started\n"
        f"Strategies: {', '.join(strategies)}\n"
        f"Runs: {runs} (up to {max_items} items each)\n"
        f"Container: {container_dims[0]:g} x {container_dims[1]:g} x {container_dims[2]:g}"
    )


def format_benchmark_summary(stats: list[AggregatedStats], runtime_seconds: float) -> str:
    """Format the per-strategy benchmark results.

    Example:
        >>> s = AggregatedStats("ffd", 10, 78.5, 25.0, 97.0, 2.0, 83.0)
        >>> print(format_benchmark_summary([s], 12.0))
        Benchmark Complete
        ffd: avg 78.5%, best 83.0% (10 runs)
        Runtime: 12.0 s
    """
    lines = ["Benchmark Complete"]
    for s in stats:
        lines.append(
            f"{s.strategy}: avg {s.avg_utilization:.1f}%, "
            f"best {s.best_utilization:.1f}% ({s.runs} runs)"
        )
    lines.append(f"Runtime: {runtime_seconds:.1f} s")
    return "\n".join(lines)


def format_optimization_summary(
    iterations: int,
    initial_utilization: float,
    best_utilization: float,
) -> str:
    """Format simulated annealing results.

    Example:
        >>> print(format_optimization_summary(500, 71.3, 79.5))
        Optimization Complete
        Iterations: 500
        Utilization: 71.3% -> 79.5%
    """
    return (
        f"Optimization Complete\n"
        f"Iterations: {iterations}\n"
        f"Utilization: {initial_utilization:.1f}% -> {best_utilization:.1f}%"
    )


def format_error(error_type: str, error_message: str, context: dict[str, Any] | None = None) -> str:
    """Format error notification message.

    Example:
        >>> print(format_error("ConfigurationError", "bad min_side_len", {"value": 9000}))
        Error: ConfigurationError
        bad min_side_len
        Context: value=9000
    """
    lines = [
        f"Error: {error_type}",
        error_message,
    ]
    if context:
        ctx_str = ", ".join(f"{k}={v}" for k, v in context.items())
        lines.append(f"Context: {ctx_str}")
    return "\n".join(lines)
