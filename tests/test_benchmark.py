"""
Tests for the multi-run strategy benchmark.
"""

import random

import pytest

from ems_packing.algorithms.placement import PackingStrategy
from ems_packing.config import GeneratorConfig
from ems_packing.runner import benchmark
from ems_packing.runner.benchmark import run_benchmark


@pytest.fixture
def generator_config():
    return GeneratorConfig(max_items=10, min_side_len=500)


class TestRunBenchmark:
    @pytest.mark.asyncio
    async def test_every_strategy_runs_every_scenario(self, container_dims, generator_config):
        report = await run_benchmark(
            container_dims, generator_config, 0.6, runs=2, rng=random.Random(1),
        )
        assert len(report.results) == 2 * len(PackingStrategy)
        assert {s.strategy for s in report.stats} == {s.value for s in PackingStrategy}
        assert all(s.runs == 2 for s in report.stats)
        assert report.runtime_seconds > 0

    @pytest.mark.asyncio
    async def test_strategies_share_item_sets(self, container_dims, generator_config):
        report = await run_benchmark(
            container_dims, generator_config, 0.6, runs=3, rng=random.Random(2),
        )
        by_strategy = {}
        for result in report.results:
            by_strategy.setdefault(result.strategy, []).append(result)
        assert [r.total_items for r in by_strategy["ff"]] == [r.total_items for r in by_strategy["ffd"]]
        assert [r.utilization for r in by_strategy["ff"]] == [
            r.utilization for r in by_strategy["conflict-graph"]]

    @pytest.mark.asyncio
    async def test_strategy_subset(self, container_dims, generator_config):
        report = await run_benchmark(
            container_dims, generator_config, 0.6, runs=1,
            strategies=[PackingStrategy.FIRST_FIT_HEIGHT], rng=random.Random(3),
        )
        assert [r.strategy for r in report.results] == ["ffh"]

    @pytest.mark.asyncio
    async def test_stats_sorted_best_first(self, container_dims, generator_config):
        report = await run_benchmark(
            container_dims, generator_config, 0.6, runs=2, rng=random.Random(4),
        )
        utils = [s.avg_utilization for s in report.stats]
        assert utils == sorted(utils, reverse=True)

    @pytest.mark.asyncio
    async def test_notifications(self, monkeypatch, container_dims, generator_config):
        messages = []

        async def fake_send(message, *args, **kwargs):
            messages.append(message)
            return True

        monkeypatch.setattr(benchmark, "send_telegram", fake_send)
        await run_benchmark(
            container_dims, generator_config, 0.6, runs=1,
            rng=random.Random(5), notify=True,
        )
        assert len(messages) == 2
        assert messages[0].startswith("Benchmark Started")
        assert messages[1].startswith("Benchmark Complete")

    @pytest.mark.asyncio
    async def test_no_notifications_by_default(self, monkeypatch, container_dims, generator_config):
        async def fail_send(message, *args, **kwargs):
            raise AssertionError("unexpected notification")

        monkeypatch.setattr(benchmark, "send_telegram", fail_send)
        await run_benchmark(container_dims, generator_config, 0.6, runs=1, rng=random.Random(6))
