import asyncio
from collections import namedtuple
from types import SimpleNamespace

import pytest

from app.errors import SamplingError
from app.models.stats import UtilizationSample
from app.services import resource_sampler
from app.services.resource_sampler import CpuCounters

scputimes = namedtuple("scputimes", "user system idle")
linux_cputimes = namedtuple(
    "scputimes", "user nice system idle iowait irq softirq steal guest guest_nice"
)
svmem = namedtuple("svmem", "total available percent used free")


def _feed_cpu_times(monkeypatch, *readings):
    """Make psutil.cpu_times return the given per-core readings in order."""
    calls = iter(readings)
    seen = []

    def fake_cpu_times(percpu=False):
        assert percpu is True
        seen.append(1)
        return next(calls)

    monkeypatch.setattr(resource_sampler.psutil, "cpu_times", fake_cpu_times)
    return seen


def _record_sleeps(monkeypatch):
    """Replace the sampler's sleep with one that only records the delay."""
    delays = []

    async def fake_sleep(seconds):
        delays.append(seconds)

    monkeypatch.setattr(resource_sampler, "asyncio", SimpleNamespace(sleep=fake_sleep))
    return delays


def _fixed_memory(monkeypatch, total, available):
    memory = svmem(total, available, 0.0, total - available, available)
    monkeypatch.setattr(resource_sampler.psutil, "virtual_memory", lambda: memory)


def test_cpu_percent_between_example_window():
    first = CpuCounters(idle=100, total=200)
    second = CpuCounters(idle=150, total=300)

    assert resource_sampler.cpu_percent_between(first, second) == 50.00


def test_cpu_percent_between_frozen_counters_raise():
    counters = CpuCounters(idle=100, total=200)

    with pytest.raises(SamplingError):
        resource_sampler.cpu_percent_between(counters, counters)


def test_cpu_percent_between_is_clamped():
    # idle advanced slightly more than total because cores are read one by one
    first = CpuCounters(idle=100.0, total=200.0)
    second = CpuCounters(idle=110.02, total=210.0)

    assert resource_sampler.cpu_percent_between(first, second) == 0.0


@pytest.mark.parametrize(
    "first, second",
    [
        (CpuCounters(0, 0), CpuCounters(0, 1)),
        (CpuCounters(10, 40), CpuCounters(10, 41)),
        (CpuCounters(5.5, 12.25), CpuCounters(9.75, 19.0)),
        (CpuCounters(1000, 4000), CpuCounters(1000.5, 4000.6)),
    ],
)
def test_cpu_percent_between_stays_in_bounds(first, second):
    assert 0.0 <= resource_sampler.cpu_percent_between(first, second) <= 100.0


def test_ram_percent_example():
    assert resource_sampler.ram_percent(1000, 250) == 75.00


@pytest.mark.parametrize("free", [0, 1, 333, 999, 1000])
def test_ram_percent_stays_in_bounds(free):
    assert 0.0 <= resource_sampler.ram_percent(1000, free) <= 100.0


def test_ram_percent_without_memory_raises():
    with pytest.raises(SamplingError):
        resource_sampler.ram_percent(0, 0)


@pytest.mark.parametrize("free", [-1, 1001])
def test_ram_percent_free_outside_total_raises(free):
    with pytest.raises(SamplingError):
        resource_sampler.ram_percent(1000, free)


def test_read_cpu_counters_excludes_guest_time(monkeypatch):
    core = linux_cputimes(10, 0, 5, 80, 3, 1, 1, 0, 4, 0)
    _feed_cpu_times(monkeypatch, [core, core])

    counters = resource_sampler.read_cpu_counters()

    assert counters.idle == 160
    # guest (4) is already part of user and must not be added again
    assert counters.total == 200


def test_read_cpu_counters_without_cores_raises(monkeypatch):
    _feed_cpu_times(monkeypatch, [])

    with pytest.raises(SamplingError) as excinfo:
        resource_sampler.read_cpu_counters()

    assert "zero CPU cores" in str(excinfo.value)


def test_sample_computes_cpu_and_ram(monkeypatch):
    # two cores: idle 100 / total 200 at T1, idle 150 / total 300 at T2
    _feed_cpu_times(
        monkeypatch,
        [scputimes(30, 20, 50), scputimes(30, 20, 50)],
        [scputimes(45, 30, 75), scputimes(45, 30, 75)],
    )
    _fixed_memory(monkeypatch, total=1000, available=250)
    delays = _record_sleeps(monkeypatch)

    result = asyncio.run(resource_sampler.sample(window_seconds=0.2))

    assert delays == [0.2]
    assert isinstance(result, UtilizationSample)
    assert result.cpu_percent == 50.00
    assert result.ram_percent == 75.00


def test_sample_retries_once_on_frozen_window(monkeypatch):
    frozen = [scputimes(30, 20, 50)]
    seen = _feed_cpu_times(monkeypatch, frozen, frozen, [scputimes(40, 30, 80)])
    _fixed_memory(monkeypatch, total=1000, available=500)
    delays = _record_sleeps(monkeypatch)

    result = asyncio.run(resource_sampler.sample(window_seconds=0.25))

    assert len(seen) == 3
    assert delays == [0.25, 0.5]
    # delta total 50, delta idle 30
    assert result.cpu_percent == 40.00
    assert result.ram_percent == 50.00


def test_sample_raises_when_retry_is_still_frozen(monkeypatch):
    frozen = [scputimes(30, 20, 50)]
    seen = _feed_cpu_times(monkeypatch, frozen, frozen, frozen)
    _fixed_memory(monkeypatch, total=1000, available=500)
    delays = _record_sleeps(monkeypatch)

    with pytest.raises(SamplingError):
        asyncio.run(resource_sampler.sample(window_seconds=0.001))

    assert len(seen) == 3
    assert delays == [0.001, 0.002]


def test_sample_on_this_machine_is_bounded():
    # consecutive samples may differ; only the range is stable
    for _ in range(2):
        result = asyncio.run(resource_sampler.sample(window_seconds=0.05))
        assert 0.0 <= result.cpu_percent <= 100.0
        assert 0.0 <= result.ram_percent <= 100.0
