import asyncio
import logging
from typing import NamedTuple, Sequence

import psutil

from app.errors import SamplingError
from app.models.stats import UtilizationSample

logger = logging.getLogger(__name__)

DEFAULT_WINDOW_SECONDS = 0.2

# Already contained in user/nice on Linux, must not be counted twice
_NESTED_FIELDS = ("guest", "guest_nice")


class CpuCounters(NamedTuple):
    """Cumulative CPU seconds summed over all logical cores."""

    idle: float
    total: float


def _core_total(times) -> float:
    fields = times._asdict()
    for name in _NESTED_FIELDS:
        fields.pop(name, None)
    return sum(fields.values())


def read_cpu_counters() -> CpuCounters:
    """
    Read the per-core time-in-state counters and sum them across cores.

    Raises SamplingError if the OS reports no cores at all.
    """
    per_core: Sequence = psutil.cpu_times(percpu=True)
    if not per_core:
        raise SamplingError("operating system reports zero CPU cores")

    idle = sum(core.idle for core in per_core)
    total = sum(_core_total(core) for core in per_core)
    return CpuCounters(idle=idle, total=total)


def cpu_percent_between(first: CpuCounters, second: CpuCounters) -> float:
    """
    Non-idle share of the CPU time that elapsed between two counter reads.

    Raises SamplingError if no CPU time elapsed (or the counters went
    backwards), instead of dividing by zero.
    """
    delta_total = second.total - first.total
    delta_idle = second.idle - first.idle
    if delta_total <= 0:
        raise SamplingError(
            f"no measurable CPU time elapsed in sampling window (delta total {delta_total:.4f}s)"
        )

    busy = (delta_total - delta_idle) / delta_total * 100
    # counters are sampled per core at slightly different instants
    return round(min(max(busy, 0.0), 100.0), 2)


def ram_percent(total: int, free: int) -> float:
    if total <= 0:
        raise SamplingError("operating system reports no physical memory")
    if free < 0 or free > total:
        raise SamplingError(f"free memory {free} outside of 0..{total} bytes")
    return round((total - free) / total * 100, 2)


async def sample(window_seconds: float = DEFAULT_WINDOW_SECONDS) -> UtilizationSample:
    """
    Take one UtilizationSample of the local host.

    CPU utilisation is derived from two counter reads `window_seconds` apart;
    the delay is awaited, so concurrent requests keep being served and a
    caller's timeout cancels it. A degenerate window is retried once with
    twice the length before SamplingError is raised.

    RAM utilisation uses the memory available to new processes as "free",
    so reclaimable page cache does not count as used.
    """
    first = read_cpu_counters()
    await asyncio.sleep(window_seconds)
    second = read_cpu_counters()

    try:
        cpu = cpu_percent_between(first, second)
    except SamplingError as exc:
        retry_window = window_seconds * 2
        logger.warning("%s; retrying with %.3fs window", exc, retry_window)
        first = second
        await asyncio.sleep(retry_window)
        cpu = cpu_percent_between(first, read_cpu_counters())

    memory = psutil.virtual_memory()
    ram = ram_percent(memory.total, memory.available)

    return UtilizationSample(cpu_percent=cpu, ram_percent=ram)
