import asyncio
import logging

from app.config import Settings
from app.errors import StatsTimeoutError
from app.models.host import HostIdentity
from app.models.stats import DashboardStats, InventoryCounts, UtilizationSample
from app.services import host_monitor, resource_sampler
from app.services.inventory import InventoryReporter

logger = logging.getLogger(__name__)


async def _count_inventory(reporter: InventoryReporter) -> InventoryCounts:
    # boto3 is blocking, so every listing call gets its own worker thread
    ec2_count, s3_count, rds_count = await asyncio.gather(
        asyncio.to_thread(reporter.count_compute_instances),
        asyncio.to_thread(reporter.count_storage_buckets),
        asyncio.to_thread(reporter.count_database_instances),
    )
    return InventoryCounts(ec2_count=ec2_count, s3_count=s3_count, rds_count=rds_count)


def build_stats(
    sample: UtilizationSample,
    identity: HostIdentity,
    counts: InventoryCounts,
    region: str,
) -> DashboardStats:
    """Merge sample, host identity and inventory counts into the response record."""
    return DashboardStats(
        served_by_ip=identity.address,
        hostname=identity.hostname,
        local_cpu=f"{sample.cpu_percent:.2f}",
        local_ram=f"{sample.ram_percent:.2f}",
        region=region,
        ec2_count=counts.ec2_count,
        s3_count=counts.s3_count,
        rds_count=counts.rds_count,
    )


async def _collect(reporter: InventoryReporter, settings: Settings) -> DashboardStats:
    sample, counts = await asyncio.gather(
        resource_sampler.sample(settings.sample_window_seconds),
        _count_inventory(reporter),
    )
    identity = host_monitor.get_host_identity()
    logger.debug(
        "Sampled cpu=%.2f ram=%.2f on %s",
        sample.cpu_percent,
        sample.ram_percent,
        identity.hostname,
    )
    return build_stats(sample, identity, counts, reporter.region)


async def collect_stats(reporter: InventoryReporter, settings: Settings) -> DashboardStats:
    """
    Assemble the /api/stats response for the current request.

    The local sample and the three inventory counts are independent and run
    concurrently. Any DashboardError aborts the whole response; there are no
    partial results. The whole operation is bounded by
    settings.request_timeout_seconds.
    """
    try:
        return await asyncio.wait_for(
            _collect(reporter, settings),
            timeout=settings.request_timeout_seconds,
        )
    except asyncio.TimeoutError as exc:
        raise StatsTimeoutError(
            f"stats collection timed out after {settings.request_timeout_seconds:g}s"
        ) from exc
