from pydantic import BaseModel, ConfigDict, Field


class UtilizationSample(BaseModel):
    """CPU and RAM utilisation of the local host at one point in time."""

    cpu_percent: float = Field(
        ...,
        ge=0,
        le=100,
        description="Non-idle share of aggregate CPU time over the sampling window",
    )
    ram_percent: float = Field(
        ...,
        ge=0,
        le=100,
        description="Share of physical memory currently in use",
    )


class InventoryCounts(BaseModel):
    """Number of live AWS resources per kind."""

    ec2_count: int = Field(..., ge=0, description="EC2 instances across all reservations")
    s3_count: int = Field(..., ge=0, description="S3 buckets owned by the account")
    rds_count: int = Field(..., ge=0, description="RDS database instances")


class DashboardStats(BaseModel):
    """
    Response of GET /api/stats.

    Field names are snake_case in Python and camelCase on the wire, which is
    what the dashboard page reads.
    """

    model_config = ConfigDict(populate_by_name=True)

    served_by_ip: str = Field(
        ...,
        alias="servedByIp",
        description="IPv4 address of the host that served the request",
    )
    hostname: str = Field(..., description="Hostname of the serving host")
    local_cpu: str = Field(
        ...,
        alias="localCpu",
        description="CPU utilisation in percent, formatted with two decimals",
    )
    local_ram: str = Field(
        ...,
        alias="localRam",
        description="RAM utilisation in percent, formatted with two decimals",
    )
    region: str = Field(..., description="AWS region the inventory was read from")
    ec2_count: int = Field(..., ge=0, alias="ec2Count")
    s3_count: int = Field(..., ge=0, alias="s3Count")
    rds_count: int = Field(..., ge=0, alias="rdsCount")


class ErrorResponse(BaseModel):
    """Body returned with HTTP 500 when the stats could not be assembled."""

    error: str = Field(..., description="Message of the failure that aborted the request")
