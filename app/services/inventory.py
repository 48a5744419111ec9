import logging
from functools import lru_cache

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from app.config import Settings, get_settings
from app.errors import CollaboratorError

logger = logging.getLogger(__name__)

# Everything botocore raises for transport, credential or API failures
_AWS_ERRORS = (BotoCoreError, ClientError)


class InventoryReporter:
    """
    Counts live EC2 instances, S3 buckets and RDS instances of one account.

    Region and credentials come from the Settings passed in; if no static
    keys are configured, boto3 falls back to its default credential chain
    (environment, shared config, instance profile). All calls are blocking.
    """

    def __init__(self, settings: Settings, session: boto3.session.Session | None = None):
        self.region = settings.aws_region
        try:
            if session is None:
                session = boto3.session.Session(
                    aws_access_key_id=settings.aws_access_key_id,
                    aws_secret_access_key=settings.aws_secret_access_key,
                    aws_session_token=settings.aws_session_token,
                    region_name=settings.aws_region,
                )
            self.ec2 = session.client("ec2", region_name=self.region)
            self.s3 = session.client("s3", region_name=self.region)
            self.rds = session.client("rds", region_name=self.region)
        except _AWS_ERRORS as exc:
            raise CollaboratorError(f"AWS client setup for {self.region!r} failed: {exc}") from exc

    def count_compute_instances(self) -> int:
        try:
            count = 0
            for page in self.ec2.get_paginator("describe_instances").paginate():
                for reservation in page.get("Reservations", []):
                    count += len(reservation.get("Instances", []))
        except _AWS_ERRORS as exc:
            raise CollaboratorError(f"EC2 DescribeInstances failed: {exc}") from exc

        logger.debug("Counted %d EC2 instances in %s", count, self.region)
        return count

    def count_storage_buckets(self) -> int:
        try:
            response = self.s3.list_buckets()
        except _AWS_ERRORS as exc:
            raise CollaboratorError(f"S3 ListBuckets failed: {exc}") from exc

        count = len(response.get("Buckets", []))
        logger.debug("Counted %d S3 buckets", count)
        return count

    def count_database_instances(self) -> int:
        try:
            count = 0
            for page in self.rds.get_paginator("describe_db_instances").paginate():
                count += len(page.get("DBInstances", []))
        except _AWS_ERRORS as exc:
            raise CollaboratorError(f"RDS DescribeDBInstances failed: {exc}") from exc

        logger.debug("Counted %d RDS instances in %s", count, self.region)
        return count


@lru_cache(maxsize=1)
def get_inventory_reporter() -> InventoryReporter:
    return InventoryReporter(get_settings())
