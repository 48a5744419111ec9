from typing import Optional
from pydantic import BaseModel, Field
import os
from functools import lru_cache


class Settings(BaseModel):
    # AWS inventory: region plus optional static credentials
    aws_region: str = Field(
        default="ap-south-1",
        description="AWS region the EC2/S3/RDS inventory is read from",
    )
    aws_access_key_id: Optional[str] = Field(
        default=None,
        description="Static access key; boto3 default credential chain if unset",
    )
    aws_secret_access_key: Optional[str] = Field(
        default=None,
        description="Static secret key belonging to aws_access_key_id",
    )
    aws_session_token: Optional[str] = Field(
        default=None,
        description="Optional session token for temporary credentials",
    )

    # Resource sampling
    sample_window_seconds: float = Field(
        default=0.2,
        gt=0,
        description="Delay between the two CPU counter reads",
    )
    request_timeout_seconds: float = Field(
        default=10.0,
        gt=0,
        description="Upper bound for assembling one /api/stats response",
    )

    # Server
    bind_host: str = Field(default="0.0.0.0", description="Interface uvicorn binds to")
    port: int = Field(default=3000, ge=1, le=65535, description="TCP port uvicorn listens on")
    log_level: str = Field(default="INFO", description="Root log level, e.g. DEBUG or INFO")

    @classmethod
    def from_env(cls) -> "Settings":
        # AWS_REGION wins, AWS_DEFAULT_REGION as fallback (same order as the AWS CLI)
        region = os.getenv("AWS_REGION") or os.getenv("AWS_DEFAULT_REGION") or "ap-south-1"

        return cls(
            aws_region=region,
            aws_access_key_id=os.getenv("AWS_ACCESS_KEY_ID") or None,
            aws_secret_access_key=os.getenv("AWS_SECRET_ACCESS_KEY") or None,
            aws_session_token=os.getenv("AWS_SESSION_TOKEN") or None,
            sample_window_seconds=float(os.getenv("SAMPLE_WINDOW_SECONDS", "0.2")),
            request_timeout_seconds=float(os.getenv("REQUEST_TIMEOUT_SECONDS", "10")),
            bind_host=os.getenv("BIND_HOST", "0.0.0.0"),
            port=int(os.getenv("PORT", "3000")),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings.from_env()
