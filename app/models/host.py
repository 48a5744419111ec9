from pydantic import BaseModel, Field


class HostIdentity(BaseModel):
    """Domain model identifying the host that served a request."""

    address: str = Field(
        ...,
        description="First non-loopback IPv4 address, or 'N/A' if none was found",
    )
    hostname: str = Field(..., description="System hostname")
