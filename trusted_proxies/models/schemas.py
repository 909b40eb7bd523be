"""Pydantic models for request/response schemas."""
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


class HealthCheck(BaseModel):
    """Health check response model."""
    status: str
    timestamp: datetime
    version: str = "1.0.0"
    trusted_networks: int = Field(default=0, description="Number of trusted proxy networks loaded")


class ChainHop(BaseModel):
    """A single hop of the trust-truncated chain."""
    address: str = Field(..., description="Canonical address, or the raw text if it did not parse")
    valid: bool = Field(..., description="Whether the hop parsed as an IP address")
    trusted_by: Optional[str] = Field(None, description="Trusted network that matched this hop")


class ClientIPResponse(BaseModel):
    """Response model for the client IP diagnostic endpoint."""
    client_ip: str = Field(..., description="Deduced client address")
    peer: Optional[str] = Field(None, description="Directly connected peer address")
    forwarded_for: Optional[str] = Field(None, description="Raw forwarding header as received")
    chain: List[ChainHop] = Field(default_factory=list, description="Trust-truncated chain, oldest first")
