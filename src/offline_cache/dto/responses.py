"""Response DTOs for the host's own endpoints."""

from pydantic import BaseModel, Field


class CacheStatusResponse(BaseModel):
    """Response DTO for the lifecycle/status endpoint."""

    state: str = Field(..., description="State of the latest install/activate cycle")
    version: str = Field(..., description="Configured generation name")
    active_generation: str | None = Field(None, description="Generation currently in control")
    generations: list[str] = Field(default_factory=list, description="Generations present in the store")
    stale_generations: list[str] = Field(
        default_factory=list, description="Old generations the last activation failed to delete"
    )
    total_entries: int = Field(..., description="Entries across all generations", ge=0)
    controlled_clients: int = Field(..., description="Clients routed through the active generation", ge=0)
    pending_writes: int = Field(0, description="Background cache writes not yet finished", ge=0)


class HealthCheckResponse(BaseModel):
    """Response DTO for health check."""

    status: str = Field(..., description="Health status: 'healthy' or 'unhealthy'")
    cache_healthy: bool = Field(..., description="Whether the cache store is reachable")
