from pydantic import BaseModel, Field


class HostStatusSample(BaseModel):
    """Resource usage of one host, parsed from the output of its status command."""

    cpu_pct: float = Field(
        ...,
        ge=0,
        le=100,
        description="CPU utilisation in percent, as reported by the top-style CPU line",
    )
    mem_pct: float = Field(
        ...,
        ge=0,
        le=100,
        description="RAM usage in percent (used / total)",
    )
    disk_pct: float = Field(
        ...,
        ge=0,
        le=100,
        description="Filesystem usage in percent, as reported by df",
    )
    uptime: str = Field(..., description="Raw uptime line, taken verbatim")

    def is_high_usage(self, threshold: float = 80.0) -> bool:
        return (
            self.cpu_pct > threshold
            or self.mem_pct > threshold
            or self.disk_pct > threshold
        )
