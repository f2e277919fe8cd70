from typing import List

from pydantic import BaseModel, Field


class CycleReport(BaseModel):
    """Aggregated result of one health probe pass over all hosts."""

    messages: List[str] = Field(
        default_factory=list,
        description="One 'Server <i> - ...' line per host that parsed successfully",
    )
    errors: List[str] = Field(
        default_factory=list,
        description="Command and parse failures collected during the pass",
    )
    any_high_usage: bool = Field(
        default=False,
        description="True if any host had a metric above the usage threshold",
    )

    def summary(self) -> str:
        return "Health Check:\n" + "\n".join(self.messages)
