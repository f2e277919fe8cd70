from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class CommandOutcome(str, Enum):
    OK = "ok"
    TIMEOUT = "timeout"
    FAILURE = "failure"


class CommandResult(BaseModel):
    """Result of one shell command run by the command runner."""

    outcome: CommandOutcome
    stdout: str = Field(
        default="",
        description="Captured standard output; empty unless the command exited with status 0",
    )
    reason: Optional[str] = Field(
        default=None,
        description="Why the command failed, for FAILURE and TIMEOUT outcomes",
    )

    @property
    def ok(self) -> bool:
        return self.outcome is CommandOutcome.OK
