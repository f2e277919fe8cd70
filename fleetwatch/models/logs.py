from enum import Enum
from typing import List

from pydantic import BaseModel, Field


class LogStream(str, Enum):
    ERROR_LOG = "error-log"
    VALIDATOR_LOG = "validator-log"


class LogObservation(BaseModel):
    """Outcome of comparing a fresh log snapshot against the stored one."""

    delta_lines: List[str] = Field(
        default_factory=list,
        description="Lines of the new snapshot not present in the previous one, in order",
    )
    first_observation: bool = Field(
        ...,
        description="True if this was the first snapshot seen for the stream",
    )
    unchanged: bool = Field(
        default=False,
        description="True if the snapshot is byte-identical to the previous one",
    )
