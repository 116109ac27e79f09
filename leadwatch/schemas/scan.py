"""
Pydantic schemas for inactivity scan results.
"""
from pydantic import BaseModel, Field


class ScanError(BaseModel):
    """A failure recorded while processing one lead."""
    lead_id: int
    kind: str
    message: str

    def __str__(self) -> str:
        return f"Error processing lead {self.lead_id}: {self.message}"


class ScanResult(BaseModel):
    """Aggregate outcome of one scan run."""
    processed: int = 0
    notifications_created: int = 0
    tasks_created: int = 0
    errors: list[ScanError] = Field(default_factory=list)

    @property
    def success(self) -> bool:
        return not self.errors


class EscalationOutcome(BaseModel):
    """Records created while opening one escalation episode."""
    task_id: int | None = None
    task_created: bool = False
    notifications_created: int = 0
