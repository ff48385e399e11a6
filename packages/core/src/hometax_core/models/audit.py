"""Audit trail models for filing resolution runs.

Each call to the pipeline records which report every derived field came
from and what went in and out of each step. The trail travels next to the
result record, never inside it.
"""

import traceback
from datetime import datetime, timezone
from enum import Enum
from typing import Optional
from uuid import uuid4

from pydantic import BaseModel, Field


def _utc_now() -> datetime:
    """Return current UTC datetime with timezone info."""
    return datetime.now(timezone.utc)


class RunStatus(str, Enum):
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


class AuditEntry(BaseModel):
    """Single audit event recording a processing step.

    Attributes:
        timestamp: When this entry was created (UTC)
        step: Name of the processing step (e.g., "business_income")
        action: Human-readable description of what was done
        input_value: Value before processing
        output_value: Value after processing
        source: Name of the report the value was read from
        field_name: Name of the result field being written
    """
    timestamp: datetime = Field(default_factory=_utc_now)
    step: str
    action: str
    input_value: Optional[str] = None
    output_value: Optional[str] = None
    source: Optional[str] = None
    field_name: Optional[str] = None


class AuditError(BaseModel):
    """Failure that ended a run.

    Attributes:
        code: Machine-readable error code (e.g., "MISSING_REPORT")
        message: Human-readable error message
        exception_type: Python exception type name (if from an exception)
        stack_trace: Stack trace for debugging (if available)
    """
    timestamp: datetime = Field(default_factory=_utc_now)
    code: str
    message: str
    exception_type: Optional[str] = None
    stack_trace: Optional[str] = None

    @classmethod
    def from_exception(cls, exc: Exception, code: str) -> "AuditError":
        """Create an AuditError from a Python exception."""
        return cls(
            code=code,
            message=str(exc),
            exception_type=type(exc).__name__,
            stack_trace="".join(
                traceback.format_exception(type(exc), exc, exc.__traceback__)
            ),
        )


class AuditTrail(BaseModel):
    """Complete audit trail for one pipeline invocation.

    Attributes:
        run_id: Unique identifier for this run
        started_at: When processing started (UTC)
        completed_at: When processing finished (UTC), None while running
        status: Current run status
        year_index: Resolved year index, once known
        entries: Processing steps in order
        errors: Failures that ended the run
    """
    run_id: str = Field(default_factory=lambda: uuid4().hex)
    started_at: datetime = Field(default_factory=_utc_now)
    completed_at: Optional[datetime] = None
    status: RunStatus = RunStatus.RUNNING
    year_index: Optional[int] = None
    entries: list[AuditEntry] = Field(default_factory=list)
    errors: list[AuditError] = Field(default_factory=list)

    def add_entry(
        self,
        step: str,
        action: str,
        input_value: Optional[str] = None,
        output_value: Optional[str] = None,
        source: Optional[str] = None,
        field_name: Optional[str] = None,
    ) -> AuditEntry:
        """Append an entry to the trail and return it."""
        entry = AuditEntry(
            step=step,
            action=action,
            input_value=input_value,
            output_value=output_value,
            source=source,
            field_name=field_name,
        )
        self.entries.append(entry)
        return entry

    def add_error(self, error: AuditError) -> None:
        self.errors.append(error)

    def complete(self) -> None:
        """Mark the run as completed."""
        self.status = RunStatus.COMPLETED
        self.completed_at = _utc_now()

    def fail(self) -> None:
        """Mark the run as failed."""
        self.status = RunStatus.FAILED
        self.completed_at = _utc_now()

    def steps(self) -> list[str]:
        """Names of recorded steps, in order."""
        return [entry.step for entry in self.entries]
