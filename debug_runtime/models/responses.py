from typing import Any, List, Optional
from pydantic import BaseModel, Field


class ExecutionMetrics(BaseModel):
    """Snapshot of the executor's aggregate counters"""

    total_executions: int = Field(0, description="Execute attempts, successful or not")
    total_execution_time_ms: float = 0.0
    average_execution_time_ms: float = 0.0
    failed_executions: int = 0
    undo_operations: int = 0
    redo_operations: int = 0
    batch_operations: int = 0


class StackEntrySummary(BaseModel):
    """Read-only view of one undo/redo stack entry"""

    kind: str = Field(..., description="Command class name, or 'batch'")
    description: str
    timestamp: Optional[float] = None
    can_undo_now: bool = Field(
        ..., description="Whether reversal would currently be permitted"
    )
    batch_id: Optional[str] = None
    command_count: int = 1


class BatchResult(BaseModel):
    """Result of a successful batch execution"""

    success: bool
    batch_id: str
    command_count: int
    results: List[Any] = Field(default_factory=list)
    execution_time_ms: float = 0.0
    timestamp: float
