from typing import Optional
from pydantic import BaseModel, Field


class HistorySearchCriteria(BaseModel):
    command_type: Optional[str] = Field(
        None,
        description="Command class name to match (e.g. 'KillProcessCommand'), or 'batch'",
    )
    since: Optional[float] = Field(
        None, description="Only entries at or after this epoch timestamp"
    )
    success_only: bool = Field(False, description="Skip unsuccessful entries")
