from typing import Dict

from pydantic import Field

from .common import CamelModel


class TaskAnalyticsResponse(CamelModel):
    status_counts: Dict[str, int] = Field(default_factory=dict, description="Number of tasks per status")
    avg_completion_time_hours: str = Field("0.00", description="Mean completed_at - created_at in hours, 2 decimals")
    per_user_counts: Dict[str, int] = Field(default_factory=dict, description="Number of tasks per owner id")
