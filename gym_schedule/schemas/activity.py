from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict

from gym_schedule.models.activity import ActivityType


class ActivityResponse(BaseModel):
    id: str
    type: ActivityType
    message: str
    timestamp: datetime
    member_id: Optional[int] = None
    metadata: Dict[str, Any] = {}
    updated_by_name: Optional[str] = None
    updated_by_role: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)
