from typing import Optional
from datetime import datetime
from pydantic import BaseModel, Field
from clientdesk.schemas.project import ProjectSummary

class ProjectUpdateBase(BaseModel):
    description: str = Field(..., min_length=1)

class ProjectUpdateCreate(ProjectUpdateBase):
    pass

class ProjectUpdate(ProjectUpdateBase):
    id: int
    project_id: int
    created_at: datetime

    class Config:
        from_attributes = True

class ProjectUpdateWithDetails(ProjectUpdate):
    project: Optional[ProjectSummary] = None
