from enum import Enum
from typing import Optional
from datetime import date, datetime
from pydantic import BaseModel, Field, validator
from clientdesk.utils.formatters import parse_budget

class ProjectStatus(str, Enum):
    started = "Started"
    finished = "Finished"

def _coerce_status(v):
    if v is None or isinstance(v, ProjectStatus):
        return v
    if isinstance(v, str):
        for status in ProjectStatus:
            if status.value.lower() == v.strip().lower():
                return status
        raise ValueError(f"Invalid status value: {v}. Valid values are: {[e.value for e in ProjectStatus]}")
    raise ValueError(f"Status must be a string or ProjectStatus enum, got {type(v)}")

class ProjectBase(BaseModel):
    title: str = Field(..., min_length=1)
    description: str = ""
    deadline: date
    budget: float = Field(..., ge=0)
    status: ProjectStatus = ProjectStatus.started
    invoice_url: Optional[str] = None

    @validator("status", pre=True)
    def validate_status(cls, v):
        return _coerce_status(v)

    @validator("budget", pre=True)
    def validate_budget(cls, v):
        # Forms send budgets like "₱10,000"
        if isinstance(v, str):
            return parse_budget(v)
        return v

class ProjectCreate(ProjectBase):
    client_id: int

class ProjectPatch(ProjectBase):
    """Partial edit of a project; fields left out are not touched."""
    title: Optional[str] = Field(None, min_length=1)
    deadline: Optional[date] = None
    budget: Optional[float] = Field(None, ge=0)
    status: Optional[ProjectStatus] = None
    description: Optional[str] = None

    @validator("title", "deadline", "budget", "status", "description", pre=True)
    def reject_null(cls, v):
        # Leave a field out to keep it; these columns cannot be cleared
        if v is None:
            raise ValueError("may be left out but cannot be null")
        return v

class Project(ProjectBase):
    id: int
    client_id: int
    created_at: datetime

    class Config:
        from_attributes = True

class ClientInfo(BaseModel):
    id: int
    full_name: str
    company_name: Optional[str] = None
    email: Optional[str] = None
    phone_number: Optional[str] = None
    address: Optional[str] = None

    class Config:
        from_attributes = True

class ProjectSummary(BaseModel):
    id: int
    title: str
    client: Optional[ClientInfo] = None

class ProjectWithStats(Project):
    client: Optional[ClientInfo] = None
    payment_count: int = 0
    total_paid: float = 0
    update_count: int = 0

class DeadlineStatus(BaseModel):
    days: int
    is_overdue: bool
    status: str
    message: str
