from typing import List, Optional
from datetime import datetime
from pydantic import BaseModel, EmailStr, Field, validator
from clientdesk.schemas.project import Project

class ClientBase(BaseModel):
    full_name: str = Field(..., min_length=1)
    email: EmailStr
    phone_number: Optional[str] = None
    address: Optional[str] = None
    company_name: Optional[str] = None

class ClientCreate(ClientBase):
    pass

class ClientUpdate(ClientBase):
    full_name: Optional[str] = Field(None, min_length=1)
    email: Optional[EmailStr] = None

    @validator("full_name", "email", pre=True)
    def reject_null(cls, v):
        if v is None:
            raise ValueError("may be left out but cannot be null")
        return v

class Client(ClientBase):
    id: int
    created_at: datetime
    # Stored rows are not re-validated as email addresses
    email: str

    class Config:
        from_attributes = True

class ClientWithStats(Client):
    project_count: int = 0
    active_project_count: int = 0
    total_revenue: float = 0

class ClientWithProjects(Client):
    projects: List[Project] = []
    total_paid: float = 0
    total_updates: int = 0
