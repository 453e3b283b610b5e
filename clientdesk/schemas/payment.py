from enum import Enum
from typing import Optional
from datetime import date, datetime
from pydantic import BaseModel, Field
from clientdesk.schemas.project import ProjectStatus, ProjectSummary

class PaymentMethod(str, Enum):
    bank_transfer = "Bank Transfer"
    cash = "Cash"
    check = "Check"

class PaymentBase(BaseModel):
    amount: float = Field(..., gt=0)
    payment_date: date
    payment_method: PaymentMethod

class PaymentCreate(PaymentBase):
    pass

class Payment(PaymentBase):
    id: int
    project_id: int
    created_at: datetime

    class Config:
        from_attributes = True

class PaymentWithDetails(Payment):
    project: Optional[ProjectSummary] = None

class PaymentOutcome(BaseModel):
    """Result of recording or removing a payment, including any automatic status change."""
    payment: Payment
    project_status: ProjectStatus
    status_changed: bool = False
    total_paid: float
    progress: float
