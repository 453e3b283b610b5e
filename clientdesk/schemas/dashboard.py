from enum import Enum
from typing import List, Optional
from datetime import datetime
from pydantic import BaseModel

class ActivityType(str, Enum):
    payment = "payment"
    update = "update"
    project_finished = "project_finished"
    project_started = "project_started"

class DashboardStats(BaseModel):
    total_clients: int = 0
    total_projects: int = 0
    monthly_revenue: float = 0
    total_revenue: float = 0

class ProjectStatusStats(BaseModel):
    started: int = 0
    finished: int = 0
    total: int = 0

class FinancialStats(BaseModel):
    total_budget: float = 0
    total_paid: float = 0
    outstanding: float = 0

class Activity(BaseModel):
    id: str
    type: ActivityType
    message: str
    date: datetime
    client_name: str
    project_title: str
    project_id: Optional[int] = None
    amount: Optional[float] = None
    update_description: Optional[str] = None

class DashboardData(BaseModel):
    stats: DashboardStats
    project_status: ProjectStatusStats
    financials: FinancialStats
    activities: List[Activity] = []
