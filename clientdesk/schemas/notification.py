from enum import Enum
from typing import Optional
from datetime import datetime
from pydantic import BaseModel

class ToastType(str, Enum):
    success = "success"
    error = "error"

class Toast(BaseModel):
    id: str
    type: ToastType
    title: str
    message: Optional[str] = None
    duration: int
    created_at: datetime
