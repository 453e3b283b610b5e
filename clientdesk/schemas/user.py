from typing import Optional
from pydantic import BaseModel

class User(BaseModel):
    """The signed-in account, as reported by Supabase Auth."""
    id: str
    email: Optional[str] = None
    role: Optional[str] = None
