"""Authentication schemas"""

from datetime import datetime
from typing import Optional
from uuid import UUID
from pydantic import BaseModel

from ordercore.models.user import UserRole


class Token(BaseModel):
    """JWT token response"""
    access_token: str
    token_type: str = "bearer"
    expires_in: int


class UserResponse(BaseModel):
    """User response"""
    id: UUID
    email: str
    full_name: Optional[str]
    role: UserRole
    store_id: Optional[UUID]
    is_active: bool
    created_at: datetime
    last_login: Optional[datetime]

    class Config:
        from_attributes = True
