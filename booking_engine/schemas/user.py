from pydantic import BaseModel, Field
from datetime import datetime
from uuid import UUID


class UserBase(BaseModel):
    """Base user schema."""
    external_id: str = Field(..., max_length=64, description="Identity provider subject id")
    name: str = Field(..., max_length=255)
    email: str = Field(..., max_length=320)
    phone: str | None = Field(None, max_length=20)


class UserIdentify(UserBase):
    """Verified claims forwarded by the identity gateway."""
    pass


class UserResponse(UserBase):
    """Schema for user response."""
    id: UUID
    role: str
    is_active: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
