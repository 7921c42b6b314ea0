# ============================================================================
# FILE: app/schemas/user.py
# ============================================================================
from pydantic import BaseModel, EmailStr, field_validator
from typing import Optional
from datetime import datetime

class SignupRequest(BaseModel):
    """Schema for user registration"""
    # Presence and length are checked by the authenticator so that every
    # missing-field case gets the same 400 message
    username: Optional[str] = None
    email: Optional[EmailStr] = None
    password: Optional[str] = None

    @field_validator("email", mode="before")
    @classmethod
    def blank_email_is_missing(cls, value):
        # "" must reach the presence check, not fail email parsing
        if isinstance(value, str) and not value.strip():
            return None
        return value

class LoginRequest(BaseModel):
    """Schema for user login"""
    username: Optional[str] = None
    password: Optional[str] = None

class UserResponse(BaseModel):
    """Public user representation, never carries the password hash"""
    id: int
    username: str
    email: str
    created_at: datetime
    
    class Config:
        from_attributes = True

class UserEnvelope(BaseModel):
    user: UserResponse

class MessageResponse(BaseModel):
    message: str
