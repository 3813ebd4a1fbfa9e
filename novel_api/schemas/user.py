"""
User Pydantic schemas
"""

from pydantic import BaseModel, Field


class UserCreate(BaseModel):
    """Registration request.
    Fields are validated by the account service so every problem can be
    reported per field in one response.
    """
    username: str = ""
    email: str = ""
    password: str = ""


class UserLogin(BaseModel):
    """Login request"""
    email: str = ""
    password: str = ""


class RegisterResponse(BaseModel):
    message: str = "User registered successfully"


class AvailabilityResponse(BaseModel):
    """Availability check response"""
    available: bool = Field(..., description="True when no account uses the value")
