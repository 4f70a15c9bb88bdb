"""Profile models for the storefront"""

from pydantic import BaseModel
from typing import Optional


class Profile(BaseModel):
    """Customer profile"""
    id: str
    first_name: str = ""
    last_name: str = ""
    email: str = ""
    phone: str = ""


class UpdateProfileRequest(BaseModel):
    first_name: str = ""
    last_name: str = ""
    phone: str = ""


class ProfileResponse(BaseModel):
    """Profile API response"""
    profile: Profile
    message: Optional[str] = None
