"""
CRM Admin - Input Schemas
Pydantic models for data handed to the admin service.
"""
import json
from typing import Optional

from pydantic import BaseModel, EmailStr, Field, field_validator

from .models.db_models import UserStatus


# -----------------------------------------------------------------------------
# CUSTOMER MODELS
# -----------------------------------------------------------------------------

class CustomerCreate(BaseModel):
    """New customer created directly by an admin."""
    username: str
    email: EmailStr
    password: Optional[str] = None
    phone: Optional[str] = None
    age: Optional[int] = Field(None, ge=0)
    adhar_card: Optional[str] = None
    address: Optional[str] = None


class CustomerUpdate(BaseModel):
    """Full replacement of a customer's editable fields."""
    username: str
    email: EmailStr
    phone: Optional[str] = None
    age: Optional[int] = Field(None, ge=0)
    adhar_card: Optional[str] = None
    address: Optional[str] = None
    status: UserStatus

    @field_validator('status', mode='before')
    @classmethod
    def normalize_status(cls, v):
        if isinstance(v, str):
            return v.strip().upper()
        return v


# -----------------------------------------------------------------------------
# ADMIN PROFILE MODELS
# -----------------------------------------------------------------------------

class AdminProfileUpdate(BaseModel):
    email: EmailStr
    phone: Optional[str] = None
    department: Optional[str] = None
    position: Optional[str] = None
    bio: Optional[str] = None


class PasswordChange(BaseModel):
    current_password: str
    new_password: str = Field(..., min_length=8)


# -----------------------------------------------------------------------------
# EMAIL CAMPAIGN MODELS
# -----------------------------------------------------------------------------

class EmailCampaignCreate(BaseModel):
    name: str
    subject: str
    status: Optional[str] = None  # Defaults to "draft"


class EmailCampaignUpdate(BaseModel):
    name: str
    subject: str
    status: str


# -----------------------------------------------------------------------------
# SYSTEM SETTINGS
# -----------------------------------------------------------------------------

class SystemSettingsPayload(BaseModel):
    """
    Settings write. `id` is accepted for compatibility with clients that echo
    the stored record back, but the service always writes the singleton key.
    """
    id: Optional[int] = None
    general_settings: str = "{}"
    email_settings: str = "{}"
    security_settings: str = "{}"

    @field_validator('general_settings', 'email_settings', 'security_settings')
    @classmethod
    def validate_json_text(cls, v):
        try:
            json.loads(v)
        except (json.JSONDecodeError, TypeError):
            raise ValueError('Settings sections must be valid JSON text')
        return v
