"""
CRM Admin - SQLAlchemy ORM Models
PostgreSQL database models for accounts, customer proposals and system settings
"""
from datetime import datetime
from enum import Enum
from sqlalchemy import Column, String, Integer, DateTime, Text, ForeignKey, Enum as SQLEnum, Boolean
from sqlalchemy.orm import relationship
from ..database import Base
from ..exceptions import InvalidArgumentError


# =============================================================================
# ENUMS
# =============================================================================

class Role(str, Enum):
    """Account roles."""
    CUSTOMER = "CUSTOMER"
    ADMIN = "ADMIN"


class UserStatus(str, Enum):
    """Account lifecycle status. Registration creates PENDING accounts."""
    PENDING = "PENDING"
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"


class ReviewStatus(str, Enum):
    """Base for statuses set by an admin review."""

    @classmethod
    def normalize(cls, value: str) -> "ReviewStatus":
        """Case-insensitive lookup, stored upper-case."""
        if value is None:
            raise InvalidArgumentError("Status is required.")
        canonical = str(value).strip().upper()
        try:
            return cls(canonical)
        except ValueError:
            valid = ", ".join(member.value for member in cls)
            raise InvalidArgumentError(
                f"Invalid status '{value}'. Must be one of: {valid}"
            ) from None


class CampaignStatus(ReviewStatus):
    """Customer campaign proposal status."""
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class InteractionStatus(ReviewStatus):
    """Customer interaction status."""
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


# =============================================================================
# ACCOUNTS
# =============================================================================

class UserDB(Base):
    """Customer or admin account."""
    __tablename__ = "users"

    id = Column(String(36), primary_key=True)  # UUID
    username = Column(String(100), unique=True, nullable=False, index=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)

    role = Column(SQLEnum(Role), nullable=False, default=Role.CUSTOMER, index=True)
    status = Column(SQLEnum(UserStatus), nullable=False, default=UserStatus.PENDING, index=True)

    # Customer profile
    phone = Column(String(20), nullable=True)
    age = Column(Integer, nullable=True)
    adhar_card = Column(String(20), nullable=True)
    address = Column(String(500), nullable=True)

    # Admin profile
    department = Column(String(100), nullable=True)
    position = Column(String(100), nullable=True)
    bio = Column(Text, nullable=True)

    join_date = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


# =============================================================================
# CUSTOMER-SUBMITTED RECORDS
# =============================================================================

class CustomerCampaignDB(Base):
    """Campaign proposal submitted by a customer, reviewed by an admin."""
    __tablename__ = "customer_campaigns"

    id = Column(String(36), primary_key=True)  # UUID
    customer_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)

    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    status = Column(SQLEnum(CampaignStatus), nullable=False, default=CampaignStatus.PENDING, index=True)

    created_at = Column(DateTime, default=datetime.utcnow)
    reviewed_at = Column(DateTime, nullable=True)  # Null until an admin reviews

    customer = relationship("UserDB")


class InteractionDB(Base):
    """Customer interaction record (support request, meeting, call)."""
    __tablename__ = "interactions"

    id = Column(String(36), primary_key=True)  # UUID
    customer_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)

    subject = Column(String(255), nullable=False)
    notes = Column(Text, nullable=True)
    status = Column(SQLEnum(InteractionStatus), nullable=False, default=InteractionStatus.PENDING, index=True)

    created_at = Column(DateTime, default=datetime.utcnow)

    customer = relationship("UserDB")


class NotificationDB(Base):
    """In-app notice for an account. Only written as a side effect of a review."""
    __tablename__ = "notifications"

    id = Column(String(36), primary_key=True)  # UUID
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)

    message = Column(Text, nullable=False)
    is_read = Column(Boolean, default=False)

    created_at = Column(DateTime, default=datetime.utcnow)

    user = relationship("UserDB")


# =============================================================================
# SYSTEM SETTINGS
# =============================================================================

class SettingsDB(Base):
    """
    System settings singleton. Exactly one row, keyed by SETTINGS_ID.
    Each section is opaque JSON text owned by the admin UI.
    """
    __tablename__ = "settings"

    id = Column(Integer, primary_key=True)
    general_settings = Column(Text, nullable=False, default="{}")
    email_settings = Column(Text, nullable=False, default="{}")
    security_settings = Column(Text, nullable=False, default="{}")


# =============================================================================
# MARKETING
# =============================================================================

class EmailCampaignDB(Base):
    """Admin-managed marketing email campaign. Status is free-form (draft, scheduled, sent)."""
    __tablename__ = "email_campaigns"

    id = Column(String(36), primary_key=True)  # UUID
    name = Column(String(255), nullable=False)
    subject = Column(String(255), nullable=False)
    status = Column(String(50), nullable=False, default="draft")

    created_at = Column(DateTime, default=datetime.utcnow)
