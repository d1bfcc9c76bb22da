"""CRM Admin - Data Models"""
from .db_models import (
    # Enums
    Role, UserStatus, ReviewStatus, CampaignStatus, InteractionStatus,
    # Tables
    UserDB, CustomerCampaignDB, InteractionDB, NotificationDB, SettingsDB, EmailCampaignDB,
)

__all__ = [
    "Role", "UserStatus", "ReviewStatus", "CampaignStatus", "InteractionStatus",
    "UserDB", "CustomerCampaignDB", "InteractionDB", "NotificationDB", "SettingsDB", "EmailCampaignDB",
]
