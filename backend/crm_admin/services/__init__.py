"""CRM Admin - Services"""
from .admin_service import AdminService
from .email_service import EmailService
from .hard_delete_service import HardDeleteService

__all__ = [
    "AdminService",
    "EmailService",
    "HardDeleteService",
]
