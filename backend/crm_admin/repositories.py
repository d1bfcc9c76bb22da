"""
CRM Admin - Repositories

One repository per store. Repositories flush but never commit; the caller's
unit of work (database.transaction) owns the commit.
"""
from dataclasses import dataclass, field
from typing import Generic, List, Optional, TypeVar

from sqlalchemy import desc, func
from sqlalchemy.orm import Query, Session

from .exceptions import InvalidArgumentError
from .models.db_models import (
    UserDB, CustomerCampaignDB, InteractionDB, NotificationDB, SettingsDB, EmailCampaignDB,
    Role, UserStatus, CampaignStatus, InteractionStatus,
)

T = TypeVar("T")


@dataclass
class Page(Generic[T]):
    """One page of a filtered scan. Pages are 1-based."""
    items: List[T] = field(default_factory=list)
    total: int = 0
    page: int = 1
    page_size: int = 20


def paginate(query: Query, page: int, page_size: int) -> Page:
    if page < 1 or page_size < 1:
        raise InvalidArgumentError(f"Invalid page {page} or page size {page_size}; both must be at least 1.")
    total = query.count()
    offset = (page - 1) * page_size
    items = query.offset(offset).limit(page_size).all()
    return Page(items=items, total=total, page=page, page_size=page_size)


class AccountRepository:
    """Store for UserDB accounts."""

    def __init__(self, db: Session):
        self.db = db

    def find_by_id(self, account_id: str) -> Optional[UserDB]:
        return self.db.query(UserDB).filter(UserDB.id == account_id).first()

    def find_by_username(self, username: str) -> Optional[UserDB]:
        return self.db.query(UserDB).filter(UserDB.username == username).first()

    def find_by_role(self, role: Role, page: int = 1, page_size: int = 20) -> Page:
        query = self.db.query(UserDB).filter(UserDB.role == role).order_by(desc(UserDB.created_at), UserDB.id)
        return paginate(query, page, page_size)

    def find_by_role_and_status(
        self, role: Role, status: UserStatus, page: int = 1, page_size: int = 20
    ) -> Page:
        query = self.db.query(UserDB).filter(
            UserDB.role == role,
            UserDB.status == status
        ).order_by(desc(UserDB.created_at), UserDB.id)
        return paginate(query, page, page_size)

    def count_by_role(self, role: Role) -> int:
        return self.db.query(func.count(UserDB.id)).filter(UserDB.role == role).scalar() or 0

    def count_by_role_and_status(self, role: Role, status: UserStatus) -> int:
        return self.db.query(func.count(UserDB.id)).filter(
            UserDB.role == role,
            UserDB.status == status
        ).scalar() or 0

    def save(self, account: UserDB) -> UserDB:
        self.db.add(account)
        self.db.flush()
        return account

    def delete(self, account: UserDB) -> None:
        self.db.delete(account)
        self.db.flush()


class CustomerCampaignRepository:
    """Store for customer campaign proposals."""

    def __init__(self, db: Session):
        self.db = db

    def find_by_id(self, campaign_id: str) -> Optional[CustomerCampaignDB]:
        return self.db.query(CustomerCampaignDB).filter(CustomerCampaignDB.id == campaign_id).first()

    def find_by_status(self, status: CampaignStatus) -> List[CustomerCampaignDB]:
        return self.db.query(CustomerCampaignDB).filter(
            CustomerCampaignDB.status == status
        ).order_by(CustomerCampaignDB.created_at).all()

    def count_by_status(self, status: CampaignStatus) -> int:
        return self.db.query(func.count(CustomerCampaignDB.id)).filter(
            CustomerCampaignDB.status == status
        ).scalar() or 0

    def save(self, campaign: CustomerCampaignDB) -> CustomerCampaignDB:
        self.db.add(campaign)
        self.db.flush()
        return campaign

    def delete_by_customer_id(self, customer_id: str) -> int:
        return self.db.query(CustomerCampaignDB).filter(
            CustomerCampaignDB.customer_id == customer_id
        ).delete(synchronize_session=False)


class InteractionRepository:
    """Store for customer interactions."""

    def __init__(self, db: Session):
        self.db = db

    def find_by_id(self, interaction_id: str) -> Optional[InteractionDB]:
        return self.db.query(InteractionDB).filter(InteractionDB.id == interaction_id).first()

    def find_by_status(self, status: InteractionStatus, page: int = 1, page_size: int = 20) -> Page:
        query = self.db.query(InteractionDB).filter(
            InteractionDB.status == status
        ).order_by(InteractionDB.created_at, InteractionDB.id)
        return paginate(query, page, page_size)

    def count(self) -> int:
        return self.db.query(func.count(InteractionDB.id)).scalar() or 0

    def count_by_status(self, status: InteractionStatus) -> int:
        return self.db.query(func.count(InteractionDB.id)).filter(
            InteractionDB.status == status
        ).scalar() or 0

    def save(self, interaction: InteractionDB) -> InteractionDB:
        self.db.add(interaction)
        self.db.flush()
        return interaction

    def delete_by_customer_id(self, customer_id: str) -> int:
        return self.db.query(InteractionDB).filter(
            InteractionDB.customer_id == customer_id
        ).delete(synchronize_session=False)


class NotificationRepository:
    """Store for account notifications."""

    def __init__(self, db: Session):
        self.db = db

    def find_by_user_id(self, user_id: str) -> List[NotificationDB]:
        return self.db.query(NotificationDB).filter(
            NotificationDB.user_id == user_id
        ).order_by(NotificationDB.created_at).all()

    def save(self, notification: NotificationDB) -> NotificationDB:
        self.db.add(notification)
        self.db.flush()
        return notification

    def delete_by_user_id(self, user_id: str) -> int:
        return self.db.query(NotificationDB).filter(
            NotificationDB.user_id == user_id
        ).delete(synchronize_session=False)


class SettingsRepository:
    """Store for the system settings singleton."""

    def __init__(self, db: Session):
        self.db = db

    def find_by_id(self, settings_id: int) -> Optional[SettingsDB]:
        return self.db.get(SettingsDB, settings_id)

    def save(self, settings: SettingsDB) -> SettingsDB:
        # merge() upserts on the primary key
        merged = self.db.merge(settings)
        self.db.flush()
        return merged


class EmailCampaignRepository:
    """Store for marketing email campaigns."""

    def __init__(self, db: Session):
        self.db = db

    def find_all(self, page: int = 1, page_size: int = 20) -> Page:
        query = self.db.query(EmailCampaignDB).order_by(desc(EmailCampaignDB.created_at), EmailCampaignDB.id)
        return paginate(query, page, page_size)

    def find_by_id(self, campaign_id: str) -> Optional[EmailCampaignDB]:
        return self.db.query(EmailCampaignDB).filter(EmailCampaignDB.id == campaign_id).first()

    def save(self, campaign: EmailCampaignDB) -> EmailCampaignDB:
        self.db.add(campaign)
        self.db.flush()
        return campaign

    def delete(self, campaign: EmailCampaignDB) -> None:
        self.db.delete(campaign)
        self.db.flush()
