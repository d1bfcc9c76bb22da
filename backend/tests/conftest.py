"""
Shared fixtures for the admin service test suite.

Each test gets its own file-backed SQLite database so commits and rollbacks
behave the way they do against PostgreSQL.
"""
import os

# Must be set before crm_admin.database is imported
os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from unittest.mock import MagicMock
from uuid import uuid4

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from crm_admin.database import Base
from crm_admin.models.db_models import (
    UserDB, CustomerCampaignDB, InteractionDB, NotificationDB,
    Role, UserStatus, CampaignStatus, InteractionStatus,
)
from crm_admin.services.admin_service import AdminService


# =============================================================================
# DATABASE FIXTURES
# =============================================================================

@pytest.fixture
def engine(tmp_path):
    """Create a fresh SQLite database with all tables."""
    engine = create_engine(f"sqlite:///{tmp_path / 'crm.db'}")
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    """Database session used by the service under test."""
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def mock_email():
    """Notifier double; records every send_simple_message call."""
    return MagicMock()


@pytest.fixture
def admin_service(db, mock_email):
    return AdminService(db, email_service=mock_email)


# =============================================================================
# RECORD FACTORIES
# =============================================================================

@pytest.fixture
def make_user(db):
    def _make_user(role=Role.CUSTOMER, status=UserStatus.PENDING, email=None, username=None,
                   password_hash="not-a-real-hash"):
        suffix = uuid4().hex[:8]
        user = UserDB(
            id=str(uuid4()),
            username=username or f"user_{suffix}",
            email=email or f"user_{suffix}@example.com",
            password_hash=password_hash,
            role=role,
            status=status,
        )
        db.add(user)
        db.commit()
        return user.id
    return _make_user


@pytest.fixture
def make_campaign(db):
    def _make_campaign(customer_id, title="Spring Promo", status=CampaignStatus.PENDING):
        campaign = CustomerCampaignDB(
            id=str(uuid4()),
            customer_id=customer_id,
            title=title,
            status=status,
        )
        db.add(campaign)
        db.commit()
        return campaign.id
    return _make_campaign


@pytest.fixture
def make_interaction(db):
    def _make_interaction(customer_id, subject="Billing question", status=InteractionStatus.PENDING):
        interaction = InteractionDB(
            id=str(uuid4()),
            customer_id=customer_id,
            subject=subject,
            status=status,
        )
        db.add(interaction)
        db.commit()
        return interaction.id
    return _make_interaction


@pytest.fixture
def make_notification(db):
    def _make_notification(user_id, message="Welcome"):
        notification = NotificationDB(id=str(uuid4()), user_id=user_id, message=message)
        db.add(notification)
        db.commit()
        return notification.id
    return _make_notification
