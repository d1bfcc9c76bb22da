"""
Tests for cascading customer delete.

1. All interactions, notifications and campaign proposals go with the customer
2. Records owned by other customers are untouched
3. Non-customer or missing accounts are NotFound
4. A failure part-way through leaves the account row in place
"""
import pytest
from unittest.mock import MagicMock, patch

from sqlalchemy.exc import SQLAlchemyError

from crm_admin.exceptions import ResourceNotFoundError
from crm_admin.models.db_models import (
    UserDB, CustomerCampaignDB, InteractionDB, NotificationDB, Role, UserStatus,
)
from crm_admin.services.hard_delete_service import HardDeleteService


def count(db, model, **filters):
    return db.query(model).filter_by(**filters).count()


@pytest.fixture
def customer_with_records(make_user, make_interaction, make_notification, make_campaign):
    """Customer owning 2 interactions, 3 notifications and 1 campaign proposal."""
    customer_id = make_user(status=UserStatus.ACTIVE)
    for subject in ("Onboarding", "Upgrade"):
        make_interaction(customer_id, subject=subject)
    for message in ("one", "two", "three"):
        make_notification(customer_id, message=message)
    make_campaign(customer_id)
    return customer_id


class TestDeleteCustomer:

    def test_removes_customer_and_all_dependents(self, admin_service, db, customer_with_records):
        cascade = admin_service.delete_customer(customer_with_records)

        assert cascade == {"interactions": 2, "notifications": 3, "customer_campaigns": 1}
        db.expire_all()
        assert db.get(UserDB, customer_with_records) is None
        assert count(db, InteractionDB, customer_id=customer_with_records) == 0
        assert count(db, NotificationDB, user_id=customer_with_records) == 0
        assert count(db, CustomerCampaignDB, customer_id=customer_with_records) == 0

    def test_other_customers_untouched(self, admin_service, db, customer_with_records,
                                       make_user, make_interaction, make_notification):
        other_id = make_user(status=UserStatus.ACTIVE)
        make_interaction(other_id)
        make_notification(other_id)

        admin_service.delete_customer(customer_with_records)

        db.expire_all()
        assert db.get(UserDB, other_id) is not None
        assert count(db, InteractionDB, customer_id=other_id) == 1
        assert count(db, NotificationDB, user_id=other_id) == 1

    def test_customer_without_dependents(self, admin_service, db, make_user):
        customer_id = make_user(status=UserStatus.PENDING)

        cascade = admin_service.delete_customer(customer_id)

        assert cascade == {"interactions": 0, "notifications": 0, "customer_campaigns": 0}
        db.expire_all()
        assert db.get(UserDB, customer_id) is None

    def test_admin_account_not_found(self, admin_service, db, make_user, make_notification):
        admin_id = make_user(role=Role.ADMIN, status=UserStatus.ACTIVE)
        make_notification(admin_id)

        with pytest.raises(ResourceNotFoundError):
            admin_service.delete_customer(admin_id)

        db.expire_all()
        assert db.get(UserDB, admin_id) is not None
        assert count(db, NotificationDB, user_id=admin_id) == 1

    def test_missing_customer_not_found(self, admin_service):
        with pytest.raises(ResourceNotFoundError):
            admin_service.delete_customer("missing")

    def test_failure_after_interactions_keeps_account(self, admin_service, db, customer_with_records):
        observed = {}

        def fail_mid_cascade(user_id):
            # Interactions are gone inside the open transaction, the owner is not
            observed["interactions"] = count(db, InteractionDB, customer_id=user_id)
            observed["accounts"] = count(db, UserDB, id=user_id)
            raise SQLAlchemyError("notification store unavailable")

        with patch.object(admin_service.notifications, "delete_by_user_id", side_effect=fail_mid_cascade):
            with pytest.raises(SQLAlchemyError):
                admin_service.delete_customer(customer_with_records)

        assert observed == {"interactions": 0, "accounts": 1}
        db.expire_all()
        assert db.get(UserDB, customer_with_records) is not None
        assert count(db, InteractionDB, customer_id=customer_with_records) == 2
        assert count(db, NotificationDB, user_id=customer_with_records) == 3

    def test_deletion_order(self):
        """Dependents are removed before the owner, in a fixed order."""
        mock_db = MagicMock()
        calls = []

        customer = MagicMock()
        customer.role = Role.CUSTOMER

        accounts = MagicMock()
        accounts.find_by_id.return_value = customer
        accounts.delete.side_effect = lambda c: calls.append("account")
        interactions = MagicMock()
        interactions.delete_by_customer_id.side_effect = lambda cid: calls.append("interactions") or 0
        notifications = MagicMock()
        notifications.delete_by_user_id.side_effect = lambda cid: calls.append("notifications") or 0
        campaigns = MagicMock()
        campaigns.delete_by_customer_id.side_effect = lambda cid: calls.append("customer_campaigns") or 0

        service = HardDeleteService(
            mock_db,
            accounts=accounts,
            interactions=interactions,
            notifications=notifications,
            campaigns=campaigns,
        )
        service.delete_customer("cust-1")

        assert calls == ["interactions", "notifications", "customer_campaigns", "account"]
        mock_db.commit.assert_called_once()
        mock_db.rollback.assert_not_called()
