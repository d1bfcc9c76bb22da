"""
Hard Delete Service

Canonical, transactional deletion of customer accounts with full dependency teardown.
No soft-delete, no status flags, no archival.
"""
import logging
from typing import Optional

from sqlalchemy.orm import Session

from ..database import transaction
from ..exceptions import ResourceNotFoundError
from ..models.db_models import Role
from ..repositories import (
    AccountRepository, CustomerCampaignRepository, InteractionRepository, NotificationRepository
)

logger = logging.getLogger(__name__)


class HardDeleteService:
    """
    Centralized hard delete service.
    Single source of truth for dependency discovery and ordered deletion.
    """

    def __init__(
        self,
        db: Session,
        accounts: Optional[AccountRepository] = None,
        interactions: Optional[InteractionRepository] = None,
        notifications: Optional[NotificationRepository] = None,
        campaigns: Optional[CustomerCampaignRepository] = None,
    ):
        self.db = db
        self.accounts = accounts or AccountRepository(db)
        self.interactions = interactions or InteractionRepository(db)
        self.notifications = notifications or NotificationRepository(db)
        self.campaigns = campaigns or CustomerCampaignRepository(db)

    def delete_customer(self, customer_id: str) -> dict:
        """
        Hard delete a customer account and all dependent records.

        Deletion order:
        1. Delete interactions owned by the customer
        2. Delete notifications targeting the customer
        3. Delete campaign proposals owned by the customer
        4. Delete the customer

        The account row is removed last, so it outlives every dependent row
        even when a step fails part-way. Returns cascade counts for confirmation.
        """
        with transaction(self.db):
            customer = self.accounts.find_by_id(customer_id)
            if not customer or customer.role != Role.CUSTOMER:
                logger.warning(f"Delete rejected, no customer with id {customer_id}")
                raise ResourceNotFoundError(f"Customer not found with id: {customer_id}")

            cascade = {
                "interactions": 0,
                "notifications": 0,
                "customer_campaigns": 0,
            }

            # Step 1-3: Delete all dependent records
            cascade["interactions"] = self.interactions.delete_by_customer_id(customer_id)
            cascade["notifications"] = self.notifications.delete_by_user_id(customer_id)
            cascade["customer_campaigns"] = self.campaigns.delete_by_customer_id(customer_id)

            # Step 4: Delete the customer
            self.accounts.delete(customer)

        logger.info(f"Deleted customer {customer_id} with dependents {cascade}")
        return cascade
