"""
Admin Service

Approval workflow for the CRM admin console.

Each public operation runs in one unit of work (database.transaction):
precondition check, state change and paired record writes commit together
or not at all. Email goes out only after the commit and its failure never
undoes the transition.

TRANSITIONS:
- Account:      PENDING -> ACTIVE (approve), PENDING -> deleted (reject)
- Campaign:     any -> PENDING/APPROVED/REJECTED (review, stamps reviewed_at)
- Interaction:  any -> PENDING/APPROVED/REJECTED (review)
- Customer:     deleted with dependents (HardDeleteService)
"""
import logging
from datetime import datetime
from typing import Dict, List, Optional
from uuid import uuid4

from sqlalchemy.orm import Session

from ..auth import hash_password, verify_password
from ..database import transaction
from ..exceptions import InvalidArgumentError, ResourceNotFoundError
from ..models.db_models import (
    UserDB, CustomerCampaignDB, InteractionDB, NotificationDB, SettingsDB, EmailCampaignDB,
    Role, UserStatus, CampaignStatus, InteractionStatus,
)
from ..repositories import (
    Page, AccountRepository, CustomerCampaignRepository, InteractionRepository,
    NotificationRepository, SettingsRepository, EmailCampaignRepository,
)
from ..schemas import (
    CustomerCreate, CustomerUpdate, AdminProfileUpdate, PasswordChange, SystemSettingsPayload,
    EmailCampaignCreate, EmailCampaignUpdate,
)
from .email_service import EmailService
from .hard_delete_service import HardDeleteService

logger = logging.getLogger(__name__)

SETTINGS_ID = 1
DEFAULT_SETTINGS_BLOB = "{}"
DEFAULT_EMAIL_CAMPAIGN_STATUS = "draft"

APPROVAL_SUBJECT = "Account Approved"
APPROVAL_BODY = "Your account on the CRM Portal has been approved. You can now log in."
REJECTION_SUBJECT = "Account Update"
REJECTION_BODY = "We regret to inform you that your registration for the CRM Portal has been rejected."


class AdminService:
    """Administrative control layer: account approval, proposal review, settings."""

    def __init__(
        self,
        db: Session,
        email_service: Optional[EmailService] = None,
        accounts: Optional[AccountRepository] = None,
        campaigns: Optional[CustomerCampaignRepository] = None,
        interactions: Optional[InteractionRepository] = None,
        notifications: Optional[NotificationRepository] = None,
        settings: Optional[SettingsRepository] = None,
        email_campaigns: Optional[EmailCampaignRepository] = None,
    ):
        self.db = db
        self.email_service = email_service or EmailService()
        self.accounts = accounts or AccountRepository(db)
        self.campaigns = campaigns or CustomerCampaignRepository(db)
        self.interactions = interactions or InteractionRepository(db)
        self.notifications = notifications or NotificationRepository(db)
        self.settings = settings or SettingsRepository(db)
        self.email_campaigns = email_campaigns or EmailCampaignRepository(db)
        self.hard_delete = HardDeleteService(
            db,
            accounts=self.accounts,
            interactions=self.interactions,
            notifications=self.notifications,
            campaigns=self.campaigns,
        )

    # =========================================================================
    # CUSTOMER APPROVAL
    # =========================================================================

    def get_pending_customers(self, page: int = 1, page_size: int = 20) -> Page:
        return self.accounts.find_by_role_and_status(Role.CUSTOMER, UserStatus.PENDING, page, page_size)

    def approve_customer(self, customer_id: str) -> UserDB:
        """Activate a PENDING account, then send the approval email."""
        with transaction(self.db):
            customer = self._get_pending_customer(customer_id)
            customer.status = UserStatus.ACTIVE
            customer = self.accounts.save(customer)
            email = customer.email

        logger.info(f"Approved customer {customer_id}")
        self._send_email(email, APPROVAL_SUBJECT, APPROVAL_BODY)
        return customer

    def reject_customer(self, customer_id: str) -> None:
        """
        Delete a PENDING account, then send the rejection email to the
        address captured before the delete.
        """
        # TODO: add dependent cleanup here if registration ever lets a PENDING
        # account own interactions or campaign proposals.
        with transaction(self.db):
            customer = self._get_pending_customer(customer_id)
            email = customer.email
            self.accounts.delete(customer)

        logger.info(f"Rejected and deleted customer {customer_id}")
        self._send_email(email, REJECTION_SUBJECT, REJECTION_BODY)

    def _get_pending_customer(self, customer_id: str) -> UserDB:
        customer = self.accounts.find_by_id(customer_id)
        if not customer or customer.status != UserStatus.PENDING:
            logger.warning(f"No pending customer with id {customer_id}")
            raise ResourceNotFoundError(f"Pending customer not found with id: {customer_id}")
        return customer

    def _send_email(self, to: str, subject: str, text: str) -> None:
        try:
            self.email_service.send_simple_message(to, subject, text)
        except Exception as e:
            logger.error(f"Email '{subject}' to {to} failed: {e}")

    # =========================================================================
    # CAMPAIGN APPROVAL
    # =========================================================================

    def get_pending_campaigns(self) -> List[CustomerCampaignDB]:
        return self.campaigns.find_by_status(CampaignStatus.PENDING)

    def update_customer_campaign_status(self, campaign_id: str, status: str) -> CustomerCampaignDB:
        """
        Review a campaign proposal. Any current status may be re-reviewed.
        The customer notification is written before the proposal so a failed
        notice aborts the review.
        """
        new_status = CampaignStatus.normalize(status)

        with transaction(self.db):
            campaign = self.campaigns.find_by_id(campaign_id)
            if not campaign:
                logger.warning(f"No customer campaign with id {campaign_id}")
                raise ResourceNotFoundError(f"Customer Campaign not found: {campaign_id}")
            self._require_owner(campaign.customer_id)

            campaign.status = new_status
            campaign.reviewed_at = datetime.utcnow()

            message = (
                f"Your campaign proposal '{campaign.title}' has been "
                f"{new_status.value.lower()} by the admin."
            )
            self.notifications.save(self._notification(campaign.customer_id, message))
            campaign = self.campaigns.save(campaign)

        logger.info(f"Campaign {campaign_id} reviewed as {new_status.value}")
        return campaign

    # =========================================================================
    # INTERACTION APPROVAL
    # =========================================================================

    def get_pending_interactions(self, page: int = 1, page_size: int = 20) -> Page:
        return self.interactions.find_by_status(InteractionStatus.PENDING, page, page_size)

    def update_interaction_status(self, interaction_id: str, status: str) -> InteractionDB:
        """Review an interaction. Unlike campaigns, no review timestamp is kept."""
        new_status = InteractionStatus.normalize(status)

        with transaction(self.db):
            interaction = self.interactions.find_by_id(interaction_id)
            if not interaction:
                logger.warning(f"No interaction with id {interaction_id}")
                raise ResourceNotFoundError(f"Interaction not found with id: {interaction_id}")
            self._require_owner(interaction.customer_id)

            interaction.status = new_status

            message = (
                f"Admin has reviewed your interaction '{interaction.subject}'. "
                f"New status: {new_status.value.lower()}"
            )
            self.notifications.save(self._notification(interaction.customer_id, message))
            interaction = self.interactions.save(interaction)

        logger.info(f"Interaction {interaction_id} reviewed as {new_status.value}")
        return interaction

    def _require_owner(self, customer_id: str) -> UserDB:
        owner = self.accounts.find_by_id(customer_id)
        if not owner:
            logger.warning(f"Owning account {customer_id} is missing")
            raise ResourceNotFoundError(f"Customer not found with id: {customer_id}")
        return owner

    @staticmethod
    def _notification(user_id: str, message: str) -> NotificationDB:
        return NotificationDB(id=str(uuid4()), user_id=user_id, message=message)

    # =========================================================================
    # CUSTOMER MANAGEMENT
    # =========================================================================

    def get_all_customers(self, page: int = 1, page_size: int = 20) -> Page:
        return self.accounts.find_by_role(Role.CUSTOMER, page, page_size)

    def add_customer(self, data: CustomerCreate) -> UserDB:
        if not data.password:
            raise InvalidArgumentError("Password is required for a new customer.")

        now = datetime.utcnow()
        customer = UserDB(
            id=str(uuid4()),
            username=data.username,
            email=data.email,
            password_hash=hash_password(data.password),
            phone=data.phone,
            age=data.age,
            adhar_card=data.adhar_card,
            address=data.address,
            role=Role.CUSTOMER,
            status=UserStatus.ACTIVE,
            join_date=now,
        )
        with transaction(self.db):
            customer = self.accounts.save(customer)

        logger.info(f"Added customer {customer.id}")
        return customer

    def update_customer(self, customer_id: str, data: CustomerUpdate) -> UserDB:
        with transaction(self.db):
            customer = self._get_customer(customer_id)
            customer.username = data.username
            customer.email = data.email
            customer.phone = data.phone
            customer.age = data.age
            customer.adhar_card = data.adhar_card
            customer.address = data.address
            customer.status = data.status
            customer = self.accounts.save(customer)
        return customer

    def delete_customer(self, customer_id: str) -> dict:
        """Delete a CUSTOMER account and everything that references it."""
        return self.hard_delete.delete_customer(customer_id)

    def _get_customer(self, customer_id: str) -> UserDB:
        customer = self.accounts.find_by_id(customer_id)
        if not customer or customer.role != Role.CUSTOMER:
            raise ResourceNotFoundError(f"Customer not found with id: {customer_id}")
        return customer

    # =========================================================================
    # ANALYTICS
    # =========================================================================

    def get_admin_analytics(self) -> Dict[str, int]:
        return {
            "total_customers": self.accounts.count_by_role(Role.CUSTOMER),
            "active_customers": self.accounts.count_by_role_and_status(Role.CUSTOMER, UserStatus.ACTIVE),
            "pending_customers": self.accounts.count_by_role_and_status(Role.CUSTOMER, UserStatus.PENDING),
            "total_interactions": self.interactions.count(),
            "pending_interactions": self.interactions.count_by_status(InteractionStatus.PENDING),
            "pending_campaigns": self.campaigns.count_by_status(CampaignStatus.PENDING),
        }

    # =========================================================================
    # EMAIL CAMPAIGNS
    # =========================================================================

    def get_all_campaigns(self, page: int = 1, page_size: int = 20) -> Page:
        return self.email_campaigns.find_all(page, page_size)

    def create_campaign(self, data: EmailCampaignCreate) -> EmailCampaignDB:
        campaign = EmailCampaignDB(
            id=str(uuid4()),
            name=data.name,
            subject=data.subject,
            status=data.status or DEFAULT_EMAIL_CAMPAIGN_STATUS,
            created_at=datetime.utcnow(),
        )
        with transaction(self.db):
            campaign = self.email_campaigns.save(campaign)

        logger.info(f"Created email campaign {campaign.id}")
        return campaign

    def update_campaign(self, campaign_id: str, data: EmailCampaignUpdate) -> EmailCampaignDB:
        with transaction(self.db):
            campaign = self._get_email_campaign(campaign_id)
            campaign.name = data.name
            campaign.subject = data.subject
            campaign.status = data.status
            campaign = self.email_campaigns.save(campaign)
        return campaign

    def delete_campaign(self, campaign_id: str) -> None:
        with transaction(self.db):
            campaign = self._get_email_campaign(campaign_id)
            self.email_campaigns.delete(campaign)
        logger.info(f"Deleted email campaign {campaign_id}")

    def _get_email_campaign(self, campaign_id: str) -> EmailCampaignDB:
        campaign = self.email_campaigns.find_by_id(campaign_id)
        if not campaign:
            raise ResourceNotFoundError(f"Email Campaign not found: {campaign_id}")
        return campaign

    # =========================================================================
    # ADMIN PROFILE
    # =========================================================================

    def get_admin_profile(self, username: str) -> UserDB:
        admin = self.accounts.find_by_username(username)
        if not admin:
            raise ResourceNotFoundError(f"Admin not found: {username}")
        return admin

    def update_admin_profile(self, username: str, data: AdminProfileUpdate) -> UserDB:
        with transaction(self.db):
            admin = self.get_admin_profile(username)
            admin.email = data.email
            admin.phone = data.phone
            admin.department = data.department
            admin.position = data.position
            admin.bio = data.bio
            admin = self.accounts.save(admin)
        return admin

    def change_admin_password(self, username: str, data: PasswordChange) -> None:
        with transaction(self.db):
            admin = self.get_admin_profile(username)
            if not verify_password(data.current_password, admin.password_hash):
                raise InvalidArgumentError("Incorrect current password.")
            admin.password_hash = hash_password(data.new_password)
            self.accounts.save(admin)
        logger.info(f"Password changed for admin {username}")

    # =========================================================================
    # SYSTEM SETTINGS
    # =========================================================================

    def get_system_settings(self) -> SettingsDB:
        """Return the settings singleton, creating the default row on first read."""
        with transaction(self.db):
            settings = self.settings.find_by_id(SETTINGS_ID)
            if settings is None:
                settings = self.settings.save(SettingsDB(
                    id=SETTINGS_ID,
                    general_settings=DEFAULT_SETTINGS_BLOB,
                    email_settings=DEFAULT_SETTINGS_BLOB,
                    security_settings=DEFAULT_SETTINGS_BLOB,
                ))
                logger.info("Created default system settings")
        return settings

    def update_system_settings(self, data: SystemSettingsPayload) -> SettingsDB:
        """Upsert the settings singleton. Any caller-supplied id is ignored."""
        if data.id is not None and data.id != SETTINGS_ID:
            logger.warning(f"Ignoring settings id {data.id}, writing singleton {SETTINGS_ID}")

        with transaction(self.db):
            settings = self.settings.save(SettingsDB(
                id=SETTINGS_ID,
                general_settings=data.general_settings,
                email_settings=data.email_settings,
                security_settings=data.security_settings,
            ))
        return settings
