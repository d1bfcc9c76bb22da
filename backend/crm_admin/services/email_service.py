"""
Email Service

Best-effort plain-text mail delivery over SMTP.
Delivery failures are logged and never raised to the caller.
"""
import logging
import os
import smtplib
from email.message import EmailMessage

logger = logging.getLogger(__name__)

# Configuration
MAIL_HOST = os.getenv("MAIL_HOST", "localhost")
MAIL_PORT = int(os.getenv("MAIL_PORT", "25"))
MAIL_USERNAME = os.getenv("MAIL_USERNAME")
MAIL_PASSWORD = os.getenv("MAIL_PASSWORD")
MAIL_USE_TLS = os.getenv("MAIL_USE_TLS", "false").lower() in ("1", "true", "yes")
MAIL_FROM = os.getenv("MAIL_FROM", "noreply@crm-app.com")
MAIL_TIMEOUT_SECONDS = 10


class EmailService:
    """Sends single plain-text messages. One SMTP connection per message."""

    def __init__(
        self,
        host: str = MAIL_HOST,
        port: int = MAIL_PORT,
        username: str = MAIL_USERNAME,
        password: str = MAIL_PASSWORD,
        use_tls: bool = MAIL_USE_TLS,
        from_address: str = MAIL_FROM,
        smtp_factory=smtplib.SMTP,
    ):
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.use_tls = use_tls
        self.from_address = from_address
        self.smtp_factory = smtp_factory

    def build_message(self, to: str, subject: str, text: str) -> EmailMessage:
        message = EmailMessage()
        message["From"] = self.from_address
        message["To"] = to
        message["Subject"] = subject
        message.set_content(text)
        return message

    def send_simple_message(self, to: str, subject: str, text: str) -> bool:
        """
        Send one message. Returns True when the SMTP server accepted it,
        False when delivery failed (the failure is logged).
        """
        try:
            message = self.build_message(to, subject, text)
            with self.smtp_factory(self.host, self.port, timeout=MAIL_TIMEOUT_SECONDS) as server:
                if self.use_tls:
                    server.starttls()
                if self.username:
                    server.login(self.username, self.password or "")
                server.send_message(message)
        except Exception as e:
            logger.error(f"Error while sending email to {to}: {e}")
            return False

        logger.info(f"Sent email '{subject}' to {to}")
        return True
