"""
Email notifier.

Sends change summaries over SMTP with SSL. The defaults target Gmail,
which needs an app password rather than the account password.
"""

import logging
import smtplib
import ssl
from email.message import EmailMessage
from typing import Optional

from bookwhen_watch.config import Settings, get_settings
from bookwhen_watch.notify.base import ChangeNotifier
from bookwhen_watch.notify.formatters import ChangeFormatter

logger = logging.getLogger(__name__)


class EmailNotifier(ChangeNotifier):
    """
    SMTP client for sending notifications.

    Sends plain-text mail from the configured account, to the same
    account unless EMAIL_TO says otherwise.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        formatter: Optional[ChangeFormatter] = None,
    ):
        """
        Initialize email notifier.

        Args:
            settings: Optional settings instance, will use default if not provided
            formatter: Optional message formatter
        """
        super().__init__(formatter)
        settings = settings or get_settings()

        self.user = settings.email_user
        self.password = settings.email_pass
        self.recipient = settings.email_recipient
        self.subject = settings.email_subject
        self.host = settings.smtp_host
        self.port = settings.smtp_port

    def build_message(self, body: str) -> EmailMessage:
        """Wrap body in an email addressed from the account to the recipient."""
        message = EmailMessage()
        message["Subject"] = self.subject
        message["From"] = self.user
        message["To"] = self.recipient
        message.set_content(body)
        return message

    def send_message(self, message: str) -> bool:
        """
        Send a plain-text email.

        Args:
            message: The message text to send

        Returns:
            bool: True if the email was accepted by the SMTP server
        """
        email = self.build_message(message)
        context = ssl.create_default_context()

        try:
            with smtplib.SMTP_SSL(self.host, self.port, context=context) as smtp:
                smtp.login(self.user, self.password)
                smtp.send_message(email)
            logger.info(f"Email sent to {self.recipient} with subject '{self.subject}'")
            return True
        except smtplib.SMTPAuthenticationError:
            logger.error(f"SMTP authentication failed for {self.user}. Check EMAIL_USER/EMAIL_PASS.")
            return False
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"Failed to send email to {self.recipient}: {e}")
            return False
