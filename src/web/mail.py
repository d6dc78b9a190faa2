"""
Mail relay for the contact form.

Messages go straight to an SMTP server; there is no queue and no retry.
"""

import logging
import smtplib
from email.message import EmailMessage
from typing import Protocol

from common.config import MailConfig

logger = logging.getLogger(__name__)


class Mailer(Protocol):
    def send(self, message: EmailMessage) -> bool:
        ...


class SmtpMailer:
    """Send through a plain SMTP server (a local MTA by default)."""

    def __init__(self, config: MailConfig):
        self.host = config.smtp_host
        self.port = config.smtp_port

    def send(self, message: EmailMessage) -> bool:
        """
        Relay one message.

        Returns:
            True if the server accepted it
        """
        try:
            with smtplib.SMTP(self.host, self.port, timeout=30) as smtp:
                smtp.send_message(message)
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"Mail to {message['To']} failed: {e}")
            return False
        logger.info(f"Mail sent to {message['To']}: {message['Subject']}")
        return True
