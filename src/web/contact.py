"""
Contact form processing.

Validates the posted form against the verification digest and relays it by
mail. Responses are small HTML fragments the page inserts as-is.
"""

import logging
import re
from dataclasses import dataclass
from datetime import datetime
from email.message import EmailMessage
from typing import Mapping, Optional
from zoneinfo import ZoneInfo

from markupsafe import escape

from common.config import MailConfig

from .captcha import md5_hex
from .mail import Mailer

logger = logging.getLogger(__name__)

INVALID_EMAIL = '<font color="#962d3e">Error: You have entered an invalid e-mail address.</font>'
INVALID_VERIFY = '<font color="#962d3e">Error: the verification code you entered is incorrect.</font>'
SEND_FAILED = "ERROR!"
THANKS = "<p>Thanks for your message <strong>{name}</strong>.<br>I'll get back to you as soon as possible.</p>"

EMAIL_RE = re.compile(
    r"[A-Za-z0-9.!#$%&'*+/=?^_`{|}~-]+"
    r"@[A-Za-z0-9](?:[A-Za-z0-9-]{0,61}[A-Za-z0-9])?"
    r"(?:\.[A-Za-z0-9](?:[A-Za-z0-9-]{0,61}[A-Za-z0-9])?)+"
)


def is_email(address: str) -> bool:
    return EMAIL_RE.fullmatch(address or "") is not None


@dataclass
class ContactForm:
    name: str = ""
    email: str = ""
    message: str = ""
    verify: Optional[str] = None

    @classmethod
    def from_form(cls, form: Mapping[str, str]) -> "ContactForm":
        return cls(
            name=form.get("name", ""),
            email=form.get("email", "").strip(),
            message=form.get("message", ""),
            verify=form.get("verify"),
        )


def build_message(
    form: ContactForm,
    config: MailConfig,
    remote_addr: str,
    now: Optional[datetime] = None
) -> EmailMessage:
    """
    Compose the notification mail for one submission.

    Args:
        form: Validated form
        config: Recipient, sender and timezone
        remote_addr: Submitter IP address
        now: Submission time (defaults to the current time in config.timezone)
    """
    now = now or datetime.now(ZoneInfo(config.timezone))
    date = now.strftime("%d/%m/%Y")
    time = now.strftime("%H:%M:%S")

    body = (
        f"You have been contacted by {escape(form.name)} through the Odyssey contact form.\n\n"
        f"<p><strong>Name: </strong> {escape(form.name)} </p>\n"
        f"<p><strong>Email Address: </strong> {escape(form.email)} </p>\n"
        f"<p><strong>Message: </strong> {escape(form.message)} </p>\n\n"
        f"<p>This message was sent from the IP Address: {remote_addr} on {date} at {time}</p>"
    )

    message = EmailMessage()
    # Header values may not contain line breaks
    message["Subject"] = config.subject_template.format(name=" ".join(form.name.split()))
    message["From"] = config.sender
    message["To"] = config.recipient
    message["Reply-To"] = form.email
    message.set_content(body, subtype="html", charset="utf-8")
    return message


def handle_contact(
    form: Mapping[str, str],
    expected_digest: Optional[str],
    mailer: Mailer,
    config: MailConfig,
    remote_addr: str = ""
) -> str:
    """
    Process one contact form post.

    Args:
        form: Posted fields (name, email, message, verify)
        expected_digest: md5 of the token shown in the verification image
        mailer: Delivers the notification
        config: Mail settings
        remote_addr: Submitter IP address

    Returns:
        HTML fragment for the page; empty for an empty post
    """
    if not form:
        return ""

    contact = ContactForm.from_form(form)

    if not is_email(contact.email):
        logger.info(f"Rejected contact from {remote_addr}: invalid email")
        return INVALID_EMAIL

    posted = md5_hex(contact.verify) if contact.verify is not None else ""
    if not expected_digest or posted != expected_digest:
        logger.info(f"Rejected contact from {remote_addr}: verification mismatch")
        return INVALID_VERIFY

    message = build_message(contact, config, remote_addr)
    if not mailer.send(message):
        return SEND_FAILED

    return THANKS.format(name=escape(contact.name))
