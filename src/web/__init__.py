"""Server-side endpoints: verification image and contact form."""

from .app import create_app
from .captcha import generate_token, render_token
from .contact import handle_contact
from .mail import SmtpMailer

__all__ = ["create_app", "generate_token", "render_token", "handle_contact", "SmtpMailer"]
