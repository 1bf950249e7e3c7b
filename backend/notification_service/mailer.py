"""
Organizer confirmation emails.

Delivers the auto-generated password to a newly provisioned event
organizer, together with a login link and a reset-password link.
Delivery problems are logged and reported as False; they never raise
into the registration flow.
"""

import html
import logging
import smtplib
from email.message import EmailMessage
from urllib.parse import quote

logger = logging.getLogger(__name__)

SUBJECT = "Welcome to Schedulo - Your Event Organizer Account"

TEXT_TEMPLATE = """Dear {full_name},

Welcome to Schedulo! We're excited to have you on board as an event organizer.

Below are your login details:
  Email: {email}
  Password: {secret}

Log in to your account: {login_link}

Important: for security reasons, please update your password upon your first login:
{reset_link}

Looking forward to seeing your amazing events on Schedulo!

Sincerely,
Schedulo Team
"""

HTML_TEMPLATE = """\
<p>Dear <strong>{full_name}</strong>,</p>
<p>Welcome to <strong>Schedulo!</strong> We're excited to have you on board as an event organizer.</p>
<p><strong>Below are your login details:</strong></p>
<ul>
    <li><strong>Email:</strong> {email}</li>
    <li><strong>Password:</strong> {secret}</li>
</ul>
<p><a href="{login_link}" target="_blank">Login to Your Account</a></p>
<p><strong>Important:</strong> For security reasons, please update your password upon your first login.</p>
<p><a href="{reset_link}" target="_blank">Reset Your Password</a></p>
<p>Looking forward to seeing your amazing events on Schedulo!</p>
<p>Sincerely,<br/>Schedulo Team</p>
"""


class ConfirmationMailer:
    """
    Sends the organizer welcome email over SMTP (STARTTLS).

    Args:
        host (str): SMTP server host.
        port (int): SMTP server port.
        username (str): SMTP login, also the default sender.
        password (str): SMTP password.
        sender (str): From address; defaults to username.
        frontend_url (str): Base URL used to build the login and reset links.
    """

    def __init__(self, host, port, username, password, sender=None, frontend_url="http://localhost:4200"):
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.sender = sender or username
        self.frontend_url = frontend_url.rstrip("/")

    @classmethod
    def from_settings(cls, settings) -> "ConfirmationMailer":
        return cls(
            host=settings.email_host,
            port=settings.email_port,
            username=settings.email_user,
            password=settings.email_pass,
            sender=settings.email_from,
            frontend_url=settings.frontend_url,
        )

    def login_link(self) -> str:
        return f"{self.frontend_url}/login"

    def reset_link(self, email: str) -> str:
        return f"{self.frontend_url}/password?email={quote(email, safe='')}"

    def build_message(self, email: str, full_name: str, secret: str) -> EmailMessage:
        values = {
            "full_name": full_name,
            "email": email,
            "secret": secret,
            "login_link": self.login_link(),
            "reset_link": self.reset_link(email),
        }

        msg = EmailMessage()
        msg["Subject"] = SUBJECT
        msg["From"] = self.sender
        msg["To"] = email
        msg.set_content(TEXT_TEMPLATE.format(**values))
        escaped = {k: html.escape(v) for k, v in values.items()}
        msg.add_alternative(HTML_TEMPLATE.format(**escaped), subtype="html")
        return msg

    def send(self, email: str, full_name: str, secret: str) -> bool:
        """
        Deliver the confirmation email.

        Returns:
            bool: True if the SMTP server accepted the message.
        """
        if not self.username or not self.password:
            logger.warning("Mail transport is not configured; confirmation email to %s not sent", email)
            return False

        msg = self.build_message(email, full_name, secret)

        try:
            with smtplib.SMTP(self.host, self.port) as smtp:
                smtp.starttls()
                smtp.login(self.username, self.password)
                smtp.send_message(msg)
        except (smtplib.SMTPException, OSError) as e:
            logger.error("Error sending confirmation email to %s: %s", email, e)
            return False

        logger.info("Confirmation email sent to: %s", email)
        return True
