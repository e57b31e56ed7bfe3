"""
Notification Service — Transactional email over SMTP.
When no SMTP host is configured, messages are logged instead of sent.
"""
import logging
import smtplib
import ssl
from datetime import datetime
from email.message import EmailMessage
from html import escape
from typing import Tuple

from app.config import Settings

logger = logging.getLogger(__name__)


class NotificationService:
    def __init__(
        self,
        host: str = "",
        port: int = 587,
        username: str = "",
        password: str = "",
        use_tls: bool = True,
        sender: str = "no-reply@dashboard.local",
        signature: str = "Admin Dashboard Team",
    ):
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.use_tls = use_tls
        self.sender = sender
        self.signature = signature

    @classmethod
    def from_settings(cls, settings: Settings) -> "NotificationService":
        return cls(
            host=settings.SMTP_HOST,
            port=settings.SMTP_PORT,
            username=settings.SMTP_USERNAME,
            password=settings.SMTP_PASSWORD,
            use_tls=settings.SMTP_USE_TLS,
            sender=settings.EMAIL_FROM,
            signature=settings.EMAIL_SIGNATURE,
        )

    def send_email(self, to_address: str, subject: str, text_body: str, html_body: str) -> None:
        """Send a multipart (text + HTML) email. SMTP errors propagate to the caller."""
        if not to_address:
            raise ValueError("Recipient email address is missing")

        message = EmailMessage()
        message["From"] = self.sender
        message["To"] = to_address
        message["Subject"] = subject
        message.set_content(text_body)
        message.add_alternative(html_body, subtype="html")

        if not self.host:
            logger.info("[EMAIL] SMTP not configured, not sending to %s: %s", to_address, subject)
            return

        with smtplib.SMTP(self.host, self.port, timeout=10) as smtp:
            smtp.ehlo()
            if self.use_tls:
                smtp.starttls(context=ssl.create_default_context())
                smtp.ehlo()
            if self.username:
                smtp.login(self.username, self.password)
            smtp.send_message(message)
        logger.info("[EMAIL] Sent '%s' to %s", subject, to_address)

    def build_renewal_email(
        self,
        fullname: str,
        project_title: str,
        amount_paise: int,
        payment_id: str,
        new_end_date: datetime,
    ) -> Tuple[str, str]:
        """Text and HTML bodies for the renewal confirmation."""
        amount = f"{amount_paise / 100:,.2f}"
        expiry = new_end_date.strftime("%d %b %Y")

        text = (
            f"Dear {fullname},\n\n"
            f"Your payment of ₹{amount} for renewing project \"{project_title}\" has been successful "
            f"(Payment ID: {payment_id}). The new domain expiry date is {expiry}.\n\n"
            f"Best regards,\n{self.signature}"
        )
        html = f"""
    <div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
      <h2>Project Renewal Confirmation</h2>
      <p>Dear {escape(fullname)},</p>
      <p>Your payment of ₹{amount} for renewing project <strong>{escape(project_title)}</strong>
         has been successful (Payment ID: {escape(payment_id)}).</p>
      <p>The new domain expiry date is {expiry}.</p>
      <p>Best regards,<br>{escape(self.signature)}</p>
    </div>
"""
        return text, html
