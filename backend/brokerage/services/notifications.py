"""
Sales inbox notifications for contact-form and newsletter submissions.
"""

import html
import logging
import smtplib
from datetime import datetime
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Optional

from brokerage.config import settings
from brokerage.models.inquiry import ContactInquiry, NewsletterSubscription

logger = logging.getLogger(__name__)


class EmailNotifier:
    """Send notifications through the configured SMTP server."""

    def __init__(
        self,
        host: Optional[str] = None,
        port: Optional[int] = None,
        username: Optional[str] = None,
        password: Optional[str] = None,
        sender: Optional[str] = None,
        recipient: Optional[str] = None,
    ):
        self.host = host or settings.smtp_host
        self.port = port or settings.smtp_port
        self.username = username or settings.smtp_username
        self.password = password or settings.smtp_password
        self.sender = sender or settings.email_from
        self.recipient = recipient or settings.email_to

    @property
    def configured(self) -> bool:
        return bool(self.host and self.port and self.username and self.password and self.sender and self.recipient)

    def notify_contact(self, inquiry: ContactInquiry) -> bool:
        interest = inquiry.interest or "General Inquiry"
        subject = f"New Contact Form: {inquiry.name} - {interest}"

        lines = [f"Name: {inquiry.name}", f"Email: {inquiry.email}"]
        if inquiry.phone:
            lines.append(f"Phone: {inquiry.phone}")
        if inquiry.interest:
            lines.append(f"Interest: {inquiry.interest}")
        lines.extend(["", "Message:", inquiry.message])
        text_content = "\n".join(lines)

        rows = "".join(f"<p>{html.escape(line)}</p>" for line in lines[:-3])
        html_content = (
            "<h2>New Contact Form Submission</h2>"
            f"{rows}"
            "<p><strong>Message:</strong></p>"
            f"<p>{html.escape(inquiry.message).replace(chr(10), '<br/>')}</p>"
            "<hr /><p><em>This email was sent from the contact form on the website.</em></p>"
        )
        return self._send(subject, html_content, text_content, reply_to=inquiry.email)

    def notify_newsletter(self, subscription: NewsletterSubscription) -> bool:
        subject = "New Newsletter Subscription"
        date_str = (subscription.created_at or datetime.now()).strftime("%B %d, %Y %H:%M")
        text_content = f"You have a new newsletter subscription from: {subscription.email}"
        html_content = (
            "<h2>New Newsletter Subscription</h2>"
            f"<p><strong>Email:</strong> {html.escape(subscription.email)}</p>"
            f"<p><strong>Date:</strong> {date_str}</p>"
        )
        return self._send(subject, html_content, text_content)

    def _send(self, subject: str, html_content: str, text_content: str, reply_to: Optional[str] = None) -> bool:
        if not self.configured:
            logger.warning(f"SMTP not configured, skipping email '{subject}'")
            return False

        msg = MIMEMultipart("alternative")
        msg["Subject"] = subject
        msg["From"] = self.sender
        msg["To"] = self.recipient
        if reply_to:
            msg["Reply-To"] = reply_to

        msg.attach(MIMEText(text_content, "plain"))
        msg.attach(MIMEText(html_content, "html"))

        try:
            if self.port == 465:
                with smtplib.SMTP_SSL(self.host, self.port, timeout=30) as server:
                    server.login(self.username, self.password)
                    server.sendmail(self.sender, [self.recipient], msg.as_string())
            else:
                with smtplib.SMTP(self.host, self.port, timeout=30) as server:
                    server.starttls()
                    server.login(self.username, self.password)
                    server.sendmail(self.sender, [self.recipient], msg.as_string())
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"Failed to send email '{subject}': {e}")
            return False

        logger.info(f"Email sent: {subject}")
        return True
