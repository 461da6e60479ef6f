"""
Email Service using SMTP

Sends HTML email (optionally with attachments) through aiosmtplib.

The SMTP account used for a message is resolved by the caller (personal,
school or system configuration, see app.modules.email_config). When no
configuration exists, development environments log the email instead of
sending it.
"""

import logging
from dataclasses import dataclass, field
from email.mime.application import MIMEApplication
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import formataddr
from html import escape

import aiosmtplib

from app.core.config import settings

logger = logging.getLogger(__name__)

DEFAULT_FROM_NAME = "Concern2Care"
SMTPS_PORT = 465
SMTP_TIMEOUT_SECONDS = 30


class EmailDeliveryError(Exception):
    """Raised when an email cannot be delivered."""


@dataclass
class EmailConfiguration:
    """Resolved SMTP account used to send a message."""

    smtp_host: str
    smtp_port: int
    smtp_user: str
    smtp_password: str
    smtp_secure: bool = False
    from_address: str | None = None
    from_name: str = DEFAULT_FROM_NAME
    source: str = "system"

    @property
    def use_tls(self) -> bool:
        """Implicit TLS (SMTPS) rather than STARTTLS."""
        return self.smtp_secure or self.smtp_port == SMTPS_PORT

    @property
    def sender(self) -> str:
        return formataddr((self.from_name or DEFAULT_FROM_NAME, self.from_address or self.smtp_user))


@dataclass
class EmailAttachment:
    filename: str
    content: bytes
    subtype: str = "pdf"


@dataclass
class EmailMessage:
    to_emails: list[str]
    subject: str
    html_content: str
    attachments: list[EmailAttachment] = field(default_factory=list)


def get_system_email_configuration() -> EmailConfiguration | None:
    """Return the environment-level SMTP account, if configured."""
    if not settings.smtp_configured:
        return None
    return EmailConfiguration(
        smtp_host=settings.smtp_host,  # type: ignore[arg-type]
        smtp_port=settings.smtp_port,
        smtp_user=settings.smtp_user,  # type: ignore[arg-type]
        smtp_password=settings.smtp_password,  # type: ignore[arg-type]
        from_address=settings.smtp_from_address,
        from_name=settings.smtp_from_name,
        source="system",
    )


def build_mime_message(config: EmailConfiguration, message: EmailMessage) -> MIMEMultipart:
    """Build the MIME message for an outgoing email."""
    mime = MIMEMultipart("mixed")
    mime["From"] = config.sender
    mime["To"] = ", ".join(message.to_emails)
    mime["Subject"] = message.subject
    mime.attach(MIMEText(message.html_content, "html", "utf-8"))

    for attachment in message.attachments:
        part = MIMEApplication(attachment.content, _subtype=attachment.subtype)
        part.add_header("Content-Disposition", "attachment", filename=attachment.filename)
        mime.attach(part)

    return mime


async def deliver_email(config: EmailConfiguration, message: EmailMessage) -> None:
    """
    Send a message through the given SMTP account.

    Raises:
        EmailDeliveryError: If the SMTP exchange fails
    """
    mime = build_mime_message(config, message)
    try:
        await aiosmtplib.send(
            mime,
            hostname=config.smtp_host,
            port=config.smtp_port,
            username=config.smtp_user,
            password=config.smtp_password,
            use_tls=config.use_tls,
            timeout=SMTP_TIMEOUT_SECONDS,
        )
    except (aiosmtplib.SMTPException, OSError) as e:
        raise EmailDeliveryError(str(e)) from e


async def send_email(
    to_email: str | list[str],
    subject: str,
    html_content: str,
    *,
    config: EmailConfiguration | None = None,
    attachments: list[EmailAttachment] | None = None,
) -> bool:
    """
    Send an email.

    Args:
        to_email: Recipient address or list of addresses
        subject: Email subject line
        html_content: HTML content of the email
        config: SMTP account to use (defaults to the system account)
        attachments: Optional file attachments

    Returns:
        True if the email was sent (or logged in development)
    """
    recipients = [to_email] if isinstance(to_email, str) else list(to_email)
    config = config or get_system_email_configuration()

    if config is None:
        if settings.is_development:
            logger.warning("SMTP not configured - logging email instead of sending")
            logger.info(f"EMAIL TO: {', '.join(recipients)} | SUBJECT: {subject}")
            return True
        logger.error(f"SMTP not configured - cannot send '{subject}'")
        return False

    message = EmailMessage(
        to_emails=recipients,
        subject=subject,
        html_content=html_content,
        attachments=attachments or [],
    )
    try:
        await deliver_email(config, message)
        logger.info(f"Email sent to {len(recipients)} recipient(s) via {config.source} SMTP")
        return True
    except EmailDeliveryError as e:
        logger.error(f"Failed to send email via {config.source} SMTP: {e}")
        return False


async def send_password_reset_email(
    to_email: str,
    user_name: str,
    reset_link: str,
    config: EmailConfiguration | None = None,
) -> bool:
    """Send the password reset link."""
    safe_user_name = escape(user_name)
    html_content = f"""
    <!DOCTYPE html>
    <html>
    <head>
        <style>
            body {{ font-family: Arial, sans-serif; line-height: 1.6; color: #333333; }}
            .container {{ max-width: 600px; margin: 0 auto; }}
            .banner {{ background: linear-gradient(135deg, #667eea 0%, #764ba2 100%); padding: 30px; text-align: center; color: white; }}
            .content {{ padding: 30px; background: #f8f9fa; }}
            .button {{ display: inline-block; background: #667eea; color: white; padding: 15px 30px; text-decoration: none; border-radius: 8px; font-weight: bold; }}
            .muted {{ color: #666666; font-size: 14px; }}
        </style>
    </head>
    <body>
        <div class="container">
            <div class="banner">
                <h1>Concern2Care</h1>
                <p>Student Support Platform</p>
            </div>
            <div class="content">
                <h2>Password Reset Request</h2>

                <p>Hello {safe_user_name},</p>

                <p>We received a request to reset your password for your Concern2Care account. If you made this request, click the button below to reset your password:</p>

                <p style="text-align: center; margin: 30px 0;">
                    <a href="{reset_link}" class="button">Reset My Password</a>
                </p>

                <p class="muted">This link will expire in 1 hour. If you didn't request a password reset, please ignore this email and your password will remain unchanged.</p>

                <p class="muted">If the button above doesn't work, copy and paste this link into your browser:<br>
                <span style="word-break: break-all;">{reset_link}</span></p>
            </div>
        </div>
    </body>
    </html>
    """
    return await send_email(
        to_email=to_email,
        subject="Password Reset Request - Concern2Care",
        html_content=html_content,
        config=config,
    )


async def send_password_reset_confirmation(
    to_email: str,
    user_name: str,
    config: EmailConfiguration | None = None,
) -> bool:
    """Confirm that the password was changed."""
    safe_user_name = escape(user_name)
    login_url = f"{settings.frontend_url}/login"
    html_content = f"""
    <!DOCTYPE html>
    <html>
    <head>
        <style>
            body {{ font-family: Arial, sans-serif; line-height: 1.6; color: #333333; }}
            .container {{ max-width: 600px; margin: 0 auto; }}
            .banner {{ background: linear-gradient(135deg, #10b981 0%, #059669 100%); padding: 30px; text-align: center; color: white; }}
            .content {{ padding: 30px; background: #f8f9fa; }}
            .button {{ display: inline-block; background: #059669; color: white; padding: 15px 30px; text-decoration: none; border-radius: 8px; font-weight: bold; }}
            .muted {{ color: #666666; font-size: 14px; }}
        </style>
    </head>
    <body>
        <div class="container">
            <div class="banner">
                <h1>Concern2Care</h1>
                <p>Password Reset Successful</p>
            </div>
            <div class="content">
                <h2>Password Reset Complete</h2>

                <p>Hello {safe_user_name},</p>

                <p>Your password has been successfully reset. You can now log in to your Concern2Care account using your new password.</p>

                <p style="text-align: center; margin: 30px 0;">
                    <a href="{login_url}" class="button">Log In to Your Account</a>
                </p>

                <p class="muted">If you didn't reset your password, please contact your school administrator immediately as your account may be compromised.</p>
            </div>
        </div>
    </body>
    </html>
    """
    return await send_email(
        to_email=to_email,
        subject="Password Reset Successful - Concern2Care",
        html_content=html_content,
        config=config,
    )


def render_report_share_email(message: str | None, report_link: str | None) -> str:
    """HTML body for a shared concern report."""
    message_html = ""
    if message:
        message_html = (
            "<p><strong>Additional Message:</strong></p>"
            f"<p>{escape(message)}</p>"
        )
    link_html = f'<p><a href="{report_link}" class="button">View Report</a></p>' if report_link else ""

    return f"""
    <!DOCTYPE html>
    <html>
    <head>
        <meta charset="utf-8">
        <style>
            body {{ font-family: Arial, sans-serif; line-height: 1.6; color: #333333; }}
            .header {{ background-color: #2563eb; color: white; padding: 20px; text-align: center; }}
            .content {{ padding: 20px; }}
            .footer {{ background-color: #f8fafc; padding: 15px; text-align: center; font-size: 12px; color: #666666; }}
            .button {{ display: inline-block; background-color: #2563eb; color: white; padding: 12px 24px; text-decoration: none; border-radius: 6px; margin: 20px 0; }}
        </style>
    </head>
    <body>
        <div class="header">
            <h1>Concern2Care Report</h1>
        </div>
        <div class="content">
            <p>A new student concern report has been shared with you.</p>
            {message_html}
            {link_html}
            <p>This report contains confidential student information and should be handled according to FERPA guidelines.</p>
        </div>
        <div class="footer">
            <p>This message was sent by Concern2Care. Do not reply to this email.</p>
        </div>
    </body>
    </html>
    """


def render_configuration_test_email(config: EmailConfiguration) -> str:
    """HTML body for an SMTP configuration test."""
    source_label = {
        "user": "Personal Settings",
        "school": "School Settings",
    }.get(config.source, "System Settings")
    return f"""
    <h2>Email Configuration Test Successful</h2>
    <p>This is a test email to confirm your email configuration is working correctly.</p>
    <p><strong>Configuration Source:</strong> {source_label}</p>
    <p><strong>SMTP Host:</strong> {escape(config.smtp_host)}</p>
    <p><strong>SMTP Port:</strong> {config.smtp_port}</p>
    <p>Your email functionality is now active in Concern2Care.</p>
    """


__all__ = [
    "EmailAttachment",
    "EmailConfiguration",
    "EmailDeliveryError",
    "EmailMessage",
    "build_mime_message",
    "deliver_email",
    "get_system_email_configuration",
    "render_configuration_test_email",
    "render_report_share_email",
    "send_email",
    "send_password_reset_confirmation",
    "send_password_reset_email",
]
