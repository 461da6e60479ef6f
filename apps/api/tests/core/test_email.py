"""
Unit tests for the SMTP email helpers.
"""

from unittest.mock import AsyncMock, patch

import aiosmtplib
import pytest

from app.core.email import (
    EmailAttachment,
    EmailConfiguration,
    EmailMessage,
    build_mime_message,
    render_configuration_test_email,
    render_report_share_email,
    send_email,
)


@pytest.fixture
def smtp_config():
    return EmailConfiguration(
        smtp_host="smtp.school.edu",
        smtp_port=587,
        smtp_user="noreply@school.edu",
        smtp_password="secret",
        source="school",
    )


class TestEmailConfiguration:
    """Tests for EmailConfiguration properties."""

    def test_sender_defaults_to_smtp_user(self, smtp_config):
        assert smtp_config.sender == "Concern2Care <noreply@school.edu>"

    def test_sender_uses_from_address(self, smtp_config):
        smtp_config.from_address = "reports@school.edu"
        smtp_config.from_name = "Lincoln Elementary"
        assert smtp_config.sender == "Lincoln Elementary <reports@school.edu>"

    def test_use_tls_on_port_465(self, smtp_config):
        assert smtp_config.use_tls is False
        smtp_config.smtp_port = 465
        assert smtp_config.use_tls is True

    def test_use_tls_when_secure(self, smtp_config):
        smtp_config.smtp_secure = True
        assert smtp_config.use_tls is True


class TestBuildMimeMessage:
    """Tests for MIME construction."""

    def test_headers_and_attachment(self, smtp_config):
        message = EmailMessage(
            to_emails=["a@school.edu", "b@school.edu"],
            subject="Report",
            html_content="<p>Hi</p>",
            attachments=[EmailAttachment(filename="concern-report.pdf", content=b"%PDF-1.4")],
        )
        mime = build_mime_message(smtp_config, message)

        assert mime["To"] == "a@school.edu, b@school.edu"
        assert mime["Subject"] == "Report"
        parts = mime.get_payload()
        assert len(parts) == 2
        assert parts[1].get_filename() == "concern-report.pdf"
        assert parts[1].get_content_type() == "application/pdf"


class TestSendEmail:
    """Tests for send_email."""

    @pytest.mark.asyncio
    async def test_sends_through_given_config(self, smtp_config):
        with patch("app.core.email.aiosmtplib.send", new_callable=AsyncMock) as mock_send:
            result = await send_email("t@school.edu", "Subject", "<p>Body</p>", config=smtp_config)

        assert result is True
        mock_send.assert_called_once()
        kwargs = mock_send.call_args.kwargs
        assert kwargs["hostname"] == "smtp.school.edu"
        assert kwargs["port"] == 587
        assert kwargs["username"] == "noreply@school.edu"
        assert kwargs["use_tls"] is False

    @pytest.mark.asyncio
    async def test_smtp_failure_returns_false(self, smtp_config):
        with patch(
            "app.core.email.aiosmtplib.send",
            new_callable=AsyncMock,
            side_effect=aiosmtplib.SMTPException("connection refused"),
        ):
            result = await send_email("t@school.edu", "Subject", "<p>Body</p>", config=smtp_config)

        assert result is False

    @pytest.mark.asyncio
    async def test_no_config_in_development_logs_and_succeeds(self):
        with (
            patch("app.core.email.get_system_email_configuration", return_value=None),
            patch("app.core.email.settings") as mock_settings,
            patch("app.core.email.aiosmtplib.send", new_callable=AsyncMock) as mock_send,
        ):
            mock_settings.is_development = True
            result = await send_email("t@school.edu", "Subject", "<p>Body</p>")

        assert result is True
        mock_send.assert_not_called()

    @pytest.mark.asyncio
    async def test_no_config_in_production_fails(self):
        with (
            patch("app.core.email.get_system_email_configuration", return_value=None),
            patch("app.core.email.settings") as mock_settings,
        ):
            mock_settings.is_development = False
            result = await send_email("t@school.edu", "Subject", "<p>Body</p>")

        assert result is False


class TestRenderers:
    """Tests for the HTML templates."""

    def test_share_email_escapes_message(self):
        html = render_report_share_email("<script>alert(1)</script>", "http://x/reports/1")
        assert "<script>" not in html
        assert "&lt;script&gt;" in html
        assert 'href="http://x/reports/1"' in html
        assert "FERPA" in html

    def test_share_email_without_message(self):
        html = render_report_share_email(None, None)
        assert "Additional Message" not in html
        assert "View Report" not in html

    def test_configuration_test_email_labels_source(self, smtp_config):
        html = render_configuration_test_email(smtp_config)
        assert "School Settings" in html
        assert "smtp.school.edu" in html
