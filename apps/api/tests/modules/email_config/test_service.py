"""
Unit tests for the email configuration service.
"""

from unittest.mock import AsyncMock, patch

import pytest

from app.core.email import EmailConfiguration, EmailDeliveryError
from app.core.encryption import decrypt_password
from app.modules.email_config import service

from .conftest import SCHOOL_ID

SERVICE = "app.modules.email_config.service"


class TestGetEmailConfiguration:
    """Tests for get_email_configuration resolution order."""

    @pytest.mark.asyncio
    async def test_user_config_wins(self, mock_db, user_config, school_config):
        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.get_active_user_config = AsyncMock(return_value=user_config)
            mock_repo.get_active_school_config = AsyncMock(return_value=school_config)

            config = await service.get_email_configuration(mock_db, user_id="u1", school_id=SCHOOL_ID)

        assert config.source == "user"
        assert config.smtp_password == "stored-secret"
        assert config.from_address == "teacher@school.edu"
        assert config.from_name == "Concern2Care"
        mock_repo.get_active_school_config.assert_not_called()

    @pytest.mark.asyncio
    async def test_falls_back_to_school(self, mock_db, school_config):
        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.get_active_user_config = AsyncMock(return_value=None)
            mock_repo.get_active_school_config = AsyncMock(return_value=school_config)

            config = await service.get_email_configuration(mock_db, user_id="u1", school_id=SCHOOL_ID)

        assert config.source == "school"
        assert config.sender == "Lincoln Office <office@school.edu>"

    @pytest.mark.asyncio
    async def test_falls_back_to_system(self, mock_db):
        system = EmailConfiguration(
            smtp_host="smtp.concern2care.com",
            smtp_port=587,
            smtp_user="noreply@concern2care.com",
            smtp_password="x",
            source="system",
        )
        with patch(f"{SERVICE}.repository") as mock_repo, \
             patch(f"{SERVICE}.get_system_email_configuration", return_value=system):
            mock_repo.get_active_user_config = AsyncMock(return_value=None)

            config = await service.get_email_configuration(mock_db, user_id="u1", school_id=None)

        assert config is system
        mock_repo.get_active_school_config.assert_not_called()

    @pytest.mark.asyncio
    async def test_none_when_nothing_configured(self, mock_db):
        with patch(f"{SERVICE}.repository") as mock_repo, \
             patch(f"{SERVICE}.get_system_email_configuration", return_value=None):
            mock_repo.get_active_user_config = AsyncMock(return_value=None)
            mock_repo.get_active_school_config = AsyncMock(return_value=None)

            assert await service.get_email_configuration(mock_db, user_id="u1", school_id=SCHOOL_ID) is None

    @pytest.mark.asyncio
    async def test_undecryptable_password_returns_none(self, mock_db, user_config):
        user_config.smtp_password = "not-encrypted"

        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.get_active_user_config = AsyncMock(return_value=user_config)

            assert await service.get_email_configuration(mock_db, user_id="u1", school_id=None) is None


class TestGetEmailStatus:
    @pytest.mark.asyncio
    async def test_limited_without_configs(self, mock_db):
        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.get_active_user_config = AsyncMock(return_value=None)

            status = await service.get_email_status(mock_db, user_id="u1", school_id=None)

        assert status == {
            "has_personal_config": False,
            "has_school_config": False,
            "active_config": "none",
            "status": "limited",
        }

    @pytest.mark.asyncio
    async def test_school_config_active(self, mock_db, school_config):
        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.get_active_user_config = AsyncMock(return_value=None)
            mock_repo.get_active_school_config = AsyncMock(return_value=school_config)

            status = await service.get_email_status(mock_db, user_id="u1", school_id=SCHOOL_ID)

        assert status["active_config"] == "school"
        assert status["status"] == "active"


class TestSaveUserConfig:
    """Tests for save_user_config."""

    @pytest.mark.asyncio
    async def test_create_encrypts_password(self, mock_db, config_update):
        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.get_user_config = AsyncMock(return_value=None)
            mock_repo.create_user_config = AsyncMock()

            await service.save_user_config(mock_db, "u1", config_update)

        kwargs = mock_repo.create_user_config.call_args.kwargs
        assert kwargs["user_id"] == "u1"
        assert kwargs["smtp_password"] != "app-password"
        assert decrypt_password(kwargs["smtp_password"]) == "app-password"
        assert kwargs["from_address"] == "teacher@school.edu"

    @pytest.mark.asyncio
    async def test_create_requires_password(self, mock_db, config_update):
        config_update.smtp_password = None

        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.get_user_config = AsyncMock(return_value=None)

            with pytest.raises(service.PasswordRequiredError):
                await service.save_user_config(mock_db, "u1", config_update)

    @pytest.mark.asyncio
    async def test_update_keeps_password_when_blank(self, mock_db, config_update, user_config):
        config_update.smtp_password = ""

        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.get_user_config = AsyncMock(return_value=user_config)
            mock_repo.update_config = AsyncMock(return_value=user_config)

            await service.save_user_config(mock_db, "u1", config_update)

        kwargs = mock_repo.update_config.call_args.kwargs
        assert "smtp_password" not in kwargs
        assert kwargs["test_status"] is None


class TestSchoolConfig:
    """Tests for school configuration access."""

    @pytest.mark.asyncio
    async def test_school_admin_other_school_denied(self, mock_db, school_admin, config_update):
        with pytest.raises(service.SchoolAccessDeniedError) as exc:
            await service.save_school_config(mock_db, school_admin, "another-school", config_update)

        assert exc.value.status_code == 403

    @pytest.mark.asyncio
    async def test_school_admin_own_school(self, mock_db, school_admin, config_update):
        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.get_school_config = AsyncMock(return_value=None)
            mock_repo.create_school_config = AsyncMock()

            await service.save_school_config(mock_db, school_admin, SCHOOL_ID, config_update)

        kwargs = mock_repo.create_school_config.call_args.kwargs
        assert kwargs["school_id"] == SCHOOL_ID
        assert kwargs["configured_by"] == str(school_admin.id)

    @pytest.mark.asyncio
    async def test_platform_admin_missing_config(self, mock_db, platform_admin):
        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.get_school_config = AsyncMock(return_value=None)

            with pytest.raises(service.EmailConfigNotFoundError) as exc:
                await service.get_school_config(mock_db, platform_admin, SCHOOL_ID)

        assert exc.value.status_code == 404


class TestConfigurationTests:
    """Tests for sending test emails."""

    @pytest.mark.asyncio
    async def test_success_records_result(self, mock_db, user_config):
        with patch(f"{SERVICE}.repository") as mock_repo, \
             patch(f"{SERVICE}.deliver_email", new_callable=AsyncMock) as mock_deliver:
            mock_repo.get_user_config = AsyncMock(return_value=user_config)
            mock_repo.record_test_result = AsyncMock()

            result = await service.send_user_config_test(mock_db, "u1", "me@school.edu")

        assert result == {"success": True, "message": "Test email sent successfully"}
        config, message = mock_deliver.call_args.args
        assert config.smtp_password == "stored-secret"
        assert message.to_emails == ["me@school.edu"]
        assert message.subject == service.TEST_EMAIL_SUBJECT
        mock_repo.record_test_result.assert_awaited_once_with(mock_db, user_config, True)

    @pytest.mark.asyncio
    async def test_failure_records_result(self, mock_db, user_config):
        with patch(f"{SERVICE}.repository") as mock_repo, \
             patch(f"{SERVICE}.deliver_email", new_callable=AsyncMock, side_effect=EmailDeliveryError("auth failed")):
            mock_repo.get_user_config = AsyncMock(return_value=user_config)
            mock_repo.record_test_result = AsyncMock()

            result = await service.send_user_config_test(mock_db, "u1", "me@school.edu")

        assert result == {"success": False, "message": "auth failed"}
        mock_repo.record_test_result.assert_awaited_once_with(mock_db, user_config, False)

    @pytest.mark.asyncio
    async def test_undecryptable_stored_config(self, mock_db, user_config):
        user_config.smtp_password = "garbage"

        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.get_user_config = AsyncMock(return_value=user_config)

            with pytest.raises(service.UndecryptableConfigError):
                await service.send_user_config_test(mock_db, "u1", "me@school.edu")

    @pytest.mark.asyncio
    async def test_missing_user_config(self, mock_db):
        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.get_user_config = AsyncMock(return_value=None)

            with pytest.raises(service.EmailConfigNotFoundError):
                await service.send_user_config_test(mock_db, "u1", "me@school.edu")
