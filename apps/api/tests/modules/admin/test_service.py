"""
Unit tests for the admin service.
"""

from datetime import datetime
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from app.modules.admin import csv_import, service
from app.modules.admin.schemas import MASKED_API_KEY, BulkUpdateRequest

from .conftest import SCHOOL_ID

SERVICE = "app.modules.admin.service"


class TestHelpers:
    def test_month_bounds(self):
        this_month, last_month = service.month_bounds(datetime(2025, 3, 15, 10, 30))
        assert this_month == datetime(2025, 3, 1)
        assert last_month == datetime(2025, 2, 1)

    def test_month_bounds_january(self):
        _, last_month = service.month_bounds(datetime(2025, 1, 5))
        assert last_month == datetime(2024, 12, 1)

    def test_percent_change(self):
        assert service.percent_change(15, 10) == 50.0
        assert service.percent_change(5, 10) == -50.0
        assert service.percent_change(3, 0) == 0.0

    def test_usage_percentage(self):
        assert service.usage_percentage(SimpleNamespace(usage_count=25, max_usage=200)) == 13
        assert service.usage_percentage(SimpleNamespace(usage_count=1, max_usage=3)) == 33
        assert service.usage_percentage(SimpleNamespace(usage_count=2, max_usage=3)) == 67
        assert service.usage_percentage(SimpleNamespace(usage_count=25, max_usage=None)) == 0


class TestTeacherScoping:
    """School admins only reach teachers of their own school."""

    @pytest.mark.asyncio
    async def test_list_teachers_scoped(self, mock_db, school_admin, teacher):
        with patch(f"{SERVICE}.UserRepository") as users:
            users.list_teachers = AsyncMock(return_value=[teacher])

            result = await service.list_teachers(mock_db, school_admin)

        users.list_teachers.assert_awaited_once_with(mock_db, school_id=SCHOOL_ID)
        assert result[0].name == "Jamie Rivera"

    @pytest.mark.asyncio
    async def test_platform_admin_lists_all(self, mock_db, platform_admin):
        with patch(f"{SERVICE}.UserRepository") as users:
            users.list_teachers = AsyncMock(return_value=[])

            await service.list_teachers(mock_db, platform_admin)

        users.list_teachers.assert_awaited_once_with(mock_db, school_id=None)

    @pytest.mark.asyncio
    async def test_bulk_delete_other_school_denied(self, mock_db, school_admin, other_school_teacher):
        with patch(f"{SERVICE}.UserRepository") as users, \
             patch(f"{SERVICE}.reports_repository") as reports_repo:
            users.list_by_ids = AsyncMock(return_value=[other_school_teacher])
            reports_repo.delete_reports_for_teachers = AsyncMock()

            with pytest.raises(service.SchoolAccessDeniedError) as exc:
                await service.bulk_delete_teachers(mock_db, school_admin, [other_school_teacher.id])

        assert exc.value.status_code == 403
        reports_repo.delete_reports_for_teachers.assert_not_called()

    @pytest.mark.asyncio
    async def test_bulk_delete_unknown_teacher(self, mock_db, platform_admin):
        with patch(f"{SERVICE}.UserRepository") as users:
            users.list_by_ids = AsyncMock(return_value=[])

            with pytest.raises(service.TeacherNotFoundError):
                await service.bulk_delete_teachers(mock_db, platform_admin, ["missing"])

    @pytest.mark.asyncio
    async def test_bulk_delete_cascades(self, mock_db, school_admin, teacher):
        with patch(f"{SERVICE}.UserRepository") as users, \
             patch(f"{SERVICE}.reports_repository") as reports_repo, \
             patch(f"{SERVICE}.concerns_repository") as concerns_repo, \
             patch(f"{SERVICE}.admin_repository") as admin_repo:
            users.list_by_ids = AsyncMock(return_value=[teacher])
            users.delete_many = AsyncMock(return_value=1)
            reports_repo.delete_reports_for_teachers = AsyncMock(return_value=2)
            concerns_repo.delete_concerns_for_teachers = AsyncMock(return_value=4)
            admin_repo.create_log = AsyncMock()

            deleted = await service.bulk_delete_teachers(mock_db, school_admin, [teacher.id])

        assert deleted == 1
        reports_repo.delete_reports_for_teachers.assert_awaited_once_with(mock_db, [teacher.id])
        concerns_repo.delete_concerns_for_teachers.assert_awaited_once_with(mock_db, [teacher.id])
        details = admin_repo.create_log.call_args.kwargs["details"]
        assert details == {"teacher_ids": [teacher.id], "concerns_deleted": 4}

    @pytest.mark.asyncio
    async def test_bulk_update_applies_fields(self, mock_db, platform_admin, teacher):
        request = BulkUpdateRequest(teacher_ids=[teacher.id], support_requests_limit=40, is_active=False)

        with patch(f"{SERVICE}.UserRepository") as users, \
             patch(f"{SERVICE}.admin_repository") as admin_repo:
            users.list_by_ids = AsyncMock(return_value=[teacher])
            users.update_fields = AsyncMock()
            admin_repo.create_log = AsyncMock()

            updated = await service.bulk_update_teachers(mock_db, platform_admin, request)

        assert updated == 1
        users.update_fields.assert_awaited_once_with(
            mock_db, teacher, support_requests_limit=40, is_active=False
        )

    @pytest.mark.asyncio
    async def test_bulk_update_move_to_foreign_school_denied(self, mock_db, school_admin, teacher):
        request = BulkUpdateRequest(teacher_ids=[teacher.id], school_id="elsewhere")

        with pytest.raises(service.SchoolAccessDeniedError):
            await service.bulk_update_teachers(mock_db, school_admin, request)

    @pytest.mark.asyncio
    async def test_grant_requests_other_school_denied(self, mock_db, school_admin, other_school_teacher):
        with patch(f"{SERVICE}.UserRepository") as users, \
             patch(f"{SERVICE}.users_service") as users_service:
            users.get_by_id = AsyncMock(return_value=other_school_teacher)

            with pytest.raises(service.SchoolAccessDeniedError):
                await service.grant_additional_requests(mock_db, school_admin, other_school_teacher.id, 5)

        users_service.grant_additional_requests.assert_not_called()


class TestBulkUpload:
    """Tests for bulk upload scoping and the credentials PDF."""

    @pytest.mark.asyncio
    async def test_school_admin_forced_into_own_school(self, mock_db, school_admin, sample_school):
        with patch(f"{SERVICE}.SchoolRepository") as schools, \
             patch(f"{SERVICE}.csv_import.process_bulk_csv_upload", new_callable=AsyncMock) as process:
            schools.get_by_id = AsyncMock(return_value=sample_school)

            await service.bulk_upload_teachers(mock_db, school_admin, "name,email\nJo,jo@x.com")

        assert process.call_args.kwargs["school_id"] == SCHOOL_ID

    @pytest.mark.asyncio
    async def test_school_admin_other_school_denied(self, mock_db, school_admin):
        with pytest.raises(service.SchoolAccessDeniedError):
            await service.bulk_upload_teachers(mock_db, school_admin, "name,email\nJo,jo@x.com", "elsewhere")

    @pytest.mark.asyncio
    async def test_unknown_school(self, mock_db, platform_admin):
        with patch(f"{SERVICE}.SchoolRepository") as schools:
            schools.get_by_id = AsyncMock(return_value=None)

            with pytest.raises(service.SchoolNotFoundError):
                await service.bulk_upload_teachers(mock_db, platform_admin, "x", "missing-school")

    @pytest.mark.asyncio
    async def test_csv_format_error_becomes_invalid_csv(self, mock_db, platform_admin):
        with patch(
            f"{SERVICE}.csv_import.process_bulk_csv_upload",
            new_callable=AsyncMock,
            side_effect=csv_import.CSVFormatError("Missing required headers: email"),
        ):
            with pytest.raises(service.InvalidCSVError) as exc:
                await service.bulk_upload_teachers(mock_db, platform_admin, "name\nJo")

        assert exc.value.error_code == "INVALID_CSV"
        assert exc.value.message == "Missing required headers: email"

    @pytest.mark.asyncio
    async def test_credentials_pdf_uses_school(self, mock_db, school_admin, sample_school):
        result = csv_import.BulkUploadResult(
            success=True,
            total_rows=1,
            successful_imports=1,
            created_credentials=[
                csv_import.CreatedCredential(
                    name="Jo Smith", email="jo@x.com", password="Temp1234abcd", school="Not specified"
                )
            ],
        )

        with patch(f"{SERVICE}.SchoolRepository") as schools, \
             patch(f"{SERVICE}.csv_import.process_bulk_csv_upload", new_callable=AsyncMock, return_value=result), \
             patch(f"{SERVICE}.generate_credential_pdf", return_value=b"%PDF") as generate:
            schools.get_by_id = AsyncMock(return_value=sample_school)

            returned, pdf = await service.bulk_upload_credentials_pdf(mock_db, school_admin, "csv")

        assert returned is result
        assert pdf == b"%PDF"
        kwargs = generate.call_args.kwargs
        assert kwargs["school_name"] == "Lincoln Elementary"
        assert kwargs["school_district"] == "Springfield USD"
        assert kwargs["contact_email"] == school_admin.email
        assert kwargs["credentials"][0].password == "Temp1234abcd"


class TestDashboard:
    @pytest.mark.asyncio
    async def test_dashboard_stats(self, mock_db):
        with patch(f"{SERVICE}.UserRepository") as users, \
             patch(f"{SERVICE}.SchoolRepository") as schools, \
             patch(f"{SERVICE}.concerns_repository") as concerns_repo:
            users.count = AsyncMock(return_value=40)
            schools.count = AsyncMock(return_value=3)
            concerns_repo.count_concerns = AsyncMock(side_effect=[12, 8, 100])
            concerns_repo.count_interventions = AsyncMock(return_value=250)
            concerns_repo.count_active_teachers = AsyncMock(return_value=9)

            stats = await service.get_dashboard_stats(mock_db, now=datetime(2025, 3, 15))

        assert stats.concerns_this_month == 12
        assert stats.concerns_last_month == 8
        assert stats.total_concerns == 100
        assert stats.percent_change == 50.0
        assert stats.active_teachers_this_month == 9


class TestApiKeys:
    @pytest.mark.asyncio
    async def test_delete_missing_key(self, mock_db, platform_admin):
        with patch(f"{SERVICE}.admin_repository") as admin_repo:
            admin_repo.get_api_key = AsyncMock(return_value=None)

            with pytest.raises(service.ApiKeyNotFoundError):
                await service.delete_api_key(mock_db, platform_admin, "missing")

    def test_response_includes_usage(self):
        key = MagicMock()
        key.id = "k1"
        key.name = "Primary"
        key.provider = "deepseek"
        key.description = None
        key.is_active = True
        key.usage_count = 50
        key.max_usage = 100
        key.last_used_at = None
        key.created_by = None
        key.created_at = datetime(2025, 1, 1)

        response = service.to_api_key_response(key)

        assert response.usage_percentage == 50
        assert response.api_key == MASKED_API_KEY
        assert response.created_by is None
