"""
Unit tests for bulk teacher CSV import.
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from sqlalchemy.exc import DataError

from app.modules.admin import csv_import
from app.modules.users.models import UserRole

from .conftest import SCHOOL_ID

CSV_IMPORT = "app.modules.admin.csv_import"


class TestParseCsvRow:
    def test_plain_fields(self):
        assert csv_import.parse_csv_row("a,b,c") == ["a", "b", "c"]

    def test_quoted_comma(self):
        assert csv_import.parse_csv_row('"Smith, Jo",jo@x.com') == ["Smith, Jo", "jo@x.com"]

    def test_escaped_quote(self):
        assert csv_import.parse_csv_row('"say ""hi""",x') == ['say "hi"', "x"]

    def test_trailing_empty_field(self):
        assert csv_import.parse_csv_row("a,") == ["a", ""]


class TestParseRequestsLimit:
    def test_blank_defaults_to_twenty(self):
        assert csv_import.parse_requests_limit("") == 20
        assert csv_import.parse_requests_limit(None) == 20

    def test_leading_integer(self):
        assert csv_import.parse_requests_limit("30") == 30
        assert csv_import.parse_requests_limit("15abc") == 15

    def test_not_a_number(self):
        assert csv_import.parse_requests_limit("abc") is None


class TestMapRow:
    def test_aliases_and_lowercased_email(self):
        headers = ["name", "email", "school", "grade", "notes"]
        cells = ["Jo Smith", " Jo@School.EDU ", "Lincoln", "", "ignored"]

        assert csv_import.map_row(headers, cells) == {
            "name": "Jo Smith",
            "email": "jo@school.edu",
            "school_name": "Lincoln",
        }

    def test_short_row(self):
        assert csv_import.map_row(["name", "email"], ["Jo"]) == {"name": "Jo"}


def test_generate_password_avoids_lookalikes():
    password = csv_import.generate_password()
    assert len(password) == 12
    assert not set(password) & set("0O1lI")


class TestProcessBulkCsvUpload:
    """Tests for process_bulk_csv_upload."""

    @pytest.fixture
    def repos(self):
        with patch(f"{CSV_IMPORT}.UserRepository") as users, \
             patch(f"{CSV_IMPORT}.SchoolRepository") as schools, \
             patch(f"{CSV_IMPORT}.admin_repository") as admin_repo, \
             patch(f"{CSV_IMPORT}.hash_password", side_effect=lambda p: f"hashed:{p}"):
            users.list_emails = AsyncMock(return_value={"taken@school.edu"})
            users.create = AsyncMock()
            schools.get_by_name = AsyncMock(return_value=None)
            schools.create = AsyncMock(return_value=MagicMock(id="new-school"))
            admin_repo.create_log = AsyncMock()
            yield users, schools, admin_repo

    @pytest.mark.asyncio
    async def test_requires_header_and_data(self, mock_db):
        with pytest.raises(csv_import.CSVFormatError):
            await csv_import.process_bulk_csv_upload(mock_db, "name,email\n")

    @pytest.mark.asyncio
    async def test_missing_required_header(self, mock_db):
        with pytest.raises(csv_import.CSVFormatError) as exc:
            await csv_import.process_bulk_csv_upload(mock_db, "name,school\nJo,Lincoln")

        assert "email" in str(exc.value)

    @pytest.mark.asyncio
    async def test_mixed_rows(self, mock_db, repos):
        users, schools, admin_repo = repos
        content = "\n".join(
            [
                "Name,Email,Password,School Name,Support Requests Limit",
                "Jo Ann Smith,jo@school.edu,Secret123,Lincoln,30",
                "Missing Email,,,,",
                "Bad Email,not-an-email,,,",
                "Taken,TAKEN@school.edu,,,",
                "Too Many,many@school.edu,,,500",
                "Sam Lee,sam@school.edu,,lincoln,",
                ",,,,",
            ]
        )

        result = await csv_import.process_bulk_csv_upload(mock_db, content, admin_id="admin-1")

        assert result.total_rows == 7
        assert result.successful_imports == 2
        assert result.success is False
        assert [(e.row, e.error) for e in result.errors] == [
            (3, "Name and email are required"),
            (4, "Invalid email format"),
            (5, "Email already exists in system"),
            (6, "Support requests limit must be a number between 1 and 100"),
        ]
        assert result.duplicate_emails == ["taken@school.edu"]
        assert result.summary == (
            "Processed 7 rows. Successfully imported 2 teachers. 4 errors encountered."
        )

        # Both rows resolve to one school, created once
        schools.create.assert_awaited_once()
        first = users.create.call_args_list[0].kwargs
        assert first["first_name"] == "Jo"
        assert first["last_name"] == "Ann Smith"
        assert first["password_hash"] == "hashed:Secret123"
        assert first["school_id"] == "new-school"
        assert first["support_requests_limit"] == 30
        assert first["role"] == UserRole.TEACHER
        assert first["must_change_password"] is True

        second = users.create.call_args_list[1].kwargs
        assert second["support_requests_limit"] == 20
        assert result.created_credentials[1].password != ""
        assert len(result.created_credentials[1].password) == 12

        log = admin_repo.create_log.call_args.kwargs
        assert log["action"] == "bulk_csv_upload"
        assert log["details"] == {"total_rows": 7, "successful_imports": 2, "errors": 4}

    @pytest.mark.asyncio
    async def test_forced_school_skips_lookup(self, mock_db, repos):
        users, schools, _ = repos
        content = "name,email,school\nJo Smith,jo@school.edu,Elsewhere"

        result = await csv_import.process_bulk_csv_upload(mock_db, content, school_id=SCHOOL_ID)

        assert result.success is True
        assert users.create.call_args.kwargs["school_id"] == SCHOOL_ID
        schools.get_by_name.assert_not_called()

    @pytest.mark.asyncio
    async def test_duplicate_within_file(self, mock_db, repos):
        content = "name,email\nJo,jo@school.edu\nJo Again,jo@school.edu"

        result = await csv_import.process_bulk_csv_upload(mock_db, content)

        assert result.successful_imports == 1
        assert result.duplicate_emails == ["jo@school.edu"]

    @pytest.mark.asyncio
    async def test_unparseable_date_ignored(self, mock_db, repos):
        users, _, _ = repos
        content = "name,email,subscription end date\nJo,jo@school.edu,someday"

        result = await csv_import.process_bulk_csv_upload(mock_db, content)

        assert result.successful_imports == 1
        assert users.create.call_args.kwargs["subscription_end_date"] is None

    @pytest.mark.asyncio
    async def test_failed_insert_only_loses_its_row(self, mock_db, repos):
        users, _, admin_repo = repos
        users.create = AsyncMock(
            side_effect=[
                None,
                DataError("INSERT INTO users", {}, Exception("value too long for type character varying(100)")),
                None,
            ]
        )
        content = "\n".join(
            [
                "name,email",
                "Jo Smith,jo@school.edu",
                "Al Jones,al@school.edu",
                "Sam Lee,sam@school.edu",
            ]
        )

        result = await csv_import.process_bulk_csv_upload(mock_db, content)

        assert result.successful_imports == 2
        assert [c.email for c in result.created_credentials] == ["jo@school.edu", "sam@school.edu"]
        assert len(result.errors) == 1
        assert result.errors[0].row == 3
        assert result.errors[0].email == "al@school.edu"
        assert "value too long" in result.errors[0].error
        assert mock_db.begin_nested.call_count == 3
        assert admin_repo.create_log.call_args.kwargs["details"]["errors"] == 1

    @pytest.mark.asyncio
    async def test_failed_row_email_can_be_retried(self, mock_db, repos):
        users, _, _ = repos
        users.create = AsyncMock(side_effect=[DataError("INSERT INTO users", {}, Exception("boom")), None])
        content = "name,email\nJo,jo@school.edu\nJo Again,jo@school.edu"

        result = await csv_import.process_bulk_csv_upload(mock_db, content)

        assert result.successful_imports == 1
        assert result.duplicate_emails == []

    @pytest.mark.asyncio
    async def test_overlong_values_rejected_before_insert(self, mock_db, repos):
        users, schools, _ = repos
        long_name = "A" * 101
        content = "\n".join(
            [
                "name,email,school,grade",
                f"{long_name} Smith,long@school.edu,,",
                f"Jo Smith,jo@school.edu,{'S' * 201},",
                "Sam Lee,sam@school.edu,,Kindergarten through fifth grade combined classroom group",
            ]
        )

        result = await csv_import.process_bulk_csv_upload(mock_db, content)

        assert result.successful_imports == 0
        assert [(e.row, e.error) for e in result.errors] == [
            (2, "First name must be at most 100 characters"),
            (3, "School name must be at most 200 characters"),
            (4, "Primary grade must be at most 50 characters"),
        ]
        users.create.assert_not_called()
        schools.create.assert_not_called()
