"""
Bulk Teacher CSV Import

Creates teacher accounts from an uploaded CSV file.

The header row must contain ``name`` and ``email``; other recognized
columns (with their accepted spellings) are listed in HEADER_ALIASES.
Each data row is validated on its own: a bad row is reported in ``errors``
and the import carries on with the next one. Teachers are created with a
temporary password (the one given in the file, or a random one) that they
must change on first login. The plain passwords are returned once in
``created_credentials`` so a credentials sheet can be printed.
"""

import logging
import re
import secrets
from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Any
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.security import hash_password
from app.modules.admin import repository as admin_repository
from app.modules.schools.repository import SchoolRepository
from app.modules.users.models import DEFAULT_SUPPORT_REQUESTS_LIMIT, UserRole
from app.modules.users.repository import UserRepository

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PASSWORD_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnpqrstuvwxyz23456789"
PASSWORD_LENGTH = 12
MIN_REQUESTS_LIMIT = 1
MAX_REQUESTS_LIMIT = 100
REQUIRED_HEADERS = ("name", "email")

# Column sizes of users and schools
MAX_LENGTHS = {
    "email": ("Email", 255),
    "first_name": ("First name", 100),
    "last_name": ("Last name", 100),
    "primary_grade": ("Primary grade", 50),
    "primary_subject": ("Primary subject", 100),
    "teacher_type": ("Teacher type", 100),
    "school_name": ("School name", 200),
    "school_district": ("School district", 200),
}

HEADER_ALIASES = {
    "name": "name",
    "email": "email",
    "password": "password",
    "school name": "school_name",
    "schoolname": "school_name",
    "school": "school_name",
    "school district": "school_district",
    "schooldistrict": "school_district",
    "primary grade": "primary_grade",
    "primarygrade": "primary_grade",
    "grade": "primary_grade",
    "primary subject": "primary_subject",
    "primarysubject": "primary_subject",
    "subject": "primary_subject",
    "teacher type": "teacher_type",
    "teachertype": "teacher_type",
    "type": "teacher_type",
    "subscription end date": "subscription_end_date",
    "subscriptionenddate": "subscription_end_date",
    "subscription end": "subscription_end_date",
    "support requests limit": "support_requests_limit",
    "supportrequestslimit": "support_requests_limit",
    "limit": "support_requests_limit",
}

_LEADING_INT = re.compile(r"^[+-]?\d+")


class CSVFormatError(ValueError):
    """The file as a whole cannot be imported."""


@dataclass
class RowError:
    row: int
    error: str
    email: str | None = None
    name: str | None = None


@dataclass
class CreatedCredential:
    name: str
    email: str
    password: str
    school: str


@dataclass
class BulkUploadResult:
    success: bool
    total_rows: int
    successful_imports: int
    errors: list[RowError] = field(default_factory=list)
    duplicate_emails: list[str] = field(default_factory=list)
    summary: str = ""
    created_credentials: list[CreatedCredential] = field(default_factory=list)

    def as_dict(self) -> dict[str, Any]:
        return asdict(self)


def parse_csv_row(row: str) -> list[str]:
    """
    Split one CSV line on commas, honoring double quotes.

    A doubled quote inside a quoted field is a literal quote; any other
    quote toggles the quoted state. The last field is always emitted, so
    "a," yields ["a", ""].
    """
    fields: list[str] = []
    current: list[str] = []
    in_quotes = False
    i = 0

    while i < len(row):
        char = row[i]
        if char == '"':
            if in_quotes and i + 1 < len(row) and row[i + 1] == '"':
                current.append('"')
                i += 2
                continue
            in_quotes = not in_quotes
        elif char == "," and not in_quotes:
            fields.append("".join(current))
            current = []
        else:
            current.append(char)
        i += 1

    fields.append("".join(current))
    return fields


def generate_password(length: int = PASSWORD_LENGTH) -> str:
    """Random password without look-alike characters (0/O, 1/l/I)."""
    return "".join(secrets.choice(PASSWORD_ALPHABET) for _ in range(length))


def parse_requests_limit(value: str | None) -> int | None:
    """Leading integer of the value (default 20 when blank), None when not a number."""
    if not value:
        return DEFAULT_SUPPORT_REQUESTS_LIMIT
    match = _LEADING_INT.match(value.strip())
    return int(match.group()) if match else None


def _parse_date(value: str | None) -> datetime | None:
    if not value:
        return None
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        logger.warning(f"Ignoring unparseable subscription end date: {value!r}")
        return None


def _split_name(name: str) -> tuple[str, str]:
    parts = name.split(" ")
    return parts[0], " ".join(parts[1:])


def length_error(values: dict[str, str | None]) -> str | None:
    """First value longer than its column allows, as a row error message."""
    for key, (label, max_length) in MAX_LENGTHS.items():
        value = values.get(key)
        if value and len(value) > max_length:
            return f"{label} must be at most {max_length} characters"
    return None


def map_row(headers: list[str], cells: list[str]) -> dict[str, str]:
    """Map non-blank cells to canonical field names; unknown columns are ignored."""
    mapped: dict[str, str] = {}
    for index, header in enumerate(headers):
        key = HEADER_ALIASES.get(header)
        if key is None or index >= len(cells):
            continue
        value = cells[index].strip()
        if value:
            mapped[key] = value.lower() if key == "email" else value
    return mapped


async def process_bulk_csv_upload(
    db: AsyncSession,
    content: str,
    *,
    school_id: str | None = None,
    admin_id: str | UUID | None = None,
) -> BulkUploadResult:
    """
    Import teachers from CSV text.

    Args:
        db: Database session
        content: Raw CSV text
        school_id: Put every teacher in this school (school admins); otherwise
            the school name column is resolved, creating unknown schools
        admin_id: Administrator performing the import, for the audit log

    Raises:
        CSVFormatError: Fewer than two lines or missing required headers
    """
    lines = [line.strip() for line in content.split("\n")]
    lines = [line for line in lines if line]
    if len(lines) < 2:
        raise CSVFormatError("CSV file must contain at least a header row and one data row")

    headers = [h.strip().lower() for h in parse_csv_row(lines[0])]
    missing = [h for h in REQUIRED_HEADERS if h not in headers]
    if missing:
        raise CSVFormatError(f"Missing required headers: {', '.join(missing)}")

    existing_emails = await UserRepository.list_emails(db)
    schools_by_name: dict[str, Any] = {}

    data_rows = lines[1:]
    result = BulkUploadResult(success=False, total_rows=len(data_rows), successful_imports=0)

    for offset, line in enumerate(data_rows):
        row_number = offset + 2
        cells = parse_csv_row(line)
        if all(not cell.strip() for cell in cells):
            continue

        teacher = map_row(headers, cells)
        name = teacher.get("name")
        email = teacher.get("email")

        if not name or not email:
            result.errors.append(
                RowError(row=row_number, email=email, name=name, error="Name and email are required")
            )
            continue

        if not EMAIL_PATTERN.match(email):
            result.errors.append(
                RowError(row=row_number, email=email, name=name, error="Invalid email format")
            )
            continue

        if email in existing_emails:
            result.duplicate_emails.append(email)
            result.errors.append(
                RowError(row=row_number, email=email, name=name, error="Email already exists in system")
            )
            continue

        first_name, last_name = _split_name(name)
        too_long = length_error({**teacher, "first_name": first_name, "last_name": last_name})
        if too_long:
            result.errors.append(RowError(row=row_number, email=email, name=name, error=too_long))
            continue

        limit = parse_requests_limit(teacher.get("support_requests_limit"))
        if limit is None or limit < MIN_REQUESTS_LIMIT or limit > MAX_REQUESTS_LIMIT:
            result.errors.append(
                RowError(
                    row=row_number,
                    email=email,
                    name=name,
                    error="Support requests limit must be a number between 1 and 100",
                )
            )
            continue

        school_name = teacher.get("school_name")
        password = teacher.get("password") or generate_password()
        school = None

        # One savepoint per row: a failed insert only loses that row
        try:
            async with db.begin_nested():
                teacher_school_id = school_id
                if teacher_school_id is None and school_name:
                    school = schools_by_name.get(school_name.lower())
                    if school is None:
                        school = await SchoolRepository.get_by_name(db, school_name)
                    if school is None:
                        school = await SchoolRepository.create(
                            db, name=school_name, district=teacher.get("school_district")
                        )
                    teacher_school_id = str(school.id)

                await UserRepository.create(
                    db,
                    email=email,
                    password_hash=hash_password(password),
                    first_name=first_name,
                    last_name=last_name,
                    role=UserRole.TEACHER,
                    school_id=teacher_school_id,
                    must_change_password=True,
                    primary_grade=teacher.get("primary_grade"),
                    primary_subject=teacher.get("primary_subject"),
                    teacher_type=teacher.get("teacher_type"),
                    subscription_end_date=_parse_date(teacher.get("subscription_end_date")),
                    support_requests_limit=limit,
                )
        except SQLAlchemyError as e:
            detail = getattr(e, "orig", None) or e
            logger.warning(f"Bulk import row {row_number} failed: {detail}")
            result.errors.append(
                RowError(row=row_number, email=email, name=name, error=f"Failed to create teacher: {detail}")
            )
            continue

        existing_emails.add(email)
        if school is not None:
            schools_by_name[school_name.lower()] = school

        result.created_credentials.append(
            CreatedCredential(
                name=name,
                email=email,
                password=password,
                school=school_name or "Not specified",
            )
        )
        result.successful_imports += 1

    result.success = not result.errors
    result.summary = (
        f"Processed {result.total_rows} rows. "
        f"Successfully imported {result.successful_imports} teachers. "
        f"{len(result.errors)} errors encountered."
    )

    await admin_repository.create_log(
        db,
        admin_id=admin_id,
        action="bulk_csv_upload",
        target_school_id=school_id,
        details={
            "total_rows": result.total_rows,
            "successful_imports": result.successful_imports,
            "errors": len(result.errors),
        },
    )

    logger.info(result.summary)
    return result
