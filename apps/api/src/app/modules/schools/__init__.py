"""
Schools module - School records shared by teachers and administrators.
"""

from app.modules.schools.models import School
from app.modules.schools.repository import SchoolRepository

__all__ = ["School", "SchoolRepository"]
