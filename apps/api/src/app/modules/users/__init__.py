"""
Users module - Accounts, roles and the monthly support request quota.
"""

from app.modules.users.models import User, UserRole
from app.modules.users.repository import UserRepository

__all__ = ["User", "UserRole", "UserRepository"]
