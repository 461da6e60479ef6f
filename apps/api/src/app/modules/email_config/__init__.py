"""
Email configuration module - Personal and school SMTP accounts.
"""

from app.modules.email_config.models import SchoolEmailConfig, UserEmailConfig

__all__ = ["SchoolEmailConfig", "UserEmailConfig"]
