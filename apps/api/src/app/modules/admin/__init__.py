"""
Admin module - Teacher management, bulk CSV import, audit log, API keys,
dashboard statistics and data export.
"""

from app.modules.admin.models import AdminLog, ApiKey

__all__ = ["AdminLog", "ApiKey"]
