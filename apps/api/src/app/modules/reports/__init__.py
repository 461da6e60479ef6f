"""
Reports module - PDF concern reports, report sharing by email and the
teacher credentials sheet.
"""

from app.modules.reports.models import Report

__all__ = ["Report"]
