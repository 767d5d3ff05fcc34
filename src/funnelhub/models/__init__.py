"""Model exports: `from src.funnelhub.models import TenantProject`."""

from src.funnelhub.models.audit import AuditAction, AuditLog, AuditStatus
from src.funnelhub.models.enums import AnalyticsFlavor, AnalyticsPeriod, BlogStatus, BulkAction
from src.funnelhub.models.tenant_project import TenantProject

__all__ = [
    "AnalyticsFlavor",
    "AnalyticsPeriod",
    "AuditAction",
    "AuditLog",
    "AuditStatus",
    "BlogStatus",
    "BulkAction",
    "TenantProject",
]
