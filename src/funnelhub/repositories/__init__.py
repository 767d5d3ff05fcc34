from src.funnelhub.repositories.audit import AuditLogRepository
from src.funnelhub.repositories.base import BaseRepository
from src.funnelhub.repositories.tenant_project import TenantProjectRepository

__all__ = [
    "AuditLogRepository",
    "BaseRepository",
    "TenantProjectRepository",
]
