from tests.factories.audit import AuditLogFactory
from tests.factories.tenant_project import TenantProjectFactory

__all__ = ["AuditLogFactory", "TenantProjectFactory"]
