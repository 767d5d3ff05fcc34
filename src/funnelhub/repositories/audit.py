"""Repository for AuditLog entity."""

from uuid import UUID

from sqlmodel import select

from src.funnelhub.models import AuditLog
from src.funnelhub.repositories.base import BaseRepository


class AuditLogRepository(BaseRepository[AuditLog]):
    model = AuditLog

    async def list_logs(
        self,
        tenant_project_id: UUID | None = None,
        cursor: str | None = None,
        limit: int = 50,
        action: str | None = None,
        entity_type: str | None = None,
    ) -> tuple[list[AuditLog], str | None, bool]:
        """List audit logs newest first with optional filters.

        Returns:
            Tuple of (logs, next_cursor, has_more)
        """
        query = select(AuditLog)
        if tenant_project_id:
            query = query.where(AuditLog.tenant_project_id == tenant_project_id)
        if action:
            query = query.where(AuditLog.action == action)
        if entity_type:
            query = query.where(AuditLog.entity_type == entity_type)

        return await self.paginate(query, cursor, limit, AuditLog.created_at)
