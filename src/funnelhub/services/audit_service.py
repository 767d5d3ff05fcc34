"""Audit logging service - records admin changes to the registry and tenant content."""

import contextlib
from typing import Any
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from src.funnelhub.core.audit_context import get_audit_context
from src.funnelhub.core.logging import get_logger
from src.funnelhub.models import AuditAction, AuditLog, AuditStatus
from src.funnelhub.repositories import AuditLogRepository

logger = get_logger(__name__)


class AuditService:
    """Fire-and-forget audit recorder.

    Runs on its own session so a failed audit write never rolls back the
    caller's work, and errors are logged instead of raised.
    """

    def __init__(
        self,
        audit_repo: AuditLogRepository,
        session: AsyncSession,
        tenant_project_id: UUID | None = None,
    ):
        self.audit_repo = audit_repo
        self.session = session
        self.tenant_project_id = tenant_project_id

    async def log_action(
        self,
        action: AuditAction | str,
        entity_type: str,
        entity_id: Any = None,
        changes: dict[str, Any] | None = None,
        status: AuditStatus = AuditStatus.SUCCESS,
        error_message: str | None = None,
    ) -> AuditLog | None:
        """Record an audit entry enriched with the request's IP, user agent and id.

        Returns:
            The created AuditLog, or None if recording failed.
        """
        action_value = action.value if isinstance(action, AuditAction) else action
        try:
            ctx = get_audit_context()
            audit_log = AuditLog(
                tenant_project_id=self.tenant_project_id,
                action=action_value,
                entity_type=entity_type,
                entity_id=str(entity_id) if entity_id is not None else None,
                changes=changes,
                ip_address=ctx.ip_address if ctx else None,
                user_agent=ctx.user_agent if ctx else None,
                request_id=ctx.request_id if ctx else None,
                status=status.value if isinstance(status, AuditStatus) else status,
                error_message=error_message[:1000] if error_message else None,
            )

            self.audit_repo.add(audit_log)
            await self.session.commit()

            logger.debug(
                "Audit log recorded",
                action=action_value,
                entity_type=entity_type,
                entity_id=audit_log.entity_id,
            )
            return audit_log

        except Exception as e:
            logger.warning(
                "Failed to record audit log",
                action=action_value,
                entity_type=entity_type,
                error=str(e),
            )
            with contextlib.suppress(Exception):
                await self.session.rollback()
            return None

    async def log_success(
        self,
        action: AuditAction | str,
        entity_type: str,
        entity_id: Any = None,
        changes: dict[str, Any] | None = None,
    ) -> AuditLog | None:
        return await self.log_action(action, entity_type, entity_id=entity_id, changes=changes)

    async def log_failure(
        self,
        action: AuditAction | str,
        entity_type: str,
        error_message: str,
        entity_id: Any = None,
    ) -> AuditLog | None:
        return await self.log_action(
            action,
            entity_type,
            entity_id=entity_id,
            status=AuditStatus.FAILURE,
            error_message=error_message,
        )

    async def list_logs(
        self,
        cursor: str | None = None,
        limit: int = 50,
        action: str | None = None,
        entity_type: str | None = None,
    ) -> tuple[list[AuditLog], str | None, bool]:
        """List audit logs, scoped to the tenant project when one is set."""
        return await self.audit_repo.list_logs(
            tenant_project_id=self.tenant_project_id,
            cursor=cursor,
            limit=limit,
            action=action,
            entity_type=entity_type,
        )
