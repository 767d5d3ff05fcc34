"""Base repository for tables living in a tenant's Supabase project."""

from typing import Any

from pydantic import BaseModel

from src.funnelhub.core.exceptions import TenantBackendError
from src.funnelhub.integrations.postgrest import PostgrestError, QueryBuilder, QueryResult
from src.funnelhub.tenancy.clients import TenantConnection


class RemoteRepository[ReadSchema: BaseModel]:
    """CRUD over one tenant table, in canonical field names.

    Like the hub repositories this layer does data access only; it adds the
    translation between canonical names and the tenant's physical schema, and
    turns PostgREST failures into TenantBackendError.
    """

    entity: str
    read_schema: type[ReadSchema]
    default_order: str = "created_at"
    default_desc: bool = True
    has_active_flag: bool = True

    def __init__(self, conn: TenantConnection):
        self.conn = conn
        self.profile = conn.profile

    @property
    def table_name(self) -> str:
        return self.profile.table(self.entity)

    def col(self, field: str) -> str:
        return self.profile.column(self.entity, field)

    def query(self) -> QueryBuilder:
        return self.conn.client.table(self.table_name)

    async def run(self, builder: QueryBuilder) -> QueryResult:
        try:
            return await builder.execute()
        except PostgrestError as e:
            raise TenantBackendError(
                self.conn.slug,
                f"{self.table_name}: {e.message}",
                status_code=e.status_code,
                details=e.details,
            ) from e

    def to_model(self, row: dict[str, Any]) -> ReadSchema:
        return self.read_schema.model_validate(self.profile.from_row(self.entity, row))

    def to_models(self, rows: list[dict[str, Any]] | None) -> list[ReadSchema]:
        return [self.to_model(row) for row in rows or []]

    def apply_filters(self, builder: QueryBuilder, filters: dict[str, Any] | None) -> QueryBuilder:
        """Equality filters in canonical names; lists become IN, None becomes IS NULL."""
        for field, value in (filters or {}).items():
            column = self.col(field)
            if isinstance(value, list | tuple | set):
                builder = builder.in_(column, list(value))
            elif value is None:
                builder = builder.is_(column, None)
            else:
                builder = builder.eq(column, value)
        return builder

    def apply_order(
        self, builder: QueryBuilder, order: str | None = None, desc: bool | None = None
    ) -> QueryBuilder:
        return builder.order(
            self.col(order or self.default_order),
            desc=self.default_desc if desc is None else desc,
        )

    async def list_page(
        self,
        filters: dict[str, Any] | None = None,
        start: int = 0,
        end: int = 49,
        order: str | None = None,
        desc: bool | None = None,
    ) -> tuple[list[ReadSchema], int]:
        """One window of rows plus the total matching count."""
        builder = self.apply_filters(self.query().select("*", count="exact"), filters)
        builder = self.apply_order(builder, order, desc).range(start, end)
        result = await self.run(builder)
        rows = self.to_models(result.data)
        return rows, result.count if result.count is not None else len(rows)

    async def list_all(
        self,
        filters: dict[str, Any] | None = None,
        order: str | None = None,
        desc: bool | None = None,
        limit: int | None = None,
    ) -> list[ReadSchema]:
        builder = self.apply_order(self.apply_filters(self.query().select("*"), filters), order, desc)
        if limit is not None:
            builder = builder.limit(limit)
        result = await self.run(builder)
        return self.to_models(result.data)

    async def get(self, id: Any) -> ReadSchema | None:
        result = await self.run(self.query().select("*").eq("id", id).maybe_single())
        return self.to_model(result.data) if result.data else None

    async def create(self, data: dict[str, Any]) -> ReadSchema:
        result = await self.run(self.query().insert(self.profile.to_row(self.entity, data)))
        rows = result.data or []
        if not rows:
            raise TenantBackendError(self.conn.slug, f"{self.table_name}: insert returned no row")
        return self.to_model(rows[0])

    async def update(self, id: Any, data: dict[str, Any]) -> ReadSchema | None:
        result = await self.run(
            self.query().update(self.profile.to_row(self.entity, data)).eq("id", id)
        )
        rows = result.data or []
        return self.to_model(rows[0]) if rows else None

    async def delete(self, id: Any) -> bool:
        result = await self.run(self.query().delete().eq("id", id))
        return bool(result.data)

    async def bulk_update(self, ids: list[Any], data: dict[str, Any]) -> int:
        result = await self.run(
            self.query().update(self.profile.to_row(self.entity, data)).in_("id", ids)
        )
        return len(result.data or [])

    async def bulk_delete(self, ids: list[Any]) -> int:
        result = await self.run(self.query().delete().in_("id", ids))
        return len(result.data or [])
