"""Pooled PostgREST clients, one per registered tenant project."""

import asyncio
from dataclasses import dataclass

import httpx

from src.funnelhub.core.config import get_settings
from src.funnelhub.core.logging import get_logger
from src.funnelhub.integrations.postgrest import PostgrestClient
from src.funnelhub.models import TenantProject
from src.funnelhub.tenancy.profile import SchemaProfile, build_profile

logger = get_logger(__name__)


@dataclass(frozen=True)
class TenantConnection:
    """Everything a service needs to talk to one tenant backend."""

    slug: str
    name: str
    client: PostgrestClient
    profile: SchemaProfile


class TenantClientRegistry:
    """Caches clients by slug; a changed URL or key replaces the cached client."""

    def __init__(self, transport: httpx.AsyncBaseTransport | None = None):
        self._clients: dict[str, tuple[str, PostgrestClient]] = {}
        self._lock = asyncio.Lock()
        self._transport = transport

    async def connect(self, project: TenantProject) -> TenantConnection:
        fingerprint = f"{project.rest_url}|{project.anon_key}"
        async with self._lock:
            cached = self._clients.get(project.slug)
            if cached is None or cached[0] != fingerprint:
                if cached is not None:
                    await cached[1].aclose()
                settings = get_settings()
                client = PostgrestClient(
                    project.rest_url,
                    project.anon_key,
                    timeout=settings.tenant_request_timeout_seconds,
                    max_connections=settings.tenant_max_connections,
                    transport=self._transport,
                )
                self._clients[project.slug] = (fingerprint, client)
                logger.debug("Tenant client created", tenant=project.slug)
            client = self._clients[project.slug][1]

        return TenantConnection(
            slug=project.slug,
            name=project.name,
            client=client,
            profile=build_profile(project.flavor, project.schema_overrides),
        )

    async def evict(self, slug: str) -> None:
        async with self._lock:
            cached = self._clients.pop(slug, None)
        if cached is not None:
            await cached[1].aclose()

    async def close_all(self) -> None:
        async with self._lock:
            clients = [client for _, client in self._clients.values()]
            self._clients.clear()
        for client in clients:
            await client.aclose()
        if clients:
            logger.info("Tenant clients closed", count=len(clients))


tenant_clients = TenantClientRegistry()
