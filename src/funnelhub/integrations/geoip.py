"""Best-effort visitor country lookup via ipapi.co."""

import ipaddress

import httpx

from src.funnelhub.core import cache
from src.funnelhub.core.config import get_settings
from src.funnelhub.core.exceptions import GeoLookupError
from src.funnelhub.core.logging import get_logger

logger = get_logger(__name__)

WORLDWIDE = "WW"
UNKNOWN_COUNTRY = "Unknown"


def is_public_ip(ip: str | None) -> bool:
    if not ip:
        return False
    try:
        address = ipaddress.ip_address(ip)
    except ValueError:
        return False
    return address.is_global


class GeoIPClient:
    def __init__(self, http: httpx.AsyncClient | None = None):
        self._http = http

    async def _fetch(self, ip: str) -> str:
        settings = get_settings()
        url = f"{settings.geoip_url}/{ip}/json/"
        try:
            if self._http is not None:
                response = await self._http.get(url, timeout=settings.geoip_timeout_seconds)
            else:
                async with httpx.AsyncClient(timeout=settings.geoip_timeout_seconds) as http:
                    response = await http.get(url)
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise GeoLookupError(str(e)) from e
        if not isinstance(data, dict):
            raise GeoLookupError("unexpected payload")
        if data.get("error"):
            raise GeoLookupError(str(data.get("reason") or "lookup refused"))
        code = data.get("country_code")
        if not isinstance(code, str) or not code:
            raise GeoLookupError("no country_code in response")
        return code.upper()

    async def country_for(self, ip: str | None, fallback: str = WORLDWIDE) -> str:
        """ISO country code for ip, or fallback on any failure.

        Private, loopback and malformed addresses are not looked up.
        """
        if ip is None or not is_public_ip(ip):
            return fallback

        key = cache.cache_key(cache.PREFIX_GEOIP, ip)
        cached = await cache.get_json(key)
        if isinstance(cached, str):
            return cached

        try:
            code = await self._fetch(ip)
        except GeoLookupError as e:
            logger.info("Geo lookup failed", ip=ip, error=str(e))
            return fallback

        await cache.set_json(key, code, get_settings().geoip_cache_ttl_seconds)
        return code


geoip = GeoIPClient()
