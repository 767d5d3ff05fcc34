"""Admin key guard for the management API.

Authentication of admin users happens upstream; the hub only checks a shared
key, and only when one is configured.
"""

import secrets
from typing import Annotated

from fastapi import Depends, Header, HTTPException, status

from src.funnelhub.core.config import get_settings


async def require_admin_key(
    x_admin_key: Annotated[str | None, Header(alias="X-Admin-Key")] = None,
) -> None:
    expected = get_settings().admin_api_key
    if not expected:
        return
    if not x_admin_key or not secrets.compare_digest(x_admin_key, expected):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or missing admin key",
        )


AdminKey = Annotated[None, Depends(require_admin_key)]
