import hashlib
import hmac

from fastapi import Depends, Header, HTTPException, status

from jobly.core.auth import Principal, PrincipalType
from jobly.core.config import Settings, get_settings

ADMIN_SCOPES: set[str] = {"jobs:read", "jobs:write"}


def hash_api_key(api_key: str) -> str:
    return hashlib.sha256(api_key.encode("utf-8")).hexdigest()


async def get_admin_principal(
    settings: Settings = Depends(get_settings),
    x_api_key: str | None = Header(default=None, alias="X-API-Key"),
) -> Principal:
    if not x_api_key:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"admin auth requires {settings.api_key_header}",
        )

    if not settings.admin_api_key_hash:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="admin auth is not configured",
        )

    if not hmac.compare_digest(settings.admin_api_key_hash, hash_api_key(x_api_key)):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="invalid admin credentials")

    return Principal(
        principal_type=PrincipalType.ADMIN,
        subject="admin",
        scopes=set(ADMIN_SCOPES),
    )
