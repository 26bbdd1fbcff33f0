import json
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.ext.asyncio import AsyncSession

from dentalbill.core.config import settings
from dentalbill.core.exceptions import NotAuthenticated
from dentalbill.core.redis import redis_client
from dentalbill.core.security import decode_access_token
from dentalbill.db.models import Dentist
from dentalbill.db.session import get_session
from dentalbill.services.tenant_service import TenantContext, parse_tenant_id

DENTIST_COOKIE = "dentist_id"
ADMIN_COOKIE = "admin_auth"

oauth2_scheme = OAuth2PasswordBearer(tokenUrl=f"{settings.API_V1_STR}/auth/login", auto_error=False)

async def get_session_dentist_id(token: Optional[str] = Depends(oauth2_scheme)):
    """Dentist id of a live session, or None when the token is missing, invalid or logged out."""
    if not token:
        return None
    payload = decode_access_token(token)
    if payload is None:
        return None
    stored = await redis_client.get_token(token)
    if stored is None:
        return None
    dentist_id = parse_tenant_id(json.loads(stored).get("dentist_id"))
    if dentist_id is None or str(dentist_id) != payload.get("sub"):
        return None
    return dentist_id

async def get_tenant_context(
    request: Request,
    session_dentist_id=Depends(get_session_dentist_id),
) -> TenantContext:
    if session_dentist_id is not None:
        return TenantContext.from_session(session_dentist_id)
    if settings.ALLOW_CACHED_TENANT_FALLBACK:
        cached = parse_tenant_id(request.cookies.get(DENTIST_COOKIE))
        if cached is not None:
            return TenantContext.from_cache(cached)
    return TenantContext.anonymous()

async def get_current_dentist(
    session_dentist_id=Depends(get_session_dentist_id),
    session: AsyncSession = Depends(get_session),
) -> Dentist:
    if session_dentist_id is None:
        raise NotAuthenticated("Could not validate credentials")
    dentist = await session.get(Dentist, session_dentist_id)
    if dentist is None:
        raise NotAuthenticated("Could not validate credentials")
    return dentist

async def require_admin(request: Request) -> None:
    token = request.cookies.get(ADMIN_COOKIE)
    stored = await redis_client.get_token(token) if token else None
    if stored is None or json.loads(stored).get("type") != "admin":
        raise NotAuthenticated("Admin login required")
