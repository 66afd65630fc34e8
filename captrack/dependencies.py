"""
CapTrack - FastAPI Dependencies

Shared dependencies for authentication, database sessions, and roles.
"""

import uuid
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from captrack.database import get_async_session
from captrack.models.developer import Developer
from captrack.models.revision import AuthMethod
from captrack.services.entry_workflow import Actor, EntryWorkflow
from captrack.utils.error_handling import (
    AuthenticationException,
    AuthorizationException,
    ErrorCode,
    InsufficientPermissionsException,
    TokenInvalidException,
)
from captrack.utils.security import verify_access_token


# HTTP Bearer token security
security = HTTPBearer(auto_error=False)


async def get_current_actor(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: AsyncSession = Depends(get_async_session),
) -> Actor:
    """
    Resolve the authenticated developer from the Bearer token.

    The token's "sub" is the developer id; an optional "auth_method" claim
    tags how the actor authenticated and is carried into revision records.

    Raises:
        AuthenticationException: If token is missing or invalid, or developer not found
        AuthorizationException: If the developer is deactivated
    """
    if not credentials:
        raise AuthenticationException("Not authenticated")

    payload = verify_access_token(credentials.credentials)
    if not payload:
        raise TokenInvalidException()

    developer_id = payload.get("sub")
    if not developer_id:
        raise TokenInvalidException("Invalid token payload")

    try:
        developer_uuid = uuid.UUID(developer_id)
    except ValueError:
        raise TokenInvalidException("Invalid developer ID in token")

    try:
        auth_method = AuthMethod(payload.get("auth_method", AuthMethod.WEB_SESSION.value))
    except ValueError:
        raise TokenInvalidException("Unknown auth method in token")

    result = await db.execute(select(Developer).where(Developer.id == developer_uuid))
    developer = result.scalar_one_or_none()

    if not developer:
        raise AuthenticationException("Developer not found")

    if not developer.is_active:
        raise AuthorizationException(
            "Developer account is deactivated", code=ErrorCode.ACCOUNT_DISABLED
        )

    return Actor(developer=developer, auth_method=auth_method)


async def require_reviewer(actor: Actor = Depends(get_current_actor)) -> Actor:
    """Require a manager or admin."""
    if not actor.is_reviewer:
        raise InsufficientPermissionsException(user_role=actor.role.value)
    return actor


def get_workflow(db: AsyncSession = Depends(get_async_session)) -> EntryWorkflow:
    return EntryWorkflow(db)
