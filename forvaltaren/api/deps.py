"""FastAPI dependencies for authentication and landlord scope resolution."""

import uuid
from collections.abc import Awaitable, Callable
from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError
from sqlalchemy.ext.asyncio import AsyncSession

from forvaltaren.core.database import get_session
from forvaltaren.core.errors import Unauthenticated
from forvaltaren.core.permissions import Permission
from forvaltaren.core.security import decode_jwt
from forvaltaren.models.user import User
from forvaltaren.services.access import require_permission
from forvaltaren.services.tenancy import LandlordContext, load_context

# Missing credentials are reported by us (401), not by HTTPBearer (403)
bearer_scheme = HTTPBearer(auto_error=False)


class AuthContext:
    """Resolved identity carried through a request."""

    __slots__ = ("user_id", "user")

    def __init__(self, user: User) -> None:
        self.user_id: uuid.UUID = user.id
        self.user = user


async def get_auth_context(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
    session: Annotated[AsyncSession, Depends(get_session)],
) -> AuthContext:
    """Resolve a JWT bearer token to an active user."""
    if credentials is None:
        raise Unauthenticated()

    try:
        payload = decode_jwt(credentials.credentials)
        user_id = uuid.UUID(payload["sub"])
    except (JWTError, KeyError, ValueError) as exc:
        raise Unauthenticated("Invalid or expired token") from exc

    user = await session.get(User, user_id)
    if user is None or not user.is_active:
        raise Unauthenticated("Account is disabled")
    return AuthContext(user)


# Typed shorthand for use in route signatures
Auth = Annotated[AuthContext, Depends(get_auth_context)]
Session = Annotated[AsyncSession, Depends(get_session)]


async def get_landlord_context(auth: Auth, session: Session) -> LandlordContext:
    """Landlord scope of the caller, resolved once per request."""
    return await load_context(session, auth.user)


Landlord = Annotated[LandlordContext, Depends(get_landlord_context)]


def requires(permission: Permission) -> Callable[..., Awaitable[LandlordContext]]:
    """Dependency factory: the landlord context, after checking ``permission``."""

    async def _check(ctx: Landlord, session: Session) -> LandlordContext:
        await require_permission(session, ctx.landlord_id, ctx.user_id, permission)
        return ctx

    return _check
