"""Authentication endpoints — register, login and current user."""

from fastapi import APIRouter, status
from pydantic import BaseModel, EmailStr
from sqlmodel import select

from forvaltaren.api.deps import Auth, Session
from forvaltaren.core.errors import EmailTaken, Unauthenticated
from forvaltaren.core.security import create_jwt, hash_password, verify_password
from forvaltaren.models.landlord import Landlord, LandlordRead
from forvaltaren.models.user import User, UserCreate, UserRead
from forvaltaren.services.tenancy import resolve_landlord

router = APIRouter(prefix="/auth", tags=["auth"])


# ── Schemas ──────────────────────────────────────────────────

class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserRead


class MeResponse(BaseModel):
    user: UserRead
    landlord: LandlordRead | None


# ── Routes ───────────────────────────────────────────────────

@router.post("/register", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
async def register(body: UserCreate, session: Session) -> TokenResponse:
    """Create an account. The landlord scope is provisioned on first use."""
    email = body.email.lower()
    existing = await session.execute(select(User).where(User.email == email))
    if existing.scalar_one_or_none():
        raise EmailTaken(field="email")

    user = User(email=email, password_hash=hash_password(body.password), name=body.name)
    session.add(user)
    await session.commit()
    await session.refresh(user)

    return TokenResponse(
        access_token=create_jwt(subject=str(user.id)),
        user=UserRead.model_validate(user),
    )


@router.post("/login", response_model=TokenResponse)
async def login(body: LoginRequest, session: Session) -> TokenResponse:
    """Authenticate with email + password, receive a JWT."""
    stmt = select(User).where(User.email == body.email.lower())
    user = (await session.execute(stmt)).scalar_one_or_none()

    if user is None or not verify_password(body.password, user.password_hash):
        raise Unauthenticated("Invalid email or password")
    if not user.is_active:
        raise Unauthenticated("Account is disabled")

    return TokenResponse(
        access_token=create_jwt(subject=str(user.id)),
        user=UserRead.model_validate(user),
    )


@router.get("/me", response_model=MeResponse)
async def get_me(auth: Auth, session: Session) -> MeResponse:
    """Current user and, if one exists yet, their landlord scope."""
    landlord_id = await resolve_landlord(session, auth.user_id)
    landlord = await session.get(Landlord, landlord_id) if landlord_id else None
    return MeResponse(
        user=UserRead.model_validate(auth.user),
        landlord=LandlordRead.model_validate(landlord) if landlord else None,
    )
