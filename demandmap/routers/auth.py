"""Authentication endpoints."""

from datetime import UTC, datetime

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from demandmap.auth.middleware import get_current_user_optional, require_admin
from demandmap.auth.password import hash_password, verify_password
from demandmap.database import get_db
from demandmap.models import User
from demandmap.schemas.auth import (
    AuthStatus,
    LoginRequest,
    RegisterRequest,
    UserInfo,
)

router = APIRouter(prefix="/auth", tags=["auth"])


async def _get_user_count(db: AsyncSession) -> int:
    """Get total user count."""
    result = await db.execute(select(func.count()).select_from(User))
    return result.scalar() or 0


@router.get("/status")
async def auth_status(
    db: AsyncSession = Depends(get_db),
    user: User | None = Depends(get_current_user_optional),
) -> AuthStatus:
    """Get current authentication status."""
    user_count = await _get_user_count(db)

    return AuthStatus(
        authenticated=user is not None,
        user=UserInfo.model_validate(user) if user else None,
        setup_required=user_count == 0,
    )


@router.post("/login")
async def login(
    request: Request,
    credentials: LoginRequest,
    db: AsyncSession = Depends(get_db),
) -> dict:
    """Log in with username and password."""
    result = await db.execute(select(User).where(User.username == credentials.username))
    user = result.scalar()

    if not user or not user.password_hash:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid username or password",
        )

    if not verify_password(credentials.password, user.password_hash):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid username or password",
        )

    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Account is disabled",
        )

    user.last_login_at = datetime.now(UTC)
    await db.commit()

    # Store user ID in session
    request.session["user_id"] = user.id

    return {"message": "Login successful", "user": UserInfo.model_validate(user)}


@router.post("/register")
async def register(
    request: Request,
    registration: RegisterRequest,
    db: AsyncSession = Depends(get_db),
) -> dict:
    """
    Register a new user.

    The first user registered becomes an admin.
    After that, only admins can create new users.
    """
    user_count = await _get_user_count(db)

    # If users exist, require admin authentication
    if user_count > 0:
        current_user = await get_current_user_optional(request, db)
        if not current_user:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Authentication required",
            )
        await require_admin(current_user)

    result = await db.execute(select(User).where(User.username == registration.username))
    if result.scalar():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Username already taken",
        )

    user = User(
        username=registration.username,
        password_hash=hash_password(registration.password),
        email=registration.email,
        display_name=registration.display_name or registration.username,
        role="admin" if user_count == 0 else "user",  # First user is admin
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)

    # Auto-login only when bootstrapping; admins creating users keep their session
    if user_count == 0:
        user.last_login_at = datetime.now(UTC)
        await db.commit()
        request.session["user_id"] = user.id

    return {
        "message": "Registration successful",
        "user": UserInfo.model_validate(user),
    }


@router.post("/logout")
async def logout(request: Request) -> dict:
    """Log out the current user."""
    request.session.clear()
    return {"message": "Logged out"}

