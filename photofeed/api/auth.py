import secrets
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import RedirectResponse
from jose import JWTError
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession
import httpx
import logging

from photofeed.config import settings
from photofeed.db.session import get_db
from photofeed.models.user import User
from photofeed.schemas.user_schema import UserResponse
from photofeed.services.auth_service import (
    AuthService,
    EmailInUse,
    IdentityProvider,
    get_current_user,
    get_identity_provider
)

logger = logging.getLogger(__name__)

router = APIRouter()

STATE_COOKIE_NAME = "photofeed.state"
STATE_COOKIE_MAX_AGE = 600

@router.get("/login")
async def login(provider: IdentityProvider = Depends(get_identity_provider)):
    """Redirect to the identity provider's login page"""
    state = secrets.token_urlsafe(16)
    response = RedirectResponse(provider.authorization_url(state), status_code=status.HTTP_302_FOUND)
    response.set_cookie(
        STATE_COOKIE_NAME,
        state,
        max_age=STATE_COOKIE_MAX_AGE,
        httponly=True,
        samesite="lax",
        secure=settings.SESSION_COOKIE_SECURE,
    )
    return response

@router.get("/callback")
async def callback(
    request: Request,
    code: Optional[str] = None,
    state: Optional[str] = None,
    db: AsyncSession = Depends(get_db),
    provider: IdentityProvider = Depends(get_identity_provider)
):
    """Finish the login: verify the provider's answer, upsert the user, open a session"""
    expected_state = request.cookies.get(STATE_COOKIE_NAME)
    if not code or not state or state != expected_state:
        logger.warning("Login callback with missing code or mismatched state")
        return RedirectResponse(f"{settings.API_PREFIX}/login", status_code=status.HTTP_302_FOUND)

    try:
        claims = await provider.exchange_code(code)
    except (httpx.HTTPError, JWTError, KeyError) as e:
        logger.error(f"Login token exchange failed: {e}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Login failed"
        )

    try:
        auth_service = AuthService(db)
        user = await auth_service.upsert_user_from_claims(claims)
        sid = await auth_service.create_session(user.id, claims)
    except EmailInUse as e:
        logger.warning(f"Login rejected: {e}")
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Email is already in use"
        )
    except ValidationError as e:
        logger.error(f"Invalid identity claims: {e}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid identity claims"
        )
    except Exception as e:
        logger.error(f"Login error: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Login failed"
        )

    logger.info(f"User {user.id} logged in")

    response = RedirectResponse("/", status_code=status.HTTP_302_FOUND)
    response.set_cookie(
        settings.SESSION_COOKIE_NAME,
        sid,
        max_age=settings.SESSION_TTL_DAYS * 24 * 60 * 60,
        httponly=True,
        samesite="lax",
        secure=settings.SESSION_COOKIE_SECURE,
    )
    response.delete_cookie(STATE_COOKIE_NAME)
    return response

@router.get("/logout")
async def logout(
    request: Request,
    db: AsyncSession = Depends(get_db)
):
    """End the current session"""
    sid = request.cookies.get(settings.SESSION_COOKIE_NAME)
    if sid:
        try:
            await AuthService(db).delete_session(sid)
        except Exception as e:
            logger.error(f"Logout error: {e}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to log out"
            )

    response = RedirectResponse("/", status_code=status.HTTP_302_FOUND)
    response.delete_cookie(settings.SESSION_COOKIE_NAME)
    return response

@router.get("/auth/user", response_model=UserResponse)
async def get_auth_user(current_user: User = Depends(get_current_user)):
    """Get the logged-in user"""
    return current_user
