import secrets
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional
from fastapi import Depends, HTTPException, Request, status
from jose import jwt
from sqlalchemy import select, delete
from sqlalchemy.ext.asyncio import AsyncSession
import httpx
import logging

from photofeed.config import settings
from photofeed.db.base import utcnow
from photofeed.db.session import get_db
from photofeed.models.user import User
from photofeed.models.session import Session
from photofeed.schemas.user_schema import UserUpsert
from photofeed.services.user_service import UserService

logger = logging.getLogger(__name__)

class IdentityProvider:
    """OpenID Connect authorization-code flow against the configured issuer"""

    def __init__(self, timeout: float = 10.0):
        self.timeout = timeout

    def authorization_url(self, state: str) -> str:
        params = {
            "response_type": "code",
            "client_id": settings.OIDC_CLIENT_ID,
            "redirect_uri": settings.OIDC_REDIRECT_URI,
            "scope": " ".join(settings.OIDC_SCOPES),
            "state": state,
            "prompt": "login consent",
        }
        return str(httpx.URL(settings.OIDC_AUTHORIZATION_URL, params=params))

    def decode_id_token(self, id_token: str, access_token: Optional[str] = None) -> Dict[str, Any]:
        """Verify the ID token signature, audience and issuer and return its claims"""
        return jwt.decode(
            id_token,
            settings.OIDC_CLIENT_SECRET,
            algorithms=settings.OIDC_ALGORITHMS,
            audience=settings.OIDC_CLIENT_ID,
            issuer=settings.OIDC_ISSUER,
            access_token=access_token,
        )

    async def exchange_code(self, code: str) -> Dict[str, Any]:
        """Trade an authorization code for tokens and return the ID token claims"""
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            response = await client.post(
                settings.OIDC_TOKEN_URL,
                data={
                    "grant_type": "authorization_code",
                    "code": code,
                    "redirect_uri": settings.OIDC_REDIRECT_URI,
                    "client_id": settings.OIDC_CLIENT_ID,
                    "client_secret": settings.OIDC_CLIENT_SECRET,
                },
            )
            response.raise_for_status()

        tokens = response.json()
        return self.decode_id_token(tokens["id_token"], tokens.get("access_token"))

def get_identity_provider() -> IdentityProvider:
    return IdentityProvider()

class EmailInUse(ValueError):
    """Raised when a login's email already belongs to a different user"""

def _as_aware(value: datetime) -> datetime:
    # SQLite hands timestamps back without tzinfo
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value

class AuthService:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.user_service = UserService(db)

    async def upsert_user_from_claims(self, claims: Dict[str, Any]) -> User:
        """Create or refresh the local user for an identity provider subject"""
        user_id = str(claims["sub"])
        email = claims.get("email")

        if email and await self.user_service.is_email_taken(email, user_id):
            raise EmailInUse(f"Email {email} is already in use")

        username = claims.get("username") or (email.split("@")[0] if email else None)
        if username and await self.user_service.is_username_taken(username, user_id):
            username = f"{username}_{user_id[:6]}"

        user_data = UserUpsert(
            id=user_id,
            email=email,
            first_name=claims.get("first_name"),
            last_name=claims.get("last_name"),
            profile_image_url=claims.get("profile_image_url"),
        )

        existing = await self.user_service.get_user(user_id)
        if existing is None or not existing.username:
            user_data.username = username

        return await self.user_service.upsert_user(user_data)

    async def create_session(self, user_id: str, claims: Optional[Dict[str, Any]] = None) -> str:
        """Store a new session row and return its id for the cookie"""
        sid = secrets.token_urlsafe(32)
        session = Session(
            sid=sid,
            sess={"user_id": user_id, "claims": claims or {}},
            expire=utcnow() + timedelta(days=settings.SESSION_TTL_DAYS),
        )

        self.db.add(session)
        await self.db.commit()

        logger.info(f"Created session for user {user_id}")
        return sid

    async def get_session_user(self, sid: str) -> Optional[User]:
        """User behind a session id, or None if the session is missing or expired"""
        stmt = select(Session).where(Session.sid == sid)
        result = await self.db.execute(stmt)
        session = result.scalar_one_or_none()

        if session is None:
            return None

        if _as_aware(session.expire) <= utcnow():
            await self.delete_session(sid)
            return None

        return await self.user_service.get_user(session.sess.get("user_id"))

    async def delete_session(self, sid: str) -> None:
        stmt = delete(Session).where(Session.sid == sid)
        await self.db.execute(stmt)
        await self.db.commit()

async def get_current_user(
    request: Request,
    db: AsyncSession = Depends(get_db)
) -> User:
    """Dependency to get the user behind the session cookie"""
    unauthorized = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Unauthorized",
    )

    sid = request.cookies.get(settings.SESSION_COOKIE_NAME)
    if not sid:
        raise unauthorized

    user = await AuthService(db).get_session_user(sid)
    if user is None:
        raise unauthorized

    return user
