"""
Authentication Utility - JWT identity.

Tokens are issued by the identity service. The portal only verifies them
and trusts the identity they carry:
- sub: user id (the student id for students)
- role: 'student' or 'institution'
- institution_id: present for institution staff
"""

from datetime import datetime, timedelta, timezone
from typing import Optional
from jose import JWTError, jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from admissions_portal.core.config import get_settings

settings = get_settings()

# Bearer token extractor
bearer_scheme = HTTPBearer()


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Create JWT access token (scripts and tests; production tokens come from the identity service)."""
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=settings.jwt_expire_minutes))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_token(token: str) -> Optional[dict]:
    """Decode and verify JWT token."""
    try:
        return jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError:
        return None


async def get_current_user(credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme)) -> dict:
    """
    FastAPI dependency - Get current authenticated user.

    Usage:
        @app.get("/protected")
        async def route(user: dict = Depends(get_current_user)):
            return user
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Invalid or expired token",
        headers={"WWW-Authenticate": "Bearer"},
    )

    payload = decode_token(credentials.credentials)
    if not payload:
        raise credentials_exception

    user_id = payload.get("sub")
    if not user_id:
        raise credentials_exception

    return {
        "user_id": str(user_id),
        "role": payload.get("role", "student"),
        "institution_id": payload.get("institution_id"),
    }


async def get_current_student(user: dict = Depends(get_current_user)) -> dict:
    """Dependency - Require student role; student_id is the user id."""
    if user["role"] != "student":
        raise HTTPException(status_code=403, detail="Students only")
    user["student_id"] = user["user_id"]
    return user


async def get_current_institution(user: dict = Depends(get_current_user)) -> dict:
    """Dependency - Require institution role with an institution_id claim."""
    if user["role"] != "institution":
        raise HTTPException(status_code=403, detail="Institutions only")
    if not user.get("institution_id"):
        raise HTTPException(status_code=403, detail="Token carries no institution")
    return user
