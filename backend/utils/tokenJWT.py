# utils/tokenJWT.py
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends, HTTPException, Request, Response, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from sqlalchemy.orm import Session

from config import settings
from database import get_db
from models.session import UserSession
from models.users import User

# Bearer header is accepted alongside the session cookie
bearer_scheme = HTTPBearer(auto_error=False)


# Generate a new JWT access token
def create_access_token(data: dict, expires_delta: timedelta = None):
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(seconds=settings.SESSION_MAX_AGE_SECONDS))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_access_token(token: str) -> Optional[dict]:
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        return None


# Create a session row for the user and return its signed token
def start_session(db: Session, user: User) -> str:
    session = UserSession(user_id=user.id)
    db.add(session)
    db.commit()
    db.refresh(session)
    return create_access_token({"sub": user.id, "sid": session.id})


def set_session_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        key=settings.COOKIE_NAME,
        value=token,
        max_age=settings.SESSION_MAX_AGE_SECONDS,
        path="/",
        samesite="lax",
        httponly=True,
    )


def clear_session_cookie(response: Response) -> None:
    response.delete_cookie(key=settings.COOKIE_NAME, path="/", samesite="lax", httponly=True)


def request_token(request: Request, credentials: Optional[HTTPAuthorizationCredentials]) -> Optional[str]:
    if credentials and credentials.credentials:
        return credentials.credentials
    return request.cookies.get(settings.COOKIE_NAME)


# Resolve the user behind the request, or None for anonymous callers
def get_optional_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> Optional[User]:
    token = request_token(request, credentials)
    if not token:
        return None
    payload = decode_access_token(token)
    if not payload:
        return None

    user_id, sid = payload.get("sub"), payload.get("sid")
    if not user_id or not sid:
        return None

    # Logged-out sessions are deleted, so the row must still exist
    session = db.query(UserSession).filter(UserSession.id == sid, UserSession.user_id == user_id).first()
    if session is None:
        return None
    return db.query(User).filter(User.id == user_id).first()


# Retrieve the currently authenticated user
def get_current_user(user: Optional[User] = Depends(get_optional_user)) -> User:
    if user is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")
    return user


# Dependency factory for Role-Based Access Control
def role_required(*allowed_roles):
    def _checker(current_user: User = Depends(get_current_user)):
        if allowed_roles and (current_user.role or "").lower() not in allowed_roles:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Forbidden"
            )
        return current_user
    return _checker


require_admin = role_required("admin")
