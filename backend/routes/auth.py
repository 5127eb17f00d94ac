# backend/routes/auth.py
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status, Request, Response
from fastapi.security import HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from utils.hashing import get_password_hash, verify_password
from utils.tokenJWT import (
    bearer_scheme, clear_session_cookie, decode_access_token, get_current_user,
    request_token, set_session_cookie, start_session,
)
from utils.audit import client_ip, write_log
from models.users import User
from models.session import UserSession
from schemas import user as schemas
from schemas.common import SuccessResponse
from database import get_db

router = APIRouter(prefix="/api/auth", tags=["Auth"])


# Register a new user and log them in
@router.post("/register", response_model=schemas.UserResponse, status_code=status.HTTP_201_CREATED)
def register(payload: schemas.UserCreate, request: Request, response: Response, db: Session = Depends(get_db)):
    # Normalize email input
    normalized_email = payload.email.strip().lower()

    # Check for existing user
    if db.query(User).filter(User.email == normalized_email).first():
        write_log(db, user_id=None, action="REGISTER", resource="auth", status="FAIL",
                  ip=client_ip(request), meta={"email": normalized_email, "reason": "Email exists"})
        raise HTTPException(status_code=400, detail="Email already registered")

    new_user = User(
        name=payload.name.strip(),
        email=normalized_email,
        password_hash=get_password_hash(payload.password),
        role="user",
    )
    db.add(new_user)
    db.commit()
    db.refresh(new_user)

    set_session_cookie(response, start_session(db, new_user))

    write_log(db, user_id=new_user.id, action="REGISTER", resource="auth", status="SUCCESS",
              ip=client_ip(request), meta={"email": new_user.email})
    return new_user


# Authenticate user and open a session
@router.post("/login", response_model=schemas.UserResponse)
def login(payload: schemas.UserLogin, request: Request, response: Response, db: Session = Depends(get_db)):
    if not payload.email or not payload.password:
        raise HTTPException(status_code=400, detail="Email and password required")

    email = payload.email.strip().lower()
    db_user = db.query(User).filter(User.email == email).first()
    if not db_user:
        write_log(db, user_id=None, action="LOGIN", resource="auth", status="FAIL",
                  ip=client_ip(request), meta={"email": email, "reason": "Account not found"})
        raise HTTPException(status_code=404, detail="Account not found")

    if not verify_password(payload.password, db_user.password_hash):
        write_log(db, user_id=db_user.id, action="LOGIN", resource="auth", status="FAIL",
                  ip=client_ip(request), meta={"email": email, "reason": "Incorrect password"})
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Incorrect password")

    set_session_cookie(response, start_session(db, db_user))

    write_log(db, user_id=db_user.id, action="LOGIN", resource="auth", status="SUCCESS",
              ip=client_ip(request), meta={"email": email})
    return db_user


# End the current session
@router.post("/logout", response_model=SuccessResponse)
def logout(
    request: Request,
    response: Response,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
):
    token = request_token(request, credentials)
    payload = decode_access_token(token) if token else None
    if payload and payload.get("sid"):
        session = db.query(UserSession).filter(UserSession.id == payload["sid"]).first()
        if session:
            user_id = session.user_id
            db.delete(session)
            db.commit()
            write_log(db, user_id=user_id, action="LOGOUT", resource="auth", status="SUCCESS",
                      ip=client_ip(request))

    clear_session_cookie(response)
    return {"success": True}


# Retrieve current authenticated user details
@router.get("/me", response_model=schemas.UserResponse)
def me(current_user: User = Depends(get_current_user)):
    return current_user
