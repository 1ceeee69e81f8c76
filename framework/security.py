from datetime import datetime, timedelta, timezone
from typing import Optional
from jose import jwt, JWTError
from passlib.context import CryptContext
from fastapi import Depends, HTTPException, status, Request
from fastapi.security import OAuth2PasswordBearer
from pydantic import BaseModel
from framework.config import settings
from framework.exceptions.handler import BusinessException

ALGORITHM = "HS256"

# Token purposes; an access token carries none
PURPOSE_EMAIL_VERIFICATION = "email_verification"
PURPOSE_PASSWORD_RESET = "password_reset"
PURPOSE_OAUTH_STATE = "oauth_state"

# 1. Password hashing (BCrypt)
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

# 2. Bearer scheme; the cookie is checked first
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/login", auto_error=False)

# --- Core models ---

class CurrentUser(BaseModel):
    """Current signed-in user context"""
    id: str
    email: str
    role: str = "user"

# --- Helpers ---

def verify_password(plain_password: str, hashed_password: Optional[str]) -> bool:
    if not hashed_password:
        return False
    return pwd_context.verify(plain_password, hashed_password)

def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)

def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Create JWT token"""
    to_encode = data.copy()
    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    to_encode.update({"exp": expire})
    encoded_jwt = jwt.encode(to_encode, settings.SECRET_KEY, algorithm=ALGORITHM)
    return encoded_jwt

def create_purpose_token(subject: str, purpose: str, expires_minutes: int, **claims) -> str:
    """Signed single-purpose token (email verification, password reset, OAuth state)."""
    data = {"sub": subject, "purpose": purpose, **claims}
    return create_access_token(data, expires_delta=timedelta(minutes=expires_minutes))

def decode_purpose_token(token: str, purpose: str) -> dict:
    """Decode a single-purpose token; raises BusinessException when invalid, expired or for another purpose."""
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError:
        raise BusinessException("Link is invalid or has expired", code=400)
    if payload.get("purpose") != purpose or not payload.get("sub"):
        raise BusinessException("Link is invalid or has expired", code=400)
    return payload

# --- FastAPI dependencies ---

def get_token_from_request(
    request: Request,
    token_from_header: Optional[str] = Depends(oauth2_scheme)
) -> Optional[str]:
    """
    Get token from request: prefer cookie, then Authorization header.
    """
    token = request.cookies.get(settings.ACCESS_TOKEN_COOKIE_NAME)

    if not token and token_from_header:
        token = token_from_header

    return token

def get_current_user(
    token: Optional[str] = Depends(get_token_from_request)
) -> CurrentUser:
    """
    Dependency: validate token and extract user. Use in router as user: CurrentUser = Depends(get_current_user).
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Authentication required",
        headers={"WWW-Authenticate": "Bearer"},
    )

    if not token:
        raise credentials_exception

    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError:
        raise credentials_exception

    # Purpose tokens must never authenticate a request
    if payload.get("purpose"):
        raise credentials_exception

    user_id = payload.get("sub")
    email = payload.get("email")
    if user_id is None or email is None:
        raise credentials_exception

    return CurrentUser(
        id=user_id,
        email=email,
        role=payload.get("role") or "user"
    )
