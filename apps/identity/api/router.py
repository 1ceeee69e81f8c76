import secrets
from typing import Optional
from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import RedirectResponse
from pydantic import BaseModel, field_validator
from framework.config import settings
from framework.exceptions.handler import BusinessException
from framework.response import ResponseModel
from framework.security import (
    CurrentUser,
    get_current_user,
    create_purpose_token,
    decode_purpose_token,
    PURPOSE_OAUTH_STATE,
)
from ..dependencies import get_identity_service
from ..models import AppRole
from ..oauth import GoogleOAuthClient, get_google_client
from ..service import IdentityService

router = APIRouter()

OAUTH_NONCE_COOKIE = "oauth_nonce"


def _normalise_email(value: str) -> str:
    value = (value or "").strip().lower()
    if "@" not in value or value.startswith("@") or value.endswith("@"):
        raise ValueError("a valid email address is required")
    return value


class EmailSchema(BaseModel):
    email: str

    @field_validator("email")
    @classmethod
    def normalise_email(cls, value: str) -> str:
        return _normalise_email(value)


class RegisterSchema(EmailSchema):
    password: str
    full_name: Optional[str] = None


class LoginSchema(EmailSchema):
    password: str


class TokenSchema(BaseModel):
    token: str


class ForgotPasswordSchema(EmailSchema):
    pass


class ResetPasswordSchema(BaseModel):
    token: str
    password: str


class ProfileUpdateSchema(BaseModel):
    full_name: Optional[str] = None
    batch: Optional[str] = None


def _set_session_cookie(response: Response, session: dict):
    response.set_cookie(
        key=settings.ACCESS_TOKEN_COOKIE_NAME,
        value=session["access_token"],
        max_age=session["expires_in"],
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite=settings.COOKIE_SAMESITE
    )


def _google_redirect_uri(request: Request) -> str:
    if settings.GOOGLE_REDIRECT_URI:
        return settings.GOOGLE_REDIRECT_URI
    base_url = str(request.base_url).rstrip("/")
    return f"{base_url}{settings.API_V1_AUTH_PREFIX}/google/callback"


@router.post("/register")
async def register(
    data: RegisterSchema,
    service: IdentityService = Depends(get_identity_service)
):
    """Create an account; a verification link is mailed when confirmation is required."""
    user = await service.sign_up(data.email, data.password, data.full_name)
    message = (
        "Account created! Please check your email to verify."
        if not user.email_confirmed
        else "Account created!"
    )
    return ResponseModel.success(
        data={"id": user.id, "email": user.email, "email_confirmed": user.email_confirmed},
        message=message
    )


@router.post("/verify-email")
async def verify_email(
    data: TokenSchema,
    service: IdentityService = Depends(get_identity_service)
):
    user = await service.verify_email(data.token)
    return ResponseModel.success(data={"email": user.email, "email_confirmed": True})


@router.post("/login")
async def login(
    data: LoginSchema,
    response: Response,
    service: IdentityService = Depends(get_identity_service)
):
    """Login: return JWT and set cookie."""
    user = await service.authenticate_user(data.email, data.password)
    session = await service.start_session(user)
    _set_session_cookie(response, session)
    return ResponseModel.success(data=session, message="Signed in successfully!")


@router.post("/logout")
async def logout(response: Response):
    """Logout: clear token cookie."""
    response.delete_cookie(
        key=settings.ACCESS_TOKEN_COOKIE_NAME,
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite=settings.COOKIE_SAMESITE
    )
    return ResponseModel.success(data=None, message="Signed out successfully")


@router.get("/google/login")
async def google_login(
    request: Request,
    client: GoogleOAuthClient = Depends(get_google_client)
):
    """Start Google sign-in; the nonce cookie binds the returned state to this browser."""
    nonce = secrets.token_urlsafe(16)
    state = create_purpose_token("google", PURPOSE_OAUTH_STATE, settings.OAUTH_STATE_EXPIRE_MINUTES, nonce=nonce)
    redirect = RedirectResponse(url=client.authorization_url(_google_redirect_uri(request), state))
    redirect.set_cookie(
        key=OAUTH_NONCE_COOKIE,
        value=nonce,
        max_age=settings.OAUTH_STATE_EXPIRE_MINUTES * 60,
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite="lax"
    )
    return redirect


@router.get("/google/callback")
async def google_callback(
    request: Request,
    code: Optional[str] = None,
    state: Optional[str] = None,
    error: Optional[str] = None,
    client: GoogleOAuthClient = Depends(get_google_client),
    service: IdentityService = Depends(get_identity_service)
):
    """Finish Google sign-in and redirect to the frontend with the session cookie set."""
    if error:
        raise BusinessException(f"Google sign-in was cancelled or failed: {error}", code=400)
    if not code or not state:
        raise BusinessException("Missing authorization code or state", code=400)

    payload = decode_purpose_token(state, PURPOSE_OAUTH_STATE)
    if payload.get("nonce") != request.cookies.get(OAUTH_NONCE_COOKIE):
        raise BusinessException("Sign-in state mismatch, please try again", code=400)

    info = await client.fetch_user(code, _google_redirect_uri(request))
    user = await service.sign_in_with_google(info)
    session = await service.start_session(user)

    redirect = RedirectResponse(
        url=f"{settings.FRONTEND_URL.rstrip('/')}{settings.OAUTH_SUCCESS_PATH}",
        status_code=302
    )
    _set_session_cookie(redirect, session)
    redirect.delete_cookie(OAUTH_NONCE_COOKIE)
    return redirect


@router.post("/password/forgot")
async def forgot_password(
    data: ForgotPasswordSchema,
    service: IdentityService = Depends(get_identity_service)
):
    """Always succeeds so the endpoint cannot be used to probe for accounts."""
    await service.request_password_reset(data.email)
    return ResponseModel.success(
        data=None,
        message="If an account exists for that email, a password reset link has been sent."
    )


@router.post("/password/reset")
async def reset_password(
    data: ResetPasswordSchema,
    service: IdentityService = Depends(get_identity_service)
):
    await service.reset_password(data.token, data.password)
    return ResponseModel.success(data=None, message="Password updated successfully")


@router.get("/me")
async def me(
    current_user: CurrentUser = Depends(get_current_user),
    service: IdentityService = Depends(get_identity_service)
):
    profile = await service.get_profile(current_user.id)
    roles = await service.list_roles(current_user.id)
    return ResponseModel.success(data={
        "id": current_user.id,
        "email": current_user.email,
        "full_name": profile.full_name,
        "batch": profile.batch,
        "roles": [role.value for role in roles],
    })


@router.patch("/me")
async def update_me(
    data: ProfileUpdateSchema,
    current_user: CurrentUser = Depends(get_current_user),
    service: IdentityService = Depends(get_identity_service)
):
    profile = await service.update_profile(current_user.id, data.full_name, data.batch)
    return ResponseModel.success(data=profile)


@router.get("/me/roles")
async def my_roles(
    current_user: CurrentUser = Depends(get_current_user),
    service: IdentityService = Depends(get_identity_service)
):
    """Role check used by the client to decide whether to show the admin area."""
    roles = await service.list_roles(current_user.id)
    return ResponseModel.success(data={
        "roles": [role.value for role in roles],
        "is_admin": AppRole.ADMIN in roles,
    })
