"""
Google OAuth 2.0 (authorization code flow) for "Sign in with Google".

Flow:
1. GET /auth/google/login -> redirect to Google's consent screen with a signed state
2. Google redirects back to /auth/google/callback with code + state
3. The callback exchanges the code, reads the userinfo email and signs the user in
"""

from typing import Optional
from urllib.parse import urlencode

import httpx
from pydantic import BaseModel

from framework.config import settings
from framework.exceptions.handler import BusinessException
from framework.logging.logger import get_logger

logger = get_logger("google_oauth")

SCOPES = ["openid", "email", "profile"]


class GoogleUserInfo(BaseModel):
    email: str
    email_verified: bool = False
    name: Optional[str] = None


class GoogleOAuthClient:
    def __init__(self, http: Optional[httpx.AsyncClient] = None):
        self._http = http

    @property
    def configured(self) -> bool:
        return bool(settings.GOOGLE_CLIENT_ID and settings.GOOGLE_CLIENT_SECRET)

    def _require_configured(self):
        if not self.configured:
            raise BusinessException("Google sign-in is not configured", code=503)

    def authorization_url(self, redirect_uri: str, state: str) -> str:
        self._require_configured()
        query = urlencode({
            "client_id": settings.GOOGLE_CLIENT_ID,
            "redirect_uri": redirect_uri,
            "response_type": "code",
            "scope": " ".join(SCOPES),
            "state": state,
            "access_type": "online",
            "prompt": "select_account",
        })
        return f"{settings.GOOGLE_AUTH_URL}?{query}"

    async def fetch_user(self, code: str, redirect_uri: str) -> GoogleUserInfo:
        """Exchange the authorization code and return the account's userinfo."""
        self._require_configured()
        http = self._http or httpx.AsyncClient(timeout=httpx.Timeout(10.0))
        try:
            token_response = await http.post(
                settings.GOOGLE_TOKEN_URL,
                data={
                    "code": code,
                    "client_id": settings.GOOGLE_CLIENT_ID,
                    "client_secret": settings.GOOGLE_CLIENT_SECRET,
                    "redirect_uri": redirect_uri,
                    "grant_type": "authorization_code",
                },
            )
            token_response.raise_for_status()
            access_token = token_response.json().get("access_token")
            if not access_token:
                raise BusinessException("Error signing in with Google", code=502)

            userinfo_response = await http.get(
                settings.GOOGLE_USERINFO_URL,
                headers={"Authorization": f"Bearer {access_token}"},
            )
            userinfo_response.raise_for_status()
            payload = userinfo_response.json()
        except httpx.HTTPError as e:
            logger.warning(f"Google OAuth exchange failed: {str(e)}")
            raise BusinessException("Error signing in with Google", code=502)
        finally:
            if self._http is None:
                await http.aclose()

        if not payload.get("email"):
            raise BusinessException("Google account has no email address", code=400)
        return GoogleUserInfo(
            email=payload["email"],
            email_verified=bool(payload.get("email_verified")),
            name=payload.get("name"),
        )


def get_google_client() -> GoogleOAuthClient:
    """Dependency: Google OAuth client."""
    return GoogleOAuthClient()
