import hashlib
import hmac
from datetime import timedelta
from typing import Optional
from sqlalchemy.exc import IntegrityError
from framework.security import (
    get_password_hash,
    verify_password,
    create_access_token,
    create_purpose_token,
    decode_purpose_token,
    PURPOSE_EMAIL_VERIFICATION,
    PURPOSE_PASSWORD_RESET,
)
from framework.exceptions.handler import BusinessException, NotFoundException
from framework.config import settings
from framework.database.fields import utcnow
from framework.logging.logger import get_logger
from framework.notification.notifier import notify_email_verification, notify_password_reset
from framework.repository.unit_of_work import UnitOfWork
from .models import User, Profile, UserRole, AppRole, AuthProvider
from .oauth import GoogleUserInfo
from .repository import UserRepository, ProfileRepository, UserRoleRepository

logger = get_logger("identity_service")

INVALID_CREDENTIALS = "Invalid login credentials"


def _password_fingerprint(hashed_password: Optional[str]) -> str:
    """Keyed digest of the stored hash; changes whenever the password does."""
    digest = hmac.new(settings.SECRET_KEY.encode(), (hashed_password or "").encode(), hashlib.sha256)
    return digest.hexdigest()[:16]


def _frontend_link(path: str, token: str) -> str:
    return f"{settings.FRONTEND_URL.rstrip('/')}{path}?token={token}"


class IdentityService:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    @property
    def users(self) -> UserRepository:
        return self.uow.get_repository(UserRepository)

    @property
    def profiles(self) -> ProfileRepository:
        return self.uow.get_repository(ProfileRepository)

    @property
    def roles(self) -> UserRoleRepository:
        return self.uow.get_repository(UserRoleRepository)

    def _check_password(self, password: str):
        if not password or len(password) < settings.MIN_PASSWORD_LENGTH:
            raise BusinessException(
                f"Password should be at least {settings.MIN_PASSWORD_LENGTH} characters",
                code=422
            )

    async def _create_account(
        self,
        email: str,
        full_name: Optional[str],
        hashed_password: Optional[str],
        provider: AuthProvider,
        email_confirmed: bool,
    ) -> User:
        """Insert user + profile + default role; caller commits."""
        user = User(
            email=email,
            hashed_password=hashed_password,
            provider=provider,
            email_confirmed=email_confirmed,
        )
        await self.users.create(user)
        await self.uow.flush()
        await self.profiles.create(Profile(id=user.id, full_name=full_name, email=email))
        await self.roles.create(UserRole(user_id=user.id, role=AppRole.USER))
        await self.uow.flush()
        return user

    async def sign_up(self, email: str, password: str, full_name: Optional[str] = None) -> User:
        """Register an email/password account and mail a verification link."""
        email = email.strip().lower()
        self._check_password(password)

        if await self.users.get_by_email(email):
            raise BusinessException("User already registered", code=4001)

        require_confirmation = settings.REQUIRE_EMAIL_CONFIRMATION
        try:
            user = await self._create_account(
                email=email,
                full_name=(full_name or "").strip() or None,
                hashed_password=get_password_hash(password),
                provider=AuthProvider.EMAIL,
                email_confirmed=not require_confirmation,
            )
            await self.uow.commit()
        except IntegrityError as e:
            await self.uow.rollback()
            logger.warning(f"Sign-up conflict for {email}: {str(getattr(e, 'orig', e))}")
            raise BusinessException("User already registered", code=4001)
        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Failed to sign up {email}: {str(e)}")
            raise BusinessException("Error signing up", code=500)

        logger.info(f"User {email} signed up (confirmation required: {require_confirmation})")
        if require_confirmation:
            token = create_purpose_token(
                user.id, PURPOSE_EMAIL_VERIFICATION, settings.EMAIL_VERIFICATION_EXPIRE_MINUTES
            )
            await notify_email_verification(
                email, full_name, _frontend_link(settings.EMAIL_VERIFY_PATH, token)
            )
        return user

    async def verify_email(self, token: str) -> User:
        payload = decode_purpose_token(token, PURPOSE_EMAIL_VERIFICATION)
        user = await self.users.get_by_id(payload["sub"])
        if not user:
            raise BusinessException("Link is invalid or has expired", code=400)
        if not user.email_confirmed:
            user.email_confirmed = True
            await self.users.update(user)
            await self.uow.commit()
            logger.info(f"User {user.email} confirmed email")
        return user

    async def authenticate_user(self, email: str, password: str) -> User:
        """Check email/password sign-in; raises on unknown user, bad password or unconfirmed email."""
        user = await self.users.get_by_email(email)
        if not user or not verify_password(password, user.hashed_password):
            raise BusinessException(INVALID_CREDENTIALS, code=401)
        if settings.REQUIRE_EMAIL_CONFIRMATION and not user.email_confirmed:
            raise BusinessException("Email not confirmed", code=4003)
        return user

    async def sign_in_with_google(self, info: GoogleUserInfo) -> User:
        """Find or create the account for a Google identity."""
        if not info.email_verified:
            raise BusinessException("Google account email is not verified", code=400)
        email = info.email.strip().lower()
        user = await self.users.get_by_email(email)
        if user is None:
            user = await self._create_account(
                email=email,
                full_name=info.name,
                hashed_password=None,
                provider=AuthProvider.GOOGLE,
                email_confirmed=True,
            )
            logger.info(f"User {email} signed up with Google")
        elif not user.email_confirmed:
            # Google vouched for the address
            user.email_confirmed = True
            await self.users.update(user)
        await self.uow.commit()
        return user

    async def start_session(self, user: User) -> dict:
        """Issue an access token for a verified user and record the sign-in."""
        is_admin = await self.roles.has_role(user.id, AppRole.ADMIN)
        role = AppRole.ADMIN.value if is_admin else AppRole.USER.value
        expires_delta = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
        access_token = create_access_token(
            data={"sub": user.id, "email": user.email, "role": role},
            expires_delta=expires_delta
        )
        user.last_sign_in_at = utcnow()
        await self.users.update(user)
        await self.uow.commit()
        logger.info(f"User {user.email} signed in via {AuthProvider(user.provider).value}")
        return {
            "access_token": access_token,
            "token_type": "bearer",
            "expires_in": int(expires_delta.total_seconds()),
            "user": {"id": user.id, "email": user.email, "role": role},
        }

    async def request_password_reset(self, email: str) -> None:
        """Mail a reset link when the account exists; silent otherwise."""
        user = await self.users.get_by_email(email)
        if not user:
            logger.info("Password reset requested for unknown email")
            return
        token = create_purpose_token(
            user.id,
            PURPOSE_PASSWORD_RESET,
            settings.PASSWORD_RESET_EXPIRE_MINUTES,
            # Invalidates the link once the password changes
            pwd=_password_fingerprint(user.hashed_password),
        )
        await notify_password_reset(user.email, _frontend_link(settings.PASSWORD_RESET_PATH, token))
        logger.info(f"Password reset link issued for {user.email}")

    async def reset_password(self, token: str, new_password: str) -> None:
        payload = decode_purpose_token(token, PURPOSE_PASSWORD_RESET)
        self._check_password(new_password)
        user = await self.users.get_by_id(payload["sub"])
        fingerprint = str(payload.get("pwd", ""))
        if not user or not hmac.compare_digest(fingerprint, _password_fingerprint(user.hashed_password)):
            raise BusinessException("Link is invalid or has expired", code=400)
        user.hashed_password = get_password_hash(new_password)
        # Following a mailed link proves ownership of the address
        user.email_confirmed = True
        await self.users.update(user)
        await self.uow.commit()
        logger.info(f"Password reset for {user.email}")

    async def get_profile(self, user_id: str) -> Profile:
        profile = await self.profiles.get_by_id(user_id)
        if not profile:
            raise NotFoundException("Profile not found")
        return profile

    async def update_profile(
        self, user_id: str, full_name: Optional[str] = None, batch: Optional[str] = None
    ) -> Profile:
        profile = await self.get_profile(user_id)
        if full_name is not None:
            profile.full_name = full_name.strip() or None
        if batch is not None:
            profile.batch = batch.strip() or None
        profile.updated_at = utcnow()
        await self.profiles.update(profile)
        await self.uow.commit()
        return profile

    async def has_role(self, user_id: str, role: AppRole) -> bool:
        return await self.roles.has_role(user_id, role)

    async def list_roles(self, user_id: str) -> list[AppRole]:
        return await self.roles.list_roles(user_id)

    async def grant_role(self, email: str, role: AppRole) -> bool:
        """Grant role to the account; returns False when it was already granted."""
        user = await self.users.get_by_email(email)
        if not user:
            raise NotFoundException(f"No user with email {email}")
        if await self.roles.has_role(user.id, role):
            return False
        await self.roles.create(UserRole(user_id=user.id, role=role))
        await self.uow.commit()
        logger.info(f"Granted role {role.value} to {user.email}")
        return True
