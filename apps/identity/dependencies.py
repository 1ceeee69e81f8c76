"""Identity dependencies shared by every app's router."""
from fastapi import Depends
from framework.exceptions.handler import PermissionDeniedException
from framework.repository.unit_of_work import UnitOfWork, get_uow
from framework.security import CurrentUser, get_current_user
from framework.logging.logger import get_logger
from .models import AppRole
from .service import IdentityService

logger = get_logger("identity_deps")


def get_identity_service(uow: UnitOfWork = Depends(get_uow)) -> IdentityService:
    """Dependency: create IdentityService."""
    return IdentityService(uow)


async def require_admin(
    current_user: CurrentUser = Depends(get_current_user),
    service: IdentityService = Depends(get_identity_service),
) -> CurrentUser:
    """Dependency: signed-in user holding the admin role (checked against user_roles, not the token)."""
    if not await service.has_role(current_user.id, AppRole.ADMIN):
        logger.warning(f"Admin access denied for {current_user.email}")
        raise PermissionDeniedException()
    return current_user.model_copy(update={"role": AppRole.ADMIN.value})
