#!/usr/bin/env python3
"""
Grant the admin role to an existing account.

Usage:
    python -m apps.identity.scripts.grant_admin <email>
    python -m apps.identity.scripts.grant_admin <email> --revoke

Running it twice is harmless: an account that already holds the role is left as is.
"""

import asyncio
import argparse
import sys

from framework.database.manager import DatabaseManager
from framework.repository.unit_of_work import UnitOfWork
from framework.logging.logger import LogConfig, get_logger
from framework.exceptions.handler import BusinessException
from apps.identity.models import AppRole
from apps.identity.repository import UserRepository, UserRoleRepository
from apps.identity.service import IdentityService

logger = get_logger("grant_admin_script")


async def revoke_admin(uow: UnitOfWork, email: str) -> bool:
    """Remove the admin role; returns False when the account did not hold it."""
    user = await uow.get_repository(UserRepository).get_by_email(email)
    if not user:
        raise BusinessException(f"No user with email {email}", code=404)
    role_repo = uow.get_repository(UserRoleRepository)
    role = await role_repo.find_one(user_id=user.id, role=AppRole.ADMIN)
    if not role:
        return False
    await role_repo.delete(role.id)
    await uow.commit()
    return True


async def main():
    parser = argparse.ArgumentParser(
        description="Grant (or revoke) the admin role for a user account",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m apps.identity.scripts.grant_admin admin@example.com
  python -m apps.identity.scripts.grant_admin admin@example.com --revoke
        """
    )
    parser.add_argument("email", help="Email of an existing account")
    parser.add_argument(
        "--revoke",
        action="store_true",
        help="Remove the admin role instead of granting it"
    )
    args = parser.parse_args()

    LogConfig.setup_cli_logging("grant_admin")
    email = args.email.strip().lower()
    db_manager = DatabaseManager.get_instance()
    exit_code = 0

    try:
        await db_manager.sql.connect()
        async for session in db_manager.sql.get_session():
            async with UnitOfWork(session=session) as uow:
                if args.revoke:
                    changed = await revoke_admin(uow, email)
                    logger.info(f"Admin role revoked from {email}" if changed else f"{email} is not an admin")
                else:
                    changed = await IdentityService(uow).grant_role(email, AppRole.ADMIN)
                    logger.info(f"Admin role granted to {email}" if changed else f"{email} is already an admin")
    except BusinessException as e:
        logger.error(f"Business error: {e.message}")
        exit_code = 1
    except Exception as e:
        logger.opt(exception=True).error(f"Unexpected error: {str(e)}")
        exit_code = 1
    finally:
        await db_manager.sql.disconnect()

    sys.exit(exit_code)


if __name__ == "__main__":
    asyncio.run(main())
