"""
LMS service — FastAPI dependencies.

Wrap the shared auth dependencies and add LMS context (role guards and the
instructor approval gate, which needs a DB lookup because approval can change
after a token is issued).
"""
from __future__ import annotations

from fastapi import Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.models.user import User
from shared.auth.dependencies import (
    get_current_user_required,
    require_roles,
)
from shared.constants import Role
from shared.models.user import CurrentUser

# Routes import from here, not from shared directly.
get_current_user = get_current_user_required

require_admin = require_roles(Role.ADMIN)
require_instructor = require_roles(Role.INSTRUCTOR)
require_student = require_roles(Role.STUDENT)
require_instructor_or_admin = require_roles(Role.INSTRUCTOR, Role.ADMIN)


async def require_approved_instructor(
    current_user: CurrentUser = Depends(require_instructor),
    db: AsyncSession = Depends(get_db),
) -> CurrentUser:
    """Raise 403 unless the caller is an active instructor approved by an admin."""
    user = await db.get(User, current_user.id)
    if user is None or not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Account is deactivated",
        )
    if not user.is_approved:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Instructor account pending approval",
        )
    return current_user
