from datetime import datetime
from typing import Annotated, Callable
from uuid import UUID

from fastapi import Depends, Header, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from booking_engine.database import get_db
from booking_engine.models.user import User
from booking_engine.services.user_service import UserService

DBSession = Annotated[AsyncSession, Depends(get_db)]


def get_clock() -> Callable[[], datetime]:
    """Wall clock used by the business rules; overridden in tests."""
    return datetime.now


Clock = Annotated[Callable[[], datetime], Depends(get_clock)]


async def get_current_user(
    db: DBSession,
    x_user_id: Annotated[UUID | None, Header()] = None,
) -> User:
    """Resolve the member the authentication gateway put in X-User-Id."""
    if x_user_id is None:
        raise HTTPException(status_code=401, detail="Not authenticated")

    user = await UserService(db).get_user_by_id(x_user_id)
    if user is None or not user.is_active:
        raise HTTPException(status_code=401, detail="Unknown or inactive user")
    return user


CurrentUser = Annotated[User, Depends(get_current_user)]


async def get_admin_user(user: CurrentUser) -> User:
    if not user.is_admin:
        raise HTTPException(status_code=403, detail="Administrator access required")
    return user


AdminUser = Annotated[User, Depends(get_admin_user)]
