"""User routes - API endpoints for member records."""

from fastapi import APIRouter

from booking_engine.api.deps import DBSession, CurrentUser
from booking_engine.schemas.user import UserIdentify, UserResponse
from booking_engine.services.user_service import UserService

router = APIRouter()


@router.post("/identify", response_model=UserResponse)
async def identify_or_create_user(user_data: UserIdentify, db: DBSession):
    """Upsert a member from claims verified by the identity gateway."""
    service = UserService(db)
    return await service.identify_or_create_user(user_data)


@router.get("/me", response_model=UserResponse)
async def get_me(user: CurrentUser):
    """Get the calling member."""
    return user
