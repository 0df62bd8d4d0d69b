"""Settings routes - Read and update business parameters."""

from fastapi import APIRouter, HTTPException

from booking_engine.api.deps import DBSession, CurrentUser, AdminUser
from booking_engine.schemas.settings import BusinessSettings, SettingsUpdate
from booking_engine.services.audit_service import AuditService
from booking_engine.services.settings_service import SettingsService

router = APIRouter()


@router.get("/", response_model=BusinessSettings)
async def get_settings(db: DBSession, user: CurrentUser):
    """Get the current business settings."""
    return await SettingsService(db).get_system_settings()


@router.patch("/", response_model=BusinessSettings)
async def update_settings(data: SettingsUpdate, db: DBSession, admin: AdminUser):
    """Update business settings."""
    try:
        updated = await SettingsService(db).update_system_settings(data)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    await AuditService(db).log_action(
        action="UPDATE_SETTINGS",
        entity_type="system_settings",
        user_id=admin.id,
        details=", ".join(sorted(data.model_dump(exclude_unset=True))),
    )
    return updated
