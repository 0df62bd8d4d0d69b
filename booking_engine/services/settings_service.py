"""Settings service - Read and update the business parameters."""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from booking_engine.config import settings as app_settings
from booking_engine.models.system_settings import SystemSettings
from booking_engine.schemas.settings import BusinessSettings, SettingsUpdate

logger = logging.getLogger(__name__)


def default_business_settings() -> BusinessSettings:
    """Business parameters from the environment, used until a row is saved."""
    fields = BusinessSettings.model_fields.keys()
    return BusinessSettings(**app_settings.model_dump(include=set(fields)))


class SettingsService:
    """Service class for the system settings singleton."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _get_row(self) -> SystemSettings | None:
        result = await self.db.execute(select(SystemSettings).order_by(SystemSettings.id).limit(1))
        return result.scalar_one_or_none()

    async def get_system_settings(self) -> BusinessSettings:
        """Get the current business settings."""
        row = await self._get_row()
        if row is None:
            return default_business_settings()
        return BusinessSettings.model_validate(row)

    async def update_system_settings(self, data: SettingsUpdate) -> BusinessSettings:
        """Update the settings row, creating it from defaults on first save."""
        row = await self._get_row()
        if row is None:
            row = SystemSettings(**default_business_settings().model_dump())
            self.db.add(row)

        update_data = data.model_dump(exclude_unset=True, exclude_none=True)
        for field, value in update_data.items():
            setattr(row, field, value)

        # Re-validate the merged row before it is written
        merged = BusinessSettings.model_validate(row)
        if merged.work_start >= merged.work_end:
            raise ValueError("working_hours_start must be before working_hours_end")

        await self.db.flush()
        await self.db.refresh(row)
        logger.info("System settings updated: %s", sorted(update_data))
        return BusinessSettings.model_validate(row)
