"""Report routes - Entry points for scheduled jobs."""

from fastapi import APIRouter

from booking_engine.api.deps import DBSession, Clock, AdminUser
from booking_engine.schemas.notification import QueuedEmailResponse
from booking_engine.services.report_service import ReportService

router = APIRouter()


@router.post("/daily", response_model=list[QueuedEmailResponse], status_code=202)
async def run_daily_report(db: DBSession, clock: Clock, admin: AdminUser):
    """Queue the report of tomorrow's appointments. Called by the scheduler."""
    return await ReportService(db, clock=clock).run_daily_report()
