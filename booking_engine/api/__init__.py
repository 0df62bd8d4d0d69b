from fastapi import APIRouter
from booking_engine.api.routes import users, appointments, blocks, settings, reports

api_router = APIRouter()

api_router.include_router(users.router, prefix="/users", tags=["Users"])
api_router.include_router(appointments.router, prefix="/appointments", tags=["Appointments"])
api_router.include_router(blocks.router, prefix="/blocks", tags=["Blocks"])
api_router.include_router(settings.router, prefix="/settings", tags=["Settings"])
api_router.include_router(reports.router, prefix="/reports", tags=["Reports"])
