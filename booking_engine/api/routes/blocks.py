"""Block routes - Administrator closures of dates and time windows."""

from datetime import date
from uuid import UUID

from fastapi import APIRouter, HTTPException, Request

from booking_engine.api.deps import DBSession, CurrentUser, AdminUser
from booking_engine.schemas.block import BlockCreate, BlockResponse, PublicBlock
from booking_engine.services.block_service import BlockService

router = APIRouter()


@router.get("/public", response_model=list[PublicBlock])
async def get_public_blocks(year: int, month: int, db: DBSession, user: CurrentUser):
    """Get the blocks of a month as shown on the member calendar."""
    if not 1 <= month <= 12:
        raise HTTPException(status_code=422, detail="month must be between 1 and 12")
    return await BlockService(db).get_public_blocks(year, month)


@router.get("/", response_model=list[BlockResponse])
async def list_blocks(
    db: DBSession,
    admin: AdminUser,
    start: date | None = None,
    end: date | None = None,
):
    """List blocks, optionally within a date range."""
    return await BlockService(db).list_blocks(start, end)


@router.post("/", response_model=list[BlockResponse], status_code=201)
async def create_block(block_data: BlockCreate, request: Request, db: DBSession, admin: AdminUser):
    """Create a full-day, time-slot or period block."""
    ip = request.client.host if request.client else None
    return await BlockService(db).create_block(block_data, admin, ip)


@router.delete("/{block_id}", status_code=204)
async def delete_block(block_id: UUID, request: Request, db: DBSession, admin: AdminUser):
    """Delete a block."""
    ip = request.client.host if request.client else None
    if not await BlockService(db).delete_block(block_id, admin, ip):
        raise HTTPException(status_code=404, detail="Block not found")
