"""Block service - Administrator-defined closures of dates and time windows."""

from datetime import date, timedelta
from uuid import UUID

import logfire
from sqlalchemy import select, and_
from sqlalchemy.ext.asyncio import AsyncSession

from booking_engine.models.blocked_slot import BlockedSlot, BlockType
from booking_engine.models.user import User
from booking_engine.schemas.block import BlockCreate, BlockRequestType, PublicBlock
from booking_engine.services.audit_service import AuditService
from booking_engine.services.validation_service import month_bounds


class BlockService:
    """Service class for blocked slots."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.audit = AuditService(db)

    async def create_block(
        self, block_data: BlockCreate, admin: User, ip_address: str | None = None
    ) -> list[BlockedSlot]:
        """Create a block. A period becomes one full-day block per calendar day."""
        if block_data.block_type == BlockRequestType.PERIOD:
            days = (block_data.end_date - block_data.blocked_date).days + 1
            dates = [block_data.blocked_date + timedelta(days=offset) for offset in range(days)]
            block_type = BlockType.FULL_DAY
        else:
            dates = [block_data.blocked_date]
            block_type = BlockType(block_data.block_type.value)

        blocks = [
            BlockedSlot(
                blocked_date=day,
                start_time=block_data.start_time,
                end_time=block_data.end_time,
                block_type=block_type.value,
                reason=block_data.reason,
                created_by=admin.id,
            )
            for day in dates
        ]
        self.db.add_all(blocks)
        await self.db.flush()

        logfire.info(
            "create_block",
            block_type=block_data.block_type.value,
            start=str(dates[0]),
            end=str(dates[-1]),
            count=len(blocks),
        )
        await self.audit.log_action(
            action="CREATE_BLOCK",
            entity_type="blocked_slot",
            user_id=admin.id,
            entity_id=blocks[0].id if len(blocks) == 1 else None,
            details=f"Block on {block_data.blocked_date.isoformat()} ({block_data.block_type.value})",
            ip_address=ip_address,
        )
        return blocks

    async def delete_block(self, block_id: UUID, admin: User, ip_address: str | None = None) -> bool:
        """Delete a block. Returns False when it does not exist."""
        block = await self.db.get(BlockedSlot, block_id)
        if block is None:
            return False

        await self.db.delete(block)
        await self.db.flush()
        await self.audit.log_action(
            action="DELETE_BLOCK",
            entity_type="blocked_slot",
            user_id=admin.id,
            entity_id=block_id,
            ip_address=ip_address,
        )
        return True

    async def list_blocks(self, start: date | None = None, end: date | None = None) -> list[BlockedSlot]:
        """List blocks, optionally limited to an inclusive date range."""
        query = select(BlockedSlot)
        if start is not None and end is not None:
            query = query.where(
                and_(BlockedSlot.blocked_date >= start, BlockedSlot.blocked_date <= end)
            ).order_by(BlockedSlot.blocked_date, BlockedSlot.start_time)
        else:
            query = query.order_by(BlockedSlot.blocked_date.desc())

        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def get_public_blocks(self, year: int, month: int) -> list[PublicBlock]:
        """Blocks of one month, reduced to what members may see."""
        first, last = month_bounds(date(year, month, 1))
        blocks = await self.list_blocks(first, last)
        return [
            PublicBlock(day=b.blocked_date.day, block_type=b.block_type, reason=b.reason)
            for b in blocks
        ]
