"""Tests for BlockService."""

from datetime import date, time
from uuid import uuid4

import pytest
from pydantic import ValidationError
from sqlalchemy import select

from booking_engine.models.audit_log import AuditLog
from booking_engine.models.blocked_slot import BlockType
from booking_engine.schemas.block import BlockCreate
from booking_engine.services.block_service import BlockService
from booking_engine.services.validation_service import AppointmentValidationService
from tests.conftest import NEXT_MONDAY, THURSDAY


@pytest.fixture
def block_service(db):
    return BlockService(db)


class TestBlockCreate:
    """Tests for the block request schema."""

    def test_period_requires_end_date(self):
        with pytest.raises(ValidationError):
            BlockCreate(blocked_date=THURSDAY, block_type="period", reason="Holidays")

    def test_period_end_before_start(self):
        with pytest.raises(ValidationError):
            BlockCreate(
                blocked_date=THURSDAY,
                end_date=date(2026, 3, 11),
                block_type="period",
                reason="Holidays",
            )

    def test_time_slot_needs_ordered_window(self):
        with pytest.raises(ValidationError):
            BlockCreate(
                blocked_date=THURSDAY,
                block_type="time_slot",
                start_time="10:00",
                end_time="09:00",
                reason="Meeting",
            )

    def test_full_day_defaults_cover_day(self):
        block = BlockCreate(blocked_date=THURSDAY, block_type="full_day", reason="Holiday")

        assert block.start_time == time(0, 0)
        assert block.end_time == time(23, 59, 59)


class TestCreateBlock:
    """Tests for creating blocks."""

    @pytest.mark.asyncio
    async def test_period_expands_to_full_days(self, db, block_service, admin):
        data = BlockCreate(
            blocked_date=NEXT_MONDAY,
            end_date=date(2026, 3, 18),
            block_type="period",
            reason="Holidays",
        )

        blocks = await block_service.create_block(data, admin)
        await db.commit()

        assert [b.blocked_date for b in blocks] == [
            date(2026, 3, 16), date(2026, 3, 17), date(2026, 3, 18),
        ]
        assert all(b.block_type == BlockType.FULL_DAY.value for b in blocks)
        assert all(b.created_by == admin.id for b in blocks)

    @pytest.mark.asyncio
    async def test_period_day_has_no_slots(self, db, clock, block_service, admin):
        data = BlockCreate(
            blocked_date=NEXT_MONDAY,
            end_date=date(2026, 3, 18),
            block_type="period",
            reason="Holidays",
        )
        await block_service.create_block(data, admin)
        await db.commit()

        availability = await AppointmentValidationService(db, clock=clock).get_available_slots(date(2026, 3, 17))

        assert availability.slots == []
        assert availability.is_full_day_blocked is True

    @pytest.mark.asyncio
    async def test_time_slot_block(self, db, block_service, admin):
        data = BlockCreate(
            blocked_date=THURSDAY,
            block_type="time_slot",
            start_time="09:00",
            end_time="10:00",
            reason="Meeting",
        )

        blocks = await block_service.create_block(data, admin, ip_address="10.0.0.9")
        await db.commit()

        assert len(blocks) == 1
        assert blocks[0].block_type == BlockType.TIME_SLOT.value
        assert blocks[0].start_time == time(9, 0)

        audit = (await db.execute(select(AuditLog))).scalars().one()
        assert audit.action == "CREATE_BLOCK"
        assert audit.entity_id == blocks[0].id


class TestDeleteAndList:
    """Tests for deleting and listing blocks."""

    @pytest.mark.asyncio
    async def test_delete(self, db, block_service, admin):
        data = BlockCreate(blocked_date=THURSDAY, block_type="full_day", reason="Holiday")
        [block] = await block_service.create_block(data, admin)
        await db.commit()

        assert await block_service.delete_block(block.id, admin) is True
        assert await block_service.delete_block(block.id, admin) is False
        assert await block_service.list_blocks() == []

    @pytest.mark.asyncio
    async def test_delete_unknown(self, block_service, admin):
        assert await block_service.delete_block(uuid4(), admin) is False

    @pytest.mark.asyncio
    async def test_list_range_and_public_month(self, db, block_service, admin):
        await block_service.create_block(
            BlockCreate(blocked_date=THURSDAY, block_type="full_day", reason="Holiday"), admin
        )
        await block_service.create_block(
            BlockCreate(blocked_date=date(2026, 4, 2), block_type="full_day", reason="Easter"), admin
        )
        await db.commit()

        in_march = await block_service.list_blocks(date(2026, 3, 1), date(2026, 3, 31))
        public = await block_service.get_public_blocks(2026, 4)

        assert [b.blocked_date for b in in_march] == [THURSDAY]
        assert len(public) == 1
        assert public[0].day == 2
        assert public[0].reason == "Easter"
        assert public[0].block_type == "full_day"
