"""HTTP tests for the booking API."""

from uuid import uuid4

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.exc import OperationalError

from booking_engine.api.deps import get_clock
from booking_engine.database import get_db
from booking_engine.main import app
from tests.conftest import TOMORROW, make_appointment


@pytest.fixture
async def client(session_factory, clock):
    """API client bound to the test database and the fixed clock."""

    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_clock] = lambda: clock
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


def auth(user):
    return {"X-User-Id": str(user.id)}


def new_booking(day="2026-03-12", start="09:00", reason="Check-up"):
    return {"appointment_date": day, "start_time": start, "reason": reason}


class TestHealthAndAuth:
    """Tests for the health check and caller identification."""

    @pytest.mark.asyncio
    async def test_health(self, client):
        response = await client.get("/")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    @pytest.mark.asyncio
    async def test_missing_user_header(self, client):
        response = await client.get("/api/appointments/slots", params={"date": "2026-03-12"})
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_unknown_user(self, client):
        headers = {"X-User-Id": "00000000-0000-0000-0000-000000000000"}
        response = await client.get("/api/users/me", headers=headers)
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_identify_then_me(self, client):
        response = await client.post(
            "/api/users/identify",
            json={"external_id": "idp-7", "name": "Bruno", "email": "bruno@example.org"},
        )
        assert response.status_code == 200
        user_id = response.json()["id"]

        me = await client.get("/api/users/me", headers={"X-User-Id": user_id})

        assert me.status_code == 200
        assert me.json()["external_id"] == "idp-7"
        assert me.json()["role"] == "user"


class TestAppointmentRoutes:
    """Tests for the appointment endpoints."""

    @pytest.mark.asyncio
    async def test_slots(self, client, member):
        response = await client.get(
            "/api/appointments/slots", params={"date": "2026-03-12"}, headers=auth(member)
        )

        assert response.status_code == 200
        body = response.json()
        assert body["slots"][0] == "08:00:00"
        assert len(body["slots"]) == 8
        assert body["is_full_day_blocked"] is False

    @pytest.mark.asyncio
    async def test_book_and_collide(self, client, member, other_member):
        first = await client.post("/api/appointments/", json=new_booking(), headers=auth(member))

        assert first.status_code == 201
        assert first.json()["start_time"] == "09:00:00"
        assert first.json()["end_time"] == "09:30:00"
        assert first.json()["status"] == "confirmed"

        second = await client.post("/api/appointments/", json=new_booking(), headers=auth(other_member))

        assert second.status_code == 409
        assert second.json()["code"] == "SLOT_NOT_AVAILABLE"

        slots = await client.get(
            "/api/appointments/slots", params={"date": "2026-03-12"}, headers=auth(member)
        )
        assert "09:00:00" not in slots.json()["slots"]

    @pytest.mark.asyncio
    async def test_rule_rejection_carries_code(self, client, member):
        response = await client.post(
            "/api/appointments/", json=new_booking(day="2026-03-14"), headers=auth(member)
        )

        assert response.status_code == 400
        assert response.json()["code"] == "WEEKEND"
        assert response.json()["detail"]

    @pytest.mark.asyncio
    async def test_malformed_time(self, client, member):
        response = await client.post(
            "/api/appointments/", json=new_booking(start="25:00"), headers=auth(member)
        )
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_validate_dry_run(self, client, member):
        ok = await client.post(
            "/api/appointments/validate",
            json={"appointment_date": "2026-03-12", "start_time": "09:00"},
            headers=auth(member),
        )
        bad = await client.post(
            "/api/appointments/validate",
            json={"appointment_date": "2026-03-12", "start_time": "14:00"},
            headers=auth(member),
        )

        assert ok.json()["valid"] is True
        assert "09:00:00" in ok.json()["available_slots"]
        assert bad.json() == {
            "valid": False,
            "message": "Available hours: 08:00:00 to 12:00:00",
            "code": "OUTSIDE_WORKING_HOURS",
        }

        upcoming = await client.get("/api/appointments/upcoming", headers=auth(member))
        assert upcoming.json() == []

    @pytest.mark.asyncio
    async def test_other_members_appointment_hidden(self, client, member, other_member):
        created = await client.post("/api/appointments/", json=new_booking(), headers=auth(member))
        appointment_id = created.json()["id"]

        own = await client.get(f"/api/appointments/{appointment_id}", headers=auth(member))
        other = await client.get(f"/api/appointments/{appointment_id}", headers=auth(other_member))

        assert own.status_code == 200
        assert other.status_code == 404

    @pytest.mark.asyncio
    async def test_cancel_and_history(self, client, member):
        created = await client.post("/api/appointments/", json=new_booking(), headers=auth(member))
        appointment_id = created.json()["id"]

        cancelled = await client.post(
            f"/api/appointments/{appointment_id}/cancel",
            json={"reason": "Travelling"},
            headers=auth(member),
        )
        again = await client.post(
            f"/api/appointments/{appointment_id}/cancel",
            json={"reason": "Travelling"},
            headers=auth(member),
        )
        history = await client.get("/api/appointments/history", headers=auth(member))

        assert cancelled.status_code == 200
        assert cancelled.json()["status"] == "cancelled"
        assert again.status_code == 400
        assert again.json()["code"] == "ALREADY_CANCELLED"
        assert [a["status"] for a in history.json()] == ["cancelled"]

    @pytest.mark.asyncio
    async def test_reschedule(self, client, member):
        created = await client.post("/api/appointments/", json=new_booking(), headers=auth(member))
        appointment_id = created.json()["id"]

        moved = await client.post(
            f"/api/appointments/{appointment_id}/reschedule",
            json={"appointment_date": "2026-03-13", "start_time": "11:30"},
            headers=auth(member),
        )

        assert moved.status_code == 200
        assert moved.json()["appointment_date"] == "2026-03-13"
        assert moved.json()["end_time"] == "12:00:00"

    @pytest.mark.asyncio
    async def test_status_change_is_admin_only(self, client, member, admin):
        created = await client.post("/api/appointments/", json=new_booking(), headers=auth(member))
        appointment_id = created.json()["id"]

        as_member = await client.patch(
            f"/api/appointments/{appointment_id}/status",
            json={"status": "completed"},
            headers=auth(member),
        )
        as_admin = await client.patch(
            f"/api/appointments/{appointment_id}/status",
            json={"status": "no_show"},
            headers=auth(admin),
        )

        assert as_member.status_code == 403
        assert as_admin.status_code == 200
        assert as_admin.json()["status"] == "no_show"

    @pytest.mark.asyncio
    async def test_admin_day_and_calendar(self, client, member, admin):
        await client.post("/api/appointments/", json=new_booking(), headers=auth(member))

        day = await client.get(
            "/api/appointments/day", params={"date": "2026-03-12"}, headers=auth(admin)
        )
        calendar = await client.get(
            "/api/appointments/calendar",
            params={"start": "2026-03-01", "end": "2026-03-31"},
            headers=auth(admin),
        )
        inverted = await client.get(
            "/api/appointments/calendar",
            params={"start": "2026-03-31", "end": "2026-03-01"},
            headers=auth(admin),
        )

        assert len(day.json()) == 1
        assert len(calendar.json()) == 1
        assert inverted.status_code == 422


class TestBlockRoutes:
    """Tests for the block endpoints."""

    @pytest.mark.asyncio
    async def test_members_cannot_block(self, client, member):
        response = await client.post(
            "/api/blocks/",
            json={"blocked_date": "2026-03-12", "block_type": "full_day", "reason": "Holiday"},
            headers=auth(member),
        )
        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_period_block_lifecycle(self, client, member, admin):
        created = await client.post(
            "/api/blocks/",
            json={
                "blocked_date": "2026-03-16",
                "end_date": "2026-03-18",
                "block_type": "period",
                "reason": "Holidays",
            },
            headers=auth(admin),
        )
        assert created.status_code == 201
        assert len(created.json()) == 3

        public = await client.get(
            "/api/blocks/public", params={"year": 2026, "month": 3}, headers=auth(member)
        )
        assert [b["day"] for b in public.json()] == [16, 17, 18]

        slots = await client.get(
            "/api/appointments/slots", params={"date": "2026-03-17"}, headers=auth(member)
        )
        assert slots.json()["slots"] == []
        assert slots.json()["is_full_day_blocked"] is True
        assert slots.json()["block_reason"] == "Holidays"

        block_id = created.json()[0]["id"]
        deleted = await client.delete(f"/api/blocks/{block_id}", headers=auth(admin))
        missing = await client.delete(f"/api/blocks/{block_id}", headers=auth(admin))

        assert deleted.status_code == 204
        assert missing.status_code == 404

    @pytest.mark.asyncio
    async def test_period_without_end_date(self, client, admin):
        response = await client.post(
            "/api/blocks/",
            json={"blocked_date": "2026-03-16", "block_type": "period", "reason": "Holidays"},
            headers=auth(admin),
        )
        assert response.status_code == 422


class TestSettingsRoutes:
    """Tests for the settings endpoints."""

    @pytest.mark.asyncio
    async def test_read_defaults(self, client, member):
        response = await client.get("/api/settings/", headers=auth(member))

        assert response.status_code == 200
        assert response.json()["working_hours_start"] == "08:00:00"
        assert response.json()["monthly_limit_per_user"] == 2

    @pytest.mark.asyncio
    async def test_update_is_admin_only(self, client, member, admin):
        as_member = await client.patch(
            "/api/settings/", json={"monthly_limit_per_user": 5}, headers=auth(member)
        )
        as_admin = await client.patch(
            "/api/settings/", json={"monthly_limit_per_user": 5}, headers=auth(admin)
        )
        inverted = await client.patch(
            "/api/settings/", json={"working_hours_end": "07:00"}, headers=auth(admin)
        )

        assert as_member.status_code == 403
        assert as_admin.status_code == 200
        assert as_admin.json()["monthly_limit_per_user"] == 5
        assert inverted.status_code == 400


class TestNotificationRoutes:
    """Tests for administrator messages and the daily report."""

    @pytest.mark.asyncio
    async def test_notify_owner(self, client, db, member, admin):
        appointment = await make_appointment(db, member, TOMORROW, "08:00:00")
        url = f"/api/appointments/{appointment.id}/notify"
        body = {"message": "The desk opens late tomorrow."}

        as_member = await client.post(url, json=body, headers=auth(member))
        as_admin = await client.post(url, json=body, headers=auth(admin))
        unknown = await client.post(f"/api/appointments/{uuid4()}/notify", json=body, headers=auth(admin))

        assert as_member.status_code == 403
        assert as_admin.status_code == 202
        assert as_admin.json()["to_email"] == member.email
        assert as_admin.json()["email_type"] == "custom_notification"
        assert unknown.status_code == 404
        assert unknown.json()["code"] == "NOT_FOUND"

    @pytest.mark.asyncio
    async def test_daily_report(self, client, db, member, admin):
        await make_appointment(db, member, TOMORROW, "08:00:00")

        as_member = await client.post("/api/reports/daily", headers=auth(member))
        as_admin = await client.post("/api/reports/daily", headers=auth(admin))

        assert as_member.status_code == 403
        assert as_admin.status_code == 202
        assert [e["email_type"] for e in as_admin.json()] == ["daily_report"]


class UnavailableSession:
    """Session whose every query fails the way a locked or unreachable store does."""

    async def _fail(self, *args, **kwargs):
        raise OperationalError("SELECT 1", {}, Exception("database is locked"))

    get = _fail
    execute = _fail


class TestStoreUnavailable:
    """Tests for requests made while the store is down."""

    @pytest.mark.asyncio
    async def test_maps_to_503_without_code(self, client, member):
        async def unavailable_db():
            yield UnavailableSession()

        app.dependency_overrides[get_db] = unavailable_db

        response = await client.post(
            "/api/appointments/validate",
            json={"appointment_date": "2026-03-12", "start_time": "09:00"},
            headers=auth(member),
        )

        assert response.status_code == 503
        assert "code" not in response.json()
        assert response.json()["detail"] == "Database unavailable, please try again later"
