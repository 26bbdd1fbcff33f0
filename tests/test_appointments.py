from datetime import date, datetime, timedelta, timezone

import pytest

from dentalbill.core.exceptions import AppointmentNotFound
from dentalbill.schemas.appointment import AppointmentCreate, AppointmentType
from dentalbill.services.appointment_service import AppointmentService
from dentalbill.services.tenant_service import TenantContext


def slot(day, hour, minutes=30):
    start = datetime(day.year, day.month, day.day, hour)
    return start, start + timedelta(minutes=minutes)


@pytest.mark.asyncio
async def test_day_filter(session, ctx):
    service = AppointmentService(session)
    monday = date(2024, 5, 6)
    for day, hour in [(monday, 10), (monday, 9), (monday + timedelta(days=1), 9)]:
        start, end = slot(day, hour)
        await service.add_appointment(ctx, AppointmentCreate(patient_name="Ravi", start=start, end=end))

    on_monday = await service.list_appointments(ctx, day=monday)
    assert [a.start.hour for a in on_monday] == [9, 10]
    assert len(await service.list_appointments(ctx)) == 3


@pytest.mark.asyncio
async def test_aware_times_are_stored_as_utc(session, ctx):
    ist = timezone(timedelta(hours=5, minutes=30))
    start = datetime(2024, 5, 6, 10, 0, tzinfo=ist)
    appointment = await AppointmentService(session).add_appointment(
        ctx, AppointmentCreate(patient_name="Ravi", start=start, end=start + timedelta(hours=1))
    )
    # SQLite hands the value back without its offset
    assert appointment.start.replace(tzinfo=None) == datetime(2024, 5, 6, 4, 30)


def test_end_must_follow_start():
    start = datetime(2024, 5, 6, 10)
    with pytest.raises(ValueError):
        AppointmentCreate(patient_name="Ravi", start=start, end=start)


@pytest.mark.asyncio
async def test_times_without_offset_are_taken_as_utc(session, ctx):
    start = datetime(2024, 5, 6, 10, 0)
    appointment = await AppointmentService(session).add_appointment(
        ctx, AppointmentCreate(patient_name="Ravi", start=start, end=start + timedelta(hours=1))
    )
    assert appointment.start.replace(tzinfo=None) == start
    assert appointment.end.replace(tzinfo=None) == datetime(2024, 5, 6, 11, 0)


@pytest.mark.asyncio
async def test_other_dentist_cannot_touch_appointment(session, dentist, other_dentist):
    service = AppointmentService(session)
    start, end = slot(date(2024, 5, 6), 10)
    appointment = await service.add_appointment(
        TenantContext.from_session(dentist.id), AppointmentCreate(patient_name="Ravi", start=start, end=end)
    )

    with pytest.raises(AppointmentNotFound):
        await service.delete_appointment(TenantContext.from_session(other_dentist.id), appointment.id)


@pytest.mark.asyncio
async def test_appointment_api_flow(auth_client):
    # 1. Create
    res = await auth_client.post("/api/v1/appointments/", json={
        "patient_name": "Ravi",
        "type": "Cleaning",
        "start": "2024-05-06T10:00:00",
        "end": "2024-05-06T10:30:00",
    })
    assert res.status_code == 200
    appointment = res.json()
    assert appointment["title"] == "Ravi - Cleaning"

    # 2. Reschedule
    res = await auth_client.put(f"/api/v1/appointments/{appointment['id']}", json={
        "patient_name": "Ravi",
        "type": AppointmentType.FOLLOW_UP.value,
        "start": "2024-05-07T11:00:00",
        "end": "2024-05-07T11:30:00",
    })
    assert res.json()["title"] == "Ravi - Follow-up"

    # 3. Filter by day
    res = await auth_client.get("/api/v1/appointments/", params={"date": "2024-05-06"})
    assert res.json() == []
    res = await auth_client.get("/api/v1/appointments/", params={"date": "2024-05-07"})
    assert len(res.json()) == 1

    # 4. Delete
    res = await auth_client.delete(f"/api/v1/appointments/{appointment['id']}")
    assert res.json() == {"success": True}


@pytest.mark.asyncio
async def test_api_rejects_backwards_time_range(auth_client):
    res = await auth_client.post("/api/v1/appointments/", json={
        "patient_name": "Ravi",
        "start": "2024-05-06T10:00:00",
        "end": "2024-05-06T09:00:00",
    })
    assert res.status_code == 400
    assert "end must be after" in res.json()["error"]
