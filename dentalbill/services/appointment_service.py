from datetime import date, datetime, timezone
from typing import List, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from dentalbill.core.exceptions import AppointmentNotFound
from dentalbill.db.models import Appointment
from dentalbill.schemas.appointment import AppointmentCreate
from dentalbill.services.tenant_service import TenantContext, resolve_tenant_id

def _as_utc(value: datetime) -> datetime:
    # Times sent without an offset are taken to be UTC already
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)

class AppointmentService:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def add_appointment(self, ctx: TenantContext, data: AppointmentCreate) -> Appointment:
        dentist_id = resolve_tenant_id(ctx)
        appointment = Appointment(
            dentist_id=dentist_id,
            patient_name=data.patient_name.strip(),
            type=data.type.value,
            start=_as_utc(data.start),
            end=_as_utc(data.end),
            description=data.description,
        )
        self.session.add(appointment)
        await self.session.commit()
        await self.session.refresh(appointment)
        return appointment

    async def list_appointments(self, ctx: TenantContext, day: Optional[date] = None) -> List[Appointment]:
        """
        List the dentist's appointments, optionally for one calendar day.

        The day match compares the stored start's own date with no timezone
        conversion, the same way the calendar screen does.
        """
        dentist_id = resolve_tenant_id(ctx)
        stmt = select(Appointment).where(Appointment.dentist_id == dentist_id).order_by(Appointment.start)
        result = await self.session.execute(stmt)
        appointments = list(result.scalars().all())
        if day is not None:
            appointments = [a for a in appointments if a.start.date() == day]
        return appointments

    async def get_appointment(self, ctx: TenantContext, appointment_id: UUID) -> Appointment:
        dentist_id = resolve_tenant_id(ctx)
        stmt = select(Appointment).where(
            Appointment.id == appointment_id,
            Appointment.dentist_id == dentist_id
        )
        result = await self.session.execute(stmt)
        appointment = result.scalars().first()
        if not appointment:
            raise AppointmentNotFound()
        return appointment

    async def update_appointment(self, ctx: TenantContext, appointment_id: UUID, data: AppointmentCreate) -> Appointment:
        appointment = await self.get_appointment(ctx, appointment_id)
        appointment.patient_name = data.patient_name.strip()
        appointment.type = data.type.value
        appointment.start = _as_utc(data.start)
        appointment.end = _as_utc(data.end)
        appointment.description = data.description
        self.session.add(appointment)
        await self.session.commit()
        await self.session.refresh(appointment)
        return appointment

    async def delete_appointment(self, ctx: TenantContext, appointment_id: UUID) -> None:
        appointment = await self.get_appointment(ctx, appointment_id)
        await self.session.delete(appointment)
        await self.session.commit()
