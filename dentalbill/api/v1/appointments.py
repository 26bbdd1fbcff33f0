from datetime import date
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from dentalbill.api.deps import get_tenant_context
from dentalbill.db.models import Appointment
from dentalbill.db.session import get_session
from dentalbill.schemas.appointment import AppointmentCreate, AppointmentResponse
from dentalbill.services.appointment_service import AppointmentService
from dentalbill.services.tenant_service import TenantContext

router = APIRouter()

async def get_appointment_service(session: AsyncSession = Depends(get_session)) -> AppointmentService:
    return AppointmentService(session)

def construct_response(appointment: Appointment) -> AppointmentResponse:
    response = AppointmentResponse.model_validate(appointment)
    response.title = f"{appointment.patient_name} - {appointment.type}"
    return response

@router.get("/", response_model=List[AppointmentResponse])
async def list_appointments(
    day: Optional[date] = Query(None, alias="date"),
    ctx: TenantContext = Depends(get_tenant_context),
    service: AppointmentService = Depends(get_appointment_service)
):
    appointments = await service.list_appointments(ctx, day=day)
    return [construct_response(a) for a in appointments]

@router.post("/", response_model=AppointmentResponse)
async def create_appointment(
    payload: AppointmentCreate,
    ctx: TenantContext = Depends(get_tenant_context),
    service: AppointmentService = Depends(get_appointment_service)
):
    appointment = await service.add_appointment(ctx, payload)
    return construct_response(appointment)

@router.put("/{appointment_id}", response_model=AppointmentResponse)
async def update_appointment(
    appointment_id: UUID,
    payload: AppointmentCreate,
    ctx: TenantContext = Depends(get_tenant_context),
    service: AppointmentService = Depends(get_appointment_service)
):
    appointment = await service.update_appointment(ctx, appointment_id, payload)
    return construct_response(appointment)

@router.delete("/{appointment_id}")
async def delete_appointment(
    appointment_id: UUID,
    ctx: TenantContext = Depends(get_tenant_context),
    service: AppointmentService = Depends(get_appointment_service)
):
    await service.delete_appointment(ctx, appointment_id)
    return {"success": True}
