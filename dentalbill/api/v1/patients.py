from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, File, Form, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from dentalbill.api.deps import get_tenant_context
from dentalbill.db.session import get_session
from dentalbill.schemas.patient import PatientCreate, PatientDocument, PatientResponse, PatientUpdate
from dentalbill.services.patient_service import PatientService
from dentalbill.services.tenant_service import TenantContext

router = APIRouter()

async def get_patient_service(session: AsyncSession = Depends(get_session)) -> PatientService:
    return PatientService(session)

@router.get("/", response_model=List[PatientResponse])
async def list_patients(
    search: Optional[str] = None,
    ctx: TenantContext = Depends(get_tenant_context),
    service: PatientService = Depends(get_patient_service)
):
    patients = await service.list_patients(ctx)
    if search:
        patients = [p for p in patients if search.lower() in p.name.lower()]
    return patients

@router.post("/", response_model=PatientResponse)
async def create_patient(
    payload: PatientCreate,
    ctx: TenantContext = Depends(get_tenant_context),
    service: PatientService = Depends(get_patient_service)
):
    patient_id = await service.add_patient(ctx, payload.name, payload.phone, strict=True)
    return await service.get_patient(ctx, patient_id)

@router.get("/{patient_id}", response_model=PatientResponse)
async def read_patient(
    patient_id: UUID,
    ctx: TenantContext = Depends(get_tenant_context),
    service: PatientService = Depends(get_patient_service)
):
    return await service.get_patient(ctx, patient_id)

@router.put("/{patient_id}", response_model=PatientResponse)
async def update_patient(
    patient_id: UUID,
    payload: PatientUpdate,
    ctx: TenantContext = Depends(get_tenant_context),
    service: PatientService = Depends(get_patient_service)
):
    return await service.update_patient(ctx, patient_id, payload)

@router.delete("/{patient_id}")
async def delete_patient(
    patient_id: UUID,
    ctx: TenantContext = Depends(get_tenant_context),
    service: PatientService = Depends(get_patient_service)
):
    await service.delete_patient(ctx, patient_id)
    return {"success": True}

@router.get("/{patient_id}/documents", response_model=List[PatientDocument])
async def list_documents(
    patient_id: UUID,
    ctx: TenantContext = Depends(get_tenant_context),
    service: PatientService = Depends(get_patient_service)
):
    patient = await service.get_patient(ctx, patient_id)
    return patient.documents or []

@router.post("/{patient_id}/documents", response_model=PatientResponse)
async def upload_document(
    patient_id: UUID,
    name: str = Form(...),
    type: str = Form(...),
    file: UploadFile = File(...),
    ctx: TenantContext = Depends(get_tenant_context),
    service: PatientService = Depends(get_patient_service)
):
    content = await file.read()
    return await service.add_document(
        ctx, patient_id, name, type, file.filename or "document", content, file.content_type
    )
