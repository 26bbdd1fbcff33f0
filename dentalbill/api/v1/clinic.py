from fastapi import APIRouter, Depends, File, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from dentalbill.api.deps import get_tenant_context
from dentalbill.db.session import get_session
from dentalbill.schemas.clinic import ClinicProfileResponse, ClinicProfileUpdate
from dentalbill.services.clinic_service import ClinicService
from dentalbill.services.tenant_service import TenantContext

router = APIRouter()

async def get_clinic_service(session: AsyncSession = Depends(get_session)) -> ClinicService:
    return ClinicService(session)

@router.get("/profile", response_model=ClinicProfileResponse)
async def read_profile(
    ctx: TenantContext = Depends(get_tenant_context),
    service: ClinicService = Depends(get_clinic_service)
):
    return await service.get_profile(ctx)

@router.put("/profile", response_model=ClinicProfileResponse)
async def update_profile(
    payload: ClinicProfileUpdate,
    ctx: TenantContext = Depends(get_tenant_context),
    service: ClinicService = Depends(get_clinic_service)
):
    return await service.update_profile(ctx, payload)

@router.post("/profile/{kind}", response_model=ClinicProfileResponse)
async def upload_image(
    kind: str,
    file: UploadFile = File(...),
    ctx: TenantContext = Depends(get_tenant_context),
    service: ClinicService = Depends(get_clinic_service)
):
    content = await file.read()
    return await service.upload_image(ctx, kind, file.filename or kind, content, file.content_type)

@router.delete("/profile/{kind}", response_model=ClinicProfileResponse)
async def delete_image(
    kind: str,
    ctx: TenantContext = Depends(get_tenant_context),
    service: ClinicService = Depends(get_clinic_service)
):
    return await service.delete_image(ctx, kind)
