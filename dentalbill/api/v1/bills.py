from typing import List, Optional

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from dentalbill.api.deps import get_tenant_context
from dentalbill.db.session import get_session
from dentalbill.schemas.bill import BillCreate, BillResponse, GenerateBillRequest, GenerateBillResponse
from dentalbill.services.bill_service import BillService
from dentalbill.services.clinic_service import ClinicService
from dentalbill.services.receipt_service import ReceiptService, receipt_filename
from dentalbill.services.tenant_service import TenantContext, resolve_tenant_id

router = APIRouter()

async def get_bill_service(session: AsyncSession = Depends(get_session)) -> BillService:
    return BillService(session)

@router.post("/", response_model=BillResponse)
async def create_bill(
    payload: BillCreate,
    ctx: TenantContext = Depends(get_tenant_context),
    service: BillService = Depends(get_bill_service)
):
    return await service.create_bill(
        resolve_tenant_id(ctx), payload.patient_id, payload.patient_name, payload.consultations
    )

@router.post("/generate", response_model=GenerateBillResponse)
async def generate_bill(
    payload: GenerateBillRequest,
    ctx: TenantContext = Depends(get_tenant_context),
    service: BillService = Depends(get_bill_service)
):
    return await service.generate_bill(ctx, payload)

@router.get("/", response_model=List[BillResponse])
async def list_bills(
    patient: Optional[str] = None,
    ctx: TenantContext = Depends(get_tenant_context),
    service: BillService = Depends(get_bill_service)
):
    if patient:
        return await service.list_bills_for_patient(ctx, patient)
    return await service.list_bills_for_tenant(ctx)

@router.get("/{bill_id}", response_model=BillResponse)
async def read_bill(
    bill_id: str,
    ctx: TenantContext = Depends(get_tenant_context),
    service: BillService = Depends(get_bill_service)
):
    bill, _ = await service.get_bill(ctx, bill_id)
    return bill

@router.post("/{bill_id}/paid", response_model=BillResponse)
async def mark_paid(
    bill_id: str,
    ctx: TenantContext = Depends(get_tenant_context),
    service: BillService = Depends(get_bill_service)
):
    return await service.mark_paid(ctx, bill_id)

@router.get("/{bill_id}/pdf")
async def download_bill_pdf(
    bill_id: str,
    ctx: TenantContext = Depends(get_tenant_context),
    session: AsyncSession = Depends(get_session)
):
    bill, dentist_id = await BillService(session).get_bill(ctx, bill_id)
    branding = await ClinicService(session).get_branding(dentist_id)
    pdf = await ReceiptService().render(bill, branding)
    return Response(
        content=pdf,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{receipt_filename(bill.patient_name)}"'},
    )
