"""
Public endpoints under ``/api``: bill links sent by SMS, the admin panel
login and its cross-clinic listing, and the raw SMS relay.
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, Response, status
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from dentalbill.api.deps import ADMIN_COOKIE, get_tenant_context, require_admin
from dentalbill.core.config import settings
from dentalbill.db.session import get_session
from dentalbill.schemas.analytics import AnalyticsResponse
from dentalbill.schemas.auth import AdminLoginRequest
from dentalbill.schemas.bill import BillResponse, SaveBillRequest
from dentalbill.schemas.sms import SmsRequest, SmsResult
from dentalbill.services.analytics_service import summarize
from dentalbill.services.auth_service import admin_login
from dentalbill.services.bill_service import BillService
from dentalbill.services.clinic_service import ClinicService
from dentalbill.services.receipt_service import ReceiptService, receipt_filename
from dentalbill.services.sms_service import sms_service
from dentalbill.services.tenant_service import TenantContext, resolve_tenant_id

router = APIRouter()

def error_response(message: str, status_code: int, **extra) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={**extra, "error": message})

@router.get("/fetch-bill", response_model=BillResponse)
async def fetch_bill(
    id: Optional[str] = None,
    ctx: TenantContext = Depends(get_tenant_context),
    session: AsyncSession = Depends(get_session)
):
    if not id:
        return error_response("Missing ID", status.HTTP_400_BAD_REQUEST)
    bill, _ = await BillService(session).get_bill(ctx, id)
    return bill

@router.get("/get-bill-pdf")
async def get_bill_pdf(
    id: Optional[str] = None,
    ctx: TenantContext = Depends(get_tenant_context),
    session: AsyncSession = Depends(get_session)
):
    if not id:
        return error_response("Missing ID", status.HTTP_400_BAD_REQUEST)
    bill, dentist_id = await BillService(session).get_bill(ctx, id)
    branding = await ClinicService(session).get_branding(dentist_id)
    pdf = await ReceiptService().render(bill, branding)
    return Response(
        content=pdf,
        media_type="application/pdf",
        headers={"Content-Disposition": f'inline; filename="{receipt_filename(bill.patient_name)}"'},
    )

@router.post("/save-bill")
async def save_bill(
    payload: SaveBillRequest,
    ctx: TenantContext = Depends(get_tenant_context),
    session: AsyncSession = Depends(get_session)
):
    if not payload.patient_name or payload.consultations is None:
        return error_response("Missing data", status.HTTP_400_BAD_REQUEST)
    bill = await BillService(session).create_bill(
        resolve_tenant_id(ctx), payload.patient_id, payload.patient_name, payload.consultations
    )
    return {"id": str(bill.id)}

@router.get("/get-all-bills", response_model=List[BillResponse], dependencies=[Depends(require_admin)])
async def get_all_bills(session: AsyncSession = Depends(get_session)):
    return await BillService(session).list_all_bills()

@router.get("/admin/analytics", response_model=AnalyticsResponse, dependencies=[Depends(require_admin)])
async def admin_analytics(session: AsyncSession = Depends(get_session)):
    return summarize(await BillService(session).list_all_bills())

@router.post("/send-sms", response_model=SmsResult, response_model_exclude_none=True)
async def send_sms(payload: SmsRequest):
    if not payload.to or not payload.message:
        return error_response("Missing 'to' or 'message'", status.HTTP_400_BAD_REQUEST, success=False)
    return await sms_service.send_bill_sms(payload.to, payload.message)

@router.post("/admin-login")
async def admin_login_endpoint(payload: AdminLoginRequest, response: Response):
    token = await admin_login(payload.username, payload.password)
    if token is None:
        return error_response("Invalid username or password", status.HTTP_401_UNAUTHORIZED, success=False)
    response.set_cookie(
        ADMIN_COOKIE,
        token,
        max_age=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        httponly=True,
        samesite="lax",
    )
    return {"success": True}
