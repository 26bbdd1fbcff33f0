from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from dentalbill.api.deps import get_tenant_context
from dentalbill.db.session import get_session
from dentalbill.schemas.analytics import AnalyticsResponse
from dentalbill.services.analytics_service import summarize
from dentalbill.services.bill_service import BillService
from dentalbill.services.tenant_service import TenantContext

router = APIRouter()

@router.get("/", response_model=AnalyticsResponse)
async def read_analytics(
    ctx: TenantContext = Depends(get_tenant_context),
    session: AsyncSession = Depends(get_session)
):
    bills = await BillService(session).list_bills_for_tenant(ctx)
    return summarize(bills)
