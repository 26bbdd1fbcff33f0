from uuid import uuid4

import pytest

from dentalbill.core.exceptions import BillNotFound, NotAuthenticated
from dentalbill.schemas.bill import Consultation
from dentalbill.services.bill_service import BillService
from dentalbill.services.patient_service import PatientService
from dentalbill.services.tenant_service import (
    TenantContext,
    TenantSource,
    lookup_bill_across_tenants,
    parse_tenant_id,
    resolve_tenant_id,
)


def test_context_sources():
    dentist_id = uuid4()
    assert TenantContext.from_session(dentist_id).source == TenantSource.SESSION
    assert TenantContext.from_cache(dentist_id).source == TenantSource.CACHED
    anonymous = TenantContext.anonymous()
    assert anonymous.source == TenantSource.NONE
    assert not anonymous.is_authenticated


def test_resolve_requires_identity():
    with pytest.raises(NotAuthenticated):
        resolve_tenant_id(TenantContext.anonymous())

    dentist_id = uuid4()
    assert resolve_tenant_id(TenantContext.from_cache(dentist_id)) == dentist_id


def test_parse_tenant_id_rejects_garbage():
    assert parse_tenant_id(None) is None
    assert parse_tenant_id("") is None
    assert parse_tenant_id("not-a-uuid") is None
    dentist_id = uuid4()
    assert parse_tenant_id(str(dentist_id)) == dentist_id


@pytest.mark.asyncio
async def test_operations_without_tenant_fail(session):
    with pytest.raises(NotAuthenticated):
        await PatientService(session).add_patient(TenantContext.anonymous(), "Ravi", "9876543210")
    with pytest.raises(NotAuthenticated):
        await BillService(session).list_bills_for_tenant(TenantContext.anonymous())


@pytest.mark.asyncio
async def test_anonymous_lookup_finds_owner(session, dentist, other_dentist):
    service = BillService(session)
    bill = await service.create_bill(
        other_dentist.id, None, "Meena", [Consultation(description="Filling", amount=800)]
    )

    found, owner = await service.get_bill(TenantContext.anonymous(), str(bill.id))
    assert found.id == bill.id
    assert owner == other_dentist.id


@pytest.mark.asyncio
async def test_lookup_falls_back_when_bill_belongs_to_another_dentist(session, dentist, other_dentist):
    service = BillService(session)
    bill = await service.create_bill(
        other_dentist.id, None, "Meena", [Consultation(description="Filling", amount=800)]
    )

    found, owner = await service.get_bill(TenantContext.from_session(dentist.id), bill.id)
    assert found.id == bill.id
    assert owner == other_dentist.id


@pytest.mark.asyncio
async def test_unknown_bill_is_not_found(session, dentist, other_dentist):
    service = BillService(session)
    assert await lookup_bill_across_tenants(session, uuid4()) is None

    with pytest.raises(BillNotFound):
        await service.get_bill(TenantContext.anonymous(), uuid4())
    with pytest.raises(BillNotFound):
        await service.get_bill(TenantContext.anonymous(), "definitely-not-an-id")
