import re
from io import BytesIO
from unittest.mock import MagicMock
from uuid import uuid4

import httpx
import pytest
from botocore.exceptions import ClientError
from pypdf import PdfReader

from dentalbill.core.utils import CURRENCY_CODE
from dentalbill.db.models import Bill
from dentalbill.schemas.clinic import DEFAULT_CLINIC_NAME, NOT_PROVIDED, ReceiptBranding
from dentalbill.services.receipt_service import (
    ReceiptService,
    receipt_filename,
    receipt_rows,
    render_bill_document,
)
from dentalbill.services.storage_service import StorageService


def make_bill(consultations, patient_name="Ravi Kumar"):
    return Bill(dentist_id=uuid4(), patient_name=patient_name, consultations=consultations)


def parse_currency(text):
    return float(text.replace(CURRENCY_CODE, "").replace(",", "").strip())


def read_pdf(pdf):
    reader = PdfReader(BytesIO(pdf))
    return len(reader.pages), "\n".join(page.extract_text() for page in reader.pages)


def test_rows_keep_order_and_amounts():
    consultations = [
        {"description": "Scaling", "amount": 1500},
        {"description": "", "amount": 250.5},
        {"description": "Root canal", "amount": 123456.75},
    ]
    rows = receipt_rows(consultations)

    assert [row[0] for row in rows] == ["1", "2", "3"]
    assert [row[1] for row in rows] == ["Scaling", "-", "Root canal"]
    assert rows[2][2] == "INR 1,23,456.75"
    assert [parse_currency(row[2]) for row in rows] == [1500, 250.5, 123456.75]


def test_receipt_filename_is_header_safe():
    assert receipt_filename("Ravi Kumar") == "Ravi_Kumar_bill.pdf"
    assert receipt_filename("") == "Unknown_bill.pdf"
    assert receipt_filename("रवि") == "file_bill.pdf"


def test_branding_defaults():
    branding = ReceiptBranding()
    assert branding.clinic_name == DEFAULT_CLINIC_NAME
    assert branding.reg_no == NOT_PROVIDED
    assert branding.gst_no == NOT_PROVIDED


def test_render_produces_pdf():
    bill = make_bill([{"description": "Scaling", "amount": 1500}])
    pdf = render_bill_document(bill, ReceiptBranding(dentists=["Dr. Asha"]))
    assert pdf.startswith(b"%PDF")


def test_rendered_table_reads_back_in_order():
    consultations = [{"description": "Scaling", "amount": 1500}, {"description": "Filling", "amount": 800.5}]
    pages, text = read_pdf(render_bill_document(make_bill(consultations), ReceiptBranding()))

    assert pages == 1
    assert re.findall(r"Scaling|Filling", text) == ["Scaling", "Filling"]
    amounts = [parse_currency(m) for m in re.findall(r"INR\s*[\d,]+\.\d{2}", text)]
    # Line items, then the total row
    assert amounts == [1500, 800.5, 2300.5]


def test_long_bill_reads_back_across_pages():
    consultations = [{"description": f"Crown-{i:02d}", "amount": 1000 + i * 10.5} for i in range(1, 61)]
    bill = make_bill(consultations)
    pages, text = read_pdf(render_bill_document(bill, ReceiptBranding()))

    assert pages > 1
    assert re.findall(r"Crown-\d{2}", text) == [c["description"] for c in consultations]
    amounts = [parse_currency(m) for m in re.findall(r"INR\s*[\d,]+\.\d{2}", text)]
    assert amounts[:-1] == [c["amount"] for c in consultations]
    assert amounts[-1] == pytest.approx(bill.total_amount)
    assert "Total Amount:" in text


def test_undecodable_logo_is_left_out():
    bill = make_bill([{"description": "Scaling", "amount": 1500}])
    pdf = render_bill_document(bill, ReceiptBranding(), logo=b"not an image", signature=b"\x00\x01")
    assert pdf.startswith(b"%PDF")


@pytest.mark.asyncio
async def test_failed_image_fetch_is_not_fatal():
    transport = httpx.MockTransport(lambda request: httpx.Response(404))
    async with httpx.AsyncClient(transport=transport) as http_client:
        service = ReceiptService(storage=StorageService(bucket=""), http_client=http_client)
        assert await service.fetch_image("https://cdn.example.com/logo.png", "", "logo") is None

        bill = make_bill([{"description": "Scaling", "amount": 1500}])
        branding = ReceiptBranding(logo_url="https://cdn.example.com/logo.png")
        pdf = await service.render(bill, branding)
    assert pdf.startswith(b"%PDF")


@pytest.mark.asyncio
async def test_storage_errors_are_not_fatal():
    s3 = MagicMock()
    s3.get_object.side_effect = ClientError({"Error": {"Code": "NoSuchKey", "Message": "missing"}}, "GetObject")
    service = ReceiptService(storage=StorageService(client=s3, bucket="clinic-files"))

    assert await service.fetch_image("", "dentists/x/logo/logo.png", "logo") is None


@pytest.mark.asyncio
async def test_image_is_read_from_storage_path():
    s3 = MagicMock()
    s3.get_object.return_value = {"Body": BytesIO(b"image-bytes")}
    service = ReceiptService(storage=StorageService(client=s3, bucket="clinic-files"))

    assert await service.fetch_image("", "dentists/x/logo/logo.png", "logo") == b"image-bytes"
    s3.get_object.assert_called_once_with(Bucket="clinic-files", Key="dentists/x/logo/logo.png")
