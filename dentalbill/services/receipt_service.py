"""
PDF receipts for bills, drawn with reportlab.

The layout is fixed: clinic header with optional logo, a title block, the
patient line, one table row per consultation, a total row and a footer with
an optional signature image. Images are fetched before layout; a failed
fetch or an undecodable image is logged and left out.
"""
from io import BytesIO
from typing import List, Optional, Sequence
from xml.sax.saxutils import escape

import httpx
from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER, TA_RIGHT
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.lib.utils import ImageReader
from reportlab.platypus import (
    HRFlowable,
    Image,
    Paragraph,
    SimpleDocTemplate,
    Spacer,
    Table,
    TableStyle,
)
from botocore.exceptions import BotoCoreError, ClientError  # type: ignore

from dentalbill.core.config import settings
from dentalbill.core.logger import logger
from dentalbill.core.utils import format_currency, safe_filename
from dentalbill.db.models import Bill
from dentalbill.schemas.clinic import ReceiptBranding
from dentalbill.services.storage_service import StorageService, storage_service

TITLE = "DENTAL BILL / RECEIPT"
TABLE_HEADER = ["#", "Treatment / Description", "Amount"]
DISCLAIMER = "This is a computer-generated bill and does not require a physical signature."
REVISIT_NOTE = "Please revisit every 6 months for routine dental check-up."
HEADER_BLUE = colors.Color(63 / 255, 81 / 255, 181 / 255)


def receipt_rows(consultations: Sequence[dict]) -> List[List[str]]:
    """Table body rows: index, description and formatted amount."""
    rows = []
    for i, item in enumerate(consultations, start=1):
        rows.append([
            str(i),
            item.get("description") or "-",
            format_currency(item.get("amount") or 0),
        ])
    return rows


def receipt_filename(patient_name: str) -> str:
    return f"{safe_filename(patient_name or 'Unknown')}_bill.pdf"


def _image_flowable(data: Optional[bytes], width: float, height: float, label: str) -> Optional[Image]:
    if not data:
        return None
    try:
        ImageReader(BytesIO(data))
    except Exception as e:
        logger.warning(f"Failed to decode {label} image, leaving it out: {e}")
        return None
    return Image(BytesIO(data), width=width, height=height)


def render_bill_document(
    bill: Bill,
    branding: ReceiptBranding,
    logo: Optional[bytes] = None,
    signature: Optional[bytes] = None,
) -> bytes:
    buffer = BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=A4,
        leftMargin=15 * mm,
        rightMargin=15 * mm,
        topMargin=10 * mm,
        bottomMargin=20 * mm,
        title=f"Bill {bill.id}",
    )
    styles = getSampleStyleSheet()
    name_style = ParagraphStyle("ClinicName", parent=styles["Heading1"], fontName="Helvetica-Bold",
                                fontSize=18, alignment=TA_CENTER, spaceAfter=4)
    centered = ParagraphStyle("Centered", parent=styles["Normal"], fontSize=11, alignment=TA_CENTER, leading=15)
    small_centered = ParagraphStyle("SmallCentered", parent=centered, fontSize=10)
    title_style = ParagraphStyle("ReceiptTitle", parent=styles["Heading2"], fontName="Helvetica-Bold",
                                 fontSize=14, alignment=TA_CENTER)
    italic_centered = ParagraphStyle("Footer", parent=centered, fontName="Helvetica-Oblique", fontSize=10)
    right = ParagraphStyle("Right", parent=styles["Normal"], fontSize=11, alignment=TA_RIGHT)

    header = [Paragraph(escape(branding.clinic_name.upper()), name_style)]
    if branding.dentists:
        header.append(Paragraph(escape(f"Dentists: {', '.join(branding.dentists)}"), centered))
    header.append(Paragraph(escape(f"Operating Hours: {branding.operating_hours}"), centered))
    header.append(Paragraph(escape(f"Reg. No: {branding.reg_no} | GST No: {branding.gst_no}"), small_centered))

    elements = []
    logo_image = _image_flowable(logo, 25 * mm, 25 * mm, "logo")
    if logo_image:
        # Logo on the left, text block centred on the page
        header_table = Table([[logo_image, header, ""]], colWidths=[30 * mm, 120 * mm, 30 * mm])
        header_table.setStyle(TableStyle([("VALIGN", (0, 0), (-1, -1), "MIDDLE")]))
        elements.append(header_table)
    else:
        elements.extend(header)

    elements.append(HRFlowable(width="100%", thickness=0.5, color=colors.grey, spaceBefore=4, spaceAfter=6))
    elements.append(Paragraph(TITLE, title_style))

    patient_line = Table(
        [[Paragraph(escape(f"Patient Name: {bill.patient_name or 'Unknown'}"), styles["Normal"]),
          Paragraph(f"Date: {bill.created_at.strftime('%d/%m/%Y')}", right)]],
        colWidths=[120 * mm, 60 * mm],
    )
    elements.append(patient_line)
    elements.append(Spacer(1, 4 * mm))

    body = [[cell[0], Paragraph(escape(cell[1]), styles["Normal"]), cell[2]]
            for cell in receipt_rows(bill.consultations or [])]
    items_table = Table([TABLE_HEADER] + body, colWidths=[12 * mm, 118 * mm, 50 * mm], repeatRows=1)
    items_table.setStyle(TableStyle([
        ("BACKGROUND", (0, 0), (-1, 0), HEADER_BLUE),
        ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
        ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
        ("FONTSIZE", (0, 0), (-1, 0), 11),
        ("ALIGN", (0, 0), (-1, 0), "CENTER"),
        ("FONTSIZE", (0, 1), (-1, -1), 10),
        ("ALIGN", (0, 1), (0, -1), "CENTER"),
        ("ALIGN", (2, 1), (2, -1), "RIGHT"),
        ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
        ("GRID", (0, 0), (-1, -1), 0.25, colors.Color(220 / 255, 220 / 255, 220 / 255)),
        ("TOPPADDING", (0, 0), (-1, -1), 6),
        ("BOTTOMPADDING", (0, 0), (-1, -1), 6),
    ]))
    elements.append(items_table)
    elements.append(Spacer(1, 6 * mm))

    total_table = Table([["Total Amount:", format_currency(bill.total_amount)]], colWidths=[130 * mm, 50 * mm])
    total_table.setStyle(TableStyle([
        ("FONTNAME", (0, 0), (-1, -1), "Helvetica-Bold"),
        ("FONTSIZE", (0, 0), (-1, -1), 12),
        ("ALIGN", (0, 0), (0, 0), "RIGHT"),
        ("ALIGN", (1, 0), (1, 0), "RIGHT"),
    ]))
    elements.append(total_table)
    elements.append(Spacer(1, 8 * mm))

    elements.append(Paragraph(escape(f"Thank you for choosing {branding.clinic_name}!"), italic_centered))
    elements.append(Paragraph(REVISIT_NOTE, italic_centered))
    elements.append(Spacer(1, 6 * mm))

    signature_block = []
    signature_image = _image_flowable(signature, 40 * mm, 20 * mm, "signature")
    if signature_image:
        signature_block.append([signature_image])
    signature_block.append([HRFlowable(width=55 * mm, thickness=0.5, color=colors.grey)])
    signature_block.append(["Authorized Dentist Signature"])
    signature_table = Table(signature_block, colWidths=[60 * mm], hAlign="RIGHT")
    signature_table.setStyle(TableStyle([
        ("ALIGN", (0, 0), (-1, -1), "CENTER"),
        ("FONTSIZE", (0, 0), (-1, -1), 10),
    ]))
    elements.append(signature_table)

    def draw_disclaimer(canvas, _doc):
        canvas.saveState()
        canvas.setFont("Helvetica", 9)
        canvas.drawCentredString(A4[0] / 2, 12 * mm, DISCLAIMER)
        canvas.restoreState()

    doc.build(elements, onFirstPage=draw_disclaimer, onLaterPages=draw_disclaimer)
    return buffer.getvalue()


class ReceiptService:
    def __init__(self, storage: Optional[StorageService] = None, http_client: Optional[httpx.AsyncClient] = None):
        self.storage = storage or storage_service
        self.http_client = http_client

    async def fetch_image(self, url: str, path: str, label: str) -> Optional[bytes]:
        if path and self.storage.enabled:
            try:
                return await self.storage.download(path)
            except (BotoCoreError, ClientError) as e:
                logger.warning(f"Failed to load {label} from storage ({path}): {e}")
                return None
        if not url:
            return None
        try:
            if self.http_client is not None:
                response = await self.http_client.get(url)
            else:
                async with httpx.AsyncClient(timeout=settings.IMAGE_FETCH_TIMEOUT_SECONDS) as client:
                    response = await client.get(url)
            response.raise_for_status()
            return response.content
        except httpx.HTTPError as e:
            logger.warning(f"Failed to load {label} image from {url}: {e}")
            return None

    async def render(self, bill: Bill, branding: ReceiptBranding) -> bytes:
        logo = await self.fetch_image(branding.logo_url, branding.logo_path, "logo")
        signature = await self.fetch_image(branding.signature_url, branding.signature_path, "signature")
        pdf = render_bill_document(bill, branding, logo=logo, signature=signature)
        logger.info(f"Rendered receipt for bill {bill.id} ({len(pdf)} bytes)")
        return pdf
