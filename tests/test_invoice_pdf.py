import os
import sys
from datetime import date
from decimal import Decimal

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from app.schemas.invoice import DocumentLineItem, DocumentParty, InvoiceDocument
from app.schemas.settings import CompanyInfo
from app.services.document_sink import LocalDocumentSink, MemoryDocumentSink, invoice_filename
from reportlab.lib.units import mm
from reportlab.pdfbase.pdfmetrics import stringWidth

from app.services.invoice_pdf import DESCRIPTION_WIDTH, InvoicePdfRenderer, TextOp, fit_text, format_date


def _document(items=None, notes=None) -> InvoiceDocument:
    items = items or [
        DocumentLineItem(
            description="E-Commerce Website",
            quantity=1,
            price=Decimal("15000000"),
            total=Decimal("15000000"),
        )
    ]
    subtotal = sum((item.total for item in items), Decimal("0"))
    return InvoiceDocument(
        invoice_number="INV-202601-0007",
        issue_date=date(2026, 1, 5),
        due_date=date(2026, 2, 4),
        customer=DocumentParty(name="Rina Wijaya", email="rina@example.com"),
        company=CompanyInfo(
            name="Digital Service Company",
            address="Jl. Digital No. 123, Jakarta",
            phone="+62 21 1234567",
            email="info@digitalservice.com",
            website="www.digitalservice.com",
            tax_number="12.345.678.9-012.345",
        ),
        items=items,
        subtotal=subtotal,
        tax_amount=Decimal("1650000"),
        total_amount=subtotal + Decimal("1650000"),
        notes=notes,
        payment_terms="30 days",
    )


def test_layout_contains_the_fixed_sections() -> None:
    layout = InvoicePdfRenderer().layout(_document())
    texts = layout.texts()

    assert layout.page_count == 1
    for expected in (
        "INVOICE",
        "INV-202601-0007",
        "Digital Service Company",
        "DARI:",
        "UNTUK:",
        "Rina Wijaya",
        "Tanggal Terbit:",
        "5/1/2026",
        "4/2/2026",
        "Deskripsi",
        "Rp 15.000.000",
        "Pajak (11%):",
        "Rp 1.650.000",
        "TOTAL",
        "Rp 16.650.000",
        "Syarat Pembayaran: 30 days",
        "NPWP: 12.345.678.9-012.345",
    ):
        assert expected in texts


def test_empty_notes_fall_back_to_thank_you_note() -> None:
    renderer = InvoicePdfRenderer()

    assert "Terima kasih atas kepercayaan Anda." in renderer.layout(_document()).texts()
    with_notes = renderer.layout(_document(notes="Transfer ke BCA 123456")).texts()
    assert "Transfer ke BCA 123456" in with_notes
    assert "Terima kasih atas kepercayaan Anda." not in with_notes


def test_tax_label_is_a_display_setting() -> None:
    texts = InvoicePdfRenderer(tax_label="PPN 11%").layout(_document()).texts()
    assert "Pajak (PPN 11%):" in texts


def test_layout_and_bytes_are_deterministic() -> None:
    document = _document(notes="Pembayaran via transfer bank")

    first = InvoicePdfRenderer().layout(document)
    second = InvoicePdfRenderer().layout(document)
    assert first.ops == second.ops

    pdf_one = InvoicePdfRenderer().render(document)
    pdf_two = InvoicePdfRenderer().render(document)
    assert pdf_one.startswith(b"%PDF")
    assert pdf_one == pdf_two


def test_long_item_lists_continue_on_next_page() -> None:
    items = [
        DocumentLineItem(
            description=f"Landing page {index}",
            quantity=1,
            price=Decimal("500000"),
            total=Decimal("500000"),
        )
        for index in range(20)
    ]
    layout = InvoicePdfRenderer().layout(_document(items=items))

    assert layout.page_count > 1
    last_page_texts = [op.text for op in layout.for_page(layout.page_count - 1) if isinstance(op, TextOp)]
    assert "TOTAL" in last_page_texts
    assert "INVOICE INV-202601-0007 (lanjutan)" in layout.texts()
    # Every row is drawn exactly once
    for index in range(20):
        assert layout.texts().count(f"Landing page {index}") == 1


def test_format_date_is_day_month_year() -> None:
    assert format_date(date(2026, 12, 31)) == "31/12/2026"


def test_document_sinks(tmp_path) -> None:
    memory = MemoryDocumentSink()
    memory.save(invoice_filename("INV-1"), b"%PDF-1.4")
    assert memory.documents == {"invoice-INV-1.pdf": b"%PDF-1.4"}

    local = LocalDocumentSink(tmp_path / "out")
    local.save("invoice-INV-2.pdf", b"data")
    assert (tmp_path / "out" / "invoice-INV-2.pdf").read_bytes() == b"data"


def test_long_descriptions_stay_inside_their_column() -> None:
    long_name = "Website Company Profile dengan Integrasi Sistem Pemesanan dan Pembayaran Online Lengkap"
    items = [
        DocumentLineItem(description=long_name, quantity=1, price=Decimal("9000000"), total=Decimal("9000000"))
    ]
    texts = InvoicePdfRenderer().layout(_document(items=items)).texts()

    shortened = fit_text(long_name, DESCRIPTION_WIDTH)
    assert long_name not in texts
    assert shortened in texts
    assert shortened.endswith("...")
    assert stringWidth(shortened, "Helvetica", 10) <= DESCRIPTION_WIDTH * mm
    assert fit_text("E-Commerce Website", DESCRIPTION_WIDTH) == "E-Commerce Website"
