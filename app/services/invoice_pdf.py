"""Printable invoice rendering.

Rendering happens in two steps: :meth:`InvoicePdfRenderer.layout` turns an
:class:`InvoiceDocument` into a flat list of drawing operations positioned in
millimetres from the top-left corner of an A4 page, and
:meth:`InvoicePdfRenderer.render` paints those operations onto a ReportLab
canvas. The canvas is created with ``invariant=1`` so the same document always
produces the same bytes.
"""

from __future__ import annotations

import io
from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional, Union

from reportlab.lib.colors import HexColor
from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.lib.utils import simpleSplit
from reportlab.pdfbase.pdfmetrics import stringWidth
from reportlab.pdfgen import canvas

from app.schemas.invoice import InvoiceDocument
from app.services.money import format_currency

PAGE_WIDTH = 210.0
PAGE_HEIGHT = 297.0
MARGIN_X = 20.0
TABLE_WIDTH = 170.0
ROW_HEIGHT = 12.0
# Rows and the summary block stay above the footer lines.
CONTENT_BOTTOM = PAGE_HEIGHT - 45.0
SUMMARY_HEIGHT = 30.0
CONTINUATION_TOP = 25.0
# Room for a line-item description before the Qty column.
DESCRIPTION_WIDTH = 90.0

HEADER_COLOR = "#1e293b"
WHITE = "#ffffff"
BLACK = "#000000"
GRAY = "#6b7280"
LIGHT_GRAY = "#f8fafc"
BORDER = "#e2e8f0"
ZEBRA = "#fafafa"

FONT = "Helvetica"
FONT_BOLD = "Helvetica-Bold"


@dataclass(frozen=True)
class InvoiceLabels:
    title: str = "INVOICE"
    sender: str = "DARI:"
    recipient: str = "UNTUK:"
    issue_date: str = "Tanggal Terbit:"
    due_date: str = "Jatuh Tempo:"
    description: str = "Deskripsi"
    quantity: str = "Qty"
    price: str = "Harga"
    total: str = "Total"
    notes: str = "Catatan:"
    default_note: str = "Terima kasih atas kepercayaan Anda."
    subtotal: str = "Subtotal:"
    tax: str = "Pajak ({rate}):"
    grand_total: str = "TOTAL"
    payment_terms: str = "Syarat Pembayaran: {terms}"
    tax_number: str = "NPWP: {number}"
    continued: str = "{title} {number} (lanjutan)"


@dataclass(frozen=True)
class TextOp:
    page: int
    x: float
    y: float
    text: str
    font: str = FONT
    size: float = 10
    color: str = BLACK
    align: str = "left"


@dataclass(frozen=True)
class RectOp:
    page: int
    x: float
    y: float
    width: float
    height: float
    fill: Optional[str] = None
    stroke: Optional[str] = None
    line_width: float = 0.5


@dataclass(frozen=True)
class LineOp:
    page: int
    x1: float
    y1: float
    x2: float
    y2: float
    color: str = BLACK
    line_width: float = 1.0


DrawOp = Union[TextOp, RectOp, LineOp]


@dataclass
class InvoiceLayout:
    ops: List[DrawOp] = field(default_factory=list)
    page_count: int = 1

    def for_page(self, page: int) -> List[DrawOp]:
        return [op for op in self.ops if op.page == page]

    def texts(self) -> List[str]:
        return [op.text for op in self.ops if isinstance(op, TextOp)]


def fit_text(text: str, width: float, font: str = FONT, size: float = 10) -> str:
    """Shorten ``text`` with an ellipsis so it fits in ``width`` millimetres."""

    limit = width * mm
    if stringWidth(text, font, size) <= limit:
        return text
    while text and stringWidth(text + "...", font, size) > limit:
        text = text[:-1]
    return text.rstrip() + "..."


def format_date(value: date) -> str:
    """Short id-ID date, e.g. ``5/1/2026``."""

    return f"{value.day}/{value.month}/{value.year}"


class InvoicePdfRenderer:
    def __init__(
        self,
        *,
        tax_label: str = "11%",
        currency_prefix: str = "Rp",
        labels: InvoiceLabels | None = None,
    ) -> None:
        self._tax_label = tax_label
        self._currency_prefix = currency_prefix
        self._labels = labels or InvoiceLabels()

    def _money(self, amount) -> str:
        return format_currency(amount, self._currency_prefix)

    def layout(self, document: InvoiceDocument) -> InvoiceLayout:
        labels = self._labels
        result = InvoiceLayout()
        ops = result.ops
        page = 0

        # Header band
        ops.append(RectOp(page, 0, 0, PAGE_WIDTH, 50, fill=HEADER_COLOR))
        ops.append(TextOp(page, MARGIN_X, 30, labels.title, FONT_BOLD, 28, WHITE))
        ops.append(TextOp(page, MARGIN_X, 42, document.invoice_number, FONT, 12, WHITE))
        ops.append(
            TextOp(page, PAGE_WIDTH - MARGIN_X, 35, document.company.name, FONT_BOLD, 16, WHITE, "right")
        )

        # From / to
        current_y = 70.0
        sender_lines = [
            document.company.address,
            document.company.phone,
            document.company.email,
            document.company.website or "",
        ]
        recipient_lines = [
            document.customer.name,
            document.customer.email,
            document.customer.address or "",
        ]
        sender_end = self._party_block(ops, page, MARGIN_X, current_y, labels.sender, sender_lines)
        recipient_end = self._party_block(ops, page, 120, current_y, labels.recipient, recipient_lines)

        # Dates
        current_y = max(sender_end, recipient_end) + 20
        self._date_block(ops, page, MARGIN_X, current_y, labels.issue_date, document.issue_date)
        self._date_block(ops, page, 120, current_y, labels.due_date, document.due_date)

        # Line items
        current_y += 25
        self._table_header(ops, page, current_y)
        current_y += ROW_HEIGHT
        for index, item in enumerate(document.items):
            if current_y + ROW_HEIGHT > CONTENT_BOTTOM:
                page += 1
                current_y = self._continuation_header(ops, page, document.invoice_number)
                self._table_header(ops, page, current_y)
                current_y += ROW_HEIGHT
            if index % 2 == 1:
                ops.append(RectOp(page, MARGIN_X, current_y, TABLE_WIDTH, ROW_HEIGHT, fill=ZEBRA))
            ops.append(RectOp(page, MARGIN_X, current_y, TABLE_WIDTH, ROW_HEIGHT, stroke=BORDER))
            ops.append(TextOp(page, 25, current_y + 8, fit_text(item.description, DESCRIPTION_WIDTH)))
            ops.append(TextOp(page, 120, current_y + 8, str(item.quantity)))
            ops.append(TextOp(page, 140, current_y + 8, self._money(item.price)))
            ops.append(TextOp(page, 170, current_y + 8, self._money(item.total)))
            current_y += ROW_HEIGHT

        current_y += 25
        if current_y + SUMMARY_HEIGHT > CONTENT_BOTTOM:
            page += 1
            current_y = self._continuation_header(ops, page, document.invoice_number) + 10

        self._notes_block(ops, page, current_y, document.notes)
        self._summary_block(ops, page, current_y, document)
        self._footer(ops, page, document)

        result.page_count = page + 1
        return result

    def _party_block(self, ops, page, x, y, heading, lines) -> float:
        ops.append(TextOp(page, x, y, heading, FONT_BOLD, 12, GRAY))
        line_y = y + 10
        for line in lines:
            if not line:
                continue
            ops.append(TextOp(page, x, line_y, line))
            line_y += 8
        return line_y

    def _date_block(self, ops, page, x, y, label, value: date) -> None:
        ops.append(TextOp(page, x, y, label, FONT, 10, GRAY))
        ops.append(RectOp(page, x, y + 5, 8, 8, stroke=BORDER))
        ops.append(TextOp(page, x + 15, y + 11, format_date(value)))

    def _table_header(self, ops, page, y) -> None:
        labels = self._labels
        ops.append(RectOp(page, MARGIN_X, y, TABLE_WIDTH, ROW_HEIGHT, fill=LIGHT_GRAY, stroke=BORDER))
        ops.append(TextOp(page, 25, y + 8, labels.description, FONT_BOLD))
        ops.append(TextOp(page, 120, y + 8, labels.quantity, FONT_BOLD))
        ops.append(TextOp(page, 140, y + 8, labels.price, FONT_BOLD))
        ops.append(TextOp(page, 170, y + 8, labels.total, FONT_BOLD))

    def _continuation_header(self, ops, page, invoice_number) -> float:
        text = self._labels.continued.format(title=self._labels.title, number=invoice_number)
        ops.append(TextOp(page, MARGIN_X, 15, text, FONT, 9, GRAY))
        return CONTINUATION_TOP

    def _notes_block(self, ops, page, y, notes: Optional[str]) -> None:
        ops.append(TextOp(page, MARGIN_X, y, self._labels.notes, FONT_BOLD))
        ops.append(RectOp(page, MARGIN_X, y + 5, 80, 25, fill=LIGHT_GRAY, stroke=BORDER))
        if notes:
            lines = simpleSplit(notes, FONT, 9, 75 * mm)
            note_y = y + 12
            for line in lines[:3]:
                ops.append(TextOp(page, 22, note_y, line, FONT, 9, GRAY))
                note_y += 6
        else:
            ops.append(TextOp(page, 22, y + 15, self._labels.default_note, FONT, 9, GRAY))

    def _summary_block(self, ops, page, y, document: InvoiceDocument) -> None:
        labels = self._labels
        x = 120.0
        ops.append(TextOp(page, x, y, labels.subtotal))
        ops.append(TextOp(page, x + 50, y, self._money(document.subtotal)))
        y += 10
        ops.append(TextOp(page, x, y, labels.tax.format(rate=self._tax_label)))
        ops.append(TextOp(page, x + 50, y, self._money(document.tax_amount)))
        y += 15
        ops.append(LineOp(page, x, y - 5, x + 70, y - 5, BLACK, 1.0))
        ops.append(TextOp(page, x, y, labels.grand_total, FONT_BOLD, 12))
        ops.append(TextOp(page, x + 50, y, self._money(document.total_amount), FONT_BOLD, 12))

    def _footer(self, ops, page, document: InvoiceDocument) -> None:
        if document.payment_terms:
            ops.append(
                TextOp(
                    page,
                    MARGIN_X,
                    PAGE_HEIGHT - 40,
                    self._labels.payment_terms.format(terms=document.payment_terms),
                    FONT,
                    9,
                    GRAY,
                )
            )
        if document.company.tax_number:
            ops.append(
                TextOp(
                    page,
                    MARGIN_X,
                    PAGE_HEIGHT - 30,
                    self._labels.tax_number.format(number=document.company.tax_number),
                    FONT,
                    9,
                    GRAY,
                )
            )

    def render(self, document: InvoiceDocument) -> bytes:
        layout = self.layout(document)
        buffer = io.BytesIO()
        pdf = canvas.Canvas(buffer, pagesize=A4, invariant=1)
        pdf.setTitle(f"Invoice {document.invoice_number}")
        pdf.setAuthor(document.company.name)
        for page in range(layout.page_count):
            for op in layout.for_page(page):
                _paint(pdf, op)
            pdf.showPage()
        pdf.save()
        return buffer.getvalue()


def _y(value: float) -> float:
    return (PAGE_HEIGHT - value) * mm


def _paint(pdf: canvas.Canvas, op: DrawOp) -> None:
    if isinstance(op, RectOp):
        if op.fill:
            pdf.setFillColor(HexColor(op.fill))
        if op.stroke:
            pdf.setStrokeColor(HexColor(op.stroke))
            pdf.setLineWidth(op.line_width)
        pdf.rect(
            op.x * mm,
            _y(op.y + op.height),
            op.width * mm,
            op.height * mm,
            stroke=1 if op.stroke else 0,
            fill=1 if op.fill else 0,
        )
    elif isinstance(op, LineOp):
        pdf.setStrokeColor(HexColor(op.color))
        pdf.setLineWidth(op.line_width)
        pdf.line(op.x1 * mm, _y(op.y1), op.x2 * mm, _y(op.y2))
    else:
        pdf.setFillColor(HexColor(op.color))
        pdf.setFont(op.font, op.size)
        if op.align == "right":
            pdf.drawRightString(op.x * mm, _y(op.y), op.text)
        else:
            pdf.drawString(op.x * mm, _y(op.y), op.text)
