# orders/services/invoices.py

"""
PATH: orders/services/invoices.py

PDF INVOICE

render_invoice(order) -> bytes (A4, continued on a new page when full):
- header: invoice number, order date, status, payment method
- billing address when the order has one
- one line per service, then the total

invoice_filename(order) -> "facture_<invoice_number>.pdf"
"""

from __future__ import annotations

import io
import logging

from django.utils import timezone
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.pdfgen import canvas

logger = logging.getLogger(__name__)

BRAND_COLOR = colors.HexColor("#302082")
SELLER_NAME = "CYNA"

MARGIN = 20 * mm
LINE_HEIGHT = 6 * mm
BOTTOM_LIMIT = 25 * mm


def invoice_filename(order) -> str:
    return f"facture_{order.invoice_number}.pdf"


def _payment_label(order) -> str:
    if order.last_card_digits:
        return f"{order.payment_method} (**** {order.last_card_digits})"
    return order.payment_method


def _address_lines(address) -> list[str]:
    if address is None:
        return []
    street = address.address1
    if address.address2:
        street = f"{street}, {address.address2}"
    return [
        f"{address.first_name} {address.last_name}",
        street,
        f"{address.postal_code} {address.city}",
        address.country,
    ]


class _InvoiceCanvas:
    """Top-down writer that starts a new page when the current one is full."""

    def __init__(self, buffer, title: str):
        self.pdf = canvas.Canvas(buffer, pagesize=A4)
        self.pdf.setTitle(title)
        self.pdf.setAuthor(SELLER_NAME)
        self.width, self.height = A4
        self.y = self.height - MARGIN

    def _ensure_room(self):
        if self.y < BOTTOM_LIMIT:
            self.pdf.showPage()
            self.y = self.height - MARGIN

    def text(self, value: str, *, size: int = 10, bold: bool = False, right: str = ""):
        self._ensure_room()
        self.pdf.setFillColor(colors.black)
        self.pdf.setFont("Helvetica-Bold" if bold else "Helvetica", size)
        self.pdf.drawString(MARGIN, self.y, value)
        if right:
            self.pdf.drawRightString(self.width - MARGIN, self.y, right)
        self.y -= LINE_HEIGHT

    def title(self, value: str):
        self.pdf.setFillColor(BRAND_COLOR)
        self.pdf.setFont("Helvetica-Bold", 20)
        self.pdf.drawString(MARGIN, self.y, value)
        self.y -= 2 * LINE_HEIGHT

    def rule(self):
        self._ensure_room()
        self.pdf.setStrokeColor(BRAND_COLOR)
        self.pdf.line(MARGIN, self.y + LINE_HEIGHT / 2, self.width - MARGIN, self.y + LINE_HEIGHT / 2)
        self.y -= LINE_HEIGHT / 2

    def gap(self):
        self.y -= LINE_HEIGHT

    def save(self):
        self.pdf.save()


def render_invoice(order) -> bytes:
    buffer = io.BytesIO()
    doc = _InvoiceCanvas(buffer, title=f"Facture {order.invoice_number}")

    doc.title(f"{SELLER_NAME} - Facture")
    doc.text(f"Numéro de facture : {order.invoice_number}", bold=True)
    doc.text(f"Date de la commande : {timezone.localtime(order.order_date):%d/%m/%Y}")
    doc.text(f"Statut : {order.get_order_status_display()}")
    doc.text(f"Méthode de paiement : {_payment_label(order)}")

    address_lines = _address_lines(order.address)
    if address_lines:
        doc.gap()
        doc.text("Adresse de facturation", bold=True)
        for line in address_lines:
            doc.text(line)

    doc.gap()
    doc.text("Services", bold=True, right="Montant")
    doc.rule()
    for item in order.items.all():
        doc.text(
            f"{item.service_name} ({item.subscription_type}) - {item.unit_price} € x {item.quantity}",
            right=f"{item.total_price} €",
        )
    doc.rule()
    doc.text("Sous-total", right=f"{order.subtotal} €")
    doc.text("Total", bold=True, right=f"{order.total_amount} €")

    doc.save()
    pdf = buffer.getvalue()

    logger.info(
        "Invoice rendered",
        extra={"order_id": str(order.id), "invoice_number": order.invoice_number, "bytes": len(pdf)},
    )
    return pdf
