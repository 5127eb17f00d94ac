# backend/utils/pdf.py

from io import BytesIO
from typing import Optional

from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.pdfgen import canvas

from models.order import Order

STORE_NAME = "LUMIERE"
STORE_TAGLINE = "Fine Jewelry"

FONT_REGULAR_NAME = "Helvetica"
FONT_BOLD_NAME = "Helvetica-Bold"


def format_idr(minor_units: Optional[int]) -> str:
    """Format an amount stored in minor units as Indonesian rupiah, e.g. Rp 1.250.000."""
    rupiah = round((minor_units or 0) / 100)
    return "Rp " + f"{rupiah:,}".replace(",", ".")


def receipt_filename(order: Order) -> str:
    return f"receipt-{order.id[:8]}.pdf"


def generate_receipt_pdf(order: Order) -> bytes:
    """
    Renders a purchase receipt:
    - Header (store, receipt number, date)
    - Customer block (left) + shipping block (right)
    - Item table with page breaks
    - Totals, order and payment status
    - Footer
    """
    buffer = BytesIO()
    c = canvas.Canvas(buffer, pagesize=A4)
    width, height = A4
    c.setTitle(f"Receipt {order.id}")

    def draw_text(x, y, text, font=FONT_REGULAR_NAME, size=10, align="left", color=(0, 0, 0)):
        c.setFillColorRGB(*color)
        c.setFont(font, size)
        text_str = str(text) if text is not None else ""
        if align == "right":
            c.drawRightString(x, y, text_str)
        elif align == "center":
            c.drawCentredString(x, y, text_str)
        else:
            c.drawString(x, y, text_str)
        c.setFillColorRGB(0, 0, 0)

    # --- 1. HEADER ---
    y = height - 20 * mm
    draw_text(20 * mm, y, STORE_NAME, font=FONT_BOLD_NAME, size=18)
    draw_text(190 * mm, y, "RECEIPT", font=FONT_BOLD_NAME, size=16, align="right")
    y -= 6 * mm
    draw_text(20 * mm, y, STORE_TAGLINE, size=9, color=(0.4, 0.4, 0.4))
    draw_text(190 * mm, y, f"No: {order.id[:8].upper()}", size=10, align="right")
    y -= 5 * mm
    created = order.created_at.strftime("%d/%m/%Y %H:%M") if order.created_at else ""
    draw_text(190 * mm, y, f"Date: {created}", size=10, align="right")

    y -= 6 * mm
    c.setLineWidth(0.5)
    c.line(20 * mm, y, 190 * mm, y)
    y -= 10 * mm

    # --- 2. CUSTOMER vs SHIPPING ---
    y_start_columns = y
    draw_text(20 * mm, y, "CUSTOMER:", font=FONT_BOLD_NAME)
    y -= 5 * mm
    draw_text(20 * mm, y, order.customer_name, font=FONT_BOLD_NAME)
    y -= 5 * mm
    draw_text(20 * mm, y, order.customer_email)
    y -= 5 * mm
    draw_text(20 * mm, y, order.customer_phone)

    y = y_start_columns
    draw_text(110 * mm, y, "SHIP TO:", font=FONT_BOLD_NAME)
    y -= 5 * mm
    addr = str(order.shipping_address or "")
    draw_text(110 * mm, y, addr[:45])
    if len(addr) > 45:
        y -= 4 * mm
        draw_text(110 * mm, y, addr[45:90])
    y -= 5 * mm
    draw_text(110 * mm, y, f"{order.shipping_city} {order.shipping_postal_code}")
    y -= 5 * mm
    draw_text(110 * mm, y, order.shipping_country)
    y -= 5 * mm
    draw_text(110 * mm, y, f"Shipping: {(order.shipping_type or '').capitalize()}")

    y = y_start_columns - 35 * mm

    # --- 3. ITEMS TABLE ---
    c.setFillColorRGB(0.95, 0.95, 0.95)
    c.rect(20 * mm, y - 2 * mm, 170 * mm, 8 * mm, fill=1, stroke=0)
    c.setFillColorRGB(0, 0, 0)

    c.setFont(FONT_BOLD_NAME, 9)
    c.drawString(22 * mm, y, "No.")
    c.drawString(32 * mm, y, "Item")
    c.drawString(112 * mm, y, "Size")
    c.drawRightString(130 * mm, y, "Qty")
    c.drawRightString(158 * mm, y, "Price")
    c.drawRightString(188 * mm, y, "Total")
    y -= 8 * mm

    c.setFont(FONT_REGULAR_NAME, 9)
    for idx, it in enumerate(order.items, start=1):
        c.drawString(22 * mm, y, str(idx))
        c.drawString(32 * mm, y, str(it.product_name)[:45])
        c.drawString(112 * mm, y, it.size or "-")
        c.drawRightString(130 * mm, y, str(it.quantity))
        c.drawRightString(158 * mm, y, format_idr(it.product_price))
        c.drawRightString(188 * mm, y, format_idr(it.product_price * it.quantity))

        c.setLineWidth(0.1)
        c.line(20 * mm, y - 2 * mm, 190 * mm, y - 2 * mm)
        y -= 6 * mm

        if y < 40 * mm:
            c.showPage()
            y = height - 20 * mm
            c.setFont(FONT_REGULAR_NAME, 9)

    # --- 4. TOTALS ---
    y -= 5 * mm
    if y < 50 * mm:
        c.showPage()
        y = height - 30 * mm

    c.setFont(FONT_BOLD_NAME, 10)
    c.drawRightString(150 * mm, y, "Subtotal:")
    c.drawRightString(188 * mm, y, format_idr(order.subtotal))
    y -= 5 * mm
    c.drawRightString(150 * mm, y, "Shipping:")
    c.drawRightString(188 * mm, y, format_idr(order.shipping_cost))
    y -= 6 * mm
    c.setFont(FONT_BOLD_NAME, 12)
    c.drawRightString(150 * mm, y, "TOTAL:")
    c.drawRightString(188 * mm, y, format_idr(order.total_amount))

    y -= 10 * mm
    draw_text(20 * mm, y, f"Order status: {order.status}", size=9)
    y -= 5 * mm
    draw_text(20 * mm, y, f"Payment: {order.payment_status}", size=9)
    if order.transaction_id:
        y -= 5 * mm
        draw_text(20 * mm, y, f"Transaction: {order.transaction_id}", size=9)
    if order.is_pre_order:
        y -= 5 * mm
        draw_text(20 * mm, y, "Contains pre-order items; they ship when available.", size=9)

    # --- 5. FOOTER ---
    c.setLineWidth(0.5)
    c.line(20 * mm, 25 * mm, 190 * mm, 25 * mm)
    draw_text(width / 2, 20 * mm, f"Thank you for shopping at {STORE_NAME}.", size=8, align="center",
              color=(0.4, 0.4, 0.4))

    c.showPage()
    c.save()
    return buffer.getvalue()
