from __future__ import annotations

from html import escape
from typing import List
from urllib.parse import quote

from .catalog import format_price
from .order_models import Order

BRAND = "Sabor de Emociones"
# Characters encodeURIComponent leaves untouched
_URI_SAFE = "-_.!~*'()"


def _fulfillment_label(order: Order, short: bool = False) -> str:
    if order.pickupOrDelivery == "pickup":
        return "Recoger" if short else "Recoger en tienda"
    return "Entrega a domicilio"


def _size_text(size: str | None) -> str:
    return f" ({size})" if size else ""


def email_subject(order: Order) -> str:
    return f"Nuevo Pedido de {order.name} - {format_price(order.total)}"


def format_order_email_text(order: Order) -> str:
    lines: List[str] = [
        f"NUEVO PEDIDO - {BRAND}",
        "",
        "INFORMACIÓN DEL CLIENTE",
        f"Nombre: {order.name}",
        f"Teléfono: {order.phone}",
    ]
    if order.email:
        lines.append(f"Email: {order.email}")
    lines += ["", "DETALLES DE ENTREGA", f"Tipo: {_fulfillment_label(order)}"]
    if order.address:
        lines.append(f"Dirección: {order.address}")
    if order.desiredDate:
        lines.append(f"Fecha deseada: {order.desiredDate}")
    if order.generalNotes:
        lines += ["", f"Notas generales: {order.generalNotes}"]
    lines += ["", "PRODUCTOS"]
    for item in order.items:
        line = (
            f"{item.productName}{_size_text(item.size)} - Cantidad: {item.quantity}"
            f" - Precio: {format_price(item.price)} c/u"
        )
        if item.notes:
            line += f"\n  Nota: {item.notes}"
        lines.append(line)
    lines += [
        "",
        f"TOTAL ESTIMADO: {format_price(order.total)}",
        "",
        f"Gracias por elegir {BRAND} 💛",
    ]
    return "\n".join(lines)


_EMAIL_CSS = """
      body { font-family: Arial, sans-serif; line-height: 1.6; color: #333; }
      .container { max-width: 600px; margin: 0 auto; padding: 20px; }
      .header { background: #1B1511; color: #F8D5A9; padding: 20px; text-align: center; border-radius: 8px 8px 0 0; }
      .content { background: #fff; padding: 30px; border: 1px solid #ddd; }
      .section { margin-bottom: 25px; }
      .section-title { color: #A26D49; font-size: 18px; font-weight: bold; margin-bottom: 10px; }
      .item { padding: 10px 0; border-bottom: 1px solid #eee; }
      .total { font-size: 20px; font-weight: bold; color: #A26D49; text-align: right; margin-top: 20px; padding-top: 20px; border-top: 2px solid #A26D49; }
      .footer { text-align: center; padding: 20px; color: #666; font-size: 14px; }
"""


def _p(label: str, value: str) -> str:
    return f"<p><strong>{label}:</strong> {escape(value)}</p>"


def format_order_email_html(order: Order) -> str:
    """HTML body for the business notification. All customer input is escaped."""
    customer = [_p("Nombre", order.name), _p("Teléfono", order.phone)]
    if order.email:
        customer.append(_p("Email", order.email))

    delivery = [_p("Tipo", _fulfillment_label(order))]
    if order.address:
        delivery.append(_p("Dirección", order.address))
    if order.desiredDate:
        delivery.append(_p("Fecha deseada", order.desiredDate))
    if order.generalNotes:
        delivery.append(_p("Notas generales", order.generalNotes))

    products = []
    for item in order.items:
        notes = f"<br><em>Nota: {escape(item.notes)}</em>" if item.notes else ""
        products.append(
            '<div class="item">'
            f"<strong>{escape(item.productName + _size_text(item.size))}</strong><br>"
            f"Cantidad: {item.quantity} | Precio: {format_price(item.price)} c/u{notes}"
            "</div>"
        )

    customer_html = "".join(customer)
    delivery_html = "".join(delivery)
    products_html = "".join(products)

    return f"""<!DOCTYPE html>
<html>
  <head>
    <meta charset="utf-8">
    <style>{_EMAIL_CSS}    </style>
  </head>
  <body>
    <div class="container">
      <div class="header">
        <h1>🍰 Nuevo Pedido - {BRAND}</h1>
      </div>
      <div class="content">
        <div class="section">
          <div class="section-title">Información del Cliente</div>
          {customer_html}
        </div>
        <div class="section">
          <div class="section-title">Detalles de Entrega</div>
          {delivery_html}
        </div>
        <div class="section">
          <div class="section-title">Productos</div>
          {products_html}
        </div>
        <div class="total">
          Total estimado: {format_price(order.total)}
        </div>
      </div>
      <div class="footer">
        <p>Gracias por elegir {BRAND} 💛</p>
        <p>Este pedido fue enviado desde el sitio web</p>
      </div>
    </div>
  </body>
</html>"""


def format_order_whatsapp(order: Order) -> str:
    lines: List[str] = [
        f"🍰 *PEDIDO - {BRAND}*",
        f"👤 *Nombre:* {order.name}",
        f"📞 *Teléfono:* {order.phone}",
    ]
    if order.email:
        lines.append(f"📧 *Email:* {order.email}")
    lines.append(f"📍 *Tipo:* {_fulfillment_label(order, short=True)}")
    if order.address:
        lines.append(f"🏠 *Dirección:* {order.address}")
    if order.desiredDate:
        lines.append(f"📅 *Fecha deseada:* {order.desiredDate}")
    if order.generalNotes:
        lines.append(f"📝 *Notas:* {order.generalNotes}")
    lines.append("🍰 *Productos:*")
    for item in order.items:
        notes = f"\n   Nota: {item.notes}" if item.notes else ""
        lines.append(f"• {item.productName}{_size_text(item.size)} x{item.quantity}")
        lines.append(f"  {format_price(item.price)} c/u{notes}")
    lines.append(f"💰 *Total estimado: {format_price(order.total)}*")
    lines.append(f"Gracias por elegir {BRAND} 💛")
    return "\n".join(lines)


def whatsapp_url(order: Order, number: str) -> str:
    digits = "".join(ch for ch in number if ch.isdigit())
    return f"https://wa.me/{digits}?text={quote(format_order_whatsapp(order), safe=_URI_SAFE)}"
