import unittest
from urllib.parse import parse_qs, urlparse

from storefront.order_format import (
    email_subject,
    format_order_email_html,
    format_order_email_text,
    format_order_whatsapp,
    whatsapp_url,
)
from storefront.order_models import Order


def _order(**overrides):
    data = dict(
        name="Ana <b>Ruiz</b>",
        phone="+1 571 910 3088",
        pickupOrDelivery="delivery",
        address="1 Main St, Sanford NC",
        desiredDate="2026-10-24",
        items=[
            {"productId": "tres-leches", "productName": "Tres Leches", "size": "grande", "quantity": 1, "price": 50,
             "notes": "Feliz cumpleaños"},
        ],
        total=50,
    )
    data.update(overrides)
    return Order(**data)


class TestOrderFormat(unittest.TestCase):
    def test_subject(self):
        self.assertEqual(email_subject(_order(name="Ana")), "Nuevo Pedido de Ana - $50.00")

    def test_text(self):
        text = format_order_email_text(_order())
        self.assertIn("Tipo: Entrega a domicilio", text)
        self.assertIn("Dirección: 1 Main St, Sanford NC", text)
        self.assertIn("Tres Leches (grande) - Cantidad: 1 - Precio: $50.00 c/u", text)
        self.assertIn("Nota: Feliz cumpleaños", text)
        self.assertIn("TOTAL ESTIMADO: $50.00", text)
        self.assertNotIn("Email:", text)

    def test_html_escapes_customer_input(self):
        html = format_order_email_html(_order())
        self.assertIn("Ana &lt;b&gt;Ruiz&lt;/b&gt;", html)
        self.assertNotIn("<b>Ruiz</b>", html)
        self.assertIn("Total estimado: $50.00", html)

    def test_whatsapp_message(self):
        msg = format_order_whatsapp(_order(pickupOrDelivery="pickup", address=None))
        self.assertIn("*Tipo:* Recoger", msg)
        self.assertNotIn("Dirección", msg)
        self.assertIn("• Tres Leches (grande) x1", msg)
        self.assertNotIn("\n\n", msg)

    def test_whatsapp_url_round_trips_message(self):
        order = _order()
        url = whatsapp_url(order, "+1 (571) 910-3088")
        parsed = urlparse(url)
        self.assertEqual(parsed.netloc, "wa.me")
        self.assertEqual(parsed.path, "/15719103088")
        self.assertEqual(parse_qs(parsed.query)["text"][0], format_order_whatsapp(order))
        self.assertNotIn(" ", url)


if __name__ == "__main__":
    unittest.main()
