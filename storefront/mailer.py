from __future__ import annotations

import logging
import smtplib
from email.message import EmailMessage
from email.utils import formataddr
from typing import Optional

from .errors import NotificationError
from .order_format import email_subject, format_order_email_html, format_order_email_text
from .order_models import Order
from .settings import EmailSettings, load_email_settings

logger = logging.getLogger(__name__)

SMTP_TIMEOUT_SECS = 10.0


def build_order_message(order: Order, settings: EmailSettings) -> EmailMessage:
    msg = EmailMessage()
    msg["From"] = formataddr((settings.from_name, settings.user))
    msg["To"] = settings.to
    msg["Reply-To"] = order.email or settings.user
    msg["Subject"] = email_subject(order)
    msg.set_content(format_order_email_text(order))
    msg.add_alternative(format_order_email_html(order), subtype="html")
    return msg


class SmtpNotifier:
    """Sends each accepted order to the business inbox over SMTP.

    Settings are read on every send so a missing relay configuration is
    reported per request (ConfigurationError) rather than at import time.
    """

    def __init__(self, settings: Optional[EmailSettings] = None) -> None:
        self._settings = settings

    def _connect(self, settings: EmailSettings) -> smtplib.SMTP:
        if settings.implicit_tls:
            return smtplib.SMTP_SSL(settings.host, settings.port, timeout=SMTP_TIMEOUT_SECS)
        client = smtplib.SMTP(settings.host, settings.port, timeout=SMTP_TIMEOUT_SECS)
        client.ehlo()
        if client.has_extn("starttls"):
            client.starttls()
            client.ehlo()
        return client

    def send(self, order: Order) -> None:
        settings = self._settings or load_email_settings()
        msg = build_order_message(order, settings)
        try:
            with self._connect(settings) as client:
                client.login(settings.user, settings.password)
                client.send_message(msg)
        except (smtplib.SMTPException, OSError) as e:
            raise NotificationError(detail=f"{e.__class__.__name__}: {e}") from e
        logger.info("Order email sent to %s (%d items)", settings.to, len(order.items))
