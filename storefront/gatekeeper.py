from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Mapping, Optional

from pydantic import ValidationError as PydanticValidationError

from .errors import AbuseSuspected, OriginDenied, RateLimited, StorefrontError, ValidationError
from .order_models import Order, OrderSubmission, delivery_address_missing
from .rate_limit import RateLimiter, get_client_ip
from .settings import DEFAULT_ALLOWED_HOSTS
from .spam_detection import detect_spam, validate_origin

logger = logging.getLogger(__name__)

ACCEPT = "accept"
REJECT = "reject"
SILENT_ACCEPT = "silent_accept"

MIN_NOTES_LENGTH = 15
MAX_BODY_BYTES = 64 * 1024


@dataclass
class Verdict:
    outcome: str
    status_code: int
    error: Optional[str] = None
    reason: Optional[str] = None
    order: Optional[Order] = None
    retry_after: Optional[int] = None

    @property
    def accepted(self) -> bool:
        return self.outcome == ACCEPT


def _as_epoch_ms(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value.strip())
        except ValueError:
            return None
    return None


class SubmissionGatekeeper:
    """Ordered anti-abuse checks for one order submission.

    Stages run in a fixed order and the first failure decides the verdict:
    origin, rate limit, honeypot, timing, schema, delivery address,
    notes length, then content spam on notes, name and email.
    Honeypot, timing and content hits are answered as a normal success so
    automated senders cannot tell they were caught.
    """

    def __init__(
        self,
        rate_limiter: RateLimiter,
        allowed_hosts: Iterable[str] = DEFAULT_ALLOWED_HOSTS,
        min_fill_ms: int = 3000,
        log_validation_detail: bool = False,
        max_body_bytes: int = MAX_BODY_BYTES,
    ) -> None:
        self.rate_limiter = rate_limiter
        self.allowed_hosts = list(allowed_hosts)
        self.min_fill_ms = min_fill_ms
        self.log_validation_detail = log_validation_detail
        self.max_body_bytes = max_body_bytes

    # -- stages --------------------------------------------------------

    def check_origin(self, headers: Mapping[str, str]) -> None:
        if not validate_origin(headers.get("origin"), headers.get("referer"), self.allowed_hosts):
            raise OriginDenied(detail=f"origin={headers.get('origin')!r} referer={headers.get('referer')!r}")

    def check_rate_limit(self, client_id: str, now_s: float) -> None:
        decision = self.rate_limiter.check(client_id)
        if not decision.allowed:
            raise RateLimited(retry_after=int(max(0.0, decision.reset_at - now_s)) + 1)

    def check_honeypot(self, payload: Dict[str, Any]) -> None:
        value = payload.get("company")
        if value is None:
            return
        if str(value).strip():
            raise AbuseSuspected("honeypot")

    def check_timing(self, payload: Dict[str, Any], now_ms: float) -> None:
        started = _as_epoch_ms(payload.get("formStartedAt"))
        if started is None:
            return
        if now_ms - started < self.min_fill_ms:
            raise AbuseSuspected("too_fast")

    def validate_schema(self, payload: Dict[str, Any]) -> Order:
        try:
            submission = OrderSubmission.model_validate(payload)
        except PydanticValidationError as e:
            raise ValidationError(detail=str(e))
        return submission.to_order()

    def check_delivery_address(self, order: Order) -> None:
        if delivery_address_missing(order):
            raise ValidationError(detail="address is required for delivery")

    def check_notes_length(self, order: Order) -> None:
        notes = (order.generalNotes or "").strip()
        if notes and len(notes) < MIN_NOTES_LENGTH:
            raise ValidationError(detail=f"notes shorter than {MIN_NOTES_LENGTH} characters")

    def check_content(self, order: Order) -> None:
        fields = [
            ("notes", (order.generalNotes or "").strip()),
            ("name", order.name),
            ("email", order.email or ""),
        ]
        for field_name, text in fields:
            if not text:
                continue
            verdict = detect_spam(text)
            if verdict.is_spam:
                raise AbuseSuspected(f"{verdict.reason}:{field_name}")

    # -- orchestration -------------------------------------------------

    def _parse_body(self, body: bytes) -> Dict[str, Any]:
        if len(body or b"") > self.max_body_bytes:
            raise ValidationError(detail=f"body larger than {self.max_body_bytes} bytes")
        try:
            payload = json.loads(body or b"")
        except (ValueError, UnicodeDecodeError) as e:
            raise ValidationError(detail=f"body is not valid JSON: {e}")
        if not isinstance(payload, dict):
            raise ValidationError(detail="body must be a JSON object")
        return payload

    def run(self, headers: Mapping[str, str], body: bytes, client_id: str, now_ms: float) -> Order:
        self.check_origin(headers)
        self.check_rate_limit(client_id, now_ms / 1000.0)
        payload = self._parse_body(body)
        self.check_honeypot(payload)
        self.check_timing(payload, now_ms)
        order = self.validate_schema(payload)
        self.check_delivery_address(order)
        self.check_notes_length(order)
        self.check_content(order)
        return order

    def evaluate(self, headers: Mapping[str, str], body: bytes, now_ms: Optional[float] = None) -> Verdict:
        if now_ms is None:
            now_ms = time.time() * 1000.0
        client_id = get_client_ip(headers)
        try:
            order = self.run(headers, body, client_id, now_ms)
        except AbuseSuspected as e:
            logger.info("Suspected abuse from %s (%s); answering with silent success", client_id, e.reason)
            return Verdict(SILENT_ACCEPT, 200, reason=e.reason)
        except RateLimited as e:
            logger.info("Rate limit exceeded for %s", client_id)
            return Verdict(REJECT, e.status_code, error=e.message, reason="rate_limited", retry_after=e.retry_after)
        except ValidationError as e:
            if self.log_validation_detail:
                logger.warning("Order validation failed for %s: %s", client_id, e.detail)
            else:
                logger.info("Order validation failed for %s", client_id)
            return Verdict(REJECT, e.status_code, error=e.message, reason="invalid")
        except OriginDenied as e:
            logger.info("Origin check failed for %s: %s", client_id, e.detail)
            return Verdict(REJECT, e.status_code, error=e.message, reason="origin_denied")
        except StorefrontError as e:
            logger.warning("Order rejected for %s: %s", client_id, e.detail or e.message)
            return Verdict(REJECT, e.status_code, error=e.message, reason="rejected")
        return Verdict(ACCEPT, 200, order=order)
