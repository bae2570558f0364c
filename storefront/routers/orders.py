from __future__ import annotations

import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from ..errors import StorefrontError
from ..gatekeeper import REJECT, SILENT_ACCEPT, SubmissionGatekeeper
from ..order_format import format_order_whatsapp, whatsapp_url
from ..order_models import Order, delivery_address_missing

router = APIRouter()
logger = logging.getLogger(__name__)


def get_gatekeeper(request: Request) -> SubmissionGatekeeper:
    return request.app.state.gatekeeper


def get_notifier(request: Request):
    return request.app.state.notifier


async def _read_body(request: Request, limit: int) -> bytes:
    # Stop one byte past the cap so the gatekeeper sees an oversized body
    # without the whole upload being buffered
    chunks = []
    size = 0
    async for chunk in request.stream():
        chunks.append(chunk)
        size += len(chunk)
        if size > limit:
            break
    return b"".join(chunks)[: limit + 1]


def _error(status_code: int, message: str, headers: Dict[str, str] | None = None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message}, headers=headers)


@router.post("/api/order")
async def api_order(
    request: Request,
    gatekeeper: SubmissionGatekeeper = Depends(get_gatekeeper),
    notifier=Depends(get_notifier),
):
    try:
        body = await _read_body(request, gatekeeper.max_body_bytes)
        verdict = gatekeeper.evaluate(request.headers, body)
        if verdict.outcome == SILENT_ACCEPT:
            return {"success": True}
        if verdict.outcome == REJECT:
            headers = {"Retry-After": str(verdict.retry_after)} if verdict.retry_after else None
            return _error(verdict.status_code, verdict.error or "Invalid form data", headers)

        # smtplib blocks; keep it off the event loop
        await run_in_threadpool(notifier.send, verdict.order)
    except StorefrontError as e:
        logger.error("Order dispatch failed: %s", e.detail or e.message)
        return _error(e.status_code, e.message)
    except Exception:
        logger.exception("Order submission failed")
        return _error(500, "Internal server error")
    return {"success": True}


@router.post("/api/order/whatsapp")
def api_order_whatsapp(req: Order, request: Request) -> Dict[str, Any]:
    """Build the WhatsApp deep link used as the manual fallback."""
    if delivery_address_missing(req):
        raise HTTPException(status_code=400, detail="Address is required for delivery.")
    number = request.app.state.settings.whatsapp_number
    return {"url": whatsapp_url(req, number), "message": format_order_whatsapp(req)}
