# storefront/app.py
from __future__ import annotations

import logging
import os
from typing import Optional

from fastapi import FastAPI

from .catalog import PRODUCTS
from .gatekeeper import SubmissionGatekeeper
from .mailer import SmtpNotifier
from .rate_limit import RateLimiter
from .routers.catalog import router as catalog_router
from .routers.orders import router as orders_router
from .settings import Settings, email_configured, get_settings

logger = logging.getLogger("uvicorn")


def create_app(
    rate_limiter: Optional[RateLimiter] = None,
    notifier=None,
    settings: Optional[Settings] = None,
) -> FastAPI:
    """Build the API with its collaborators attached to `app.state`.

    The rate limiter is owned by the app instance so each app (and each
    test) gets its own request counters.
    """
    settings = settings or get_settings()
    rate_limiter = rate_limiter or RateLimiter(
        window_seconds=settings.rate_limit_window_seconds,
        max_requests=settings.rate_limit_max_requests,
    )

    app = FastAPI(title="Sabor de Emociones")
    app.state.settings = settings
    app.state.rate_limiter = rate_limiter
    app.state.notifier = notifier or SmtpNotifier()
    app.state.gatekeeper = SubmissionGatekeeper(
        rate_limiter,
        allowed_hosts=settings.allowed_hosts,
        min_fill_ms=settings.min_form_fill_ms,
        log_validation_detail=settings.is_development,
    )

    @app.get("/api/health")
    def health():
        return {
            "ok": True,
            "products": len(PRODUCTS),
            "email_ready": email_configured(),
            "env": settings.app_env,
        }

    app.include_router(catalog_router)
    app.include_router(orders_router)

    logger.info(
        f"Storefront ready: env={settings.app_env}, "
        f"rate limit {settings.rate_limit_max_requests}/{settings.rate_limit_window_seconds}s"
    )
    if not email_configured():
        logger.warning("Email settings incomplete: accepted orders will fail with 500")
    return app


app = create_app()

# ============================================================
# Local dev entrypoint
# ============================================================
if __name__ == "__main__":
    host = os.getenv("HOST", "0.0.0.0")
    port = int(os.getenv("PORT", "8000"))
    import uvicorn
    uvicorn.run("storefront.app:app", host=host, port=port, reload=True)
