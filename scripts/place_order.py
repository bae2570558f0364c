#!/usr/bin/env python3
"""
Place a test order against a running storefront API.

Defaults:
- base URL: http://localhost:8000
- origin header: http://localhost:3000 (must be in ALLOWED_ORIGIN_HOSTS)

Usage:
  python3 scripts/place_order.py
  python3 scripts/place_order.py --base http://localhost:8000 --delivery "1 Main St, Sanford NC"
"""
from __future__ import annotations

import argparse
import json
import sys
import time
from pathlib import Path

import httpx

# Ensure the repo root is on sys.path so `storefront` can be imported
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from storefront.cart import Cart  # noqa: E402


def main():
    ap = argparse.ArgumentParser(description="Place a test order via local API")
    ap.add_argument("--base", default="http://localhost:8000", help="Base URL of the running app")
    ap.add_argument("--origin", default="http://localhost:3000", help="Origin header to send")
    ap.add_argument("--delivery", default=None, help="Delivery address (pickup when omitted)")
    ap.add_argument("--date", default=None, help="Desired date YYYY-MM-DD")
    args = ap.parse_args()

    base = args.base.rstrip("/")
    form_started = int(time.time() * 1000)

    with httpx.Client(timeout=10.0) as client:
        products = client.get(f"{base}/api/products").json().get("items", [])
        print("products:", ", ".join(p["id"] for p in products))

        cart = Cart()
        cart.add("tres-leches", size="mediano", quantity=1, notes="Feliz cumpleaños")
        cart.add("flan", quantity=2)
        order = cart.to_order(
            name="CLI Test",
            phone="+1 571 910 3088",
            email="test@example.com",
            pickupOrDelivery="delivery" if args.delivery else "pickup",
            address=args.delivery,
            desiredDate=args.date,
            generalNotes="Terminal test order, please ignore",
        )
        payload = order.model_dump(exclude_none=True)
        payload["company"] = ""
        payload["formStartedAt"] = form_started

        # The timing check rejects forms submitted faster than a person could
        time.sleep(3.5)
        r = client.post(f"{base}/api/order", json=payload, headers={"Origin": args.origin})
        try:
            body = r.json()
        except ValueError:
            body = {"raw": r.text}
        print(json.dumps({"status": r.status_code, "body": body}, ensure_ascii=False))

        wa = client.post(f"{base}/api/order/whatsapp", json=order.model_dump(exclude_none=True))
        if wa.status_code == 200:
            print("whatsapp:", wa.json().get("url"))

    if r.status_code != 200:
        sys.exit(2)


if __name__ == "__main__":
    main()
