# payments/services/stripe.py

"""
STRIPE REST CLIENT

Thin client over the provider's REST API:
- form-encoded bodies (nested keys: line_items[0][price_data][currency])
- Bearer auth with settings.PAYMENTS["STRIPE"]["SECRET_KEY"]
- every failure surfaces as PaymentProviderError

Webhook signatures:
- header "Stripe-Signature: t=<unix>,v1=<hex>[,v1=<hex>...]"
- expected v1 = HMAC-SHA256(webhook_secret, "<t>.<raw body>")
- timestamps older than WEBHOOK_TOLERANCE_SECONDS are refused
"""

from __future__ import annotations

import hashlib
import hmac
import json
import logging
import time
from typing import Any
from urllib.error import HTTPError, URLError
from urllib.parse import urlencode
from urllib.request import Request, urlopen

from django.conf import settings

logger = logging.getLogger(__name__)

STRIPE_BASE = "https://api.stripe.com/v1"
WEBHOOK_TOLERANCE_SECONDS = 300
REQUEST_TIMEOUT = 25


class PaymentProviderError(Exception):
    """The provider could not be reached or rejected the request."""


def _stripe_cfg() -> dict:
    payments = getattr(settings, "PAYMENTS", {}) or {}
    cfg = payments.get("STRIPE") if isinstance(payments, dict) else None
    return cfg if isinstance(cfg, dict) else {}


def _get_secret_key() -> str:
    sk = (_stripe_cfg().get("SECRET_KEY") or "").strip()
    if not sk:
        raise PaymentProviderError("Stripe SECRET_KEY is not configured.")
    return sk


def get_currency() -> str:
    return (_stripe_cfg().get("CURRENCY") or "eur").strip().lower()


def _safe_preview(text: str, limit: int = 800) -> str:
    text = (text or "").strip()
    if len(text) <= limit:
        return text
    return text[:limit] + " ...(truncated)"


def _flatten(params: Any, prefix: str = "") -> list[tuple[str, str]]:
    """
    {"a": {"b": [1, 2]}} -> [("a[b][0]", "1"), ("a[b][1]", "2")]
    None values are skipped, booleans become "true"/"false".
    """
    pairs: list[tuple[str, str]] = []

    if isinstance(params, dict):
        for key, value in params.items():
            name = f"{prefix}[{key}]" if prefix else str(key)
            pairs.extend(_flatten(value, name))
    elif isinstance(params, (list, tuple)):
        for idx, value in enumerate(params):
            pairs.extend(_flatten(value, f"{prefix}[{idx}]"))
    elif params is None:
        pass
    elif isinstance(params, bool):
        pairs.append((prefix, "true" if params else "false"))
    else:
        pairs.append((prefix, str(params)))

    return pairs


def encode_form(params: dict | None) -> bytes:
    return urlencode(_flatten(params or {})).encode("utf-8")


def _error_message(raw: str, fallback: str) -> str:
    try:
        parsed = json.loads(raw or "")
    except ValueError:
        return _safe_preview(raw) or fallback
    if isinstance(parsed, dict):
        err = parsed.get("error") or {}
        if isinstance(err, dict) and err.get("message"):
            return str(err["message"])
    return fallback


def _request(method: str, path: str, *, params: dict | None = None) -> dict[str, Any]:
    sk = _get_secret_key()
    data = encode_form(params) if params is not None else None

    req = Request(
        f"{STRIPE_BASE}{path}",
        data=data,
        headers={
            "Authorization": f"Bearer {sk}",
            "Content-Type": "application/x-www-form-urlencoded",
            "Accept": "application/json",
        },
        method=method,
    )

    try:
        with urlopen(req, timeout=REQUEST_TIMEOUT) as resp:
            raw = resp.read().decode("utf-8", errors="replace")
    except HTTPError as e:
        raw = e.read().decode("utf-8", errors="replace") if e.fp is not None else ""
        message = _error_message(raw, "Stripe rejected request")
        logger.warning(
            "Stripe request rejected",
            extra={"path": path, "status": e.code, "provider_message": message},
        )
        raise PaymentProviderError(f"Stripe HTTPError: {e.code} {message}") from e
    except URLError as e:
        logger.warning("Stripe unreachable", extra={"path": path, "reason": str(e.reason)})
        raise PaymentProviderError(f"Stripe URLError: {e.reason}") from e
    except (TimeoutError, OSError) as e:
        raise PaymentProviderError(f"Stripe request failed: {e}") from e

    try:
        parsed = json.loads(raw)
    except ValueError as e:
        raise PaymentProviderError(f"Stripe returned non-JSON: {_safe_preview(raw)}") from e

    if not isinstance(parsed, dict):
        raise PaymentProviderError("Stripe returned an unexpected payload.")
    return parsed


# =========================================================
# API calls
# =========================================================
def create_checkout_session(
    *,
    line_items: list[dict],
    success_url: str,
    cancel_url: str,
    customer_email: str | None = None,
    customer: str | None = None,
    metadata: dict | None = None,
) -> dict:
    params: dict[str, Any] = {
        "mode": "payment",
        "payment_method_types": ["card"],
        "line_items": line_items,
        "success_url": success_url,
        "cancel_url": cancel_url,
        "metadata": metadata or None,
    }
    if customer:
        params["customer"] = customer
    elif customer_email:
        params["customer_email"] = customer_email

    session = _request("POST", "/checkout/sessions", params=params)
    if not session.get("id") or not session.get("url"):
        raise PaymentProviderError("Stripe checkout session is missing id or url.")
    return session


def create_customer(*, email: str, name: str = "", metadata: dict | None = None) -> dict:
    return _request(
        "POST",
        "/customers",
        params={"email": email, "name": name or None, "metadata": metadata or None},
    )


def attach_payment_method(*, payment_method_id: str, customer_id: str) -> dict:
    return _request(
        "POST",
        f"/payment_methods/{payment_method_id}/attach",
        params={"customer": customer_id},
    )


def detach_payment_method(*, payment_method_id: str) -> dict:
    return _request("POST", f"/payment_methods/{payment_method_id}/detach", params={})


# =========================================================
# Webhooks
# =========================================================
def _parse_signature_header(header: str) -> tuple[int | None, list[str]]:
    timestamp = None
    signatures: list[str] = []
    for part in (header or "").split(","):
        key, sep, value = part.strip().partition("=")
        if not sep:
            continue
        if key == "t":
            try:
                timestamp = int(value)
            except ValueError:
                return None, []
        elif key == "v1":
            signatures.append(value)
    return timestamp, signatures


def compute_signature(*, payload: bytes, timestamp: int, secret: str) -> str:
    signed = f"{timestamp}.".encode("utf-8") + (payload or b"")
    return hmac.new(secret.encode("utf-8"), signed, hashlib.sha256).hexdigest()


def verify_webhook_signature(
    *,
    payload: bytes,
    header: str | None,
    secret: str | None = None,
    tolerance: int = WEBHOOK_TOLERANCE_SECONDS,
    now: float | None = None,
) -> bool:
    secret = secret if secret is not None else (_stripe_cfg().get("WEBHOOK_SECRET") or "")
    if not secret or not header:
        return False

    timestamp, signatures = _parse_signature_header(header)
    if timestamp is None or not signatures:
        return False

    current = time.time() if now is None else now
    if abs(current - timestamp) > tolerance:
        return False

    expected = compute_signature(payload=payload, timestamp=timestamp, secret=secret)
    return any(hmac.compare_digest(expected, sig) for sig in signatures)
