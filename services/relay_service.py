# Email relay: accepts {to, subject, html} and forwards it to the Resend API
import json
import logging
from dataclasses import dataclass, field

import httpx

from core.config import settings

logger = logging.getLogger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "Content-Type",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
}


@dataclass
class RelayResponse:
    status_code: int
    body: str = ""
    headers: dict = field(default_factory=lambda: dict(CORS_HEADERS))


def _json_response(status_code: int, payload: dict) -> RelayResponse:
    return RelayResponse(status_code=status_code, body=json.dumps(payload))


async def handle_relay_request(method: str, body: bytes | str | None) -> RelayResponse:
    """
    OPTIONS -> 200 with an empty body (CORS preflight).
    POST    -> forwarded to Resend; the upstream status is mirrored on failure.
    """
    method = method.upper()
    if method == "OPTIONS":
        return RelayResponse(status_code=200)
    if method != "POST":
        return _json_response(405, {"error": "Method not allowed"})

    try:
        message = json.loads(body or b"")
        to, subject, html = message["to"], message["subject"], message["html"]
    except (ValueError, TypeError, KeyError) as e:
        return _json_response(500, {"success": False, "error": f"Invalid request body: {e}"})

    if not settings.RESEND_API_KEY:
        logger.error("RESEND_API_KEY is not set, email relay cannot forward")
        return _json_response(500, {"success": False, "error": "Email relay is not configured"})

    headers = {"Authorization": f"Bearer {settings.RESEND_API_KEY}"}
    payload = {"from": settings.EMAIL_FROM, "to": [to], "subject": subject, "html": html}
    try:
        async with httpx.AsyncClient(timeout=settings.EMAIL_TIMEOUT_SECONDS) as client:
            response = await client.post(settings.RESEND_API_URL, json=payload, headers=headers)
        try:
            data = response.json()
        except ValueError:
            data = {}
    except httpx.HTTPError as e:
        logger.warning(f"Resend request failed: {e}")
        return _json_response(500, {"success": False, "error": str(e)})

    if response.is_success:
        return _json_response(200, {"success": True, "message": "Email sent successfully", "data": data})

    error = data.get("message") if isinstance(data, dict) else None
    logger.warning(f"Resend rejected email to {to}: HTTP {response.status_code} {error}")
    return _json_response(response.status_code, {"success": False, "error": error or "Failed to send email"})
