# HTTP face of the email relay
from fastapi import APIRouter, Request, Response

from services.relay_service import handle_relay_request

router = APIRouter()


@router.api_route("/send", methods=["POST", "OPTIONS", "GET", "PUT", "DELETE", "PATCH"])
async def relay_email(request: Request):
    """
    POST {to, subject, html} -> forwarded to Resend.
    OPTIONS answers the CORS preflight with 200 and an empty body.
    """
    relay_response = await handle_relay_request(request.method, await request.body())
    media_type = "application/json" if relay_response.body else None
    return Response(
        content=relay_response.body,
        status_code=relay_response.status_code,
        headers=relay_response.headers,
        media_type=media_type,
    )
