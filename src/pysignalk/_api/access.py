"""Access-request endpoints.

Endpoints:
  - POST /signalk/v1/access/requests
  - GET  <href returned by the POST>
"""

from __future__ import annotations

import json
import logging

from pydantic import ValidationError

from pysignalk._constants import ACCESS_REQUESTS_PATH
from pysignalk._redact import redact_for_log
from pysignalk._transport import HttpResponse, Transport, join_url
from pysignalk.models.access import AccessRequest, AccessResponse, AccessStatus

_logger = logging.getLogger(__name__)

_JSON_HEADERS = {"Content-Type": "application/json", "Accept": "application/json"}


def build_access_request_body(client_id: str, description: str) -> bytes:
    request = AccessRequest(client_id=client_id, description=description)
    return json.dumps(request.to_wire(), separators=(",", ":")).encode("utf-8")


async def post_access_request(
    transport: Transport,
    base_url: str,
    client_id: str,
    description: str,
) -> tuple[HttpResponse, AccessResponse | None]:
    """POST a new access request.

    Returns the raw response together with the decoded body, which is
    ``None`` when the body is not a valid access response.
    """
    response = await transport.request(
        "POST",
        join_url(base_url, ACCESS_REQUESTS_PATH),
        headers=_JSON_HEADERS,
        body=build_access_request_body(client_id, description),
    )
    return response, parse_access_response(response)


def parse_access_response(response: HttpResponse) -> AccessResponse | None:
    try:
        decoded = AccessResponse.model_validate(response.json())
    except (ValueError, ValidationError):
        _logger.debug("Undecodable access response status=%d", response.status)
        return None
    _logger.debug("Access response status=%d parsed=%s", response.status, redact_for_log(decoded.to_wire()))
    return decoded


async def fetch_access_status(transport: Transport, base_url: str, href: str) -> AccessStatus | None:
    """GET the status resource of a pending request.

    Returns ``None`` for anything but a decodable ``200`` reply.
    """
    response = await transport.request("GET", join_url(base_url, href), headers={"Accept": "application/json"})
    if response.status != 200:
        _logger.debug("Access status poll returned HTTP %d", response.status)
        return None
    try:
        status = AccessStatus.model_validate(response.json())
    except (ValueError, ValidationError):
        _logger.debug("Undecodable access status payload")
        return None
    _logger.debug("Access status parsed=%s", redact_for_log(status.to_wire()))
    return status
