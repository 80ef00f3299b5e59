from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Dict

import httpx

from mws_client.exceptions import BadChecksumError, TransportError
from mws_client.services.mws_request_builder import BuiltRequest, content_md5
from mws_client.utils.logger import logger


@dataclass
class RawResponse:
    status_code: int
    headers: Dict[str, str]
    content: bytes
    duration_ms: int


def to_httpx_request(client: httpx.Client, request: BuiltRequest) -> httpx.Request:
    return client.build_request(
        request.verb,
        request.url,
        headers=request.headers,
        content=request.body,
    )


def dispatch(client: httpx.Client, request: BuiltRequest) -> RawResponse:
    """Send ``request`` and return the verified response body.

    Raises ``TransportError`` on network failures, timeouts, malformed URLs
    and non-2xx statuses, and ``BadChecksumError`` when the body does not match the
    response ``Content-MD5`` header. No retries.
    """

    start = time.time()
    try:
        resp = client.send(to_httpx_request(client, request))
    except (httpx.RequestError, httpx.InvalidURL) as exc:
        logger.warning("[mws] %s %s failed: %s", request.verb, request.endpoint, exc)
        raise TransportError(request, None, detail=f"MWS request failed: {exc}") from exc

    duration_ms = int((time.time() - start) * 1000)

    if not resp.is_success:
        logger.warning(
            "[mws] non-success status=%s body=%s",
            resp.status_code,
            resp.text[:500],
        )
        raise TransportError(request, resp)

    body = resp.content
    expected_md5 = resp.headers.get("Content-MD5")
    if expected_md5:
        actual_md5 = content_md5(body)
        if expected_md5.strip() != actual_md5:
            raise BadChecksumError(resp, expected_md5, actual_md5)

    return RawResponse(
        status_code=resp.status_code,
        headers=dict(resp.headers),
        content=body,
        duration_ms=duration_ms,
    )
