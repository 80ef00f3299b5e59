from __future__ import annotations

import base64
from datetime import datetime, timezone
from typing import Callable, Optional, Protocol, runtime_checkable
from urllib.parse import urlsplit

from cryptography.hazmat.primitives import hashes, hmac

from mws_client.services.mws_request_builder import BuiltRequest, encode_query


@runtime_checkable
class RequestSigner(Protocol):
    """Attaches whatever MWS needs to authenticate a request, in place."""

    def sign(self, request: BuiltRequest) -> None:
        ...


class NullSigner:
    """Leaves requests untouched (tests, proxies that sign on our behalf)."""

    def sign(self, request: BuiltRequest) -> None:
        return None


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class SignatureV2Signer:
    """AWS Signature Version 2 (HmacSHA256) query signing.

    The string to sign is::

        VERB\\nhost\\npath\\ncanonical-query

    where the canonical query is every parameter except ``Signature``,
    sorted by key and percent-encoded per RFC 3986.
    """

    signature_method = "HmacSHA256"
    signature_version = "2"

    def __init__(
        self,
        access_key_id: str,
        secret_key: str,
        merchant_id: str,
        *,
        marketplace_id: Optional[str] = None,
        version: str = "2009-01-01",
        clock: Callable[[], datetime] = _utc_now,
    ):
        if not (access_key_id and secret_key and merchant_id):
            raise ValueError("access_key_id, secret_key and merchant_id are required for signing")
        self._access_key_id = access_key_id
        self._secret_key = secret_key.encode("utf-8")
        self._merchant_id = merchant_id
        self._marketplace_id = marketplace_id
        self._version = version
        self._clock = clock

    def string_to_sign(self, request: BuiltRequest) -> str:
        parts = urlsplit(request.endpoint)
        host = (parts.netloc or "").lower()
        path = parts.path or "/"
        params = {k: v for k, v in request.params.items() if k != "Signature"}
        return "\n".join([request.verb.upper(), host, path, encode_query(params, sort=True)])

    def compute_signature(self, string_to_sign: str) -> str:
        mac = hmac.HMAC(self._secret_key, hashes.SHA256())
        mac.update(string_to_sign.encode("utf-8"))
        return base64.b64encode(mac.finalize()).decode("ascii")

    def sign(self, request: BuiltRequest) -> None:
        timestamp = self._clock().astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")

        request.params.update(
            {
                "AWSAccessKeyId": self._access_key_id,
                "Merchant": self._merchant_id,
                "SignatureMethod": self.signature_method,
                "SignatureVersion": self.signature_version,
                "Timestamp": timestamp,
                "Version": self._version,
            }
        )
        if self._marketplace_id:
            request.params["Marketplace"] = self._marketplace_id

        request.params.pop("Signature", None)
        request.params["Signature"] = self.compute_signature(self.string_to_sign(request))
