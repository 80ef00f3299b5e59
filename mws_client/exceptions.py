"""Error taxonomy raised by the MWS call pipeline.

Every failure stops the current invocation and surfaces to the caller
unchanged. Nothing in the pipeline retries; backoff is left to callers.
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional


class MwsClientError(Exception):
    """Base class for every error raised by :mod:`mws_client`."""


class OperationSpecError(MwsClientError):
    """An operation definition is invalid or the registry was misused."""


class MissingArgumentError(MwsClientError):
    """A required parameter was not supplied. Raised before any network I/O."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Missing required argument: {name}")


class MwsArgumentError(MwsClientError, TypeError):
    """An argument has the wrong shape for its declared parameter type."""


class TransportError(MwsClientError):
    """The HTTP exchange failed (network error, timeout or non-2xx status).

    ``response`` is ``None`` when no response was received at all.
    """

    def __init__(self, request: Any, response: Any = None, detail: Optional[str] = None):
        self.request = request
        self.response = response
        if detail is None:
            if response is not None:
                detail = f"HTTP {response.status_code} from MWS"
            else:
                detail = "no response from MWS"
        super().__init__(detail)


class BadChecksumError(MwsClientError):
    """The response Content-MD5 header does not match the received body."""

    def __init__(self, response: Any, expected: str, actual: str):
        self.response = response
        self.expected = expected
        self.actual = actual
        super().__init__(f"Content-MD5 mismatch: header={expected} computed={actual}")


class ResponseError(MwsClientError):
    """MWS accepted the HTTP exchange but reported an application-level error.

    ``errors`` is always a list of error entries (dicts built from the
    ``<Error>`` elements), even when the service returned a single one.
    ``document`` is the parsed response tree, or the raw content when it
    could not be parsed.
    """

    def __init__(
        self,
        errors: List[Dict[str, Any]],
        document: Any,
        request_id: Optional[str] = None,
        detail: Optional[str] = None,
    ):
        self.errors = errors
        self.document = document
        self.request_id = request_id
        if detail is None:
            codes = ", ".join(str(e.get("Code")) for e in errors if isinstance(e, dict)) or "unknown"
            detail = f"MWS returned an error response: {codes}"
        super().__init__(detail)
