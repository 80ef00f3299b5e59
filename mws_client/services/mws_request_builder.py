from __future__ import annotations

import base64
import hashlib
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Optional
from urllib.parse import quote

from mws_client.exceptions import MissingArgumentError, MwsArgumentError
from mws_client.mws_operation_registry import OperationSpec
from mws_client.services.mws_type_map import to_wire
from mws_client.utils.logger import logger


def content_md5(body: bytes) -> str:
    """Base64-encoded MD5 digest, as sent in the ``Content-MD5`` header."""
    return base64.b64encode(hashlib.md5(body).digest()).decode("ascii")


def quote_param(value: Any) -> str:
    """RFC 3986 percent-encoding; MWS signs the query with exactly this form."""
    if isinstance(value, Enum):
        value = value.value
    return quote(str(value), safe="-_.~")


def encode_query(params: Mapping[str, Any], *, sort: bool = False) -> str:
    items = sorted(params.items()) if sort else params.items()
    return "&".join(f"{quote_param(k)}={quote_param(v)}" for k, v in items)


@dataclass
class BuiltRequest:
    """A fully-formed MWS request, ready to be signed and sent."""

    verb: str
    endpoint: str
    params: Dict[str, Any] = field(default_factory=dict)
    headers: Dict[str, str] = field(default_factory=dict)
    body: Optional[bytes] = None

    @property
    def url(self) -> str:
        query = encode_query(self.params)
        return f"{self.endpoint}?{query}" if query else self.endpoint


def build_request(
    spec: OperationSpec,
    endpoint: str,
    arguments: Mapping[str, Any],
    *,
    user_agent: Optional[str] = None,
) -> BuiltRequest:
    """Encode ``arguments`` for ``spec`` into an unsigned request.

    Raises ``MissingArgumentError`` for an absent required parameter before
    anything else happens. ``arguments`` is never modified.
    """

    params: Dict[str, Any] = {"Action": spec.name}
    body: Optional[bytes] = None

    for name, param in spec.parameters.items():
        if name not in arguments:
            if param.required:
                raise MissingArgumentError(name)
            continue

        value = arguments[name]

        # Structured list: Name.Element.1, Name.Element.2, ...
        element = param.list_element
        if element is not None:
            if isinstance(value, (str, bytes)) or not isinstance(value, (list, tuple)):
                raise MwsArgumentError(
                    f"{spec.name}.{name} expects a list, got {type(value).__name__}"
                )
            for index, sub_value in enumerate(value, start=1):
                params[f"{name}.{element}.{index}"] = sub_value
            continue

        wire_value = to_wire(param.type, value)
        if param.is_body:
            body = wire_value
        else:
            params[name] = wire_value

    unknown = [k for k in arguments if k not in spec.parameters]
    if unknown:
        logger.warning("[mws] %s ignoring undeclared arguments: %s", spec.name, ", ".join(unknown))

    # Content-MD5 on the response covers the bytes as sent, so ask for them
    # uncompressed.
    headers: Dict[str, str] = {"Accept-Encoding": "identity"}
    if user_agent:
        headers["User-Agent"] = user_agent

    if body is not None:
        headers["Content-MD5"] = content_md5(body)
        headers["Content-Type"] = spec.body_content_type
        return BuiltRequest(verb="POST", endpoint=endpoint, params=params, headers=headers, body=body)

    return BuiltRequest(verb="GET", endpoint=endpoint, params=params, headers=headers)
