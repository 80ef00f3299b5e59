"""Synchronous client for Amazon Marketplace Web Service.

Every registered operation is reachable as an attribute::

    with MwsClient() as client:
        info = client.SubmitFeed(FeedContent=xml, FeedType="_POST_PRODUCT_DATA_")
        count = client.GetFeedSubmissionCount()

All of them run through :meth:`MwsClient.call`: build the request, sign
it, dispatch it, decode the response and apply the operation's converter.
Failures raise the errors in :mod:`mws_client.exceptions`; nothing is
retried.
"""
from __future__ import annotations

import time
from typing import Any, Callable, Dict, Optional

import httpx

from mws_client.config import Settings, settings as default_settings
from mws_client.exceptions import MwsClientError
from mws_client.mws_operation_registry import OperationRegistry, OperationSpec
from mws_client.services.mws_operations import build_default_registry
from mws_client.services.mws_request_builder import BuiltRequest, build_request
from mws_client.services.mws_response_decoder import decode_response
from mws_client.services.mws_signature import NullSigner, RequestSigner, SignatureV2Signer
from mws_client.services.mws_transport import dispatch
from mws_client.utils.logger import MwsCallLogger, logger


def default_signer(config: Settings) -> RequestSigner:
    if not config.has_credentials:
        logger.warning("[mws] no MWS credentials configured; requests will be sent unsigned")
        return NullSigner()
    return SignatureV2Signer(
        config.access_key_id,
        config.secret_key,
        config.merchant_id,
        marketplace_id=config.marketplace_id,
        version=config.api_version,
    )


class MwsClient:
    """Binding for the MWS feeds and reports API."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        *,
        http_client: Optional[httpx.Client] = None,
        signer: Optional[RequestSigner] = None,
        registry: Optional[OperationRegistry] = None,
        agent_attributes: Optional[Dict[str, str]] = None,
        call_logger: Optional[MwsCallLogger] = None,
    ):
        self.settings = settings or default_settings
        self.registry = (registry if registry is not None else build_default_registry()).freeze()
        self.signer = signer if signer is not None else default_signer(self.settings)
        self.user_agent = self.settings.user_agent(agent_attributes)
        self.call_logger = call_logger or MwsCallLogger()

        self._owns_http_client = http_client is None
        self._http = http_client or httpx.Client(
            timeout=httpx.Timeout(
                self.settings.http_timeout_seconds,
                connect=self.settings.http_connect_timeout_seconds,
            ),
        )

    # ---- lifecycle ---------------------------------------------------------

    def close(self) -> None:
        if self._owns_http_client:
            self._http.close()

    def __enter__(self) -> "MwsClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    # ---- operations --------------------------------------------------------

    def operation_names(self):
        return self.registry.names()

    def method(self, name: str) -> Callable[..., Any]:
        """Return the callable bound to operation ``name``.

        Raises ``KeyError`` if the operation is not registered.
        """

        spec = self.registry.get(name)

        def bound(**arguments: Any) -> Any:
            return self._invoke(spec, **arguments)

        bound.__name__ = bound.__qualname__ = spec.name
        bound.__doc__ = f"Call the MWS {spec.name} operation."
        return bound

    def __getattr__(self, name: str) -> Callable[..., Any]:
        # Only reached for names that are not regular attributes.
        registry = self.__dict__.get("registry")
        if registry is None or name not in registry:
            raise AttributeError(f"{type(self).__name__!r} object has no attribute {name!r}")
        return self.method(name)

    def __dir__(self):
        return sorted(set(super().__dir__()) | set(self.registry.names()))

    def call(self, name: str, **arguments: Any) -> Any:
        return self._invoke(self.registry.get(name), **arguments)

    def prepare(self, name: str, **arguments: Any) -> BuiltRequest:
        """Build and sign the request for ``name`` without sending it."""
        return self._prepare(self.registry.get(name), arguments)

    def _prepare(self, spec: OperationSpec, arguments: Dict[str, Any]) -> BuiltRequest:
        request = build_request(spec, self.settings.endpoint, arguments, user_agent=self.user_agent)
        self.signer.sign(request)
        return request

    def _invoke(self, spec: OperationSpec, **arguments: Any) -> Any:
        request = self._prepare(spec, arguments)

        start = time.time()
        try:
            raw = dispatch(self._http, request)
            result = decode_response(spec, raw.content)
        except MwsClientError as exc:
            response = getattr(exc, "response", None)
            self.call_logger.log_call(
                spec.name,
                request.verb,
                params=request.params,
                status_code=getattr(response, "status_code", None),
                duration_ms=int((time.time() - start) * 1000),
                error=str(exc),
            )
            raise

        self.call_logger.log_call(
            spec.name,
            request.verb,
            params=request.params,
            status_code=raw.status_code,
            duration_ms=raw.duration_ms,
        )
        return result
