"""Python binding for Amazon Marketplace Web Service (feeds and reports)."""

from mws_client.config import Settings
from mws_client.exceptions import (
    BadChecksumError,
    MissingArgumentError,
    MwsArgumentError,
    MwsClientError,
    OperationSpecError,
    ResponseError,
    TransportError,
)
from mws_client.mws_operation_registry import OperationRegistry, OperationSpec, ParameterSpec
from mws_client.services.mws_client import MwsClient

__version__ = "0.1"

__all__ = [
    "BadChecksumError",
    "MissingArgumentError",
    "MwsArgumentError",
    "MwsClient",
    "MwsClientError",
    "OperationRegistry",
    "OperationSpec",
    "OperationSpecError",
    "ParameterSpec",
    "ResponseError",
    "Settings",
    "TransportError",
]
