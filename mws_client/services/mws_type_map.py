"""Conversion between native Python values and MWS wire strings.

Every conversion is keyed by a type tag taken from the operation
definitions (``string``, ``boolean``, ``nonNegativeInteger``, ``datetime``,
``HTTP-BODY`` and the enumeration names below). Malformed or out-of-range
input raises ``ValueError``; nothing is coerced silently.
"""
from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, Dict, Type, Union


HTTP_BODY = "HTTP-BODY"


class UnknownTypeTagError(KeyError):
    """No converter is registered for the requested type tag."""


class FeedProcessingStatus(str, Enum):
    AWAITING_ASYNCHRONOUS_REPLY = "_AWAITING_ASYNCHRONOUS_REPLY_"
    CANCELLED = "_CANCELLED_"
    DONE = "_DONE_"
    IN_PROGRESS = "_IN_PROGRESS_"
    IN_SAFETY_NET = "_IN_SAFETY_NET_"
    SUBMITTED = "_SUBMITTED_"
    UNCONFIRMED = "_UNCONFIRMED_"


class ReportProcessingStatus(str, Enum):
    SUBMITTED = "_SUBMITTED_"
    IN_PROGRESS = "_IN_PROGRESS_"
    CANCELLED = "_CANCELLED_"
    DONE = "_DONE_"
    DONE_NO_DATA = "_DONE_NO_DATA_"


class FeedType(str, Enum):
    POST_PRODUCT_DATA = "_POST_PRODUCT_DATA_"
    POST_PRODUCT_RELATIONSHIP_DATA = "_POST_PRODUCT_RELATIONSHIP_DATA_"
    POST_ITEM_DATA = "_POST_ITEM_DATA_"
    POST_PRODUCT_OVERRIDES_DATA = "_POST_PRODUCT_OVERRIDES_DATA_"
    POST_PRODUCT_IMAGE_DATA = "_POST_PRODUCT_IMAGE_DATA_"
    POST_PRODUCT_PRICING_DATA = "_POST_PRODUCT_PRICING_DATA_"
    POST_INVENTORY_AVAILABILITY_DATA = "_POST_INVENTORY_AVAILABILITY_DATA_"
    POST_ORDER_ACKNOWLEDGEMENT_DATA = "_POST_ORDER_ACKNOWLEDGEMENT_DATA_"
    POST_ORDER_FULFILLMENT_DATA = "_POST_ORDER_FULFILLMENT_DATA_"
    POST_PAYMENT_ADJUSTMENT_DATA = "_POST_PAYMENT_ADJUSTMENT_DATA_"
    POST_FLAT_FILE_LISTINGS_DATA = "_POST_FLAT_FILE_LISTINGS_DATA_"
    POST_FLAT_FILE_ORDER_ACKNOWLEDGEMENT_DATA = "_POST_FLAT_FILE_ORDER_ACKNOWLEDGEMENT_DATA_"
    POST_FLAT_FILE_FULFILLMENT_DATA = "_POST_FLAT_FILE_FULFILLMENT_DATA_"
    POST_FLAT_FILE_PAYMENT_ADJUSTMENT_DATA = "_POST_FLAT_FILE_PAYMENT_ADJUSTMENT_DATA_"
    POST_FLAT_FILE_INVLOADER_DATA = "_POST_FLAT_FILE_INVLOADER_DATA_"
    POST_FLAT_FILE_PRICEANDQUANTITYONLY_UPDATE_DATA = "_POST_FLAT_FILE_PRICEANDQUANTITYONLY_UPDATE_DATA_"


class ReportType(str, Enum):
    GET_FLAT_FILE_OPEN_LISTINGS_DATA = "_GET_FLAT_FILE_OPEN_LISTINGS_DATA_"
    GET_MERCHANT_LISTINGS_DATA = "_GET_MERCHANT_LISTINGS_DATA_"
    GET_MERCHANT_LISTINGS_DATA_LITE = "_GET_MERCHANT_LISTINGS_DATA_LITE_"
    GET_MERCHANT_LISTINGS_DATA_LITER = "_GET_MERCHANT_LISTINGS_DATA_LITER_"
    GET_MERCHANT_CANCELLED_LISTINGS_DATA = "_GET_MERCHANT_CANCELLED_LISTINGS_DATA_"
    GET_NEMO_MERCHANT_LISTINGS_DATA = "_GET_NEMO_MERCHANT_LISTINGS_DATA_"
    GET_AFN_INVENTORY_DATA = "_GET_AFN_INVENTORY_DATA_"
    GET_FLAT_FILE_ACTIONABLE_ORDER_DATA = "_GET_FLAT_FILE_ACTIONABLE_ORDER_DATA_"
    GET_ORDERS_DATA = "_GET_ORDERS_DATA_"
    GET_FLAT_FILE_ORDER_REPORT_DATA = "_GET_FLAT_FILE_ORDER_REPORT_DATA_"
    GET_FLAT_FILE_ORDERS_DATA = "_GET_FLAT_FILE_ORDERS_DATA_"
    GET_CONVERGED_FLAT_FILE_ORDER_REPORT_DATA = "_GET_CONVERGED_FLAT_FILE_ORDER_REPORT_DATA_"
    GET_AMAZON_FULFILLED_SHIPMENTS_DATA = "_GET_AMAZON_FULFILLED_SHIPMENTS_DATA_"
    GET_PAYMENT_SETTLEMENT_DATA = "_GET_PAYMENT_SETTLEMENT_DATA_"


class Schedule(str, Enum):
    NEVER = "_NEVER_"
    EVERY_15_MINUTES = "_15_MINUTES_"
    EVERY_30_MINUTES = "_30_MINUTES_"
    EVERY_HOUR = "_1_HOUR_"
    EVERY_2_HOURS = "_2_HOURS_"
    EVERY_4_HOURS = "_4_HOURS_"
    EVERY_8_HOURS = "_8_HOURS_"
    EVERY_12_HOURS = "_12_HOURS_"
    EVERY_DAY = "_1_DAY_"
    EVERY_2_DAYS = "_2_DAYS_"
    EVERY_3_DAYS = "_72_HOURS_"
    EVERY_7_DAYS = "_7_DAYS_"
    EVERY_14_DAYS = "_14_DAYS_"
    EVERY_15_DAYS = "_15_DAYS_"
    EVERY_30_DAYS = "_30_DAYS_"


ENUMERATIONS: Dict[str, Type[Enum]] = {
    "FeedProcessingStatus": FeedProcessingStatus,
    "ReportProcessingStatus": ReportProcessingStatus,
    "FeedType": FeedType,
    "ReportType": ReportType,
    "Schedule": Schedule,
}


# ---- scalar converters ---------------------------------------------------

def _string_to_wire(value: Any) -> str:
    if isinstance(value, Enum):
        value = value.value
    if not isinstance(value, str):
        raise ValueError(f"expected a string, got {type(value).__name__}")
    return value


def _string_from_wire(text: str) -> str:
    return text


def _boolean_to_wire(value: Any) -> str:
    if value is True:
        return "true"
    if value is False:
        return "false"
    raise ValueError(f"expected a bool, got {value!r}")


def _boolean_from_wire(text: str) -> bool:
    normalized = (text or "").strip().lower()
    if normalized == "true":
        return True
    if normalized == "false":
        return False
    raise ValueError(f"not a boolean: {text!r}")


def _non_negative_integer_to_wire(value: Any) -> str:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"expected an int, got {value!r}")
    if value < 0:
        raise ValueError(f"expected a non-negative int, got {value}")
    return str(value)


def _non_negative_integer_from_wire(text: str) -> int:
    stripped = (text or "").strip()
    if not stripped.isdigit():
        raise ValueError(f"not a non-negative integer: {text!r}")
    return int(stripped)


def _datetime_to_wire(value: Any) -> str:
    if not isinstance(value, datetime):
        raise ValueError(f"expected a datetime, got {type(value).__name__}")
    # Naive datetimes are taken as UTC.
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


def _datetime_from_wire(text: str) -> datetime:
    stripped = (text or "").strip()
    if stripped.endswith("Z"):
        stripped = stripped[:-1] + "+00:00"
    parsed = datetime.fromisoformat(stripped)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _body_to_wire(value: Any) -> bytes:
    if isinstance(value, bytes):
        return value
    if isinstance(value, str):
        return value.encode("utf-8")
    raise ValueError(f"expected str or bytes body, got {type(value).__name__}")


def _body_from_wire(text: Union[str, bytes]) -> bytes:
    return _body_to_wire(text)


_TO_WIRE: Dict[str, Callable[[Any], Union[str, bytes]]] = {
    "string": _string_to_wire,
    "boolean": _boolean_to_wire,
    "nonNegativeInteger": _non_negative_integer_to_wire,
    "datetime": _datetime_to_wire,
    HTTP_BODY: _body_to_wire,
}

_FROM_WIRE: Dict[str, Callable[[Any], Any]] = {
    "string": _string_from_wire,
    "boolean": _boolean_from_wire,
    "nonNegativeInteger": _non_negative_integer_from_wire,
    "datetime": _datetime_from_wire,
    HTTP_BODY: _body_from_wire,
}


def is_known_type(type_tag: str) -> bool:
    return type_tag in _TO_WIRE or type_tag in ENUMERATIONS


def to_wire(type_tag: str, value: Any) -> Union[str, bytes]:
    """Render ``value`` in the wire form for ``type_tag``."""
    enum_cls = ENUMERATIONS.get(type_tag)
    if enum_cls is not None:
        # Accept the member itself or its exact wire value.
        return enum_cls(value.value if isinstance(value, Enum) else value).value

    try:
        converter = _TO_WIRE[type_tag]
    except KeyError:
        raise UnknownTypeTagError(type_tag) from None
    return converter(value)


def from_wire(type_tag: str, text: Any) -> Any:
    """Parse the wire string ``text`` into the native value for ``type_tag``."""
    enum_cls = ENUMERATIONS.get(type_tag)
    if enum_cls is not None:
        return enum_cls(text)

    try:
        converter = _FROM_WIRE[type_tag]
    except KeyError:
        raise UnknownTypeTagError(type_tag) from None
    return converter(text)
