from __future__ import annotations

"""Turn MWS XML response bodies into result trees.

The tree mirrors the document: each element becomes a key holding either
its text (leaf elements) or a dict of its children and attributes.
Siblings sharing a tag are collected into a list. Namespaces are dropped
from tag names, and the root element name is kept as the single top-level
key.
"""

import re
from typing import Any, Dict, Iterable, List, Optional, Union
from xml.etree import ElementTree as ET

from mws_client.exceptions import ResponseError
from mws_client.mws_operation_registry import OperationSpec
from mws_client.utils.logger import logger


NS_TAG_RE = re.compile(r"^\{(.*)\}(.*)$")

ERROR_ROOT = "ErrorResponse"


def _local_name(tag: str) -> str:
    match = NS_TAG_RE.match(tag)
    return match.group(2) if match else tag


def _parse_node(node: ET.Element) -> Any:
    children = list(node)
    attrs = {_local_name(k): v for k, v in node.attrib.items()}

    if not children and not attrs:
        return node.text or ""

    tree: Dict[str, Any] = dict(attrs)
    for child in children:
        tag = _local_name(child.tag)
        value = _parse_node(child)
        if tag not in tree:
            tree[tag] = value
            continue
        # Second occurrence: switch to a list.
        existing = tree[tag]
        if not isinstance(existing, list):
            tree[tag] = [existing]
        tree[tag].append(value)

    text = (node.text or "").strip()
    if text:
        tree["content"] = text
    return tree


def parse_xml(content: Union[str, bytes]) -> Dict[str, Any]:
    """Parse ``content`` into ``{root_tag: tree}``."""
    root = ET.fromstring(content)
    return {_local_name(root.tag): _parse_node(root)}


def force_list(tree: Dict[str, Any], key: str) -> List[Any]:
    """Make ``tree[key]`` a list in place (absent → empty list) and return it."""
    value = tree.get(key)
    if value is None:
        value = []
    elif not isinstance(value, list):
        value = [value]
    tree[key] = value
    return value


def coerce_repeated(tree: Any, names: Iterable[str]) -> Any:
    """Force every occurrence of ``names`` anywhere under ``tree`` into a list."""
    names = frozenset(names)
    if not names:
        return tree

    def _walk(node: Any) -> None:
        if isinstance(node, list):
            for item in node:
                _walk(item)
            return
        if not isinstance(node, dict):
            return
        for key in list(node):
            if key in names and not isinstance(node[key], list):
                node[key] = [node[key]]
            _walk(node[key])

    _walk(tree)
    return tree


def _request_id(body: Any) -> Optional[str]:
    if not isinstance(body, dict):
        return None
    request_id = body.get("RequestID") or body.get("RequestId")
    if request_id is None and isinstance(body.get("ResponseMetadata"), dict):
        request_id = body["ResponseMetadata"].get("RequestId")
    return request_id if isinstance(request_id, str) else None


def find_error_envelope(document: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    """Return the element holding ``<Error>`` entries, if the document is an error."""
    root_tag, body = next(iter(document.items()))
    if root_tag == ERROR_ROOT:
        return body if isinstance(body, dict) else {}
    if isinstance(body, dict):
        if "Error" in body:
            return body
        nested = body.get(ERROR_ROOT)
        if isinstance(nested, dict):
            return nested
    return None


def unwrap_result(spec: OperationSpec, document: Dict[str, Any]) -> Any:
    response_tag = f"{spec.name}Response"
    result_tag = f"{spec.name}Result"

    response = document.get(response_tag)
    if not isinstance(response, dict) or result_tag not in response:
        raise ResponseError(
            [],
            document,
            request_id=_request_id(response),
            detail=f"{spec.name}: response has no {response_tag}/{result_tag} element",
        )
    return response[result_tag]


def decode_response(spec: OperationSpec, content: bytes) -> Any:
    """Decode a verified response body for ``spec`` into its result.

    ``raw_body`` operations get the content back untouched and are not
    checked for service errors; callers must inspect it themselves.
    """

    if spec.raw_body:
        return content

    try:
        document = parse_xml(content)
    except ET.ParseError as exc:
        raise ResponseError(
            [],
            content,
            detail=f"{spec.name}: response is not well-formed XML: {exc}",
        ) from exc

    envelope = find_error_envelope(document)
    if envelope is not None:
        errors = force_list(envelope, "Error")
        request_id = _request_id(envelope)
        logger.warning(
            "[mws] %s error response request_id=%s errors=%s",
            spec.name,
            request_id,
            errors,
        )
        raise ResponseError(errors, document, request_id=request_id)

    result = coerce_repeated(unwrap_result(spec, document), spec.repeated)

    if spec.respond is None:
        return result
    return spec.respond(result)
