"""The MWS feeds and reports operations this client exposes.

Each entry is plain data: a parameter table plus a converter that shapes
the unwrapped ``<Name>Result`` tree into the value returned to callers.
Adding an operation means adding one ``OperationSpec`` (and, if needed, one
converter function) to ``OPERATIONS``.
"""
from __future__ import annotations

from typing import Any, Dict, List

from mws_client.exceptions import ResponseError
from mws_client.mws_operation_registry import OperationRegistry, OperationSpec, ParameterSpec
from mws_client.services.mws_type_map import HTTP_BODY, from_wire


def _tree(root: Any) -> Dict[str, Any]:
    # An empty result element parses to "".
    return dict(root) if isinstance(root, dict) else {}


def convert(tree: Dict[str, Any], key: str, type_tag: str) -> None:
    """Convert ``tree[key]`` in place from its wire string; absent keys are left alone."""
    if key in tree and tree[key] is not None:
        tree[key] = from_wire(type_tag, tree[key])


def convert_feed_submission_info(info: Any) -> Dict[str, Any]:
    info = _tree(info)
    convert(info, "FeedProcessingStatus", "FeedProcessingStatus")
    convert(info, "SubmittedDate", "datetime")
    convert(info, "StartedProcessingDate", "datetime")
    convert(info, "CompletedProcessingDate", "datetime")
    return info


def convert_report_request_info(info: Any) -> Dict[str, Any]:
    info = _tree(info)
    convert(info, "StartDate", "datetime")
    convert(info, "EndDate", "datetime")
    convert(info, "Scheduled", "boolean")
    convert(info, "SubmittedDate", "datetime")
    convert(info, "ReportProcessingStatus", "ReportProcessingStatus")
    convert(info, "StartedProcessingDate", "datetime")
    convert(info, "CompletedDate", "datetime")
    return info


def respond_submit_feed(root: Any) -> Dict[str, Any]:
    return convert_feed_submission_info(_tree(root).get("FeedSubmissionInfo"))


def respond_feed_submission_list(root: Any) -> Dict[str, Any]:
    tree = _tree(root)
    convert(tree, "HasNext", "boolean")
    tree["FeedSubmissionInfo"] = [
        convert_feed_submission_info(info) for info in tree.get("FeedSubmissionInfo", [])
    ]
    return tree


def respond_cancel_feed_submissions(root: Any) -> Dict[str, Any]:
    tree = _tree(root)
    convert(tree, "Count", "nonNegativeInteger")
    tree["FeedSubmissionInfo"] = [
        convert_feed_submission_info(info) for info in tree.get("FeedSubmissionInfo", [])
    ]
    return tree


def respond_count(root: Any) -> int:
    tree = _tree(root)
    if "Count" not in tree:
        raise ResponseError([], root, detail="MWS count result has no <Count> element")
    return from_wire("nonNegativeInteger", tree["Count"])


def respond_request_report(root: Any) -> Dict[str, Any]:
    return convert_report_request_info(_tree(root).get("ReportRequestInfo"))


def respond_report_request_list(root: Any) -> Dict[str, Any]:
    tree = _tree(root)
    convert(tree, "HasNext", "boolean")
    tree["ReportRequestInfo"] = [
        convert_report_request_info(info) for info in tree.get("ReportRequestInfo", [])
    ]
    return tree


# ---- Parameter tables shared by several operations -----------------------

_SUBMITTED_RANGE = {
    "SubmittedFromDate": ParameterSpec(type="datetime"),
    "SubmittedToDate": ParameterSpec(type="datetime"),
}

_REQUESTED_RANGE = {
    "RequestedFromDate": ParameterSpec(type="datetime"),
    "RequestedToDate": ParameterSpec(type="datetime"),
}


OPERATIONS: List[OperationSpec] = [
    # 1) Feeds ---------------------------------------------------------------
    OperationSpec(
        name="SubmitFeed",
        parameters={
            "FeedContent": ParameterSpec(type=HTTP_BODY, required=True),
            "FeedType": ParameterSpec(type="string", required=True),
            "PurgeAndReplace": ParameterSpec(type="boolean"),
        },
        respond=respond_submit_feed,
    ),
    OperationSpec(
        name="GetFeedSubmissionList",
        parameters={
            "FeedSubmissionIdList": ParameterSpec(type="IdList"),
            "MaxCount": ParameterSpec(type="nonNegativeInteger"),
            "FeedTypeList": ParameterSpec(type="TypeList"),
            "FeedProcessingStatusList": ParameterSpec(type="StatusList"),
            **_SUBMITTED_RANGE,
        },
        respond=respond_feed_submission_list,
        repeated=("FeedSubmissionInfo",),
    ),
    OperationSpec(
        name="GetFeedSubmissionListByNextToken",
        parameters={
            "NextToken": ParameterSpec(type="string", required=True),
        },
        respond=respond_feed_submission_list,
        repeated=("FeedSubmissionInfo",),
    ),
    OperationSpec(
        name="GetFeedSubmissionCount",
        parameters={
            "FeedTypeList": ParameterSpec(type="TypeList"),
            "FeedProcessingStatusList": ParameterSpec(type="StatusList"),
            **_SUBMITTED_RANGE,
        },
        respond=respond_count,
    ),
    OperationSpec(
        name="CancelFeedSubmissions",
        parameters={
            "FeedSubmissionIdList": ParameterSpec(type="IdList"),
            "FeedTypeList": ParameterSpec(type="TypeList"),
            **_SUBMITTED_RANGE,
        },
        respond=respond_cancel_feed_submissions,
        repeated=("FeedSubmissionInfo",),
    ),
    OperationSpec(
        name="GetFeedSubmissionResult",
        parameters={
            "FeedSubmissionId": ParameterSpec(type="string", required=True),
        },
        raw_body=True,
    ),

    # 2) Reports -------------------------------------------------------------
    OperationSpec(
        name="RequestReport",
        parameters={
            "ReportType": ParameterSpec(type="string", required=True),
            "StartDate": ParameterSpec(type="datetime"),
            "EndDate": ParameterSpec(type="datetime"),
        },
        respond=respond_request_report,
    ),
    OperationSpec(
        name="GetReportRequestList",
        parameters={
            "ReportRequestIdList": ParameterSpec(type="IdList"),
            "ReportTypeList": ParameterSpec(type="TypeList"),
            "ReportProcessingStatusList": ParameterSpec(type="StatusList"),
            "MaxCount": ParameterSpec(type="nonNegativeInteger"),
            **_REQUESTED_RANGE,
        },
        respond=respond_report_request_list,
        repeated=("ReportRequestInfo",),
    ),
    OperationSpec(
        name="GetReportRequestListByNextToken",
        parameters={
            "NextToken": ParameterSpec(type="string", required=True),
        },
        respond=respond_report_request_list,
        repeated=("ReportRequestInfo",),
    ),
    OperationSpec(
        name="GetReportRequestCount",
        parameters={
            "ReportTypeList": ParameterSpec(type="TypeList"),
            "ReportProcessingStatusList": ParameterSpec(type="StatusList"),
            **_REQUESTED_RANGE,
        },
        respond=respond_count,
    ),
    OperationSpec(
        name="GetReport",
        parameters={
            "ReportId": ParameterSpec(type="string", required=True),
        },
        raw_body=True,
    ),
]


def build_default_registry() -> OperationRegistry:
    """A fresh, frozen registry holding every operation in ``OPERATIONS``."""
    return OperationRegistry(OPERATIONS).freeze()
