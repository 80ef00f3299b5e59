from datetime import datetime, timezone

import pytest

from mws_client.exceptions import ResponseError
from mws_client.mws_operation_registry import OperationSpec
from mws_client.services.mws_operations import build_default_registry
from mws_client.services.mws_response_decoder import coerce_repeated, decode_response, parse_xml
from mws_client.services.mws_type_map import FeedProcessingStatus

NS = 'xmlns="http://mws.amazonaws.com/doc/2009-01-01/"'

SINGLE_ERROR = f"""<?xml version="1.0"?>
<ErrorResponse {NS}>
  <Error>
    <Type>Sender</Type>
    <Code>InvalidParameterValue</Code>
    <Message>FeedType is invalid</Message>
    <Detail/>
  </Error>
  <RequestID>e0ef1c1b-1bd2-4a4d-a8c1-0ffee0a3a222</RequestID>
</ErrorResponse>
""".encode()

TWO_ERRORS = f"""<?xml version="1.0"?>
<ErrorResponse {NS}>
  <Error><Type>Sender</Type><Code>A</Code><Message>first</Message></Error>
  <Error><Type>Sender</Type><Code>B</Code><Message>second</Message></Error>
  <RequestID>rid-2</RequestID>
</ErrorResponse>
""".encode()

ONE_SUBMISSION = f"""<?xml version="1.0"?>
<GetFeedSubmissionListResponse {NS}>
  <GetFeedSubmissionListResult>
    <NextToken>2YgYW55IGNhcm5hbCBwbGVhc3VyZS4=</NextToken>
    <HasNext>true</HasNext>
    <FeedSubmissionInfo>
      <FeedSubmissionId>2291326430</FeedSubmissionId>
      <FeedType>_POST_PRODUCT_DATA_</FeedType>
      <SubmittedDate>2009-02-20T02:10:35+00:00</SubmittedDate>
      <FeedProcessingStatus>_SUBMITTED_</FeedProcessingStatus>
    </FeedSubmissionInfo>
  </GetFeedSubmissionListResult>
  <ResponseMetadata><RequestId>1105b931-6f1c-4480-8e97-f3b467840a9e</RequestId></ResponseMetadata>
</GetFeedSubmissionListResponse>
""".encode()


def _spec(name):
    return build_default_registry().get(name)


def test_parse_xml_keeps_root_and_strips_namespaces():
    document = parse_xml(ONE_SUBMISSION)
    assert list(document) == ["GetFeedSubmissionListResponse"]
    result = document["GetFeedSubmissionListResponse"]["GetFeedSubmissionListResult"]
    assert result["HasNext"] == "true"
    assert result["FeedSubmissionInfo"]["FeedSubmissionId"] == "2291326430"


def test_parse_xml_collects_repeated_siblings_and_attributes():
    document = parse_xml(b'<Root><Item id="1">a</Item><Item>b</Item><Empty/></Root>')
    root = document["Root"]
    assert root["Item"] == [{"id": "1", "content": "a"}, "b"]
    assert root["Empty"] == ""


def test_single_error_is_normalized_to_a_list():
    with pytest.raises(ResponseError) as excinfo:
        decode_response(_spec("SubmitFeed"), SINGLE_ERROR)

    error = excinfo.value
    assert isinstance(error.errors, list)
    assert len(error.errors) == 1
    assert error.errors[0]["Code"] == "InvalidParameterValue"
    assert error.request_id == "e0ef1c1b-1bd2-4a4d-a8c1-0ffee0a3a222"
    assert "ErrorResponse" in error.document
    assert "InvalidParameterValue" in str(error)


def test_multiple_errors_keep_their_order():
    with pytest.raises(ResponseError) as excinfo:
        decode_response(_spec("GetFeedSubmissionCount"), TWO_ERRORS)
    assert [e["Code"] for e in excinfo.value.errors] == ["A", "B"]


def test_single_repeated_element_becomes_a_list():
    result = decode_response(_spec("GetFeedSubmissionList"), ONE_SUBMISSION)

    assert result["HasNext"] is True
    assert result["NextToken"] == "2YgYW55IGNhcm5hbCBwbGVhc3VyZS4="
    assert isinstance(result["FeedSubmissionInfo"], list)
    info = result["FeedSubmissionInfo"][0]
    assert info["SubmittedDate"] == datetime(2009, 2, 20, 2, 10, 35, tzinfo=timezone.utc)
    assert info["FeedProcessingStatus"] is FeedProcessingStatus.SUBMITTED


def test_repeated_elements_are_coerced_at_any_depth():
    tree = {"Outer": {"Info": {"x": "1"}}, "Info": [{"x": "2"}], "Other": "v"}
    coerce_repeated(tree, ["Info"])
    assert tree["Outer"]["Info"] == [{"x": "1"}]
    assert tree["Info"] == [{"x": "2"}]
    assert tree["Other"] == "v"


def test_result_without_converter_is_returned_as_is():
    spec = OperationSpec(name="Ping", repeated=("Pong",))
    body = b"<PingResponse><PingResult><Pong>1</Pong></PingResult></PingResponse>"
    assert decode_response(spec, body) == {"Pong": ["1"]}


def test_raw_body_operations_skip_parsing_and_error_checks():
    spec = _spec("GetFeedSubmissionResult")
    assert decode_response(spec, SINGLE_ERROR) == SINGLE_ERROR
    assert decode_response(spec, b"not xml at all") == b"not xml at all"


def test_malformed_xml_raises_response_error():
    with pytest.raises(ResponseError) as excinfo:
        decode_response(_spec("GetFeedSubmissionCount"), b"<GetFeedSubmissionCountResponse>")
    assert excinfo.value.errors == []
    assert excinfo.value.document == b"<GetFeedSubmissionCountResponse>"


def test_missing_result_element_raises_response_error():
    body = b"<GetFeedSubmissionCountResponse><Other/></GetFeedSubmissionCountResponse>"
    with pytest.raises(ResponseError):
        decode_response(_spec("GetFeedSubmissionCount"), body)


def test_count_is_returned_bare():
    body = (
        b"<GetFeedSubmissionCountResponse><GetFeedSubmissionCountResult>"
        b"<Count>463</Count>"
        b"</GetFeedSubmissionCountResult></GetFeedSubmissionCountResponse>"
    )
    assert decode_response(_spec("GetFeedSubmissionCount"), body) == 463


def test_field_conversion_failures_propagate():
    body = (
        b"<SubmitFeedResponse><SubmitFeedResult><FeedSubmissionInfo>"
        b"<SubmittedDate>yesterday</SubmittedDate>"
        b"</FeedSubmissionInfo></SubmitFeedResult></SubmitFeedResponse>"
    )
    with pytest.raises(ValueError):
        decode_response(_spec("SubmitFeed"), body)


def test_request_report_converts_report_request_info():
    body = f"""<RequestReportResponse {NS}>
      <RequestReportResult>
        <ReportRequestInfo>
          <ReportRequestId>2291326454</ReportRequestId>
          <ReportType>_GET_MERCHANT_LISTINGS_DATA_</ReportType>
          <StartDate>2009-01-21T02:10:39+00:00</StartDate>
          <EndDate>2009-02-13T02:10:39+00:00</EndDate>
          <Scheduled>false</Scheduled>
          <SubmittedDate>2009-02-20T02:10:39+00:00</SubmittedDate>
          <ReportProcessingStatus>_SUBMITTED_</ReportProcessingStatus>
        </ReportRequestInfo>
      </RequestReportResult>
    </RequestReportResponse>""".encode()

    info = decode_response(_spec("RequestReport"), body)

    assert info["ReportRequestId"] == "2291326454"
    assert info["Scheduled"] is False
    assert info["StartDate"] == datetime(2009, 1, 21, 2, 10, 39, tzinfo=timezone.utc)
    assert info["EndDate"] == datetime(2009, 2, 13, 2, 10, 39, tzinfo=timezone.utc)


def test_cancel_feed_submissions_with_no_matches():
    body = (
        b"<CancelFeedSubmissionsResponse><CancelFeedSubmissionsResult>"
        b"<Count>0</Count>"
        b"</CancelFeedSubmissionsResult></CancelFeedSubmissionsResponse>"
    )
    result = decode_response(_spec("CancelFeedSubmissions"), body)
    assert result == {"Count": 0, "FeedSubmissionInfo": []}


def test_count_result_without_count_raises_response_error():
    body = b"<GetFeedSubmissionCountResponse><GetFeedSubmissionCountResult/></GetFeedSubmissionCountResponse>"
    with pytest.raises(ResponseError) as excinfo:
        decode_response(_spec("GetFeedSubmissionCount"), body)

    assert excinfo.value.errors == []
    assert "Count" in str(excinfo.value)


def test_report_request_list_cardinality_comes_from_declared_repeats():
    body = (
        b"<GetReportRequestListResponse><GetReportRequestListResult>"
        b"<HasNext>false</HasNext>"
        b"<ReportRequestInfo><ReportRequestId>2291326454</ReportRequestId>"
        b"<Scheduled>true</Scheduled></ReportRequestInfo>"
        b"</GetReportRequestListResult></GetReportRequestListResponse>"
    )
    spec = _spec("GetReportRequestList")
    assert spec.repeated == ("ReportRequestInfo",)

    result = decode_response(spec, body)

    assert result["HasNext"] is False
    assert result["ReportRequestInfo"] == [{"ReportRequestId": "2291326454", "Scheduled": True}]
