from dsquery.contracts import LoadingState
from dsquery.response import to_data_query_error, to_data_query_response
from dsquery.transport import FetchResponse, TransportError


def test_json_frames_are_decoded() -> None:
    reply = FetchResponse(
        status=200,
        data={
            "results": {
                "A": {
                    "frames": [
                        {
                            "schema": {
                                "name": "cpu",
                                "fields": [
                                    {"name": "time", "type": "time"},
                                    {"name": "value", "type": "number"},
                                ],
                            },
                            "data": {"values": [[1, 2], [0.5, 0.7]]},
                        }
                    ]
                }
            }
        },
    )
    rsp = to_data_query_response(reply)
    assert rsp.state is LoadingState.DONE
    assert rsp.error is None
    frame = rsp.data[0]
    assert frame.name == "cpu"
    assert frame.ref_id == "A"
    assert frame.length == 2
    assert frame.field("value").values == [0.5, 0.7]


def test_series_and_tables_are_decoded() -> None:
    reply = {
        "results": {
            "A": {"series": [{"target": "up", "datapoints": [[1, 1000], [0, 2000]]}]},
            "B": {"tables": [{"columns": [{"text": "host"}], "rows": [["a"], ["b"]]}]},
        }
    }
    rsp = to_data_query_response(reply)
    assert rsp.ok
    assert [f.ref_id for f in rsp.data] == ["A", "B"]
    assert rsp.data[0].field("Time").values == [1000, 2000]
    assert rsp.data[1].field("host").values == ["a", "b"]


def test_per_query_error_marks_failure() -> None:
    reply = FetchResponse(
        status=200,
        data={"results": {"A": {"error": "bad query"}, "B": {"error": "other"}}},
    )
    rsp = to_data_query_response(reply)
    assert rsp.state is LoadingState.ERROR
    assert rsp.error is not None
    assert rsp.error.ref_id == "A"
    assert rsp.error.message == "bad query"


def test_transport_error_uses_body_message() -> None:
    err = TransportError(
        "500 Internal Server Error",
        status=500,
        status_text="Internal Server Error",
        data={"message": "plugin crashed"},
    )
    rsp = to_data_query_response(err)
    assert rsp.state is LoadingState.ERROR
    assert rsp.data == []
    assert rsp.error is not None
    assert rsp.error.message == "plugin crashed"
    assert rsp.error.status == 500


def test_network_error_without_body() -> None:
    rsp = to_data_query_response(ConnectionError("connection refused"))
    assert rsp.state is LoadingState.ERROR
    assert rsp.error is not None
    assert rsp.error.message == "connection refused"


def test_error_response_keeps_partial_frames() -> None:
    err = TransportError(
        "400 Bad Request",
        status=400,
        data={
            "results": {
                "A": {"series": [{"name": "x", "fields": [{"name": "v", "values": [1]}]}]},
                "B": {"error": "syntax error"},
            }
        },
    )
    rsp = to_data_query_response(err)
    assert rsp.state is LoadingState.ERROR
    assert len(rsp.data) == 1
    assert rsp.error is not None
    assert rsp.error.ref_id == "B"


def test_malformed_frame_does_not_raise() -> None:
    rsp = to_data_query_response({"results": {"A": {"frames": ["oops"]}}})
    assert rsp.state is LoadingState.ERROR
    assert rsp.error is not None
    assert rsp.error.ref_id == "A"


def test_success_and_failure_share_shape() -> None:
    ok = to_data_query_response(FetchResponse(status=200, data={"results": {}}))
    failed = to_data_query_response(TransportError("boom"))
    assert set(ok.model_dump()) == set(failed.model_dump())
    assert ok.state is LoadingState.DONE
    assert failed.state is LoadingState.ERROR


def test_error_falls_back_to_status_text() -> None:
    err = to_data_query_error({"status": 502, "statusText": "Bad Gateway"})
    assert err.message == "Bad Gateway"
    assert err.status == 502


def test_table_rows_as_mappings_do_not_raise() -> None:
    reply = {
        "results": {
            "A": {"tables": [{"columns": [{"text": "a"}], "rows": [{"a": 1}]}]}
        }
    }
    rsp = to_data_query_response(FetchResponse(status=200, data=reply))
    assert rsp.state is LoadingState.ERROR
    assert rsp.error is not None
    assert rsp.error.ref_id == "A"
    assert rsp.error.message.startswith("invalid frame")


def test_frame_values_as_mapping_do_not_raise() -> None:
    reply = {
        "results": {
            "A": {
                "frames": [
                    {
                        "schema": {"fields": [{"name": "t", "type": "time"}]},
                        "data": {"values": {"t": [1]}},
                    }
                ]
            }
        }
    }
    rsp = to_data_query_response(reply)
    assert rsp.state is LoadingState.ERROR
    assert rsp.error is not None
    assert rsp.error.ref_id == "A"
