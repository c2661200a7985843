"""Tests for the length-prefixed stats frame codec."""

from __future__ import annotations

import json

import pytest

from edgemax.api.errors import FrameError
from edgemax.telemetry.codec import PayloadType, decode_frame, decode_frame_into, encode_frame
from edgemax.telemetry.subscription import Subscription, SubscriptionRequest


class TestEncodeFrame:
    def test_empty_request(self) -> None:
        frame, payload_type = encode_frame(SubscriptionRequest())
        assert frame == '53\n{"SUBSCRIBE":null,"UNSUBSCRIBE":null,"SESSION_ID":""}'
        assert payload_type is PayloadType.TEXT

    def test_subscribe_request(self) -> None:
        req = SubscriptionRequest(
            subscribe=[Subscription(name="foo"), Subscription(name="bar")],
            session_id="baz",
        )
        frame, _ = encode_frame(req)
        assert frame == (
            '83\n{"SUBSCRIBE":[{"name":"foo"},{"name":"bar"}],'
            '"UNSUBSCRIBE":null,"SESSION_ID":"baz"}'
        )

    def test_unsubscribe_request(self) -> None:
        req = SubscriptionRequest(unsubscribe=[Subscription(name="foo")], session_id="bar")
        frame, _ = encode_frame(req)
        assert frame == '68\n{"SUBSCRIBE":null,"UNSUBSCRIBE":[{"name":"foo"}],"SESSION_ID":"bar"}'

    def test_plain_value_is_compact(self) -> None:
        frame, _ = encode_frame({"a": [1, 2]})
        assert frame == '11\n{"a":[1,2]}'

    def test_prefix_counts_utf8_bytes(self) -> None:
        frame, _ = encode_frame(SubscriptionRequest(session_id="café"))
        header, body = frame.split("\n", 1)
        assert int(header) == len(body.encode("utf-8"))
        assert int(header) != len(body)


class TestDecodeFrame:
    def test_length_prefixed(self) -> None:
        assert decode_frame('11\n{"a":[1,2]}') == {"a": [1, 2]}

    def test_bytes_input(self) -> None:
        assert decode_frame(b'7\n{"a":1}') == {"a": 1}

    def test_bare_json_object(self) -> None:
        assert decode_frame('{"system-stats":{"cpu":"1"}}') == {"system-stats": {"cpu": "1"}}

    def test_header_only_is_none(self) -> None:
        assert decode_frame("3\n") is None

    def test_length_is_not_checked(self) -> None:
        assert decode_frame('999\n{"a":1}') == {"a": 1}

    def test_no_newline(self) -> None:
        with pytest.raises(FrameError, match="incorrect number of elements in websocket message: 1"):
            decode_frame("foo")

    def test_invalid_json_body(self) -> None:
        with pytest.raises(FrameError) as exc_info:
            decode_frame("3\nfoo")
        assert isinstance(exc_info.value.__cause__, json.JSONDecodeError)

    def test_invalid_utf8_body(self) -> None:
        with pytest.raises(FrameError) as exc_info:
            decode_frame(b'3\n{"\xff":1}')
        assert isinstance(exc_info.value.__cause__, UnicodeDecodeError)

    def test_frame_error_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            decode_frame("foo")

    def test_round_trip(self) -> None:
        req = SubscriptionRequest(subscribe=[Subscription(name="interfaces")], session_id="abc")
        frame, _ = encode_frame(req)
        assert decode_frame(frame) == {
            "SUBSCRIBE": [{"name": "interfaces"}],
            "UNSUBSCRIBE": None,
            "SESSION_ID": "abc",
        }


class TestDecodeFrameInto:
    def test_into_model(self) -> None:
        frame = '68\n{"SUBSCRIBE":null,"UNSUBSCRIBE":[{"name":"foo"}],"SESSION_ID":"bar"}'
        req = decode_frame_into(frame, SubscriptionRequest)
        assert req.subscribe is None
        assert req.unsubscribe == [Subscription(name="foo")]
        assert req.session_id == "bar"

    def test_header_only_is_zero_model(self) -> None:
        assert decode_frame_into("3\n", SubscriptionRequest) == SubscriptionRequest()
