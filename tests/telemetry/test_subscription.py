"""Tests for SUBSCRIBE / UNSUBSCRIBE request building and sending."""

from __future__ import annotations

import json
import logging
from unittest.mock import AsyncMock

import pytest

from edgemax.models.stats import StatType
from edgemax.telemetry.subscription import (
    DEFAULT_STAT_TYPES,
    Subscription,
    SubscriptionRequest,
    build_subscribe_request,
    send_request,
)


class TestBuildSubscribeRequest:
    def test_defaults_to_all_categories(self) -> None:
        req = build_subscribe_request("sess")
        assert req.subscribe is not None
        assert [s.name for s in req.subscribe] == ["export", "interfaces", "system-stats"]
        assert req.unsubscribe is None
        assert req.session_id == "sess"

    def test_empty_list_means_defaults(self) -> None:
        req = build_subscribe_request("sess", [])
        assert req.subscribe is not None
        assert [s.name for s in req.subscribe] == [t.value for t in DEFAULT_STAT_TYPES]

    def test_explicit_categories_keep_order(self) -> None:
        req = build_subscribe_request("sess", ["system-stats", StatType.INTERFACES])
        assert req.subscribe == [
            Subscription(name="system-stats"),
            Subscription(name="interfaces"),
        ]


class TestAsUnsubscribe:
    def test_moves_names_to_unsubscribe(self) -> None:
        req = build_subscribe_request("sess", [StatType.DPI_STATS])
        unsub = req.as_unsubscribe()

        assert unsub.subscribe is None
        assert unsub.unsubscribe == [Subscription(name="export")]
        assert unsub.session_id == "sess"

    def test_original_is_unchanged(self) -> None:
        req = build_subscribe_request("sess")
        req.as_unsubscribe()
        assert req.subscribe is not None
        assert len(req.subscribe) == 3
        assert req.unsubscribe is None

    def test_wire_aliases(self) -> None:
        unsub = SubscriptionRequest(subscribe=[Subscription(name="foo")]).as_unsubscribe()
        dumped = json.loads(unsub.model_dump_json(by_alias=True))
        assert dumped == {"SUBSCRIBE": None, "UNSUBSCRIBE": [{"name": "foo"}], "SESSION_ID": ""}


class TestSendRequest:
    async def test_sends_one_encoded_frame(self) -> None:
        ws = AsyncMock()
        req = SubscriptionRequest(
            subscribe=[Subscription(name="foo"), Subscription(name="bar")],
            session_id="baz",
        )

        await send_request(ws, req)

        ws.send.assert_awaited_once_with(
            '83\n{"SUBSCRIBE":[{"name":"foo"},{"name":"bar"}],'
            '"UNSUBSCRIBE":null,"SESSION_ID":"baz"}'
        )

    async def test_session_id_not_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        caplog.set_level(logging.DEBUG, logger="edgemax.telemetry.subscription")

        await send_request(AsyncMock(), build_subscribe_request("secret-session"))

        assert "secret-session" not in caplog.text
        assert "system-stats" in caplog.text
