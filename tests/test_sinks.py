"""Tests for the sink boundary: GuardedSink, RecordingSink, NoOpSink, EventBusSink."""

from __future__ import annotations

import logging

import pytest

from rumkit.config import LoggingConfig
from rumkit.emitter import configure, reset
from rumkit.events import (
    ActionAdded,
    AttributesPublished,
    ErrorAdded,
    SinkReset,
    TimingAdded,
    UserInfoSet,
    ViewLoadingTimeAdded,
    ViewStarted,
)
from rumkit.linker import RumEventLinker
from rumkit.sinks import (
    ActionType,
    ErrorSource,
    EventBusSink,
    GuardedSink,
    NoOpSink,
    PublishOutcome,
    RecordingSink,
    RumSink,
)


@pytest.fixture(autouse=True)
def _reset_observability():
    reset()
    yield
    reset()


class BrokenSink(NoOpSink):
    def set_attributes(self, attributes):
        raise ConnectionError("socket closed")

    def add_timing(self, name):
        raise ValueError("bad timing")


class TestProtocol:
    @pytest.mark.parametrize("cls", [NoOpSink, RecordingSink, EventBusSink])
    def test_implements_rum_sink(self, cls):
        assert isinstance(cls(), RumSink)


class TestGuardedSink:
    def test_success_outcome(self):
        sink = GuardedSink(RecordingSink())
        outcome = sink.add_timing("t")
        assert outcome == PublishOutcome(True, "add_timing")
        assert bool(outcome) is True

    def test_failure_outcome_not_raised(self):
        sink = GuardedSink(BrokenSink())
        outcome = sink.set_attributes({"a": 1})
        assert outcome.ok is False
        assert outcome.operation == "set_attributes"
        assert "socket closed" in outcome.error
        assert not outcome

    def test_failure_is_logged(self, caplog):
        sink = GuardedSink(BrokenSink())
        with caplog.at_level(logging.WARNING, logger="rumkit.sink"):
            sink.add_timing("t")
        assert any(r.getMessage() == "sink.publish_failed" for r in caplog.records)

    def test_passes_attributes_as_copies(self):
        recording = RecordingSink()
        sink = GuardedSink(recording)
        attrs = {"k": "v"}
        sink.add_action(ActionType.TAP, "Button", attrs)
        attrs["k"] = "changed"
        assert recording.actions[0].attributes == {"k": "v"}

    def test_optional_attributes_default_empty(self):
        recording = RecordingSink()
        sink = GuardedSink(recording)
        sink.add_action(ActionType.TAP, "Button")
        sink.add_error("boom", ErrorSource.CUSTOM, "boom")
        sink.start_view("k", "Home")
        assert recording.actions[0].attributes == {}
        assert recording.errors[0].attributes == {}
        assert recording.views[0].attributes == {}

    def test_wrapped(self):
        inner = NoOpSink()
        assert GuardedSink(inner).wrapped is inner


class TestRecordingSink:
    def test_attributes_merge_and_history(self):
        sink = RecordingSink()
        sink.set_attributes({"a": 1, "b": {"x": 1}})
        sink.set_attributes({"b": {"x": 2}})
        assert sink.attributes == {"a": 1, "b": {"x": 2}}
        assert sink.attribute_writes == [{"a": 1, "b": {"x": 1}}, {"b": {"x": 2}}]

    def test_history_is_deep_copied(self):
        sink = RecordingSink()
        payload = {"components": {"a": {"loaded": False}}}
        sink.set_attributes(payload)
        payload["components"]["a"]["loaded"] = True
        assert sink.attribute_writes[0]["components"]["a"]["loaded"] is False

    def test_reset_clears_session_state(self):
        sink = RecordingSink()
        sink.set_attributes({"a": 1})
        sink.set_user_info({"id": "7"})
        sink.reset()
        assert sink.attributes == {}
        assert sink.user == {}
        assert sink.reset_count == 1


class TestEventBusSink:
    @pytest.fixture()
    def captured(self):
        events: list = []

        @RumEventLinker.on(
            AttributesPublished,
            ActionAdded,
            ErrorAdded,
            TimingAdded,
            ViewLoadingTimeAdded,
            ViewStarted,
            UserInfoSet,
            SinkReset,
        )
        def _capture(event):
            events.append(event)

        configure(LoggingConfig(log_destination="stderr", log_level="WARNING"))
        return events

    def test_noop_when_not_configured(self):
        EventBusSink().add_timing("t")

    def test_each_call_emits_one_event(self, captured):
        sink = EventBusSink()
        sink.set_attributes({"pending_loads_count": 2, "has_pending_loads": True})
        sink.add_action(ActionType.TAP, "Button", {"x": 1})
        sink.add_error("boom", ErrorSource.NETWORK, "stack", {"element": "Users"})
        sink.add_timing("t")
        sink.add_view_loading_time(True)
        sink.start_view("w-1", "Welcome", {"previous_view": "Login"})
        sink.set_user_info({"id": 3, "email": "a@b.c"})
        sink.reset()

        types = [type(e) for e in captured]
        assert types == [
            AttributesPublished,
            ActionAdded,
            ErrorAdded,
            TimingAdded,
            ViewLoadingTimeAdded,
            ViewStarted,
            UserInfoSet,
            SinkReset,
        ]

        attrs, action, error, _, _, view, user, _ = captured
        assert attrs.pending_count == 2
        assert action.action_type == "tap"
        assert error.source == "network"
        assert view.previous_view == "Login"
        assert user.user_id == "3"
        assert user.has_email is True

    def test_attributes_without_snapshot(self, captured):
        EventBusSink().set_attributes({"env": "dev"})
        assert captured[0].pending_count is None

    def test_cleared_user(self, captured):
        EventBusSink().set_user_info({})
        assert captured[0].user_id is None
        assert captured[0].has_email is False
