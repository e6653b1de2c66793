"""Tests for Dispatcher."""

import logging

import pytest

from rhttp.dispatch import Dispatcher, Ignored, Rejected, Responded
from rhttp.exceptions import MalformedMessageError
from rhttp.http.codec import parse
from rhttp.registry import RegistryBuilder


PING = "GET /ping HTTP/1.1\r\nX-Socket-ID: abc\r\n\r\n"


def make_dispatcher(setup, **kwargs) -> Dispatcher:
    builder = RegistryBuilder()
    setup(builder)
    return Dispatcher(builder.build(), **kwargs)


def test_ping_end_to_end():
    dispatcher = make_dispatcher(lambda b: b.get("/ping", lambda req, res: res.status(200).send("pong")))

    outcome = dispatcher.dispatch(PING)

    assert isinstance(outcome, Responded)
    status_line, _, rest = outcome.frame.partition("\r\n")
    assert status_line == "HTTP/1.1 200 OK"
    res = parse(outcome.frame)
    assert res.headers["Content-Length"] == "4"
    assert res.headers["X-Socket-ID"] == "abc"
    assert res.body == "pong"


def test_first_match_wins():
    def setup(b):
        b.get("/ping", lambda req, res: res.send("first"))
        b.get("/ping", lambda req, res: res.send("second"))

    outcome = make_dispatcher(setup).dispatch(PING)

    assert parse(outcome.frame).body == "first"


def test_unregistered_route_is_rejected_with_correlation_id():
    dispatcher = make_dispatcher(lambda b: b.get("/ping", lambda req, res: res.send("pong")))

    outcome = dispatcher.dispatch("GET /pong HTTP/1.1\r\nX-Socket-ID: caller-7\r\n\r\n")

    assert outcome == Rejected("caller-7")


def test_method_mismatch_is_rejected():
    dispatcher = make_dispatcher(lambda b: b.get("/ping", lambda req, res: res.send("pong")))

    assert dispatcher.dispatch("POST /ping HTTP/1.1\r\nX-Socket-ID: s\r\n\r\n") == Rejected("s")


def test_trailing_slash_does_not_match():
    dispatcher = make_dispatcher(lambda b: b.get("/ping", lambda req, res: res.send("pong")))

    assert dispatcher.dispatch("GET /ping/ HTTP/1.1\r\nX-Socket-ID: s\r\n\r\n") == Rejected("s")


def test_query_does_not_affect_matching():
    seen = {}

    def handler(req, res):
        seen["query"] = req.query
        return res.send("ok")

    dispatcher = make_dispatcher(lambda b: b.get("/items", handler))

    outcome = dispatcher.dispatch("GET /items?a=1&b=2 HTTP/1.1\r\nX-Socket-ID: s\r\n\r\n")

    assert isinstance(outcome, Responded)
    assert seen["query"] == {"a": "1", "b": "2"}


@pytest.mark.parametrize("result", [None, ""])
def test_declining_handler_is_rejected(result):
    dispatcher = make_dispatcher(lambda b: b.get("/ping", lambda req, res: result))

    assert dispatcher.dispatch(PING) == Rejected("abc")


def test_rejection_without_correlation_id():
    dispatcher = make_dispatcher(lambda b: None)

    assert dispatcher.dispatch("GET /ping HTTP/1.1\r\n\r\n") == Rejected(None)


def test_response_frames_are_ignored():
    calls = []
    dispatcher = make_dispatcher(lambda b: b.get("/ping", lambda req, res: calls.append(req) or res.send("x")))

    assert dispatcher.dispatch("HTTP/1.1 200 OK\r\nX-Socket-ID: abc\r\n\r\npong") == Ignored()
    assert calls == []


def test_malformed_frame_propagates():
    dispatcher = make_dispatcher(lambda b: None)

    with pytest.raises(MalformedMessageError):
        dispatcher.dispatch("GARBAGE\r\n\r\n")


def test_failing_handler_is_rejected_and_logged(caplog):
    def boom(req, res):
        raise RuntimeError("boom")

    dispatcher = make_dispatcher(lambda b: b.get("/ping", boom))

    with caplog.at_level(logging.ERROR, logger="rhttp.dispatch"):
        outcome = dispatcher.dispatch(PING)

    assert outcome == Rejected("abc")
    assert "handler for GET /ping failed" in caplog.text


def test_failures_do_not_affect_later_dispatches():
    def setup(b):
        b.get("/ping", lambda req, res: res.send("pong"))

    dispatcher = make_dispatcher(setup)

    with pytest.raises(MalformedMessageError):
        dispatcher.dispatch("")
    dispatcher.dispatch("GET /nope HTTP/1.1\r\n\r\n")

    assert isinstance(dispatcher.dispatch(PING), Responded)
    assert len(dispatcher.registry) == 1


def test_each_dispatch_gets_a_fresh_builder():
    builders = []

    def handler(req, res):
        builders.append(res)
        return res.header({"X-Seen": str(len(builders))}).send(req.socket_id)

    dispatcher = make_dispatcher(lambda b: b.get("/ping", handler))

    first = parse(dispatcher.dispatch(PING).frame)
    second = parse(dispatcher.dispatch(PING.replace("abc", "def")).frame)

    assert builders[0] is not builders[1]
    assert first.headers["X-Seen"] == "1"
    assert second.headers["X-Seen"] == "2"
    assert second.socket_id == "def"


def test_body_line_breaks_can_be_preserved():
    def setup(b):
        b.post("/echo", lambda req, res: res.send(req.body))

    raw = "POST /echo HTTP/1.1\r\nX-Socket-ID: s\r\n\r\na\r\nb"

    joined = make_dispatcher(setup).dispatch(raw)
    kept = make_dispatcher(setup, preserve_line_breaks=True).dispatch(raw)

    assert joined.frame.endswith("\r\n\r\nab")
    assert kept.frame.endswith("\r\n\r\na\r\nb")
