import logging
import time
import typing as tp

import httpx
import pytest

import cachette
from cachette._utils import generate_http_date


class RecordingSink:
    def __init__(
        self,
        events: tp.Optional[tp.List[tp.Tuple[str, str, tp.Dict[str, tp.Any]]]] = None,
        context: tp.Optional[tp.Dict[str, tp.Any]] = None,
    ) -> None:
        self.events = events if events is not None else []
        self.context = dict(context or {})

    def debug(self, msg: str, **kwargs: tp.Any) -> None:
        self.events.append(("debug", msg, {**self.context, **kwargs}))

    def info(self, msg: str, **kwargs: tp.Any) -> None:
        self.events.append(("info", msg, {**self.context, **kwargs}))

    def error(self, msg: str, **kwargs: tp.Any) -> None:
        self.events.append(("error", msg, {**self.context, **kwargs}))

    def bind(self, **kwargs: tp.Any) -> "RecordingSink":
        return RecordingSink(self.events, {**self.context, **kwargs})


class ErrorTransport(httpx.BaseTransport):
    def handle_request(self, request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)


def fresh_response() -> httpx.Response:
    return httpx.Response(200, headers={"Expires": generate_http_date(time.time() + 3600)}, content=b"test")


def test_null_sink():
    sink = cachette.NullSink()

    sink.debug("event", key="value")
    sink.info("event")
    sink.error("event", error="boom")
    assert sink.bind(key="value") is sink


def test_logging_sink_renders_fields(caplog):
    caplog.set_level(logging.DEBUG, logger="cachette")

    cachette.LoggingSink().info("cache.handle_request", cache="hit", status=200)

    assert caplog.records[-1].getMessage() == "cache.handle_request cache=hit status=200"
    assert caplog.records[-1].cachette == {"cache": "hit", "status": 200}
    assert caplog.records[-1].levelno == logging.INFO


def test_logging_sink_bind(caplog):
    caplog.set_level(logging.DEBUG, logger="cachette")

    sink = cachette.LoggingSink().bind(service="api")
    sink.error("cache.read", error="boom")

    assert caplog.records[-1].getMessage() == "cache.read service=api error=boom"
    assert caplog.records[-1].levelno == logging.ERROR


def test_logging_sink_respects_level(caplog):
    caplog.set_level(logging.ERROR, logger="cachette")

    cachette.LoggingSink().debug("cache.handle_request", cache="miss")

    assert caplog.records == []


def test_logging_sink_custom_logger(caplog):
    caplog.set_level(logging.DEBUG, logger="custom")

    cachette.LoggingSink(logging.getLogger("custom")).debug("event")

    assert caplog.records[-1].name == "custom"
    assert caplog.records[-1].getMessage() == "event"


def test_transport_emits_one_event_per_request():
    sink = RecordingSink()

    with cachette.MockTransport() as transport:
        transport.add_responses([fresh_response()])
        with cachette.CacheTransport(transport=transport, logger=sink) as cache_transport:
            request = httpx.Request("GET", "https://example.com")

            cache_transport.handle_request(request)
            cache_transport.handle_request(request)

    assert [(level, msg) for level, msg, _ in sink.events] == [
        ("debug", "cache.handle_request"),
        ("debug", "cache.handle_request"),
    ]

    miss, hit = (fields for _, _, fields in sink.events)
    assert miss["cache"] == "miss"
    assert miss["cache_key"] == "https://example.com"
    assert miss["url"] == "https://example.com"
    assert miss["status"] == 200
    assert miss["elapsed"] >= 0
    assert hit["cache"] == "hit"
    assert "elapsed" not in hit
    assert "status" not in hit


def test_transport_logs_error_before_raising():
    sink = RecordingSink()

    with cachette.CacheTransport(transport=ErrorTransport(), logger=sink) as cache_transport:
        with pytest.raises(httpx.ConnectError):
            cache_transport.handle_request(httpx.Request("GET", "https://example.com"))

    assert [(level, msg) for level, msg, _ in sink.events] == [
        ("error", "cache.handle_request"),
        ("debug", "cache.handle_request"),
    ]
    assert "ConnectError" in sink.events[0][2]["error"]


def test_transport_does_not_log_cache_miss_as_error():
    sink = RecordingSink()

    with cachette.MockTransport() as transport:
        with cachette.CacheTransport(transport=transport, logger=sink) as cache_transport:
            with pytest.raises(cachette.CacheMiss):
                cache_transport.handle_request(
                    httpx.Request("GET", "https://example.com", extensions=cachette.with_only_cached())
                )

    assert [(level, fields["cache"]) for level, _, fields in sink.events] == [("debug", "ignored_check")]


def test_transport_logs_malformed_entry():
    sink = RecordingSink()
    storage = cachette.InMemoryStorage()
    storage.set("https://example.com", b"garbage")

    with cachette.MockTransport() as transport:
        transport.add_responses([fresh_response()])
        with cachette.CacheTransport(transport=transport, storage=storage, logger=sink) as cache_transport:
            response = cache_transport.handle_request(httpx.Request("GET", "https://example.com"))

    assert response.status_code == 200
    assert sink.events[0][:2] == ("error", "cache.read")
    assert sink.events[-1][2]["cache"] == "miss"


def test_request_logger_overrides_transport_sink():
    transport_sink = RecordingSink()
    request_sink = RecordingSink(context={"user": "alice"})

    with cachette.MockTransport() as transport:
        transport.add_responses([fresh_response(), fresh_response()])
        with cachette.CacheTransport(transport=transport, logger=transport_sink) as cache_transport:
            cache_transport.handle_request(
                httpx.Request(
                    "GET",
                    "https://example.com/a",
                    extensions=cachette.with_logger(cachette.with_ignore_cache(), request_sink),
                )
            )
            cache_transport.handle_request(httpx.Request("GET", "https://example.com/b"))

    assert [fields["url"] for _, _, fields in request_sink.events] == ["https://example.com/a"]
    assert request_sink.events[0][2]["user"] == "alice"
    assert request_sink.events[0][2]["cache"] == "ignored"
    assert [fields["url"] for _, _, fields in transport_sink.events] == ["https://example.com/b"]


def test_logging_sink_renders_request_url(caplog):
    caplog.set_level(logging.DEBUG, logger="cachette")

    with cachette.MockTransport() as transport:
        transport.add_responses([fresh_response()])
        with cachette.CacheTransport(transport=transport, logger=cachette.LoggingSink()) as cache_transport:
            cache_transport.handle_request(httpx.Request("GET", "https://example.com"))

    assert caplog.records[-1].getMessage().startswith("cache.handle_request url=https://example.com cache_key=")
