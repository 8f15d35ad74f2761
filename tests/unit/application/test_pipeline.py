"""Unit tests for the rate-limit service, layer and middleware chain."""
from __future__ import annotations

import asyncio
from datetime import timedelta
from typing import Any

import pytest

from cell_guard.application.pipeline import (
    Connection,
    ConnectionPool,
    Middleware,
    Pipeline,
    RateLimit,
    RateLimitConfig,
    RateLimitLayer,
    RateLimitMiddleware,
    Service,
    service_fn,
)
from cell_guard.application.rate_limit import Policy, RequestAllowedDetails, Rule
from cell_guard.kernel.errors import (
    BaseError,
    ProtocolError,
    RateLimitError,
    RuleProvisionError,
    TransportError,
)
from cell_guard.testing import RecordingService, ScriptedConnection, ScriptedConnectionPool


# ---------------------------------------------------------------------------
# helpers
# ---------------------------------------------------------------------------

def _run(coro):  # type: ignore[no-untyped-def]
    return asyncio.run(coro)


POLICY = Policy(tokens=10, period=timedelta(seconds=60), burst=1)


def _allowed(remaining: int = 9) -> list[int]:
    return [0, 10, remaining, -1, 6]


def _blocked(retry_after: int = 6) -> list[int]:
    return [1, 10, 0, retry_after, 60]


class _Errors:
    """Error handler that records what it saw and answers with a status dict."""

    def __init__(self) -> None:
        self.seen: list[tuple[BaseError, Any]] = []

    def __call__(self, error: BaseError, request: Any) -> dict[str, Any]:
        self.seen.append((error, request))
        match error:
            case RuleProvisionError():
                status = 401
            case RateLimitError():
                status = 429
            case _:
                status = 500
        return {"status": status, "error": error}


def _key_from_header(request: dict[str, Any]) -> Rule:
    key = request.get("user")
    if key is None:
        raise RuleProvisionError("missing user")
    return Rule.new(key, POLICY)


def _config(errors: _Errors | None = None, provider: Any = _key_from_header) -> RateLimitConfig[Any, Any]:
    return RateLimitConfig(provider, errors or _Errors())


# ---------------------------------------------------------------------------
# Service helpers
# ---------------------------------------------------------------------------

class TestServiceFn:
    def test_always_ready(self) -> None:
        async def handler(req: Any) -> Any:
            return req

        svc = service_fn(handler)
        assert svc.poll_ready() is True
        assert isinstance(svc, Service)

    def test_call_awaits_function(self) -> None:
        async def handler(req: int) -> int:
            return req * 2

        assert _run(service_fn(handler).call(21)) == 42


# ---------------------------------------------------------------------------
# RateLimitConfig
# ---------------------------------------------------------------------------

class TestRateLimitConfig:
    def test_on_success_returns_copy(self) -> None:
        config = _config()
        with_success = config.on_success(lambda details, resp: None)
        assert config.success_handler is None
        assert with_success.success_handler is not None
        assert with_success.error_handler is config.error_handler

    def test_on_unruled_returns_copy(self) -> None:
        config = _config()
        assert config.on_unruled(lambda resp: None).unruled_handler is not None
        assert config.unruled_handler is None

    def test_provider_object_with_provide(self) -> None:
        class Provider:
            def provide(self, request: Any) -> Rule:
                return Rule.new("fixed", POLICY)

        assert _config(provider=Provider()).provide({}).key.value == "fixed"

    def test_rejects_bad_provider(self) -> None:
        with pytest.raises(TypeError):
            RateLimitConfig(object(), _Errors())

    def test_rejects_bad_error_handler(self) -> None:
        with pytest.raises(TypeError):
            RateLimitConfig(_key_from_header, "not callable")  # type: ignore[arg-type]

    def test_handler_return_replaces_response(self) -> None:
        config = _config().on_unruled(lambda resp: {"replaced": True})
        assert config.handle_unruled({"status": 200}) == {"replaced": True}

    def test_handler_none_keeps_response(self) -> None:
        response = {"status": 200}
        config = _config().on_unruled(lambda resp: resp.update(seen=True))
        assert config.handle_unruled(response) is response
        assert response["seen"] is True


# ---------------------------------------------------------------------------
# RateLimit – per-request state machine
# ---------------------------------------------------------------------------

class TestRateLimitAllowed:
    def test_inner_called_and_success_handler_runs(self) -> None:
        seen: list[RequestAllowedDetails] = []

        def on_success(details: RequestAllowedDetails, response: dict[str, Any]) -> None:
            seen.append(details)
            response["headers"]["x-ratelimit-remaining"] = str(details.details.remaining)

        conn = ScriptedConnection(_allowed(9))
        inner = RecordingService()
        svc = RateLimit(inner, _config().on_success(on_success), conn)

        response = _run(svc.call({"user": "user123"}))

        assert response["status"] == 200
        assert response["headers"]["x-ratelimit-remaining"] == "9"
        assert inner.calls == 1
        assert seen[0].key.value == "user123"
        assert seen[0].details.reset_after == timedelta(seconds=6)

    def test_command_encoding_sent(self) -> None:
        conn = ScriptedConnection(_allowed())
        _run(RateLimit(RecordingService(), _config(), conn).call({"user": "user123"}))
        assert conn.commands == [("CL.THROTTLE", "user123", 1, 10, 60, 1)]

    def test_without_success_handler_response_untouched(self) -> None:
        svc = RateLimit(RecordingService(), _config(), ScriptedConnection(_allowed()))
        assert _run(svc.call({"user": "u"})) == {"status": 200, "headers": {}}

    def test_plain_coroutine_function_as_inner(self) -> None:
        async def handler(req: Any) -> str:
            return "Hello, World!"

        svc = RateLimit(handler, _config(), ScriptedConnection(_allowed()))
        assert _run(svc.call({"user": "u"})) == "Hello, World!"


class TestRateLimitBlocked:
    def test_error_handler_gets_rate_limit_error(self) -> None:
        errors = _Errors()
        inner = RecordingService()
        svc = RateLimit(inner, _config(errors), ScriptedConnection(_blocked(6)))

        response = _run(svc.call({"user": "user123"}))

        assert response["status"] == 429
        assert inner.calls == 0
        err = errors.seen[0][0]
        assert isinstance(err, RateLimitError)
        assert err.retry_after_seconds == 6
        assert err.blocked.rule.key.value == "user123"

    def test_success_handler_not_called(self) -> None:
        calls: list[Any] = []
        config = _config().on_success(lambda d, r: calls.append(d))
        _run(RateLimit(RecordingService(), config, ScriptedConnection(_blocked())).call({"user": "u"}))
        assert calls == []


class TestRateLimitRuleProvision:
    def test_provider_error_short_circuits(self) -> None:
        errors = _Errors()
        conn = ScriptedConnection()
        inner = RecordingService()
        request: dict[str, Any] = {}

        response = _run(RateLimit(inner, _config(errors), conn).call(request))

        assert response["status"] == 401
        assert conn.calls == 0
        assert inner.calls == 0
        assert errors.seen[0][1] is request
        assert isinstance(errors.seen[0][0], RuleProvisionError)

    def test_blank_offending_key_reaches_error_handler(self) -> None:
        def provider(request: dict[str, Any]) -> Rule:
            raise RuleProvisionError("blank api key", key=request["api_key"])

        errors = _Errors()
        conn = ScriptedConnection()

        response = _run(RateLimit(RecordingService(), _config(errors, provider), conn).call({"api_key": ""}))

        assert response["status"] == 401
        assert conn.calls == 0
        assert errors.seen[0][0].key.value == ""

    def test_empty_key_rule_is_sent(self) -> None:
        conn = ScriptedConnection(_allowed())
        _run(RateLimit(RecordingService(), _config(provider=lambda r: Rule.new("", POLICY)), conn).call({}))
        assert conn.commands == [("CL.THROTTLE", "", 1, 10, 60, 1)]

    def test_unruled_request_bypasses_store(self) -> None:
        unruled: list[Any] = []
        conn = ScriptedConnection()
        inner = RecordingService()
        config = _config(provider=lambda req: None).on_unruled(unruled.append)

        response = _run(RateLimit(inner, config, conn).call({"user": "u"}))

        assert response == {"status": 200, "headers": {}}
        assert conn.calls == 0
        assert inner.calls == 1
        assert unruled == [response]

    def test_unruled_without_handler(self) -> None:
        config = _config(provider=lambda req: None)
        assert _run(RateLimit(RecordingService(), config, ScriptedConnection()).call({}))["status"] == 200


class TestRateLimitFailures:
    def test_transport_error_goes_to_error_handler(self) -> None:
        errors = _Errors()
        inner = RecordingService()
        conn = ScriptedConnection(TransportError("connection refused"))

        response = _run(RateLimit(inner, _config(errors), conn).call({"user": "u"}))

        assert response["status"] == 500
        assert isinstance(errors.seen[0][0], TransportError)
        assert inner.calls == 0

    def test_malformed_reply_goes_to_error_handler(self) -> None:
        errors = _Errors()
        conn = ScriptedConnection([0, 10, 9])

        response = _run(RateLimit(RecordingService(), _config(errors), conn).call({"user": "u"}))

        assert response["status"] == 500
        assert isinstance(errors.seen[0][0], ProtocolError)

    def test_inner_error_propagates(self) -> None:
        inner = RecordingService(error=RuntimeError("boom"))
        errors = _Errors()
        svc = RateLimit(inner, _config(errors), ScriptedConnection(_allowed()))
        with pytest.raises(RuntimeError, match="boom"):
            _run(svc.call({"user": "u"}))
        assert errors.seen == []

    def test_unexpected_connection_error_propagates(self) -> None:
        conn = ScriptedConnection(ValueError("bug"))
        with pytest.raises(ValueError):
            _run(RateLimit(RecordingService(), _config(), conn).call({"user": "u"}))


class TestRateLimitReadiness:
    def test_poll_ready_forwards_to_inner(self) -> None:
        inner = RecordingService(ready=False)
        svc = RateLimit(inner, _config(), ScriptedConnection())
        assert svc.poll_ready() is False
        inner.ready = True
        assert svc.poll_ready() is True

    def test_clone_shares_inner_and_config(self) -> None:
        svc = RateLimit(RecordingService(), _config(), ScriptedConnection())
        clone = svc.clone()
        assert clone is not svc
        assert clone.inner is svc.inner
        assert clone.config is svc.config

    def test_is_a_service(self) -> None:
        assert isinstance(RateLimit(RecordingService(), _config(), ScriptedConnection()), Service)


# ---------------------------------------------------------------------------
# Connection pools
# ---------------------------------------------------------------------------

class TestRateLimitWithPool:
    def test_fakes_match_the_right_port(self) -> None:
        assert isinstance(ScriptedConnection(), Connection)
        assert isinstance(ScriptedConnectionPool(), ConnectionPool)
        assert not isinstance(ScriptedConnectionPool(), Connection)

    @pytest.mark.parametrize(
        "reply",
        [
            [0, 10, 9, -1, 6],
            [1, 10, 0, 6, 60],
            [0, 10],
            TransportError("down"),
        ],
    )
    def test_connection_returned_on_every_path(self, reply: Any) -> None:
        pool = ScriptedConnectionPool(ScriptedConnection(reply))
        _run(RateLimit(RecordingService(), _config(), pool).call({"user": "u"}))
        assert pool.acquired == 1
        assert pool.in_use == 0

    def test_connection_returned_when_inner_fails(self) -> None:
        pool = ScriptedConnectionPool(ScriptedConnection(_allowed()))
        svc = RateLimit(RecordingService(error=RuntimeError("boom")), _config(), pool)
        with pytest.raises(RuntimeError):
            _run(svc.call({"user": "u"}))
        assert pool.in_use == 0

    def test_connection_released_before_inner_runs(self) -> None:
        pool = ScriptedConnectionPool(ScriptedConnection(_allowed()))
        in_use: list[int] = []

        async def handler(req: Any) -> str:
            in_use.append(pool.in_use)
            return "ok"

        _run(RateLimit(handler, _config(), pool).call({"user": "u"}))
        assert in_use == [0]

    def test_acquire_failure_is_transport_error(self) -> None:
        errors = _Errors()
        pool = ScriptedConnectionPool()
        pool.acquire_error = TransportError("pool exhausted", resource="redis pool")

        response = _run(RateLimit(RecordingService(), _config(errors), pool).call({"user": "u"}))

        assert response["status"] == 500
        assert pool.acquired == 0
        assert errors.seen[0][0].message == "pool exhausted"

    def test_unruled_request_does_not_acquire(self) -> None:
        pool = ScriptedConnectionPool()
        _run(RateLimit(RecordingService(), _config(provider=lambda r: None), pool).call({}))
        assert pool.acquired == 0


# ---------------------------------------------------------------------------
# RateLimitLayer
# ---------------------------------------------------------------------------

class TestRateLimitLayer:
    def test_layer_wraps_inner(self) -> None:
        layer = RateLimitLayer(_config(), ScriptedConnection(_allowed()))
        inner = RecordingService()
        svc = layer.layer(inner)
        assert isinstance(svc, RateLimit)
        assert svc.inner is inner

    def test_config_shared_across_instances(self) -> None:
        layer = RateLimitLayer(_config(), ScriptedConnection())
        first = layer.layer(RecordingService())
        second = layer.layer(RecordingService())
        assert first.config is second.config is layer.config

    def test_clone_shares_connection(self) -> None:
        conn = ScriptedConnection()
        layer = RateLimitLayer(_config(), conn)
        assert layer.clone().connection is conn

    def test_rejects_non_connection(self) -> None:
        with pytest.raises(TypeError):
            RateLimitLayer(_config(), object())  # type: ignore[arg-type]

    def test_counts_down_then_blocks(self) -> None:
        replies = [_allowed(remaining) for remaining in range(9, -1, -1)]
        conn = ScriptedConnection(*replies, _blocked(6))
        errors = _Errors()
        remaining: list[int] = []

        def on_success(details: RequestAllowedDetails, response: dict[str, Any]) -> None:
            remaining.append(details.details.remaining)

        svc = RateLimitLayer(_config(errors).on_success(on_success), conn).layer(RecordingService())

        async def run() -> list[Any]:
            return [await svc.call({"user": "user123"}) for _ in range(11)]

        responses = _run(run())

        assert remaining == list(range(9, -1, -1))
        assert [r["status"] for r in responses] == [200] * 10 + [429]
        blocked = errors.seen[0][0]
        assert isinstance(blocked, RateLimitError)
        assert blocked.message == "request blocked for key user123 and can be retried after 6 second(s)"

    def test_concurrent_calls_share_connection(self) -> None:
        conn = ScriptedConnection(*[_allowed(9 - i) for i in range(5)])
        svc = RateLimitLayer(_config(), conn).layer(RecordingService())

        async def run() -> list[Any]:
            return await asyncio.gather(*(svc.call({"user": "u"}) for _ in range(5)))

        assert len(_run(run())) == 5
        assert conn.pending == 0


# ---------------------------------------------------------------------------
# Pipeline + RateLimitMiddleware
# ---------------------------------------------------------------------------

class _Tag(Middleware):
    def __init__(self, name: str, log: list[str]) -> None:
        self._name = name
        self._log = log

    async def __call__(self, request: Any, next_: Any) -> Any:
        self._log.append(self._name)
        return await next_(request)


class TestPipeline:
    def test_order_outermost_first(self) -> None:
        log: list[str] = []

        async def handler(req: Any) -> str:
            log.append("handler")
            return "done"

        pipeline = Pipeline().add(_Tag("a", log)).add(_Tag("b", log))
        assert _run(pipeline.execute({}, handler)) == "done"
        assert log == ["a", "b", "handler"]

    def test_rate_limit_middleware_blocks(self) -> None:
        log: list[str] = []
        layer = RateLimitLayer(_config(), ScriptedConnection(_blocked()))

        async def handler(req: Any) -> str:
            log.append("handler")
            return "done"

        pipeline = Pipeline().add(RateLimitMiddleware(layer)).add(_Tag("after", log))
        response = _run(pipeline.execute({"user": "u"}, handler))
        assert response["status"] == 429
        assert log == []

    def test_rate_limit_middleware_allows(self) -> None:
        layer = RateLimitLayer(_config(), ScriptedConnection(_allowed()))

        async def handler(req: Any) -> str:
            return "done"

        svc = Pipeline().add(RateLimitMiddleware(layer)).service(handler)
        assert svc.poll_ready() is True
        assert _run(svc.call({"user": "u"})) == "done"
