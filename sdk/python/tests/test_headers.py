"""Tests for header values and header resolution."""

import asyncio

import pytest

from zipkin_sender.headers import (
    DEFAULT_HEADERS,
    ComputedHeader,
    LiteralHeader,
    build_request_headers,
    header_value,
    resolve_header,
    resolve_headers,
)


class TestHeaderValue:
    """Tests for coercing raw header values."""

    def test_string_becomes_literal(self):
        """Test a string becomes a literal header."""
        assert header_value("abc") == LiteralHeader("abc")

    def test_empty_values_become_empty_literal(self):
        """Test falsy values become an empty literal."""
        assert header_value(None) == LiteralHeader("")
        assert header_value("") == LiteralHeader("")

    def test_callable_becomes_computed(self):
        """Test callables become computed headers."""
        fn = lambda: "token"
        value = header_value(fn)
        assert isinstance(value, ComputedHeader)
        assert value.compute is fn

    def test_header_value_passthrough(self):
        """Test an existing HeaderValue is returned unchanged."""
        literal = LiteralHeader("x")
        assert header_value(literal) is literal

    def test_other_values_are_stringified(self):
        """Test non-string, non-callable values become string literals."""
        assert header_value(42) == LiteralHeader("42")
        assert header_value(0) == LiteralHeader("")

    def test_build_with_non_string_value(self):
        """Test a non-string value does not break header merging."""
        headers = build_request_headers({"X-Retries": 3})
        assert headers["X-Retries"] == LiteralHeader("3")


class TestBuildRequestHeaders:
    """Tests for merging default headers."""

    def test_defaults_only(self):
        """Test the defaults are used when no overrides are given."""
        headers = build_request_headers()
        assert headers == {
            "Accept": LiteralHeader("application/json"),
            "Content-Type": LiteralHeader("application/json"),
        }

    def test_override_wins(self):
        """Test an override replaces the default with the same key."""
        headers = build_request_headers({"Content-Type": "application/x-protobuf"})
        assert headers["Content-Type"] == LiteralHeader("application/x-protobuf")
        assert headers["Accept"] == LiteralHeader("application/json")

    def test_keys_are_case_sensitive(self):
        """Test a differently cased key does not replace the default."""
        headers = build_request_headers({"content-type": "text/plain"})
        assert headers["Content-Type"] == LiteralHeader("application/json")
        assert headers["content-type"] == LiteralHeader("text/plain")

    def test_defaults_not_mutated(self):
        """Test merging leaves the module defaults untouched."""
        build_request_headers({"Accept": "text/plain"})
        assert DEFAULT_HEADERS["Accept"] == "application/json"


class TestResolveHeaders:
    """Tests for resolving header values."""

    @pytest.mark.asyncio
    async def test_literal(self):
        """Test literal values are used verbatim."""
        assert await resolve_header("X-Key", LiteralHeader("value")) == "value"

    @pytest.mark.asyncio
    async def test_sync_computation_is_stringified(self):
        """Test sync computations are called and stringified."""
        assert await resolve_header("X-Num", ComputedHeader(lambda: 42)) == "42"

    @pytest.mark.asyncio
    async def test_async_computation_is_awaited(self):
        """Test async computations are awaited."""
        async def token():
            await asyncio.sleep(0)
            return "secret"

        assert await resolve_header("Authorization", ComputedHeader(token)) == "secret"

    @pytest.mark.asyncio
    async def test_failing_computation_is_skipped(self, caplog):
        """Test a raising computation is logged and skipped."""
        def broken():
            raise RuntimeError("no token")

        with caplog.at_level("ERROR", logger="zipkin_sender"):
            assert await resolve_header("Authorization", ComputedHeader(broken)) is None

        assert "Failed Header [Authorization] evaluation" in caplog.text

    @pytest.mark.asyncio
    async def test_failing_async_computation_is_skipped(self):
        """Test a rejecting async computation is skipped."""
        async def broken():
            raise RuntimeError("no token")

        assert await resolve_header("Authorization", ComputedHeader(broken)) is None

    @pytest.mark.asyncio
    async def test_resolve_all(self):
        """Test all headers are resolved and failures are omitted."""
        async def slow():
            await asyncio.sleep(0.01)
            return "slow"

        def broken():
            raise ValueError("bad")

        resolved = await resolve_headers({
            "X-Empty": LiteralHeader(""),
            "X-Slow": ComputedHeader(slow),
            "X-Fast": ComputedHeader(lambda: "fast"),
            "X-Broken": ComputedHeader(broken),
        })

        assert resolved == {"X-Empty": "", "X-Slow": "slow", "X-Fast": "fast"}

    @pytest.mark.asyncio
    async def test_computations_run_concurrently(self):
        """Test every computation starts before any is finished."""
        started = []
        gate = asyncio.Event()

        def make(name):
            async def compute():
                started.append(name)
                if len(started) == 2:
                    gate.set()
                await gate.wait()
                return name
            return compute

        resolved = await asyncio.wait_for(
            resolve_headers({"A": ComputedHeader(make("a")), "B": ComputedHeader(make("b"))}),
            timeout=1.0,
        )

        assert resolved == {"A": "a", "B": "b"}
